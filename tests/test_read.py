import sys

import pytest

from mpsse_i2c.constants import (
    STATUS_OK, STATUS_IO_ERROR, STATUS_INVALID_PARAMETER, STATUS_DEVICE_NOT_FOUND,
    STATUS_INSUFFICIENT_RESOURCES,
    I2C_TRANSFER_OPTIONS_START_BIT, I2C_TRANSFER_OPTIONS_STOP_BIT,
    I2C_TRANSFER_OPTIONS_NACK_LAST_BYTE,
    I2C_TRANSFER_OPTIONS_FAST_TRANSFER, I2C_TRANSFER_OPTIONS_FAST_TRANSFER_BYTES,
    I2C_TRANSFER_OPTIONS_FAST_TRANSFER_BITS,
)
from mpsse_i2c.protocol.read import device_read

START_STOP = I2C_TRANSFER_OPTIONS_START_BIT | I2C_TRANSFER_OPTIONS_STOP_BIT


def test_read_all_acked(engine):
    engine.data = [0xDE, 0xAD]
    status, transferred, data = device_read(engine, 0x48, 2, START_STOP)

    assert status == STATUS_OK
    assert transferred == 2
    assert data == b"\xDE\xAD"
    assert engine.wire == [0x91]
    assert engine.acks_given == [0x00, 0x00]
    assert engine.count_starts() == 1
    assert engine.count_stops() == 1


def test_nack_last_byte(engine):
    engine.data = [1, 2, 3, 4]
    status, _, data = device_read(engine, 0x48, 4, START_STOP | I2C_TRANSFER_OPTIONS_NACK_LAST_BYTE)

    assert status == STATUS_OK
    assert data == bytes([1, 2, 3, 4])
    assert engine.acks_given == [0x00, 0x00, 0x00, 0x80]


def test_address_out_of_range(engine):
    assert device_read(engine, 200, 1, START_STOP) == (STATUS_INVALID_PARAMETER, 0, b"")
    assert engine.writes == []


def test_negative_length(engine):
    assert device_read(engine, 0x48, -1, START_STOP)[0] == STATUS_INVALID_PARAMETER


def test_address_nack(engine):
    engine.acks = [1]
    status, transferred, data = device_read(engine, 0x48, 2, START_STOP)

    assert (status, transferred, data) == (STATUS_DEVICE_NOT_FOUND, 0, b"")
    assert engine.count_stops() == 1
    assert engine.acks_given == []


def test_transport_failure_keeps_partial_data(engine):
    engine.data = [0x10, 0x20, 0x30]
    # reads: address reply, byte 0, byte 1
    engine.fail_read_at = 2
    status, transferred, data = device_read(engine, 0x48, 3, START_STOP)

    assert status == STATUS_IO_ERROR
    assert transferred == 1
    assert data == b"\x10"
    assert engine.count_stops() == 0
    assert not engine.locked


def test_zero_length_read(engine):
    status, transferred, data = device_read(engine, 0x48, 0, START_STOP)
    assert (status, transferred, data) == (STATUS_OK, 0, b"")
    assert engine.wire == [0x91]


def test_fast_read_path(engine):
    engine.data = [0xAA, 0xBB]
    options = START_STOP | I2C_TRANSFER_OPTIONS_FAST_TRANSFER | I2C_TRANSFER_OPTIONS_FAST_TRANSFER_BYTES
    status, transferred, data = device_read(engine, 0x48, 2, options)

    assert (status, transferred, data) == (STATUS_OK, 2, b"\xAA\xBB")
    assert len(engine.writes) == 1


def test_fast_bits_rejected(engine):
    status, _, _ = device_read(engine, 0x48, 2, START_STOP | I2C_TRANSFER_OPTIONS_FAST_TRANSFER_BITS)
    assert status == STATUS_INVALID_PARAMETER
    assert engine.writes == []
    assert not engine.locked


@pytest.mark.parametrize("address, wire_byte", [(0, 0x01), (127, 0xFF)])
def test_address_range_limits_accepted(engine, address, wire_byte):
    engine.data = [0x5A]
    status, transferred, data = device_read(engine, address, 1, START_STOP)
    assert (status, transferred, data) == (STATUS_OK, 1, b"\x5A")
    assert engine.wire == [wire_byte]


def test_address_just_above_range(engine):
    assert device_read(engine, 128, 1, START_STOP) == (STATUS_INVALID_PARAMETER, 0, b"")
    assert engine.writes == []
    assert engine.purges == 0


def test_oversized_fast_read(engine):
    options = START_STOP | I2C_TRANSFER_OPTIONS_FAST_TRANSFER | I2C_TRANSFER_OPTIONS_FAST_TRANSFER_BYTES
    status, transferred, data = device_read(engine, 0x48, sys.maxsize // 4, options)

    assert (status, transferred, data) == (STATUS_INSUFFICIENT_RESOURCES, 0, b"")
    assert engine.writes == []
    assert not engine.locked
