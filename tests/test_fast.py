import sys

import pytest

from mpsse_i2c.constants import (
    STATUS_OK, STATUS_IO_ERROR, STATUS_INVALID_PARAMETER, STATUS_INSUFFICIENT_RESOURCES,
    I2C_TRANSFER_OPTIONS_START_BIT as START,
    I2C_TRANSFER_OPTIONS_STOP_BIT as STOP,
    I2C_TRANSFER_OPTIONS_FAST_TRANSFER, I2C_TRANSFER_OPTIONS_FAST_TRANSFER_BYTES,
    I2C_TRANSFER_OPTIONS_FAST_TRANSFER_BITS, I2C_TRANSFER_OPTIONS_NO_ADDRESS,
)
from mpsse_i2c.protocol.commands import Ack
from mpsse_i2c.protocol.fast import fast_transfer_size, build_fast_buffer, fast_write, fast_read

FAST = I2C_TRANSFER_OPTIONS_FAST_TRANSFER | I2C_TRANSFER_OPTIONS_FAST_TRANSFER_BYTES


@pytest.mark.parametrize("options", [
    FAST,
    FAST | START,
    FAST | START | STOP,
    FAST | STOP | I2C_TRANSFER_OPTIONS_NO_ADDRESS,
])
@pytest.mark.parametrize("read", [False, True])
def test_size_matches_serialised_buffer(options, read):
    data = bytes(range(5))
    buf = build_fast_buffer(0x50, options, read, data, length=5)
    assert fast_transfer_size(options, 5, read) == len(buf)


def test_size_values():
    assert fast_transfer_size(FAST | START | STOP, 3, False) == 93 + 11 + 3 * 11 + 93
    assert fast_transfer_size(FAST | START | STOP, 3, True) == 93 + 11 + 3 * 14 + 93
    assert fast_transfer_size(FAST | I2C_TRANSFER_OPTIONS_NO_ADDRESS, 0, True) == 0


def test_buffer_is_deterministic():
    a = build_fast_buffer(0x50, FAST | START | STOP, False, b"\x01\x02")
    b = build_fast_buffer(0x50, FAST | START | STOP, False, b"\x01\x02")
    assert a == b


def test_fast_write_is_single_buffer(engine, start_sequence, stop_sequence):
    engine.acks = [0, 0, 1, 0]
    status, transferred, acks = fast_write(engine, 0x50, b"\x10\x20\x30", FAST | START | STOP)

    assert status == STATUS_OK
    assert transferred == 3
    assert acks == [Ack.ACK, Ack.NACK, Ack.ACK]
    assert len(engine.writes) == 1
    assert engine.writes[0].startswith(start_sequence)
    assert engine.writes[0].endswith(stop_sequence)
    assert engine.wire == [0xA0, 0x10, 0x20, 0x30]


def test_fast_write_without_address(engine):
    status, transferred, _ = fast_write(engine, 0x50, b"\xAA", FAST | I2C_TRANSFER_OPTIONS_NO_ADDRESS)
    assert status == STATUS_OK
    assert transferred == 1
    assert engine.wire == [0xAA]
    assert engine.reads == [b"\x00"]


def test_fast_read_nacks_last_byte(engine):
    engine.data = [0x11, 0x22, 0x33]
    status, transferred, data = fast_read(engine, 0x48, 3, FAST | START | STOP)

    assert status == STATUS_OK
    assert transferred == 3
    assert data == b"\x11\x22\x33"
    assert engine.wire == [0x91]
    assert engine.acks_given == [0x00, 0x00, 0x80]


def test_fast_read_zero_length(engine):
    status, transferred, data = fast_read(engine, 0x48, 0, FAST | START | STOP)
    assert (status, transferred, data) == (STATUS_OK, 0, b"")
    assert engine.reads == [b"\x00"]


@pytest.mark.parametrize("call", [
    lambda t, o: fast_write(t, 0x50, b"\x01", o),
    lambda t, o: fast_read(t, 0x50, 1, o),
])
def test_bit_granular_batches_rejected(engine, call):
    status, transferred, _ = call(engine, I2C_TRANSFER_OPTIONS_FAST_TRANSFER_BITS | START | STOP)
    assert status == STATUS_INVALID_PARAMETER
    assert transferred == 0
    assert engine.writes == []


def test_failed_buffer_write(engine):
    engine.fail_write_at = 0
    assert fast_write(engine, 0x50, b"\x01", FAST) == (STATUS_IO_ERROR, 0, [])


def test_failed_data_read(engine):
    engine.fail_read_at = 1
    status, transferred, data = fast_read(engine, 0x50, 2, FAST)
    assert status == STATUS_IO_ERROR
    assert transferred == 0
    assert data == b""


@pytest.mark.parametrize("error", [MemoryError, OverflowError])
@pytest.mark.parametrize("call", [
    lambda t: fast_write(t, 0x50, b"\x01\x02", FAST | START | STOP),
    lambda t: fast_read(t, 0x50, 2, FAST | START | STOP),
])
def test_allocation_failure_sends_nothing(engine, monkeypatch, error, call):
    def fail(*args, **kwargs):
        raise error("no buffer")

    monkeypatch.setattr("mpsse_i2c.protocol.fast.build_fast_buffer", fail)
    status, transferred, _ = call(engine)

    assert status == STATUS_INSUFFICIENT_RESOURCES
    assert transferred == 0
    assert engine.writes == []


def test_oversized_read_reports_insufficient_resources(engine):
    # rozmiar bufora przekracza sys.maxsize, bytearray() rzuca OverflowError
    status, transferred, data = fast_read(engine, 0x48, sys.maxsize // 4, FAST | START | STOP)

    assert (status, transferred, data) == (STATUS_INSUFFICIENT_RESOURCES, 0, b"")
    assert engine.writes == []
