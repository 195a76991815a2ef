"""
fast.py – Transfery wsadowe (jeden bufor komend na transakcję)
===============================================================
START, adres, wszystkie fazy danych i STOP są serializowane do jednego
bufora i wysyłane do silnika jednym zapisem, więc żadna wymiana USB nie
rozdziela faz na magistrali.

Układ i rozmiary bufora:

  ┌──────────────┬───────────────────────────────┬──────────────────┐
  │ Faza         │ Obecna gdy                    │ Rozmiar [B]      │
  ├──────────────┼───────────────────────────────┼──────────────────┤
  │ START        │ I2C_TRANSFER_OPTIONS_START_BIT│ 93               │
  │ ADRES        │ brak NO_ADDRESS               │ 11               │
  │ DANE × N     │ zawsze                        │ 11 zapis/14 odcz.│
  │ STOP         │ I2C_TRANSFER_OPTIONS_STOP_BIT │ 93               │
  └──────────────┴───────────────────────────────┴──────────────────┘

Odpowiedzi są czytane po wysłaniu: jeden bajt ACK adresu (ignorowany),
potem N bajtów (próbki ACK przy zapisie, dane przy odczycie). Bufor jest
zawsze wysyłany w całości, więc BREAK_ON_NACK i NACK_LAST_BYTE nie mają
tu zastosowania; odczyt potwierdza każdy bajt poza ostatnim (NACK).
"""

from ..constants import (
    STATUS_OK, STATUS_IO_ERROR, STATUS_INVALID_PARAMETER, STATUS_INSUFFICIENT_RESOURCES,
    I2C_TRANSFER_OPTIONS_START_BIT, I2C_TRANSFER_OPTIONS_STOP_BIT,
    I2C_TRANSFER_OPTIONS_FAST_TRANSFER_BYTES, I2C_TRANSFER_OPTIONS_NO_ADDRESS,
    START_SEQUENCE_SIZE, STOP_SEQUENCE_SIZE,
    FAST_ADDRESS_PHASE_SIZE, FAST_WRITE_BYTE_SIZE, FAST_READ_BYTE_SIZE,
)
from ..utils.log import CommunicationLog
from .commands import Ack, address_byte
from .conditions import build_start, build_stop
from .primitives import build_write_byte, build_read_byte

# bytearray() rzuca MemoryError albo OverflowError (rozmiar > sys.maxsize)
ALLOCATION_ERRORS = (MemoryError, OverflowError)


def fast_transfer_size(options: int, length: int, read: bool) -> int:
    """
    Dokładny rozmiar bufora komend transferu wsadowego.

    Parametry
    ----------
    options : int
        Opcje transferu (znaczenie mają START/STOP/NO_ADDRESS).
    length : int
        Liczba bajtów danych.
    read : bool
        Kierunek faz danych.

    Zwraca
    ------
    int
        Liczba bajtów komend.
    """
    size = length * (FAST_READ_BYTE_SIZE if read else FAST_WRITE_BYTE_SIZE)
    if not options & I2C_TRANSFER_OPTIONS_NO_ADDRESS:
        size += FAST_ADDRESS_PHASE_SIZE
    if options & I2C_TRANSFER_OPTIONS_START_BIT:
        size += START_SEQUENCE_SIZE
    if options & I2C_TRANSFER_OPTIONS_STOP_BIT:
        size += STOP_SEQUENCE_SIZE
    return size


def _phases(address: int, options: int, read: bool, data: bytes, length: int):
    """Zwraca kolejne fragmenty komend transferu w kolejności na magistrali."""
    if options & I2C_TRANSFER_OPTIONS_START_BIT:
        piece = bytearray()
        build_start(piece)
        yield piece

    if not options & I2C_TRANSFER_OPTIONS_NO_ADDRESS:
        piece = bytearray()
        build_write_byte(piece, address_byte(address, read))
        yield piece

    for i in range(length):
        piece = bytearray()
        if read:
            build_read_byte(piece, Ack.ACK if i < length - 1 else Ack.NACK)
        else:
            build_write_byte(piece, data[i])
        yield piece

    if options & I2C_TRANSFER_OPTIONS_STOP_BIT:
        piece = bytearray()
        build_stop(piece)
        yield piece


def build_fast_buffer(address: int, options: int, read: bool, data: bytes = b"", length: int | None = None) -> bytearray:
    """
    Serializuje całą transakcję do jednego, z góry zaalokowanego bufora.

    Rzuca MemoryError albo OverflowError, gdy bufora nie da się zaalokować.
    """
    if length is None:
        length = len(data)
    buf = bytearray(fast_transfer_size(options, length, read))
    pos = 0
    for piece in _phases(address, options, read, data, length):
        buf[pos:pos + len(piece)] = piece
        pos += len(piece)
    return buf


def _send(transport, buf: bytearray, log, step: str) -> int:
    status, written = transport.write(buf, log, step)
    if status != STATUS_OK:
        return status
    if written != len(buf):
        return STATUS_IO_ERROR
    return STATUS_OK


def _read_address_ack(transport, options: int, log) -> int:
    if options & I2C_TRANSFER_OPTIONS_NO_ADDRESS:
        return STATUS_OK
    status, reply = transport.read(1, log, "ADDRESS ACK")
    if status != STATUS_OK:
        return status
    if len(reply) != 1:
        return STATUS_IO_ERROR
    return STATUS_OK


def fast_write(
    transport,
    address: int,
    data:    bytes,
    options: int,
    *,
    log: CommunicationLog | None = None,
) -> tuple[int, int, list[Ack]]:
    """
    Wsadowy zapis data do slave'a pod adresem address.

    Zwraca
    ------
    (status: int, bytes_transferred: int, acks: list[Ack])
        acks zawiera spróbkowane potwierdzenie każdego bajtu danych.
    """
    if not options & I2C_TRANSFER_OPTIONS_FAST_TRANSFER_BYTES:
        # Wsady z granulacją bitową nie są zaimplementowane
        return STATUS_INVALID_PARAMETER, 0, []
    if log is None:
        log = CommunicationLog()
    data = bytes(data)

    try:
        buf = build_fast_buffer(address, options, False, data)
    except ALLOCATION_ERRORS:
        return STATUS_INSUFFICIENT_RESOURCES, 0, []

    status = _send(transport, buf, log, f"FAST WRITE ({len(data)}B, {len(buf)}B cmd)")
    if status != STATUS_OK:
        return status, 0, []

    status = _read_address_ack(transport, options, log)
    if status != STATUS_OK:
        return status, len(data), []

    if not data:
        return STATUS_OK, 0, []
    status, replies = transport.read(len(data), log, f"DATA ACKS ({len(data)}B)")
    if status != STATUS_OK:
        return status, len(data), []
    acks = [Ack.from_sample(b) for b in replies]
    if len(replies) != len(data):
        return STATUS_IO_ERROR, len(data), acks
    return STATUS_OK, len(data), acks


def fast_read(
    transport,
    address: int,
    length:  int,
    options: int,
    *,
    log: CommunicationLog | None = None,
) -> tuple[int, int, bytes]:
    """
    Wsadowy odczyt length bajtów od slave'a pod adresem address.

    Zwraca
    ------
    (status: int, bytes_transferred: int, data: bytes)
    """
    if not options & I2C_TRANSFER_OPTIONS_FAST_TRANSFER_BYTES:
        return STATUS_INVALID_PARAMETER, 0, b""
    if log is None:
        log = CommunicationLog()

    try:
        buf = build_fast_buffer(address, options, True, length=length)
    except ALLOCATION_ERRORS:
        return STATUS_INSUFFICIENT_RESOURCES, 0, b""

    status = _send(transport, buf, log, f"FAST READ ({length}B, {len(buf)}B cmd)")
    if status != STATUS_OK:
        return status, 0, b""

    status = _read_address_ack(transport, options, log)
    if status != STATUS_OK:
        return status, 0, b""

    if length == 0:
        return STATUS_OK, 0, b""
    status, data = transport.read(length, log, f"DATA ({length}B)")
    if status != STATUS_OK:
        return status, 0, b""
    if len(data) != length:
        return STATUS_IO_ERROR, len(data), data
    return STATUS_OK, length, data
