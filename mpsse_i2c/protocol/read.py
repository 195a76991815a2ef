"""
read.py – Pełna ścieżka READ (slave → master)
=============================================
Przebieg:

  1. Walidacja       adres ≤ 127, length ≥ 0
  2. Blokada + purge wyłączny kanał, zaległe odpowiedzi usunięte
  3. (fast)          cała transakcja jednym wsadem, zob. fast.py
  4. START           jeśli I2C_TRANSFER_OPTIONS_START_BIT
  5. ADRES           adres + bit R; NACK → STOP? → DEVICE_NOT_FOUND
  6. DANE            jedno read_byte_give_ack na bajt, ACK po każdym bajcie
                     oprócz ostatniego, gdy ustawione NACK_LAST_BYTE
  7. STOP            jeśli I2C_TRANSFER_OPTIONS_STOP_BIT
"""

from ..constants import (
    STATUS_OK, STATUS_IO_ERROR, STATUS_INVALID_PARAMETER, STATUS_DEVICE_NOT_FOUND,
    I2C_TRANSFER_OPTIONS_START_BIT, I2C_TRANSFER_OPTIONS_STOP_BIT,
    I2C_TRANSFER_OPTIONS_NACK_LAST_BYTE, I2C_TRANSFER_OPTIONS_FAST_TRANSFER,
    I2C_ADDRESS_7BIT_MAX,
)
from ..core.transport import channel_lock
from ..utils.log import CommunicationLog
from .commands import Ack
from .conditions import send_start, send_stop, ConditionTimings, DEFAULT_CONDITION_TIMINGS
from .fast import fast_read
from .primitives import write_device_address, read_byte_give_ack


def device_read(
    transport,
    address: int,
    length:  int,
    options: int,
    *,
    timings: ConditionTimings = DEFAULT_CONDITION_TIMINGS,
    log:     CommunicationLog | None = None,
) -> tuple[int, int, bytes]:
    """
    Odczytuje bajty ze slave'a I2C.

    Parametry
    ----------
    transport : ChannelTransport
        Zainicjalizowany kanał.
    address : int
        Nieprzesunięty 7-bitowy adres slave'a (0..127).
    length : int
        Liczba bajtów do odczytania.
    options : int
        Flagi I2C_TRANSFER_OPTIONS_*.
    timings : ConditionTimings
        Czasy utrzymania START/STOP po stronie hosta dla klas prędkości.
    log : CommunicationLog | None
        Opcjonalny obiekt logujący.

    Zwraca
    ------
    (status: int, bytes_transferred: int, data: bytes)
        data zawiera bajty odczytane do tej pory, także przy błędzie.
    """
    if not 0 <= address <= I2C_ADDRESS_7BIT_MAX:
        return STATUS_INVALID_PARAMETER, 0, b""
    if length < 0:
        return STATUS_INVALID_PARAMETER, 0, b""
    if log is None:
        log = CommunicationLog()

    with channel_lock(transport):
        transport.purge()

        if options & I2C_TRANSFER_OPTIONS_FAST_TRANSFER:
            return fast_read(transport, address, length, options, log=log)

        return _read_transaction(transport, address, length, options, timings, log)


def _read_transaction(transport, address: int, length: int, options: int, timings, log) -> tuple[int, int, bytes]:
    stop = options & I2C_TRANSFER_OPTIONS_STOP_BIT

    # ------------------------------------------------------------------ #
    # START + ADRES
    # ------------------------------------------------------------------ #
    if options & I2C_TRANSFER_OPTIONS_START_BIT:
        status = send_start(transport, timings=timings, log=log)
        if status != STATUS_OK:
            return status, 0, b""

    status, ack = write_device_address(transport, address, True, log=log)
    if status != STATUS_OK:
        return status, 0, b""

    if ack is Ack.NACK:
        if stop:
            status = send_stop(transport, timings=timings, log=log)
            if status != STATUS_OK:
                return status, 0, b""
        return STATUS_DEVICE_NOT_FOUND, 0, b""

    # ------------------------------------------------------------------ #
    # DANE
    # ------------------------------------------------------------------ #
    nack_last = options & I2C_TRANSFER_OPTIONS_NACK_LAST_BYTE
    data = bytearray()
    for i in range(length):
        give = Ack.NACK if nack_last and i == length - 1 else Ack.ACK
        status, byte = read_byte_give_ack(transport, give, log=log)
        if status != STATUS_OK:
            return STATUS_IO_ERROR, len(data), bytes(data)
        data.append(byte)

    # ------------------------------------------------------------------ #
    # STOP
    # ------------------------------------------------------------------ #
    if stop:
        status = send_stop(transport, timings=timings, log=log)
        if status != STATUS_OK:
            return status, len(data), bytes(data)

    return STATUS_OK, len(data), bytes(data)
