"""
write.py – Pełna ścieżka WRITE (master → slave)
===============================================
Przebieg:

  1. Walidacja       adres ≤ 127, length ≤ len(data)
  2. Blokada + purge wyłączny kanał, zaległe odpowiedzi usunięte
  3. (fast)          cała transakcja jednym wsadem, zob. fast.py
  4. START           jeśli I2C_TRANSFER_OPTIONS_START_BIT
  5. ADRES           adres + bit W; NACK → STOP? → DEVICE_NOT_FOUND
  6. DANE            jedno write_byte_get_ack na bajt
                     NACK + BREAK_ON_NACK → STOP? → FAILED_TO_WRITE_DEVICE
  7. STOP            jeśli I2C_TRANSFER_OPTIONS_STOP_BIT
"""

from ..constants import (
    STATUS_OK, STATUS_IO_ERROR, STATUS_INVALID_PARAMETER,
    STATUS_DEVICE_NOT_FOUND, STATUS_FAILED_TO_WRITE_DEVICE,
    I2C_TRANSFER_OPTIONS_START_BIT, I2C_TRANSFER_OPTIONS_STOP_BIT,
    I2C_TRANSFER_OPTIONS_BREAK_ON_NACK, I2C_TRANSFER_OPTIONS_FAST_TRANSFER,
    I2C_ADDRESS_7BIT_MAX,
)
from ..core.transport import channel_lock
from ..utils.log import CommunicationLog
from .commands import Ack
from .conditions import send_start, send_stop, ConditionTimings, DEFAULT_CONDITION_TIMINGS
from .fast import fast_write
from .primitives import write_device_address, write_byte_get_ack


def device_write(
    transport,
    address: int,
    data:    bytes | list[int],
    options: int,
    *,
    length:  int | None = None,
    timings: ConditionTimings = DEFAULT_CONDITION_TIMINGS,
    log:     CommunicationLog | None = None,
) -> tuple[int, int]:
    """
    Zapisuje bajty do slave'a I2C.

    Parametry
    ----------
    transport : ChannelTransport
        Zainicjalizowany kanał.
    address : int
        Nieprzesunięty 7-bitowy adres slave'a (0..127).
    data : bytes | list[int]
        Bajty do zapisania.
    options : int
        Flagi I2C_TRANSFER_OPTIONS_*.
    length : int | None
        Liczba bajtów data do zapisania (None = wszystkie).
    timings : ConditionTimings
        Czasy utrzymania START/STOP po stronie hosta dla klas prędkości.
    log : CommunicationLog | None
        Opcjonalny obiekt logujący.

    Zwraca
    ------
    (status: int, bytes_transferred: int)
        bytes_transferred liczy zapisane bajty; po NACK z BREAK_ON_NACK
        liczy bajty potwierdzone przed odrzuconym.
    """
    data = bytes(data)
    if length is None:
        length = len(data)
    if not 0 <= address <= I2C_ADDRESS_7BIT_MAX:
        return STATUS_INVALID_PARAMETER, 0
    if not 0 <= length <= len(data):
        return STATUS_INVALID_PARAMETER, 0
    data = data[:length]
    if log is None:
        log = CommunicationLog()

    with channel_lock(transport):
        transport.purge()

        if options & I2C_TRANSFER_OPTIONS_FAST_TRANSFER:
            status, transferred, _ = fast_write(transport, address, data, options, log=log)
            return status, transferred

        return _write_transaction(transport, address, data, options, timings, log)


def _write_transaction(transport, address: int, data: bytes, options: int, timings, log) -> tuple[int, int]:
    stop = options & I2C_TRANSFER_OPTIONS_STOP_BIT

    # ------------------------------------------------------------------ #
    # START + ADRES
    # ------------------------------------------------------------------ #
    if options & I2C_TRANSFER_OPTIONS_START_BIT:
        status = send_start(transport, timings=timings, log=log)
        if status != STATUS_OK:
            return status, 0

    status, ack = write_device_address(transport, address, False, log=log)
    if status != STATUS_OK:
        return status, 0

    if ack is Ack.NACK:
        # Nikt nie odpowiedział pod tym adresem
        if stop:
            status = send_stop(transport, timings=timings, log=log)
            if status != STATUS_OK:
                return status, 0
        return STATUS_DEVICE_NOT_FOUND, 0

    # ------------------------------------------------------------------ #
    # DANE
    # ------------------------------------------------------------------ #
    transferred = 0
    for byte in data:
        status, ack = write_byte_get_ack(transport, byte, log=log)
        if status != STATUS_OK:
            # Niepełny transfer – magistrala pozostaje w bieżącym stanie
            return STATUS_IO_ERROR, transferred

        if ack is Ack.NACK and options & I2C_TRANSFER_OPTIONS_BREAK_ON_NACK:
            if stop:
                status = send_stop(transport, timings=timings, log=log)
                if status != STATUS_OK:
                    return status, transferred
            return STATUS_FAILED_TO_WRITE_DEVICE, transferred

        transferred += 1

    # ------------------------------------------------------------------ #
    # STOP
    # ------------------------------------------------------------------ #
    if stop:
        status = send_stop(transport, timings=timings, log=log)
        if status != STATUS_OK:
            return status, transferred

    return STATUS_OK, transferred
