"""
primitives.py – Transfery pojedynczych bajtów i faza adresu
============================================================
Każda faza bajtu to jedna wymiana z silnikiem:

  write_byte_get_ack   piny → 8 bitów out → SDA wejście → 1 bit in → flush
                       odpowiedź: 1 bajt, bit 0 = spróbkowany ACK
  read_byte_give_ack   SDA wejście → 8 bitów in → ustawienie SDA → 1 bit out
                       → spoczynek → flush
                       odpowiedź: 1 bajt, spróbkowane dane

Zanim pin zmieni kierunek, jego wartość wyjściowa jest ustawiana na
poziom, który ma mieć po zmianie – przełączenie nie daje szpilki na SDA.
"""

import time

from ..constants import (
    STATUS_OK, STATUS_IO_ERROR, STATUS_NOT_SUPPORTED,
    VALUE_SCLLOW_SDALOW,
    DIRECTION_SCLOUT_SDAOUT, DIRECTION_SCLOUT_SDAIN,
    REPLY_DELAY,
)
from ..utils.log import CommunicationLog
from .commands import (
    Ack, set_pins, clock_bits_out, clock_bits_in, send_immediate, address_byte,
)


def build_write_byte(buf: bytearray, data: int) -> None:
    """Dopisuje komendy zapisu jednego bajtu i próbkowania jego bitu ACK."""
    set_pins(buf, VALUE_SCLLOW_SDALOW, DIRECTION_SCLOUT_SDAOUT)
    clock_bits_out(buf, 8, data)
    # Zwolnienie SDA – slave wystawia bit ACK
    set_pins(buf, VALUE_SCLLOW_SDALOW, DIRECTION_SCLOUT_SDAIN)
    clock_bits_in(buf, 1)


def build_read_byte(buf: bytearray, ack: Ack) -> None:
    """Dopisuje komendy odczytu jednego bajtu i odpowiedzi bitem ack."""
    set_pins(buf, VALUE_SCLLOW_SDALOW, DIRECTION_SCLOUT_SDAIN)
    clock_bits_in(buf, 8)
    if ack is Ack.ACK:
        # Wyjście dopiero, gdy wartość już wynosi 0
        set_pins(buf, VALUE_SCLLOW_SDALOW, DIRECTION_SCLOUT_SDAOUT)
    else:
        # Zostaje wejściem: NACK daje pull-up, bit out tylko odmierza czas bitu
        set_pins(buf, VALUE_SCLLOW_SDALOW, DIRECTION_SCLOUT_SDAIN)
    clock_bits_out(buf, 1, ack.bit)
    # Powrót do spoczynku
    set_pins(buf, VALUE_SCLLOW_SDALOW, DIRECTION_SCLOUT_SDAIN)


def _exchange(transport, buf: bytearray, log, step: str) -> tuple[int, int]:
    """Wysyła fazę bajtu zakończoną flush i odczytuje jej 1-bajtową odpowiedź."""
    status, written = transport.write(buf, log, step)
    if status != STATUS_OK:
        return status, 0
    if written != len(buf):
        return STATUS_IO_ERROR, 0

    time.sleep(REPLY_DELAY)

    status, reply = transport.read(1, log, f"{step} reply")
    if status != STATUS_OK:
        return status, 0
    if len(reply) != 1:
        return STATUS_IO_ERROR, 0
    return STATUS_OK, reply[0]


def write_byte_get_ack(
    transport,
    data: int,
    *,
    log: CommunicationLog | None = None,
) -> tuple[int, Ack | None]:
    """
    Wysyła 8 bitów na magistralę i próbkuje potwierdzenie slave'a.

    Parametry
    ----------
    transport : ChannelTransport
    data : int
        Bajt do wysłania, od MSB.
    log : CommunicationLog | None

    Zwraca
    ------
    (status: int, ack: Ack | None)
        ack to None, gdy status jest różny od STATUS_OK.
    """
    buf = bytearray()
    build_write_byte(buf, data)
    send_immediate(buf)

    status, reply = _exchange(transport, buf, log, f"WRITE 0x{data & 0xFF:02X}")
    if status != STATUS_OK:
        return status, None
    return STATUS_OK, Ack.from_sample(reply)


def read_byte_give_ack(
    transport,
    ack: Ack,
    *,
    log: CommunicationLog | None = None,
) -> tuple[int, int | None]:
    """
    Odczytuje 8 bitów z magistrali i odpowiada ACK albo NACK.

    Zwraca
    ------
    (status: int, data: int | None)
    """
    buf = bytearray()
    build_read_byte(buf, ack)
    send_immediate(buf)

    status, data = _exchange(transport, buf, log, f"READ + {ack.name}")
    if status != STATUS_OK:
        return status, None
    return STATUS_OK, data


def write_device_address(
    transport,
    address: int,
    read: bool,
    *,
    ten_bit: bool = False,
    log: CommunicationLog | None = None,
) -> tuple[int, Ack | None]:
    """
    Faza adresu: 7-bitowy adres z bitem kierunku, potem ACK slave'a.

    Parametry
    ----------
    address : int
        Nieprzesunięty 7-bitowy adres slave'a.
    read : bool
        Bit kierunku (True = odczyt, False = zapis).
    ten_bit : bool
        Adresowanie 10-bitowe nie jest zaimplementowane (STATUS_NOT_SUPPORTED).

    Zwraca
    ------
    (status: int, ack: Ack | None)
    """
    if ten_bit:
        return STATUS_NOT_SUPPORTED, None
    return write_byte_get_ack(transport, address_byte(address, read), log=log)
