"""
commands.py – Kodowanie prymitywnych komend MPSSE
==================================================
Do sterowania magistralą I2C wystarczają cztery prymitywy:

  ┌──────────────────┬────────────────────────────┬──────────┐
  │ Prymityw         │ Kodowanie                  │ Rozmiar  │
  ├──────────────────┼────────────────────────────┼──────────┤
  │ set_pins         │ 0x80  value  direction     │ 3B       │
  │ clock_bits_out   │ 0x13  count-1  data        │ 3B       │
  │ clock_bits_in    │ 0x22  count-1              │ 2B       │
  │ send_immediate   │ 0x87                       │ 1B       │
  └──────────────────┴────────────────────────────┴──────────┘

Bity wychodzą od MSB na zboczu opadającym SCL, próbkowane są na zboczu
narastającym. Każde clock_bits_in daje jeden bajt odpowiedzi.
"""

from enum import Enum

from ..constants import (
    MPSSE_CMD_SET_DATA_BITS_LOWBYTE,
    MPSSE_CMD_DATA_OUT_BITS_NEG_EDGE,
    MPSSE_CMD_DATA_IN_BITS_POS_EDGE,
    MPSSE_CMD_SEND_IMMEDIATE,
    I2C_ADDRESS_READ_MASK, I2C_ADDRESS_WRITE_MASK,
    SEND_ACK, SEND_NACK,
)


class Ack(Enum):
    """
    Bit potwierdzenia jednej fazy adresu/danych.

    Wartość to spróbkowany poziom SDA: slave ściąga SDA w dół (0), żeby
    potwierdzić; zwolniona linia czyta się jako wysoka (1).
    """

    ACK  = 0
    NACK = 1

    @classmethod
    def from_sample(cls, reply: int) -> "Ack":
        """Dekoduje poziom linii spróbkowany do bitu 0 bajtu odpowiedzi."""
        return cls.NACK if reply & 0x01 else cls.ACK

    @property
    def bit(self) -> int:
        """Wartość bitu wystawiana przez mastera dla tego potwierdzenia."""
        return SEND_ACK if self is Ack.ACK else SEND_NACK


def _size_field(count: int) -> int:
    # Liczba bitów kodowana jako count-1 (0 = 1 bit, 7 = 8 bitów)
    if not 1 <= count <= 8:
        raise ValueError(f"bit count out of range 1..8: {count}")
    return count - 1


def set_pins(buf: bytearray, value: int, direction: int) -> None:
    """Dopisuje komendę ustawienia wartości/kierunku młodszego bajtu pinów."""
    buf += bytes([MPSSE_CMD_SET_DATA_BITS_LOWBYTE, value & 0xFF, direction & 0xFF])


def clock_bits_out(buf: bytearray, count: int, data: int) -> None:
    """Dopisuje komendę wystawiającą count (1..8) bitów danych, od MSB."""
    buf += bytes([MPSSE_CMD_DATA_OUT_BITS_NEG_EDGE, _size_field(count), data & 0xFF])


def clock_bits_in(buf: bytearray, count: int) -> None:
    """Dopisuje komendę próbkującą count (1..8) bitów do jednego bajtu odpowiedzi."""
    buf += bytes([MPSSE_CMD_DATA_IN_BITS_POS_EDGE, _size_field(count)])


def send_immediate(buf: bytearray) -> None:
    """Dopisuje komendę odsyłającą oczekujące odpowiedzi do hosta."""
    buf.append(MPSSE_CMD_SEND_IMMEDIATE)


def address_byte(address: int, read: bool) -> int:
    """Adres 7-bitowy przesunięty w lewo z bitem kierunku (1 = odczyt)."""
    shifted = (address << 1) & 0xFF
    if read:
        return shifted | I2C_ADDRESS_READ_MASK
    return shifted & I2C_ADDRESS_WRITE_MASK
