"""
byteorder.py – Przestrzenie adresów rejestrów i kolejność bajtów
================================================================
Używane przez pomocnika rejestrów (I2CRegister) do formatowania
podadresu w danych zapisu i dekodowania bajtów odczytanych z rejestru.

  AddrSpace   ADDR_8BIT / ADDR_16BIT / ADDR_32BIT / ADDR_64BIT
  ByteOrder   MSB (big endian) / LSB (little endian)
"""

from enum import Enum

MAX_INT_BYTES = 8


class AddrSpace(Enum):
    """Szerokość podadresu rejestru; wartość to jego rozmiar w bajtach."""

    ADDR_8BIT  = 1
    ADDR_16BIT = 2
    ADDR_32BIT = 4
    ADDR_64BIT = 8

    @property
    def bytes(self) -> int:
        return self.value

    @property
    def bits(self) -> int:
        return self.value * 8

    def contains(self, addr: int) -> bool:
        """True, jeśli addr mieści się w przestrzeni adresów."""
        return 0 <= addr < (1 << self.bits)

    def __str__(self) -> str:
        return f"{self.bits}-bit"


class ByteOrder(Enum):
    """Kolejność bajtów wartości wielobajtowej na magistrali."""

    MSB = 0   # najbardziej znaczący bajt pierwszy
    LSB = 1   # najmniej znaczący bajt pierwszy

    def to_bytes(self, count: int, value: int) -> bytes:
        """
        Zamienia value na count uporządkowanych bajtów.

        Parametry
        ----------
        count : int
            Liczba bajtów, maksymalnie 8.
        value : int
            Wartość bez znaku; bity powyżej count bajtów są odrzucane.

        Zwraca
        ------
        bytes
        """
        count = min(count, MAX_INT_BYTES)
        value &= (1 << (count * 8)) - 1
        return value.to_bytes(count, "big" if self is ByteOrder.MSB else "little")

    def to_int(self, count: int, data: bytes | list[int]) -> int:
        """
        Zamienia pierwsze count bajtów data na liczbę bez znaku.

        count jest ograniczane do 8; data krótsze niż count są
        dopełniane zerami na końcu.
        """
        count = min(count, MAX_INT_BYTES)
        data = bytes(data)[:count].ljust(count, b"\x00")
        return int.from_bytes(data, "big" if self is ByteOrder.MSB else "little")
