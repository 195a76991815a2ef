"""
transport.py – Blokujący kanał bajtowy do silnika komend MPSSE
===============================================================
Odpowiada za:
  • kontrakt transportu używany przez rdzeń I2C (ChannelTransport)
  • wzajemne wykluczanie na kanale (lock / unlock, strażnik channel_lock)
  • implementację na pyftdi (FtdiTransport)

Każde wywołanie jest blokujące i zwraca kod statusu zamiast rzucać
wyjątek; wyjątki bibliotek są łapane tutaj i mapowane na kody STATUS_*.
"""

import threading
from contextlib import contextmanager

from pyftdi.ftdi import Ftdi, FtdiError, FtdiFeatureError
from usb.core import USBError

from ..constants import (
    STATUS_OK, STATUS_IO_ERROR, STATUS_INVALID_PARAMETER, STATUS_NOT_SUPPORTED,
    I2C_ENABLE_DRIVE_ONLY_ZERO, I2C_CLOCK_DEFAULT, I2C_LATENCY_DEFAULT,
    SCL_BIT, SDA_O_BIT, SDA_I_BIT,
    VALUE_SCLHIGH_SDAHIGH, DIRECTION_SCLOUT_SDAIN,
)

DEFAULT_URL   = "ftdi://ftdi:232h/1"
READ_ATTEMPTS = 4


class ChannelTransport:
    """
    Kontrakt transportu jednego kanału silnika.

    Podklasy implementują _write, _read, purge, set_clock_and_latency
    i close. Publiczne write/read opakowują je opcjonalnym logowaniem.
    Tutaj znajduje się blokada kanału: jedna transakcja na kanał naraz.
    """

    def __init__(self):
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Dane
    # ------------------------------------------------------------------

    def write(self, data: bytes | bytearray, log=None, step: str = "") -> tuple[int, int]:
        """
        Wysyła bufor komend do silnika.

        Parametry
        ----------
        data : bytes | bytearray
            Bajty komend.
        log : CommunicationLog | None
            Jeśli podany, wymiana trafia do logu.
        step : str
            Opis kroku widoczny w logu.

        Zwraca
        ------
        (status: int, bytes_written: int)
        """
        data = bytes(data)
        status, written = self._write(data)
        if log is not None:
            log.add(step, data, b"")
        return status, written

    def read(self, count: int, log=None, step: str = "") -> tuple[int, bytes]:
        """
        Odczytuje do count bajtów odpowiedzi z silnika.

        Zwraca
        ------
        (status: int, data: bytes)
            len(data) to liczba faktycznie odczytanych bajtów.
        """
        status, data = self._read(count)
        if log is not None:
            log.add(step, b"", data)
        return status, data

    def _write(self, data: bytes) -> tuple[int, int]:
        raise NotImplementedError

    def _read(self, count: int) -> tuple[int, bytes]:
        raise NotImplementedError

    def purge(self) -> int:
        """Usuwa zaległe bajty z buforów silnika."""
        raise NotImplementedError

    def set_clock_and_latency(self, clock_hz: int, latency: int, options: int) -> int:
        """Programuje zegar silnika, USB latency timer i opcje pinów."""
        raise NotImplementedError

    def close(self) -> None:
        pass

    # ------------------------------------------------------------------
    # Blokada kanału
    # ------------------------------------------------------------------

    def lock(self) -> None:
        self._lock.acquire()

    def unlock(self) -> None:
        self._lock.release()


@contextmanager
def channel_lock(transport: ChannelTransport):
    """Trzyma blokadę kanału przez czas bloku; zwalniana na każdej ścieżce wyjścia."""
    transport.lock()
    try:
        yield transport
    finally:
        transport.unlock()


class FtdiTransport(ChannelTransport):
    """
    Kanał na interfejsie FTDI MPSSE (FT232H, FT2232H, FT4232H).

    Parametry
    ----------
    url : str
        URL urządzenia pyftdi, np. "ftdi://ftdi:232h/1".
    frequency : float
        Początkowy zegar MPSSE [Hz]; init_channel ustawia go ponownie.
    latency : int
        Początkowy USB latency timer [ms].

    Przykład
    --------
    transport = FtdiTransport("ftdi://ftdi:2232h/1")
    init_channel(transport, ChannelConfig(I2C_CLOCK_STANDARD_MODE))
    transport.close()
    """

    def __init__(
        self,
        url:       str   = DEFAULT_URL,
        frequency: float = I2C_CLOCK_DEFAULT,
        latency:   int   = I2C_LATENCY_DEFAULT,
    ):
        super().__init__()
        self.url   = url
        self._ftdi = Ftdi()
        # Magistrala w spoczynku: SCL wysterowane wysoko, SDA zwolnione
        self._ftdi.open_mpsse_from_url(
            url,
            direction=DIRECTION_SCLOUT_SDAIN,
            initial=VALUE_SCLHIGH_SDAHIGH,
            frequency=frequency,
            latency=latency,
        )

    def close(self) -> None:
        """Zamyka interfejs USB."""
        if self._ftdi.is_connected:
            self._ftdi.close()

    def _write(self, data: bytes) -> tuple[int, int]:
        try:
            written = self._ftdi.write_data(data)
        except (FtdiError, USBError):
            return STATUS_IO_ERROR, 0
        return STATUS_OK, written

    def _read(self, count: int) -> tuple[int, bytes]:
        try:
            data = self._ftdi.read_data_bytes(count, READ_ATTEMPTS)
        except (FtdiError, USBError):
            return STATUS_IO_ERROR, b""
        return STATUS_OK, bytes(data)

    def purge(self) -> int:
        try:
            self._ftdi.purge_buffers()
        except (FtdiError, USBError):
            return STATUS_IO_ERROR
        return STATUS_OK

    def set_clock_and_latency(self, clock_hz: int, latency: int, options: int) -> int:
        """
        Programuje zegar, latency timer i tryb sterowania pinów.

        Tryb drive-only-zero jest ustawiany przy każdym wywołaniu: włączany
        dla SCL/SDA, gdy options zawiera I2C_ENABLE_DRIVE_ONLY_ZERO,
        a w przeciwnym razie wyłączany (maska 0).
        """
        if options & I2C_ENABLE_DRIVE_ONLY_ZERO:
            drivezero = SCL_BIT | SDA_O_BIT | SDA_I_BIT
        else:
            drivezero = 0
        try:
            self._ftdi.set_latency_timer(latency)
            self._ftdi.set_frequency(clock_hz)
            if drivezero or self._ftdi.has_drivezero:
                self._ftdi.enable_drivezero_mode(drivezero)
        except ValueError:
            return STATUS_INVALID_PARAMETER
        except FtdiFeatureError:
            # FT2232H/FT4232H nie mają trybu open-collector
            return STATUS_NOT_SUPPORTED
        except (FtdiError, USBError):
            return STATUS_IO_ERROR
        return STATUS_OK

    @property
    def ftdi(self) -> Ftdi:
        """Bezpośredni dostęp do urządzenia pyftdi (zaawansowane użycie)."""
        return self._ftdi
