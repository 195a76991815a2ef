"""
master.py – Fasada biblioteki: klasa I2CMaster
===============================================
I2CMaster to główny interfejs użytkownika biblioteki mpsse_i2c.
Łączy transport kanału (FtdiTransport) z warstwą protokołu
(device_read, device_write) w prostym API z flagami start/stop
zamiast surowych map bitowych opcji.

Typowe użycie:
    from mpsse_i2c import I2CMaster, AddrSpace, ByteOrder

    with I2CMaster() as i2c:
        i2c.configure()
        status, count = i2c.write(0x50, bytes([0x00, 0x10, 0xAB]))

        reg = i2c.register(0x40, 0x02, AddrSpace.ADDR_8BIT, ByteOrder.MSB)
        read = reg.reader(2)
        voltage = read()
"""

from .constants import (
    STATUS_OK, STATUS_INVALID_PARAMETER,
    I2C_TRANSFER_OPTIONS_START_BIT, I2C_TRANSFER_OPTIONS_STOP_BIT,
    I2C_TRANSFER_OPTIONS_BREAK_ON_NACK, I2C_TRANSFER_OPTIONS_NACK_LAST_BYTE,
    I2C_TRANSFER_OPTIONS_FAST_TRANSFER, I2C_TRANSFER_OPTIONS_FAST_TRANSFER_BYTES,
    I2C_ENABLE_DRIVE_ONLY_ZERO,
    I2C_CLOCK_DEFAULT, I2C_CLOCK_MAXIMUM, I2C_LATENCY_DEFAULT,
    I2C_SLAVE_ADDRESS_MIN, I2C_SLAVE_ADDRESS_MAX,
    status_name, clock_rate_name,
)
from .core.transport import ChannelTransport, FtdiTransport, DEFAULT_URL
from .core.channel import ChannelConfig, init_channel
from .protocol.conditions import ConditionTimings, DEFAULT_CONDITION_TIMINGS
from .protocol.write import device_write
from .protocol.read import device_read
from .utils.byteorder import AddrSpace, ByteOrder
from .utils.log import CommunicationLog


class I2CError(Exception):
    """
    Nieudany transfer na magistrali w pomocniku rejestrów.

    Atrybuty
    --------
    status : int
        Kod STATUS_* zwrócony przez nieudany transfer.
    """

    def __init__(self, status: int, message: str = "I2C transfer failed"):
        super().__init__(f"{message}: {status_name(status)}")
        self.status = status


def default_channel_config() -> ChannelConfig:
    """400 kHz, 2 ms latency, zegar 3-fazowy, drive-only-zero."""
    return ChannelConfig(I2C_CLOCK_DEFAULT, I2C_LATENCY_DEFAULT, I2C_ENABLE_DRIVE_ONLY_ZERO)


def _valid_slave(slave: int) -> bool:
    return I2C_SLAVE_ADDRESS_MIN <= slave <= I2C_SLAVE_ADDRESS_MAX


class I2CMaster:
    """
    Wysokopoziomowy interfejs jednego kanału mastera I2C.

    Parametry
    ----------
    transport : ChannelTransport | None
        Otwarty kanał. None = nowy FtdiTransport na url.
    url : str
        URL urządzenia pyftdi, używany tylko gdy transport jest None.
    timings : ConditionTimings
        Czasy utrzymania START/STOP po stronie hosta dla klas prędkości.
    verbose : bool
        Jeśli True, drukuje informacje o każdej transakcji.

    Przykład
    --------
    i2c = I2CMaster(url="ftdi://ftdi:232h/1")
    i2c.configure(ChannelConfig(I2C_CLOCK_STANDARD_MODE))
    status, data = i2c.read(0x48, 2)
    i2c.close()
    """

    def __init__(
        self,
        transport: ChannelTransport | None = None,
        *,
        url:       str  = DEFAULT_URL,
        timings:   ConditionTimings = DEFAULT_CONDITION_TIMINGS,
        verbose:   bool = False,
    ):
        if transport is None:
            transport = FtdiTransport(url)
        self._transport = transport
        self._config: ChannelConfig | None = None
        self.timings = timings
        self.verbose = verbose

        # Opcje dynamiczne, zmienialne przy otwartym kanale
        self.break_on_nack  = False
        self.last_read_nack = False
        self.no_usb_delay   = True

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.close()

    def close(self) -> None:
        """Zamyka transport."""
        self._transport.close()

    # ------------------------------------------------------------------
    # Konfiguracja
    # ------------------------------------------------------------------

    def configure(self, config: ChannelConfig | None = None, *, log: CommunicationLog | None = None) -> int:
        """
        Inicjalizuje kanał.

        Parametry
        ----------
        config : ChannelConfig | None
            Ustawienia kanału (None = default_channel_config()). Zerowy
            zegar lub latency zastępowany jest wartością domyślną.
        log : CommunicationLog | None
            Opcjonalny obiekt logujący.

        Zwraca
        ------
        int
            STATUS_INVALID_PARAMETER dla zegara powyżej 3.4 MHz,
            w przeciwnym razie status init_channel.
        """
        if config is None:
            config = default_channel_config()
        if config.clock_rate > I2C_CLOCK_MAXIMUM:
            return STATUS_INVALID_PARAMETER

        config = ChannelConfig(
            config.clock_rate or I2C_CLOCK_DEFAULT,
            config.latency_timer or I2C_LATENCY_DEFAULT,
            config.options,
        )
        if self.verbose:
            print(f"[INIT]  {clock_rate_name(config.clock_rate)} latency={config.latency_timer} ms")

        status = init_channel(self._transport, config, log=log)
        if status == STATUS_OK:
            self._config = config
        elif self.verbose:
            print(f"[INIT]  failed: {status_name(status)}")
        return status

    def set_options(
        self,
        break_on_nack:  bool | None = None,
        last_read_nack: bool | None = None,
        no_usb_delay:   bool | None = None,
    ) -> None:
        """Zmienia dynamiczne opcje transferu (None = bez zmian)."""
        if break_on_nack is not None:
            self.break_on_nack = break_on_nack
        if last_read_nack is not None:
            self.last_read_nack = last_read_nack
        if no_usb_delay is not None:
            self.no_usb_delay = no_usb_delay

    def transfer_options(self, start: bool, stop: bool, read: bool) -> int:
        """
        Mapa bitowa opcji jednego transferu fasady.

        NACK_LAST_BYTE i BREAK_ON_NACK są pomijane, gdy transfer
        wsadowy generuje też START lub STOP.
        """
        options = 0
        if start:
            options |= I2C_TRANSFER_OPTIONS_START_BIT
        if stop:
            options |= I2C_TRANSFER_OPTIONS_STOP_BIT
        if self.no_usb_delay:
            options |= I2C_TRANSFER_OPTIONS_FAST_TRANSFER | I2C_TRANSFER_OPTIONS_FAST_TRANSFER_BYTES

        if not (self.no_usb_delay and (start or stop)):
            if read and self.last_read_nack:
                options |= I2C_TRANSFER_OPTIONS_NACK_LAST_BYTE
            if self.break_on_nack:
                options |= I2C_TRANSFER_OPTIONS_BREAK_ON_NACK
        return options

    # ------------------------------------------------------------------
    # Transfery
    # ------------------------------------------------------------------

    def read(
        self,
        slave: int,
        count: int,
        start: bool = True,
        stop:  bool = True,
        *,
        log:   CommunicationLog | None = None,
    ) -> tuple[int, bytes]:
        """
        Odczytuje count bajtów ze slave'a.

        Parametry
        ----------
        slave : int
            Nieprzesunięty 7-bitowy adres slave'a (0x08..0x77).
        count : int
            Liczba bajtów do odczytania.
        start / stop : bool
            Generuj START przed / STOP po transferze.

        Zwraca
        ------
        (status: int, data: bytes)
            data zawiera odczytane bajty, także gdy status różni się od STATUS_OK.
        """
        if not _valid_slave(slave):
            return STATUS_INVALID_PARAMETER, b""

        options = self.transfer_options(start, stop, True)
        if self.verbose:
            print(f"[READ]  addr=0x{slave:02X} size={count}B opt=0x{options:02X}")

        status, _, data = device_read(
            self._transport, slave, count, options, timings=self.timings, log=log,
        )
        if self.verbose and status != STATUS_OK:
            print(f"[READ]  failed: {status_name(status)} ({len(data)}B read)")
        return status, data

    def write(
        self,
        slave: int,
        data:  bytes | list[int],
        start: bool = True,
        stop:  bool = True,
        *,
        log:   CommunicationLog | None = None,
    ) -> tuple[int, int]:
        """
        Zapisuje data do slave'a.

        Zwraca
        ------
        (status: int, bytes_written: int)
        """
        if not _valid_slave(slave):
            return STATUS_INVALID_PARAMETER, 0

        data = bytes(data)
        options = self.transfer_options(start, stop, False)
        if self.verbose:
            print(f"[WRITE] addr=0x{slave:02X} size={len(data)}B opt=0x{options:02X}")

        status, count = device_write(
            self._transport, slave, data, options, timings=self.timings, log=log,
        )
        if self.verbose and status != STATUS_OK:
            print(f"[WRITE] failed: {status_name(status)} ({count}B written)")
        return status, count

    def register(
        self,
        slave: int,
        addr:  int,
        space: AddrSpace = AddrSpace.ADDR_8BIT,
        order: ByteOrder = ByteOrder.MSB,
    ) -> "I2CRegister":
        """Zwraca pomocnika dla jednego rejestru urządzenia slave."""
        return I2CRegister(self, slave, addr, space, order)

    # ------------------------------------------------------------------
    # Dostęp
    # ------------------------------------------------------------------

    @property
    def config(self) -> ChannelConfig | None:
        """Konfiguracja ustawiona przez ostatnie udane configure()."""
        return self._config

    @property
    def transport(self) -> ChannelTransport:
        """Bezpośredni dostęp do warstwy transportowej (zaawansowane użycie)."""
        return self._transport


class I2CRegister:
    """
    Jeden rejestr slave'a I2C, adresowany podadresem.

    Podadres wysyłany jest w podanej przestrzeni adresów i kolejności
    bajtów; wartości odczytywane i zapisywane używają tej samej kolejności.
    """

    def __init__(self, master: I2CMaster, slave: int, addr: int, space: AddrSpace, order: ByteOrder):
        self.master = master
        self.slave  = slave
        self.addr   = addr
        self.space  = space
        self.order  = order

    def __repr__(self) -> str:
        return (f"I2CRegister(slave=0x{self.slave:02X}, addr=0x{self.addr:02X}, "
                f"space={self.space}, order={self.order.name})")

    def _address_bytes(self) -> bytes:
        """Sprawdza rejestr i zwraca jego uporządkowany podadres."""
        if not _valid_slave(self.slave):
            raise ValueError(
                f"invalid slave address (0x{I2C_SLAVE_ADDRESS_MIN:02X}-0x{I2C_SLAVE_ADDRESS_MAX:02X}): "
                f"0x{self.slave:02X}"
            )
        if not isinstance(self.space, AddrSpace):
            raise ValueError(f"invalid sub-address space: {self.space!r}")
        if not self.space.contains(self.addr):
            raise ValueError(f"register sub-address outside {self.space} address space: 0x{self.addr:02X}")
        if not isinstance(self.order, ByteOrder):
            raise ValueError(f"invalid byte order: {self.order!r}")
        return self.order.to_bytes(self.space.bytes, self.addr)

    def _position(self, addr: bytes) -> None:
        # START, podadres, bez STOP – następny odczyt to powtórzony START
        status, _ = self.master.write(self.slave, addr, True, False)
        if status != STATUS_OK:
            raise I2CError(status, f"positioning register 0x{self.addr:02X} failed")

    def reader(self, size: int):
        """
        Ustawia wskaźnik rejestru i zwraca funkcję odczytu.

        Parametry
        ----------
        size : int
            Szerokość rejestru w bajtach (np. 2 dla rejestru 16-bitowego).

        Zwraca
        ------
        read(rewrite: bool = False) -> int
            Odczytuje size bajtów i dekoduje je w kolejności bajtów rejestru.
            rewrite=True najpierw ponownie ustawia wskaźnik, co jest
            potrzebne, gdy w międzyczasie czytano inne rejestry.

        Wyjątki
        -------
        ValueError
            Błędny adres slave'a, przestrzeń adresów, podadres lub kolejność bajtów.
        I2CError
            Transfer się nie powiódł.
        """
        addr = self._address_bytes()
        self._position(addr)

        def read(rewrite: bool = False) -> int:
            if rewrite:
                self._position(addr)
            status, data = self.master.read(self.slave, size, True, True)
            if status != STATUS_OK:
                raise I2CError(status, f"reading register 0x{self.addr:02X} failed")
            return self.order.to_int(size, data)

        return read

    def write(self, value: int, size: int) -> int:
        """
        Zapisuje value (size bajtów) do rejestru.

        Zwraca
        ------
        int
            Liczba zapisanych bajtów, łącznie z podadresem.

        Wyjątki
        -------
        ValueError, I2CError
        """
        payload = self._address_bytes() + self.order.to_bytes(size, value)
        status, count = self.master.write(self.slave, payload, True, True)
        if status != STATUS_OK:
            raise I2CError(status, f"writing register 0x{self.addr:02X} failed")
        return count
