"""
channel.py – Inicjalizacja kanału i pamięć jego konfiguracji
=============================================================
init_channel przygotowuje silnik do pracy jako master I2C:

  1. Zegar           żądany × 3/2, gdy zegar 3-fazowy jest włączony
                     (trzy fazy na bit wymagają o 50% więcej zboczy)
  2. Ustawienie      transport.set_clock_and_latency(clock, latency, options)
  3. Zegar 3-faz.    jedna komenda 0x8C (tylko gdy włączony)
  4. Zapamiętanie    ChannelConfig wywołującego, zapisany bez zmian

Zapamiętana konfiguracja służy budowniczemu warunków magistrali do
wyboru klasy prędkości; get_channel_config zwraca ją tak, jak zapisano.
"""

import weakref

from ..constants import (
    STATUS_OK, STATUS_IO_ERROR,
    I2C_DISABLE_3PHASE_CLOCKING,
    I2C_CLOCK_DEFAULT, I2C_LATENCY_DEFAULT,
    I2C_CLOCK_STANDARD_MODE, I2C_CLOCK_FAST_MODE, I2C_CLOCK_FAST_MODE_PLUS,
    SPEED_STANDARD, SPEED_FAST, SPEED_FAST_PLUS, SPEED_HIGH_SPEED,
    MPSSE_CMD_ENABLE_3PHASE_CLOCKING,
    clock_rate_name,
)
from ..utils.log import CommunicationLog

# transport → ChannelConfig, znika razem z transportem
_channel_configs = weakref.WeakKeyDictionary()


class ChannelConfig:
    """
    Konfiguracja jednego kanału I2C.

    Parametry
    ----------
    clock_rate : int
        Żądana częstotliwość SCL [Hz] (I2C_CLOCK_* lub dowolna do 3.4 MHz).
    latency_timer : int
        USB latency timer [ms], 2..255.
    options : int
        I2C_DISABLE_3PHASE_CLOCKING | I2C_ENABLE_DRIVE_ONLY_ZERO.
    """

    def __init__(
        self,
        clock_rate:    int = I2C_CLOCK_DEFAULT,
        latency_timer: int = I2C_LATENCY_DEFAULT,
        options:       int = 0,
    ):
        self.clock_rate    = clock_rate
        self.latency_timer = latency_timer
        self.options       = options

    @property
    def three_phase_clocking(self) -> bool:
        return not (self.options & I2C_DISABLE_3PHASE_CLOCKING)

    def effective_clock_rate(self) -> int:
        """Częstotliwość przekazywana do dzielnika zegara silnika."""
        if self.three_phase_clocking:
            return (self.clock_rate * 3) // 2
        return self.clock_rate

    def __repr__(self) -> str:
        return (f"ChannelConfig(clock={clock_rate_name(self.clock_rate)!r}, "
                f"latency={self.latency_timer} ms, options=0x{self.options:04X})")


def init_channel(transport, config: ChannelConfig, *, log: CommunicationLog | None = None) -> int:
    """
    Inicjalizuje kanał do pracy w trybie I2C.

    Parametry
    ----------
    transport : ChannelTransport
        Otwarty kanał; pozostaje własnością wywołującego.
    config : ChannelConfig
        Żądana konfiguracja, zapamiętywana w niezmienionej postaci.
    log : CommunicationLog | None
        Opcjonalny obiekt logujący.

    Zwraca
    ------
    int
        STATUS_OK albo pierwszy błędny status transportu.
    """
    if log is None:
        log = CommunicationLog()

    status = transport.set_clock_and_latency(
        config.effective_clock_rate(), config.latency_timer, config.options,
    )
    if status != STATUS_OK:
        return status

    if config.three_phase_clocking:
        command = bytes([MPSSE_CMD_ENABLE_3PHASE_CLOCKING])
        status, written = transport.write(command, log, "ENABLE 3-PHASE CLOCKING")
        if status != STATUS_OK:
            return status
        if written != len(command):
            return STATUS_IO_ERROR

    save_channel_config(transport, config)
    return STATUS_OK


def save_channel_config(transport, config: ChannelConfig) -> None:
    """Zapamiętuje konfigurację kanału do późniejszego użycia."""
    _channel_configs[transport] = config


def get_channel_config(transport) -> ChannelConfig | None:
    """Zwraca konfigurację zapisaną przez init_channel (None przed inicjalizacją)."""
    return _channel_configs.get(transport)


def speed_tier(clock_rate: int) -> str:
    """Przypisuje żądaną częstotliwość do klasy prędkości I2C."""
    if clock_rate <= I2C_CLOCK_STANDARD_MODE:
        return SPEED_STANDARD
    if clock_rate <= I2C_CLOCK_FAST_MODE:
        return SPEED_FAST
    if clock_rate <= I2C_CLOCK_FAST_MODE_PLUS:
        return SPEED_FAST_PLUS
    return SPEED_HIGH_SPEED


def channel_speed_tier(transport) -> str:
    """Klasa prędkości zainicjalizowanego kanału (standard przed inicjalizacją)."""
    config = get_channel_config(transport)
    if config is None:
        return SPEED_STANDARD
    return speed_tier(config.clock_rate)
