"""
mpsse_i2c – Biblioteka I2C Master na silniku komend FTDI MPSSE
===============================================================
Struktura pakietu:
    mpsse_i2c/
    ├── __init__.py          – publiczne API
    ├── constants.py         – kody statusu, opcje, komendy, czasy
    ├── master.py            – fasada I2CMaster, pomocnik I2CRegister
    ├── core/
    │   ├── __init__.py
    │   ├── transport.py     – kontrakt ChannelTransport, FtdiTransport (pyftdi)
    │   └── channel.py       – init_channel, pamięć konfiguracji kanału
    ├── protocol/
    │   ├── __init__.py
    │   ├── commands.py      – kodowanie prymitywów MPSSE, Ack
    │   ├── conditions.py    – sekwencje START / STOP, ConditionTimings
    │   ├── primitives.py    – transfery bajt + ACK, faza adresu
    │   ├── fast.py          – transfery wsadowe (jeden bufor)
    │   ├── write.py         – pełna ścieżka WRITE
    │   └── read.py          – pełna ścieżka READ
    └── utils/
        ├── __init__.py
        ├── log.py           – CommunicationLog (zrzut TX/RX)
        └── byteorder.py     – AddrSpace, ByteOrder

Szybki start:
    from mpsse_i2c import I2CMaster

    i2c = I2CMaster(url="ftdi://ftdi:232h/1")
    i2c.configure()
    i2c.write(0x50, bytes([0x00, 0x10, 0xAB]))     # zapis bajtu do EEPROM
    status, data = i2c.read(0x48, 2)               # 16-bitowa wartość czujnika
    i2c.close()
"""

from .master import I2CMaster, I2CRegister, I2CError, default_channel_config   # noqa: F401 – główny interfejs
from .core.transport import ChannelTransport, FtdiTransport                    # noqa: F401
from .core.channel import ChannelConfig, init_channel, get_channel_config      # noqa: F401
from .protocol.commands import Ack                                             # noqa: F401
from .protocol.conditions import ConditionTimings                              # noqa: F401
from .protocol.read import device_read                                         # noqa: F401
from .protocol.write import device_write                                       # noqa: F401
from .utils.byteorder import AddrSpace, ByteOrder                              # noqa: F401
from .utils.log import CommunicationLog                                        # noqa: F401
from .constants import (                                                       # noqa: F401 – stałe do importu
    STATUS_OK, STATUS_DEVICE_NOT_FOUND, STATUS_IO_ERROR,
    STATUS_INSUFFICIENT_RESOURCES, STATUS_INVALID_PARAMETER,
    STATUS_FAILED_TO_WRITE_DEVICE, STATUS_NOT_SUPPORTED,
    I2C_TRANSFER_OPTIONS_START_BIT, I2C_TRANSFER_OPTIONS_STOP_BIT,
    I2C_TRANSFER_OPTIONS_BREAK_ON_NACK, I2C_TRANSFER_OPTIONS_NACK_LAST_BYTE,
    I2C_TRANSFER_OPTIONS_FAST_TRANSFER_BYTES, I2C_TRANSFER_OPTIONS_FAST_TRANSFER_BITS,
    I2C_TRANSFER_OPTIONS_FAST_TRANSFER, I2C_TRANSFER_OPTIONS_NO_ADDRESS,
    I2C_DISABLE_3PHASE_CLOCKING, I2C_ENABLE_DRIVE_ONLY_ZERO,
    I2C_CLOCK_STANDARD_MODE, I2C_CLOCK_FAST_MODE,
    I2C_CLOCK_FAST_MODE_PLUS, I2C_CLOCK_HIGH_SPEED_MODE,
    status_name, clock_rate_name,
)

__version__ = "1.0.0"
__all__ = [
    "I2CMaster", "I2CRegister", "I2CError",
    "ChannelConfig", "init_channel", "device_read", "device_write",
    "FtdiTransport", "AddrSpace", "ByteOrder",
]
