"""
constants.py – Stałe protokołu I2C na silniku MPSSE
====================================================
Źródło: libMPSSE-I2C (ftdi_i2c.h / ftdi_common.h) oraz tabela statusów D2XX.
"""

# ---------------------------------------------------------------------------
# Kody statusu (numeracja FT_STATUS z D2XX)
# ---------------------------------------------------------------------------
STATUS_OK                     = 0
STATUS_DEVICE_NOT_FOUND       = 2
STATUS_IO_ERROR               = 4
STATUS_INSUFFICIENT_RESOURCES = 5
STATUS_INVALID_PARAMETER      = 6
STATUS_FAILED_TO_WRITE_DEVICE = 10
STATUS_NOT_SUPPORTED          = 17

# Kod statusu → czytelna nazwa
STATUS_NAMES = {
    STATUS_OK:                     "OK",
    STATUS_DEVICE_NOT_FOUND:       "DEVICE_NOT_FOUND",
    STATUS_IO_ERROR:               "IO_ERROR",
    STATUS_INSUFFICIENT_RESOURCES: "INSUFFICIENT_RESOURCES",
    STATUS_INVALID_PARAMETER:      "INVALID_PARAMETER",
    STATUS_FAILED_TO_WRITE_DEVICE: "FAILED_TO_WRITE_DEVICE",
    STATUS_NOT_SUPPORTED:          "NOT_SUPPORTED",
}


def status_name(status: int) -> str:
    """Zwraca czytelną nazwę kodu statusu."""
    return STATUS_NAMES.get(status, f"UNKNOWN(0x{status:02X})")


# ---------------------------------------------------------------------------
# Opcje transferu (device_read / device_write)
# ---------------------------------------------------------------------------
I2C_TRANSFER_OPTIONS_START_BIT           = 0x00000001
I2C_TRANSFER_OPTIONS_STOP_BIT            = 0x00000002
I2C_TRANSFER_OPTIONS_BREAK_ON_NACK       = 0x00000004
I2C_TRANSFER_OPTIONS_NACK_LAST_BYTE      = 0x00000008
I2C_TRANSFER_OPTIONS_FAST_TRANSFER_BYTES = 0x00000010
I2C_TRANSFER_OPTIONS_FAST_TRANSFER_BITS  = 0x00000020
I2C_TRANSFER_OPTIONS_FAST_TRANSFER       = 0x00000030   # maska obu granulacji
I2C_TRANSFER_OPTIONS_NO_ADDRESS          = 0x00000040

# ---------------------------------------------------------------------------
# Opcje konfiguracji kanału (ChannelConfig.options)
# ---------------------------------------------------------------------------
I2C_DISABLE_3PHASE_CLOCKING = 0x0001   # zegar 3-fazowy włączony, o ile bit nie jest ustawiony
I2C_ENABLE_DRIVE_ONLY_ZERO  = 0x0002   # SDA/SCL sterowane tylko w stan niski, wysoki przez pull-up

# ---------------------------------------------------------------------------
# Częstotliwości zegara [Hz]
# ---------------------------------------------------------------------------
I2C_CLOCK_STANDARD_MODE   = 100_000
I2C_CLOCK_FAST_MODE       = 400_000
I2C_CLOCK_FAST_MODE_PLUS  = 1_000_000
I2C_CLOCK_HIGH_SPEED_MODE = 3_400_000

I2C_CLOCK_MAXIMUM = I2C_CLOCK_HIGH_SPEED_MODE
I2C_CLOCK_DEFAULT = I2C_CLOCK_FAST_MODE

CLOCK_RATE_NAMES = {
    I2C_CLOCK_STANDARD_MODE:   "Standard mode (100 KHz)",
    I2C_CLOCK_FAST_MODE:       "Fast mode (400 KHz)",
    I2C_CLOCK_FAST_MODE_PLUS:  "Fast mode plus (1000 KHz)",
    I2C_CLOCK_HIGH_SPEED_MODE: "High-speed mode (3.4 MHz)",
}


def clock_rate_name(clock_rate: int) -> str:
    """Zwraca opisową nazwę częstotliwości zegara."""
    return CLOCK_RATE_NAMES.get(clock_rate, f"Unsupported mode ({clock_rate} Hz)")


# Klasy prędkości – klucze mapy czasów warunków magistrali
SPEED_STANDARD   = "standard"
SPEED_FAST       = "fast"
SPEED_FAST_PLUS  = "fast_plus"
SPEED_HIGH_SPEED = "high_speed"

I2C_LATENCY_DEFAULT = 2   # ms

# Dozwolone 7-bitowe adresy slave'a w fasadzie
I2C_SLAVE_ADDRESS_MIN = 0x08
I2C_SLAVE_ADDRESS_MAX = 0x77

# Najwyższy adres przyjmowany przez device_read / device_write
I2C_ADDRESS_7BIT_MAX = 127

I2C_ADDRESS_READ_MASK  = 0x01   # LSB 1 = odczyt
I2C_ADDRESS_WRITE_MASK = 0xFE   # LSB 0 = zapis

# ---------------------------------------------------------------------------
# Kody komend MPSSE
# ---------------------------------------------------------------------------
MPSSE_CMD_SET_DATA_BITS_LOWBYTE  = 0x80
MPSSE_CMD_DATA_OUT_BITS_NEG_EDGE = 0x13   # MSB first, wystawienie na zboczu opadającym
MPSSE_CMD_DATA_IN_BITS_POS_EDGE  = 0x22   # MSB first, próbkowanie na zboczu narastającym
MPSSE_CMD_SEND_IMMEDIATE         = 0x87
MPSSE_CMD_ENABLE_3PHASE_CLOCKING = 0x8C

# ---------------------------------------------------------------------------
# Piny (ADBUS, młodszy bajt): bit0 = SCL, bit1 = SDA out, bit2 = SDA in
# ---------------------------------------------------------------------------
SCL_BIT   = 0x01
SDA_O_BIT = 0x02
SDA_I_BIT = 0x04

VALUE_SCLHIGH_SDAHIGH = SCL_BIT | SDA_O_BIT   # 0x03
VALUE_SCLHIGH_SDALOW  = SCL_BIT               # 0x01
VALUE_SCLLOW_SDALOW   = 0x00

DIRECTION_SCLOUT_SDAOUT = SCL_BIT | SDA_O_BIT   # 0x03
DIRECTION_SCLOUT_SDAIN  = SCL_BIT               # 0x01
DIRECTION_SCLIN_SDAIN   = 0x00

# Bit ACK/NACK wystawiany po odczytanym bajcie (MSB bajtu danych)
SEND_ACK  = 0x00
SEND_NACK = 0x80

# ---------------------------------------------------------------------------
# Czasy trwania warunków magistrali (liczba powtórzeń jednej komendy pinów)
# ---------------------------------------------------------------------------
START_DURATION_1 = 10
START_DURATION_2 = 20

STOP_DURATION_1 = 10
STOP_DURATION_2 = 10
STOP_DURATION_3 = 10

# ---------------------------------------------------------------------------
# Rozmiary buforów komend [bajty]
# ---------------------------------------------------------------------------
PIN_COMMAND_SIZE = 3

START_SEQUENCE_SIZE = (START_DURATION_1 + START_DURATION_2 + 1) * PIN_COMMAND_SIZE
STOP_SEQUENCE_SIZE  = (STOP_DURATION_1 + STOP_DURATION_2 + STOP_DURATION_3 + 1) * PIN_COMMAND_SIZE

FAST_ADDRESS_PHASE_SIZE = 11   # piny + 8 bitów out + piny + 1 bit in
FAST_WRITE_BYTE_SIZE    = 11   # piny + 8 bitów out + piny + 1 bit in
FAST_READ_BYTE_SIZE     = 14   # piny + 8 bitów in + piny + 1 bit out + piny

# ---------------------------------------------------------------------------
# Stałe czasowe [sekundy]
# ---------------------------------------------------------------------------
REPLY_DELAY = 0.001   # 1 ms – między wysłaniem fazy bajtu a odczytem odpowiedzi
