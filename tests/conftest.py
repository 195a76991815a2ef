"""
Simulated MPSSE command engine used as the transport in every test.

FakeEngine parses each command buffer it receives:
  • 8-bit clock-outs are recorded as bytes on the wire (engine.wire)
  • 1-bit clock-outs are the master's ACK/NACK bits (engine.acks_given)
  • 1-bit clock-ins answer with the next scripted ACK level (engine.acks,
    0 = ACK when the script runs out)
  • 8-bit clock-ins answer with the next scripted data byte (engine.data)
"""

import pytest

from mpsse_i2c.constants import (
    STATUS_OK, STATUS_IO_ERROR,
    MPSSE_CMD_SET_DATA_BITS_LOWBYTE, MPSSE_CMD_DATA_OUT_BITS_NEG_EDGE,
    MPSSE_CMD_DATA_IN_BITS_POS_EDGE, MPSSE_CMD_SEND_IMMEDIATE,
    MPSSE_CMD_ENABLE_3PHASE_CLOCKING,
)
from mpsse_i2c.core.transport import ChannelTransport
from mpsse_i2c.protocol.conditions import build_start, build_stop


def _sequence(builder) -> bytes:
    buf = bytearray()
    builder(buf)
    return bytes(buf)


START = _sequence(build_start)
STOP  = _sequence(build_stop)


class FakeEngine(ChannelTransport):

    def __init__(self, acks=None, data=None):
        super().__init__()
        self.acks = list(acks or [])
        self.data = list(data or [])

        self.writes: list[bytes] = []
        self.reads:  list[bytes] = []
        self.wire:   list[int]   = []
        self.acks_given: list[int] = []
        self.pins:   list[tuple[int, int]] = []
        self.clock_calls: list[tuple[int, int, int]] = []
        self.three_phase_commands = 0
        self.purges = 0
        self.closed = False

        # Failure injection (indices of write/read calls)
        self.fail_write_at: int | None = None
        self.short_write_at: int | None = None
        self.fail_read_at: int | None = None
        self.clock_status = STATUS_OK

        self._pending = bytearray()
        self._read_calls = 0

    # ------------------------------------------------------------------
    # ChannelTransport
    # ------------------------------------------------------------------

    def _write(self, data: bytes) -> tuple[int, int]:
        index = len(self.writes)
        self.writes.append(bytes(data))
        if index == self.fail_write_at:
            return STATUS_IO_ERROR, 0
        self._execute(data)
        if index == self.short_write_at:
            return STATUS_OK, len(data) - 1
        return STATUS_OK, len(data)

    def _read(self, count: int) -> tuple[int, bytes]:
        index = self._read_calls
        self._read_calls += 1
        if index == self.fail_read_at:
            return STATUS_IO_ERROR, b""
        reply = bytes(self._pending[:count])
        del self._pending[:count]
        self.reads.append(reply)
        return STATUS_OK, reply

    def purge(self) -> int:
        self.purges += 1
        self._pending.clear()
        return STATUS_OK

    def set_clock_and_latency(self, clock_hz: int, latency: int, options: int) -> int:
        self.clock_calls.append((clock_hz, latency, options))
        return self.clock_status

    def close(self) -> None:
        self.closed = True

    # ------------------------------------------------------------------
    # Command parser
    # ------------------------------------------------------------------

    def _execute(self, buf: bytes) -> None:
        i = 0
        while i < len(buf):
            opcode = buf[i]
            if opcode == MPSSE_CMD_SET_DATA_BITS_LOWBYTE:
                self.pins.append((buf[i + 1], buf[i + 2]))
                i += 3
            elif opcode == MPSSE_CMD_DATA_OUT_BITS_NEG_EDGE:
                bits, value = buf[i + 1] + 1, buf[i + 2]
                if bits == 8:
                    self.wire.append(value)
                else:
                    self.acks_given.append(value)
                i += 3
            elif opcode == MPSSE_CMD_DATA_IN_BITS_POS_EDGE:
                bits = buf[i + 1] + 1
                if bits == 1:
                    self._pending.append(self.acks.pop(0) if self.acks else 0)
                else:
                    self._pending.append(self.data.pop(0) if self.data else 0xFF)
                i += 2
            elif opcode == MPSSE_CMD_SEND_IMMEDIATE:
                i += 1
            elif opcode == MPSSE_CMD_ENABLE_3PHASE_CLOCKING:
                self.three_phase_commands += 1
                i += 1
            else:
                raise AssertionError(f"unexpected opcode 0x{opcode:02X} at offset {i}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def count_starts(self) -> int:
        return sum(w.count(START) for w in self.writes)

    def count_stops(self) -> int:
        return sum(w.count(STOP) for w in self.writes)

    @property
    def locked(self) -> bool:
        return self._lock.locked()


@pytest.fixture(autouse=True)
def no_reply_delay(monkeypatch):
    monkeypatch.setattr("mpsse_i2c.protocol.primitives.REPLY_DELAY", 0.0)


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def start_sequence():
    return START


@pytest.fixture
def stop_sequence():
    return STOP
