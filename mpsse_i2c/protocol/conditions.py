"""
conditions.py – Warunki START / STOP magistrali I2C
===================================================
Każdy warunek to seria powtórzonych komend stanu pinów; liczba powtórzeń
określa, jak długo silnik trzyma dany stan.

  START   SDA,SCL: 1,1 → 0,1 → 0,0
  ──────
    10 × SCL wysoko, SDA zwolnione (pull-up)     spoczynek
    20 × SCL wysoko, SDA nisko                  ← zbocze START
     1 × SCL nisko,  SDA nisko

  STOP    SDA,SCL: 0,0 → 0,1 → 1,1 → trój-stan
  ─────
    10 × SCL nisko,  SDA nisko
    10 × SCL wysoko, SDA nisko
    10 × SCL wysoko, SDA zwolnione              ← zbocze STOP
     1 × SCL i SDA w trój-stanie                magistrala zwolniona

Oprócz stałych liczb powtórzeń mapa ConditionTimings dodaje opóźnienia
po stronie hosta, osobno dla każdej klasy prędkości (domyślnie zerowe).
Niezerowe opóźnienie środkowe dzieli sekwencję na dwa zapisy wokół
zbocza warunku.
"""

import time

from ..constants import (
    STATUS_OK, STATUS_IO_ERROR,
    START_DURATION_1, START_DURATION_2,
    STOP_DURATION_1, STOP_DURATION_2, STOP_DURATION_3,
    VALUE_SCLHIGH_SDAHIGH, VALUE_SCLHIGH_SDALOW, VALUE_SCLLOW_SDALOW,
    DIRECTION_SCLOUT_SDAOUT, DIRECTION_SCLOUT_SDAIN, DIRECTION_SCLIN_SDAIN,
    SPEED_STANDARD, SPEED_FAST, SPEED_FAST_PLUS, SPEED_HIGH_SPEED,
)
from ..core.channel import channel_speed_tier
from ..utils.log import CommunicationLog
from .commands import set_pins

CONDITION_PHASES = ("pre_start", "start", "post_start", "pre_stop", "stop", "post_stop")
SPEED_TIERS      = (SPEED_STANDARD, SPEED_FAST, SPEED_FAST_PLUS, SPEED_HIGH_SPEED)


class ConditionTimings:
    """
    Minimalny czas [s] utrzymania każdej fazy warunku, osobno dla klasy prędkości.

    Przykład
    --------
    timings = ConditionTimings({SPEED_STANDARD: {"post_stop": 0.0005}})
    send_stop(transport, timings=timings)
    """

    def __init__(self, table: dict[str, dict[str, float]] | None = None):
        self._table = {tier: dict.fromkeys(CONDITION_PHASES, 0.0) for tier in SPEED_TIERS}
        for tier, phases in (table or {}).items():
            if tier not in self._table:
                raise ValueError(f"unknown speed tier: {tier!r}")
            for phase, seconds in phases.items():
                if phase not in CONDITION_PHASES:
                    raise ValueError(f"unknown condition phase: {phase!r}")
                self._table[tier][phase] = float(seconds)

    def delay(self, tier: str, phase: str) -> float:
        return self._table[tier][phase]

    def __repr__(self) -> str:
        return f"ConditionTimings({self._table!r})"


DEFAULT_CONDITION_TIMINGS = ConditionTimings()


# ---------------------------------------------------------------------------
# Budowanie sekwencji
# ---------------------------------------------------------------------------

def _start_pieces() -> tuple[bytearray, bytearray]:
    before = bytearray()
    for _ in range(START_DURATION_1):
        # SDA jako wejście – pull-up podciąga linię
        set_pins(before, VALUE_SCLHIGH_SDAHIGH, DIRECTION_SCLOUT_SDAIN)
    for _ in range(START_DURATION_2):
        set_pins(before, VALUE_SCLHIGH_SDALOW, DIRECTION_SCLOUT_SDAOUT)
    after = bytearray()
    set_pins(after, VALUE_SCLLOW_SDALOW, DIRECTION_SCLOUT_SDAOUT)
    return before, after


def _stop_pieces() -> tuple[bytearray, bytearray]:
    before = bytearray()
    for _ in range(STOP_DURATION_1):
        set_pins(before, VALUE_SCLLOW_SDALOW, DIRECTION_SCLOUT_SDAOUT)
    for _ in range(STOP_DURATION_2):
        set_pins(before, VALUE_SCLHIGH_SDALOW, DIRECTION_SCLOUT_SDAOUT)
    after = bytearray()
    for _ in range(STOP_DURATION_3):
        set_pins(after, VALUE_SCLHIGH_SDAHIGH, DIRECTION_SCLOUT_SDAIN)
    set_pins(after, VALUE_SCLHIGH_SDAHIGH, DIRECTION_SCLIN_SDAIN)
    return before, after


def build_start(buf: bytearray) -> None:
    """Dopisuje sekwencję START do bufora komend."""
    before, after = _start_pieces()
    buf += before
    buf += after


def build_stop(buf: bytearray) -> None:
    """Dopisuje sekwencję STOP do bufora komend."""
    before, after = _stop_pieces()
    buf += before
    buf += after


# ---------------------------------------------------------------------------
# Wysyłanie
# ---------------------------------------------------------------------------

def send_start(
    transport,
    *,
    timings: ConditionTimings = DEFAULT_CONDITION_TIMINGS,
    log:     CommunicationLog | None = None,
) -> int:
    """
    Generuje warunek START na magistrali.

    Zwraca
    ------
    int
        STATUS_OK, status transportu albo STATUS_IO_ERROR przy niepełnym zapisie.
    """
    tier = channel_speed_tier(transport)
    return _send_condition(
        transport, _start_pieces(),
        timings.delay(tier, "pre_start"),
        timings.delay(tier, "start"),
        timings.delay(tier, "post_start"),
        log, "START",
    )


def send_stop(
    transport,
    *,
    timings: ConditionTimings = DEFAULT_CONDITION_TIMINGS,
    log:     CommunicationLog | None = None,
) -> int:
    """
    Generuje warunek STOP i zwalnia magistralę.

    Zwraca
    ------
    int
        STATUS_OK, status transportu albo STATUS_IO_ERROR przy niepełnym zapisie.
    """
    tier = channel_speed_tier(transport)
    return _send_condition(
        transport, _stop_pieces(),
        timings.delay(tier, "pre_stop"),
        timings.delay(tier, "stop"),
        timings.delay(tier, "post_stop"),
        log, "STOP",
    )


def _send_condition(transport, pieces, pre: float, mid: float, post: float, log, step: str) -> int:
    before, after = pieces
    if mid > 0:
        writes = [(before, f"{step} (setup)"), (after, f"{step} (hold)")]
    else:
        writes = [(before + after, step)]

    if pre > 0:
        time.sleep(pre)
    for i, (buf, label) in enumerate(writes):
        if i:
            time.sleep(mid)
        status, written = transport.write(buf, log, label)
        if status != STATUS_OK:
            return status
        if written != len(buf):
            return STATUS_IO_ERROR
    if post > 0:
        time.sleep(post)
    return STATUS_OK
