import pytest

from mpsse_i2c.constants import (
    STATUS_OK, STATUS_NOT_SUPPORTED,
    I2C_DISABLE_3PHASE_CLOCKING, I2C_ENABLE_DRIVE_ONLY_ZERO,
    I2C_CLOCK_STANDARD_MODE, I2C_CLOCK_FAST_MODE,
    I2C_CLOCK_FAST_MODE_PLUS, I2C_CLOCK_HIGH_SPEED_MODE,
    SPEED_STANDARD, SPEED_FAST, SPEED_FAST_PLUS, SPEED_HIGH_SPEED,
)
from mpsse_i2c.core.channel import (
    ChannelConfig, init_channel, get_channel_config, speed_tier, channel_speed_tier,
)


def test_three_phase_clocking_scales_clock(engine):
    config = ChannelConfig(I2C_CLOCK_FAST_MODE, 2, I2C_ENABLE_DRIVE_ONLY_ZERO)

    assert init_channel(engine, config) == STATUS_OK
    assert engine.clock_calls == [(600_000, 2, I2C_ENABLE_DRIVE_ONLY_ZERO)]
    assert engine.writes == [b"\x8C"]
    assert engine.three_phase_commands == 1


def test_three_phase_clocking_disabled(engine):
    config = ChannelConfig(I2C_CLOCK_STANDARD_MODE, 5, I2C_DISABLE_3PHASE_CLOCKING)

    assert init_channel(engine, config) == STATUS_OK
    assert engine.clock_calls == [(100_000, 5, I2C_DISABLE_3PHASE_CLOCKING)]
    assert engine.writes == []


def test_config_is_cached_unchanged(engine):
    config = ChannelConfig(I2C_CLOCK_FAST_MODE_PLUS)
    assert get_channel_config(engine) is None

    init_channel(engine, config)
    assert get_channel_config(engine) is config
    assert get_channel_config(engine).clock_rate == I2C_CLOCK_FAST_MODE_PLUS


def test_failed_rate_setter_is_reported(engine):
    engine.clock_status = STATUS_NOT_SUPPORTED

    assert init_channel(engine, ChannelConfig()) == STATUS_NOT_SUPPORTED
    assert engine.writes == []
    assert get_channel_config(engine) is None


@pytest.mark.parametrize("clock, tier", [
    (I2C_CLOCK_STANDARD_MODE,   SPEED_STANDARD),
    (I2C_CLOCK_FAST_MODE,       SPEED_FAST),
    (I2C_CLOCK_FAST_MODE_PLUS,  SPEED_FAST_PLUS),
    (I2C_CLOCK_HIGH_SPEED_MODE, SPEED_HIGH_SPEED),
    (50_000,                    SPEED_STANDARD),
])
def test_speed_tier(clock, tier):
    assert speed_tier(clock) == tier


def test_channel_speed_tier_before_and_after_init(engine):
    assert channel_speed_tier(engine) == SPEED_STANDARD
    init_channel(engine, ChannelConfig(I2C_CLOCK_HIGH_SPEED_MODE))
    assert channel_speed_tier(engine) == SPEED_HIGH_SPEED
