"""Tests for the delay and sound timers."""

import jax.numpy as jnp
import pytest
from vipax import tick_timers


def with_timers(state, delay, sound):
    return state.replace(
        delay_timer=jnp.asarray(delay, dtype=jnp.uint8),
        sound_timer=jnp.asarray(sound, dtype=jnp.uint8),
    )


@pytest.mark.parametrize("value,expected", [(0, 0), (1, 0), (2, 1), (255, 254)])
def test_tick_floors_at_zero(fresh_state, value, expected):
    state = tick_timers(with_timers(fresh_state, value, value))
    assert state.delay_timer == expected
    assert state.sound_timer == expected


def test_timers_are_independent(fresh_state):
    state = with_timers(fresh_state, 3, 0)

    state = tick_timers(state)
    assert state.delay_timer == 2
    assert state.sound_timer == 0

    state = tick_timers(tick_timers(state))
    assert state.delay_timer == 0
    assert state.sound_timer == 0
