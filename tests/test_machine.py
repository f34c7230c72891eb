"""Tests for the execution state and frame scheduling."""

import jax.numpy as jnp
import numpy as np
import pytest
from vipax import (
    step, run_frame, run_instructions, toggle_pause, halt, is_running, is_halted,
    set_keypad, clear_draw_flag, instructions_per_frame, RUNNING, PAUSED, HALTED,
)
from conftest import program_state


def counting_program(length=32):
    """``length`` copies of 7001 (V0 += 1)."""
    return program_state(*([0x7001] * length))


class TestLifecycle:

    def test_starts_running(self, fresh_state):
        assert fresh_state.status == RUNNING
        assert is_running(fresh_state)
        assert not is_halted(fresh_state)

    def test_toggle_pause(self, fresh_state):
        state = toggle_pause(fresh_state)
        assert state.status == PAUSED
        assert not is_running(state)

        state = toggle_pause(state)
        assert state.status == RUNNING

    def test_halt_is_terminal(self, fresh_state):
        state = halt(toggle_pause(fresh_state))
        assert state.status == HALTED

        state = toggle_pause(state)
        assert state.status == HALTED
        assert is_halted(state)


class TestRunFrame:

    def test_runs_exactly_n_instructions(self):
        state = run_frame(counting_program(), 11)

        assert state.V[0] == 11
        assert state.pc == 0x200 + 2 * 11

    def test_ticks_timers_once(self):
        state = counting_program()
        state = state.replace(
            delay_timer=jnp.uint8(10),
            sound_timer=jnp.uint8(1),
        )

        state = run_frame(state, 5)

        assert state.delay_timer == 9
        assert state.sound_timer == 0

    @pytest.mark.parametrize("control", [toggle_pause, halt])
    def test_stopped_machine_does_nothing(self, control):
        state = control(counting_program()).replace(delay_timer=jnp.uint8(5))

        new_state = run_frame(state, 10)

        assert new_state.pc == state.pc
        assert new_state.V[0] == 0
        assert new_state.delay_timer == 5

    def test_resume_after_pause(self):
        state = toggle_pause(counting_program())
        state = run_frame(state, 4)
        state = run_frame(toggle_pause(state), 4)

        assert state.V[0] == 4

    def test_run_instructions_ignores_timers(self):
        state = counting_program().replace(delay_timer=jnp.uint8(3))
        state = run_instructions(state, 3)

        assert state.V[0] == 3
        assert state.delay_timer == 3


class TestHostInterface:

    def test_instructions_per_frame(self):
        assert instructions_per_frame(700, 60) == 11
        assert instructions_per_frame(600) == 10
        assert instructions_per_frame(60, 60) == 1

    @pytest.mark.parametrize("ips,fps", [(0, 60), (700, 0), (-1, 60)])
    def test_instructions_per_frame_rejects_bad_rates(self, ips, fps):
        with pytest.raises(ValueError):
            instructions_per_frame(ips, fps)

    def test_set_keypad(self, fresh_state):
        keys = np.zeros(16, dtype=bool)
        keys[[0x1, 0xF]] = True

        state = set_keypad(fresh_state, keys)

        assert state.keypad[0x1]
        assert state.keypad[0xF]
        assert int(state.keypad.sum()) == 2

    def test_set_keypad_rejects_wrong_shape(self, fresh_state):
        with pytest.raises(ValueError):
            set_keypad(fresh_state, np.zeros(8, dtype=bool))

    def test_clear_draw_flag(self):
        state = step(program_state(0x00E0))
        assert state.draw_flag

        state = clear_draw_flag(state)
        assert not state.draw_flag


def test_end_to_end_program():
    """6005, 7003, 00E0: V0 = 8 and a blank screen after three instructions."""
    state = program_state(0x6005, 0x7003, 0x00E0)
    state = state.replace(display=state.display.at[3, 4].set(True))

    for _ in range(3):
        state = step(state)

    assert state.V[0] == 8
    assert not state.display.any()
    assert state.pc == 0x206


def test_countdown_loop():
    """A delay-timer wait loop only exits once frames have ticked the timer down."""
    state = program_state(
        0x6003,  # 200: V0 = 3
        0xF015,  # 202: DT = V0
        0xF107,  # 204: V1 = DT
        0x3100,  # 206: skip if V1 == 0
        0x1204,  # 208: jump 204
        0x6A01,  # 20A: VA = 1
        0x120C,  # 20C: halt loop
    )

    state = run_frame(state, 2)
    assert state.delay_timer == 2

    for _ in range(4):
        state = run_frame(state, 6)

    assert state.V[0xA] == 1
    assert state.pc == 0x20C
