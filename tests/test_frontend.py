"""Tests for pygame event handling."""

import numpy as np
import pygame
import pytest
from vipax import RUNNING, PAUSED, HALTED
from vipax.frontend import KEY_MAP, handle_event


def key_event(kind, key):
    return pygame.event.Event(kind, key=key)


@pytest.fixture
def keypad():
    return np.zeros(16, dtype=bool)


def test_keymap_covers_keypad():
    assert sorted(KEY_MAP.values()) == list(range(16))


def test_key_down_and_up(fresh_state, keypad):
    state = handle_event(fresh_state, keypad, key_event(pygame.KEYDOWN, pygame.K_w))
    assert keypad[0x5]
    assert state.status == RUNNING

    handle_event(state, keypad, key_event(pygame.KEYUP, pygame.K_w))
    assert not keypad.any()


def test_cosmac_layout(fresh_state, keypad):
    handle_event(fresh_state, keypad, key_event(pygame.KEYDOWN, pygame.K_x))
    handle_event(fresh_state, keypad, key_event(pygame.KEYDOWN, pygame.K_v))
    assert keypad[0x0]
    assert keypad[0xF]


def test_unmapped_key_is_ignored(fresh_state, keypad):
    state = handle_event(fresh_state, keypad, key_event(pygame.KEYDOWN, pygame.K_p))
    assert not keypad.any()
    assert state is fresh_state


def test_space_toggles_pause(fresh_state, keypad):
    state = handle_event(fresh_state, keypad, key_event(pygame.KEYDOWN, pygame.K_SPACE))
    assert state.status == PAUSED

    state = handle_event(state, keypad, key_event(pygame.KEYDOWN, pygame.K_SPACE))
    assert state.status == RUNNING


@pytest.mark.parametrize("event", [
    pygame.event.Event(pygame.QUIT),
    pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE),
])
def test_quit_halts(fresh_state, keypad, event):
    state = handle_event(fresh_state, keypad, event)
    assert state.status == HALTED
