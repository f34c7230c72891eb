from functools import partial
from typing import Optional

import jax
import jax.numpy as jnp
import numpy as np

from vipax.emulator import load_program, RomLoadError
from vipax.state import EmulatorState, create_state
from vipax.constants import MAX_PROGRAM_SIZE
from vipax.logging import fori_loop_with_progress
from vipax.machine import run_frame, set_keypad, instructions_per_frame
from vipax.rendering import display_to_rgb, create_color_scheme


class Runner:
    """Run a CHIP-8 program frame by frame under a fixed scheduling policy.

    Each frame executes ``instruction_frequency // fps`` instructions followed
    by one timer tick, so a run is reproducible for a given rate and seed.
    """

    def __init__(
        self,
        program: bytes,
        instruction_frequency: int = 700,
        fps: int = 60,
        render_scale: int = 8,
        color_scheme: str = "classic",
    ):
        """Initialize the runner.

        Args:
            program: Raw program image, loaded at 0x200 on reset
            instruction_frequency: CHIP-8 CPU frequency in Hz (typically 700)
            fps: Frame and timer rate (typically 60)
            render_scale: Upscaling factor for rendered frames
            color_scheme: Color scheme used by :meth:`render`
        """
        if len(program) > MAX_PROGRAM_SIZE:
            raise RomLoadError(
                f"Program is {len(program)} bytes, at most {MAX_PROGRAM_SIZE} bytes fit in memory"
            )
        self.program = bytes(program)
        self.instruction_frequency = instruction_frequency
        self.fps = fps
        self.render_scale = render_scale
        self.color_scheme = color_scheme
        # Validates the rates as a side effect
        self._instructions_per_frame = instructions_per_frame(instruction_frequency, fps)

    @classmethod
    def from_file(cls, rom_path: str, **kwargs) -> "Runner":
        """Build a runner from a ROM file."""
        try:
            with open(rom_path, 'rb') as f:
                program = f.read()
        except OSError as e:
            raise RomLoadError(f"Cannot read ROM '{rom_path}': {e}") from e
        return cls(program, **kwargs)

    @property
    def instructions_per_frame(self) -> int:
        """Number of CHIP-8 instructions executed per frame."""
        return self._instructions_per_frame

    def reset(self, rng: Optional[jax.Array] = None) -> EmulatorState:
        """Return a fresh state with the program loaded."""
        return load_program(create_state(rng), self.program)

    @partial(jax.jit, static_argnums=0)
    def step(self, state: EmulatorState, keypad: jnp.ndarray) -> EmulatorState:
        """Latch ``keypad`` and run one frame."""
        state = state.replace(keypad=jnp.asarray(keypad, dtype=jnp.bool_))
        return run_frame(state, self.instructions_per_frame)

    def run(self, state: EmulatorState, num_frames: int, progress: bool = False) -> EmulatorState:
        """Run ``num_frames`` frames with the current keypad held down."""
        if num_frames <= 0:
            return state
        return self._run_frames(state, num_frames, progress)

    @partial(jax.jit, static_argnums=(0, 2, 3))
    def _run_frames(self, state: EmulatorState, num_frames: int, progress: bool) -> EmulatorState:
        def body(i, state):
            return run_frame(state, self.instructions_per_frame)

        if progress:
            body = fori_loop_with_progress(num_frames)(body)

        return jax.lax.fori_loop(0, num_frames, body, state)

    def press(self, state: EmulatorState, *keys: int) -> EmulatorState:
        """Return ``state`` with exactly ``keys`` held down."""
        keypad = np.zeros(16, dtype=bool)
        keypad[list(keys)] = True
        return set_keypad(state, keypad)

    def render(self, state: EmulatorState) -> np.ndarray:
        """Render the display as an RGB array of shape (32*scale, 64*scale, 3)."""
        on_color, off_color = create_color_scheme(self.color_scheme)
        return display_to_rgb(
            state.display,
            scale=self.render_scale,
            on_color=on_color,
            off_color=off_color,
        )
