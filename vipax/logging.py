"""Console logging for the Vipax interpreter.

Three pieces live here: a levelled console logger shared by the whole
package, reporters that let JIT-compiled instruction handlers log through
``jax.debug.callback``, and a tqdm progress bar for long ``fori_loop`` runs.
"""

import sys
import time
from typing import Callable, Optional

import jax
from jax.experimental import io_callback
from tqdm import tqdm

from vipax.decode import disassemble

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_ANSI = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
_RESET = "\033[0m"


class ConsoleLogger:
    """Print ``[time][LEVEL][name] message`` lines to stdout.

    Colors are only used when stdout is a terminal.
    """

    def __init__(
        self,
        name: str = "Vipax",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.use_colors = use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()
        self.set_level(log_level)

    def set_level(self, log_level: str):
        """Change the minimum level that gets printed."""
        level = log_level.upper()
        if level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")
        self.log_level = level

    def enabled_for(self, level: str) -> bool:
        return LEVELS.index(level) >= LEVELS.index(self.log_level)

    def format(self, level: str, message: str) -> str:
        tag = f"[{level:>8s}]"
        if self.use_colors:
            tag = f"{_ANSI[level]}{tag}{_RESET}"
        elapsed = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        return f"{elapsed}{tag}[{self.name}] {message}"

    def log(self, level: str, message: str):
        level = level.upper()
        if self.enabled_for(level):
            print(self.format(level, message), flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


_logger = ConsoleLogger()


def get_logger() -> ConsoleLogger:
    """Return the package-wide logger."""
    return _logger


# Reporting from traced code. The callbacks run on the host with concrete
# values, so they only fire for branches that actually execute.

def _instruction_address(pc) -> str:
    return f"0x{(int(pc) - 2) & 0xFFFF:03X}"


def _log_unknown_instruction(instruction, pc):
    _logger.warning(
        f"Unknown instruction 0x{int(instruction):04X} ({disassemble(instruction)}) "
        f"at {_instruction_address(pc)}, ignored"
    )


def _log_stack_overflow(pc):
    _logger.warning(f"Stack overflow on call at {_instruction_address(pc)}, call ignored")


def _log_stack_underflow(pc):
    _logger.warning(f"Stack underflow on return at {_instruction_address(pc)}, return ignored")


def report_unknown_instruction(instruction, pc):
    """Log an unknown opcode. ``pc`` is the already-advanced program counter."""
    jax.debug.callback(_log_unknown_instruction, instruction, pc)


def report_stack_overflow(pc):
    jax.debug.callback(_log_stack_overflow, pc)


def report_stack_underflow(pc):
    jax.debug.callback(_log_stack_underflow, pc)


class _HostProgressBar:
    """tqdm bar driven from inside a compiled loop through ``io_callback``."""

    def __init__(self, total: int, desc: str, tqdm_kwargs: dict):
        self.total = total
        self.desc = desc
        self.tqdm_kwargs = tqdm_kwargs
        self.bar = None

    def open(self):
        self.bar = tqdm(total=self.total, desc=self.desc, unit="frame", **self.tqdm_kwargs)

    def advance(self, count, done):
        if self.bar is None:
            return
        self.bar.update(int(count))
        if int(done) == self.total:
            self.bar.close()
            self.bar = None


def fori_loop_with_progress(
    n: int,
    print_rate: Optional[int] = None,
    desc: Optional[str] = None,
    **tqdm_kwargs,
) -> Callable:
    """Decorate a ``fori_loop`` body so it drives a tqdm bar of ``n`` frames.

    The bar advances after the body has run, every ``print_rate`` completed
    iterations and once more for the final partial batch, so it always
    finishes at ``n``.
    """
    if print_rate is None:
        print_rate = max(1, min(n // 20, 50))
    print_rate = max(1, min(print_rate, n))
    if desc is None:
        desc = f"Running ({n:,} frames)"
    for reserved in ("total", "unit"):
        tqdm_kwargs.pop(reserved, None)

    progress = _HostProgressBar(n, desc, tqdm_kwargs)

    def _decorator(body):
        def wrapped(i, carry):
            jax.lax.cond(
                i == 0,
                lambda _: io_callback(progress.open, None, ordered=True),
                lambda _: None,
                operand=None,
            )

            carry = body(i, carry)

            done = i + 1
            # Frames completed since the previous update
            count = done - ((done - 1) // print_rate) * print_rate
            jax.lax.cond(
                (done % print_rate == 0) | (done == n),
                lambda _: io_callback(progress.advance, None, count, done, ordered=True),
                lambda _: None,
                operand=None,
            )
            return carry

        return wrapped

    return _decorator
