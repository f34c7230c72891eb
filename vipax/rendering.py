"""CHIP-8 rendering utilities for visualization."""
import os
from typing import Tuple

import jax.numpy as jnp
import numpy as np
from PIL import Image

RGB = Tuple[int, int, int]


def unpack_rgba(color: int) -> Tuple[int, int, int, int]:
    """Split a packed ``0xRRGGBBAA`` color into its four channels."""
    color = int(color)
    if not 0 <= color <= 0xFFFFFFFF:
        raise ValueError(f"Color 0x{color:X} does not fit in 32 bits")
    return (color >> 24) & 0xFF, (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF


def unpack_rgb(color: int) -> RGB:
    """Like :func:`unpack_rgba`, dropping the alpha channel."""
    return unpack_rgba(color)[:3]


def display_to_rgb(
    display: jnp.ndarray,
    scale: int = 8,
    on_color: RGB = (0, 255, 0),
    off_color: RGB = (0, 0, 0),
    pixel_outline: bool = False,
) -> np.ndarray:
    """Convert CHIP-8 boolean display to RGB array with optional upscaling.

    Args:
        display: Boolean array of shape (32, 64), row-major
        scale: Upscaling factor for better visibility (default: 8x)
        on_color: RGB color for "on" pixels (default: green)
        off_color: RGB color for "off" pixels (default: black)
        pixel_outline: Draw lit pixels with a one-pixel border in ``off_color``
            so the grid stays visible. Needs ``scale >= 3``.

    Returns:
        RGB array of shape (height*scale, width*scale, 3) with uint8 values
    """
    pixels = np.array(display, dtype=np.bool_)
    height, width = pixels.shape

    rgb_frame = np.zeros((height, width, 3), dtype=np.uint8)
    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    # Nearest neighbor upscaling
    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    if pixel_outline and scale >= 3:
        border = np.zeros((scale, scale), dtype=np.bool_)
        border[[0, -1], :] = True
        border[:, [0, -1]] = True
        outline = np.kron(pixels, border).astype(np.bool_)
        rgb_frame[outline] = off_color

    return rgb_frame


def create_color_scheme(
    scheme: str = "classic",
) -> Tuple[RGB, RGB]:
    """Get predefined color schemes for CHIP-8 rendering.

    Args:
        scheme: Color scheme name ("classic", "amber", "white", "blue", "retro", "pink")

    Returns:
        Tuple of (on_color, off_color) as RGB tuples
    """
    schemes = {
        "classic": ((0, 255, 0), (0, 0, 0)),  # Green on black
        "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
        "white": ((255, 255, 255), (0, 0, 0)),  # White on black
        "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
        "retro": ((255, 255, 0), (64, 0, 64)),  # Yellow on purple
        "pink": (unpack_rgb(0xFFA4FFFF), (0, 0, 0)),  # Default window colors
    }

    if scheme not in schemes:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(schemes.keys())}"
        )

    return schemes[scheme]


def save_screenshot(
    display: jnp.ndarray,
    filename: str | os.PathLike,
    scale: int = 8,
    on_color: RGB = (0, 255, 0),
    off_color: RGB = (0, 0, 0),
    pixel_outline: bool = False,
) -> None:
    """Write the display to an image file (format chosen from the extension)."""
    frame = display_to_rgb(display, scale, on_color, off_color, pixel_outline)
    Image.fromarray(frame).save(filename)
