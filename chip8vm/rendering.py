"""CHIP-8 rendering utilities for visualization."""

import jax.numpy as jnp
import numpy as np
from typing import Tuple


def display_to_rgb(
    display: jnp.ndarray,
    scale: int = 8,
    on_color: Tuple[int, int, int] = (184, 194, 185),
    off_color: Tuple[int, int, int] = (56, 43, 38),
) -> np.ndarray:
    """Convert CHIP-8 boolean display to RGB array with optional upscaling.

    Args:
        display: Boolean array of shape (32, 64) representing CHIP-8 display
        scale: Upscaling factor for better visibility (default: 8x)
        on_color: RGB color for "on" pixels
        off_color: RGB color for "off" pixels

    Returns:
        RGB array of shape (height*scale, width*scale, 3) with uint8 values
    """
    if scale < 1:
        raise ValueError(f"Scale must be a positive integer, got {scale}")

    pixels = np.array(display, dtype=np.bool_)
    height, width = pixels.shape

    rgb_frame = np.zeros((height, width, 3), dtype=np.uint8)

    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    # Apply upscaling using nearest neighbor interpolation
    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


def create_color_scheme(
    scheme: str = "siirup",
) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Get predefined color schemes for CHIP-8 rendering.

    Args:
        scheme: Color scheme name ("siirup", "classic", "amber", "white", "blue", "retro")

    Returns:
        Tuple of (on_color, off_color) as RGB tuples
    """
    schemes = {
        "siirup": ((184, 194, 185), (56, 43, 38)),  # Pale grey on brown
        "classic": ((0, 255, 0), (0, 0, 0)),  # Green on black
        "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
        "white": ((255, 255, 255), (0, 0, 0)),  # White on black
        "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
        "retro": ((255, 255, 0), (64, 0, 64)),  # Yellow on purple
    }

    if scheme not in schemes:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(schemes.keys())}"
        )

    return schemes[scheme]


def format_display(display: jnp.ndarray, on: str = "#", off: str = ".") -> str:
    """Render the display as text, one line per row."""
    pixels = np.array(display, dtype=np.bool_)
    return "\n".join("".join(on if pixel else off for pixel in row) for row in pixels)
