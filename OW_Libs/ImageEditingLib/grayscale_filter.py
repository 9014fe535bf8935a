"""
Grayscale conversion for Open Watermark.

Converts an RGBA image to gray using fixed luma weights:

    gray = round(0.21 * R + 0.72 * G + 0.07 * B)

The result is written back into the same image object, alpha untouched.

Example:
    >>> img = Image.new("RGBA", (2, 2), (200, 100, 50, 128))
    >>> apply_grayscale(img) is img
    True
    >>> img.getpixel((0, 0))
    (118, 118, 118, 128)
"""

from typing import Any

import numpy as np

from OW_Libs.constants import BUFFER_MODE, LUMA_BLUE, LUMA_GREEN, LUMA_RED
from OW_Libs.pillow_compat import Image


def luma(red: int, green: int, blue: int) -> int:
    """Gray level for a single RGB triple, rounded half up and clamped."""
    value = red * LUMA_RED + green * LUMA_GREEN + blue * LUMA_BLUE
    return max(0, min(255, int(value + 0.5)))


def apply_grayscale(image: Any) -> Any:
    """
    Convert an RGBA image to grayscale in place.

    Args:
        image: PIL Image in RGBA mode

    Returns:
        The same image object, now with R == G == B for every pixel

    Raises:
        TypeError: If image is not a PIL Image
        ValueError: If image is not in RGBA mode
    """
    if not hasattr(image, "mode") or not hasattr(image, "paste"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")

    if image.mode != BUFFER_MODE:
        raise ValueError(f"Expected an {BUFFER_MODE} image, got {image.mode}")

    pixels = np.asarray(image, dtype=np.float64)
    gray = (
        pixels[..., 0] * LUMA_RED
        + pixels[..., 1] * LUMA_GREEN
        + pixels[..., 2] * LUMA_BLUE
    )
    gray = np.clip(np.floor(gray + 0.5), 0, 255).astype(np.uint8)

    result = np.empty(pixels.shape, dtype=np.uint8)
    result[..., 0] = gray
    result[..., 1] = gray
    result[..., 2] = gray
    result[..., 3] = pixels[..., 3].astype(np.uint8)

    image.paste(Image.fromarray(result))
    return image
