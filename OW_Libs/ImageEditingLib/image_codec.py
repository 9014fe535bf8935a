"""
Image codec adapter for Open Watermark.

Wraps Pillow's decoders and encoders behind the editor's error types. Reading
accepts JPEG, PNG and BMP and always yields an RGBA buffer; writing always
produces a maximum-quality JPEG.

Functions:
    load_image: Decode a file into an RGBA Pillow image
    encode_image: Encode an image to JPEG bytes in memory
    save_image: Encode then atomically write an image to disk
    is_supported_image: Check a main-image path before loading
    is_supported_watermark: Check a watermark path before selecting it
"""

from io import BytesIO
from pathlib import Path
from typing import Any, Iterable, Union
import logging

from OW_Libs.atomic_write import write_atomically
from OW_Libs.constants import (
    BUFFER_MODE,
    OUTPUT_FORMAT,
    OUTPUT_MODE,
    OUTPUT_QUALITY,
    READ_FORMATS,
    SUPPORTED_STANDARD_IMAGES,
    SUPPORTED_WATERMARKS,
)
from OW_Libs.errors import DecodeError, EncodeError, ImageIoError, InvalidPathError
from OW_Libs.pillow_compat import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _require_path(path: PathLike, action: str) -> Path:
    if path is None or not str(path).strip():
        raise InvalidPathError(f"The {action} path must not be empty.")
    return Path(str(path).strip())


def _has_extension(path: PathLike, extensions: Iterable[str]) -> bool:
    if path is None or not str(path).strip():
        return False
    file_path = Path(str(path).strip())
    return file_path.is_file() and file_path.suffix.lower() in extensions


def is_supported_image(path: PathLike) -> bool:
    """
    Check that a main image path exists and has a JPG/JPEG/PNG/BMP extension.

    Args:
        path: Candidate file path

    Returns:
        True if the file exists and its extension is supported
    """
    return _has_extension(path, SUPPORTED_STANDARD_IMAGES)


def is_supported_watermark(path: PathLike) -> bool:
    """Check that a watermark path exists and is a PNG file."""
    return _has_extension(path, SUPPORTED_WATERMARKS)


def load_image(path: PathLike, formats: Iterable[str] = READ_FORMATS) -> Any:
    """
    Decode an image file into an RGBA buffer.

    Any problem reading or parsing the file (missing file, unknown or
    disallowed format, truncated data) is reported as a single DecodeError.

    Args:
        path: File to read
        formats: Pillow format names allowed for decoding

    Returns:
        Fully loaded PIL Image in RGBA mode

    Raises:
        InvalidPathError: If path is empty or blank
        DecodeError: If the file cannot be decoded
    """
    file_path = _require_path(path, "image")

    try:
        with Image.open(file_path, formats=list(formats)) as img:
            img.load()
            logger.debug(f"Decoded {file_path} ({img.format} {img.mode} {img.width}x{img.height})")
            if img.mode != BUFFER_MODE:
                return img.convert(BUFFER_MODE)
            return img.copy()
    except (OSError, UnidentifiedImageError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(
            f"Unsupported file format or damaged file: {file_path} ({e})"
        ) from e


def encode_image(image: Any) -> bytes:
    """
    Encode an image as a maximum-quality JPEG entirely in memory.

    Args:
        image: PIL Image (RGBA is flattened to RGB)

    Returns:
        The encoded bytes

    Raises:
        EncodeError: If Pillow cannot encode the image
    """
    if not hasattr(image, "save"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")

    buffer = BytesIO()
    try:
        if image.mode != OUTPUT_MODE:
            image = image.convert(OUTPUT_MODE)
        image.save(buffer, format=OUTPUT_FORMAT, quality=OUTPUT_QUALITY)
    except (OSError, ValueError, KeyError) as e:
        raise EncodeError(f"Failed to encode image: {e}") from e

    return buffer.getvalue()


def save_image(image: Any, path: PathLike) -> Path:
    """
    Save an image as JPEG without ever leaving a partial file behind.

    The whole byte stream is produced before the destination is touched; the
    bytes then go to a temporary file beside the destination which replaces
    it in one step. A new file gets the usual umask-derived permissions and
    an overwritten one keeps its own.

    Args:
        image: PIL Image to save
        path: Destination file

    Returns:
        Path the image was written to

    Raises:
        InvalidPathError: If path is empty or blank
        EncodeError: If encoding fails
        ImageIoError: If the file cannot be written
    """
    output_file = _require_path(path, "save")
    data = encode_image(image)

    try:
        return write_atomically(output_file, data)
    except OSError as e:
        raise ImageIoError(f"Failed to save image to {output_file}: {e}") from e
