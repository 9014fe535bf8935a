"""
Image editing session for Open Watermark.

The session owns the single loaded image and runs the editing pipeline
against it: load, grayscale, watermark, save. It has two states:

- Empty: nothing loaded yet
- Loaded: an ImageRecord is present; every transform keeps it Loaded

A failed load leaves the previous state (and image) untouched. Every
successful state change is recorded in the operation history, as is every
failed load, watermark or save. Precondition failures, including a main
image path that is missing or has an unsupported extension, are not recorded.

Classes:
    SessionState: Empty / Loaded
    ImageEditingSession: The pipeline orchestrator
"""

from enum import Enum
from pathlib import Path
from typing import List, Optional, Union
import logging

from OW_Libs.errors import (
    ImageEditorError,
    InvalidPathError,
    NoImageLoadedError,
    NothingToSaveError,
    NoWatermarkSelectedError,
    UnsupportedFormatError,
)
from OW_Libs.HistoryLib.operation_history import OperationHistory
from OW_Libs.ImageEditingLib.grayscale_filter import apply_grayscale
from OW_Libs.ImageEditingLib.image_codec import (
    is_supported_image,
    is_supported_watermark,
    load_image,
    save_image,
)
from OW_Libs.ImageEditingLib.image_models import ImageRecord, Position
from OW_Libs.ImageEditingLib.watermark_compositor import WatermarkCompositor

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class SessionState(Enum):
    EMPTY = "Empty"
    LOADED = "Loaded"


def _clean_path(path: Optional[PathLike], action: str) -> Path:
    if path is None or not str(path).strip():
        raise InvalidPathError(f"The {action} path must not be empty.")
    return Path(str(path).strip())


class ImageEditingSession:
    """Sequential load/transform/save pipeline over one image."""

    def __init__(self, history: Optional[OperationHistory] = None):
        self.history = history
        self.record: Optional[ImageRecord] = None
        self.watermark_path: Optional[Path] = None

    @property
    def state(self) -> SessionState:
        return SessionState.LOADED if self.record is not None else SessionState.EMPTY

    @property
    def is_loaded(self) -> bool:
        return self.record is not None

    def _log(self, description: str) -> None:
        if self.history is not None:
            self.history.record(description)

    def _require_loaded(self) -> ImageRecord:
        if self.record is None:
            raise NoImageLoadedError()
        return self.record

    def load(self, path: PathLike) -> ImageRecord:
        """
        Load a new main image, replacing any current one.

        Args:
            path: Image file (JPEG, PNG or BMP)

        Returns:
            The new ImageRecord

        Raises:
            InvalidPathError: If path is blank
            UnsupportedFormatError: If the file is missing or its extension is
                not .jpg/.jpeg/.png/.bmp
            DecodeError: If the file cannot be decoded; the previous image is kept
        """
        file_path = _clean_path(path, "image")
        if not is_supported_image(file_path):
            raise UnsupportedFormatError(
                f"The file does not exist or is not a JPG/PNG/BMP image: {file_path}"
            )

        try:
            image = load_image(file_path)
        except ImageEditorError:
            self._log(f"Failed to load image: {file_path.name}")
            raise

        previous = self.record
        self.record = ImageRecord(path=file_path, image=image)
        if previous is not None:
            previous.image.close()

        self._log(f"Loaded image: {file_path.name}")
        logger.info(f"Loaded {file_path} ({image.width}x{image.height})")
        return self.record

    def select_watermark(self, path: PathLike) -> Path:
        """
        Choose the PNG file used by later watermark() calls.

        Raises:
            InvalidPathError: If path is blank
            UnsupportedFormatError: If the file is missing or not a PNG
        """
        file_path = _clean_path(path, "watermark")
        if not is_supported_watermark(file_path):
            raise UnsupportedFormatError(
                f"The watermark must be an existing .png file: {file_path}"
            )

        self.watermark_path = file_path
        self._log(f"Selected watermark: {file_path.name}")
        return file_path

    def grayscale(self) -> None:
        """
        Convert the loaded image to grayscale in place.

        Raises:
            NoImageLoadedError: If nothing is loaded
        """
        record = self._require_loaded()
        apply_grayscale(record.image)
        self._log("Applied filter: Grayscale")

    def watermark(self) -> List[Position]:
        """
        Tile the selected watermark over the loaded image.

        Returns:
            Positions where the watermark was placed

        Raises:
            NoImageLoadedError: If nothing is loaded
            NoWatermarkSelectedError: If no watermark was selected
            OverlayDecodeError: If the watermark file cannot be read
        """
        record = self._require_loaded()
        if self.watermark_path is None:
            raise NoWatermarkSelectedError()

        try:
            positions = WatermarkCompositor.compose(record.image, self.watermark_path)
        except ImageEditorError:
            self._log(f"Failed to apply watermark: {self.watermark_path.name}")
            raise

        self._log("Applied watermark pattern")
        return positions

    def save(self, path: PathLike) -> Path:
        """
        Save the loaded image as a maximum-quality JPEG.

        Raises:
            NothingToSaveError: If nothing is loaded
            InvalidPathError: If path is blank
            EncodeError: If encoding fails
            ImageIoError: If writing fails
        """
        if self.record is None:
            raise NothingToSaveError()

        output_path = _clean_path(path, "save")
        try:
            saved = save_image(self.record.image, output_path)
        except ImageEditorError:
            self._log(f"Failed to save file: {output_path}")
            raise

        self._log(f"Saved file: {output_path}")
        logger.info(f"Saved image to {saved}")
        return saved
