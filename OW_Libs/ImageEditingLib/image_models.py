"""
Image editing data models for Open Watermark.

This module defines core data structures used throughout the image editing system.

Classes:
    ImageRecord: The loaded image buffer together with the path it came from
    ResizePlan: Target dimensions for a watermark that must be scaled down

Type Aliases:
    Position: An (x, y) pixel offset on the target image
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from OW_Libs.pillow_compat import Image

Position = Tuple[int, int]


@dataclass
class ImageRecord:
    path: Path
    image: 'Image.Image'

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size


@dataclass(frozen=True)
class ResizePlan:
    """Dimensions a watermark is scaled to. Both sides are always >= 1."""
    target_width: int
    target_height: int

    def __post_init__(self):
        if self.target_width < 1 or self.target_height < 1:
            raise ValueError(
                f"ResizePlan sides must be >= 1, got {self.target_width}x{self.target_height}"
            )

    @property
    def size(self) -> Tuple[int, int]:
        return (self.target_width, self.target_height)
