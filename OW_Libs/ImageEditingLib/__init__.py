"""
ImageEditingLib - Core image editing functionality

This module provides the image codec adapter, the grayscale filter, the
tiled watermark compositor and the editing session that ties them together.
"""

from OW_Libs.ImageEditingLib.image_models import ImageRecord, Position, ResizePlan
from OW_Libs.ImageEditingLib.image_codec import (
    load_image,
    encode_image,
    save_image,
    is_supported_image,
    is_supported_watermark,
)
from OW_Libs.ImageEditingLib.grayscale_filter import apply_grayscale, luma
from OW_Libs.ImageEditingLib.watermark_compositor import WatermarkCompositor
from OW_Libs.ImageEditingLib.editing_session import ImageEditingSession, SessionState

__all__ = [
    "ImageRecord",
    "Position",
    "ResizePlan",
    "load_image",
    "encode_image",
    "save_image",
    "is_supported_image",
    "is_supported_watermark",
    "apply_grayscale",
    "luma",
    "WatermarkCompositor",
    "ImageEditingSession",
    "SessionState",
]
