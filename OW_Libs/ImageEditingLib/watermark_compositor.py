"""
Tiled Watermark Compositor.

Loads a watermark image, scales it down when it does not fit the target, and
repeats it across the whole target starting at the top-left corner. Tiles are
drawn at full opacity with normal source-over blending, so transparent parts
of the watermark show the image underneath; tiles that run past the right or
bottom edge are clipped by the target.

Sizing rule:
    If the watermark is wider OR taller than the target, it is scaled by

        ratio = (target_width * 0.20) / watermark_width

    on both axes, each side rounded and floored at 1 pixel. The ratio is
    always derived from the widths, so a very tall watermark may still be
    taller than the target after scaling.

Example:
    >>> target = Image.new("RGBA", (500, 500), "white")
    >>> positions = WatermarkCompositor.compose(target, "logo.png")
    >>> positions[:3]
    [(0, 0), (0, 100), (0, 200)]
"""

from pathlib import Path
from typing import Any, List, Optional, Tuple, Union
import logging

from OW_Libs.constants import BUFFER_MODE, MIN_WATERMARK_SIDE, WATERMARK_WIDTH_FACTOR
from OW_Libs.errors import DecodeError, OverlayDecodeError
from OW_Libs.ImageEditingLib.image_codec import load_image
from OW_Libs.ImageEditingLib.image_models import Position, ResizePlan
from OW_Libs.pillow_compat import LANCZOS

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


class WatermarkCompositor:
    """Handles watermark sizing and tiling."""

    @staticmethod
    def plan_resize(
        overlay_size: Tuple[int, int],
        target_size: Tuple[int, int],
    ) -> Optional[ResizePlan]:
        """
        Decide whether the watermark must be scaled and to what size.

        Args:
            overlay_size: (width, height) of the watermark
            target_size: (width, height) of the image being watermarked

        Returns:
            ResizePlan with the new dimensions, or None if the watermark
            already fits within the target on both axes
        """
        overlay_width, overlay_height = overlay_size
        target_width, target_height = target_size

        if overlay_width <= 0 or overlay_height <= 0:
            raise ValueError(f"Invalid watermark size: {overlay_size}")

        if overlay_width <= target_width and overlay_height <= target_height:
            return None

        ratio = (target_width * WATERMARK_WIDTH_FACTOR) / overlay_width
        new_width = max(MIN_WATERMARK_SIDE, _round_half_up(overlay_width * ratio))
        new_height = max(MIN_WATERMARK_SIDE, _round_half_up(overlay_height * ratio))

        return ResizePlan(new_width, new_height)

    @staticmethod
    def tile_positions(
        target_size: Tuple[int, int],
        tile_size: Tuple[int, int],
    ) -> List[Position]:
        """
        List every top-left corner where a tile is placed, column by column.

        Args:
            target_size: (width, height) of the image being watermarked
            tile_size: (width, height) of the (possibly resized) watermark

        Returns:
            List of (x, y) positions; at least [(0, 0)] for a non-empty target
        """
        target_width, target_height = target_size
        tile_width, tile_height = tile_size

        if tile_width < 1 or tile_height < 1:
            raise ValueError(f"Tile size must be at least 1x1, got {tile_size}")

        return [
            (x, y)
            for x in range(0, target_width, tile_width)
            for y in range(0, target_height, tile_height)
        ]

    @staticmethod
    def tile(target: Any, overlay: Any) -> List[Position]:
        """
        Draw the overlay repeatedly over the target, in place.

        Each tile is alpha-composited (source over) at full opacity, so
        transparent watermark pixels leave the image underneath visible.

        Args:
            target: RGBA PIL Image to draw on
            overlay: PIL Image used as the tile (converted to RGBA if needed)

        Returns:
            Positions where the overlay was drawn

        Raises:
            TypeError: If target or overlay is not a PIL Image
            ValueError: If target is not an RGBA image
        """
        if not hasattr(target, "alpha_composite"):
            raise TypeError(f"Expected PIL Image for target, got {type(target)}")
        if not hasattr(overlay, "size"):
            raise TypeError(f"Expected PIL Image for overlay, got {type(overlay)}")
        if target.mode != BUFFER_MODE:
            raise ValueError(f"Target must be {BUFFER_MODE}, got {target.mode}")

        if overlay.mode != BUFFER_MODE:
            overlay = overlay.convert(BUFFER_MODE)

        positions = WatermarkCompositor.tile_positions(target.size, overlay.size)
        for position in positions:
            # Tiles past the right/bottom edge are clipped by Pillow
            target.alpha_composite(overlay, dest=position)

        return positions

    @staticmethod
    def compose(target: Any, overlay_path: Union[str, Path]) -> List[Position]:
        """
        Load a watermark and tile it across the target image.

        Args:
            target: RGBA PIL Image, modified in place
            overlay_path: Path to the watermark file

        Returns:
            Positions where the watermark was drawn

        Raises:
            OverlayDecodeError: If the watermark cannot be read
            TypeError: If target is not a PIL Image
        """
        if not hasattr(target, "alpha_composite"):
            raise TypeError(f"Expected PIL Image for target, got {type(target)}")

        try:
            overlay = load_image(overlay_path)
        except DecodeError as e:
            raise OverlayDecodeError(f"Could not read the watermark file: {e}") from e

        resized = None
        try:
            plan = WatermarkCompositor.plan_resize(overlay.size, target.size)
            if plan is not None:
                logger.debug(
                    f"Resizing watermark from {overlay.width}x{overlay.height} "
                    f"to {plan.target_width}x{plan.target_height}"
                )
                resized = overlay.resize(plan.size, LANCZOS)

            tile_image = resized if resized is not None else overlay
            positions = WatermarkCompositor.tile(target, tile_image)
        finally:
            if resized is not None:
                resized.close()
            overlay.close()

        logger.debug(f"Placed {len(positions)} watermark tiles")
        return positions
