"""
Constants and configuration values for Open Watermark.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the application.
"""

# History file constants
HISTORY_FILE_NAME = "history.json"
HISTORY_ENCODING = "utf-8"
HISTORY_INDENT = 2

# History entry field names (fixed by the on-disk format)
FIELD_OPERATION = "Operation"
FIELD_TIME = "Time"

# Image decoding
BUFFER_MODE = "RGBA"
READ_FORMATS = ("JPEG", "PNG", "BMP")

# Image encoding (fixed policy, not user configurable)
OUTPUT_FORMAT = "JPEG"
OUTPUT_MODE = "RGB"
OUTPUT_QUALITY = 100

# Luma weights for grayscale conversion
LUMA_RED = 0.21
LUMA_GREEN = 0.72
LUMA_BLUE = 0.07

# Watermark sizing
WATERMARK_WIDTH_FACTOR = 0.20
MIN_WATERMARK_SIDE = 1

# Supported file formats
SUPPORTED_STANDARD_IMAGES = {".jpg", ".jpeg", ".png", ".bmp"}
SUPPORTED_WATERMARKS = {".png"}

# Console menu
MENU_TITLE = "=== Watermark Console Editor ==="
MENU_PROMPT = "Select an option: "
PATH_QUOTE_CHARS = "\"'"
HISTORY_TIME_FORMAT = "%H:%M:%S"

# Log format
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
