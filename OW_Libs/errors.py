"""
Error types for Open Watermark.

Every failure an operator can cause is a subclass of ImageEditorError, so the
command layer can report it as a message and keep the shell running.

Classes:
    ImageEditorError: Base class for all recoverable editor failures
    InvalidPathError: Empty or blank path given for a load/save/select
    UnsupportedFormatError: File missing or with an extension that is not allowed
    DecodeError: Bytes could not be parsed as a supported raster format
    OverlayDecodeError: Watermark file could not be decoded
    EncodeError: Image could not be encoded to the output format
    ImageIoError: Encoded bytes could not be written to disk
    NoImageLoadedError: Transform requested with no image loaded
    NoWatermarkSelectedError: Watermark requested with no overlay selected
    NothingToSaveError: Save requested with no image loaded
    HistoryPersistError: History could not be written (reported, never raised)
"""


class ImageEditorError(Exception):
    """Base class for editor failures that are reported, not fatal."""


class InvalidPathError(ImageEditorError):
    pass


class UnsupportedFormatError(ImageEditorError):
    pass


class DecodeError(ImageEditorError):
    pass


class OverlayDecodeError(DecodeError):
    pass


class EncodeError(ImageEditorError):
    pass


class ImageIoError(ImageEditorError):
    pass


class NoImageLoadedError(ImageEditorError):
    def __init__(self, message: str = "Load an image first.") -> None:
        super().__init__(message)


class NoWatermarkSelectedError(ImageEditorError):
    def __init__(self, message: str = "Select a watermark file first.") -> None:
        super().__init__(message)


class NothingToSaveError(ImageEditorError):
    def __init__(self, message: str = "Nothing to save.") -> None:
        super().__init__(message)


class HistoryPersistError(ImageEditorError):
    pass
