"""
Pytest configuration and shared fixtures for Open Watermark tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import pytest
from pathlib import Path
from PIL import Image

from OW_Libs.HistoryLib.operation_history import OperationHistory
from OW_Libs.ImageEditingLib.editing_session import ImageEditingSession


@pytest.fixture
def make_image_file(tmp_path):
    """
    Provide a factory that writes a solid-color image to tmp_path.

    Args:
        tmp_path: Pytest's built-in temporary directory fixture

    Returns:
        Callable (name, size, color, format) -> Path of the written file
    """
    def _make(name="image.png", size=(40, 30), color=(200, 100, 50, 255), format=None):
        path = tmp_path / name
        mode = "RGBA" if len(color) == 4 else "RGB"
        image = Image.new(mode, size, color)
        if (format or path.suffix.lstrip(".").upper()) in ("JPG", "JPEG", "BMP"):
            image = image.convert("RGB")
        image.save(path, format=format)
        return path

    return _make


@pytest.fixture
def main_image_path(make_image_file):
    return make_image_file("photo.png", size=(500, 500), color=(10, 200, 30, 255))


@pytest.fixture
def watermark_path(make_image_file):
    return make_image_file("logo.png", size=(200, 100), color=(255, 0, 0, 255))


@pytest.fixture
def corrupt_file(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"this is not an image at all")
    return path


@pytest.fixture
def history(tmp_path):
    return OperationHistory(tmp_path / "history.json")


@pytest.fixture
def session(history):
    return ImageEditingSession(history)
