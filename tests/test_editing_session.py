"""
Unit tests for editing_session module.

Tests the Empty/Loaded state machine, precondition errors, failure
isolation and the history entries each action leaves behind.
"""

import pytest
from PIL import Image

from OW_Libs.errors import (
    DecodeError,
    ImageIoError,
    InvalidPathError,
    NoImageLoadedError,
    NothingToSaveError,
    NoWatermarkSelectedError,
    OverlayDecodeError,
    UnsupportedFormatError,
)
from OW_Libs.ImageEditingLib.editing_session import ImageEditingSession, SessionState


def descriptions(history):
    return [entry.description for entry in history.entries]


class TestLoad:
    """Tests for ImageEditingSession.load."""

    def test_starts_empty(self, session):
        assert session.state == SessionState.EMPTY
        assert not session.is_loaded

    def test_load_moves_to_loaded(self, session, main_image_path, history):
        record = session.load(main_image_path)

        assert session.state == SessionState.LOADED
        assert record.size == (500, 500)
        assert record.image.mode == "RGBA"
        assert descriptions(history) == ["Loaded image: photo.png"]

    def test_failed_load_keeps_previous_image(self, session, main_image_path, corrupt_file):
        first = session.load(main_image_path)

        with pytest.raises(DecodeError):
            session.load(corrupt_file)

        assert session.record is first
        assert session.state == SessionState.LOADED

    def test_failed_load_from_empty_stays_empty(self, session, corrupt_file, history):
        with pytest.raises(DecodeError):
            session.load(corrupt_file)

        assert session.state == SessionState.EMPTY
        assert descriptions(history) == ["Failed to load image: broken.png"]

    def test_missing_file_is_rejected_before_decoding(self, session, tmp_path, history):
        with pytest.raises(UnsupportedFormatError):
            session.load(tmp_path / "missing.jpg")

        assert session.state == SessionState.EMPTY
        assert len(history) == 0

    def test_unsupported_extension_is_rejected(self, session, main_image_path, tmp_path, history):
        renamed = tmp_path / "photo.txt"
        renamed.write_bytes(main_image_path.read_bytes())

        with pytest.raises(UnsupportedFormatError):
            session.load(renamed)

        assert not session.is_loaded
        assert len(history) == 0

    def test_extension_check_ignores_case(self, session, make_image_file):
        upper = make_image_file("SCAN.JPG", size=(6, 4), color=(1, 2, 3))
        assert session.load(upper).size == (6, 4)

    def test_blank_path(self, session, history):
        with pytest.raises(InvalidPathError):
            session.load("  ")
        assert len(history) == 0

    def test_reload_replaces_buffer(self, session, main_image_path, make_image_file):
        session.load(main_image_path)
        other = make_image_file("second.bmp", size=(7, 9), color=(1, 2, 3))

        record = session.load(other)

        assert record.size == (7, 9)
        assert record.path == other


class TestSelectWatermark:
    """Tests for ImageEditingSession.select_watermark."""

    def test_selects_png(self, session, watermark_path, history):
        selected = session.select_watermark(watermark_path)

        assert selected == watermark_path
        assert session.watermark_path == watermark_path
        assert descriptions(history) == ["Selected watermark: logo.png"]

    def test_rejects_non_png(self, session, make_image_file):
        jpg = make_image_file("logo.jpg")
        with pytest.raises(UnsupportedFormatError):
            session.select_watermark(jpg)
        assert session.watermark_path is None

    def test_rejects_missing_file(self, session, tmp_path):
        with pytest.raises(UnsupportedFormatError):
            session.select_watermark(tmp_path / "nothing.png")

    def test_rejects_blank(self, session):
        with pytest.raises(InvalidPathError):
            session.select_watermark("")


class TestGrayscale:
    """Tests for ImageEditingSession.grayscale."""

    def test_requires_loaded_image(self, session, history):
        with pytest.raises(NoImageLoadedError):
            session.grayscale()

        assert session.state == SessionState.EMPTY
        assert len(history) == 0

    def test_converts_loaded_image(self, session, main_image_path, history):
        session.load(main_image_path)

        session.grayscale()

        r, g, b, a = session.record.image.getpixel((0, 0))
        assert r == g == b
        assert a == 255
        assert descriptions(history)[-1] == "Applied filter: Grayscale"


class TestWatermark:
    """Tests for ImageEditingSession.watermark."""

    def test_requires_loaded_image(self, session, watermark_path):
        session.select_watermark(watermark_path)
        with pytest.raises(NoImageLoadedError):
            session.watermark()

    def test_requires_selected_watermark(self, session, main_image_path):
        session.load(main_image_path)
        with pytest.raises(NoWatermarkSelectedError):
            session.watermark()

    def test_tiles_watermark(self, session, main_image_path, watermark_path, history):
        session.load(main_image_path)
        session.select_watermark(watermark_path)

        positions = session.watermark()

        assert len(positions) == 15
        assert session.record.image.getpixel((450, 450)) == (255, 0, 0, 255)
        assert descriptions(history)[-1] == "Applied watermark pattern"

    def test_transparent_logo_keeps_photo_visible(self, session, make_image_file, tmp_path):
        photo = make_image_file("white.png", size=(100, 100), color=(255, 255, 255, 255))
        logo = make_image_file("sparse.png", size=(20, 20), color=(0, 0, 0, 0))
        with Image.open(logo) as img:
            img = img.convert("RGBA")
            img.putpixel((10, 10), (255, 0, 0, 255))
            img.save(logo)

        session.load(photo)
        session.select_watermark(logo)
        session.watermark()

        assert session.record.image.getpixel((0, 0)) == (255, 255, 255, 255)
        assert session.record.image.getpixel((30, 50)) == (255, 0, 0, 255)

        out = session.save(tmp_path / "out.jpg")
        with Image.open(out) as written:
            r, g, b = written.convert("RGB").getpixel((0, 0))
        assert min(r, g, b) > 200

    def test_watermark_file_removed_after_selection(
        self, session, main_image_path, watermark_path, history
    ):
        session.load(main_image_path)
        session.select_watermark(watermark_path)
        watermark_path.unlink()

        with pytest.raises(OverlayDecodeError):
            session.watermark()

        assert descriptions(history)[-1] == "Failed to apply watermark: logo.png"
        assert session.state == SessionState.LOADED


class TestSave:
    """Tests for ImageEditingSession.save."""

    def test_nothing_to_save(self, session, tmp_path):
        with pytest.raises(NothingToSaveError):
            session.save(tmp_path / "out.jpg")

    def test_saves_jpeg(self, session, main_image_path, tmp_path, history):
        session.load(main_image_path)
        target = tmp_path / "out.jpg"

        saved = session.save(target)

        assert saved == target
        with Image.open(target) as written:
            assert written.format == "JPEG"
            assert written.size == (500, 500)
        assert descriptions(history)[-1] == f"Saved file: {target}"

    def test_blank_save_path(self, session, main_image_path):
        session.load(main_image_path)
        with pytest.raises(InvalidPathError):
            session.save("")

    def test_write_failure_is_recorded(self, session, main_image_path, tmp_path, history):
        session.load(main_image_path)
        target = tmp_path / "missing_dir" / "out.jpg"

        with pytest.raises(ImageIoError):
            session.save(target)

        assert descriptions(history)[-1] == f"Failed to save file: {target}"

    def test_save_does_not_modify_buffer(self, session, main_image_path, tmp_path):
        record = session.load(main_image_path)
        before = record.image.tobytes()

        session.save(tmp_path / "out.jpg")

        assert record.image.tobytes() == before
        assert record.image.mode == "RGBA"


class TestWithoutHistory:
    def test_session_works_without_history(self, main_image_path, tmp_path):
        session = ImageEditingSession()
        session.load(main_image_path)
        session.grayscale()
        assert session.save(tmp_path / "x.jpg").exists()


class TestFullPipeline:
    def test_history_order(self, session, main_image_path, watermark_path, tmp_path, history):
        session.load(main_image_path)
        session.select_watermark(watermark_path)
        session.grayscale()
        session.watermark()
        session.save(tmp_path / "final.jpg")

        assert descriptions(history) == [
            "Loaded image: photo.png",
            "Selected watermark: logo.png",
            "Applied filter: Grayscale",
            "Applied watermark pattern",
            f"Saved file: {tmp_path / 'final.jpg'}",
        ]
        timestamps = [entry.timestamp for entry in history.entries]
        assert timestamps == sorted(timestamps)
