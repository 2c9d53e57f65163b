import asyncio
import io
from pathlib import Path

from PIL import Image

from countdown.images import PLACEHOLDER_FILL, is_displayable, load_image_async, load_image_file, thumbnail


def _png(width: int, height: int, color=(255, 0, 0)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


def test_is_displayable_only_for_real_images():
    assert is_displayable(_png(4, 4))
    assert not is_displayable(b"definitely not an image")
    assert not is_displayable(None)
    assert not is_displayable(b"")


def test_load_image_file_returns_bytes_for_images(tmp_path: Path):
    path = tmp_path / "photo.png"
    path.write_bytes(_png(8, 8))

    assert load_image_file(path) == path.read_bytes()


def test_load_image_file_returns_none_for_missing_or_non_image(tmp_path: Path):
    text = tmp_path / "notes.txt"
    text.write_text("hello", encoding="utf-8")

    assert load_image_file(tmp_path / "missing.png") is None
    assert load_image_file(text) is None


def test_load_image_async_yields_single_payload(tmp_path: Path):
    path = tmp_path / "photo.png"
    path.write_bytes(_png(8, 8))

    assert asyncio.run(load_image_async(path)) == path.read_bytes()
    assert asyncio.run(load_image_async(tmp_path / "nope.png")) is None


def test_thumbnail_fills_square_from_wide_image():
    thumb = thumbnail(_png(200, 100, (0, 0, 255)), size=50)

    assert thumb.size == (50, 50)
    assert thumb.getpixel((25, 25)) == (0, 0, 255)


def test_thumbnail_placeholder_for_missing_or_bad_data():
    for data in (None, b"garbage"):
        thumb = thumbnail(data, size=20)
        assert thumb.size == (20, 20)
        assert thumb.getpixel((0, 0)) == PLACEHOLDER_FILL
