from __future__ import annotations

import asyncio
import io
import logging
from pathlib import Path
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

log = logging.getLogger(__name__)

PLACEHOLDER_FILL = (204, 204, 204)


def _open(data: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


def is_displayable(data: Optional[bytes]) -> bool:
    if not data:
        return False
    try:
        _open(data)
    except (UnidentifiedImageError, OSError, ValueError):
        return False
    return True


def load_image_file(path: str | Path) -> Optional[bytes]:
    """Raw bytes of an image file, or None when there is nothing usable to attach."""
    p = Path(path).expanduser()
    try:
        data = p.read_bytes()
    except OSError as exc:
        log.info("No image loaded from %s: %s", p, exc)
        return None
    if not is_displayable(data):
        log.info("No image loaded from %s: not a recognised image format", p)
        return None
    return data


async def load_image_async(path: str | Path) -> Optional[bytes]:
    return await asyncio.to_thread(load_image_file, path)


def thumbnail(data: Optional[bytes], size: int = 50) -> Image.Image:
    """
    Square RGB thumbnail, center-cropped to fill the square.
    Missing or undecodable data gives a grey placeholder of the same size.
    """
    if data:
        try:
            img = _open(data)
        except (UnidentifiedImageError, OSError, ValueError):
            img = None
        if img is not None:
            return ImageOps.fit(img.convert("RGB"), (size, size))
    return Image.new("RGB", (size, size), PLACEHOLDER_FILL)
