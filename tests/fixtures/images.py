"""
Image Fixtures

Pillow-generated source images so no binary fixtures live in the repo.
"""

import io
from pathlib import Path

from PIL import Image


def make_image(width: int = 200, height: int = 100, mode: str = "RGB") -> Image.Image:
    """Solid red image, half-transparent for alpha modes."""
    if mode == "RGBA":
        return Image.new("RGBA", (width, height), (255, 0, 0, 128))
    return Image.new("RGB", (width, height), (255, 0, 0)).convert(mode)


def image_bytes(width: int = 200, height: int = 100, fmt: str = "PNG", mode: str = "RGB") -> bytes:
    buffer = io.BytesIO()
    make_image(width, height, mode).save(buffer, format=fmt)
    return buffer.getvalue()


def write_image(path, width: int = 200, height: int = 100, fmt: str = "PNG", mode: str = "RGB") -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    make_image(width, height, mode).save(path, format=fmt)
    return path


def avif_supported() -> bool:
    Image.init()
    return "AVIF" in Image.SAVE
