"""
Pillow Image Transformer

Concrete implementation of IImageTransformer using Pillow.
Handles resizing with the five fit modes and encoding to every OutputFormat.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Union

from PIL import Image, ImageOps

from ..domain.errors import TransformFailedError
from ..domain.processing.collaborators import IImageTransformer
from ..domain.processing.value_objects import (
    CompressionSpec,
    OutputFormat,
    ResizeFit,
    ResizeSpec,
    TransformSpec,
)
from .temp_file_janitor import scratch_file_path

logger = logging.getLogger(__name__)

PIL_FORMATS = {
    OutputFormat.JPEG: "JPEG",
    OutputFormat.PNG: "PNG",
    OutputFormat.WEBP: "WEBP",
    OutputFormat.AVIF: "AVIF",
    OutputFormat.TIFF: "TIFF",
}

# Formats whose encoder drops the alpha channel
OPAQUE_FORMATS = {OutputFormat.JPEG, OutputFormat.TIFF}

RESAMPLE = Image.Resampling.LANCZOS


def _has_alpha(img: Image.Image) -> bool:
    if img.mode in ("RGBA", "LA", "PA"):
        return True
    return img.mode == "P" and "transparency" in img.info


class PillowImageTransformer(IImageTransformer):
    """
    Resizes, compresses and converts images with Pillow.

    Compression options that have no meaning for the target format
    (quality for PNG, progressive for anything but JPEG) are ignored.
    """

    def __init__(self, scratch_dir: Union[str, Path]):
        """
        Initialize the transformer.

        Args:
            scratch_dir: Directory for processed outputs
        """
        self.scratch_dir = Path(scratch_dir)

    def transform(self, source_path: str, spec: TransformSpec) -> str:
        self.scratch_dir.mkdir(parents=True, exist_ok=True)
        output_path = scratch_file_path(self.scratch_dir, spec.output_format.extension)

        try:
            with Image.open(source_path) as source:
                source.load()
                img = self._normalize_mode(source)

            if spec.resize is not None and not spec.resize.is_noop:
                img = self._resize(img, spec.resize, spec.output_format)

            if spec.output_format in OPAQUE_FORMATS and img.mode != "RGB":
                img = img.convert("RGB")

            options = self._encoder_options(spec.output_format, spec.compression)
            img.save(output_path, format=PIL_FORMATS[spec.output_format], **options)

        except Exception as e:
            self._discard(output_path)
            raise TransformFailedError(f"Error processing image: {e}", e)

        logger.info(
            f"Transformed {Path(source_path).name} -> {output_path.name} "
            f"({img.width}x{img.height}, {spec.output_format.value})"
        )
        return str(output_path)

    def _normalize_mode(self, img: Image.Image) -> Image.Image:
        if img.mode in ("RGB", "RGBA"):
            return img.copy()
        return img.convert("RGBA" if _has_alpha(img) else "RGB")

    def _resize(self, img: Image.Image, resize: ResizeSpec, output_format: OutputFormat) -> Image.Image:
        src_w, src_h = img.size
        width, height = resize.width, resize.height

        # A single dimension always scales proportionally
        if width is None or height is None:
            if width is None:
                width = max(1, round(src_w * height / src_h))
            else:
                height = max(1, round(src_h * width / src_w))
            return img.resize((width, height), RESAMPLE)

        if resize.fit is ResizeFit.FILL:
            return img.resize((width, height), RESAMPLE)

        if resize.fit is ResizeFit.COVER:
            return ImageOps.fit(img, (width, height), method=RESAMPLE)

        if resize.fit is ResizeFit.CONTAIN:
            if output_format in OPAQUE_FORMATS:
                color = (0, 0, 0)
            else:
                img = img.convert("RGBA")
                color = (0, 0, 0, 0)
            return ImageOps.pad(img, (width, height), method=RESAMPLE, color=color)

        if resize.fit is ResizeFit.INSIDE:
            scale = min(width / src_w, height / src_h)
        else:
            scale = max(width / src_w, height / src_h)

        size = (max(1, round(src_w * scale)), max(1, round(src_h * scale)))
        return img.resize(size, RESAMPLE)

    def _encoder_options(self, output_format: OutputFormat, compression: CompressionSpec) -> Dict[str, Any]:
        if output_format is OutputFormat.JPEG:
            return {
                "quality": compression.quality,
                "progressive": compression.progressive,
                "optimize": compression.optimize_scans,
            }

        if compression.progressive:
            logger.debug(f"Ignoring 'progressive' for {output_format.value} output")

        if output_format is OutputFormat.PNG:
            logger.debug("Ignoring 'quality' for lossless png output")
            return {"optimize": compression.optimize_scans}

        if output_format is OutputFormat.TIFF:
            return {"compression": "jpeg", "quality": compression.quality}

        # webp, avif
        return {"quality": compression.quality}

    def _discard(self, path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove partial output {path}: {e}")
