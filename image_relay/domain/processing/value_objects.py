"""
Processing Value Objects

Immutable, validated representations of a processing request.
Validation happens here so the orchestrator can reject a request before any I/O.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from ..errors import InvalidRequestError

MIN_DIMENSION = 1
MAX_DIMENSION = 10000
DEFAULT_QUALITY = 80


class OutputFormat(Enum):
    """Supported target formats."""

    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"
    AVIF = "avif"
    TIFF = "tiff"

    @property
    def extension(self) -> str:
        if self is OutputFormat.JPEG:
            return "jpg"
        return self.value

    @classmethod
    def parse(cls, value: Any) -> "OutputFormat":
        if not isinstance(value, str) or not value.strip():
            raise InvalidRequestError("Conversion format is required in specs")
        try:
            return cls(value.strip().lower())
        except ValueError:
            allowed = ", ".join(f.value for f in cls)
            raise InvalidRequestError(
                f"Unsupported output format '{value}'. Expected one of: {allowed}"
            )


class ResizeFit(Enum):
    """How an image is fitted into the target box."""

    COVER = "cover"
    CONTAIN = "contain"
    FILL = "fill"
    INSIDE = "inside"
    OUTSIDE = "outside"


def _require_int(name: str, value: Any, minimum: int, maximum: int) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRequestError(f"'{name}' must be an integer")
    if value < minimum or value > maximum:
        raise InvalidRequestError(f"'{name}' must be between {minimum} and {maximum}")
    return value


def _require_bool(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise InvalidRequestError(f"'{name}' must be a boolean")
    return value


def _require_mapping(name: str, value: Any) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise InvalidRequestError(f"'{name}' must be an object")
    return value


@dataclass(frozen=True)
class SourceUrl:
    """Absolute http(s) URL of the image to fetch."""

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise InvalidRequestError("Missing required parameter: imageUrl")

        try:
            parsed = urlparse(self.value.strip())
            # Out-of-range ports only surface when .port is read
            parsed.port
        except ValueError:
            raise InvalidRequestError("Invalid image URL provided")

        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidRequestError("Invalid image URL provided")

    def __str__(self) -> str:
        return self.value.strip()


@dataclass(frozen=True)
class ResizeSpec:
    width: Optional[int] = None
    height: Optional[int] = None
    fit: ResizeFit = ResizeFit.COVER

    @property
    def is_noop(self) -> bool:
        return self.width is None and self.height is None

    @classmethod
    def from_dict(cls, data: Any) -> "ResizeSpec":
        data = _require_mapping("resize", data)

        width = data.get("width")
        height = data.get("height")
        if width is not None:
            width = _require_int("resize.width", width, MIN_DIMENSION, MAX_DIMENSION)
        if height is not None:
            height = _require_int("resize.height", height, MIN_DIMENSION, MAX_DIMENSION)

        fit = data.get("fit", ResizeFit.COVER.value)
        try:
            fit = ResizeFit(fit)
        except ValueError:
            allowed = ", ".join(f.value for f in ResizeFit)
            raise InvalidRequestError(f"'resize.fit' must be one of: {allowed}")

        return cls(width=width, height=height, fit=fit)


@dataclass(frozen=True)
class CompressionSpec:
    quality: int = DEFAULT_QUALITY
    progressive: bool = False
    optimize_scans: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> "CompressionSpec":
        data = _require_mapping("compression", data)

        quality = data.get("quality", DEFAULT_QUALITY)
        quality = _require_int("compression.quality", quality, 1, 100)
        progressive = _require_bool(
            "compression.progressive", data.get("progressive", False)
        )
        optimize_scans = _require_bool(
            "compression.optimizeScans", data.get("optimizeScans", False)
        )

        return cls(quality=quality, progressive=progressive, optimize_scans=optimize_scans)


@dataclass(frozen=True)
class TransformSpec:
    """
    Complete description of the transformation to apply.

    Wire shape: {"resize"?: {...}, "compression"?: {...}, "conversion": {"format": ...}}.
    Whether an option is meaningful for a given format is left to the
    transformer, which ignores what does not apply.
    """

    output_format: OutputFormat
    resize: Optional[ResizeSpec] = None
    compression: CompressionSpec = CompressionSpec()

    @classmethod
    def from_dict(cls, data: Any) -> "TransformSpec":
        """
        Parse and validate a specs object.

        Raises:
            InvalidRequestError: If any field is missing or out of range
        """
        if data is None:
            raise InvalidRequestError("Missing required parameter: specs")
        data = _require_mapping("specs", data)

        conversion = data.get("conversion")
        if conversion is None:
            raise InvalidRequestError("Conversion format is required in specs")
        conversion = _require_mapping("conversion", conversion)
        output_format = OutputFormat.parse(conversion.get("format"))

        resize = None
        if data.get("resize") is not None:
            resize = ResizeSpec.from_dict(data["resize"])

        compression = CompressionSpec()
        if data.get("compression") is not None:
            compression = CompressionSpec.from_dict(data["compression"])

        return cls(output_format=output_format, resize=resize, compression=compression)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "conversion": {"format": self.output_format.value},
            "compression": {
                "quality": self.compression.quality,
                "progressive": self.compression.progressive,
                "optimizeScans": self.compression.optimize_scans,
            },
        }
        if self.resize is not None:
            result["resize"] = {
                "width": self.resize.width,
                "height": self.resize.height,
                "fit": self.resize.fit.value,
            }
        return result
