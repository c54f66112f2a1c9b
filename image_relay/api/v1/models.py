"""
API Models for request/response validation and Swagger documentation
"""

from flask_restx import fields

from ...domain.processing.value_objects import (
    DEFAULT_QUALITY,
    MAX_DIMENSION,
    MIN_DIMENSION,
    OutputFormat,
    ResizeFit,
)
from . import api

# =============================================================================
# Request Models
# =============================================================================

resize_spec = api.model(
    "ResizeSpec",
    {
        "width": fields.Integer(
            description="Target width in pixels", min=MIN_DIMENSION, max=MAX_DIMENSION
        ),
        "height": fields.Integer(
            description="Target height in pixels", min=MIN_DIMENSION, max=MAX_DIMENSION
        ),
        "fit": fields.String(
            description="How the image fits the target box",
            enum=[fit.value for fit in ResizeFit],
            default=ResizeFit.COVER.value,
        ),
    },
)

compression_spec = api.model(
    "CompressionSpec",
    {
        "quality": fields.Integer(
            description="Encoder quality (1-100)", min=1, max=100, default=DEFAULT_QUALITY
        ),
        "progressive": fields.Boolean(description="Progressive encoding (JPEG)", default=False),
        "optimizeScans": fields.Boolean(description="Optimize Huffman tables (JPEG)", default=False),
    },
)

conversion_spec = api.model(
    "ConversionSpec",
    {
        "format": fields.String(
            required=True,
            description="Output format",
            enum=[fmt.value for fmt in OutputFormat],
            example="webp",
        ),
    },
)

transform_specs = api.model(
    "TransformSpecs",
    {
        "resize": fields.Nested(resize_spec, allow_null=True),
        "compression": fields.Nested(compression_spec, allow_null=True),
        "conversion": fields.Nested(conversion_spec, required=True),
    },
)

process_request = api.model(
    "ProcessRequest",
    {
        "imageUrl": fields.String(
            required=True,
            description="Public http(s) URL of the source image",
            example="https://example.com/photo.png",
        ),
        "specs": fields.Nested(transform_specs, required=True),
    },
)

# =============================================================================
# Response Models
# =============================================================================

process_response = api.model(
    "ProcessResponse",
    {
        "success": fields.Boolean(description="Whether the image was processed"),
        "processedImageUrl": fields.String(
            description="Short-lived URL of the processed image (on success)"
        ),
        "error": fields.String(description="Error message (on failure)"),
    },
)

tool_response = api.model(
    "ToolDescriptor",
    {
        "name": fields.String(description="Tool name", example="process_image"),
        "description": fields.String(description="What the tool does"),
        "inputSchema": fields.Raw(description="JSON Schema of the tool arguments"),
    },
)

artifact_list_response = api.model(
    "ArtifactList",
    {
        "images": fields.List(fields.String, description="Registered artifact identifiers"),
        "count": fields.Integer(description="Number of registered artifacts"),
    },
)

error_response = api.model(
    "Error",
    {
        "error": fields.String(description="Error category"),
        "title": fields.String(description="Short error title"),
        "message": fields.String(description="User-facing error message"),
        "action": fields.String(description="Suggested action for the user"),
    },
)
