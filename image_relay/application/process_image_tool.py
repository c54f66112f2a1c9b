"""
process_image Tool

Descriptor and argument handling for the agent-facing "process_image"
operation. Any outer protocol layer (HTTP, RPC, agent tool bridge) can
advertise PROCESS_IMAGE_TOOL and forward calls to run_process_image.
"""

from typing import Any, Dict

from ..domain.processing.value_objects import (
    DEFAULT_QUALITY,
    MAX_DIMENSION,
    MIN_DIMENSION,
    OutputFormat,
    ResizeFit,
)
from .processing_result import ProcessingResult
from .processing_service import ImageProcessingService

TOOL_NAME = "process_image"

PROCESS_IMAGE_TOOL: Dict[str, Any] = {
    "name": TOOL_NAME,
    "description": (
        "Download an image from a URL and process it according to specified resize, "
        "compression, and conversion specs. Returns a temporary URL to access the "
        "processed image."
    ),
    "inputSchema": {
        "type": "object",
        "properties": {
            "imageUrl": {
                "type": "string",
                "description": "The URL of the image to download and process",
                "format": "uri",
            },
            "specs": {
                "type": "object",
                "description": "Image processing specifications",
                "properties": {
                    "resize": {
                        "type": "object",
                        "description": "Resize specifications",
                        "properties": {
                            "width": {
                                "type": "integer",
                                "description": "Target width in pixels",
                                "minimum": MIN_DIMENSION,
                                "maximum": MAX_DIMENSION,
                            },
                            "height": {
                                "type": "integer",
                                "description": "Target height in pixels",
                                "minimum": MIN_DIMENSION,
                                "maximum": MAX_DIMENSION,
                            },
                            "fit": {
                                "type": "string",
                                "description": "How the image should be resized to fit the target dimensions",
                                "enum": [fit.value for fit in ResizeFit],
                                "default": ResizeFit.COVER.value,
                            },
                        },
                    },
                    "compression": {
                        "type": "object",
                        "description": "Compression specifications",
                        "properties": {
                            "quality": {
                                "type": "integer",
                                "description": "Image quality (1-100, higher is better quality)",
                                "minimum": 1,
                                "maximum": 100,
                                "default": DEFAULT_QUALITY,
                            },
                            "progressive": {
                                "type": "boolean",
                                "description": "Use progressive JPEG encoding",
                                "default": False,
                            },
                            "optimizeScans": {
                                "type": "boolean",
                                "description": "Optimize Huffman coding tables",
                                "default": False,
                            },
                        },
                    },
                    "conversion": {
                        "type": "object",
                        "description": "Format conversion specifications",
                        "properties": {
                            "format": {
                                "type": "string",
                                "description": "Target image format",
                                "enum": [fmt.value for fmt in OutputFormat],
                            },
                        },
                        "required": ["format"],
                    },
                },
                "required": ["conversion"],
            },
        },
        "required": ["imageUrl", "specs"],
    },
}


def run_process_image(arguments: Any, service: ImageProcessingService) -> ProcessingResult:
    """
    Run the pipeline for a process_image call.

    Never raises: every failure comes back as an unsuccessful result whose
    to_response() is {"success": False, "error": ...}.

    Args:
        arguments: Tool arguments, {"imageUrl": ..., "specs": ...}
        service: Processing service

    Returns:
        ProcessingResult for the run
    """
    if not isinstance(arguments, dict):
        arguments = {}

    return service.run(arguments.get("imageUrl"), arguments.get("specs"))
