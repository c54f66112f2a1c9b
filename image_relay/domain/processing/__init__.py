"""
Processing Domain

Validated processing requests and the collaborator contracts of the pipeline.
"""

from .collaborators import IImageFetcher, IImageTransformer
from .value_objects import (
    CompressionSpec,
    OutputFormat,
    ResizeFit,
    ResizeSpec,
    SourceUrl,
    TransformSpec,
)

__all__ = [
    "CompressionSpec",
    "IImageFetcher",
    "IImageTransformer",
    "OutputFormat",
    "ResizeFit",
    "ResizeSpec",
    "SourceUrl",
    "TransformSpec",
]
