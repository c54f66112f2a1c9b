"""
Test fixtures package.

Provides fake collaborators, a manual scheduler and image factories.
"""

from .fakes import (
    CopyTransformer,
    FailingFetcher,
    FailingTransformer,
    LocalFileFetcher,
    ManualScheduler,
    RecordingDeleter,
)
from .images import avif_supported, image_bytes, make_image, write_image

__all__ = [
    "CopyTransformer",
    "FailingFetcher",
    "FailingTransformer",
    "LocalFileFetcher",
    "ManualScheduler",
    "RecordingDeleter",
    "avif_supported",
    "image_bytes",
    "make_image",
    "write_image",
]
