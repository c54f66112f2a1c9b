"""
Infrastructure Layer

Concrete implementations of the domain interfaces: HTTP fetching, Pillow
transforms, thread-backed timers and the scratch directory janitor.
"""

from .http_image_fetcher import HttpImageFetcher
from .pillow_transformer import PillowImageTransformer
from .temp_file_janitor import TempFileJanitor, scratch_file_path
from .threading_scheduler import ThreadingScheduler

__all__ = [
    "HttpImageFetcher",
    "PillowImageTransformer",
    "TempFileJanitor",
    "ThreadingScheduler",
    "scratch_file_path",
]
