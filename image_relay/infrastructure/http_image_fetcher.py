"""
HTTP Image Fetcher

Concrete implementation of IImageFetcher using httpx.
Streams the response body into a uniquely named scratch file.
"""

import logging
import time
from pathlib import Path
from typing import Optional, Union

import httpx

from ..domain.errors import FetchFailedError
from ..domain.processing.collaborators import IImageFetcher
from ..domain.processing.value_objects import SourceUrl
from .temp_file_janitor import scratch_file_path

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_BYTES = 50 * 1024 * 1024  # 50MB
CHUNK_SIZE = 8192  # 8KB chunks


class HttpImageFetcher(IImageFetcher):
    """
    Downloads remote images over HTTP(S).

    The whole download is bounded by timeout_seconds, so a slow remote host
    cannot hold a worker indefinitely, and by max_bytes. Partial files are
    removed on every failure path.
    """

    def __init__(
        self,
        scratch_dir: Union[str, Path],
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        max_bytes: int = DEFAULT_MAX_BYTES,
        client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the fetcher.

        Args:
            scratch_dir: Directory for downloaded files
            timeout_seconds: Upper bound for a whole download
            max_bytes: Largest accepted response body
            client: Optional preconfigured httpx client (tests inject a MockTransport)
        """
        self.scratch_dir = Path(scratch_dir)
        self.timeout_seconds = timeout_seconds
        self.max_bytes = max_bytes
        self._client = client

    def fetch(self, url: SourceUrl) -> str:
        self.scratch_dir.mkdir(parents=True, exist_ok=True)
        target = scratch_file_path(self.scratch_dir, "download")

        try:
            if self._client is not None:
                written = self._download(self._client, str(url), target)
            else:
                with httpx.Client(
                    timeout=self.timeout_seconds, follow_redirects=True
                ) as client:
                    written = self._download(client, str(url), target)

        except FetchFailedError:
            self._discard(target)
            raise
        except httpx.TimeoutException as e:
            self._discard(target)
            raise FetchFailedError(
                f"Timed out downloading image after {self.timeout_seconds}s", e
            )
        except httpx.HTTPError as e:
            self._discard(target)
            raise FetchFailedError(f"Error downloading image: {e}", e)
        except OSError as e:
            self._discard(target)
            raise FetchFailedError(f"Error writing downloaded image: {e}", e)

        logger.info(f"Downloaded {written} bytes from {url} to {target.name}")
        return str(target)

    def _download(self, client: httpx.Client, url: str, target: Path) -> int:
        deadline = time.monotonic() + self.timeout_seconds

        with client.stream("GET", url) as response:
            if not response.is_success:
                raise FetchFailedError(
                    f"Failed to download image: HTTP {response.status_code} "
                    f"{response.reason_phrase}".strip()
                )

            declared = response.headers.get("content-length")
            if declared and declared.isdigit() and int(declared) > self.max_bytes:
                raise FetchFailedError(
                    f"Image is too large: {declared} bytes (limit {self.max_bytes})"
                )

            written = 0
            with open(target, "wb") as f:
                for chunk in response.iter_bytes(CHUNK_SIZE):
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise FetchFailedError(
                            f"Image is too large: more than {self.max_bytes} bytes"
                        )
                    if time.monotonic() > deadline:
                        raise FetchFailedError(
                            f"Timed out downloading image after {self.timeout_seconds}s"
                        )
                    f.write(chunk)

        if written == 0:
            raise FetchFailedError("Failed to download image: empty response body")

        return written

    def _discard(self, target: Path) -> None:
        try:
            target.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove partial download {target}: {e}")
