# src/llm/image_fetcher.py - v1
"""Image-fetch port used to inline remote images into message requests."""

from __future__ import annotations

import asyncio
import logging
import urllib.error
import urllib.request
from abc import ABC, abstractmethod

from bedrockllm.llm.errors import TransportError

logger = logging.getLogger(__name__)

_DEFAULT_MEDIA_TYPE = "application/octet-stream"

# Leading byte signatures of the image formats the messages API accepts.
_SIGNATURES: list[tuple[bytes, str]] = [
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
]


def detect_media_type(data: bytes, declared: str | None = None) -> str:
    """Sniff the media type of image bytes.

    Magic bytes win over the declared Content-Type; unknown data falls back to
    the declared type, then to application/octet-stream.
    """
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    for signature, media_type in _SIGNATURES:
        if data.startswith(signature):
            return media_type
    if declared:
        return declared.split(";", 1)[0].strip()
    return _DEFAULT_MEDIA_TYPE


class BaseImageFetcher(ABC):
    """Capability to download an image referenced by URL."""

    @abstractmethod
    async def fetch(self, url: str) -> tuple[bytes, str]:
        """Return (data, media_type) for url.

        Raises:
            TransportError: On network failure or a non-success status.
        """


class HTTPImageFetcher(BaseImageFetcher):
    """Fetch images over HTTP(S) with urllib."""

    def __init__(self, timeout_s: float = 30.0) -> None:
        self._timeout_s = timeout_s

    async def fetch(self, url: str) -> tuple[bytes, str]:
        return await asyncio.to_thread(self._fetch_sync, url)

    def _fetch_sync(self, url: str) -> tuple[bytes, str]:
        req = urllib.request.Request(url, method="GET")
        try:
            with urllib.request.urlopen(req, timeout=self._timeout_s) as resp:
                # Anything but 200-203 carries no usable image body.
                if resp.status >= 204:
                    raise TransportError(
                        f"failed to get image: HTTP {resp.status}", url=url
                    )
                data = resp.read()
                declared = resp.headers.get("Content-Type")
        except TransportError:
            raise
        except urllib.error.HTTPError as e:
            raise TransportError(f"failed to get image: HTTP {e.code}", url=url) from e
        except (urllib.error.URLError, OSError) as e:
            raise TransportError(f"failed to read image: {e}", url=url) from e

        media_type = detect_media_type(data, declared)
        logger.debug("Fetched image: url=%s, bytes=%d, media_type=%s", url, len(data), media_type)
        return data, media_type
