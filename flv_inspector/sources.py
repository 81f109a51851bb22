"""
Input sources for the decoder.

Every source is exposed as a binary reader with a ``read(size)`` method, the
only thing ByteCursor needs:

- standard input (no target or "-")
- a local file
- an http(s) URL streamed with httpx, buffered chunk by chunk
"""

import logging
import sys
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import BinaryIO
from urllib.parse import urlparse

import httpx

from flv_inspector.configs import settings

logger = logging.getLogger(__name__)


class SourceError(Exception):
    kind = "SourceError"

    def __init__(self, status_code, message):
        self.status_code = status_code
        self.message = message
        self.offset = None
        self.tag_index = None
        super().__init__(message)


class SourceReadError(SourceError):
    """The input was opened but failed while its body was being read."""

    kind = "SourceRead"

    def __init__(self, message):
        super().__init__(None, message)


class ChunkStreamReader:
    """
    File-like reader over an iterable of byte chunks.

    Buffers only what the caller has not consumed yet, so memory stays
    bounded by the chunk size plus the largest single read.
    """

    def __init__(self, chunks: Iterable[bytes]) -> None:
        self._chunks = iter(chunks)
        self._buffer = bytearray()
        self._exhausted = False
        self._consumed = 0

    @property
    def consumed(self) -> int:
        """Total bytes handed out so far."""
        return self._consumed

    def _fill(self, size: int) -> None:
        while not self._exhausted and (size < 0 or len(self._buffer) < size):
            try:
                chunk = next(self._chunks)
            except StopIteration:
                self._exhausted = True
                break
            if chunk:
                self._buffer.extend(chunk)

    def read(self, size: int = -1) -> bytes:
        self._fill(size)
        if size < 0 or size >= len(self._buffer):
            data = bytes(self._buffer)
            self._buffer.clear()
        else:
            data = bytes(self._buffer[:size])
            del self._buffer[:size]
        self._consumed += len(data)
        return data


def is_url(target: str) -> bool:
    return urlparse(target).scheme in ("http", "https")


def create_httpx_client(**kwargs) -> httpx.Client:
    """
    Create an httpx Client configured from the transport settings.

    Args:
        **kwargs: Additional Client keyword arguments, overriding the settings.
    """
    client_kwargs = settings.transport_config.get_client_kwargs()
    client_kwargs["headers"] = {"user-agent": settings.user_agent}
    client_kwargs.update(kwargs)
    return httpx.Client(**client_kwargs)


def _iter_body(response: httpx.Response, url: str) -> Iterator[bytes]:
    try:
        yield from response.iter_bytes(settings.transport_config.chunk_size)
    except httpx.HTTPError as e:
        raise SourceReadError(f"Connection failed while reading {url}: {e}") from e


@contextmanager
def _open_url(url: str, client: httpx.Client | None) -> Iterator[BinaryIO]:
    own_client = client is None
    if client is None:
        client = create_httpx_client()
    try:
        with client.stream("GET", url) as response:
            if response.status_code >= 400:
                raise SourceError(response.status_code, f"HTTP {response.status_code} while fetching {url}")
            logger.info("[sources] Streaming %s (%s bytes)", url, response.headers.get("content-length", "unknown"))
            yield ChunkStreamReader(_iter_body(response, url))
    except httpx.HTTPError as e:
        raise SourceError(None, f"Failed to fetch {url}: {e}") from e
    finally:
        if own_client:
            client.close()


@contextmanager
def open_source(target: str | None = None, client: httpx.Client | None = None) -> Iterator[BinaryIO]:
    """
    Open an input for decoding.

    Args:
        target: File path, http(s) URL, or None / "-" for standard input.
        client: Optional httpx Client used for URL targets.

    Raises:
        SourceError: If the input cannot be opened.
        SourceReadError: From the reader, if a URL body fails mid-stream.
    """
    if target is None or target == "-":
        yield sys.stdin.buffer
        return

    if is_url(target):
        with _open_url(target, client) as reader:
            yield reader
        return

    try:
        f = open(target, "rb")
    except OSError as e:
        raise SourceError(None, f"Cannot open {target}: {e.strerror or e}") from e
    with f:
        yield f
