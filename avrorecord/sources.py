"""Byte sources that feed the stream and container decoders.

These only move bytes. Each yields ``bytes`` chunks and releases its
underlying file or connection when the consuming generator is closed, so a
caller can stop iterating a decode stream at any point.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Iterator, Optional

import requests
from requests import Response
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from .config import DEFAULT_CONFIG, DecoderConfig


logger = logging.getLogger(__name__)


def iter_file(path: str | os.PathLike, config: DecoderConfig = DEFAULT_CONFIG) -> Iterator[bytes]:
    """Yield the contents of ``path`` in ``config.chunk_size`` pieces."""
    with open(path, "rb") as fp:
        while True:
            chunk = fp.read(config.chunk_size)
            if not chunk:
                return
            yield chunk


def iter_stream(fp, config: DecoderConfig = DEFAULT_CONFIG) -> Iterator[bytes]:
    """Yield chunks from an already open binary file object. The caller owns ``fp``."""
    while True:
        chunk = fp.read(config.chunk_size)
        if not chunk:
            return
        yield chunk


class HttpFetchError(IOError):
    pass


class HttpSource:
    """Streams a remote payload over HTTP.

    Opening the response is retried on connection errors and non-2xx
    statuses; once bytes have started flowing, failures propagate so a
    record is never silently stitched together from two attempts.
    """

    def __init__(
        self,
        url: str,
        *,
        headers: Optional[dict] = None,
        timeout: float = 30.0,
        config: DecoderConfig = DEFAULT_CONFIG,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.headers = dict(headers or {})
        self.timeout = timeout
        self.config = config
        # a session created here is closed after each iteration
        self._owns_session = session is None
        self.session = session

    @staticmethod
    @retry(
        stop=stop_after_attempt(5),
        wait=wait_fixed(1),
        retry=retry_if_exception_type((HttpFetchError, requests.ConnectionError, requests.Timeout)),
        reraise=True,
    )
    def open(request_func: Callable[[], Response]) -> Response:
        response = request_func()
        if not (200 <= response.status_code < 300):
            response.close()
            raise HttpFetchError(f"HTTP request failed with status code: {response.status_code}")
        return response

    def __iter__(self) -> Iterator[bytes]:
        session = requests.Session() if self._owns_session else self.session

        def request_func() -> Response:
            return session.get(self.url, headers=self.headers, stream=True, timeout=self.timeout)

        try:
            response = self.open(request_func)
            logger.debug("Streaming %s", self.url)
            try:
                for chunk in response.iter_content(chunk_size=self.config.chunk_size):
                    if chunk:
                        yield chunk
            finally:
                response.close()
        finally:
            if self._owns_session:
                session.close()


__all__ = ["HttpFetchError", "HttpSource", "iter_file", "iter_stream"]
