"""
Download speed test module.

Streams a single large static resource and times it end to end.  Two
failure classes are handled differently:

* the request cannot be established, or the status is not 2xx:
  the probe hands over to :class:`FallbackSimulator` and reports its
  number as if it had been measured;
* the body breaks after a successful start: ``DownloadStreamError`` is
  raised and no simulation happens.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional

import aiohttp

from .constants import (
    CHUNK_SIZE,
    DOWNLOAD_FAILED_MESSAGE,
    DOWNLOAD_FALLBACK_RANGE,
    DOWNLOAD_URL,
)
from .exceptions import DownloadStreamError, DownloadUnreachableError
from .simulator import FallbackSimulator, ProbeOutcome
from .stats import download_progress, parse_content_length, throughput_mbps

logger = logging.getLogger(__name__)

_NETWORK_ERRORS = (aiohttp.ClientError, OSError, asyncio.TimeoutError)


class ThroughputProbe:
    """Measure download bandwidth, falling back to simulation when unreachable."""

    def __init__(
        self,
        url: str = DOWNLOAD_URL,
        simulator: Optional[FallbackSimulator] = None,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        self.url = url
        self.simulator = simulator or FallbackSimulator()
        self.chunk_size = chunk_size
        self.on_progress: Optional[Callable[[float], None]] = None

    async def measure(self, http: aiohttp.ClientSession) -> ProbeOutcome:
        start = time.perf_counter()

        try:
            response = await self._open(http)
        except DownloadUnreachableError as exc:
            logger.info("Download unreachable (%s); simulating", exc)
            low, high = DOWNLOAD_FALLBACK_RANGE
            return await self.simulator.run(low, high, on_progress=self.on_progress)

        async with response:
            content_length = parse_content_length(response.headers.get("Content-Length"))
            received = 0
            try:
                while True:
                    chunk = await response.content.read(self.chunk_size)
                    if not chunk:
                        break
                    received += len(chunk)
                    if self.on_progress:
                        self.on_progress(download_progress(received, content_length))
            except _NETWORK_ERRORS as exc:
                logger.warning("Download stream failed after %d bytes: %s", received, exc)
                raise DownloadStreamError(DOWNLOAD_FAILED_MESSAGE) from exc
            except Exception as exc:
                logger.exception("Unexpected error in download stream after %d bytes", received)
                raise DownloadStreamError(DOWNLOAD_FAILED_MESSAGE) from exc

        elapsed = time.perf_counter() - start
        return ProbeOutcome(
            mbps=throughput_mbps(received, elapsed),
            bytes_total=received,
            duration_ms=elapsed * 1000,
        )

    async def _open(self, http: aiohttp.ClientSession) -> aiohttp.ClientResponse:
        """Start the GET; raise ``DownloadUnreachableError`` if it cannot be used."""
        params = {"t": str(int(time.time() * 1000))}
        try:
            response = await http.get(self.url, params=params)
        except _NETWORK_ERRORS as exc:
            raise DownloadUnreachableError(str(exc) or exc.__class__.__name__) from exc

        if not 200 <= response.status < 300:
            response.release()
            raise DownloadUnreachableError(f"HTTP {response.status}")
        return response
