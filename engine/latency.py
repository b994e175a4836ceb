"""
HTTP round-trip latency measurement.

Each probe is a ``HEAD`` request against a tiny static resource with a
per-request cache-busting ``t`` parameter, so every sample crosses the
network instead of being answered from a cache::

    1. HEAD {ping_url}?t={epoch_ms}    (Cache-Control: no-store)
    2. Record elapsed wall-clock time in ms.
    3. Sleep a fixed 100 ms.
    4. Repeat for PING_ITERATIONS samples.

Probes that fail outright are dropped; ping and jitter come from whatever
samples survive.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

import aiohttp

from .constants import (
    DEFAULT_REQUEST_TIMEOUT,
    NO_CACHE_HEADERS,
    PING_ITERATIONS,
    PING_PAUSE_SECONDS,
    PING_URL,
)
from .exceptions import ProbeUnreachableError
from .stats import summarize_latency

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

@dataclass
class LatencyResult:
    """Latency samples from one ping phase."""

    samples: List[float] = field(default_factory=list)
    attempts: int = 0
    ping_ms: Optional[int] = None
    jitter_ms: Optional[int] = None

    def calculate(self) -> None:
        """Derive ping (min) and jitter (mean absolute deviation) from the samples."""
        self.ping_ms, self.jitter_ms = summarize_latency(self.samples)

    @property
    def dropped(self) -> int:
        return self.attempts - len(self.samples)

    def to_dict(self) -> dict:
        return {
            "samples": [round(s, 1) for s in self.samples],
            "attempts": self.attempts,
            "ping_ms": self.ping_ms,
            "jitter_ms": self.jitter_ms,
        }


# ---------------------------------------------------------------------------
# Probe
# ---------------------------------------------------------------------------

class LatencyProbe:
    """Measure ping and jitter with a fixed number of HEAD round trips."""

    def __init__(
        self,
        url: str = PING_URL,
        iterations: int = PING_ITERATIONS,
        pause_seconds: float = PING_PAUSE_SECONDS,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self.url = url
        self.iterations = iterations
        self.pause_seconds = pause_seconds
        self.timeout = timeout

    async def measure(self, http: aiohttp.ClientSession) -> LatencyResult:
        result = LatencyResult()

        for _ in range(self.iterations):
            result.attempts += 1
            try:
                result.samples.append(await self._probe_once(http))
            except ProbeUnreachableError as exc:
                logger.debug("Latency sample dropped: %s", exc)
            await asyncio.sleep(self.pause_seconds)

        result.calculate()
        logger.debug(
            "Latency: %d/%d samples, ping=%s ms, jitter=%s ms",
            len(result.samples), result.attempts, result.ping_ms, result.jitter_ms,
        )
        return result

    async def _probe_once(self, http: aiohttp.ClientSession) -> float:
        """One HEAD round trip; returns elapsed milliseconds."""
        params = {"t": str(int(time.time() * 1000))}
        start = time.perf_counter()
        try:
            async with http.head(
                self.url,
                params=params,
                headers=NO_CACHE_HEADERS,
                allow_redirects=False,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ):
                pass
        except asyncio.TimeoutError as exc:
            raise ProbeUnreachableError("Probe timeout") from exc
        except (aiohttp.ClientError, OSError) as exc:
            raise ProbeUnreachableError(str(exc) or exc.__class__.__name__) from exc
        except Exception as exc:
            raise ProbeUnreachableError(f"Unexpected probe error: {exc!r}") from exc
        return (time.perf_counter() - start) * 1000
