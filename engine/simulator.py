"""
Simulated throughput.

Used whenever a real measurement is unavailable: as the download fallback
and for every upload estimate.  Progress advances a fixed step per tick;
once it reaches 100 the simulator resolves with a uniformly random whole
number of Mbps from the caller's range.
"""
from __future__ import annotations

import asyncio
import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .constants import SIM_STEP_PERCENT, SIM_TICK_SECONDS

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


@dataclass
class ProbeOutcome:
    """Throughput produced by a download probe or the simulator."""

    mbps: int = 0
    simulated: bool = False
    bytes_total: int = 0
    duration_ms: float = 0.0

    def to_dict(self) -> dict:
        return {
            "mbps": self.mbps,
            "simulated": self.simulated,
            "bytes_total": self.bytes_total,
            "duration_ms": round(self.duration_ms, 2),
        }


class FallbackSimulator:
    """Stepped progress animation that yields a bounded pseudo-random speed."""

    def __init__(
        self,
        tick_seconds: float = SIM_TICK_SECONDS,
        step: float = SIM_STEP_PERCENT,
        rng: Optional[random.Random] = None,
    ) -> None:
        if step <= 0:
            raise ValueError("Simulation step must be positive")
        self.tick_seconds = tick_seconds
        self.step = step
        self.rng = rng or random.Random()

    async def run(
        self,
        low: int,
        high: int,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ProbeOutcome:
        """Tick progress to 100, then return a speed in ``[low, high]``."""
        if low > high:
            raise ValueError(f"Empty simulation range [{low}, {high}]")

        start = time.perf_counter()
        progress = 0.0
        while progress < 100:
            await asyncio.sleep(self.tick_seconds)
            progress = min(100.0, progress + self.step)
            if on_progress:
                on_progress(progress)

        mbps = self.rng.randint(low, high)
        logger.debug("Simulated %d Mbps in range [%d, %d]", mbps, low, high)
        return ProbeOutcome(
            mbps=mbps,
            simulated=True,
            duration_ms=(time.perf_counter() - start) * 1000,
        )
