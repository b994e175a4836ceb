"""
Measurement arithmetic.

Pure functions -- no I/O, no side effects.
Everything here is deterministic and easy to unit-test.
"""
from __future__ import annotations

import math
import statistics
from typing import List, Optional, Tuple

from .constants import BITS_PER_MEGABIT, DEFAULT_CONTENT_LENGTH


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------

def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return int(math.floor(value + 0.5))


# ---------------------------------------------------------------------------
# Latency
# ---------------------------------------------------------------------------

def calculate_ping(samples: List[float]) -> Optional[int]:
    """Best-case round trip: the rounded minimum sample."""
    if not samples:
        return None
    return round_half_up(min(samples))


def calculate_jitter(samples: List[float]) -> Optional[int]:
    """Mean absolute deviation of *samples* from their mean, rounded."""
    if not samples:
        return None
    mean = statistics.mean(samples)
    return round_half_up(statistics.mean(abs(s - mean) for s in samples))


def summarize_latency(samples: List[float]) -> Tuple[Optional[int], Optional[int]]:
    """Return ``(ping_ms, jitter_ms)``; both None when *samples* is empty."""
    return calculate_ping(samples), calculate_jitter(samples)


# ---------------------------------------------------------------------------
# Throughput
# ---------------------------------------------------------------------------

def parse_content_length(raw: Optional[str]) -> int:
    """
    Parse a ``Content-Length`` header value.

    Falls back to ``DEFAULT_CONTENT_LENGTH`` when the header is missing,
    non-numeric, or not positive.
    """
    if raw is None:
        return DEFAULT_CONTENT_LENGTH
    try:
        length = int(str(raw).strip())
    except ValueError:
        return DEFAULT_CONTENT_LENGTH
    return length if length > 0 else DEFAULT_CONTENT_LENGTH


def download_progress(received_bytes: int, content_length: int) -> float:
    """Percentage of the body received, clamped to 100."""
    if content_length <= 0:
        return 100.0
    return min(100.0, received_bytes * 100 / content_length)


def throughput_mbps(received_bytes: int, elapsed_seconds: float) -> int:
    """Whole megabits (2**20 bits) per second."""
    if elapsed_seconds <= 0:
        return 0
    return round_half_up(received_bytes * 8 / elapsed_seconds / BITS_PER_MEGABIT)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def format_speed(speed_mbps: Optional[float]) -> str:
    """Human-readable speed string."""
    if speed_mbps is None:
        return "-"
    if speed_mbps >= 1000:
        return f"{speed_mbps / 1000:.2f} Gbps"
    return f"{speed_mbps:.2f} Mbps"


def format_latency(latency_ms: Optional[float]) -> str:
    """Human-readable latency string."""
    if latency_ms is None:
        return "-"
    if latency_ms >= 1000:
        return f"{latency_ms / 1000:.2f} s"
    return f"{latency_ms:.0f} ms"
