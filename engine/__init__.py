"""Speedcheck measurement engine -- latency, download and simulated upload."""

from .cancel import CancelToken
from .controller import PhaseController
from .download import ThroughputProbe
from .exceptions import (
    DownloadStreamError,
    DownloadUnreachableError,
    NetworkInfoError,
    ProbeUnreachableError,
    SpeedcheckError,
    TestCancelledError,
    TestInProgressError,
)
from .latency import LatencyProbe, LatencyResult
from .netinfo import NetworkInfoLookup, parse_network_info
from .session import NetworkInfo, Phase, TestSession
from .simulator import FallbackSimulator, ProbeOutcome
from .stats import (
    calculate_jitter,
    calculate_ping,
    download_progress,
    format_latency,
    format_speed,
    parse_content_length,
    throughput_mbps,
)

__all__ = [
    "CancelToken",
    "DownloadStreamError",
    "DownloadUnreachableError",
    "FallbackSimulator",
    "LatencyProbe",
    "LatencyResult",
    "NetworkInfo",
    "NetworkInfoError",
    "NetworkInfoLookup",
    "Phase",
    "PhaseController",
    "ProbeOutcome",
    "ProbeUnreachableError",
    "SpeedcheckError",
    "TestCancelledError",
    "TestInProgressError",
    "TestSession",
    "ThroughputProbe",
    "calculate_jitter",
    "calculate_ping",
    "download_progress",
    "format_latency",
    "format_speed",
    "parse_content_length",
    "parse_network_info",
    "throughput_mbps",
]
