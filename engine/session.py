"""
Measurement session data model.

A :class:`TestSession` is the single mutable record a run writes into.
Only :class:`engine.controller.PhaseController` mutates it; everything
else (dashboards, JSON exporters) reads snapshots.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, Optional


class Phase(str, enum.Enum):
    """Stage of the measurement sequence."""

    IDLE = "idle"
    PING = "ping"
    DOWNLOAD = "download"
    UPLOAD = "upload"
    COMPLETE = "complete"
    CANCELLED = "cancelled"


# Phases during which a run is in flight.
ACTIVE_PHASES = frozenset({Phase.PING, Phase.DOWNLOAD, Phase.UPLOAD})


@dataclass
class NetworkInfo:
    """Public IP and ISP of the measuring host."""

    ip: str
    isp: str

    def to_dict(self) -> Dict[str, str]:
        return {"ip": self.ip, "isp": self.isp}


@dataclass
class TestSession:
    """Live state of one measurement session."""

    __test__ = False  # not a pytest test class

    phase: Phase = Phase.IDLE
    progress: float = 0.0
    ping_ms: Optional[int] = None
    jitter_ms: Optional[int] = None
    download_mbps: Optional[int] = None
    upload_mbps: Optional[int] = None
    error: Optional[str] = None
    network_info: Optional[NetworkInfo] = None

    def reset(self) -> None:
        """Clear per-run results.  ``network_info`` belongs to the session and survives."""
        self.phase = Phase.IDLE
        self.progress = 0.0
        self.ping_ms = None
        self.jitter_ms = None
        self.download_mbps = None
        self.upload_mbps = None
        self.error = None

    @property
    def is_running(self) -> bool:
        return self.phase in ACTIVE_PHASES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "progress": round(self.progress, 2),
            "ping_ms": self.ping_ms,
            "jitter_ms": self.jitter_ms,
            "download_mbps": self.download_mbps,
            "upload_mbps": self.upload_mbps,
            "error": self.error,
            "network_info": self.network_info.to_dict() if self.network_info else None,
        }
