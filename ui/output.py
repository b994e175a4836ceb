"""
Output formatting -- JSON result document and plain text.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from engine.session import TestSession
from engine.stats import format_latency, format_speed


def create_result_json(session: TestSession) -> Dict[str, Any]:
    """Build a JSON-serialisable result dict from a finished session."""
    info = session.network_info
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": session.phase.value,
        "client": info.to_dict() if info else None,
        "ping": session.ping_ms,
        "jitter": session.jitter_ms,
        "download": {"speed_mbps": session.download_mbps},
        "upload": {"speed_mbps": session.upload_mbps},
        "error": session.error,
    }


def format_text_result(session: TestSession) -> str:
    sep = "=" * 50
    mid = "-" * 50
    info = session.network_info
    lines = [sep, "Speed Test Results", sep]
    if info:
        lines.append(f"ISP: {info.isp}")
        lines.append(f"IP: {info.ip}")
        lines.append(mid)
    lines.append(f"Ping: {format_latency(session.ping_ms)} (jitter: {format_latency(session.jitter_ms)})")
    lines.append(f"Download: {format_speed(session.download_mbps)}")
    lines.append(f"Upload: {format_speed(session.upload_mbps)}")
    if session.error:
        lines.append(f"Error: {session.error}")
    lines.append(sep)
    return "\n".join(lines)
