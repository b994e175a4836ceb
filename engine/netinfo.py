"""
Public IP / ISP lookup.

Best effort only: a single request to an IP-geolocation JSON endpoint,
no retries, and every failure collapses to ``None``.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from .constants import DEFAULT_REQUEST_TIMEOUT, NETWORK_INFO_URL, UNKNOWN_ISP
from .exceptions import NetworkInfoError
from .session import NetworkInfo

logger = logging.getLogger(__name__)


def parse_network_info(data: Any) -> NetworkInfo:
    """
    Build :class:`NetworkInfo` from an ipwho.is-style payload::

        {"success": true, "ip": "...", "isp": "...", "connection": {"isp": "..."}}

    The ISP comes from ``connection.isp``, then top-level ``isp``, then
    ``"Unknown ISP"``.
    """
    if not isinstance(data, dict):
        raise NetworkInfoError("Payload is not an object")
    if not data.get("success"):
        raise NetworkInfoError(str(data.get("message") or "Lookup unsuccessful"))

    ip = data.get("ip")
    if not isinstance(ip, str) or not ip:
        raise NetworkInfoError("Payload has no ip")

    connection = data.get("connection")
    nested_isp = connection.get("isp") if isinstance(connection, dict) else None
    isp = nested_isp or data.get("isp") or UNKNOWN_ISP
    return NetworkInfo(ip=ip, isp=str(isp))


class NetworkInfoLookup:
    """One-shot IP/ISP resolver."""

    def __init__(
        self,
        url: str = NETWORK_INFO_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self.url = url
        self.timeout = timeout

    async def lookup(self, http: aiohttp.ClientSession) -> Optional[NetworkInfo]:
        try:
            return await self._fetch(http)
        except NetworkInfoError as exc:
            logger.debug("Network info unavailable: %s", exc)
            return None

    async def _fetch(self, http: aiohttp.ClientSession) -> NetworkInfo:
        try:
            async with http.get(
                self.url,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as resp:
                if not 200 <= resp.status < 300:
                    raise NetworkInfoError(f"HTTP {resp.status}")
                data = await resp.json(content_type=None)
        except asyncio.TimeoutError as exc:
            raise NetworkInfoError("Lookup timeout") from exc
        except (aiohttp.ClientError, OSError, ValueError) as exc:
            raise NetworkInfoError(str(exc) or exc.__class__.__name__) from exc
        return parse_network_info(data)
