"""
Measurement sequence orchestration.

:class:`PhaseController` owns the shared HTTP client and is the only writer
of :class:`TestSession`.  A run walks the phases strictly in order::

    idle -> ping -> download -> upload -> complete

A probe failure is recorded in ``session.error`` and the sequence carries
on with the next phase.  Cancelling through a :class:`CancelToken` ends
the run in the terminal ``cancelled`` phase instead.

Typical use::

    async with PhaseController() as controller:
        session = controller.open_session()
        await controller.run_test(session)
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, Set

import aiohttp

from .cancel import CancelToken
from .constants import (
    COMMON_HEADERS,
    DEFAULT_REQUEST_TIMEOUT,
    DOWNLOAD_URL,
    NETWORK_INFO_URL,
    PING_URL,
    UPLOAD_RANGE,
)
from .download import ThroughputProbe
from .exceptions import SpeedcheckError, TestCancelledError, TestInProgressError
from .latency import LatencyProbe
from .netinfo import NetworkInfoLookup
from .session import Phase, TestSession
from .simulator import FallbackSimulator

logger = logging.getLogger(__name__)

SessionObserver = Callable[[TestSession], None]


class PhaseController:
    """Run ping, download and upload measurements against one session."""

    def __init__(
        self,
        ping_url: str = PING_URL,
        download_url: str = DOWNLOAD_URL,
        network_info_url: str = NETWORK_INFO_URL,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        *,
        latency_probe: Optional[LatencyProbe] = None,
        throughput_probe: Optional[ThroughputProbe] = None,
        simulator: Optional[FallbackSimulator] = None,
        network_lookup: Optional[NetworkInfoLookup] = None,
        http: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.request_timeout = request_timeout
        self.simulator = simulator or FallbackSimulator()
        self.latency_probe = latency_probe or LatencyProbe(
            url=ping_url, timeout=request_timeout,
        )
        self.throughput_probe = throughput_probe or ThroughputProbe(
            url=download_url, simulator=self.simulator,
        )
        self.network_lookup = network_lookup or NetworkInfoLookup(
            url=network_info_url, timeout=request_timeout,
        )
        self.on_update: Optional[SessionObserver] = None

        self._http = http
        self._owns_http = http is None
        self._busy = False
        self._token: Optional[CancelToken] = None
        self._info_task: Optional[asyncio.Task] = None
        self._info_tasks: Set[asyncio.Task] = set()

    # -- Context manager ----------------------------------------------------

    async def __aenter__(self) -> PhaseController:
        if self._http is None:
            timeout = aiohttp.ClientTimeout(
                total=None,
                connect=self.request_timeout,
                sock_read=self.request_timeout,
            )
            self._http = aiohttp.ClientSession(headers=COMMON_HEADERS, timeout=timeout)
            self._owns_http = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        pending = list(self._info_tasks)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._info_tasks.clear()
        self._info_task = None

        if self._owns_http and self._http is not None:
            await self._http.close()
            self._http = None

    # -- Internal helpers ---------------------------------------------------

    def _ensure_http(self) -> aiohttp.ClientSession:
        if self._http is None:
            raise RuntimeError(
                "PhaseController must be used as an async context manager "
                "(async with PhaseController() as controller: ...)"
            )
        return self._http

    def _notify(self, session: TestSession) -> None:
        if self.on_update:
            self.on_update(session)

    def _enter_phase(self, session: TestSession, phase: Phase) -> None:
        logger.info("Phase: %s", phase.value)
        session.phase = phase
        if phase in (Phase.DOWNLOAD, Phase.UPLOAD):
            session.progress = 0.0
        self._notify(session)

    def _progress_writer(self, session: TestSession) -> Callable[[float], None]:
        def _write(progress: float) -> None:
            session.progress = progress
            self._notify(session)
        return _write

    def _record_error(self, session: TestSession, exc: SpeedcheckError) -> None:
        logger.warning("%s phase failed: %s", session.phase.value, exc)
        session.error = str(exc)
        self._notify(session)

    # -- Session ------------------------------------------------------------

    def open_session(self, lookup_network_info: bool = True) -> TestSession:
        """Create a fresh session and start the background IP/ISP lookup."""
        session = TestSession()
        if lookup_network_info:
            http = self._ensure_http()
            task = asyncio.ensure_future(self._lookup_network_info(session, http))
            self._info_tasks.add(task)
            task.add_done_callback(self._info_tasks.discard)
            self._info_task = task
        return session

    async def _lookup_network_info(
        self, session: TestSession, http: aiohttp.ClientSession,
    ) -> None:
        info = await self.network_lookup.lookup(http)
        if info is not None:
            session.network_info = info
            self._notify(session)

    async def wait_network_info(self) -> None:
        """Wait for the background lookup started by :meth:`open_session`."""
        if self._info_task is None:
            return
        await asyncio.gather(self._info_task, return_exceptions=True)

    # -- Run ----------------------------------------------------------------

    @property
    def busy(self) -> bool:
        return self._busy

    def cancel(self) -> None:
        """Cancel the active run, if any."""
        if self._token is not None:
            self._token.cancel()

    async def run_test(
        self,
        session: TestSession,
        token: Optional[CancelToken] = None,
    ) -> None:
        """Run the full ping -> download -> upload sequence on *session*."""
        if self._busy:
            raise TestInProgressError("A measurement is already running")
        http = self._ensure_http()

        self._busy = True
        self._token = token or CancelToken()
        try:
            session.reset()
            self._notify(session)
            try:
                await self._ping_phase(session, http, self._token)
                await self._download_phase(session, http, self._token)
                await self._upload_phase(session, self._token)
            except TestCancelledError:
                logger.info("Measurement cancelled during %s", session.phase.value)
                session.phase = Phase.CANCELLED
                self._notify(session)
                return
            self._enter_phase(session, Phase.COMPLETE)
        finally:
            self._busy = False
            self._token = None

    # -- Phases -------------------------------------------------------------

    async def _ping_phase(
        self, session: TestSession, http: aiohttp.ClientSession, token: CancelToken,
    ) -> None:
        token.raise_if_cancelled()
        self._enter_phase(session, Phase.PING)
        try:
            result = await token.run(self.latency_probe.measure(http))
        except TestCancelledError:
            raise
        except SpeedcheckError as exc:
            self._record_error(session, exc)
            return
        session.ping_ms = result.ping_ms
        session.jitter_ms = result.jitter_ms
        self._notify(session)

    async def _download_phase(
        self, session: TestSession, http: aiohttp.ClientSession, token: CancelToken,
    ) -> None:
        token.raise_if_cancelled()
        self._enter_phase(session, Phase.DOWNLOAD)
        self.throughput_probe.on_progress = self._progress_writer(session)
        try:
            outcome = await token.run(self.throughput_probe.measure(http))
        except TestCancelledError:
            raise
        except SpeedcheckError as exc:
            session.download_mbps = 0
            self._record_error(session, exc)
            return
        finally:
            self.throughput_probe.on_progress = None

        if outcome.simulated:
            logger.info("Download result simulated: %d Mbps", outcome.mbps)
        session.download_mbps = outcome.mbps
        self._notify(session)

    async def _upload_phase(self, session: TestSession, token: CancelToken) -> None:
        token.raise_if_cancelled()
        self._enter_phase(session, Phase.UPLOAD)
        low, high = UPLOAD_RANGE
        try:
            outcome = await token.run(
                self.simulator.run(low, high, on_progress=self._progress_writer(session))
            )
        except TestCancelledError:
            raise
        except SpeedcheckError as exc:
            session.upload_mbps = 0
            self._record_error(session, exc)
            return
        session.upload_mbps = outcome.mbps
        self._notify(session)
