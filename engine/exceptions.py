"""Exceptions for the speedcheck measurement engine."""


class SpeedcheckError(Exception):
    """Base exception for speedcheck."""


class ProbeUnreachableError(SpeedcheckError):
    """A single latency probe could not complete."""


class DownloadUnreachableError(SpeedcheckError):
    """The download request could not be established or was rejected."""


class DownloadStreamError(SpeedcheckError):
    """The download body failed after the response had started."""


class NetworkInfoError(SpeedcheckError):
    """The IP/ISP lookup failed or returned an unusable payload."""


class TestInProgressError(SpeedcheckError):
    """A measurement run is already active on this controller."""

    __test__ = False  # not a pytest test class


class TestCancelledError(SpeedcheckError):
    """The active measurement run was cancelled."""

    __test__ = False
