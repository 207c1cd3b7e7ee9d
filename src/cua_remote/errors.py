"""
Error taxonomy for cua-remote.

Cancellation and timeouts are not errors; they are StopReason values
(see schemas.events).
"""

from __future__ import annotations


class CUAError(Exception):
    """Base class for every error raised by cua-remote."""


class ConfigurationError(CUAError):
    """Settings or resolution bounds are invalid or inconsistent."""


class UnsupportedAction(CUAError):
    """The executor does not know how to perform this action."""

    def __init__(self, message: str, action_type: str = ""):
        super().__init__(message)
        self.action_type = action_type


class RemoteSessionError(CUAError):
    """The remote desktop failed a call (connection lost, action rejected)."""


class PlanningServiceError(CUAError):
    """The planning service failed to produce a response."""


class PlanningQuotaExceeded(PlanningServiceError):
    """The planning service rejected the request for quota / rate-limit reasons."""


class SessionNotFoundError(CUAError):
    """No desktop session is registered under the requested id."""


class SessionBusyError(CUAError):
    """Another action loop already holds the session."""
