"""Error taxonomy for cluster queries and authentication."""

from __future__ import annotations


class RspamdeckError(Exception):
    """Base exception for console errors."""


class LocalValidationError(RspamdeckError):
    """Input rejected before any network call."""


class TransportError(RspamdeckError):
    """Timeout, connection failure, non-success status or undecodable body."""

    def __init__(self, reason: str, *, status_code: int | None = None, url: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code
        self.url = url


class EmptyResultError(RspamdeckError):
    """The request succeeded but the payload was empty."""


class AggregateFailure(RspamdeckError):
    """Every node in scope failed or returned an empty payload."""


class AuthRejectedError(RspamdeckError):
    """The server answered the login request with an explicit failure."""


class UnknownNodeError(RspamdeckError):
    """The selected server is not present in the known directory."""


__all__ = [
    "AggregateFailure",
    "AuthRejectedError",
    "EmptyResultError",
    "LocalValidationError",
    "RspamdeckError",
    "TransportError",
    "UnknownNodeError",
]
