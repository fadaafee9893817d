"""Error taxonomy for the httpr request pipeline.

Each pipeline stage fails with its own error type so callers can tell where a
call broke down. Wrapping errors keep the original failure as ``__cause__``.
"""

from __future__ import annotations


class HttpClientError(Exception):
    """Base class for all httpr errors."""


class BodyPreparationError(HttpClientError):
    """The request-body producer failed; nothing was sent."""


class RequestConstructionError(HttpClientError):
    """The request could not be built (bad URL or method)."""


class ChainError(HttpClientError):
    """An interceptor or the transport failed while executing the chain."""

    def __init__(self, message: str, error: BaseException) -> None:
        super().__init__(message)
        self.error = error


class ResponseDecodingError(HttpClientError):
    """The exchange succeeded but the response body could not be decoded."""


class InspectionError(HttpClientError):
    """The inspection interceptor could not read a message body."""


class TransportError(HttpClientError):
    """The transport failed to complete the round trip."""


class RequestTimeoutError(TransportError):
    """The transport deadline elapsed."""


class RetryableHttpError(TransportError):
    """A connection-level failure that a caller may choose to retry."""


class RequestCancelledError(TransportError):
    """The call's cancel token fired before the request was sent."""
