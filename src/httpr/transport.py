"""Transport capability: the terminal round trip of every chain.

The pipeline is transport-agnostic; anything implementing ``Transport`` can
perform the network exchange. ``RequestsTransport`` is the default and is
backed by a ``requests.Session``. Retries, redirects and connection pooling
are the transport's business, not the pipeline's.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import requests

from .errors import RequestTimeoutError, RetryableHttpError, TransportError
from .messages import Headers, Request, Response

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    def send(self, request: Request, *, timeout: float | None = None) -> Response:
        """Perform one round trip.

        Raises:
            TransportError: On any failure to complete the exchange.
        """
        ...

    def close(self) -> None: ...


def resolve_timeout(request: Request, timeout: float | None) -> float | None:
    """Cap the configured timeout by the request's cancel-token deadline."""
    remaining = request.cancel.remaining()
    if remaining is None:
        return timeout
    if timeout is None:
        return remaining
    return min(timeout, remaining)


class RequestsTransport:
    """Default transport built on ``requests``.

    Responses are streamed so the body reaches consumers unread. Redirects
    are not followed.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        verify_tls: bool = True,
    ) -> None:
        """Create a new RequestsTransport.

        Args:
            session: Session to send through. A private one is created when
                omitted, and closed by ``close``.
            verify_tls: Whether TLS certificates are verified.
        """
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._verify_tls = verify_tls

    def send(self, request: Request, *, timeout: float | None = None) -> Response:
        request.cancel.raise_if_cancelled()
        resolved_timeout = resolve_timeout(request, timeout)
        try:
            raw = self._session.request(
                request.method,
                request.url,
                headers=_merge_duplicates(request.headers),
                data=request.body,
                timeout=resolved_timeout,
                allow_redirects=False,
                stream=True,
                verify=self._verify_tls,
            )
        except requests.exceptions.Timeout as e:
            raise RequestTimeoutError(str(e)) from e
        except requests.exceptions.ConnectionError as e:
            raise RetryableHttpError(str(e)) from e
        except requests.exceptions.RequestException as e:
            # Generic fallback for other request exceptions
            raise TransportError(str(e)) from e

        return _to_response(raw, request)

    def close(self) -> None:
        if self._owns_session:
            self._session.close()


def _merge_duplicates(headers: Headers) -> dict[str, str]:
    """Fold repeated header keys into one comma-joined field (RFC 9110 5.3)."""
    merged: dict[str, str] = {}
    canonical: dict[str, str] = {}
    for key, value in headers.items():
        lowered = key.lower()
        if lowered in canonical:
            name = canonical[lowered]
            merged[name] = f"{merged[name]}, {value}"
        else:
            canonical[lowered] = key
            merged[key] = value
    return merged


def _to_response(raw: requests.Response, request: Request) -> Response:
    body = raw.raw
    # Let urllib3 undo gzip/deflate so consumers see the entity body.
    body.decode_content = True
    try:
        elapsed = raw.elapsed.total_seconds()
    except AttributeError:
        elapsed = 0.0
    return Response(
        status_code=raw.status_code,
        request=request,
        headers=Headers(raw.headers.items()),
        body=body,
        reason=raw.reason or "",
        elapsed_seconds=elapsed,
    )
