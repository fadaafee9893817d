"""Interceptor contract and chain composition.

An interceptor receives the outgoing request plus a handle to the rest of the
chain. It may inspect or mutate the request, call ``next`` zero or one times
(or several, if it implements its own retry loop), and inspect the result on
the way back out.

Interceptors report failure by returning ``Err``. A returned ``Err`` must be
passed outward untouched; the pipeline never retries or compensates.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol, Sequence, runtime_checkable

from .messages import Request, Response
from .types import Err, Result

logger = logging.getLogger(__name__)

Handler = Callable[[Request], Result[Response, Exception]]
"""The rest of the chain, as seen from inside an interceptor."""


@runtime_checkable
class Interceptor(Protocol):
    def handle(
        self, request: Request, next: Handler
    ) -> Result[Response, Exception]: ...


class HandleFunc:
    """Adapt a plain function into an ``Interceptor``.

    Example:
        >>> def add_request_id(request, next):
        ...     request.headers.set("X-Request-ID", "1234")
        ...     return next(request)
        >>> interceptor = HandleFunc(add_request_id)
    """

    def __init__(
        self, fn: Callable[[Request, Handler], Result[Response, Exception]]
    ) -> None:
        self._fn = fn

    def handle(self, request: Request, next: Handler) -> Result[Response, Exception]:
        return self._fn(request, next)

    def __repr__(self) -> str:
        name = getattr(self._fn, "__qualname__", repr(self._fn))
        return f"HandleFunc({name})"


def _link(interceptor: Interceptor, next_handler: Handler) -> Handler:
    def handler(request: Request) -> Result[Response, Exception]:
        try:
            return interceptor.handle(request, next_handler)
        except Exception as exc:
            logger.debug("interceptor %r raised %s", interceptor, type(exc).__name__)
            return Err(exc)

    return handler


def chain(interceptors: Sequence[Interceptor], terminal: Handler) -> Handler:
    """Compose interceptors around ``terminal`` into a single handler.

    The first interceptor is the outermost wrapper: its "before" logic runs
    first and its "after" logic runs last. An empty sequence yields the
    terminal handler alone.

    Args:
        interceptors: Interceptors in declared order.
        terminal: Innermost handler performing the transport call.

    Returns:
        A handler that runs the whole chain for one request.
    """
    handler = terminal
    for interceptor in reversed(interceptors):
        handler = _link(interceptor, handler)
    return handler
