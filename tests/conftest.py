import io
import json
from typing import Any, Callable

import pytest

from httpr.messages import Headers, Request, Response


class FakeTransport:
    """In-memory transport recording every request it is handed."""

    def __init__(self) -> None:
        self.requests: list[Request] = []
        self.bodies: list[bytes] = []
        self.timeouts: list[float | None] = []
        self.closed = False
        self.handler: Callable[[Request], Response] = lambda request: (
            self.make_response(request)
        )

    @staticmethod
    def make_response(
        request: Request,
        *,
        status: int = 200,
        body: bytes = b"",
        json_body: Any = None,
        headers: dict[str, str] | None = None,
        reason: str = "OK",
    ) -> Response:
        if json_body is not None:
            body = json.dumps(json_body).encode("utf-8")
            headers = {"Content-Type": "application/json", **(headers or {})}
        return Response(
            status_code=status,
            request=request,
            headers=Headers((headers or {}).items()),
            body=io.BytesIO(body),
            reason=reason,
        )

    def respond(self, **kwargs: Any) -> None:
        self.handler = lambda request: self.make_response(request, **kwargs)

    def send(self, request: Request, *, timeout: float | None = None) -> Response:
        request.cancel.raise_if_cancelled()
        self.requests.append(request)
        self.timeouts.append(timeout)
        self.bodies.append(request.body.read() if request.body else b"")
        return self.handler(request)

    def close(self) -> None:
        self.closed = True

    @property
    def last(self) -> Request:
        return self.requests[-1]


@pytest.fixture
def transport():
    return FakeTransport()
