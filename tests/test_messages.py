import io

import pytest

from httpr.context import CancelToken
from httpr.errors import RequestCancelledError
from httpr.messages import Headers, Request, Response


def test_headers_keep_duplicates_in_order():
    headers = Headers()
    headers.add("Accept", "text/html")
    headers.add("accept", "application/json")

    assert headers.get("ACCEPT") == "text/html"
    assert headers.get_all("Accept") == ["text/html", "application/json"]
    assert len(headers) == 2


def test_headers_set_replaces_every_value():
    headers = Headers([("X-A", "1"), ("x-a", "2"), ("X-B", "3")])

    headers.set("X-A", "4")

    assert headers.items() == [("X-B", "3"), ("X-A", "4")]
    assert "x-b" in headers
    assert "X-C" not in headers
    assert headers.get("X-C", "default") == "default"


def test_headers_copy_is_independent():
    headers = Headers([("X-A", "1")])
    copied = headers.copy()
    copied.add("X-B", "2")

    assert headers == Headers([("X-A", "1")])
    assert list(copied) == ["X-A", "X-B"]


def test_request_read_body_restores_stream():
    request = Request("POST", "https://x.io:8443/a", body=io.BytesIO(b"abc"))

    assert request.read_body() == b"abc"
    assert request.body.read() == b"abc"
    assert request.host == "x.io:8443"
    assert Request("GET", "https://x.io").read_body() == b""


def test_response_read_closes_and_replace_body_reopens():
    response = Response(200, Request("GET", "https://x.io"), body=io.BytesIO(b"data"))

    assert response.read() == b"data"
    assert response.body.closed

    response.replace_body(b"data")
    assert response.read() == b"data"
    assert not response.is_error
    assert Response(400, response.request).is_error


def test_cancel_token_states():
    token = CancelToken.background()
    assert not token.cancelled
    assert token.remaining() is None
    token.raise_if_cancelled()

    token.cancel()
    assert token.cancelled
    with pytest.raises(RequestCancelledError, match="cancelled"):
        token.raise_if_cancelled()


def test_cancel_token_deadline(monkeypatch):
    clock = iter([100.0, 100.5, 102.0, 102.0])
    monkeypatch.setattr("httpr.context.monotonic", lambda: next(clock))

    token = CancelToken(timeout=1.0)

    assert token.remaining() == 0.5
    assert token.cancelled
    with pytest.raises(RequestCancelledError, match="deadline"):
        token.raise_if_cancelled()
