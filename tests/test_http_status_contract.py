# pyright: reportUnknownParameterType=false, reportUnknownMemberType=false
from httpr.client import Client
from httpr.options import BaseURL, WithTransport


def _client(transport):
    return Client(BaseURL("http://example.com"), WithTransport(transport))


def test_get_404_is_ok_result_with_status_metadata(transport):
    transport.respond(body=b"not found", status=404, reason="Not Found")

    result = _client(transport).get("/missing")

    assert result.ok
    assert result.value.read() == b"not found"
    assert result.meta["status_code"] == 404
    assert result.meta["reason"] == "Not Found"


def test_get_500_is_ok_result_with_status_metadata(transport):
    transport.respond(body=b"server error", status=500, reason="Internal Server Error")

    result = _client(transport).get("/error")

    assert result.ok
    assert result.value.read() == b"server error"
    assert result.meta["status_code"] == 500
    assert result.meta["reason"] == "Internal Server Error"


def test_302_is_returned_as_is(transport):
    transport.respond(status=302, reason="Found", headers={"Location": "/elsewhere"})

    result = _client(transport).get("/redirect")

    assert result.ok
    assert result.meta["status_code"] == 302
    assert result.value.headers.get("Location") == "/elsewhere"
    assert len(transport.requests) == 1


def test_body_is_left_unread_without_consumer(transport):
    transport.respond(body=b"payload")

    result = _client(transport).get("/data")

    assert not result.value.body.closed
    assert result.value.read() == b"payload"
    assert result.value.body.closed
