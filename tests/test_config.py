# pyright: reportUnknownMemberType=false
import pytest

from httpr.client import Client
from httpr.config import ClientConfig, ClientConfigBuilder, RequestConfig
from httpr.context import CancelToken
from httpr.options import (
    BaseURL,
    Header,
    Intercept,
    Timeout,
    WithTransport,
    request_body_string,
    response_body_json,
)
from httpr.transport import RequestsTransport


def test_config_defaults_are_stable(transport):
    config = ClientConfig(transport=transport)

    assert config.base_url is None
    assert dict(config.default_headers) == {}
    assert config.interceptors == ()
    assert config.request_body is None
    assert config.response_body is None
    assert config.timeout_seconds is None


def test_builder_falls_back_to_requests_transport():
    config = ClientConfigBuilder().build()

    assert isinstance(config.transport, RequestsTransport)


def test_config_default_headers_are_independent(transport):
    first = ClientConfig(transport=transport)
    second = ClientConfig(transport=transport)

    assert first.default_headers is not second.default_headers


def test_config_default_headers_are_immutable(transport):
    config = ClientConfig(transport=transport, default_headers={"X-Test": "1"})

    with pytest.raises(TypeError):
        config.default_headers["X-Test"] = "2"  # type: ignore[index]


def test_config_copies_external_headers_input(transport):
    headers = {"X-Test": "1"}
    config = ClientConfig(transport=transport, default_headers=headers)
    headers["X-Test"] = "2"

    assert config.default_headers["X-Test"] == "1"


def test_config_rejects_non_positive_timeouts(transport):
    with pytest.raises(ValueError):
        ClientConfig(transport=transport, timeout_seconds=0)
    with pytest.raises(ValueError):
        ClientConfig(transport=transport, timeout_seconds=-1)

    with pytest.raises(ValueError):
        Timeout(0)
    with pytest.raises(ValueError):
        CancelToken(timeout=-1)


def test_client_options_are_applied_in_order(transport):
    first = object()
    client = Client(
        WithTransport(transport),
        BaseURL("https://a.io"),
        BaseURL("https://b.io"),
        Header("X-Test", "1"),
        Intercept(first),
        Timeout(10),
        Timeout(2),
    )

    config = client.config
    assert config.transport is transport
    assert config.base_url == "https://b.io"
    assert dict(config.default_headers) == {"X-Test": "1"}
    assert config.interceptors == (first,)
    assert config.timeout_seconds == 2


def test_request_config_is_seeded_from_client_codecs(transport):
    body = request_body_string("x")
    consumer = response_body_json({})
    client = Client(WithTransport(transport), body, consumer)

    request_config = RequestConfig.from_client(client.config)

    assert request_config.request_body is body.producer
    assert request_config.response_body is consumer.consumer
    assert request_config.headers == {}
    assert request_config.query_params == []
    assert request_config.interceptors == []
