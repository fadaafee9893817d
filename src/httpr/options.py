"""Configuration options for clients and individual requests.

Each option is a small immutable value that knows how to apply itself to a
``ClientConfigBuilder`` (``apply_client``), a ``RequestConfig``
(``apply_request``), or both. Options are applied in the order given, so the
merge is easy to audit: later options win, and request options always land
on top of the client defaults.

Example:
    >>> client = Client(
    ...     BaseURL("https://api.example.com"),
    ...     Header("Accept", "application/json"),
    ... )
    >>> client.get("/posts", QueryParam("page", "2"), Header("X-Request-ID", "1"))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    Any,
    BinaryIO,
    Callable,
    Iterable,
    Mapping,
    Protocol,
    runtime_checkable,
)

from . import codecs
from .codecs import BodyConsumer, BodyProducer, Buffer
from .config import ClientConfigBuilder, RequestConfig
from .inspector import Inspector
from .interceptors import Interceptor
from .transport import Transport


@runtime_checkable
class ClientOption(Protocol):
    def apply_client(self, builder: ClientConfigBuilder) -> None: ...


@runtime_checkable
class RequestOption(Protocol):
    def apply_request(self, config: RequestConfig) -> None: ...


@dataclass(frozen=True)
class BaseURL:
    url: str

    def apply_client(self, builder: ClientConfigBuilder) -> None:
        builder.base_url = self.url


@dataclass(frozen=True)
class Header:
    """Set a header for every call (client) or for one call (request)."""

    key: str
    value: str

    def apply_client(self, builder: ClientConfigBuilder) -> None:
        builder.headers[self.key] = self.value

    def apply_request(self, config: RequestConfig) -> None:
        config.headers[self.key] = self.value


@dataclass(frozen=True)
class QueryParam:
    """Append a query value; repeating a key keeps every value in order."""

    key: str
    value: str

    def apply_request(self, config: RequestConfig) -> None:
        config.query_params.append((self.key, str(self.value)))


@dataclass(frozen=True)
class Timeout:
    seconds: float

    def __post_init__(self) -> None:
        if self.seconds <= 0:
            raise ValueError("timeout must be > 0")

    def apply_client(self, builder: ClientConfigBuilder) -> None:
        builder.timeout_seconds = self.seconds


@dataclass(frozen=True)
class WithTransport:
    """Replace the default ``requests`` transport."""

    transport: Transport

    def apply_client(self, builder: ClientConfigBuilder) -> None:
        builder.transport = self.transport


@dataclass(frozen=True)
class Intercept:
    """Append an interceptor to the client chain or to one call's chain."""

    interceptor: Interceptor

    def apply_client(self, builder: ClientConfigBuilder) -> None:
        builder.interceptors.append(self.interceptor)

    def apply_request(self, config: RequestConfig) -> None:
        config.interceptors.append(self.interceptor)


@dataclass(frozen=True)
class RequestBody:
    producer: BodyProducer

    def apply_client(self, builder: ClientConfigBuilder) -> None:
        builder.request_body = self.producer

    def apply_request(self, config: RequestConfig) -> None:
        config.request_body = self.producer


@dataclass(frozen=True)
class ResponseBody:
    consumer: BodyConsumer

    def apply_client(self, builder: ClientConfigBuilder) -> None:
        builder.response_body = self.consumer

    def apply_request(self, config: RequestConfig) -> None:
        config.response_body = self.consumer


def Inspect() -> Intercept:
    """Dump every request and response to stdout."""
    return Intercept(Inspector())


def request_body(content_type: str, body: Callable[[], BinaryIO | None]) -> RequestBody:
    return RequestBody(codecs.producer(content_type, body))


def request_body_json(body: Any) -> RequestBody:
    """JSON-encode ``body`` and send it as ``application/json``."""
    return RequestBody(codecs.json_producer(body))


def request_body_string(body: str) -> RequestBody:
    return RequestBody(codecs.string_producer(body))


def request_body_form(
    data: Mapping[str, Any] | Iterable[tuple[str, Any]],
) -> RequestBody:
    return RequestBody(codecs.form_producer(data))


def request_body_bytes(content_type: str, body: bytes) -> RequestBody:
    return RequestBody(codecs.bytes_producer(content_type, body))


def request_body_stream(content_type: str, body: BinaryIO) -> RequestBody:
    return RequestBody(codecs.stream_producer(content_type, body))


def response_body_json(success: Any, error: Any = None) -> ResponseBody:
    """Decode JSON into ``success`` below status 400, else into ``error``."""
    return ResponseBody(codecs.json_consumer(success, error))


def response_body_string(dest: Buffer[str]) -> ResponseBody:
    return ResponseBody(codecs.string_consumer(dest))


def response_body_bytes(dest: Buffer[bytes]) -> ResponseBody:
    return ResponseBody(codecs.bytes_consumer(dest))


def apply_client_options(builder: ClientConfigBuilder, options: Iterable[Any]) -> None:
    for option in options:
        if not isinstance(option, ClientOption):
            raise TypeError(f"{option!r} cannot be applied to a client")
        option.apply_client(builder)


def apply_request_options(config: RequestConfig, options: Iterable[Any]) -> None:
    for option in options:
        if not isinstance(option, RequestOption):
            raise TypeError(f"{option!r} cannot be applied to a request")
        option.apply_request(config)
