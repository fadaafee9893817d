"""Client- and request-scoped configuration models."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .codecs import BodyConsumer, BodyProducer
from .interceptors import Interceptor
from .transport import RequestsTransport, Transport


def _default_headers() -> Mapping[str, str]:
    """Return immutable empty default headers mapping."""

    return MappingProxyType({})


@dataclass(frozen=True)
class ClientConfig:
    """Immutable defaults shared by every call a client makes.

    Concurrent calls read this without synchronization, so nothing here may
    change after construction.
    """

    transport: Transport
    base_url: str | None = None
    default_headers: Mapping[str, str] = field(default_factory=_default_headers)
    interceptors: tuple[Interceptor, ...] = ()
    request_body: BodyProducer | None = None
    response_body: BodyConsumer | None = None
    timeout_seconds: float | None = None

    def __post_init__(self) -> None:
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0 when provided")

        # Freeze copied headers to avoid post-init mutation side effects.
        object.__setattr__(
            self,
            "default_headers",
            MappingProxyType(dict(self.default_headers)),
        )
        object.__setattr__(self, "interceptors", tuple(self.interceptors))


@dataclass
class ClientConfigBuilder:
    """Mutable target that client options are applied to."""

    transport: Transport | None = None
    base_url: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    interceptors: list[Interceptor] = field(default_factory=list)
    request_body: BodyProducer | None = None
    response_body: BodyConsumer | None = None
    timeout_seconds: float | None = None

    def build(self) -> ClientConfig:
        """Freeze the builder, falling back to a ``requests`` transport."""
        return ClientConfig(
            transport=self.transport or RequestsTransport(),
            base_url=self.base_url,
            default_headers=self.headers,
            interceptors=tuple(self.interceptors),
            request_body=self.request_body,
            response_body=self.response_body,
            timeout_seconds=self.timeout_seconds,
        )


@dataclass
class RequestConfig:
    """Per-call overlay on top of a ``ClientConfig``.

    Query parameters are kept as ordered pairs so one key can carry several
    values in insertion order.
    """

    query_params: list[tuple[str, str]] = field(default_factory=list)
    headers: dict[str, str] = field(default_factory=dict)
    interceptors: list[Interceptor] = field(default_factory=list)
    request_body: BodyProducer | None = None
    response_body: BodyConsumer | None = None

    @classmethod
    def from_client(cls, config: ClientConfig) -> RequestConfig:
        """Seed a fresh overlay with the client's default codecs."""
        return cls(
            request_body=config.request_body,
            response_body=config.response_body,
        )
