"""Metrics interceptor reporting request counts and round-trip latency.

The observer is an ordinary interceptor: the chain knows nothing about
metrics, and instrumentation problems never fail a call.
"""

from __future__ import annotations

import logging
from time import perf_counter
from typing import Any

from opentelemetry import metrics

from .interceptors import Handler
from .messages import Request, Response
from .types import Result

logger = logging.getLogger(__name__)


class Observer:
    """Record ``<prefix>.requests`` and ``<prefix>.roundtrip`` for each call.

    Attributes recorded: ``http.method``, ``http.url``, ``http.host`` and
    either ``http.status_code`` (the call produced a response) or
    ``error=True`` (it did not).

    Example:
        >>> client = Client(Intercept(Observer(metric_prefix="github")))
    """

    def __init__(
        self,
        *,
        meter_provider: metrics.MeterProvider | None = None,
        metric_prefix: str = "httpr",
    ) -> None:
        """Create the observer and its instruments.

        Args:
            meter_provider: Provider to create instruments from. Defaults to
                the globally configured OpenTelemetry provider.
            metric_prefix: Meter name and instrument-name prefix.
        """
        provider = meter_provider or metrics.get_meter_provider()
        self.metric_prefix = metric_prefix
        self._meter = provider.get_meter(metric_prefix)
        self._request_counter = self._meter.create_counter(
            f"{metric_prefix}.requests",
            description="Total number of requests sent",
        )
        self._roundtrip_duration = self._meter.create_histogram(
            f"{metric_prefix}.roundtrip",
            unit="ms",
            description="Duration of HTTP requests",
        )

    def handle(self, request: Request, next: Handler) -> Result[Response, Exception]:
        start = perf_counter()
        result = next(request)
        duration_ms = int((perf_counter() - start) * 1000)

        attributes: dict[str, Any] = {
            "http.method": request.method,
            "http.url": request.url,
            "http.host": request.host,
        }
        if result.ok:
            attributes["http.status_code"] = result.value.status_code
        else:
            attributes["error"] = True

        try:
            self._request_counter.add(1, attributes)
            self._roundtrip_duration.record(duration_ms, attributes)
        except Exception:
            logger.exception(
                "failed to record metrics for %s %s", request.method, request.url
            )

        return result

    def __repr__(self) -> str:
        return f"Observer(metric_prefix={self.metric_prefix!r})"
