# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false
# pyright: reportUnknownParameterType=false, reportMissingParameterType=false
from unittest.mock import Mock

import pytest
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import InMemoryMetricReader

from httpr.client import Client
from httpr.errors import ChainError, RetryableHttpError
from httpr.observer import Observer
from httpr.options import BaseURL, Intercept, WithTransport


@pytest.fixture
def reader():
    return InMemoryMetricReader()


@pytest.fixture
def observer(reader):
    return Observer(meter_provider=MeterProvider(metric_readers=[reader]))


def _points(reader, name):
    data = reader.get_metrics_data()
    points = []
    if data is None:
        return points
    for resource_metrics in data.resource_metrics:
        for scope_metrics in resource_metrics.scope_metrics:
            for metric in scope_metrics.metrics:
                if metric.name == name:
                    points.extend(metric.data.data_points)
    return points


def test_records_count_and_duration_with_status(reader, observer, transport):
    transport.respond(status=201)
    client = Client(BaseURL("https://x.io"), WithTransport(transport), Intercept(observer))

    assert client.post("/posts").ok
    assert client.post("/posts").ok

    counts = _points(reader, "httpr.requests")
    assert len(counts) == 1
    assert counts[0].value == 2
    assert dict(counts[0].attributes) == {
        "http.method": "POST",
        "http.url": "https://x.io/posts",
        "http.host": "x.io",
        "http.status_code": 201,
    }

    durations = _points(reader, "httpr.roundtrip")
    assert len(durations) == 1
    assert durations[0].count == 2


def test_transport_error_is_recorded_and_propagated(reader, observer, transport):
    failure = RetryableHttpError("refused")

    def handler(request):
        raise failure

    transport.handler = handler
    client = Client(BaseURL("https://x.io"), WithTransport(transport), Intercept(observer))

    result = client.get("/posts")

    assert isinstance(result.error, ChainError)
    assert result.error.error is failure
    counts = _points(reader, "httpr.requests")
    assert len(counts) == 1
    assert counts[0].attributes["error"] is True
    assert "http.status_code" not in counts[0].attributes


def test_error_status_is_not_an_error_for_the_observer(reader, observer, transport):
    transport.respond(status=503)
    client = Client(BaseURL("https://x.io"), WithTransport(transport), Intercept(observer))

    assert client.get("/health").ok

    (point,) = _points(reader, "httpr.requests")
    assert point.attributes["http.status_code"] == 503
    assert "error" not in point.attributes


def test_metric_prefix_names_instruments(reader, transport):
    observer = Observer(
        meter_provider=MeterProvider(metric_readers=[reader]),
        metric_prefix="github",
    )
    client = Client(WithTransport(transport), Intercept(observer))

    client.get("https://api.github.com/repos")

    assert len(_points(reader, "github.requests")) == 1
    assert len(_points(reader, "github.roundtrip")) == 1
    assert _points(reader, "httpr.requests") == []


def test_instrument_failure_is_logged_not_surfaced(transport, caplog):
    meter = Mock()
    meter.create_counter.return_value.add.side_effect = RuntimeError("exporter down")
    provider = Mock()
    provider.get_meter.return_value = meter
    client = Client(
        WithTransport(transport),
        Intercept(Observer(meter_provider=provider)),
    )

    with caplog.at_level("ERROR", logger="httpr.observer"):
        result = client.get("https://x.io")

    assert result.ok
    assert "failed to record metrics" in caplog.text
