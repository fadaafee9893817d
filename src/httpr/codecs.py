"""Request-body producers and response-body consumers.

A producer is a zero-argument callable returning ``(stream, content_type)``.
It runs once per call, before any network I/O; whatever it raises aborts the
call as a body-preparation failure.

A consumer is a callable taking the final ``Response``. It drains and closes
the body exactly once and raises if the body cannot be interpreted.
"""

from __future__ import annotations

import dataclasses
import io
import json
from typing import Any, BinaryIO, Callable, Generic, Iterable, Mapping, TypeVar
from urllib.parse import urlencode

from pydantic import BaseModel, TypeAdapter, ValidationError

from .messages import Response

T = TypeVar("T")

BodyProducer = Callable[[], "tuple[BinaryIO | None, str]"]
BodyConsumer = Callable[[Response], None]

JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class Buffer(Generic[T]):
    """Mutable holder that string and bytes consumers write into."""

    def __init__(self, value: T | None = None) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Buffer({self.value!r})"


def producer(content_type: str, body_fn: Callable[[], BinaryIO | None]) -> BodyProducer:
    """Pair a body factory with a fixed content type."""

    def produce() -> tuple[BinaryIO | None, str]:
        return body_fn(), content_type

    return produce


def _to_jsonable(body: Any) -> Any:
    if dataclasses.is_dataclass(body) and not isinstance(body, type):
        return dataclasses.asdict(body)
    return body


def json_producer(body: Any) -> BodyProducer:
    """Encode ``body`` as JSON when the call runs, not when the option is built."""

    def encode() -> BinaryIO:
        return io.BytesIO(json.dumps(_to_jsonable(body)).encode("utf-8"))

    return producer(JSON_CONTENT_TYPE, encode)


def string_producer(body: str) -> BodyProducer:
    return producer(TEXT_CONTENT_TYPE, lambda: io.BytesIO(body.encode("utf-8")))


def form_producer(data: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> BodyProducer:
    return producer(
        FORM_CONTENT_TYPE,
        lambda: io.BytesIO(urlencode(data, doseq=True).encode("ascii")),
    )


def bytes_producer(content_type: str, body: bytes) -> BodyProducer:
    return producer(content_type, lambda: io.BytesIO(body))


def stream_producer(content_type: str, body: BinaryIO) -> BodyProducer:
    """Send an already-open stream. The stream can only be sent once."""
    return producer(content_type, lambda: body)


def _field_values(target: Any) -> dict[str, Any] | None:
    """Current values of a dataclass or pydantic model target, by field name."""
    if isinstance(target, BaseModel):
        return {name: getattr(target, name) for name in type(target).model_fields}
    if dataclasses.is_dataclass(target):
        return {
            f.name: getattr(target, f.name)
            for f in dataclasses.fields(target)
            if f.init
        }
    return None


def _assign(target: Any, data: Any) -> None:
    """Decode ``data`` into ``target`` in place."""
    if isinstance(target, Buffer):
        target.value = data
        return
    if isinstance(target, dict):
        if not isinstance(data, dict):
            raise TypeError(
                f"cannot decode JSON {type(data).__name__} into dict"
            )
        target.update(data)
        return
    if isinstance(target, list):
        if not isinstance(data, list):
            raise TypeError(
                f"cannot decode JSON {type(data).__name__} into list"
            )
        target.extend(data)
        return

    if not isinstance(data, dict):
        raise TypeError(
            f"cannot decode JSON {type(data).__name__} "
            f"into {type(target).__name__}"
        )
    current = _field_values(target)
    if current is None:
        # Plain objects only receive public attributes they already carry.
        for key, value in data.items():
            if not key.startswith("_") and key in vars(target):
                setattr(target, key, value)
        return

    # Fields missing from the body keep their current values.
    merged = {**current, **{k: v for k, v in data.items() if k in current}}
    try:
        validated = TypeAdapter(type(target)).validate_python(merged)
    except ValidationError as exc:
        raise ValueError(
            f"response body does not match {type(target).__name__}: {exc}"
        ) from exc
    for name in current:
        setattr(target, name, getattr(validated, name))


def json_consumer(success: Any, error: Any = None) -> BodyConsumer:
    """Decode JSON into ``success`` (status < 400) or ``error`` (>= 400).

    Targets may be a dict, a list, a ``Buffer``, a dataclass instance, a
    pydantic model or any object with matching public attributes; they are
    filled in place. Dataclass and model targets are validated against their
    field types first, so a mismatch fails without touching the target. A
    ``None`` target discards the body, and an empty body leaves the target
    as it was. The unselected target is never touched.
    """

    def consume(response: Response) -> None:
        raw = response.read()
        target = error if response.is_error else success
        if target is None:
            return
        try:
            data = json.loads(raw) if raw else None
        except ValueError as exc:
            raise ValueError(
                f"failed to decode {response.status_code} response body as JSON"
            ) from exc
        if data is None:
            return
        _assign(target, data)

    return consume


def string_consumer(dest: Buffer[str]) -> BodyConsumer:
    def consume(response: Response) -> None:
        raw = response.read()
        dest.value = raw.decode(_charset(response))

    return consume


def bytes_consumer(dest: Buffer[bytes]) -> BodyConsumer:
    def consume(response: Response) -> None:
        dest.value = response.read()

    return consume


def _charset(response: Response) -> str:
    content_type = response.headers.get("Content-Type") or ""
    for part in content_type.split(";")[1:]:
        name, _, value = part.strip().partition("=")
        if name.lower() == "charset" and value:
            return value.strip('"')
    return "utf-8"
