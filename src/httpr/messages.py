"""Transport-agnostic request and response models.

The pipeline works on these types rather than on a concrete HTTP library so
interceptors can be written once and run against any transport.
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import BinaryIO, Iterable, Iterator
from urllib.parse import urlsplit

from .context import CancelToken


class Headers:
    """Ordered multi-valued header collection with case-insensitive keys.

    ``add`` keeps duplicates, which HTTP allows; ``set`` replaces every value
    stored under a key.
    """

    def __init__(self, items: Iterable[tuple[str, str]] = ()) -> None:
        self._items: list[tuple[str, str]] = [(k, v) for k, v in items]

    def add(self, key: str, value: str) -> None:
        self._items.append((key, value))

    def set(self, key: str, value: str) -> None:
        self.remove(key)
        self._items.append((key, value))

    def remove(self, key: str) -> None:
        lowered = key.lower()
        self._items = [(k, v) for k, v in self._items if k.lower() != lowered]

    def get(self, key: str, default: str | None = None) -> str | None:
        lowered = key.lower()
        for k, v in self._items:
            if k.lower() == lowered:
                return v
        return default

    def get_all(self, key: str) -> list[str]:
        lowered = key.lower()
        return [v for k, v in self._items if k.lower() == lowered]

    def items(self) -> list[tuple[str, str]]:
        return list(self._items)

    def copy(self) -> Headers:
        return Headers(self._items)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return self.get(key) is not None

    def __iter__(self) -> Iterator[str]:
        return (k for k, _ in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return self._items == other._items
        return NotImplemented

    def __repr__(self) -> str:
        return f"Headers({self._items!r})"


@dataclass
class Request:
    """A fully resolved outgoing request.

    Interceptors may mutate ``headers`` and replace ``body`` before
    forwarding.
    """

    method: str
    url: str
    headers: Headers = field(default_factory=Headers)
    body: BinaryIO | None = None
    cancel: CancelToken = field(default_factory=CancelToken.background)

    @property
    def host(self) -> str:
        return urlsplit(self.url).netloc

    def read_body(self) -> bytes:
        """Drain the body and put an unread copy back in its place."""
        if self.body is None:
            return b""
        data = self.body.read()
        self.body = io.BytesIO(data)
        return data


@dataclass
class Response:
    """A response produced by the transport.

    ``body`` is a readable stream that must be read and closed exactly once
    by whichever component consumes it.
    """

    status_code: int
    request: Request
    headers: Headers = field(default_factory=Headers)
    body: BinaryIO = field(default_factory=io.BytesIO)
    reason: str = ""
    elapsed_seconds: float = 0.0

    def read(self) -> bytes:
        """Read the full body and close the stream."""
        try:
            return self.body.read()
        finally:
            self.close()

    def close(self) -> None:
        self.body.close()

    def replace_body(self, data: bytes) -> None:
        """Substitute a fresh, unread stream over ``data``."""
        self.body = io.BytesIO(data)

    @property
    def is_error(self) -> bool:
        return self.status_code >= 400
