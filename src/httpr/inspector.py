"""Dump interceptor for debugging request/response exchanges."""

from __future__ import annotations

import sys
from typing import TextIO
from urllib.parse import urlsplit

from .errors import InspectionError
from .interceptors import Handler
from .messages import Headers, Request, Response
from .types import Err, Result


class Inspector:
    """Write a wire-style dump of each request and response.

    Bodies are drained for printing and replaced with fresh streams, so the
    transport and any response consumer still see the full, unread body.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def handle(self, request: Request, next: Handler) -> Result[Response, Exception]:
        try:
            request_body = request.read_body()
        except OSError as exc:
            return Err(InspectionError(f"failed to read request body: {exc}"))
        self._write("Request", _dump_request(request, request_body))

        result = next(request)
        if not result.ok:
            return result

        response = result.value
        try:
            response_body = response.read()
        except OSError as exc:
            return Err(InspectionError(f"failed to read response body: {exc}"))
        response.replace_body(response_body)
        self._write("Response", _dump_response(response, response_body))
        return result

    def _write(self, title: str, dump: str) -> None:
        stream = self._stream or sys.stdout
        stream.write(f"{title}:\n{dump}\n")
        stream.flush()

    def __repr__(self) -> str:
        return "Inspector()"


def _dump_headers(headers: Headers) -> str:
    return "".join(f"{key}: {value}\r\n" for key, value in headers.items())


def _dump_request(request: Request, body: bytes) -> str:
    parts = urlsplit(request.url)
    target = parts.path or "/"
    if parts.query:
        target = f"{target}?{parts.query}"
    head = f"{request.method} {target} HTTP/1.1\r\nHost: {parts.netloc}\r\n"
    return head + _dump_headers(request.headers) + "\r\n" + _decode(body)


def _dump_response(response: Response, body: bytes) -> str:
    status = f"HTTP/1.1 {response.status_code} {response.reason}".rstrip()
    return f"{status}\r\n" + _dump_headers(response.headers) + "\r\n" + _decode(body)


def _decode(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")
