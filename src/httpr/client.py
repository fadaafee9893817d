"""HTTP client driving requests through an interceptor chain.

A ``Client`` is built once from client options and is safe to share between
threads: its configuration is frozen, and every call builds its own request
config, ``Request`` and chain. Calls never raise for runtime failures; they
return ``Ok(response)`` or ``Err(error)`` where the error type names the
stage that failed.
"""

from __future__ import annotations

import logging
import re
from typing import Any, BinaryIO, Mapping
from urllib.parse import urlencode, urlsplit, urlunsplit

from .config import ClientConfig, ClientConfigBuilder, RequestConfig
from .context import CancelToken
from .errors import (
    BodyPreparationError,
    ChainError,
    RequestConstructionError,
    ResponseDecodingError,
    TransportError,
)
from .interceptors import chain
from .messages import Headers, Request, Response
from .options import (
    ClientOption,
    RequestOption,
    apply_client_options,
    apply_request_options,
)
from .types import Err, Ok, Result

logger = logging.getLogger(__name__)

_ABSOLUTE_URL = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")
_METHOD_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


def _close_body(body: BinaryIO | None) -> None:
    """Release a prepared body that will never reach the transport."""
    if body is not None:
        body.close()


class Client:
    """Configurable HTTP client.

    Example:
        >>> client = Client(BaseURL("https://api.example.com"), Inspect())
        >>> post: dict = {}
        >>> result = client.get("/posts/1", response_body_json(post))
        >>> if result.ok:
        ...     print(post["title"])
    """

    def __init__(self, *options: ClientOption) -> None:
        """Create a new Client.

        Args:
            *options: Client options, applied in order.

        Raises:
            TypeError: If an option cannot be applied to a client.
        """
        builder = ClientConfigBuilder()
        apply_client_options(builder, options)
        self._config = builder.build()

    @property
    def config(self) -> ClientConfig:
        return self._config

    def __enter__(self) -> Client:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self._config.transport.close()

    def _build_meta(
        self,
        method: str,
        url: str,
        *,
        response: Response | None = None,
        context: Mapping[str, Any] | None = None,
        stage: str | None = None,
        final_error: BaseException | None = None,
    ) -> dict[str, Any]:
        """Construct metadata dictionary from response and context."""
        meta: dict[str, Any] = {"method": method, "url": url}
        if context:
            context_dict = dict(context)
            meta["context"] = context_dict
            for key, value in context_dict.items():
                meta.setdefault(key, value)

        if response is not None:
            meta["status_code"] = response.status_code
            meta["reason"] = response.reason
            meta["elapsed_s"] = response.elapsed_seconds
        if stage is not None:
            meta["stage"] = stage
        if final_error is not None:
            meta["final_error"] = type(final_error).__name__

        return meta

    def _fail(
        self,
        error: Exception,
        cause: BaseException | None,
        *,
        method: str,
        url: str,
        stage: str,
        context: Mapping[str, Any] | None,
    ) -> Err[Exception]:
        if cause is not None:
            error.__cause__ = cause
        logger.debug("%s %s failed during %s: %s", method, url, stage, error)
        return Err(
            error,
            meta=self._build_meta(
                method,
                url,
                context=context,
                stage=stage,
                final_error=cause if cause is not None else error,
            ),
        )

    def _resolve_url(
        self, path: str, query_params: list[tuple[str, str]]
    ) -> str:
        """Join base address, path and query into one absolute URL."""
        if _ABSOLUTE_URL.match(path):
            url = path
        else:
            url = (self._config.base_url or "") + path

        try:
            parts = urlsplit(url)
        except ValueError as e:
            raise RequestConstructionError(
                f"invalid request URL {url!r}: {e}"
            ) from e
        if not parts.scheme or not parts.netloc:
            raise RequestConstructionError(
                f"request URL {url!r} is not absolute; "
                "set a base URL or pass a full URL"
            )

        if query_params:
            query = urlencode(query_params)
            if parts.query:
                query = f"{parts.query}&{query}"
            url = urlunsplit(parts._replace(query=query))
        return url

    def _terminal(self, request: Request) -> Result[Response, Exception]:
        """Innermost chain element: hand the request to the transport."""
        try:
            response = self._config.transport.send(
                request, timeout=self._config.timeout_seconds
            )
        except TransportError as exc:
            return Err(exc)
        except Exception as exc:
            error = TransportError(str(exc))
            error.__cause__ = exc
            return Err(error)
        return Ok(response)

    def send(
        self,
        method: str,
        path: str,
        *options: RequestOption,
        cancel: CancelToken | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Result[Response, Exception]:
        """Send a request with an arbitrary method.

        Args:
            method: HTTP method token, e.g. ``"GET"``.
            path: Path appended to the base URL, or an absolute URL which is
                used verbatim.
            *options: Request options layered on top of the client defaults.
            cancel: Token checked by the transport before sending; its
                deadline also caps the transport timeout.
            context: Optional caller context copied into result metadata.

        Returns:
            ``Ok`` with the final response, or ``Err`` with one of
            ``BodyPreparationError``, ``RequestConstructionError``,
            ``ChainError`` or ``ResponseDecodingError``.

        Raises:
            TypeError: If an option cannot be applied to a request.
        """
        request_config = RequestConfig.from_client(self._config)
        apply_request_options(request_config, options)

        body = None
        content_type = ""
        if request_config.request_body is not None:
            try:
                body, content_type = request_config.request_body()
            except Exception as exc:
                return self._fail(
                    BodyPreparationError(f"failed to prepare request body: {exc}"),
                    exc,
                    method=method,
                    url=path,
                    stage="body",
                    context=context,
                )

        if not _METHOD_TOKEN.fullmatch(method):
            _close_body(body)
            return self._fail(
                RequestConstructionError(f"invalid HTTP method {method!r}"),
                None,
                method=method,
                url=path,
                stage="request",
                context=context,
            )
        try:
            url = self._resolve_url(path, request_config.query_params)
        except RequestConstructionError as exc:
            _close_body(body)
            return self._fail(
                exc,
                exc.__cause__,
                method=method,
                url=path,
                stage="request",
                context=context,
            )

        headers = Headers(self._config.default_headers.items())
        for key, value in request_config.headers.items():
            headers.add(key, value)
        if content_type:
            headers.set("Content-Type", content_type)

        request = Request(
            method=method,
            url=url,
            headers=headers,
            body=body,
            cancel=cancel or CancelToken.background(),
        )
        logger.debug("%s %s", method, url)

        interceptors = [*self._config.interceptors, *request_config.interceptors]
        result = chain(interceptors, self._terminal)(request)
        if not result.ok:
            return self._fail(
                ChainError(f"{method} {url}: {result.error}", result.error),
                result.error,
                method=method,
                url=url,
                stage="chain",
                context=context,
            )

        response = result.value
        if request_config.response_body is not None:
            try:
                request_config.response_body(response)
            except Exception as exc:
                if not response.body.closed:
                    response.close()
                if isinstance(exc, ResponseDecodingError):
                    return self._fail(
                        exc,
                        exc.__cause__,
                        method=method,
                        url=url,
                        stage="decode",
                        context=context,
                    )
                return self._fail(
                    ResponseDecodingError(
                        f"failed to decode {response.status_code} "
                        f"response body: {exc}"
                    ),
                    exc,
                    method=method,
                    url=url,
                    stage="decode",
                    context=context,
                )

        return Ok(
            response,
            meta=self._build_meta(method, url, response=response, context=context),
        )

    def get(
        self,
        path: str,
        *options: RequestOption,
        cancel: CancelToken | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Result[Response, Exception]:
        """Perform an HTTP GET request.

        Args:
            path: Path relative to the base URL, or an absolute URL.
            *options: Per-request options.
            cancel: Optional cancellation token.
            context: Optional caller context for logging/tracing.

        Returns:
            Result containing the response on success, or an error on failure.
        """
        return self.send("GET", path, *options, cancel=cancel, context=context)

    def post(
        self,
        path: str,
        *options: RequestOption,
        cancel: CancelToken | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Result[Response, Exception]:
        """Perform an HTTP POST request."""
        return self.send("POST", path, *options, cancel=cancel, context=context)

    def put(
        self,
        path: str,
        *options: RequestOption,
        cancel: CancelToken | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Result[Response, Exception]:
        return self.send("PUT", path, *options, cancel=cancel, context=context)

    def patch(
        self,
        path: str,
        *options: RequestOption,
        cancel: CancelToken | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Result[Response, Exception]:
        return self.send("PATCH", path, *options, cancel=cancel, context=context)

    def delete(
        self,
        path: str,
        *options: RequestOption,
        cancel: CancelToken | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Result[Response, Exception]:
        """Perform an HTTP DELETE request."""
        return self.send("DELETE", path, *options, cancel=cancel, context=context)

    def head(
        self,
        path: str,
        *options: RequestOption,
        cancel: CancelToken | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Result[Response, Exception]:
        return self.send("HEAD", path, *options, cancel=cancel, context=context)

    def options(
        self,
        path: str,
        *options: RequestOption,
        cancel: CancelToken | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Result[Response, Exception]:
        return self.send("OPTIONS", path, *options, cancel=cancel, context=context)
