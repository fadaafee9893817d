"""httpr: an HTTP client built around an interceptor chain."""

from .client import Client
from .codecs import Buffer
from .context import CancelToken
from .errors import (
    BodyPreparationError,
    ChainError,
    HttpClientError,
    InspectionError,
    RequestCancelledError,
    RequestConstructionError,
    RequestTimeoutError,
    ResponseDecodingError,
    RetryableHttpError,
    TransportError,
)
from .inspector import Inspector
from .interceptors import Handler, HandleFunc, Interceptor, chain
from .messages import Headers, Request, Response
from .observer import Observer
from .options import (
    BaseURL,
    Header,
    Inspect,
    Intercept,
    QueryParam,
    RequestBody,
    ResponseBody,
    Timeout,
    WithTransport,
    request_body,
    request_body_bytes,
    request_body_form,
    request_body_json,
    request_body_stream,
    request_body_string,
    response_body_bytes,
    response_body_json,
    response_body_string,
)
from .transport import RequestsTransport, Transport
from .types import Err, Ok, Result

__all__ = [
    "BaseURL",
    "BodyPreparationError",
    "Buffer",
    "CancelToken",
    "ChainError",
    "Client",
    "Err",
    "Handler",
    "HandleFunc",
    "Header",
    "Headers",
    "HttpClientError",
    "Inspect",
    "InspectionError",
    "Inspector",
    "Intercept",
    "Interceptor",
    "Observer",
    "Ok",
    "QueryParam",
    "Request",
    "RequestBody",
    "RequestCancelledError",
    "RequestConstructionError",
    "RequestTimeoutError",
    "RequestsTransport",
    "Response",
    "ResponseBody",
    "ResponseDecodingError",
    "Result",
    "RetryableHttpError",
    "Timeout",
    "Transport",
    "TransportError",
    "WithTransport",
    "chain",
    "request_body",
    "request_body_bytes",
    "request_body_form",
    "request_body_json",
    "request_body_stream",
    "request_body_string",
    "response_body_bytes",
    "response_body_json",
    "response_body_string",
]
