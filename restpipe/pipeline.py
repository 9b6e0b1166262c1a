"""
Request pipeline: the shared plumbing behind every REST client.

Concrete clients embed a pipeline and call its verb helpers from their
endpoint methods:

    >>> class WidgetsClient:
    ...     def __init__(self, config):
    ...         self.pipeline = RequestPipeline(config)
    ...
    ...     def get_widget(self, widget_id):
    ...         return self.pipeline.get(f"/widgets/{widget_id}")
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

from .__version__ import __version__
from .codecs import (
    USE_DEFAULT,
    Deserializer,
    apply_deserializer,
    apply_serializer,
    form_encode,
    is_form,
    json_encode,
    resolve,
)
from .exceptions import ConfigurationError, HTTPStatusError, TransportError
from .http.adapter import HTTPAdapter
from .http.messages import HTTPRequest, HTTPResponse
from .http.requests_adapter import RequestsAdapter
from .metrics import record_attempt, record_retry
from .models import ClientConfig, PipelineResponse
from .utils import (
    backoff_delay,
    build_url,
    merge_headers,
    sanitize_headers,
)

logger = logging.getLogger("restpipe.pipeline")

METHODS = frozenset(["GET", "POST", "PUT", "PATCH", "DELETE"])
BODY_METHODS = frozenset(["POST", "PUT", "PATCH"])
GONE_STATUSES = frozenset([404, 410])


class PipelineCore(ABC):
    """
    Request building and response handling shared by the sync and async
    pipelines. Holds no per-call state.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        transport: Any = None,
        logger: Optional[logging.Logger] = None,
        **settings: Any,
    ):
        """
        Initialize the pipeline.

        Args:
            config: Client configuration; built from ``settings`` if omitted
            transport: Optional adapter; a default one is created on first use
            logger: Optional logger for request/response lines
            **settings: ``ClientConfig`` fields, used when ``config`` is None

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if config is None:
            config = ClientConfig(**settings)
        elif settings:
            raise TypeError("pass either a ClientConfig or config fields, not both")

        self.config = config
        self.logger = logger
        self._transport = transport
        self._owns_transport = transport is None
        self._validate_config()

    def _validate_config(self) -> None:
        if not self.config.base_url:
            raise ConfigurationError("base_url is required")
        if not self.config.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"base_url must be an http(s) URL, got {self.config.base_url!r}"
            )

    @abstractmethod
    def _make_transport(self) -> Any:
        """Create the default transport, on first use."""

    @property
    def transport(self) -> Any:
        if self._transport is None:
            self._transport = self._make_transport()
            self._owns_transport = True
        return self._transport

    @transport.setter
    def transport(self, adapter: Any) -> None:
        self._transport = adapter
        self._owns_transport = False

    def default_headers(self) -> Dict[str, str]:
        """
        Headers sent with every request.

        Subclasses may extend this to add persistent headers.
        """
        headers = {
            "Accept": self.config.content_type,
            "User-Agent": self.config.user_agent or f"restpipe/{__version__}",
        }
        headers.update(self.config.default_headers)
        return headers

    def build_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        headers: Optional[Mapping[str, Any]] = None,
        query: Optional[Mapping[str, Any]] = None,
        serializer: Any = USE_DEFAULT,
    ) -> HTTPRequest:
        """
        Build the transport request for one call.

        Args:
            method: HTTP method
            path: Endpoint path, relative to the base URL
            body: Structured body; merged into the query string for GET
            headers: Per-call headers, overriding the defaults; None removes one
            query: Query parameters; list values repeat the parameter
            serializer: Per-call serializer (``USE_DEFAULT``, callable or None)

        Returns:
            The request to send

        Raises:
            SerializationError: If the serializer fails
        """
        method = method.upper()
        if method not in METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        query_sources = [query]
        if method == "GET" and isinstance(body, Mapping):
            query_sources.insert(0, body)
        url = build_url(self.config.base_url, path, *query_sources)

        call_headers = merge_headers(headers)
        payload = None
        content_headers: Dict[str, str] = {}

        if method in BODY_METHODS and body is not None:
            serializer = resolve(serializer, self.config.serializer)
            content_type = call_headers.get("Content-Type", self.config.content_type)
            if serializer is json_encode and is_form(content_type):
                serializer = form_encode
            payload = apply_serializer(serializer, body)
            if serializer is not None:
                content_headers["Content-Type"] = content_type

        return HTTPRequest(
            method=method,
            url=url,
            headers=merge_headers(self.default_headers(), content_headers, headers),
            body=payload,
        )

    def handle_response(
        self,
        request: HTTPRequest,
        response: HTTPResponse,
        deserializer: Optional[Deserializer],
    ) -> Any:
        """
        Turn a completed response into the caller's result.

        Raises:
            HTTPStatusError: For non-2xx statuses (except GET 404/410)
            SerializationError: If the deserializer fails
        """
        if self.config.response_mode == "response":
            data = apply_deserializer(deserializer, response.body) if response.ok else None
            return PipelineResponse(
                method=request.method, url=request.url, response=response, data=data
            )

        if response.ok:
            return apply_deserializer(deserializer, response.body)

        if request.method == "GET" and response.status_code in GONE_STATUSES:
            return None

        raise HTTPStatusError(request.method, request.url, response)

    def should_retry(self, response: HTTPResponse) -> bool:
        return response.status_code in self.config.retry_statuses

    def _retry_delay(self, request: HTTPRequest, attempt: int, reason: str) -> float:
        logger.warning(
            "Retrying %s %s after %s (attempt %d of %d)",
            request.method,
            request.url,
            reason,
            attempt + 1,
            self.config.retries + 1,
        )
        record_retry(request.method)
        return backoff_delay(attempt - 1, self.config.retry_backoff)

    def _log_request(self, request: HTTPRequest) -> None:
        if self.logger is None:
            return
        extra = {"method": request.method, "url": request.url}
        if self.config.log_bodies:
            self.logger.log(
                self.config.log_level,
                "Request %s %s headers=%s body=%s",
                request.method,
                request.url,
                sanitize_headers(request.headers),
                request.content[:1000].decode("utf-8", errors="replace"),
                extra=extra,
            )
        else:
            self.logger.log(
                self.config.log_level, "Request %s %s", request.method, request.url, extra=extra
            )

    def _log_response(self, request: HTTPRequest, response: HTTPResponse, elapsed: float) -> None:
        if self.logger is None:
            return
        extra = {
            "method": request.method,
            "url": request.url,
            "status_code": response.status_code,
            "elapsed": elapsed,
        }
        if self.config.log_bodies:
            self.logger.log(
                self.config.log_level,
                "Response %d %s %s (%.3fs) body=%s",
                response.status_code,
                request.method,
                request.url,
                elapsed,
                response.text[:1000],
                extra=extra,
            )
        else:
            self.logger.log(
                self.config.log_level,
                "Response %d %s %s (%.3fs)",
                response.status_code,
                request.method,
                request.url,
                elapsed,
                extra=extra,
            )


class RequestPipeline(PipelineCore):
    """
    Synchronous request pipeline.

    Features:
    - GET/POST/PUT/PATCH/DELETE helpers over one ``request`` primitive
    - Pluggable serializer/deserializer, overridable per call
    - Typed errors carrying the full response
    - Retries on transport errors and 5xx responses
    - Request/response logging and prometheus metrics

    ``send`` is the extension point for per-request authentication:

        >>> class SignedPipeline(RequestPipeline):
        ...     def send(self, request):
        ...         request.headers["X-Signature"] = sign(request)
        ...         return super().send(request)

    Examples:
        >>> pipeline = RequestPipeline(base_url="https://api.example.com", retries=2)
        >>> pipeline.post("/widgets", {"color": "blue"})
        {'id': 1, 'color': 'blue'}
        >>> pipeline.get("/widgets/404") is None
        True
    """

    def _make_transport(self) -> HTTPAdapter:
        return RequestsAdapter()

    def __enter__(self) -> "RequestPipeline":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the transport if the pipeline created it."""
        if self._transport is not None and self._owns_transport:
            self._transport.close()
            self._transport = None

    def send(self, request: HTTPRequest) -> HTTPResponse:
        """
        Send one attempt of ``request`` through the transport.

        Called once per attempt, so overrides that sign requests see every
        retry.

        Raises:
            TransportError: If the call could not complete
        """
        return self.transport.send(request, timeout=self.config.timeout)

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        headers: Optional[Mapping[str, Any]] = None,
        query: Optional[Mapping[str, Any]] = None,
        serializer: Any = USE_DEFAULT,
        deserializer: Any = USE_DEFAULT,
    ) -> Any:
        """
        Make an HTTP request and return the decoded result.

        Args:
            method: HTTP method
            path: Endpoint path, relative to the base URL
            body: Structured request body
            headers: Per-call headers
            query: Query parameters
            serializer: Per-call serializer (``USE_DEFAULT``, callable or None)
            deserializer: Per-call deserializer (``USE_DEFAULT``, callable or None)

        Returns:
            Decoded response body, None for empty bodies and GET 404/410,
            or a PipelineResponse in response mode

        Raises:
            HTTPStatusError: On non-2xx responses after retries
            TransportError: If the transport fails on every attempt
            SerializationError: If encoding or decoding fails
        """
        http_request = self.build_request(
            method, path, body, headers=headers, query=query, serializer=serializer
        )
        deserializer = resolve(deserializer, self.config.deserializer)
        response = self._dispatch(http_request)
        return self.handle_response(http_request, response, deserializer)

    def _dispatch(self, request: HTTPRequest) -> HTTPResponse:
        self._log_request(request)
        attempts = self.config.retries + 1
        reason = None

        for attempt in range(attempts):
            if attempt:
                delay = self._retry_delay(request, attempt, reason)
                if delay:
                    time.sleep(delay)

            started = time.monotonic()
            try:
                response = self.send(request)
            except TransportError as e:
                record_attempt(request.method, "error", time.monotonic() - started)
                if attempt + 1 >= attempts:
                    raise
                reason = str(e)
                continue

            elapsed = time.monotonic() - started
            record_attempt(request.method, response.status_code, elapsed)
            self._log_response(request, response, elapsed)
            if not self.should_retry(response):
                break
            reason = f"status {response.status_code}"

        return response

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None, **options: Any) -> Any:
        """GET ``path``; ``params`` are sent as the query string."""
        return self.request("GET", path, params, **options)

    def post(self, path: str, body: Any = None, **options: Any) -> Any:
        return self.request("POST", path, body, **options)

    def put(self, path: str, body: Any = None, **options: Any) -> Any:
        return self.request("PUT", path, body, **options)

    def patch(self, path: str, body: Any = None, **options: Any) -> Any:
        return self.request("PATCH", path, body, **options)

    def delete(self, path: str, body: Any = None, **options: Any) -> Any:
        """DELETE ``path``. ``body`` is accepted for symmetry and not sent."""
        return self.request("DELETE", path, body, **options)


__all__ = ["PipelineCore", "RequestPipeline"]
