"""
Authentication helpers built on the ``send`` hook.

Both pipelines set the ``Authorization`` header on every attempt, so a
token refreshed between retries is picked up.
"""

import base64
from typing import Any, Callable, Optional, Union

from .http.messages import HTTPRequest, HTTPResponse
from .pipeline import RequestPipeline

TokenSource = Union[str, Callable[[], str]]


class BearerTokenPipeline(RequestPipeline):
    """
    Pipeline sending ``Authorization: Bearer <token>``.

    ``token`` may be a string or a zero-argument callable returning one.
    """

    def __init__(self, config: Any = None, *, token: TokenSource, **kwargs: Any):
        super().__init__(config, **kwargs)
        self._token = token

    def send(self, request: HTTPRequest) -> HTTPResponse:
        token = self._token() if callable(self._token) else self._token
        request.headers["Authorization"] = f"Bearer {token}"
        return super().send(request)


class BasicAuthPipeline(RequestPipeline):
    """Pipeline sending HTTP basic credentials."""

    def __init__(
        self,
        config: Any = None,
        *,
        username: str,
        password: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(config, **kwargs)
        credentials = f"{username}:{password or ''}".encode("utf-8")
        self._authorization = "Basic " + base64.b64encode(credentials).decode("ascii")

    def send(self, request: HTTPRequest) -> HTTPResponse:
        request.headers["Authorization"] = self._authorization
        return super().send(request)
