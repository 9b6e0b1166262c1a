"""
Exception classes for restpipe.
"""

from typing import TYPE_CHECKING, Mapping, Optional

if TYPE_CHECKING:
    from .http.messages import HTTPResponse


class RestPipeError(Exception):
    """Base exception for all restpipe errors."""

    pass


class ConfigurationError(RestPipeError):
    """Client configuration error."""

    pass


class TransportError(RestPipeError):
    """
    Transport-level error.

    Raised when the HTTP call could not complete (DNS failure, refused
    connection, broken pipe, ...). Retried by the pipeline.
    """

    pass


class RequestTimeoutError(TransportError):
    """Request timed out before a response was received."""

    pass


class SerializationError(RestPipeError):
    """
    Codec error.

    Raised when the serializer or deserializer fails. Never retried.
    """

    pass


class HTTPStatusError(RestPipeError):
    """
    HTTP status error.

    Raised when a request completes with a status the pipeline does not
    accept. Carries the whole response so callers can branch on it
    without parsing the message.
    """

    def __init__(
        self,
        method: str,
        url: str,
        response: "HTTPResponse",
    ):
        """
        Initialize HTTP status error.

        Args:
            method: HTTP method of the failed request
            url: Full request URL
            response: The completed transport response
        """
        self.method = method
        self.url = url
        self.response = response
        super().__init__(f"{method} {url} returned {response.status_code}")

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def headers(self) -> Mapping[str, str]:
        return self.response.headers

    @property
    def body(self) -> bytes:
        return self.response.body

    @property
    def text(self) -> str:
        return self.response.text

    @property
    def request_id(self) -> Optional[str]:
        return self.response.headers.get("X-Request-Id")

    def __str__(self) -> str:
        parts = [f"[{self.status_code}] {self.method} {self.url}"]
        excerpt = self.text[:200]
        if excerpt:
            parts.append(excerpt)
        if self.request_id:
            parts.append(f"(request_id: {self.request_id})")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"HTTPStatusError(method={self.method!r}, "
            f"url={self.url!r}, "
            f"status_code={self.status_code})"
        )
