"""
Requests-based HTTP adapter (synchronous).
"""

from typing import Optional

import requests

from .adapter import HTTPAdapter
from .messages import HTTPRequest, HTTPResponse
from ..exceptions import RequestTimeoutError, TransportError


class RequestsAdapter(HTTPAdapter):
    """
    Synchronous HTTP adapter using requests library.

    Connection pooling comes from the underlying ``requests.Session``.
    Retries are left to the pipeline, so the session is used as-is.
    """

    def __init__(self, session: Optional[requests.Session] = None):
        """
        Initialize requests adapter.

        Args:
            session: Optional requests.Session instance
        """
        self._external_session = session is not None
        self.session = session or requests.Session()

    def send(self, request: HTTPRequest, timeout: float = 10) -> HTTPResponse:
        """
        Send HTTP request using requests library.

        Args:
            request: Fully built request
            timeout: Request timeout in seconds

        Returns:
            The completed response

        Raises:
            TransportError: On network connectivity issues
            RequestTimeoutError: On request timeout
        """
        try:
            response = self.session.request(
                method=request.method,
                url=request.url,
                headers=dict(request.headers),
                data=request.body,
                timeout=timeout,
            )
        except requests.exceptions.Timeout as e:
            raise RequestTimeoutError(f"Request timed out: {e}") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Network request failed: {e}") from e

        return HTTPResponse(
            status_code=response.status_code,
            headers=response.headers,
            body=response.content,
            elapsed=response.elapsed.total_seconds(),
        )

    def close(self) -> None:
        if not self._external_session:
            self.session.close()
