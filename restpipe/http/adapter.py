"""
Base HTTP adapter interfaces.
"""

from abc import ABC, abstractmethod

from .messages import HTTPRequest, HTTPResponse


class HTTPAdapter(ABC):
    """
    Abstract base class for synchronous HTTP adapters.

    Allows pluggable HTTP clients; the pipeline only ever talks to this
    interface.
    """

    @abstractmethod
    def send(self, request: HTTPRequest, timeout: float = 10) -> HTTPResponse:
        """
        Send one HTTP request.

        Args:
            request: Fully built request
            timeout: Request timeout in seconds

        Returns:
            The completed response, whatever its status

        Raises:
            TransportError: On network connectivity issues
            RequestTimeoutError: On request timeout
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release any resources held by the adapter."""


class AsyncHTTPAdapter(ABC):
    """Abstract base class for asynchronous HTTP adapters."""

    @abstractmethod
    async def send(self, request: HTTPRequest, timeout: float = 10) -> HTTPResponse:
        """Send one HTTP request; same contract as ``HTTPAdapter.send``."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release any resources held by the adapter."""
