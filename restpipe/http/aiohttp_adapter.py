"""
Aiohttp-based HTTP adapter (asynchronous).
"""

import asyncio
import time
from typing import Any, Optional

import aiohttp

from .adapter import AsyncHTTPAdapter
from .messages import HTTPRequest, HTTPResponse
from ..exceptions import RequestTimeoutError, TransportError


class AiohttpAdapter(AsyncHTTPAdapter):
    """
    Asynchronous HTTP adapter using aiohttp library.

    The session is created on first use when none is given, and only an
    owned session is closed by ``close``.
    """

    def __init__(self, session: Optional[aiohttp.ClientSession] = None):
        """
        Initialize aiohttp adapter.

        Args:
            session: Optional aiohttp.ClientSession instance
        """
        self._external_session = session is not None
        self.session = session

    async def __aenter__(self) -> "AiohttpAdapter":
        if self.session is None:
            self.session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def send(self, request: HTTPRequest, timeout: float = 10) -> HTTPResponse:
        """
        Send HTTP request using aiohttp library.

        Args:
            request: Fully built request
            timeout: Request timeout in seconds

        Returns:
            The completed response

        Raises:
            TransportError: On network connectivity issues
            RequestTimeoutError: On request timeout
        """
        if self.session is None:
            self.session = aiohttp.ClientSession()

        timeout_obj = aiohttp.ClientTimeout(total=timeout)
        started = time.monotonic()
        try:
            async with self.session.request(
                method=request.method,
                url=request.url,
                headers=dict(request.headers),
                data=request.body,
                timeout=timeout_obj,
            ) as response:
                body = await response.read()
                return HTTPResponse(
                    status_code=response.status,
                    headers=dict(response.headers),
                    body=body,
                    elapsed=time.monotonic() - started,
                )
        except asyncio.TimeoutError as e:
            raise RequestTimeoutError(f"Request timed out: {e}") from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Network request failed: {e}") from e

    async def close(self) -> None:
        """Close the session."""
        if not self._external_session and self.session:
            await self.session.close()
            self.session = None
