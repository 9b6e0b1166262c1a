"""
Asynchronous request pipeline.

Same contract as ``RequestPipeline`` with awaitable verb helpers, over
aiohttp. Ideal for use with FastAPI, aiohttp and other async frameworks.
"""

import asyncio
import time
from typing import Any, Mapping, Optional

from .codecs import USE_DEFAULT, resolve
from .exceptions import TransportError
from .http.adapter import AsyncHTTPAdapter
from .http.aiohttp_adapter import AiohttpAdapter
from .http.messages import HTTPRequest, HTTPResponse
from .metrics import record_attempt
from .pipeline import PipelineCore


class AsyncRequestPipeline(PipelineCore):
    """
    Asynchronous request pipeline.

    Examples:
        >>> async def main():
        ...     async with AsyncRequestPipeline(base_url="https://api.example.com") as p:
        ...         return await p.get("/widgets", query={"color": "blue"})
        >>>
        >>> asyncio.run(main())
    """

    def _make_transport(self) -> AsyncHTTPAdapter:
        return AiohttpAdapter()

    async def __aenter__(self) -> "AsyncRequestPipeline":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._transport is not None and self._owns_transport:
            await self._transport.close()
            self._transport = None

    async def send(self, request: HTTPRequest) -> HTTPResponse:
        """Send one attempt; override to inject per-request auth."""
        return await self.transport.send(request, timeout=self.config.timeout)

    async def request(
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
        http_request = self.build_request(
            method, path, body, headers=headers, query=query, serializer=serializer
        )
        deserializer = resolve(deserializer, self.config.deserializer)
        response = await self._dispatch(http_request)
        return self.handle_response(http_request, response, deserializer)

    async def _dispatch(self, request: HTTPRequest) -> HTTPResponse:
        self._log_request(request)
        attempts = self.config.retries + 1
        reason = None

        for attempt in range(attempts):
            if attempt:
                delay = self._retry_delay(request, attempt, reason)
                if delay:
                    await asyncio.sleep(delay)

            started = time.monotonic()
            try:
                response = await self.send(request)
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

    async def get(self, path: str, params: Optional[Mapping[str, Any]] = None, **options: Any) -> Any:
        return await self.request("GET", path, params, **options)

    async def post(self, path: str, body: Any = None, **options: Any) -> Any:
        return await self.request("POST", path, body, **options)

    async def put(self, path: str, body: Any = None, **options: Any) -> Any:
        return await self.request("PUT", path, body, **options)

    async def patch(self, path: str, body: Any = None, **options: Any) -> Any:
        return await self.request("PATCH", path, body, **options)

    async def delete(self, path: str, body: Any = None, **options: Any) -> Any:
        return await self.request("DELETE", path, body, **options)
