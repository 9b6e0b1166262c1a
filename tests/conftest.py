"""
Pytest configuration and fixtures
"""

import json
from typing import Any, Dict, List, Optional

import pytest

from restpipe import ClientConfig, RequestPipeline
from restpipe.http.adapter import AsyncHTTPAdapter, HTTPAdapter
from restpipe.http.messages import HTTPRequest, HTTPResponse

BASE_URL = "http://api.test"


def json_response(
    status: int = 200,
    data: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> HTTPResponse:
    """Build a response with a JSON body (empty when ``data`` is None)."""
    body = b"" if data is None else json.dumps(data).encode("utf-8")
    return HTTPResponse(
        status_code=status,
        headers={"Content-Type": "application/json", **(headers or {})},
        body=body,
    )


class DummyAdapter(HTTPAdapter):
    """
    Mock HTTP adapter for testing.

    Plays back ``outcomes`` in order (responses or exceptions to raise);
    the last outcome repeats once the others are used up.
    """

    def __init__(self, *outcomes: Any):
        self.outcomes: List[Any] = list(outcomes) or [json_response(200, {})]
        self.requests: List[HTTPRequest] = []
        self.sent_headers: List[Dict[str, str]] = []
        self.timeouts: List[float] = []
        self.closed = False

    def send(self, request: HTTPRequest, timeout: float = 10) -> HTTPResponse:
        self.requests.append(request)
        self.sent_headers.append(dict(request.headers))
        self.timeouts.append(timeout)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True

    @property
    def last_request(self) -> HTTPRequest:
        return self.requests[-1]


class AsyncDummyAdapter(AsyncHTTPAdapter):
    """Async twin of DummyAdapter."""

    def __init__(self, *outcomes: Any):
        self._sync = DummyAdapter(*outcomes)
        self.closed = False

    @property
    def requests(self) -> List[HTTPRequest]:
        return self._sync.requests

    async def send(self, request: HTTPRequest, timeout: float = 10) -> HTTPResponse:
        return self._sync.send(request, timeout)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def config():
    """Create test configuration fixture"""
    return ClientConfig(base_url=BASE_URL)


@pytest.fixture
def adapter():
    return DummyAdapter()


@pytest.fixture
def pipeline(config, adapter):
    """Create test pipeline over the dummy adapter"""
    return RequestPipeline(config, transport=adapter)
