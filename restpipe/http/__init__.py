"""
HTTP adapters and transport messages for restpipe.
"""

from .messages import HTTPRequest, HTTPResponse
from .adapter import HTTPAdapter, AsyncHTTPAdapter
from .requests_adapter import RequestsAdapter
from .aiohttp_adapter import AiohttpAdapter

__all__ = [
    "HTTPRequest",
    "HTTPResponse",
    "HTTPAdapter",
    "AsyncHTTPAdapter",
    "RequestsAdapter",
    "AiohttpAdapter",
]
