"""
restpipe: base plumbing for REST web service clients.

Concrete clients write endpoint methods; restpipe handles URL building,
serialization, error mapping, retries and logging.
"""

from .__version__ import __version__
from .codecs import USE_DEFAULT, form_encode, json_decode, json_encode
from .models import ClientConfig, PipelineResponse
from .pipeline import RequestPipeline
from .async_pipeline import AsyncRequestPipeline
from .auth import BasicAuthPipeline, BearerTokenPipeline
from .http import HTTPRequest, HTTPResponse, HTTPAdapter, AsyncHTTPAdapter
from .exceptions import (
    RestPipeError,
    ConfigurationError,
    TransportError,
    RequestTimeoutError,
    HTTPStatusError,
    SerializationError,
)

__all__ = [
    "ClientConfig",
    "PipelineResponse",
    "RequestPipeline",
    "AsyncRequestPipeline",
    "BearerTokenPipeline",
    "BasicAuthPipeline",
    "HTTPRequest",
    "HTTPResponse",
    "HTTPAdapter",
    "AsyncHTTPAdapter",
    "USE_DEFAULT",
    "json_encode",
    "json_decode",
    "form_encode",
    "RestPipeError",
    "ConfigurationError",
    "TransportError",
    "RequestTimeoutError",
    "HTTPStatusError",
    "SerializationError",
    "__version__",
]
