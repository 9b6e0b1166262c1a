"""
restpipe Data Models
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .codecs import json_decode, json_encode
from .exceptions import ConfigurationError
from .http.messages import HTTPResponse

DEFAULT_RETRY_STATUSES = frozenset(range(500, 600))


class ClientConfig(BaseModel):
    """Pipeline configuration, fixed for the lifetime of a client."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(..., description="API base URL")
    timeout: float = Field(10.0, gt=0, description="Request timeout in seconds")
    retries: int = Field(0, ge=0, description="Additional attempts after a failure")
    retry_backoff: float = Field(
        0.0, ge=0, description="Base retry delay in seconds (0 retries immediately)"
    )
    retry_statuses: FrozenSet[int] = Field(
        DEFAULT_RETRY_STATUSES, description="Response statuses that trigger a retry"
    )
    content_type: str = Field("application/json", description="Request body content type")
    serializer: Optional[Callable[[Any], Union[bytes, str]]] = Field(
        json_encode, description="Body encoder, None sends bodies as-is"
    )
    deserializer: Optional[Callable[[bytes], Any]] = Field(
        json_decode, description="Body decoder, None returns raw bytes"
    )
    default_headers: Dict[str, str] = Field(
        default_factory=dict, description="Headers sent with every request"
    )
    user_agent: Optional[str] = Field(None, description="User-Agent override")
    log_level: int = Field(logging.DEBUG, description="Level of request/response log lines")
    log_bodies: bool = Field(False, description="Include bodies in request/response logs")
    response_mode: Literal["data", "response"] = Field(
        "data", description="Return decoded data or a PipelineResponse"
    )

    @field_validator("base_url")
    @classmethod
    def strip_base_url(cls, v):
        return v.strip().rstrip("/")

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, v):
        if isinstance(v, str):
            level = logging.getLevelName(v.strip().upper())
            if not isinstance(level, int):
                raise ValueError(f"Unknown log level: {v}")
            return level
        return v

    @classmethod
    def from_env(cls, prefix: str = "RESTPIPE_", **overrides: Any) -> "ClientConfig":
        """
        Build a configuration from environment variables.

        Reads ``{prefix}BASE_URL``, ``TIMEOUT``, ``RETRIES``,
        ``RETRY_BACKOFF``, ``CONTENT_TYPE`` and ``LOG_LEVEL``. Keyword
        overrides win over the environment.

        Raises:
            ConfigurationError: If a value is missing or invalid
        """
        env_fields = {
            "base_url": "BASE_URL",
            "timeout": "TIMEOUT",
            "retries": "RETRIES",
            "retry_backoff": "RETRY_BACKOFF",
            "content_type": "CONTENT_TYPE",
            "log_level": "LOG_LEVEL",
        }
        values: Dict[str, Any] = {}
        for field_name, suffix in env_fields.items():
            value = os.getenv(prefix + suffix)
            if value:
                values[field_name] = value
        values.update(overrides)

        if not values.get("base_url"):
            raise ConfigurationError(f"{prefix}BASE_URL is required")

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration from environment: {e}") from e

    def __repr__(self) -> str:
        return (
            f"ClientConfig(base_url={self.base_url!r}, "
            f"timeout={self.timeout!r}, "
            f"retries={self.retries!r}, "
            f"content_type={self.content_type!r})"
        )


@dataclass
class PipelineResponse:
    """
    Full outcome of a request, returned when ``response_mode="response"``.

    ``data`` is only decoded for successful responses.
    """

    method: str
    url: str
    response: HTTPResponse
    data: Any = None

    @property
    def ok(self) -> bool:
        return self.response.ok

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def headers(self):
        return self.response.headers

    @property
    def content(self) -> bytes:
        return self.response.body
