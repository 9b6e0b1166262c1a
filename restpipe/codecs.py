"""
Body codecs and codec resolution.

A codec option is tri-state:

- ``USE_DEFAULT``: not given, fall back to the instance default
- a callable: use it
- ``None``: no processing, the body passes through untouched
"""

import json
from typing import Any, Callable, Optional, Union
from urllib.parse import urlencode

from .exceptions import SerializationError

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

Serializer = Callable[[Any], Union[bytes, str]]
Deserializer = Callable[[bytes], Any]


class _UseDefault:
    _instance = None

    def __new__(cls) -> "_UseDefault":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "USE_DEFAULT"

    def __bool__(self) -> bool:
        return False


USE_DEFAULT = _UseDefault()


def json_encode(body: Any) -> bytes:
    """Encode a structured value as compact UTF-8 JSON."""
    return json.dumps(body, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def json_decode(content: bytes) -> Any:
    """Decode a UTF-8 JSON document."""
    if isinstance(content, bytes):
        content = content.decode("utf-8")
    return json.loads(content)


def form_encode(body: Any) -> bytes:
    """
    Encode a mapping (or sequence of pairs) as an urlencoded form.

    List values become repeated fields.
    """
    if isinstance(body, (bytes, str)):
        return body.encode("utf-8") if isinstance(body, str) else body
    return urlencode(body, doseq=True).encode("utf-8")


def resolve(option: Any, default: Optional[Callable]) -> Optional[Callable]:
    """
    Resolve a per-call codec option against the instance default.

    Args:
        option: Per-call option (``USE_DEFAULT``, a callable or ``None``)
        default: Instance-level codec (a callable or ``None``)

    Returns:
        The codec to apply, or ``None`` for no processing
    """
    if option is USE_DEFAULT:
        return default
    if option is not None and not callable(option):
        raise TypeError(f"codec must be callable or None, got {option!r}")
    return option


def apply_serializer(serializer: Optional[Serializer], body: Any) -> Union[bytes, str, None]:
    if body is None:
        return None
    if serializer is None:
        return body
    try:
        return serializer(body)
    except Exception as e:
        raise SerializationError(f"Failed to serialize request body: {e}") from e


def apply_deserializer(deserializer: Optional[Deserializer], content: bytes) -> Any:
    if not content:
        return None
    if deserializer is None:
        return content
    try:
        return deserializer(content)
    except Exception as e:
        raise SerializationError(f"Failed to deserialize response body: {e}") from e


def is_form(content_type: Optional[str]) -> bool:
    if not content_type:
        return False
    return content_type.split(";", 1)[0].strip().lower() == FORM_CONTENT_TYPE
