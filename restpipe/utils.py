"""
restpipe utilities
"""

import random
from typing import Any, Iterable, Mapping, Optional, Tuple
from urllib.parse import urlencode

from requests.structures import CaseInsensitiveDict

SENSITIVE_HEADERS = {"authorization", "proxy-authorization", "cookie", "x-api-key"}
MAX_BACKOFF = 30.0


def canonical_header(name: str) -> str:
    """
    Canonicalise a header name.

    ``content_type``, ``content-type`` and ``Content-Type`` all become
    ``Content-Type``.
    """
    parts = name.strip().replace("_", "-").split("-")
    return "-".join(part.capitalize() for part in parts)


def merge_headers(*sources: Optional[Mapping[str, Any]]) -> CaseInsensitiveDict:
    """Merge header mappings left to right; later sources win."""
    merged = CaseInsensitiveDict()
    for source in sources:
        if not source:
            continue
        for name, value in source.items():
            if value is None:
                merged.pop(canonical_header(name), None)
                continue
            merged[canonical_header(name)] = str(value)
    return merged


def join_url(base_url: str, path: str) -> str:
    """Join a base URL and a relative path with exactly one slash."""
    if not isinstance(path, str) or not path:
        raise ValueError("path must be a non-empty string")
    return base_url.rstrip("/") + "/" + path.lstrip("/")


def query_pairs(*sources: Optional[Mapping[str, Any]]) -> Iterable[Tuple[str, Any]]:
    for source in sources:
        if not source:
            continue
        for key, value in source.items():
            if isinstance(value, (list, tuple)):
                for item in value:
                    yield key, item
            elif value is not None:
                yield key, value


def build_url(
    base_url: str,
    path: str,
    *query: Optional[Mapping[str, Any]],
) -> str:
    """
    Build the full request URL.

    Args:
        base_url: Client base URL
        path: Relative endpoint path
        *query: Query mappings, merged in order; list values become
            repeated parameters

    Returns:
        Absolute URL with encoded query string
    """
    url = join_url(base_url, path)
    encoded = urlencode(list(query_pairs(*query)))
    if not encoded:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{encoded}"


def backoff_delay(attempt: int, base: float, cap: float = MAX_BACKOFF) -> float:
    """
    Delay before retry ``attempt`` (0-indexed): exponential with jitter.

    A zero base disables the delay entirely.
    """
    if base <= 0:
        return 0.0
    jitter = random.uniform(0, base)
    return min(cap, base * (2**attempt) + jitter)


def sanitize_headers(headers: Mapping[str, str]) -> dict:
    """Return a copy of ``headers`` with credentials redacted."""
    return {
        name: "***REDACTED***" if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }
