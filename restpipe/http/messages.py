"""
Transport-level request and response messages.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from requests.structures import CaseInsensitiveDict

Body = Union[bytes, str, Mapping[str, Any], None]


@dataclass
class HTTPRequest:
    """A fully built request, ready to hand to an adapter."""

    method: str
    url: str
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: Body = None

    def __post_init__(self) -> None:
        self.method = self.method.upper()
        if not isinstance(self.headers, CaseInsensitiveDict):
            self.headers = CaseInsensitiveDict(self.headers)

    @property
    def content(self) -> bytes:
        if self.body is None:
            return b""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        if isinstance(self.body, bytes):
            return self.body
        # Raw mappings are form-encoded by the transport
        return str(self.body).encode("utf-8")


@dataclass
class HTTPResponse:
    """A completed response as returned by an adapter."""

    status_code: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: bytes = b""
    elapsed: Optional[float] = None

    def __post_init__(self) -> None:
        if not isinstance(self.headers, CaseInsensitiveDict):
            self.headers = CaseInsensitiveDict(self.headers)
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")
