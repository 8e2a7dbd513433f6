"""
Core protocol types for reqdav.

The request/response dataclasses describe HTTP exchanges independent of
the transport.  The ``List*`` dataclasses mirror the structure of a
PROPFIND multistatus body and the entities decoded from it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Mapping, Union

from requests.structures import CaseInsensitiveDict


class DAVMethod(Enum):
    """HTTP methods used by the client."""

    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"
    MKCOL = "MKCOL"
    MOVE = "MOVE"
    COPY = "COPY"
    PROPFIND = "PROPFIND"


class Depth(Enum):
    """Value of the Depth header of a PROPFIND request."""

    ZERO = "0"
    ONE = "1"
    INFINITY = "infinity"

    @classmethod
    def header_value(cls, depth: Union["Depth", int, str]) -> str:
        if isinstance(depth, Depth):
            return depth.value
        if isinstance(depth, int):
            return str(depth)
        return cls(str(depth).lower()).value


@dataclass(frozen=True)
class DAVRequest:
    """
    Represents an HTTP request to be made.

    Attributes:
        method: HTTP method (GET, PUT, PROPFIND, etc.)
        url: Full URL for the request
        headers: HTTP headers as dict
        body: Request body as bytes (optional)
    """

    method: DAVMethod
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None

    def with_header(self, name: str, value: str) -> "DAVRequest":
        """Return new request with additional header."""
        new_headers = {**self.headers, name: value}
        return DAVRequest(
            method=self.method,
            url=self.url,
            headers=new_headers,
            body=self.body,
        )

    def with_body(self, body: bytes) -> "DAVRequest":
        """Return new request with body."""
        return DAVRequest(
            method=self.method,
            url=self.url,
            headers=self.headers,
            body=body,
        )


@dataclass(frozen=True)
class DAVResponse:
    """
    Represents an HTTP response received.

    Attributes:
        status: HTTP status code
        headers: HTTP headers, looked up case-insensitively
        body: Response body as bytes
    """

    status: int
    headers: Mapping[str, str]
    body: bytes = b""
    reason: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.headers, CaseInsensitiveDict):
            object.__setattr__(self, "headers", CaseInsensitiveDict(self.headers))

    @property
    def ok(self) -> bool:
        """True if status indicates success (2xx)."""
        return 200 <= self.status < 300

    @property
    def is_multistatus(self) -> bool:
        """True if this is a 207 Multi-Status response."""
        return self.status == 207

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace") if self.body else ""


## Intermediate records, one-to-one with the multistatus XML


@dataclass
class ListResourceType:
    collection: bool = False
    redirect_ref: bool = False
    redirect_lifetime: bool = False
    addressbook: bool = False
    calendar: bool = False


@dataclass
class ListProp:
    """
    The sparse property bag of one propstat.  Everything is optional,
    servers leave out whatever they like.
    """

    last_modified: datetime | None = None
    resource_type: ListResourceType = field(default_factory=ListResourceType)
    quota_used_bytes: int | None = None
    quota_available_bytes: int | None = None
    tag: str | None = None
    content_length: int | None = None
    content_type: str | None = None
    calendar_data: str | None = None
    display_name: str | None = None


@dataclass
class ListPropStat:
    status: str
    prop: ListProp = field(default_factory=ListProp)

    @property
    def status_code(self) -> str:
        """
        The code of a status line like "HTTP/1.1 200 OK", as a string.
        Empty if the line has no second token.
        """
        parts = self.status.split()
        return parts[1] if len(parts) >= 2 else ""

    @property
    def is_success(self) -> bool:
        return self.status_code.startswith("2")


@dataclass
class ListResponse:
    href: str
    propstats: list[ListPropStat] = field(default_factory=list)


@dataclass
class ListMultiStatus:
    responses: list[ListResponse] = field(default_factory=list)


## Decoded entities


@dataclass
class ListFile:
    href: str
    last_modified: datetime
    content_length: int = 0
    content_type: str = ""
    tag: str | None = None


@dataclass
class ListFolder:
    href: str
    last_modified: datetime
    quota_used_bytes: int | None = None
    quota_available_bytes: int | None = None
    tag: str | None = None
    is_addressbook: bool = False


ListEntity = Union[ListFile, ListFolder]
