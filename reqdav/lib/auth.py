"""
Authentication modes and how they decorate a request.

A client has exactly one mode, chosen when it is built:

* ``Anonymous()`` - no Authorization header
* ``Basic(username, password)`` - a Basic header on every request
* ``Digest(username, password)`` - a digest header computed from a
  challenge obtained through a probe, see :mod:`reqdav.lib.digest`
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Union

from requests.auth import _basic_auth_str
from typing_extensions import assert_never

from reqdav.lib import error

if TYPE_CHECKING:
    from reqdav.lib.digest import DigestSession
    from reqdav.protocol.types import DAVRequest


@dataclass(frozen=True)
class Anonymous:
    pass


@dataclass(frozen=True)
class Basic:
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class Digest:
    username: str
    password: str = field(repr=False)


Auth = Union[Anonymous, Basic, Digest]


def extract_auth_types(header: str) -> set[str]:
    """
    Extract authentication types from WWW-Authenticate header.

    Args:
        header: WWW-Authenticate header value from server response.

    Returns:
        Set of lowercase auth type strings.

    Example:
        >>> extract_auth_types('Basic realm="test"')
        {'basic'}

    Reference:
        https://developer.mozilla.org/en-US/docs/Web/HTTP/Headers/WWW-Authenticate#syntax
    """
    return {h.split()[0] for h in header.lower().split(",") if h.strip()}


def build_auth(
    auth_type: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
) -> Auth:
    """
    Build an auth mode from configuration values.  Without an
    auth_type, credentials mean basic auth and no credentials mean
    anonymous access.
    """
    auth_type = (auth_type or "").lower()
    if not auth_type:
        auth_type = "basic" if username else "anonymous"
    if auth_type == "anonymous":
        return Anonymous()
    if username is None or password is None:
        raise error.DAVError(
            reason=f"auth_type {auth_type} requires both username and password"
        )
    if auth_type == "basic":
        return Basic(username, password)
    if auth_type == "digest":
        return Digest(username, password)
    raise error.DAVError(
        reason=f"unsupported auth_type {auth_type}, use anonymous, basic or digest"
    )


def apply_authentication(
    request: DAVRequest,
    auth: Auth,
    digest_session: Optional[DigestSession] = None,
) -> DAVRequest:
    """
    Return the request decorated according to the auth mode.  For
    digest this may cause a probe towards the server.
    """
    if isinstance(auth, Anonymous):
        return request
    elif isinstance(auth, Basic):
        return request.with_header(
            "Authorization", _basic_auth_str(auth.username, auth.password)
        )
    elif isinstance(auth, Digest):
        if digest_session is None:
            raise error.MissingAuthContextError(url=request.url)
        return request.with_header(
            "Authorization", digest_session.authorization(request.method, request.url)
        )
    else:
        assert_never(auth)
