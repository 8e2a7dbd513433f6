#!/usr/bin/env python
import logging
import os
from collections import defaultdict
from typing import Dict
from typing import Optional
from typing import Type

from reqdav import __version__

debug_dump_communication = False

## Environmental variables prepended with "PYTHON_REQDAV" are used for debug purposes,
## environmental variables prepended with "REQDAV_" are for connection parameters
debug_dump_communication = os.environ.get("PYTHON_REQDAV_COMMDUMP", False)
## one of DEBUG_PDB, DEBUG, DEVELOPMENT, PRODUCTION
debugmode = os.environ.get("PYTHON_REQDAV_DEBUGMODE")
if not debugmode:
    if "dev" in __version__ or __version__ == "(unknown)":
        debugmode = "DEVELOPMENT"
    else:
        debugmode = "PRODUCTION"

log = logging.getLogger("reqdav")
if debugmode.startswith("DEBUG"):
    log.setLevel(logging.DEBUG)
else:
    log.setLevel(logging.WARNING)


def weirdness(*reasons):
    from reqdav.lib.debug import xmlstring

    reason = " : ".join([xmlstring(x) for x in reasons])
    log.warning(f"Deviation from expectations found: {reason}")
    if debugmode == "DEBUG_PDB":
        log.error(f"Dropping into debugger due to {reason}")
        import pdb

        pdb.set_trace()


class DAVError(Exception):
    url: Optional[str] = None
    reason: str = "no reason"

    def __init__(self, url: Optional[str] = None, reason: Optional[str] = None) -> None:
        if url:
            self.url = url
        if reason:
            self.reason = reason

    def __str__(self) -> str:
        return "%s at '%s', reason %s" % (
            self.__class__.__name__,
            self.url,
            self.reason,
        )


class TransportError(DAVError):
    """
    The request never produced a response (connection refused, TLS
    failure, timeout ...).  The underlying exception from the
    transport is chained as ``__cause__``.
    """

    pass


## Decode errors


class DecodeError(DAVError):
    """
    Something we got from the server (a status code, a header, an XML
    body) could not be turned into what we expected.
    """

    pass


class XMLDecodeError(DecodeError):
    pass


class FieldError(DecodeError):
    def __init__(self, field: str, url: Optional[str] = None) -> None:
        self.field = field
        super().__init__(url=url, reason=field)


class FieldNotFoundError(FieldError):
    pass


class FieldNotSupportedError(FieldError):
    pass


class InvalidValueError(DecodeError):
    """A scalar property (timestamp, byte count) could not be parsed"""

    def __init__(self, field: str, value: str, url: Optional[str] = None) -> None:
        self.field = field
        self.value = value
        super().__init__(url=url, reason=f"invalid value for {field}: {value!r}")


class StatusMismatchedError(DecodeError):
    def __init__(
        self, response_code: int, expected_code: int, url: Optional[str] = None
    ) -> None:
        self.response_code = response_code
        self.expected_code = expected_code
        super().__init__(
            url=url,
            reason=f"expected status {expected_code}, got {response_code}",
        )


## Authentication errors


class AuthProbeError(DecodeError):
    """
    The unauthenticated probe for a digest challenge did not give a
    401 with a usable WWW-Authenticate header.
    """

    pass


class NoAuthHeaderInResponseError(AuthProbeError):
    reason = "no WWW-Authenticate header in 401 response"


class ProbeStatusMismatchedError(StatusMismatchedError, AuthProbeError):
    pass


class AuthComputeError(DAVError):
    pass


class DigestAuthError(AuthComputeError):
    """
    The digest challenge could not be parsed, or the authorization
    header could not be computed from it.
    """

    pass


class MissingAuthContextError(AuthComputeError):
    reason = "digest challenge missing after a successful probe"


## Server errors


class ServerError(DAVError):
    """
    The server answered a request with a non-2xx status.  Sabre-based
    servers (Nextcloud, ownCloud ...) send an XML body with an
    exception class and a message, those are kept in ``exception`` and
    ``message``.  For anything else ``message`` holds the raw body.
    """

    def __init__(
        self,
        response_code: int,
        exception: str,
        message: str,
        url: Optional[str] = None,
    ) -> None:
        self.response_code = response_code
        self.exception = exception
        self.message = message
        super().__init__(url=url, reason=f"{response_code} {exception}: {message}")


class GetError(ServerError):
    pass


class PutError(ServerError):
    pass


class DeleteError(ServerError):
    pass


class MkcolError(ServerError):
    pass


class MoveError(ServerError):
    pass


class CopyError(ServerError):
    pass


class UnzipError(ServerError):
    pass


exception_by_method: Dict[str, Type[ServerError]] = defaultdict(lambda: ServerError)
for method in (
    "get",
    "put",
    "delete",
    "mkcol",
    "move",
    "copy",
    "unzip",
):
    exception_by_method[method] = locals()[method[0].upper() + method[1:] + "Error"]
