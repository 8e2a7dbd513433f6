"""
HTTP Digest authentication (RFC 7616) with a session shared by all
requests of one client.

The first request needing digest auth sends an unauthenticated probe
with the same method and URL, expecting a 401 with a challenge.  The
challenge is kept for the lifetime of the client, every following
request computes its Authorization header from it with an increasing
nonce count.
"""

import hashlib
import os
import re
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import urlparse

from requests.utils import parse_dict_header

from reqdav.lib import error
from reqdav.lib.auth import extract_auth_types
from reqdav.protocol.types import DAVMethod, DAVRequest, DAVResponse

log = error.log

_HASHES: dict[str, Callable] = {
    "MD5": hashlib.md5,
    "SHA": hashlib.sha1,
    "SHA-256": hashlib.sha256,
    "SHA-512": hashlib.sha512,
}

_digest_prefix = re.compile(r"digest\s+", flags=re.IGNORECASE)


@dataclass
class Challenge:
    """
    A parsed digest challenge.  ``nonce_count`` is the number of
    responses computed so far; it is only to be touched by
    :meth:`respond`.
    """

    realm: str
    nonce: str
    qop: Optional[str] = None
    opaque: Optional[str] = None
    algorithm: Optional[str] = None
    nonce_count: int = 0

    def _hash_function(self) -> Callable:
        algorithm = (self.algorithm or "MD5").upper()
        if algorithm.endswith("-SESS"):
            algorithm = algorithm[: -len("-SESS")]
        try:
            return _HASHES[algorithm]
        except KeyError:
            raise error.DigestAuthError(
                reason=f"unsupported digest algorithm {self.algorithm}"
            ) from None

    def _qop(self) -> Optional[str]:
        if self.qop is None:
            return None
        offered = [x.strip().lower() for x in self.qop.split(",")]
        if "auth" not in offered:
            raise error.DigestAuthError(reason=f"unsupported qop {self.qop}")
        return "auth"

    def respond(
        self,
        username: str,
        password: str,
        method: str,
        uri: str,
        cnonce: Optional[str] = None,
    ) -> str:
        """
        Compute the value of the Authorization header for one request,
        and bump the nonce count.

        Raises:
            DigestAuthError: unsupported algorithm or qop
        """
        hash_function = self._hash_function()
        qop = self._qop()

        def H(x: str) -> str:
            return hash_function(x.encode("utf-8")).hexdigest()

        def KD(secret: str, data: str) -> str:
            return H(f"{secret}:{data}")

        self.nonce_count += 1
        ncvalue = f"{self.nonce_count:08x}"
        if cnonce is None:
            seed = f"{self.nonce_count}{self.nonce}{time.ctime()}".encode("utf-8")
            cnonce = hashlib.sha1(seed + os.urandom(8)).hexdigest()[:16]

        HA1 = H(f"{username}:{self.realm}:{password}")
        if (self.algorithm or "").upper().endswith("-SESS"):
            HA1 = H(f"{HA1}:{self.nonce}:{cnonce}")
        HA2 = H(f"{method}:{uri}")

        if qop is None:
            respdig = KD(HA1, f"{self.nonce}:{HA2}")
        else:
            respdig = KD(HA1, f"{self.nonce}:{ncvalue}:{cnonce}:{qop}:{HA2}")

        base = (
            f'username="{username}", realm="{self.realm}", nonce="{self.nonce}", '
            f'uri="{uri}", response="{respdig}"'
        )
        if self.opaque:
            base += f', opaque="{self.opaque}"'
        if self.algorithm:
            base += f", algorithm={self.algorithm}"
        if qop:
            base += f', qop={qop}, nc={ncvalue}, cnonce="{cnonce}"'
        return f"Digest {base}"


def _digest_params_start(header: str) -> Optional[int]:
    """
    Position of the digest parameters in a header listing one or more
    schemes.  A scheme token follows the start of the header or a comma
    outside quotes, so a realm containing the word digest is skipped.
    """
    in_quotes = False
    boundary = True
    i = 0
    while i < len(header):
        c = header[i]
        if in_quotes:
            if c == "\\":
                i += 1
            elif c == '"':
                in_quotes = False
        elif c == '"':
            in_quotes = True
        elif c == ",":
            boundary = True
        elif boundary and not c.isspace():
            match = _digest_prefix.match(header, i)
            if match:
                return match.end()
            boundary = False
        i += 1
    return None


def parse_challenge(header: str) -> Challenge:
    """
    Parse a WWW-Authenticate header value into a Challenge.

    The header may list several schemes, only the digest one is used.

    Raises:
        DigestAuthError: no digest scheme, or realm/nonce missing
    """
    start = _digest_params_start(header)
    if start is None:
        raise error.DigestAuthError(
            reason=f"server offers {', '.join(sorted(extract_auth_types(header)))}, not digest"
        )
    params = {k.lower(): v for k, v in parse_dict_header(header[start:]).items()}
    for required in ("realm", "nonce"):
        if not params.get(required):
            raise error.DigestAuthError(reason=f"{required} missing in digest challenge")
    return Challenge(
        realm=params["realm"],
        nonce=params["nonce"],
        qop=params.get("qop"),
        opaque=params.get("opaque"),
        algorithm=params.get("algorithm"),
    )


def request_uri(url: str) -> str:
    """The digest-uri of a request: path and query of the URL"""
    parsed = urlparse(url)
    uri = parsed.path or "/"
    if parsed.query:
        uri += "?" + parsed.query
    return uri


def _header_text(value: str, url: str) -> str:
    """
    requests hands out header values decoded as latin-1.  A challenge
    sent as UTF-8 is recovered here, anything that is neither raises.
    """
    try:
        raw = value.encode("latin-1")
    except UnicodeEncodeError:
        ## already proper text, not from the wire
        return value
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as err:
        raise error.AuthProbeError(
            url=url, reason="WWW-Authenticate header is not valid UTF-8"
        ) from err


class DigestSession:
    """
    The digest state of one client.

    The challenge is guarded by a lock, held only while checking for
    it, replacing it, or computing a response from it.  The probe is
    sent without holding the lock, so two threads doing their first
    request at the same time may both probe; the last challenge
    stored wins.

    ``send`` is the client's send method, so probes are logged and
    dumped like any other request.
    """

    def __init__(
        self,
        username: str,
        password: str,
        send: Callable[[DAVRequest], DAVResponse],
    ) -> None:
        self.username = username
        self.password = password
        self.send = send
        self._lock = threading.Lock()
        self._challenge: Optional[Challenge] = None

    @property
    def is_initialized(self) -> bool:
        with self._lock:
            return self._challenge is not None

    @property
    def challenge(self) -> Optional[Challenge]:
        with self._lock:
            return self._challenge

    def probe(self, method: DAVMethod, url: str) -> None:
        """
        Send the request without credentials and store the challenge
        from the 401 it should give.

        Raises:
            ProbeStatusMismatchedError: the status was not 401
            NoAuthHeaderInResponseError: no WWW-Authenticate header
            AuthProbeError: the header is not valid UTF-8
            DigestAuthError: the header could not be parsed
            TransportError: no response at all
        """
        log.debug("probing %s %s for a digest challenge", method.value, url)
        response = self.send(DAVRequest(method=method, url=url))
        if response.status != 401:
            raise error.ProbeStatusMismatchedError(
                response_code=response.status, expected_code=401, url=url
            )
        www_auth = response.headers.get("WWW-Authenticate")
        if www_auth is None:
            raise error.NoAuthHeaderInResponseError(url=url)
        self.update_auth_context(_header_text(www_auth, url))

    def update_auth_context(self, header: str) -> None:
        """
        Parse the header and replace the stored challenge.  On a
        parse error the stored challenge is left untouched.
        """
        challenge = parse_challenge(header)
        with self._lock:
            self._challenge = challenge
        log.debug("digest challenge stored, realm %s", challenge.realm)

    def respond(self, method: DAVMethod, url: str) -> str:
        """
        Compute the Authorization header value from the stored
        challenge.  The nonce count is bumped under the lock, so
        concurrent requests never share a count.

        Raises:
            MissingAuthContextError: no challenge stored
            DigestAuthError: the challenge can't be answered
        """
        uri = request_uri(url)
        with self._lock:
            if self._challenge is None:
                raise error.MissingAuthContextError(url=url)
            return self._challenge.respond(
                self.username, self.password, method.value, uri
            )

    def authorization(self, method: DAVMethod, url: str) -> str:
        """Probe if needed, then compute the Authorization header value"""
        if not self.is_initialized:
            self.probe(method, url)
        return self.respond(method, url)
