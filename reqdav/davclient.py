#!/usr/bin/env python
import os
import ssl
import sys
from tempfile import NamedTemporaryFile
from types import TracebackType
from typing import List
from typing import Optional
from typing import Union
from urllib.parse import urlparse

import requests
from requests.structures import CaseInsensitiveDict

from reqdav import __version__
from reqdav.io import SyncIO
from reqdav.io import SyncIOProtocol
from reqdav.lib import error
from reqdav.lib.auth import Anonymous
from reqdav.lib.auth import apply_authentication
from reqdav.lib.auth import Auth
from reqdav.lib.auth import build_auth
from reqdav.lib.auth import Digest
from reqdav.lib.digest import DigestSession
from reqdav.lib.python_utilities import to_normal_str
from reqdav.lib.python_utilities import to_wire
from reqdav.protocol import build_propfind_body
from reqdav.protocol import build_unzip_body
from reqdav.protocol import DAVMethod
from reqdav.protocol import DAVRequest
from reqdav.protocol import DAVResponse
from reqdav.protocol import to_entity
from reqdav.protocol import Depth
from reqdav.protocol import ListEntity
from reqdav.protocol import ListResponse
from reqdav.protocol import parse_multistatus
from reqdav.protocol import parse_server_error

if sys.version_info < (3, 11):
    from typing_extensions import Self
else:
    from typing import Self

"""
The ``Client`` class handles the communication with a WebDAV server:
it builds requests, authenticates them, sends them through the
transport and decodes directory listings.

``ClientBuilder`` mirrors the way clients are usually set up in code,
``get_davclient`` builds a client from environment variables or a
configuration file.
"""

log = error.log

CONNKEYS = set(
    (
        "url",
        "username",
        "password",
        "auth_type",
        "timeout",
        "ssl_verify_cert",
        "ssl_cert",
    )
)


def check_2xx(response: DAVResponse, operation: str, url: Optional[str] = None) -> DAVResponse:
    """
    Returns the response if the status is 2xx, raises the ServerError
    subclass for the operation otherwise.
    """
    if response.ok:
        return response
    parsed = parse_server_error(response.body)
    exception_class = error.exception_by_method[operation]
    if parsed is None:
        raise exception_class(
            response_code=response.status,
            exception="server exception and parse error",
            message=response.text,
            url=url,
        )
    raise exception_class(
        response_code=response.status,
        exception=parsed[0],
        message=parsed[1],
        url=url,
    )


class Client:
    """
    WebDAV client.  Every request goes through :meth:`start_request`,
    which builds the absolute URL and authenticates the request.

    For each operation there is a ``*_raw`` method returning the
    response as it came and a checked method raising a
    :class:`reqdav.lib.error.ServerError` subclass on non-2xx statuses.

    A client may be shared between threads.
    """

    huge_tree: bool = False

    def __init__(
        self,
        host: str,
        auth: Optional[Auth] = None,
        transport: Optional[SyncIOProtocol] = None,
        huge_tree: bool = False,
    ) -> None:
        """
        Args:
          host: Base URL of the WebDAV root, i.e. `https://cloud.example.com/remote.php/dav/files/user`
          auth: Anonymous(), Basic(username, password) or Digest(username, password)
          transport: Anything implementing SyncIOProtocol, defaults to a requests based SyncIO
          huge_tree: enable lxml huge_tree for very big listings, beware of security issues
        """
        self.host = host
        self.auth = auth if auth is not None else Anonymous()
        self.transport = transport if transport is not None else SyncIO()
        self.huge_tree = huge_tree
        self.headers = CaseInsensitiveDict({"User-Agent": "reqdav/" + __version__})
        self.digest_auth: Optional[DigestSession] = None
        if isinstance(self.auth, Digest):
            self.digest_auth = DigestSession(
                self.auth.username, self.auth.password, self.send
            )
        log.debug("client set up for %s with %s", host, type(self.auth).__name__)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: Optional[BaseException] = None,
        exc_value: Optional[BaseException] = None,
        traceback: Optional[TracebackType] = None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """
        Closes the transport
        """
        self.transport.close()

    def url_for(self, path: str) -> str:
        return "%s/%s" % (self.host.rstrip("/"), path.lstrip("/"))

    def destination_for(self, path: str) -> str:
        """
        The Destination header of MOVE and COPY: the path of the host
        with the target appended.
        """
        base = urlparse(self.host).path
        return "%s/%s" % (base.rstrip("/"), path.lstrip("/"))

    def start_request(self, method: DAVMethod, path: str) -> DAVRequest:
        """
        Creates the request with method, absolute url and authentication.
        For digest auth this may probe the server.
        """
        request = DAVRequest(method=method, url=self.url_for(path), headers=dict(self.headers))
        return apply_authentication(request, self.auth, self.digest_auth)

    def send(self, request: DAVRequest) -> DAVResponse:
        """
        Sends an already built request.
        """
        log.debug(
            "sending request - method={0}, url={1}\nbody:\n{2}".format(
                request.method.value, request.url, to_normal_str(request.body)
            )
        )
        response = self.transport.execute(request)
        log.debug("server responded with %i %s" % (response.status, response.reason))
        log.debug("response headers: " + str(dict(response.headers)))

        if error.debug_dump_communication:
            self._dump_communication(request, response)

        return response

    def _dump_communication(self, request: DAVRequest, response: DAVResponse) -> None:
        import datetime

        with NamedTemporaryFile(prefix="reqdavcomm", delete=False) as commlog:
            commlog.write(b"=" * 80 + b"\n")
            commlog.write(f"{datetime.datetime.now():%FT%H:%M:%S}".encode("utf-8"))
            commlog.write(b"\n====>\n")
            commlog.write(f"{request.method.value} {request.url}\n".encode("utf-8"))
            ## Authorization is left out on purpose
            commlog.write(
                b"\n".join(
                    to_wire(f"{x}: {request.headers[x]}")
                    for x in request.headers
                    if x.lower() != "authorization"
                )
            )
            commlog.write(b"\n\n")
            commlog.write(request.body or b"")
            commlog.write(b"<====\n")
            commlog.write(f"{response.status} {response.reason}\n".encode("utf-8"))
            commlog.write(
                b"\n".join(to_wire(f"{x}: {response.headers[x]}") for x in response.headers)
            )
            commlog.write(b"\n\n")
            commlog.write(response.body)
            commlog.write(b"\n")

    def request(
        self,
        method: DAVMethod,
        path: str,
        body: Optional[bytes] = None,
        headers: Optional[dict] = None,
    ) -> DAVResponse:
        """
        Builds, authenticates and sends a request
        """
        request = self.start_request(method, path)
        for key, value in (headers or {}).items():
            request = request.with_header(key, value)
        if body is not None:
            request = request.with_body(to_wire(body))
        return self.send(request)

    def get_raw(self, path: str) -> DAVResponse:
        return self.request(DAVMethod.GET, path)

    def get(self, path: str) -> DAVResponse:
        """
        Get a file from the WebDAV server
        """
        return check_2xx(self.get_raw(path), "get", self.url_for(path))

    def put_raw(self, path: str, body: Union[bytes, str]) -> DAVResponse:
        return self.request(
            DAVMethod.PUT,
            path,
            body,
            {"Content-Type": "application/octet-stream"},
        )

    def put(self, path: str, body: Union[bytes, str]) -> None:
        """
        Upload a file to the WebDAV server
        """
        check_2xx(self.put_raw(path, body), "put", self.url_for(path))

    def delete_raw(self, path: str) -> DAVResponse:
        return self.request(DAVMethod.DELETE, path)

    def delete(self, path: str) -> None:
        """
        Deletes the collection or file at the given path
        """
        check_2xx(self.delete_raw(path), "delete", self.url_for(path))

    def mkcol_raw(self, path: str) -> DAVResponse:
        return self.request(DAVMethod.MKCOL, path)

    def mkcol(self, path: str) -> None:
        """
        Creates a collection (directory)
        """
        check_2xx(self.mkcol_raw(path), "mkcol", self.url_for(path))

    def unzip_raw(self, path: str) -> DAVResponse:
        return self.request(
            DAVMethod.POST,
            path,
            build_unzip_body(),
            {"Content-Type": "application/x-www-form-urlencoded"},
        )

    def unzip(self, path: str) -> None:
        """
        Unzips a .zip archive on the server.  This is a vendor extension
        (a POST with ``method=UNZIP``), most servers don't support it.
        """
        check_2xx(self.unzip_raw(path), "unzip", self.url_for(path))

    def mv_raw(self, from_path: str, to_path: str) -> DAVResponse:
        return self.request(
            DAVMethod.MOVE,
            from_path,
            headers={"Destination": self.destination_for(to_path)},
        )

    def mv(self, from_path: str, to_path: str) -> None:
        """
        Rename or move a collection or file.
        """
        check_2xx(self.mv_raw(from_path, to_path), "move", self.url_for(from_path))

    def cp_raw(self, from_path: str, to_path: str, overwrite: bool = True) -> DAVResponse:
        return self.request(
            DAVMethod.COPY,
            from_path,
            headers={
                "Destination": self.destination_for(to_path),
                "Overwrite": "T" if overwrite else "F",
            },
        )

    def cp(self, from_path: str, to_path: str) -> None:
        """
        Copy a collection or file, overwriting the target
        """
        check_2xx(self.cp_raw(from_path, to_path, True), "copy", self.url_for(from_path))

    def list_raw(self, path: str, depth: Union[Depth, int, str] = Depth.ONE) -> DAVResponse:
        return self.request(
            DAVMethod.PROPFIND,
            path,
            build_propfind_body(),
            {
                "Depth": Depth.header_value(depth),
                "Content-Type": 'application/xml; charset="utf-8"',
            },
        )

    def list_rsp(
        self, path: str, depth: Union[Depth, int, str] = Depth.ONE
    ) -> List[ListResponse]:
        """
        The PROPFIND responses, with every propstat, before any
        conversion into files and folders.
        """
        response = self.list_raw(path, depth)
        if response.status != 207:
            raise error.StatusMismatchedError(
                response_code=response.status,
                expected_code=207,
                url=self.url_for(path),
            )
        return parse_multistatus(response.body, huge_tree=self.huge_tree).responses

    def list(
        self, path: str, depth: Union[Depth, int, str] = Depth.ONE
    ) -> List[ListEntity]:
        """
        List files and folders at the given path.

        Depth 0 applies only to the resource, 1 to the resource and its
        children, infinity to the whole subtree.  The resource itself is
        part of the result, in the order the server sent it.
        """
        responses = self.list_rsp(path, depth)
        log.debug("decoding %i responses", len(responses))
        return [to_entity(response) for response in responses]


class ClientBuilder:
    def __init__(self) -> None:
        self.agent: Union[requests.Session, SyncIOProtocol, None] = None
        self.host: Optional[str] = None
        self.auth: Optional[Auth] = None
        self.timeout: Optional[float] = 30.0

    def set_agent(self, agent: Union[requests.Session, SyncIOProtocol]) -> Self:
        """A requests.Session, or a complete transport"""
        self.agent = agent
        return self

    def set_host(self, host: str) -> Self:
        self.host = host
        return self

    def set_auth(self, auth: Auth) -> Self:
        self.auth = auth
        return self

    def set_timeout(self, timeout: Optional[float]) -> Self:
        self.timeout = timeout
        return self

    def build(self, ignore_cert: bool = False, server_cert: Optional[str] = None) -> Client:
        """
        Args:
          ignore_cert: don't verify the server certificate
          server_cert: path of a PEM or DER certificate to trust for the server
        """
        if self.host is None:
            raise error.FieldNotFoundError("host")
        if isinstance(self.agent, SyncIOProtocol):
            transport = self.agent
        else:
            verify: Union[bool, str] = not ignore_cert
            if server_cert and not ignore_cert:
                verify = _ca_bundle(server_cert)
            transport = SyncIO(session=self.agent, timeout=self.timeout, verify=verify)
        return Client(host=self.host, auth=self.auth, transport=transport)


def _ca_bundle(path: str) -> str:
    """
    requests only takes PEM bundles.  A DER certificate is converted
    into a temporary PEM file.

    Raises:
        DAVError: the certificate file can't be read
    """
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as err:
        raise error.DAVError(
            reason=f"server certificate {path} can't be read: {err.strerror}"
        ) from err
    if b"-----BEGIN" in data[:30].upper():
        return path
    pem = ssl.DER_cert_to_PEM_cert(data)
    with NamedTemporaryFile(
        "w", prefix="reqdavcert", suffix=".pem", delete=False
    ) as pemfile:
        pemfile.write(pem)
    log.debug("converted DER certificate %s to %s", path, pemfile.name)
    return pemfile.name


def get_davclient(
    check_config_file: bool = True,
    config_file: Optional[str] = None,
    config_section: Optional[str] = None,
    environment: bool = True,
    **config_data,
) -> Optional[Client]:
    """
    This function will yield a Client object.  It will not try to
    connect.  It will read configuration from various sources, in
    this order:

    * Data from the parameters given
    * Environment variables prepended with `REQDAV_`, like `REQDAV_URL`, `REQDAV_USERNAME`, `REQDAV_PASSWORD`, `REQDAV_AUTH_TYPE`
    * Environment variables `REQDAV_CONFIG_FILE` and `REQDAV_CONFIG_SECTION`
    * Configuration file, with keys prefixed `reqdav_`

    Returns None if no configuration was found.
    """
    if config_data:
        return client_from_params(**config_data)

    if environment:
        conf = {}
        for conf_key in (
            x
            for x in os.environ
            if x.startswith("REQDAV_") and not x.startswith("REQDAV_CONFIG")
        ):
            key = conf_key[7:].lower()
            if key not in CONNKEYS:
                log.warning("ignoring unknown environment variable %s", conf_key)
                continue
            conf[key] = os.environ[conf_key]
        if conf:
            return client_from_params(**conf)
        if not config_file:
            config_file = os.environ.get("REQDAV_CONFIG_FILE")
        if not config_section:
            config_section = os.environ.get("REQDAV_CONFIG_SECTION")

    if check_config_file:
        from . import config

        if not config_section:
            config_section = "default"

        cfg = config.read_config(config_file)
        if cfg:
            section = config.config_section(cfg, config_section)
            conn_params = {}
            for k in section:
                if k.startswith("reqdav_") and section[k]:
                    key = k[7:]
                    if key == "pass":
                        key = "password"
                    if key == "user":
                        key = "username"
                    conn_params[key] = section[k]
            if conn_params:
                return client_from_params(**conn_params)
    return None


def client_from_params(
    url: str,
    username: Optional[str] = None,
    password: Optional[str] = None,
    auth_type: Optional[str] = None,
    timeout: Union[float, str, None] = None,
    ssl_verify_cert: Union[bool, str] = True,
    ssl_cert: Optional[str] = None,
) -> Client:
    """
    Builds a client from flat connection parameters (see CONNKEYS).
    Values coming from the environment are strings, they are
    converted here.
    """
    if isinstance(ssl_verify_cert, str) and ssl_verify_cert.lower() in (
        "0",
        "false",
        "no",
    ):
        ssl_verify_cert = False
    elif isinstance(ssl_verify_cert, str) and ssl_verify_cert.lower() in (
        "1",
        "true",
        "yes",
    ):
        ssl_verify_cert = True
    transport = SyncIO(
        timeout=float(timeout) if timeout is not None else 30.0,
        verify=ssl_verify_cert,
        cert=ssl_cert,
    )
    return Client(
        host=url,
        auth=build_auth(auth_type, username, password),
        transport=transport,
    )
