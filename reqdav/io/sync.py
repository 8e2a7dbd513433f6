"""
Synchronous I/O implementation using the requests library.
"""

from typing import Optional, Tuple, Union

import requests

from reqdav.lib import error
from reqdav.protocol.types import DAVRequest, DAVResponse


class SyncIO:
    """
    Synchronous I/O shell using the requests library.

    This is a thin wrapper that executes DAVRequest objects via HTTP
    and returns DAVResponse objects.

    Example:
        io = SyncIO()
        response = io.execute(DAVRequest(DAVMethod.GET, "https://dav.example.com/a.txt"))
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = 30.0,
        verify: Union[bool, str] = True,
        cert: Union[str, Tuple[str, str], None] = None,
    ):
        """
        Initialize the sync I/O handler.

        Args:
            session: Existing requests Session to use (creates new if None)
            timeout: Request timeout in seconds
            verify: Verify SSL certificates, or the path of a CA bundle
            cert: Client certificate, passed on to requests
        """
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout
        self.verify = verify
        self.cert = cert

    def execute(self, request: DAVRequest) -> DAVResponse:
        """
        Execute a DAVRequest and return DAVResponse.

        Args:
            request: The request to execute

        Returns:
            DAVResponse with status, headers, and body

        Raises:
            TransportError: wrapping any requests exception
        """
        try:
            response = self.session.request(
                method=request.method.value,
                url=request.url,
                headers=request.headers,
                data=request.body,
                timeout=self.timeout,
                verify=self.verify,
                cert=self.cert,
            )
        except requests.RequestException as err:
            raise error.TransportError(url=request.url, reason=str(err)) from err

        return DAVResponse(
            status=response.status_code,
            headers=response.headers,
            body=response.content or b"",
            reason=response.reason or "",
        )

    def close(self) -> None:
        """Close the session if we created it."""
        if self._owns_session and self.session:
            self.session.close()

    def __enter__(self) -> "SyncIO":
        """Context manager entry."""
        return self

    def __exit__(self, *args) -> None:
        """Context manager exit."""
        self.close()
