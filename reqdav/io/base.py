"""
Abstract I/O protocol definition.

This module defines the interface the client and the digest session
use to talk to the server.  Anything implementing it may be passed to
the client, which is how the tests replace the network.
"""

from typing import Protocol, runtime_checkable

from reqdav.protocol.types import DAVRequest, DAVResponse


@runtime_checkable
class SyncIOProtocol(Protocol):
    """
    Protocol defining the synchronous I/O interface.

    Implementations must be safe to call from several threads at once.
    """

    def execute(self, request: DAVRequest) -> DAVResponse:
        """
        Execute a request and return the response.

        Args:
            request: The DAVRequest to execute

        Returns:
            DAVResponse with status, headers, and body

        Raises:
            TransportError: if no response was received
        """
        ...

    def close(self) -> None:
        """Close any resources (e.g., HTTP session)."""
        ...
