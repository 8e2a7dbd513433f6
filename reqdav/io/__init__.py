"""
I/O layer for reqdav.

The I/O layer is intentionally thin - it only handles HTTP transport.
Authentication lives in reqdav.lib, XML in reqdav.protocol.
"""

from .base import SyncIOProtocol
from .sync import SyncIO

__all__ = [
    "SyncIOProtocol",
    "SyncIO",
]
