#!/usr/bin/env python
import logging

__version__ = "0.3.0"

from .davclient import Client
from .davclient import ClientBuilder
from .davclient import Depth
from .davclient import get_davclient
from .lib.auth import Anonymous
from .lib.auth import Basic
from .lib.auth import Digest
from .protocol.types import ListFile
from .protocol.types import ListFolder

## Silence notification of no default logging handler
log = logging.getLogger("reqdav")


class NullHandler(logging.Handler):
    def emit(self, record) -> None:
        pass


log.addHandler(NullHandler())

__all__ = [
    "__version__",
    "Client",
    "ClientBuilder",
    "Depth",
    "get_davclient",
    "Anonymous",
    "Basic",
    "Digest",
    "ListFile",
    "ListFolder",
]
