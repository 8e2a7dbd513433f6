#!/usr/bin/env python
from typing import ClassVar

from .base import BaseElement
from reqdav.lib.namespace import ns


## Children of the DAV:error body sent by sabre/dav on failures


class ExceptionClass(BaseElement):
    tag: ClassVar[str] = ns("S", "exception")


class Message(BaseElement):
    tag: ClassVar[str] = ns("S", "message")
