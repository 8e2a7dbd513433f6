#!/usr/bin/env python
from typing import ClassVar

from .base import BaseElement
from reqdav.lib.namespace import ns


class Calendar(BaseElement):
    tag: ClassVar[str] = ns("C", "calendar")


class CalendarData(BaseElement):
    tag: ClassVar[str] = ns("C", "calendar-data")
