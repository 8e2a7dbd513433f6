#!/usr/bin/env python
from typing import ClassVar

from .base import BaseElement
from reqdav.lib.namespace import ns


class AddressBook(BaseElement):
    tag: ClassVar[str] = ns("CR", "addressbook")
