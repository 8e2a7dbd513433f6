#!/usr/bin/env python
import sys
from typing import ClassVar
from typing import List
from typing import Optional

from lxml import etree
from lxml.etree import _Element

from reqdav.lib.namespace import nsmap

if sys.version_info < (3, 11):
    from typing_extensions import Self
else:
    from typing import Self


class BaseElement:
    """
    An empty XML element with children.  The classes in dav, cdav,
    carddav and sabre only set the tag; the tags double as the names
    matched when parsing responses.
    """

    tag: ClassVar[Optional[str]] = None

    def __init__(self) -> None:
        self.children: List[BaseElement] = []

    def __add__(self, other: "BaseElement") -> Self:
        self.children.append(other)
        return self

    def xmlelement(self) -> _Element:
        if self.tag is None:
            raise ValueError("Unexpected value None for self.tag")

        root = etree.Element(self.tag, nsmap=nsmap)
        for c in self.children:
            root.append(c.xmlelement())
        return root
