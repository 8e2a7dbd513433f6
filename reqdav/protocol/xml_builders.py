"""
Pure functions for building WebDAV request bodies.
"""
from urllib.parse import urlencode

from lxml import etree

from reqdav.elements import dav


def build_propfind_body() -> bytes:
    """
    Build the PROPFIND request body used for listings.  We always
    ask for all properties and let the decoder pick what it needs.

    Returns:
        UTF-8 encoded XML bytes
    """
    propfind = dav.Propfind() + dav.Allprop()
    return etree.tostring(propfind.xmlelement(), encoding="utf-8", xml_declaration=True)


def build_unzip_body() -> bytes:
    """Form body for the UNZIP extension, a POST with ``method=UNZIP``"""
    return urlencode({"method": "UNZIP"}).encode("ascii")
