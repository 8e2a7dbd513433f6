#!/usr/bin/env python
from typing import ClassVar

from .base import BaseElement
from reqdav.lib.namespace import ns


# Operations
class Propfind(BaseElement):
    tag: ClassVar[str] = ns("D", "propfind")


class Allprop(BaseElement):
    tag: ClassVar[str] = ns("D", "allprop")


# Multistatus envelope
class MultiStatus(BaseElement):
    tag: ClassVar[str] = ns("D", "multistatus")


class Response(BaseElement):
    tag: ClassVar[str] = ns("D", "response")


class Href(BaseElement):
    tag: ClassVar[str] = ns("D", "href")


class PropStat(BaseElement):
    tag: ClassVar[str] = ns("D", "propstat")


class Status(BaseElement):
    tag: ClassVar[str] = ns("D", "status")


class Prop(BaseElement):
    tag: ClassVar[str] = ns("D", "prop")


class ResponseDescription(BaseElement):
    tag: ClassVar[str] = ns("D", "responsedescription")


class Error(BaseElement):
    tag: ClassVar[str] = ns("D", "error")


# Properties
class ResourceType(BaseElement):
    tag: ClassVar[str] = ns("D", "resourcetype")


class DisplayName(BaseElement):
    tag: ClassVar[str] = ns("D", "displayname")


class GetEtag(BaseElement):
    tag: ClassVar[str] = ns("D", "getetag")


class GetLastModified(BaseElement):
    tag: ClassVar[str] = ns("D", "getlastmodified")


class GetContentLength(BaseElement):
    tag: ClassVar[str] = ns("D", "getcontentlength")


class GetContentType(BaseElement):
    tag: ClassVar[str] = ns("D", "getcontenttype")


class QuotaUsedBytes(BaseElement):
    tag: ClassVar[str] = ns("D", "quota-used-bytes")


class QuotaAvailableBytes(BaseElement):
    tag: ClassVar[str] = ns("D", "quota-available-bytes")


# Resource types
class Collection(BaseElement):
    tag: ClassVar[str] = ns("D", "collection")


## RFC4437 redirect references
class RedirectRef(BaseElement):
    tag: ClassVar[str] = ns("D", "redirectref")


class RedirectLifetime(BaseElement):
    tag: ClassVar[str] = ns("D", "redirect-lifetime")
