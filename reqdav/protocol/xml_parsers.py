"""
Pure functions for parsing WebDAV XML response bodies.

All functions in this module are pure - they take XML bytes in and return
structured data out, with no side effects or I/O.
"""

import logging
from datetime import datetime, timezone

from lxml import etree
from lxml.etree import _Element

from reqdav.elements import carddav, cdav, dav, sabre
from reqdav.lib import error

from .types import ListMultiStatus, ListProp, ListPropStat, ListResourceType, ListResponse

log = logging.getLogger(__name__)

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


def parse_multistatus(body: bytes, huge_tree: bool = False) -> ListMultiStatus:
    """
    Parse a 207 Multi-Status body into intermediate records.

    No propstat selection is done here, every propstat of every
    response is kept in document order.

    Args:
        body: Raw XML response bytes
        huge_tree: Allow parsing very large XML documents

    Raises:
        XMLDecodeError: If body is not valid XML, or not a multistatus
        FieldNotFoundError: If a response lacks its href or a propstat its status
        InvalidValueError: If a timestamp or a byte count can't be parsed
    """
    tree = _parse_xml(body, huge_tree)

    responses: list[ListResponse] = []
    for elem in _strip_to_multistatus(tree):
        if not isinstance(elem.tag, str):
            ## comments and processing instructions
            continue
        if elem.tag != dav.Response.tag:
            error.weirdness("unexpected element found in multistatus", elem)
            continue
        responses.append(_parse_response_element(elem))

    return ListMultiStatus(responses=responses)


def parse_server_error(body: bytes) -> tuple[str, str] | None:
    """
    Parse a sabre/dav style error body:

    <d:error xmlns:d="DAV:" xmlns:s="http://sabredav.org/ns">
      <s:exception>Sabre\\DAV\\Exception\\NotFound</s:exception>
      <s:message>File not found</s:message>
    </d:error>

    Returns:
        (exception, message), or None if the body is not on this format
    """
    if not body:
        return None
    try:
        tree = etree.fromstring(body, etree.XMLParser(resolve_entities=False))
    except etree.XMLSyntaxError:
        return None
    if tree.tag != dav.Error.tag:
        return None
    exception = tree.find(sabre.ExceptionClass.tag)
    message = tree.find(sabre.Message.tag)
    if exception is None or message is None:
        return None
    return (exception.text or "", message.text or "")


def parse_http_date(value: str | None, field: str = "last_modified") -> datetime | None:
    """
    Parse an IMF-fixdate like "Wed, 10 Apr 2019 14:00:00 GMT" into an
    aware UTC datetime.  None or an empty string gives None.

    strptime is not used for the names, as %a and %b depend on the locale.
    """
    if value is None or not value.strip():
        return None
    parts = value.strip().split()
    try:
        if len(parts) != 6 or parts[5] != "GMT" or not parts[0].endswith(","):
            raise ValueError(value)
        if parts[0][:-1] not in _WEEKDAYS:
            raise ValueError(value)
        month = _MONTHS.index(parts[2]) + 1
        hour, minute, second = (int(x) for x in parts[4].split(":"))
        ret = datetime(
            int(parts[3]), month, int(parts[1]), hour, minute, second, tzinfo=timezone.utc
        )
    except ValueError as err:
        raise error.InvalidValueError(field, value) from err
    return ret


def format_http_date(value: datetime) -> str:
    """The inverse of parse_http_date"""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return "%s, %02d %s %04d %02d:%02d:%02d GMT" % (
        _WEEKDAYS[value.weekday()],
        value.day,
        _MONTHS[value.month - 1],
        value.year,
        value.hour,
        value.minute,
        value.second,
    )


def parse_int(value: str | None, field: str) -> int | None:
    """Byte counts and lengths.  None or an empty string gives None."""
    if value is None or not value.strip():
        return None
    try:
        return int(value.strip())
    except ValueError as err:
        raise error.InvalidValueError(field, value) from err


# Helper functions


def _parse_xml(body: bytes, huge_tree: bool) -> _Element:
    if not body:
        raise error.XMLDecodeError(reason="empty multistatus body")
    parser = etree.XMLParser(huge_tree=huge_tree, resolve_entities=False)
    try:
        return etree.fromstring(body, parser)
    except etree.XMLSyntaxError as err:
        raise error.XMLDecodeError(reason=str(err)) from err


def _strip_to_multistatus(tree: _Element) -> _Element | list[_Element]:
    """
    Strip outer elements to get to the multistatus content.

    The general format is:
        <xml><multistatus>
            <response>...</response>
            <response>...</response>
        </multistatus></xml>

    But sometimes the xml element is missing, and some servers send a
    lone response.  Returns the element(s) containing responses.

    Raises:
        XMLDecodeError: if the root is anything else, like an html page
    """
    root = tree
    if tree.tag == "xml" and len(tree) > 0:
        root = tree[0]
    if root.tag == dav.MultiStatus.tag:
        return root
    if root.tag == dav.Response.tag:
        return [root]
    raise error.XMLDecodeError(reason=f"expected multistatus, got {root.tag}")


def _parse_response_element(response: _Element) -> ListResponse:
    """
    One response should contain one href and zero or more propstats.
    A status, a responsedescription or an error element may also be
    present, those are of no use for listings.
    """
    href: str | None = None
    propstats: list[ListPropStat] = []

    for elem in response:
        if not isinstance(elem.tag, str):
            continue
        if elem.tag == dav.Href.tag:
            href = (elem.text or "").strip()
        elif elem.tag == dav.PropStat.tag:
            propstats.append(_parse_propstat(elem))
        elif elem.tag in (dav.Status.tag, dav.ResponseDescription.tag, dav.Error.tag):
            continue
        else:
            error.weirdness("unexpected element found in response", elem)

    if not href:
        raise error.FieldNotFoundError("href")
    return ListResponse(href=href, propstats=propstats)


def _parse_propstat(propstat: _Element) -> ListPropStat:
    status = propstat.find(dav.Status.tag)
    if status is None or not status.text:
        raise error.FieldNotFoundError("status")

    prop = ListProp()
    ## The properties may come in more than one prop element
    for prop_elem in propstat.iterfind(dav.Prop.tag):
        _fill_prop(prop, prop_elem)
    return ListPropStat(status=status.text.strip(), prop=prop)


def _fill_prop(prop: ListProp, prop_elem: _Element) -> None:
    for child in prop_elem:
        tag = child.tag
        if tag == dav.GetLastModified.tag:
            prop.last_modified = parse_http_date(child.text, "last_modified")
        elif tag == dav.ResourceType.tag:
            prop.resource_type = _parse_resource_type(child)
        elif tag == dav.QuotaUsedBytes.tag:
            prop.quota_used_bytes = parse_int(child.text, "quota_used_bytes")
        elif tag == dav.QuotaAvailableBytes.tag:
            prop.quota_available_bytes = parse_int(child.text, "quota_available_bytes")
        elif tag == dav.GetContentLength.tag:
            prop.content_length = parse_int(child.text, "content_length")
        elif tag == dav.GetEtag.tag:
            prop.tag = child.text
        elif tag == dav.GetContentType.tag:
            prop.content_type = child.text
        elif tag == cdav.CalendarData.tag:
            prop.calendar_data = child.text
        elif tag == dav.DisplayName.tag:
            prop.display_name = child.text
        ## allprop gives a lot more than we care about, the rest is ignored


def _parse_resource_type(resource_type: _Element) -> ListResourceType:
    ret = ListResourceType()
    for child in resource_type:
        tag = child.tag
        if tag == dav.Collection.tag:
            ret.collection = True
        elif tag == dav.RedirectRef.tag:
            ret.redirect_ref = True
        elif tag == dav.RedirectLifetime.tag:
            ret.redirect_lifetime = True
        elif tag == carddav.AddressBook.tag:
            ret.addressbook = True
        elif tag == cdav.Calendar.tag:
            ret.calendar = True
        else:
            log.debug("ignoring resource type %s", tag)
    return ret
