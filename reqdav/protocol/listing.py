"""
Turning PROPFIND responses into files and folders.

A response may carry several propstats, typically one "200 OK" with
the properties the server knows and one "404 Not Found" listing the
ones it doesn't.  The first propstat with a 2xx status is the one we
build the entity from, the others are ignored.
"""

from datetime import datetime, timezone
from typing import Any

from typing_extensions import assert_never

from reqdav.lib import error

from .types import ListEntity, ListFile, ListFolder, ListMultiStatus, ListPropStat, ListResponse
from .xml_parsers import format_http_date, parse_http_date

## Some servers leave out getlastmodified on collections (address book
## roots on sabre/dav based servers, for one).  Folders get this instead.
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def select_propstat(response: ListResponse) -> ListPropStat:
    """
    Returns the first propstat with a 2xx status.

    Raises:
        FieldNotFoundError: if there is none
    """
    for propstat in response.propstats:
        if propstat.is_success:
            return propstat
    raise error.FieldNotFoundError("propstat with valid status", url=response.href)


def to_entity(response: ListResponse) -> ListEntity:
    """
    Convert one response into a ListFile or a ListFolder.

    Raises:
        FieldNotFoundError: no 2xx propstat, or a file without last_modified
        FieldNotSupportedError: the resource is a redirect reference
    """
    prop = select_propstat(response).prop
    resource_type = prop.resource_type

    if resource_type.redirect_ref or resource_type.redirect_lifetime:
        raise error.FieldNotSupportedError("redirect_ref", url=response.href)

    if resource_type.collection:
        return ListFolder(
            href=response.href,
            last_modified=prop.last_modified or EPOCH,
            quota_used_bytes=prop.quota_used_bytes,
            quota_available_bytes=prop.quota_available_bytes,
            tag=prop.tag,
            is_addressbook=resource_type.addressbook,
        )

    if prop.last_modified is None:
        raise error.FieldNotFoundError("last_modified", url=response.href)
    return ListFile(
        href=response.href,
        last_modified=prop.last_modified,
        content_length=prop.content_length if prop.content_length is not None else 0,
        content_type=prop.content_type or "",
        tag=prop.tag,
    )


def decode_entities(multistatus: ListMultiStatus) -> list[ListEntity]:
    """All entities, in the order the server listed them"""
    return [to_entity(response) for response in multistatus.responses]


def entity_to_dict(entity: ListEntity) -> dict[str, Any]:
    """
    JSON friendly representation of an entity, tagged with its kind.
    Timestamps are written as HTTP dates, the same way the server sends
    them.
    """
    if isinstance(entity, ListFile):
        return {
            "type": "file",
            "href": entity.href,
            "last_modified": format_http_date(entity.last_modified),
            "content_length": entity.content_length,
            "content_type": entity.content_type,
            "tag": entity.tag,
        }
    elif isinstance(entity, ListFolder):
        return {
            "type": "folder",
            "href": entity.href,
            "last_modified": format_http_date(entity.last_modified),
            "quota_used_bytes": entity.quota_used_bytes,
            "quota_available_bytes": entity.quota_available_bytes,
            "tag": entity.tag,
            "is_addressbook": entity.is_addressbook,
        }
    else:
        assert_never(entity)


def entity_from_dict(data: dict[str, Any]) -> ListEntity:
    """The inverse of entity_to_dict"""
    kind = data.get("type")
    last_modified = parse_http_date(data.get("last_modified"))
    if last_modified is None:
        raise error.FieldNotFoundError("last_modified")
    if kind == "file":
        return ListFile(
            href=data["href"],
            last_modified=last_modified,
            content_length=data.get("content_length", 0),
            content_type=data.get("content_type", ""),
            tag=data.get("tag"),
        )
    if kind == "folder":
        return ListFolder(
            href=data["href"],
            last_modified=last_modified,
            quota_used_bytes=data.get("quota_used_bytes"),
            quota_available_bytes=data.get("quota_available_bytes"),
            tag=data.get("tag"),
            is_addressbook=data.get("is_addressbook", False),
        )
    raise error.FieldNotSupportedError(f"type {kind!r}")
