"""
Sans-I/O WebDAV protocol layer.

This module builds request bodies and parses response bodies as pure
data transformations, independent of the transport.

- types: request/response dataclasses and the listing records
- xml_builders: PROPFIND and UNZIP request bodies
- xml_parsers: multistatus and error body parsing
- listing: propstat selection and conversion into files and folders

Example usage:

    from reqdav.protocol import parse_multistatus, decode_entities

    entities = decode_entities(parse_multistatus(response.body))
"""

from .types import (
    # Enums
    DAVMethod,
    Depth,
    # Request/Response
    DAVRequest,
    DAVResponse,
    # Listing records
    ListEntity,
    ListFile,
    ListFolder,
    ListMultiStatus,
    ListProp,
    ListPropStat,
    ListResourceType,
    ListResponse,
)
from .xml_builders import build_propfind_body, build_unzip_body
from .xml_parsers import (
    format_http_date,
    parse_http_date,
    parse_multistatus,
    parse_server_error,
)
from .listing import (
    EPOCH,
    decode_entities,
    entity_from_dict,
    entity_to_dict,
    select_propstat,
    to_entity,
)

__all__ = [
    "DAVMethod",
    "Depth",
    "DAVRequest",
    "DAVResponse",
    "ListEntity",
    "ListFile",
    "ListFolder",
    "ListMultiStatus",
    "ListProp",
    "ListPropStat",
    "ListResourceType",
    "ListResponse",
    "build_propfind_body",
    "build_unzip_body",
    "format_http_date",
    "parse_http_date",
    "parse_multistatus",
    "parse_server_error",
    "EPOCH",
    "decode_entities",
    "entity_from_dict",
    "entity_to_dict",
    "select_propstat",
    "to_entity",
]
