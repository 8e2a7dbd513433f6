#!/usr/bin/env python
from typing import Dict
from typing import Optional

nsmap: Dict[str, str] = {
    "D": "DAV:",
}

## The CardDAV, CalDAV and sabre namespaces only show up in responses (the
## address-book resource type, calendar-data, error bodies), so they are not
## declared on every outgoing request.
nsmap2: Dict[str, str] = nsmap.copy()
nsmap2["C"] = "urn:ietf:params:xml:ns:caldav"
nsmap2["CR"] = "urn:ietf:params:xml:ns:carddav"
## error bodies from sabre/dav based servers (nextcloud, owncloud, baikal)
nsmap2["S"] = "http://sabredav.org/ns"


def ns(prefix: str, tag: Optional[str] = None) -> str:
    name = "{%s}" % nsmap2[prefix]
    if tag is not None:
        name = "%s%s" % (name, tag)
    return name
