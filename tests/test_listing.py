"""
Tests turning PROPFIND multistatus bodies into files and folders.

The XML samples are shaped after what Nextcloud, ownCloud and other
sabre/dav based servers send back on an allprop PROPFIND.
"""

from datetime import datetime, timezone

import pytest

from reqdav.lib import error
from reqdav.protocol import (
    EPOCH,
    ListFile,
    ListFolder,
    decode_entities,
    entity_from_dict,
    entity_to_dict,
    parse_multistatus,
    select_propstat,
    to_entity,
)


def multistatus(*responses):
    return (
        b'<?xml version="1.0"?>\n'
        b'<d:multistatus xmlns:d="DAV:" xmlns:s="http://sabredav.org/ns" '
        b'xmlns:oc="http://owncloud.org/ns" xmlns:card="urn:ietf:params:xml:ns:carddav">'
        + b"".join(responses)
        + b"</d:multistatus>"
    )


def decode(body):
    return decode_entities(parse_multistatus(body))


folder_response = b"""
<d:response>
  <d:href>/remote.php/dav/files/admin/</d:href>
  <d:propstat>
    <d:prop>
      <d:getlastmodified>Wed, 10 Apr 2019 14:00:00 GMT</d:getlastmodified>
      <d:resourcetype><d:collection/></d:resourcetype>
      <d:quota-used-bytes>163</d:quota-used-bytes>
      <d:quota-available-bytes>-3</d:quota-available-bytes>
      <d:getetag>"5cadf7a0a4c6e"</d:getetag>
    </d:prop>
    <d:status>HTTP/1.1 200 OK</d:status>
  </d:propstat>
</d:response>"""

file_response = b"""
<d:response>
  <d:href>/remote.php/dav/files/admin/Nextcloud%20Manual.pdf</d:href>
  <d:propstat>
    <d:prop>
      <d:getlastmodified>Wed, 10 Apr 2019 14:00:00 GMT</d:getlastmodified>
      <d:getcontentlength>4143</d:getcontentlength>
      <d:resourcetype/>
      <d:getetag>"a0b85e9c9e5f86a3bd7f8d6e6d36fa1a"</d:getetag>
      <d:getcontenttype>application/pdf</d:getcontenttype>
    </d:prop>
    <d:status>HTTP/1.1 200 OK</d:status>
  </d:propstat>
</d:response>"""


def file_with_prop(prop):
    return (
        b"<d:response><d:href>/dav/a.txt</d:href><d:propstat><d:prop>"
        + prop
        + b"</d:prop><d:status>HTTP/1.1 200 OK</d:status></d:propstat></d:response>"
    )


class TestDecodeEntities:
    def test_single_folder(self):
        entities = decode(multistatus(folder_response))
        assert entities == [
            ListFolder(
                href="/remote.php/dav/files/admin/",
                last_modified=datetime(2019, 4, 10, 14, 0, 0, tzinfo=timezone.utc),
                quota_used_bytes=163,
                quota_available_bytes=-3,
                tag='"5cadf7a0a4c6e"',
            )
        ]
        assert entities[0].last_modified.timestamp() == 1554904800

    def test_single_file(self):
        (entity,) = decode(multistatus(file_response))
        assert isinstance(entity, ListFile)
        ## percent encoding is kept as the server sent it
        assert entity.href == "/remote.php/dav/files/admin/Nextcloud%20Manual.pdf"
        assert entity.content_length == 4143
        assert entity.content_type == "application/pdf"
        assert entity.tag == '"a0b85e9c9e5f86a3bd7f8d6e6d36fa1a"'
        assert entity.last_modified.timestamp() == 1554904800

    def test_order_preserved(self):
        entities = decode(
            multistatus(folder_response, file_response, folder_response)
        )
        assert [type(x) for x in entities] == [ListFolder, ListFile, ListFolder]

    def test_empty_multistatus(self):
        assert decode(multistatus()) == []

    def test_ok_and_not_found_propstats(self):
        body = multistatus(
            b"""
<d:response>
  <d:href>/dav/docs/</d:href>
  <d:propstat>
    <d:prop>
      <d:resourcetype><d:collection/></d:resourcetype>
      <d:getlastmodified>Wed, 10 Apr 2019 14:00:00 GMT</d:getlastmodified>
    </d:prop>
    <d:status>HTTP/1.1 200 OK</d:status>
  </d:propstat>
  <d:propstat>
    <d:prop>
      <d:quota-used-bytes/>
      <d:quota-available-bytes/>
    </d:prop>
    <d:status>HTTP/1.1 404 Not Found</d:status>
  </d:propstat>
</d:response>"""
        )
        (entity,) = decode(body)
        assert isinstance(entity, ListFolder)
        assert entity.quota_used_bytes is None
        assert entity.quota_available_bytes is None

    def test_first_success_propstat_is_used(self):
        """A 404 propstat in front of the 200 one is skipped"""
        body = multistatus(
            b"""
<d:response>
  <d:href>/dav/a.txt</d:href>
  <d:propstat>
    <d:prop><d:getcontentlength/></d:prop>
    <d:status>HTTP/1.1 404 Not Found</d:status>
  </d:propstat>
  <d:propstat>
    <d:prop>
      <d:getlastmodified>Wed, 10 Apr 2019 14:00:00 GMT</d:getlastmodified>
      <d:getcontentlength>3</d:getcontentlength>
    </d:prop>
    <d:status>HTTP/1.1 200 OK</d:status>
  </d:propstat>
</d:response>"""
        )
        (entity,) = decode(body)
        assert entity.content_length == 3

    def test_no_success_propstat(self):
        body = multistatus(
            b"""
<d:response>
  <d:href>/dav/locked.txt</d:href>
  <d:propstat>
    <d:prop><d:getlastmodified/></d:prop>
    <d:status>HTTP/1.1 403 Forbidden</d:status>
  </d:propstat>
</d:response>"""
        )
        with pytest.raises(error.FieldNotFoundError) as exc_info:
            decode(body)
        assert exc_info.value.url == "/dav/locked.txt"

    def test_file_without_last_modified(self):
        body = multistatus(file_with_prop(b"<d:getcontentlength>1</d:getcontentlength>"))
        with pytest.raises(error.FieldNotFoundError) as exc_info:
            decode(body)
        assert exc_info.value.field == "last_modified"

    def test_file_with_empty_last_modified(self):
        body = multistatus(file_with_prop(b"<d:getlastmodified/>"))
        with pytest.raises(error.FieldNotFoundError):
            decode(body)

    def test_folder_without_last_modified(self):
        body = multistatus(
            b"""
<d:response>
  <d:href>/remote.php/dav/addressbooks/users/admin/contacts/</d:href>
  <d:propstat>
    <d:prop>
      <d:resourcetype><d:collection/><card:addressbook/></d:resourcetype>
    </d:prop>
    <d:status>HTTP/1.1 200 OK</d:status>
  </d:propstat>
</d:response>"""
        )
        (entity,) = decode(body)
        assert isinstance(entity, ListFolder)
        assert entity.last_modified == EPOCH
        assert entity.is_addressbook

    def test_file_defaults(self):
        body = multistatus(
            file_with_prop(
                b"<d:getlastmodified>Wed, 10 Apr 2019 14:00:00 GMT</d:getlastmodified>"
            )
        )
        (entity,) = decode(body)
        assert entity == ListFile(
            href="/dav/a.txt",
            last_modified=datetime(2019, 4, 10, 14, 0, 0, tzinfo=timezone.utc),
            content_length=0,
            content_type="",
            tag=None,
        )

    def test_redirect_ref(self):
        body = multistatus(
            file_with_prop(b"<d:resourcetype><d:redirectref/></d:resourcetype>")
        )
        with pytest.raises(error.FieldNotSupportedError):
            decode(body)

    def test_redirect_lifetime(self):
        body = multistatus(
            file_with_prop(
                b"<d:resourcetype><d:redirect-lifetime/></d:resourcetype>"
            )
        )
        with pytest.raises(error.FieldNotSupportedError):
            decode(body)

    def test_invalid_last_modified(self):
        body = multistatus(
            file_with_prop(b"<d:getlastmodified>last tuesday</d:getlastmodified>")
        )
        with pytest.raises(error.InvalidValueError):
            decode(body)

    def test_invalid_content_length(self):
        body = multistatus(
            file_with_prop(
                b"<d:getlastmodified>Wed, 10 Apr 2019 14:00:00 GMT</d:getlastmodified>"
                b"<d:getcontentlength>lots</d:getcontentlength>"
            )
        )
        with pytest.raises(error.InvalidValueError) as exc_info:
            decode(body)
        assert exc_info.value.field == "content_length"

    def test_empty_quota_is_none(self):
        body = multistatus(
            b"""
<d:response>
  <d:href>/dav/</d:href>
  <d:propstat>
    <d:prop>
      <d:resourcetype><d:collection/></d:resourcetype>
      <d:quota-used-bytes></d:quota-used-bytes>
      <d:quota-available-bytes> </d:quota-available-bytes>
    </d:prop>
    <d:status>HTTP/1.1 200 OK</d:status>
  </d:propstat>
</d:response>"""
        )
        (entity,) = decode(body)
        assert entity.quota_used_bytes is None
        assert entity.quota_available_bytes is None

    def test_unknown_properties_ignored(self):
        body = multistatus(
            file_with_prop(
                b"<d:getlastmodified>Wed, 10 Apr 2019 14:00:00 GMT</d:getlastmodified>"
                b"<oc:fileid>12</oc:fileid><oc:permissions>RGDNVW</oc:permissions>"
            )
        )
        (entity,) = decode(body)
        assert entity.href == "/dav/a.txt"


class TestSelectPropstat:
    def test_select_propstat(self):
        response = parse_multistatus(multistatus(file_response)).responses[0]
        assert select_propstat(response).status == "HTTP/1.1 200 OK"
        assert to_entity(response).content_length == 4143


class TestEntityDict:
    def test_file_roundtrip(self):
        (entity,) = decode(multistatus(file_response))
        data = entity_to_dict(entity)
        assert data["type"] == "file"
        assert data["last_modified"] == "Wed, 10 Apr 2019 14:00:00 GMT"
        assert entity_from_dict(data) == entity

    def test_folder_roundtrip(self):
        (entity,) = decode(multistatus(folder_response))
        data = entity_to_dict(entity)
        assert data["type"] == "folder"
        assert data["quota_used_bytes"] == 163
        assert entity_from_dict(data) == entity

    def test_unknown_type(self):
        with pytest.raises(error.FieldNotSupportedError):
            entity_from_dict(
                {"type": "symlink", "href": "/x", "last_modified": "Wed, 10 Apr 2019 14:00:00 GMT"}
            )
