import os
import sys

# Ensure project root is on sys.path for imports when running tests directly
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from wxr_importer.extractors import decode, scalar
from wxr_importer.utils.errors import MalformedInputError

NAMESPACES = (
    'xmlns:excerpt="http://wordpress.org/export/1.2/excerpt/" '
    'xmlns:content="http://purl.org/rss/1.0/modules/content/" '
    'xmlns:dc="http://purl.org/dc/elements/1.1/" '
    'xmlns:wp="http://wordpress.org/export/1.2/"'
)


def _rss(channel_body: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<rss version="2.0" {NAMESPACES}><channel>{channel_body}</channel></rss>'
    )


def test_single_item_is_still_a_list():
    channel = decode(_rss("<title>Blog</title><item><title>Only post</title></item>"))
    assert isinstance(channel["item"], list)
    assert scalar(channel["item"][0]["title"]) == "Only post"


def test_missing_sections_default_to_empty_lists():
    channel = decode(_rss("<title>Blog</title>"))
    assert channel["item"] == []
    assert channel["wp:author"] == []
    assert channel["wp:category"] == []


def test_namespaced_fields_keep_their_prefix():
    xml = _rss(
        "<item>"
        "<title>Hello</title>"
        "<dc:creator><![CDATA[admin]]></dc:creator>"
        "<content:encoded><![CDATA[<p>Body &amp; more</p>]]></content:encoded>"
        "<excerpt:encoded><![CDATA[]]></excerpt:encoded>"
        "<wp:post_type><![CDATA[post]]></wp:post_type>"
        "</item>"
    )
    item = decode(xml)["item"][0]
    assert item["dc:creator"] == "admin"
    assert item["content:encoded"] == "<p>Body &amp; more</p>"
    assert item["excerpt:encoded"] == ""
    assert item["wp:post_type"] == "post"


def test_attributes_and_text_of_post_categories():
    xml = _rss(
        "<item><title>Hello</title>"
        '<category domain="category" nicename="tech"><![CDATA[Tech]]></category>'
        "</item>"
    )
    categories = decode(xml)["item"][0]["category"]
    assert categories == [{"@_domain": "category", "@_nicename": "tech", "#text": "Tech"}]


def test_repeated_postmeta_is_collected_in_order():
    xml = _rss(
        "<item><title>Hello</title>"
        "<wp:postmeta><wp:meta_key>_edit_last</wp:meta_key><wp:meta_value>1</wp:meta_value></wp:postmeta>"
        "<wp:postmeta><wp:meta_key>_thumbnail_id</wp:meta_key><wp:meta_value>42</wp:meta_value></wp:postmeta>"
        "</item>"
    )
    meta = decode(xml)["item"][0]["wp:postmeta"]
    assert [scalar(m["wp:meta_key"]) for m in meta] == ["_edit_last", "_thumbnail_id"]


def test_bare_channel_root_is_accepted():
    xml = f"<channel {NAMESPACES}><title>Blog</title><item><title>A</title></item></channel>"
    channel = decode(xml)
    assert len(channel["item"]) == 1


def test_leading_byte_order_mark_is_ignored():
    channel = decode("\ufeff" + _rss("<title>Blog</title>"))
    assert scalar(channel["title"]) == "Blog"


@pytest.mark.parametrize("text", ["", "   \n  "])
def test_empty_input_is_malformed(text):
    with pytest.raises(MalformedInputError, match="Empty or invalid XML"):
        decode(text)


def test_unparseable_input_is_malformed():
    with pytest.raises(MalformedInputError):
        decode("<rss><channel><item></channel>")


def test_document_without_channel_is_malformed():
    with pytest.raises(MalformedInputError, match="channel"):
        decode("<rss version='2.0'><title>No channel</title></rss>")
