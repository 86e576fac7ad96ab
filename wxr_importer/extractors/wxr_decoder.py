"""
Decoder for WordPress eXtended RSS (WXR) export files.

:func:`decode` turns the raw export text into nested dictionaries keyed by
prefixed element names (``wp:post_type``, ``content:encoded``...), the
shape WordPress tooling conventionally uses.  Repeatable elements are always
lists, whatever the number of occurrences in the file, so downstream code
can iterate them without checking.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any, Dict, Iterable, Tuple

from wxr_importer.extractors.values import ATTR_PREFIX, TEXT_KEY
from wxr_importer.utils.errors import MalformedInputError

# Elements that may appear more than once under the same parent.
REPEATABLE = frozenset({"item", "wp:author", "wp:category", "wp:tag", "category", "wp:postmeta"})

# Keys always present on the decoded channel.
CHANNEL_SECTIONS = ("wp:category", "wp:author", "item")

_BUILTIN_NAMESPACES = {"http://www.w3.org/XML/1998/namespace": "xml"}


def _qualify(tag: str, prefixes: Dict[str, str]) -> str:
    if not tag.startswith("{"):
        return tag
    uri, local = tag[1:].split("}", 1)
    prefix = prefixes.get(uri) or _BUILTIN_NAMESPACES.get(uri)
    return f"{prefix}:{local}" if prefix else local


def _to_node(el: ET.Element, prefixes: Dict[str, str]) -> Any:
    children = list(el)
    text = (el.text or "").strip()
    if not children and not el.attrib:
        return text

    node: Dict[str, Any] = {
        ATTR_PREFIX + _qualify(k, prefixes): v.strip() for k, v in el.attrib.items()
    }
    if text:
        node[TEXT_KEY] = text
    for child in children:
        key = _qualify(child.tag, prefixes)
        value = _to_node(child, prefixes)
        if key in REPEATABLE:
            node.setdefault(key, []).append(value)
        elif key in node:
            existing = node[key]
            if isinstance(existing, list):
                existing.append(value)
            else:
                node[key] = [existing, value]
        else:
            node[key] = value
    return node


def _parse(xml_text: str) -> Tuple[ET.Element, Dict[str, str]]:
    parser = ET.XMLPullParser(events=("start-ns", "end"))
    try:
        parser.feed(xml_text)
        parser.close()
    except ET.ParseError as e:
        raise MalformedInputError(f"Could not parse XML: {e}") from e

    prefixes: Dict[str, str] = {}
    root = None
    events: Iterable[Tuple[str, Any]] = parser.read_events()
    for event, data in events:
        if event == "start-ns":
            prefix, uri = data
            if prefix:
                prefixes.setdefault(uri, prefix)
        else:
            root = data
    if root is None:
        raise MalformedInputError("Could not parse XML: no root element")
    return root, prefixes


def decode(xml_text: str) -> Dict[str, Any]:
    """Decode WXR text and return its channel node.

    Args:
        xml_text: The export file contents.

    Returns:
        The channel as a dictionary.  ``item``, ``wp:author`` and
        ``wp:category`` are always present as lists.

    Raises:
        MalformedInputError: If the text is empty, is not well-formed XML, or
            has no channel under ``rss`` nor as the document root.
    """
    if not xml_text or not xml_text.strip():
        raise MalformedInputError("Empty or invalid XML")

    root, prefixes = _parse(xml_text.lstrip("\ufeff"))
    root_name = _qualify(root.tag, prefixes)
    document = _to_node(root, prefixes)

    channel: Any = None
    if root_name == "rss" and isinstance(document, dict):
        channel = document.get("channel")
    elif root_name == "channel":
        channel = document
    if isinstance(channel, list):
        channel = channel[0] if channel else None
    if not isinstance(channel, dict):
        raise MalformedInputError("Invalid XML format: could not find the channel element")

    for key in CHANNEL_SECTIONS:
        channel.setdefault(key, [])
    return channel
