"""
Normalization of decoded WXR field values.

The decoder yields one of a small, closed set of shapes for any field:

* ``str`` – a leaf element without attributes;
* ``dict`` – an element with attributes or children, its text under
  ``"#text"`` (a *text node*);
* ``list`` – a repeated element, each entry one of the shapes above;
* ``None`` – the field is absent.

:func:`scalar` is the single total function used to read a field, so call
sites never inspect shapes themselves.
"""

from __future__ import annotations

from typing import Any, Dict, List, Union

Node = Union[None, str, Dict[str, Any], List[Any]]

TEXT_KEY = "#text"
ATTR_PREFIX = "@_"


def scalar(node: Any) -> str:
    """Return the best single string for ``node``.

    When WordPress repeats a field (for instance several ``dc:creator``
    elements) only the first occurrence is honored.  Never raises.
    """
    if node is None:
        return ""
    if isinstance(node, str):
        return node.strip()
    if isinstance(node, list):
        return scalar(node[0]) if node else ""
    if isinstance(node, dict):
        text = node.get(TEXT_KEY)
        return scalar(text) if text is not None and not isinstance(text, dict) else ""
    return str(node).strip()


def attribute(node: Any, name: str) -> str:
    """Read the attribute ``name`` of a text node (``""`` when absent)."""
    if isinstance(node, list):
        return attribute(node[0], name) if node else ""
    if isinstance(node, dict):
        return scalar(node.get(ATTR_PREFIX + name))
    return ""


def as_list(node: Any) -> List[Any]:
    """List view of any node: ``None`` → ``[]``, non-lists wrapped."""
    if node is None:
        return []
    if isinstance(node, list):
        return node
    return [node]
