import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from wxr_importer.extractors.values import as_list, attribute, scalar


@pytest.mark.parametrize(
    "node, expected",
    [
        (None, ""),
        ("  Hello  ", "Hello"),
        ({"#text": " Tech ", "@_domain": "category"}, "Tech"),
        ({"@_domain": "category"}, ""),
        (["first", "second"], "first"),
        ([{"#text": "nested"}], "nested"),
        ([], ""),
        (42, "42"),
    ],
)
def test_scalar_normalizes_every_shape(node, expected):
    assert scalar(node) == expected


def test_scalar_is_idempotent():
    once = scalar([{"#text": "  value "}])
    assert scalar(once) == once


def test_attribute_reads_prefixed_keys():
    node = {"#text": "Tech", "@_nicename": "tech"}
    assert attribute(node, "nicename") == "tech"
    assert attribute(node, "domain") == ""
    assert attribute("plain text", "domain") == ""


def test_as_list_wraps_single_nodes():
    assert as_list(None) == []
    assert as_list("a") == ["a"]
    assert as_list(["a", "b"]) == ["a", "b"]
