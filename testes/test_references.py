import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from wxr_importer.utils.references import (
    build_author_map,
    build_category_index,
    parse_author_declaration,
    parse_category_declaration,
    post_category_reference,
    resolve_author_for_post,
    resolve_category_for_post,
)

AUTHOR = {
    "wp:author_login": "jdoe",
    "wp:author_display_name": "Jane Doe",
    "wp:author_first_name": "Jane",
    "wp:author_last_name": "Doe",
    "wp:author_email": "jane@example.com",
}


def test_category_declaration_uses_nicename():
    record = parse_category_declaration({"wp:cat_name": "Dicas & Hacks", "wp:category_nicename": "dicas"})
    assert record.name == "Dicas & Hacks"
    assert record.slug == "dicas"


def test_category_declaration_without_nicename_is_slugified():
    record = parse_category_declaration({"wp:cat_name": "Saúde financeira"})
    assert record.slug == "saude-financeira"


def test_category_declaration_without_name_is_dropped():
    assert parse_category_declaration({"wp:category_nicename": "orphan"}) is None
    assert parse_category_declaration("not a dict") is None


def test_author_declaration():
    login, record = parse_author_declaration(AUTHOR)
    assert login == "jdoe"
    assert record.name == "Jane Doe"
    assert record.slug == "jdoe"
    assert record.role == "Author"
    assert record.bio == "Jane Doe"
    assert record.email is None


def test_author_bio_falls_back_to_display_name():
    _, record = parse_author_declaration({"wp:author_login": "ed", "wp:author_display_name": "Editor"})
    assert record.bio == "Editor"


def test_author_without_login_is_dropped():
    assert parse_author_declaration({"wp:author_display_name": "Ghost"}) is None


def test_author_map_and_resolution():
    author_map = build_author_map([AUTHOR, {"wp:author_display_name": "Ghost"}])
    assert author_map == {"jdoe": "jdoe"}
    assert resolve_author_for_post("jdoe", author_map) == "jdoe"
    assert resolve_author_for_post("Guest Writer", author_map) == "guest-writer"
    assert resolve_author_for_post("", author_map) is None


def test_category_index_merges_existing_slugs():
    index = build_category_index([{"wp:cat_name": "Tech", "wp:category_nicename": "tech"}], {"news"})
    assert index == {"tech", "news"}


def test_post_category_ignores_tags_and_missing_domain():
    item = {
        "category": [
            {"@_domain": "post_tag", "@_nicename": "python", "#text": "Python"},
            "No domain",
            {"@_domain": "category", "@_nicename": "tech", "#text": "Tech"},
        ]
    }
    reference = post_category_reference(item)
    assert (reference.name, reference.slug) == ("Tech", "tech")
    assert post_category_reference({"category": ["No domain"]}) is None


def test_known_category_is_not_created():
    created = []
    item = {"category": [{"@_domain": "category", "@_nicename": "tech", "#text": "Tech"}]}
    assert resolve_category_for_post(item, {"tech"}, created.append) == "tech"
    assert created == []


def test_unknown_category_is_created_once():
    created = []
    index = set()
    item = {"category": [{"@_domain": "category", "#text": "Viagens Baratas"}]}
    assert resolve_category_for_post(item, index, created.append) == "viagens-baratas"
    assert resolve_category_for_post(item, index, created.append) == "viagens-baratas"
    assert [c.slug for c in created] == ["viagens-baratas"]
    assert index == {"viagens-baratas"}
