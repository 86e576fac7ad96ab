import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from wxr_importer.migrators.content_store import LocalContentStore, parse, serialize
from wxr_importer.models import AuthorRecord, CategoryRecord, PostRecord


def test_post_is_written_with_front_matter(tmp_path):
    store = LocalContentStore(str(tmp_path))
    post = PostRecord(
        title="Olá: mundo",
        slug="ola-mundo",
        author="jdoe",
        published_date="2023-05-04",
        meta_description="",
        content="## Intro\n\nBody",
    )
    assert store.write("post", post.slug, post)

    text = (tmp_path / "posts" / "ola-mundo.mdoc").read_text(encoding="utf-8")
    assert text.startswith("---\n")
    assert "publishedDate: '2023-05-04'" in text
    assert "metaDescription" not in text
    assert "category" not in text
    assert text.endswith("---\n\n## Intro\n\nBody")


def test_written_post_reads_back(tmp_path):
    store = LocalContentStore(str(tmp_path))
    post = PostRecord(title="Hello", slug="hello", thumbnail="/images/posts/a.jpg", content="Body\n---\nmore")
    store.write("post", "hello", post)

    [data] = store.list("post")
    assert data["title"] == "Hello"
    assert data["thumbnail"] == "/images/posts/a.jpg"
    assert data["content"] == "Body\n---\nmore"


def test_authors_and_categories_are_yaml(tmp_path):
    store = LocalContentStore(str(tmp_path))
    store.write("author", "jdoe", AuthorRecord(name="Jane Doe", slug="jdoe", bio="Jane Doe"))
    store.write("category", "tech", CategoryRecord(name="Tech", slug="tech"))

    author_text = (tmp_path / "authors" / "jdoe.yaml").read_text(encoding="utf-8")
    assert "role: Author" in author_text
    assert "avatar" not in author_text
    assert store.slugs("author") == {"jdoe"}
    assert store.exists("category", "tech")
    assert not store.exists("category", "news")


def test_missing_collection_is_empty(tmp_path):
    store = LocalContentStore(str(tmp_path / "nothing-here"))
    assert store.list("post") == []
    assert store.slugs("category") == set()


def test_unknown_kind_is_rejected(tmp_path):
    store = LocalContentStore(str(tmp_path))
    with pytest.raises(ValueError):
        store.write("page", "about", {"title": "About"})


def test_post_without_front_matter_parses_as_body():
    assert parse("post", "Just text") == {"content": "Just text"}


def test_plain_dict_records_are_serialized():
    assert serialize("category", {"name": "Tech", "slug": "tech", "parent": None}) == "name: Tech\nslug: tech\n"


@pytest.mark.parametrize("slug", ["../escaped", "a/b", "..\\up", ".."])
def test_unsafe_slugs_are_refused(tmp_path, slug):
    store = LocalContentStore(str(tmp_path / "content"))
    assert not store.write("post", slug, PostRecord(title="Evil", slug="evil"))
    assert not (tmp_path / "escaped.mdoc").exists()
    assert not (tmp_path / "content" / "posts").exists()


def test_write_through_a_symlink_outside_the_root_is_refused(tmp_path):
    outside = tmp_path / "outside"
    outside.mkdir()
    root = tmp_path / "content"
    root.mkdir()
    try:
        os.symlink(str(outside), str(root / "posts"))
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not available")
    store = LocalContentStore(str(root))
    assert not store.write("post", "hello", PostRecord(title="Hello", slug="hello"))
    assert list(outside.iterdir()) == []


def test_non_utf8_file_is_skipped(tmp_path):
    store = LocalContentStore(str(tmp_path))
    store.write("category", "tech", CategoryRecord(name="Tech", slug="tech"))
    (tmp_path / "categories" / "legacy.yaml").write_bytes(b"name: Caf\xe9\nslug: cafe\n")
    assert store.slugs("category") == {"tech"}
