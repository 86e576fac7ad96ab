"""
Reference mapping between WXR posts and their authors and categories.

WordPress exports link posts to authors by login (``dc:creator``) and to
categories by display name plus an optional ``nicename`` attribute.  The
helpers below turn the declared author and category sections into lookup
structures and resolve each post's references against them.

Category auto-creation policy: WordPress frequently omits categories from
the top-level ``wp:category`` catalog even though posts use them.  When a
post references a category whose slug is not known to the destination
store, :func:`resolve_category_for_post` asks the caller to create it so the
post keeps its category.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Optional, Set, Tuple

from wxr_importer.extractors.values import as_list, attribute, scalar
from wxr_importer.models.records import AuthorRecord, CategoryRecord
from wxr_importer.utils.slugs import clean_slug, slugify

DEFAULT_AUTHOR_ROLE = "Author"


def parse_category_declaration(node: Any) -> Optional[CategoryRecord]:
    """Read a channel-level ``wp:category``; ``None`` when name or slug is empty."""
    if not isinstance(node, dict):
        return None
    name = scalar(node.get("wp:cat_name"))
    slug = clean_slug(scalar(node.get("wp:category_nicename"))) or slugify(name)
    if not name or not slug:
        return None
    return CategoryRecord(name=name, slug=slug)


def parse_author_declaration(node: Any) -> Optional[Tuple[str, AuthorRecord]]:
    """Read a ``wp:author`` block into ``(login, AuthorRecord)``.

    The bio is the first and last name when WordPress has them, otherwise
    the display name.
    """
    if not isinstance(node, dict):
        return None
    login = scalar(node.get("wp:author_login"))
    display_name = scalar(node.get("wp:author_display_name")) or login
    slug = slugify(login)
    if not login or not display_name or not slug:
        return None
    first_name = scalar(node.get("wp:author_first_name"))
    last_name = scalar(node.get("wp:author_last_name"))
    record = AuthorRecord(
        name=display_name,
        slug=slug,
        role=DEFAULT_AUTHOR_ROLE,
        bio=f"{first_name} {last_name}".strip() or display_name,
    )
    return login, record


def build_author_map(declared: Iterable[Any]) -> Dict[str, str]:
    """Map each declared author login to its slug."""
    author_map: Dict[str, str] = {}
    for node in declared:
        parsed = parse_author_declaration(node)
        if parsed:
            login, record = parsed
            author_map[login] = record.slug
    return author_map


def build_category_index(declared: Iterable[Any], existing: Iterable[str] = ()) -> Set[str]:
    """Slugs known to the destination: ``existing`` plus the declared ones."""
    index = {slug for slug in existing if slug}
    for node in declared:
        record = parse_category_declaration(node)
        if record:
            index.add(record.slug)
    return index


def resolve_author_for_post(creator: str, author_map: Dict[str, str]) -> Optional[str]:
    """Slug for a post's ``dc:creator``.

    Logins missing from the author catalog fall back to a slug built from the
    login itself instead of failing the post.
    """
    if not creator:
        return None
    return author_map.get(creator) or slugify(creator) or None


def post_category_reference(item: Dict[str, Any]) -> Optional[CategoryRecord]:
    """First ``<category domain="category">`` of a post, as a record.

    Free-form tags (``domain="post_tag"``) and entries without a domain are
    ignored.
    """
    for entry in as_list(item.get("category")):
        if attribute(entry, "domain") != "category":
            continue
        name = scalar(entry)
        slug = clean_slug(attribute(entry, "nicename")) or slugify(name)
        if not slug:
            continue
        return CategoryRecord(name=name or slug, slug=slug)
    return None


def resolve_category_for_post(
    item: Dict[str, Any],
    index: Set[str],
    create: Callable[[CategoryRecord], bool],
) -> Optional[str]:
    """
    Resolve the category slug of ``item``.

    :param item: Decoded post item.
    :param index: Category slugs known to the destination store.  Updated in
        place when a category is created.
    :param create: Called with the record of an unknown category; returns
        whether it was written.
    :return: The category slug, or ``None`` when the post has no category.
    """
    reference = post_category_reference(item)
    if reference is None:
        return None
    if reference.slug not in index:
        create(reference)
        index.add(reference.slug)
    return reference.slug
