from __future__ import annotations

import re
import unicodedata
from typing import AbstractSet


_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Build a predictable slug: lowercase, no accents, ``-`` as separator.

    >>> slugify("Gestão & Organização")
    'gestao-organizacao'
    """
    text = (value or "").lower()
    # remove accents
    text = unicodedata.normalize("NFD", text)
    text = "".join(c for c in text if not unicodedata.combining(c))
    return _NON_ALNUM.sub("-", text).strip("-")


def unique_slug(candidate: str, taken: AbstractSet[str]) -> str:
    """
    Return ``candidate`` if it is free, otherwise the first of
    ``candidate-1``, ``candidate-2``, ... that is not in ``taken``.

    The caller owns ``taken`` and is expected to add the returned slug once
    the record has been written; uniqueness is scoped per entity kind.
    """
    if candidate not in taken:
        return candidate
    counter = 1
    while f"{candidate}-{counter}" in taken:
        counter += 1
    return f"{candidate}-{counter}"


_SLUG_SHAPE = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*")


def clean_slug(value: str) -> str:
    """Keep a declared slug that is already slug-shaped, otherwise rebuild it.

    ``wp:post_name`` and ``nicename`` values come straight from the export
    and end up in file names, so anything carrying ``/``, ``\\``, ``..`` or
    other stray characters goes through :func:`slugify`.
    """
    value = (value or "").strip()
    if _SLUG_SHAPE.fullmatch(value):
        return value
    return slugify(value)
