from __future__ import annotations

import re
from typing import Optional

from bs4 import BeautifulSoup

META_DESCRIPTION_LIMIT = 160


def strip_markup(html: str) -> str:
    """Plain text of an HTML fragment: no tags, entities decoded, spaces collapsed."""
    if not html:
        return ""
    text = BeautifulSoup(html, "html.parser").get_text(" ")
    text = text.replace("\xa0", " ")
    return re.sub(r"\s+", " ", text).strip()


def meta_description(excerpt: str, content: str, limit: int = META_DESCRIPTION_LIMIT) -> Optional[str]:
    """
    Best-effort SEO description for a post.

    Uses the excerpt when anything is left of it once markup is removed,
    otherwise the post body.  An excerpt that is empty and one that only held
    markup are treated the same way.

    Returns:
        At most ``limit`` characters, or ``None`` when both sources are empty.
        Trailing whitespace is trimmed after the cut, so the result can be
        shorter than ``limit`` even when the source is longer.
    """
    for source in (excerpt, content):
        text = strip_markup(source)
        if text:
            return text[:limit].rstrip()
    return None
