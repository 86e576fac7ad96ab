from __future__ import annotations

from typing import Dict, List

from bs4 import BeautifulSoup, Tag


def _rewrite_srcset(value: str, relocations: Dict[str, str]) -> str:
    candidates: List[str] = []
    for candidate in value.split(","):
        parts = candidate.strip().split(None, 1)
        if not parts:
            continue
        url = relocations.get(parts[0], parts[0])
        candidates.append(" ".join([url] + parts[1:]))
    return ", ".join(candidates)


def rewrite_image_urls(html: str, relocations: Dict[str, str]) -> str:
    """
    Point every relocated image reference of ``html`` at its local copy.

    ``img`` ``src`` attributes and ``srcset`` candidates are rewritten on
    attribute boundaries first.  Occurrences elsewhere (links to the full
    size file, shortcode text) are then replaced as plain substrings; that
    fallback can over-match when one original URL is a prefix of another,
    so the longest URLs are replaced first.

    URLs without an entry in ``relocations`` are left untouched.
    """
    if not html or not relocations:
        return html or ""

    soup = BeautifulSoup(html, "html.parser")
    for img in soup.find_all("img"):
        src = img.get("src")
        if isinstance(src, str) and src.strip() in relocations:
            img["src"] = relocations[src.strip()]
    for el in soup.find_all(srcset=True):
        if isinstance(el, Tag):
            srcset = el.get("srcset")
            if isinstance(srcset, str):
                el["srcset"] = _rewrite_srcset(srcset, relocations)

    updated = str(soup)
    for original in sorted(relocations, key=len, reverse=True):
        updated = updated.replace(original, relocations[original])
    return updated
