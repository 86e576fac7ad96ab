"""
Relocation of externally hosted post images.

Posts exported from WordPress point at images on the old site (or on
third-party CDNs).  :class:`ImageRelocator` downloads each of them, checks
that the response really is an image and stores a copy through an image
store, returning the local public path.  Every relocation is independent
and best-effort: a failure leaves the original URL in place and never
aborts the post.

Usage example::

    relocator = ImageRelocator(LocalImageStore("public/images/posts"))
    urls = extract_image_urls(post_html)
    relocations = relocator.relocate_all(urls, "my-post")
    html = rewrite_image_urls(post_html, relocations)
"""

from __future__ import annotations

import os
import re
import time
from typing import Any, Callable, Dict, Iterable, List, Optional
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

from wxr_importer.extractors.values import as_list, scalar

VALID_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp", "svg")
DEFAULT_EXTENSION = "jpg"
THUMBNAIL_META_KEY = "_thumbnail_id"

LogFn = Callable[[str, str], None]


def _print_log(message: str, level: str = "INFO") -> None:
    print(f"[{level}] {message}")


def extract_image_urls(html: str) -> List[str]:
    """
    Collect the image URLs referenced by ``html``.

    ``<img src>`` values come first, then every candidate of every
    ``srcset`` attribute.  Inline ``data:`` URIs are excluded and duplicates
    are dropped, keeping the first occurrence.
    """
    if not html:
        return []
    soup = BeautifulSoup(html, "html.parser")
    found: List[str] = []

    def add(url: Any) -> None:
        if not isinstance(url, str):
            return
        url = url.strip()
        if url and not url.startswith("data:") and url not in found:
            found.append(url)

    for img in soup.find_all("img"):
        add(img.get("src"))
    for el in soup.find_all(srcset=True):
        srcset = el.get("srcset")
        if isinstance(srcset, str):
            for candidate in srcset.split(","):
                parts = candidate.split()
                if parts:
                    add(parts[0])
    return found


def extension_for(content_type: str) -> str:
    """File extension for an ``image/*`` content type, ``jpg`` when unknown."""
    subtype = content_type.split(";", 1)[0].strip().lower().partition("/")[2]
    if subtype == "svg+xml":
        return "svg"
    return subtype if subtype in VALID_EXTENSIONS else DEFAULT_EXTENSION


def clean_basename(url: str) -> str:
    name = os.path.basename(urlparse(url).path)
    stem = os.path.splitext(name)[0]
    return re.sub(r"[^a-zA-Z0-9.-]", "-", stem) or "image"


class ImageRelocator:
    """
    Downloads remote images and stores them through ``image_store``.

    :param image_store: Object with ``save_image(data, filename) -> public_path``.
    :param session: ``requests`` session (or compatible object) used for downloads.
    :param timeout: Per-request timeout in seconds.
    :param clock: Returns the current time in seconds; used for file names.
    :param log: ``(message, level)`` logger.
    """

    def __init__(
        self,
        image_store: Any,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 20,
        clock: Callable[[], float] = time.time,
        log: Optional[LogFn] = None,
    ) -> None:
        self.image_store = image_store
        self.session = session or requests.Session()
        self.timeout = timeout
        self.clock = clock
        self.log = log or _print_log

    def build_filename(self, url: str, owner_slug: str, extension: str) -> str:
        timestamp = int(self.clock() * 1000)
        return f"{timestamp}-{owner_slug}-{clean_basename(url)}.{extension}"

    def relocate(self, url: str, owner_slug: str) -> Optional[str]:
        """
        Download ``url`` and store it for the post ``owner_slug``.

        :return: The public path of the stored copy, or ``None`` when the URL
                 is empty, already local, inline data, cannot be fetched, is
                 not an image, or cannot be stored.
        """
        if not url or url.startswith("data:") or url.startswith("/"):
            return None
        try:
            resp = self.session.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            self.log(f"Could not download image {url}: {e}", "WARNING")
            return None

        content_type = resp.headers.get("Content-Type") or ""
        if not content_type.lower().startswith("image/"):
            self.log(f"URL is not an image: {url} ({content_type or 'no content type'})", "WARNING")
            return None

        filename = self.build_filename(url, owner_slug, extension_for(content_type))
        try:
            public_path = self.image_store.save_image(resp.content, filename)
        except Exception as e:
            self.log(f"Failed to store image {url}: {e}", "ERROR")
            return None
        self.log(f"Image saved: {public_path}", "INFO")
        return public_path

    def relocate_all(self, urls: Iterable[str], owner_slug: str) -> Dict[str, str]:
        """Relocate ``urls`` one at a time; only successes are returned."""
        relocations: Dict[str, str] = {}
        for url in urls:
            local = self.relocate(url, owner_slug)
            if local:
                relocations[url] = local
        return relocations

    @staticmethod
    def find_thumbnail_url(item: Dict[str, Any], items: Iterable[Any]) -> Optional[str]:
        """
        URL of the featured image of ``item``.

        The ``_thumbnail_id`` post meta holds the ``wp:post_id`` of an
        attachment item; its ``wp:attachment_url`` (or ``guid``) is the file.
        """
        thumbnail_id = ""
        for meta in as_list(item.get("wp:postmeta")):
            if isinstance(meta, dict) and scalar(meta.get("wp:meta_key")) == THUMBNAIL_META_KEY:
                thumbnail_id = scalar(meta.get("wp:meta_value"))
                break
        if not thumbnail_id:
            return None

        for candidate in items:
            if not isinstance(candidate, dict):
                continue
            if scalar(candidate.get("wp:post_type")) != "attachment":
                continue
            if scalar(candidate.get("wp:post_id")) != thumbnail_id:
                continue
            url = scalar(candidate.get("wp:attachment_url")) or scalar(candidate.get("guid"))
            if url and not url.startswith("data:"):
                return url
        return None

    def relocate_thumbnail(self, item: Dict[str, Any], items: Iterable[Any], owner_slug: str) -> Optional[str]:
        url = self.find_thumbnail_url(item, items)
        if not url:
            return None
        return self.relocate(url, owner_slug)
