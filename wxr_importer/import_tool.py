"""
High-level orchestration of the WordPress import.

This module defines a :class:`WordPressImportTool` class that ties together
the extractors, parsers, migrators and utilities into a complete pipeline.
An import decodes the WXR export, then runs three sequential passes:
categories, authors and posts.  Posts depend on the author map and the
category index built by the first two passes.

Only a malformed export fails the whole import.  Every other problem is
recorded against the record it concerns and the batch goes on, so the
returned :class:`~wxr_importer.models.ImportReport` always lists what was
imported, what was skipped and why.

Configuration is supplied via a JSON file path or directly as a
dictionary.  The ``content`` section locates the collections and the image
directory, the optional ``github`` section switches writes to the GitHub
contents API, and the ``import`` section holds network and report settings.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from wxr_importer.extractors.values import as_list, scalar
from wxr_importer.extractors.wxr_decoder import decode
from wxr_importer.migrators.content_store import GitHubContentStore, LocalContentStore
from wxr_importer.migrators.github_client import is_github_configured
from wxr_importer.migrators.image_relocator import ImageRelocator, extract_image_urls
from wxr_importer.migrators.image_store import GitHubImageStore, LocalImageStore
from wxr_importer.models.records import CategoryRecord, ImportReport, PostRecord
from wxr_importer.parsers.content_rewriter import rewrite_image_urls
from wxr_importer.parsers.markdown import html_to_markdown
from wxr_importer.parsers.text import meta_description
from wxr_importer.utils.errors import MalformedInputError, report_error, report_ok
from wxr_importer.utils.references import (
    build_author_map,
    build_category_index,
    parse_author_declaration,
    parse_category_declaration,
    resolve_author_for_post,
    resolve_category_for_post,
)
from wxr_importer.utils.slugs import clean_slug, slugify, unique_slug

IMPORTED_STATUSES = ("publish", "draft")
UNTITLED = "Untitled"


class ImportState(str, Enum):
    IDLE = "idle"
    DECODING = "decoding"
    PROCESSING_CATEGORIES = "processing_categories"
    PROCESSING_AUTHORS = "processing_authors"
    PROCESSING_POSTS = "processing_posts"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ImportSession:
    """Lookup structures owned by a single import call."""

    report: ImportReport = field(default_factory=ImportReport)
    author_map: Dict[str, str] = field(default_factory=dict)
    category_slugs: Set[str] = field(default_factory=set)
    post_slugs: Set[str] = field(default_factory=set)
    inferred_categories: int = 0


def parse_published_date(value: str) -> Optional[str]:
    """``YYYY-MM-DD`` for a WordPress date, ``None`` when it is not a valid instant.

    Drafts are exported with ``0000-00-00 00:00:00``, which does not parse.
    """
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.strip().replace(" ", "T")).date().isoformat()
    except ValueError:
        return None


class WordPressImportTool:
    """
    Encapsulates all state and behavior required to import a WordPress
    export into the blog's content collections.  This class is responsible
    for reading configuration, choosing the content and image stores and
    running the import passes.  Detailed success and failure information is
    recorded using the :mod:`wxr_importer.utils.errors` module.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        *,
        config_file: Optional[str] = None,
        store: Any = None,
        image_store: Any = None,
        relocator: Optional[ImageRelocator] = None,
    ) -> None:
        if config_file and os.path.exists(config_file):
            with open(config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
        elif config is None:
            config = {}

        # Ensure essential keys exist to prevent KeyErrors
        config.setdefault("content", {})
        config["content"].setdefault("root", os.path.join("src", "content"))
        config["content"].setdefault("images_dir", os.path.join("public", "images", "posts"))
        config["content"].setdefault("images_public_prefix", "/images/posts")

        config.setdefault("github", {})
        config["github"].setdefault("token", os.getenv("GITHUB_TOKEN", ""))
        config["github"].setdefault("owner", os.getenv("GITHUB_OWNER", ""))
        config["github"].setdefault("repo", os.getenv("GITHUB_REPO", ""))
        config["github"].setdefault("branch", os.getenv("GITHUB_BRANCH") or "main")
        config["github"].setdefault("base_url", "https://api.github.com")

        config.setdefault("import", {})
        config["import"].setdefault("image_timeout", 20)
        config["import"].setdefault("fetch_images", True)
        config["import"].setdefault("reports_dir", os.path.join("reports", "import"))
        config["import"].setdefault("user_agent", "wxr-importer")

        self.config = config
        self.reports_dir: str = config["import"]["reports_dir"]
        self.state = ImportState.IDLE

        use_github = is_github_configured(config["github"])
        if store is None:
            if use_github:
                store = GitHubContentStore(config["github"], base_path=config["content"]["root"].replace(os.sep, "/"))
            else:
                store = LocalContentStore(config["content"]["root"])
        if image_store is None:
            if use_github:
                image_store = GitHubImageStore(
                    config["github"],
                    directory=config["content"]["images_dir"].replace(os.sep, "/"),
                    public_prefix=config["content"]["images_public_prefix"],
                )
            else:
                image_store = LocalImageStore(
                    config["content"]["images_dir"],
                    public_prefix=config["content"]["images_public_prefix"],
                )
        if relocator is None:
            relocator = ImageRelocator(
                image_store,
                timeout=config["import"]["image_timeout"],
                log=self.log_message,
            )
            relocator.session.headers["User-Agent"] = config["import"]["user_agent"]
        self.store = store
        self.image_store = image_store
        self.relocator = relocator

    def log_message(self, message: str, level: str = "INFO") -> None:
        print(f"[{level}] {message}")
        # Append to log file
        os.makedirs(self.reports_dir, exist_ok=True)
        with open(os.path.join(self.reports_dir, "import.log"), "a", encoding="utf-8") as f:
            f.write(f"{level}: {message}\n")

    def _enter(self, state: ImportState) -> None:
        self.state = state
        self.log_message(f"Import state: {state.value}", level="DEBUG")

    # ------------------------------------------------------------------ API

    def import_file(self, path: str) -> ImportReport:
        with open(path, "r", encoding="utf-8") as f:
            return self.import_xml(f.read())

    def import_xml(self, xml_text: str) -> ImportReport:
        """
        Import a WXR export.

        :param xml_text: Contents of the export file.
        :return: The import report.  ``success`` is ``False`` only when the
                 export could not be decoded, in which case nothing was
                 written and ``errors`` holds the single fatal message.
        """
        self._enter(ImportState.DECODING)
        self.log_message(f"Parsing XML ({len(xml_text or '')} characters)")
        try:
            channel = decode(xml_text)
        except MalformedInputError as e:
            self._enter(ImportState.FAILED)
            self.log_message(f"Fatal import error: {e}", level="ERROR")
            return ImportReport.fatal(f"Fatal error: {e}")

        items = as_list(channel.get("item"))
        self.log_message(
            f"Found {len(items)} items, {len(as_list(channel.get('wp:author')))} authors, "
            f"{len(as_list(channel.get('wp:category')))} categories",
            level="DEBUG",
        )
        session = ImportSession()

        self._enter(ImportState.PROCESSING_CATEGORIES)
        self.import_categories(as_list(channel.get("wp:category")), session)

        self._enter(ImportState.PROCESSING_AUTHORS)
        self.import_authors(as_list(channel.get("wp:author")), session)

        self._enter(ImportState.PROCESSING_POSTS)
        self.import_posts(items, session)

        self._enter(ImportState.DONE)
        report = session.report
        if session.inferred_categories:
            self.log_message(f"{session.inferred_categories} categories created from post references")
        self.log_message(report.summary())
        return report

    # ------------------------------------------------------------ categories

    def import_categories(self, declared: List[Any], session: ImportSession) -> None:
        counts = session.report.categories
        existing = self.store.slugs("category")
        accepted: List[Any] = []
        for node in declared:
            record = parse_category_declaration(node)
            if record is None:
                self.log_message(f"Category ignored - invalid name or slug: {node!r}", level="WARNING")
                counts.skipped += 1
                continue
            try:
                if record.slug in existing:
                    counts.skipped += 1
                    accepted.append(node)
                    continue
                if self.store.write("category", record.slug, record):
                    counts.imported += 1
                    existing.add(record.slug)
                    accepted.append(node)
                    report_ok("CATEGORY_IMPORTED", record.model_dump(), report_dir=self.reports_dir)
                else:
                    counts.skipped += 1
                    report_error("CATEGORY_WRITE", record.model_dump(), report_dir=self.reports_dir)
            except Exception as e:
                counts.skipped += 1
                session.report.errors.append(f'Failed to import category "{record.name}": {e}')
                report_error("CATEGORY_WRITE", record.model_dump(), e, report_dir=self.reports_dir)
        session.category_slugs = build_category_index(accepted, existing)

    def _create_inferred_category(self, record: CategoryRecord, session: ImportSession) -> bool:
        if not self.store.write("category", record.slug, record):
            report_error("CATEGORY_WRITE", record.model_dump(), report_dir=self.reports_dir)
            return False
        session.report.categories.imported += 1
        session.inferred_categories += 1
        report_ok("CATEGORY_INFERRED", record.model_dump(), report_dir=self.reports_dir)
        return True

    # --------------------------------------------------------------- authors

    def import_authors(self, declared: List[Any], session: ImportSession) -> None:
        counts = session.report.authors
        session.author_map = build_author_map(declared)
        existing = self.store.slugs("author")
        for node in declared:
            parsed = parse_author_declaration(node)
            if parsed is None:
                self.log_message("Author ignored - empty login or display name", level="WARNING")
                counts.skipped += 1
                continue
            _, record = parsed
            try:
                if record.slug in existing:
                    counts.skipped += 1
                    continue
                if self.store.write("author", record.slug, record):
                    counts.imported += 1
                    existing.add(record.slug)
                    report_ok("AUTHOR_IMPORTED", record.model_dump(), report_dir=self.reports_dir)
                else:
                    counts.skipped += 1
                    report_error("AUTHOR_WRITE", record.model_dump(), report_dir=self.reports_dir)
            except Exception as e:
                counts.skipped += 1
                session.report.errors.append(f'Failed to import author "{record.name}": {e}')
                report_error("AUTHOR_WRITE", record.model_dump(), e, report_dir=self.reports_dir)

    # ----------------------------------------------------------------- posts

    def import_posts(self, items: List[Any], session: ImportSession) -> None:
        session.post_slugs = self.store.slugs("post")
        for item in items:
            if not isinstance(item, dict):
                continue
            if scalar(item.get("wp:post_type")) != "post":
                continue
            status = scalar(item.get("wp:status"))
            if status not in IMPORTED_STATUSES:
                continue
            try:
                self.import_post(item, items, status, session)
            except Exception as e:
                title = scalar(item.get("title")) or "Unknown"
                counts = session.report.posts
                counts.errors.append(f'Failed to process post "{title}": {e}')
                counts.skipped += 1
                report_error("POST_FAILED", {"title": title}, e, report_dir=self.reports_dir)

    def import_post(self, item: Dict[str, Any], items: List[Any], status: str, session: ImportSession) -> None:
        """Run the full pipeline for one post item; may raise."""
        counts = session.report.posts
        title = scalar(item.get("title")) or UNTITLED
        content = scalar(item.get("content:encoded"))
        excerpt = scalar(item.get("excerpt:encoded"))
        self.log_message(f"Processing post: {title[:50]}")

        slug = clean_slug(scalar(item.get("wp:post_name"))) or slugify(title)
        if not slug:
            counts.errors.append(f'Post "{title}" has no valid slug')
            counts.skipped += 1
            report_error("POST_NO_SLUG", {"title": title}, report_dir=self.reports_dir)
            return
        slug = unique_slug(slug, session.post_slugs)

        author = resolve_author_for_post(scalar(item.get("dc:creator")), session.author_map)
        category = resolve_category_for_post(
            item,
            session.category_slugs,
            lambda record: self._create_inferred_category(record, session),
        )

        thumbnail: Optional[str] = None
        body = content
        if self.config["import"]["fetch_images"]:
            thumbnail = self.relocator.relocate_thumbnail(item, items, slug)
            if thumbnail:
                counts.images_imported += 1
            image_urls = extract_image_urls(content)
            self.log_message(f"Found {len(image_urls)} images in post '{slug}'", level="DEBUG")
            relocations = self.relocator.relocate_all(image_urls, slug)
            counts.images_imported += len(relocations)
            if relocations:
                body = rewrite_image_urls(content, relocations)

        published_date = None
        if status == "publish":
            published_date = parse_published_date(scalar(item.get("wp:post_date"))) or parse_published_date(
                scalar(item.get("wp:post_date_gmt"))
            )

        post = PostRecord(
            title=title,
            slug=slug,
            author=author,
            category=category,
            published_date=published_date,
            thumbnail=thumbnail,
            meta_description=meta_description(excerpt, content),
            content=html_to_markdown(body, log=self.log_message),
        )
        if self.store.write("post", slug, post):
            session.post_slugs.add(slug)
            counts.imported += 1
            report_ok("POST_IMPORTED", {"slug": slug, "title": title}, report_dir=self.reports_dir)
        else:
            counts.errors.append(f'Failed to save post "{title}"')
            counts.skipped += 1
            report_error("POST_WRITE", {"slug": slug, "title": title}, report_dir=self.reports_dir)
