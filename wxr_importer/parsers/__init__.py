"""
Parsers and converters used by the import pipeline.

This subpackage exposes ``rewrite_image_urls`` from
:mod:`wxr_importer.parsers.content_rewriter`, ``html_to_markdown`` from
:mod:`wxr_importer.parsers.markdown` and ``meta_description`` from
:mod:`wxr_importer.parsers.text`.
"""

from .content_rewriter import rewrite_image_urls
from .markdown import html_to_markdown
from .text import meta_description, strip_markup

__all__ = ["html_to_markdown", "meta_description", "rewrite_image_urls", "strip_markup"]
