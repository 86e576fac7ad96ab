"""
Utility helpers used by the import tool.

This subpackage exposes slug generation, author/category reference mapping,
the error hierarchy and structured event logging.
"""

from .errors import EVENTS, MalformedInputError, WxrImportError, report_error, report_ok
from .slugs import clean_slug, slugify, unique_slug

__all__ = [
    "EVENTS",
    "MalformedInputError",
    "WxrImportError",
    "report_error",
    "report_ok",
    "clean_slug",
    "slugify",
    "unique_slug",
]
