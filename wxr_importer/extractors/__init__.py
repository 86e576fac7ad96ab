"""
Extractors for WordPress export files.

This subpackage decodes WXR (WordPress eXtended RSS) exports into nested
dictionaries and provides the normalization helpers used to read their
loosely typed fields.
"""

from .values import as_list, attribute, scalar
from .wxr_decoder import decode

__all__ = ["as_list", "attribute", "decode", "scalar"]
