"""
WordPress HTML to Markdown conversion.

Post bodies are converted with markdownify after WordPress-specific noise
(conditional comments, scripts and inline styles) has been stripped.
Conversion never fails the import: on any converter error the original HTML
is returned so the post keeps its content.
"""

from __future__ import annotations

import re
from typing import Callable, Optional

from markdownify import ATX, MarkdownConverter

__all__ = ["html_to_markdown", "WordPressMarkdownConverter"]

_CONDITIONAL_COMMENT = re.compile(r"<!--\s*\[if[^\]]*\]>.*?<!\[endif\]\s*-->", re.IGNORECASE | re.DOTALL)
_SCRIPT = re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL)
_STYLE = re.compile(r"<style[^>]*>.*?</style>", re.IGNORECASE | re.DOTALL)


class WordPressMarkdownConverter(MarkdownConverter):
    """markdownify converter with ``~~`` strikethrough for del/s/strike."""

    def _strikethrough(self, text: str) -> str:
        if not text.strip():
            return text
        return f"~~{text}~~"

    def convert_del(self, el, text, *args, **kwargs):
        return self._strikethrough(text)

    def convert_s(self, el, text, *args, **kwargs):
        return self._strikethrough(text)

    def convert_strike(self, el, text, *args, **kwargs):
        return self._strikethrough(text)


def clean_wordpress_html(html: str) -> str:
    cleaned = _CONDITIONAL_COMMENT.sub("", html)
    cleaned = _SCRIPT.sub("", cleaned)
    cleaned = _STYLE.sub("", cleaned)
    return cleaned.strip()


def html_to_markdown(html: str, *, log: Optional[Callable[[str, str], None]] = None) -> str:
    """
    Convert a WordPress post body to Markdown.

    :param html: Raw ``content:encoded`` HTML.
    :param log: Optional ``(message, level)`` logger used when conversion fails.
    :return: Markdown text, ``""`` for empty input, or ``html`` unchanged
             when the converter raises.
    """
    if not html or not html.strip():
        return ""
    try:
        converter = WordPressMarkdownConverter(heading_style=ATX, bullets="-")
        return converter.convert(clean_wordpress_html(html)).strip()
    except Exception as e:
        if log:
            log(f"Failed to convert HTML to Markdown: {e}", "ERROR")
        return html
