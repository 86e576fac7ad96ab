"""
Exceptions and structured event logging for the WordPress import.

The :mod:`wxr_importer.utils.errors` module centralizes the writing of log
entries for both failed and successful operations during an import.  Each
entry is appended to a JSON Lines file under the configured reports
directory (``reports/import`` by default) so that the information can be
reviewed or parsed after a run.

Two public functions are provided:

``report_error``
    Record an error that occurred for a record.  An optional exception can be
    supplied and will be serialized to the log.

``report_ok``
    Record a successful step for a record.  Additional key/value information
    can be attached to the entry via the ``extra`` parameter.

The ``EVENTS`` dictionary maps error or event codes to human readable
messages.  Codes not present in the dictionary fall back to the code itself.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional


class WxrImportError(Exception):
    """Base class for errors raised by the import pipeline."""


class MalformedInputError(WxrImportError):
    """The export is empty, not well-formed XML, or has no channel element."""


class ContentStoreError(WxrImportError):
    """A content or image store could not complete a request."""


# Mapping of event codes used throughout the import to descriptive messages.
# The keys include both error and success codes as the same lookup is used by
# :func:`report_error` and :func:`report_ok`.
EVENTS: Dict[str, str] = {
    "CATEGORY_IMPORTED": "Category imported",
    "CATEGORY_INFERRED": "Category created from a post reference",
    "CATEGORY_WRITE": "Failed to save category",
    "AUTHOR_IMPORTED": "Author imported",
    "AUTHOR_WRITE": "Failed to save author",
    "POST_IMPORTED": "Post imported",
    "POST_NO_SLUG": "Post has no usable slug",
    "POST_WRITE": "Failed to save post",
    "POST_FAILED": "Unexpected error while processing post",
}

DEFAULT_REPORT_DIR = os.path.join("reports", "import")


def _write_jsonl(report_dir: str, filename: str, data: Dict[str, Any]) -> None:
    """Append ``data`` as a JSON object followed by a newline."""
    os.makedirs(report_dir, exist_ok=True)
    with open(os.path.join(report_dir, filename), "a", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False)
        f.write("\n")


def _entry(code: str, record: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "code": code,
        "message": EVENTS.get(code, code),
        "slug": record.get("slug"),
        "title": record.get("title") or record.get("name"),
    }


def report_error(
    code: str,
    record: Dict[str, Any],
    exc: Optional[BaseException] = None,
    *,
    report_dir: str = DEFAULT_REPORT_DIR,
) -> None:
    """Log an error event for ``record``.

    Parameters
    ----------
    code:
        A key identifying the type of error.  If ``code`` is present in
        :data:`EVENTS` its value will be used as the message.
    record:
        Dictionary describing the post, author or category involved.  Only
        the ``slug`` and ``title`` (or ``name``) keys are referenced.
    exc:
        Optional exception instance that triggered the error.  The string
        representation of the exception will be included in the log entry.
    report_dir:
        Directory holding ``errors.jsonl``.
    """
    entry = _entry(code, record)
    if exc is not None:
        entry["error"] = str(exc)
    print(f"[ERROR] {entry['message']} - {record.get('slug') or ''}")
    _write_jsonl(report_dir, "errors.jsonl", entry)


def report_ok(
    code: str,
    record: Dict[str, Any],
    extra: Optional[Dict[str, Any]] = None,
    *,
    report_dir: str = DEFAULT_REPORT_DIR,
) -> None:
    """Log a successful event for ``record``.

    Parameters
    ----------
    code:
        A key identifying the type of event.
    record:
        Dictionary describing the post, author or category involved.
    extra:
        Optional dictionary of additional fields to merge into the log entry.
    report_dir:
        Directory holding ``success.jsonl``.
    """
    entry = _entry(code, record)
    if extra:
        entry.update(extra)
    print(f"[OK] {entry['message']} - {record.get('slug') or ''}")
    _write_jsonl(report_dir, "success.jsonl", entry)
