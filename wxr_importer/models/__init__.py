"""
Pydantic records written to the content collections, plus the import report.
"""

from .records import (
    AuthorRecord,
    CategoryRecord,
    EntityCounts,
    ImportReport,
    PostCounts,
    PostRecord,
)

__all__ = [
    "AuthorRecord",
    "CategoryRecord",
    "EntityCounts",
    "ImportReport",
    "PostCounts",
    "PostRecord",
]
