from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryRecord(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)


class AuthorRecord(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    role: str = "Author"
    bio: str = ""
    avatar: Optional[str] = None
    email: Optional[str] = None


class PostRecord(BaseModel):
    """A blog post as stored in the content collection.

    Everything except ``content`` ends up in the YAML front matter of the
    post file; ``content`` is the Markdown body.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    author: Optional[str] = None
    category: Optional[str] = None
    published_date: Optional[str] = Field(None, alias="publishedDate")
    thumbnail: Optional[str] = None
    meta_description: Optional[str] = Field(None, alias="metaDescription")
    meta_image: Optional[str] = Field(None, alias="metaImage")
    content: str = ""

    @field_validator("author", "category", "thumbnail", "meta_description", mode="before")
    @classmethod
    def _empty_to_none(cls, v: Any):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def frontmatter(self) -> dict[str, Any]:
        """Front matter fields, camelCase, without empty values."""
        data = self.model_dump(by_alias=True, exclude_none=True, exclude={"content"})
        return {k: v for k, v in data.items() if v != ""}


class PostCounts(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    imported: int = 0
    skipped: int = 0
    errors: List[str] = Field(default_factory=list)
    images_imported: int = Field(0, alias="imagesImported")


class EntityCounts(BaseModel):
    imported: int = 0
    skipped: int = 0


class ImportReport(BaseModel):
    """Outcome of one import call.

    Counters are final per record: a record is either imported or skipped,
    never both, and nothing is rolled back when later records fail.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    posts: PostCounts = Field(default_factory=PostCounts)
    authors: EntityCounts = Field(default_factory=EntityCounts)
    categories: EntityCounts = Field(default_factory=EntityCounts)
    errors: List[str] = Field(default_factory=list)

    @classmethod
    def fatal(cls, message: str) -> "ImportReport":
        return cls(success=False, errors=[message])

    def summary(self) -> str:
        return (
            f"Import finished: {self.posts.imported} posts, "
            f"{self.authors.imported} authors, {self.categories.imported} categories, "
            f"{self.posts.images_imported} images imported."
        )

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
