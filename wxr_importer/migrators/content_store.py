"""
Content collections the import writes to.

Posts are Markdoc files with YAML front matter, authors and categories are
plain YAML files, one file per slug::

    <root>/posts/<slug>.mdoc
    <root>/authors/<slug>.yaml
    <root>/categories/<slug>.yaml

:class:`LocalContentStore` works on the local filesystem and
:class:`GitHubContentStore` commits the same files through the GitHub
contents API.  Both expose ``exists``, ``write`` and ``list`` keyed by the
entity kind (``"post"``, ``"author"`` or ``"category"``).
"""

from __future__ import annotations

import os
from typing import Any, Dict, Iterable, List, Set, Tuple, Union

import yaml
from pydantic import BaseModel

from wxr_importer.migrators import github_client
from wxr_importer.models.records import PostRecord
from wxr_importer.utils.errors import ContentStoreError

KINDS: Dict[str, Tuple[str, str]] = {
    "post": ("posts", ".mdoc"),
    "author": ("authors", ".yaml"),
    "category": ("categories", ".yaml"),
}

Record = Union[BaseModel, Dict[str, Any]]


def _kind(kind: str) -> Tuple[str, str]:
    try:
        return KINDS[kind]
    except KeyError:
        raise ValueError(f"Unknown content kind: {kind!r}") from None


def dump_yaml(data: Dict[str, Any]) -> str:
    return yaml.safe_dump(data, allow_unicode=True, sort_keys=False, width=float("inf"))


def serialize(kind: str, record: Record) -> str:
    """Render ``record`` as the file contents for ``kind``."""
    if kind == "post":
        post = record if isinstance(record, PostRecord) else PostRecord.model_validate(record)
        return f"---\n{dump_yaml(post.frontmatter())}---\n\n{post.content or ''}"
    if isinstance(record, BaseModel):
        data = record.model_dump(by_alias=True, exclude_none=True)
    else:
        data = {k: v for k, v in record.items() if v is not None}
    return dump_yaml(data)


def parse(kind: str, text: str) -> Dict[str, Any]:
    """Inverse of :func:`serialize`; posts carry their body under ``content``."""
    if kind != "post":
        return yaml.safe_load(text) or {}
    if not text.startswith("---"):
        return {"content": text}
    _, _, rest = text.partition("---\n")
    header, sep, body = rest.partition("\n---")
    if not sep:
        return {"content": text}
    data = yaml.safe_load(header)
    if not isinstance(data, dict):
        data = {}
    data["content"] = body.lstrip("\n")
    return data


class BaseContentStore:
    """Shared ``exists``/``write``/``list`` logic over file-level primitives."""

    def _read_all(self, directory: str, suffix: str) -> Iterable[str]:
        raise NotImplementedError

    def _write_file(self, directory: str, filename: str, text: str, message: str) -> bool:
        raise NotImplementedError

    def list(self, kind: str) -> List[Dict[str, Any]]:
        directory, suffix = _kind(kind)
        records: List[Dict[str, Any]] = []
        for text in self._read_all(directory, suffix):
            try:
                data = parse(kind, text)
            except yaml.YAMLError as e:
                print(f"[WARNING] Unreadable {kind} file skipped: {e}")
                continue
            if isinstance(data, dict):
                records.append(data)
        return records

    def slugs(self, kind: str) -> Set[str]:
        return {str(r.get("slug")) for r in self.list(kind) if r.get("slug")}

    def exists(self, kind: str, slug: str) -> bool:
        return slug in self.slugs(kind)

    def write(self, kind: str, slug: str, record: Record) -> bool:
        directory, suffix = _kind(kind)
        if not slug or slug in (".", "..") or "/" in slug or "\\" in slug:
            print(f"[ERROR] Refusing to write {kind} with unsafe slug {slug!r}")
            return False
        text = serialize(kind, record)
        return self._write_file(directory, f"{slug}{suffix}", text, f'content: save {kind} "{slug}"')


class LocalContentStore(BaseContentStore):
    def __init__(self, root: str) -> None:
        self.root = root

    def _read_all(self, directory: str, suffix: str) -> Iterable[str]:
        path = os.path.join(self.root, directory)
        if not os.path.isdir(path):
            return []
        texts = []
        for filename in sorted(os.listdir(path)):
            if not filename.endswith(suffix):
                continue
            try:
                with open(os.path.join(path, filename), "r", encoding="utf-8") as f:
                    texts.append(f.read())
            except (OSError, UnicodeDecodeError) as e:
                print(f"[WARNING] Unreadable file {filename} skipped: {e}")
        return texts

    def _write_file(self, directory: str, filename: str, text: str, message: str) -> bool:
        path = os.path.join(self.root, directory)
        root = os.path.realpath(self.root)
        target = os.path.realpath(os.path.join(path, filename))
        if os.path.commonpath([root, target]) != root:
            print(f"[ERROR] Refusing to write outside {self.root}: {target}")
            return False
        try:
            os.makedirs(path, exist_ok=True)
            with open(os.path.join(path, filename), "w", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            print(f"[ERROR] Failed to write {filename}: {e}")
            return False
        return True


class GitHubContentStore(BaseContentStore):
    def __init__(self, cfg: Dict[str, Any], base_path: str = "src/content") -> None:
        self.cfg = cfg
        self.base_path = base_path.strip("/")

    def _read_all(self, directory: str, suffix: str) -> Iterable[str]:
        texts = []
        for entry in github_client.list_directory(self.cfg, f"{self.base_path}/{directory}"):
            if not entry.get("name", "").endswith(suffix):
                continue
            try:
                found = github_client.read_file(self.cfg, entry["path"])
                if found:
                    texts.append(found[0].decode("utf-8"))
            except (ContentStoreError, UnicodeDecodeError) as e:
                print(f"[WARNING] Unreadable file {entry['path']} skipped: {e}")
        return texts

    def _write_file(self, directory: str, filename: str, text: str, message: str) -> bool:
        path = f"{self.base_path}/{directory}/{filename}"
        return github_client.write_file(self.cfg, path, text.encode("utf-8"), message)
