"""
Storage targets for relocated post images.

Both stores keep files under one directory and return the public path the
site serves them from (``/images/posts/<filename>`` by default).
"""

from __future__ import annotations

import os
from typing import Any, Dict

from wxr_importer.migrators import github_client
from wxr_importer.utils.errors import ContentStoreError

DEFAULT_PUBLIC_PREFIX = "/images/posts"


class LocalImageStore:
    def __init__(self, directory: str, public_prefix: str = DEFAULT_PUBLIC_PREFIX) -> None:
        self.directory = directory
        self.public_prefix = public_prefix.rstrip("/")

    def save_image(self, data: bytes, filename: str) -> str:
        os.makedirs(self.directory, exist_ok=True)
        with open(os.path.join(self.directory, filename), "wb") as f:
            f.write(data)
        return f"{self.public_prefix}/{filename}"


class GitHubImageStore:
    """Commits images to ``directory`` of the site repository."""

    def __init__(
        self,
        cfg: Dict[str, Any],
        directory: str = "public/images/posts",
        public_prefix: str = DEFAULT_PUBLIC_PREFIX,
    ) -> None:
        self.cfg = cfg
        self.directory = directory.strip("/")
        self.public_prefix = public_prefix.rstrip("/")

    def save_image(self, data: bytes, filename: str) -> str:
        path = f"{self.directory}/{filename}"
        if not github_client.write_file(self.cfg, path, data, f'media: upload "{filename}"'):
            raise ContentStoreError(f"GitHub rejected image {path}")
        return f"{self.public_prefix}/{filename}"
