"""
GitHub contents API helpers.

When the site runs on a read-only filesystem every content write is
committed straight to the site repository instead.  Functions defined here
read, list and write files through the ``/repos/{owner}/{repo}/contents``
endpoints.  They take the ``github`` section of the import configuration::

    cfg = {
        "token": "...",          # GITHUB_TOKEN
        "owner": "acme",         # GITHUB_OWNER
        "repo": "site",          # GITHUB_REPO
        "branch": "main",        # GITHUB_BRANCH
        "base_url": "https://api.github.com",
    }

Requests are issued once; callers decide what a failure means for them.
"""

from __future__ import annotations

import base64
from typing import Any, Dict, List, Optional, Tuple

import requests

from wxr_importer.utils.errors import ContentStoreError

DEFAULT_TIMEOUT = 30


def is_github_configured(cfg: Dict[str, Any]) -> bool:
    return bool(cfg.get("token") and cfg.get("owner") and cfg.get("repo"))


def github_headers(cfg: Dict[str, Any]) -> Dict[str, str]:
    """
    Construct the headers required for GitHub API requests.

    :param cfg: The ``github`` configuration section with the ``token``.
    :return: A dictionary of headers including Authorization.
    """
    return {
        "Authorization": f"Bearer {cfg['token']}",
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
    }


def contents_url(cfg: Dict[str, Any], path: str) -> str:
    base = (cfg.get("base_url") or "https://api.github.com").rstrip("/")
    return f"{base}/repos/{cfg['owner']}/{cfg['repo']}/contents/{path.lstrip('/')}"


def read_file(cfg: Dict[str, Any], path: str) -> Optional[Tuple[bytes, str]]:
    """
    Read a file from the repository.

    :return: ``(content, sha)`` or ``None`` when the file does not exist.
    :raises ContentStoreError: on any other failure.
    """
    try:
        resp = requests.get(
            contents_url(cfg, path),
            headers=github_headers(cfg),
            params={"ref": cfg.get("branch") or "main"},
            timeout=DEFAULT_TIMEOUT,
        )
    except requests.RequestException as e:
        raise ContentStoreError(f"GitHub read {path}: {e}") from e
    if resp.status_code == 404:
        return None
    if not resp.ok:
        raise ContentStoreError(f"GitHub read {path}: {resp.status_code}")
    try:
        data = resp.json()
        return base64.b64decode(data.get("content") or ""), data.get("sha", "")
    except (ValueError, AttributeError) as e:
        raise ContentStoreError(f"GitHub read {path}: unexpected response: {e}") from e


def list_directory(cfg: Dict[str, Any], path: str) -> List[Dict[str, Any]]:
    """List the files (not subdirectories) of a repository directory.

    A missing directory or a failed request yields an empty list.
    """
    try:
        resp = requests.get(
            contents_url(cfg, path),
            headers=github_headers(cfg),
            params={"ref": cfg.get("branch") or "main"},
            timeout=DEFAULT_TIMEOUT,
        )
        if not resp.ok:
            return []
        data = resp.json()
    except (requests.RequestException, ValueError) as e:
        print(f"[WARNING] GitHub list {path} failed: {e}")
        return []
    if not isinstance(data, list):
        return []
    return [entry for entry in data if isinstance(entry, dict) and entry.get("type") == "file"]


def write_file(cfg: Dict[str, Any], path: str, content: bytes, message: str) -> bool:
    """
    Create or update a file in the repository.

    The current SHA is looked up first, as the API requires it for updates.

    :param cfg: GitHub configuration section.
    :param path: Repository path of the file.
    :param content: Raw file bytes.
    :param message: Commit message.
    :return: ``True`` when GitHub accepted the commit.
    """
    try:
        existing = read_file(cfg, path)
    except ContentStoreError as e:
        print(f"[WARNING] {e}")
        existing = None
    body: Dict[str, Any] = {
        "message": message,
        "content": base64.b64encode(content).decode("ascii"),
        "branch": cfg.get("branch") or "main",
    }
    if existing:
        body["sha"] = existing[1]
    try:
        resp = requests.put(
            contents_url(cfg, path),
            headers={**github_headers(cfg), "Content-Type": "application/json"},
            json=body,
            timeout=DEFAULT_TIMEOUT,
        )
    except requests.RequestException as e:
        print(f"[ERROR] GitHub write {path} failed: {e}")
        return False
    if not resp.ok:
        print(f"[ERROR] GitHub write {path} failed: {resp.status_code} {resp.text}")
    return resp.ok
