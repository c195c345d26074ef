from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from symposium.errors import DocumentConflictError, DocumentStoreError, DocumentStoreNotConfiguredError


@dataclass(frozen=True)
class GitHubFile:
    path: str
    text: str
    sha: str


class GitHubContentsClient:
    """Whole-file read / replace against the GitHub Contents API.

    The blob SHA returned by ``get_file`` is the version token: ``put_file``
    with a stale SHA is rejected by GitHub and surfaces as
    ``DocumentConflictError``.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        branch: str = "main",
        token: Optional[str] = None,
        session: Optional[Any] = None,
        base_url: str = "https://api.github.com",
        timeout: float = 10.0,
    ) -> None:
        if not owner or not repo:
            raise DocumentStoreNotConfiguredError("owner and repo are required")
        self.owner = owner
        self.repo = repo
        self.branch = branch
        self.token = token
        self.session = session or requests
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def can_write(self) -> bool:
        return bool(self.token)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/repos/{self.owner}/{self.repo}/contents/{quote(path)}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def get_file(self, path: str) -> GitHubFile | None:
        try:
            response = self.session.get(
                self._url(path),
                headers=self._headers(),
                params={"ref": self.branch},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise DocumentStoreError(f"github read failed for {path}: {exc}") from exc

        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise DocumentStoreError(f"github read failed for {path}: {response.status_code} {response.text}")

        try:
            payload = response.json()
            text = base64.b64decode(payload["content"]).decode("utf-8")
            sha = str(payload["sha"])
        except (KeyError, TypeError, ValueError) as exc:
            raise DocumentStoreError(f"unexpected contents payload for {path}") from exc
        return GitHubFile(path=path, text=text, sha=sha)

    def put_file(self, path: str, text: str, message: str, sha: Optional[str] = None) -> str | None:
        """Create or replace ``path``; returns the committed file's html_url."""
        if not self.token:
            raise DocumentStoreNotConfiguredError("GITHUB_TOKEN is required for writes")

        body: Dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(text.encode("utf-8")).decode("ascii"),
            "branch": self.branch,
        }
        if sha:
            body["sha"] = sha

        try:
            response = self.session.put(
                self._url(path),
                headers={**self._headers(), "Content-Type": "application/json"},
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise DocumentStoreError(f"github write failed for {path}: {exc}") from exc

        if response.status_code in (409, 422):
            raise DocumentConflictError(f"version conflict on {path}: {response.status_code}")
        if response.status_code >= 400:
            raise DocumentStoreError(f"github write failed for {path}: {response.status_code} {response.text}")

        try:
            payload = response.json()
        except ValueError as exc:
            # the commit already landed; only the link is lost
            print(f"[DOCS][write_response_unparsable] path={path} error={exc}", flush=True)
            return None
        content = payload.get("content") if isinstance(payload, dict) else None
        return content.get("html_url") if isinstance(content, dict) else None
