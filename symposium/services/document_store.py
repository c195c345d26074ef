from __future__ import annotations

import json
import time
from datetime import datetime
from typing import Any, Callable, Dict, Generic, Type, TypeVar

from pydantic import BaseModel, ValidationError

from symposium.errors import DocumentStoreError, DocumentStoreNotConfiguredError
from symposium.integrations.github_contents import GitHubContentsClient
from symposium.schemas.documents import SyncStatus

D = TypeVar("D", bound=BaseModel)


class DocumentStore(Generic[D]):
    """One JSON document kept as a single file in a GitHub repository.

    Reads fall back to the seed document whenever the remote copy is missing,
    unreadable or unparsable. Writes replace the whole file using the current
    blob SHA as the version token.
    """

    def __init__(
        self,
        name: str,
        path: str,
        model: Type[D],
        default_factory: Callable[[int], Dict[str, Any]],
        client: GitHubContentsClient | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.name = name
        self.path = path
        self.model = model
        self.default_factory = default_factory
        self.client = client
        self._clock = clock or time.time
        self._default_stamp = self._now_ms()

    @property
    def configured(self) -> bool:
        return self.client is not None

    @property
    def writable(self) -> bool:
        return self.client is not None and self.client.can_write

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def default_document(self) -> D:
        return self.model.model_validate(self.default_factory(self._default_stamp))

    def dumps(self, document: D) -> str:
        return json.dumps(document.model_dump(mode="json", by_alias=True, exclude_none=True), indent=2)

    def _write(self, client: GitHubContentsClient, document: D, sha: str | None) -> str | None:
        message = f"Update {self.name} data - {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"
        return client.put_file(self.path, self.dumps(document), message, sha=sha)

    def load(self) -> D:
        if self.client is None:
            return self.default_document()

        try:
            remote = self.client.get_file(self.path)
        except DocumentStoreError as exc:
            # serve the seed but leave the remote file alone
            print(f"[DOCS][load_error] name={self.name} error={exc}", flush=True)
            return self.default_document()

        if remote is None:
            document = self.default_document()
            if self.writable:
                try:
                    url = self._write(self.client, document, sha=None)
                    print(f"[DOCS][seeded] name={self.name} url={url}", flush=True)
                except DocumentStoreError as exc:
                    print(f"[DOCS][seed_error] name={self.name} error={exc}", flush=True)
            return document

        try:
            return self.model.model_validate_json(remote.text)
        except ValidationError as exc:
            print(f"[DOCS][parse_error] name={self.name} errors={exc.error_count()}", flush=True)
            return self.default_document()

    def save(self, document: D) -> D:
        client = self.client
        if client is None or not client.can_write:
            raise DocumentStoreNotConfiguredError(f"{self.name} store is read-only")

        stamped = document.model_copy(update={"last_modified": self._now_ms()})
        current = client.get_file(self.path)
        url = self._write(client, stamped, sha=current.sha if current else None)
        print(
            f"[DOCS][saved] name={self.name} last_modified={stamped.last_modified} url={url}",
            flush=True,
        )
        return stamped

    def check_sync(self, client_last_modified: int) -> SyncStatus:
        server_last_modified = int(self.load().last_modified)
        return SyncStatus(
            needs_update=server_last_modified > client_last_modified,
            server_last_modified=server_last_modified,
            client_last_modified=client_last_modified,
        )
