import json
import unittest
from unittest.mock import MagicMock

import requests

from symposium.errors import DocumentConflictError, DocumentStoreError, DocumentStoreNotConfiguredError
from symposium.integrations.github_contents import GitHubContentsClient, GitHubFile
from symposium.schemas.documents import EventsDocument, SponsorsDocument
from symposium.services.default_documents import default_events, default_sponsors
from symposium.services.document_store import DocumentStore


class InMemoryContentsClient:
    def __init__(self, files=None, can_write=True, fail_reads=False):
        self.files = dict(files or {})
        self.can_write = can_write
        self.fail_reads = fail_reads
        self.puts = []
        self._revision = 0

    def get_file(self, path):
        if self.fail_reads:
            raise DocumentStoreError("github unavailable")
        if path not in self.files:
            return None
        text, sha = self.files[path]
        return GitHubFile(path=path, text=text, sha=sha)

    def put_file(self, path, text, message, sha=None):
        if not self.can_write:
            raise DocumentStoreNotConfiguredError("no token")
        current = self.files.get(path)
        if (current[1] if current else None) != sha:
            raise DocumentConflictError("stale sha")
        self._revision += 1
        self.files[path] = (text, f"sha-{self._revision}")
        self.puts.append({"path": path, "message": message, "sha": sha})
        return f"https://github.test/{path}"


class TestDocumentStore(unittest.TestCase):
    def _store(self, client=None, now=1_700_000_000.0):
        return DocumentStore(
            "sponsors",
            "data/sponsors.json",
            SponsorsDocument,
            default_sponsors,
            client=client,
            clock=lambda: now,
        )

    def test_unconfigured_store_serves_stable_default(self):
        store = self._store()
        first = store.load()
        second = store.load()

        self.assertEqual(len(first.sponsors), 4)
        self.assertEqual(first.last_modified, 1_700_000_000_000)
        self.assertEqual(first, second)
        self.assertFalse(store.configured)

    def test_missing_file_is_seeded_when_writable(self):
        client = InMemoryContentsClient()
        document = self._store(client).load()

        self.assertEqual(len(document.sponsors), 4)
        self.assertEqual(len(client.puts), 1)
        self.assertIsNone(client.puts[0]["sha"])
        stored = json.loads(client.files["data/sponsors.json"][0])
        self.assertIn("isActive", stored["sponsors"][0])
        self.assertEqual(stored["lastModified"], 1_700_000_000_000)

    def test_missing_file_is_not_seeded_when_read_only(self):
        client = InMemoryContentsClient(can_write=False)
        self._store(client).load()
        self.assertEqual(client.puts, [])

    def test_read_failure_serves_default_without_overwriting(self):
        client = InMemoryContentsClient(
            files={"data/sponsors.json": ('{"sponsors": [], "lastModified": 5}', "sha-0")},
            fail_reads=True,
        )
        document = self._store(client).load()

        self.assertEqual(len(document.sponsors), 4)
        self.assertEqual(client.puts, [])
        self.assertEqual(client.files["data/sponsors.json"][1], "sha-0")

    def test_unparsable_remote_serves_default(self):
        client = InMemoryContentsClient(files={"data/sponsors.json": ("not json", "sha-0")})
        document = self._store(client).load()
        self.assertEqual(len(document.sponsors), 4)

    def test_html_error_page_from_github_serves_default(self):
        session = MagicMock()
        response = MagicMock(status_code=200, text="<html>Unicorn!</html>")
        response.json.side_effect = requests.JSONDecodeError("Expecting value", "<html>", 0)
        session.get.return_value = response
        client = GitHubContentsClient(owner="tfs", repo="site", token=None, session=session)

        document = self._store(client).load()

        self.assertEqual(len(document.sponsors), 4)
        self.assertEqual(document.last_modified, 1_700_000_000_000)

    def test_save_stamps_and_replaces_whole_document(self):
        client = InMemoryContentsClient(files={"data/sponsors.json": ('{"sponsors": [], "lastModified": 5}', "sha-0")})
        store = self._store(client, now=1_800_000_000.5)
        document = SponsorsDocument.model_validate(
            {
                "sponsors": [
                    {
                        "id": "acme",
                        "name": "Acme",
                        "logo": "/acme.svg",
                        "industry": "Tools",
                        "description": "Anvils",
                        "isActive": True,
                        "tier": "gold",
                    }
                ],
                "lastModified": 1,
                "notes": "kept as-is",
            }
        )

        saved = store.save(document)

        self.assertEqual(saved.last_modified, 1_800_000_000_500)
        self.assertEqual(client.puts[0]["sha"], "sha-0")
        self.assertTrue(client.puts[0]["message"].startswith("Update sponsors data"))
        reloaded = store.load()
        self.assertEqual(reloaded.sponsors[0].name, "Acme")
        self.assertEqual(reloaded.last_modified, 1_800_000_000_500)
        stored = json.loads(client.files["data/sponsors.json"][0])
        self.assertEqual(stored["notes"], "kept as-is")
        self.assertEqual(stored["sponsors"][0]["tier"], "gold")

    def test_save_requires_write_access(self):
        for client in (None, InMemoryContentsClient(can_write=False)):
            with self.assertRaises(DocumentStoreNotConfiguredError):
                self._store(client).save(self._store().default_document())

    def test_read_only_save_never_touches_remote(self):
        client = InMemoryContentsClient(can_write=False, fail_reads=True)
        store = self._store(client)
        with self.assertRaises(DocumentStoreNotConfiguredError):
            store.save(store.default_document())
        self.assertEqual(client.puts, [])

    def test_check_sync_compares_last_modified(self):
        client = InMemoryContentsClient(files={"data/sponsors.json": ('{"sponsors": [], "lastModified": 5000}', "s")})
        store = self._store(client)

        behind = store.check_sync(4000)
        current = store.check_sync(5000)

        self.assertTrue(behind.needs_update)
        self.assertFalse(current.needs_update)
        self.assertEqual(behind.server_last_modified, 5000)
        self.assertEqual(behind.model_dump(by_alias=True)["clientLastModified"], 4000)

    def test_events_default_round_trips_through_model(self):
        store = DocumentStore("events", "data/events.json", EventsDocument, default_events, clock=lambda: 1.0)
        document = store.load()
        self.assertTrue(document.past_events["networking-events"].coming_soon)
        dumped = json.loads(store.dumps(document))
        self.assertIn("pastEvents", dumped)
        self.assertEqual(dumped["upcomingEvents"], [])


if __name__ == "__main__":
    unittest.main()
