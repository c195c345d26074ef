import base64
import unittest
from unittest.mock import MagicMock

import requests

from symposium.errors import DocumentConflictError, DocumentStoreError, DocumentStoreNotConfiguredError
from symposium.integrations.github_contents import GitHubContentsClient


def _response(status_code, payload=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    response.text = text
    return response


class TestGitHubContentsClient(unittest.TestCase):
    def _client(self, session, token="tok"):
        return GitHubContentsClient(
            owner="tfs",
            repo="site",
            branch="data",
            token=token,
            session=session,
            base_url="https://gh.test",
        )

    def test_get_file_decodes_content_and_sha(self):
        session = MagicMock()
        encoded = base64.b64encode(b'{"sponsors": []}').decode("ascii")
        # GitHub wraps base64 content at 60 columns
        session.get.return_value = _response(200, {"content": encoded[:8] + "\n" + encoded[8:], "sha": "abc123"})

        remote = self._client(session).get_file("data/sponsors.json")

        self.assertEqual(remote.text, '{"sponsors": []}')
        self.assertEqual(remote.sha, "abc123")
        args, kwargs = session.get.call_args
        self.assertEqual(args[0], "https://gh.test/repos/tfs/site/contents/data/sponsors.json")
        self.assertEqual(kwargs["params"], {"ref": "data"})
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer tok")

    def test_get_file_missing_returns_none(self):
        session = MagicMock()
        session.get.return_value = _response(404, {"message": "Not Found"})
        self.assertIsNone(self._client(session).get_file("data/events.json"))

    def test_get_file_server_error_raises_store_error(self):
        session = MagicMock()
        session.get.return_value = _response(500, text="oops")
        with self.assertRaises(DocumentStoreError):
            self._client(session).get_file("data/events.json")

    def test_get_file_network_error_raises_store_error(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("offline")
        with self.assertRaises(DocumentStoreError):
            self._client(session).get_file("data/events.json")

    def test_get_file_non_json_body_raises_store_error(self):
        session = MagicMock()
        response = _response(200, text="<html>rate limited</html>")
        response.json.side_effect = requests.JSONDecodeError("Expecting value", "<html>", 0)
        session.get.return_value = response
        with self.assertRaises(DocumentStoreError):
            self._client(session).get_file("data/events.json")

    def test_read_without_token_sends_no_authorization(self):
        session = MagicMock()
        session.get.return_value = _response(404)
        self._client(session, token=None).get_file("data/events.json")
        self.assertNotIn("Authorization", session.get.call_args[1]["headers"])

    def test_put_file_sends_base64_branch_and_sha(self):
        session = MagicMock()
        session.put.return_value = _response(200, {"content": {"html_url": "https://github.test/blob"}})

        url = self._client(session).put_file("data/events.json", "{}", "Update events", sha="abc123")

        self.assertEqual(url, "https://github.test/blob")
        body = session.put.call_args[1]["json"]
        self.assertEqual(body["message"], "Update events")
        self.assertEqual(base64.b64decode(body["content"]), b"{}")
        self.assertEqual(body["branch"], "data")
        self.assertEqual(body["sha"], "abc123")

    def test_put_file_create_omits_sha(self):
        session = MagicMock()
        session.put.return_value = _response(201, {"content": {"html_url": "u"}})
        self._client(session).put_file("data/events.json", "{}", "seed")
        self.assertNotIn("sha", session.put.call_args[1]["json"])

    def test_put_file_non_json_body_returns_no_url(self):
        session = MagicMock()
        response = _response(201, text="<html>ok</html>")
        response.json.side_effect = ValueError("Expecting value")
        session.put.return_value = response
        self.assertIsNone(self._client(session).put_file("data/events.json", "{}", "seed"))

    def test_stale_sha_is_conflict(self):
        for status in (409, 422):
            session = MagicMock()
            session.put.return_value = _response(status, text="sha mismatch")
            with self.assertRaises(DocumentConflictError):
                self._client(session).put_file("data/events.json", "{}", "update", sha="old")

    def test_other_write_errors_are_store_errors(self):
        session = MagicMock()
        session.put.return_value = _response(403, text="forbidden")
        with self.assertRaises(DocumentStoreError) as ctx:
            self._client(session).put_file("data/events.json", "{}", "update")
        self.assertNotIsInstance(ctx.exception, DocumentConflictError)

    def test_write_without_token_is_not_configured(self):
        session = MagicMock()
        with self.assertRaises(DocumentStoreNotConfiguredError):
            self._client(session, token=None).put_file("data/events.json", "{}", "update")
        session.put.assert_not_called()


if __name__ == "__main__":
    unittest.main()
