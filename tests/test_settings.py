import os
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from symposium.config.settings import Settings


class TestSettings(unittest.TestCase):
    def test_defaults_without_environment(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings.from_env()

        self.assertIsNone(settings.GITHUB_TOKEN)
        self.assertEqual(settings.GITHUB_BRANCH, "main")
        self.assertEqual(settings.PING_MESSAGE, "ping")
        self.assertEqual(settings.MARKET_REFRESH_INTERVAL_SEC, 10.0)
        self.assertEqual(settings.MARKET_ITEM_TIMEOUT_SEC, 8.0)
        self.assertEqual(settings.MARKET_REQUEST_TIMEOUT_SEC, 15.0)
        self.assertEqual(settings.QUOTE_RETRY_ATTEMPTS, 3)
        self.assertFalse(settings.document_store_configured)

    def test_default_retries_fit_inside_item_timeout(self):
        settings = Settings()
        self.assertEqual(settings.quote_retry_budget_sec, 7.0)
        self.assertLess(settings.quote_retry_budget_sec, settings.MARKET_ITEM_TIMEOUT_SEC)
        self.assertLess(settings.CURRENCY_HTTP_TIMEOUT_SEC, settings.MARKET_ITEM_TIMEOUT_SEC)

    def test_retry_budget_grows_with_overrides(self):
        settings = Settings(QUOTE_HTTP_TIMEOUT_SEC=10, QUOTE_RETRY_ATTEMPTS=3, QUOTE_RETRY_DELAY_SEC=1)
        self.assertEqual(settings.quote_retry_budget_sec, 32.0)

    def test_reads_document_store_and_market_overrides(self):
        env = {
            "GITHUB_OWNER": "tfs",
            "GITHUB_REPO": "site-data",
            "GITHUB_TOKEN": "t0k",
            "MARKET_REFRESH_INTERVAL_SEC": "30",
            "QUOTE_RETRY_ATTEMPTS": "5",
            "PING_MESSAGE": "pong",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings.from_env()

        self.assertTrue(settings.document_store_configured)
        self.assertEqual(settings.GITHUB_TOKEN, "t0k")
        self.assertEqual(settings.MARKET_REFRESH_INTERVAL_SEC, 30.0)
        self.assertEqual(settings.QUOTE_RETRY_ATTEMPTS, 5)
        self.assertEqual(settings.PING_MESSAGE, "pong")

    def test_empty_token_is_treated_as_unset(self):
        with patch.dict(os.environ, {"GITHUB_TOKEN": ""}, clear=True):
            settings = Settings.from_env()
        self.assertIsNone(settings.GITHUB_TOKEN)

    def test_non_positive_interval_rejected(self):
        with patch.dict(os.environ, {"MARKET_REFRESH_INTERVAL_SEC": "0"}, clear=True):
            with self.assertRaises(ValidationError):
                Settings.from_env()


if __name__ == "__main__":
    unittest.main()
