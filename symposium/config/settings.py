import os
from functools import lru_cache

from pydantic import BaseModel, Field


class Settings(BaseModel):
    GITHUB_TOKEN: str | None = None
    GITHUB_OWNER: str | None = None
    GITHUB_REPO: str | None = None
    GITHUB_BRANCH: str = "main"
    DOCUMENT_DATA_DIR: str = "data"
    PING_MESSAGE: str = "ping"

    MARKET_REFRESH_INTERVAL_SEC: float = Field(default=10.0, gt=0)
    MARKET_ITEM_TIMEOUT_SEC: float = Field(default=8.0, gt=0)
    MARKET_REQUEST_TIMEOUT_SEC: float = Field(default=15.0, gt=0)
    QUOTE_HTTP_TIMEOUT_SEC: float = Field(default=2.0, gt=0)
    CURRENCY_HTTP_TIMEOUT_SEC: float = Field(default=5.0, gt=0)
    QUOTE_RETRY_ATTEMPTS: int = Field(default=3, gt=0)
    QUOTE_RETRY_DELAY_SEC: float = Field(default=0.5, ge=0)

    @property
    def document_store_configured(self) -> bool:
        return bool(self.GITHUB_OWNER and self.GITHUB_REPO)

    @property
    def quote_retry_budget_sec(self) -> float:
        """Worst case for one equity when every attempt runs into the HTTP timeout."""
        attempts = self.QUOTE_RETRY_ATTEMPTS
        return attempts * self.QUOTE_HTTP_TIMEOUT_SEC + (attempts - 1) * self.QUOTE_RETRY_DELAY_SEC

    @classmethod
    def from_env(cls) -> "Settings":
        raw = {
            "GITHUB_TOKEN": os.getenv("GITHUB_TOKEN") or None,
            "GITHUB_OWNER": os.getenv("GITHUB_OWNER") or None,
            "GITHUB_REPO": os.getenv("GITHUB_REPO") or None,
            "GITHUB_BRANCH": os.getenv("GITHUB_BRANCH"),
            "DOCUMENT_DATA_DIR": os.getenv("DOCUMENT_DATA_DIR"),
            "PING_MESSAGE": os.getenv("PING_MESSAGE"),
            "MARKET_REFRESH_INTERVAL_SEC": os.getenv("MARKET_REFRESH_INTERVAL_SEC"),
            "MARKET_ITEM_TIMEOUT_SEC": os.getenv("MARKET_ITEM_TIMEOUT_SEC"),
            "MARKET_REQUEST_TIMEOUT_SEC": os.getenv("MARKET_REQUEST_TIMEOUT_SEC"),
            "QUOTE_HTTP_TIMEOUT_SEC": os.getenv("QUOTE_HTTP_TIMEOUT_SEC"),
            "CURRENCY_HTTP_TIMEOUT_SEC": os.getenv("CURRENCY_HTTP_TIMEOUT_SEC"),
            "QUOTE_RETRY_ATTEMPTS": os.getenv("QUOTE_RETRY_ATTEMPTS"),
            "QUOTE_RETRY_DELAY_SEC": os.getenv("QUOTE_RETRY_DELAY_SEC"),
        }
        # unset values fall back to field defaults
        return cls.model_validate({k: v for k, v in raw.items() if v is not None})


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
