from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from symposium.api.routes import router
from symposium.config.settings import Settings, get_settings
from symposium.integrations.github_contents import GitHubContentsClient
from symposium.integrations.yahoo_chart import YahooChartClient
from symposium.schemas.documents import EventsDocument, LuminariesDocument, SponsorsDocument
from symposium.services.default_documents import default_events, default_luminaries, default_sponsors
from symposium.services.document_store import DocumentStore
from symposium.services.market_data import MarketDataOrchestrator
from symposium.services.market_feed import MarketFeed
from symposium.services.quote_source import QuoteSourceAdapter
from symposium.services.retry import RetryPolicy


def build_orchestrator(settings: Settings) -> MarketDataOrchestrator:
    if settings.quote_retry_budget_sec >= settings.MARKET_ITEM_TIMEOUT_SEC:
        print(
            "[MARKET][retry_budget_exceeds_item_timeout] "
            f"budget_sec={settings.quote_retry_budget_sec} item_timeout_sec={settings.MARKET_ITEM_TIMEOUT_SEC}",
            flush=True,
        )
    adapter = QuoteSourceAdapter(
        YahooChartClient(),
        quote_timeout_sec=settings.QUOTE_HTTP_TIMEOUT_SEC,
        currency_timeout_sec=settings.CURRENCY_HTTP_TIMEOUT_SEC,
    )
    return MarketDataOrchestrator(
        adapter=adapter,
        item_timeout_sec=settings.MARKET_ITEM_TIMEOUT_SEC,
        quote_retry=RetryPolicy(
            max_attempts=settings.QUOTE_RETRY_ATTEMPTS,
            delay_sec=settings.QUOTE_RETRY_DELAY_SEC,
        ),
    )


def build_document_stores(settings: Settings, client=None) -> dict[str, DocumentStore]:
    if client is None and settings.document_store_configured:
        client = GitHubContentsClient(
            owner=settings.GITHUB_OWNER,
            repo=settings.GITHUB_REPO,
            branch=settings.GITHUB_BRANCH,
            token=settings.GITHUB_TOKEN,
        )
    if client is None:
        print("[DOCS][store_disabled] reason=GITHUB_OWNER/GITHUB_REPO not set", flush=True)
    elif not client.can_write:
        print("[DOCS][read_only] reason=GITHUB_TOKEN not set", flush=True)

    data_dir = settings.DOCUMENT_DATA_DIR.strip("/")
    specs = (
        ("events", EventsDocument, default_events),
        ("sponsors", SponsorsDocument, default_sponsors),
        ("luminaries", LuminariesDocument, default_luminaries),
    )
    return {
        name: DocumentStore(name, f"{data_dir}/{name}.json", model, factory, client=client)
        for name, model, factory in specs
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        yield
    finally:
        app.state.market_feed.close()
        print("[FEED][shutdown]", flush=True)


def create_app(
    settings: Settings | None = None,
    orchestrator: MarketDataOrchestrator | None = None,
    document_client=None,
) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title="Finance Symposium API", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router, prefix="/api")

    app.state.settings = settings
    app.state.market_feed = MarketFeed(
        orchestrator or build_orchestrator(settings),
        interval_sec=settings.MARKET_REFRESH_INTERVAL_SEC,
    )
    app.state.document_stores = build_document_stores(settings, document_client)
    return app


app = create_app()


def run(host: str = "0.0.0.0", port: int = 8000) -> None:
    import uvicorn

    uvicorn.run("symposium.main:app", host=host, port=port)


if __name__ == "__main__":
    run()
