from __future__ import annotations

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime, timezone
from typing import Callable, Sequence

from symposium.schemas.market import CurrencyRate, MarketSnapshot, Quote, SnapshotMetadata
from symposium.services.fallback import FallbackGenerator
from symposium.services.instruments import CURRENCIES, STOCKS, CurrencyPair, Instrument
from symposium.services.market_hours import is_market_open
from symposium.services.quote_source import FetchFailure, QuoteSourceAdapter
from symposium.services.retry import RetryOutcome, RetryPolicy
from symposium.services.sentiment import compute_sentiment
from symposium.services.validator import validate_currencies, validate_quotes

PROVIDER_SOURCE = "yahoo-finance"


def _should_retry(result) -> bool:
    return isinstance(result, FetchFailure) and result.retryable


class MarketDataOrchestrator:
    """Fetches every configured instrument and currency pair in one concurrent wave.

    Each item races its own timeout; an item that times out or fails is
    replaced by its synthetic counterpart, so a cycle never fails as a whole.
    """

    def __init__(
        self,
        *,
        adapter: QuoteSourceAdapter,
        fallback: FallbackGenerator | None = None,
        instruments: Sequence[Instrument] = STOCKS,
        currencies: Sequence[CurrencyPair] = CURRENCIES,
        market_open_checker: Callable[[], bool] | None = None,
        item_timeout_sec: float = 8.0,
        quote_retry: RetryPolicy | None = None,
        currency_retry: RetryPolicy | None = None,
    ) -> None:
        self.adapter = adapter
        self.fallback = fallback or FallbackGenerator()
        self.instruments = tuple(instruments)
        self.currencies = tuple(currencies)
        self.market_open_checker = market_open_checker or is_market_open
        self.item_timeout_sec = item_timeout_sec
        self.quote_retry = quote_retry or RetryPolicy(max_attempts=3, delay_sec=1.0)
        self.currency_retry = currency_retry or RetryPolicy(max_attempts=1)

        self._lock = threading.Lock()
        self.cycles = 0
        self.provider_items = 0
        self.fallback_items = 0
        self.retries = 0
        self.timed_out_items = 0
        self.last_batch_target = 0
        self.last_batch_final = 0
        self.last_fallback_count = 0
        self.last_processing_ms = 0

    def _fetch_quote(self, symbol: str, abort_event: threading.Event) -> RetryOutcome:
        return self.quote_retry.run(
            lambda: self.adapter.fetch_quote(symbol),
            should_retry=_should_retry,
            abort_event=abort_event,
        )

    def _fetch_currency(self, symbol: str, abort_event: threading.Event) -> RetryOutcome:
        return self.currency_retry.run(
            lambda: self.adapter.fetch_currency(symbol),
            should_retry=_should_retry,
            abort_event=abort_event,
        )

    @staticmethod
    def _settled(symbol: str, future: Future, done: set) -> tuple[object | None, int]:
        """Return (record or None, retries used) for one item; unfinished items yield None."""
        if future not in done:
            return None, 0
        try:
            outcome = future.result()
        except Exception as exc:
            print(f"[MARKET][item_error] symbol={symbol} error={exc}", flush=True)
            return None, 0
        return outcome.result, max(outcome.attempts - 1, 0)

    def fetch_all(
        self,
        instruments: Sequence[Instrument] | None = None,
        currencies: Sequence[CurrencyPair] | None = None,
    ) -> MarketSnapshot:
        instruments = tuple(self.instruments if instruments is None else instruments)
        currencies = tuple(self.currencies if currencies is None else currencies)
        started = time.monotonic()
        session_open = bool(self.market_open_checker())
        abort_event = threading.Event()

        executor = ThreadPoolExecutor(
            max_workers=max(len(instruments) + len(currencies), 1),
            thread_name_prefix="market-fetch",
        )
        try:
            quote_futures = [
                (item, executor.submit(self._fetch_quote, item.symbol, abort_event)) for item in instruments
            ]
            currency_futures = [
                (item, executor.submit(self._fetch_currency, item.symbol, abort_event)) for item in currencies
            ]
            all_futures = [f for _, f in quote_futures] + [f for _, f in currency_futures]
            done, not_done = wait(all_futures, timeout=self.item_timeout_sec)
        finally:
            # pending retries stop waiting; late responses are never read
            abort_event.set()
            executor.shutdown(wait=False, cancel_futures=True)

        fallback_symbols: list[str] = []
        retries = 0

        quotes: list[Quote] = []
        for item, future in quote_futures:
            record, used = self._settled(item.symbol, future, done)
            retries += used
            if isinstance(record, Quote):
                quotes.append(record)
            else:
                quotes.append(self.fallback.synthetic_quote(item.symbol, session_open))
                fallback_symbols.append(item.symbol)

        rates: list[CurrencyRate] = []
        for item, future in currency_futures:
            record, used = self._settled(item.symbol, future, done)
            retries += used
            if isinstance(record, CurrencyRate):
                rates.append(record)
            else:
                rates.append(self.fallback.synthetic_currency(item.symbol))
                fallback_symbols.append(item.symbol)

        target = len(instruments) + len(currencies)
        all_synthetic = target > 0 and len(fallback_symbols) == target
        snapshot = self._build_snapshot(
            quotes,
            rates,
            session_open=session_open,
            started=started,
            fallback_symbols=fallback_symbols,
            source="fallback" if all_synthetic else PROVIDER_SOURCE,
            fallback=all_synthetic,
            stocks_total=len(instruments),
            currencies_total=len(currencies),
        )

        with self._lock:
            self.cycles += 1
            self.provider_items += target - len(fallback_symbols)
            self.fallback_items += len(fallback_symbols)
            self.retries += retries
            self.timed_out_items += len(not_done)
            self.last_batch_target = target
            self.last_batch_final = len(snapshot.quotes) + len(snapshot.currencies)
            self.last_fallback_count = len(fallback_symbols)
            self.last_processing_ms = snapshot.metadata.processing_time_ms

        print(
            "[MARKET][batch_resolve] "
            f"market_open={session_open} target_count={target} "
            f"provider_count={target - len(fallback_symbols)} fallback_count={len(fallback_symbols)} "
            f"timed_out={len(not_done)} retries={retries} "
            f"sentiment={snapshot.sentiment.sentiment} elapsed_ms={snapshot.metadata.processing_time_ms}",
            flush=True,
        )
        if fallback_symbols:
            print(f"[MARKET][fallback_symbols] symbols={','.join(fallback_symbols)}", flush=True)

        return snapshot

    def fallback_snapshot(self, source: str = "fallback") -> MarketSnapshot:
        """Fully synthetic snapshot over the configured universe."""
        started = time.monotonic()
        session_open = bool(self.market_open_checker())
        quotes = [self.fallback.synthetic_quote(i.symbol, session_open) for i in self.instruments]
        rates = [self.fallback.synthetic_currency(c.symbol) for c in self.currencies]
        return self._build_snapshot(
            quotes,
            rates,
            session_open=session_open,
            started=started,
            fallback_symbols=[i.symbol for i in self.instruments] + [c.symbol for c in self.currencies],
            source=source,
            fallback=True,
            stocks_total=len(self.instruments),
            currencies_total=len(self.currencies),
        )

    @staticmethod
    def _build_snapshot(
        quotes: list[Quote],
        rates: list[CurrencyRate],
        *,
        session_open: bool,
        started: float,
        fallback_symbols: list[str],
        source: str,
        fallback: bool,
        stocks_total: int,
        currencies_total: int,
    ) -> MarketSnapshot:
        validated_quotes = validate_quotes(quotes)
        validated_rates = validate_currencies(rates)
        # sentiment always comes from the final validated set
        sentiment = compute_sentiment(validated_quotes)
        return MarketSnapshot(
            quotes=validated_quotes,
            currencies=validated_rates,
            sentiment=sentiment,
            timestamp=datetime.now(timezone.utc),
            market_open=session_open,
            fallback=fallback,
            metadata=SnapshotMetadata(
                processing_time_ms=int((time.monotonic() - started) * 1000),
                stocks_validated=len(validated_quotes),
                stocks_total=stocks_total,
                currencies_validated=len(validated_rates),
                currencies_total=currencies_total,
                source=source,
                fallback_symbols=list(fallback_symbols),
            ),
        )

    def metrics(self) -> dict[str, int]:
        with self._lock:
            return {
                "fetch_cycles": self.cycles,
                "provider_items": self.provider_items,
                "fallback_items": self.fallback_items,
                "retries": self.retries,
                "timed_out_items": self.timed_out_items,
                "batch_target_count": self.last_batch_target,
                "batch_final_count": self.last_batch_final,
                "batch_fallback_count": self.last_fallback_count,
                "last_processing_ms": self.last_processing_ms,
            }
