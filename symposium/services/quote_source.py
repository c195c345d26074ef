from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

import requests

from symposium.schemas.market import CurrencyRate, Quote
from symposium.services.instruments import display_names, find_currency
from symposium.services.market_hours import is_market_open


@dataclass(frozen=True)
class FetchFailure:
    """Sentinel returned instead of a record when the provider could not be used."""

    symbol: str
    reason: str
    retryable: bool = True


def _positive_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number) or number <= 0:
        return None
    return number


def _caused_by_reset(exc: BaseException) -> bool:
    seen: BaseException | None = exc
    depth = 0
    while seen is not None and depth < 8:
        if isinstance(seen, ConnectionResetError):
            return True
        nested = [a for a in getattr(seen, "args", ()) if isinstance(a, BaseException)]
        seen = nested[0] if nested else (seen.__cause__ or seen.__context__)
        depth += 1
    return False


def classify_error(symbol: str, exc: Exception) -> FetchFailure:
    if isinstance(exc, requests.Timeout):
        return FetchFailure(symbol, f"timeout: {exc}", retryable=True)
    if isinstance(exc, requests.HTTPError):
        code = getattr(getattr(exc, "response", None), "status_code", None)
        retryable = isinstance(code, int) and (code == 429 or code >= 500)
        return FetchFailure(symbol, f"http {code}", retryable=retryable)
    if isinstance(exc, requests.ConnectionError):
        # reset mid-stream is transient; refused / unresolved host means no route
        if _caused_by_reset(exc):
            return FetchFailure(symbol, f"connection reset: {exc}", retryable=True)
        return FetchFailure(symbol, f"unreachable: {exc}", retryable=False)
    if isinstance(exc, ValueError):
        # covers requests.JSONDecodeError; an HTML body will not turn into JSON on retry
        return FetchFailure(symbol, f"invalid payload: {exc}", retryable=False)
    if isinstance(exc, requests.RequestException):
        return FetchFailure(symbol, f"request error: {exc}", retryable=True)
    return FetchFailure(symbol, f"invalid payload: {exc}", retryable=False)


class QuoteSourceAdapter:
    """Normalises provider chart payloads into Quote / CurrencyRate records.

    Never raises for transport or payload problems; a ``FetchFailure`` is
    returned instead so the caller can decide between retry and fallback.
    """

    def __init__(
        self,
        chart_client,
        *,
        market_open_checker: Callable[[], bool] | None = None,
        quote_timeout_sec: float = 10.0,
        currency_timeout_sec: float = 8.0,
    ) -> None:
        self.chart_client = chart_client
        self.market_open_checker = market_open_checker or is_market_open
        self.quote_timeout_sec = quote_timeout_sec
        self.currency_timeout_sec = currency_timeout_sec

    def _get_meta(self, symbol: str, timeout: float) -> dict | FetchFailure:
        try:
            meta = self.chart_client.get_chart_meta(symbol, timeout=timeout)
        except Exception as exc:
            failure = classify_error(symbol, exc)
            print(
                f"[MARKET][provider_error] symbol={symbol} retryable={int(failure.retryable)} "
                f"reason={failure.reason}",
                flush=True,
            )
            return failure
        if not isinstance(meta, dict):
            return FetchFailure(symbol, "invalid payload: meta is not an object", retryable=False)
        return meta

    def fetch_quote(self, symbol: str) -> Quote | FetchFailure:
        meta = self._get_meta(symbol, self.quote_timeout_sec)
        if isinstance(meta, FetchFailure):
            return meta

        previous_close = _positive_float(meta.get("previousClose"))
        price = _positive_float(meta.get("regularMarketPrice")) or previous_close
        if price is None:
            return FetchFailure(symbol, "invalid payload: missing or non-positive price", retryable=False)

        change = 0.0
        change_percent = 0.0
        if previous_close is not None:
            change = price - previous_close
            change_percent = change / previous_close * 100

        day_high = _positive_float(meta.get("regularMarketDayHigh")) or price
        day_low = _positive_float(meta.get("regularMarketDayLow")) or price
        name, display_name = display_names(symbol, meta.get("longName"))

        return Quote(
            symbol=symbol,
            name=name,
            display_name=display_name,
            price=round(price, 2),
            change=round(change, 2),
            change_percent=round(change_percent, 2),
            timestamp=datetime.now(timezone.utc),
            market_state="REGULAR" if self.market_open_checker() else "CLOSED",
            day_high=round(max(day_high, price), 2),
            day_low=round(min(day_low, price), 2),
        )

    def fetch_currency(self, symbol: str) -> CurrencyRate | FetchFailure:
        meta = self._get_meta(symbol, self.currency_timeout_sec)
        if isinstance(meta, FetchFailure):
            return meta

        rate = _positive_float(meta.get("regularMarketPrice")) or _positive_float(meta.get("previousClose"))
        if rate is None:
            return FetchFailure(symbol, "invalid payload: missing or non-positive rate", retryable=False)
        previous_close = _positive_float(meta.get("previousClose")) or rate

        change = rate - previous_close
        change_percent = change / previous_close * 100
        pair = find_currency(symbol)

        return CurrencyRate(
            symbol=symbol,
            name=pair.name if pair else symbol,
            rate=round(rate, 4),
            change=round(change, 4),
            change_percent=round(change_percent, 2),
            timestamp=datetime.now(timezone.utc),
        )
