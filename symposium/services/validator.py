"""Repairs implausible quote / currency values in place of rejecting them.

Every transform here is pure and idempotent: feeding its output back in
returns an equal record.
"""
from __future__ import annotations

import math
from typing import Iterable

from symposium.schemas.market import CurrencyRate, Quote
from symposium.services.instruments import find_currency

PLACEHOLDER_PRICE = 1000.0
MAX_CHANGE_PCT = 20.0
CLAMPED_CHANGE_PCT = 5.0


def _finite(value: float) -> bool:
    return not (math.isnan(value) or math.isinf(value))


def validate_quote(quote: Quote) -> Quote:
    price = quote.price
    change = quote.change if _finite(quote.change) else 0.0
    change_percent = quote.change_percent if _finite(quote.change_percent) else 0.0

    if not _finite(price) or price <= 0:
        price = PLACEHOLDER_PRICE
        change = 0.0
        change_percent = 0.0

    if abs(change_percent) > MAX_CHANGE_PCT:
        change_percent = math.copysign(CLAMPED_CHANGE_PCT, change_percent)
        change = price * change_percent / 100

    day_high = quote.day_high if _finite(quote.day_high) and quote.day_high > 0 else price
    day_low = quote.day_low if _finite(quote.day_low) and quote.day_low > 0 else price
    if day_high < day_low:
        day_high, day_low = day_low, day_high
    day_high = max(day_high, price)
    day_low = min(day_low, price)

    updates = {
        "price": price,
        "change": change,
        "change_percent": change_percent,
        "day_high": day_high,
        "day_low": day_low,
    }
    return quote.model_copy(update=updates)


def validate_quotes(quotes: Iterable[Quote]) -> list[Quote]:
    out: list[Quote] = []
    for quote in quotes:
        fixed = validate_quote(quote)
        if abs(quote.change_percent) > MAX_CHANGE_PCT:
            print(
                f"[MARKET][validate_clamp] symbol={quote.symbol} "
                f"raw_change_pct={quote.change_percent} clamped={fixed.change_percent}",
                flush=True,
            )
        out.append(fixed)
    return out


def validate_currency(rate: CurrencyRate) -> CurrencyRate:
    if _finite(rate.rate) and rate.rate > 0:
        change = rate.change if _finite(rate.change) else 0.0
        change_percent = rate.change_percent if _finite(rate.change_percent) else 0.0
        return rate.model_copy(update={"change": change, "change_percent": change_percent})

    pair = find_currency(rate.symbol)
    return rate.model_copy(
        update={
            "rate": pair.base_rate if pair else 1.0,
            "change": 0.0,
            "change_percent": 0.0,
        }
    )


def validate_currencies(rates: Iterable[CurrencyRate]) -> list[CurrencyRate]:
    return [validate_currency(r) for r in rates]
