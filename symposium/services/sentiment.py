from __future__ import annotations

from typing import Iterable

from symposium.schemas.market import MarketSentiment, Quote
from symposium.services.instruments import is_index_symbol

BULLISH_RATIO = 0.6
BEARISH_RATIO = 0.4


def classify_ratio(ratio: float) -> str:
    if ratio >= BULLISH_RATIO:
        return "bullish"
    if ratio <= BEARISH_RATIO:
        return "bearish"
    return "neutral"


def compute_sentiment(quotes: Iterable[Quote]) -> MarketSentiment:
    """Advance/decline breadth over individual stocks; indices are left out."""
    stocks = [q for q in quotes if not is_index_symbol(q.symbol)]
    positive = sum(1 for q in stocks if q.change > 0)
    total = len(stocks)
    ratio = positive / total if total > 0 else 0.5

    return MarketSentiment(
        sentiment=classify_ratio(ratio),
        advance_decline_ratio=round(ratio, 4),
        positive_stocks=positive,
        total_stocks=total,
    )
