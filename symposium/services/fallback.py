from __future__ import annotations

import random
from datetime import datetime, timezone

from symposium.schemas.market import CurrencyRate, Quote
from symposium.services.instruments import display_names, find_currency, find_instrument

DEFAULT_BASE_PRICE = 1000.0
DEFAULT_VOLATILITY = 1.0
DEFAULT_BASE_RATE = 1.0
CLOSED_SESSION_DAMPING = 5.0
DAY_RANGE_PCT = 1.5
CURRENCY_MAX_MOVE_PCT = 1.0


class FallbackGenerator:
    """Synthetic but plausible quotes for when the provider cannot be used.

    Always returns a record; unknown symbols use a neutral base price.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()

    def synthetic_quote(self, symbol: str, session_open: bool) -> Quote:
        instrument = find_instrument(symbol)
        base_price = instrument.base_price if instrument else DEFAULT_BASE_PRICE
        volatility = instrument.volatility if instrument else DEFAULT_VOLATILITY
        if not session_open:
            volatility /= CLOSED_SESSION_DAMPING

        change_percent = self.rng.uniform(-1.0, 1.0) * volatility
        change = base_price * change_percent / 100
        price = base_price + change
        name, display_name = display_names(symbol)

        return Quote(
            symbol=symbol,
            name=name,
            display_name=display_name,
            price=round(price, 2),
            change=round(change, 2),
            change_percent=round(change_percent, 2),
            timestamp=datetime.now(timezone.utc),
            market_state="REGULAR" if session_open else "CLOSED",
            day_high=round(price * (1 + DAY_RANGE_PCT / 100), 2),
            day_low=round(price * (1 - DAY_RANGE_PCT / 100), 2),
        )

    def synthetic_currency(self, symbol: str) -> CurrencyRate:
        pair = find_currency(symbol)
        base_rate = pair.base_rate if pair else DEFAULT_BASE_RATE

        move_pct = self.rng.uniform(-1.0, 1.0) * CURRENCY_MAX_MOVE_PCT
        rate = base_rate * (1 + move_pct / 100)
        change = rate - base_rate

        return CurrencyRate(
            symbol=symbol,
            name=pair.name if pair else symbol,
            rate=round(rate, 4),
            change=round(change, 4),
            change_percent=round(change / base_rate * 100, 2),
            timestamp=datetime.now(timezone.utc),
        )
