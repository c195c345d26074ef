from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


MarketState = Literal["REGULAR", "CLOSED"]


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Quote(_WireModel):
    symbol: str
    name: str
    display_name: str | None = None
    price: float
    change: float = 0.0
    change_percent: float = 0.0
    timestamp: datetime
    market_state: MarketState = "CLOSED"
    day_high: float
    day_low: float


class CurrencyRate(_WireModel):
    symbol: str
    name: str
    rate: float
    change: float = 0.0
    change_percent: float = 0.0
    timestamp: datetime


class MarketSentiment(_WireModel):
    sentiment: Literal["bullish", "bearish", "neutral"]
    advance_decline_ratio: float
    positive_stocks: int
    total_stocks: int


class SnapshotMetadata(_WireModel):
    processing_time_ms: int = 0
    stocks_validated: int = 0
    stocks_total: int = 0
    currencies_validated: int = 0
    currencies_total: int = 0
    source: str = "yahoo-finance"
    version: str = "2.0"
    fallback_symbols: list[str] = Field(default_factory=list)


class MarketSnapshot(_WireModel):
    quotes: list[Quote]
    currencies: list[CurrencyRate]
    sentiment: MarketSentiment
    timestamp: datetime
    market_open: bool
    fallback: bool = False
    metadata: SnapshotMetadata = Field(default_factory=SnapshotMetadata)


class MarketDataResponse(_WireModel):
    stocks: list[Quote]
    currencies: list[CurrencyRate]
    sentiment: MarketSentiment
    timestamp: datetime
    market_state: Literal["OPEN", "CLOSED"]
    fallback: bool = False
    metadata: SnapshotMetadata

    @classmethod
    def from_snapshot(cls, snapshot: MarketSnapshot) -> "MarketDataResponse":
        return cls(
            stocks=snapshot.quotes,
            currencies=snapshot.currencies,
            sentiment=snapshot.sentiment,
            timestamp=snapshot.timestamp,
            market_state="OPEN" if snapshot.market_open else "CLOSED",
            fallback=snapshot.fallback,
            metadata=snapshot.metadata,
        )
