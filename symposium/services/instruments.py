from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Instrument:
    symbol: str
    name: str
    display_name: str
    base_price: float
    volatility: float
    is_index: bool = False


@dataclass(frozen=True)
class CurrencyPair:
    symbol: str
    name: str
    base_rate: float


STOCKS: tuple[Instrument, ...] = (
    Instrument("RELIANCE.NS", "RELIANCE", "Reliance Industries", 3090.0, 1.2),
    Instrument("TCS.NS", "TCS", "Tata Consultancy Services", 4160.0, 1.0),
    Instrument("HDFCBANK.NS", "HDFC BANK", "HDFC Bank Ltd", 1725.0, 1.1),
    Instrument("INFY.NS", "INFOSYS", "Infosys Limited", 1895.0, 1.3),
    Instrument("ICICIBANK.NS", "ICICI BANK", "ICICI Bank Ltd", 1315.0, 1.4),
    Instrument("HINDUNILVR.NS", "HUL", "Hindustan Unilever", 2490.0, 0.9),
    Instrument("ITC.NS", "ITC", "ITC Limited", 482.0, 1.5),
    Instrument("KOTAKBANK.NS", "KOTAK", "Kotak Mahindra Bank", 1792.0, 1.3),
    Instrument("^NSEI", "NIFTY 50", "NIFTY 50 Index", 24750.0, 0.8, is_index=True),
    Instrument("^BSESN", "SENSEX", "BSE Sensex", 81200.0, 0.8, is_index=True),
)

CURRENCIES: tuple[CurrencyPair, ...] = (
    CurrencyPair("USDINR=X", "USD/INR", 84.25),
    CurrencyPair("EURINR=X", "EUR/INR", 91.75),
    CurrencyPair("GBPINR=X", "GBP/INR", 103.45),
    CurrencyPair("JPYINR=X", "JPY/INR", 0.56),
)

_STOCKS_BY_SYMBOL = {s.symbol: s for s in STOCKS}
_CURRENCIES_BY_SYMBOL = {c.symbol: c for c in CURRENCIES}


def find_instrument(symbol: str) -> Instrument | None:
    return _STOCKS_BY_SYMBOL.get(symbol)


def find_currency(symbol: str) -> CurrencyPair | None:
    return _CURRENCIES_BY_SYMBOL.get(symbol)


def is_index_symbol(symbol: str) -> bool:
    instrument = find_instrument(symbol)
    if instrument is not None and instrument.is_index:
        return True
    return symbol.startswith("^")


def display_names(symbol: str, fallback_name: str | None = None) -> tuple[str, str]:
    """Return (name, display_name) for a symbol, using the exchange suffix-less ticker when unknown."""
    instrument = find_instrument(symbol)
    if instrument is not None:
        return instrument.name, instrument.display_name
    bare = symbol
    for suffix in (".NS", ".BSE"):
        if bare.endswith(suffix):
            bare = bare[: -len(suffix)]
            break
    name = fallback_name or bare
    return name, name
