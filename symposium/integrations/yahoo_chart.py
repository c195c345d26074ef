from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import requests


class YahooChartClient:
    """Yahoo Finance v8 chart endpoint client returning the ``meta`` block for a symbol."""

    _ENDPOINTS = (
        "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}",
        "https://query2.finance.yahoo.com/v8/finance/chart/{symbol}",
    )
    _HEADERS = {
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
    }

    def __init__(
        self,
        session: Optional[Any] = None,
        endpoints: Optional[Sequence[str]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.session = session or requests
        self.endpoints = tuple(self._ENDPOINTS if endpoints is None else endpoints)
        if not self.endpoints:
            raise ValueError("at least one chart endpoint is required")
        self.headers = dict(headers or self._HEADERS)

    def get_chart_meta(self, symbol: str, timeout: float = 10.0) -> Dict[str, Any]:
        errors: list[Exception] = []
        for template in self.endpoints:
            try:
                response = self.session.get(
                    template.format(symbol=symbol),
                    headers=self.headers,
                    params={"interval": "1d", "range": "1d"},
                    timeout=timeout,
                )
                response.raise_for_status()
                # consent / rate-limit pages come back as HTML with a 200
                payload = response.json()
            except (requests.RequestException, ValueError) as exc:
                errors.append(exc)
                continue
            return self._extract_meta(symbol, payload)

        raise errors[-1]

    @staticmethod
    def _extract_meta(symbol: str, payload: Any) -> Dict[str, Any]:
        chart = payload.get("chart") if isinstance(payload, dict) else None
        results = chart.get("result") if isinstance(chart, dict) else None
        if not results or not isinstance(results[0], dict):
            raise ValueError(f"missing chart result for {symbol}")

        meta = results[0].get("meta")
        if not isinstance(meta, dict):
            raise ValueError(f"missing chart meta for {symbol}")
        return meta
