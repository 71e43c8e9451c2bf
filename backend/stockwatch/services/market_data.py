# backend/stockwatch/services/market_data.py
from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

import requests

from stockwatch.core.config import Settings, settings as default_settings
from stockwatch.core.errors import ConfigurationError, MarketDataError
from stockwatch.logger import get_logger
from stockwatch.utils.dates import parse_av_date

log = get_logger(__name__)

_SERIES_KEY = "Time Series (Daily)"


def parse_daily_series(data: Dict[str, Any]) -> Dict[str, float]:
    """Alpha Vantage daily payload -> {YYYY-MM-DD: close}"""
    series = data.get(_SERIES_KEY)
    if not isinstance(series, dict):
        raise MarketDataError(f"Alpha Vantage response missing {_SERIES_KEY!r}")

    out: Dict[str, float] = {}
    for day, row in series.items():
        try:
            parse_av_date(day)
            out[day] = float(row["4. close"])
        except (KeyError, TypeError, ValueError):
            # Skip malformed rows instead of raising
            log.debug("skipping malformed price row %r: %r", day, row)
            continue
    return out


class MarketDataClient:
    """Daily closing prices from Alpha Vantage."""

    def __init__(self, config: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.config = config or default_settings
        self.session = session or requests.Session()

    def _ensure_api_key(self) -> str:
        key = self.config.ALPHA_VANTAGE_API_KEY or ""
        if not key:
            raise ConfigurationError(
                "ALPHA_VANTAGE_API_KEY is missing. Put it in backend/.env as ALPHA_VANTAGE_API_KEY=..."
            )
        return key

    def get_price_history_sync(self, ticker: str) -> Dict[str, float]:
        """
        Return {date: close} for the ticker.
        Raises MarketDataError on provider errors or rate limiting.
        """
        key = self._ensure_api_key()
        params = {
            "function": "TIME_SERIES_DAILY",
            "symbol": ticker.upper(),
            "outputsize": self.config.ALPHA_VANTAGE_OUTPUT_SIZE,
            "apikey": key,
        }

        try:
            r = self.session.get(
                self.config.ALPHA_VANTAGE_URL, params=params, timeout=self.config.REQUEST_TIMEOUT_SECONDS
            )
            r.raise_for_status()
            data = r.json()
        except (requests.RequestException, ValueError) as e:
            raise MarketDataError(f"Alpha Vantage request failed for {ticker}: {e}") from e

        if not isinstance(data, dict):
            raise MarketDataError(f"Alpha Vantage returned unexpected payload for {ticker}")
        if "Error Message" in data:
            raise MarketDataError(f"Alpha Vantage error for {ticker}: {data['Error Message']}")
        for k in ("Note", "Information"):
            if k in data:
                raise MarketDataError(f"Alpha Vantage throttled request for {ticker}: {data[k]}")

        prices = parse_daily_series(data)
        log.info("price history for %s: %d points", ticker, len(prices))
        return prices

    async def get_price_history_for_ticker(self, ticker: str) -> Dict[str, float]:
        return await asyncio.to_thread(self.get_price_history_sync, ticker)
