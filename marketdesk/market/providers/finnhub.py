"""Finnhub quote adapter (free tier, API-key authenticated)."""

import asyncio

import requests
import structlog

from marketdesk.exceptions import ConfigurationError, ProviderError, ShapeError
from marketdesk.market import http
from marketdesk.market.normalize import quote_from_finnhub
from marketdesk.market.providers.base import QuoteProvider
from marketdesk.market.schemas import Quote

logger = structlog.get_logger()

QUOTE_URL = "https://finnhub.io/api/v1/quote"


def finnhub_symbol(symbol: str) -> str:
    """BTC-USD → BINANCE:BTCUSDT; equities pass through unchanged."""
    if "-USD" in symbol:
        return f"BINANCE:{symbol.replace('-USD', '')}USDT"
    return symbol


class FinnhubQuoteProvider(QuoteProvider):
    name = "finnhub"

    def __init__(
        self,
        api_key: str,
        session_factory: http.SessionFactory = requests.Session,
    ) -> None:
        self._api_key = api_key
        self._session_factory = session_factory
        if not api_key:
            logger.info("finnhub_unavailable", reason="FINNHUB_API_KEY not configured")

    @property
    def available(self) -> bool:
        return bool(self._api_key)

    async def fetch(self, symbols: list[str]) -> list[Quote]:
        if not self._api_key:
            raise ConfigurationError(self.name, "no FINNHUB_API_KEY")

        results = await asyncio.gather(*(asyncio.to_thread(self._lookup, s) for s in symbols))
        quotes = [q for q in results if q is not None]
        if not quotes:
            raise ShapeError(self.name, "no Finnhub results")
        return quotes

    def _lookup(self, symbol: str) -> Quote | None:
        try:
            with self._session_factory() as session:
                data = http.get_json(
                    session,
                    self.name,
                    QUOTE_URL,
                    params={"symbol": finnhub_symbol(symbol), "token": self._api_key},
                )
            return quote_from_finnhub(symbol, data, self.name)
        except ProviderError as exc:
            logger.debug("finnhub_lookup_failed", symbol=symbol, error=exc.message)
            return None
