"""Yahoo Finance adapters: two for quotes, two for charts.

Calls are blocking ``requests`` sessions run on worker threads, so each
adapter suspends only the task awaiting it.
"""

import asyncio
from typing import Any
from urllib.parse import quote as urlquote

import requests
import structlog

from marketdesk.exceptions import ProviderError, ShapeError
from marketdesk.market import http, yahoo
from marketdesk.market.normalize import (
    chart_result,
    points_from_chart,
    quote_from_chart_meta,
    quote_from_yahoo,
)
from marketdesk.market.providers.base import ChartProvider, QuoteProvider
from marketdesk.market.schemas import ChartPoint, ChartRequest, Quote

logger = structlog.get_logger()


def _chart_url(template: str, symbol: str) -> str:
    return template.format(symbol=urlquote(symbol, safe=""))


class YahooCrumbQuoteProvider(QuoteProvider):
    """v7 quote endpoint behind the cookie + crumb handshake."""

    name = "yahoo-crumb"

    def __init__(self, session_factory: http.SessionFactory = requests.Session) -> None:
        self._session_factory = session_factory

    async def fetch(self, symbols: list[str]) -> list[Quote]:
        return await asyncio.to_thread(self._fetch_sync, symbols)

    def _fetch_sync(self, symbols: list[str]) -> list[Quote]:
        with yahoo.open_session(self._session_factory) as session:
            crumb = yahoo.authenticate(session, self.name)
            payload = http.get_json(
                session,
                self.name,
                yahoo.QUOTE_URL,
                params={"symbols": ",".join(symbols), "crumb": crumb},
            )

        entries = _quote_entries(payload)
        if not entries:
            raise ShapeError(self.name, "quoteResponse.result is empty")

        quotes = []
        for entry in entries:
            try:
                quotes.append(quote_from_yahoo(entry, self.name))
            except ShapeError as exc:
                logger.debug("yahoo_quote_entry_skipped", error=exc.message)
        return quotes


def _quote_entries(payload: Any) -> list[dict]:
    if not isinstance(payload, dict):
        return []
    response = payload.get("quoteResponse") or {}
    return [e for e in response.get("result") or [] if isinstance(e, dict)]


class YahooChartMetaQuoteProvider(QuoteProvider):
    """Session-free quotes scraped from the metadata block of the v8 chart endpoint.

    One request per symbol, issued concurrently for at most ``max_symbols``
    symbols of the batch.
    """

    name = "yahoo-chart-meta"

    def __init__(
        self,
        session_factory: http.SessionFactory = requests.Session,
        max_symbols: int = 10,
    ) -> None:
        self._session_factory = session_factory
        self._max_symbols = max_symbols

    async def fetch(self, symbols: list[str]) -> list[Quote]:
        batch = symbols[: self._max_symbols]
        results = await asyncio.gather(*(asyncio.to_thread(self._lookup, s) for s in batch))
        quotes = [q for q in results if q is not None]
        if not quotes:
            raise ShapeError(self.name, "no valid chart-meta results")
        return quotes

    def _lookup(self, symbol: str) -> Quote | None:
        try:
            with yahoo.open_session(self._session_factory) as session:
                payload = http.get_json(
                    session,
                    self.name,
                    _chart_url(yahoo.CHART_URL, symbol),
                    params={"range": "1d", "interval": "1d"},
                )
            meta = payload["chart"]["result"][0]["meta"]
            return quote_from_chart_meta(symbol, meta, self.name)
        except (ProviderError, KeyError, IndexError, TypeError) as exc:
            logger.debug("chart_meta_lookup_failed", symbol=symbol, error=str(exc))
            return None


class YahooChartProvider(ChartProvider):
    """Public v8 chart endpoint, no authentication."""

    name = "yahoo-v8"

    def __init__(self, session_factory: http.SessionFactory = requests.Session) -> None:
        self._session_factory = session_factory

    async def fetch(self, request: ChartRequest) -> list[ChartPoint]:
        return await asyncio.to_thread(self._fetch_sync, request)

    def _fetch_sync(self, request: ChartRequest) -> list[ChartPoint]:
        with yahoo.open_session(self._session_factory) as session:
            payload = http.get_json(
                session,
                self.name,
                _chart_url(yahoo.CHART_URL, request.symbol),
                params={
                    "range": request.range,
                    "interval": request.interval,
                    "includePrePost": "false",
                },
            )
        return points_from_chart(chart_result(payload, self.name), request.range)


class YahooCrumbChartProvider(ChartProvider):
    """v8 chart endpoint on query2, authenticated with cookie + crumb."""

    name = "yahoo-crumb"

    def __init__(self, session_factory: http.SessionFactory = requests.Session) -> None:
        self._session_factory = session_factory

    async def fetch(self, request: ChartRequest) -> list[ChartPoint]:
        return await asyncio.to_thread(self._fetch_sync, request)

    def _fetch_sync(self, request: ChartRequest) -> list[ChartPoint]:
        with yahoo.open_session(self._session_factory) as session:
            crumb = yahoo.authenticate(session, self.name)
            payload = http.get_json(
                session,
                self.name,
                _chart_url(yahoo.CRUMB_CHART_URL, request.symbol),
                params={"range": request.range, "interval": request.interval, "crumb": crumb},
            )
        return points_from_chart(chart_result(payload, self.name), request.range)
