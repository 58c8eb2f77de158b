from collections.abc import Iterable, Sequence

import structlog

from marketdesk.events import EventSink
from marketdesk.exceptions import ValidationError
from marketdesk.fallback.chain import FallbackChain
from marketdesk.fallback.synthesizer import FallbackSynthesizer
from marketdesk.market import indicators
from marketdesk.market.providers.base import ChartProvider, QuoteProvider
from marketdesk.market.schemas import (
    DEFAULT_RANGE,
    FALLBACK_PROVIDER,
    INTERVALS,
    RANGES,
    ChartPoint,
    ChartRequest,
    ChartSeries,
    IndicatorSeries,
    Quote,
    QuoteBatch,
)

logger = structlog.get_logger()


def normalize_symbols(symbols: Iterable[str]) -> list[str]:
    """Trim and upper-case symbols, dropping blanks and repeats but keeping order."""
    seen: dict[str, None] = {}
    for raw in symbols:
        symbol = raw.strip().upper()
        if symbol:
            seen.setdefault(symbol, None)
    return list(seen)


class QuoteService:
    def __init__(
        self,
        providers: Sequence[QuoteProvider],
        synthesizer: FallbackSynthesizer,
        sinks: Sequence[EventSink] | None = None,
    ) -> None:
        self._chain: FallbackChain[list[Quote]] = FallbackChain(
            "quote", providers, is_valid=lambda quotes: len(quotes) > 0, sinks=sinks
        )
        self._synthesizer = synthesizer

    @property
    def chain(self) -> FallbackChain[list[Quote]]:
        return self._chain

    async def get_quotes(self, symbols: Iterable[str]) -> QuoteBatch:
        symbols = normalize_symbols(symbols)
        if not symbols:
            raise ValidationError("At least one symbol is required")

        logger.info("quotes_get", symbols=symbols)
        outcome = await self._chain.run(symbols)
        if outcome is not None:
            logger.info("quotes_served", provider=outcome.provider, count=len(outcome.value))
            return QuoteBatch(result=outcome.value, provider=outcome.provider)

        logger.warning("quotes_using_fallback", symbols=symbols)
        return QuoteBatch(result=self._synthesizer.quotes(symbols), provider=FALLBACK_PROVIDER)

    async def get_quote(self, symbol: str) -> Quote:
        """Single-symbol convenience; falls back to an estimate if the batch omits it."""
        batch = await self.get_quotes([symbol])
        wanted = normalize_symbols([symbol])[0]
        for quote in batch.result:
            if quote.symbol.upper() == wanted:
                return quote
        return self._synthesizer.quote(wanted)


class ChartService:
    def __init__(
        self,
        providers: Sequence[ChartProvider],
        synthesizer: FallbackSynthesizer,
        sinks: Sequence[EventSink] | None = None,
    ) -> None:
        self._chain: FallbackChain[list[ChartPoint]] = FallbackChain(
            "chart", providers, is_valid=lambda points: len(points) > 0, sinks=sinks
        )
        self._synthesizer = synthesizer

    @property
    def chain(self) -> FallbackChain[list[ChartPoint]]:
        return self._chain

    async def get_chart(
        self, symbol: str, range_: str = DEFAULT_RANGE, interval: str | None = None
    ) -> ChartSeries:
        request = _chart_request(symbol, range_, interval)
        logger.info(
            "chart_get", symbol=request.symbol, range=request.range, interval=request.interval
        )

        outcome = await self._chain.run(request)
        if outcome is not None:
            points, provider = outcome.value, outcome.provider
        else:
            logger.warning("chart_using_fallback", symbol=request.symbol, range=request.range)
            points = self._synthesizer.chart(request.symbol, request.range)
            provider = FALLBACK_PROVIDER

        return ChartSeries(
            symbol=request.symbol,
            range=request.range,
            interval=request.interval,
            points=points,
            provider=provider,
        )

    async def get_indicators(
        self, symbol: str, range_: str = DEFAULT_RANGE, interval: str | None = None
    ) -> IndicatorSeries:
        series = await self.get_chart(symbol, range_, interval)
        return IndicatorSeries(
            symbol=series.symbol,
            range=series.range,
            interval=series.interval,
            points=indicators.enrich(series.points),
            provider=series.provider,
        )


def _chart_request(symbol: str, range_: str, interval: str | None) -> ChartRequest:
    symbols = normalize_symbols([symbol])
    if not symbols:
        raise ValidationError("A symbol is required")
    if range_ not in RANGES:
        raise ValidationError(f"Invalid range: {range_}. Must be one of {', '.join(RANGES)}")
    interval = interval or RANGES[range_]
    if interval not in INTERVALS:
        raise ValidationError(
            f"Invalid interval: {interval}. Must be one of {', '.join(sorted(INTERVALS))}"
        )
    return ChartRequest(symbol=symbols[0], range=range_, interval=interval)
