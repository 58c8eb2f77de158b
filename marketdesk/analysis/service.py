from collections.abc import Sequence

import structlog

from marketdesk.analysis.prompts import render_prompt
from marketdesk.analysis.providers.base import AnalysisProvider
from marketdesk.analysis.schemas import (
    AnalysisContext,
    AnalysisFailure,
    AnalysisJob,
    AnalysisResult,
    Signal,
)
from marketdesk.events import EventSink
from marketdesk.fallback.chain import FallbackChain
from marketdesk.market import indicators
from marketdesk.market.schemas import ChartPoint, Quote
from marketdesk.market.service import ChartService, QuoteService

logger = structlog.get_logger()

# Chart the symbol-only analysis derives RSI and Bollinger bands from.
CONTEXT_RANGE = "3mo"


def build_context(quote: Quote, points: Sequence[ChartPoint]) -> AnalysisContext:
    """Assemble an analysis context from a quote and its recent chart."""
    band = indicators.bollinger(points)[-1] if points else indicators.Band()
    return AnalysisContext(
        symbol=quote.symbol,
        price=quote.price,
        change=quote.change_percent,
        pe=quote.trailing_pe,
        forward_pe=quote.forward_pe,
        high52=quote.fifty_two_week_high,
        low52=quote.fifty_two_week_low,
        sma50=quote.fifty_day_average,
        sma200=quote.two_hundred_day_average,
        rsi=indicators.latest(indicators.rsi(points)) or 50.0,
        bb_upper=band.upper,
        bb_lower=band.lower,
        volume=quote.volume,
        avg_volume=quote.average_volume,
    )


class AnalysisService:
    def __init__(
        self,
        providers: Sequence[AnalysisProvider],
        quotes: QuoteService | None = None,
        charts: ChartService | None = None,
        sinks: Sequence[EventSink] | None = None,
    ) -> None:
        self._chain: FallbackChain[AnalysisResult] = FallbackChain(
            "analysis",
            providers,
            is_valid=lambda result: result.signal in Signal,
            sinks=sinks,
        )
        self._quotes = quotes
        self._charts = charts

    @property
    def chain(self) -> FallbackChain[AnalysisResult]:
        return self._chain

    async def analyze(self, context: AnalysisContext) -> AnalysisResult | AnalysisFailure:
        logger.info("analysis_requested", symbol=context.symbol)
        job = AnalysisJob(context=context, prompt=render_prompt(context))

        outcome = await self._chain.run(job)
        if outcome is None:
            tried = ", ".join(p.name for p in self._chain.providers if p.available)
            logger.error("analysis_failed", symbol=context.symbol)
            return AnalysisFailure(
                error="All AI providers failed",
                detail=f"Tried: {tried or 'none'}",
            )

        logger.info(
            "analysis_served",
            symbol=context.symbol,
            provider=outcome.provider,
            signal=str(outcome.value.signal),
        )
        return outcome.value.model_copy(update={"provider": outcome.provider})

    async def analyze_symbol(self, symbol: str) -> AnalysisResult | AnalysisFailure:
        """Analyze ``symbol`` from freshly fetched quote and chart data."""
        if self._quotes is None or self._charts is None:
            return AnalysisFailure(error="Market data is not configured for symbol analysis")

        quote = await self._quotes.get_quote(symbol)
        series = await self._charts.get_chart(quote.symbol, CONTEXT_RANGE)
        return await self.analyze(build_context(quote, series.points))
