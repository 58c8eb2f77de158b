"""Service wiring.

Provider lists are built once per process: each adapter resolves its
availability (credential present or not) at construction, and the chains
skip the unavailable ones at call time.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from marketdesk.analysis.providers.llm import build_llm_providers
from marketdesk.analysis.providers.local import LocalAnalysisProvider
from marketdesk.analysis.service import AnalysisService
from marketdesk.config import settings
from marketdesk.fallback.synthesizer import FallbackSynthesizer, load_reference_prices
from marketdesk.market.providers.finnhub import FinnhubQuoteProvider
from marketdesk.market.providers.yahoo_finance import (
    YahooChartMetaQuoteProvider,
    YahooChartProvider,
    YahooCrumbChartProvider,
    YahooCrumbQuoteProvider,
)
from marketdesk.market.service import ChartService, QuoteService
from marketdesk.watchlist.service import WatchlistService


@lru_cache(maxsize=1)
def get_synthesizer() -> FallbackSynthesizer:
    return FallbackSynthesizer(load_reference_prices(settings.reference_prices_path or None))


@lru_cache(maxsize=1)
def get_quote_service() -> QuoteService:
    return QuoteService(
        [
            YahooCrumbQuoteProvider(),
            YahooChartMetaQuoteProvider(max_symbols=settings.scrape_max_symbols),
            FinnhubQuoteProvider(settings.finnhub_api_key),
        ],
        get_synthesizer(),
    )


@lru_cache(maxsize=1)
def get_chart_service() -> ChartService:
    return ChartService(
        [YahooChartProvider(), YahooCrumbChartProvider()],
        get_synthesizer(),
    )


@lru_cache(maxsize=1)
def get_analysis_service() -> AnalysisService:
    return AnalysisService(
        [*build_llm_providers(), LocalAnalysisProvider()],
        quotes=get_quote_service(),
        charts=get_chart_service(),
    )


@lru_cache(maxsize=1)
def get_watchlist_service() -> WatchlistService:
    return WatchlistService(settings.default_watchlist)


def init_services() -> None:
    """Build every service up front so provider availability is logged at startup."""
    get_quote_service()
    get_chart_service()
    get_analysis_service()
    get_watchlist_service()


QuoteServiceDep = Annotated[QuoteService, Depends(get_quote_service)]
ChartServiceDep = Annotated[ChartService, Depends(get_chart_service)]
AnalysisServiceDep = Annotated[AnalysisService, Depends(get_analysis_service)]
WatchlistDep = Annotated[WatchlistService, Depends(get_watchlist_service)]
