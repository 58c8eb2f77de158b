from marketdesk.market.providers.base import ChartProvider, QuoteProvider
from marketdesk.market.providers.finnhub import FinnhubQuoteProvider
from marketdesk.market.providers.yahoo_finance import (
    YahooChartMetaQuoteProvider,
    YahooChartProvider,
    YahooCrumbChartProvider,
    YahooCrumbQuoteProvider,
)

__all__ = [
    "ChartProvider",
    "FinnhubQuoteProvider",
    "QuoteProvider",
    "YahooChartMetaQuoteProvider",
    "YahooChartProvider",
    "YahooCrumbChartProvider",
    "YahooCrumbQuoteProvider",
]
