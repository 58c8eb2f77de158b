from fastapi import APIRouter, Query

from marketdesk.dependencies import ChartServiceDep, QuoteServiceDep, WatchlistDep
from marketdesk.market.schemas import DEFAULT_RANGE, ChartSeries, IndicatorSeries, QuoteBatch

router = APIRouter()


@router.get("/quotes", response_model=QuoteBatch)
async def get_quotes(
    service: QuoteServiceDep,
    watchlist: WatchlistDep,
    symbols: str | None = None,
) -> QuoteBatch:
    symbol_list = symbols.split(",") if symbols else watchlist.symbols()
    return await service.get_quotes(symbol_list)


@router.get("/charts/{symbol}", response_model=ChartSeries)
async def get_chart(
    symbol: str,
    service: ChartServiceDep,
    range_: str = Query(DEFAULT_RANGE, alias="range"),
    interval: str | None = None,
) -> ChartSeries:
    return await service.get_chart(symbol, range_, interval)


@router.get("/charts/{symbol}/indicators", response_model=IndicatorSeries)
async def get_indicators(
    symbol: str,
    service: ChartServiceDep,
    range_: str = Query(DEFAULT_RANGE, alias="range"),
    interval: str | None = None,
) -> IndicatorSeries:
    return await service.get_indicators(symbol, range_, interval)
