from fastapi import APIRouter

from marketdesk.dependencies import WatchlistDep
from marketdesk.watchlist.schemas import Watchlist, WatchlistEntry

router = APIRouter()


@router.get("", response_model=Watchlist)
async def get_watchlist(watchlist: WatchlistDep) -> Watchlist:
    return Watchlist(symbols=watchlist.symbols())


@router.post("", response_model=Watchlist, status_code=201)
async def add_symbol(entry: WatchlistEntry, watchlist: WatchlistDep) -> Watchlist:
    return Watchlist(symbols=watchlist.add(entry.symbol))


@router.delete("/{symbol}", response_model=Watchlist)
async def remove_symbol(symbol: str, watchlist: WatchlistDep) -> Watchlist:
    return Watchlist(symbols=watchlist.remove(symbol))
