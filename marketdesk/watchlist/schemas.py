from pydantic import BaseModel, Field


class WatchlistEntry(BaseModel):
    symbol: str = Field(min_length=1, max_length=20)


class Watchlist(BaseModel):
    symbols: list[str]
