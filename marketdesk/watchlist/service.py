"""In-memory watchlist: an ordered set of symbols, owned by the running process."""

from collections.abc import Iterable

import structlog

from marketdesk.exceptions import NotFoundError, ValidationError
from marketdesk.market.service import normalize_symbols

logger = structlog.get_logger()


class WatchlistService:
    def __init__(self, symbols: Iterable[str] = ()) -> None:
        # dict keys keep insertion order and uniqueness
        self._symbols: dict[str, None] = dict.fromkeys(normalize_symbols(symbols))

    def symbols(self) -> list[str]:
        return list(self._symbols)

    def add(self, symbol: str) -> list[str]:
        normalized = normalize_symbols([symbol])
        if not normalized:
            raise ValidationError("Symbol must not be blank")
        if normalized[0] not in self._symbols:
            self._symbols[normalized[0]] = None
            logger.info("watchlist_added", symbol=normalized[0])
        return self.symbols()

    def remove(self, symbol: str) -> list[str]:
        normalized = normalize_symbols([symbol])
        if not normalized or normalized[0] not in self._symbols:
            raise NotFoundError("Watchlist symbol", symbol)
        del self._symbols[normalized[0]]
        logger.info("watchlist_removed", symbol=normalized[0])
        return self.symbols()
