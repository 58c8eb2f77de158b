"""Estimated market data for when every live provider is down.

Records produced here are plausible, never real, and always carry the
``fallback`` provenance so the UI can flag them as estimates.

Generation is seeded from the symbol (and range, for charts): asking twice
for the same symbol yields the same numbers, on every run.
"""

import json
import random
import time
import zlib
from collections.abc import Callable, Iterable, Mapping
from importlib import resources
from pathlib import Path

import structlog

from marketdesk.market.normalize import display_name, point_label
from marketdesk.market.schemas import FALLBACK_PROVIDER, ChartPoint, Quote

logger = structlog.get_logger()

POINT_COUNTS: dict[str, int] = {
    "1d": 78,
    "5d": 40,
    "1mo": 22,
    "3mo": 63,
    "6mo": 126,
    "1y": 52,
    "5y": 60,
}
DEFAULT_POINT_COUNT = 63

STEP_SECONDS: dict[str, int] = {
    "1d": 300,
    "5d": 7200,
    "1mo": 86400,
    "3mo": 86400,
    "6mo": 86400,
    "1y": 604800,
    "5y": 2592000,
}
DEFAULT_STEP_SECONDS = 86400

_CRYPTO_VOLATILITY = 0.03
_EQUITY_VOLATILITY = 0.015
_WALK_FLOOR = 0.7


def load_reference_prices(path: str | None = None) -> dict[str, float]:
    """Load the symbol → base price table, from ``path`` or the bundled dataset."""
    if path:
        raw = Path(path).read_text(encoding="utf-8")
    else:
        raw = (
            resources.files("marketdesk.fallback")
            .joinpath("reference_prices.json")
            .read_text(encoding="utf-8")
        )
    return {str(k).upper(): float(v) for k, v in json.loads(raw).items()}


def is_crypto(symbol: str) -> bool:
    return "-USD" in symbol


def _seed(*parts: str) -> int:
    return zlib.crc32("|".join(parts).encode("utf-8"))


def _price(value: float) -> float:
    return round(value, 2 if abs(value) >= 1 else 4)


class FallbackSynthesizer:
    def __init__(
        self,
        reference_prices: Mapping[str, float],
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._prices = dict(reference_prices)
        self._clock = clock

    def base_price(self, symbol: str) -> float:
        known = self._prices.get(symbol.upper())
        if known is not None:
            return known
        return float(50 + (ord(symbol[0]) * 13 + ord(symbol[-1]) * 7) % 400)

    def quotes(self, symbols: Iterable[str]) -> list[Quote]:
        records = [self.quote(symbol) for symbol in symbols]
        logger.info("fallback_quotes_synthesized", count=len(records))
        return records

    def quote(self, symbol: str) -> Quote:
        rng = random.Random(_seed(symbol))
        base = self.base_price(symbol)
        pct = (rng.random() - 0.5) * 3
        chg = base * pct / 100
        return Quote(
            symbol=symbol,
            short_name=display_name(symbol),
            price=_price(base + chg),
            change=_price(chg),
            previous_close=_price(base),
            open=_price(base + chg * 0.3),
            day_high=_price(max(base + abs(chg) * 1.3, base + chg)),
            day_low=_price(min(base - abs(chg) * 0.8, base + chg)),
            fifty_two_week_high=_price(base * 1.25),
            fifty_two_week_low=_price(base * 0.65),
            volume=int(30e6 + rng.random() * 80e6),
            average_volume=int(40e6 + rng.random() * 30e6),
            market_cap=int(base * (2e9 + rng.random() * 1e12)),
            trailing_pe=round(15 + rng.random() * 35, 1),
            forward_pe=round(12 + rng.random() * 28, 1),
            eps=round(base / (15 + rng.random() * 35), 2),
            beta=round(0.8 + rng.random() * 1.2, 2),
            fifty_day_average=_price(base * (0.95 + rng.random() * 0.1)),
            two_hundred_day_average=_price(base * (0.88 + rng.random() * 0.15)),
            provider=FALLBACK_PROVIDER,
        )

    def chart(self, symbol: str, range_: str) -> list[ChartPoint]:
        """Random walk ending exactly on the symbol's base price."""
        rng = random.Random(_seed(symbol, range_))
        base = self.base_price(symbol)
        volatility = _CRYPTO_VOLATILITY if is_crypto(symbol) else _EQUITY_VOLATILITY
        count = POINT_COUNTS.get(range_, DEFAULT_POINT_COUNT)
        step = STEP_SECONDS.get(range_, DEFAULT_STEP_SECONDS)
        now = int(self._clock())

        price = base * (0.88 + rng.random() * 0.12)
        points: list[ChartPoint] = []
        for i in range(count):
            change = (rng.random() - 0.48) * volatility * price
            price = max(price * _WALK_FLOOR, price + change)
            ts = now - (count - i) * step
            points.append(
                ChartPoint(
                    time=point_label(ts, range_),
                    timestamp=ts,
                    open=_price(price - change * 0.3),
                    high=_price(price + abs(change) * 0.5),
                    low=_price(price - abs(change) * 0.5),
                    close=_price(price),
                    volume=int(20e6 + rng.random() * 80e6),
                )
            )

        last = points[-1]
        close = _price(base)
        points[-1] = last.model_copy(
            update={
                "close": close,
                "high": max(last.high or close, close),
                "low": min(last.low or close, close),
            }
        )
        logger.info("fallback_chart_synthesized", symbol=symbol, range=range_, points=count)
        return points
