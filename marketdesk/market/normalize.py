"""Provider-native payload → canonical record mappings.

One function per provider shape. Each is pure and raises ``ShapeError`` when
the payload lacks the fields the canonical record cannot do without.
"""

import math
from datetime import UTC, datetime, timedelta, timezone
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from marketdesk.exceptions import ShapeError
from marketdesk.market.schemas import ChartPoint, Quote


def _num(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _int(value: Any) -> int | None:
    number = _num(value)
    return int(number) if number is not None else None


def display_name(symbol: str) -> str:
    return symbol.replace("-USD", "")


def _require_object(value: Any, provider: str, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ShapeError(provider, f"{what} is not an object")
    return value


def _quote(provider: str, **fields: Any) -> Quote:
    try:
        return Quote(provider=provider, **fields)
    except PydanticValidationError as exc:
        symbol = fields.get("symbol")
        raise ShapeError(provider, f"quote for {symbol} failed validation: {exc}") from exc


# ---------------------------------------------------------------------------
# Quotes
# ---------------------------------------------------------------------------


def quote_from_yahoo(raw: dict[str, Any], provider: str) -> Quote:
    """Map one entry of Yahoo v7 ``quoteResponse.result``."""
    raw = _require_object(raw, provider, "quote entry")
    symbol = raw.get("symbol")
    price = _num(raw.get("regularMarketPrice"))
    if not isinstance(symbol, str) or not symbol or price is None:
        raise ShapeError(provider, "quote entry without symbol or price")

    return _quote(
        provider,
        symbol=symbol,
        short_name=raw.get("shortName") or raw.get("longName") or display_name(symbol),
        price=price,
        change=_num(raw.get("regularMarketChange")) or 0.0,
        previous_close=_num(raw.get("regularMarketPreviousClose")) or 0.0,
        open=_num(raw.get("regularMarketOpen")),
        day_high=_num(raw.get("regularMarketDayHigh")),
        day_low=_num(raw.get("regularMarketDayLow")),
        fifty_two_week_high=_num(raw.get("fiftyTwoWeekHigh")),
        fifty_two_week_low=_num(raw.get("fiftyTwoWeekLow")),
        volume=_int(raw.get("regularMarketVolume")),
        average_volume=_int(raw.get("averageDailyVolume10Day")),
        market_cap=_int(raw.get("marketCap")),
        trailing_pe=_num(raw.get("trailingPE")),
        forward_pe=_num(raw.get("forwardPE")),
        eps=_num(raw.get("epsTrailingTwelveMonths") or raw.get("trailingEps")),
        beta=_num(raw.get("beta")),
        fifty_day_average=_num(raw.get("fiftyDayAverage")),
        two_hundred_day_average=_num(raw.get("twoHundredDayAverage")),
    )


def quote_from_chart_meta(symbol: str, meta: dict[str, Any], provider: str) -> Quote:
    """Map ``chart.result[0].meta`` of a Yahoo v8 chart response."""
    meta = _require_object(meta, provider, f"chart meta for {symbol}")
    price = _num(meta.get("regularMarketPrice"))
    if not price:
        raise ShapeError(provider, f"no regularMarketPrice in chart meta for {symbol}")

    prev = _num(meta.get("chartPreviousClose")) or _num(meta.get("previousClose")) or 0.0
    return _quote(
        provider,
        symbol=symbol,
        short_name=meta.get("shortName") or display_name(symbol),
        price=price,
        change=price - prev,
        previous_close=prev,
        open=_num(meta.get("regularMarketOpen")) or price,
        day_high=_num(meta.get("regularMarketDayHigh")) or price,
        day_low=_num(meta.get("regularMarketDayLow")) or price,
        volume=_int(meta.get("regularMarketVolume")) or 0,
        fifty_two_week_high=_num(meta.get("fiftyTwoWeekHigh")),
        fifty_two_week_low=_num(meta.get("fiftyTwoWeekLow")),
        fifty_day_average=_num(meta.get("fiftyDayAverage")),
        two_hundred_day_average=_num(meta.get("twoHundredDayAverage")),
    )


def quote_from_finnhub(symbol: str, data: dict[str, Any], provider: str) -> Quote:
    """Map a Finnhub ``/quote`` body: c, d, dp, pc, o, h, l."""
    data = _require_object(data, provider, f"quote body for {symbol}")
    price = _num(data.get("c"))
    if not price:
        raise ShapeError(provider, f"no current price for {symbol}")

    return _quote(
        provider,
        symbol=symbol,
        short_name=display_name(symbol),
        price=price,
        change=_num(data.get("d")) or 0.0,
        previous_close=_num(data.get("pc")) or 0.0,
        open=_num(data.get("o")),
        day_high=_num(data.get("h")),
        day_low=_num(data.get("l")),
    )


# ---------------------------------------------------------------------------
# Charts
# ---------------------------------------------------------------------------


def chart_result(payload: Any, provider: str) -> dict[str, Any]:
    """Return ``chart.result[0]`` if it carries a non-empty timestamp sequence."""
    try:
        result = payload["chart"]["result"][0]
    except (KeyError, IndexError, TypeError) as exc:
        raise ShapeError(provider, "response has no chart.result") from exc
    if not isinstance(result, dict) or not result.get("timestamp"):
        raise ShapeError(provider, "chart result has no timestamps")
    return result


def point_label(ts: int, range_: str, tz: timezone = UTC) -> str:
    moment = datetime.fromtimestamp(ts, tz=tz)
    if range_ == "1d":
        return moment.strftime("%H:%M")
    if range_ == "5d":
        return moment.strftime("%a %H:%M")
    return f"{moment:%b} {moment.day}"


def _round2(value: Any) -> float | None:
    number = _num(value)
    return round(number, 2) if number is not None else None


def points_from_chart(result: dict[str, Any], range_: str) -> list[ChartPoint]:
    """Zip Yahoo's parallel OHLCV arrays into points, dropping those without a close."""
    timestamps = result.get("timestamp") or []
    quotes = ((result.get("indicators") or {}).get("quote") or [{}])[0] or {}
    offset = _num((result.get("meta") or {}).get("gmtoffset"))
    tz = timezone(timedelta(seconds=offset)) if offset else UTC

    def column(name: str) -> list[Any]:
        return quotes.get(name) or []

    opens, highs, lows, closes, volumes = (
        column(n) for n in ("open", "high", "low", "close", "volume")
    )

    def at(values: list[Any], i: int) -> Any:
        return values[i] if i < len(values) else None

    points = []
    for i, ts in enumerate(timestamps):
        close = _round2(at(closes, i))
        if close is None:
            continue
        points.append(
            ChartPoint(
                time=point_label(int(ts), range_, tz),
                timestamp=int(ts),
                open=_round2(at(opens, i)),
                high=_round2(at(highs, i)),
                low=_round2(at(lows, i)),
                close=close,
                volume=_int(at(volumes, i)) or 0,
            )
        )
    return points
