"""Technical indicators over a chart series.

Each function returns a list aligned with its input, holding ``None`` until
the indicator's look-back window is filled.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from marketdesk.market.schemas import ChartPoint, IndicatorPoint


@dataclass(frozen=True)
class Band:
    upper: float | None = None
    lower: float | None = None
    mid: float | None = None


def _closes(points: Sequence[ChartPoint]) -> list[float]:
    return [p.close or 0.0 for p in points]


def sma(points: Sequence[ChartPoint], period: int) -> list[float | None]:
    closes = _closes(points)
    out: list[float | None] = []
    for i in range(len(closes)):
        if i < period - 1:
            out.append(None)
            continue
        window = closes[i - period + 1 : i + 1]
        out.append(sum(window) / period)
    return out


def rsi(points: Sequence[ChartPoint], period: int = 14) -> list[float | None]:
    """Wilder's RSI."""
    closes = _closes(points)
    out: list[float | None] = [None] * len(closes)
    if len(closes) < period + 1:
        return out

    gains = losses = 0.0
    for i in range(1, period + 1):
        diff = closes[i] - closes[i - 1]
        if diff > 0:
            gains += diff
        else:
            losses -= diff
    avg_gain = gains / period
    avg_loss = losses / period
    out[period] = _rsi_value(avg_gain, avg_loss)

    for i in range(period + 1, len(closes)):
        diff = closes[i] - closes[i - 1]
        avg_gain = (avg_gain * (period - 1) + max(diff, 0.0)) / period
        avg_loss = (avg_loss * (period - 1) + max(-diff, 0.0)) / period
        out[i] = _rsi_value(avg_gain, avg_loss)
    return out


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    return 100 - 100 / (1 + avg_gain / avg_loss)


def bollinger(points: Sequence[ChartPoint], period: int = 20, width: float = 2.0) -> list[Band]:
    closes = _closes(points)
    out: list[Band] = []
    for i in range(len(closes)):
        if i < period - 1:
            out.append(Band())
            continue
        window = closes[i - period + 1 : i + 1]
        mean = sum(window) / period
        std = math.sqrt(sum((v - mean) ** 2 for v in window) / period)
        out.append(Band(upper=mean + width * std, lower=mean - width * std, mid=mean))
    return out


def latest(values: Sequence[float | None]) -> float | None:
    """Last non-None value of an indicator series."""
    for value in reversed(values):
        if value is not None:
            return value
    return None


def enrich(points: Sequence[ChartPoint]) -> list[IndicatorPoint]:
    """Attach SMA20, SMA50, RSI14 and Bollinger(20) to every point."""
    sma20 = sma(points, 20)
    sma50 = sma(points, 50)
    rsi14 = rsi(points)
    bands = bollinger(points)
    return [
        IndicatorPoint(
            **point.model_dump(),
            sma20=sma20[i],
            sma50=sma50[i],
            rsi=rsi14[i],
            bb_upper=bands[i].upper,
            bb_lower=bands[i].lower,
            bb_mid=bands[i].mid,
        )
        for i, point in enumerate(points)
    ]
