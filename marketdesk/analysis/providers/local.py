"""Rule-based analysis, the last provider of the analysis chain.

Scores the snapshot on moving-average position, RSI extremes and the size of
today's move, then renders the same narrative fields an LLM would return.
Pure arithmetic over the context, so it does not fail on well-formed input.
"""

from dataclasses import dataclass, field

from marketdesk.analysis.prompts import fmt_number
from marketdesk.analysis.schemas import (
    LOCAL_PROVIDER,
    AnalysisContext,
    AnalysisJob,
    AnalysisResult,
    KeyLevels,
    Signal,
    TechnicalSignal,
    TechnicalType,
)

_RSI_OVERBOUGHT = 70
_RSI_OVERSOLD = 30
_BIG_MOVE_PCT = 2
_VOLUME_SURGE = 1.5
_MAX_CONFIDENCE = 85


@dataclass
class Scorecard:
    bull: int = 0
    bear: int = 0
    technicals: list[TechnicalSignal] = field(default_factory=list)

    def add(self, label: str, kind: TechnicalType, detail: str, points: int = 0) -> None:
        if kind == TechnicalType.bull:
            self.bull += points
        elif kind == TechnicalType.bear:
            self.bear += points
        self.technicals.append(TechnicalSignal(label=label, type=kind, detail=detail))


@dataclass(frozen=True)
class _Inputs:
    price: float
    rsi: float
    change: float
    sma50: float
    sma200: float
    volume: float
    avg_volume: float
    high52: float
    low52: float


def _inputs(ctx: AnalysisContext) -> _Inputs:
    price = ctx.price or 0.0
    return _Inputs(
        price=price,
        rsi=ctx.rsi or 50.0,
        change=ctx.change or 0.0,
        sma50=ctx.sma50 or price,
        sma200=ctx.sma200 or price,
        volume=ctx.volume or 0.0,
        avg_volume=ctx.avg_volume or 1.0,
        high52=ctx.high52 or price * 1.2,
        low52=ctx.low52 or price * 0.8,
    )


def classify(bull: int, bear: int) -> tuple[Signal, int]:
    """Signal needs a lead of more than one point; confidence grows with the gap."""
    if bull > bear + 1:
        signal = Signal.BULLISH
    elif bear > bull + 1:
        signal = Signal.BEARISH
    else:
        signal = Signal.NEUTRAL
    return signal, min(_MAX_CONFIDENCE, 40 + 10 * abs(bull - bear))


def score(ctx: AnalysisContext) -> Scorecard:
    v = _inputs(ctx)
    card = Scorecard()

    if v.price > v.sma50:
        card.add("Above 50 SMA", TechnicalType.bull, f"Price above {fmt_number(ctx.sma50)}", 2)
    else:
        card.add("Below 50 SMA", TechnicalType.bear, f"Price below {fmt_number(ctx.sma50)}", 2)

    if v.price > v.sma200:
        card.add("Above 200 SMA", TechnicalType.bull, "Long-term uptrend intact", 2)
    else:
        card.add("Below 200 SMA", TechnicalType.bear, "Long-term trend broken", 2)

    if v.rsi > _RSI_OVERBOUGHT:
        card.add(f"RSI {v.rsi:.0f} Overbought", TechnicalType.bear, "May be due for pullback", 2)
    elif v.rsi < _RSI_OVERSOLD:
        card.add(f"RSI {v.rsi:.0f} Oversold", TechnicalType.bull, "Potential bounce zone", 2)
    else:
        card.add(f"RSI {v.rsi:.0f} Neutral", TechnicalType.neutral, "No extreme momentum")

    if v.change > _BIG_MOVE_PCT:
        card.add(f"Up {v.change:.1f}% today", TechnicalType.bull, "Strong daily move", 1)
    elif v.change < -_BIG_MOVE_PCT:
        card.add(f"Down {abs(v.change):.1f}% today", TechnicalType.bear, "Significant selling", 1)

    # volume surge is reported, not scored
    if v.volume > v.avg_volume * _VOLUME_SURGE:
        up = v.change > 0
        card.technicals.append(
            TechnicalSignal(
                label=f"Volume {v.volume / v.avg_volume:.1f}x avg",
                type=TechnicalType.bull if up else TechnicalType.bear,
                detail="Buying conviction" if up else "Selling pressure",
            )
        )
    return card


def local_analysis(ctx: AnalysisContext) -> AnalysisResult:
    v = _inputs(ctx)
    card = score(ctx)
    signal, confidence = classify(card.bull, card.bear)

    above50 = v.price > v.sma50
    span = v.high52 - v.low52
    range_pct = f"{(v.price - v.low52) / span * 100:.0f}" if span > 0 else "50"
    price = fmt_number(ctx.price)
    sma50 = fmt_number(ctx.sma50)
    high52 = fmt_number(ctx.high52)
    sign = "+" if v.change >= 0 else ""

    summary = (
        f"{ctx.symbol} is trading at ${price} ({sign}{v.change:.2f}% today). "
        f"The stock is {'above' if above50 else 'below'} its 50-day moving average with RSI at "
        f"{v.rsi:.0f}, sitting at {range_pct}% of its 52-week range."
    )

    if v.rsi > 65:
        momentum = "RSI is elevated, so momentum may slow."
    elif v.rsi < 35:
        momentum = "RSI suggests oversold conditions; watch for a bounce."
    else:
        momentum = "Momentum is neutral."
    outlook = (
        f"Watch the ${sma50} level (50-day SMA) as key "
        f"{'support' if above50 else 'resistance'}. {momentum}"
    )

    return AnalysisResult(
        signal=signal,
        confidence=confidence,
        summary=summary,
        technicals=card.technicals,
        key_levels=KeyLevels(
            support=round(v.low52 + (v.price - v.low52) * 0.3, 2),
            resistance=round(v.price + (v.high52 - v.price) * 0.4, 2),
        ),
        short_term_outlook=outlook,
        risks=_risks(ctx.symbol, v, high52),
        beginner_notes=_beginner_notes(ctx.symbol, v, price, sma50),
        provider=LOCAL_PROVIDER,
    )


def _risks(symbol: str, v: _Inputs, high52: str) -> list[str]:
    if v.price > v.high52 * 0.95:
        range_risk = (
            f"Trading near the 52-week high (${high52}); upside may be limited without a strong "
            "catalyst, and profit-taking could trigger a pullback"
        )
    else:
        below = (1 - v.price / v.high52) * 100 if v.high52 else 0.0
        range_risk = (
            f"Currently {below:.0f}% below the 52-week high of ${high52}; while this creates "
            "recovery potential, it also signals sustained selling pressure that may continue"
        )

    ratio = v.volume / v.avg_volume
    if ratio > 2:
        volume_risk = (
            f"Volume is {ratio:.1f}x the 10-day average, indicating heightened volatility; large "
            "moves in either direction are more likely in the near term"
        )
    else:
        volume_risk = (
            "Volume is near average levels; watch for a spike in volume to confirm any breakout "
            "or breakdown from current levels"
        )

    if v.rsi > 65:
        momentum_risk = (
            f"RSI at {v.rsi:.0f} is approaching overbought territory; momentum traders may start "
            "taking profits, which could cap short-term gains"
        )
    elif v.rsi < 35:
        momentum_risk = (
            f"RSI at {v.rsi:.0f} is in oversold territory; while this can signal a bounce, "
            "oversold conditions can persist during strong downtrends"
        )
    else:
        momentum_risk = (
            "Macro uncertainty including interest rate policy and sector rotation could impact "
            f"{symbol} regardless of its technical setup"
        )
    return [range_risk, volume_risk, momentum_risk]


def _beginner_notes(symbol: str, v: _Inputs, price: str, sma50: str) -> str:
    above50 = v.price > v.sma50
    parts = [
        f"Okay so here's the deal with {symbol} in plain english.",
        f"The stock is at ${price} right now, which is {'above' if above50 else 'below'} "
        f"where it's been trading on average lately (${sma50}).",
        "That's generally a good sign, it means the stock has momentum going for it."
        if above50
        else "That's not great, it means the stock has been losing steam compared to recent weeks.",
    ]

    if v.rsi > 70:
        rsi_note = (
            "which basically means a LOT of people have been buying and it might be getting "
            "expensive, so be careful jumping in right now"
        )
    elif v.rsi < 30:
        rsi_note = (
            "which means it's been beaten down pretty hard, and sometimes that means it's a "
            "bargain, but it could also keep dropping"
        )
    else:
        rsi_note = (
            "which is pretty neutral, meaning there's no extreme buying or selling pressure "
            "right now"
        )
    parts.append(f"The RSI is at {v.rsi:.0f}, {rsi_note}.")

    if v.change > 2:
        parts.append(f"It had a solid green day today, up {v.change:.1f}%, so buyers are showing up.")
    elif v.change < -2:
        parts.append(
            f"It dropped {abs(v.change):.1f}% today, so there's definitely some selling going on."
        )
    else:
        parts.append("Today's move was pretty small, nothing dramatic.")

    if v.rsi < 35 and not above50:
        advice = (
            "this might look like a deal but be cautious, stocks can stay cheap for a while "
            "before bouncing back. Don't put in more than you're okay losing."
        )
    elif above50 and v.rsi < 65:
        advice = (
            "the overall trend looks okay, but always do your own research and never invest "
            "money you can't afford to lose."
        )
    else:
        advice = (
            "it's probably best to watch this one for a bit before making any moves, and "
            "definitely don't bet the farm on one stock."
        )
    parts.append(f"If you're new to this, {advice}")
    return " ".join(parts)


class LocalAnalysisProvider:
    name = LOCAL_PROVIDER
    available = True

    async def fetch(self, job: AnalysisJob) -> AnalysisResult:
        return local_analysis(job.context)
