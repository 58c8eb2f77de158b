"""Analysis prompt shared by every LLM provider."""

from typing import Any

from marketdesk.analysis.schemas import AnalysisContext, coerce_number

NOT_AVAILABLE = "N/A"

_RESPONSE_EXAMPLE = (
    '{"signal":"BULLISH","confidence":70,"summary":"3-4 detailed sentences",'
    '"technicals":[{"label":"Signal Name","type":"bull","detail":"Specific explanation sentence"},'
    '{"label":"Another Signal","type":"bear","detail":"Another specific explanation"}],'
    '"keyLevels":{"support":190.00,"resistance":230.00},'
    '"shortTermOutlook":"2-3 detailed sentences with price levels",'
    '"risks":["A full detailed sentence about a specific risk",'
    '"Another full sentence about a different risk","A third detailed risk sentence"],'
    '"beginnerNotes":"4-5 casual, jargon-free sentences explaining what all this means for '
    'someone new to trading. Be friendly and specific."}'
)

_RULES = """RULES:
1. "summary" must be 3-4 sentences with specific price references and what they mean
2. "technicals" must have 3-5 signals, each with a specific "detail" sentence (not just a word)
3. "keyLevels" support and resistance must be specific dollar amounts based on the data
4. "shortTermOutlook" must be 2-3 sentences with specific price targets or ranges to watch
5. "risks" must be 3-4 DETAILED sentences (15+ words each) about specific risks for THIS stock \
right now, not generic words like "recession" or "competition". Reference actual market \
conditions, sector trends, valuation concerns, or technical breakdown levels.
6. "beginnerNotes" must be 4-5 sentences written in VERY simple, casual language like you're \
explaining to a friend who just started investing. NO jargon. Explain what the data actually \
means for them in plain english. Use phrases like "basically...", "think of it like...", \
"in simple terms...". Reference the actual numbers but explain what they mean. Tell them what \
the smart move might be in a friendly way."""


def fmt_number(value: Any, digits: int = 2) -> str:
    """Fixed-point rendering that degrades to N/A instead of raising."""
    number = coerce_number(value)
    if number is None:
        return NOT_AVAILABLE
    return f"{number:.{digits}f}"


def range_position(price: Any, low: Any, high: Any) -> str:
    """Where ``price`` sits in the 52-week range, as a whole percentage."""
    p, lo, hi = coerce_number(price), coerce_number(low), coerce_number(high)
    if p is None or lo is None or hi is None or hi == lo:
        return NOT_AVAILABLE
    return f"{(p - lo) / (hi - lo) * 100:.0f}"


def volume_ratio(volume: Any, average: Any) -> str:
    vol, avg = coerce_number(volume), coerce_number(average)
    if vol is None or avg is None or avg <= 0:
        return NOT_AVAILABLE
    return f"{vol / avg:.1f}"


def relation(price: Any, level: Any) -> str:
    p, lvl = coerce_number(price), coerce_number(level)
    if p is None or lvl is None:
        return "unknown"
    return "above" if p > lvl else "below"


def render_prompt(ctx: AnalysisContext) -> str:
    change = coerce_number(ctx.change)
    sign = "+" if change is not None and change >= 0 else ""
    position = range_position(ctx.price, ctx.low52, ctx.high52)
    position_text = f"{position}% of range" if position != NOT_AVAILABLE else NOT_AVAILABLE
    ratio = volume_ratio(ctx.volume, ctx.avg_volume)

    return (
        "You are an expert stock/crypto analyst writing for a personal trading terminal. "
        f"Give a detailed, actionable analysis of {ctx.symbol}.\n"
        "\n"
        "Current data:\n"
        f"- Price: ${fmt_number(ctx.price)} ({sign}{fmt_number(change)}% today)\n"
        f"- P/E: {fmt_number(ctx.pe, 1)} | Forward P/E: {fmt_number(ctx.forward_pe, 1)}\n"
        f"- 52W Range: ${fmt_number(ctx.low52)} - ${fmt_number(ctx.high52)} ({position_text})\n"
        f"- 50-Day SMA: ${fmt_number(ctx.sma50)} (price {relation(ctx.price, ctx.sma50)})\n"
        f"- 200-Day SMA: ${fmt_number(ctx.sma200)} (price {relation(ctx.price, ctx.sma200)})\n"
        f"- RSI(14): {fmt_number(ctx.rsi, 1)}\n"
        f"- Bollinger: Upper ${fmt_number(ctx.bb_upper)} / Lower ${fmt_number(ctx.bb_lower)}\n"
        f"- Volume ratio vs average: {ratio}{'x' if ratio != NOT_AVAILABLE else ''}\n"
        "\n"
        f"{_RULES}\n"
        "\n"
        "Respond ONLY with valid JSON, no markdown, no backticks, no extra text:\n"
        f"{_RESPONSE_EXAMPLE}\n"
        "\n"
        "signal must be BULLISH, BEARISH, or NEUTRAL. type must be bull, bear, or neutral. "
        "ONLY output valid JSON."
    )
