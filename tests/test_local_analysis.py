import pytest

from marketdesk.analysis.providers.local import LocalAnalysisProvider, classify, local_analysis, score
from marketdesk.analysis.schemas import AnalysisContext, AnalysisJob, Signal, TechnicalType


@pytest.mark.parametrize(
    ("bull", "bear", "signal", "confidence"),
    [
        (5, 3, Signal.BULLISH, 60),
        (4, 3, Signal.NEUTRAL, 50),
        (3, 4, Signal.NEUTRAL, 50),
        (0, 0, Signal.NEUTRAL, 40),
        (1, 7, Signal.BEARISH, 85),
    ],
)
def test_classify(bull, bear, signal, confidence):
    assert classify(bull, bear) == (signal, confidence)


def test_bullish_setup(bullish_context):
    result = local_analysis(bullish_context)

    assert result.signal == Signal.BULLISH
    assert result.confidence == 70
    assert result.provider == "local-analysis"
    assert [t.label for t in result.technicals] == [
        "Above 50 SMA",
        "Above 200 SMA",
        "RSI 75 Overbought",
        "Up 3.2% today",
    ]
    assert len(result.risks) == 3
    assert result.summary.startswith("AAPL is trading at $228.00 (+3.20% today).")
    assert "support" in result.short_term_outlook


def test_scorecard_points(bullish_context):
    card = score(bullish_context)

    assert (card.bull, card.bear) == (5, 2)


def test_bearish_setup_with_volume_surge():
    ctx = AnalysisContext(
        symbol="TSLA",
        price=300,
        change=-4.5,
        sma50=350,
        sma200=320,
        rsi=25,
        volume=88_000_000,
        avg_volume=40_000_000,
        high52=480,
        low52=180,
    )

    result = local_analysis(ctx)

    # bear: 2 + 2 + 1, bull: 2 (oversold)
    assert result.signal == Signal.BEARISH
    assert result.confidence == 70
    surge = result.technicals[-1]
    assert surge.label == "Volume 2.2x avg"
    assert surge.type == TechnicalType.bear
    assert "2.2x the 10-day average" in result.risks[1]


def test_missing_inputs_use_neutral_defaults():
    result = local_analysis(AnalysisContext(symbol="X", price=100))

    # price equals both defaulted SMAs, so both count as "below"
    assert result.signal == Signal.BEARISH
    assert "RSI 50 Neutral" in [t.label for t in result.technicals]
    assert result.key_levels.support == pytest.approx(86.0)
    assert result.key_levels.resistance == pytest.approx(108.0)


def test_same_context_same_result(bullish_context):
    assert local_analysis(bullish_context) == local_analysis(bullish_context)


async def test_provider_reads_context_not_prompt(bullish_context):
    provider = LocalAnalysisProvider()
    result = await provider.fetch(AnalysisJob(context=bullish_context, prompt="ignored"))

    assert provider.available
    assert result.signal == Signal.BULLISH
