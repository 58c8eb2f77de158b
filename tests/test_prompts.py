import pytest

from marketdesk.analysis.prompts import fmt_number, range_position, relation, render_prompt, volume_ratio
from marketdesk.analysis.schemas import AnalysisContext


@pytest.mark.parametrize(
    ("value", "digits", "expected"),
    [
        (228, 2, "228.00"),
        ("35.14", 1, "35.1"),
        (None, 2, "N/A"),
        ("abc", 2, "N/A"),
        (float("nan"), 2, "N/A"),
    ],
)
def test_fmt_number(value, digits, expected):
    assert fmt_number(value, digits) == expected


def test_range_position():
    assert range_position(228, 164, 260) == "67"
    assert range_position(228, 200, 200) == "N/A"
    assert range_position(228, None, 260) == "N/A"


def test_volume_ratio():
    assert volume_ratio(75, 50) == "1.5"
    assert volume_ratio(75, 0) == "N/A"
    assert volume_ratio(None, 50) == "N/A"


def test_relation():
    assert relation(10, 9) == "above"
    assert relation(9, 10) == "below"
    assert relation(9, None) == "unknown"


def test_prompt_carries_every_metric(bullish_context):
    prompt = render_prompt(bullish_context)

    assert "analysis of AAPL" in prompt
    assert "- Price: $228.00 (+3.20% today)" in prompt
    assert "- P/E: 35.1 | Forward P/E: 30.2" in prompt
    assert "- 52W Range: $164.00 - $260.00 (67% of range)" in prompt
    assert "- 50-Day SMA: $210.00 (price above)" in prompt
    assert "- 200-Day SMA: $200.00 (price above)" in prompt
    assert "- RSI(14): 75.0" in prompt
    assert "- Bollinger: Upper $235.00 / Lower $205.00" in prompt
    assert "- Volume ratio vs average: 1.0x" in prompt
    assert '"keyLevels"' in prompt
    assert "signal must be BULLISH, BEARISH, or NEUTRAL" in prompt


def test_prompt_renders_missing_values_as_na():
    prompt = render_prompt(AnalysisContext(symbol="new", price="oops", change=-1.5))

    assert "analysis of NEW" in prompt
    assert "- Price: $N/A (-1.50% today)" in prompt
    assert "- 52W Range: $N/A - $N/A (N/A)" in prompt
    assert "- 50-Day SMA: $N/A (price unknown)" in prompt
    assert "- Volume ratio vs average: N/A\n" in prompt
