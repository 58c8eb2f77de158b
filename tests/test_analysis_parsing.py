import json

import pytest

from marketdesk.analysis.parsing import parse_analysis, strip_code_fences, to_analysis
from marketdesk.analysis.schemas import Signal, TechnicalType
from marketdesk.exceptions import DecodeError, ShapeError

PAYLOAD = {
    "signal": "BULLISH",
    "confidence": 72,
    "summary": "Strong.",
    "technicals": [
        {"label": "Above 50 SMA", "type": "bull", "detail": "Trend up"},
        {"label": "Odd", "type": "sideways", "detail": "?"},
        {"type": "bear"},
    ],
    "keyLevels": {"support": "210.5", "resistance": 240},
    "shortTermOutlook": "Watch 240.",
    "risks": ["Valuation is stretched."],
    "beginnerNotes": "Basically fine.",
}


@pytest.mark.parametrize(
    "text",
    [
        '```json\n{"a": 1}\n```',
        '```\n{"a": 1}\n```',
        'Here you go:\n```JSON\n{"a": 1}\n```\nThanks',
        '```json\n{"a": 1}',
        '{"a": 1}',
    ],
)
def test_strip_code_fences(text):
    assert json.loads(strip_code_fences(text)) == {"a": 1}


def test_fenced_response_parses():
    result = parse_analysis(f"```json\n{json.dumps(PAYLOAD)}\n```", "groq")

    assert result.signal == Signal.BULLISH
    assert result.confidence == 72
    assert result.provider == "groq"
    assert result.key_levels.support == 210.5
    assert [t.label for t in result.technicals] == ["Above 50 SMA", "Odd"]
    assert result.technicals[1].type == TechnicalType.neutral


def test_wire_names():
    wire = parse_analysis(json.dumps(PAYLOAD), "gemini").model_dump(by_alias=True)

    assert wire["keyLevels"] == {"support": 210.5, "resistance": 240.0}
    assert wire["shortTermOutlook"] == "Watch 240."
    assert wire["beginnerNotes"] == "Basically fine."
    assert wire["_provider"] == "gemini"


def test_lowercase_signal_is_accepted():
    result = to_analysis({**PAYLOAD, "signal": "bearish"}, "anthropic")
    assert result.signal == Signal.BEARISH


def test_unrecognized_signal_is_rejected():
    with pytest.raises(ShapeError):
        to_analysis({**PAYLOAD, "signal": "MOON"}, "groq")


def test_confidence_is_clamped_and_defaulted():
    assert to_analysis({**PAYLOAD, "confidence": 140}, "groq").confidence == 100
    assert to_analysis({**PAYLOAD, "confidence": "high"}, "groq").confidence == 50


def test_single_risk_string_becomes_list():
    assert to_analysis({**PAYLOAD, "risks": "Rates."}, "groq").risks == ["Rates."]


def test_invalid_json_is_decode_error():
    with pytest.raises(DecodeError):
        parse_analysis("I think the stock is BULLISH", "groq")


def test_empty_text_is_shape_error():
    with pytest.raises(ShapeError):
        parse_analysis("   ", "groq")


def test_array_payload_is_shape_error():
    with pytest.raises(ShapeError):
        parse_analysis("[1, 2]", "groq")
