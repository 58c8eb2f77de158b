import math

import pytest

from marketdesk.fallback.synthesizer import (
    POINT_COUNTS,
    FallbackSynthesizer,
    is_crypto,
    load_reference_prices,
)


def test_bundled_reference_prices():
    prices = load_reference_prices()

    assert prices["AAPL"] == 228
    assert prices["BTC-USD"] == 97500
    assert prices["DOGE-USD"] == pytest.approx(0.32)


def test_reference_prices_from_file(tmp_path):
    path = tmp_path / "prices.json"
    path.write_text('{"abc": 12.5}', encoding="utf-8")

    assert load_reference_prices(str(path)) == {"ABC": 12.5}


def test_unknown_symbol_base_price_is_derived_from_its_letters(synthesizer):
    # 50 + (ord('Z') * 13 + ord('Q') * 7) % 400
    assert synthesizer.base_price("ZZQ") == 50 + (90 * 13 + 81 * 7) % 400


def test_one_quote_per_symbol_in_order(synthesizer):
    quotes = synthesizer.quotes(["AAPL", "BTC-USD", "UNKNOWNCO"])

    assert [q.symbol for q in quotes] == ["AAPL", "BTC-USD", "UNKNOWNCO"]
    assert {q.provider for q in quotes} == {"fallback"}
    assert quotes[1].short_name == "BTC"


def test_quote_fields_are_plausible(synthesizer):
    quote = synthesizer.quote("AAPL")

    assert quote.previous_close == 228
    assert abs(quote.change_percent) <= 1.5
    assert quote.change_percent == pytest.approx(100 * quote.change / quote.previous_close, abs=0.01)
    assert quote.day_low <= quote.price <= quote.day_high
    assert quote.fifty_two_week_low < quote.fifty_two_week_high
    for value in quote.model_dump().values():
        if isinstance(value, float):
            assert math.isfinite(value)


def test_sub_dollar_prices_keep_four_decimals(synthesizer):
    quote = synthesizer.quote("DOGE-USD")

    assert quote.previous_close == pytest.approx(0.32)
    assert quote.price == round(quote.price, 4)
    assert quote.price > 0


def test_same_symbol_same_numbers(synthesizer):
    other = FallbackSynthesizer(load_reference_prices(), clock=lambda: 1_700_000_000)

    assert synthesizer.quote("TSLA") == other.quote("TSLA")
    assert synthesizer.chart("TSLA", "1mo") == other.chart("TSLA", "1mo")


@pytest.mark.parametrize(("range_", "count"), sorted(POINT_COUNTS.items()))
def test_chart_length_per_range(synthesizer, range_, count):
    assert len(synthesizer.chart("AAPL", range_)) == count


def test_chart_known_counts(synthesizer):
    assert len(synthesizer.chart("AAPL", "1mo")) == 22
    assert len(synthesizer.chart("AAPL", "1d")) == 78


def test_unknown_range_uses_default_count(synthesizer):
    assert len(synthesizer.chart("AAPL", "10y")) == 63


def test_chart_ends_on_base_price(synthesizer):
    points = synthesizer.chart("NVDA", "3mo")
    last = points[-1]

    assert last.close == 129
    assert last.low <= last.close <= last.high


def test_chart_points_are_finite_and_ascending(synthesizer):
    points = synthesizer.chart("ETH-USD", "1y")

    timestamps = [p.timestamp for p in points]
    assert timestamps == sorted(timestamps)
    assert timestamps[-1] == 1_700_000_000 - 604800
    for p in points:
        assert all(math.isfinite(v) for v in (p.open, p.high, p.low, p.close))
        assert p.close > 0
        assert p.volume >= 0


def test_is_crypto():
    assert is_crypto("SOL-USD")
    assert not is_crypto("SOL")
