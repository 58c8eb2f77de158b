import json

from marketdesk.analysis.providers.llm import LLMAnalysisProvider
from marketdesk.analysis.providers.local import LocalAnalysisProvider
from marketdesk.analysis.schemas import AnalysisFailure, AnalysisResult, Signal
from marketdesk.analysis.service import AnalysisService, build_context
from marketdesk.events import Outcome
from marketdesk.market.service import ChartService, QuoteService
from tests.conftest import FakeChatModel

BEARISH = json.dumps({"signal": "BEARISH", "confidence": 64, "summary": "Weak."})


class Broken:
    available = True

    def __init__(self, name):
        self.name = name

    async def fetch(self, job):
        raise RuntimeError(f"{self.name} down")


async def test_first_llm_answer_is_served(bullish_context, recorder):
    service = AnalysisService(
        [
            LLMAnalysisProvider("groq", None),
            LLMAnalysisProvider("gemini", FakeChatModel(f"```json\n{BEARISH}\n```")),
            LocalAnalysisProvider(),
        ],
        sinks=[recorder],
    )

    result = await service.analyze(bullish_context)

    assert isinstance(result, AnalysisResult)
    assert result.signal == Signal.BEARISH
    assert result.provider == "gemini"
    assert recorder.providers(Outcome.skipped) == ["groq"]


async def test_prompt_reaches_the_model(bullish_context):
    model = FakeChatModel(BEARISH)
    service = AnalysisService([LLMAnalysisProvider("groq", model)], sinks=[])

    await service.analyze(bullish_context)

    assert "analysis of AAPL" in model.prompts[0]


async def test_local_analysis_when_every_llm_fails(bullish_context, recorder):
    service = AnalysisService(
        [
            LLMAnalysisProvider("groq", FakeChatModel("not json")),
            LLMAnalysisProvider("gemini", FakeChatModel(error=TimeoutError())),
            LocalAnalysisProvider(),
        ],
        sinks=[recorder],
    )

    result = await service.analyze(bullish_context)

    assert result.provider == "local-analysis"
    assert result.signal == Signal.BULLISH
    assert result.confidence == 70
    assert recorder.providers(Outcome.failure) == ["groq", "gemini"]


async def test_failure_names_the_providers_tried(bullish_context):
    service = AnalysisService(
        [Broken("groq"), LLMAnalysisProvider("gemini", None), Broken("openai")], sinks=[]
    )

    result = await service.analyze(bullish_context)

    assert result == AnalysisFailure(error="All AI providers failed", detail="Tried: groq, openai")


async def test_symbol_analysis_uses_market_data(synthesizer):
    quotes = QuoteService([], synthesizer, sinks=[])
    charts = ChartService([], synthesizer, sinks=[])
    service = AnalysisService([LocalAnalysisProvider()], quotes=quotes, charts=charts, sinks=[])

    result = await service.analyze_symbol("aapl")

    assert result.provider == "local-analysis"
    assert "AAPL" in result.summary


async def test_symbol_analysis_needs_market_services(bullish_context):
    service = AnalysisService([LocalAnalysisProvider()], sinks=[])

    result = await service.analyze_symbol("AAPL")

    assert isinstance(result, AnalysisFailure)


def test_build_context_from_quote_and_chart(synthesizer):
    quote = synthesizer.quote("MSFT")
    points = synthesizer.chart("MSFT", "3mo")

    ctx = build_context(quote, points)

    assert ctx.symbol == "MSFT"
    assert ctx.price == quote.price
    assert ctx.change == quote.change_percent
    assert ctx.sma50 == quote.fifty_day_average
    assert 0 <= ctx.rsi <= 100
    assert ctx.bb_lower < ctx.bb_upper


def test_build_context_without_chart(synthesizer):
    ctx = build_context(synthesizer.quote("MSFT"), [])

    assert ctx.rsi == 50.0
    assert ctx.bb_upper is None
