"""LLM-backed analysis providers.

Each provider sends the rendered prompt to one chat model, pulls the text out
of the model's message and maps it through the shared analysis parser.
"""

from typing import Any

import structlog
from langchain_core.messages import HumanMessage
from langchain_core.runnables import Runnable

from marketdesk.analysis.parsing import parse_analysis
from marketdesk.analysis.schemas import AnalysisJob, AnalysisResult
from marketdesk.exceptions import ConfigurationError, ProviderError, TransportError
from marketdesk.llm.config import PROVIDER_ORDER
from marketdesk.llm.factory import LLMFactory

logger = structlog.get_logger()


def message_text(content: Any) -> str:
    """Flatten a chat message's content.

    OpenAI-style models return a plain string; Anthropic and Gemini may return
    a list of content blocks, whose text parts are joined in order.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and isinstance(block.get("text"), str):
                parts.append(block["text"])
        return "".join(parts)
    return "" if content is None else str(content)


class LLMAnalysisProvider:
    def __init__(self, name: str, llm: Runnable | None) -> None:
        self.name = name
        self._llm = llm

    @property
    def available(self) -> bool:
        return self._llm is not None

    async def fetch(self, job: AnalysisJob) -> AnalysisResult:
        if self._llm is None:
            raise ConfigurationError(self.name, "no API key configured")

        try:
            response = await self._llm.ainvoke([HumanMessage(content=job.prompt)])
        except Exception as exc:
            raise TransportError(self.name, str(exc)) from exc

        return parse_analysis(message_text(response.content), self.name)


def build_llm_providers() -> list[LLMAnalysisProvider]:
    """One provider per supported LLM, in chain order; unconfigured ones stay unavailable."""
    providers = []
    for provider in PROVIDER_ORDER:
        try:
            llm = LLMFactory.create(provider)
        except ProviderError as exc:
            logger.info("llm_provider_unavailable", provider=str(provider), reason=exc.message)
            llm = None
        providers.append(LLMAnalysisProvider(str(provider), llm))
    return providers
