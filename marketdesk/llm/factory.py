from langchain_anthropic import ChatAnthropic
from langchain_core.runnables import Runnable
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from marketdesk.config import settings
from marketdesk.exceptions import ConfigurationError
from marketdesk.llm.config import GROQ_BASE_URL, LLMProvider

_JSON_MODE = {"type": "json_object"}


class LLMFactory:
    @staticmethod
    def create(
        provider: str,
        model: str | None = None,
        **kwargs: object,
    ) -> Runnable:
        temperature = settings.llm_temperature
        max_tokens = settings.llm_max_tokens

        match provider:
            case LLMProvider.GROQ:
                api_key = settings.groq_api_key
                if not api_key:
                    raise ConfigurationError(provider, "Groq API key is not configured")
                # Groq speaks the OpenAI chat-completions protocol
                return ChatOpenAI(  # type: ignore[call-arg]
                    model=model or settings.groq_model,
                    api_key=api_key,
                    base_url=GROQ_BASE_URL,
                    temperature=temperature,
                    max_tokens=max_tokens,
                    **kwargs,
                ).bind(response_format=_JSON_MODE)

            case LLMProvider.GEMINI:
                api_key = settings.gemini_api_key
                if not api_key:
                    raise ConfigurationError(provider, "Gemini API key is not configured")
                return ChatGoogleGenerativeAI(  # type: ignore[call-arg]
                    model=model or settings.gemini_model,
                    google_api_key=api_key,
                    temperature=temperature,
                    max_output_tokens=max_tokens,
                    response_mime_type="application/json",
                    **kwargs,
                )

            case LLMProvider.ANTHROPIC:
                api_key = settings.anthropic_api_key
                if not api_key:
                    raise ConfigurationError(provider, "Anthropic API key is not configured")
                return ChatAnthropic(  # type: ignore[call-arg]
                    model=model or settings.anthropic_model,
                    api_key=api_key,
                    max_tokens=max_tokens,
                    **kwargs,
                )

            case LLMProvider.OPENAI:
                api_key = settings.openai_api_key
                if not api_key:
                    raise ConfigurationError(provider, "OpenAI API key is not configured")
                return ChatOpenAI(  # type: ignore[call-arg]
                    model=model or settings.openai_model,
                    api_key=api_key,
                    temperature=temperature,
                    max_tokens=max_tokens,
                    **kwargs,
                ).bind(response_format=_JSON_MODE)

            case _:
                raise ConfigurationError(str(provider), f"Unknown LLM provider: '{provider}'")
