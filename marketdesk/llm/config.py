from enum import StrEnum


class LLMProvider(StrEnum):
    GROQ = "groq"
    GEMINI = "gemini"
    ANTHROPIC = "anthropic"
    OPENAI = "openai"


# Priority order of the analysis chain: free tiers first, paid last.
PROVIDER_ORDER: tuple[LLMProvider, ...] = (
    LLMProvider.GROQ,
    LLMProvider.GEMINI,
    LLMProvider.ANTHROPIC,
    LLMProvider.OPENAI,
)

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
