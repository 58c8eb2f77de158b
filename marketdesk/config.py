from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Provider credentials. Absence is not an error: the provider is skipped.
    finnhub_api_key: str = Field(default="")
    groq_api_key: str = Field(default="")
    gemini_api_key: str = Field(default="")
    anthropic_api_key: str = Field(default="")
    openai_api_key: str = Field(default="")

    groq_model: str = Field(default="llama-3.3-70b-versatile")
    gemini_model: str = Field(default="gemini-2.0-flash")
    anthropic_model: str = Field(default="claude-sonnet-4-20250514")
    openai_model: str = Field(default="gpt-4o-mini")
    llm_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    llm_max_tokens: int = Field(default=1000, gt=0)

    http_timeout_seconds: float = Field(default=10.0, gt=0)
    scrape_max_symbols: int = Field(default=10, gt=0)
    reference_prices_path: str = Field(default="")
    default_watchlist: list[str] = Field(
        default=["AAPL", "AMZN", "GOOGL", "MSFT", "NVDA", "META", "TSLA", "BTC-USD", "ETH-USD"]
    )

    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)
    cors_origins: str = Field(default="http://localhost:3000")


settings = Settings()
