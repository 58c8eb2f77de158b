import math
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

LOCAL_PROVIDER = "local-analysis"


class Signal(StrEnum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"


class TechnicalType(StrEnum):
    bull = "bull"
    bear = "bear"
    neutral = "neutral"


def coerce_number(value: Any) -> float | None:
    """Best-effort float conversion; anything unusable becomes None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


class AnalysisContext(BaseModel):
    """Market snapshot an analysis is run against."""

    model_config = ConfigDict(populate_by_name=True)

    symbol: str = Field(min_length=1)
    price: float | None = None
    change: float | None = None  # percent change today
    pe: float | None = None
    forward_pe: float | None = Field(default=None, alias="forwardPe")
    high52: float | None = None
    low52: float | None = None
    sma50: float | None = None
    sma200: float | None = None
    rsi: float | None = None
    bb_upper: float | None = Field(default=None, alias="bbUpper")
    bb_lower: float | None = Field(default=None, alias="bbLower")
    volume: float | None = None
    avg_volume: float | None = Field(default=None, alias="avgVolume")

    @field_validator(
        "price",
        "change",
        "pe",
        "forward_pe",
        "high52",
        "low52",
        "sma50",
        "sma200",
        "rsi",
        "bb_upper",
        "bb_lower",
        "volume",
        "avg_volume",
        mode="before",
    )
    @classmethod
    def lenient_number(cls, v: Any) -> float | None:
        return coerce_number(v)

    @field_validator("symbol")
    @classmethod
    def upper_symbol(cls, v: str) -> str:
        return v.strip().upper()


class TechnicalSignal(BaseModel):
    label: str
    type: TechnicalType = TechnicalType.neutral
    detail: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def known_type(cls, v: Any) -> str:
        value = str(v).strip().lower() if v is not None else ""
        return value if value in TechnicalType.__members__ else TechnicalType.neutral


class KeyLevels(BaseModel):
    support: float | None = None
    resistance: float | None = None


class AnalysisResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    signal: Signal
    confidence: float = Field(ge=0, le=100)
    summary: str = ""
    technicals: list[TechnicalSignal] = Field(default_factory=list)
    key_levels: KeyLevels = Field(default_factory=KeyLevels, alias="keyLevels")
    short_term_outlook: str = Field(default="", alias="shortTermOutlook")
    risks: list[str] = Field(default_factory=list)
    beginner_notes: str = Field(default="", alias="beginnerNotes")
    provider: str = Field(alias="_provider")


class AnalysisFailure(BaseModel):
    error: str
    detail: str = ""


@dataclass(frozen=True)
class AnalysisJob:
    """What every analysis provider receives: the raw context and the rendered prompt."""

    context: AnalysisContext
    prompt: str
