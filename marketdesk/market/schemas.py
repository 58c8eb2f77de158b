import math

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Supported chart ranges and the sampling interval each one is drawn at.
RANGES: dict[str, str] = {
    "1d": "5m",
    "5d": "15m",
    "1mo": "30m",
    "3mo": "1d",
    "6mo": "1d",
    "1y": "1wk",
    "5y": "1mo",
}
DEFAULT_RANGE = "3mo"
INTERVALS = frozenset(RANGES.values())

FALLBACK_PROVIDER = "fallback"


class Quote(BaseModel):
    """One symbol's market snapshot, serialized with Yahoo's field names."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    symbol: str
    short_name: str = Field(alias="shortName")
    price: float = Field(alias="regularMarketPrice", ge=0)
    change: float = Field(default=0.0, alias="regularMarketChange")
    change_percent: float | None = Field(default=None, alias="regularMarketChangePercent")
    previous_close: float = Field(default=0.0, alias="regularMarketPreviousClose")
    open: float | None = Field(default=None, alias="regularMarketOpen")
    day_high: float | None = Field(default=None, alias="regularMarketDayHigh")
    day_low: float | None = Field(default=None, alias="regularMarketDayLow")
    fifty_two_week_high: float | None = Field(default=None, alias="fiftyTwoWeekHigh")
    fifty_two_week_low: float | None = Field(default=None, alias="fiftyTwoWeekLow")
    volume: int | None = Field(default=None, alias="regularMarketVolume")
    average_volume: int | None = Field(default=None, alias="averageDailyVolume10Day")
    market_cap: int | None = Field(default=None, alias="marketCap")
    trailing_pe: float | None = Field(default=None, alias="trailingPE")
    forward_pe: float | None = Field(default=None, alias="forwardPE")
    eps: float | None = Field(default=None, alias="trailingEps")
    beta: float | None = None
    fifty_day_average: float | None = Field(default=None, alias="fiftyDayAverage")
    two_hundred_day_average: float | None = Field(default=None, alias="twoHundredDayAverage")
    provider: str = Field(alias="_provider")

    @model_validator(mode="before")
    @classmethod
    def derive_change_percent(cls, data: dict) -> dict:
        """Percent change always follows change / previous close; None when undefined."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        change = data.get("change", data.get("regularMarketChange")) or 0.0
        prev = data.get("previous_close", data.get("regularMarketPreviousClose")) or 0.0
        pct = round(100 * change / prev, 4) if prev and math.isfinite(prev) else None
        data.pop("regularMarketChangePercent", None)
        data["change_percent"] = pct
        return data


class QuoteBatch(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    result: list[Quote]
    provider: str = Field(alias="_provider")

    @property
    def is_fallback(self) -> bool:
        return self.provider == FALLBACK_PROVIDER


class ChartPoint(BaseModel):
    time: str
    timestamp: int
    open: float | None = None
    high: float | None = None
    low: float | None = None
    close: float
    volume: int = 0


class ChartSeries(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    symbol: str
    range: str
    interval: str
    points: list[ChartPoint]
    provider: str = Field(alias="_provider")


class ChartRequest(BaseModel):
    symbol: str
    range: str = DEFAULT_RANGE
    interval: str = RANGES[DEFAULT_RANGE]


class IndicatorPoint(ChartPoint):
    sma20: float | None = None
    sma50: float | None = None
    rsi: float | None = None
    bb_upper: float | None = Field(default=None, alias="bbUpper")
    bb_lower: float | None = Field(default=None, alias="bbLower")
    bb_mid: float | None = Field(default=None, alias="bbMid")

    model_config = ConfigDict(populate_by_name=True)


class IndicatorSeries(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    symbol: str
    range: str
    interval: str
    points: list[IndicatorPoint]
    provider: str = Field(alias="_provider")
