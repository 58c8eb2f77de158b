"""LLM text → AnalysisResult."""

import json
import re
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from marketdesk.analysis.schemas import (
    AnalysisResult,
    KeyLevels,
    Signal,
    TechnicalSignal,
    coerce_number,
)
from marketdesk.exceptions import DecodeError, ShapeError

_FENCED = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)
_FENCE_MARKER = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fences that models wrap JSON in despite instructions."""
    cleaned = text.strip()
    match = _FENCED.search(cleaned)
    if match:
        return match.group(1).strip()
    # unbalanced fence, e.g. a truncated response
    return _FENCE_MARKER.sub("", cleaned).strip()


def decode_json(text: str, provider: str) -> Any:
    try:
        return json.loads(strip_code_fences(text))
    except json.JSONDecodeError as exc:
        raise DecodeError(provider, f"response is not valid JSON: {exc}") from exc


def to_analysis(data: Any, provider: str) -> AnalysisResult:
    """Map a decoded analysis payload to the canonical record.

    The only hard requirement is a recognized ``signal``; every other field is
    coerced into shape or defaulted.
    """
    if not isinstance(data, dict):
        raise ShapeError(provider, "analysis payload is not a JSON object")

    signal = str(data.get("signal") or "").strip().upper()
    if signal not in Signal.__members__:
        raise ShapeError(provider, f"unrecognized signal {data.get('signal')!r}")

    confidence = coerce_number(data.get("confidence"))
    confidence = 50.0 if confidence is None else max(0.0, min(100.0, confidence))

    levels = data.get("keyLevels") if isinstance(data.get("keyLevels"), dict) else {}
    technicals = [
        TechnicalSignal(
            label=str(t["label"]), type=t.get("type"), detail=str(t.get("detail") or "")
        )
        for t in data.get("technicals") or []
        if isinstance(t, dict) and t.get("label")
    ]
    risks = data.get("risks") or []
    if isinstance(risks, str):
        risks = [risks]

    try:
        return AnalysisResult(
            signal=Signal(signal),
            confidence=confidence,
            summary=str(data.get("summary") or ""),
            technicals=technicals,
            key_levels=KeyLevels(
                support=coerce_number(levels.get("support")),
                resistance=coerce_number(levels.get("resistance")),
            ),
            short_term_outlook=str(data.get("shortTermOutlook") or ""),
            risks=[str(r) for r in risks if r],
            beginner_notes=str(data.get("beginnerNotes") or ""),
            provider=provider,
        )
    except PydanticValidationError as exc:
        raise ShapeError(provider, f"analysis payload failed validation: {exc}") from exc


def parse_analysis(text: str, provider: str) -> AnalysisResult:
    if not text or not text.strip():
        raise ShapeError(provider, "empty response")
    return to_analysis(decode_json(text, provider), provider)
