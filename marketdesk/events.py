"""Structured provider-attempt events.

Every adapter call made by a fallback chain produces one ``ProviderAttempt``.
Sinks are plain callables, so the chain is not coupled to any particular
logging or metrics backend.
"""

from collections.abc import Callable
from dataclasses import asdict, dataclass
from enum import StrEnum

import structlog

logger = structlog.get_logger()

_MAX_ERROR_LENGTH = 200


class Outcome(StrEnum):
    success = "success"
    failure = "failure"
    skipped = "skipped"


@dataclass(frozen=True)
class ProviderAttempt:
    kind: str
    provider: str
    outcome: Outcome
    latency_ms: float = 0.0
    error: str | None = None


EventSink = Callable[[ProviderAttempt], None]


def truncate_error(exc: BaseException) -> str:
    text = str(exc) or type(exc).__name__
    return text[:_MAX_ERROR_LENGTH]


def log_attempt(event: ProviderAttempt) -> None:
    """Default sink: one structlog line per attempt."""
    fields = asdict(event)
    match event.outcome:
        case Outcome.success:
            logger.info("provider_attempt", **fields)
        case Outcome.skipped:
            logger.info("provider_attempt", **fields)
        case _:
            logger.warning("provider_attempt", **fields)


class EventRecorder:
    """In-memory sink that keeps every event it receives."""

    def __init__(self) -> None:
        self.events: list[ProviderAttempt] = []

    def __call__(self, event: ProviderAttempt) -> None:
        self.events.append(event)

    def providers(self, outcome: Outcome | None = None) -> list[str]:
        return [e.provider for e in self.events if outcome is None or e.outcome == outcome]
