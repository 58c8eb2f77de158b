"""Ordered-provider fallback protocol shared by quotes, charts and analysis.

A chain walks its providers in registration order and returns the first
result that satisfies the kind's validity predicate. Attempts are strictly
sequential: the next provider is called only once the previous one has
failed. Providers that were unavailable at construction are skipped.
"""

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

import structlog

from marketdesk.events import EventSink, Outcome, ProviderAttempt, log_attempt, truncate_error
from marketdesk.exceptions import ShapeError

logger = structlog.get_logger()

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Provider(Protocol[T_co]):
    name: str

    @property
    def available(self) -> bool: ...

    async def fetch(self, request: Any) -> T_co: ...


@dataclass(frozen=True)
class ChainResult(Generic[T]):
    value: T
    provider: str


class FallbackChain(Generic[T]):
    def __init__(
        self,
        kind: str,
        providers: Sequence[Provider[T]],
        is_valid: Callable[[T], bool],
        sinks: Sequence[EventSink] | None = None,
    ) -> None:
        self.kind = kind
        self._providers = tuple(providers)
        self._is_valid = is_valid
        self._sinks = tuple(sinks) if sinks is not None else (log_attempt,)

    @property
    def providers(self) -> tuple[Provider[T], ...]:
        return self._providers

    def availability(self) -> dict[str, bool]:
        return {p.name: p.available for p in self._providers}

    async def run(self, request: Any) -> ChainResult[T] | None:
        """Return the first valid result, or None once every provider has failed."""
        for provider in self._providers:
            if not provider.available:
                self._emit(ProviderAttempt(self.kind, provider.name, Outcome.skipped))
                continue

            started = time.perf_counter()
            try:
                value = await provider.fetch(request)
                if not self._is_valid(value):
                    raise ShapeError(provider.name, "result failed validation")
            except Exception as exc:  # noqa: BLE001 - any provider failure moves on
                self._emit(
                    ProviderAttempt(
                        self.kind,
                        provider.name,
                        Outcome.failure,
                        latency_ms=_elapsed_ms(started),
                        error=truncate_error(exc),
                    )
                )
                continue

            self._emit(
                ProviderAttempt(
                    self.kind, provider.name, Outcome.success, latency_ms=_elapsed_ms(started)
                )
            )
            return ChainResult(value=value, provider=provider.name)

        logger.warning("fallback_chain_exhausted", kind=self.kind)
        return None

    def _emit(self, event: ProviderAttempt) -> None:
        for sink in self._sinks:
            try:
                sink(event)
            except Exception as exc:  # noqa: BLE001
                logger.error("event_sink_error", kind=self.kind, error=str(exc))


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
