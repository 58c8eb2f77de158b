from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import pytest

from marketdesk.analysis.schemas import AnalysisContext
from marketdesk.events import EventRecorder
from marketdesk.fallback.synthesizer import FallbackSynthesizer, load_reference_prices

_NO_JSON = object()


class FakeResponse:
    def __init__(
        self,
        status_code: int = 200,
        json_body: Any = _NO_JSON,
        text: str = "",
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self._json = json_body
        self.text = text
        self.headers = headers or {}

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        if self._json is _NO_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._json


Route = FakeResponse | Exception | Callable[[dict | None], FakeResponse]


class FakeSession:
    """Stands in for requests.Session; answers from a URL → response table."""

    def __init__(self, routes: dict[str, Route], log: list) -> None:
        self.headers: dict[str, str] = {}
        self._routes = routes
        self._log = log

    def get(self, url: str, params: dict | None = None, **kwargs: Any) -> FakeResponse:
        self._log.append({"url": url, "params": params, "headers": dict(self.headers), **kwargs})
        route = self._routes.get(url)
        if route is None:
            return FakeResponse(404, text="not found")
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(params)
        return route

    def close(self) -> None:
        pass

    def __enter__(self) -> "FakeSession":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


@dataclass
class FakeHttp:
    routes: dict[str, Route]
    calls: list

    def factory(self) -> FakeSession:
        return FakeSession(self.routes, self.calls)

    def urls(self) -> list[str]:
        return [c["url"] for c in self.calls]


@pytest.fixture
def fake_http() -> Callable[[dict[str, Route]], FakeHttp]:
    def build(routes: dict[str, Route]) -> FakeHttp:
        return FakeHttp(routes=routes, calls=[])

    return build


@pytest.fixture
def synthesizer() -> FallbackSynthesizer:
    return FallbackSynthesizer(load_reference_prices(), clock=lambda: 1_700_000_000)


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def bullish_context() -> AnalysisContext:
    return AnalysisContext(
        symbol="AAPL",
        price=228,
        change=3.2,
        pe=35.1,
        forward_pe=30.2,
        high52=260,
        low52=164,
        sma50=210,
        sma200=200,
        rsi=75,
        bb_upper=235,
        bb_lower=205,
        volume=50_000_000,
        avg_volume=48_000_000,
    )


@dataclass
class FakeMessage:
    content: Any


class FakeChatModel:
    """Minimal async chat model: returns canned content or raises."""

    def __init__(self, content: Any = "", error: Exception | None = None) -> None:
        self._content = content
        self._error = error
        self.prompts: list[str] = []

    async def ainvoke(self, messages: list) -> FakeMessage:
        self.prompts.append(messages[0].content)
        if self._error is not None:
            raise self._error
        return FakeMessage(self._content)
