from abc import ABC, abstractmethod

from marketdesk.market.schemas import ChartPoint, ChartRequest, Quote


class QuoteProvider(ABC):
    name: str

    @property
    def available(self) -> bool:
        return True

    @abstractmethod
    async def fetch(self, symbols: list[str]) -> list[Quote]: ...


class ChartProvider(ABC):
    name: str

    @property
    def available(self) -> bool:
        return True

    @abstractmethod
    async def fetch(self, request: ChartRequest) -> list[ChartPoint]: ...
