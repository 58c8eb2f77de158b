from typing import Protocol

from marketdesk.analysis.schemas import AnalysisJob, AnalysisResult


class AnalysisProvider(Protocol):
    name: str

    @property
    def available(self) -> bool: ...

    async def fetch(self, job: AnalysisJob) -> AnalysisResult: ...
