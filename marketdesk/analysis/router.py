from fastapi import APIRouter
from fastapi.responses import JSONResponse

from marketdesk.analysis.schemas import AnalysisContext, AnalysisFailure, AnalysisResult
from marketdesk.dependencies import AnalysisServiceDep

router = APIRouter()

_FAILURE_RESPONSES = {502: {"model": AnalysisFailure}}


def _render(result: AnalysisResult | AnalysisFailure) -> AnalysisResult | JSONResponse:
    if isinstance(result, AnalysisFailure):
        return JSONResponse(status_code=502, content=result.model_dump())
    return result


@router.post("", response_model=AnalysisResult, responses=_FAILURE_RESPONSES)
async def analyze(context: AnalysisContext, service: AnalysisServiceDep):
    return _render(await service.analyze(context))


@router.get("/{symbol}", response_model=AnalysisResult, responses=_FAILURE_RESPONSES)
async def analyze_symbol(symbol: str, service: AnalysisServiceDep):
    return _render(await service.analyze_symbol(symbol))
