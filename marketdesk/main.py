from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from marketdesk.analysis.router import router as analysis_router
from marketdesk.config import settings
from marketdesk.dependencies import (
    AnalysisServiceDep,
    ChartServiceDep,
    QuoteServiceDep,
    init_services,
)
from marketdesk.exception_handlers import register_exception_handlers
from marketdesk.logging_config import setup_logging
from marketdesk.market.router import router as market_router
from marketdesk.watchlist.router import router as watchlist_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    init_services()
    logger.info("marketdesk_started")
    yield
    logger.info("marketdesk_stopped")


app = FastAPI(
    title="Market Desk",
    description="Quotes, charts and AI commentary with multi-provider fallback",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(market_router, prefix="/api/v1", tags=["market"])
app.include_router(analysis_router, prefix="/api/v1/analysis", tags=["analysis"])
app.include_router(watchlist_router, prefix="/api/v1/watchlist", tags=["watchlist"])


@app.get("/api/v1/providers")
async def providers(
    quotes: QuoteServiceDep, charts: ChartServiceDep, analysis: AnalysisServiceDep
) -> dict[str, dict[str, bool]]:
    """Which adapters each fallback chain can currently call."""
    return {
        "quote": quotes.chain.availability(),
        "chart": charts.chain.availability(),
        "analysis": analysis.chain.availability(),
    }


@app.get("/api/v1/health")
async def health():
    return {"status": "healthy"}
