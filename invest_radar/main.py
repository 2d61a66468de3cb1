"""
FastAPI app: India investment radar.

Usage:
    uvicorn invest_radar.main:app --reload

Endpoints:
    GET /health
    GET /api/investments?states=Gujarat,Odisha&window=30d&diag=1

Errors come back as a single {"error": "..."} object with status 500.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .common.errors import MissingCredentialError
from .config.settings import settings
from .pipeline import InvestmentPipeline, PipelineRequest

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        f"Starting Invest Radar (mode={settings.extraction_mode}, "
        f"source={settings.discovery_source}, whitelist={settings.ai_whitelist_mode})"
    )
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title="Invest Radar",
    description="Investment announcements in Indian states, extracted from the news",
    version="0.1.0",
    lifespan=lifespan,
)

# Open by default; FRONTEND_URL pins CORS to the dashboard origin
_allowed_origins = [settings.frontend_url] if settings.frontend_url else ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=False,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)


# ----- Response Models -----

class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    extraction_mode: str
    discovery_source: str


# ----- Helpers -----

def _flag(value: Optional[str]) -> bool:
    """Query flags accept 1/true/yes/on."""
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def _split_states(value: Optional[str]) -> Optional[list[str]]:
    if not value:
        return None
    states = [s.strip() for s in value.split(",") if s.strip()]
    return states or None


def build_request(
    states: Optional[str] = None,
    window: Optional[str] = None,
    source: Optional[str] = None,
    noai: Optional[str] = None,
    diag: Optional[str] = None,
    llmdbg: Optional[str] = None,
    bypass: Optional[str] = None,
) -> PipelineRequest:
    """Map query parameters onto a PipelineRequest (settings fill the gaps)."""
    overrides = {
        "states": _split_states(states),
        "window": window.strip() if window and window.strip() else None,
        "diag": _flag(diag),
        "llm_debug": _flag(llmdbg),
        "bypass": _flag(bypass),
    }
    if settings.allow_query_overrides:
        if source and source.strip():
            overrides["source"] = source.strip().lower()
        if _flag(noai):
            overrides["mode"] = "heuristic"
    return PipelineRequest.from_settings(settings, **overrides)


# ----- Endpoints -----

@app.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        extraction_mode=settings.extraction_mode,
        discovery_source=settings.discovery_source,
    )


@app.get("/api/investments")
async def get_investments(
    states: Optional[str] = Query(None, description="Comma-separated state names"),
    window: Optional[str] = Query(None, description="Look-back window, e.g. 7d, 2w, 1m"),
    source: Optional[str] = Query(None, description="Discovery source: gnews, gdelt or both"),
    noai: Optional[str] = Query(None, description="Force heuristic extraction"),
    diag: Optional[str] = Query(None, description="Return diagnostics and a small sample"),
    llmdbg: Optional[str] = Query(None, description="Return the extraction prompt preview"),
    bypass: Optional[str] = Query(None, description="Discovery-only records when nothing survives"),
):
    """Run the pipeline for one dashboard query."""
    request = build_request(states, window, source, noai, diag, llmdbg, bypass)
    try:
        result = await InvestmentPipeline().run(request)
    except MissingCredentialError as e:
        logger.error(f"Investments request rejected: {e}")
        return JSONResponse(status_code=500, content={"error": str(e)})
    except Exception as e:
        logger.exception("Investments request failed")
        return JSONResponse(status_code=500, content={"error": str(e) or type(e).__name__})

    return JSONResponse(content=result.payload(request))
