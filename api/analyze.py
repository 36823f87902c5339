"""
API Endpoint for SEO/GEO Analysis

FastAPI application that:
1. Analyzes a URL for traditional SEO and AI search (GEO) readiness
2. Keeps recent analyses available for shareable report creation
3. Mounts the shareable report endpoints
"""

import logging
import sys
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from geotest import __version__
from geotest.analyzer import SEOGEOAnalyzer, generate_detailed_insights
from geotest.cache import TTLCache
from geotest.utils.config import get_settings
from geotest.utils.errors import (
    AnalysisError,
    ErrorCategory,
    ValidationError,
    classify_error,
    get_user_friendly_error,
)
from geotest.utils.urls import validate_url

from api.dependencies import get_analysis_store, get_analyzer, get_api_clients
from api.reports import router as reports_router

settings = get_settings()

# Configure logging to stdout
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
    force=True,
)
logger = logging.getLogger(__name__)

# Quiet down chatty loggers
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

app = FastAPI(
    title="GeoTest Analyzer",
    description="SEO and generative engine optimization scoring with shareable reports",
    version=__version__,
)
app.include_router(reports_router)


@app.on_event("shutdown")
async def shutdown_event():
    """Close collaborator HTTP clients."""
    if get_api_clients.cache_info().currsize:
        await get_api_clients().close()


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class AnalyzeRequest(BaseModel):
    """Request to analyze a website."""
    url: str = Field(..., description="Website URL or bare domain (e.g. example.com)")
    include_insights: bool = Field(default=False, description="Add narrative insights to the response")


# ============================================================================
# API ENDPOINTS
# ============================================================================

@app.get("/health")
async def health():
    """Health check."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "environment": settings.ENVIRONMENT,
    }


@app.post("/api/analyze")
async def analyze(
    request: AnalyzeRequest,
    analyzer: SEOGEOAnalyzer = Depends(get_analyzer),
    analyses: TTLCache = Depends(get_analysis_store),
):
    """
    Analyze a website.

    Returns the full analysis; its ``id`` can be passed to
    ``POST /api/reports`` while the analysis is retained.
    """
    try:
        url = validate_url(request.url)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        analysis = await analyzer.analyze(url)
    except AnalysisError as e:
        category = classify_error(e)
        status_code = 400 if category == ErrorCategory.VALIDATION else 502
        raise HTTPException(status_code=status_code, detail=get_user_friendly_error(e))

    analyses.set(analysis.id, analysis)

    payload = analysis.to_dict()
    if request.include_insights:
        payload["insights"] = generate_detailed_insights(analysis).to_dict()
    return payload


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.analyze:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
    )
