"""
Credibility Scoring Service - HTTP API
Thin FastAPI layer over the credibility engine.
"""

import logging
import os
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any, Dict

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from credscore.config import get_settings
from credscore.engine import CredibilityEngine, build_engine
from credscore.errors import InputError
from credscore.models import AnalysisRequest, CredibilityResult, SourceVerification, SourceVerifyRequest

VERSION = "1.0.0"
TITLE = "Credibility Scoring Service"
DESCRIPTION = "Scores free-text content for credibility with an auditable reasoning trail"

settings = get_settings()

# Logging configuration
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
        logging.FileHandler('logs/credscore.log') if os.path.exists('logs') else logging.NullHandler()
    ]
)

logger = logging.getLogger(__name__)


@lru_cache(1)
def get_engine() -> CredibilityEngine:
    """Engine with dictionaries loaded once for the process lifetime"""
    return build_engine(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    logger.info("=" * 60)
    logger.info(f"Starting {TITLE} v{VERSION}")
    logger.info("=" * 60)

    engine = get_engine()
    logger.info(f"  Classifier: {engine.classifier.name}")
    logger.info(f"  Fact check configured: {engine.fact_checker.configured}")
    logger.info(f"  Analysis timeout: {engine.timeout}s")
    logger.info("Service ready")

    yield

    logger.info("Shutting down...")
    engine.classifier.shutdown()
    logger.info("Shutdown complete")


app = FastAPI(
    title=TITLE,
    version=VERSION,
    description=DESCRIPTION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": str(exc) if os.getenv("DEBUG") else "An error occurred"
        }
    )


@app.get("/")
async def root() -> Dict[str, Any]:
    """Root endpoint with service information"""
    return {
        "service": TITLE,
        "version": VERSION,
        "status": "operational",
        "endpoints": {
            "analyze": "POST /analyze",
            "verify_source": "POST /source/verify",
            "trusted_sources": "GET /sources/trusted",
            "health": "GET /health",
        },
    }


@app.get("/health")
async def health_check(engine: CredibilityEngine = Depends(get_engine)) -> Dict[str, Any]:
    """Report which signals are wired up"""
    return {
        "status": "healthy",
        "components": {
            "classifier": engine.classifier.name,
            "fact_check": "configured" if engine.fact_checker.configured else "not configured",
        },
        "analysis_timeout": engine.timeout,
    }


@app.post("/analyze", response_model=CredibilityResult)
async def analyze(
    payload: AnalysisRequest,
    engine: CredibilityEngine = Depends(get_engine),
) -> CredibilityResult:
    """Score one piece of content"""
    try:
        return await engine.analyze(payload)
    except InputError as e:
        logger.warning(f"Rejected analysis request: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@app.post("/source/verify", response_model=SourceVerification)
async def verify_source(
    payload: SourceVerifyRequest,
    engine: CredibilityEngine = Depends(get_engine),
) -> SourceVerification:
    """Trust tier and warnings for a single source"""
    if not payload.url or not payload.url.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Source URL is required")
    result = engine.trust_lookup.verify_source(payload.url.strip())
    logger.info(f"Source verified: {result.host or result.source} -> {result.status}")
    return result


@app.get("/sources/trusted")
async def trusted_sources(engine: CredibilityEngine = Depends(get_engine)) -> Dict[str, Any]:
    """Allow-listed source domains"""
    return {"sources": list(engine.trust_lookup.trusted_domains)}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8001")))
