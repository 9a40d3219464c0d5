"""
FastAPI Application Entry Point

Integrates:
  - Generation endpoints (root and /api/v1)
  - Health checks
  - Middleware for logging & error handling

Run: python main.py   (or uvicorn main:app --host 0.0.0.0 --port 8080)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from api import register_exception_handlers, router as generation_router
from config import Config

# Setup logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
# urllib3 logs full request lines at DEBUG, including the key query parameter
logging.getLogger("urllib3").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

SERVICE_NAME = "spellbook"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.
    """
    # Startup
    logger.info("=" * 60)
    logger.info("Spellbook starting up...")
    logger.info(f"Environment: {Config.ENVIRONMENT}")
    logger.info(f"LLM Backend: {Config.LLM_BACKEND}")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("Spellbook shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Spellbook API",
    description="Structured study artifacts generated by an LLM",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


# Middleware for logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.debug(f"{request.method} {request.url.path}")
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"Request error: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )


# Include routers
app.include_router(generation_router, prefix="/api/v1")
app.include_router(generation_router)


# Health check endpoints
@app.get("/health")
@app.get("/api/v1/health")
async def health():
    """Service health check."""
    return {"status": "ok", "service": SERVICE_NAME}


@app.get("/health/live")
async def health_live():
    """Live health check (Kubernetes liveness probe)."""
    return {"status": "alive"}


@app.get("/health/ready")
async def health_ready():
    """Readiness health check (Kubernetes readiness probe)."""
    if Config.validate():
        return {"status": "ready"}
    return {"status": "not_ready", "reason": "GEMINI_API_KEY not configured"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Spellbook API",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "health": "GET /health",
            "roadmap": "POST /roadmap",
            "topics": "POST /topics",
            "key_results": "POST /key-results",
            "educational_roadmap": "POST /educational-roadmap",
            "educational_trail": "POST /educational-trail",
            "health_live": "GET /health/live",
            "health_ready": "GET /health/ready",
        },
    }


if __name__ == "__main__":
    import uvicorn

    if not Config.validate():
        raise SystemExit("GEMINI_API_KEY not configured")

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=Config.PORT,
    )
