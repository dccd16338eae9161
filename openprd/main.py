"""OpenPRD Backend - FastAPI Application.

- Provider catalog and key connectivity checks
- Encrypted key storage
- PRD generation and history
- Health check endpoints
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from openprd.config import get_settings
from openprd.core.rate_limiter import limiter
from openprd.errors.exceptions import OpenPRDError
from openprd.logging_config import setup_logging

from .api import generate, keys, logs, models, prds

settings = get_settings()
logger = logging.getLogger(__name__)

APP_TITLE = settings.app_name
APP_VERSION = settings.app_version


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan management."""
    # Configure logging first
    setup_logging()

    # Validate production secrets
    settings.validate_production_secrets()

    from openprd.core.key_vault import KeyVault
    from openprd.core.pipeline import GenerationPipeline
    from openprd.db.database import engine, get_session_factory, init_db
    from openprd.llm.registry import get_registry

    logger.info("Starting %s v%s (%s)", APP_TITLE, APP_VERSION, settings.environment)

    await init_db()
    logger.info("Database initialized")

    registry = get_registry()
    vault = KeyVault.from_settings(settings)
    app.state.registry = registry
    app.state.vault = vault
    app.state.pipeline = GenerationPipeline(get_session_factory(), registry, vault, settings)
    logger.info("Registered providers: %s", ", ".join(registry.list_providers()))

    yield

    logger.info("Shutting down %s", APP_TITLE)
    await engine.dispose()


app = FastAPI(
    title="OpenPRD API",
    description="""
## OpenPRD

Turn a short product description into a structured Product Requirements
Document using your own LLM provider key.

- **Models**: browse supported providers and check which models a key can use
- **Keys**: store provider keys encrypted at rest (AES-256-GCM)
- **Generate**: produce a PRD with sections, token estimate and cost estimate
- **PRDs**: list and fetch previously generated documents

### Rate Limits

- Generation: 10 req/min
- Connectivity checks: 20 req/min
- Key management: 30 req/min
""",
    version=APP_VERSION,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "models", "description": "Provider registry and key connectivity checks."},
        {"name": "keys", "description": "Encrypted storage of user API keys."},
        {"name": "generate", "description": "PRD generation."},
        {"name": "prds", "description": "Generated PRD history."},
        {"name": "health", "description": "Liveness and readiness probes."},
    ],
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
    openapi_url="/openapi.json" if not settings.is_production else None,
)

# Rate limiter state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
)


# Security headers middleware
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Add security headers to all responses."""
    response = await call_next(request)

    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["Cache-Control"] = "no-store"

    if settings.is_production:
        response.headers["Strict-Transport-Security"] = (
            "max-age=31536000; includeSubDomains"
        )

    return response


def _error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


# Error handlers
@app.exception_handler(OpenPRDError)
async def openprd_exception_handler(request: Request, exc: OpenPRDError):
    """Map domain errors to their status code and the standard error format."""
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.code, exc.message),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with standard error format."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(
            f"HTTP_{exc.status_code}",
            exc.detail if isinstance(exc.detail, str) else str(exc.detail),
        ),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report request body validation failures without echoing the input."""
    fields = [".".join(str(p) for p in err["loc"] if p != "body") for err in exc.errors()]
    return JSONResponse(
        status_code=422,
        content=_error_body("VALIDATION_ERROR", f"Invalid request fields: {', '.join(fields)}"),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception("Unhandled exception")

    return JSONResponse(
        status_code=500,
        content=_error_body("INTERNAL_ERROR", "An unexpected error occurred"),
    )


# === Health Check Endpoints ===

@app.get("/health/live", tags=["health"])
async def health_live():
    """Liveness probe - process is running."""
    return {"status": "alive"}


@app.get("/health/ready", tags=["health"])
async def health_ready():
    """Readiness probe - database reachable."""
    from sqlalchemy import text

    from openprd.db.database import AsyncSessionLocal

    checks = {"database": False}
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
        checks["database"] = True
    except Exception:
        logger.warning("Readiness check: database unreachable", exc_info=True)

    status = "ready" if checks["database"] else "not_ready"
    return JSONResponse(
        status_code=200 if checks["database"] else 503,
        content={"status": status, "checks": checks},
    )


# === Include Routers ===

app.include_router(models.router)
app.include_router(keys.router)
app.include_router(generate.router)
app.include_router(prds.router)
app.include_router(logs.router)


# === Root Endpoint ===

@app.get("/", tags=["root"])
async def root():
    """API information."""
    return {
        "name": APP_TITLE,
        "version": APP_VERSION,
        "docs": "/docs" if not settings.is_production else None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "openprd.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug,
    )
