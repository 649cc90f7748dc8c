"""
Support Triage - Main Application
=================================

AI-assisted triage for free-form support messages.

Modules:
- Triage: Classify messages, draft replies, flag low-confidence results

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities and value objects
- Infrastructure: Database, LLM
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

# Configuration
from support_triage.config import settings

# Infrastructure
from support_triage.infrastructure.database import (
    init_database, close_database, create_tables, ping_database
)
from support_triage.infrastructure.llm import build_llm_client

# Triage module
from support_triage.triage.infrastructure import LLMClientAdapter
from support_triage.triage.interfaces import triage_router

# Shared
from support_triage.shared.api.middleware import (
    CorrelationIDMiddleware,
    BodySizeLimitMiddleware,
    LoggingMiddleware,
    global_exception_handler
)
from support_triage.shared.infrastructure.logging import setup_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Wire logging, storage and the model client for the app's lifetime.

    Storage that cannot be reached at boot does not stop the server:
    triage still answers, only persistence fails per request.
    """
    setup_logging(settings.log_level, settings.environment)
    logger.info("Starting Support Triage", extra={
        "version": settings.app_version,
        "environment": settings.environment,
        "port": settings.port
    })

    init_database()
    try:
        await create_tables()
        logger.info("Database schema ready")
    except Exception as e:
        logger.warning(
            "Database unavailable at startup, continuing without storage",
            extra={"error": str(e)}
        )

    llm_client = build_llm_client()
    app.state.llm_client = LLMClientAdapter(llm_client) if llm_client is not None else None
    if app.state.llm_client is None:
        logger.warning("No LLM configured, every triage will use the fallback result")
    else:
        logger.info("LLM client ready", extra={"model": app.state.llm_client.model})

    yield

    logger.info("Shutting down Support Triage")
    await close_database()


app = FastAPI(
    title="Support Triage API",
    description="""
    ## AI-Assisted Support Message Triage

    Turns free-form support messages into structured triage records.

    **Endpoints:**
    - `POST /triage` - Triage a message and store the result
    - `GET /triage?limit=N` - List recent triage records (1-100, default 10)
    - `GET /triage/{id}` - Get a single triage record

    **Result fields:**
    - Categories: billing, technical, account, other
    - Priorities: low, medium, high
    - `needs_human_review` is true whenever confidence is below 0.6

    Unparsable or unavailable model output never fails a request: a
    zero-confidence fallback result is returned and flagged for review.
    """,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# === Middleware (last added runs first) ===
app.add_middleware(LoggingMiddleware)
app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_request_body_bytes)
app.add_middleware(CorrelationIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_exception_handler(Exception, global_exception_handler)

# === Routers ===
app.include_router(triage_router)


# === Operational endpoints ===

@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """Liveness plus storage reachability; `degraded` when the database is down."""
    llm_client = getattr(request.app.state, "llm_client", None)

    try:
        await ping_database()
        database = "connected"
    except Exception as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        database = "unavailable"

    return {
        "status": "healthy" if database == "connected" else "degraded",
        "version": settings.app_version,
        "environment": settings.environment,
        "checks": {
            "database": database,
            "llm_client": f"available ({llm_client.model})" if llm_client else "not_configured"
        }
    }


@app.get("/", tags=["Root"])
async def root():
    return {
        "service": "Support Triage",
        "version": settings.app_version,
        "docs": "/docs",
        "health": "/health",
        "modules": {
            "triage": {
                "prefix": "/triage",
                "endpoints": [
                    "POST /triage - Triage a support message",
                    "GET /triage - List recent triage records",
                    "GET /triage/{id} - Get a triage record"
                ]
            }
        }
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "support_triage.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower()
    )
