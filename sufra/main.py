"""Application entry point.

Builds the FastAPI application: lifespan, metrics, exception handlers, middleware
and routers.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from sufra.api.v1.routes import api_router
from sufra.core.config.config import get_settings
from sufra.core.logging import get_logger
from sufra.db.session import init_db
from sufra.exceptions.handlers import register_exception_handlers
from sufra.middleware.process_time_middleware import ProcessTimeMiddleware
from sufra.middleware.request_id_middleware import RequestIDMiddleware
from sufra.middleware.security_headers_middleware import SecurityHeadersMiddleware

_log = get_logger(__name__)
settings = get_settings()

SERVICE_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Create missing tables on startup."""
    _log.info("Starting Sufra")
    init_db()
    yield
    _log.info("Shutting down Sufra")


app = FastAPI(
    title="Sufra",
    version=SERVICE_VERSION,
    description=(
        "Recipe sharing platform: public browsing, moderated submissions, curated "
        "lists and an AI-assisted back office."
    ),
    openapi_version="3.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Prometheus instrumentation (must be done before middleware setup)
instrumentator = Instrumentator()
instrumentator.instrument(app).expose(app)

register_exception_handlers(app)

# Middleware stack: the last one added runs first
app.add_middleware(ProcessTimeMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)

app.include_router(api_router, prefix="/api")


@app.get("/", tags=["root"], summary="Service information")
async def root() -> JSONResponse:
    return JSONResponse(
        content={
            "service": "sufra",
            "version": SERVICE_VERSION,
            "docs": "/docs",
            "health": "/api/v1/health",
        }
    )
