"""
FastAPI server for the TraceChain Framework

This module builds the REST application around a SupplyChainLedger. The
ledger is allocated when the application is created and stored on
app.state, so no request can reach an uninitialized store through the
normal startup path.

The server includes CORS support, security headers, a request size limit
and a uniform JSON error envelope.
"""

import logging

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from tracechain import __version__
from tracechain.api.v1.endpoints import router as v1_router
from tracechain.config.settings import Settings, get_settings
from tracechain.core.results import StoreNotInitializedError
from tracechain.domains.supply_chain.ledger import SupplyChainLedger

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings):
    """Apply the configured log level and format to the root logger"""
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=settings.LOG_FORMAT)


@asynccontextmanager
async def lifespan(fast_app: FastAPI):
    """Application lifespan events"""
    ledger: SupplyChainLedger = fast_app.state.ledger
    ledger.store.initialize()
    logger.info("Starting TraceChain API server (%r)", ledger)
    yield
    logger.info("Shutting down TraceChain API server...")


def create_app(ledger: SupplyChainLedger | None = None,
               settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        ledger: Ledger to serve (built from settings when omitted)
        settings: Settings to use (environment-selected when omitted)
    """
    settings = settings or get_settings()
    api_config = settings.get_api_config()

    config_errors = settings.validate_config()
    if config_errors:
        raise ValueError(f"Invalid configuration: {'; '.join(config_errors)}")

    fast_app = FastAPI(
        title="TraceChain Framework API",
        description="REST API for the TraceChain supply chain traceability ledger",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    fast_app.state.ledger = ledger or SupplyChainLedger.from_config(settings.get_ledger_config())

    fast_app.add_middleware(
        CORSMiddleware,
        allow_origins=api_config["cors_origins"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @fast_app.middleware("http")
    async def security_headers_middleware(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Cache-Control"] = "no-store"

        if request.url.path in ["/docs", "/redoc", "/openapi.json"]:
            response.headers["Content-Security-Policy"] = (
                "default-src 'self'; "
                "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
                "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
                "img-src 'self' data: https://fastapi.tiangolo.com"
            )
        else:
            response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"
        return response

    @fast_app.middleware("http")
    async def limit_upload_size(request: Request, call_next):
        max_upload_size = api_config["max_upload_size"]
        content_length = request.headers.get("content-length")
        if request.method == "POST" and content_length and content_length.isdigit():
            if int(content_length) > max_upload_size:
                return JSONResponse(
                    status_code=413,
                    content={
                        "error": "Payload Too Large",
                        "message": f"Request body too large. Limit is {max_upload_size} bytes",
                        "status_code": 413
                    }
                )
        return await call_next(request)

    fast_app.include_router(v1_router)

    @fast_app.get("/")
    async def root():
        """Root endpoint with API information"""
        return {
            "name": "TraceChain Framework API",
            "version": __version__,
            "description": "Supply chain traceability ledger",
            "docs_url": "/docs",
            "health_check": "/api/v1/health",
            "api_versions": ["/api/v1"]
        }

    @fast_app.exception_handler(HTTPException)
    async def http_exception_handler(_request, exc):
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": "HTTP error",
                "message": exc.detail,
                "status_code": exc.status_code
            }
        )

    @fast_app.exception_handler(StoreNotInitializedError)
    async def store_not_initialized_handler(_request, exc):
        logger.error("Request reached an uninitialized store: %s", exc)
        return JSONResponse(
            status_code=503,
            content={
                "error": "Service Unavailable",
                "message": str(exc),
                "status_code": 503
            }
        )

    @fast_app.exception_handler(Exception)
    async def global_exception_handler(_request, exc):
        logger.exception("Unhandled exception: %s", exc)
        is_debug = settings.LOG_LEVEL.upper() == "DEBUG"
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred",
                "detail": str(exc) if is_debug else "Contact system administrator"
            }
        )

    return fast_app


def run_server(host: str | None = None, port: int | None = None):
    """Run the server with uvicorn"""
    settings = get_settings()
    configure_logging(settings)
    api_config = settings.get_api_config()

    uvicorn.run(
        "tracechain.api.server:create_app",
        factory=True,
        host=host or api_config["host"],
        port=port or api_config["port"],
        log_level=settings.LOG_LEVEL.lower(),
        server_header=False,
        timeout_keep_alive=5
    )


if __name__ == "__main__":
    run_server()
