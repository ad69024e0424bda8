"""
FastAPI Main Application

Entry point for the society fund API.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .. import __version__
from ..config import SocietyConfig
from ..errors import SocietyFundError, StoreConnectionError, ValidationError
from ..ledger.entries import BLOCKS
from ..ledger.store import EntryStore
from .routes import expenses_router, funds_router, reports_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add basic security headers to all responses"""

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        return response


async def handle_app_error(request: Request, exc: SocietyFundError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.kind}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return JSONResponse(
        status_code=ValidationError.status_code,
        content=ValidationError(messages).to_dict(),
    )


def create_app(
    store: EntryStore | None = None,
    config: SocietyConfig | None = None,
) -> FastAPI:
    """Create the API application.

    Args:
        store: Entry store (built from the environment at start-up if None)
        config: Society configuration (loaded from config/ if None)

    Returns:
        FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        logger.info("Starting Society Fund API...")
        app.state.config = config or SocietyConfig()
        app.state.store = store or EntryStore()
        try:
            app.state.store.ensure_schema()
        except StoreConnectionError as exc:
            # Requests will report the outage until the store comes back
            logger.error(f"Store schema setup failed: {exc.detail}")
        yield
        logger.info("Shutting down Society Fund API...")
        app.state.store.dispose()

    app = FastAPI(
        title="Society Fund API",
        description="Fund collection and expense records for a residential society",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(SecurityHeadersMiddleware)

    cors_origins = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(SocietyFundError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)

    app.include_router(funds_router, prefix="/api")
    app.include_router(expenses_router, prefix="/api")
    app.include_router(reports_router, prefix="/api")

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": "Society Fund API",
            "version": __version__,
            "status": "running",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/api")
    async def api_info():
        """API information endpoint."""
        return {
            "endpoints": {
                "blocks": "/api/blocks",
                "funds": "/api/funds",
                "expenses": "/api/expenses",
                "fund_summary": "/api/reports/funds/summary",
                "balance": "/api/reports/balance",
                "fund_export": "/api/reports/funds/export?scope=all&format=xlsx",
                "summary_export": "/api/reports/funds/summary/export?format=pdf",
                "expense_export": "/api/reports/expenses/export?format=xlsx",
            },
        }

    @app.get("/api/blocks")
    async def list_blocks():
        """Blocks in report order, for form select options."""
        return {"blocks": list(BLOCKS)}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "society_fund.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=os.getenv("ENVIRONMENT", "development") == "development",
    )
