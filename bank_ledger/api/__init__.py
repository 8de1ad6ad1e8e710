"""
Bank Ledger API Application Factory
"""

import time
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .accounts import router as accounts_router
from .transactions import router as transactions_router
from .errors import (
    http_exception_handler, validation_exception_handler, unhandled_exception_handler
)
from .. import __version__
from ..config import LedgerConfig, get_config
from ..ledger import LedgerService
from ..logging_config import get_logger, log_action


def create_app(
    ledger: Optional[LedgerService] = None,
    config: Optional[LedgerConfig] = None
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        ledger: Service instance to serve; a fresh in-memory one by default
        config: Configuration; the global one by default
    """
    config = config or get_config()
    if ledger is None:
        ledger = LedgerService(config=config)
        if config.seed_sample_data:
            ledger.seed_sample_data()

    app = FastAPI(
        title="Bank Ledger API",
        description="In-memory teaching ledger for team-scoped bank accounts",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.ledger = ledger

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    request_logger = get_logger("bank_ledger.api.requests")

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        log_action(
            request_logger, "info", f"{request.method} {request.url.path} {response.status_code}",
            action="http_request", resource=request.url.path,
            extra={
                "method": request.method,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2)
            }
        )
        return response

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(accounts_router, prefix="/api/accounts", tags=["Accounts"])
    app.include_router(transactions_router, prefix="/api", tags=["Transactions"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "bank_ledger_api",
            "version": __version__
        }

    @app.get("/")
    async def get_api_info():
        """Get API information"""
        return {
            "message": "Bank Backend API",
            "version": __version__,
            "endpoints": {
                "accounts": "/api/accounts",
                "transactions": "/api/transactions",
                "balance": "/api/accounts/{id}/balance",
                "transfer": "/api/transfer",
                "freeze": "/api/accounts/{id}/freeze",
                "unfreeze": "/api/accounts/{id}/unfreeze",
                "close": "/api/accounts/{id}/close",
                "interest": "/api/accounts/{id}/interest",
                "statement": "/api/accounts/{id}/statement",
                "docs": "/docs",
                "health": "/health"
            }
        }

    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None, debug: bool = False):
    """Run the API with uvicorn"""
    config = get_config()
    uvicorn.run(
        "bank_ledger.api:create_app",
        factory=True,
        host=host or config.api_host,
        port=port or config.api_port,
        reload=debug,
        log_level=config.log_level.lower()
    )
