"""
Expense Tracker API Application Factory
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import ExpenseTrackerConfig, get_config
from ..errors import ExpenseTrackerError
from ..logging_config import setup_logging, log_action
from ..storage import StorageInterface
from .auth import router as auth_router
from .dependencies import ExpenseTrackerSystem
from .expenses import router as expenses_router


def _format_request_errors(exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return messages


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Close the storage backend when the application shuts down"""
    yield
    app.state.system.close()


def create_app(config: Optional[ExpenseTrackerConfig] = None,
               storage: Optional[StorageInterface] = None) -> FastAPI:
    """Create and configure the FastAPI application"""
    config = config or get_config()
    logger = setup_logging(config.log_level)

    app = FastAPI(
        title="Expense Tracker API",
        description="RESTful API for managing personal expenses with authentication",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.system = ExpenseTrackerSystem(config=config, storage=storage)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept"],
    )

    if config.log_requests:
        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.perf_counter()
            response = await call_next(request)
            log_action(
                logger, "info", f"{request.method} {request.url.path}",
                action="http_request", resource=request.url.path,
                extra={
                    "status": response.status_code,
                    "elapsed_ms": round((time.perf_counter() - started) * 1000, 2),
                    "authorization_present": "authorization" in request.headers,
                }
            )
            return response

    @app.exception_handler(ExpenseTrackerError)
    async def handle_service_error(request: Request, exc: ExpenseTrackerError):
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        content = {"detail": exc.message}
        violations = getattr(exc, "violations", None)
        if violations:
            content["errors"] = violations
        if exc.status_code >= 500:
            log_action(logger, "error", exc.message, action="request_failed",
                       resource=request.url.path)
        return JSONResponse(status_code=exc.status_code, content=content, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_shape_error(request: Request, exc: RequestValidationError):
        errors = _format_request_errors(exc)
        return JSONResponse(
            status_code=400,
            content={"detail": "Validation failed", "errors": errors}
        )

    app.include_router(auth_router, prefix="/auth", tags=["Authentication"])
    app.include_router(expenses_router, prefix="/expenses", tags=["Expenses"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "expense_tracker_api",
            "version": __version__
        }

    @app.get("/")
    async def get_api_info():
        """Get API information"""
        return {
            "name": "Expense Tracker API",
            "version": __version__,
            "endpoints": {
                "docs": "/docs",
                "openapi": "/openapi.json",
                "health": "/health",
                "auth": "/auth",
                "expenses": "/expenses",
            }
        }

    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None,
               reload: Optional[bool] = None):
    """Run the API server with uvicorn"""
    config = get_config()
    uvicorn.run(
        "expense_tracker.api:create_app",
        factory=True,
        host=host or config.api_host,
        port=port or config.api_port,
        reload=config.api_reload if reload is None else reload,
        log_level=config.log_level.lower()
    )
