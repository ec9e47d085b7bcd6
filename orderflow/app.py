"""
Main FastAPI application.

This file wires together all layers:
- Domain: Entities, status machine and business exceptions
- Repositories: Data access
- Services: Business use cases
- Routers: HTTP endpoints
"""

from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .config import settings
from .database import init_db
from .domain.exceptions import BusinessRuleViolation, PersistenceFailure
from .logging_config import setup_logging
from .routers import clients, health, order_items, orders, products

setup_logging(log_level=settings.LOG_LEVEL, service_name="orderflow", use_json=settings.LOG_JSON)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("service_starting", service=settings.APP_NAME, version=__version__)
    init_db()
    yield
    logger.info("service_stopped", service=settings.APP_NAME)


app = FastAPI(
    title=settings.APP_NAME,
    description="Client, product and order registration with filtered, paginated queries",
    version=__version__,
    lifespan=lifespan,
    debug=settings.DEBUG,
)


# Request ID middleware
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Bind a request ID to every log line emitted while handling the request."""
    request_id = request.headers.get("X-Request-ID") or str(uuid4())
    structlog.contextvars.bind_contextvars(request_id=request_id)
    try:
        response = await call_next(request)
    finally:
        structlog.contextvars.clear_contextvars()

    response.headers["X-Request-ID"] = request_id
    return response


app.include_router(health.router)
app.include_router(clients.router)
app.include_router(products.router)
app.include_router(orders.router)
app.include_router(order_items.router)


@app.exception_handler(BusinessRuleViolation)
async def business_rule_violation_handler(request: Request, exc: BusinessRuleViolation):
    """Every business failure is reported as 400 with its message."""
    if isinstance(exc, PersistenceFailure):
        logger.error(
            "persistence_failure_response",
            path=request.url.path,
            method=request.method,
            error=exc.message,
        )
    else:
        logger.info(
            "business_rule_violation",
            path=request.url.path,
            method=request.method,
            error=exc.message,
        )

    return JSONResponse(
        status_code=400,
        content={"message": exc.message, "details": exc.details},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("orderflow.app:app", host=settings.HOST, port=settings.PORT, log_level="info")
