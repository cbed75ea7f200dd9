"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from installment_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from installment_ledger.api.v1 import statement, summary, users
from installment_ledger.infrastructure.database.session import init_db
from installment_ledger.infrastructure.observability.logging import setup_logging
from installment_ledger.config import settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Installment Ledger",
        description="Shared card installments: monthly dues, outstanding debt and partial payments",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Middleware order: last added = first executed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(summary.router, prefix="/v1", tags=["summary"])
    app.include_router(statement.router, prefix="/v1", tags=["statement"])
    app.include_router(users.router, prefix="/v1", tags=["users"])

    return app


app = create_app()
