"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from dhanrakshak.api.middleware import RequestIDMiddleware, MetricsMiddleware
from dhanrakshak.api.v1 import calculators, insights, sms
from dhanrakshak.infrastructure.observability.logging import setup_logging
from dhanrakshak.config import settings

setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="DhanRakshak Core",
        description="Bank SMS transaction extraction and portfolio insights service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # last added = first executed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(sms.router, prefix="/v1", tags=["sms"])
    app.include_router(insights.router, prefix="/v1", tags=["insights"])
    app.include_router(calculators.router, prefix="/v1", tags=["calculators"])

    return app


app = create_app()
