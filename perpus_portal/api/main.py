"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from perpus_portal.api.errors import domain_exception_handler
from perpus_portal.api.middleware import RequestIDMiddleware, MetricsMiddleware
from perpus_portal.api.sessions import SessionRegistry
from perpus_portal.api.v1 import auth, members, portal
from perpus_portal.domain.exceptions import DomainException
from perpus_portal.infrastructure.observability.logging import setup_logging
from perpus_portal.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="e-Perpus Member Portal",
        description="Library membership, borrowing history and loan reminders",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Visitor sessions live as long as this app instance
    app.state.sessions = SessionRegistry()

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(DomainException, domain_exception_handler)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(members.router, prefix="/v1", tags=["members"])
    app.include_router(auth.router, prefix="/v1", tags=["auth"])
    app.include_router(portal.router, prefix="/v1", tags=["sessions"])

    return app


app = create_app()
