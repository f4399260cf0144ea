"""FastAPI application factory"""

from datetime import datetime, timezone
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from bazicash_gateway.api.errors import register_exception_handlers
from bazicash_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from bazicash_gateway.api.proxy.router import build_proxy_router
from bazicash_gateway.infrastructure.observability.logging import setup_logging
from bazicash_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="BaziCash Gateway",
        description="Shopify App Proxy backend for the BaziCash store credit wallet",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": settings.service_name,
            "shopify": {
                "store": settings.shopify_store_domain,
                "apiVersion": settings.shopify_api_version,
            },
        }

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Shopify forwards /{prefix}/{subpath}/* to {backend}/proxy/*
    app.include_router(build_proxy_router(), prefix="/proxy", tags=["proxy"])
    app.include_router(
        build_proxy_router(),
        prefix=f"/{settings.app_proxy_prefix}/{settings.app_proxy_subpath}",
        include_in_schema=False,
    )

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn"""
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
