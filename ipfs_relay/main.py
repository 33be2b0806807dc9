import httpx
from fastapi import FastAPI

from ipfs_relay.api import router
from ipfs_relay.config import Settings
from ipfs_relay.errors import register_error_handlers
from ipfs_relay.observability import MetricsRegistry, RequestMetricsAndLoggingMiddleware


def create_app(settings: Settings, pinata_transport: httpx.AsyncBaseTransport | None = None) -> FastAPI:
    app = FastAPI(title="IPFS Upload Relay", version="0.1.0")
    app.state.settings = settings
    app.state.pinata_transport = pinata_transport
    app.state.metrics = MetricsRegistry()

    app.add_middleware(
        RequestMetricsAndLoggingMiddleware,
        registry=app.state.metrics,
        enable_metrics=settings.enable_metrics,
    )
    register_error_handlers(app)
    app.include_router(router)
    return app
