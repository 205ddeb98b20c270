"""FastAPI application factory for the sandbox classifier service."""

from __future__ import annotations

from fastapi import FastAPI

from .metrics import instrument_app
from .metrics import router as metrics_router
from .routers.network import router as network_router
from .services.network_registry import NetworkRegistry
from .settings import APISettings, get_settings


def create_app(settings: APISettings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title=settings.app_name, version=settings.version)
    app.state.settings = settings
    app.state.registry = NetworkRegistry(settings)
    app.include_router(network_router)
    app.include_router(metrics_router)
    instrument_app(app)
    return app
