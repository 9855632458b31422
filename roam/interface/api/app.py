"""FastAPI application."""

from dishka import AsyncContainer
from fastapi import FastAPI

from roam.interface.api.middleware import RoamingSessionMiddleware
from roam.interface.api.routes import accounts, auth, health, network, signups, sites
from roam.util.di.container import create_container, setup_di
from roam.util.observability import instrument_fastapi


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Logfire should be configured first; scripts/start_app.py does so and
    hands this factory to uvicorn.

    Args:
        container: DI container to use; the production container if omitted
    """
    app_instance = FastAPI(
        title="Roam",
        description="Cross-site authentication and session propagation for multi-tenant networks",
        version="0.1.0",
    )

    instrument_fastapi(app_instance)

    # Added before dishka so the container middleware wraps it
    app_instance.add_middleware(RoamingSessionMiddleware)

    setup_di(app_instance, container or create_container())

    app_instance.include_router(health.router)
    app_instance.include_router(auth.router)
    app_instance.include_router(accounts.router)
    app_instance.include_router(signups.router)
    app_instance.include_router(sites.router)
    app_instance.include_router(network.router)

    return app_instance

