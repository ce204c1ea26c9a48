"""REST API routers."""

from fastapi import FastAPI

from app.endpoints import (
    apps,
    dispatch,
    health,
    identity,
    stats,
)


def include_routers(app: FastAPI) -> None:
    """Include FastAPI routers for different endpoints.

    The dispatch router holds a catch-all route and therefore has to be
    included last.

    Args:
        app: The `FastAPI` app instance.
    """
    app.include_router(identity.router)
    app.include_router(apps.router, prefix="/mock/azure")
    app.include_router(stats.router, prefix="/mock/azure")

    # health probes are not versioned
    app.include_router(health.router)

    app.include_router(dispatch.router)
