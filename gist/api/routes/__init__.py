"""API route registration."""

from fastapi import APIRouter, FastAPI

from gist.config.settings import Settings
from gist.observability.logging import get_logger

logger = get_logger(__name__)


def create_v1_router() -> APIRouter:
    """Create the v1 API router with all routes."""
    router = APIRouter(prefix="/v1")

    from gist.api.routes.agent import router as agent_router
    from gist.api.routes.conversations import router as conversations_router
    from gist.api.routes.turns import router as turns_router

    router.include_router(agent_router, tags=["Agent"])
    router.include_router(conversations_router, tags=["Conversations"])
    router.include_router(turns_router, tags=["Turns"])

    logger.debug("v1_router_created", routes=["agent", "conversations", "turns"])

    return router


def register_routes(app: FastAPI, settings: Settings) -> None:
    """Register all routes with the FastAPI application.

    Args:
        app: FastAPI application instance
        settings: Settings deciding whether and where metrics are exposed
    """
    app.include_router(create_v1_router())

    from gist.api.routes.health import get_metrics
    from gist.api.routes.health import router as health_router

    app.include_router(health_router, tags=["Health"])

    metrics = settings.observability.metrics
    if metrics.enabled:
        app.add_api_route(metrics.path, get_metrics, methods=["GET"], tags=["Health"])

    logger.info("routes_registered", metrics_path=metrics.path if metrics.enabled else None)
