"""Health check and metrics endpoints."""

import time
from typing import Literal

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from gist import __version__
from gist.api.dependencies import ConversationStoreDep, SettingsDep
from gist.api.models.health import ComponentHealth, HealthResponse
from gist.conversation.store import ConversationStore
from gist.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


async def _check_store_health(store: ConversationStore) -> ComponentHealth:
    """Probe the store with a one-item listing."""
    start = time.monotonic()
    try:
        await store.list_conversations(None, limit=1)
    except Exception as e:
        return ComponentHealth(
            name="conversation_store",
            status="unhealthy",
            latency_ms=(time.monotonic() - start) * 1000,
            message=str(e),
        )
    return ComponentHealth(
        name="conversation_store",
        status="healthy",
        latency_ms=(time.monotonic() - start) * 1000,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: SettingsDep, store: ConversationStoreDep) -> HealthResponse:
    """Report service health and the agent backend in use."""
    components = [
        await _check_store_health(store),
        ComponentHealth(
            name="agent_source",
            status="healthy",
            message=f"backend={settings.agent.backend}",
        ),
    ]

    overall: Literal["healthy", "degraded", "unhealthy"] = "healthy"
    if any(c.status == "unhealthy" for c in components):
        overall = "unhealthy"

    logger.debug("health_check_completed", status=overall)
    return HealthResponse(status=overall, version=__version__, components=components)


async def get_metrics() -> Response:
    """Prometheus metrics in text format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
