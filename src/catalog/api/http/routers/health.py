"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from src.catalog.api.http.app_data import ApplicationDependencies
from src.catalog.api.http.deps import get_app_dependencies
from src.catalog.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe; does not check dependencies."""
    return {"status": "healthy", "service": "catalog"}


@router.get("/ready", response_model=None)
async def readiness(
    deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> dict[str, Any] | JSONResponse:
    """Readiness probe: 200 when the key-value store is usable, 503 otherwise."""
    config = get_config()
    store_healthy = deps.kv_store.is_available()
    body = {
        "status": "ready" if store_healthy else "not_ready",
        "checks": {
            "storage": {
                "status": "healthy" if store_healthy else "unhealthy",
                "backend": config.storage.backend,
                "key": deps.product_storage.key,
            }
        },
    }
    if not store_healthy:
        return JSONResponse(status_code=503, content=body)
    return body
