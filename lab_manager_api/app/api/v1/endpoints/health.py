"""
Health endpoint for API v1.

Besides liveness it reports how many snapshot writes have failed since
startup.  Failed writes are otherwise invisible to clients: the change
is applied in memory and the request succeeds.
"""

from fastapi import APIRouter, Depends

from lab_manager_api.app.core.store import EntityStore, get_store
from lab_manager_api.app.schemas.statistics import HealthStatus

router = APIRouter()


@router.get("/health", response_model=HealthStatus)
async def health(store: EntityStore = Depends(get_store)) -> HealthStatus:
    return HealthStatus(
        status="ok" if store.persistence_failures == 0 else "degraded",
        persistence_failures=store.persistence_failures,
        last_persistence_error=store.last_persistence_error,
    )
