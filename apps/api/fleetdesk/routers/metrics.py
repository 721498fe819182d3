from fastapi import APIRouter, Depends

from fleetdesk.auth.dependencies import AuthContext, require_roles
from fleetdesk.observability import metrics_store
from fleetdesk.schemas.metrics import MetricsResponse

METRICS_ROLES = ("MANAGER", "ADMIN")

router = APIRouter(prefix="/metrics", tags=["metrics"])


@router.get("", summary="Request and dispatch metrics", response_model=MetricsResponse)
def metrics_endpoint(
    _auth: AuthContext = Depends(require_roles(*METRICS_ROLES)),
) -> MetricsResponse:
    """Process-local counters and timings; they reset when the worker restarts."""
    snapshot = metrics_store.snapshot()
    return MetricsResponse(counters=snapshot.counters, timings=snapshot.timings)
