import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response

from studentdesk.api.deps import get_metrics, get_store
from studentdesk.core.logging import logger
from studentdesk.core.metrics import RequestMetrics
from studentdesk.services.store.base import StudentStore

router = APIRouter()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
def health(
    request: Request,
    store: StudentStore = Depends(get_store),
    metrics: RequestMetrics = Depends(get_metrics),
):
    """
    Liveness plus record store connectivity.

    200 while the store answers, 503 ("degraded") when it does not.
    """
    try:
        connected = store.is_connected()
        body = {
            "status": "ok" if connected else "degraded",
            "timestamp": _now_iso(),
            "uptime": time.monotonic() - request.app.state.started_at,
            "database": "connected" if connected else "disconnected",
            "memory": metrics.memory_usage(),
        }
        return JSONResponse(
            status_code=status.HTTP_200_OK if connected else status.HTTP_503_SERVICE_UNAVAILABLE,
            content=body,
        )
    except Exception as e:
        logger.error("Health check failed", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "error", "message": str(e), "timestamp": _now_iso()},
        )


@router.get("/metrics")
def metrics_endpoint(metrics: RequestMetrics = Depends(get_metrics)):
    """Prometheus scrape endpoint."""
    payload, content_type = metrics.render()
    return Response(content=payload, media_type=content_type)
