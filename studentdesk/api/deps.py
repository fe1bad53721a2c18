from fastapi import Request

from studentdesk.core.metrics import RequestMetrics
from studentdesk.services.store.base import StudentStore


def get_store(request: Request) -> StudentStore:
    """
    Dependency returning the record store owned by the running application.
    Overridable in tests through ``app.dependency_overrides``.
    """
    return request.app.state.store


def get_metrics(request: Request) -> RequestMetrics:
    return request.app.state.metrics
