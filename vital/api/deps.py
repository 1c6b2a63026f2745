from fastapi import HTTPException, Request

from vital.companion import CompanionResponder
from vital.store import MetricsStore


def get_store(request: Request) -> MetricsStore:
    store: MetricsStore | None = getattr(request.app.state, "store", None)
    if store is None or not store.is_open:
        raise HTTPException(503, "DB not configured")
    return store


def get_companion(request: Request) -> CompanionResponder:
    return request.app.state.companion
