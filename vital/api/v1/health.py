from fastapi import APIRouter, Request

from vital.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request):
    store = getattr(request.app.state, "store", None)
    return {
        "status": "ok",
        "environment": settings.ENVIRONMENT,
        "db": store is not None and store.is_open,
    }
