from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from vital.api.deps import get_store
from vital.core.config import settings
from vital.core.exceptions import StoreError
from vital.schemas import Insight
from vital.store import MetricsStore

router = APIRouter(prefix="/insights", tags=["insights"])


class InsightIn(BaseModel):
    title: str = Field(..., min_length=1)
    content: str
    type: str = Field(..., description="Free-form category, e.g. 'sleep'")


@router.post("", response_model=Insight, status_code=201)
def create_insight(payload: InsightIn, store: MetricsStore = Depends(get_store)):
    try:
        return store.save_insight(payload.title, payload.content, payload.type)
    except StoreError as e:
        raise HTTPException(503, f"Metrics store unavailable: {e}")


@router.get("", response_model=list[Insight])
def list_recent_insights(
    limit: int = Query(settings.DEFAULT_INSIGHT_LIMIT, ge=0),
    store: MetricsStore = Depends(get_store),
):
    """Most recent insights first."""
    try:
        return store.get_recent_insights(limit=limit)
    except StoreError as e:
        raise HTTPException(503, f"Metrics store unavailable: {e}")
