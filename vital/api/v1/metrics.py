from __future__ import annotations

from datetime import date as DateType, datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from vital.api.deps import get_store
from vital.core.exceptions import StoreError
from vital.schemas import DailyMetrics
from vital.store import MetricsStore

router = APIRouter(prefix="/metrics", tags=["metrics"])


class MetricsSummaryOut(BaseModel):
    start: str
    end: str
    days_with_data: int
    avg_steps: float | None
    avg_heart_rate: float | None
    avg_sleep_hours: float | None
    avg_active_calories: float | None
    total_steps: int


def _avg(values: list[float | None]) -> float | None:
    nums = [v for v in values if v is not None]
    if not nums:
        return None
    return round(sum(nums) / len(nums), 1)


@router.put("/daily", response_model=DailyMetrics)
def upsert_daily_metrics(payload: DailyMetrics, store: MetricsStore = Depends(get_store)):
    """
    Store metrics for the local calendar day of payload.date, replacing any
    values already stored for that day.
    """
    try:
        return store.upsert_daily_metrics(payload)
    except StoreError as e:
        raise HTTPException(503, f"Metrics store unavailable: {e}")


@router.get("/daily/{date_str}", response_model=DailyMetrics)
def get_daily_metrics(date_str: str, store: MetricsStore = Depends(get_store)):
    try:
        target_date = datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format, expected YYYY-MM-DD")

    try:
        metrics = store.get_daily_metrics(target_date)
    except StoreError as e:
        raise HTTPException(503, f"Metrics store unavailable: {e}")

    if metrics is None:
        raise HTTPException(404, f"No metrics stored for {date_str}")
    return metrics


@router.get("/daily", response_model=list[DailyMetrics])
def list_daily_metrics(
    start: DateType = Query(..., description="First day (YYYY-MM-DD), inclusive"),
    end: DateType = Query(..., description="Last day (YYYY-MM-DD), inclusive"),
    store: MetricsStore = Depends(get_store),
):
    if end < start:
        raise HTTPException(400, "end must not be before start")

    try:
        return store.get_daily_metrics_range(start, end)
    except StoreError as e:
        raise HTTPException(503, f"Metrics store unavailable: {e}")


@router.get("/summary", response_model=MetricsSummaryOut)
def summarize_metrics(
    days: int = Query(7, ge=1, le=366),
    store: MetricsStore = Depends(get_store),
):
    """Averages over the last `days` local calendar days, today included."""
    today = store.today()
    start = today - timedelta(days=days - 1)

    try:
        rows = store.get_daily_metrics_range(start, today)
    except StoreError as e:
        raise HTTPException(503, f"Metrics store unavailable: {e}")

    return MetricsSummaryOut(
        start=start.isoformat(),
        end=today.isoformat(),
        days_with_data=len(rows),
        avg_steps=_avg([r.steps for r in rows]),
        avg_heart_rate=_avg([r.heart_rate for r in rows if r.heart_rate > 0]),
        avg_sleep_hours=_avg([r.sleep_hours for r in rows if r.sleep_hours > 0]),
        avg_active_calories=_avg([r.active_calories for r in rows]),
        total_steps=sum(r.steps for r in rows),
    )
