"""
Pull one local day of samples from a provider and upsert it as DailyMetrics.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date as DateType, datetime

from vital.core.days import day_bounds
from vital.providers.base import HealthDataProvider, HealthSamples
from vital.schemas import DailyMetrics
from vital.store import MetricsStore

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    day: DateType
    authorized: bool
    metrics: DailyMetrics | None = None


def aggregate_day(
    samples: HealthSamples,
    start: datetime,
    end: datetime,
    existing: DailyMetrics | None = None,
) -> DailyMetrics:
    """
    Collapse a day's samples into one DailyMetrics.

    Steps and active energy are summed, heart rate is the mean of its
    samples, sleep is the total overlap of sleep intervals with [start, end).
    A metric kind with no samples keeps its value from `existing`, so a
    payload carrying only sleep does not zero the day's steps.
    """
    carried = existing or DailyMetrics(date=start)

    steps = carried.steps
    if samples.steps:
        steps = round(sum(s.value for s in samples.steps))

    active_calories = carried.active_calories
    if samples.active_energy:
        active_calories = round(sum(s.value for s in samples.active_energy), 1)

    heart_rate = carried.heart_rate
    if samples.heart_rate:
        heart_rate = round(sum(s.value for s in samples.heart_rate) / len(samples.heart_rate), 1)

    sleep_hours = carried.sleep_hours
    if samples.sleep:
        asleep_seconds = 0.0
        for interval in samples.sleep:
            overlap = (min(interval.end, end) - max(interval.start, start)).total_seconds()
            if overlap > 0:
                asleep_seconds += overlap
        sleep_hours = round(asleep_seconds / 3600.0, 2)

    return DailyMetrics(
        date=start,
        steps=steps,
        heart_rate=heart_rate,
        sleep_hours=sleep_hours,
        active_calories=active_calories,
    )


class HealthSync:
    def __init__(self, provider: HealthDataProvider, store: MetricsStore):
        self.provider = provider
        self.store = store

    def _ensure_authorized(self) -> bool:
        if self.provider.is_authorized:
            return True
        return self.provider.request_authorization()

    def sync_day(self, day: datetime | DateType) -> SyncResult:
        """
        Fetch, aggregate and store one day.

        A day with no samples at all is left untouched, and metric kinds
        missing from the samples keep their stored values.
        """
        start, end = day_bounds(day, self.store.timezone)

        if not self._ensure_authorized():
            logger.warning(f"Skipping health sync for {start.date()}: not authorized")
            return SyncResult(day=start.date(), authorized=False)

        samples = self.provider.fetch_samples(start, end)
        if samples.is_empty():
            logger.debug(f"No health samples for {start.date()}")
            return SyncResult(day=start.date(), authorized=True)

        existing = self.store.get_daily_metrics(start)
        stored = self.store.upsert_daily_metrics(aggregate_day(samples, start, end, existing))
        logger.info(
            f"Synced {start.date()}: steps={stored.steps} hr={stored.heart_rate} "
            f"sleep={stored.sleep_hours}h kcal={stored.active_calories}"
        )
        return SyncResult(day=start.date(), authorized=True, metrics=stored)

    def sync_days(self, days: list[DateType]) -> list[SyncResult]:
        results = []
        for day in days:
            result = self.sync_day(day)
            results.append(result)
            if not result.authorized:
                break
        return results
