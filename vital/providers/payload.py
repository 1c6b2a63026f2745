"""
Provider backed by a Health Auto Export style JSON payload.

    {
        "StepCount": [{"date": "2025-01-01 08:00:00 -0500", "qty": 420}, ...],
        "HeartRate": [{"date": "...", "qty": 71}, ...],
        "SleepAnalysis": [{"startDate": "...", "endDate": "...", "value": "AsleepCore"}, ...],
        "ActiveEnergyBurned": [{"date": "...", "qty": 12.5, "units": "kcal"}, ...]
    }

Records that cannot be parsed are skipped. All timestamps are converted to
naive local wall-clock time on load.
"""

from __future__ import annotations

import logging
from datetime import date as DateType, datetime, tzinfo
from typing import Any, Dict

from vital.core.days import to_local
from vital.providers.base import HealthSamples, QuantitySample, SleepInterval

logger = logging.getLogger(__name__)

STEP_TYPES = ("StepCount", "step_count", "HKQuantityTypeIdentifierStepCount")
HEART_RATE_TYPES = ("HeartRate", "heart_rate", "HKQuantityTypeIdentifierHeartRate")
SLEEP_TYPES = ("SleepAnalysis", "sleep_analysis", "HKCategoryTypeIdentifierSleepAnalysis")
ACTIVE_ENERGY_TYPES = (
    "ActiveEnergyBurned",
    "active_energy",
    "HKQuantityTypeIdentifierActiveEnergyBurned",
)

_DATETIME_FORMATS = (
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S",
)


def _parse_dt(dt_str: str | None) -> datetime | None:
    if not dt_str or not isinstance(dt_str, str):
        return None
    if dt_str.endswith("Z"):
        dt_str = dt_str.replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(dt_str)
    except ValueError:
        pass
    for fmt in _DATETIME_FORMATS:
        try:
            return datetime.strptime(dt_str, fmt)
        except ValueError:
            continue
    return None


def _to_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _to_kcal(value: float, unit: str | None) -> float:
    if unit and unit.lower() in ("kj", "kilojoule", "kilojoules"):
        return value / 4.184
    if unit and unit.lower() in ("cal", "smallcalorie"):
        return value / 1000.0
    return value


def _is_asleep(stage: str) -> bool:
    # InBed and Awake are recorded alongside sleep but are not sleep
    normalized = (stage or "asleep").lower().replace("_", "").replace(" ", "")
    return not normalized.endswith(("inbed", "awake"))


class PayloadHealthProvider:
    """Serve samples from an already-received export payload."""

    def __init__(
        self,
        payload: Dict[str, Any],
        timezone: tzinfo | None = None,
        grant_access: bool = True,
    ):
        self.timezone = timezone
        self._grant_access = grant_access
        self._authorized = False
        self._samples = self._parse_payload(payload)

    @property
    def is_authorized(self) -> bool:
        return self._authorized

    def request_authorization(self) -> bool:
        self._authorized = self._grant_access
        if not self._authorized:
            logger.warning("Health data authorization denied")
        return self._authorized

    def fetch_samples(self, start: datetime, end: datetime) -> HealthSamples:
        if not self._authorized:
            raise PermissionError("Health data access has not been authorized")

        def in_window(sample: QuantitySample) -> bool:
            return start <= sample.start < end

        return HealthSamples(
            steps=[s for s in self._samples.steps if in_window(s)],
            heart_rate=[s for s in self._samples.heart_rate if in_window(s)],
            sleep=[s for s in self._samples.sleep if s.start < end and s.end > start],
            active_energy=[s for s in self._samples.active_energy if in_window(s)],
        )

    def days_covered(self) -> list[DateType]:
        """Local calendar days that at least one sample starts on, ascending."""
        days = set()
        for group in (self._samples.steps, self._samples.heart_rate, self._samples.active_energy):
            days.update(s.start.date() for s in group)
        # Sleep belongs to every day it overlaps
        for interval in self._samples.sleep:
            days.add(interval.start.date())
            days.add(interval.end.date())
        return sorted(days)

    # ---------- parsing ----------

    def _parse_payload(self, payload: Dict[str, Any]) -> HealthSamples:
        samples = HealthSamples()
        skipped = 0

        for data_type, records in payload.items():
            if not isinstance(records, list):
                continue

            for rec in records:
                if not isinstance(rec, dict):
                    skipped += 1
                    continue

                if data_type in SLEEP_TYPES:
                    interval = self._parse_sleep(rec)
                    if interval is None:
                        skipped += 1
                    elif _is_asleep(interval.stage):
                        samples.sleep.append(interval)
                    continue

                sample = self._parse_quantity(rec)
                if sample is None:
                    skipped += 1
                elif data_type in STEP_TYPES:
                    samples.steps.append(sample)
                elif data_type in HEART_RATE_TYPES:
                    samples.heart_rate.append(sample)
                elif data_type in ACTIVE_ENERGY_TYPES:
                    sample.value = _to_kcal(sample.value, rec.get("units") or rec.get("unit"))
                    samples.active_energy.append(sample)

        if skipped:
            logger.warning(f"Skipped {skipped} unparseable health records")
        return samples

    def _local(self, value: str | None) -> datetime | None:
        dt = _parse_dt(value)
        if dt is None:
            return None
        return to_local(dt, self.timezone)

    def _parse_quantity(self, rec: Dict[str, Any]) -> QuantitySample | None:
        start = self._local(rec.get("date") or rec.get("startDate"))
        if start is None:
            return None

        value = _to_number(rec.get("qty", rec.get("value")))
        if value is None:
            # Heart rate exports carry Min/Avg/Max instead of qty
            value = _to_number(rec.get("Avg"))
        if value is None or value < 0:
            return None

        end = self._local(rec.get("endDate")) or start
        return QuantitySample(start=start, end=end, value=value)

    def _parse_sleep(self, rec: Dict[str, Any]) -> SleepInterval | None:
        start = self._local(rec.get("startDate") or rec.get("date"))
        end = self._local(rec.get("endDate"))
        if start is None or end is None or end <= start:
            return None
        stage = rec.get("value")
        return SleepInterval(start=start, end=end, stage=stage if isinstance(stage, str) else "asleep")
