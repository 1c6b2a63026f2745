"""
Health data provider protocol.

A provider is the authorization-gated source of raw biometric samples
(HealthKit or anything shaped like it). It returns samples for a requested
window; turning them into a DailyMetrics record is HealthSync's job.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol, runtime_checkable


@dataclass
class QuantitySample:
    """A numeric sample covering [start, end]. Instantaneous samples have start == end."""

    start: datetime
    end: datetime
    value: float


@dataclass
class SleepInterval:
    start: datetime
    end: datetime
    stage: str = "asleep"


@dataclass
class HealthSamples:
    steps: list[QuantitySample] = field(default_factory=list)
    heart_rate: list[QuantitySample] = field(default_factory=list)
    sleep: list[SleepInterval] = field(default_factory=list)
    active_energy: list[QuantitySample] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.steps or self.heart_rate or self.sleep or self.active_energy)


@runtime_checkable
class HealthDataProvider(Protocol):
    """Protocol every health data source must satisfy."""

    @property
    def is_authorized(self) -> bool:
        ...

    def request_authorization(self) -> bool:
        """Ask for read access to steps, heart rate, sleep and active energy."""
        ...

    def fetch_samples(self, start: datetime, end: datetime) -> HealthSamples:
        """
        Samples in the half-open window [start, end).

        Quantity samples are selected by their start time; sleep intervals
        are returned when they overlap the window at all.
        """
        ...
