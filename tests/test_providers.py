"""
Tests for health payload parsing, daily aggregation and HealthSync.
"""

from datetime import date, datetime

import pytest

from vital.providers.base import HealthDataProvider, HealthSamples, QuantitySample, SleepInterval
from vital.providers.payload import PayloadHealthProvider
from vital.providers.sync import HealthSync, aggregate_day
from vital.schemas import DailyMetrics


@pytest.fixture
def provider(health_payload):
    return PayloadHealthProvider(health_payload)


class TestPayloadHealthProvider:
    """Parsing a Health Auto Export payload."""

    def test_satisfies_protocol(self, provider):
        assert isinstance(provider, HealthDataProvider)

    def test_fetch_requires_authorization(self, provider):
        with pytest.raises(PermissionError):
            provider.fetch_samples(datetime(2025, 1, 1), datetime(2025, 1, 2))

    def test_denied_authorization(self, health_payload):
        provider = PayloadHealthProvider(health_payload, grant_access=False)
        assert provider.request_authorization() is False
        assert provider.is_authorized is False

    def test_fetch_window(self, provider):
        provider.request_authorization()
        samples = provider.fetch_samples(datetime(2025, 1, 1), datetime(2025, 1, 2))

        assert [s.value for s in samples.steps] == [4000, 3500]
        assert [s.value for s in samples.heart_rate] == [66, 74]
        # InBed intervals are dropped at parse time
        assert len(samples.sleep) == 1
        assert samples.active_energy[0].value == 200
        assert samples.active_energy[1].value == pytest.approx(100.0)

    def test_days_covered(self, provider):
        assert provider.days_covered() == [date(2025, 1, 1), date(2025, 1, 2)]

    def test_timezone_offsets_are_converted(self):
        from zoneinfo import ZoneInfo

        provider = PayloadHealthProvider(
            {"StepCount": [{"date": "2025-01-02 03:00:00 +0000", "qty": 10}]},
            timezone=ZoneInfo("America/New_York"),
        )
        assert provider.days_covered() == [date(2025, 1, 1)]


class TestAggregateDay:
    """Collapsing samples into one DailyMetrics."""

    def test_sums_means_and_sleep_overlap(self):
        start, end = datetime(2025, 1, 2), datetime(2025, 1, 3)
        samples = HealthSamples(
            steps=[QuantitySample(start, start, 1000), QuantitySample(start, start, 234.4)],
            heart_rate=[QuantitySample(start, start, 60), QuantitySample(start, start, 70)],
            sleep=[SleepInterval(datetime(2025, 1, 1, 23), datetime(2025, 1, 2, 7))],
            active_energy=[QuantitySample(start, start, 120), QuantitySample(start, start, 80)],
        )

        metrics = aggregate_day(samples, start, end)

        assert metrics.steps == 1234
        assert metrics.heart_rate == 65
        # Only the part after midnight counts toward Jan 2
        assert metrics.sleep_hours == 7
        assert metrics.active_calories == 200
        assert metrics.date == start

    def test_no_heart_rate_samples(self):
        start, end = datetime(2025, 1, 2), datetime(2025, 1, 3)
        metrics = aggregate_day(HealthSamples(steps=[QuantitySample(start, start, 5)]), start, end)
        assert metrics.heart_rate == 0

    def test_missing_kinds_keep_existing_values(self):
        start, end = datetime(2025, 1, 2), datetime(2025, 1, 3)
        existing = DailyMetrics(date=start, steps=9000, heart_rate=70, sleep_hours=1, active_calories=300)
        samples = HealthSamples(sleep=[SleepInterval(datetime(2025, 1, 2, 1), datetime(2025, 1, 2, 8))])

        metrics = aggregate_day(samples, start, end, existing)

        assert metrics.sleep_hours == 7
        assert metrics.steps == 9000
        assert metrics.heart_rate == 70
        assert metrics.active_calories == 300


class TestHealthSync:
    """Syncing provider samples into the store."""

    def test_sync_day_upserts(self, provider, store):
        result = HealthSync(provider, store).sync_day(date(2025, 1, 1))

        assert result.authorized is True
        stored = store.get_daily_metrics(date(2025, 1, 1))
        assert stored.steps == 7500
        assert stored.heart_rate == 70
        assert stored.sleep_hours == 1
        assert stored.active_calories == 300
        assert result.metrics == stored

    def test_resync_overwrites(self, provider, store):
        store.upsert_daily_metrics(DailyMetrics(date=datetime(2025, 1, 1, 6), steps=1))
        HealthSync(provider, store).sync_day(date(2025, 1, 1))

        assert len(store.get_daily_metrics_range(date(2025, 1, 1), date(2025, 1, 1))) == 1
        assert store.get_daily_metrics(date(2025, 1, 1)).steps == 7500

    def test_unauthorized_writes_nothing(self, health_payload, store):
        provider = PayloadHealthProvider(health_payload, grant_access=False)
        results = HealthSync(provider, store).sync_days([date(2025, 1, 1), date(2025, 1, 2)])

        assert len(results) == 1
        assert results[0].authorized is False
        assert store.get_daily_metrics(date(2025, 1, 1)) is None

    def test_day_without_samples_is_skipped(self, provider, store):
        result = HealthSync(provider, store).sync_day(date(2025, 3, 1))

        assert result.authorized is True
        assert result.metrics is None
        assert store.get_daily_metrics(date(2025, 3, 1)) is None

    def test_partial_payload_keeps_other_metrics(self, provider, store):
        HealthSync(provider, store).sync_day(date(2025, 1, 1))

        sleep_only = PayloadHealthProvider(
            {
                "SleepAnalysis": [
                    {"startDate": "2025-01-01 01:00:00", "endDate": "2025-01-01 08:00:00", "value": "AsleepDeep"},
                ]
            }
        )
        HealthSync(sleep_only, store).sync_day(date(2025, 1, 1))

        stored = store.get_daily_metrics(date(2025, 1, 1))
        assert stored.sleep_hours == 7
        assert stored.steps == 7500
        assert stored.heart_rate == 70
        assert stored.active_calories == 300
