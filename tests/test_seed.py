import random
from datetime import date, datetime

from vital.seed import PREVIEW_DAYS, seed_preview_data


def test_seed_preview_data(store):
    now = datetime(2025, 1, 10, 12, 0)
    seed_preview_data(store, now=now, rng=random.Random(7))

    metrics = store.get_daily_metrics_range(date(2024, 12, 1), date(2025, 1, 10))
    assert len(metrics) == PREVIEW_DAYS
    assert all(5000 <= m.steps <= 12000 for m in metrics)
    assert all(6 <= m.sleep_hours <= 9 for m in metrics)

    assert [i.type for i in store.get_recent_insights()] == ["sleep"]

    history = store.get_chat_history()
    assert [m.is_user for m in history] == [True, False]
    assert store.is_empty() is False
