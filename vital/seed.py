"""
Preview data: ten days of metrics, one insight and a two-turn conversation.
"""

import logging
import random
from datetime import datetime, timedelta

from vital.schemas import ChatMessage, DailyMetrics
from vital.store import MetricsStore

logger = logging.getLogger(__name__)

PREVIEW_DAYS = 10


def seed_preview_data(store: MetricsStore, now: datetime | None = None, rng: random.Random | None = None) -> None:
    now = now or datetime.now()
    rng = rng or random.Random()

    for offset in range(PREVIEW_DAYS):
        store.upsert_daily_metrics(
            DailyMetrics(
                date=now - timedelta(days=offset),
                steps=rng.randint(5000, 12000),
                heart_rate=round(rng.uniform(60, 100), 1),
                sleep_hours=round(rng.uniform(6, 9), 1),
                active_calories=round(rng.uniform(200, 500), 1),
            )
        )

    store.save_insight(
        title="Sleep Pattern Detected",
        content="Your sleep quality improves when you exercise in the morning.",
        type="sleep",
    )

    store.save_message(
        ChatMessage(
            content="How did I sleep last night?",
            is_user=True,
            timestamp=now - timedelta(minutes=5),
        )
    )
    store.save_message(
        ChatMessage(
            content="You slept 7.5 hours last night, a little more than your weekly average of 7.2 hours.",
            is_user=False,
            timestamp=now,
        )
    )

    logger.info(f"Seeded preview data ({PREVIEW_DAYS} days of metrics)")
