"""
Simulated health companion.

Replies are picked by keyword from a fixed table, filled in with the most
recent stored metrics when there are any. Nothing here calls a model; the
delay only imitates one.
"""

from __future__ import annotations

import asyncio
import logging

from vital.schemas import DailyMetrics

logger = logging.getLogger(__name__)

FALLBACK_REPLY = (
    "I'm here to help you understand your health data. You can ask me about "
    "your sleep, activity, heart rate, or ask for a health tip."
)

TIP_REPLY = (
    "Here's a tip for today: take a five minute stretching break every hour "
    "if you work at a desk. It helps circulation and eases muscle tension."
)


def _sleep_reply(latest: DailyMetrics | None) -> str:
    if latest is None or latest.sleep_hours <= 0:
        return "I don't have any sleep data yet. Once your sleep is synced I can summarize it for you."
    return (
        f"You slept {latest.sleep_hours:.1f} hours on {latest.date:%A}. "
        "Would you like suggestions for improving your sleep quality?"
    )


def _activity_reply(latest: DailyMetrics | None) -> str:
    if latest is None:
        return "I don't have any activity data yet. Sync your steps and I'll take a look."
    return (
        f"On {latest.date:%A} you took {latest.steps:,} steps and burned "
        f"{latest.active_calories:.0f} active calories. Is there a part of your activity you'd like to discuss?"
    )


def _heart_reply(latest: DailyMetrics | None) -> str:
    if latest is None or latest.heart_rate <= 0:
        return "I don't have any heart rate data yet."
    return f"Your average heart rate on {latest.date:%A} was {latest.heart_rate:.0f} BPM."


# First matching keyword group wins
_RULES = (
    (("sleep",), _sleep_reply),
    (("activity", "exercise", "steps"), _activity_reply),
    (("heart",), _heart_reply),
    (("tip", "advice"), lambda latest: TIP_REPLY),
)


class CompanionResponder:
    def __init__(self, reply_delay: float = 1.5):
        self.reply_delay = reply_delay

    def compose_reply(self, query: str, latest: DailyMetrics | None = None) -> str:
        lowered = query.lower()
        for keywords, build in _RULES:
            if any(k in lowered for k in keywords):
                return build(latest)
        return FALLBACK_REPLY

    async def reply(self, query: str, latest: DailyMetrics | None = None) -> str:
        if self.reply_delay > 0:
            await asyncio.sleep(self.reply_delay)
        text = self.compose_reply(query, latest)
        logger.debug(f"Companion replied to {len(query)}-char query")
        return text
