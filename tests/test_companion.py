"""
Tests for the simulated companion responder.
"""

from datetime import datetime

import pytest

from vital.companion import FALLBACK_REPLY, TIP_REPLY, CompanionResponder
from vital.schemas import DailyMetrics

LATEST = DailyMetrics(
    date=datetime(2025, 1, 1, 8),  # a Wednesday
    steps=8200,
    heart_rate=72,
    sleep_hours=7.5,
    active_calories=310,
)


class TestCompanionResponder:
    """Keyword routing and metric fill-in."""

    def test_sleep_reply_uses_metrics(self):
        reply = CompanionResponder().compose_reply("How did I SLEEP last night?", LATEST)
        assert "7.5 hours" in reply
        assert "Wednesday" in reply

    def test_sleep_reply_without_data(self):
        reply = CompanionResponder().compose_reply("sleep?", None)
        assert "don't have any sleep data" in reply

    def test_activity_keywords(self):
        responder = CompanionResponder()
        for query in ("my activity", "exercise today", "how many steps"):
            assert "8,200 steps" in responder.compose_reply(query, LATEST)

    def test_heart_reply(self):
        reply = CompanionResponder().compose_reply("what about my heart?", LATEST)
        assert "72 BPM" in reply

    def test_tip_reply(self):
        assert CompanionResponder().compose_reply("any advice?", LATEST) == TIP_REPLY

    def test_fallback(self):
        assert CompanionResponder().compose_reply("hello", LATEST) == FALLBACK_REPLY

    def test_first_matching_rule_wins(self):
        reply = CompanionResponder().compose_reply("sleep and heart", LATEST)
        assert "hours" in reply

    @pytest.mark.asyncio
    async def test_reply_without_delay(self):
        responder = CompanionResponder(reply_delay=0)
        assert await responder.reply("tip please") == TIP_REPLY

    @pytest.mark.asyncio
    async def test_reply_waits(self, monkeypatch):
        slept = []

        async def fake_sleep(seconds):
            slept.append(seconds)

        monkeypatch.setattr("vital.companion.asyncio.sleep", fake_sleep)
        await CompanionResponder(reply_delay=1.5).reply("hello")
        assert slept == [1.5]
