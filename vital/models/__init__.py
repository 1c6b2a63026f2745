from vital.models.daily_metrics import DailyMetricsRecord
from vital.models.insight import InsightRecord
from vital.models.chat_message import ChatMessageRecord
from vital.models.schema_version import SchemaVersion

__all__ = [
    "DailyMetricsRecord",
    "InsightRecord",
    "ChatMessageRecord",
    "SchemaVersion",
]
