from sqlalchemy import Column, DateTime, Float, Index, Integer

from vital.core.db import Base


class DailyMetricsRecord(Base):
    """
    One row per local calendar day.

    The day is derived from `date` at write time, so there is no unique
    constraint; the store enforces one row per day inside its write lock.
    """

    __tablename__ = "daily_metrics"
    __table_args__ = (Index("ix_daily_metrics_date", "date"),)

    id = Column(Integer, primary_key=True)

    # Naive local wall-clock timestamp
    date = Column(DateTime, nullable=False)

    steps = Column(Integer, nullable=False, default=0)
    heart_rate = Column(Float, nullable=False, default=0.0)
    sleep_hours = Column(Float, nullable=False, default=0.0)
    active_calories = Column(Float, nullable=False, default=0.0)
