"""
MetricsStore: durable storage for daily metrics, insights and chat messages.

The store is constructed explicitly, opened at startup and closed at
shutdown. Every public operation is a single committed unit of work.
Writes are serialized through one lock; reads open their own session and
only take that lock when every session shares one connection (in-memory
SQLite).

Failures in the database layer are logged and raised as StoreError, so
callers can tell "nothing stored" (None / empty list) from "storage broken".
"""

from __future__ import annotations

import logging
import threading
import uuid
from contextlib import contextmanager, nullcontext
from datetime import date as DateType, datetime, tzinfo
from typing import Callable, Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from vital.core.db import SCHEMA_VERSION, Base, build_engine, build_sessionmaker
from vital.core.days import day_bounds, to_local
from vital.core.exceptions import DuplicateMessageError, SchemaVersionError, StoreError
from vital.models import ChatMessageRecord, DailyMetricsRecord, InsightRecord, SchemaVersion
from vital.schemas import ChatMessage, DailyMetrics, Insight

logger = logging.getLogger(__name__)


def _check_limit(limit: int) -> None:
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")


class MetricsStore:
    def __init__(
        self,
        database_url: str,
        timezone: tzinfo | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.database_url = database_url
        self.timezone = timezone
        self.clock = clock or datetime.now
        self._engine = None
        self._sessionmaker = None
        self._write_lock = threading.Lock()
        self._read_guard = nullcontext()

    # ---------- lifecycle ----------

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def open(self) -> "MetricsStore":
        if self.is_open:
            return self

        try:
            engine = build_engine(self.database_url)
            Base.metadata.create_all(bind=engine)
        except SQLAlchemyError as e:
            logger.exception("Failed to open metrics store")
            raise StoreError(f"Failed to open metrics store: {e}") from e

        self._engine = engine
        self._sessionmaker = build_sessionmaker(engine)

        # A rollback on one shared connection would discard a concurrent write
        if isinstance(engine.pool, StaticPool):
            self._read_guard = self._write_lock

        try:
            self._check_schema_version()
        except StoreError:
            self.close()
            raise

        logger.info(f"Metrics store opened (schema v{SCHEMA_VERSION})")
        return self

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        self._read_guard = nullcontext()
        logger.info("Metrics store closed")

    def __enter__(self) -> "MetricsStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        if self._sessionmaker is None:
            raise StoreError("Metrics store is not open")

        db: Session = self._sessionmaker()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Metrics store operation failed")
            raise StoreError(str(e)) from e
        finally:
            db.close()

    def _check_schema_version(self) -> None:
        with self._session() as db:
            row = db.query(SchemaVersion).first()
            if row is None:
                db.add(SchemaVersion(version=SCHEMA_VERSION))
                db.commit()
            elif row.version > SCHEMA_VERSION:
                raise SchemaVersionError(
                    f"Database schema v{row.version} is newer than supported v{SCHEMA_VERSION}"
                )

    def now(self) -> datetime:
        """Current local wall-clock time from the store clock."""
        return to_local(self.clock(), self.timezone)

    def today(self) -> DateType:
        return self.now().date()

    # ---------- daily metrics ----------

    def upsert_daily_metrics(self, metrics: DailyMetrics) -> DailyMetrics:
        """
        Insert or overwrite the metrics for the local calendar day of metrics.date.

        An existing row keeps its original timestamp; only the four numeric
        fields are replaced.
        """
        start, end = day_bounds(metrics.date, self.timezone)

        with self._write_lock, self._session() as db:
            row = (
                db.query(DailyMetricsRecord)
                .filter(DailyMetricsRecord.date >= start, DailyMetricsRecord.date < end)
                .order_by(DailyMetricsRecord.id)
                .first()
            )

            if row is None:
                row = DailyMetricsRecord(date=to_local(metrics.date, self.timezone))
                db.add(row)
                logger.debug(f"Inserting daily metrics for {start.date()}")
            else:
                logger.debug(f"Overwriting daily metrics for {start.date()}")

            row.steps = metrics.steps
            row.heart_rate = metrics.heart_rate
            row.sleep_hours = metrics.sleep_hours
            row.active_calories = metrics.active_calories

            db.commit()
            return DailyMetrics.model_validate(row)

    def get_daily_metrics(self, day: datetime | DateType) -> DailyMetrics | None:
        start, end = day_bounds(day, self.timezone)

        with self._read_guard, self._session() as db:
            row = (
                db.query(DailyMetricsRecord)
                .filter(DailyMetricsRecord.date >= start, DailyMetricsRecord.date < end)
                .order_by(DailyMetricsRecord.id)
                .first()
            )
            if row is None:
                return None
            return DailyMetrics.model_validate(row)

    def get_daily_metrics_range(
        self,
        start: datetime | DateType,
        end: datetime | DateType,
    ) -> list[DailyMetrics]:
        """
        Metrics with start <= date <= end, ascending by date.

        A bare date as `end` includes the whole of that day.
        """
        lower = to_local(start, self.timezone)

        with self._read_guard, self._session() as db:
            query = db.query(DailyMetricsRecord).filter(DailyMetricsRecord.date >= lower)
            if isinstance(end, datetime):
                query = query.filter(DailyMetricsRecord.date <= to_local(end, self.timezone))
            else:
                query = query.filter(DailyMetricsRecord.date < day_bounds(end, self.timezone)[1])

            rows = query.order_by(DailyMetricsRecord.date, DailyMetricsRecord.id).all()
            return [DailyMetrics.model_validate(r) for r in rows]

    def is_empty(self) -> bool:
        with self._read_guard, self._session() as db:
            return (
                db.query(DailyMetricsRecord.id).first() is None
                and db.query(InsightRecord.pk).first() is None
                and db.query(ChatMessageRecord.pk).first() is None
            )

    # ---------- insights ----------

    def save_insight(self, title: str, content: str, type: str) -> Insight:
        record = InsightRecord(
            id=str(uuid.uuid4()),
            title=title,
            content=content,
            type=type,
            created_at=self.now(),
        )

        with self._write_lock, self._session() as db:
            db.add(record)
            db.commit()
            return Insight.model_validate(record)

    def get_recent_insights(self, limit: int = 10) -> list[Insight]:
        _check_limit(limit)

        with self._read_guard, self._session() as db:
            rows = (
                db.query(InsightRecord)
                .order_by(InsightRecord.created_at.desc(), InsightRecord.pk.desc())
                .limit(limit)
                .all()
            )
            return [Insight.model_validate(r) for r in rows]

    # ---------- chat ----------

    def save_message(self, message: ChatMessage) -> ChatMessage:
        """Append a message. An id that is already stored is rejected."""
        record = ChatMessageRecord(
            id=message.id or str(uuid.uuid4()),
            content=message.content,
            is_user=message.is_user,
            timestamp=to_local(message.timestamp, self.timezone),
        )

        with self._write_lock, self._session() as db:
            exists = db.query(ChatMessageRecord.pk).filter(ChatMessageRecord.id == record.id).first()
            if exists is not None:
                logger.warning(f"Rejected chat message with duplicate id {record.id}")
                raise DuplicateMessageError(record.id)

            db.add(record)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                logger.warning(f"Rejected chat message with duplicate id {record.id}")
                raise DuplicateMessageError(record.id) from e

            return ChatMessage.model_validate(record)

    def get_chat_history(self, limit: int = 50) -> list[ChatMessage]:
        _check_limit(limit)

        with self._read_guard, self._session() as db:
            rows = (
                db.query(ChatMessageRecord)
                .order_by(ChatMessageRecord.timestamp, ChatMessageRecord.pk)
                .limit(limit)
                .all()
            )
            return [ChatMessage.model_validate(r) for r in rows]

    def clear_chat_history(self) -> int:
        with self._write_lock, self._session() as db:
            deleted = db.query(ChatMessageRecord).delete(synchronize_session=False)
            db.commit()

        logger.info(f"Cleared chat history ({deleted} messages)")
        return deleted
