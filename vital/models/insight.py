from sqlalchemy import Column, DateTime, Integer, String, Text

from vital.core.db import Base


class InsightRecord(Base):
    __tablename__ = "insights"

    pk = Column(Integer, primary_key=True)
    id = Column(String(36), nullable=False, unique=True)

    title = Column(String(256), nullable=False)
    content = Column(Text, nullable=False)
    type = Column(String(64), nullable=False)  # free-form category, e.g. "sleep"

    created_at = Column(DateTime, nullable=False, index=True)
