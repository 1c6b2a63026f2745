from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from vital.core.db import Base


class ChatMessageRecord(Base):
    __tablename__ = "chat_messages"

    pk = Column(Integer, primary_key=True)
    id = Column(String(64), nullable=False, unique=True)

    content = Column(Text, nullable=False)
    is_user = Column(Boolean, nullable=False)
    timestamp = Column(DateTime, nullable=False, index=True)
