from __future__ import annotations

from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from vital.api.deps import get_companion, get_store
from vital.companion import CompanionResponder
from vital.core.config import settings
from vital.core.exceptions import DuplicateMessageError, StoreError
from vital.schemas import ChatMessage, DailyMetrics
from vital.store import MetricsStore

router = APIRouter(prefix="/chat", tags=["chat"])

# How far back the companion looks for metrics to talk about
LATEST_METRICS_LOOKBACK_DAYS = 7


class ChatMessageIn(BaseModel):
    id: str | None = Field(None, min_length=1, max_length=64)
    content: str
    is_user: bool = True
    timestamp: datetime | None = None


class AskIn(BaseModel):
    content: str = Field(..., min_length=1)


class AskOut(BaseModel):
    question: ChatMessage
    reply: ChatMessage


def _latest_metrics(store: MetricsStore) -> DailyMetrics | None:
    today = store.today()
    rows = store.get_daily_metrics_range(today - timedelta(days=LATEST_METRICS_LOOKBACK_DAYS), today)
    return rows[-1] if rows else None


@router.post("/messages", response_model=ChatMessage, status_code=201)
def save_message(payload: ChatMessageIn, store: MetricsStore = Depends(get_store)):
    message = ChatMessage(**payload.model_dump(exclude_none=True))
    try:
        return store.save_message(message)
    except DuplicateMessageError as e:
        raise HTTPException(409, str(e))
    except StoreError as e:
        raise HTTPException(503, f"Metrics store unavailable: {e}")


@router.get("/history", response_model=list[ChatMessage])
def get_chat_history(
    limit: int = Query(settings.DEFAULT_CHAT_HISTORY_LIMIT, ge=0),
    store: MetricsStore = Depends(get_store),
):
    """Oldest messages first."""
    try:
        return store.get_chat_history(limit=limit)
    except StoreError as e:
        raise HTTPException(503, f"Metrics store unavailable: {e}")


@router.delete("/history")
def clear_chat_history(store: MetricsStore = Depends(get_store)):
    try:
        deleted = store.clear_chat_history()
    except StoreError as e:
        raise HTTPException(503, f"Metrics store unavailable: {e}")
    return {"status": "ok", "deleted": deleted}


@router.post("/ask", response_model=AskOut)
async def ask_companion(
    payload: AskIn,
    store: MetricsStore = Depends(get_store),
    companion: CompanionResponder = Depends(get_companion),
):
    """
    Record the user's question, let the companion answer, record the answer.

    Store calls block, so they run in the threadpool; only the companion
    delay is awaited on the event loop.
    """
    try:
        question = await run_in_threadpool(
            store.save_message,
            ChatMessage(content=payload.content, is_user=True, timestamp=store.now()),
        )
        latest = await run_in_threadpool(_latest_metrics, store)

        text = await companion.reply(payload.content, latest)

        reply = await run_in_threadpool(
            store.save_message,
            ChatMessage(content=text, is_user=False, timestamp=store.now()),
        )
    except StoreError as e:
        raise HTTPException(503, f"Metrics store unavailable: {e}")

    return AskOut(question=question, reply=reply)
