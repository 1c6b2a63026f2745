from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from vital.api.deps import get_store
from vital.core.exceptions import StoreError
from vital.providers.payload import PayloadHealthProvider
from vital.providers.sync import HealthSync
from vital.store import MetricsStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["apple-health"])


@router.post("/apple-health")
def apple_health(payload: Dict[str, Any], store: MetricsStore = Depends(get_store)):
    """
    Ingest a Health Auto Export JSON payload and upsert one DailyMetrics
    record for every local day it covers.

    The payload is pushed by the device that already holds HealthKit
    authorization, so access is granted on receipt.
    """
    provider = PayloadHealthProvider(payload, timezone=store.timezone)
    sync = HealthSync(provider, store)

    try:
        results = sync.sync_days(provider.days_covered())
    except StoreError as e:
        raise HTTPException(status_code=503, detail=f"Apple ingest failed: {e}")

    synced = [str(r.day) for r in results if r.metrics is not None]
    logger.info(f"Apple Health ingest stored {len(synced)} day(s)")
    return {"status": "ok", "dates": synced}
