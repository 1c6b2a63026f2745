import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from vital.api.v1.apple import router as apple_router
from vital.api.v1.chat import router as chat_router
from vital.api.v1.health import router as health_router
from vital.api.v1.insights import router as insights_router
from vital.api.v1.metrics import router as metrics_router
from vital.companion import CompanionResponder
from vital.core.config import settings
from vital.core.days import resolve_timezone
from vital.core.logging_config import setup_logging
from vital.seed import seed_preview_data
from vital.store import MetricsStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings)

    store = MetricsStore(settings.DATABASE_URL, timezone=resolve_timezone(settings.LOCAL_TIMEZONE))
    store.open()
    app.state.store = store
    app.state.companion = CompanionResponder(reply_delay=settings.COMPANION_REPLY_DELAY_SECONDS)

    if settings.SEED_PREVIEW_DATA and store.is_empty():
        seed_preview_data(store)

    logger.info(f"Starting VitAl ({settings.ENVIRONMENT})")
    try:
        yield
    finally:
        store.close()
        logger.info("Shutting down VitAl")


app = FastAPI(title="VitAl", version="1.0.0", lifespan=lifespan)

app.include_router(health_router, prefix="/v1")
app.include_router(metrics_router, prefix="/v1")
app.include_router(insights_router, prefix="/v1")
app.include_router(chat_router, prefix="/v1")
app.include_router(apple_router, prefix="/v1")
