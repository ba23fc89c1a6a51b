from contextlib import asynccontextmanager
import logging

from app.ai.config import load_ai_config
from app.ai.factory import build_ai_client
from app.core.config import settings
from app.core.cors import cors_allowed_origins
from app.storage.submission_store import SubmissionStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    # A missing credential raises here and stops startup.
    ai_config = load_ai_config(settings)
    app.state.ai_client = build_ai_client(ai_config)
    logger.info("%s client initialized model=%s", ai_config.provider, ai_config.model)

    store = None
    if settings.submissions_enabled:
        store = SubmissionStore(settings.submissions_db_path)
        if store.ping():
            logger.info("Submission store ready path=%s", settings.submissions_db_path)
        else:
            logger.warning("Submission store unavailable path=%s; continuing without it", settings.submissions_db_path)
    app.state.submission_store = store

    logger.info("Using AI provider: %s", ai_config.provider.upper())
    logger.info("Frontend allowed from: %s", ", ".join(cors_allowed_origins()))
    try:
        yield
    finally:
        if store is not None:
            store.close()
