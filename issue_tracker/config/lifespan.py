from fastapi import FastAPI
import logging
from contextlib import asynccontextmanager

from issue_tracker.config.db import ensure_db_connection, ensure_indexes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if await ensure_db_connection():
        await ensure_indexes()
    yield
    broadcaster = getattr(app.state, "broadcaster", None)
    if broadcaster is not None:
        logger.info(
            f"Shutting down with {broadcaster.listener_count} open event streams"
        )
