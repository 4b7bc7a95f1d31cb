from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from loggers import get_logger
from src.core.database.engine import engine
from src.main.config import config
from src.main.sentry import init_sentry

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    init_sentry()
    logger.info(
        "%s %s started. Docs available at %s",
        config.app.PROJECT_NAME,
        config.app.VERSION,
        app.docs_url,
    )

    yield

    await engine.dispose()
    logger.info("Database engine disposed.")
