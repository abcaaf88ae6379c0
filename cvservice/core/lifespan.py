import logging
from contextlib import asynccontextmanager

from cvservice.core.config import settings
from cvservice.profiles.db import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    init_db()
    logger.info("profiles_db_ready path=%s", settings.profiles_db_path)
    yield
