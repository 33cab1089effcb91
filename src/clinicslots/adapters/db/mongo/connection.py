"""
MongoDB connection setup (Motor client + Beanie document registration).
"""

import logging

import certifi
from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from clinicslots.core.config import DatabaseSettings
from clinicslots.core.exceptions import DatabaseError

from .models import DOCUMENT_MODELS

logger = logging.getLogger("clinicslots")


async def init_mongo(settings: DatabaseSettings) -> AsyncIOMotorClient:
    """Connect to MongoDB and register the Beanie documents."""
    try:
        # Enable TLS only for Atlas SRV URIs
        if settings.uri.startswith("mongodb+srv://"):
            client = AsyncIOMotorClient(
                settings.uri,
                serverSelectionTimeoutMS=15000,
                tls=True,
                tlsCAFile=certifi.where(),
                tlsAllowInvalidCertificates=False,
            )
        else:
            client = AsyncIOMotorClient(settings.uri, serverSelectionTimeoutMS=15000)

        await init_beanie(database=client[settings.db_name], document_models=DOCUMENT_MODELS)
    except Exception as e:
        logger.error(f"Database connection failed: {e}", exc_info=True)
        raise DatabaseError(
            f"Database connection failed: {e}", {"db_name": settings.db_name}
        ) from e

    logger.info(f"Database connection established (db={settings.db_name})")
    return client
