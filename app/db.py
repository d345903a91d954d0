# app/db.py
import asyncio
import logging
import time
from typing import Optional
from urllib.parse import urlparse

import motor.motor_asyncio
from beanie import init_beanie
from pymongo.errors import PyMongoError

from .config import Settings, settings as default_settings
from .models.blog import Blog
from .models.user import User

logger = logging.getLogger(__name__)

DOCUMENT_MODELS = [User, Blog]
DEFAULT_DB_NAME = "coaching_institute"


def resolve_db_name(config: Settings) -> str:
    """Explicit MONGO_DB_NAME wins, then the URI path, then the default"""
    if config.MONGO_DB_NAME:
        return config.MONGO_DB_NAME
    parsed = urlparse(config.MONGO_URI)
    return parsed.path.lstrip("/") or DEFAULT_DB_NAME


def _make_client(config: Settings) -> motor.motor_asyncio.AsyncIOMotorClient:
    return motor.motor_asyncio.AsyncIOMotorClient(
        config.MONGO_URI,
        serverSelectionTimeoutMS=3000,
        connectTimeoutMS=3000,
        socketTimeoutMS=10000,
        maxPoolSize=10,
        appname="coaching-institute-api",
        retryWrites=True,
        retryReads=True,
        tz_aware=True,
    )


class Database:
    """
    Store-connection handle passed to services through FastAPI dependencies.

    One instance is built per application (see the lifespan in app.main) and kept
    on ``app.state``; tests build their own around an in-memory client.
    """

    def __init__(
        self,
        client: Optional[motor.motor_asyncio.AsyncIOMotorClient] = None,
        name: Optional[str] = None,
        config: Optional[Settings] = None,
    ):
        self.config = config or default_settings
        self.client = client if client is not None else _make_client(self.config)
        self.name = name or resolve_db_name(self.config)
        self._initialized = False
        self._init_lock = asyncio.Lock()

    @property
    def db(self):
        return self.client[self.name]

    def collection(self, name: str):
        return self.db[name]

    async def ping(self) -> float:
        """Ping the server and return the round trip in milliseconds"""
        start = time.perf_counter()
        await self.client.admin.command("ping")
        return (time.perf_counter() - start) * 1000

    async def connect(self) -> None:
        """
        Register document models with Beanie exactly once, with proper locking.
        Subsequent calls are cheap.
        """
        if self._initialized:
            return

        async with self._init_lock:
            # Double-check after acquiring lock
            if self._initialized:
                return

            start_time = time.time()
            try:
                await init_beanie(
                    database=self.db,
                    document_models=DOCUMENT_MODELS,
                    allow_index_dropping=False,
                )
            except PyMongoError:
                logger.exception("Beanie initialization failed")
                raise

            self._initialized = True
            elapsed = time.time() - start_time
            logger.info(
                f"✅ Beanie models initialized on '{self.name}' in {elapsed:.2f}s"
            )

    def close(self) -> None:
        """Close the client and forget the Beanie-init flag"""
        self.client.close()
        self._initialized = False
