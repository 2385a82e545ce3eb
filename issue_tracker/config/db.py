import os
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from .env import APP_ENV, DB_NAME, MONGO_URL_DEV

logger = logging.getLogger(__name__)

ISSUES_COLLECTION = "issues"

_db: Optional[AsyncIOMotorDatabase] = None


def mongo_uri() -> tuple[str, dict]:
    """환경에 맞는 접속 URI와 클라이언트 옵션을 반환합니다."""
    if APP_ENV == "dev":
        return MONGO_URL_DEV, {"serverSelectionTimeoutMS": 3000}

    endpoint = os.environ["DOCDB_ENDPOINT"]
    port = os.getenv("DOCDB_PORT", "27017")
    params = os.getenv("DOCDB_PARAMS", "replicaSet=rs0&retryWrites=false&tls=true")
    ca = os.getenv("DOCDB_CA_PATH", "/etc/ssl/certs/global-bundle.pem")
    user, pwd = os.environ["DOCDB_USER"], os.environ["DOCDB_PASSWORD"]

    uri = f"mongodb://{user}:{pwd}@{endpoint}:{port}/{DB_NAME}?{params}"
    return uri, {"tlsCAFile": ca, "serverSelectionTimeoutMS": 5000}


def make_db() -> AsyncIOMotorDatabase:
    uri, options = mongo_uri()
    client = AsyncIOMotorClient(uri, **options)
    return client[DB_NAME]


def get_db() -> AsyncIOMotorDatabase:
    global _db
    if _db is None:
        _db = make_db()
    return _db


async def ping_db(db: AsyncIOMotorDatabase) -> bool:
    try:
        await db.command("ping")
    except PyMongoError as exc:
        logger.warning(f"MongoDB ping failed: {exc}")
        return False
    return True


async def ensure_db_connection() -> bool:
    """기동 시 연결을 확인합니다. 실패해도 서버는 DB 없이 계속 뜹니다."""
    connected = await ping_db(get_db())
    if connected:
        logger.info(f"MongoDB connected: db={DB_NAME}")
    else:
        logger.warning("Running without database connection")
    return connected


async def ensure_indexes() -> None:
    collection = get_db()[ISSUES_COLLECTION]
    try:
        for field in ("status", "priority", "assignee", "updatedAt", "createdAt"):
            await collection.create_index(field)
    except PyMongoError as exc:
        logger.warning(f"Skipping index creation: {exc}")
