from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError, ServerSelectionTimeoutError
from buddy_recommender.config.settings import Settings
from buddy_recommender.utils.logger import get_logger

logger = get_logger(__name__)

mongo_client: AsyncIOMotorClient | None = None

async def connect_to_mongo(settings: Settings) -> None:
    global mongo_client
    if mongo_client is not None:
        # Already connected, nothing to do
        return
    try:
        client = AsyncIOMotorClient(settings.MONGO_URI, serverSelectionTimeoutMS=5000)
        # Ping the server to check connection
        await client.admin.command("ping")
        mongo_client = client
        logger.info("Connected to MongoDB successfully.")
    except ServerSelectionTimeoutError as err:
        raise ConnectionError(f"Could not connect to MongoDB: {err}") from err

def get_database(settings: Settings):
    if mongo_client is None:
        raise RuntimeError("MongoDB client is not initialized, call connect_to_mongo first.")
    return mongo_client[settings.DATABASE_NAME]

def get_users_collection(settings: Settings):
    return get_database(settings)[settings.USERS_COLLECTION]

def get_friend_requests_collection(settings: Settings):
    return get_database(settings)[settings.FRIEND_REQUESTS_COLLECTION]

async def ping_mongo() -> bool:
    """Return True when the shared client answers a ping."""
    if mongo_client is None:
        return False
    try:
        await mongo_client.admin.command("ping")
    except PyMongoError as exc:
        logger.warning(f"MongoDB ping failed: {exc}")
        return False
    return True

async def close_mongo_connection():
    global mongo_client
    if mongo_client is not None:
        mongo_client.close()
        mongo_client = None
        logger.info("MongoDB connection closed.")
