import psutil, os
import time
import urllib.parse
from typing import Dict
from functools import wraps
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError
from common.utils.exceptions import StorageError
from common.utils.logging_service import logger
from dotenv import load_dotenv

load_dotenv()

MONGO_CONFIG: Dict[str, str] = {
    "username": os.getenv("MONGO_USERNAME"),
    "password": os.getenv("MONGO_PASSWORD"),
    "host": os.getenv("MONGO_HOST", "localhost:27017"),
    "srv": os.getenv("MONGO_SRV", "false"),
    "db_name": os.getenv("MONGO_DB_NAME", "MovieService"),
    "collection": os.getenv("MONGO_COLLECTION", "Movies"),
    "timeout_ms": os.getenv("MONGO_TIMEOUT_MS", "5000"),
}

GRPC_ADDRESS: str = os.getenv("GRPC_ADDRESS", "[::]:50051")
GRPC_MAX_WORKERS: int = int(os.getenv("GRPC_MAX_WORKERS", "10"))
GRPC_SHUTDOWN_GRACE: float = float(os.getenv("GRPC_SHUTDOWN_GRACE", "5"))


def build_mongo_url(config: Dict[str, str] = MONGO_CONFIG) -> str:
    scheme = "mongodb+srv" if config.get("srv", "false").lower() == "true" else "mongodb"

    credentials = ""
    if config.get("username"):
        credentials = urllib.parse.quote_plus(config["username"])
        if config.get("password"):
            credentials += ":" + urllib.parse.quote_plus(config["password"])
        credentials += "@"

    return f"{scheme}://{credentials}{config['host']}/"


MONGO_URL: str = os.getenv("MONGO_URL") or build_mongo_url()


def connect_to_mongo(url: str = MONGO_URL) -> MongoClient:
    """
    Creates a MongoClient and pings the server.

    :raises StorageError: when the server cannot be reached.
    """
    client = MongoClient(url, serverSelectionTimeoutMS=int(MONGO_CONFIG["timeout_ms"]))
    try:
        client.admin.command("ping")
    except PyMongoError as e:
        client.close()
        raise StorageError(f"Could not connect to MongoDB: {e}") from e

    logger.info("Connected to MongoDB")
    return client


def get_movies_collection(client: MongoClient) -> Collection:
    return client[MONGO_CONFIG["db_name"]][MONGO_CONFIG["collection"]]


def time_it(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        logger.debug(f"Starting {func.__name__}")
        start_time = time.time()
        result = func(*args, **kwargs)
        end_time = time.time()
        elapsed_time = end_time - start_time
        logger.info(f"{func.__name__} completed in {elapsed_time:.3f}s")
        logger.debug(
            f"Memory usage: {psutil.Process(os.getpid()).memory_info().rss / 1024**2:.2f} MB"
        )

        return result

    return wrapper
