"""Process-wide MongoDB client for the user directory.

The client is created lazily on first use and cached. A cached client that
stops answering ping is dropped and rebuilt on the next call. A missing
MONGO_URL or a failed first connection disables the store for the life of the
process; callers then get None and answer 503.
"""

import os
import logging
from pymongo import MongoClient
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

# Driver-level logs are noisy at INFO; keep warnings and errors only
logging.getLogger('pymongo').setLevel(logging.WARNING)

MONGO_URL = os.getenv('MONGO_URL')
DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'user_directory')
USERS_COLLECTION_NAME = 'users'

# Each request does at most one read and one write, so a small pool suffices
CLIENT_OPTIONS = {
    'serverSelectionTimeoutMS': 5000,
    'connectTimeoutMS': 5000,
    'socketTimeoutMS': 30000,
    'maxPoolSize': 10,
    'retryWrites': True,
    'retryReads': True,
    'tz_aware': True,  # audit timestamps come back UTC-aware
}

_client: MongoClient | None = None
_ever_connected = False
_disabled = False


def reset_client() -> None:
    """Forget the cached client and any earlier failure."""
    global _client, _ever_connected, _disabled
    _client = None
    _ever_connected = False
    _disabled = False


def _is_alive(client: MongoClient) -> bool:
    try:
        client.admin.command('ping')
        return True
    except PyMongoError:
        return False


def get_mongodb_client() -> MongoClient | None:
    """Return a connected client, or None when the store is unavailable."""
    global _client, _ever_connected, _disabled

    if _client is not None:
        if _is_alive(_client):
            return _client
        logger.warning("MongoDB client lost, reconnecting", extra={"database": DATABASE_NAME})
        _client = None

    if _disabled:
        return None

    if not MONGO_URL:
        logger.error("MONGO_URL not configured, user store disabled")
        _disabled = True
        return None

    client = MongoClient(MONGO_URL, **CLIENT_OPTIONS)
    if not _is_alive(client):
        if not _ever_connected:
            logger.error("Initial MongoDB connection failed", extra={"database": DATABASE_NAME})
            _disabled = True
        client.close()
        return None

    if not _ever_connected:
        logger.info("Connected to MongoDB", extra={"database": DATABASE_NAME})
    _ever_connected = True
    _client = client
    return client
