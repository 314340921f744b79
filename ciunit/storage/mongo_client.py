# ==============================================
# MongoClient
# ==============================================
#
# PURPOSE:
#   Manages the MongoDB connection used by document fixtures.
#   Hands out collections; the document handles in document.py
#   do the actual reads and writes.
#
# CLASS: MongoClient
# ------------------
#   Stateful — holds connection to MongoDB.
#
#   Constructor:
#   ------------
#   - __init__(host, port, database, user=None, password=None)
#
#   Methods:
#   --------
#   - connect() -> None
#       Establish connection to MongoDB and ping it.
#
#   - disconnect() -> None
#       Close connection.
#
#   - collection(name: str) -> pymongo.collection.Collection
#       Collection in the configured database.
#
#   - find(collection_name: str, query: dict) -> list[dict]
#       Query documents matching filter.
#
#   Context Manager:
#   ----------------
#   - __enter__ / __exit__ for `with MongoClient(...) as db:` usage.
#
# ==============================================

import logging

from pymongo import MongoClient as PyMongoClient
from pymongo.errors import ConnectionFailure, OperationFailure

logger = logging.getLogger(__name__)


class MongoClient:
    def __init__(self, host, port, database, user=None, password=None):
        # Store connection params. Don't connect yet.
        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.password = password
        self.client = None  # Will hold the actual MongoDB client connection

    @classmethod
    def from_config(cls, config) -> "MongoClient":
        return cls(
            host=config.host,
            port=config.port,
            database=config.database,
            user=config.user,
            password=config.password,
        )

    def connect(self):
        try:
            if self.user and self.password:
                uri = f"mongodb://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"
            else:
                uri = f"mongodb://{self.host}:{self.port}/{self.database}"
            self.client = PyMongoClient(uri)
            self.client.admin.command("ping")
            logger.info("Connected to MongoDB database '%s'", self.database)
        except ConnectionFailure as e:
            logger.error("Could not connect to MongoDB: %s", e)
            raise
        except OperationFailure as e:
            logger.error("MongoDB authentication failed: %s", e)
            raise

    def disconnect(self):
        if self.client:
            self.client.close()
            self.client = None
            logger.info("Disconnected from MongoDB")

    def collection(self, name):
        if not self.client:
            raise RuntimeError("Not connected to MongoDB.")
        return self.client[self.database][name]

    def find(self, collection_name, query):
        return list(self.collection(collection_name).find(query))

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
