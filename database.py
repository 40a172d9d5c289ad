"""
MongoDB access for Bistro Boss.

A single MongoClient is opened at startup and shared by every request
through the `get_db` dependency. Helpers here turn driver results into
JSON-friendly dicts.
"""

import logging
from typing import Any, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import HTTPException, Request, status
from pymongo import MongoClient
from pymongo.database import Database as MongoDatabase
from pymongo.errors import ConnectionFailure
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from config import Settings

logger = logging.getLogger(__name__)


class Database:
    """Handle on the bistro database and its four collections."""

    def __init__(self, client: MongoClient, name: str):
        self.client = client
        self.db: MongoDatabase = client[name]

    @property
    def users(self):
        return self.db["users"]

    @property
    def menu(self):
        return self.db["menu"]

    @property
    def reviews(self):
        return self.db["reviews"]

    @property
    def carts(self):
        return self.db["carts"]

    def ping(self) -> None:
        self.client.admin.command("ping")

    def close(self) -> None:
        self.client.close()


def connect(settings: Settings) -> Database:
    """Create the shared client. The driver connects lazily on first use."""
    client = MongoClient(
        settings.mongodb_url,
        serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
        connectTimeoutMS=settings.connect_timeout_ms,
        socketTimeoutMS=settings.socket_timeout_ms,
    )
    logger.debug("MongoDB client created for database %s", settings.database_name)
    return Database(client, settings.database_name)


def get_db(request: Request) -> Database:
    """FastAPI dependency returning the handle opened in the lifespan."""
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise ConnectionFailure("MongoDB client was not created at startup")
    return db


# Serialization helpers

def serialize(value: Any) -> Any:
    """Replace ObjectIds (at any depth) with their hex string."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: serialize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [serialize(v) for v in value]
    return value


def find_all(collection, filter_dict: Optional[dict] = None) -> List[dict]:
    return [serialize(doc) for doc in collection.find(filter_dict or {})]


def object_id(id_: str) -> ObjectId:
    """Parse a path id, answering 400 for anything that is not an ObjectId."""
    try:
        return ObjectId(id_)
    except (InvalidId, TypeError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid id")


def insert_result(result: InsertOneResult) -> dict:
    return {"acknowledged": result.acknowledged, "insertedId": serialize(result.inserted_id)}


def update_result(result: UpdateResult) -> dict:
    upserted_id = serialize(result.upserted_id)
    return {
        "acknowledged": result.acknowledged,
        "modifiedCount": result.modified_count,
        "upsertedId": upserted_id,
        "upsertedCount": 0 if upserted_id is None else 1,
        "matchedCount": result.matched_count,
    }


def delete_result(result: DeleteResult) -> dict:
    return {"acknowledged": result.acknowledged, "deletedCount": result.deleted_count}
