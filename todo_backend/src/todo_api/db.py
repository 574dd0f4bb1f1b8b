from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from .errors import StoreError
from .models import NewTodo, TodoEntity
from .repositories import TodoStore
from .settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Fields:
    id: str = "_id"
    title: str = "title"
    completed: str = "completed"
    created_at: str = "created_at"


_FIELDS = _Fields()


class MongoTodoStore(TodoStore):
    """
    MongoDB store implementing the TodoStore interface on top of a motor collection.
    """

    def __init__(self, collection: Any, client: Optional[AsyncIOMotorClient] = None) -> None:
        self._collection = collection
        self._client = client

    @classmethod
    async def connect(cls, settings: Settings) -> "MongoTodoStore":
        """
        Open a client, ping the server and return a store bound to the configured collection.

        Raises:
            StoreError if the server cannot be reached within settings.store_timeout.
        """
        client = AsyncIOMotorClient(
            settings.mongo_uri,
            tz_aware=True,
            serverSelectionTimeoutMS=int(settings.store_timeout * 1000),
        )
        try:
            await asyncio.wait_for(client.admin.command("ping"), timeout=settings.store_timeout)
        except (PyMongoError, asyncio.TimeoutError) as exc:
            client.close()
            raise StoreError("Failed to connect to MongoDB", str(exc) or type(exc).__name__) from exc

        logger.info("Connected to MongoDB at %s (db=%s)", settings.mongo_uri, settings.db_name)
        return cls(client[settings.db_name][settings.collection_name], client)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()

    def _doc_to_entity(self, doc: Mapping[str, Any]) -> TodoEntity:
        return {
            "id": doc[_FIELDS.id],
            "title": str(doc.get(_FIELDS.title, "")),
            "completed": bool(doc.get(_FIELDS.completed, False)),
            "created_at": doc.get(_FIELDS.created_at),  # type: ignore[typeddict-item]
        }

    async def create(self, todo: NewTodo) -> ObjectId:
        # insert_one adds _id to the document it is given
        doc = {
            _FIELDS.title: todo["title"],
            _FIELDS.completed: todo["completed"],
            _FIELDS.created_at: todo["created_at"],
        }
        try:
            result = await self._collection.insert_one(doc)
        except PyMongoError as exc:
            raise StoreError("Failed to save todo", str(exc)) from exc
        return result.inserted_id

    async def list(self) -> List[TodoEntity]:
        try:
            docs = await self._collection.find({}).to_list(length=None)
        except PyMongoError as exc:
            raise StoreError("Failed to fetch todos", str(exc)) from exc
        return [self._doc_to_entity(d) for d in docs]

    async def update_by_id(self, todo_id: ObjectId, title: str, completed: bool) -> bool:
        update = {"$set": {_FIELDS.title: title, _FIELDS.completed: completed}}
        try:
            result = await self._collection.update_one({_FIELDS.id: todo_id}, update)
        except PyMongoError as exc:
            raise StoreError("Failed to update todo", str(exc)) from exc
        return result.matched_count > 0

    async def delete_by_id(self, todo_id: ObjectId) -> bool:
        try:
            result = await self._collection.delete_one({_FIELDS.id: todo_id})
        except PyMongoError as exc:
            raise StoreError("Failed to delete todo", str(exc)) from exc
        return result.deleted_count > 0
