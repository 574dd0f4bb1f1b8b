import asyncio
import dataclasses
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

from todo_api.db import MongoTodoStore
from todo_api.errors import StoreError
from todo_api.repositories import InMemoryTodoStore
from todo_api.settings import get_settings


def new_todo(title="buy milk"):
    return {"title": title, "completed": False, "created_at": datetime.now(timezone.utc)}


class FakeCursor:
    def __init__(self, collection):
        self._collection = collection

    async def to_list(self, length=None):
        self._collection.check()
        return [dict(d) for d in self._collection.docs]


class FakeCollection:
    """Just enough of a motor collection for MongoTodoStore."""

    def __init__(self, fail=False):
        self.docs = []
        self.fail = fail
        self.updates = []

    def check(self):
        if self.fail:
            raise ServerSelectionTimeoutError("no servers available")

    def _match(self, query):
        return [d for d in self.docs if d["_id"] == query["_id"]]

    async def insert_one(self, doc):
        self.check()
        doc["_id"] = ObjectId()
        self.docs.append(dict(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    def find(self, query):
        assert query == {}
        return FakeCursor(self)

    async def update_one(self, query, update):
        self.check()
        self.updates.append(update)
        matched = self._match(query)
        for d in matched:
            d.update(update["$set"])
        return SimpleNamespace(matched_count=len(matched))

    async def delete_one(self, query):
        self.check()
        matched = self._match(query)
        if matched:
            self.docs.remove(matched[0])
        return SimpleNamespace(deleted_count=len(matched))


class TestInMemoryTodoStore:
    def test_crud(self):
        async def scenario():
            store = InMemoryTodoStore()
            first = await store.create(new_todo("one"))
            second = await store.create(new_todo("two"))
            assert first != second

            items = await store.list()
            assert [t["id"] for t in items] == [first, second]

            assert await store.update_by_id(first, "uno", True) is True
            assert await store.update_by_id(ObjectId(), "x", True) is False
            updated = (await store.list())[0]
            assert updated["title"] == "uno" and updated["completed"] is True
            assert updated["created_at"] == items[0]["created_at"]

            assert await store.delete_by_id(second) is True
            assert await store.delete_by_id(second) is False
            assert [t["id"] for t in await store.list()] == [first]

        asyncio.run(scenario())

    def test_list_returns_copies(self):
        async def scenario():
            store = InMemoryTodoStore()
            await store.create(new_todo())
            (await store.list())[0]["title"] = "mutated"
            assert (await store.list())[0]["title"] == "buy milk"

        asyncio.run(scenario())


class TestMongoTodoStore:
    def test_create_and_list(self):
        async def scenario():
            collection = FakeCollection()
            store = MongoTodoStore(collection)
            todo_id = await store.create(new_todo())
            assert isinstance(todo_id, ObjectId)
            assert collection.docs[0]["_id"] == todo_id

            items = await store.list()
            assert len(items) == 1
            assert items[0]["id"] == todo_id
            assert items[0]["title"] == "buy milk"
            assert items[0]["completed"] is False

        asyncio.run(scenario())

    def test_update_sets_only_title_and_completed(self):
        async def scenario():
            collection = FakeCollection()
            store = MongoTodoStore(collection)
            todo_id = await store.create(new_todo())

            assert await store.update_by_id(todo_id, "buy oat milk", True) is True
            assert collection.updates[-1] == {"$set": {"title": "buy oat milk", "completed": True}}
            assert await store.update_by_id(ObjectId(), "x", False) is False

        asyncio.run(scenario())

    def test_delete(self):
        async def scenario():
            store = MongoTodoStore(FakeCollection())
            todo_id = await store.create(new_todo())
            assert await store.delete_by_id(todo_id) is True
            assert await store.delete_by_id(todo_id) is False
            assert await store.list() == []

        asyncio.run(scenario())

    def test_backend_errors_become_store_errors(self):
        async def scenario():
            store = MongoTodoStore(FakeCollection(fail=True))
            with pytest.raises(StoreError) as info:
                await store.list()
            assert info.value.message == "Failed to fetch todos"
            assert "no servers available" in info.value.error

            with pytest.raises(StoreError):
                await store.create(new_todo())
            with pytest.raises(StoreError):
                await store.update_by_id(ObjectId(), "x", True)
            with pytest.raises(StoreError):
                await store.delete_by_id(ObjectId())

        asyncio.run(scenario())

    def test_connect_unreachable_server(self):
        settings = dataclasses.replace(
            get_settings(), mongo_uri="mongodb://127.0.0.1:1/?connectTimeoutMS=200", store_timeout=0.5
        )
        with pytest.raises(StoreError) as info:
            asyncio.run(MongoTodoStore.connect(settings))
        assert info.value.message == "Failed to connect to MongoDB"
