from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List

from bson import ObjectId

from .models import NewTodo, TodoEntity


# PUBLIC_INTERFACE
class TodoStore(ABC):
    """Abstract store contract for todo storage backends.

    Implementations raise StoreError when the backend fails.
    """

    @abstractmethod
    async def create(self, todo: NewTodo) -> ObjectId:
        """Persist a new todo and return the identifier the store assigned to it."""

    @abstractmethod
    async def list(self) -> List[TodoEntity]:
        """Return every todo in the backend's natural iteration order."""

    @abstractmethod
    async def update_by_id(self, todo_id: ObjectId, title: str, completed: bool) -> bool:
        """Set title and completed on the matching todo. Return False if nothing matched."""

    @abstractmethod
    async def delete_by_id(self, todo_id: ObjectId) -> bool:
        """Delete the matching todo. Return False if nothing matched."""


class InMemoryTodoStore(TodoStore):
    """
    In-memory store suitable for testing and local runs without MongoDB.
    Iteration order is insertion order.
    """

    def __init__(self) -> None:
        self._items: Dict[ObjectId, TodoEntity] = {}

    async def create(self, todo: NewTodo) -> ObjectId:
        todo_id = ObjectId()
        self._items[todo_id] = {
            "id": todo_id,
            "title": todo["title"],
            "completed": todo["completed"],
            "created_at": todo["created_at"],
        }
        return todo_id

    async def list(self) -> List[TodoEntity]:
        # Return copies to avoid external mutation
        return [t.copy() for t in self._items.values()]

    async def update_by_id(self, todo_id: ObjectId, title: str, completed: bool) -> bool:
        existing = self._items.get(todo_id)
        if existing is None:
            return False
        existing["title"] = title
        existing["completed"] = completed
        return True

    async def delete_by_id(self, todo_id: ObjectId) -> bool:
        return self._items.pop(todo_id, None) is not None
