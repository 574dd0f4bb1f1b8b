from __future__ import annotations

from datetime import datetime
from typing import TypedDict

from bson import ObjectId


# PUBLIC_INTERFACE
class NewTodo(TypedDict):
    """
    Fields of a Todo before the store assigns its identifier.

    Fields:
    - title: Non-empty, trimmed title
    - completed: Always False on creation
    - created_at: UTC creation timestamp (datetime)
    """

    title: str
    completed: bool
    created_at: datetime


# PUBLIC_INTERFACE
class TodoEntity(NewTodo):
    """
    A persisted Todo item as returned by the store backends.

    Fields:
    - id: Unique ObjectId generated by the store, immutable
    - title, completed, created_at: see NewTodo
    """

    id: ObjectId
