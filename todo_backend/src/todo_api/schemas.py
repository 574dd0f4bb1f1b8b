from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.

    Only the title is honoured; any other Todo fields sent by the client are
    accepted and ignored. The title is checked for emptiness by the handler so
    that an empty title yields the service's own 400 message.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"title": "buy milk"}})

    title: str = Field(default="", description="Short title for the todo item")


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating an existing Todo item.
    Both fields are written on every update; an omitted completed flag means False.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"title": "buy milk", "completed": True}}
    )

    title: str = Field(default="", description="Short title for the todo item")
    completed: bool = Field(default=False, description="Completion status flag")


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "6650f1c2e4b0a1b2c3d4e5f6",
                "title": "buy milk",
                "completed": False,
                "created_at": "2025-01-25T10:15:30.123000Z",
            }
        }
    )

    id: str = Field(..., description="Unique identifier of the todo item (ObjectId hex)")
    title: str = Field(..., description="Short title for the todo item")
    completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., description="Creation timestamp")


class TodoList(BaseModel):
    data: List[TodoOut] = Field(..., description="All todo items in store order")


class TodoCreated(BaseModel):
    message: str
    todo_id: str = Field(..., description="Identifier assigned to the new todo")


class Message(BaseModel):
    message: str
