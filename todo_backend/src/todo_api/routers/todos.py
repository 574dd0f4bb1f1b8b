from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, TypeVar

from bson import ObjectId
from fastapi import APIRouter, Depends, status

from ..context import AppContext, get_context
from ..errors import NotFoundError, StoreError, ValidationError
from ..models import NewTodo, TodoEntity
from ..schemas import Message, TodoCreate, TodoCreated, TodoList, TodoOut, TodoUpdate

logger = logging.getLogger(__name__)

T = TypeVar("T")

router = APIRouter(
    prefix="/todo",
    tags=["todos"],
)

_ERROR_RESPONSES = {
    400: {"description": "Invalid ID or request body"},
    404: {"description": "Todo not found"},
    500: {"description": "Store failure"},
}


async def _bounded(ctx: AppContext, op: Awaitable[T], failure: str) -> T:
    """
    Await a store call, cancelling it once the configured store timeout elapses.
    Any backend failure is re-raised as a StoreError carrying `failure` as its message.
    """
    timeout = ctx.settings.store_timeout
    try:
        return await asyncio.wait_for(op, timeout=timeout)
    except asyncio.TimeoutError as exc:
        logger.warning("%s: store call exceeded %ss", failure, timeout)
        raise StoreError(failure, f"store operation timed out after {timeout:g}s") from exc
    except StoreError as exc:
        logger.error("%s: %s", failure, exc.error or exc.message)
        raise StoreError(failure, exc.error or exc.message) from exc


def _parse_id(raw: str) -> ObjectId:
    value = raw.strip()
    if not ObjectId.is_valid(value):
        raise ValidationError("Invalid ID")
    return ObjectId(value)


def _require_title(title: str) -> str:
    s = title.strip()
    if not s:
        raise ValidationError("The title is required")
    return s


def _to_out(entity: TodoEntity) -> TodoOut:
    return TodoOut(
        id=str(entity["id"]),
        title=entity["title"],
        completed=entity["completed"],
        created_at=entity["created_at"],
    )


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=TodoList,
    summary="List Todos",
    description="Return every todo in the collection's natural order, wrapped as {data: [...]}.",
    responses={500: _ERROR_RESPONSES[500]},
)
async def fetch_todos(ctx: AppContext = Depends(get_context)) -> TodoList:
    """
    List all todos.
    """
    items = await _bounded(ctx, ctx.store.list(), "Failed to fetch todos")
    return TodoList(data=[_to_out(it) for it in items])


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=TodoCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description=(
        "Create a new todo from a non-empty title. The id and created_at are assigned "
        "server-side and completed always starts as false."
    ),
    responses={
        201: {"description": "Todo created successfully"},
        400: {"description": "Empty title or malformed body"},
        500: _ERROR_RESPONSES[500],
    },
)
async def create_todo(payload: TodoCreate, ctx: AppContext = Depends(get_context)) -> TodoCreated:
    """
    Create a new Todo.
    """
    todo: NewTodo = {
        "title": _require_title(payload.title),
        "completed": False,
        "created_at": datetime.now(timezone.utc),
    }
    todo_id = await _bounded(ctx, ctx.store.create(todo), "Failed to save todo")
    logger.info("Created todo %s", todo_id)
    return TodoCreated(message="Todo created successfully", todo_id=str(todo_id))


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=Message,
    summary="Update Todo",
    description="Set the title and completed flag of an existing todo. id and created_at never change.",
    responses=_ERROR_RESPONSES,
)
async def update_todo(
    todo_id: str, payload: TodoUpdate, ctx: AppContext = Depends(get_context)
) -> Message:
    """
    Update title and completed of a Todo. Returns 404 if no todo has this id.
    """
    oid = _parse_id(todo_id)
    title = _require_title(payload.title)
    matched = await _bounded(
        ctx, ctx.store.update_by_id(oid, title, payload.completed), "Failed to update todo"
    )
    if not matched:
        raise NotFoundError("Todo not found")
    return Message(message="Todo updated successfully")


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    response_model=Message,
    summary="Delete Todo",
    description="Delete a todo by id.",
    responses=_ERROR_RESPONSES,
)
async def delete_todo(todo_id: str, ctx: AppContext = Depends(get_context)) -> Message:
    """
    Delete a Todo. Returns 200 on success, 404 if not found.
    """
    oid = _parse_id(todo_id)
    deleted = await _bounded(ctx, ctx.store.delete_by_id(oid), "Failed to delete todo")
    if not deleted:
        raise NotFoundError("Todo not found")
    logger.info("Deleted todo %s", oid)
    return Message(message="Todo deleted successfully")
