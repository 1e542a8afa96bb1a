"""
Task endpoints for the Tarefas system.

Each handler performs exactly one task store call and returns the
store's result unchanged. Failures are translated by
``map_store_error`` with the operation's mapping from
``tarefas.core.errors``; nothing escapes to the framework's default
error handling.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from tarefas.api.deps import RequestContext, authorize, get_task_store
from tarefas.core.errors import (
    COMPLETE_TASK,
    CREATE_TASK,
    DELETE_TASK,
    GET_TASK,
    INCOMPLETE_TASK,
    LIST_TASKS,
    UPDATE_TASK,
    StoreOperation,
    map_store_error,
)
from tarefas.db.task_store import TaskStore
from tarefas.schemas.task import TaskResponse


router = APIRouter()

# Response models are documented only; the store's output is returned as-is
_TASK = {"model": TaskResponse}
_ERROR = {"content": {"application/json": {"example": {"error": "mensagem"}}}}
_NOT_AUTHENTICATED = {"description": "Not authenticated", **_ERROR}
_UPDATE_RESPONSES = {200: _TASK, 400: _ERROR, 401: _NOT_AUTHENTICATED, 404: _ERROR, 500: _ERROR}


async def _update(store: TaskStore, task_id: str, data: Any, operation: StoreOperation) -> Any:
    try:
        return await store.update_task(task_id, data)
    except Exception as e:
        raise map_store_error(e, operation) from e


@router.get(
    "/tarefas",
    summary="List Tasks",
    responses={
        200: {"model": list[TaskResponse]},
        401: _NOT_AUTHENTICATED,
        404: _ERROR,
        500: _ERROR,
    },
)
async def list_tasks(
    ctx: RequestContext = Depends(authorize),
    store: TaskStore = Depends(get_task_store),
) -> Any:
    """Return every task."""
    try:
        return await store.list_tasks()
    except Exception as e:
        raise map_store_error(e, LIST_TASKS) from e


@router.get(
    "/tarefa/{task_id}",
    summary="Get Task",
    responses={200: _TASK, 401: _NOT_AUTHENTICATED, 404: _ERROR, 500: _ERROR},
)
async def get_task(
    task_id: str,
    ctx: RequestContext = Depends(authorize),
    store: TaskStore = Depends(get_task_store),
) -> Any:
    """Return a single task by ID."""
    try:
        return await store.get_task(task_id)
    except Exception as e:
        raise map_store_error(e, GET_TASK) from e


@router.post(
    "/tarefa",
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    responses={201: _TASK, 400: _ERROR, 401: _NOT_AUTHENTICATED, 500: _ERROR},
)
async def create_task(
    ctx: RequestContext = Depends(authorize),
    store: TaskStore = Depends(get_task_store),
    payload: Any = Body(None),
) -> Any:
    """
    Create a task.

    The request body is handed to the store as-is; field validation is
    the store's job.
    """
    try:
        return await store.create_task(payload)
    except Exception as e:
        raise map_store_error(e, CREATE_TASK) from e


@router.put("/tarefa/{task_id}", summary="Update Task", responses=_UPDATE_RESPONSES)
async def update_task(
    task_id: str,
    ctx: RequestContext = Depends(authorize),
    store: TaskStore = Depends(get_task_store),
    payload: Any = Body(None),
) -> Any:
    """Apply a partial update to a task."""
    return await _update(store, task_id, payload, UPDATE_TASK)


@router.delete("/tarefa/{task_id}", summary="Delete Task", responses=_UPDATE_RESPONSES)
async def delete_task(
    task_id: str,
    ctx: RequestContext = Depends(authorize),
    store: TaskStore = Depends(get_task_store),
) -> Any:
    """Delete a task and return it as it was before deletion."""
    try:
        return await store.delete_task(task_id)
    except Exception as e:
        raise map_store_error(e, DELETE_TASK) from e


@router.patch(
    "/tarefa/{task_id}/completa",
    summary="Mark Task Complete",
    responses=_UPDATE_RESPONSES,
)
async def complete_task(
    task_id: str,
    ctx: RequestContext = Depends(authorize),
    store: TaskStore = Depends(get_task_store),
) -> Any:
    # Same store call as PUT with {"completa": true}
    return await _update(store, task_id, {"completa": True}, COMPLETE_TASK)


@router.patch(
    "/tarefa/{task_id}/incompleta",
    summary="Mark Task Incomplete",
    responses=_UPDATE_RESPONSES,
)
async def incomplete_task(
    task_id: str,
    ctx: RequestContext = Depends(authorize),
    store: TaskStore = Depends(get_task_store),
) -> Any:
    return await _update(store, task_id, {"completa": False}, INCOMPLETE_TASK)
