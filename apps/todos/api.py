"""
Todo API endpoints.

Provides list/create/status-update/delete over Todo records.
Handlers are stateless; the TaskStore arrives on the request
(see TaskStoreMiddleware).
"""
import logging
from typing import List
from uuid import UUID
from ninja import Router
from ninja.errors import HttpError
from django.http import HttpRequest

from .dtos import TodoOut, TodoIn, TodoStatusIn, EmptyOut
from .services import TaskStore

logger = logging.getLogger(__name__)

router = Router(tags=["Todos"])


def get_store(request: HttpRequest) -> TaskStore:
    """Return the request's TaskStore. Raises 503 if the middleware is not installed."""
    store = getattr(request, 'task_store', None)
    if store is None:
        logger.error("No task store on request; is TaskStoreMiddleware installed?")
        raise HttpError(503, "Task store unavailable")
    return store


@router.get("", response=List[TodoOut])
def list_todos_api(request: HttpRequest):
    """List all todos in the store's natural order."""
    return get_store(request).list_todos()


@router.post("", response=TodoOut)
def create_todo_api(request: HttpRequest, payload: TodoIn):
    """
    Create a todo. New todos start with status=false.
    Blank task text is rejected with 422.
    """
    return get_store(request).create_todo(payload)


@router.put("/{todo_id}", response=EmptyOut)
def update_todo_status_api(request: HttpRequest, todo_id: UUID, payload: TodoStatusIn):
    """Set the completion status of a todo."""
    todo = get_store(request).set_status(todo_id, payload.status)
    if not todo:
        raise HttpError(404, "Todo not found")
    return {}


@router.delete("/{todo_id}", response=EmptyOut)
def delete_todo_api(request: HttpRequest, todo_id: UUID):
    """Delete a todo. Deleting an id that is already gone is a 404."""
    if not get_store(request).delete_todo(todo_id):
        raise HttpError(404, "Todo not found")
    return {}
