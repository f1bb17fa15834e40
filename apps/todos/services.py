"""
Task store - the data-access handle for Todo records.

A TaskStore is bound to one database alias and built once per process
(see TaskStoreMiddleware). Handlers receive it through the request rather
than reaching for a module-level client.

Usage:
    store = TaskStore(using='default')
    todo = store.create_todo(TodoIn(task="Buy milk"))
    store.set_status(todo.id, True)
    store.delete_todo(todo.id)
"""
import logging
from contextlib import contextmanager
from typing import List, Optional
from uuid import UUID

from django.db import DEFAULT_DB_ALIAS, DatabaseError

from .models import Todo
from .dtos import TodoIn

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """The backing database could not serve the request."""

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"Task store failed during {operation}: {cause}")
        self.operation = operation
        self.cause = cause


@contextmanager
def _store_errors(operation: str):
    try:
        yield
    except DatabaseError as e:
        logger.exception(f"Task store failed during {operation}")
        raise StoreError(operation, e) from e


class TaskStore:
    """CRUD over Todo records on a single database alias."""

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using

    def __repr__(self):
        return f"TaskStore(using={self.using!r})"

    @property
    def _todos(self):
        return Todo.objects.using(self.using)

    def list_todos(self) -> List[Todo]:
        """All records in the store's natural (creation) order."""
        with _store_errors("list"):
            return list(self._todos.all())

    def get_todo(self, todo_id: UUID) -> Optional[Todo]:
        with _store_errors("get"):
            try:
                return self._todos.get(id=todo_id)
            except Todo.DoesNotExist:
                return None

    def create_todo(self, payload: TodoIn) -> Todo:
        with _store_errors("create"):
            todo = self._todos.create(task=payload.task, status=False)
        logger.info(f"Created todo {todo.id}")
        return todo

    def set_status(self, todo_id: UUID, status: bool) -> Optional[Todo]:
        """
        Set the completion flag of one record.
        Returns None when no record has this id.
        """
        with _store_errors("update"):
            try:
                todo = self._todos.get(id=todo_id)
            except Todo.DoesNotExist:
                logger.info(f"Status update for missing todo {todo_id}")
                return None
            todo.status = status
            todo.save(using=self.using, update_fields=['status'])
        logger.info(f"Set todo {todo_id} status={status}")
        return todo

    def delete_todo(self, todo_id: UUID) -> bool:
        with _store_errors("delete"):
            try:
                todo = self._todos.get(id=todo_id)
            except Todo.DoesNotExist:
                logger.info(f"Delete for missing todo {todo_id}")
                return False
            todo.delete(using=self.using)
        logger.info(f"Deleted todo {todo_id}")
        return True
