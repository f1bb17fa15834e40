"""
Unit tests for the TaskStore.
"""
from unittest import mock
from uuid import uuid4
from django.db import OperationalError
from django.test import TestCase

from apps.todos.models import Todo
from apps.todos.dtos import TodoIn
from apps.todos.services import TaskStore, StoreError


class TaskStoreTest(TestCase):

    def setUp(self):
        self.store = TaskStore()

    def test_create_defaults_to_pending(self):
        todo = self.store.create_todo(TodoIn(task="Buy milk"))
        self.assertEqual(todo.task, "Buy milk")
        self.assertFalse(todo.status)
        self.assertIsNotNone(todo.id)
        self.assertTrue(Todo.objects.filter(id=todo.id).exists())

    def test_identical_text_gives_distinct_records(self):
        first = self.store.create_todo(TodoIn(task="Same"))
        second = self.store.create_todo(TodoIn(task="Same"))
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(len(self.store.list_todos()), 2)

    def test_list_keeps_creation_order(self):
        tasks = ["one", "two", "three"]
        for text in tasks:
            self.store.create_todo(TodoIn(task=text))
        self.assertEqual([t.task for t in self.store.list_todos()], tasks)

    def test_set_status(self):
        todo = self.store.create_todo(TodoIn(task="Walk dog"))
        other = self.store.create_todo(TodoIn(task="Feed cat"))

        updated = self.store.set_status(todo.id, True)

        self.assertTrue(updated.status)
        todo.refresh_from_db()
        other.refresh_from_db()
        self.assertTrue(todo.status)
        self.assertFalse(other.status)

    def test_set_status_missing_id(self):
        todo = self.store.create_todo(TodoIn(task="Keep me"))
        self.assertIsNone(self.store.set_status(uuid4(), True))
        todo.refresh_from_db()
        self.assertFalse(todo.status)

    def test_delete(self):
        todo = self.store.create_todo(TodoIn(task="Temporary"))
        keep = self.store.create_todo(TodoIn(task="Permanent"))

        self.assertTrue(self.store.delete_todo(todo.id))
        self.assertEqual([t.id for t in self.store.list_todos()], [keep.id])

        # Second delete finds nothing
        self.assertFalse(self.store.delete_todo(todo.id))
        self.assertEqual(len(self.store.list_todos()), 1)

    def test_get_todo(self):
        todo = self.store.create_todo(TodoIn(task="Find me"))
        self.assertEqual(self.store.get_todo(todo.id), todo)
        self.assertIsNone(self.store.get_todo(uuid4()))

    def test_database_failure_raises_store_error(self):
        with mock.patch.object(
            TaskStore, '_todos',
            new_callable=mock.PropertyMock,
            side_effect=OperationalError("database is locked"),
        ):
            with self.assertRaises(StoreError) as ctx:
                self.store.list_todos()
        self.assertEqual(ctx.exception.operation, "list")
        self.assertIsInstance(ctx.exception.cause, OperationalError)

    def test_blank_text_rejected_by_schema(self):
        with self.assertRaises(ValueError):
            TodoIn(task="   ")
