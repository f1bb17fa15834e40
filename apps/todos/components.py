"""
UI components for the todo page.

Each component keeps its own view state, drives the client data layer
and renders itself with a Django template.
"""
import logging
from enum import Enum
from typing import List, Optional
from uuid import UUID

from django.template.loader import render_to_string

from .client import TodoClient, TodoItem, QueryState

logger = logging.getLogger(__name__)


class ViewState(Enum):
    VIEWING = "viewing"
    EDITING = "editing"


class RowState(Enum):
    """What a single row is waiting on."""
    IDLE = "idle"
    MUTATING_STATUS = "mutating_status"
    MUTATING_DELETE = "mutating_delete"


class CreateTaskForm:
    template_name = "todos/components/create_form.html"

    def __init__(self, client: TodoClient, value: str = ""):
        self.value = value
        self.mutation = client.create_mutation(on_success=self._on_created)

    @property
    def is_pending(self) -> bool:
        return self.mutation.is_pending

    @property
    def can_submit(self) -> bool:
        return bool(self.value.strip()) and not self.is_pending

    def set_value(self, value: str):
        self.value = value

    def submit(self) -> Optional[TodoItem]:
        """Create a todo from the draft. Does nothing while can_submit is false."""
        if not self.can_submit:
            return None
        return self.mutation.run(self.value)

    def _on_created(self, todo: TodoItem):
        self.value = ""

    def render(self, request=None) -> str:
        return render_to_string(self.template_name, {"form": self}, request=request)


class TodoCard:
    """
    One row of the list. Status and delete each have their own mutation;
    while either is in flight the card ignores further actions.
    """
    template_name = "todos/components/todo_card.html"

    def __init__(self, client: TodoClient, todo: TodoItem):
        self.todo = todo
        self.view_state = ViewState.VIEWING
        self.draft = todo.task
        self.status_mutation = client.status_mutation()
        self.delete_mutation = client.delete_mutation()

    @property
    def row_state(self) -> RowState:
        if self.delete_mutation.is_pending:
            return RowState.MUTATING_DELETE
        if self.status_mutation.is_pending:
            return RowState.MUTATING_STATUS
        return RowState.IDLE

    @property
    def is_busy(self) -> bool:
        return self.row_state != RowState.IDLE

    @property
    def is_editing(self) -> bool:
        return self.view_state == ViewState.EDITING

    def set_status(self, status: bool) -> bool:
        """Returns True when the server accepted the change."""
        if self.is_busy:
            logger.debug(f"Card {self.todo.id} busy ({self.row_state.value}), status change ignored")
            return False
        self.status_mutation.run(self.todo.id, status)
        return self.status_mutation.is_success

    def toggle_status(self) -> bool:
        return self.set_status(not self.todo.status)

    def delete(self) -> bool:
        if self.is_busy:
            logger.debug(f"Card {self.todo.id} busy ({self.row_state.value}), delete ignored")
            return False
        self.delete_mutation.run(self.todo.id)
        return self.delete_mutation.is_success

    def start_editing(self):
        self.view_state = ViewState.EDITING
        self.draft = self.todo.task

    def cancel_editing(self):
        self.view_state = ViewState.VIEWING
        self.draft = self.todo.task

    def render(self, request=None) -> str:
        return render_to_string(self.template_name, {"card": self, "todo": self.todo}, request=request)


class TaskList:
    template_name = "todos/components/task_list.html"

    def __init__(self, client: TodoClient):
        self.client = client
        self.cards: List[TodoCard] = []

    @property
    def state(self) -> QueryState:
        return self.client.todos_query.state

    def load(self, force: bool = False) -> QueryState:
        """Fetch the list (from cache when fresh) and rebuild the cards."""
        state = self.client.fetch_all(force=force)
        self.cards = [TodoCard(self.client, todo) for todo in state.data or []]
        return state

    def card_for(self, todo_id: UUID) -> Optional[TodoCard]:
        for card in self.cards:
            if card.todo.id == todo_id:
                return card
        return None

    def render(self, request=None) -> str:
        return render_to_string(self.template_name, {"list": self, "state": self.state}, request=request)


class HomePage:
    template_name = "todos/home.html"
    title = "Todo App"

    def __init__(self, client: TodoClient, draft: str = ""):
        self.form = CreateTaskForm(client, value=draft)
        self.task_list = TaskList(client)

    def render(self, request=None) -> str:
        return render_to_string(self.template_name, {"page": self}, request=request)
