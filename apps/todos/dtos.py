from ninja import Schema
from ninja.orm import create_schema
from pydantic import field_validator
from .models import Todo

TodoOut = create_schema(Todo, fields=['id', 'task', 'status'])


class TodoIn(Schema):
    task: str

    @field_validator('task')
    @classmethod
    def task_must_not_be_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Task text must not be empty")
        return value


class TodoStatusIn(Schema):
    status: bool


class EmptyOut(Schema):
    """Acknowledgement body for writes that return nothing."""
    pass
