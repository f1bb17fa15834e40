import uuid
from django.db import models


class Todo(models.Model):
    """
    A single todo record: free-text description plus a completion flag.
    Only `status` changes after creation.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    task = models.TextField(blank=True)
    status = models.BooleanField(default=False)

    # Internal only, gives list() a stable natural order
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at']

    def __str__(self):
        marker = "x" if self.status else " "
        return f"[{marker}] {self.task}"
