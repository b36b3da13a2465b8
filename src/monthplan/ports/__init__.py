"""Ports - interfaces/protocols for external dependencies."""

from .task_store import TaskStore
from .task_entry import TaskEntryForm

__all__ = [
    "TaskStore",
    "TaskEntryForm",
]
