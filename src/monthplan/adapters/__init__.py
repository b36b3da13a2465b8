"""Adapters - I/O implementations of ports."""

from .memory_store import InMemoryTaskStore
from .click_form import ClickTaskEntryForm

__all__ = [
    "InMemoryTaskStore",
    "ClickTaskEntryForm",
]
