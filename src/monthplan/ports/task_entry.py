"""Task entry form interface."""

from typing import Protocol

from monthplan.core.dates import DateRange
from monthplan.core.tasks import TaskEntry


class TaskEntryForm(Protocol):
    """Interface for asking the user to name and categorize a new task."""

    def request_entry(self, proposal: DateRange) -> TaskEntry | None:
        """Ask for task details for a selected range. None means cancelled."""
        ...
