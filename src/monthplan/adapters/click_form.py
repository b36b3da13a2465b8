"""Terminal task entry form using click prompts."""

import click

from monthplan.core.dates import DateRange
from monthplan.core.tasks import Category, TaskEntry


class ClickTaskEntryForm:
    """
    Prompt for a task name and category on the terminal.

    Implements TaskEntryForm protocol. A blank name cancels the entry.
    """

    def __init__(self, default_category: Category = Category.TODO):
        self.default_category = default_category

    def request_entry(self, proposal: DateRange) -> TaskEntry | None:
        days = proposal.duration_days
        click.echo(
            f"New task {proposal.start.strftime('%b %d')} - {proposal.end.strftime('%b %d')}"
            f" ({days} day{'s' if days > 1 else ''})"
        )
        name = click.prompt("Task name (blank to cancel)", default="", show_default=False).strip()
        if not name:
            return None

        labels = [c.label for c in Category]
        label = click.prompt(
            "Category",
            type=click.Choice(labels, case_sensitive=False),
            default=self.default_category.label,
        )
        return TaskEntry(name=name, category=Category.parse(label))
