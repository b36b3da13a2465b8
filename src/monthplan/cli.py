"""monthplan CLI - month-view task planner."""

import json
import logging
import sys
from datetime import date

import click

from .adapters.click_form import ClickTaskEntryForm
from .adapters.memory_store import InMemoryTaskStore
from .config import Config, load_config, sample_tasks
from .core.filters import TimeWindow
from .core.tasks import Category, PlannerError, Task
from .events import PointerEventBus
from .planner import PlannerSession
from .render import format_day_tasks, format_month, format_task_list
from .replay import load_script, run_script


def _setup_logging(config: Config, debug: bool) -> None:
    level = logging.DEBUG if debug else getattr(logging, config.log_level, logging.WARNING)
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=level,
    )


def _parse_month(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(f"{value}-01")
    except ValueError:
        raise click.BadParameter(f"expected YYYY-MM, got {value!r}") from None


def _task_json(task: Task) -> dict:
    return {
        "id": task.id,
        "name": task.name,
        "start_date": task.start_date.isoformat(),
        "end_date": task.end_date.isoformat(),
        "category": task.category.label,
        "days": task.duration_days,
    }


def _open_session(config: Config, month: date | None, entry_form=None) -> PlannerSession:
    store = InMemoryTaskStore(sample_tasks() if config.sample_tasks else [])
    return PlannerSession(
        store,
        PointerEventBus(),
        config=config,
        month=month,
        entry_form=entry_form,
    )


def _print_view(session: PlannerSession, as_json: bool) -> None:
    visible = session.visible_tasks()
    if as_json:
        click.echo(
            json.dumps(
                {
                    "month": session.grid.title,
                    "window": session.criteria.time_window.token,
                    "tasks": [_task_json(t) for t in session.tasks],
                    "visible": [t.id for t in visible],
                },
                indent=2,
            )
        )
        return

    click.echo(
        format_month(
            session.grid,
            session.day_projection(),
            session.highlighted_days,
            session.today,
        )
    )
    click.echo()
    click.echo(format_task_list(visible))


@click.group()
@click.version_option()
def main():
    """monthplan - Month-view task planner."""
    pass


@main.command()
@click.option("--month", "-m", default=None, help="Month to show (YYYY-MM), defaults to this month")
@click.option("--search", "-s", default=None, help="Only tasks whose name contains TEXT")
@click.option("--category", "-c", "categories", multiple=True, help="Category to show (repeatable)")
@click.option("--within", "-w", default=None, help="Time window: all, 1week, 2weeks, 3weeks")
@click.option("--day", "-d", default=None, help="Also list the tasks on DAY (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def show(
    month: str | None,
    search: str | None,
    categories: tuple[str, ...],
    within: str | None,
    day: str | None,
    as_json: bool,
):
    """Show the month grid and visible tasks."""
    config = load_config()
    _setup_logging(config, debug=False)

    try:
        wanted = {Category.parse(c) for c in categories}
        window = TimeWindow.parse(within) if within is not None else None
        focus = date.fromisoformat(day) if day is not None else None
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    with _open_session(config, _parse_month(month)) as session:
        if search is not None:
            session.set_search_text(search)
        if wanted:
            for category in Category:
                session.set_category_enabled(category, category in wanted)
        if window is not None:
            session.set_time_window(window)
        _print_view(session, as_json)
        if focus is not None and not as_json:
            click.echo()
            click.echo(format_day_tasks(focus, session.tasks_on_day(focus)))


@main.command()
@click.argument("script", type=click.Path(exists=True, dir_okay=False))
@click.option("--month", "-m", default=None, help="Month shown while replaying (YYYY-MM)")
@click.option("--prompt", is_flag=True, help="Ask for task details on the terminal after each selection")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def replay(script: str, month: str | None, prompt: bool, as_json: bool, debug: bool):
    """Replay a JSON gesture script and show the resulting tasks."""
    config = load_config()
    _setup_logging(config, debug)

    form = ClickTaskEntryForm() if prompt else None
    try:
        steps = load_script(script)
        with _open_session(config, _parse_month(month), entry_form=form) as session:
            run_script(session, steps)
            _print_view(session, as_json)
    except PlannerError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
def categories():
    """List task categories."""
    for category in Category:
        click.echo(category.label)


if __name__ == "__main__":
    main()
