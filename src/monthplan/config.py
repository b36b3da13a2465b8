"""Configuration management for monthplan."""

import logging
import os
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from .core.dates import SUNDAY, weekday_from_name
from .core.filters import ALL, FilterCriteria, TimeWindow
from .core.tasks import Category, Task

logger = logging.getLogger(__name__)

MONTHPLAN_HOME = Path(os.environ.get("MONTHPLAN_HOME", Path.home() / "monthplan"))
CONFIG_FILE = MONTHPLAN_HOME / "config" / "monthplan.conf"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class Config:
    """monthplan configuration."""

    week_starts_on: int = SUNDAY
    default_categories: list[Category] = field(default_factory=lambda: list(Category))
    default_time_window: TimeWindow = ALL
    sample_tasks: bool = True
    log_level: str = "WARNING"

    def initial_criteria(self) -> FilterCriteria:
        return FilterCriteria(
            enabled_categories=frozenset(self.default_categories),
            time_window=self.default_time_window,
        )


def sample_tasks() -> list[Task]:
    """The demo tasks a fresh planner starts with."""
    return [
        Task(
            id="sample-1",
            name="Project Planning",
            start_date=date(2025, 8, 18),
            end_date=date(2025, 8, 20),
            category=Category.IN_PROGRESS,
        ),
        Task(
            id="sample-2",
            name="Code Review",
            start_date=date(2025, 8, 22),
            end_date=date(2025, 8, 22),
            category=Category.REVIEW,
        ),
    ]


def parse_flag(value: str | bool) -> bool:
    """Read a yes/no setting. Raises ValueError for anything else."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _unquote(value: str) -> str:
    # Handle quoted values with inline comments: "value" # comment
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        if end_quote != -1:
            return value[1:end_quote]
        return value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from monthplan.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "week_starts_on":
                try:
                    config.week_starts_on = weekday_from_name(value)
                except ValueError as e:
                    logger.warning(f"Ignoring WEEK_STARTS_ON: {e}")
            case "default_categories":
                categories = []
                for label in value.split(","):
                    if not label.strip():
                        continue
                    try:
                        categories.append(Category.parse(label))
                    except ValueError as e:
                        logger.warning(f"Ignoring DEFAULT_CATEGORIES entry: {e}")
                config.default_categories = categories
            case "default_time_window":
                try:
                    config.default_time_window = TimeWindow.parse(value)
                except ValueError as e:
                    logger.warning(f"Ignoring DEFAULT_TIME_WINDOW: {e}")
            case "sample_tasks":
                try:
                    config.sample_tasks = parse_flag(value)
                except ValueError as e:
                    logger.warning(f"Ignoring SAMPLE_TASKS: {e}")
            case "log_level":
                config.log_level = value.upper()

    return config
