"""Configuration management for taskdeck."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .core.tasks import Priority

logger = logging.getLogger(__name__)

TASKDECK_HOME = Path(os.environ.get("TASKDECK_HOME", Path.home() / "taskdeck"))
CONFIG_FILE = TASKDECK_HOME / "config" / "taskdeck.conf"

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(Exception):
    """Raised when configuration values are unusable."""

    pass


@dataclass
class Config:
    """taskdeck configuration."""

    timezone: str = "UTC"
    page_size: int = 10
    # Whether the task backend records when a task was completed.
    completion_tracking: bool = True
    default_priority: Priority = Priority.MEDIUM

    @property
    def tz(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigError(f"Unknown timezone: {self.timezone}") from e


def _unquote(value: str) -> str:
    # Handle quoted values with inline comments: "value" # comment
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        if end_quote != -1:
            return value[1:end_quote]
        return value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_bool(key: str, value: str) -> bool:
    lowered = value.lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ConfigError(f"{key.upper()} must be a boolean, got {value!r}")


def load_config(path: Path | None = None) -> Config:
    """Load configuration from taskdeck.conf file."""
    path = path or CONFIG_FILE
    config = Config()

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
            case "timezone":
                config.timezone = value
            case "page_size":
                try:
                    config.page_size = int(value)
                except ValueError:
                    raise ConfigError(f"PAGE_SIZE must be an integer, got {value!r}") from None
                if config.page_size < 1:
                    raise ConfigError("PAGE_SIZE must be positive")
            case "completion_tracking":
                config.completion_tracking = _parse_bool(key, value)
            case "default_priority":
                try:
                    config.default_priority = Priority.parse(value)
                except ValueError as e:
                    raise ConfigError(str(e)) from None
            case _:
                logger.warning(f"Ignoring unknown config key: {key}")

    return config
