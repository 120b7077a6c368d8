"""Configuration management for FocusFlow."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

FOCUSFLOW_HOME = Path(os.environ.get("FOCUSFLOW_HOME", Path.home() / "focusflow"))
CONFIG_FILE = FOCUSFLOW_HOME / "config" / "focusflow.conf"
DATA_DIR = FOCUSFLOW_HOME / "data"


@dataclass
class Config:
    """FocusFlow configuration."""

    tasks_file: str = ""
    preview_count: int = 5
    date_format: str = "%b %d, %Y"

    @property
    def tasks_path(self) -> Path:
        """Resolved task file, defaulting to DATA_DIR/tasks.json."""
        if self.tasks_file:
            return Path(self.tasks_file).expanduser()
        return DATA_DIR / "tasks.json"


def _parse_value(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        if end_quote != -1:
            return value[1:end_quote]
        return value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from focusflow.conf file."""
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
        value = _parse_value(value.strip())

        match key:
            case "tasks_file":
                config.tasks_file = value
            case "preview_count":
                try:
                    config.preview_count = int(value)
                except ValueError:
                    logger.warning(f"Invalid PREVIEW_COUNT {value!r}, using {config.preview_count}")
            case "date_format":
                config.date_format = value
            case _:
                logger.debug(f"Ignoring unknown config key: {key}")

    return config
