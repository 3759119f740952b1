"""Configuration management for One Line A Day."""

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

ONELINEADAY_HOME = Path(os.environ.get("ONELINEADAY_HOME", Path.home() / "onelineaday"))
CONFIG_FILE = ONELINEADAY_HOME / "config" / "onelineaday.conf"
DATA_DIR = ONELINEADAY_HOME / "data"


@dataclass
class Config:
    """One Line A Day configuration."""

    data_dir: str = ""
    timezone: str = ""
    reminder_title: str = "One Line A Day"
    reminder_body: str = "What happened today that mattered?"

    def resolve_data_dir(self) -> Path:
        """Configured data directory, or the default under ONELINEADAY_HOME."""
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return DATA_DIR

    def now(self) -> datetime:
        """Current wall-clock time in the configured timezone, or the machine's."""
        if self.timezone:
            return datetime.now(ZoneInfo(self.timezone)).replace(tzinfo=None)
        return datetime.now()


def _unquote(value: str) -> str:
    """Strip surrounding quotes, or an inline comment from unquoted values."""
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from onelineaday.conf file."""
    config = Config()
    config_file = config_file or CONFIG_FILE

    if not config_file.exists():
        return config

    for line in config_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "data_dir":
                config.data_dir = value
            case "timezone":
                config.timezone = value
            case "reminder_title":
                config.reminder_title = value
            case "reminder_body":
                config.reminder_body = value
            case _:
                logger.warning(f"Ignoring unknown config key: {key}")

    return config
