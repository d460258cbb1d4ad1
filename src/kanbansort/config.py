"""Configuration management for kanbansort."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

KANBANSORT_HOME = Path(os.environ.get("KANBANSORT_HOME", Path.home() / ".kanbansort"))
CONFIG_FILE = KANBANSORT_HOME / "config" / "kanbansort.conf"

TAG_SOURCES = ("title", "title+description")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """kanbansort configuration."""

    tag_source: str = "title+description"
    apply_column_order: bool = True
    log_level: str = "WARNING"

    @property
    def include_description(self) -> bool:
        return self.tag_source == "title+description"


def _parse_bool(value: str) -> bool | None:
    lowered = value.lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    return None


def load_config(path: Path | None = None) -> Config:
    """Load configuration from kanbansort.conf."""
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
        value = value.strip()

        # Handle quoted values with inline comments: "value" # comment
        if value.startswith('"') or value.startswith("'"):
            quote = value[0]
            end_quote = value.find(quote, 1)
            value = value[1:end_quote] if end_quote != -1 else value[1:]
        elif "#" in value:
            value = value.split("#")[0].strip()

        match key:
            case "tag_source":
                if value.lower() in TAG_SOURCES:
                    config.tag_source = value.lower()
                else:
                    logger.warning(f"Invalid TAG_SOURCE {value!r}, expected one of {TAG_SOURCES}")
            case "apply_column_order":
                flag = _parse_bool(value)
                if flag is None:
                    logger.warning(f"Invalid APPLY_COLUMN_ORDER {value!r}, expected true/false")
                else:
                    config.apply_column_order = flag
            case "log_level":
                if value.upper() in LOG_LEVELS:
                    config.log_level = value.upper()
                else:
                    logger.warning(f"Invalid LOG_LEVEL {value!r}")

    return config
