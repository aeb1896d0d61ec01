"""Configuration management for walk-cleanup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

import yaml

from .errors import ValidationError

DATE_FORMAT = "%Y-%m-%d"

# Far enough in the past to disable date filtering
NO_DATE_LIMIT = date(1901, 1, 1)

_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})


def parse_bool(value: Any, default: bool) -> bool:
    """Interpret a YAML/CLI value as a boolean.

    Args:
        value: Raw value (bool, int, str or None).
        default: Returned when value is None.

    Returns:
        Parsed boolean.

    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    return str(value).strip().lower() in _TRUE_STRINGS


def parse_date(value: date | str) -> date:
    """Parse a ``YYYY-MM-DD`` date, passing ``date`` values through.

    Raises:
        ValidationError: If the string is not a valid date.

    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), DATE_FORMAT).date()
    except ValueError as e:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD") from e


def _expand(value: str | os.PathLike[str]) -> Path:
    return Path(os.path.expanduser(str(value)))


@dataclass(frozen=True)
class WalkConfig:
    """Filter and action settings for one run. Read-only once built."""

    # Filters
    extension: str = ""  # e.g. ".log"; empty matches everything
    min_size: int = 0  # bytes; 0 disables the size filter
    modified_after: date = NO_DATE_LIMIT  # files modified before this day are skipped

    # Actions (precedence: archive > delete > list)
    list_files: bool = False
    delete: bool = False
    archive_dir: Path | None = None

    # Logging
    log_level: str = "INFO"
    log_file: Path | None = None
    audit_log_file: Path | None = None  # None writes the audit log to stdout

    @property
    def threshold(self) -> datetime:
        """Start of ``modified_after`` (UTC) as an aware datetime."""
        return datetime.combine(self.modified_after, datetime.min.time(), tzinfo=UTC)

    def validate(self) -> None:
        """Reject settings the engine cannot act on.

        Raises:
            ValidationError: On the first invalid field.

        """
        if self.min_size < 0:
            raise ValidationError(f"min_size must be non-negative, got {self.min_size}")
        if self.extension and not self.extension.startswith("."):
            raise ValidationError(f"extension must start with '.', got {self.extension!r}")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValidationError(f"Invalid log_level: {self.log_level}")

    def with_overrides(self, **overrides: Any) -> WalkConfig:
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)

    @classmethod
    def get_config_path(cls) -> Path:
        """Get the default configuration file path."""
        return Path.home() / ".config/walk-cleanup/config.yaml"

    @classmethod
    def load(cls, config_path: Path | None = None) -> WalkConfig:
        """Load configuration from YAML file.

        Args:
            config_path: Path to config file. Uses default if None.

        Returns:
            Loaded configuration, or defaults when the file is missing.

        Raises:
            ValidationError: If the file is not valid YAML or holds bad values.

        """
        if config_path is None:
            config_path = cls.get_config_path()

        if not config_path.exists():
            return cls()

        try:
            with config_path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValidationError(f"Invalid config file {config_path}: {e}", config_path) from e

        if not isinstance(data, dict):
            raise ValidationError(f"Config file {config_path} must contain a mapping", config_path)

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> WalkConfig:
        """Create config from dictionary."""
        kwargs: dict[str, Any] = {}

        # Filters
        if "extension" in data:
            kwargs["extension"] = str(data["extension"] or "")
        if "min_size" in data:
            try:
                kwargs["min_size"] = int(data["min_size"])
            except (TypeError, ValueError) as e:
                raise ValidationError(f"Invalid min_size: {data['min_size']!r}") from e
        if data.get("modified_after"):
            kwargs["modified_after"] = parse_date(data["modified_after"])

        # Actions
        if "list" in data:
            kwargs["list_files"] = parse_bool(data["list"], False)
        if "delete" in data:
            kwargs["delete"] = parse_bool(data["delete"], False)
        if data.get("archive_dir"):
            kwargs["archive_dir"] = _expand(data["archive_dir"])
        if data.get("audit_log"):
            kwargs["audit_log_file"] = _expand(data["audit_log"])

        # Logging
        logging_cfg = data.get("logging") or {}
        if "level" in logging_cfg:
            kwargs["log_level"] = str(logging_cfg["level"]).upper()
        if logging_cfg.get("file"):
            kwargs["log_file"] = _expand(logging_cfg["file"])

        config = cls(**kwargs)
        config.validate()
        return config

    def save(self, config_path: Path | None = None) -> None:
        """Save configuration to YAML file.

        Args:
            config_path: Path to save config. Uses default if None.

        """
        if config_path is None:
            config_path = self.get_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "extension": self.extension,
            "min_size": self.min_size,
            "modified_after": self.modified_after.strftime(DATE_FORMAT),
            "list": self.list_files,
            "delete": self.delete,
            "archive_dir": str(self.archive_dir) if self.archive_dir else None,
            "audit_log": str(self.audit_log_file) if self.audit_log_file else None,
            "logging": {
                "level": self.log_level,
                "file": str(self.log_file) if self.log_file else None,
            },
        }

        with config_path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

