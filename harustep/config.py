"""Configuration loading and logging setup for HaruStep.

Settings come from an optional YAML file (``$HARUSTEP_CONFIG``, default
``~/.harustep/config.yaml``) with environment variables layered on top.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_ENERGY_LEVEL = 6
DEFAULT_REQUEST_TIMEOUT = 30.0

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def config_path() -> Path:
    """Location of the YAML config file."""
    return Path(
        os.environ.get("HARUSTEP_CONFIG", str(Path.home() / ".harustep" / "config.yaml"))
    ).expanduser().resolve()


def _load_settings(path: Path) -> dict[str, Any]:
    """Top-level mapping of the YAML file; a missing file or non-mapping document counts as empty."""
    if not path.is_file():
        return {}
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


@dataclass
class Config:
    api_key: str = ""
    model: str = DEFAULT_MODEL
    energy_level: int = DEFAULT_ENERGY_LEVEL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    show_chat_errors: bool = False
    timezone: str = "UTC"
    log_level: str = "INFO"
    user: dict[str, Any] = field(default_factory=dict)  # seed UserState override

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Config:
        if not d or not isinstance(d, dict):
            return cls()
        user = d.get("user")
        return cls(
            api_key=str(d.get("api_key", "") or ""),
            model=str(d.get("model", DEFAULT_MODEL) or DEFAULT_MODEL),
            energy_level=int(d.get("energy_level", DEFAULT_ENERGY_LEVEL)),
            request_timeout=float(d.get("request_timeout", DEFAULT_REQUEST_TIMEOUT)),
            show_chat_errors=bool(d.get("show_chat_errors", False)),
            timezone=str(d.get("timezone", "UTC") or "UTC"),
            log_level=str(d.get("log_level", "INFO") or "INFO").upper(),
            user=user if isinstance(user, dict) else {},
        )

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key.strip())

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def validate(self) -> list[str]:
        """Return a list of configuration errors (empty if valid)."""
        errors = []
        if not 0 <= self.energy_level <= 10:
            errors.append("energy_level must be an integer 0-10")
        if self.request_timeout <= 0:
            errors.append("request_timeout must be positive")
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            errors.append(f"Unknown timezone: {self.timezone}")
        if logging.getLevelName(self.log_level) == f"Level {self.log_level}":
            errors.append(f"Unknown log level: {self.log_level}")
        return errors


def load_config(path: Path | None = None) -> Config:
    """Load config from YAML, then apply environment overrides.

    Raises ValueError if the resulting config is invalid.
    """
    if path is None:
        path = config_path()
    config = Config.from_dict(_load_settings(Path(path)))

    api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")
    if api_key:
        config.api_key = api_key
    if os.environ.get("HARUSTEP_MODEL"):
        config.model = os.environ["HARUSTEP_MODEL"]
    if os.environ.get("HARUSTEP_LOG_LEVEL"):
        config.log_level = os.environ["HARUSTEP_LOG_LEVEL"].upper()

    errors = config.validate()
    if errors:
        raise ValueError("; ".join(errors))
    return config


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging for the app process."""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # SDK transport chatter
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
