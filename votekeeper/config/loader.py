"""
votekeeper TOML Configuration Loader

Loads the [voting] and [logging] sections of a TOML file with environment
variable overrides (dataclass + from_dict + apply_env).

Environment variable mapping:
    [voting] min_proposal_duration → VOTEKEEPER_MIN_PROPOSAL_DURATION
    [voting] max_proposal_duration → VOTEKEEPER_MAX_PROPOSAL_DURATION
    [voting] keep_event_log        → VOTEKEEPER_KEEP_EVENT_LOG
    [logging] level                → VOTEKEEPER_LOG_LEVEL
    [logging] file                 → VOTEKEEPER_LOG_FILE
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

try:
    import tomllib as tomli  # Python 3.11+
except ImportError:
    import tomli  # type: ignore[no-redef]

from ..constants import (
    DEFAULT_MAX_PROPOSAL_DURATION,
    DEFAULT_MIN_PROPOSAL_DURATION,
    ENV_PREFIX,
    LOG_LEVEL,
    parse_bool,
)
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}


def _env(name: str) -> Optional[str]:
    return os.environ.get(ENV_PREFIX + name)


def _as_number(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(number):
        raise ConfigurationError(f"{name} must be finite, got {value!r}")
    return int(number) if number.is_integer() else number


def _as_bool(name: str, value: Any) -> bool:
    parsed = parse_bool(value)
    if not isinstance(parsed, bool):
        raise ConfigurationError(f"{name} must be true or false, got {value!r}")
    return parsed


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

@dataclass
class VotingConfig:
    """[voting] section."""
    min_proposal_duration: float = DEFAULT_MIN_PROPOSAL_DURATION
    max_proposal_duration: float = DEFAULT_MAX_PROPOSAL_DURATION  # 0 = unbounded
    keep_event_log: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VotingConfig":
        return cls(
            min_proposal_duration=_as_number(
                "min_proposal_duration",
                data.get("min_proposal_duration", DEFAULT_MIN_PROPOSAL_DURATION),
            ),
            max_proposal_duration=_as_number(
                "max_proposal_duration",
                data.get("max_proposal_duration", DEFAULT_MAX_PROPOSAL_DURATION),
            ),
            keep_event_log=_as_bool("keep_event_log", data.get("keep_event_log", True)),
        )

    def apply_env(self) -> None:
        """Override from environment variables."""
        if v := _env("MIN_PROPOSAL_DURATION"):
            self.min_proposal_duration = _as_number("VOTEKEEPER_MIN_PROPOSAL_DURATION", v)
        if v := _env("MAX_PROPOSAL_DURATION"):
            self.max_proposal_duration = _as_number("VOTEKEEPER_MAX_PROPOSAL_DURATION", v)
        if v := _env("KEEP_EVENT_LOG"):
            self.keep_event_log = _as_bool("VOTEKEEPER_KEEP_EVENT_LOG", v)

    def validate(self) -> None:
        if self.min_proposal_duration <= 0:
            raise ConfigurationError(
                f"min_proposal_duration must be positive, got {self.min_proposal_duration}"
            )
        if self.max_proposal_duration < 0:
            raise ConfigurationError(
                f"max_proposal_duration cannot be negative, got {self.max_proposal_duration}"
            )
        if self.max_proposal_duration and self.max_proposal_duration < self.min_proposal_duration:
            raise ConfigurationError(
                f"max_proposal_duration {self.max_proposal_duration} < "
                f"min_proposal_duration {self.min_proposal_duration}"
            )


@dataclass
class LoggingConfig:
    """[logging] section."""
    level: str = field(default_factory=lambda: str(LOG_LEVEL))
    file: Optional[str] = None
    console: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggingConfig":
        return cls(
            level=str(data.get("level", str(LOG_LEVEL))),
            file=data.get("file"),
            console=_as_bool("console", data.get("console", True)),
        )

    def apply_env(self) -> None:
        if v := _env("LOG_LEVEL"):
            self.level = v
        if v := _env("LOG_FILE"):
            self.file = v

    def validate(self) -> None:
        if self.level.upper() not in _LEVELS:
            raise ConfigurationError(f"Unknown log level: {self.level!r}")

    def apply(self) -> None:
        """Reconfigure the votekeeper logging system with these settings."""
        from ..logger import configure_logging

        configure_logging(
            log_level=self.level,
            log_file=Path(self.file) if self.file else None,
            console_output=self.console,
            file_output=bool(self.file),
        )


@dataclass
class VoteKeeperConfig:
    """Top-level configuration."""
    voting: VotingConfig = field(default_factory=VotingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VoteKeeperConfig":
        return cls(
            voting=VotingConfig.from_dict(data.get("voting", {})),
            logging=LoggingConfig.from_dict(data.get("logging", {})),
        )

    def apply_env(self) -> None:
        self.voting.apply_env()
        self.logging.apply_env()

    def validate(self) -> None:
        self.voting.validate()
        self.logging.validate()


def load_config(path: Optional[Union[str, Path]] = None) -> VoteKeeperConfig:
    """
    Load configuration from *path* (TOML), then apply environment overrides.

    Without a path, defaults plus environment overrides are returned.
    """
    data: Dict[str, Any] = {}
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")
        try:
            with open(config_path, "rb") as f:
                data = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML in {config_path}: {e}") from e
        logger.info(f"Loaded config from {config_path}")

    config = VoteKeeperConfig.from_dict(data)
    config.apply_env()
    config.validate()
    return config
