"""
votekeeper Configuration

Loads config.toml sections at startup.
Environment variables override TOML values.
"""

from .loader import (
    LoggingConfig,
    VoteKeeperConfig,
    VotingConfig,
    load_config,
)

__all__ = [
    "LoggingConfig",
    "VoteKeeperConfig",
    "VotingConfig",
    "load_config",
]
