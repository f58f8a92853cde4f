"""Configuration management with environment variable support."""

import os
from dataclasses import dataclass, field


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable."""
    return int(os.getenv(name, str(default)))


@dataclass(frozen=True)
class TableConfig:
    """Table configuration for a blackjack session."""

    num_decks: int = field(default_factory=lambda: _env_int("BLACKJACK_NUM_DECKS", 4))
    reshuffle_threshold: int = field(
        default_factory=lambda: _env_int("BLACKJACK_RESHUFFLE_THRESHOLD", 60)
    )
    starting_chips: int = field(
        default_factory=lambda: _env_int("BLACKJACK_STARTING_CHIPS", 1000)
    )
    min_bet: int = 1
    min_players: int = 1
    max_players: int = field(default_factory=lambda: _env_int("BLACKJACK_MAX_PLAYERS", 3))
    dealer_stand_total: int = 17

    def __post_init__(self) -> None:
        """Validate table settings."""
        if self.num_decks < 1:
            raise ValueError("num_decks must be at least 1")
        if self.reshuffle_threshold < 0:
            raise ValueError("reshuffle_threshold cannot be negative")
        if self.min_bet < 1:
            raise ValueError("min_bet must be at least 1")
        if self.starting_chips < self.min_bet:
            raise ValueError("starting_chips must cover the minimum bet")
        if not 1 <= self.min_players <= self.max_players:
            raise ValueError("player limits must satisfy 1 <= min_players <= max_players")


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    table: TableConfig = field(default_factory=TableConfig)


# Global configuration instance
config = AppConfig()
