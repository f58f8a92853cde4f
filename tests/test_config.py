"""Tests for configuration classes."""

import os
from unittest.mock import patch

import pytest

from config import AppConfig, TableConfig


class TestTableConfig:
    """Tests for TableConfig class."""

    def test_defaults(self):
        """Test table defaults with a clean environment."""
        with patch.dict(os.environ, {}, clear=True):
            table = TableConfig()

        assert table.num_decks == 4
        assert table.reshuffle_threshold == 60
        assert table.starting_chips == 1000
        assert table.min_bet == 1
        assert table.min_players == 1
        assert table.max_players == 3
        assert table.dealer_stand_total == 17

    def test_reads_env_vars(self):
        """Test that table settings are read from environment variables."""
        env = {
            "BLACKJACK_NUM_DECKS": "6",
            "BLACKJACK_RESHUFFLE_THRESHOLD": "80",
            "BLACKJACK_STARTING_CHIPS": "500",
            "BLACKJACK_MAX_PLAYERS": "5",
        }
        with patch.dict(os.environ, env):
            table = TableConfig()

        assert table.num_decks == 6
        assert table.reshuffle_threshold == 80
        assert table.starting_chips == 500
        assert table.max_players == 5

    def test_explicit_values_override_env(self):
        with patch.dict(os.environ, {"BLACKJACK_NUM_DECKS": "6"}):
            assert TableConfig(num_decks=2).num_decks == 2

    def test_non_integer_env_raises(self):
        with patch.dict(os.environ, {"BLACKJACK_NUM_DECKS": "lots"}):
            with pytest.raises(ValueError):
                TableConfig()

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"num_decks": 0},
            {"reshuffle_threshold": -1},
            {"min_bet": 0},
            {"starting_chips": 5, "min_bet": 10},
            {"min_players": 0},
            {"min_players": 4, "max_players": 3},
        ],
    )
    def test_invalid_settings_raise(self, kwargs):
        with pytest.raises(ValueError):
            TableConfig(**kwargs)

    def test_frozen(self):
        table = TableConfig()
        with pytest.raises(AttributeError):
            table.num_decks = 8


class TestAppConfig:
    """Tests for AppConfig class."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            app = AppConfig()

        assert app.debug is False
        assert app.log_level == "INFO"
        assert app.table.num_decks == 4

    def test_debug_flag(self):
        with patch.dict(os.environ, {"DEBUG": "True"}):
            assert AppConfig().debug is True

    def test_log_level_upper_cased(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
            assert AppConfig().log_level == "DEBUG"
