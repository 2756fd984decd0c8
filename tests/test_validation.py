"""Tests for roster and score input validation."""

import pytest

from cuekeeper.validation import (
    ValidationError,
    adjust_player_count,
    clamp_player_count,
    normalize_names,
    parse_score_delta,
    placeholder_name,
    validate_roster_size,
)


class TestPlayerCount:
    """Test cases for roster size bounds."""

    def test_clamp_inside_bounds(self):
        for n in range(2, 9):
            assert clamp_player_count(n) == n

    def test_clamp_outside_bounds(self):
        assert clamp_player_count(0) == 2
        assert clamp_player_count(1) == 2
        assert clamp_player_count(9) == 8
        assert clamp_player_count(100) == 8

    def test_adjust_steps(self):
        assert adjust_player_count(2, 1) == 3
        assert adjust_player_count(5, -1) == 4

    def test_adjust_stops_at_bounds(self):
        assert adjust_player_count(2, -1) == 2
        assert adjust_player_count(8, 1) == 8

    def test_adjust_accepts_string(self):
        assert adjust_player_count("4", 1) == 5

    def test_adjust_garbage_falls_back_to_minimum(self):
        assert adjust_player_count("abc", 0) == 2
        assert adjust_player_count(None, 1) == 3

    def test_validate_roster_size(self):
        assert validate_roster_size(2) == (True, "")
        assert validate_roster_size(8) == (True, "")

        is_valid, msg = validate_roster_size(1)
        assert is_valid is False
        assert "between 2 and 8" in msg

        is_valid, msg = validate_roster_size(9)
        assert is_valid is False

    def test_validate_custom_bounds(self):
        assert validate_roster_size(3, minimum=3, maximum=4) == (True, "")
        assert validate_roster_size(5, minimum=3, maximum=4)[0] is False


class TestNames:
    """Test cases for name normalization."""

    def test_blank_names_get_placeholders(self):
        assert normalize_names(["Ann", "", "  ", None], "en") == ["Ann", "Player 2", "Player 3", "Player 4"]

    def test_names_are_stripped(self):
        assert normalize_names(["  Ann ", "Bob\n"], "en") == ["Ann", "Bob"]

    def test_chinese_placeholder(self):
        assert placeholder_name(1, "zh") == "玩家 1"


class TestScoreDelta:
    """Test cases for parse_score_delta."""

    def test_valid_values(self):
        assert parse_score_delta(1) == 1
        assert parse_score_delta("1") == 1
        assert parse_score_delta("+1") == 1
        assert parse_score_delta(-1) == -1
        assert parse_score_delta(" -1 ") == -1

    def test_invalid_values(self):
        for value in ("2", "0", "abc", "", None, 5):
            with pytest.raises(ValidationError):
                parse_score_delta(value)
