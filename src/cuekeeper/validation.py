"""Validation rules for rosters and score input.

Only trivial bounds checks live here: roster size, blank names and the
direction of a score tap.
"""

from typing import Any, Optional

from cuekeeper.i18n import DEFAULT_LANGUAGE, get_string

MIN_PLAYERS = 2
MAX_PLAYERS = 8


class ValidationError(Exception):
    """Raised when validation fails."""

    pass


def clamp_player_count(count: int, minimum: int = MIN_PLAYERS, maximum: int = MAX_PLAYERS) -> int:
    """Clamp a roster size into [minimum, maximum].

    Examples:
        >>> clamp_player_count(1)
        2
        >>> clamp_player_count(9)
        8
    """
    return max(minimum, min(maximum, count))


def adjust_player_count(
    current: Any, delta: int, minimum: int = MIN_PLAYERS, maximum: int = MAX_PLAYERS
) -> int:
    """Apply a +1/-1 step to the draft roster size.

    Args:
        current: Current size as shown on screen (may be a string or garbage)
        delta: Step to apply
        minimum: Lower bound
        maximum: Upper bound

    Returns:
        The new size, clamped. A non-integer current value counts as minimum.
    """
    try:
        value = int(current)
    except (TypeError, ValueError):
        value = minimum
    return clamp_player_count(value + delta, minimum, maximum)


def validate_roster_size(
    count: int, minimum: int = MIN_PLAYERS, maximum: int = MAX_PLAYERS
) -> tuple[bool, str]:
    """Validate the number of players in a roster.

    Returns:
        Tuple of (is_valid, error_message)

    Examples:
        >>> validate_roster_size(3)
        (True, '')
        >>> validate_roster_size(1)
        (False, 'Roster must have between 2 and 8 players (got 1)')
    """
    if count < minimum or count > maximum:
        return False, f"Roster must have between {minimum} and {maximum} players (got {count})"
    return True, ""


def placeholder_name(position: int, lang: str = DEFAULT_LANGUAGE) -> str:
    """Default label for the player at a 1-based roster position."""
    return get_string("setup.placeholder_name", lang, number=position)


def normalize_names(names: list[Optional[str]], lang: str = DEFAULT_LANGUAGE) -> list[str]:
    """Strip names and replace blank ones with their positional placeholder."""
    normalized = []
    for index, name in enumerate(names, start=1):
        cleaned = (name or "").strip()
        normalized.append(cleaned or placeholder_name(index, lang))
    return normalized


def parse_score_delta(value: Any) -> int:
    """Parse the direction of a score tap.

    Accepts 1 / "+1" / "1" for a point and -1 / "-1" for taking one back.

    Raises:
        ValidationError: For anything else
    """
    try:
        delta = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid score delta: {value!r}")

    if delta not in (1, -1):
        raise ValidationError(f"Score delta must be +1 or -1, got {delta}")

    return delta
