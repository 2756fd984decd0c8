"""Roster and round-robin matchup generation."""

from typing import Optional

from cuekeeper.i18n import DEFAULT_LANGUAGE
from cuekeeper.models import Matchup, Player
from cuekeeper.validation import normalize_names


def generate_round_robin_pairs(num_players: int) -> list[tuple[int, int]]:
    """Generate every pairing of a single round robin.

    Pairs are 1-indexed, lower index first, in roster order:

    For 4 players:
        (1,2), (1,3), (1,4), (2,3), (2,4), (3,4)

    Args:
        num_players: Number of players in the roster

    Returns:
        List of (player_num1, player_num2) tuples, n*(n-1)/2 of them
    """
    if num_players < 0:
        raise ValueError(f"Number of players cannot be negative, got {num_players}")

    return [
        (i, j)
        for i in range(1, num_players + 1)
        for j in range(i + 1, num_players + 1)
    ]


def build_roster(names: list[Optional[str]], lang: str = DEFAULT_LANGUAGE) -> list[Player]:
    """Create players with sequential ids starting at 1.

    Blank names get a placeholder derived from their position.
    """
    return [
        Player(id=index, name=name)
        for index, name in enumerate(normalize_names(names, lang), start=1)
    ]


def create_matchups(players: list[Player]) -> list[Matchup]:
    """Create one 0-0 matchup per unordered pair of players."""
    matchups = []
    for i, j in generate_round_robin_pairs(len(players)):
        p1 = players[i - 1]
        p2 = players[j - 1]
        matchups.append(
            Matchup(
                id=Matchup.make_id(p1.id, p2.id),
                player1_id=p1.id,
                player2_id=p2.id,
            )
        )
    return matchups
