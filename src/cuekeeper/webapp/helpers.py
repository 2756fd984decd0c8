"""Display helpers for templates.

Flattens a matchup and its two players into one object so the scoreboard
template can render each card without looking players up.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class SideDisplay:
    """One half of a matchup card."""

    player_id: int
    name: str
    score: int
    is_leader: bool = False


@dataclass
class MatchupCard:
    """Uniform display object passed to templates."""

    id: str
    left: SideDisplay
    right: SideDisplay

    @property
    def is_level(self) -> bool:
        return not (self.left.is_leader or self.right.is_leader)

    @classmethod
    def from_matchup(cls, matchup, player1, player2) -> "MatchupCard":
        """Create from a Matchup with its two Player objects.

        A player missing from the roster renders as "?".
        """
        leader: Optional[int] = matchup.leader_id
        return cls(
            id=matchup.id,
            left=SideDisplay(
                player_id=matchup.player1_id,
                name=player1.name if player1 else "?",
                score=matchup.score1,
                is_leader=leader == matchup.player1_id,
            ),
            right=SideDisplay(
                player_id=matchup.player2_id,
                name=player2.name if player2 else "?",
                score=matchup.score2,
                is_leader=leader == matchup.player2_id,
            ),
        )


def build_matchup_cards(scoreboard) -> list[MatchupCard]:
    """Cards for every matchup, in generation order."""
    return [
        MatchupCard.from_matchup(
            m,
            scoreboard.get_player(m.player1_id),
            scoreboard.get_player(m.player2_id),
        )
        for m in scoreboard.matchups
    ]


def draft_names(scoreboard, count: int, placeholder, drafts: Optional[list[str]] = None) -> list[str]:
    """Pre-filled names for the setup form.

    Each slot takes the name typed before a resize, then the existing
    roster name, then the positional placeholder.
    """
    drafts = drafts or []
    names = []
    for position in range(1, count + 1):
        typed = drafts[position - 1].strip() if position <= len(drafts) else ""
        player = scoreboard.players[position - 1] if position <= len(scoreboard.players) else None
        if typed:
            names.append(typed)
        elif player:
            names.append(player.name)
        else:
            names.append(placeholder(position))
    return names
