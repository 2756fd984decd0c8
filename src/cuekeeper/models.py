"""Data models for cuekeeper.

Domain model hierarchy:
- A session contains Players and Matchups
- Matchup holds the running score between two players
- Standings and stats are derived, never stored
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class SessionStatus(str, Enum):
    """Which screen the session is on."""

    SETUP = "SETUP"  # Editing the roster
    PLAYING = "PLAYING"  # Scoreboard visible


class EndMatchPolicy(str, Enum):
    """What happens to matchup scores when a match is ended."""

    KEEP_SCORES = "keep_scores"
    CLEAR_SCORES = "clear_scores"


# ============================================================================
# Core Domain Models
# ============================================================================


@dataclass
class Player:
    """Player in the session.

    Ids are 1-based and follow roster order.
    """

    id: int
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}

    def __str__(self) -> str:
        """String representation."""
        return f"P{self.id} {self.name}"


@dataclass
class Matchup:
    """A head-to-head pairing between two players.

    player1_id is always the lower roster index. Scores count racks won
    and never go below zero.
    """

    id: str  # "p1id-p2id"
    player1_id: int
    player2_id: int
    score1: int = 0
    score2: int = 0

    @staticmethod
    def make_id(player1_id: int, player2_id: int) -> str:
        """Build the composite matchup key."""
        return f"{player1_id}-{player2_id}"

    @property
    def leader_id(self) -> Optional[int]:
        """Id of the player currently ahead, None when level."""
        if self.score1 > self.score2:
            return self.player1_id
        elif self.score2 > self.score1:
            return self.player2_id
        return None

    def to_dict(self) -> dict:
        """Serialize with the camelCase keys used by the storage slot."""
        return {
            "id": self.id,
            "player1Id": self.player1_id,
            "player2Id": self.player2_id,
            "score1": self.score1,
            "score2": self.score2,
        }

    def __str__(self) -> str:
        """String representation."""
        return f"Matchup {self.id}: P{self.player1_id} {self.score1}-{self.score2} P{self.player2_id}"


# ============================================================================
# Derived Models
# ============================================================================


@dataclass
class PlayerStanding:
    """Ranking row for one player.

    wins is the player's own score summed over their matchups, losses is
    the opponents' score over the same matchups.
    """

    player_id: int
    name: str
    wins: int = 0
    losses: int = 0
    position: Optional[int] = None

    @property
    def net(self) -> int:
        return self.wins - self.losses

    @property
    def total(self) -> int:
        return self.wins + self.losses

    def to_dict(self) -> dict:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "wins": self.wins,
            "losses": self.losses,
            "net": self.net,
            "total": self.total,
            "position": self.position,
        }

    def __str__(self) -> str:
        """String representation."""
        pos = f"#{self.position}" if self.position else "unranked"
        return f"{pos} {self.name}: {self.wins}W-{self.losses}L ({self.net:+d})"


@dataclass
class PlayerTotal:
    """Total score for one player (summary line on the scoreboard)."""

    player_id: int
    name: str
    total_score: int = 0

    def to_dict(self) -> dict:
        return {"player_id": self.player_id, "name": self.name, "total_score": self.total_score}


@dataclass
class ScoreStats:
    """Everything the scoreboard summary panel shows."""

    total_games: int = 0
    ranking: list[PlayerStanding] = field(default_factory=list)
    player_totals: list[PlayerTotal] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total_games": self.total_games,
            "ranking": [s.to_dict() for s in self.ranking],
            "player_totals": [t.to_dict() for t in self.player_totals],
        }
