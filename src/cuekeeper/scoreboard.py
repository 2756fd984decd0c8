"""Scoreboard state store.

Owns the roster, the round-robin matchups and the session status, and
writes itself to a key-value slot after every successful mutation.

Example:
    store = Scoreboard(MemorySlotStore())
    store.start_match(["Ann", "Bob", "Cy"])
    store.increment_score("1-2", 1)
    store.get_stats().ranking[0].name  # "Ann"
"""

import json
import logging
from typing import Any, Optional

from cuekeeper.i18n import DEFAULT_LANGUAGE
from cuekeeper.matchup_builder import build_roster, create_matchups
from cuekeeper.models import EndMatchPolicy, Matchup, Player, ScoreStats, SessionStatus
from cuekeeper.standings import calculate_stats
from cuekeeper.storage import PersistenceReadError, PersistenceWriteError
from cuekeeper.validation import MAX_PLAYERS, MIN_PLAYERS, validate_roster_size

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "billiards_score_data"


class RosterError(Exception):
    """Roster cannot be used to start a session."""

    pass


class InvalidTransitionError(Exception):
    """Status change not allowed from the current status."""

    pass


# ============================================================================
# Serialization
# ============================================================================


def _require_int(value: Any, field: str, minimum: Optional[int] = None) -> int:
    # bool is an int subclass but never a valid id or score
    if isinstance(value, bool) or not isinstance(value, int):
        raise PersistenceReadError(f"{field} must be an integer, got {value!r}")
    if minimum is not None and value < minimum:
        raise PersistenceReadError(f"{field} must be >= {minimum}, got {value}")
    return value


def session_to_dict(players: list[Player], matchups: list[Matchup], status: SessionStatus) -> dict:
    """Serialize a session to the persisted slot layout."""
    return {
        "players": [p.to_dict() for p in players],
        "matchups": [m.to_dict() for m in matchups],
        "status": status.value,
    }


def session_from_dict(data: Any) -> tuple[list[Player], list[Matchup], SessionStatus]:
    """Parse the persisted slot layout.

    Missing top-level keys fall back to their defaults one by one.

    Raises:
        PersistenceReadError: If the document has the wrong shape
    """
    if not isinstance(data, dict):
        raise PersistenceReadError(f"Stored state must be an object, got {type(data).__name__}")

    players = []
    matchups = []
    status = SessionStatus.SETUP

    try:
        for raw in data.get("players") or []:
            name = raw["name"]
            if not isinstance(name, str):
                raise PersistenceReadError(f"Player name must be a string, got {name!r}")
            players.append(Player(id=_require_int(raw["id"], "player id", 1), name=name))

        for raw in data.get("matchups") or []:
            matchup_id = raw["id"]
            if not isinstance(matchup_id, str):
                raise PersistenceReadError(f"Matchup id must be a string, got {matchup_id!r}")
            matchups.append(
                Matchup(
                    id=matchup_id,
                    player1_id=_require_int(raw["player1Id"], "player1Id"),
                    player2_id=_require_int(raw["player2Id"], "player2Id"),
                    score1=_require_int(raw["score1"], "score1", 0),
                    score2=_require_int(raw["score2"], "score2", 0),
                )
            )

        if data.get("status"):
            status = SessionStatus(data["status"])
    except (KeyError, TypeError, ValueError) as e:
        raise PersistenceReadError(f"Malformed stored state: {e!r}") from e

    return players, matchups, status


# ============================================================================
# State store
# ============================================================================


class Scoreboard:
    """Round-robin scoreboard for one session.

    Args:
        slot_store: Object with read(key) / write(key, value) methods
        storage_key: Name of the slot holding this session
        lang: Language used for placeholder player names
        end_match_policy: Whether ending a match keeps or clears scores
        min_players: Smallest roster accepted
        max_players: Largest roster accepted
    """

    def __init__(
        self,
        slot_store,
        storage_key: str = DEFAULT_STORAGE_KEY,
        lang: str = DEFAULT_LANGUAGE,
        end_match_policy: EndMatchPolicy = EndMatchPolicy.KEEP_SCORES,
        min_players: int = MIN_PLAYERS,
        max_players: int = MAX_PLAYERS,
    ):
        self.slot_store = slot_store
        self.storage_key = storage_key
        self.lang = lang
        self.end_match_policy = EndMatchPolicy(end_match_policy)
        self.min_players = min_players
        self.max_players = max_players

        self.players: list[Player] = []
        self.matchups: list[Matchup] = []
        self.status = SessionStatus.SETUP

        self.load()

    @classmethod
    def from_config(cls, config: dict, slot_store=None) -> "Scoreboard":
        """Build a scoreboard from a validated config dict."""
        if slot_store is None:
            from cuekeeper.storage import open_slot_store

            slot_store = open_slot_store(config["db_path"])

        return cls(
            slot_store,
            storage_key=config["storage_key"],
            lang=config["lang"],
            end_match_policy=config["end_match_policy"],
            min_players=config["min_players"],
            max_players=config["max_players"],
        )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        return session_to_dict(self.players, self.matchups, self.status)

    def save(self) -> bool:
        """Write the session to its slot.

        A failed write is logged and otherwise ignored; the in-memory
        state stays authoritative.

        Returns:
            True if the slot was written
        """
        try:
            payload = json.dumps(self.to_dict(), ensure_ascii=False)
            self.slot_store.write(self.storage_key, payload)
        except PersistenceWriteError as e:
            logger.warning("Save failed: %s", e)
            return False
        return True

    def load(self) -> bool:
        """Restore the session from its slot.

        A missing slot leaves an empty SETUP session. A corrupt slot is
        logged, discarded and replaced by the same defaults.

        Returns:
            True if a stored session was restored
        """
        try:
            raw = self.slot_store.read(self.storage_key)
            if not raw:
                return False
            players, matchups, status = session_from_dict(json.loads(raw))
        except (PersistenceReadError, json.JSONDecodeError, RecursionError) as e:
            logger.error("Load failed, starting from an empty session: %s", e)
            self.players, self.matchups, self.status = [], [], SessionStatus.SETUP
            return False

        self.players, self.matchups, self.status = players, matchups, status
        logger.info(
            "Restored session: %d players, %d matchups, status %s",
            len(players), len(matchups), status.value,
        )
        return True

    # ------------------------------------------------------------------
    # Roster and status
    # ------------------------------------------------------------------

    def set_players(self, names: list[Optional[str]]) -> list[Player]:
        """Replace the roster and regenerate every matchup at 0-0.

        All previous scores are discarded.

        Raises:
            RosterError: If the roster size is out of bounds
        """
        is_valid, error_msg = validate_roster_size(len(names), self.min_players, self.max_players)
        if not is_valid:
            raise RosterError(error_msg)

        self.players = build_roster(names, self.lang)
        self.matchups = create_matchups(self.players)
        self.save()
        return self.players

    def start_match(self, names: list[Optional[str]]) -> None:
        """Finalize the roster and switch to the scoreboard (SETUP -> PLAYING)."""
        if self.status != SessionStatus.SETUP:
            raise InvalidTransitionError(f"Cannot start a match while {self.status.value}")

        self.set_players(names)
        self.status = SessionStatus.PLAYING
        self.save()
        logger.info("Match started with %d players", len(self.players))

    def end_match(self) -> None:
        """Return to setup (PLAYING -> SETUP), applying the end-match policy."""
        if self.status != SessionStatus.PLAYING:
            raise InvalidTransitionError(f"Cannot end a match while {self.status.value}")

        if self.end_match_policy == EndMatchPolicy.CLEAR_SCORES:
            for matchup in self.matchups:
                matchup.score1 = 0
                matchup.score2 = 0

        self.status = SessionStatus.SETUP
        self.save()
        logger.info("Match ended (%s)", self.end_match_policy.value)

    # ------------------------------------------------------------------
    # Scores
    # ------------------------------------------------------------------

    def increment_score(self, matchup_id: str, player_id: int) -> bool:
        """Give one rack to a player in a matchup.

        Returns:
            False if the matchup is unknown or the player is not in it
        """
        matchup = self.get_matchup(matchup_id)
        if not matchup:
            return False

        if player_id == matchup.player1_id:
            matchup.score1 += 1
        elif player_id == matchup.player2_id:
            matchup.score2 += 1
        else:
            return False

        self.save()
        return True

    def decrement_score(self, matchup_id: str, player_id: int) -> bool:
        """Take one rack back from a player in a matchup.

        Scores never go below zero; decrementing a 0 is a no-op.
        """
        matchup = self.get_matchup(matchup_id)
        if not matchup:
            return False

        if player_id == matchup.player1_id and matchup.score1 > 0:
            matchup.score1 -= 1
        elif player_id == matchup.player2_id and matchup.score2 > 0:
            matchup.score2 -= 1
        else:
            return False

        self.save()
        return True

    def adjust_score(self, matchup_id: str, player_id: int, delta: int) -> bool:
        """Dispatch a +1/-1 tap to increment_score or decrement_score."""
        if delta > 0:
            return self.increment_score(matchup_id, player_id)
        elif delta < 0:
            return self.decrement_score(matchup_id, player_id)
        return False

    def reset_scores(self) -> None:
        """Zero every matchup, keeping roster, status and matchup ids."""
        for matchup in self.matchups:
            matchup.score1 = 0
            matchup.score2 = 0
        self.save()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_player(self, player_id: int) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def get_matchup(self, matchup_id: str) -> Optional[Matchup]:
        return next((m for m in self.matchups if m.id == matchup_id), None)

    def get_stats(self) -> ScoreStats:
        """Total games, ranking and per-player totals."""
        return calculate_stats(self.players, self.matchups)

    @property
    def is_playing(self) -> bool:
        return self.status == SessionStatus.PLAYING
