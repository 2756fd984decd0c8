"""Ranking and summary statistics derived from matchup scores."""

from collections import defaultdict

from cuekeeper.models import Matchup, Player, PlayerStanding, PlayerTotal, ScoreStats


def count_total_games(matchups: list[Matchup]) -> int:
    """Total racks scored league-wide (every score field of every matchup)."""
    return sum(m.score1 + m.score2 for m in matchups)


def calculate_player_totals(players: list[Player], matchups: list[Matchup]) -> list[PlayerTotal]:
    """Sum each player's own score across their matchups, in roster order."""
    totals = defaultdict(int)
    for matchup in matchups:
        totals[matchup.player1_id] += matchup.score1
        totals[matchup.player2_id] += matchup.score2

    return [
        PlayerTotal(player_id=p.id, name=p.name, total_score=totals[p.id])
        for p in players
    ]


def calculate_ranking(players: list[Player], matchups: list[Matchup]) -> list[PlayerStanding]:
    """Calculate the ranking table.

    Ordering:
    1. Net (wins - losses) DESC
    2. Wins DESC
    3. Roster order (sort is stable)

    Args:
        players: Roster in id order
        matchups: All matchups of the session

    Returns:
        List of PlayerStanding objects sorted by position (1 = best)
    """
    standings_dict = {
        p.id: PlayerStanding(player_id=p.id, name=p.name)
        for p in players
    }

    for matchup in matchups:
        p1 = standings_dict.get(matchup.player1_id)
        p2 = standings_dict.get(matchup.player2_id)

        if p1 is not None:
            p1.wins += matchup.score1
            p1.losses += matchup.score2
        if p2 is not None:
            p2.wins += matchup.score2
            p2.losses += matchup.score1

    ranking = sorted(standings_dict.values(), key=lambda s: (-s.net, -s.wins))

    for position, standing in enumerate(ranking, start=1):
        standing.position = position

    return ranking


def calculate_stats(players: list[Player], matchups: list[Matchup]) -> ScoreStats:
    """Build the full summary shown next to the scoreboard."""
    return ScoreStats(
        total_games=count_total_games(matchups),
        ranking=calculate_ranking(players, matchups),
        player_totals=calculate_player_totals(players, matchups),
    )
