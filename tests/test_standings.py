"""Tests for ranking and summary statistics."""

from cuekeeper.models import Matchup, Player
from cuekeeper.standings import (
    calculate_player_totals,
    calculate_ranking,
    calculate_stats,
    count_total_games,
)


def make_players(*names):
    return [Player(id=i, name=name) for i, name in enumerate(names, start=1)]


def make_matchup(p1, p2, score1=0, score2=0):
    return Matchup(id=f"{p1}-{p2}", player1_id=p1, player2_id=p2, score1=score1, score2=score2)


def test_wins_and_losses_summed_across_matchups():
    players = make_players("A", "B", "C")
    matchups = [
        make_matchup(1, 2, 3, 1),
        make_matchup(1, 3, 0, 2),
        make_matchup(2, 3, 4, 4),
    ]

    by_name = {s.name: s for s in calculate_ranking(players, matchups)}

    assert (by_name["A"].wins, by_name["A"].losses) == (3, 3)
    assert (by_name["B"].wins, by_name["B"].losses) == (5, 7)
    assert (by_name["C"].wins, by_name["C"].losses) == (6, 4)
    assert by_name["C"].net == 2
    assert by_name["C"].total == 10


def test_ranking_by_net_then_wins():
    """Higher net ranks first; equal net is decided by wins."""
    players = make_players("A", "B", "C")
    matchups = [
        make_matchup(1, 2, 2, 1),  # A +1, B -1
        make_matchup(1, 3, 0, 0),
        make_matchup(2, 3, 3, 2),  # B +1, C -1
    ]
    # A: 2W-1L net +1; B: 4W-4L net 0; C: 2W-3L net -1
    ranking = calculate_ranking(players, matchups)
    assert [s.name for s in ranking] == ["A", "B", "C"]
    assert [s.position for s in ranking] == [1, 2, 3]

    matchups = [
        make_matchup(1, 2, 1, 1),
        make_matchup(1, 3, 0, 0),
        make_matchup(2, 3, 0, 0),
    ]
    # A and B both net 0 with 1 win, C net 0 with 0 wins
    ranking = calculate_ranking(players, matchups)
    assert [s.name for s in ranking] == ["A", "B", "C"]

    matchups = [
        make_matchup(1, 2, 0, 0),
        make_matchup(1, 3, 0, 0),
        make_matchup(2, 3, 5, 5),
    ]
    # All net 0; B and C have 5 wins, A has 0
    ranking = calculate_ranking(players, matchups)
    assert [s.name for s in ranking] == ["B", "C", "A"]


def test_exact_ties_keep_roster_order():
    players = make_players("D", "C", "B", "A")
    ranking = calculate_ranking(players, [])
    assert [s.name for s in ranking] == ["D", "C", "B", "A"]
    assert all(s.net == 0 and s.wins == 0 for s in ranking)


def test_ranking_order_invariant():
    players = make_players("A", "B", "C", "D")
    matchups = [
        make_matchup(1, 2, 3, 5),
        make_matchup(1, 3, 2, 2),
        make_matchup(1, 4, 7, 1),
        make_matchup(2, 3, 0, 4),
        make_matchup(2, 4, 6, 6),
        make_matchup(3, 4, 1, 3),
    ]
    ranking = calculate_ranking(players, matchups)
    for better, worse in zip(ranking, ranking[1:]):
        assert better.net >= worse.net
        if better.net == worse.net:
            assert better.wins >= worse.wins


def test_total_games_counts_every_score():
    matchups = [make_matchup(1, 2, 3, 1), make_matchup(1, 3, 0, 2)]
    assert count_total_games(matchups) == 6
    assert count_total_games([]) == 0


def test_player_totals_in_roster_order():
    players = make_players("A", "B", "C")
    matchups = [make_matchup(1, 2, 3, 1), make_matchup(1, 3, 0, 2), make_matchup(2, 3, 1, 0)]

    totals = calculate_player_totals(players, matchups)

    assert [(t.name, t.total_score) for t in totals] == [("A", 3), ("B", 2), ("C", 2)]


def test_calculate_stats_to_dict():
    players = make_players("A", "B")
    stats = calculate_stats(players, [make_matchup(1, 2, 2, 1)])

    data = stats.to_dict()
    assert data["total_games"] == 3
    assert data["ranking"][0] == {
        "player_id": 1, "name": "A", "wins": 2, "losses": 1, "net": 1, "total": 3, "position": 1,
    }
    assert data["player_totals"][1] == {"player_id": 2, "name": "B", "total_score": 1}
