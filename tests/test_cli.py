"""Tests for the command-line interface."""

import json

import pytest
from click.testing import CliRunner

from cuekeeper.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def db(tmp_path):
    return str(tmp_path / "cli.sqlite")


def invoke(runner, db, *args, input=None):
    return runner.invoke(cli, ["--db", db, *args], input=input)


def test_start_and_show(runner, db):
    result = invoke(runner, db, "start", "Ann", "Bob", "Cy")
    assert result.exit_code == 0, result.output
    assert "3 players, 3 matchups" in result.output
    assert "[1-2] Ann 0 : 0 Bob" in result.output

    result = invoke(runner, db, "show")
    assert result.exit_code == 0
    assert "Status: PLAYING" in result.output
    assert "3. Cy" in result.output


def test_show_empty(runner, db):
    result = invoke(runner, db, "show")
    assert result.exit_code == 0
    assert "Status: SETUP" in result.output
    assert "No roster yet" in result.output


def test_show_with_unreadable_database(runner, tmp_path):
    db_file = tmp_path / "cli.sqlite"
    db_file.write_bytes(b"garbage" * 200)

    result = invoke(runner, str(db_file), "show")
    assert result.exit_code == 0, result.output
    assert "Status: SETUP" in result.output


def test_start_rejects_single_player(runner, db):
    result = invoke(runner, db, "start", "Solo")
    assert result.exit_code != 0
    assert "between 2 and 8" in result.output


def test_start_twice(runner, db):
    invoke(runner, db, "start", "A", "B")
    result = invoke(runner, db, "start", "C", "D")
    assert result.exit_code != 0
    assert "already in progress" in result.output


def test_score_and_standings(runner, db):
    invoke(runner, db, "start", "Ann", "Bob")

    result = invoke(runner, db, "score", "1-2", "2")
    assert result.exit_code == 0
    assert "P1 0-1 P2" in result.output

    result = invoke(runner, db, "standings")
    assert "Total games: 1" in result.output
    assert "1. Bob - 1W-0L (net +1, 1 played)" in result.output


def test_score_minus_at_zero(runner, db):
    invoke(runner, db, "start", "Ann", "Bob")
    result = invoke(runner, db, "score", "1-2", "1", "--minus")
    assert result.exit_code == 0
    assert "Nothing changed" in result.output


def test_score_unknown_player(runner, db):
    invoke(runner, db, "start", "Ann", "Bob")
    result = invoke(runner, db, "score", "1-2", "99")
    assert "Nothing changed" in result.output


def test_reset_prompts(runner, db):
    invoke(runner, db, "start", "Ann", "Bob")
    invoke(runner, db, "score", "1-2", "1")

    result = invoke(runner, db, "reset", input="n\n")
    assert result.exit_code != 0

    result = invoke(runner, db, "reset", input="y\n")
    assert result.exit_code == 0
    assert "Scores reset" in result.output

    result = invoke(runner, db, "standings")
    assert "Total games: 0" in result.output


def test_end(runner, db):
    invoke(runner, db, "start", "Ann", "Bob")
    invoke(runner, db, "score", "1-2", "1")

    result = invoke(runner, db, "end", "--yes")
    assert result.exit_code == 0
    assert "keep_scores" in result.output

    result = invoke(runner, db, "show")
    assert "Status: SETUP" in result.output
    assert "[1-2] Ann 1 : 0 Bob" in result.output

    result = invoke(runner, db, "end", "--yes")
    assert result.exit_code != 0


def test_export(runner, db, tmp_path):
    invoke(runner, db, "start", "Ann", "Bob")
    out = tmp_path / "session.json"

    result = invoke(runner, db, "export", "--out", str(out))

    assert result.exit_code == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["status"] == "PLAYING"
    assert data["matchups"][0]["id"] == "1-2"


def test_config_file(runner, db, tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("end_match_policy: clear_scores\n", encoding="utf-8")

    runner.invoke(cli, ["--config", str(config), "--db", db, "start", "Ann", "Bob"])
    runner.invoke(cli, ["--config", str(config), "--db", db, "score", "1-2", "1"])
    runner.invoke(cli, ["--config", str(config), "--db", db, "end", "--yes"])

    result = runner.invoke(cli, ["--db", db, "show"])
    assert "[1-2] Ann 0 : 0 Bob" in result.output


def test_bad_config(runner, db, tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("lang: fr\n", encoding="utf-8")

    result = runner.invoke(cli, ["--config", str(config), "--db", db, "show"])
    assert result.exit_code != 0
    assert "Configuration Error" in result.output
