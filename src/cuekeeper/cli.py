"""Command-line interface for cuekeeper."""

import json
import logging

import click

from cuekeeper import __version__


def _open_scoreboard(ctx):
    """Build the scoreboard from the options of the cli group."""
    from cuekeeper.scoreboard import Scoreboard

    return Scoreboard.from_config(ctx.obj["config"])


def _echo_matchups(scoreboard):
    for matchup in scoreboard.matchups:
        p1 = scoreboard.get_player(matchup.player1_id)
        p2 = scoreboard.get_player(matchup.player2_id)
        click.echo(
            f"  [{matchup.id}] {p1.name if p1 else '?'} {matchup.score1} : "
            f"{matchup.score2} {p2.name if p2 else '?'}"
        )


def _echo_standings(scoreboard):
    stats = scoreboard.get_stats()
    click.echo(f"[STATS] Total games: {stats.total_games}")
    for standing in stats.ranking:
        click.echo(
            f"  {standing.position}. {standing.name} - "
            f"{standing.wins}W-{standing.losses}L (net {standing.net:+d}, {standing.total} played)"
        )


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", required=False, help="Path to config YAML file")
@click.option("--db", "db_path", required=False, help="Path to SQLite database (overrides config)")
@click.option("--verbose", "-v", is_flag=True, help="Show log messages")
@click.pass_context
def cli(ctx, config_path: str, db_path: str, verbose: bool):
    """Billiards Scorekeeper - round-robin scoring for 2 to 8 players."""
    from cuekeeper.config_loader import ConfigError, load_and_validate_config

    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_and_validate_config(config_path)
    except ConfigError as e:
        click.echo(f"[ERROR] Configuration Error: {e}", err=True)
        raise click.Abort()

    if db_path:
        config["db_path"] = db_path

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command()
@click.argument("names", nargs=-1)
@click.pass_context
def start(ctx, names: tuple):
    """Start a match with the given player names.

    Blank names ("") get a placeholder. Existing scores are discarded.

    Example:
        cuekeeper start Ann Bob Cy
    """
    from cuekeeper.scoreboard import InvalidTransitionError, RosterError

    scoreboard = _open_scoreboard(ctx)

    try:
        scoreboard.start_match(list(names))
    except InvalidTransitionError:
        click.echo("[ERROR] A match is already in progress. Run 'cuekeeper end' first.", err=True)
        raise click.Abort()
    except RosterError as e:
        click.echo(f"[ERROR] {e}", err=True)
        raise click.Abort()

    click.echo(f"[SUCCESS] Match started: {len(scoreboard.players)} players, {len(scoreboard.matchups)} matchups")
    _echo_matchups(scoreboard)


@cli.command()
@click.pass_context
def show(ctx):
    """Show roster, matchups and status."""
    scoreboard = _open_scoreboard(ctx)

    click.echo(f"[INFO] Status: {scoreboard.status.value}")
    if not scoreboard.players:
        click.echo("[INFO] No roster yet. Run 'cuekeeper start NAME NAME ...'")
        return

    click.echo("[INFO] Players:")
    for player in scoreboard.players:
        click.echo(f"  {player.id}. {player.name}")
    click.echo("[INFO] Matchups:")
    _echo_matchups(scoreboard)


@cli.command()
@click.argument("matchup_id")
@click.argument("player_id", type=int)
@click.option("--minus", is_flag=True, help="Take a rack back instead of adding one")
@click.pass_context
def score(ctx, matchup_id: str, player_id: int, minus: bool):
    """Add (or with --minus remove) one rack for PLAYER_ID in MATCHUP_ID.

    Example:
        cuekeeper score 1-2 1
        cuekeeper score 1-2 1 --minus
    """
    scoreboard = _open_scoreboard(ctx)

    if minus:
        changed = scoreboard.decrement_score(matchup_id, player_id)
    else:
        changed = scoreboard.increment_score(matchup_id, player_id)

    if not changed:
        click.echo(f"[WARNING] Nothing changed for matchup {matchup_id}, player {player_id}")
        return

    matchup = scoreboard.get_matchup(matchup_id)
    click.echo(f"[SUCCESS] {matchup}")


@cli.command()
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def reset(ctx, yes: bool):
    """Reset every matchup score to 0-0."""
    if not yes:
        click.confirm("Reset all scores?", abort=True)

    scoreboard = _open_scoreboard(ctx)
    scoreboard.reset_scores()
    click.echo("[SUCCESS] Scores reset")


@cli.command()
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def end(ctx, yes: bool):
    """End the match and return to setup."""
    from cuekeeper.scoreboard import InvalidTransitionError

    if not yes:
        click.confirm("End the match and return to setup?", abort=True)

    scoreboard = _open_scoreboard(ctx)
    try:
        scoreboard.end_match()
    except InvalidTransitionError:
        click.echo("[ERROR] No match in progress", err=True)
        raise click.Abort()

    click.echo(f"[SUCCESS] Match ended ({scoreboard.end_match_policy.value})")


@cli.command()
@click.pass_context
def standings(ctx):
    """Show the ranking table."""
    scoreboard = _open_scoreboard(ctx)
    _echo_standings(scoreboard)


@cli.command()
@click.option("--out", required=True, help="Output JSON file")
@click.pass_context
def export(ctx, out: str):
    """Export the session in its stored JSON layout."""
    scoreboard = _open_scoreboard(ctx)

    with open(out, "w", encoding="utf-8") as f:
        json.dump(scoreboard.to_dict(), f, ensure_ascii=False, indent=2)

    click.echo(f"[SUCCESS] Exported session to {out}")


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", default=8000, help="Port to bind to")
@click.option("--open-browser", is_flag=True, help="Open the panel in the default browser")
@click.pass_context
def open_panel(ctx, host: str, port: int, open_browser: bool):
    """Launch the web scoreboard.

    Example:
        cuekeeper open-panel
        cuekeeper open-panel --host 0.0.0.0 --port 8080
    """
    import uvicorn

    from cuekeeper.webapp.app import create_app

    app = create_app(_open_scoreboard(ctx), ctx.obj["config"])
    url = f"http://{host}:{port}"

    click.echo(f"[INFO] Starting web panel at {url}")
    click.echo("[INFO] Press CTRL+C to stop")

    if open_browser:
        import threading
        import webbrowser

        threading.Timer(1.5, webbrowser.open, args=(url,)).start()

    try:
        uvicorn.run(app, host=host, port=port, log_level="info")
    except KeyboardInterrupt:
        click.echo("\n[INFO] Shutting down...")


if __name__ == "__main__":
    cli()
