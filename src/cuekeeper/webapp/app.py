"""FastAPI web panel for the billiards scorekeeper.

The panel is a thin view over one Scoreboard: every route calls a
Scoreboard method and then re-renders the whole page from its state.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel
from starlette.middleware.sessions import SessionMiddleware

from cuekeeper.config_loader import load_and_validate_config
from cuekeeper.i18n import get_string, load_strings
from cuekeeper.paths import get_static_dir, get_templates_dir
from cuekeeper.scoreboard import InvalidTransitionError, RosterError, Scoreboard
from cuekeeper.validation import ValidationError, adjust_player_count, parse_score_delta, placeholder_name
from cuekeeper.webapp.helpers import build_matchup_cards, draft_names

logger = logging.getLogger(__name__)

# Setup templates directory
templates = Jinja2Templates(directory=str(get_templates_dir()))


class ScoreRequest(BaseModel):
    """JSON body for a score tap."""

    player_id: int
    delta: int


def create_app(scoreboard: Optional[Scoreboard] = None, config: Optional[Dict[str, Any]] = None) -> FastAPI:
    """Build the web panel around a scoreboard.

    Args:
        scoreboard: Store to drive; built from config when omitted
        config: Validated config dict; defaults when omitted

    Returns:
        FastAPI application with the scoreboard on app.state
    """
    if config is None:
        config = load_and_validate_config()
    if scoreboard is None:
        scoreboard = Scoreboard.from_config(config)

    app = FastAPI(title="Billiards Scorekeeper")
    app.state.scoreboard = scoreboard
    app.state.config = config

    # Session middleware for flash messages and the draft roster size
    app.add_middleware(SessionMiddleware, secret_key=config["session_secret"])

    static_dir = get_static_dir()
    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    _register_routes(app)
    return app


def get_scoreboard(request: Request) -> Scoreboard:
    """Dependency returning the scoreboard injected into the app."""
    return request.app.state.scoreboard


def flash(request: Request, key: str, flash_type: str = "info", **kwargs) -> None:
    """Queue a translated message for the next rendered page."""
    scoreboard = get_scoreboard(request)
    request.session["flash_message"] = get_string(key, scoreboard.lang, **kwargs)
    request.session["flash_type"] = flash_type


def render_template(request: Request, template_name: str, context: Dict[str, Any]) -> HTMLResponse:
    """
    Render a template with i18n support.

    Adds the translated strings and any pending flash message to the context.
    """
    scoreboard = get_scoreboard(request)
    lang = scoreboard.lang
    try:
        i18n_strings = load_strings(lang)
    except (ValueError, FileNotFoundError):
        i18n_strings = {}

    context["t"] = i18n_strings
    context["lang"] = lang

    flash_message = request.session.pop("flash_message", None)
    if flash_message:
        context["flash_message"] = flash_message
        context["flash_type"] = request.session.pop("flash_type", "info")

    return templates.TemplateResponse(request, template_name, context)


def _draft_player_count(request: Request, scoreboard: Scoreboard) -> int:
    """Roster size shown on the setup screen."""
    default = max(scoreboard.min_players, len(scoreboard.players))
    return adjust_player_count(
        request.session.get("player_count", default), 0,
        scoreboard.min_players, scoreboard.max_players,
    )


def _register_routes(app: FastAPI) -> None:

    # ========================================================================
    # Pages
    # ========================================================================

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request, scoreboard: Scoreboard = Depends(get_scoreboard)):
        """Setup screen while SETUP, scoreboard while PLAYING."""
        if scoreboard.is_playing:
            return render_template(
                request,
                "scoreboard.html",
                {
                    "cards": build_matchup_cards(scoreboard),
                    "stats": scoreboard.get_stats(),
                },
            )

        count = _draft_player_count(request, scoreboard)
        return render_template(
            request,
            "setup.html",
            {
                "player_count": count,
                "names": draft_names(
                    scoreboard, count,
                    lambda n: placeholder_name(n, scoreboard.lang),
                    request.session.get("draft_names"),
                ),
                "min_players": scoreboard.min_players,
                "max_players": scoreboard.max_players,
            },
        )

    # ========================================================================
    # Setup actions
    # ========================================================================

    @app.post("/setup/player-count")
    async def change_player_count(
        request: Request,
        delta: int = Form(...),
        names: List[str] = Form([]),
        scoreboard: Scoreboard = Depends(get_scoreboard),
    ):
        """Add or remove one name slot on the setup screen, keeping typed names."""
        request.session["draft_names"] = names
        current = _draft_player_count(request, scoreboard)
        request.session["player_count"] = adjust_player_count(
            current, delta, scoreboard.min_players, scoreboard.max_players
        )
        return RedirectResponse(url="/", status_code=303)

    @app.post("/start")
    async def start_match(
        request: Request,
        names: List[str] = Form(...),
        scoreboard: Scoreboard = Depends(get_scoreboard),
    ):
        """Commit the roster, generate matchups and show the scoreboard."""
        try:
            scoreboard.start_match(names)
        except InvalidTransitionError:
            flash(request, "flash.already_playing", "error")
        except RosterError:
            flash(
                request, "flash.invalid_roster", "error",
                minimum=scoreboard.min_players, maximum=scoreboard.max_players,
            )
        else:
            request.session["player_count"] = len(scoreboard.players)
            request.session.pop("draft_names", None)
            flash(request, "flash.match_started", "success", count=len(scoreboard.matchups))
        return RedirectResponse(url="/", status_code=303)

    # ========================================================================
    # Scoreboard actions
    # ========================================================================

    @app.post("/matchups/{matchup_id}/score")
    async def score_matchup(
        request: Request,
        matchup_id: str,
        player_id: int = Form(...),
        delta: str = Form(...),
        scoreboard: Scoreboard = Depends(get_scoreboard),
    ):
        """Tap a side to add a rack, tap its minus button to take one back."""
        try:
            step = parse_score_delta(delta)
        except ValidationError as e:
            logger.info("Rejected score tap: %s", e)
            return RedirectResponse(url="/", status_code=303)

        if scoreboard.get_matchup(matchup_id) is None:
            flash(request, "flash.unknown_matchup", "error")
        else:
            scoreboard.adjust_score(matchup_id, player_id, step)
        return RedirectResponse(url=f"/#matchup-{matchup_id}", status_code=303)

    @app.post("/reset")
    async def reset_scores(
        request: Request,
        confirm: str = Form(""),
        scoreboard: Scoreboard = Depends(get_scoreboard),
    ):
        """Zero every matchup (confirmation required)."""
        if confirm != "yes":
            flash(request, "flash.confirm_required", "error")
        else:
            scoreboard.reset_scores()
            flash(request, "flash.scores_reset", "success")
        return RedirectResponse(url="/", status_code=303)

    @app.post("/end")
    async def end_match(
        request: Request,
        confirm: str = Form(""),
        scoreboard: Scoreboard = Depends(get_scoreboard),
    ):
        """Leave the scoreboard and go back to setup (confirmation required)."""
        if confirm != "yes":
            flash(request, "flash.confirm_required", "error")
            return RedirectResponse(url="/", status_code=303)

        try:
            scoreboard.end_match()
        except InvalidTransitionError:
            flash(request, "flash.not_playing", "error")
        else:
            flash(request, "flash.match_ended", "success")
        return RedirectResponse(url="/", status_code=303)

    # ========================================================================
    # JSON API
    # ========================================================================

    @app.get("/api/state")
    async def api_state(scoreboard: Scoreboard = Depends(get_scoreboard)):
        """Session in its persisted layout."""
        return scoreboard.to_dict()

    @app.get("/api/stats")
    async def api_stats(scoreboard: Scoreboard = Depends(get_scoreboard)):
        """Total games, ranking and per-player totals."""
        return scoreboard.get_stats().to_dict()

    @app.post("/api/matchups/{matchup_id}/score")
    async def api_score_matchup(
        matchup_id: str,
        body: ScoreRequest,
        scoreboard: Scoreboard = Depends(get_scoreboard),
    ):
        """Score tap for incremental updates; returns the matchup and fresh stats."""
        try:
            step = parse_score_delta(body.delta)
        except ValidationError as e:
            return JSONResponse({"error": str(e)}, status_code=400)

        changed = scoreboard.adjust_score(matchup_id, body.player_id, step)
        matchup = scoreboard.get_matchup(matchup_id)
        return {
            "changed": changed,
            "matchup": matchup.to_dict() if matchup else None,
            "stats": scoreboard.get_stats().to_dict(),
        }
