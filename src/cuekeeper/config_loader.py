"""Configuration loader and validator."""

from pathlib import Path
from typing import Any, Optional

import yaml

from cuekeeper.i18n import SUPPORTED_LANGUAGES, get_language_from_env
from cuekeeper.models import EndMatchPolicy
from cuekeeper.validation import MAX_PLAYERS, MIN_PLAYERS


class ConfigError(Exception):
    """Configuration validation error."""

    pass


def load_config(path: str) -> dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML config file

    Returns:
        Dictionary with configuration values

    Raises:
        ConfigError: If file not found or invalid YAML
    """
    config_file = Path(path)

    if not config_file.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}")

    if config is None:
        raise ConfigError("Config file is empty")

    if not isinstance(config, dict):
        raise ConfigError("Config file must contain a mapping")

    return config


def validate_config(config: dict[str, Any]) -> dict[str, Any]:
    """Validate configuration values.

    Every key is optional; missing keys get their defaults.

    Args:
        config: Configuration dictionary

    Returns:
        Validated and normalized configuration

    Raises:
        ConfigError: If validation fails
    """
    validated = {}

    # Database path (optional, default .cuekeeper/cuekeeper.sqlite in cwd)
    db_path = config.get("db_path")
    if db_path is not None and not isinstance(db_path, str):
        raise ConfigError("db_path must be a string")
    validated["db_path"] = db_path

    # Storage slot name
    storage_key = config.get("storage_key", "billiards_score_data")
    if not isinstance(storage_key, str) or not storage_key.strip():
        raise ConfigError("storage_key must be a non-empty string")
    validated["storage_key"] = storage_key

    # Language (optional, falls back to CUEKEEPER_LANG)
    lang = config.get("lang", get_language_from_env())
    if lang not in SUPPORTED_LANGUAGES:
        raise ConfigError(f"lang must be one of {SUPPORTED_LANGUAGES}, got '{lang}'")
    validated["lang"] = lang

    # What end-match does with scores
    policy = config.get("end_match_policy", EndMatchPolicy.KEEP_SCORES.value)
    try:
        validated["end_match_policy"] = EndMatchPolicy(policy)
    except ValueError:
        choices = [p.value for p in EndMatchPolicy]
        raise ConfigError(f"end_match_policy must be one of {choices}, got '{policy}'")

    # Roster bounds
    min_players = config.get("min_players", MIN_PLAYERS)
    max_players = config.get("max_players", MAX_PLAYERS)
    for name, value in (("min_players", min_players), ("max_players", max_players)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{name} must be an integer")
    if not (MIN_PLAYERS <= min_players <= max_players <= MAX_PLAYERS):
        raise ConfigError(
            f"Roster bounds must satisfy {MIN_PLAYERS} <= min_players <= max_players <= {MAX_PLAYERS}, "
            f"got {min_players}..{max_players}"
        )
    validated["min_players"] = min_players
    validated["max_players"] = max_players

    # Cookie signing key for the web panel session
    secret = config.get("session_secret", "cuekeeper-local-session")
    if not isinstance(secret, str) or not secret:
        raise ConfigError("session_secret must be a non-empty string")
    validated["session_secret"] = secret

    return validated


def load_and_validate_config(path: Optional[str] = None) -> dict[str, Any]:
    """Load and validate configuration in one step.

    Args:
        path: Path to YAML config file, or None for defaults only

    Returns:
        Validated configuration dictionary

    Raises:
        ConfigError: If loading or validation fails
    """
    if path is None:
        return validate_config({})
    config = load_config(path)
    return validate_config(config)
