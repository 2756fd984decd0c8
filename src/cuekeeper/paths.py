"""
Path utilities for cuekeeper.
"""

from pathlib import Path


def get_i18n_dir() -> Path:
    """Get the directory holding the strings_*.yaml tables."""
    return Path(__file__).parent / "locales"


def get_templates_dir() -> Path:
    """Get the templates directory path."""
    return Path(__file__).parent / "webapp" / "templates"


def get_static_dir() -> Path:
    """Get the static files directory path."""
    return Path(__file__).parent / "webapp" / "static"


def get_data_dir() -> Path:
    """
    Get the user data directory for storing the database.

    Returns .cuekeeper/ in the current working directory, created on demand.
    """
    data_dir = Path.cwd() / ".cuekeeper"
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_default_db_path() -> Path:
    """Get the default SQLite database path."""
    return get_data_dir() / "cuekeeper.sqlite"
