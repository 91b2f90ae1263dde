"""Configuration file management for the chainstats CLI."""

import os
from pathlib import Path

import yaml

CONFIG_FILENAME = ".chainstats.yaml"
USER_CONFIG_DIR = Path.home() / ".chainstats"
API_KEY_ENV = "BLOCKCHAIR_API_KEY"

VALID_KEYS = {"api_key", "chain", "recent_limit"}


def find_config() -> Path | None:
    """Find config file (project first, then user).

    Returns:
        Path to config file if found, None otherwise.
    """
    project_config = Path(CONFIG_FILENAME)
    if project_config.exists():
        return project_config

    user_config = USER_CONFIG_DIR / "config.yaml"
    if user_config.exists():
        return user_config

    return None


def load_config() -> dict:
    """Load config from file.

    Returns:
        Config dictionary, or empty dict if no config found.
    """
    path = find_config()
    if path is None:
        return {}
    with open(path) as f:
        return yaml.safe_load(f) or {}


def save_config(config: dict, path: Path | None = None) -> Path:
    """Save config to file.

    Args:
        config: Config dictionary to save.
        path: Path to save to. Defaults to project config file.

    Returns:
        Path where config was saved.
    """
    if path is None:
        path = Path(CONFIG_FILENAME)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(config, f, default_flow_style=False)
    return path


def get_default_config() -> dict:
    """Get default configuration values."""
    return {
        "api_key": "",
        "chain": "bitcoin",
        "recent_limit": 5,
    }


def resolve_api_key(explicit: str | None = None, config: dict | None = None) -> str | None:
    """Pick the API key: explicit value, then environment, then config file."""
    if explicit:
        return explicit
    from_env = os.getenv(API_KEY_ENV)
    if from_env:
        return from_env
    if config is None:
        config = load_config()
    return config.get("api_key") or None


def mask_secret(value: str | None) -> str:
    """Hide all but the last four characters of a secret."""
    if not value:
        return "(not set)"
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * (len(value) - 4) + value[-4:]
