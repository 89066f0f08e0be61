"""Configuration file management for costbook.

Holds the persisted settings: the last used rates URL and the last
successfully fetched rate table (as a JSON string).
"""

import json
import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import tomli_w

from costbook.domain.models import RateTable

logger = logging.getLogger(__name__)

RATES_URL_KEY = "rates_url"
RATES_KEY = "rates"


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "costbook" / "config.toml"


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    save_config({RATES_URL_KEY: ""}, config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary, empty when the file does not exist.
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return {}

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def get_rates_url(config_path: Path | None = None) -> str:
    """Get the last used rates URL, or an empty string."""
    return str(load_config(config_path).get(RATES_URL_KEY) or "")


def save_rates_url(url: str | None, config_path: Path | None = None) -> None:
    """Persist the rates URL."""
    config = load_config(config_path)
    config[RATES_URL_KEY] = (url or "").strip()
    save_config(config, config_path)


def get_saved_rates(config_path: Path | None = None) -> RateTable | None:
    """Get the last fetched rate table.

    Returns:
        Rate table, or None when nothing is saved or the saved value is corrupt.
    """
    try:
        raw = load_config(config_path).get(RATES_KEY)
    except tomllib.TOMLDecodeError as e:
        logger.warning("Config file is not valid TOML: %s", e)
        return None

    if not raw:
        return None

    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Saved rates are not valid JSON, ignoring them")
        return None

    if not isinstance(data, dict):
        return None
    return data


def save_rates(rates: Mapping[str, float], config_path: Path | None = None) -> None:
    """Persist a rate table, replacing the previous one."""
    config = load_config(config_path)
    config[RATES_KEY] = json.dumps(dict(rates))
    save_config(config, config_path)
