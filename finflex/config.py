"""Configuration file management for finflex."""

import logging
import os
import tomllib
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import tomli_w

from finflex.domain.opportunity import OPPORTUNITY_COST_RATE, OPPORTUNITY_COST_YEARS

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "₹"


@dataclass(frozen=True)
class Settings:
    """Immutable user settings read from the config file."""

    currency: str = DEFAULT_CURRENCY
    timezone: str = ""
    opportunity_cost_rate: float = OPPORTUNITY_COST_RATE
    opportunity_cost_years: int = OPPORTUNITY_COST_YEARS


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
    return get_xdg_config_home() / "finflex" / "config.toml"


def default_config() -> dict[str, Any]:
    """Default configuration written by 'finflex init'."""
    return {
        "currency": DEFAULT_CURRENCY,
        "timezone": "",
        "opportunity_cost": {
            "rate": OPPORTUNITY_COST_RATE,
            "years": OPPORTUNITY_COST_YEARS,
        },
    }


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)
    save_config(default_config(), config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    if config_path is None:
        config_path = get_config_path()

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

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def settings_from_config(config: dict[str, Any]) -> Settings:
    """Build Settings from a config dictionary, defaulting missing keys.

    Args:
        config: Configuration dictionary as loaded from TOML.

    Returns:
        Settings instance.

    Raises:
        ValueError: If a value has the wrong type.
    """
    opportunity = config.get("opportunity_cost", {})
    if not isinstance(opportunity, dict):
        raise ValueError("'opportunity_cost' must be a table")

    try:
        rate = float(opportunity.get("rate", OPPORTUNITY_COST_RATE))
        years = int(opportunity.get("years", OPPORTUNITY_COST_YEARS))
    except (TypeError, ValueError) as e:
        raise ValueError(f"'opportunity_cost' rate and years must be numbers: {e}") from e

    return Settings(
        currency=str(config.get("currency", DEFAULT_CURRENCY)),
        timezone=str(config.get("timezone", "")),
        opportunity_cost_rate=rate,
        opportunity_cost_years=years,
    )


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings, falling back to defaults when no config file exists.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Settings instance.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        logger.debug("No config file at %s, using defaults", config_path or get_config_path())
        return Settings()
    return settings_from_config(config)


def resolve_timezone(settings: Settings) -> tzinfo | None:
    """Zone for local calendar math. None means system local time.

    Raises:
        ValueError: If the configured zone name is unknown.
    """
    if not settings.timezone:
        return None
    try:
        return ZoneInfo(settings.timezone)
    except ZoneInfoNotFoundError as e:
        raise ValueError(f"Unknown timezone '{settings.timezone}'") from e
