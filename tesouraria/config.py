"""Configuration file management for tesouraria."""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w

from tesouraria.domain.denominations import (
    DenominationTable,
    default_table,
    table_from_config,
    table_to_config,
)
from tesouraria.domain.ledger import DEFAULT_EXTRA_DESCRIPTIONS, DEFAULT_TRANSACTION_DESCRIPTION

DEFAULT_CURRENCY_SYMBOL = "R$"


class ConfigError(ValueError):
    """Raised when a configuration value is malformed."""


@dataclass(frozen=True)
class Settings:
    """Immutable settings for a working session."""

    table: DenominationTable
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    transaction_placeholder: str = DEFAULT_TRANSACTION_DESCRIPTION
    extra_descriptions: tuple[str, ...] = DEFAULT_EXTRA_DESCRIPTIONS


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
    return get_xdg_config_home() / "tesouraria" / "config.toml"


def default_config() -> dict[str, Any]:
    """Build the default configuration dictionary."""
    return {
        "currency_symbol": DEFAULT_CURRENCY_SYMBOL,
        "transaction_placeholder": DEFAULT_TRANSACTION_DESCRIPTION,
        "extra_descriptions": list(DEFAULT_EXTRA_DESCRIPTIONS),
        "denominations": table_to_config(default_table()),
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
    """Build validated settings from a configuration dictionary.

    Missing keys fall back to the built-in defaults.

    Raises:
        DenominationConfigError: If the denomination table is malformed.
        ConfigError: If another setting is malformed.
    """
    symbol = str(config.get("currency_symbol", DEFAULT_CURRENCY_SYMBOL))

    if "denominations" in config:
        table = table_from_config(config["denominations"], symbol)
    else:
        table = default_table()

    extra_descriptions = config.get("extra_descriptions", list(DEFAULT_EXTRA_DESCRIPTIONS))
    if not isinstance(extra_descriptions, list) or not all(isinstance(d, str) for d in extra_descriptions):
        raise ConfigError("'extra_descriptions' must be a list of strings")
    if len(extra_descriptions) != len(DEFAULT_EXTRA_DESCRIPTIONS):
        raise ConfigError(
            f"'extra_descriptions' must name exactly {len(DEFAULT_EXTRA_DESCRIPTIONS)} extra entries"
        )

    return Settings(
        table=table,
        currency_symbol=symbol,
        transaction_placeholder=str(config.get("transaction_placeholder", DEFAULT_TRANSACTION_DESCRIPTION)),
        extra_descriptions=tuple(extra_descriptions),
    )


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings, falling back to defaults when the default config file is absent.

    Args:
        config_path: Explicit config file. If given, it must exist.

    Returns:
        Settings for the session.

    Raises:
        FileNotFoundError: If an explicit config file doesn't exist.
        DenominationConfigError: If the denomination table is malformed.
        ConfigError: If another setting is malformed.
    """
    if config_path is None:
        default_path = get_config_path()
        if not default_path.exists():
            return Settings(table=default_table())
        config_path = default_path

    return settings_from_config(load_config(config_path))
