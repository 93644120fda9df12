"""Configuration file management for croissant."""

import logging
import os
import tomllib
from collections.abc import Callable
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any

import tomli_w

from croissant.dates import MAX_MONTH_START_DAY, MIN_MONTH_START_DAY
from croissant.domain.models import DEFAULT_CURRENCY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """User settings read by the reporting screens."""

    month_start_day: int = 1
    default_currency: str = DEFAULT_CURRENCY


SettingsListener = Callable[[Settings], None]


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
    return get_xdg_config_home() / "croissant" / "config.toml"


def validate_month_start_day(value: int) -> int:
    """Check that a month start day is within the supported range.

    Args:
        value: Day of month.

    Returns:
        The value, unchanged.

    Raises:
        ValueError: If value is outside 1-28.
    """
    if not MIN_MONTH_START_DAY <= value <= MAX_MONTH_START_DAY:
        raise ValueError(
            f"Month start day must be between {MIN_MONTH_START_DAY} and {MAX_MONTH_START_DAY}, got {value}"
        )
    return value


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    default_config: dict[str, Any] = {"settings": asdict(Settings())}

    with open(config_path, "wb") as f:
        tomli_w.dump(default_config, f)

    os.chmod(config_path, 0o600)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If config file is not valid TOML.
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

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def settings_from_config(config: dict[str, Any]) -> Settings:
    """Build Settings from a configuration dictionary.

    Missing values fall back to defaults. An out-of-range or non-integer
    month start day is clamped into 1-28.

    Args:
        config: Configuration dictionary.

    Returns:
        Settings instance.
    """
    section = config.get("settings", {})
    if not isinstance(section, dict):
        section = {}

    defaults = Settings()

    day = section.get("month_start_day", defaults.month_start_day)
    if not isinstance(day, int) or isinstance(day, bool):
        logger.warning("Ignoring invalid month_start_day %r", day)
        day = defaults.month_start_day
    elif not MIN_MONTH_START_DAY <= day <= MAX_MONTH_START_DAY:
        clamped = max(MIN_MONTH_START_DAY, min(day, MAX_MONTH_START_DAY))
        logger.warning("Clamping month_start_day %d to %d", day, clamped)
        day = clamped

    currency = section.get("default_currency", defaults.default_currency)
    if not isinstance(currency, str) or not currency.strip():
        currency = defaults.default_currency

    return Settings(month_start_day=day, default_currency=currency.strip())


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings, using defaults if the config file doesn't exist.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Settings instance.

    Raises:
        tomllib.TOMLDecodeError: If config file is not valid TOML.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        return Settings()
    return settings_from_config(config)


def save_settings(settings: Settings, config_path: Path | None = None) -> None:
    """Save settings, preserving any other sections in the config file.

    Args:
        settings: Settings to save.
        config_path: Path to config file. If None, uses default location.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        config = {}

    config["settings"] = asdict(settings)
    save_config(config, config_path)


class SettingsStore:
    """Settings holder that persists changes and notifies subscribers.

    Readers call `current` at the moment they need a value; there is no
    locking, so a change made between two reads is simply picked up by the
    second one.
    """

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path = config_path
        self._settings = load_settings(config_path)
        self._listeners: list[SettingsListener] = []

    @property
    def current(self) -> Settings:
        return self._settings

    def subscribe(self, listener: SettingsListener) -> Callable[[], None]:
        """Register a listener called with the new Settings after each change.

        Returns:
            Function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, **changes: Any) -> Settings:
        """Apply, persist, and broadcast settings changes.

        Args:
            **changes: Settings fields to change.

        Returns:
            The new Settings.

        Raises:
            ValueError: If month_start_day is out of range.
            TypeError: If a field name is unknown.
        """
        if "month_start_day" in changes:
            validate_month_start_day(changes["month_start_day"])

        updated = replace(self._settings, **changes)
        if updated == self._settings:
            return updated

        save_settings(updated, self._config_path)
        self._settings = updated
        logger.debug("Settings changed: %s", updated)

        for listener in list(self._listeners):
            listener(updated)
        return updated
