"""
Configuration management module for the itinerary coordinate resolver.

Settings come from the process environment, optionally seeded from a .env
file. Values are read as strings; numeric tunables go through
get_typed_config so a malformed value fails loudly instead of silently
falling back.
"""

import logging
import os
from typing import Any, Callable, Dict, List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Needed by the Google geocoding client and the static map renderer
REQUIRED_KEYS = ["GOOGLE_MAPS_API_KEY"]

# Optional tunables and their defaults
OPTIONAL_KEYS: Dict[str, Any] = {
    "RESOLVER_BATCH_SIZE": 5,
    "RESOLVER_BATCH_DELAY_MS": 200,
    "RESOLVER_VENUE_CACHE_SIZE": 1000,
    "RESOLVER_VENUE_CACHE_TTL_SECONDS": 0,
    "RESOLVER_FALLBACK_LAT": 0.0,
    "RESOLVER_FALLBACK_LNG": 0.0,
    "RESOLVER_GEOCODE_ATTEMPTS": 2,
    "RESOLVER_RETRY_WAIT_SECONDS": 0.5,
    "GEOCODER_RATE_PER_SEC": 10.0,
    "GEOCODER_BURST": 10,
    "GEOCODER_TIMEOUT_SECONDS": 10,
}


class ConfigError(Exception):
    """Raised for missing, empty or malformed configuration."""
    pass


def load_config(env_path: str = ".env") -> bool:
    """
    Seed the environment from a .env file.

    Values in the file override variables already set in the process.

    Args:
        env_path: Path to the .env file (default: ".env")

    Returns:
        True if the file was found and loaded
    """
    if not os.path.exists(env_path):
        logger.warning(
            f"Configuration file {env_path} not found, using system environment variables only"
        )
        return False

    load_dotenv(env_path, override=True)
    overridden = [key for key in OPTIONAL_KEYS if os.getenv(key) is not None]
    logger.info(f"Loaded configuration from {env_path}")
    if overridden:
        logger.debug(f"Resolver tunables set: {', '.join(overridden)}")
    return True


def get_config(key: str, default: Any = None) -> Any:
    """
    Read a raw configuration value.

    Args:
        key: Environment variable key
        default: Value returned when the key is not set

    Returns:
        The string value, or default
    """
    value = os.getenv(key)
    if value is not None:
        return value

    if default is not None:
        logger.warning(f"Configuration key '{key}' not found, using default value: {default}")
    else:
        logger.warning(f"Configuration key '{key}' not found and no default provided")
    return default


def get_typed_config(key: str, default: Any, cast: Callable[[str], Any]) -> Any:
    """
    Get a configuration value converted with ``cast``.

    Missing or blank keys yield ``default`` unchanged.

    Args:
        key: Environment variable key
        default: Value returned when the key is absent
        cast: Conversion applied to the raw string (e.g. int, float)

    Returns:
        Converted configuration value or default

    Raises:
        ConfigError: If the raw value cannot be converted
    """
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default

    try:
        return cast(raw.strip())
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for '{key}': {raw!r} ({e})")


def validate_config(required_keys: Optional[List[str]] = None) -> None:
    """
    Check that required keys are present and non-empty.

    Args:
        required_keys: Keys to check (defaults to REQUIRED_KEYS)

    Raises:
        ConfigError: Listing every missing and every empty key
    """
    keys = REQUIRED_KEYS if required_keys is None else required_keys

    missing_keys = [key for key in keys if os.getenv(key) is None]
    empty_keys = [
        key for key in keys
        if key not in missing_keys and os.getenv(key).strip() == ""
    ]

    if missing_keys or empty_keys:
        error_msg = "Configuration validation failed:"
        if missing_keys:
            error_msg += f" Missing keys: {', '.join(missing_keys)}."
        if empty_keys:
            error_msg += f" Empty keys: {', '.join(empty_keys)}."

        logger.error(error_msg)
        raise ConfigError(error_msg)

    logger.info(f"Configuration validation passed for keys: {', '.join(keys)}")
