"""
Configuration Module for the Mastodon toot action.

This module provides configuration loading for the action. Credentials come
from the process environment (or Docker secrets), while optional tuning such
as the request timeout and maximum post length is loaded from
mastodon-toot.yml.

Usage:
    >>> from config import load_config, Configuration
    >>> settings = load_config()
    >>> settings["mastodon"]["max_post_length"]
    500
"""
import os
import yaml
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


logger = logging.getLogger(__name__)
DEFAULT_TIMEZONE = "UTC"
CONFIG_FILENAME = "mastodon-toot.yml"
CONFIG_PATH_ENV = "MASTODON_TOOT_CONFIG"

DEFAULT_REQUEST_TIMEOUT = 30  # seconds
DEFAULT_MAX_POST_LENGTH = 500


@dataclass(frozen=True)
class Configuration:
    """Connection settings for a single run.

    Built once at start-up from the environment and passed explicitly
    to the publisher.

    Attributes:
        instance_url: Base URL of the Mastodon instance
        access_token: Bearer token for the account
        request_timeout: Client-side timeout applied to every request, in seconds
    """
    instance_url: str
    access_token: str
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def __repr__(self) -> str:
        return (
            f"Configuration(instance_url={self.instance_url!r}, "
            f"access_token='***', request_timeout={self.request_timeout!r})"
        )


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load settings from mastodon-toot.yml.

    Args:
        config_path: Path to the settings file. If None, the MASTODON_TOOT_CONFIG
                    environment variable is used, then the current directory
                    and its parents are searched.

    Returns:
        Dictionary containing configuration settings, merged over the defaults

    Example:
        >>> config = load_config()
        >>> timeout = config["mastodon"]["request_timeout"]
    """
    if config_path is None:
        config_path = os.environ.get(CONFIG_PATH_ENV) or None

    if config_path is None:
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            candidate = parent / CONFIG_FILENAME
            if candidate.exists():
                config_path = str(candidate)
                break

    if config_path is None:
        logger.debug(f"{CONFIG_FILENAME} not found, using default configuration")
        return get_default_config()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except FileNotFoundError:
        logger.warning(f"Configuration file not found: {config_path}")
        return get_default_config()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading configuration file {config_path}: {e}")
        return get_default_config()
    except yaml.YAMLError as e:
        logger.error(f"Error parsing configuration file: {e}")
        return get_default_config()

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        logger.warning("Configuration root must be a mapping, using default configuration")
        return get_default_config()

    config = get_default_config()
    mastodon_config = loaded.pop("mastodon", None) or {}
    if not isinstance(mastodon_config, dict):
        logger.warning("'mastodon' section must be a mapping, ignoring it")
        mastodon_config = {}
    config.update(loaded)
    config["mastodon"].update(mastodon_config)

    # Validate at load time to keep behavior consistent everywhere.
    config["timezone"] = get_timezone_name(config)
    _validate_mastodon_settings(config["mastodon"])
    logger.info(f"Loaded configuration from {config_path}")
    return config


def _validate_mastodon_settings(mastodon_config: Dict[str, Any]) -> None:
    """Replace out-of-range mastodon settings with their defaults, in place."""
    defaults = get_default_config()["mastodon"]

    timeout = mastodon_config.get("request_timeout")
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or not timeout > 0:
        logger.warning(
            f"Invalid mastodon.request_timeout {timeout!r}; falling back to {defaults['request_timeout']}"
        )
        mastodon_config["request_timeout"] = defaults["request_timeout"]

    max_length = mastodon_config.get("max_post_length")
    if isinstance(max_length, bool) or not isinstance(max_length, int) or max_length < 1:
        logger.warning(
            f"Invalid mastodon.max_post_length {max_length!r}; falling back to {defaults['max_post_length']}"
        )
        mastodon_config["max_post_length"] = defaults["max_post_length"]

    if not isinstance(mastodon_config.get("truncate"), bool):
        logger.warning(
            f"Invalid mastodon.truncate {mastodon_config.get('truncate')!r}; falling back to {defaults['truncate']}"
        )
        mastodon_config["truncate"] = defaults["truncate"]


def get_default_config() -> Dict[str, Any]:
    """Return default configuration when mastodon-toot.yml is not available.

    Returns:
        Dictionary with default configuration values
    """
    return {
        "timezone": DEFAULT_TIMEZONE,
        "mastodon": {
            "request_timeout": DEFAULT_REQUEST_TIMEOUT,
            "max_post_length": DEFAULT_MAX_POST_LENGTH,
            "truncate": True
        }
    }


def get_timezone_name(config: Dict[str, Any]) -> str:
    """Return a validated timezone name from config, with UTC fallback."""
    tz_name = config.get("timezone", DEFAULT_TIMEZONE)
    if not isinstance(tz_name, str) or not tz_name.strip():
        logger.warning(f"Invalid timezone configuration {tz_name!r}; falling back to {DEFAULT_TIMEZONE}")
        return DEFAULT_TIMEZONE

    tz_name = tz_name.strip()
    try:
        ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone '{tz_name}'; falling back to {DEFAULT_TIMEZONE}")
        return DEFAULT_TIMEZONE

    return tz_name


def get_timezone(config: Dict[str, Any]) -> ZoneInfo:
    """Return a validated ZoneInfo instance from config."""
    return ZoneInfo(get_timezone_name(config))


def read_secret_file(filepath: str) -> Optional[str]:
    """Read a Docker secret from a file.

    Docker secrets are mounted as files in /run/secrets/ directory.
    This function reads the content of the secret file.

    Args:
        filepath: Path to the secret file

    Returns:
        Content of the secret file (stripped of whitespace), or None if file doesn't exist

    Example:
        >>> token = read_secret_file("/run/secrets/mastodon_access_token")
    """
    try:
        with open(filepath, "r") as f:
            return f.read().strip()
    except FileNotFoundError:
        logger.debug(f"Secret file not found: {filepath}")
        return None
    except OSError as e:
        logger.error(f"Error reading secret file {filepath}: {e}")
        return None


__all__ = [
    "Configuration",
    "DEFAULT_MAX_POST_LENGTH",
    "DEFAULT_REQUEST_TIMEOUT",
    "get_default_config",
    "get_timezone",
    "get_timezone_name",
    "read_secret_file",
    "load_config",
]
