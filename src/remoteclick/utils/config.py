"""Configuration management for remoteclick."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from remoteclick.utils.exceptions import ConfigurationError

_FALSE_VALUES = {"false", "0", "no", "off"}
_TRUE_VALUES = {"true", "1", "yes", "on"}


@dataclass
class AppConfig:
    """Application configuration."""

    headless: bool = True
    nav_timeout: int = 45000  # ms, per navigation attempt
    selector_timeout: int = 20000  # ms
    default_wait: int = 60000  # ms, after the click
    nav_retries: int = 2  # extra attempts after the first
    nav_retry_delay: int = 1000  # ms, doubles per retry
    browser_path: str | None = None
    stealth: bool = True
    artifacts_dir: Path | None = None
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"


class ConfigLoader:
    """Loads configuration from environment variables."""

    @staticmethod
    def load() -> AppConfig:
        """Load configuration from environment.

        Raises:
            ConfigurationError: If a value is present but invalid.
        """
        load_dotenv(find_dotenv(usecwd=True))  # .env in the working directory

        artifacts = os.environ.get("REMOTECLICK_ARTIFACTS_DIR")

        return AppConfig(
            headless=ConfigLoader._get_bool_env("REMOTECLICK_HEADLESS", True),
            nav_timeout=ConfigLoader._get_int_env(
                "REMOTECLICK_NAV_TIMEOUT_MS", 45000
            ),
            selector_timeout=ConfigLoader._get_int_env(
                "REMOTECLICK_SELECTOR_TIMEOUT_MS", 20000
            ),
            default_wait=ConfigLoader._get_int_env(
                "REMOTECLICK_DEFAULT_WAIT_MS", 60000
            ),
            nav_retries=ConfigLoader._get_int_env("REMOTECLICK_NAV_RETRIES", 2),
            nav_retry_delay=ConfigLoader._get_int_env(
                "REMOTECLICK_NAV_RETRY_DELAY_MS", 1000
            ),
            browser_path=os.environ.get("REMOTECLICK_BROWSER_PATH") or None,
            stealth=ConfigLoader._get_bool_env("REMOTECLICK_STEALTH", True),
            artifacts_dir=Path(artifacts) if artifacts else None,
            host=os.environ.get("REMOTECLICK_HOST", "0.0.0.0"),
            port=ConfigLoader._get_int_env("REMOTECLICK_PORT", 3000),
            log_level=os.environ.get("REMOTECLICK_LOG_LEVEL", "INFO").upper(),
        )

    @staticmethod
    def _get_int_env(name: str, default: int) -> int:
        """Get a non-negative integer environment variable.

        Args:
            name: The environment variable name.
            default: The default value if not set.

        Returns:
            The integer value.

        Raises:
            ConfigurationError: If the value is not a valid non-negative integer.
        """
        value = os.environ.get(name)
        if value is None:
            return default
        try:
            parsed = int(value)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid value for {name}: '{value}' is not a valid integer"
            ) from e
        if parsed < 0:
            raise ConfigurationError(
                f"Invalid value for {name}: '{value}' must not be negative"
            )
        return parsed

    @staticmethod
    def _get_bool_env(name: str, default: bool) -> bool:
        """Get a boolean environment variable.

        Raises:
            ConfigurationError: If the value is not a recognised boolean.
        """
        value = os.environ.get(name)
        if value is None:
            return default
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ConfigurationError(
            f"Invalid value for {name}: '{value}' is not a valid boolean"
        )
