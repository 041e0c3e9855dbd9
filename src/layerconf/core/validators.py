"""Validators checking typed configuration values against their domain.

Validators return the value they were given so they can be chained after a
parser, and raise :class:`ConfigValidationError` otherwise.
"""

from collections.abc import Callable
from typing import TypeVar

import httpx

from .errors import ConfigValidationError

__all__ = [
    "VALID_LOG_LEVELS",
    "VALID_APP_ENVS",
    "VALID_BROWSER_TYPES",
    "no_validation",
    "int_range",
    "validate_int_range",
    "validate_http_url",
    "validate_log_level",
    "validate_app_env",
    "validate_browser_type",
    "validate_proxy_config",
]

T = TypeVar("T")

VALID_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "WARN", "ERROR")
VALID_APP_ENVS = ("local", "dev", "ci", "qa", "stage", "prod")
VALID_BROWSER_TYPES = ("chrome", "firefox", "edge", "safari", "chromium")


def no_validation(value: T) -> T:
    return value


def validate_int_range(value: int, minimum: int, maximum: int) -> int:
    """Check ``minimum <= value <= maximum``."""
    if value < minimum or value > maximum:
        raise ConfigValidationError(
            f"Value {value} is not in valid range [{minimum}, {maximum}]"
        )
    return value


def int_range(minimum: int, maximum: int) -> Callable[[int], int]:
    """Build a range validator for a key definition."""

    def _validate(value: int) -> int:
        return validate_int_range(value, minimum, maximum)

    return _validate


def validate_http_url(url: httpx.URL) -> httpx.URL:
    """Require an absolute http or https URL."""
    if not url.is_absolute_url:
        raise ConfigValidationError(f"URI must be absolute: {url}")
    if url.scheme not in ("http", "https"):
        raise ConfigValidationError(f"URI must use http or https scheme: {url}")
    return url


def validate_log_level(level: str) -> str:
    if level not in VALID_LOG_LEVELS:
        raise ConfigValidationError(
            f"Invalid log level: '{level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )
    return level


def validate_app_env(app_env: str) -> str:
    if app_env not in VALID_APP_ENVS:
        raise ConfigValidationError(
            f"Invalid app environment: '{app_env}'. Must be one of: {', '.join(VALID_APP_ENVS)}"
        )
    return app_env


def validate_browser_type(browser_type: str) -> str:
    if browser_type.lower() not in VALID_BROWSER_TYPES:
        raise ConfigValidationError(
            f"Invalid browser type '{browser_type}'. "
            f"Valid options: {', '.join(VALID_BROWSER_TYPES)}"
        )
    return browser_type


def validate_proxy_config(proxy_enabled: bool, proxy_host: str, proxy_port: int) -> None:
    """Check that proxy fields agree with each other.

    An enabled proxy needs a non-empty host and a port above 0; a disabled
    proxy must leave the port at 0.
    """
    if proxy_enabled:
        if not proxy_host or not proxy_host.strip():
            raise ConfigValidationError("Proxy host must be non-empty when proxy is enabled")
        if proxy_port <= 0:
            raise ConfigValidationError(
                f"Proxy port must be > 0 when proxy is enabled, got: {proxy_port}"
            )
    elif proxy_port != 0:
        raise ConfigValidationError(
            f"Proxy port should be 0 when proxy is disabled, got: {proxy_port}"
        )
