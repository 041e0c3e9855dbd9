"""Parsers turning raw configuration strings into typed values.

Every parser raises :class:`ConfigParseError` with a message quoting the
offending value. Domain checks (ranges, allowed names, URL scheme) are the
job of :mod:`layerconf.core.validators`.
"""

import httpx

from .errors import ConfigParseError

__all__ = ["to_int", "to_bool", "to_url", "to_log_level", "to_app_env", "to_str"]

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
_FALSE_VALUES = frozenset({"false", "0", "no", "off"})


def _require_text(value: str | None, what: str) -> str:
    if value is None or not value.strip():
        raise ConfigParseError(f"{what} cannot be null or empty")
    return value.strip()


def to_str(value: str) -> str:
    """Identity parser for plain string keys."""
    return value


def to_int(value: str | None) -> int:
    text = _require_text(value, "Integer value")
    # int() would also accept "1_000" and non-ASCII digits
    digits = text[1:] if text[0] in "+-" else text
    if not digits.isascii() or not digits.isdigit():
        raise ConfigParseError(f"Invalid integer value: '{value}'")
    return int(text)


def to_bool(value: str | None) -> bool:
    """Parse a boolean.

    Accepts true/false, 1/0, yes/no, on/off, case-insensitively.
    """
    normalized = _require_text(value, "Boolean value").lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigParseError(
        f"Invalid boolean value: '{value}'. Expected: true/false, 1/0, yes/no, on/off"
    )


def to_url(value: str | None) -> httpx.URL:
    """Parse a URI.

    Only syntax is checked here; absoluteness and scheme are checked by
    :func:`layerconf.core.validators.validate_http_url`.
    """
    text = _require_text(value, "URI value")
    if any(ch.isspace() for ch in text):
        raise ConfigParseError(f"Invalid URI value: '{value}'. Illegal whitespace character")
    try:
        return httpx.URL(text)
    except httpx.InvalidURL as e:
        raise ConfigParseError(f"Invalid URI value: '{value}'. {e}") from e


def to_log_level(value: str | None) -> str:
    return _require_text(value, "Log level").upper()


def to_app_env(value: str | None) -> str:
    return _require_text(value, "App environment").lower()
