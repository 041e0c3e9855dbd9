"""Secret masking for display.

Secrets stay available in clear text through the typed accessors; these
helpers only control how a value is rendered in dumps and log output.
"""

from typing import Any

__all__ = ["mask", "mask_if_secret"]

# Values up to this length are hidden completely
_FULL_MASK_MAX_LENGTH = 5
_FULL_MASK = "***"
_SHOW_FIRST = 2
_SHOW_LAST = 2
_MIN_STARS = 4


def mask(value: Any) -> str:
    """Mask a secret value based on its length.

    - empty or None -> ""
    - 1 to 5 characters -> "***"
    - 6 or more characters -> first 2 and last 2 characters around at least
      four stars: "ab****yz", "ab********yz" for 12 characters

    Args:
        value: Value to mask, converted with ``str()``

    Returns:
        Masked string
    """
    if value is None:
        return ""

    str_value = str(value)
    if not str_value:
        return ""

    length = len(str_value)
    if length <= _FULL_MASK_MAX_LENGTH:
        return _FULL_MASK

    stars = "*" * max(_MIN_STARS, length - _SHOW_FIRST - _SHOW_LAST)
    return f"{str_value[:_SHOW_FIRST]}{stars}{str_value[-_SHOW_LAST:]}"


def mask_if_secret(value: Any, secret: bool) -> str:
    """Mask ``value`` only when ``secret`` is set, otherwise render it as-is."""
    if secret:
        return mask(value)
    return "None" if value is None else str(value)
