"""Process-wide system properties.

A small string-to-string registry that plays the role JVM system properties
play for test runners: values set programmatically or from the command line
(``layerconf -D readTimeoutMs=1000``) that sit between environment variables
and configuration files in resolution order.

The registry is also the side channel the provider uses to publish the
resolved log level (``ROOT_LOG_LEVEL``) for the logging setup to pick up.
"""

import threading

__all__ = [
    "get_property",
    "set_property",
    "clear_property",
    "property_names",
    "snapshot_properties",
    "reset_properties",
    "ROOT_LOG_LEVEL",
]

ROOT_LOG_LEVEL = "ROOT_LOG_LEVEL"

_lock = threading.Lock()
_properties: dict[str, str] = {}


def get_property(name: str, default: str | None = None) -> str | None:
    with _lock:
        return _properties.get(name, default)


def set_property(name: str, value: str) -> str | None:
    """Set a property and return its previous value."""
    if not name:
        raise ValueError("Property name must not be empty")
    with _lock:
        previous = _properties.get(name)
        _properties[name] = str(value)
        return previous


def clear_property(name: str) -> str | None:
    """Remove a property and return the value it had."""
    with _lock:
        return _properties.pop(name, None)


def property_names() -> set[str]:
    with _lock:
        return set(_properties)


def snapshot_properties() -> dict[str, str]:
    """Copy of all properties, for diagnostics."""
    with _lock:
        return dict(_properties)


def reset_properties(values: dict[str, str] | None = None) -> None:
    """Replace every property at once. Used by tests to restore state."""
    with _lock:
        _properties.clear()
        if values:
            _properties.update(values)
