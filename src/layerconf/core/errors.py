"""Exception hierarchy for configuration resolution.

ConfigError (base)
├── ConfigParseError (raw text cannot be converted to the key's type)
├── ConfigValidationError (typed value outside its allowed domain)
├── CircularReferenceError (``${...}`` cycle inside a properties file)
└── ConfigResolutionError (snapshot build aborted for a specific key)

Parse and validation errors also derive from ``ValueError`` so callers that
only care about "bad value" can catch the builtin.
"""

__all__ = [
    "ConfigError",
    "ConfigParseError",
    "ConfigValidationError",
    "CircularReferenceError",
    "ConfigResolutionError",
]


class ConfigError(Exception):
    """Base exception for all configuration errors."""


class ConfigParseError(ConfigError, ValueError):
    """Raised when a raw string cannot be parsed into the expected type."""


class ConfigValidationError(ConfigError, ValueError):
    """Raised when a parsed value violates its domain constraints.

    Also used for cross-field checks such as proxy host/port consistency and
    for an invalid active profile.
    """


class CircularReferenceError(ConfigError):
    """Raised when ``${KEY}`` expansion in a properties file loops back on itself.

    Unlike IO failures this is never degraded to an empty source: a cycle is
    an authoring bug and must stop the snapshot build.
    """

    def __init__(self, key: str):
        super().__init__(f"Circular reference detected in property expansion: {key}")
        self.key = key


class ConfigResolutionError(ConfigError):
    """Raised when a key's raw value fails to parse or validate.

    Attributes:
        key: Name of the configuration key being resolved
        raw_value: The raw string found in the source
        source: Identifier of the source that supplied the raw value
    """

    def __init__(self, key: str, raw_value: str, source: str, reason: str):
        super().__init__(f"Invalid value for {key}='{raw_value}' from source {source}: {reason}")
        self.key = key
        self.raw_value = raw_value
        self.source = source
        self.reason = reason
