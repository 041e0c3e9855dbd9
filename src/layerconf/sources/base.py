"""
Base class for configuration sources.

A source is one layer of the configuration: the process environment, the
system properties, a properties file or a ``.env`` file. Sources only hand
out raw strings; parsing and validation happen in the provider.
"""

from abc import ABC, abstractmethod


class ConfigSource(ABC):
    """
    Abstract base class for configuration sources.

    ## Implementation Requirements

    - `source_id`: a short identifier used in diagnostics ("env", "base", ...)
    - `get`: return the raw value for a name, or None when the source does
      not define it. Looking up a missing name never raises.

    ## Optional Methods

    - `all_keys`: every name the source defines. Sources that cannot
      enumerate their names return an empty set (the default).

    ## Implementation Example

    ```python
    class DictSource(ConfigSource):
        def __init__(self, values):
            self._values = dict(values)

        @property
        def source_id(self) -> str:
            return "dict"

        def get(self, name: str) -> str | None:
            return self._values.get(name)

        def all_keys(self) -> set[str]:
            return set(self._values)
    ```

    ## Thread Safety

    Sources are built once per snapshot build and only read afterwards.
    Implementations should load everything they need in ``__init__``.
    """

    @property
    @abstractmethod
    def source_id(self) -> str:
        """Return the identifier of this source."""

    @abstractmethod
    def get(self, name: str) -> str | None:
        """Return the raw value for ``name`` or None."""

    def all_keys(self) -> set[str]:
        """Return every name this source defines. Override if enumerable."""
        return set()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.source_id!r})"
