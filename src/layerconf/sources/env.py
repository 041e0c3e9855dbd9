"""
Environment variable source.

This module provides the EnvSource class, the highest-precedence layer.
"""

import os
from collections.abc import Mapping

from .base import ConfigSource


class EnvSource(ConfigSource):
    """Source backed by the process environment.

    Reads ``os.environ`` at lookup time unless an explicit mapping is given,
    which tests use to avoid touching the real environment.
    """

    def __init__(self, environ: Mapping[str, str] | None = None):
        self._environ = environ

    @property
    def source_id(self) -> str:
        return "env"

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def get(self, name: str) -> str | None:
        return self.environ.get(name)

    def all_keys(self) -> set[str]:
        return set(self.environ)
