"""
``.env`` file source.

This module provides the DotEnvFileSource class, the lowest-precedence layer.
The parser is deliberately minimal: ``KEY=value`` lines, ``#`` comments,
optional matching quotes around the value and no escape sequences.
"""

import logging
import re
from pathlib import Path

from .base import ConfigSource

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class DotEnvFileSource(ConfigSource):
    """Source backed by a ``.env`` file. A missing file is not an error."""

    def __init__(self, path: str | Path = ".env"):
        self._path = Path(path)
        self._values = self._load()

    @property
    def source_id(self) -> str:
        return ".env"

    @property
    def path(self) -> Path:
        return self._path

    def get(self, name: str) -> str | None:
        return self._values.get(name)

    def all_keys(self) -> set[str]:
        return set(self._values)

    def _load(self) -> dict[str, str]:
        values: dict[str, str] = {}

        if not self._path.exists():
            logger.debug(f"DotEnv file not found: {self._path} (this is optional)")
            return values

        try:
            text = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read .env file: {self._path} - {e}")
            return values

        logger.debug(f"Loading .env file: {self._path}")
        for raw_line in text.splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                logger.warning(f"Malformed .env line (missing '='): '{line}' in file: {self._path}")
                continue
            self._parse_line(line, values)

        logger.debug(f"Loaded {len(values)} variables from .env file: {self._path}")
        return values

    def _parse_line(self, line: str, values: dict[str, str]) -> None:
        key, _, value = line.partition("=")
        key = key.strip()
        value = value.strip()

        if not key:
            logger.warning(f"Invalid .env line format (key cannot be empty): '{line}' in file: {self._path}")
            return

        if not _KEY_PATTERN.fullmatch(key):
            logger.warning(
                f"Non-standard key format in .env: '{key}' "
                f"(should match [A-Za-z_][A-Za-z0-9_]*) in file: {self._path}"
            )

        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]

        if key in values:
            logger.warning(
                f"Duplicate key '{key}' in .env file: {self._path} (previous value will be overwritten)"
            )
        values[key] = value
