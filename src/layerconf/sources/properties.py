"""
Properties file source.

This module provides the PropertiesFileSource class which reads a
Java-properties file (parsed with ``jproperties``) and expands ``${KEY}``
references between its own entries.
"""

import logging
import re
from collections.abc import Iterable
from pathlib import Path
from urllib.parse import unquote, urlparse

import httpx
from jproperties import Properties, PropertyError

from ..core.errors import CircularReferenceError
from ..core.resources import find_resource, looks_like_url, normalize_path
from .base import ConfigSource

logger = logging.getLogger(__name__)

_FETCH_TIMEOUT_SECONDS = 10.0


class PropertiesFileSource(ConfigSource):
    """Source backed by one properties file.

    The file is located by, in order: an explicit ``path``, an explicit
    ``url``, then ``location`` looked up in ``search_dirs``, parsed as a
    ``file:``/``http:``/``https:`` URL, and finally taken as a plain path.

    A missing file gives an empty source (logged as a warning since the file
    may be optional). A file that exists but cannot be read or parsed also
    gives an empty source, logged as an error. A ``${...}`` cycle raises
    :class:`CircularReferenceError`.

    Example:
        >>> source = PropertiesFileSource("application.properties", "base",
        ...                               search_dirs=["config"])
        >>> source.get("BASE_URL_UI")
        'https://staging.example.com'
    """

    VARIABLE_PATTERN = re.compile(r"\$\{([^}]+)\}")

    def __init__(
        self,
        location: str | None = None,
        source_id: str = "properties",
        *,
        path: str | Path | None = None,
        url: str | None = None,
        search_dirs: Iterable[str | Path] = (),
    ):
        self._source_id = source_id
        self._resolved_path: Path | None = None
        raw = self._load(location, path, url, tuple(search_dirs))
        self._properties = self._expand_variables(raw)

    @property
    def source_id(self) -> str:
        return self._source_id

    @property
    def resolved_path(self) -> Path | None:
        """Absolute path of the backing file, even if it does not exist.

        None when the file came from a non-file URL or no location was given.
        """
        return self._resolved_path

    def get(self, name: str) -> str | None:
        return self._properties.get(name)

    def all_keys(self) -> set[str]:
        return set(self._properties)

    def _load(
        self,
        location: str | None,
        path: str | Path | None,
        url: str | None,
        search_dirs: tuple[str | Path, ...],
    ) -> dict[str, str]:
        if path is not None:
            return self._load_path(Path(path))

        if url is not None:
            return self._load_url(url)

        if location is None:
            return {}

        resource = find_resource(location, search_dirs)
        if resource is not None:
            return self._load_path(resource)

        if looks_like_url(location):
            return self._load_url(location)

        return self._load_path(Path(location))

    def _load_url(self, url: str) -> dict[str, str]:
        parsed = urlparse(url)
        scheme = parsed.scheme.lower()

        if scheme == "file":
            return self._load_path(Path(unquote(parsed.path)))

        if scheme in ("http", "https"):
            try:
                response = httpx.get(url, timeout=_FETCH_TIMEOUT_SECONDS, follow_redirects=True)
                response.raise_for_status()
            except httpx.HTTPError as e:
                logger.error(f"Failed to read properties file: {url} - {e}")
                return {}
            return self._parse(response.content, url)

        logger.warning(f"Unsupported properties URL scheme '{parsed.scheme}': {url}")
        return {}

    def _load_path(self, path: Path) -> dict[str, str]:
        normalized = normalize_path(path)
        self._resolved_path = normalized

        if not normalized.exists():
            logger.warning(f"Properties file not found: {normalized} (this may be optional)")
            return {}

        try:
            data = normalized.read_bytes()
        except OSError as e:
            logger.error(f"Failed to read properties file: {normalized} - {e}")
            return {}
        return self._parse(data, normalized)

    def _parse(self, data: bytes, origin: object) -> dict[str, str]:
        props = Properties()
        try:
            props.load(data, "utf-8")
        except (PropertyError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read properties file: {origin} - {e}")
            return {}

        values = dict(props.properties)
        logger.debug(
            f"Successfully loaded properties file: {origin} with {len(values)} properties"
        )
        return values

    def _expand_variables(self, raw: dict[str, str]) -> dict[str, str]:
        expanded: dict[str, str] = {}
        processing: set[str] = set()

        def expand(key: str, value: str) -> str:
            if key in processing:
                raise CircularReferenceError(key)
            processing.add(key)
            try:

                def replace(match: re.Match[str]) -> str:
                    var_name = match.group(1)
                    if var_name in expanded:
                        return expanded[var_name]
                    if var_name not in raw:
                        # Unknown variables stay as written
                        return match.group(0)
                    replacement = expand(var_name, raw[var_name])
                    expanded[var_name] = replacement
                    return replacement

                return self.VARIABLE_PATTERN.sub(replace, value)
            finally:
                processing.discard(key)

        for key, value in raw.items():
            if key not in expanded:
                expanded[key] = expand(key, value)
        return expanded
