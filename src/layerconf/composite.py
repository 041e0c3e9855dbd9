"""Composite configuration combining every source in precedence order.

Sources are consulted in a fixed order and the first one defining a name
wins::

    env > sysprops > profile file > base file > .env
"""

import logging
from collections.abc import Mapping
from pathlib import Path

from .core.models import LayoutConfigModel
from .core.resources import normalize_path
from .sources import (
    ConfigSource,
    DotEnvFileSource,
    EnvSource,
    PropertiesFileSource,
    SystemPropertiesSource,
)

logger = logging.getLogger(__name__)

__all__ = ["CompositeConfig"]


class CompositeConfig(ConfigSource):
    """Composite of all configuration layers for one profile.

    Built once per snapshot build; the files are read when it is constructed.

    Args:
        profile: Active profile name, used to format the profile filename
        layout: File layout; defaults to ``application*.properties`` and ``.env``
        environ: Mapping used instead of ``os.environ`` for the env layer

    Example:
        >>> config = CompositeConfig("qa")
        >>> config.get("READ_TIMEOUT_MS")
        '8000'
        >>> config.source_for("READ_TIMEOUT_MS").source_id
        'profile:qa'
    """

    def __init__(
        self,
        profile: str,
        layout: LayoutConfigModel | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self._profile = profile
        self._layout = layout or LayoutConfigModel()

        self._profile_source = PropertiesFileSource(
            self.profile_filename,
            f"profile:{profile}",
            search_dirs=self._layout.resource_dirs,
        )
        self._base_source = PropertiesFileSource(
            self.base_filename,
            "base",
            search_dirs=self._layout.resource_dirs,
        )
        self._dotenv_source = DotEnvFileSource(self._layout.dotenv_path)

        self._sources: tuple[ConfigSource, ...] = (
            EnvSource(environ),
            SystemPropertiesSource(),
            self._profile_source,
            self._base_source,
            self._dotenv_source,
        )
        logger.debug(
            f"Composite config for profile '{profile}': "
            f"{', '.join(source.source_id for source in self._sources)}"
        )

    @classmethod
    def with_legacy_naming(cls, profile: str, environ: Mapping[str, str] | None = None) -> "CompositeConfig":
        """Composite using ``configuration-<profile>.properties`` and ``configuration.properties``."""
        return cls(profile, LayoutConfigModel.legacy(), environ)

    @property
    def source_id(self) -> str:
        return "composite"

    @property
    def profile(self) -> str:
        return self._profile

    @property
    def layout(self) -> LayoutConfigModel:
        return self._layout

    @property
    def sources(self) -> tuple[ConfigSource, ...]:
        """All sources, highest precedence first."""
        return self._sources

    @property
    def file_sources(self) -> tuple[ConfigSource, ...]:
        """The file-backed sources: profile, base and ``.env``."""
        return (self._profile_source, self._base_source, self._dotenv_source)

    @property
    def profile_filename(self) -> str:
        return self._layout.profile_filename(self._profile)

    @property
    def base_filename(self) -> str:
        return self._layout.base_filename

    @property
    def dotenv_path(self) -> str:
        return self._layout.dotenv_path

    @property
    def profile_path(self) -> Path | None:
        return self._profile_source.resolved_path

    @property
    def base_path(self) -> Path | None:
        return self._base_source.resolved_path

    @property
    def dotenv_file(self) -> Path:
        return normalize_path(self._dotenv_source.path)

    def watched_files(self) -> list[Path]:
        """Resolved paths of the files backing this configuration."""
        paths = [self.profile_path, self.base_path, self.dotenv_file]
        return [path for path in paths if path is not None]

    def get(self, name: str) -> str | None:
        for source in self._sources:
            value = source.get(name)
            if value is not None:
                return value
        return None

    def source_for(self, name: str) -> ConfigSource | None:
        """The source that supplies ``name``, for diagnostics."""
        for source in self._sources:
            if source.get(name) is not None:
                return source
        return None

    def lookup(self, name: str) -> tuple[str, str] | None:
        """Value and source id for ``name`` in a single pass."""
        for source in self._sources:
            value = source.get(name)
            if value is not None:
                return value, source.source_id
        return None

    def all_keys(self) -> set[str]:
        keys: set[str] = set()
        for source in self._sources:
            keys |= source.all_keys()
        return keys
