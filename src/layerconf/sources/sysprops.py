"""System properties source."""

from ..core import sysprops
from .base import ConfigSource


class SystemPropertiesSource(ConfigSource):
    """Source backed by :mod:`layerconf.core.sysprops`."""

    @property
    def source_id(self) -> str:
        return "sysprops"

    def get(self, name: str) -> str | None:
        return sysprops.get_property(name)

    def all_keys(self) -> set[str]:
        return sysprops.property_names()
