"""
Configuration sources.

Each source is one layer of the composite configuration, from highest to
lowest precedence:

- `EnvSource`: process environment
- `SystemPropertiesSource`: :mod:`layerconf.core.sysprops`
- `PropertiesFileSource`: profile and base properties files
- `DotEnvFileSource`: the ``.env`` file
"""

from .base import ConfigSource
from .dotenv import DotEnvFileSource
from .env import EnvSource
from .properties import PropertiesFileSource
from .sysprops import SystemPropertiesSource

__all__ = [
    "ConfigSource",
    "EnvSource",
    "SystemPropertiesSource",
    "PropertiesFileSource",
    "DotEnvFileSource",
]
