"""layerconf - layered configuration with typed keys and live reload.

Values are resolved from, in order of precedence: environment variables,
system properties, the profile properties file, the base properties file
and the ``.env`` file.

```python
from layerconf import get_provider

config = get_provider()
config.base_url_api()      # httpx.URL("https://api.qa.example.com")
config.read_timeout_ms()   # 5000
print(config.dump_masked())
```
"""

from .composite import CompositeConfig
from .core.errors import (
    CircularReferenceError,
    ConfigError,
    ConfigParseError,
    ConfigResolutionError,
    ConfigValidationError,
)
from .core.keys import ConfigKey
from .core.models import LayoutConfigModel
from .provider import ConfigProvider, Snapshot, get_provider, reset_provider, shutdown_provider
from .watcher import FileWatcher

__all__ = [
    "ConfigKey",
    "ConfigProvider",
    "CompositeConfig",
    "FileWatcher",
    "LayoutConfigModel",
    "Snapshot",
    "get_provider",
    "shutdown_provider",
    "reset_provider",
    "ConfigError",
    "ConfigParseError",
    "ConfigValidationError",
    "CircularReferenceError",
    "ConfigResolutionError",
]
