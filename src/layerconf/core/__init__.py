"""layerconf core - keys, value conversion and shared utilities.

## Key Modules

### Keys (`layerconf.core.keys`)
- `ConfigKey`: the registry of every configuration key with its env var,
  system property, default, parser, validator and secret flag

### Conversion (`layerconf.core.parsers`, `layerconf.core.validators`)
- Parsers turn raw strings into ints, booleans, URLs, log levels and profiles
- Validators check ranges, URL schemes, log levels, profiles and browsers

### Support
- `layerconf.core.sysprops`: process-wide system properties
- `layerconf.core.masking`: secret masking for display
- `layerconf.core.models` / `layerconf.core.loader`: file layout and its YAML loader
- `layerconf.core.errors`: exception hierarchy

## Quick Example

```python
from layerconf.core import ConfigKey

timeout = ConfigKey.READ_TIMEOUT_MS.convert("1000")  # 1000
ConfigKey.READ_TIMEOUT_MS.convert("-1")  # raises ConfigValidationError
```
"""

from .errors import (
    CircularReferenceError,
    ConfigError,
    ConfigParseError,
    ConfigResolutionError,
    ConfigValidationError,
)
from .keys import ConfigKey
from .masking import mask, mask_if_secret
from .version import PACKAGE_NAME, PACKAGE_VERSION

__all__ = [
    "ConfigKey",
    "ConfigError",
    "ConfigParseError",
    "ConfigValidationError",
    "CircularReferenceError",
    "ConfigResolutionError",
    "mask",
    "mask_if_secret",
    "PACKAGE_NAME",
    "PACKAGE_VERSION",
]
