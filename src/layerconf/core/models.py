"""Pydantic models for the file layout the resolver reads.

The layout says which files back the profile and base layers, where the
``.env`` file lives and which directories act as the resource search path.
It can be loaded from a ``layerconf.yml`` file:

```yaml
layout:
  profile_pattern: "application-%s.properties"
  base_filename: "application.properties"
  dotenv_path: ".env"
  resource_dirs: ["config", "resources"]
  watch: true
  reload_delay_ms: 100
```
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "LayerconfBaseModel",
    "LayoutConfigModel",
    "DEFAULT_PROFILE_PATTERN",
    "DEFAULT_BASE_FILENAME",
    "LEGACY_PROFILE_PATTERN",
    "LEGACY_BASE_FILENAME",
    "DEFAULT_DOTENV_PATH",
]

DEFAULT_PROFILE_PATTERN = "application-%s.properties"
DEFAULT_BASE_FILENAME = "application.properties"

# Older projects used configuration*.properties
LEGACY_PROFILE_PATTERN = "configuration-%s.properties"
LEGACY_BASE_FILENAME = "configuration.properties"

DEFAULT_DOTENV_PATH = ".env"


class LayerconfBaseModel(BaseModel):
    """Base model for all layerconf Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable for thread safety
    """

    model_config = ConfigDict(extra="forbid", frozen=True)


class LayoutConfigModel(LayerconfBaseModel):
    """File layout for a composite configuration.

    Attributes:
        profile_pattern: Pattern for the profile file; ``%s`` is replaced by the profile name
        base_filename: Name of the base properties file
        dotenv_path: Path of the ``.env`` file
        resource_dirs: Directories searched (in order) when locating properties files by name
        watch: Whether the provider watches the resolved files and reloads on change
        reload_delay_ms: Debounce window for file-triggered reloads

    Example:
        >>> layout = LayoutConfigModel(profile_pattern="app-%s.properties")
        >>> layout.profile_filename("qa")
        'app-qa.properties'
    """

    profile_pattern: str = DEFAULT_PROFILE_PATTERN
    base_filename: str = DEFAULT_BASE_FILENAME
    dotenv_path: str = DEFAULT_DOTENV_PATH
    resource_dirs: tuple[str, ...] = ("config", "resources")
    watch: bool = True
    reload_delay_ms: int = Field(default=100, ge=0)

    @field_validator("profile_pattern")
    @classmethod
    def _check_profile_pattern(cls, value: str) -> str:
        if value.count("%s") != 1:
            raise ValueError(
                f"profile_pattern must contain exactly one '%s' placeholder, got '{value}'"
            )
        return value

    @field_validator("base_filename", "dotenv_path")
    @classmethod
    def _check_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("file names must not be blank")
        return value

    @classmethod
    def legacy(cls, **overrides: object) -> "LayoutConfigModel":
        """Layout using the legacy ``configuration*.properties`` names."""
        values: dict[str, object] = {
            "profile_pattern": LEGACY_PROFILE_PATTERN,
            "base_filename": LEGACY_BASE_FILENAME,
        }
        values.update(overrides)
        return cls.model_validate(values)

    def profile_filename(self, profile: str) -> str:
        return self.profile_pattern.replace("%s", profile)
