"""Configuration provider.

The provider resolves every :class:`ConfigKey` through a
:class:`CompositeConfig` into an immutable :class:`Snapshot` and publishes
it with a single reference swap. Readers never see a half-built snapshot:
a failed build raises to the caller and leaves the previous snapshot live.

## Resolution

For each key the composite is asked for the env-var name first and then
the system-property name; the first source in precedence order that has
either wins. Raw strings are parsed and validated; defaults are used as-is.

## Reload

``reload()`` rebuilds the snapshot, re-points the file watcher at the files
backing the new snapshot and (re)starts it. File changes picked up by the
watcher call ``reload()`` again after the debounce delay, unless the
provider has been shut down in the meantime.

Example:
    >>> provider = ConfigProvider()
    >>> provider.read_timeout_ms()
    5000
    >>> provider.source_of(ConfigKey.READ_TIMEOUT_MS)
    'default'
"""

import logging
import os
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import httpx

from .composite import CompositeConfig
from .core import sysprops
from .core.errors import ConfigResolutionError, ConfigValidationError
from .core.keys import ConfigKey
from .core.masking import mask_if_secret
from .core.models import LayoutConfigModel
from .core.similarity import find_similar_key
from .core.validators import validate_app_env, validate_proxy_config
from .watcher import FileWatcher

logger = logging.getLogger(__name__)

__all__ = [
    "ConfigProvider",
    "Snapshot",
    "DEFAULT_PROFILE",
    "DEFAULT_SOURCE",
    "get_provider",
    "shutdown_provider",
    "reset_provider",
]

DEFAULT_PROFILE = "local"
DEFAULT_SOURCE = "default"


@dataclass(frozen=True)
class Snapshot:
    """Immutable set of resolved values for one profile.

    Attributes:
        profile: Profile the snapshot was built for
        values: Resolved value per key
        origins: Id of the source that supplied each value ("default" for defaults)
    """

    profile: str
    values: Mapping[ConfigKey, Any] = field(default_factory=lambda: MappingProxyType({}))
    origins: Mapping[ConfigKey, str] = field(default_factory=lambda: MappingProxyType({}))

    def __getitem__(self, key: ConfigKey) -> Any:
        return self.values[key]


class ConfigProvider:
    """Thread-safe access to the current configuration snapshot.

    Args:
        layout: File layout for the composite configuration
        watcher: File watcher to drive automatic reloads; None disables watching
        environ: Mapping used instead of ``os.environ``
    """

    def __init__(
        self,
        layout: LayoutConfigModel | None = None,
        watcher: FileWatcher | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self._layout = layout or LayoutConfigModel()
        self._watcher = watcher
        self._environ = environ
        self._lock = threading.RLock()
        self._snapshot: Snapshot | None = None
        self._logged_once = False

        if watcher is not None:
            watcher.set_reload_callback(self._reload_after_file_change)
            watcher.reload_delay_ms = self._layout.reload_delay_ms

    @property
    def layout(self) -> LayoutConfigModel:
        return self._layout

    @property
    def watcher(self) -> FileWatcher | None:
        return self._watcher

    @property
    def snapshot(self) -> Snapshot:
        """The current snapshot, building it on first access."""
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot
        with self._lock:
            if self._snapshot is None:
                self._publish(*self._build_snapshot())
            return self._snapshot

    @property
    def is_initialized(self) -> bool:
        return self._snapshot is not None

    @property
    def profile(self) -> str:
        return self.snapshot.profile

    def get(self, key: ConfigKey) -> Any:
        return self.snapshot[key]

    def source_of(self, key: ConfigKey) -> str:
        """Id of the source that supplied ``key``."""
        return self.snapshot.origins[key]

    def reload(self, reason: str = "Manual reload requested") -> None:
        """Rebuild and publish a new snapshot.

        Raises:
            ConfigError: If the new configuration is invalid; the previous
                snapshot stays in effect
        """
        logger.info(f"Configuration reload triggered: {reason}")
        with self._lock:
            snapshot, config = self._build_snapshot()
            self._logged_once = False
            self._publish(snapshot, config)

    def _reload_after_file_change(self, reason: str) -> None:
        # A timer that fired before shutdown() may still be waiting for the lock
        with self._lock:
            if self._snapshot is None:
                logger.debug(f"Configuration not initialized, ignoring: {reason}")
                return
            self.reload(reason)

    def shutdown(self) -> None:
        """Stop the watcher and drop the snapshot."""
        with self._lock:
            try:
                if self._watcher is not None:
                    self._watcher.stop()
            finally:
                self._snapshot = None
                self._logged_once = False

    def dump_masked(self) -> str:
        """Render every key with secrets masked."""
        snapshot = self.snapshot
        lines = ["Configuration dump:\n"]
        for key in ConfigKey:
            display = mask_if_secret(snapshot.values.get(key), key.secret)
            lines.append(f"  {key.name} = {display}\n")
        return "".join(lines)

    def _publish(self, snapshot: Snapshot, config: CompositeConfig) -> None:
        # Caller holds self._lock
        self._snapshot = snapshot
        self._start_file_watcher(config)
        self._log_configuration_once()

    def _start_file_watcher(self, config: CompositeConfig) -> None:
        if self._watcher is None or not self._layout.watch:
            return
        try:
            self._watcher.replace_watched_files(config.watched_files())
            self._watcher.start()
            logger.debug(
                f"File watcher configured for profile: {config.profile} - watching: "
                f"{config.base_filename}, {config.profile_filename}, {config.dotenv_path}"
            )
        except Exception as e:
            logger.warning(f"Failed to start file watcher: {e} - automatic reload disabled")
            logger.debug("File watcher startup error details", exc_info=True)

    def _log_configuration_once(self) -> None:
        if self._logged_once:
            return
        self._logged_once = True
        logger.info(f"Active configuration profile: {self._snapshot.profile}")
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(self.dump_masked())

    def _build_snapshot(self) -> tuple[Snapshot, CompositeConfig]:
        profile, profile_source = self._resolve_profile()
        logger.info(f"Configuration initialization: building snapshot for profile '{profile}'")

        config = CompositeConfig(profile, self._layout, self._environ)

        values: dict[ConfigKey, Any] = {}
        origins: dict[ConfigKey, str] = {}
        for key in ConfigKey:
            if key is ConfigKey.APP_ENV:
                # Same value that selected the profile file
                value, origin = profile, profile_source
            else:
                value, origin = self._resolve_value(key, config)
            values[key] = value
            origins[key] = origin
            logger.debug(f"Loaded configuration: {key.name}={'***' if key.secret else value}")

        self._detect_unknown_keys(config)
        self._validate_proxy_configuration(values)

        sysprops.set_property(sysprops.ROOT_LOG_LEVEL, values[ConfigKey.LOG_LEVEL])

        snapshot = Snapshot(
            profile=profile,
            values=MappingProxyType(values),
            origins=MappingProxyType(origins),
        )
        return snapshot, config

    def _resolve_profile(self) -> tuple[str, str]:
        """Active profile and the id of the source it came from.

        Blank values count as absent at every step.
        """
        environ = os.environ if self._environ is None else self._environ
        source = "env"
        profile = environ.get(ConfigKey.APP_ENV.env_var)
        if profile is None or not profile.strip():
            logger.debug("APP_ENV not found, checking system property")
            source = "sysprops"
            profile = sysprops.get_property(ConfigKey.APP_ENV.sys_prop)
        else:
            logger.debug(f"Using profile from APP_ENV: {profile}")

        if profile is None or not profile.strip():
            source = DEFAULT_SOURCE
            profile = DEFAULT_PROFILE
            logger.debug(f"Using default value for APP_ENV: {profile}")

        profile = profile.strip().lower()
        try:
            validate_app_env(profile)
        except ConfigValidationError as e:
            logger.error(f"Validation failed for APP_ENV={profile}: {e}")
            raise ConfigValidationError(f"Invalid profile resolution: {e}") from e
        logger.debug(f"Validation: Profile validation passed: {profile}")
        return profile, source

    @staticmethod
    def _resolve_value(key: ConfigKey, config: CompositeConfig) -> tuple[Any, str]:
        found = config.lookup(key.env_var) or config.lookup(key.sys_prop)
        if found is None:
            default = key.default()
            logger.debug(f"Using default value for {key.name}: {'***' if key.secret else default}")
            return default, DEFAULT_SOURCE

        raw_value, source_id = found
        try:
            value = key.convert(raw_value)
        except ValueError as e:
            logger.error(f"Validation failed for {key.name}={raw_value}: {e}")
            raise ConfigResolutionError(key.name, raw_value, source_id, str(e)) from e
        return value, source_id

    @staticmethod
    def _detect_unknown_keys(config: CompositeConfig) -> None:
        known = sorted(ConfigKey.known_names())
        known_set = set(known)
        for source in config.file_sources:
            for source_key in sorted(source.all_keys()):
                if source_key in known_set:
                    continue
                suggestion = find_similar_key(source_key, known)
                if suggestion is not None:
                    logger.warning(
                        f"Unknown configuration key '{source_key}' in {source.source_id} - "
                        f"Did you mean '{suggestion}'?"
                    )
                else:
                    logger.warning(
                        f"Unknown configuration key '{source_key}' in {source.source_id} - "
                        "This key is not recognized and will be ignored"
                    )

    @staticmethod
    def _validate_proxy_configuration(values: Mapping[ConfigKey, Any]) -> None:
        enabled = values[ConfigKey.PROXY_ENABLED]
        host = values[ConfigKey.PROXY_HOST]
        port = values[ConfigKey.PROXY_PORT]
        try:
            validate_proxy_config(enabled, host, port)
        except ConfigValidationError as e:
            logger.error(
                f"Validation failed for PROXY_CONFIG=enabled={enabled}, host={host}, port={port}: {e}"
            )
            raise ConfigValidationError(f"Proxy configuration validation failed: {e}") from e
        logger.debug("Validation: Proxy configuration validation passed")

    # Typed accessors

    def base_url_ui(self) -> httpx.URL:
        return self.get(ConfigKey.BASE_URL_UI)

    def base_url_api(self) -> httpx.URL:
        return self.get(ConfigKey.BASE_URL_API)

    def connect_timeout_ms(self) -> int:
        return self.get(ConfigKey.CONNECT_TIMEOUT_MS)

    def read_timeout_ms(self) -> int:
        return self.get(ConfigKey.READ_TIMEOUT_MS)

    def write_timeout_ms(self) -> int:
        return self.get(ConfigKey.WRITE_TIMEOUT_MS)

    def max_response_time_ms(self) -> int:
        return self.get(ConfigKey.MAX_RESPONSE_TIME_MS)

    def retries(self) -> int:
        return self.get(ConfigKey.RETRIES)

    def retry_backoff_ms(self) -> int:
        return self.get(ConfigKey.RETRY_BACKOFF_MS)

    def headless(self) -> bool:
        return self.get(ConfigKey.HEADLESS)

    def log_level(self) -> str:
        return self.get(ConfigKey.LOG_LEVEL)

    def allure_attach_http(self) -> bool:
        return self.get(ConfigKey.ALLURE_ATTACH_HTTP)

    def proxy_enabled(self) -> bool:
        return self.get(ConfigKey.PROXY_ENABLED)

    def proxy_host(self) -> str:
        return self.get(ConfigKey.PROXY_HOST)

    def proxy_port(self) -> int:
        return self.get(ConfigKey.PROXY_PORT)

    def app_env(self) -> str:
        return self.get(ConfigKey.APP_ENV)

    def basic_auth_user(self) -> str:
        return self.get(ConfigKey.BASIC_AUTH_USER)

    def basic_auth_password(self) -> str:
        return self.get(ConfigKey.BASIC_AUTH_PASSWORD)

    def api_token(self) -> str:
        return self.get(ConfigKey.API_TOKEN)

    def catalogue_service_url(self) -> httpx.URL:
        return self.get(ConfigKey.CATALOGUE_SERVICE_URL)

    def user_service_url(self) -> httpx.URL:
        return self.get(ConfigKey.USER_SERVICE_URL)

    def orders_service_url(self) -> httpx.URL:
        return self.get(ConfigKey.ORDERS_SERVICE_URL)

    def cart_service_url(self) -> httpx.URL:
        return self.get(ConfigKey.CART_SERVICE_URL)

    def payment_service_url(self) -> httpx.URL:
        return self.get(ConfigKey.PAYMENT_SERVICE_URL)

    def shipping_service_url(self) -> httpx.URL:
        return self.get(ConfigKey.SHIPPING_SERVICE_URL)

    def database_url(self) -> str:
        return self.get(ConfigKey.DATABASE_URL)

    def database_user(self) -> str:
        return self.get(ConfigKey.DATABASE_USER)

    def database_password(self) -> str:
        return self.get(ConfigKey.DATABASE_PASSWORD)

    def browser_type(self) -> str:
        return self.get(ConfigKey.BROWSER_TYPE)

    def browser_version(self) -> str:
        return self.get(ConfigKey.BROWSER_VERSION)

    def selenium_grid_url(self) -> str:
        return self.get(ConfigKey.SELENIUM_GRID_URL)

    def test_data_path(self) -> str:
        return self.get(ConfigKey.TEST_DATA_PATH)

    def cleanup_after_tests(self) -> bool:
        return self.get(ConfigKey.CLEANUP_AFTER_TESTS)

    def parallel_execution(self) -> bool:
        return self.get(ConfigKey.PARALLEL_EXECUTION)

    def thread_count(self) -> int:
        return self.get(ConfigKey.THREAD_COUNT)

    def screenshot_on_failure(self) -> bool:
        return self.get(ConfigKey.SCREENSHOT_ON_FAILURE)

    def screenshot_path(self) -> str:
        return self.get(ConfigKey.SCREENSHOT_PATH)


_default_provider: ConfigProvider | None = None
_default_provider_lock = threading.Lock()


def get_provider() -> ConfigProvider:
    """Process-wide provider wired to the process-wide file watcher."""
    global _default_provider
    with _default_provider_lock:
        if _default_provider is None:
            _default_provider = ConfigProvider(watcher=FileWatcher.get_instance())
        return _default_provider


def shutdown_provider() -> None:
    """Shut down the process-wide provider if it exists."""
    with _default_provider_lock:
        provider = _default_provider
    if provider is not None:
        provider.shutdown()


def reset_provider() -> None:
    """Shut down and discard the process-wide provider. Used by tests."""
    global _default_provider
    with _default_provider_lock:
        provider = _default_provider
        _default_provider = None
    if provider is not None:
        provider.shutdown()
