"""Registry of every configuration key.

Each :class:`ConfigKey` member carries the environment variable and system
property it is looked up under, a default factory, a parser, a validator
and a ``secret`` flag. The provider iterates the registry generically;
adding a key means adding a member here and an accessor on the provider.
"""

from collections.abc import Callable
from enum import Enum
from typing import Any

import httpx

from . import parsers, validators

__all__ = ["ConfigKey"]

_LOCALHOST = "http://localhost:8080"


def _url(value: str) -> Callable[[], httpx.URL]:
    return lambda: httpx.URL(value)


def _const(value: Any) -> Callable[[], Any]:
    return lambda: value


class ConfigKey(Enum):
    """A configuration key.

    Member values are ``(env_var, sys_prop, default_factory, parser,
    validator, secret)`` tuples; every env var is unique so no two members
    alias each other.
    """

    # Endpoints
    BASE_URL_UI = ("BASE_URL_UI", "baseUrlUi", _url(_LOCALHOST), parsers.to_url, validators.validate_http_url, False)
    BASE_URL_API = ("BASE_URL_API", "baseUrlApi", _url(_LOCALHOST), parsers.to_url, validators.validate_http_url, False)

    # Timeouts
    CONNECT_TIMEOUT_MS = ("CONNECT_TIMEOUT_MS", "connectTimeoutMs", _const(3000), parsers.to_int, validators.int_range(0, 120_000), False)
    READ_TIMEOUT_MS = ("READ_TIMEOUT_MS", "readTimeoutMs", _const(5000), parsers.to_int, validators.int_range(0, 120_000), False)
    WRITE_TIMEOUT_MS = ("WRITE_TIMEOUT_MS", "writeTimeoutMs", _const(5000), parsers.to_int, validators.int_range(0, 120_000), False)
    MAX_RESPONSE_TIME_MS = ("MAX_RESPONSE_TIME_MS", "maxResponseTimeMs", _const(1500), parsers.to_int, validators.int_range(0, 60_000), False)

    # Retries
    RETRIES = ("RETRIES", "retries", _const(2), parsers.to_int, validators.int_range(0, 10), False)
    RETRY_BACKOFF_MS = ("RETRY_BACKOFF_MS", "retryBackoffMs", _const(250), parsers.to_int, validators.int_range(0, 10_000), False)

    # Runtime flags
    HEADLESS = ("HEADLESS", "headless", _const(True), parsers.to_bool, validators.no_validation, False)
    LOG_LEVEL = ("LOG_LEVEL", "logLevel", _const("INFO"), parsers.to_log_level, validators.validate_log_level, False)
    ALLURE_ATTACH_HTTP = ("ALLURE_ATTACH_HTTP", "allureAttachHttp", _const(True), parsers.to_bool, validators.no_validation, False)

    # Proxy
    PROXY_ENABLED = ("PROXY_ENABLED", "proxyEnabled", _const(False), parsers.to_bool, validators.no_validation, False)
    PROXY_HOST = ("PROXY_HOST", "proxyHost", _const(""), parsers.to_str, validators.no_validation, False)
    PROXY_PORT = ("PROXY_PORT", "proxyPort", _const(0), parsers.to_int, validators.int_range(0, 65_535), False)

    # Environment
    APP_ENV = ("APP_ENV", "app.env", _const("local"), parsers.to_app_env, validators.validate_app_env, False)

    # Credentials
    BASIC_AUTH_USER = ("BASIC_AUTH_USER", "basicAuthUser", _const(""), parsers.to_str, validators.no_validation, True)
    BASIC_AUTH_PASSWORD = ("BASIC_AUTH_PASSWORD", "basicAuthPassword", _const(""), parsers.to_str, validators.no_validation, True)
    API_TOKEN = ("API_TOKEN", "apiToken", _const(""), parsers.to_str, validators.no_validation, True)

    # Microservices
    CATALOGUE_SERVICE_URL = ("CATALOGUE_SERVICE_URL", "catalogueServiceUrl", _url(f"{_LOCALHOST}/catalogue"), parsers.to_url, validators.validate_http_url, False)
    USER_SERVICE_URL = ("USER_SERVICE_URL", "userServiceUrl", _url(f"{_LOCALHOST}/customers"), parsers.to_url, validators.validate_http_url, False)
    ORDERS_SERVICE_URL = ("ORDERS_SERVICE_URL", "ordersServiceUrl", _url(f"{_LOCALHOST}/orders"), parsers.to_url, validators.validate_http_url, False)
    CART_SERVICE_URL = ("CART_SERVICE_URL", "cartServiceUrl", _url(f"{_LOCALHOST}/carts"), parsers.to_url, validators.validate_http_url, False)
    PAYMENT_SERVICE_URL = ("PAYMENT_SERVICE_URL", "paymentServiceUrl", _url(f"{_LOCALHOST}/payment"), parsers.to_url, validators.validate_http_url, False)
    SHIPPING_SERVICE_URL = ("SHIPPING_SERVICE_URL", "shippingServiceUrl", _url(f"{_LOCALHOST}/shipping"), parsers.to_url, validators.validate_http_url, False)

    # Database
    DATABASE_URL = ("DATABASE_URL", "databaseUrl", _const("jdbc:mysql://localhost:3306/socksdb"), parsers.to_str, validators.no_validation, False)
    DATABASE_USER = ("DATABASE_USER", "databaseUser", _const("catalogue_user"), parsers.to_str, validators.no_validation, True)
    DATABASE_PASSWORD = ("DATABASE_PASSWORD", "databasePassword", _const("default_password"), parsers.to_str, validators.no_validation, True)

    # Browser
    BROWSER_TYPE = ("BROWSER_TYPE", "browserType", _const("chrome"), parsers.to_str, validators.validate_browser_type, False)
    BROWSER_VERSION = ("BROWSER_VERSION", "browserVersion", _const("latest"), parsers.to_str, validators.no_validation, False)
    SELENIUM_GRID_URL = ("SELENIUM_GRID_URL", "seleniumGridUrl", _const(""), parsers.to_str, validators.no_validation, False)

    # Test execution
    TEST_DATA_PATH = ("TEST_DATA_PATH", "testDataPath", _const("src/test/resources/testdata"), parsers.to_str, validators.no_validation, False)
    CLEANUP_AFTER_TESTS = ("CLEANUP_AFTER_TESTS", "cleanupAfterTests", _const(True), parsers.to_bool, validators.no_validation, False)
    PARALLEL_EXECUTION = ("PARALLEL_EXECUTION", "parallelExecution", _const(False), parsers.to_bool, validators.no_validation, False)
    THREAD_COUNT = ("THREAD_COUNT", "threadCount", _const(1), parsers.to_int, validators.int_range(1, 10), False)
    SCREENSHOT_ON_FAILURE = ("SCREENSHOT_ON_FAILURE", "screenshotOnFailure", _const(True), parsers.to_bool, validators.no_validation, False)
    SCREENSHOT_PATH = ("SCREENSHOT_PATH", "screenshotPath", _const("build/screenshots"), parsers.to_str, validators.no_validation, False)

    def __init__(
        self,
        env_var: str,
        sys_prop: str,
        default_factory: Callable[[], Any],
        parser: Callable[[str], Any],
        validator: Callable[[Any], Any],
        secret: bool,
    ):
        self.env_var = env_var
        self.sys_prop = sys_prop
        self.default_factory = default_factory
        self.parser = parser
        self.validator = validator
        self.secret = secret

    def default(self) -> Any:
        """Fresh default value; defaults skip parsing and validation."""
        return self.default_factory()

    def convert(self, raw: str) -> Any:
        """Parse then validate a raw string."""
        return self.validator(self.parser(raw))

    @classmethod
    def known_names(cls) -> set[str]:
        """Every key name, env var and system property name."""
        names: set[str] = set()
        for key in cls:
            names.update((key.name, key.env_var, key.sys_prop))
        return names
