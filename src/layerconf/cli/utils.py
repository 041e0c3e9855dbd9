import json
import logging
import os
import traceback
from pathlib import Path
from typing import Any

import click

from layerconf.core import sysprops
from layerconf.core.loader import load_layout_config
from layerconf.provider import ConfigProvider
from layerconf.watcher import FileWatcher

# Level names used by the configuration that the logging module spells differently
_LEVEL_ALIASES = {"WARN": "WARNING", "TRACE": "DEBUG"}


def get_env_flag(env_var: str, default: bool = False) -> bool:
    """Get a boolean flag from an environment variable.

    Args:
        env_var: Name of the environment variable
        default: Default value if environment variable is not set

    Returns:
        True if the environment variable is set to "1", "true", or "yes" (case insensitive)
        False otherwise
    """
    value = os.environ.get(env_var, "").lower()
    return value in ("1", "true", "yes") if value else default


def to_logging_level(level_name: str) -> int:
    """Map a configured level name (``WARN``, ``TRACE``, ...) onto a logging level."""
    name = level_name.strip().upper()
    name = _LEVEL_ALIASES.get(name, name)
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(debug: bool = False, level_name: str | None = None) -> None:
    """Configure logging for all modules.

    Args:
        debug: Whether to enable debug logging
        level_name: Level to use when not debugging, e.g. the resolved
                    ``ROOT_LOG_LEVEL``; defaults to WARNING
    """
    # Check environment variable if debug flag is not set
    if not debug:
        debug = get_env_flag("LAYERCONF_DEBUG")

    if debug:
        log_level = logging.DEBUG
    elif level_name:
        log_level = to_logging_level(level_name)
    else:
        log_level = logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove any existing handlers to avoid duplicate messages
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(log_level)
    formatter = logging.Formatter("%(levelname)s:%(name)s:%(message)s")
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    for logger_name in logging.root.manager.loggerDict:
        logger = logging.getLogger(logger_name)
        logger.setLevel(log_level)
        logger.propagate = True


def apply_root_log_level(debug: bool = False) -> None:
    """Reconfigure logging with the level published by the last snapshot build."""
    configure_logging(debug, sysprops.get_property(sysprops.ROOT_LOG_LEVEL))


def parse_define(value: str) -> tuple[str, str]:
    """Split a ``key=value`` system property definition."""
    name, sep, prop_value = value.partition("=")
    name = name.strip()
    if not sep or not name:
        raise click.BadParameter(f"expected key=value, got '{value}'")
    return name, prop_value


def build_provider(
    layout_path: Path | None = None, legacy: bool = False, watch: bool = False
) -> ConfigProvider:
    """Create a provider for a CLI command.

    Args:
        layout_path: Explicit layout file
        legacy: Use the legacy ``configuration*.properties`` names
        watch: Attach a file watcher for automatic reloads
    """
    layout = load_layout_config(layout_path, legacy=legacy)
    watcher = None
    if watch:
        watcher = FileWatcher(reload_delay_ms=layout.reload_delay_ms, resource_dirs=layout.resource_dirs)
    return ConfigProvider(layout=layout, watcher=watcher)


def format_error(error: Exception, debug: bool = False) -> dict[str, Any]:
    """Format an error for output.

    Args:
        error: The exception that occurred
        debug: Whether to include debug information

    Returns:
        Dict containing error information
    """
    error_info = {"error": str(error)}

    if debug:
        error_info["traceback"] = traceback.format_exc()
        error_info["type"] = error.__class__.__name__

    return error_info


def output_result(result: Any, json_output: bool = False, debug: bool = False) -> None:
    """Output a result in either JSON or human-readable format.

    Args:
        result: The result to output
        json_output: Whether to output in JSON format
        debug: Whether to include debug information
    """
    if json_output:
        click.echo(json.dumps({"status": "ok", "result": result}, indent=2, default=str))
    elif isinstance(result, list):
        for row in result:
            click.echo(row)
    else:
        click.echo(result)


def output_error(error: Exception, json_output: bool = False, debug: bool = False) -> None:
    """Output an error in either JSON or human-readable format and abort.

    Args:
        error: The exception that occurred
        json_output: Whether to output in JSON format
        debug: Whether to include debug information
    """
    error_info = format_error(error, debug)

    if json_output:
        click.echo(json.dumps({"status": "error", **error_info}, indent=2))
    else:
        click.echo(f"Error: {error_info['error']}", err=True)
        if debug and "traceback" in error_info:
            click.echo("\nTraceback:", err=True)
            click.echo(error_info["traceback"], err=True)

    raise click.Abort()
