"""
Global pytest configuration and fixtures.
"""

import logging
import time
from pathlib import Path

import pytest

from layerconf.core import sysprops
from layerconf.core.keys import ConfigKey
from layerconf.provider import reset_provider
from layerconf.watcher import FileWatcher

_LAYERCONF_ENV_VARS = ("LAYERCONF_LAYOUT", "LAYERCONF_DEBUG")


@pytest.fixture(autouse=True)
def isolated_config_environment(tmp_path, monkeypatch):
    """Run every test in an empty working directory with a clean configuration state.

    - Environment variables backing configuration keys are removed
    - System properties are cleared and restored afterwards
    - The process-wide provider and file watcher are discarded
    """
    for key in ConfigKey:
        monkeypatch.delenv(key.env_var, raising=False)
    for name in _LAYERCONF_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    workdir = tmp_path / "workdir"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    saved_properties = sysprops.snapshot_properties()
    sysprops.reset_properties()

    yield workdir

    reset_provider()
    FileWatcher.reset_instance()
    sysprops.reset_properties(saved_properties)


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo logging changes made by the CLI's configure_logging."""
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_root_level = root.level
    saved_levels = {
        name: logger.level
        for name, logger in logging.root.manager.loggerDict.items()
        if isinstance(logger, logging.Logger)
    }

    yield

    for handler in root.handlers[:]:
        if handler not in saved_handlers:
            root.removeHandler(handler)
    for handler in saved_handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(saved_root_level)
    for name, logger in logging.root.manager.loggerDict.items():
        if isinstance(logger, logging.Logger):
            logger.setLevel(saved_levels.get(name, logging.NOTSET))


@pytest.fixture
def config_dir(isolated_config_environment) -> Path:
    """The ``config`` resource directory inside the working directory."""
    path = isolated_config_environment / "config"
    path.mkdir()
    return path


def _write_properties(path: Path, **values: object) -> Path:
    path.write_text("".join(f"{key}={value}\n" for key, value in values.items()), encoding="utf-8")
    return path


def _wait_for(predicate, timeout: float = 5.0, interval: float = 0.02) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def write_properties():
    """Write ``KEY=value`` lines to a properties file."""
    return _write_properties


@pytest.fixture
def wait_for():
    """Poll a predicate until it is true or the timeout expires."""
    return _wait_for
