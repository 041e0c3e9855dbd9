"""Tests for source precedence in CompositeConfig."""

import pytest

from layerconf.composite import CompositeConfig
from layerconf.core import sysprops
from layerconf.core.models import LayoutConfigModel


@pytest.fixture
def layered_files(isolated_config_environment, config_dir, write_properties):
    """Every file layer defining READ_TIMEOUT_MS with a distinct value."""
    write_properties(config_dir / "application.properties", READ_TIMEOUT_MS=4000, BASE_ONLY="base")
    write_properties(config_dir / "application-qa.properties", READ_TIMEOUT_MS=3000, PROFILE_ONLY="profile")
    (isolated_config_environment / ".env").write_text("READ_TIMEOUT_MS=5000\nDOTENV_ONLY=dotenv\n")
    return isolated_config_environment


class TestPrecedence:
    def test_environment_wins(self, layered_files):
        sysprops.set_property("READ_TIMEOUT_MS", "2000")
        config = CompositeConfig("qa", environ={"READ_TIMEOUT_MS": "1000"})
        assert config.lookup("READ_TIMEOUT_MS") == ("1000", "env")

    def test_system_properties_beat_files(self, layered_files):
        sysprops.set_property("READ_TIMEOUT_MS", "2000")
        config = CompositeConfig("qa", environ={})
        assert config.lookup("READ_TIMEOUT_MS") == ("2000", "sysprops")

    def test_profile_file_beats_base_file(self, layered_files):
        config = CompositeConfig("qa", environ={})
        assert config.lookup("READ_TIMEOUT_MS") == ("3000", "profile:qa")

    def test_base_file_beats_dotenv(self, layered_files):
        config = CompositeConfig("dev", environ={})
        assert config.lookup("READ_TIMEOUT_MS") == ("4000", "base")

    def test_dotenv_is_last(self, layered_files):
        (layered_files / "config" / "application.properties").unlink()
        config = CompositeConfig("dev", environ={})
        assert config.lookup("READ_TIMEOUT_MS") == ("5000", ".env")

    def test_absent_everywhere(self, layered_files):
        config = CompositeConfig("qa", environ={})
        assert config.get("NOT_DEFINED") is None
        assert config.lookup("NOT_DEFINED") is None
        assert config.source_for("NOT_DEFINED") is None

    def test_each_layer_contributes_its_own_keys(self, layered_files):
        config = CompositeConfig("qa", environ={})
        assert config.source_for("PROFILE_ONLY").source_id == "profile:qa"
        assert config.source_for("BASE_ONLY").source_id == "base"
        assert config.source_for("DOTENV_ONLY").source_id == ".env"
        assert config.get("DOTENV_ONLY") == "dotenv"

    def test_empty_string_counts_as_present(self, layered_files):
        config = CompositeConfig("qa", environ={"READ_TIMEOUT_MS": ""})
        assert config.lookup("READ_TIMEOUT_MS") == ("", "env")


def test_source_order():
    config = CompositeConfig("local", environ={})
    assert [source.source_id for source in config.sources] == [
        "env",
        "sysprops",
        "profile:local",
        "base",
        ".env",
    ]
    assert config.source_id == "composite"


def test_all_keys_unions_every_source(layered_files):
    sysprops.set_property("sysOnly", "y")
    config = CompositeConfig("qa", environ={"ENV_ONLY": "x"})
    keys = config.all_keys()
    assert {"READ_TIMEOUT_MS", "BASE_ONLY", "PROFILE_ONLY", "DOTENV_ONLY"} <= keys
    assert {"ENV_ONLY", "sysOnly"} <= keys


def test_resolved_paths(layered_files):
    config = CompositeConfig("qa", environ={})
    assert config.profile_filename == "application-qa.properties"
    assert config.base_filename == "application.properties"
    assert config.profile_path == (layered_files / "config" / "application-qa.properties").resolve()
    assert config.base_path == (layered_files / "config" / "application.properties").resolve()
    assert config.dotenv_file == (layered_files / ".env").resolve()
    assert config.watched_files() == [config.profile_path, config.base_path, config.dotenv_file]


def test_missing_files_still_report_paths(isolated_config_environment):
    config = CompositeConfig("stage", environ={})
    assert config.profile_path == (isolated_config_environment / "application-stage.properties").resolve()
    assert config.base_path == (isolated_config_environment / "application.properties").resolve()
    assert len(config.watched_files()) == 3


def test_legacy_naming(config_dir, write_properties):
    write_properties(config_dir / "configuration.properties", RETRIES=1)
    write_properties(config_dir / "configuration-ci.properties", RETRIES=2, HEADLESS="false")

    config = CompositeConfig.with_legacy_naming("ci", environ={})

    assert config.profile_filename == "configuration-ci.properties"
    assert config.base_filename == "configuration.properties"
    assert config.lookup("RETRIES") == ("2", "profile:ci")


def test_custom_layout(isolated_config_environment, write_properties):
    settings = isolated_config_environment / "settings"
    settings.mkdir()
    write_properties(settings / "app.properties", RETRIES=3)
    write_properties(settings / "app-prod.properties", RETRIES=4)
    (isolated_config_environment / "local.env").write_text("HEADLESS=false\n")

    layout = LayoutConfigModel(
        profile_pattern="app-%s.properties",
        base_filename="app.properties",
        dotenv_path="local.env",
        resource_dirs=("settings",),
    )
    config = CompositeConfig("prod", layout, environ={})

    assert config.lookup("RETRIES") == ("4", "profile:prod")
    assert config.get("HEADLESS") == "false"
    assert config.dotenv_path == "local.env"
