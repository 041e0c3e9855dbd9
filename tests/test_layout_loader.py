"""Tests for the layout model and its YAML loader."""

import os
from unittest import mock

import pytest
from pydantic import ValidationError

from layerconf.core.loader import load_layout_config
from layerconf.core.models import LayoutConfigModel


class TestLayoutModel:
    def test_defaults(self):
        layout = LayoutConfigModel()
        assert layout.profile_pattern == "application-%s.properties"
        assert layout.base_filename == "application.properties"
        assert layout.dotenv_path == ".env"
        assert layout.resource_dirs == ("config", "resources")
        assert layout.watch is True
        assert layout.reload_delay_ms == 100

    def test_profile_filename(self):
        assert LayoutConfigModel().profile_filename("qa") == "application-qa.properties"

    def test_legacy_naming(self):
        layout = LayoutConfigModel.legacy(dotenv_path="config/.env")
        assert layout.profile_filename("dev") == "configuration-dev.properties"
        assert layout.base_filename == "configuration.properties"
        assert layout.dotenv_path == "config/.env"

    @pytest.mark.parametrize("pattern", ["application.properties", "app-%s-%s.properties"])
    def test_pattern_needs_one_placeholder(self, pattern):
        with pytest.raises(ValidationError, match="exactly one"):
            LayoutConfigModel(profile_pattern=pattern)

    def test_blank_names_are_rejected(self):
        with pytest.raises(ValidationError):
            LayoutConfigModel(base_filename="  ")

    def test_negative_delay_is_rejected(self):
        with pytest.raises(ValidationError):
            LayoutConfigModel(reload_delay_ms=-5)

    def test_unknown_fields_are_rejected(self):
        with pytest.raises(ValidationError):
            LayoutConfigModel(profile_dir="config")

    def test_model_is_frozen(self):
        layout = LayoutConfigModel()
        with pytest.raises(ValidationError):
            layout.watch = False


class TestLoader:
    def test_defaults_without_file(self):
        assert load_layout_config() == LayoutConfigModel()

    def test_legacy_defaults_without_file(self):
        assert load_layout_config(legacy=True) == LayoutConfigModel.legacy()

    def test_reads_layerconf_yml_from_working_directory(self, isolated_config_environment):
        (isolated_config_environment / "layerconf.yml").write_text(
            """
layout:
  profile_pattern: "settings-%s.properties"
  resource_dirs: ["settings"]
  reload_delay_ms: 250
"""
        )

        layout = load_layout_config()

        assert layout.profile_pattern == "settings-%s.properties"
        assert layout.resource_dirs == ("settings",)
        assert layout.reload_delay_ms == 250
        assert layout.base_filename == "application.properties"

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.yml"
        path.write_text("layout:\n  watch: false\n")
        assert load_layout_config(path).watch is False

    def test_environment_variable(self, tmp_path):
        path = tmp_path / "from-env.yml"
        path.write_text("layout:\n  dotenv_path: secrets.env\n")
        with mock.patch.dict(os.environ, {"LAYERCONF_LAYOUT": str(path)}):
            assert load_layout_config().dotenv_path == "secrets.env"

    def test_file_overrides_legacy_base(self, tmp_path):
        path = tmp_path / "layout.yml"
        path.write_text("layout:\n  base_filename: shared.properties\n")
        layout = load_layout_config(path, legacy=True)
        assert layout.base_filename == "shared.properties"
        assert layout.profile_pattern == "configuration-%s.properties"

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_layout_config(path) == LayoutConfigModel()

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_layout_config(tmp_path / "missing.yml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yml"
        path.write_text("layout: [unclosed\n")
        with pytest.raises(ValueError, match="Failed to parse YAML"):
            load_layout_config(path)

    def test_invalid_field(self, tmp_path):
        path = tmp_path / "invalid.yml"
        path.write_text("layout:\n  profile_pattern: no-placeholder.properties\n")
        with pytest.raises(ValueError, match="Invalid layout config"):
            load_layout_config(path)

    def test_non_mapping_section(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("layout:\n  - a\n  - b\n")
        with pytest.raises(ValueError, match="must be a mapping"):
            load_layout_config(path)
