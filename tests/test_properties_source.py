"""Tests for the properties file source."""

import logging
from unittest import mock

import httpx
import pytest

from layerconf.core.errors import CircularReferenceError
from layerconf.sources import PropertiesFileSource


class TestLocating:
    def test_explicit_path(self, tmp_path, write_properties):
        path = write_properties(tmp_path / "custom.properties", RETRIES=3)
        source = PropertiesFileSource(path=path, source_id="custom")
        assert source.get("RETRIES") == "3"
        assert source.source_id == "custom"
        assert source.resolved_path == path.resolve()

    def test_resource_lookup_uses_first_directory_with_file(self, tmp_path, write_properties):
        first = tmp_path / "first"
        second = tmp_path / "second"
        first.mkdir()
        second.mkdir()
        write_properties(second / "application.properties", RETRIES=2)

        source = PropertiesFileSource("application.properties", "base", search_dirs=[first, second])

        assert source.get("RETRIES") == "2"
        assert source.resolved_path == (second / "application.properties").resolve()

        write_properties(first / "application.properties", RETRIES=1)
        source = PropertiesFileSource("application.properties", "base", search_dirs=[first, second])
        assert source.get("RETRIES") == "1"

    def test_resource_dirs_are_relative_to_working_directory(self, config_dir, write_properties):
        write_properties(config_dir / "application.properties", HEADLESS="false")
        source = PropertiesFileSource("application.properties", "base", search_dirs=["config"])
        assert source.get("HEADLESS") == "false"

    def test_plain_path_fallback(self, isolated_config_environment, write_properties):
        write_properties(isolated_config_environment / "app.properties", RETRIES=5)
        source = PropertiesFileSource("app.properties", "base", search_dirs=["config"])
        assert source.get("RETRIES") == "5"

    def test_file_url(self, tmp_path, write_properties):
        path = write_properties(tmp_path / "remote.properties", RETRIES=6)
        source = PropertiesFileSource(url=path.resolve().as_uri())
        assert source.get("RETRIES") == "6"
        assert source.resolved_path == path.resolve()

    def test_file_url_as_location(self, tmp_path, write_properties):
        path = write_properties(tmp_path / "located.properties", RETRIES=7)
        source = PropertiesFileSource(path.resolve().as_uri(), "base")
        assert source.get("RETRIES") == "7"

    def test_missing_file_is_empty_with_warning(self, isolated_config_environment, caplog):
        with caplog.at_level(logging.WARNING, logger="layerconf"):
            source = PropertiesFileSource("application-qa.properties", "profile:qa", search_dirs=["config"])

        assert source.all_keys() == set()
        assert source.resolved_path == (isolated_config_environment / "application-qa.properties").resolve()
        assert "Properties file not found" in caplog.text
        assert "this may be optional" in caplog.text

    def test_no_location_is_empty(self):
        source = PropertiesFileSource()
        assert source.all_keys() == set()
        assert source.resolved_path is None


class TestHttpLocations:
    def test_http_url_is_fetched(self):
        response = mock.Mock()
        response.content = b"RETRIES=8\nAPI_TOKEN=from-server\n"
        with mock.patch("layerconf.sources.properties.httpx.get", return_value=response) as get:
            source = PropertiesFileSource("https://config.example.com/app.properties", "remote")

        get.assert_called_once()
        assert get.call_args.args[0] == "https://config.example.com/app.properties"
        assert source.get("RETRIES") == "8"
        assert source.get("API_TOKEN") == "from-server"
        assert source.resolved_path is None

    def test_http_failure_is_empty(self, caplog):
        with mock.patch(
            "layerconf.sources.properties.httpx.get", side_effect=httpx.ConnectError("refused")
        ):
            with caplog.at_level(logging.ERROR, logger="layerconf"):
                source = PropertiesFileSource(url="http://config.invalid/app.properties")

        assert source.all_keys() == set()
        assert "Failed to read properties file" in caplog.text


class TestParsing:
    def test_java_properties_syntax(self, tmp_path):
        path = tmp_path / "syntax.properties"
        path.write_text(
            "# comment\n"
            "! another comment\n"
            "COLON_KEY: colon value\n"
            "SPACE_KEY space value\n"
            "CONTINUED = first \\\n"
            "    second\n"
            "UNICODE=caf\\u00e9\n",
            encoding="utf-8",
        )

        source = PropertiesFileSource(path=path)

        assert source.get("COLON_KEY") == "colon value"
        assert source.get("SPACE_KEY") == "space value"
        assert source.get("CONTINUED") == "first second"
        assert source.get("UNICODE") == "café"
        assert source.all_keys() == {"COLON_KEY", "SPACE_KEY", "CONTINUED", "UNICODE"}

    def test_undecodable_file_is_empty_with_error(self, tmp_path, caplog):
        path = tmp_path / "broken.properties"
        path.write_bytes(b"KEY=\xff\xfe\xfa\n")

        with caplog.at_level(logging.ERROR, logger="layerconf"):
            source = PropertiesFileSource(path=path)

        assert source.all_keys() == set()
        assert "Failed to read properties file" in caplog.text


class TestVariableExpansion:
    def test_references_are_expanded(self, tmp_path):
        path = tmp_path / "vars.properties"
        path.write_text(
            "HOST=example.com\n"
            "BASE_URL_API=https://${HOST}/api\n"
            "CATALOGUE_SERVICE_URL=${BASE_URL_API}/catalogue\n"
        )

        source = PropertiesFileSource(path=path)

        assert source.get("BASE_URL_API") == "https://example.com/api"
        assert source.get("CATALOGUE_SERVICE_URL") == "https://example.com/api/catalogue"

    def test_forward_references_are_expanded(self, tmp_path):
        path = tmp_path / "vars.properties"
        path.write_text("A=${B}-a\nB=${C}-b\nC=c\n")

        source = PropertiesFileSource(path=path)

        assert source.get("A") == "c-b-a"
        assert source.get("B") == "c-b"

    def test_multiple_references_in_one_value(self, tmp_path):
        path = tmp_path / "vars.properties"
        path.write_text("USER=svc\nHOST=db\nDATABASE_URL=jdbc:mysql://${USER}@${HOST}:3306/${USER}\n")

        source = PropertiesFileSource(path=path)

        assert source.get("DATABASE_URL") == "jdbc:mysql://svc@db:3306/svc"

    def test_undefined_references_stay_literal(self, tmp_path):
        path = tmp_path / "vars.properties"
        path.write_text("VALUE=prefix-${UNDEFINED}-suffix\n")

        source = PropertiesFileSource(path=path)

        assert source.get("VALUE") == "prefix-${UNDEFINED}-suffix"

    def test_references_do_not_read_the_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FROM_ENV", "env-value")
        path = tmp_path / "vars.properties"
        path.write_text("VALUE=${FROM_ENV}\n")

        assert PropertiesFileSource(path=path).get("VALUE") == "${FROM_ENV}"

    def test_cycle_raises(self, tmp_path):
        path = tmp_path / "cycle.properties"
        path.write_text("A=${B}\nB=${C}\nC=${A}\n")

        with pytest.raises(CircularReferenceError) as exc_info:
            PropertiesFileSource(path=path)

        assert exc_info.value.key in {"A", "B", "C"}
        assert "Circular reference detected in property expansion" in str(exc_info.value)

    def test_self_reference_raises(self, tmp_path):
        path = tmp_path / "self.properties"
        path.write_text("LOOP=${LOOP}x\n")

        with pytest.raises(CircularReferenceError, match="LOOP"):
            PropertiesFileSource(path=path)
