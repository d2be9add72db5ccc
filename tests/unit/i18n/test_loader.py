"""Tests for langman.i18n.loader module."""

import io

import pytest

from langman.i18n import (
    DocumentError,
    DocumentParseError,
    FileFormat,
    JSONFileLoader,
    TOMLFileLoader,
    YAMLFileLoader,
)
from langman.i18n.loader import get_loader
from tests.factories.i18n import make_shop_document, write_locale


class TestYAMLFileLoader:
    """Tests for YAMLFileLoader."""

    def test_extensions(self, yaml_loader):
        assert yaml_loader.extensions == frozenset({"yml", "yaml"})

    def test_parse_stream(self, yaml_loader):
        data = yaml_loader.parse(io.BytesIO(b"errors:\n  notfound: Not found\n"))
        assert data == {"errors": {"notfound": "Not found"}}

    def test_parse_path(self, yaml_loader, tmp_path):
        path = write_locale(tmp_path, "en", make_shop_document("en"))
        data = yaml_loader.parse_path(path)
        assert data["errors"]["notfound"] == "Not found: %id%"

    def test_empty_document_parses_to_empty_mapping(self, yaml_loader):
        assert yaml_loader.parse(io.BytesIO(b"")) == {}

    def test_invalid_yaml_raises_parse_error(self, yaml_loader):
        with pytest.raises(DocumentParseError):
            yaml_loader.parse(io.BytesIO(b"invalid: yaml: content: ["))

    def test_non_mapping_root_raises(self, yaml_loader):
        with pytest.raises(DocumentError):
            yaml_loader.parse(io.BytesIO(b"- item1\n- item2\n"))

    def test_parse_path_error_mentions_file(self, yaml_loader, tmp_path):
        path = tmp_path / "en.yml"
        path.write_text("invalid: yaml: content: [", encoding="utf-8")
        with pytest.raises(DocumentParseError) as exc_info:
            yaml_loader.parse_path(path)
        assert "en.yml" in str(exc_info.value)

    def test_resolve_binds_matching_paths(self, yaml_loader, shop_taxonomy):
        data = {"errors": {"notfound": "Not found"}, "unknown": "ignored"}
        resolved = yaml_loader.resolve(data, shop_taxonomy.table)
        assert resolved == {shop_taxonomy.Errors.NotFound: "Not found"}


class TestJSONFileLoader:
    """Tests for JSONFileLoader."""

    def test_parse_path(self, tmp_path):
        path = write_locale(tmp_path, "fr", make_shop_document("fr"), extension="json")
        data = JSONFileLoader().parse_path(path)
        assert data["tips"] == ["Utilisez la recherche", "Vérifiez votre panier"]

    def test_invalid_json_raises_parse_error(self):
        with pytest.raises(DocumentParseError):
            JSONFileLoader().parse(io.BytesIO(b"{not json"))


class TestTOMLFileLoader:
    """Tests for TOMLFileLoader."""

    def test_parse_tables_and_arrays(self):
        content = (
            'version = "1.0"\n'
            'tips = ["one", "two"]\n'
            "[errors]\n"
            'notfound = "Not found: %id%"\n'
        ).encode("utf-8")
        loader = TOMLFileLoader()
        data = loader.parse(io.BytesIO(content))
        assert loader.flatten(data) == {
            "version": "1.0",
            "tips.item1": "one",
            "tips.item2": "two",
            "errors.notfound": "Not found: %id%",
        }

    def test_invalid_toml_raises_parse_error(self):
        with pytest.raises(DocumentParseError):
            TOMLFileLoader().parse(io.BytesIO(b"= broken"))


class TestFileFormat:
    """Tests for FileFormat and get_loader()."""

    @pytest.mark.parametrize(
        "name,loader_type",
        [
            ("yaml", YAMLFileLoader),
            ("YML", YAMLFileLoader),
            ("json", JSONFileLoader),
            ("toml", TOMLFileLoader),
        ],
    )
    def test_from_string(self, name, loader_type):
        assert isinstance(FileFormat.from_string(name).create_loader(), loader_type)

    def test_from_string_unsupported(self):
        with pytest.raises(ValueError):
            FileFormat.from_string("ini")

    def test_extensions_match_loader(self):
        assert FileFormat.JSON.extensions == frozenset({"json"})

    def test_get_loader_accepts_instances_enums_and_names(self, yaml_loader):
        assert get_loader(yaml_loader) is yaml_loader
        assert isinstance(get_loader(FileFormat.TOML), TOMLFileLoader)
        assert isinstance(get_loader("json"), JSONFileLoader)
