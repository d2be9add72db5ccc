"""Tests for langman.i18n.resolver module."""

from unittest.mock import patch

from langman.i18n import LocalizationContext, flatten_document, resolve
from langman.i18n.resolver import find_locale_file, load_into
from tests.factories.i18n import ShopKey, make_shop_document, write_locale


class TestResolve:
    """Tests for resolve()."""

    def test_binds_every_matching_key(self, shop_taxonomy):
        resolved = resolve(shop_taxonomy.table, flatten_document(make_shop_document("en")))
        assert resolved[shop_taxonomy.Errors.NotFound] == "Not found: %id%"
        assert resolved[shop_taxonomy.Tips.Item2] == "Check your cart"
        assert len(resolved) == len(shop_taxonomy.table)

    def test_never_invents_keys(self, shop_taxonomy):
        """Document paths no key declares are ignored."""
        document = {"errors": {"notfound": "x", "extra": "y"}, "other": "z"}
        resolved = resolve(shop_taxonomy.table, flatten_document(document))
        assert set(resolved) <= set(shop_taxonomy.table.values())
        assert resolved == {shop_taxonomy.Errors.NotFound: "x"}

    def test_missing_paths_leave_keys_unresolved(self, shop_taxonomy):
        resolved = resolve(shop_taxonomy.table, {})
        assert resolved == {}

    def test_match_is_case_insensitive(self, shop_taxonomy):
        document = {"ERRORS": {"NotFound": "x"}}
        resolved = resolve(shop_taxonomy.table, flatten_document(document))
        assert resolved == {shop_taxonomy.Errors.NotFound: "x"}


class TestFindLocaleFile:
    """Tests for find_locale_file()."""

    def test_output_dir_wins_over_resources(self, tmp_path):
        bundled = write_locale(tmp_path / "bundled", "en", {"a": "bundled"})
        live = write_locale(tmp_path / "live", "en", {"a": "live"})
        found = find_locale_file("en", {"yml"}, tmp_path / "live", tmp_path / "bundled")
        assert found == live
        assert found != bundled

    def test_falls_back_to_resources(self, tmp_path):
        bundled = write_locale(tmp_path / "bundled", "en", {"a": "bundled"})
        found = find_locale_file("en", {"yml"}, tmp_path / "live", tmp_path / "bundled")
        assert found == bundled

    def test_returns_none_when_nowhere(self, tmp_path):
        assert find_locale_file("de", {"yml", "yaml"}, tmp_path, None) is None


class TestLoadInto:
    """Tests for load_into()."""

    def test_loads_each_language(self, shop_taxonomy, yaml_loader, bundled_dir):
        context = LocalizationContext(ShopKey)
        loaded = load_into(
            context,
            yaml_loader,
            ["en", "fr"],
            shop_taxonomy.table,
            resource_root=bundled_dir,
        )
        assert loaded == ["en", "fr"]
        assert context.raw_text(shop_taxonomy.Welcome, "fr").startswith("Bienvenue")

    @patch("langman.i18n.resolver.logger")
    def test_missing_language_skipped_with_warning(
        self, mock_logger, shop_taxonomy, yaml_loader, bundled_dir
    ):
        context = LocalizationContext(ShopKey)
        loaded = load_into(
            context, yaml_loader, ["de", "en"], shop_taxonomy.table, resource_root=bundled_dir
        )
        assert loaded == ["en"]
        assert context.available_languages() == {"en"}
        mock_logger.warning.assert_any_call(
            "locale_file_not_found",
            language="de",
            output_dir=None,
            resource_root=str(bundled_dir),
        )

    @patch("langman.i18n.resolver.logger")
    def test_unparsable_language_skipped(
        self, mock_logger, shop_taxonomy, yaml_loader, bundled_dir
    ):
        (bundled_dir / "de.yml").write_text("invalid: yaml: [", encoding="utf-8")
        context = LocalizationContext(ShopKey)
        loaded = load_into(
            context, yaml_loader, ["de", "en"], shop_taxonomy.table, resource_root=bundled_dir
        )
        assert loaded == ["en"]
        assert mock_logger.warning.call_args_list[0].args[0] == "locale_file_unreadable"

    def test_reload_replaces_language_table(
        self, shop_taxonomy, yaml_loader, tmp_path
    ):
        directory = tmp_path / "live"
        write_locale(directory, "en", {"welcome": "Hello"})
        context = LocalizationContext(ShopKey)
        load_into(context, yaml_loader, ["en"], shop_taxonomy.table, output_dir=directory)
        first = context.messages["en"]

        write_locale(directory, "en", {"welcome": "Hi"})
        load_into(context, yaml_loader, ["en"], shop_taxonomy.table, output_dir=directory)

        assert context.raw_text(shop_taxonomy.Welcome, "en") == "Hi"
        assert first[shop_taxonomy.Welcome] == "Hello"
