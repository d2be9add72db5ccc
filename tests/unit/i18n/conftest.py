"""Feature-level fixtures for i18n system tests."""

import pytest

from langman.i18n import ContextRegistry, YAMLFileLoader
from tests.factories.i18n import make_shop_document, make_shop_taxonomy, write_locale


@pytest.fixture
def shop_taxonomy():
    """Fresh shop taxonomy (its keys are not shared with other tests)."""
    return make_shop_taxonomy()


@pytest.fixture
def registry():
    """Create a fresh registry for each test."""
    reg = ContextRegistry()
    yield reg
    reg.clear()


@pytest.fixture
def yaml_loader():
    return YAMLFileLoader()


@pytest.fixture
def bundled_dir(tmp_path):
    """Bundled locale directory with en.yml and fr.yml at version 1.0."""
    directory = tmp_path / "bundled"
    write_locale(directory, "en", make_shop_document("en"))
    write_locale(directory, "fr", make_shop_document("fr"))
    return directory


@pytest.fixture
def output_dir(tmp_path):
    """Writable locale directory (not created yet)."""
    return tmp_path / "output"
