"""Tests for MessageProvider."""

import pytest

from langman.i18n import (
    ContextNotFoundError,
    KeyTypeMismatchError,
    MessageProvider,
    Scope,
)
from tests.factories.i18n import AdminKey, OtherKey, ShopKey, make_context

EN = {
    "errors.notfound": "Not found: %id%",
    "welcome": "Welcome %s, you have %s items",
}
FR = {
    "errors.notfound": "Introuvable : %id%",
    "welcome": "Bienvenue %s, vous avez %s articles",
}


@pytest.fixture
def context(shop_taxonomy):
    return make_context(shop_taxonomy, {"en": EN, "fr": FR})


@pytest.fixture
def french(registry, context):
    registry.register(context)
    return MessageProvider("fr", key_type=ShopKey, registry=registry)


class TestMessageProvider:
    """Tests for the language-bound accessors."""

    def test_get_language(self, french):
        assert french.get_language() == "fr"

    def test_get_message(self, french, shop_taxonomy):
        assert french.get_message(shop_taxonomy.Errors.NotFound, {"id": 7}) == "Introuvable : 7"

    def test_get_formatted(self, french, shop_taxonomy):
        assert (
            french.get_formatted(shop_taxonomy.Welcome, "Ana", 3)
            == "Bienvenue Ana, vous avez 3 articles"
        )

    def test_get_message_from(self, french, shop_taxonomy):
        class Order:
            number = 12

        message = french.get_message_from(
            shop_taxonomy.Errors.NotFound, Order(), lambda order: {"id": order.number}
        )
        assert message == "Introuvable : 12"

    def test_raw_and_has_message(self, french, shop_taxonomy):
        assert french.get_raw_message(shop_taxonomy.Errors.NotFound) == "Introuvable : %id%"
        assert french.has_message(shop_taxonomy.Welcome)
        assert not french.has_message(shop_taxonomy.Tips.Item1)
        assert french.get_raw_message(shop_taxonomy.Tips.Item1) == "Item1"

    def test_convert(self, french, context, shop_taxonomy):
        context.register_converter(bytes, lambda text: text.encode("utf-8"))
        assert french.convert(shop_taxonomy.Errors.NotFound, bytes) == "Introuvable : %id%".encode()

    def test_foreign_key_rejected(self, french):
        with pytest.raises(KeyTypeMismatchError):
            french.get_raw_message(OtherKey("Stray"))

    def test_key_subtype_accepted(self, french):
        assert french.get_raw_message(AdminKey("Dashboard")) == "Dashboard"

    def test_sees_reregistered_context(self, registry, french, shop_taxonomy):
        replacement = make_context(shop_taxonomy, {"fr": {"welcome": "Salut"}})
        registry.register(replacement)
        assert french.get_raw_message(shop_taxonomy.Welcome) == "Salut"

    def test_repr(self, french):
        assert repr(french) == "MessageProvider(language='fr', scope=declared_type)"


class TestProviderScopes:
    """Tests for resolving the context behind a provider."""

    def test_key_type_inferred_from_key(self, registry, context, shop_taxonomy):
        registry.register(context)
        provider = MessageProvider("en", registry=registry)
        assert provider.get_raw_message(shop_taxonomy.Welcome) == EN["welcome"]

    def test_no_key_type_and_no_key(self, registry):
        provider = MessageProvider("en", registry=registry)
        with pytest.raises(ValueError):
            provider.context_for()

    def test_custom_key_scope(self, registry, context, shop_taxonomy):
        registry.register(context, Scope.CUSTOM_KEY, "shop")
        provider = MessageProvider("en", scope=Scope.CUSTOM_KEY, key="shop", registry=registry)
        assert provider.context_for() is context
        assert provider.get_message(shop_taxonomy.Errors.NotFound, {"id": 1}) == "Not found: 1"

    def test_missing_context(self, registry, shop_taxonomy):
        provider = MessageProvider("en", key_type=ShopKey, registry=registry)
        with pytest.raises(ContextNotFoundError):
            provider.get_raw_message(shop_taxonomy.Welcome)
