"""Language-bound message provider.

Provides an object-based interface to a registered context for code that
serves one language at a time (a user session, a request, a player).
"""

from typing import Any, Callable, Hashable, Mapping, Optional

from langman.i18n.context import LocalizationContext
from langman.i18n.keys import MessageKey
from langman.i18n.registry import ContextRegistry, Scope, get_registry


class MessageProvider:
    """Message accessors bound to one language and one registry scope.

    This is a thin facade: the context is looked up in the registry on every
    call, so a context re-registered under the same scope is picked up
    immediately.

    Usage:
        provider = MessageProvider("fr", key_type=ShopKey)
        provider.get_message(SHOP.Errors.NotFound, {"id": 42})

        # Context registered under a custom key
        provider = MessageProvider("en", scope=Scope.CUSTOM_KEY, key="shop")
    """

    def __init__(
        self,
        language: str,
        scope: Scope = Scope.DECLARED_TYPE,
        key: Optional[Hashable] = None,
        key_type: Optional[type] = None,
        registry: Optional[ContextRegistry] = None,
    ):
        """Initialize the provider.

        Args:
            language: Language code served by this provider.
            scope: Registry scope the context is registered under.
            key: Custom key or caller token for the scope.
            key_type: Declared key type for Scope.DECLARED_TYPE. When omitted
                the type of each key passed in is used.
            registry: Registry to read from (default: global registry).
        """
        self.language = language
        self.scope = Scope(scope)
        self.key = key_type if self.scope is Scope.DECLARED_TYPE and key is None else key
        self._registry = registry or get_registry()

    def get_language(self) -> str:
        return self.language

    def context_for(self, message_key: Optional[MessageKey] = None) -> LocalizationContext:
        """Resolve the context serving this provider.

        Raises:
            ContextNotFoundError: If nothing is registered for the scope.
        """
        if self.scope is Scope.DECLARED_TYPE and self.key is None:
            if message_key is None:
                raise ValueError("A key_type or message key is required")
            return self._registry.lookup_for_key(message_key)
        return self._registry.get(self.scope, self.key)

    def get_message(
        self, key: MessageKey, args: Optional[Mapping[Any, Any]] = None
    ) -> Any:
        """Named-formatted message in the context's output type."""
        return self.context_for(key).message(key, args, self.language)

    def get_formatted(self, key: MessageKey, *args: Any) -> str:
        """Message with `%s` placeholders filled in order."""
        return self.context_for(key).format(key, *args, lang=self.language)

    def get_message_from(
        self,
        key: MessageKey,
        intermediate: Any,
        transform: Callable[[Any], Mapping[Any, Any]],
    ) -> Any:
        return self.context_for(key).message_from(
            key, intermediate, transform, self.language
        )

    def get_raw_message(self, key: MessageKey) -> str:
        return self.context_for(key).raw_text(key, self.language)

    def has_message(self, key: MessageKey) -> bool:
        return self.context_for(key).has_message(key, self.language)

    def convert(
        self,
        key: MessageKey,
        target: type,
        args: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        return self.context_for(key).convert(key, target, args, self.language)

    def __repr__(self) -> str:
        return f"MessageProvider(language={self.language!r}, scope={self.scope.value})"
