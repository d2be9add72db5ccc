"""Process-wide registry of localization contexts.

Contexts can be stored and retrieved in three ways:

1. By declared type: keyed by the context's MessageKey subclass. Lookups walk
   the key type's MRO, so a key subclass finds a context registered for one
   of its bases.
2. By custom key: any hashable identifier chosen by the caller.
3. By caller context: keyed by the module that registers or looks up the
   context. Callers may pass an explicit token instead; inferring the
   calling module from the stack is a best-effort convenience.

Registering a second context under an occupied scope key replaces the first
and logs a warning.
"""

import inspect
import threading
from enum import Enum
from typing import Any, Dict, Hashable, Optional, Tuple

from langman.core.logging import get_module_logger
from langman.i18n.context import LocalizationContext
from langman.i18n.exceptions import ContextNotFoundError
from langman.i18n.keys import MessageKey

logger = get_module_logger()

_INTERNAL_PACKAGE = "langman"

ScopeKey = Tuple["Scope", Hashable]


class Scope(str, Enum):
    """Strategy used to index a context in the registry."""

    DECLARED_TYPE = "declared_type"
    CUSTOM_KEY = "custom_key"
    CALLER_CONTEXT = "caller_context"


def _is_internal(module_name: str) -> bool:
    return module_name == _INTERNAL_PACKAGE or module_name.startswith(
        f"{_INTERNAL_PACKAGE}."
    )


def caller_context_key() -> str:
    """Name of the first module on the call stack outside langman.

    Falls back to a per-thread key when every frame belongs to langman.
    """
    frame = inspect.currentframe()
    try:
        while frame is not None:
            module_name = frame.f_globals.get("__name__", "")
            if module_name and not _is_internal(module_name):
                return module_name
            frame = frame.f_back
    finally:
        del frame
    return f"default-{threading.get_ident()}"


class ContextRegistry:
    """Thread-safe registry for localization contexts.

    Contexts are fully loaded before they are registered, so a reader never
    observes a context that is still being built.

    Attributes:
        _entries: Dict mapping (scope, key) to the registered context.
        _lock: Lock guarding _entries.
    """

    def __init__(self):
        self._entries: Dict[ScopeKey, LocalizationContext] = {}
        self._lock = threading.RLock()

    def _scope_key(
        self,
        scope: Scope,
        key: Optional[Hashable],
        context: Optional[LocalizationContext] = None,
    ) -> ScopeKey:
        scope = Scope(scope)
        if scope is Scope.DECLARED_TYPE:
            if key is None:
                if context is None:
                    raise ValueError("A declared-type lookup requires a key type")
                key = context.key_type
            if not isinstance(key, type):
                raise ValueError(f"Declared-type scope keys must be types, got {key!r}")
        elif scope is Scope.CUSTOM_KEY:
            if key is None:
                raise ValueError("Scope.CUSTOM_KEY requires an explicit key")
        elif key is None:
            key = caller_context_key()
        return scope, key

    def register(
        self,
        context: LocalizationContext,
        scope: Scope = Scope.DECLARED_TYPE,
        key: Optional[Hashable] = None,
    ) -> Optional[LocalizationContext]:
        """Register a context under a scope.

        Args:
            context: Fully loaded context to publish.
            scope: Indexing strategy.
            key: Custom key (required for CUSTOM_KEY), explicit caller token
                (CALLER_CONTEXT) or type (DECLARED_TYPE, defaults to the
                context's key type).

        Returns:
            The context previously registered under the same scope key, if any.

        Raises:
            ValueError: If scope is CUSTOM_KEY and no key is given.
        """
        scope_key = self._scope_key(scope, key, context)

        with self._lock:
            previous = self._entries.get(scope_key)
            self._entries[scope_key] = context

        if previous is not None and previous is not context:
            logger.warning(
                "context_overwritten",
                scope=scope_key[0].value,
                key=_describe(scope_key[1]),
                previous=repr(previous),
                current=repr(context),
            )
        else:
            logger.info(
                "context_registered",
                scope=scope_key[0].value,
                key=_describe(scope_key[1]),
            )
        return previous

    def lookup(
        self,
        scope: Scope = Scope.DECLARED_TYPE,
        key: Optional[Hashable] = None,
    ) -> Optional[LocalizationContext]:
        """Find a context, or None.

        Declared-type lookups that miss on the exact type walk its MRO.
        Caller-context lookups without a key resolve the calling module now.
        """
        scope_key = self._scope_key(scope, key)

        with self._lock:
            if scope_key[0] is Scope.DECLARED_TYPE:
                for candidate in scope_key[1].__mro__:
                    context = self._entries.get((Scope.DECLARED_TYPE, candidate))
                    if context is not None:
                        return context
                return None
            return self._entries.get(scope_key)

    def get(
        self,
        scope: Scope = Scope.DECLARED_TYPE,
        key: Optional[Hashable] = None,
    ) -> LocalizationContext:
        """Like lookup(), but raise ContextNotFoundError on a miss."""
        context = self.lookup(scope, key)
        if context is None:
            raise ContextNotFoundError(
                f"No localization context registered for scope={Scope(scope).value} "
                f"key={_describe(key)}"
            )
        return context

    def lookup_for_key(self, message_key: MessageKey) -> LocalizationContext:
        """Find the context serving a message key by its declared type."""
        context = self.lookup(Scope.DECLARED_TYPE, type(message_key))
        if context is None:
            raise ContextNotFoundError(
                f"No localization context registered for {type(message_key).__name__}"
            )
        return context

    def dump_all(self) -> Dict[ScopeKey, LocalizationContext]:
        """Snapshot of every registered entry."""
        with self._lock:
            return dict(self._entries)

    def clear(self) -> None:
        """Remove every entry. Primarily used for testing."""
        with self._lock:
            self._entries.clear()
        logger.debug("context_registry_cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def _describe(key: Any) -> str:
    if isinstance(key, type):
        return f"{key.__module__}.{key.__qualname__}"
    return str(key)


# Global registry instance
_global_registry: Optional[ContextRegistry] = None
_global_registry_lock = threading.Lock()


def get_registry() -> ContextRegistry:
    """Get the global context registry singleton.

    Thread-safe singleton pattern. Creates the registry on first call.
    """
    global _global_registry

    if _global_registry is None:
        with _global_registry_lock:
            # Double-check locking pattern
            if _global_registry is None:
                _global_registry = ContextRegistry()
                logger.debug("global_context_registry_initialized")

    return _global_registry
