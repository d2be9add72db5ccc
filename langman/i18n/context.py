"""Resolution context: one fully loaded set of per-language message tables.

A context owns the resolved `language -> key -> text` tables for one
taxonomy, the text factory producing its output type, and the converter and
replacer tables used by `convert()`. Contexts are built and loaded by
LocalizationBuilder and then published to the registry.
"""

import re
import threading
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Set

from langman.core.logging import get_module_logger
from langman.i18n.exceptions import (
    KeyTypeMismatchError,
    MissingConverterError,
    MissingReplacerError,
)
from langman.i18n.keys import MessageKey

logger = get_module_logger()

TextFactory = Callable[[str], Any]
Converter = Callable[[Any], Any]
Replacer = Callable[[Any, str, Any], Any]

_POSITIONAL_PLACEHOLDER = re.compile(r"%s")


def substitute_positional(message: str, args: tuple) -> str:
    """Replace `%s` placeholders with `args` in order.

    Placeholders beyond the number of args are left verbatim; surplus args
    are ignored.
    """
    remaining = iter(args)

    def replace(match: re.Match) -> str:
        try:
            return str(next(remaining))
        except StopIteration:
            return match.group(0)

    return _POSITIONAL_PLACEHOLDER.sub(replace, message)


def substitute_named(message: str, args: Mapping[Any, Any]) -> str:
    """Replace every `%name%` with `str(args[name])`.

    Only the argument names are matched, so names may contain spaces and
    stray `%` signs in the text are left alone. Placeholders without a
    matching argument are left verbatim.
    """
    if not args:
        return message
    lookup = {f"%{name}%": str(value) for name, value in args.items()}
    # Longest first so "%ab%" is never cut short by "%a%"
    pattern = re.compile(
        "|".join(re.escape(token) for token in sorted(lookup, key=len, reverse=True))
    )
    return pattern.sub(lambda match: lookup[match.group(0)], message)


def _identity(text: str) -> str:
    return text


class LocalizationContext:
    """Resolved messages for one key taxonomy.

    Attributes:
        key_type: MessageKey subclass every key passed in must be an instance of.
        output_type: Type produced by the text factory.
        text_factory: Callable turning formatted text into output_type.
        default_language: Language used when callers pass none.
        debug: Promote internal debug logs to their real level.
        converters: target type -> callable converting raw text to that type.
        replacers: target type -> callable(value, name, arg) replacing a
            named placeholder inside an already converted value.
    """

    def __init__(
        self,
        key_type: type,
        output_type: type = str,
        text_factory: Optional[TextFactory] = None,
        default_language: str = "en",
        debug: bool = False,
    ):
        if not (isinstance(key_type, type) and issubclass(key_type, MessageKey)):
            raise TypeError(f"key_type must be a MessageKey subclass, got {key_type!r}")
        self._key_type = key_type
        self.output_type = output_type
        self.text_factory: TextFactory = text_factory or _identity
        self.default_language = default_language
        self.debug = debug
        self.converters: Dict[type, Converter] = {}
        self.replacers: Dict[type, Replacer] = {}
        self._messages: Dict[str, Mapping[MessageKey, str]] = {}
        self._lock = threading.Lock()

    @property
    def key_type(self) -> type:
        return self._key_type

    @property
    def messages(self) -> Mapping[str, Mapping[MessageKey, str]]:
        """Read-only view of the per-language tables."""
        return MappingProxyType(self._messages)

    def set_language(self, language: str, table: Mapping[MessageKey, str]) -> None:
        """Publish a fully built table for a language, replacing any previous one."""
        snapshot = MappingProxyType(dict(table))
        with self._lock:
            self._messages[language] = snapshot
        logger.debug(
            "language_table_published", language=language, key_count=len(snapshot)
        )

    def available_languages(self) -> Set[str]:
        with self._lock:
            return set(self._messages)

    def register_converter(self, target: type, converter: Converter) -> None:
        """Register how raw text becomes an instance of `target`."""
        self.converters[target] = converter

    def register_replacer(self, target: type, replacer: Replacer) -> None:
        """Register how a named placeholder is replaced inside a `target` value."""
        self.replacers[target] = replacer

    def check_key(self, key: MessageKey) -> None:
        """Raise KeyTypeMismatchError unless `key` belongs to this context."""
        if not isinstance(key, self._key_type):
            raise KeyTypeMismatchError(type(key), self._key_type)

    def _table(self, lang: Optional[str]) -> Optional[Mapping[MessageKey, str]]:
        return self._messages.get(lang or self.default_language)

    def raw_text(self, key: MessageKey, lang: Optional[str] = None) -> str:
        """Resolved text, or the key's simple name when there is none."""
        self.check_key(key)
        table = self._table(lang)
        text = table.get(key) if table is not None else None
        return text if text is not None else key.name

    def has_message(self, key: MessageKey, lang: Optional[str] = None) -> bool:
        self.check_key(key)
        table = self._table(lang)
        return table is not None and key in table

    def format(self, key: MessageKey, *args: Any, lang: Optional[str] = None) -> str:
        return substitute_positional(self.raw_text(key, lang), args)

    def format_named(
        self,
        key: MessageKey,
        args: Optional[Mapping[Any, Any]] = None,
        lang: Optional[str] = None,
    ) -> str:
        return substitute_named(self.raw_text(key, lang), args or {})

    def message(
        self,
        key: MessageKey,
        args: Optional[Mapping[Any, Any]] = None,
        lang: Optional[str] = None,
    ) -> Any:
        """Named-formatted text passed through the text factory."""
        return self.text_factory(self.format_named(key, args, lang))

    def message_from(
        self,
        key: MessageKey,
        intermediate: Any,
        transform: Callable[[Any], Mapping[Any, Any]],
        lang: Optional[str] = None,
    ) -> Any:
        """Like message(), with named args derived from `intermediate`."""
        return self.message(key, transform(intermediate), lang)

    def convert(
        self,
        key: MessageKey,
        target: type,
        args: Optional[Mapping[str, Any]] = None,
        lang: Optional[str] = None,
    ) -> Any:
        """Convert the raw text to `target`, then apply named replacements.

        Raises:
            KeyTypeMismatchError: If the key does not belong to this context.
            MissingConverterError: If no converter is registered for `target`.
            MissingReplacerError: If args are given and no replacer is
                registered for `target`.
            TypeError: If the converter returns something other than `target`.
        """
        text = self.raw_text(key, lang)

        converter = self.converters.get(target)
        if converter is None:
            raise MissingConverterError(target)

        value = converter(text)
        if not isinstance(value, target):
            raise TypeError(
                f"Failed to convert message: expected {target.__name__}, "
                f"got {type(value).__name__}"
            )

        if args:
            replacer = self.replacers.get(target)
            if replacer is None:
                raise MissingReplacerError(target)
            for name, arg in args.items():
                value = replacer(value, str(name), arg)

        return value

    def __repr__(self) -> str:
        return (
            f"LocalizationContext(key_type={self._key_type.__name__}, "
            f"languages={sorted(self._messages)})"
        )
