"""Custom exceptions for the localization system.

All langman errors inherit from LangmanError. Errors that also have a natural
builtin counterpart (TypeError, LookupError, ValueError) inherit from it too,
so callers can catch either.
"""


class LangmanError(Exception):
    """Base exception for all langman errors.

    Example:
        try:
            builder.build()
        except LangmanError as e:
            logger.error("localization_setup_failed", error=str(e))
    """

    pass


class TaxonomyError(LangmanError):
    """Raised when a key taxonomy is malformed or empty."""

    pass


class DuplicateKeyPathError(TaxonomyError):
    """Raised when two key handles normalise to the same dotted path.

    Example:
        >>> KeyGroup("Errors", AppKey("NotFound"), AppKey("notfound"))
        Traceback (most recent call last):
        ...
        DuplicateKeyPathError: Duplicate key path 'errors.notfound'
    """

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Duplicate key path '{path}'")


class DocumentError(LangmanError):
    """Raised when a locale document is structurally unusable."""

    pass


class DocumentParseError(DocumentError):
    """Raised when a parser fails to read a locale document."""

    pass


class KeyTypeMismatchError(LangmanError, TypeError):
    """Raised when a key handle does not belong to the context's key type."""

    def __init__(self, key_type: type, expected: type):
        self.key_type = key_type
        self.expected = expected
        super().__init__(
            f"Unexpected MessageKey type: {key_type.__name__}. "
            f"Expected: {expected.__name__}"
        )


class MissingConverterError(LangmanError, LookupError):
    """Raised when no converter is registered for a target type."""

    def __init__(self, target: type):
        self.target = target
        super().__init__(f"No converter found for type {target.__name__}")


class MissingReplacerError(LangmanError, LookupError):
    """Raised when no replacement logic is registered for a target type."""

    def __init__(self, target: type):
        self.target = target
        super().__init__(f"No replacement logic found for type {target.__name__}")


class ContextNotFoundError(LangmanError, LookupError):
    """Raised when the registry holds no context for a scope."""

    pass


class BuilderError(LangmanError, ValueError):
    """Raised when a LocalizationBuilder is missing required configuration."""

    pass
