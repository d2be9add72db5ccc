"""langman - resolve declared message key taxonomies against locale files.

The full API lives in langman.i18n; the most used names are re-exported here.
"""

from langman.i18n import (
    FileFormat,
    KeyGroup,
    LangmanError,
    LocalizationBuilder,
    LocalizationContext,
    MessageKey,
    MessageProvider,
    Scope,
    Taxonomy,
    create_context,
    get_registry,
    item_keys,
)

__version__ = "1.0.0"

__all__ = [
    "MessageKey",
    "KeyGroup",
    "Taxonomy",
    "item_keys",
    "FileFormat",
    "LocalizationBuilder",
    "LocalizationContext",
    "MessageProvider",
    "Scope",
    "get_registry",
    "create_context",
    "LangmanError",
]
