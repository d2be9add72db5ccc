"""i18n system - key taxonomies resolved against locale files.

Main components:
- keys: MessageKey, KeyGroup, Taxonomy and the taxonomy flattener
- documents: document flattener and version extraction
- loader: FileLoader with YAML, JSON and TOML implementations
- resolver: resolution of taxonomies against documents, per-language loading
- context: LocalizationContext and its message accessors
- registry: ContextRegistry and its scopes
- sync: version-aware locale file synchronisation
- messages: MessageProvider bound to one language
- builder: LocalizationBuilder
"""

from langman.i18n.builder import LocalizationBuilder
from langman.i18n.context import LocalizationContext
from langman.i18n.documents import extract_version, flatten_document
from langman.i18n.exceptions import (
    BuilderError,
    ContextNotFoundError,
    DocumentError,
    DocumentParseError,
    DuplicateKeyPathError,
    KeyTypeMismatchError,
    LangmanError,
    MissingConverterError,
    MissingReplacerError,
    TaxonomyError,
)
from langman.i18n.factory import create_context
from langman.i18n.keys import KeyGroup, MessageKey, Taxonomy, flatten_taxonomy, item_keys
from langman.i18n.loader import (
    FileFormat,
    FileLoader,
    JSONFileLoader,
    TOMLFileLoader,
    YAMLFileLoader,
)
from langman.i18n.messages import MessageProvider
from langman.i18n.registry import ContextRegistry, Scope, get_registry
from langman.i18n.resolver import resolve
from langman.i18n.sync import SyncReport, compare_versions, parse_version, sync_if_needed

__all__ = [
    "MessageKey",
    "KeyGroup",
    "Taxonomy",
    "flatten_taxonomy",
    "item_keys",
    "flatten_document",
    "extract_version",
    "FileLoader",
    "FileFormat",
    "YAMLFileLoader",
    "JSONFileLoader",
    "TOMLFileLoader",
    "resolve",
    "LocalizationContext",
    "ContextRegistry",
    "Scope",
    "get_registry",
    "SyncReport",
    "sync_if_needed",
    "parse_version",
    "compare_versions",
    "MessageProvider",
    "LocalizationBuilder",
    "create_context",
    "LangmanError",
    "TaxonomyError",
    "DuplicateKeyPathError",
    "DocumentError",
    "DocumentParseError",
    "KeyTypeMismatchError",
    "MissingConverterError",
    "MissingReplacerError",
    "ContextNotFoundError",
    "BuilderError",
]
