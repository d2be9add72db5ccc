"""Resolution of flattened taxonomies against flattened locale documents."""

from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Optional

from langman.core.logging import LogLevel, get_module_logger, log_if_debug
from langman.i18n.exceptions import DocumentError
from langman.i18n.keys import MessageKey

if TYPE_CHECKING:
    from langman.i18n.context import LocalizationContext
    from langman.i18n.loader import FileLoader

logger = get_module_logger()


def resolve(
    key_table: Mapping[str, MessageKey],
    document_table: Mapping[str, str],
) -> Dict[MessageKey, str]:
    """Bind every key whose path is present in the document.

    Keys without a matching path are left out; callers fall back to the key's
    own name. Paths in the document that no key declares are ignored.

    Args:
        key_table: Flattened taxonomy (path -> key).
        document_table: Flattened document (path -> text).

    Returns:
        Dict mapping keys to their text for one language.
    """
    resolved: Dict[MessageKey, str] = {}
    for path, key in key_table.items():
        text = document_table.get(path)
        if text is not None:
            resolved[key] = text
    return resolved


def find_locale_file(
    language: str,
    extensions: Iterable[str],
    output_dir: Optional[Path] = None,
    resource_root: Any = None,
) -> Optional[Any]:
    """Locate the file to load for a language.

    The output directory wins over bundled resources. Within each location the
    first existing `<language>.<extension>` in sorted extension order is used.

    Returns:
        A Path or Traversable, or None if neither location has the language.
    """
    ordered = sorted(extensions)
    for root in (output_dir, resource_root):
        if root is None:
            continue
        for ext in ordered:
            candidate = root / f"{language}.{ext}"
            if candidate.is_file():
                return candidate
    return None


def load_into(
    context: "LocalizationContext",
    loader: "FileLoader",
    languages: Iterable[str],
    key_table: Mapping[str, MessageKey],
    output_dir: Optional[Path] = None,
    resource_root: Any = None,
) -> List[str]:
    """Load each language's file and publish its resolved table on the context.

    A language whose file is missing or unreadable is skipped with a warning;
    the others still load.

    Returns:
        Languages that were loaded.
    """
    languages = list(languages)
    loaded = []
    for lang in languages:
        source = find_locale_file(lang, loader.extensions, output_dir, resource_root)
        if source is None:
            logger.warning(
                "locale_file_not_found",
                language=lang,
                output_dir=str(output_dir) if output_dir else None,
                resource_root=str(resource_root) if resource_root else None,
            )
            continue

        log_if_debug(
            logger, context.debug, "loading_locale_file", language=lang, source=str(source)
        )
        try:
            tree = loader.parse_path(source)
            document_table = loader.flatten(tree)
        except (DocumentError, OSError) as e:
            logger.warning(
                "locale_file_unreadable",
                language=lang,
                source=str(source),
                error=str(e),
            )
            continue

        resolved = resolve(key_table, document_table)
        context.set_language(lang, resolved)
        loaded.append(lang)

        missing = len(key_table) - len(resolved)
        if missing:
            log_if_debug(
                logger,
                context.debug,
                "locale_keys_unresolved",
                LogLevel.WARN,
                language=lang,
                missing_count=missing,
            )

    logger.info("locales_loaded", languages=loaded, requested=languages)
    return loaded
