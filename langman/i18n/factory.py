"""Factory functions for creating localization contexts from settings."""

from pathlib import Path
from typing import Any, Optional, Sequence

from langman.core.config import LangmanSettings, get_settings
from langman.core.logging import get_module_logger
from langman.i18n.builder import LocalizationBuilder
from langman.i18n.context import LocalizationContext
from langman.i18n.keys import Taxonomy
from langman.i18n.registry import ContextRegistry

logger = get_module_logger()


def create_context(
    taxonomy: Taxonomy,
    settings: Optional[LangmanSettings] = None,
    resource_root: Any = None,
    output_dir: Optional[Path] = None,
    languages: Optional[Sequence[str]] = None,
    registry: Optional[ContextRegistry] = None,
) -> LocalizationContext:
    """Create, load and register a context configured from settings.

    Explicit arguments override the matching settings.

    Args:
        taxonomy: Key taxonomy to resolve.
        settings: Settings to read (default: process settings).
        resource_root: Bundled locale directory (default: LANGMAN_RESOURCE_DIR).
        output_dir: Live locale directory (default: LANGMAN_OUTPUT_DIR).
        languages: Languages to load (default: LANGMAN_LANGUAGES).
        registry: Registry to publish to (default: global registry).

    Returns:
        LocalizationContext: Loaded context, registered by declared type.

    Raises:
        BuilderError: If neither a resource root nor an output directory is
            configured.

    Usage:
        # Configure via LANGMAN_* environment variables
        context = create_context(SHOP)

        # Override the bundled directory
        context = create_context(SHOP, resource_root=Path("locales"))
    """
    settings = settings or get_settings()

    resource_root = resource_root if resource_root is not None else settings.RESOURCE_DIR
    output_dir = output_dir if output_dir is not None else settings.OUTPUT_DIR
    languages = list(languages) if languages is not None else list(settings.LANGUAGES)

    builder = (
        LocalizationBuilder()
        .with_taxonomy(taxonomy)
        .with_format(settings.FORMAT)
        .with_languages(*languages)
        .with_default_language(settings.DEFAULT_LANGUAGE)
        .debug(settings.DEBUG)
    )
    if resource_root is not None:
        builder.from_resource(resource_root)
    if output_dir is not None:
        builder.to_directory(output_dir)
    if registry is not None:
        builder.with_registry(registry)
    builder.auto_update(
        settings.AUTO_UPDATE and resource_root is not None and output_dir is not None
    )

    context = builder.build()
    logger.info(
        "context_created_from_settings",
        format=settings.FORMAT,
        languages=languages,
        auto_update=settings.AUTO_UPDATE,
    )
    return context
