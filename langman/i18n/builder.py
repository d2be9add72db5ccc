"""Fluent builder producing and publishing localization contexts."""

from importlib import resources
from pathlib import Path
from typing import Any, Dict, Hashable, List, Optional, Tuple, Union

from langman.core.config import get_settings
from langman.core.logging import get_module_logger
from langman.i18n.context import Converter, LocalizationContext, Replacer, TextFactory
from langman.i18n.exceptions import BuilderError
from langman.i18n.keys import Taxonomy
from langman.i18n.loader import FileLoader, LoaderSpec, get_loader
from langman.i18n.registry import ContextRegistry, Scope, get_registry
from langman.i18n.resolver import load_into
from langman.i18n.sync import SyncReport, sync_if_needed

logger = get_module_logger()


class LocalizationBuilder:
    """Configure, load and publish one LocalizationContext.

    Usage:
        context = (
            LocalizationBuilder()
            .with_taxonomy(SHOP)
            .with_format("yaml")
            .from_resource("locales", package="shop")
            .to_directory(Path("config/lang"))
            .with_languages("en", "fr")
            .auto_update()
            .build()
        )

        SHOP.Errors.NotFound.format_named({"id": 42}, lang="fr")
    """

    def __init__(self, output_type: type = str):
        """Initialize the builder.

        Args:
            output_type: Type produced by the context's text factory. Any type
                other than str needs with_text_factory().
        """
        self._output_type = output_type
        self._text_factory: Optional[TextFactory] = None
        self._loader: Optional[FileLoader] = None
        self._taxonomy: Optional[Taxonomy] = None
        self._resource_root: Any = None
        self._output_dir: Optional[Path] = None
        self._languages: List[str] = []
        self._default_language: Optional[str] = None
        self._converters: Dict[type, Converter] = {}
        self._replacers: Dict[type, Replacer] = {}
        self._auto_update = False
        self._debug = False
        self._scopes: List[Tuple[Scope, Optional[Hashable]]] = []
        self._registry: Optional[ContextRegistry] = None
        self.last_sync: Optional[SyncReport] = None

    def with_format(self, spec: LoaderSpec) -> "LocalizationBuilder":
        """Use a FileLoader instance, a FileFormat or a format name."""
        self._loader = get_loader(spec)
        return self

    def with_taxonomy(self, taxonomy: Taxonomy) -> "LocalizationBuilder":
        self._taxonomy = taxonomy
        return self

    def from_resource(
        self, root: Union[str, Path, Any], package: Optional[str] = None
    ) -> "LocalizationBuilder":
        """Set the bundled locale directory.

        Args:
            root: Directory path, or a Traversable. With `package`, a path
                relative to that package's resources.
            package: Importable package holding the bundled files.
        """
        if package is not None:
            self._resource_root = resources.files(package).joinpath(str(root))
        elif isinstance(root, (str, Path)):
            self._resource_root = Path(root)
        else:
            self._resource_root = root
        return self

    def to_directory(self, output_dir: Union[str, Path]) -> "LocalizationBuilder":
        self._output_dir = Path(output_dir)
        return self

    def with_languages(self, *languages: str) -> "LocalizationBuilder":
        self._languages = list(dict.fromkeys(languages))
        return self

    def with_default_language(self, language: str) -> "LocalizationBuilder":
        self._default_language = language
        return self

    def with_text_factory(self, factory: TextFactory) -> "LocalizationBuilder":
        self._text_factory = factory
        return self

    def with_converter(self, target: type, converter: Converter) -> "LocalizationBuilder":
        self._converters[target] = converter
        return self

    def with_replacer(self, target: type, replacer: Replacer) -> "LocalizationBuilder":
        self._replacers[target] = replacer
        return self

    def auto_update(self, enabled: bool = True) -> "LocalizationBuilder":
        self._auto_update = enabled
        return self

    def debug(self, enabled: bool = True) -> "LocalizationBuilder":
        self._debug = enabled
        return self

    def register_as(
        self, scope: Scope, key: Optional[Hashable] = None
    ) -> "LocalizationBuilder":
        """Add a registry scope to publish the context under.

        May be called several times. Without any call the context is
        registered by declared type.
        """
        self._scopes.append((Scope(scope), key))
        return self

    def with_registry(self, registry: ContextRegistry) -> "LocalizationBuilder":
        self._registry = registry
        return self

    def _validate(self) -> None:
        if self._taxonomy is None:
            raise BuilderError("A taxonomy is required (with_taxonomy)")
        if self._loader is None:
            raise BuilderError("A file format is required (with_format)")
        if not self._languages:
            raise BuilderError("At least one language is required (with_languages)")
        if self._resource_root is None and self._output_dir is None:
            raise BuilderError(
                "A resource root or an output directory is required "
                "(from_resource / to_directory)"
            )
        if self._auto_update and (self._resource_root is None or self._output_dir is None):
            raise BuilderError("auto_update requires both from_resource and to_directory")
        if self._output_type is not str and self._text_factory is None:
            raise BuilderError(
                f"A text factory is required for output type {self._output_type.__name__}"
            )
        for scope, key in self._scopes:
            if scope is Scope.CUSTOM_KEY and key is None:
                raise BuilderError("Scope.CUSTOM_KEY requires a key")

    def load(self, context: LocalizationContext) -> List[str]:
        """Sync (when enabled) and load every language into `context`.

        Also used to refresh an already published context in place; each
        language table is swapped atomically.

        Raises:
            BuilderError: If required configuration is missing.
        """
        self._validate()
        if self._auto_update:
            self.last_sync = sync_if_needed(
                self._resource_root,
                self._output_dir,
                self._languages,
                self._loader,
            )
        return load_into(
            context,
            self._loader,
            self._languages,
            self._taxonomy.table,
            output_dir=self._output_dir,
            resource_root=self._resource_root,
        )

    def build(self) -> LocalizationContext:
        """Load a new context and publish it to the registry.

        Raises:
            BuilderError: If required configuration is missing.
            TaxonomyError: If the taxonomy is malformed or empty.
        """
        self._validate()
        key_table = self._taxonomy.table

        context = LocalizationContext(
            key_type=self._taxonomy.key_type,
            output_type=self._output_type,
            text_factory=self._text_factory,
            default_language=self._default_language or get_settings().DEFAULT_LANGUAGE,
            debug=self._debug,
        )
        for target, converter in self._converters.items():
            context.register_converter(target, converter)
        for target, replacer in self._replacers.items():
            context.register_replacer(target, replacer)

        loaded = self.load(context)

        registry = self._registry or get_registry()
        for scope, key in self._scopes or [(Scope.DECLARED_TYPE, None)]:
            registry.register(context, scope, key)

        logger.info(
            "localization_context_built",
            key_type=self._taxonomy.key_type.__name__,
            key_count=len(key_table),
            languages=loaded,
        )
        return context
