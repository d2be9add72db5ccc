"""Message keys and the taxonomy that declares them.

A taxonomy is an explicit tree built by composition at import time:

    class ShopKey(MessageKey):
        pass

    SHOP = Taxonomy(
        ShopKey,
        KeyGroup("Errors", ShopKey("NotFound"), ShopKey("Forbidden")),
        KeyGroup("Tips", *item_keys(ShopKey, 3)),
        ShopKey("Welcome"),
    )

    SHOP.Errors.NotFound.path  # "errors.notfound"

Leaves are MessageKey instances, internal nodes are KeyGroups. Paths are the
lowercased simple names joined by dots, without the (unnamed) root. Positional
entries use the reserved names Item1, Item2, ... so they line up with
sequences in locale documents.
"""

from functools import cached_property
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

from langman.core.logging import LogLevel, get_module_logger
from langman.i18n.exceptions import DuplicateKeyPathError, TaxonomyError

logger = get_module_logger()


def normalize_path(path: str) -> str:
    """Return the normalised (lowercased) form of a dotted path."""
    return path.lower()


def _validate_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise TaxonomyError(f"Taxonomy node names must be non-empty strings: {name!r}")
    if "." in name:
        raise TaxonomyError(f"Taxonomy node names must not contain dots: {name!r}")
    return name


class _Node:
    """Shared naming and parent bookkeeping for taxonomy nodes."""

    __slots__ = ("_name", "_parent")

    def __init__(self, name: Optional[str]):
        self._name = name
        self._parent: Optional["KeyGroup"] = None

    @property
    def name(self) -> str:
        """Simple (declared) name of this node."""
        return self._name or ""

    @property
    def parent(self) -> Optional["KeyGroup"]:
        return self._parent

    @property
    def path(self) -> str:
        """Normalised dotted path from the taxonomy root to this node."""
        names = []
        node: Optional[_Node] = self
        while node is not None and node._name is not None:
            names.append(node._name)
            node = node._parent
        return normalize_path(".".join(reversed(names)))

    def _attach(self, parent: "KeyGroup") -> None:
        if self._parent is not None:
            raise TaxonomyError(
                f"{self!r} is already attached to {self._parent!r}"
            )
        self._parent = parent


class MessageKey(_Node):
    """Identity of one leaf message in a taxonomy.

    Subclass it once per taxonomy to get a distinct declared type; the registry
    uses that type (and its bases) to find the context serving a key.
    Instances hash by identity and are never mutated after being attached.
    """

    __slots__ = ()

    def __init__(self, name: str):
        super().__init__(_validate_name(name))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({(self.path or self.name)!r})"

    # Per-key accessors, resolved through the registry by declared type.

    def _context(self):
        from langman.i18n.registry import get_registry

        return get_registry().lookup_for_key(self)

    def raw_text(self, lang: Optional[str] = None) -> str:
        """Resolved text for `lang`, or the key's own name when unresolved."""
        return self._context().raw_text(self, lang)

    def format(self, *args: Any, lang: Optional[str] = None) -> str:
        """Raw text with `%s` placeholders filled from `args` in order."""
        return self._context().format(self, *args, lang=lang)

    def format_named(
        self, args: Mapping[str, Any], lang: Optional[str] = None
    ) -> str:
        """Raw text with every `%name%` replaced from `args`."""
        return self._context().format_named(self, args, lang)

    def message(
        self, args: Optional[Mapping[str, Any]] = None, lang: Optional[str] = None
    ) -> Any:
        """Formatted text passed through the context's text factory."""
        return self._context().message(self, args, lang)

    def convert(
        self,
        target: type,
        args: Optional[Mapping[str, Any]] = None,
        lang: Optional[str] = None,
    ) -> Any:
        return self._context().convert(self, target, args, lang)

    def has_message(self, lang: Optional[str] = None) -> bool:
        return self._context().has_message(self, lang)

    def log(self, level: LogLevel = LogLevel.INFO) -> None:
        """Log this key's simple name at the given level."""
        getattr(logger, LogLevel(level).value)(self.name, key_path=self.path)


TaxonomyNode = Union["KeyGroup", MessageKey]


class KeyGroup(_Node):
    """Internal taxonomy node grouping keys and nested groups.

    Children are reachable as attributes by their simple name
    (`group.NotFound`) or by dotted path (`group["errors.notfound"]`).
    """

    __slots__ = ("_children", "_index")

    def __init__(self, name: Optional[str], *children: TaxonomyNode):
        super().__init__(name if name is None else _validate_name(name))
        self._children: Tuple[TaxonomyNode, ...] = tuple(children)
        self._index: Dict[str, TaxonomyNode] = {}
        for child in self._children:
            if not isinstance(child, (KeyGroup, MessageKey)):
                raise TaxonomyError(
                    f"Taxonomy children must be KeyGroup or MessageKey, "
                    f"got {type(child).__name__}"
                )
            if isinstance(child, Taxonomy):
                raise TaxonomyError("A Taxonomy cannot be nested in another group")
            simple = normalize_path(child.name)
            if simple in self._index:
                raise DuplicateKeyPathError(self._child_path(simple))
            self._index[simple] = child
        for child in self._children:
            if child._parent is not None:
                raise TaxonomyError(
                    f"{child!r} is already attached to {child._parent!r}"
                )
        for child in self._children:
            child._attach(self)

    def _child_path(self, simple: str) -> str:
        return f"{self.path}.{simple}" if self.path else simple

    @property
    def children(self) -> Tuple[TaxonomyNode, ...]:
        return self._children

    def __iter__(self) -> Iterator[TaxonomyNode]:
        return iter(self._children)

    def __len__(self) -> int:
        return len(self._children)

    def __getattr__(self, name: str) -> TaxonomyNode:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._index[normalize_path(name)]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__} {self.path or '<root>'!r} has no child {name!r}"
            ) from None

    def __getitem__(self, path: str) -> TaxonomyNode:
        node: TaxonomyNode = self
        for part in normalize_path(path).split("."):
            if not isinstance(node, KeyGroup) or part not in node._index:
                raise KeyError(path)
            node = node._index[part]
        return node

    def __repr__(self) -> str:
        return f"KeyGroup({(self.path or self.name)!r}, children={len(self._children)})"


class Taxonomy(KeyGroup):
    """Root of a key taxonomy, bound to the MessageKey subclass of its leaves.

    Attributes:
        key_type: Declared type every leaf must be an instance of.
    """

    def __init__(self, key_type: type, *children: TaxonomyNode):
        if not (isinstance(key_type, type) and issubclass(key_type, MessageKey)):
            raise TaxonomyError(
                f"Taxonomy key_type must be a MessageKey subclass, got {key_type!r}"
            )
        self.key_type = key_type
        super().__init__(None, *children)

    @cached_property
    def table(self) -> Mapping[str, MessageKey]:
        """Flattened path table, computed once per taxonomy."""
        return MappingProxyType(flatten_taxonomy(self, self.key_type))

    def __repr__(self) -> str:
        return f"Taxonomy({self.key_type.__name__}, children={len(self.children)})"


def flatten_taxonomy(
    root: KeyGroup, key_type: Optional[type] = None
) -> Dict[str, MessageKey]:
    """Flatten a taxonomy into a `normalised path -> MessageKey` table.

    The root's own name is not part of any path. Traversal follows declaration
    order, so flattening the same tree twice yields identical tables.

    Args:
        root: Group to flatten.
        key_type: If given, every leaf must be an instance of it.

    Returns:
        Dict mapping each leaf's dotted path to its key.

    Raises:
        DuplicateKeyPathError: If two leaves produce the same path.
        TaxonomyError: If a leaf has the wrong type or there are no leaves.
    """
    if not isinstance(root, KeyGroup):
        raise TaxonomyError(f"Taxonomy root must be a KeyGroup, got {type(root).__name__}")

    result: Dict[str, MessageKey] = {}

    def scan(group: KeyGroup, prefix: str) -> None:
        for child in group.children:
            path = normalize_path(f"{prefix}.{child.name}" if prefix else child.name)
            if isinstance(child, MessageKey):
                if key_type is not None and not isinstance(child, key_type):
                    raise TaxonomyError(
                        f"Key {path!r} is a {type(child).__name__}, "
                        f"expected {key_type.__name__}"
                    )
                if path in result:
                    raise DuplicateKeyPathError(path)
                result[path] = child
            else:
                scan(child, path)

    scan(root, "")

    if not result:
        raise TaxonomyError("Taxonomy declares no message keys")

    logger.debug("taxonomy_flattened", key_count=len(result))
    return result


def item_keys(key_type: type, count: int) -> Tuple[MessageKey, ...]:
    """Create `count` positional keys named Item1..ItemN."""
    return tuple(key_type(f"Item{index}") for index in range(1, count + 1))
