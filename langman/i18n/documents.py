"""Flattening of parsed locale documents into dotted path tables.

A document tree is whatever a parser returns: string scalars, string-keyed
mappings and sequences, nested arbitrarily. Flattening yields the same path
space as the key taxonomy:

    {"errors": {"notfound": "Not found"}, "tips": ["a", "b"]}
    -> {"errors.notfound": "Not found", "tips.item1": "a", "tips.item2": "b"}
"""

from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from langman.core.logging import get_module_logger
from langman.i18n.exceptions import DocumentError

logger = get_module_logger()

ITEM_PREFIX = "item"
VERSION_FIELD = "version"

VersionExtractor = Callable[[Mapping[str, str]], Optional[str]]


def _scalar_text(value: Any, keep_scalars: bool) -> Optional[str]:
    if isinstance(value, str):
        return value
    # bool is an int subclass; true/false are never a message or a version
    if keep_scalars and isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def flatten_document(
    tree: Any,
    parent: str = "",
    keep_scalars: bool = False,
) -> Dict[str, str]:
    """Flatten a document tree into a `normalised path -> text` table.

    Mappings contribute `.key` segments and sequences `.item<N>` segments
    (1-based). Inside sequences only strings and mappings are kept. Values of
    any other type (numbers, booleans, nulls, nested sequences in sequences)
    are dropped rather than coerced, so a partially malformed document still
    yields every usable entry.

    Args:
        tree: Parsed document; the root must be a mapping.
        parent: Path prefix for every emitted entry.
        keep_scalars: Also emit int and float scalars as text. Used for
            version extraction, where YAML and TOML hand back numbers.

    Returns:
        Dict mapping lowercased dotted paths to text.

    Raises:
        DocumentError: If the root is not a mapping.
    """
    if not isinstance(tree, Mapping):
        raise DocumentError(
            f"Document root must be a mapping, got {type(tree).__name__}"
        )

    result: Dict[str, str] = {}

    def emit(path: str, text: str) -> None:
        normalized = path.lower()
        if normalized in result:
            logger.debug("document_path_shadowed", path=normalized)
        result[normalized] = text

    def walk_mapping(data: Mapping, prefix: str) -> None:
        for key, value in data.items():
            if not isinstance(key, str) or value is None:
                continue
            path = f"{prefix}.{key}" if prefix else key
            walk_value(value, path)

    def walk_value(value: Any, path: str) -> None:
        if isinstance(value, Mapping):
            walk_mapping(value, path)
            return
        if _is_sequence(value):
            for index, item in enumerate(value, start=1):
                item_path = f"{path}.{ITEM_PREFIX}{index}"
                if isinstance(item, Mapping):
                    walk_mapping(item, item_path)
                    continue
                text = _scalar_text(item, keep_scalars)
                if text is not None:
                    emit(item_path, text)
            return
        text = _scalar_text(value, keep_scalars)
        if text is not None:
            emit(path, text)

    walk_mapping(tree, parent)
    return result


def extract_version(table: Mapping[str, str]) -> Optional[str]:
    """Default version extractor: the top-level `version` entry."""
    value = table.get(VERSION_FIELD)
    return value.strip() if isinstance(value, str) and value.strip() else None
