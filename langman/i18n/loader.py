"""Locale file loading interface and implementations.

Defines the contract for parsing locale documents and provides YAML, JSON and
TOML based loaders. Loaders only turn bytes into a document tree; flattening
and key resolution are shared by every format.
"""

import json
import tomllib
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, BinaryIO, Dict, FrozenSet, Mapping, Union

import yaml

from langman.core.logging import get_module_logger
from langman.i18n.documents import flatten_document
from langman.i18n.exceptions import DocumentError, DocumentParseError
from langman.i18n.keys import MessageKey
from langman.i18n.resolver import resolve

logger = get_module_logger()


class FileLoader(ABC):
    """Abstract base for locale file loaders.

    Implementations must define which extensions they recognise and how to
    parse a byte stream into a document tree.
    """

    extensions: FrozenSet[str] = frozenset()

    @abstractmethod
    def parse_stream(self, stream: BinaryIO) -> Any:
        """Parse a binary stream into a raw document tree.

        Raises:
            Exception: Whatever the underlying parser raises.
        """
        pass

    def parse(self, stream: BinaryIO) -> Dict[str, Any]:
        """Parse a binary stream into a document tree with a mapping root.

        Args:
            stream: Binary stream positioned at the start of the document.

        Returns:
            Parsed document; an empty document yields an empty dict.

        Raises:
            DocumentParseError: If the parser fails.
            DocumentError: If the top level is not a mapping.
        """
        try:
            data = self.parse_stream(stream)
        except DocumentError:
            raise
        except Exception as e:
            raise DocumentParseError(
                f"Failed to parse {type(self).__name__} document: {e}"
            ) from e

        if data is None:
            return {}
        if not isinstance(data, Mapping):
            raise DocumentError(
                f"Invalid document format: top level must be a mapping, "
                f"got {type(data).__name__}"
            )
        return dict(data)

    def parse_path(self, path: Any) -> Dict[str, Any]:
        """Parse a file given as a Path or an importlib.resources Traversable."""
        with path.open("rb") as stream:
            try:
                return self.parse(stream)
            except DocumentError as e:
                raise type(e)(f"{path}: {e}") from e

    def flatten(self, data: Any, parent: str = "") -> Dict[str, str]:
        return flatten_document(data, parent)

    def resolve(
        self, data: Any, key_table: Mapping[str, MessageKey]
    ) -> Dict[MessageKey, str]:
        """Resolve a parsed document against a flattened taxonomy."""
        return resolve(key_table, self.flatten(data))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(extensions={sorted(self.extensions)})"


class YAMLFileLoader(FileLoader):
    """Loader for YAML locale files (PyYAML safe loader)."""

    extensions = frozenset({"yml", "yaml"})

    def parse_stream(self, stream: BinaryIO) -> Any:
        return yaml.safe_load(stream)


class JSONFileLoader(FileLoader):
    """Loader for JSON locale files."""

    extensions = frozenset({"json"})

    def parse_stream(self, stream: BinaryIO) -> Any:
        return json.load(stream)


class TOMLFileLoader(FileLoader):
    """Loader for TOML locale files."""

    extensions = frozenset({"toml"})

    def parse_stream(self, stream: BinaryIO) -> Any:
        return tomllib.load(stream)


class FileFormat(str, Enum):
    """Supported locale file formats."""

    YAML = "yaml"
    JSON = "json"
    TOML = "toml"

    @classmethod
    def from_string(cls, format_str: str) -> "FileFormat":
        """Convert a string such as "yaml" or "yml" to a FileFormat.

        Raises:
            ValueError: If the format is not supported.
        """
        normalized = format_str.strip().lower()
        if normalized == "yml":
            normalized = "yaml"
        try:
            return cls(normalized)
        except ValueError as e:
            raise ValueError(f"Unsupported file format: {format_str}") from e

    def create_loader(self) -> FileLoader:
        return _LOADERS[self]()

    @property
    def extensions(self) -> FrozenSet[str]:
        return _LOADERS[self].extensions


_LOADERS = {
    FileFormat.YAML: YAMLFileLoader,
    FileFormat.JSON: JSONFileLoader,
    FileFormat.TOML: TOMLFileLoader,
}

LoaderSpec = Union[FileLoader, FileFormat, str]


def get_loader(spec: LoaderSpec) -> FileLoader:
    """Return a loader for a FileLoader instance, FileFormat or format name."""
    if isinstance(spec, FileLoader):
        return spec
    if isinstance(spec, FileFormat):
        return spec.create_loader()
    return FileFormat.from_string(spec).create_loader()
