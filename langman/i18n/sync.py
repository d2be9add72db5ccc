"""Version-aware synchronisation of locale files with bundled defaults.

Bundled locale files ship with the application (a directory or a package
resource directory). The live copies sit in a writable output directory so
they can be edited. On sync, a missing live file is copied from the bundle,
and an existing one is replaced wholesale when the bundled `version` is
newer. Files are never merged.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

from langman.core.logging import get_module_logger
from langman.i18n.documents import VersionExtractor, extract_version, flatten_document
from langman.i18n.exceptions import DocumentError

logger = get_module_logger()

Version = Tuple[int, ...]


def parse_version(version: Optional[Any]) -> Optional[Version]:
    """Parse a dot-separated sequence of non-negative integers.

    A bare integer ("3") is accepted as a one-component version.

    Returns:
        Tuple of components, or None if the value is missing or any component
        is not a non-negative integer.
    """
    if version is None:
        return None
    text = str(version).strip()
    if not text:
        return None
    parts = text.split(".")
    if not all(part.isascii() and part.isdigit() for part in parts):
        return None
    return tuple(int(part) for part in parts)


def compare_versions(
    a: Union[str, Sequence[int]], b: Union[str, Sequence[int]]
) -> int:
    """Compare two versions component-wise, padding the shorter with zeros.

    Returns:
        Negative if a < b, zero if equal, positive if a > b.

    Raises:
        ValueError: If either string is not a valid version.
    """
    left = parse_version(a) if isinstance(a, str) else tuple(a)
    right = parse_version(b) if isinstance(b, str) else tuple(b)
    if left is None or right is None:
        raise ValueError(f"Invalid version comparison: {a!r} vs {b!r}")

    length = max(len(left), len(right))
    for index in range(length):
        av = left[index] if index < len(left) else 0
        bv = right[index] if index < len(right) else 0
        if av != bv:
            return av - bv
    return 0


@dataclass
class SyncReport:
    """Outcome of one sync run, by output file path."""

    copied: List[Path] = field(default_factory=list)
    updated: List[Path] = field(default_factory=list)
    unchanged: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)

    @property
    def writes(self) -> int:
        """Number of files written during the run."""
        return len(self.copied) + len(self.updated)


def read_version(
    source: Any, loader: Any, version_extractor: VersionExtractor = extract_version
) -> Optional[Version]:
    """Parse a locale file and extract its version.

    Raises:
        DocumentError: If the file cannot be parsed.
        OSError: If the file cannot be read.
    """
    tree = loader.parse_path(source)
    table = flatten_document(tree, keep_scalars=True)
    return parse_version(version_extractor(table))


def sync_if_needed(
    resource_root: Any,
    output_dir: Path,
    languages: Iterable[str],
    loader: Any,
    extensions: Optional[Iterable[str]] = None,
    version_extractor: VersionExtractor = extract_version,
) -> SyncReport:
    """Bring `output_dir` up to date with the bundled locale files.

    For every language and extension with a bundled file:
    - no output file: copy the bundled one;
    - bundled version missing or invalid: skip the file;
    - output version missing, invalid or older: overwrite it;
    - otherwise leave it untouched.

    I/O and parse failures are logged per file and never stop the run. The run
    is not transactional across files.

    Args:
        resource_root: Directory (Path or Traversable) of bundled files.
        output_dir: Writable directory of live files; created if missing.
        languages: Language codes to sync.
        loader: FileLoader used to parse both sides.
        extensions: Extensions to consider. Defaults to the loader's.
        version_extractor: Reads the version from a flattened document.

    Returns:
        SyncReport describing what happened to each output file.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    report = SyncReport()
    ordered_exts = sorted(extensions if extensions is not None else loader.extensions)

    for lang in languages:
        for ext in ordered_exts:
            file_name = f"{lang}.{ext}"
            resource = resource_root / file_name
            out_path = output_dir / file_name

            if not resource.is_file():
                logger.debug("bundled_locale_not_found", resource=str(resource))
                continue

            if not out_path.exists():
                try:
                    out_path.write_bytes(resource.read_bytes())
                except OSError as e:
                    logger.warning(
                        "locale_copy_failed", path=str(out_path), error=str(e)
                    )
                    report.skipped.append(out_path)
                    continue
                logger.info("locale_file_copied", path=str(out_path))
                report.copied.append(out_path)
                continue

            try:
                bundled_version = read_version(resource, loader, version_extractor)
            except (DocumentError, OSError) as e:
                logger.warning(
                    "bundled_locale_unreadable", resource=str(resource), error=str(e)
                )
                report.skipped.append(out_path)
                continue

            if bundled_version is None:
                logger.warning(
                    "bundled_locale_version_invalid", resource=str(resource)
                )
                report.skipped.append(out_path)
                continue

            try:
                file_version = read_version(out_path, loader, version_extractor)
            except (DocumentError, OSError) as e:
                logger.warning(
                    "locale_file_unreadable", path=str(out_path), error=str(e)
                )
                file_version = None

            if file_version is None or compare_versions(bundled_version, file_version) > 0:
                try:
                    out_path.write_bytes(resource.read_bytes())
                except OSError as e:
                    logger.warning(
                        "locale_update_failed", path=str(out_path), error=str(e)
                    )
                    report.skipped.append(out_path)
                    continue
                logger.info(
                    "locale_file_updated",
                    path=str(out_path),
                    from_version=_render(file_version),
                    to_version=_render(bundled_version),
                )
                report.updated.append(out_path)
            else:
                logger.debug(
                    "locale_file_current",
                    path=str(out_path),
                    version=_render(file_version),
                    bundled_version=_render(bundled_version),
                )
                report.unchanged.append(out_path)

    return report


def _render(version: Optional[Version]) -> str:
    return ".".join(str(part) for part in version) if version else "?"
