"""Concatenate module sources into bundle files in build order."""

from __future__ import annotations

import logging
from pathlib import Path

from code_link.errors import OutputError
from code_link.graph import CollectionStats, Module, ModuleCollection
from code_link.scanner.base import is_hidden

logger = logging.getLogger(__name__)


def _is_directory_like(path: str) -> bool:
    return path in (".", "..") or path.endswith(("/", "\\"))


def output_path(path: str | Path, default_path: str | Path) -> Path:
    """Apply the default file name to ``path`` without creating anything.

    A blank ``path`` becomes ``default_path``. A directory-like one (ending in
    a separator, or an existing directory) receives its file name.
    """
    raw = str(path) if path else ""
    default = str(default_path) if default_path else ""
    if not default:
        raise OutputError("Path cannot be blank.")
    if _is_directory_like(default):
        raise OutputError("Path (default) cannot be a directory.")
    if not raw:
        raw = default

    if _is_directory_like(raw) or Path(raw).is_dir():
        raw = str(Path(raw) / Path(default).name)
    if any(is_hidden(part) for part in Path(raw).parts):
        raise OutputError(f'Cannot output to hidden file "{raw}".')
    return Path(raw)


def writeable_file(path: str | Path, default_path: str | Path, overwrite: bool = False) -> Path:
    """Resolve ``path`` into a file that may be written.

    Missing parent directories are created; an existing file is refused
    unless ``overwrite`` is set.
    """
    raw = output_path(path, default_path)
    resolved = raw.resolve()
    if resolved.exists():
        if not resolved.is_file():
            raise OutputError(f'The output path "{raw}" does not point to a file.')
        if not overwrite:
            raise OutputError(f'Cannot overwrite "{raw}"')
    else:
        for parent in reversed(resolved.parents):
            if parent.exists() and not parent.is_dir():
                raise OutputError(f'Cannot write to "{raw}" since "{parent}" is not a directory.')
        resolved.parent.mkdir(parents=True, exist_ok=True)
    return resolved


def bundle_sources(modules: list[Module]) -> list[str]:
    """Source paths of ``modules`` in order, each file listed once."""
    sources: list[str] = []
    seen: set[str] = set()
    for module in modules:
        # Orphans have no file to contribute.
        if module.source is None or module.source in seen:
            continue
        seen.add(module.source)
        sources.append(module.source)
    return sources


def write_bundle(modules: list[Module], destination: Path) -> Path:
    """Write the contents of every module's source file to ``destination``."""
    chunks = []
    for source in bundle_sources(modules):
        chunks.append(Path(source).read_text(encoding="utf-8", errors="replace").rstrip("\n"))

    destination.write_text("\n".join(chunks) + "\n", encoding="utf-8")
    logger.info("Wrote %d source file(s) to %s", len(chunks), destination)
    return destination


def write_export_bundles(
    collection: ModuleCollection,
    order: list[list[Module]],
    stats: CollectionStats,
    destination: Path,
    overwrite: bool = False,
) -> list[Path]:
    """Write one bundle per export tag next to ``destination``.

    Each bundle holds the exported modules and everything they require,
    in the global build order.
    """
    flat = [module for bucket in order for module in bucket]
    written: list[Path] = []
    for tag, exported in stats.export_targets.items():
        wanted = collection.closure(module.name for module in exported)
        target = writeable_file(
            destination.parent / f"{tag}{destination.suffix}", destination, overwrite,
        )
        written.append(write_bundle([m for m in flat if m.name in wanted], target))
    return written
