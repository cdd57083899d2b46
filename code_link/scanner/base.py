"""Abstract base scanner."""

from __future__ import annotations

import abc
import fnmatch
import logging
from pathlib import Path

from code_link.models import DEFAULT_SKIP_DIRS, ModuleDeclaration

logger = logging.getLogger(__name__)


class BaseScanner(abc.ABC):
    """Walks a directory tree and hands matching files to :meth:`scan_file`."""

    extensions: tuple[str, ...] = ()

    def __init__(
        self,
        skip_dirs: list[str] | None = None,
        extensions: tuple[str, ...] | None = None,
    ):
        self.skip_dirs = skip_dirs if skip_dirs is not None else list(DEFAULT_SKIP_DIRS)
        if extensions:
            self.extensions = tuple(
                ext if ext.startswith(".") else f".{ext}" for ext in extensions
            )

    @abc.abstractmethod
    def scan_file(self, file_path: Path) -> list[ModuleDeclaration]:
        """Scan a single file and return its module declarations."""

    def scan_directory(self, directory: Path) -> list[ModuleDeclaration]:
        """Recursively scan a directory, in sorted path order."""
        declarations: list[ModuleDeclaration] = []
        for path in sorted(directory.rglob("*")):
            if path.is_dir():
                continue
            relative = path.relative_to(directory)
            if self._should_skip(relative):
                continue
            if path.suffix in self.extensions:
                declarations.extend(self.scan_file(path))
        return declarations

    def _should_skip(self, path: Path) -> bool:
        for part in path.parts:
            if is_hidden(part):
                logger.debug("Skipping hidden path %s", path)
                return True
            for pattern in self.skip_dirs:
                if fnmatch.fnmatch(part, pattern):
                    return True
        return False


def is_hidden(part: str) -> bool:
    return part.startswith(".") and part not in (".", "..")
