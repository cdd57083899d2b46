"""Scanners that read module declarations out of source files."""

from __future__ import annotations

from pathlib import Path

from code_link.models import ModuleDeclaration
from code_link.scanner.annotation_scanner import AnnotationScanner
from code_link.scanner.base import BaseScanner
from code_link.scanner.comments import Comment, iter_comments


def scan_directory(
    directory: Path,
    skip_dirs: list[str] | None = None,
    extensions: tuple[str, ...] | None = None,
) -> list[ModuleDeclaration]:
    """Scan a directory for module declarations."""
    scanner = AnnotationScanner(skip_dirs=skip_dirs, extensions=extensions)
    return scanner.scan_directory(directory)


__all__ = [
    "AnnotationScanner",
    "BaseScanner",
    "Comment",
    "iter_comments",
    "scan_directory",
]
