"""Data models for the code-link pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from code_link.graph import CollectionStats, Module


DEFAULT_SKIP_DIRS = [
    "node_modules", ".git", "__pycache__", "build", "dist",
    ".next", ".venv", "venv", "env", "*.egg-info",
]


@dataclass
class ModuleDeclaration:
    """One ``@module`` block found by the scanner."""
    module_name: str
    source: str
    requires: list[str] = field(default_factory=list)
    exports: list[str | None] = field(default_factory=list)
    line_number: int = 1


@dataclass
class LinkConfig:
    """Configuration for the link pipeline."""
    source_dir: Path = field(default_factory=lambda: Path("."))
    # kept raw: a trailing separator means "default file name in this folder"
    destination: str | Path = "out/combined.js"
    include_extensions: tuple[str, ...] = (".js",)
    skip_dirs: list[str] = field(default_factory=lambda: list(DEFAULT_SKIP_DIRS))
    overwrite: bool = False
    strict: bool = False
    test: bool = False  # dry run: order everything, write nothing
    export_map: Path | None = None
    manifest: bool = False


@dataclass
class LinkResult:
    """Result of a full link run."""
    order: list[list[Module]]
    stats: CollectionStats
    number_of_modules: int = 0
    number_of_dependencies: int = 0
    files_created: list[Path] = field(default_factory=list)
    export_map_path: Path | None = None
    manifest_path: Path | None = None

    @property
    def flat_order(self) -> list[Module]:
        return [module for bucket in self.order for module in bucket]
