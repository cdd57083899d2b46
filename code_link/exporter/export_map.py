"""Write the Graphviz export map of a collection."""

from __future__ import annotations

import logging
from pathlib import Path

from code_link.exporter.bundle_writer import writeable_file
from code_link.graph import ModuleCollection

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_MAP = "codelink-map.gv"


def write_export_map(collection: ModuleCollection, path: Path, overwrite: bool = False) -> Path:
    target = writeable_file(path, DEFAULT_EXPORT_MAP, overwrite)
    target.write_text(collection.to_dot() + "\n", encoding="utf-8")
    logger.info("Wrote export map to %s", target)
    return target
