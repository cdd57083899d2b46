"""Exporter layer."""

from code_link.exporter.bundle_writer import (
    bundle_sources,
    output_path,
    write_bundle,
    write_export_bundles,
    writeable_file,
)
from code_link.exporter.export_map import write_export_map
from code_link.exporter.manifest_generator import generate_manifest

__all__ = [
    "bundle_sources",
    "generate_manifest",
    "output_path",
    "write_bundle",
    "write_export_bundles",
    "write_export_map",
    "writeable_file",
]
