"""Link pipeline orchestrator: scan -> build -> analyse -> serialize -> write."""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from code_link.errors import UndefinedModules
from code_link.exporter import (
    generate_manifest,
    output_path,
    write_bundle,
    write_export_bundles,
    write_export_map,
    writeable_file,
)
from code_link.graph import ModuleCollection
from code_link.models import LinkConfig, LinkResult, ModuleDeclaration
from code_link.scanner import scan_directory

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], None]


def run_scan(config: LinkConfig, progress: ProgressCallback | None = None) -> list[ModuleDeclaration]:
    """Stage 1: Scan the source directory."""
    if progress:
        progress("Scanning", 0, 1)
    declarations = scan_directory(
        config.source_dir,
        skip_dirs=config.skip_dirs,
        extensions=config.include_extensions,
    )
    if progress:
        progress("Scanning", 1, 1)
    logger.info("Found %d module declaration(s) in %s", len(declarations), config.source_dir)
    return declarations


def build_collection(declarations: Iterable[ModuleDeclaration]) -> ModuleCollection:
    """Stage 2: Feed declarations into a new collection.

    All modules are defined before any requirement is connected, so that
    errors name the declaring file regardless of scan order.
    """
    declarations = list(declarations)
    collection = ModuleCollection()

    for declaration in declarations:
        module = collection.add(declaration.module_name, declaration.source)
        for tag in declaration.exports:
            module.add_export(tag)

    for declaration in declarations:
        for requirement in declaration.requires:
            collection.connect(declaration.module_name, requirement)

    logger.info(
        "Built collection of %d module(s) and %d dependency(ies)",
        collection.number_of_modules, collection.number_of_dependencies,
    )
    return collection


def run_link(config: LinkConfig, progress: ProgressCallback | None = None) -> LinkResult:
    """Run the full link pipeline."""
    declarations = run_scan(config, progress)

    if progress:
        progress("Linking", 0, 1)
    collection = build_collection(declarations)
    stats = collection.analyse()

    if stats.orphan_modules:
        names = [module.name for module in stats.orphan_modules]
        if config.strict:
            raise UndefinedModules(names)
        logger.warning("Modules required but not defined: %s", ", ".join(names))

    order = collection.serialize()
    if progress:
        progress("Linking", 1, 1)

    result = LinkResult(
        order=order,
        stats=stats,
        number_of_modules=collection.number_of_modules,
        number_of_dependencies=collection.number_of_dependencies,
    )

    if config.test:
        logger.info("Test mode: no files written")
        return result

    if progress:
        progress("Writing", 0, 1)

    default = LinkConfig().destination
    if stats.number_of_exports:
        # Only the per-tag bundles are written, next to the destination.
        destination = output_path(config.destination, default).resolve()
        result.files_created.extend(
            write_export_bundles(collection, order, stats, destination, config.overwrite)
        )
    else:
        destination = writeable_file(config.destination, default, config.overwrite)
        result.files_created.append(write_bundle(result.flat_order, destination))

    if config.export_map:
        result.export_map_path = write_export_map(collection, config.export_map, config.overwrite)
        result.files_created.append(result.export_map_path)

    if config.manifest:
        result.manifest_path = generate_manifest(result, config.source_dir, destination.parent)
        result.files_created.append(result.manifest_path)

    if progress:
        progress("Writing", 1, 1)

    return result
