"""Analysis passes run over a finished module collection.

Each pass is a callable ``(collection, stats) -> None`` that fills in the
shared :class:`CollectionStats` record. Register new passes with
:func:`register_analyser`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from code_link.graph.models import Module

if TYPE_CHECKING:
    from code_link.graph.collection import ModuleCollection


@dataclass
class CollectionStats:
    defined_modules: list[Module] = field(default_factory=list)
    orphan_modules: list[Module] = field(default_factory=list)
    number_of_exports: int = 0
    # tag -> modules exporting it, in registry order
    export_targets: dict[str, list[Module]] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "defined_modules": [m.name for m in self.defined_modules],
            "orphan_modules": [m.name for m in self.orphan_modules],
            "number_of_exports": self.number_of_exports,
            "export_targets": {
                tag: [m.name for m in modules]
                for tag, modules in self.export_targets.items()
            },
            **self.extra,
        }


Analyser = Callable[["ModuleCollection", CollectionStats], None]

ANALYSERS: list[Analyser] = []


def register_analyser(func: Analyser) -> Analyser:
    """Append ``func`` to the passes run by ``ModuleCollection.analyse``."""
    ANALYSERS.append(func)
    return func


@register_analyser
def classify_modules(collection: ModuleCollection, stats: CollectionStats) -> None:
    """Split modules into defined and orphaned, and count export tags."""
    for module in collection.modules.values():
        if module.defined:
            stats.defined_modules.append(module)
        else:
            stats.orphan_modules.append(module)
        stats.number_of_exports += len(module.exports)


@register_analyser
def collect_export_targets(collection: ModuleCollection, stats: CollectionStats) -> None:
    for module in collection.modules.values():
        for tag in module.exports:
            stats.export_targets.setdefault(tag, []).append(module)
