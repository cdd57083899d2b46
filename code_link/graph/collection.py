"""The module collection: a directed graph of modules and their requirements."""

from __future__ import annotations

import logging
from typing import Iterable

from code_link.graph.analysers import ANALYSERS, CollectionStats
from code_link.graph.models import Dependency, Module, quote_name, string_like
from code_link.graph.ordering import index_components, topological_buckets

logger = logging.getLogger(__name__)


class ModuleCollection:
    """Owns every module (vertex) and dependency (edge) of one link run.

    Modules are created lazily the first time they are named, either by
    :meth:`add` or as the target of :meth:`connect`. Only :meth:`add`
    defines them with a source file.
    """

    def __init__(self):
        self.modules: dict[str, Module] = {}
        # source path -> {module name: module}; one file may define several modules
        self.sources: dict[str, dict[str, Module]] = {}
        self.dependencies: list[Dependency] = []
        self.number_of_modules = 0
        self.number_of_dependencies = 0

    def __len__(self) -> int:
        return self.number_of_modules

    def __contains__(self, name: object) -> bool:
        return str(name).strip() in self.modules

    def get(self, name: object) -> Module | None:
        return self.modules.get(string_like(name))

    def get_or_create(self, name: object) -> Module:
        name = string_like(name)
        module = self.modules.get(name)
        if module is None:
            module = self.modules[name] = Module(name)
            self.number_of_modules += 1
        return module

    def get_by_source(self, source: object) -> list[Module]:
        return list(self.sources.get(string_like(source), {}).values())

    def add(self, name: object, source: object) -> Module:
        """Define module ``name`` as provided by ``source``."""
        module = self.get_or_create(name).define(source)
        self.sources.setdefault(module.source, {})[module.name] = module
        return module

    def connect(self, name: object, requirement: object) -> Dependency:
        """Mark module ``name`` as requiring module ``requirement``."""
        dependency = Dependency.link(self.get_or_create(name), self.get_or_create(requirement))
        self.dependencies.append(dependency)
        self.number_of_dependencies += 1
        return dependency

    def requirements_of(self, module: Module) -> list[Module]:
        return [self.modules[name] for name in module.requires]

    def dependants_of(self, module: Module) -> list[Module]:
        return [self.modules[name] for name in module.dependants]

    def closure(self, names: Iterable[object]) -> set[str]:
        """Names of the given modules plus everything they transitively require."""
        seen: set[str] = set()
        stack = [string_like(name) for name in names]
        while stack:
            name = stack.pop()
            if name in seen:
                continue
            seen.add(name)
            stack.extend(self.modules[name].requires)
        return seen

    def analyse(self) -> CollectionStats:
        """Run every registered analyser and return fresh statistics.

        This walks the whole collection; cache the result when reusing it.
        """
        stats = CollectionStats()
        for analyser in ANALYSERS:
            analyser(self, stats)
        return stats

    def clone(self) -> ModuleCollection:
        """Return an independent collection with the same modules and edges."""
        clone = ModuleCollection()
        for module in self.modules.values():
            if module.defined:
                clone.add(module.name, module.source)
            else:
                clone.get_or_create(module.name)
            for tag in module.exports:
                clone.modules[module.name].add_export(tag)

        for dependency in self.dependencies:
            clone.connect(dependency.module.name, dependency.requirement.name)
        return clone

    def serialize(self) -> list[list[Module]]:
        """Return modules in build order, one bucket per connected component.

        Every module appears after all modules it requires. Raises
        :class:`~code_link.errors.CyclicDependency` when the requirements
        contain a cycle.
        """
        index = index_components(self.modules)
        buckets = topological_buckets(self.modules, index)
        logger.debug(
            "Serialized %d module(s) into %d bucket(s)", self.number_of_modules, len(buckets),
        )
        return buckets

    def to_dot(self) -> str:
        """Render the collection as a Graphviz digraph."""
        lines = ["digraph codelink {"]
        for module in self.modules.values():
            # Modules nothing depends on are drawn as isolated nodes.
            if module.dependants:
                for dependant in module.dependants:
                    lines.append(f'"{quote_name(module.name)}"->"{quote_name(dependant)}";')
            else:
                lines.append(f'"{quote_name(module.name)}";')
        lines.append("}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.to_dot()
