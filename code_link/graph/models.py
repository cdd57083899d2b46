"""Vertex and edge records of the module graph.

Adjacency is stored as ordered sets of module *names* on both endpoints, so
modules never hold references to each other. The owning
:class:`~code_link.graph.collection.ModuleCollection` resolves names back to
:class:`Module` instances.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from code_link.errors import DuplicateDefinition, DuplicateEdge, InvalidName, SelfDependency


def string_like(value: object) -> str:
    """Coerce a name-like value to a trimmed, non-blank string."""
    if value is None or value is False:
        raise InvalidName(value)
    text = str(value).strip()
    if not text:
        raise InvalidName(value)
    return text


@dataclass(eq=False)
class Module:
    """A named vertex, defined once it is associated with a source file."""

    name: str
    source: str | None = None
    # Ordered sets of module names (dict keys keep insertion order).
    requires: dict[str, None] = field(default_factory=dict, repr=False)
    dependants: dict[str, None] = field(default_factory=dict, repr=False)
    exports: list[str] = field(default_factory=list, repr=False)

    def __post_init__(self):
        self.name = string_like(self.name)
        source, self.source = self.source, None
        if source is not None:
            self.define(source)

    def __str__(self) -> str:
        return self.name

    @property
    def defined(self) -> bool:
        return self.source is not None

    @property
    def number_of_requirements(self) -> int:
        return len(self.requires)

    @property
    def number_of_dependants(self) -> int:
        return len(self.dependants)

    def define(self, source: object) -> Module:
        """Mark the module as defined by ``source``. Redefinition is an error."""
        source = string_like(source)
        if self.defined:
            raise DuplicateDefinition(self.name, source, self.source)
        self.source = source
        return self

    def require(self, requirement: Module) -> Module:
        """Record that this module needs ``requirement`` on both endpoints."""
        if requirement.name == self.name:
            raise SelfDependency(self.name)
        if requirement.name in self.requires or self.name in requirement.dependants:
            raise DuplicateEdge(self.name, requirement.name)

        self.requires[requirement.name] = None
        requirement.dependants[self.name] = None
        return self

    def add_export(self, tag: str | None = None) -> Module:
        # Without a tag the module exports itself under its own name.
        tag = tag.strip() if tag else ""
        if not tag:
            tag = self.name
        if tag not in self.exports:
            self.exports.append(tag)
        return self

    def clone(self) -> Module:
        """Return an unconnected copy carrying the same name and source."""
        return Module(self.name, self.source)


def quote_name(text: str) -> str:
    return text.replace('"', '\\"')


@dataclass(frozen=True)
class Dependency:
    """A directed ``module -> requirement`` edge.

    Use :meth:`link` to create one; it validates and records the edge on
    both modules before the record exists.
    """

    module: Module
    requirement: Module

    @classmethod
    def link(cls, module: Module, requirement: Module) -> Dependency:
        module.require(requirement)
        return cls(module, requirement)

    def __str__(self) -> str:
        return f'"{quote_name(self.module.name)}"->"{quote_name(self.requirement.name)}";'
