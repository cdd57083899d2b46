"""Connectivity indexing and cycle-detecting topological sort.

Both traversals use explicit stacks so that long requirement chains cannot
exhaust the interpreter's recursion limit. Visitation state lives in maps
local to each call; modules themselves are never marked.
"""

from __future__ import annotations

import logging
from typing import Iterator, Mapping

from code_link.errors import CyclicDependency
from code_link.graph.models import Module

logger = logging.getLogger(__name__)

# DFS colours
_VISITING = 1
_SORTED = 2


def index_components(modules: Mapping[str, Module]) -> dict[str, int]:
    """Assign every module the id of its weakly-connected component.

    Modules are visited in registry order; each newly discovered component
    takes the next integer id, starting at 0.
    """
    index: dict[str, int] = {}
    next_id = 0

    for name in modules:
        if name in index:
            continue
        index[name] = next_id
        stack = [name]
        while stack:
            module = modules[stack.pop()]
            # Edges are followed in both directions.
            for neighbour in (*module.requires, *module.dependants):
                if neighbour not in index:
                    index[neighbour] = next_id
                    stack.append(neighbour)
        next_id += 1

    logger.debug("Indexed %d module(s) into %d component(s)", len(index), next_id)
    return index


def topological_buckets(
    modules: Mapping[str, Module],
    index: Mapping[str, int],
) -> list[list[Module]]:
    """Return one dependency-ordered bucket per component.

    Depth-first postorder along ``requires`` edges: a module is appended to
    its component's bucket only after all of its requirements. Re-entering a
    module that is still being visited raises :class:`CyclicDependency` and
    no order is returned.
    """
    state: dict[str, int] = {}
    buckets: dict[int, list[Module]] = {}

    for root in modules:
        if root in state:
            continue

        state[root] = _VISITING
        stack: list[tuple[str, Iterator[str]]] = [(root, iter(modules[root].requires))]
        while stack:
            name, pending = stack[-1]
            for requirement in pending:
                colour = state.get(requirement)
                if colour == _VISITING:
                    raise CyclicDependency(requirement)
                if colour is None:
                    state[requirement] = _VISITING
                    stack.append((requirement, iter(modules[requirement].requires)))
                    break
            else:
                stack.pop()
                state[name] = _SORTED
                buckets.setdefault(index[name], []).append(modules[name])

    # Only populated component ids, in ascending order.
    return [buckets[component] for component in sorted(buckets)]
