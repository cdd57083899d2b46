"""Module dependency graph: vertices, edges, ordering and analysis."""

from code_link.graph.analysers import ANALYSERS, CollectionStats, register_analyser
from code_link.graph.collection import ModuleCollection
from code_link.graph.models import Dependency, Module

__all__ = [
    "ANALYSERS",
    "CollectionStats",
    "Dependency",
    "Module",
    "ModuleCollection",
    "register_analyser",
]
