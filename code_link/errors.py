"""Errors raised while declaring, ordering and writing modules."""

from __future__ import annotations


class LinkError(Exception):
    """Base class for every error raised by code-link."""


class InvalidName(LinkError, TypeError):
    """A module name or source path is blank or missing."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Not a valid name: {value!r}")


class DuplicateDefinition(LinkError):
    def __init__(self, name: str, source: str, previous_source: str):
        self.name = name
        self.source = source
        self.previous_source = previous_source
        super().__init__(
            f"Duplicate definition of {name} at: {source}\n\n"
            f"Already defined by {previous_source}"
        )


class SelfDependency(LinkError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Module {name} cannot depend on itself!")


class DuplicateEdge(LinkError):
    def __init__(self, name: str, requirement: str):
        self.name = name
        self.requirement = requirement
        super().__init__(f"{requirement} already marked as requirement of {name}")


class CyclicDependency(LinkError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Cyclic dependency error discovered while parsing: {name}")


class UndefinedModules(LinkError):
    """Raised in strict mode when modules are required but never defined."""

    def __init__(self, names: list[str]):
        self.names = names
        super().__init__(
            f"{len(names)} module(s) required but not defined: {', '.join(names)}"
        )


class ConfigError(LinkError):
    def __init__(self, path: object, reason: str):
        self.path = path
        super().__init__(f"Unable to read config file: {path}\n{reason}")


class OutputError(LinkError):
    """The destination path cannot be written."""
