"""
Simian Environment
==================
A chain of lexical scopes. Each scope owns its bindings and points at the
scope it is nested in. Functions keep a reference to the scope they were
defined in, so a scope lives as long as any closure or active frame uses it.
"""
from __future__ import annotations

from .errors import SimianError, identifier_already_exists, identifier_not_found
from .objects import Object


class Environment:
    """
    A single scope plus an optional enclosing scope.

    Usage:
        env = Environment()
        env.define("x", Integer(1))
        inner = env.enclose()
        inner.assign("x", Integer(2))   # updates the outer binding
    """

    def __init__(self, outer: Environment | None = None):
        self.store: dict[str, Object] = {}
        self.outer = outer

    def enclose(self) -> Environment:
        """Create a new scope nested inside this one."""
        return Environment(outer=self)

    def get(self, name: str) -> Object | None:
        """Look a name up here, then outward through enclosing scopes."""
        env: Environment | None = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def define(self, name: str, value: Object) -> Object:
        """Create a new binding in this scope. Shadowing outer scopes is allowed."""
        if name in self.store:
            raise SimianError(identifier_already_exists(name))
        self.store[name] = value
        return value

    def assign(self, name: str, value: Object) -> Object:
        """Update the nearest existing binding of ``name``."""
        env: Environment | None = self
        while env is not None:
            if name in env.store:
                env.store[name] = value
                return value
            env = env.outer
        raise SimianError(identifier_not_found(name))

    def define_or_assign(self, name: str, value: Object) -> Object:
        """Create or overwrite a binding in this scope only."""
        self.store[name] = value
        return value
