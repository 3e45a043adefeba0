"""Scope chain for the Q interpreter.

Scopes live in an arena (a list) and point at their parent by index, so pushing a scope never copies its ancestors.
Because scopes are pushed and popped in strictly nested pairs, the innermost scope is always the last one in the arena.
"""

from qlang.lang.error import GenericException


class UndefinedSymbol(GenericException):

    def __init__(self, id):
        self.id = id
        super().__init__("'{}' has not been defined", str(id))


class ScopeUnderflow(GenericException):

    def __init__(self):
        super().__init__("attempted to pop the root scope", internal=True)


class Scope:
    """Bindings of one lexical level. parent is the arena index of the enclosing scope, or None for the root."""

    def __init__(self, parent=None):
        self.parent = parent
        self.bindings = {}

    def __repr__(self):
        return f"Scope(parent={self.parent}, bindings={self.bindings})"


class Environment:
    """Maps Ids to values, innermost scope first."""

    def __init__(self):
        self.scopes = [Scope()]
        self.current = 0

    @property
    def depth(self):
        """Number of live scopes, the root included."""
        return len(self.scopes)

    def push_scope(self):
        self.scopes.append(Scope(parent=self.current))
        self.current = len(self.scopes) - 1

    def pop_scope(self):
        parent = self.scopes[self.current].parent
        if parent is None:
            raise ScopeUnderflow()

        self.scopes.pop()
        self.current = parent

    def bind(self, id, value):
        """Binds id in the innermost scope only, shadowing (never overwriting) any binding further out."""
        self.scopes[self.current].bindings[id] = value

    def define(self, id, value):
        """Binds id in the root scope, whatever the current scope is."""
        self.scopes[0].bindings[id] = value

    def lookup(self, id):
        index = self.current
        while index is not None:
            scope = self.scopes[index]
            if id in scope.bindings:
                return scope.bindings[id]
            index = scope.parent

        raise UndefinedSymbol(id)
