"""Parse tree of the Q language. Trees are built once by the Parser and never mutated afterwards: every node is a frozen
dataclass and children are held in tuples, so equality is structural and nodes are hashable.

str() of any node renders Q source that parses back into an equal node.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Id:
    name: str

    def __str__(self):
        return self.name


class Expression(ABC):
    """Superclass of every expression. LiteralString and Function are values: they evaluate to themselves."""


class Pattern(ABC):
    """Superclass of clause parameter patterns."""

    @abstractmethod
    def match(self, value):
        """Returns a list of (Id, value) bindings if value is accepted by this pattern, else None."""


@dataclass(frozen=True)
class Bind(Pattern):
    """Irrefutable capture of the argument under id. The only pattern the grammar produces."""
    id: Id

    def match(self, value):
        return [(self.id, value)]

    def __str__(self):
        return str(self.id)


@dataclass(frozen=True)
class Wildcard(Pattern):
    """Accepts anything, binds nothing."""

    def match(self, value):
        return []

    def __str__(self):
        return "_"


@dataclass(frozen=True)
class Literal(Pattern):
    """Accepts only values structurally equal to value."""
    value: Expression

    def match(self, value):
        return [] if value == self.value else None

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class LiteralString(Expression):
    value: str

    def __str__(self):
        return f"\"{self.value}\""


@dataclass(frozen=True)
class Variable(Expression):
    id: Id

    def __str__(self):
        return str(self.id)


@dataclass(frozen=True)
class Call(Expression):
    id: Id
    args: tuple = ()

    def __str__(self):
        return f"{self.id}({', '.join(str(arg) for arg in self.args)})"


@dataclass(frozen=True)
class FunClause:
    args: tuple
    body: Expression

    @property
    def arity(self):
        return len(self.args)

    def __str__(self):
        return f"({', '.join(str(arg) for arg in self.args)}) {{ {self.body} }}"


@dataclass(frozen=True)
class Function(Expression):
    """Function value: clauses are tried in source order when the function is called."""
    clauses: tuple

    def __post_init__(self):
        assert self.clauses, "a function needs at least one clause"

    def __str__(self):
        return "; ".join(str(clause) for clause in self.clauses)


@dataclass(frozen=True)
class ValueDeclaration:
    name: Id
    value: Expression

    def __str__(self):
        return f"{self.name} = {self.value}"


@dataclass(frozen=True)
class Module:
    name: Id
    items: tuple = ()

    def __str__(self):
        return "\n".join(str(item) for item in self.items)
