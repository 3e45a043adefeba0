"""Parse errors. Every ParseError is recoverable at declaration granularity: the parser records it as a diagnostic and
moves on to the next declaration. Anything else raised while parsing is a hard failure.
"""

from qlang.lang.error import GenericException
from qlang.parser.token import Token


class ParseError(GenericException):
    """Superclass of recoverable parse errors. Subclasses list the attributes that make up their identity in FIELDS."""
    FIELDS = ()

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.FIELDS)

    def __hash__(self):
        return hash((type(self), *(getattr(self, name) for name in self.FIELDS)))

    def __repr__(self):
        fields = ", ".join(f"{name}={getattr(self, name)!r}" for name in self.FIELDS)
        return f"{type(self).__name__}({fields})"


class UnexpectedSymbol(ParseError):
    FIELDS = ("expected", "found")

    def __init__(self, expected, found):
        self.expected = expected
        self.found = found
        super().__init__("expected {}, but found '{}'", [describe(expected), found], *found.span)


class ExpectedExpression(ParseError):
    FIELDS = ("found",)

    def __init__(self, found):
        self.found = found
        super().__init__("expected an expression, but found '{}'", str(found), *found.span)


class ExpectedPattern(ParseError):
    FIELDS = ("found",)

    def __init__(self, found):
        self.found = found
        super().__init__("expected a pattern, but found '{}'", str(found), *found.span)


class MissingValueInValueDeclaration(ParseError):
    """src and src_name are the source text the span points into and its name, kept so the error can be rendered on
    its own.
    """
    FIELDS = ("span",)

    def __init__(self, name, span, src, src_name=None):
        self.name = name
        self.span = span
        self.src = src
        self.src_name = src_name
        super().__init__("declaration of '{}' has no value", str(name), *span)


class EndOfInput(ParseError):
    FIELDS = ()

    def __init__(self, offset=None):
        super().__init__("reached the end of the input", start=offset)


class ParseErrors(GenericException):
    """Aggregate of every diagnostic recorded while parsing one module, in source order."""

    def __init__(self, module_name, errors):
        self.module_name = module_name
        self.errors = list(errors)
        super().__init__("'{}' has {} parse error(s)", [module_name, str(len(self.errors))])


def describe(kind):
    """Human readable name of a token kind, for messages."""
    return kind if kind not in Token.PUNCTUATION else f"'{kind}'"
