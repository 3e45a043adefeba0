"""Lexical tokens of the Q language."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Token:
    """A single lexeme. Equality is structural over kind and value; span is positional and ignored."""
    ID = "identifier"
    STRING = "string literal"
    INTEGER = "integer"
    FLOAT = "float"
    INVALID = "invalid token"

    EQUAL = "="
    COMMA = ","
    SEMICOLON = ";"
    BRACKET_LEFT = "["
    BRACKET_RIGHT = "]"
    PARENS_LEFT = "("
    PARENS_RIGHT = ")"
    BRACE_LEFT = "{"
    BRACE_RIGHT = "}"

    PUNCTUATION = [EQUAL, COMMA, SEMICOLON, BRACKET_LEFT, BRACKET_RIGHT, PARENS_LEFT, PARENS_RIGHT, BRACE_LEFT,
                   BRACE_RIGHT]

    kind: str
    value: object = None
    span: tuple = field(default=(0, 0), compare=False, repr=False)

    @classmethod
    def punctuation(cls, char, span=(0, 0)):
        assert char in cls.PUNCTUATION, "{} is not punctuation".format(char)
        return cls(char, char, span)

    def __str__(self):
        if self.kind == Token.STRING:
            return f"\"{self.value}\""
        if self.kind in (Token.ID, Token.INTEGER, Token.FLOAT, Token.INVALID):
            return str(self.value)
        return self.kind
