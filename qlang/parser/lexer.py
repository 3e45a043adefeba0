"""Token stream for the Q language. Tokens are produced lazily from the source, one at a time, with a single token of
lookahead. Whitespace never reaches the parser: it is skipped here, before a token is cut.

```
<id>      ::= [_a-zA-Z]+
<string>  ::= '"' ( <any char but '"' or '\'> | '\' <any char> )* '"'   ; escapes are kept verbatim
<float>   ::= [0-9]* "." [0-9]+
<integer> ::= [0-9]+
<punct>   ::= "=" | "," | ";" | "(" | ")" | "[" | "]" | "{" | "}"
```

Any other non-whitespace character becomes a one-character INVALID token, so that the parser decides how to react.
"""

import re

from qlang.lang.error import GenericException
from qlang.parser.error import EndOfInput, UnexpectedSymbol
from qlang.parser.token import Token


class Lexer:
    """Converts source text into Tokens. Not restartable: create a new Lexer to read the source again."""
    WHITESPACE = re.compile(r"\s+")
    RULES = [
        (Token.ID, re.compile(r"[_a-zA-Z]+")),
        (Token.STRING, re.compile(r"\"(?:[^\"\\]|\\.)*\"", re.DOTALL)),
        (Token.FLOAT, re.compile(r"[0-9]*\.[0-9]+")),
        (Token.INTEGER, re.compile(r"[0-9]+")),
    ]

    def __init__(self, source):
        self.source = source
        self.pos = 0
        self._peeked = None
        self._span = (0, 0)

    def _lex(self):
        """Cuts the next token from the source, or returns None if only whitespace remains."""
        skipped = Lexer.WHITESPACE.match(self.source, self.pos)
        if skipped:
            self.pos = skipped.end()

        if self.pos >= len(self.source):
            return None

        start = self.pos
        char = self.source[start]

        if char in Token.PUNCTUATION:
            self.pos += 1
            return Token.punctuation(char, (start, self.pos))

        for kind, rule in Lexer.RULES:
            match = rule.match(self.source, start)
            if not match:
                continue
            if match.end() == start:
                raise GenericException("lexer rule for {} matched nothing at {}", [kind, str(start)], internal=True)

            self.pos = match.end()
            lexeme = match.group()

            if kind == Token.STRING:
                value = lexeme[1:-1]  # raw slice, escapes are not interpreted
            elif kind == Token.FLOAT:
                value = float(lexeme)
            elif kind == Token.INTEGER:
                value = int(lexeme)
            else:
                value = lexeme
            return Token(kind, value, (start, self.pos))

        self.pos += 1
        return Token(Token.INVALID, char, (start, self.pos))

    def peek(self):
        """Returns the next token without consuming it, or None at the end of the input."""
        if self._peeked is None:
            self._peeked = self._lex()
        return self._peeked

    def next(self):
        """Consumes and returns the next token. Raises EndOfInput when the source is exhausted."""
        token = self.peek()
        if token is None:
            raise EndOfInput(len(self.source))

        self._peeked = None
        self._span = token.span
        return token

    def expect(self, expected):
        """Consumes the next token and checks that it is of kind expected."""
        found = self.next()
        if found.kind != expected:
            raise UnexpectedSymbol(expected, found)
        return found

    def span(self):
        """(start, end) offsets of the most recently consumed token."""
        return self._span

    def __iter__(self):
        while self.peek() is not None:
            yield self.next()
