"""Recursive-descent parser for the Q language.

The grammar, in the order alternatives are tried:

```
<module>      ::= <value_decl>*
<value_decl>  ::= <id> "=" <expr>
<expr>        ::= <string>
                | <id> "(" [<expr> ("," <expr>)*] ")"    ; call
                | <id>                                   ; variable
                | <function>
<function>    ::= <clause> (";" <clause>)*               ; clauses keep their source order
<clause>      ::= "(" [<pattern> ("," <pattern>)*] ")" "{" <expr> "}"
<pattern>     ::= <id>                                   ; bind
```

A malformed declaration does not stop the parse. The error is recorded as a diagnostic and the offending token stays
consumed. If the declaration failed at its name or its "=", parsing resumes right after the offending token. If it
failed at its first token or inside its value, the parser first skips ahead to the next `<id> =`, so that the rest of
a broken value is not read as more declarations.
"""

import copy
import os

from qlang.lang.error import GenericException
from qlang.parser.error import (ExpectedExpression, ExpectedPattern, MissingValueInValueDeclaration, ParseError,
                                ParseErrors, UnexpectedSymbol)
from qlang.parser.lexer import Lexer
from qlang.parser.parsetree import (Bind, Call, FunClause, Function, Id, LiteralString, Module, ValueDeclaration,
                                    Variable)
from qlang.parser.token import Token


class Parser:
    """Parses one named source into a Module, collecting recoverable diagnostics along the way."""

    def __init__(self, module_name, source):
        self.module_name = module_name
        self.source = source
        self.diagnostics = []
        self.lexer = None

    @classmethod
    def from_string(cls, module_name, source):
        return cls(module_name, source)

    @classmethod
    def from_file(cls, path):
        """Reads path as UTF-8. The module is named after the file's base name."""
        try:
            with open(path, "r", encoding="utf-8") as file:
                source = file.read()
        except (OSError, UnicodeDecodeError):
            raise GenericException("'{}' could not be opened", str(path))

        return cls(os.path.basename(path), source)

    def raise_for_diagnostics(self):
        """Raises a ParseErrors carrying every recorded diagnostic, if there are any."""
        if self.diagnostics:
            raise ParseErrors(self.module_name, self.diagnostics)

    def parse(self):
        """Parses the whole source. Only hard (non-ParseError) failures propagate."""
        self.lexer = Lexer(self.source)
        items = []

        while self.lexer.peek() is not None:
            try:
                items.append(self.parse_declaration())
            except ParseError as error:
                self.diagnostics.append(error)

        return Module(Id(self.module_name), tuple(items))

    def parse_expression(self):
        """Parses source as exactly one expression. Errors are raised, not recorded."""
        self.lexer = Lexer(self.source)
        expression = self._expression()

        trailing = self.lexer.peek()
        if trailing is not None:
            raise UnexpectedSymbol("end of input", self.lexer.next())
        return expression

    def parse_declaration(self):
        name = self.lexer.next()
        if name.kind != Token.ID:
            self._synchronize()
            raise UnexpectedSymbol(Token.ID, name)

        self.lexer.expect(Token.EQUAL)

        try:
            return ValueDeclaration(Id(name.value), self._value(name))
        except ParseError:
            self._synchronize()
            raise

    def _value(self, name):
        start = self.lexer.peek()
        if start is None or not self._starts_expression(start):
            if start is not None:
                self.lexer.next()
            span = start.span if start is not None else (len(self.source), len(self.source))
            raise MissingValueInValueDeclaration(Id(name.value), span, self.source, self.module_name)

        return self._expression()

    def _synchronize(self):
        """Skips tokens up to (not including) the next `<id> =`."""
        while self.lexer.peek() is not None and not self._at_declaration():
            self.lexer.next()

    def _at_declaration(self):
        if self.lexer.peek().kind != Token.ID:
            return False

        ahead = copy.copy(self.lexer)
        ahead.next()
        following = ahead.peek()
        return following is not None and following.kind == Token.EQUAL

    @staticmethod
    def _starts_expression(token):
        return token.kind in (Token.STRING, Token.ID, Token.PARENS_LEFT)

    def _expression(self):
        token = self.lexer.next()

        if token.kind == Token.STRING:
            return LiteralString(token.value)

        elif token.kind == Token.ID:
            next_token = self.lexer.peek()
            if next_token is not None and next_token.kind == Token.PARENS_LEFT:
                self.lexer.next()
                return Call(Id(token.value), self._arguments())
            return Variable(Id(token.value))

        elif token.kind == Token.PARENS_LEFT:
            return self._function()

        raise ExpectedExpression(token)

    def _arguments(self):
        """Comma separated call arguments, after the opening parenthesis."""
        args = []
        if self._accept(Token.PARENS_RIGHT):
            return tuple(args)

        args.append(self._expression())
        while self._accept(Token.COMMA):
            args.append(self._expression())

        self.lexer.expect(Token.PARENS_RIGHT)
        return tuple(args)

    def _function(self):
        """Function literal, after the opening parenthesis of its first clause."""
        clauses = [self._clause()]
        while self._accept(Token.SEMICOLON):
            self.lexer.expect(Token.PARENS_LEFT)
            clauses.append(self._clause())

        return Function(tuple(clauses))

    def _clause(self):
        patterns = []
        if not self._accept(Token.PARENS_RIGHT):
            patterns.append(self._pattern())
            while self._accept(Token.COMMA):
                patterns.append(self._pattern())
            self.lexer.expect(Token.PARENS_RIGHT)

        self.lexer.expect(Token.BRACE_LEFT)
        body = self._expression()
        self.lexer.expect(Token.BRACE_RIGHT)

        return FunClause(tuple(patterns), body)

    def _pattern(self):
        token = self.lexer.next()
        if token.kind == Token.ID:
            return Bind(Id(token.value))
        raise ExpectedPattern(token)

    def _accept(self, kind):
        """Consumes the next token if it is of kind. Returns whether it did."""
        token = self.lexer.peek()
        if token is not None and token.kind == kind:
            self.lexer.next()
            return True
        return False
