import os
import tempfile
import unittest

from qlang.lang.error import GenericException
from qlang.parser.error import (EndOfInput, ExpectedExpression, ExpectedPattern, MissingValueInValueDeclaration,
                                ParseError, ParseErrors, UnexpectedSymbol)
from qlang.parser.parser import Parser
from qlang.parser.parsetree import (Bind, Call, FunClause, Function, Id, LiteralString, Module, ValueDeclaration,
                                    Variable)
from qlang.parser.token import Token


def parse(source):
    parser = Parser.from_string("test_module", source)
    return parser.parse(), parser.diagnostics


class ParserTestCase(unittest.TestCase):

    def test_parse_empty_module(self):
        for case in ["", "   \n\t"]:
            module, diagnostics = parse(case)
            self.assertEqual(Module(Id("test_module"), ()), module, repr(case))
            self.assertEqual([], diagnostics, repr(case))

    def test_parse_module_with_declarations(self):
        cases = {
            'Name = "Q-Lang"': ValueDeclaration(Id("Name"), LiteralString("Q-Lang")),
            'x="y"': ValueDeclaration(Id("x"), LiteralString("y")),
            '\n  Name = ""\n': ValueDeclaration(Id("Name"), LiteralString("")),
        }
        for case, expected in cases.items():
            module, diagnostics = parse(case)
            self.assertEqual((expected,), module.items, case)
            self.assertEqual([], diagnostics, case)

    def test_parse_declaration_missing_equals(self):
        module, diagnostics = parse('\n    Name ? "Q-Lang"\n')

        self.assertEqual((), module.items)
        self.assertEqual([
            UnexpectedSymbol(Token.EQUAL, Token(Token.INVALID, "?")),
            UnexpectedSymbol(Token.ID, Token(Token.STRING, "Q-Lang")),
        ], diagnostics)

    def test_parse_expressions(self):
        cases = {
            'a = b': Variable(Id("b")),
            'a = b()': Call(Id("b"), ()),
            'a = print("x")': Call(Id("print"), (LiteralString("x"),)),
            'a = (A) { A }': Function((FunClause((Bind(Id("A")),), Variable(Id("A"))),)),
            'a = () { "x" }': Function((FunClause((), LiteralString("x")),)),
            'a = (A) { (B) { B } }': Function((
                FunClause((Bind(Id("A")),), Function((FunClause((Bind(Id("B")),), Variable(Id("B"))),))),
            )),
        }
        for case, expected in cases.items():
            module, diagnostics = parse(case)
            self.assertEqual([], diagnostics, case)
            self.assertEqual((ValueDeclaration(Id("a"), expected),), module.items, case)

    def test_call_arguments_are_comma_separated(self):
        # argument lists are parsed in full, so multi-argument calls reach clause dispatch
        module, diagnostics = parse('a = foo("x", bar(y), (Z) { Z })')

        self.assertEqual([], diagnostics)
        self.assertEqual(Call(Id("foo"), (
            LiteralString("x"),
            Call(Id("bar"), (Variable(Id("y")),)),
            Function((FunClause((Bind(Id("Z")),), Variable(Id("Z"))),)),
        )), module.items[0].value)

    def test_multi_clause_function_keeps_source_order(self):
        module, diagnostics = parse('foo = (A) { A }; (A, B) { B }; () { "none" }')

        self.assertEqual([], diagnostics)
        self.assertEqual(Function((
            FunClause((Bind(Id("A")),), Variable(Id("A"))),
            FunClause((Bind(Id("A")), Bind(Id("B"))), Variable(Id("B"))),
            FunClause((), LiteralString("none")),
        )), module.items[0].value)

    def test_several_declarations(self):
        module, diagnostics = parse("""
            foo = (A, B) { print(A) }
            main = (Arg) { foo(Arg, Arg) }
        """)

        self.assertEqual([], diagnostics)
        self.assertEqual([Id("foo"), Id("main")], [item.name for item in module.items])

    def test_missing_value(self):
        module, diagnostics = parse('a = ?\nb = "x"')

        self.assertEqual((ValueDeclaration(Id("b"), LiteralString("x")),), module.items)
        self.assertEqual([MissingValueInValueDeclaration(Id("a"), (4, 5), None)], diagnostics)
        self.assertEqual('a = ?\nb = "x"', diagnostics[0].src)
        self.assertEqual("test_module", diagnostics[0].src_name)

        module, diagnostics = parse("a =")
        self.assertEqual((), module.items)
        self.assertEqual([MissingValueInValueDeclaration(Id("a"), (3, 3), None)], diagnostics)

    def test_recovers_at_next_declaration(self):
        module, diagnostics = parse('a = "x"\nb = (X) { ? }\nc = "y"')

        self.assertEqual([Id("a"), Id("c")], [item.name for item in module.items])
        self.assertEqual([ExpectedExpression(Token(Token.INVALID, "?"))], diagnostics)

    def test_broken_value_is_skipped_up_to_next_declaration(self):
        cases = {
            'f = (A B) { A }\ng = "x"': UnexpectedSymbol(Token.PARENS_RIGHT, Token(Token.ID, "B")),
            'f = foo(a b, c)\ng = "x"': UnexpectedSymbol(Token.PARENS_RIGHT, Token(Token.ID, "b")),
        }
        for case, expected in cases.items():
            module, diagnostics = parse(case)
            self.assertEqual((ValueDeclaration(Id("g"), LiteralString("x")),), module.items, case)
            self.assertEqual([expected], diagnostics, case)

    def test_expected_pattern(self):
        module, diagnostics = parse('f = ("x") { "y" }')

        self.assertEqual((), module.items)
        self.assertEqual([ExpectedPattern(Token(Token.STRING, "x"))], diagnostics)

    def test_end_of_input_inside_declaration(self):
        should_fail = ["a", "a = (X) {", "a = (X) { X", "a = foo(", 'a = (X) { X };']
        for case in should_fail:
            module, diagnostics = parse(case)
            self.assertEqual((), module.items, case)
            self.assertEqual([EndOfInput()], diagnostics, case)

    def test_trailing_clause_separator_needs_a_clause(self):
        module, diagnostics = parse('a = (X) { X }; b = "y"')

        self.assertEqual((), module.items)
        self.assertEqual(UnexpectedSymbol(Token.PARENS_LEFT, Token(Token.ID, "b")), diagnostics[0])

    def test_parse_is_deterministic(self):
        source = """
            greeting = "hello"
            foo = (A) { A }; (A, B) { print(B, greeting) }
            main = (Arg) { foo(Arg, "x") }
        """
        first, __ = parse(source)
        second, __ = parse(source)
        self.assertEqual(first, second)

    def test_rendered_module_parses_back(self):
        source = 'a = "x\\"y"\nb = (A) { A }; (A, B) { f(A, (C) { C }) }\nc = b("1", "2")'
        module, __ = parse(source)

        reparsed, diagnostics = parse(str(module))
        self.assertEqual([], diagnostics)
        self.assertEqual(module, reparsed)

    def test_parse_expression(self):
        self.assertEqual(Call(Id("f"), (LiteralString("x"),)), Parser.from_string("<in>", 'f("x")').parse_expression())

        should_raise = {"": EndOfInput, "?": ExpectedExpression, '"a" "b"': UnexpectedSymbol}
        for case, error in should_raise.items():
            self.assertRaises(error, Parser.from_string("<in>", case).parse_expression)

    def test_raise_for_diagnostics(self):
        parser = Parser.from_string("test_module", 'Name = "Q"')
        parser.parse()
        self.assertIsNone(parser.raise_for_diagnostics())

        parser = Parser.from_string("test_module", 'Name ? "Q"')
        parser.parse()
        with self.assertRaises(ParseErrors) as raised:
            parser.raise_for_diagnostics()
        self.assertEqual(parser.diagnostics, raised.exception.errors)

    def test_from_file(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "hello.q")
            with open(path, "w", encoding="utf-8") as file:
                file.write('Name = "Q"\n')

            parser = Parser.from_file(path)
            module = parser.parse()

        self.assertEqual(Id("hello.q"), module.name)
        self.assertEqual(1, len(module.items))

    def test_unreadable_file_is_a_hard_failure(self):
        with self.assertRaises(GenericException) as raised:
            Parser.from_file(os.path.join(tempfile.gettempdir(), "does", "not", "exist.q"))
        self.assertNotIsInstance(raised.exception, ParseError)


if __name__ == '__main__':
    unittest.main()
