"""Tree-walking evaluator for the Q language.

Basic program flow:
    1. Every top-level declaration is evaluated in source order and its value bound in the root scope.
    2. A reference to a declaration that has not been evaluated yet evaluates it on the spot, so siblings can refer to
       each other in any order. The root scope only ever holds values.
    3. main is called with a greeting, and whatever it returns is the result of the program.

Evaluation errors are not collected: the first one aborts the evaluation.
"""

import sys

from qlang.lang.environment import Environment, UndefinedSymbol
from qlang.lang.error import GenericException
from qlang.parser.parsetree import Call, Function, Id, LiteralString, Variable


class InterpreterError(GenericException):
    """Superclass of errors raised while evaluating."""


class CannotCallNonFunctionValue(InterpreterError):

    def __init__(self, id, value):
        self.id = id
        self.value = value
        super().__init__("'{}' is not a function, it is bound to '{}'", [str(id), str(value)])


class CyclicDeclaration(InterpreterError):

    def __init__(self, id):
        self.id = id
        super().__init__("the value of '{}' depends on itself", str(id))


class ClauseMatchError(InterpreterError):

    def __init__(self, id, arity):
        self.id = id
        self.arity = arity
        super().__init__("no clause of '{}' matches {} argument(s)", [str(id), str(arity)])


class Interpreter:
    """Evaluates a parsed Module. An Interpreter owns its Environment and must not be shared between evaluations."""
    ENTRY_POINT = Id("main")
    GREETING = "hello world"
    BUILTINS = {Id("print"): "_print"}  # checked before the environment, so they cannot be shadowed

    def __init__(self, program, out=None):
        self.program = program
        self.out = out if out is not None else sys.stdout
        self.env = Environment()

        # declarations not evaluated yet, so that siblings can refer to each other in any order
        self._pending = {declaration.name: declaration.value for declaration in program.items}
        self._evaluating = set()

        for declaration in program.items:
            if declaration.name in self._pending:
                self._evaluate_declaration(declaration.name)

    def _evaluate_declaration(self, id):
        """Evaluates the pending declaration of id and binds its value in the root scope."""
        if id in self._evaluating:
            raise CyclicDeclaration(id)

        self._evaluating.add(id)
        try:
            value = self.eval(self._pending[id])
        finally:
            self._evaluating.discard(id)

        del self._pending[id]
        self.env.define(id, value)
        return value

    def lookup(self, id):
        """Looks id up in the environment, evaluating its top-level declaration first if that is still pending."""
        try:
            return self.env.lookup(id)
        except UndefinedSymbol:
            if id in self._pending:
                return self._evaluate_declaration(id)
            raise

    def declare(self, declaration):
        """Evaluates one more top-level declaration and binds it. Nothing is bound if evaluation fails."""
        value = self.eval(declaration.value)
        self.env.define(declaration.name, value)
        return value

    def main(self):
        """Calls the entry point with the greeting."""
        return self.eval(Call(Interpreter.ENTRY_POINT, (LiteralString(Interpreter.GREETING),)))

    def eval(self, expr):
        if isinstance(expr, Call):
            builtin = Interpreter.BUILTINS.get(expr.id)
            if builtin is not None:
                return getattr(self, builtin)(expr.args)

            value = self.lookup(expr.id)
            if not isinstance(value, Function):
                raise CannotCallNonFunctionValue(expr.id, value)

            args = [self.eval(arg) for arg in expr.args]  # in the caller's scope
            return self.bind_matching_clause(expr.id, value.clauses, args)

        elif isinstance(expr, Variable):
            return self.lookup(expr.id)

        return expr

    def bind_matching_clause(self, id, clauses, args):
        """Evaluates the body of the first clause whose patterns all match args, in a fresh scope holding the clause's
        bindings. The scope is popped whether or not the body evaluates successfully.
        """
        for clause in clauses:
            if clause.arity != len(args):
                continue

            bindings = []
            for pattern, value in zip(clause.args, args):
                matched = pattern.match(value)
                if matched is None:
                    break
                bindings.extend(matched)
            else:
                self.env.push_scope()
                try:
                    for name, value in bindings:
                        self.env.bind(name, value)
                    return self.eval(clause.body)
                finally:
                    self.env.pop_scope()

        raise ClauseMatchError(id, len(args))

    def _print(self, args):
        values = [self.eval(arg) for arg in args]
        print(repr(values), file=self.out)
        return LiteralString("ok")
