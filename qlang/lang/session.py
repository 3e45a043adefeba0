"""Session control for the Q language: ties the parser, the diagnostics and the interpreter together, either for a
whole file or line by line in command-line mode.
"""

from qlang.lang.error import GenericException
from qlang.lang.interpreter import Interpreter
from qlang.parser.lexer import Lexer
from qlang.parser.parser import Parser
from qlang.parser.parsetree import Id, Module
from qlang.parser.token import Token


class Session:
    """Governs a Q session: one module, one interpreter."""
    SH_FILE = "<in>"  # command-line interpreter module name

    def __init__(self, error_handler, path=None, source=None, cmd_line=False, out=None):
        self.error_handler = error_handler
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.out = out

        if self.cmd_line:
            self.error_handler.fatal = False

        if path is None and not cmd_line:
            raise GenericException("a session needs a file unless it is in command-line mode")
        elif path == Session.SH_FILE and not cmd_line:
            raise GenericException("'{}' is a reserved filename", Session.SH_FILE)

        if cmd_line:
            self.parser = Parser.from_string(Session.SH_FILE, "")
        elif source is not None:
            self.parser = Parser.from_string(path, source)
        else:
            self.parser = Parser.from_file(path)

        self.path = self.parser.module_name  # used for error messages
        self.error_handler.register_file(self.path, self.parser.source)

        self.module = None
        self.interpreter = None
        self.results = []

    def parse(self):
        """Parses this session's source. Raises ParseErrors if any declaration was malformed."""
        self.module = self.parser.parse()
        self.parser.raise_for_diagnostics()

        for declaration in self.module.items:
            if declaration.name in Interpreter.BUILTINS:
                msg = "'{}' is a built-in, calls will not reach this declaration"
                self.error_handler.warn(msg, str(declaration.name))
        return self.module

    def run(self):
        """Parses (if needed) and runs main. Will raise any errors that are encountered."""
        if self.module is None:
            self.parse()

        self.interpreter = Interpreter(self.module, out=self.out)
        result = self.interpreter.main()
        self.results.append(result)

        self.error_handler.remove_file(self.path)
        return result

    @staticmethod
    def preprocess_line(line):
        """Strips line and returns it along with whether or not it continues on the next line (unclosed brackets)."""
        line = line.strip()
        unclosed = line.count("(") > line.count(")") or line.count("{") > line.count("}")
        return line, unclosed

    @staticmethod
    def is_declaration(line):
        """Whether line starts like a declaration (an identifier followed by '=')."""
        lexer = Lexer(line)
        first, second = lexer.peek(), None
        if first is not None and first.kind == Token.ID:
            lexer.next()
            second = lexer.peek()
        return second is not None and second.kind == Token.EQUAL

    def add(self, line):
        """Adds one line of command-line input: a declaration is bound, an expression is evaluated and its value
        appended to self.results.
        """
        if self.interpreter is None:
            self.interpreter = Interpreter(Module(Id(Session.SH_FILE)), out=self.out)

        parser = Parser.from_string(Session.SH_FILE, line)
        self.error_handler.register_file(Session.SH_FILE, line)

        if Session.is_declaration(line):
            module = parser.parse()
            parser.raise_for_diagnostics()
            for declaration in module.items:
                self.interpreter.declare(declaration)
        else:
            self.results.append(self.interpreter.eval(parser.parse_expression()))

    def pop(self):
        """Pops and returns the most recent result."""
        return self.results.pop()
