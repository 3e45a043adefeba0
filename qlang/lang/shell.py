"""Handles interactive/command-line mode for the Q interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Q interpreter shell."""
    intro = "Q interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations
    COMMANDS = ("exit", "help", "EOF")

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    def parseline(self, line):
        """A line is a shell command only if it is a command word, optionally followed by a help topic. Anything else,
        such as 'exit = "x"' or 'help("x")', is Q source and goes to default.
        """
        command, arg, line = super().parseline(line)
        if command is None:
            return command, arg, line

        if self._tmp_line or command not in Shell.COMMANDS or (arg and not arg.isidentifier()):
            return None, None, line
        return command, arg, line

    def default(self, line):
        """Executes an arbitrary declaration or expression."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line, add_to_prev = self.sess.preprocess_line(f"{self._tmp_line} {line}")

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                if not line:
                    return

                self.sess.add(line)
                if self.sess.results:
                    print(self.sess.pop(), file=self.stdout)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the Q interpreter!\n\n"
              "Q is a tiny expression language with strings and multi-clause functions.\n"
              "Each line is either a declaration or an expression.\n\n"
              "Try it out by typing 'first = (A, B) { A }'. This binds a function to the \n"
              "name 'first'. Next, try typing 'first(\"x\", \"y\")', giving \"x\" as the \n"
              "result, or 'print(\"x\")' to see the debug form of a value.", file=self.stdout)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
