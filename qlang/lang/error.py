"""Error handling for the Q language. Only GenericExceptions should be encountered during running: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a Q error/warning. start and end are
    character offsets into the source registered with the ErrorHandler; start=None means there is nothing to point at.
    """

    def __init__(self, msg, exprs=None, start=None, end=None, internal=False):
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        self.msg = msg.format(*(colored(str(expr), attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.start = start
        self.end = end if end is not None else start
        self.internal = internal

        super().__init__(self.msg)

    @property
    def diagnosis(self):
        return self.start is not None and not self.internal


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom Q errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True, out=None):
        self.fatal = fatal
        self.out = out if out is not None else sys.stdout
        self.traceback = {}

    def register_file(self, path, source=None):
        """Registers path (and its source text, used for diagnoses) in traceback."""
        self.traceback[path] = source

    def remove_file(self, path):
        """Removes path from traceback. Should be called once the file has been run successfully."""
        self.traceback.pop(path, None)

    @staticmethod
    def locate(source, offset):
        """Returns (line, line_num, col) of offset within source. line_num and col are 1-based."""
        offset = max(0, min(offset, len(source)))
        line_start = source.rfind("\n", 0, offset) + 1
        line_end = source.find("\n", offset)
        if line_end == -1:
            line_end = len(source)

        return source[line_start:line_end], source.count("\n", 0, offset) + 1, offset - line_start + 1

    @staticmethod
    def diagnose(error, source, warning=False):
        """Returns offending line of source with error's span highlighted and bolded."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR
        line, __, col = ErrorHandler.locate(source, error.start)

        start = col - 1
        end = min(max(start + (error.end - error.start), start + 1), max(len(line), start + 1))

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def _report(self, error, label, color, warning=False):
        file, source = next(reversed(self.traceback.items()), (None, None))

        error_msg = ""
        if file is not None and source is not None and error.start is not None:
            __, line_num, col = ErrorHandler.locate(source, error.start)
            error_msg += colored(f"{file}:{line_num}:{col}: ", attrs=["bold"])
        elif file is not None:
            error_msg += colored(f"{file}: ", attrs=["bold"])

        if error.internal:
            error_msg += colored("[internal] ", color, attrs=["bold"])

        error_msg += colored(f"{label}: ", color, attrs=["bold"]) + error.msg
        print(error_msg, file=self.out)

        if error.diagnosis and source is not None:
            print(ErrorHandler.diagnose(error, source, warning=warning), file=self.out)

    def warn(self, *args, **kwargs):
        """Generates and prints warning message based on args."""
        self._report(GenericException(*args, **kwargs), "warning", ErrorHandler.WARNING, warning=True)

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException; aggregates (anything with an
        errors attribute) have each of their members reported in order.
        """
        for sub_error in getattr(error, "errors", None) or [error]:
            self._report(sub_error, "error", ErrorHandler.ERROR)

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded while evaluating"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
