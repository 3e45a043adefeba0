"""Command-line driver for the Q interpreter: parses and runs .q files, or starts the interactive shell when no file is
given. Called from the qlang console script.
"""

import argparse

from qlang.lang.error import ErrorHandler
from qlang.lang.session import Session
from qlang.lang.shell import Shell


def build_parser():
    parser = argparse.ArgumentParser(prog="qlang", description="Q language interpreter")
    parser.add_argument("files", help="files to parse and run (if empty, goes to command-line mode)", nargs="*")
    parser.add_argument("--parse-only", action="store_true", help="report parse diagnostics without running main")
    return parser


def main(argv=None):
    """Runs the Q interpreter. Exits with status 1 on the first file that fails to parse or run."""
    args = build_parser().parse_args(argv)

    with ErrorHandler() as error_handler:
        if not args.files:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()
            return

        for path in args.files:
            sess = Session(error_handler, path)
            if args.parse_only:
                sess.parse()
            else:
                sess.run()


if __name__ == "__main__":
    main()
