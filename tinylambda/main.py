"""Reads one λ-term from standard input (or the first line of a file) and prints its normal form. Uses the error
handling context manager so that syntax errors and unbound variables end the run with a diagnosis. Called from the
tinylambda executable script.
"""

import argparse
import io
import sys

from tinylambda.lang.error import ErrorHandler
from tinylambda.lang.session import Session


DEFAULT_RECURSION_LIMIT = 10000


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="tinylambda", description="normalize an untyped λ-term")
    parser.add_argument("file", help="file whose first line is the term (if empty, reads standard input)", nargs="?")
    parser.add_argument("--recursion-limit", type=int, default=DEFAULT_RECURSION_LIMIT,
                        help=f"Python recursion limit used while normalizing (default: {DEFAULT_RECURSION_LIMIT})")
    args = parser.parse_args(argv)

    if args.recursion_limit < 100:
        parser.error("--recursion-limit must be at least 100")
    return args


def use_utf8():
    """Terms are UTF-8 whatever the locale says, because of 'λ'."""
    for stream in (sys.stdin, sys.stdout):
        if isinstance(stream, io.TextIOWrapper):
            stream.reconfigure(encoding="utf-8")


def main(argv=None):
    """Runs tinylambda. Called from tinylambda executable script."""
    assert sys.version_info >= (3, 8), "tinylambda cannot be run with python < 3.8"

    with ErrorHandler() as error_handler:
        use_utf8()
        args = parse_args(argv)
        sys.setrecursionlimit(args.recursion_limit)

        sess = Session(error_handler, args.file if args.file is not None else Session.STDIN)
        print(sess.run())


if __name__ == "__main__":
    main()
