"""Session control for tinylambda. A session reads exactly one λ-term, from a file or from standard input, and
normalizes it.
"""

import sys

from tinylambda.lang.error import GenericException
from tinylambda.pure.lexical import Parser
from tinylambda.pure.term import FIRST_FRESH


class Session:
    """Governs a tinylambda run: one input line, one result."""
    STDIN = "<stdin>"  # reserved path for reading standard input

    def __init__(self, error_handler, path=STDIN, stream=None):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path      # used for error messages
        self.result = None    # normal form, set by run

        if stream is not None:
            self.line = stream.readline()
        elif path == Session.STDIN:
            self.line = sys.stdin.readline()
        else:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    self.line = file.readline()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

        self.line = self.line.rstrip("\r\n")

    def parse(self):
        """Returns the first complete parse of self.line. Warns if it is not the only one."""
        parser = Parser(self.line)
        parses = parser.complete_parses()

        term = next(parses, None)
        if term is None:
            raise parser.error()

        if next(parses, None) is not None:
            self.error_handler.warn("'{}' has more than one parse, using '{}'", (self.line, term.expr))

        return term

    def run(self):
        """Normalizes self.line and stores the result. Raises any errors that are encountered."""
        self.error_handler.register_line(self.path, self.line, 1)  # in case error is raised

        self.result = self.parse().close().display(FIRST_FRESH)

        self.error_handler.remove_line(self.path)  # error was not raised
        return self.result
