"""Normalizes λ-terms given as text. Equivalent to running the tinylambda executable on one line of input, minus the
error reporting.
"""

from tinylambda.pure.lexical import parse_term
from tinylambda.pure.term import FIRST_FRESH


def normalize(expr):
    """Returns the normal form of the closed λ-term expr, displayed with fresh variables x, xx, xxx, ... Raises
    TermSyntaxError or UnboundVariableError, and does not return if expr has no normal form.
    """
    return parse_term(expr).close().display(FIRST_FRESH)


def interaction(expr):
    """Reads a term terminated by a newline and returns its normal form terminated by a newline."""
    return normalize(expr) + "\n"
