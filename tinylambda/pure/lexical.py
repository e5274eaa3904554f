"""Pure lambda calculus tokenizer and parser.

The input notation is fully parenthesized:

```
<λ-term>        ::= "(" <parenthesized> ")"
                  | <var>                          ; "variable"
                                                   ; - a letter or '_', then letters, digits, '_' or "'"
                                                   ; - or a run of digits: `1` is a name like any other
<parenthesized> ::= "λ" <var> "." <λ-term>         ; "abstraction"
                                                   ; - '\' may be written instead of 'λ'
                  | <λ-term> <λ-term>              ; "application"
                                                   ; - exactly two terms: ((f x) y), never (f x y)
```

Every pair of parentheses belongs to an abstraction or an application, so redundant ones are rejected: `(x)` and
`((λ x. x))` are syntax errors.

Whitespace between tokens is insignificant. Parsing produces OpenTerms and performs no reduction.

The parser is written in the list-of-successes style: parse yields every (term, position) pair that can be read from
a position, lazily. The grammar above is unambiguous, so complete_parses yields at most one term for any input, and
parse_term takes the first one.
"""

from typing import NamedTuple

from tinylambda.lang.error import TermSyntaxError
from tinylambda.pure.term import Abstraction, Application, Variable


LAMBDAS = ("λ", "\\")
PUNCTUATION = ("(", ")", ".") + LAMBDAS


class Token(NamedTuple):
    text: str
    start: int

    @property
    def end(self):
        return self.start + len(self.text)


def is_var_start(char):
    return (char.isalpha() or char == "_") and char not in LAMBDAS


def is_var_cont(char):
    return is_var_start(char) or char.isdigit() or char == "'"


def is_var(token):
    return bool(token) and (is_var_start(token[0]) or token.isdigit())


def tokenize(expr):
    """Splits expr into Tokens. Raises TermSyntaxError on characters that cannot start a token."""
    tokens = []
    pos = 0
    while pos < len(expr):
        char = expr[pos]
        if char.isspace():
            pos += 1
            continue

        end = pos + 1
        if is_var_start(char):
            while end < len(expr) and is_var_cont(expr[end]):
                end += 1
        elif char.isdigit():
            while end < len(expr) and expr[end].isdigit():
                end += 1
        elif char not in PUNCTUATION:
            raise TermSyntaxError("'{}' contains illegal character '{}'", (expr, char), start=pos, end=end)

        tokens.append(Token(expr[pos:end], pos))
        pos = end

    return tokens


class Parser:
    """Recursive descent over a token list. Tracks the furthest token reached for error messages."""

    def __init__(self, expr):
        self.expr = expr
        self.tokens = tokenize(expr)
        self.furthest = 0

    def peek(self, pos):
        """Returns token text at pos, or None at end of input."""
        self.furthest = max(self.furthest, pos)
        if pos < len(self.tokens):
            return self.tokens[pos].text
        return None

    def parse(self, pos=0):
        """Yields every (OpenTerm, next position) that can be read starting at pos."""
        token = self.peek(pos)
        if token == "(":
            for term, after in self.parse_parenthesized(pos + 1):
                if self.peek(after) == ")":
                    yield term, after + 1
        elif is_var(token):
            start = self.tokens[pos].start
            yield Variable(token, self.expr, start), pos + 1

    def parse_parenthesized(self, pos):
        """Parses the inside of a pair of parentheses: an abstraction if it starts with λ, otherwise an application."""
        if self.peek(pos) in LAMBDAS:
            var = self.peek(pos + 1)
            if is_var(var) and self.peek(pos + 2) == ".":
                for body, after in self.parse(pos + 3):
                    yield Abstraction(var, body), after
        else:
            for fun, after_fun in self.parse(pos):
                for arg, after_arg in self.parse(after_fun):
                    yield Application(fun, arg), after_arg

    def complete_parses(self):
        """Yields parses that consume every token."""
        for term, after in self.parse():
            if self.peek(after) is None:
                yield term

    def error(self):
        """Returns TermSyntaxError pointing at the furthest token reached."""
        if not self.tokens:
            return TermSyntaxError("λ-term cannot be empty", self.expr)

        if self.furthest < len(self.tokens):
            token = self.tokens[self.furthest]
            msg = "'{}' has unexpected '{}'"
            return TermSyntaxError(msg, (self.expr, token.text), start=token.start, end=token.end)

        end = len(self.expr.rstrip())
        return TermSyntaxError("'{}' ended unexpectedly", self.expr, start=end, end=end + 1)


def complete_parses(expr):
    """Yields every parse of expr that consumes all of it. The trailing newline is insignificant."""
    return Parser(expr).complete_parses()


def parse_term(expr):
    """Returns the first complete parse of expr. Raises TermSyntaxError if there is none."""
    parser = Parser(expr)
    for term in parser.complete_parses():
        return term
    raise parser.error()

