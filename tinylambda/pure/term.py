"""Nameless internal representation of closed λ-terms.

A closed term is nothing more than two behaviours: how to apply it to another term, and how to display it given a
supply of fresh variables. Variables are never renamed or substituted: an abstraction closes over the environment it
was built in, and applying it evaluates its body in that environment extended with the argument. Normalization under a
binder happens while displaying, by applying the abstraction to an opaque variable and displaying whatever comes out.

Fresh variables are `x`, `xx`, `xxx`, ... Each nested binder along a path is displayed with a strictly longer name
than the binders enclosing it, so no printed variable can be captured.

Python evaluates eagerly, so arguments are suspended explicitly in Thunks and only evaluated when a display needs
them. A term without a normal form never finishes displaying.
"""

from abc import abstractmethod, ABC

from tinylambda.lang.error import UnboundVariableError


FIRST_FRESH = "x"


def next_fresh(var):
    """Returns the fresh variable following var: `x` -> `xx` -> `xxx` -> ..."""
    return "x" + var


def display_variable(var):
    """Display function for a variable, which ignores the fresh supply."""
    return lambda fresh: var


def display_lambda(display_body):
    """Display function for an abstraction: `(λ x. body)`. The bound variable is always the next fresh variable, and
    display_body maps the display of that variable to the display of the body.
    """
    return lambda fresh: f"(λ {fresh}. {display_body(display_variable(fresh))(next_fresh(fresh))})"


def display_application(display_fun, display_arg):
    """Display function for an application: `(fun arg)`."""
    return lambda fresh: f"({display_fun(fresh)} {display_arg(fresh)})"


class Env:
    """Persistent environment mapping variable names to closed Terms. The most recent binding of a name wins."""
    __slots__ = ("var", "term", "parent")

    def __init__(self, var=None, term=None, parent=None):
        self.var = var
        self.term = term
        self.parent = parent

    def bind(self, var, term):
        """Returns a new environment with var bound to term, shadowing any outer binding of var."""
        return Env(var, term, self)

    def lookup(self, var):
        """Returns the Term bound to var, or None if var is unbound."""
        env = self
        while env.parent is not None:
            if env.var == var:
                return env.term
            env = env.parent
        return None

    def __contains__(self, var):
        return self.lookup(var) is not None

    def __len__(self):
        length, env = 0, self
        while env.parent is not None:
            length, env = length + 1, env.parent
        return length

    def __repr__(self):
        bindings, env = [], self
        while env.parent is not None:
            bindings.append(env.var)
            env = env.parent
        return f"Env({bindings})"


EMPTY_ENV = Env()


class Term(ABC):
    """A closed λ-term."""

    @abstractmethod
    def apply(self, arg):
        """Returns the Term for self applied to arg."""

    @abstractmethod
    def display(self, fresh):
        """Returns the text of self, using fresh (and longer fresh variables) for any binders."""


class Irreducible(Term):
    """Term with no further reductions, e.g. the opaque variable standing for a binder while displaying. Applying it
    just builds a bigger application.
    """

    def __init__(self, display):
        self._display = display

    def apply(self, arg):
        return Irreducible(display_application(self._display, arg.display))

    def display(self, fresh):
        return self._display(fresh)


class Closure(Term):
    """Abstraction value: an open body together with the environment it was built in."""

    def __init__(self, var, body, env):
        self.var = var
        self.body = body
        self.env = env

    def apply(self, arg):
        return self.body(self.env.bind(self.var, arg))

    def display(self, fresh):
        return display_lambda(self._display_body)(fresh)

    def _display_body(self, display_var):
        return self.apply(Irreducible(display_var)).display


class Thunk(Term):
    """Suspended Term, evaluated at most once. compute must return a Term (possibly another Thunk)."""

    def __init__(self, compute):
        self._compute = compute
        self._value = None

    @property
    def forced(self):
        return self._value is not None

    def force(self):
        """Evaluates self to an Irreducible or Closure. Chains of Thunks are followed in a loop instead of recursively,
        so a term that reduces forever loops forever instead of overflowing the stack.
        """
        if self._value is None:
            value = self._compute()
            while isinstance(value, Thunk):
                if value._value is not None:
                    value = value._value
                else:
                    following = value._compute()
                    value._compute = self.force  # every link of the chain shares the head's value
                    value = following
            self._value = value
            self._compute = None
        return self._value

    def apply(self, arg):
        return self.force().apply(arg)

    def display(self, fresh):
        return self.force().display(fresh)


class OpenTerm(ABC):
    """A term that may have free variables, to be looked up in an environment. Calling an OpenTerm with an Env closes
    it into a Term.
    """

    @abstractmethod
    def __call__(self, env):
        ...

    @property
    @abstractmethod
    def expr(self):
        """Canonical text of this term."""

    def close(self):
        """Closes self under the empty environment."""
        return self(EMPTY_ENV)

    def __repr__(self):
        return f"{type(self).__name__}('{self.expr}')"

    def __str__(self):
        return self.expr


class Variable(OpenTerm):
    """Variable reference, resolved by environment lookup."""

    def __init__(self, var, source=None, start=0):
        self.var = var
        self.source = source  # used for error messages
        self.start = start

    def __call__(self, env):
        term = env.lookup(self.var)
        if term is None:
            raise UnboundVariableError(self.var, self.source, self.start)
        return term

    @property
    def expr(self):
        return self.var

    def __eq__(self, other):
        return isinstance(other, Variable) and self.var == other.var

    def __hash__(self):
        return hash(self.var)


class Abstraction(OpenTerm):
    """λ-abstraction. Beta reduction is the Closure evaluating body in its extended environment."""

    def __init__(self, var, body):
        self.var = var
        self.body = body

    def __call__(self, env):
        return Closure(self.var, self.body, env)

    @property
    def expr(self):
        return f"(λ {self.var}. {self.body.expr})"

    def __eq__(self, other):
        return isinstance(other, Abstraction) and (self.var, self.body) == (other.var, other.body)

    def __hash__(self):
        return hash((self.var, self.body))


class Application(OpenTerm):
    """Application of fun to arg. Both are evaluated only when the result is needed, and arg only if fun uses it."""

    def __init__(self, fun, arg):
        self.fun = fun
        self.arg = arg

    def __call__(self, env):
        return Thunk(lambda: self.fun(env).apply(Thunk(lambda: self.arg(env))))

    @property
    def expr(self):
        return f"({self.fun.expr} {self.arg.expr})"

    def __eq__(self, other):
        return isinstance(other, Application) and (self.fun, self.arg) == (other.fun, other.arg)

    def __hash__(self):
        return hash((self.fun, self.arg))

