"""
Exceptions raised by the orrery engine.
"""


class OrreryError(Exception):
    """Base class for all engine errors."""


class InvalidDate(OrreryError, ValueError):
    """A calendar date is malformed or outside the supported range, or a Julian date is not finite."""


class InvalidElements(OrreryError, ValueError):
    """An orbital element set is malformed. Raised at load time."""


class UnknownBody(OrreryError, KeyError):
    """The requested body key is not tracked by the engine."""

    def __str__(self):
        return str(self.args[0]) if self.args else ""


class DegenerateDirection(OrreryError, ArithmeticError):
    """A direction was requested for a body sitting at the coordinate origin."""


class NonConvergence(OrreryError, ArithmeticError):
    """
    Kepler's equation did not reach the requested residual within the iteration budget.

    Only raised by the strict solving path; the default path returns the best
    estimate and logs a warning.
    """

    def __init__(self, M, e, residual, iterations):
        self.M = M
        self.e = e
        self.residual = residual
        self.iterations = iterations
        super().__init__(
            f"Kepler solve did not converge for M={M}, e={e}: "
            f"residual {residual:.3e} after {iterations} iterations"
        )
