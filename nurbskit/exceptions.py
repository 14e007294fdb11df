"""
Errors raised by `nurbskit`.

Every error derives from `NURBSError` so callers can catch the whole family at
once, and from the builtin (`ValueError` or `RuntimeError`) that best
describes it so generic handlers keep working.
"""


class NURBSError(Exception):
    """
    Base class of every error raised by the package.
    """


class UnsetStateError(NURBSError, RuntimeError):
    """
    An operation needs data (knots, control points, weights, evaluation
    parameters) that was never configured.
    """


class InvalidDirectionError(NURBSError, ValueError):
    """
    A parametric direction outside of `1 ... NPa` was requested.
    """


class DimensionMismatchError(NURBSError, ValueError):
    """
    Knot vector, control points and weights do not fit together, or a knot
    vector is malformed.
    """


class DomainError(NURBSError, ValueError):
    """
    A parameter lies outside the knot domain, or a count (repetition, degree
    increment, resolution) is out of its admissible range.
    """
