from typing import Iterable, Union

import numpy as np

from nurbskit.exceptions import DimensionMismatchError, DomainError


def compute_multiplicity(
    knot: Iterable[float], value: Union[float, None] = None
) -> Union[np.ndarray[np.integer], int]:
    """
    Compute the run lengths of a knot vector over its distinct values.

    Parameters
    ----------
    knot : Iterable[float]
        Non-decreasing knot vector.
    value : Union[float, None], optional
        If given, only the multiplicity of this value is returned (0 if it is
        not a knot). By default, None.

    Returns
    -------
    mult : Union[np.ndarray[np.integer], int]
        Multiplicity of each distinct knot, in increasing order of the knots,
        or the multiplicity of `value`.

    Examples
    --------
    >>> compute_multiplicity([0., 0., 0., 0.5, 1., 1., 1.])
    array([3, 1, 3])
    >>> compute_multiplicity([0., 0., 0., 0.5, 1., 1., 1.], 0.5)
    1
    """
    knot = np.asarray(knot, dtype="float")
    if value is not None:
        return int(np.count_nonzero(knot == value))
    _, mult = np.unique(knot, return_counts=True)
    return mult


def compute_continuity(knot: Iterable[float], degree: int) -> np.ndarray[np.integer]:
    """
    Continuity order at each distinct knot, `degree - multiplicity`.
    The clamped ends get -1.
    """
    return degree - compute_multiplicity(knot)


def degree_from_knot(knot: Iterable[float]) -> int:
    """
    Degree of a clamped knot vector, read from the multiplicity of its first
    knot.
    """
    return int(compute_multiplicity(knot)[0]) - 1


def required_nc(knot: Iterable[float], degree: int) -> int:
    """
    Number of control points (basis functions) a knot vector supports:
    `sum(multiplicity) - degree - 1`.
    """
    return int(np.sum(compute_multiplicity(knot))) - degree - 1


def compute_knot_vector(
    breakpoints: Iterable[float], degree: int, continuity: Iterable[int]
) -> np.ndarray[np.floating]:
    """
    Build a clamped knot vector from distinct breakpoints and the continuity
    wanted at each of them.

    Parameters
    ----------
    breakpoints : Iterable[float]
        Strictly increasing distinct knot values, ends of the domain included.
    degree : int
        Polynomial degree.
    continuity : Iterable[int]
        Continuity order at each breakpoint. Either one value per breakpoint
        (the two end values are ignored, the ends always get `degree + 1`
        repetitions) or one value per interior breakpoint only.

    Returns
    -------
    knot : np.ndarray[np.floating]
        Knot vector where the interior breakpoint `i` is repeated
        `degree - continuity[i]` times.

    Raises
    ------
    DomainError
        If `degree` is negative or an interior continuity is outside
        `[-1, degree - 1]`.
    DimensionMismatchError
        If the breakpoints are not strictly increasing or the size of
        `continuity` fits neither convention.

    Examples
    --------
    >>> compute_knot_vector([0., 0.5, 1.], 2, [-1, 1, -1])
    array([0. , 0. , 0. , 0.5, 1. , 1. , 1. ])
    >>> compute_knot_vector([0., 0.5, 1.], 2, [0])
    array([0. , 0. , 0. , 0.5, 0.5, 1. , 1. , 1. ])
    """
    breakpoints = np.asarray(breakpoints, dtype="float").ravel()
    continuity = np.asarray(continuity, dtype="int").ravel()
    if degree < 0:
        raise DomainError(f"Degree must be non-negative, got {degree}.")
    if breakpoints.size < 2 or np.any(np.diff(breakpoints) <= 0):
        raise DimensionMismatchError(
            "Breakpoints must hold at least two strictly increasing values."
        )
    if continuity.size == breakpoints.size:
        interior = continuity[1:-1]
    elif continuity.size == breakpoints.size - 2:
        interior = continuity
    else:
        raise DimensionMismatchError(
            f"Got {continuity.size} continuity values for {breakpoints.size} breakpoints."
        )
    if np.any(interior < -1) or np.any(interior > degree - 1):
        raise DomainError(
            f"Interior continuity must lie in [-1, {degree - 1}], got {interior.tolist()}."
        )
    mult = np.hstack(([degree + 1], degree - interior, [degree + 1]))
    return np.repeat(breakpoints, mult)


def check_knot_vector(knot: Iterable[float], degree: int) -> np.ndarray[np.floating]:
    """
    Validate a clamped knot vector against a degree and return it as a float
    array.

    Raises
    ------
    DimensionMismatchError
        If the knot vector is too short, decreasing, not clamped at both ends
        or holds an interior knot repeated more than `degree + 1` times.
    """
    knot = np.asarray(knot, dtype="float").ravel()
    if degree < 0:
        raise DomainError(f"Degree must be non-negative, got {degree}.")
    if knot.size < 2 * (degree + 1):
        raise DimensionMismatchError(
            f"A degree {degree} knot vector needs at least {2 * (degree + 1)} knots, got {knot.size}."
        )
    if np.any(np.diff(knot) < 0):
        raise DimensionMismatchError("Knot vector must be non-decreasing.")
    if knot[0] == knot[-1]:
        raise DimensionMismatchError("Knot vector spans an empty domain.")
    mult = compute_multiplicity(knot)
    if mult[0] != degree + 1 or mult[-1] != degree + 1:
        raise DimensionMismatchError(
            f"Knot vector must be clamped: end multiplicities {mult[0]} and {mult[-1]} "
            f"differ from degree + 1 = {degree + 1}."
        )
    if np.any(mult > degree + 1):
        raise DimensionMismatchError(
            f"Interior knots repeated more than degree + 1 = {degree + 1} times."
        )
    return knot
