import numpy as np
import pytest
from nurbskit.exceptions import DimensionMismatchError, DomainError
from nurbskit.knot_vector import (
    check_knot_vector,
    compute_continuity,
    compute_knot_vector,
    compute_multiplicity,
    degree_from_knot,
    required_nc,
)


@pytest.fixture
def knot():
    return np.array([0, 0, 0, 0.5, 1, 1, 1], dtype='float')


def test_compute_multiplicity(knot):
    np.testing.assert_array_equal(compute_multiplicity(knot), [3, 1, 3])
    assert compute_multiplicity(knot, 0.5) == 1
    assert compute_multiplicity(knot, 1.0) == 3
    assert compute_multiplicity(knot, 0.3) == 0


def test_compute_continuity(knot):
    np.testing.assert_array_equal(compute_continuity(knot, 2), [-1, 1, -1])
    np.testing.assert_array_equal(
        compute_continuity([0, 0, 0, 0, 0.5, 0.5, 1, 1, 1, 1], 3), [-1, 1, -1]
    )


def test_degree_and_required_nc(knot):
    assert degree_from_knot(knot) == 2
    assert required_nc(knot, 2) == 4
    # Bezier knot vector
    assert degree_from_knot([0, 0, 0, 0, 1, 1, 1, 1]) == 3
    assert required_nc([0, 0, 0, 0, 1, 1, 1, 1], 3) == 4


def test_compute_knot_vector_all_breakpoints():
    knot = compute_knot_vector([0, 0.25, 0.5, 1], 3, [-1, 2, 0, -1])
    np.testing.assert_array_equal(
        knot, [0, 0, 0, 0, 0.25, 0.5, 0.5, 0.5, 1, 1, 1, 1]
    )


def test_compute_knot_vector_interior_only(knot):
    np.testing.assert_array_equal(compute_knot_vector([0, 0.5, 1], 2, [1]), knot)
    # C^-1 join
    np.testing.assert_array_equal(
        compute_knot_vector([0, 1, 2], 1, [-1]), [0, 0, 1, 1, 2, 2]
    )


def test_compute_knot_vector_round_trip(knot):
    breakpoints = np.unique(knot)
    continuity = compute_continuity(knot, 2)
    np.testing.assert_array_equal(
        compute_knot_vector(breakpoints, 2, continuity), knot
    )


def test_compute_knot_vector_errors():
    with pytest.raises(DomainError):
        compute_knot_vector([0, 0.5, 1], 2, [2])
    with pytest.raises(DomainError):
        compute_knot_vector([0, 0.5, 1], 2, [-2])
    with pytest.raises(DimensionMismatchError):
        compute_knot_vector([0, 0.5, 0.5, 1], 2, [1, 1])
    with pytest.raises(DimensionMismatchError):
        compute_knot_vector([0, 0.5, 1], 2, [1, 1])


def test_check_knot_vector(knot):
    np.testing.assert_array_equal(check_knot_vector(list(knot), 2), knot)
    with pytest.raises(DimensionMismatchError):
        check_knot_vector([0, 0, 0, 0.7, 0.5, 1, 1, 1], 2)
    with pytest.raises(DimensionMismatchError):
        check_knot_vector([0, 0, 0.5, 1, 1, 1], 2)
    with pytest.raises(DimensionMismatchError):
        check_knot_vector([0, 0, 1], 2)
    with pytest.raises(DimensionMismatchError):
        check_knot_vector([0, 0, 0.5, 0.5, 0.5, 1, 1], 1)
