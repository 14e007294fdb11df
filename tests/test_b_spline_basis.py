import numpy as np
import pytest
from nurbskit.b_spline_basis import BSplineBasis
from nurbskit.exceptions import DimensionMismatchError, DomainError


@pytest.fixture
def quadratic_basis():
    return BSplineBasis(2, np.array([0, 0, 0, 0.5, 1, 1, 1], dtype='float'))


@pytest.fixture
def cubic_basis():
    """Cubic basis with a double interior knot."""
    return BSplineBasis(3, [0., 0., 0., 0., 0.3, 0.7, 0.7, 1., 1., 1., 1.])


def test___init__(quadratic_basis):
    basis = quadratic_basis
    assert (basis.p==2 
            and basis.m==basis.knot.size - 1 
            and basis.n==basis.m - basis.p - 1 
            and basis.span==(basis.knot[basis.p], basis.knot[basis.m - basis.p]))


def test___init___rejects_unclamped_knots():
    with pytest.raises(DimensionMismatchError):
        BSplineBasis(2, [0., 0., 0.5, 1., 1., 1.])


def test_N(quadratic_basis):
    XI = np.linspace(0, 1, 11)
    N = np.array([(XI<=0.5)*( 4*XI**2 - 4*XI + 1)                                 , 
                  (XI<=0.5)*(-6*XI**2 + 4*XI + 0) + (XI>0.5)*( 2*XI**2 - 4*XI + 2), 
                  (XI<=0.5)*( 2*XI**2 + 0*XI + 0) + (XI>0.5)*(-6*XI**2 + 8*XI - 2), 
                                                    (XI>0.5)*( 4*XI**2 - 4*XI + 1)], dtype='float')
    DN = np.array([(XI<=0.5)*(  8*XI - 4)                        , 
                   (XI<=0.5)*(-12*XI + 4) + (XI>0.5)*(  4*XI - 4), 
                   (XI<=0.5)*(  4*XI + 0) + (XI>0.5)*(-12*XI + 8), 
                                            (XI>0.5)*(  8*XI - 4)], dtype='float')
    np.testing.assert_almost_equal(quadratic_basis.N(XI).toarray(), N.T)
    np.testing.assert_almost_equal(quadratic_basis.N(XI, 1).toarray(), DN.T)


def test_second_derivative(quadratic_basis):
    D2N = quadratic_basis.N([0.25, 0.75], 2).toarray()
    np.testing.assert_almost_equal(D2N, [[8, -12, 4, 0], [0, 4, -12, 8]])
    # above the degree every derivative vanishes
    np.testing.assert_almost_equal(quadratic_basis.N([0.25, 0.75], 3).toarray(), 0)


def test_partition_of_unity(cubic_basis):
    XI = np.linspace(0, 1, 101)
    np.testing.assert_allclose(np.asarray(cubic_basis.N(XI).sum(axis=1)).ravel(), 1, atol=1e-10)
    np.testing.assert_allclose(np.asarray(cubic_basis.N(XI, 1).sum(axis=1)).ravel(), 0, atol=1e-9)


def test_local_support(cubic_basis):
    XI = np.linspace(0, 1, 100, endpoint=False)
    N = cubic_basis.N(XI).toarray()
    knot, p = cubic_basis.knot, cubic_basis.p
    for i in range(cubic_basis.n + 1):
        outside = (XI < knot[i]) | (XI >= knot[i + p + 1])
        assert np.all(N[outside, i] == 0)
        assert np.all(N[~outside, i] >= 0)


def test_rows_have_p_plus_one_entries(cubic_basis):
    N = cubic_basis.N(np.array([0., 0.3, 0.5, 0.7, 1.])).tocsr()
    np.testing.assert_array_equal(np.diff(N.indptr), cubic_basis.p + 1)


def test_find_span(quadratic_basis):
    assert quadratic_basis.find_span(0.) == 2
    assert quadratic_basis.find_span(0.25) == 2
    assert quadratic_basis.find_span(0.5) == 3
    assert quadratic_basis.find_span(1.) == 3


def test_find_span_double_knot(cubic_basis):
    assert cubic_basis.find_span(0.7) == 6
    assert cubic_basis.find_span(0.69) == 4
    assert cubic_basis.find_span(1.) == cubic_basis.n


def test_outside_domain(quadratic_basis):
    with pytest.raises(DomainError):
        quadratic_basis.find_span(1.5)
    with pytest.raises(DomainError):
        quadratic_basis.N(np.array([-0.1, 0.5]))
    with pytest.raises(DomainError):
        quadratic_basis.N(np.array([0.5]), -1)


def test_basis_funs_and_ders(quadratic_basis):
    np.testing.assert_almost_equal(quadratic_basis.basis_funs(0.5), [0.5, 0.5, 0.])
    ders = quadratic_basis.ders_basis_funs(0.25, 3)
    assert ders.shape == (4, 3)
    np.testing.assert_almost_equal(ders[0], [0.25, 0.625, 0.125])
    np.testing.assert_almost_equal(ders[1], [-2., 1., 1.])
    np.testing.assert_almost_equal(ders[2], [8., -12., 4.])
    np.testing.assert_almost_equal(ders[3], 0.)


def test_uniform(quadratic_basis):
    np.testing.assert_almost_equal(quadratic_basis.uniform(5), [0, 0.25, 0.5, 0.75, 1])
    with pytest.raises(DomainError):
        quadratic_basis.uniform(0)


def test_multiplicity_continuity(cubic_basis):
    np.testing.assert_array_equal(cubic_basis.multiplicity(), [4, 1, 2, 4])
    np.testing.assert_array_equal(cubic_basis.continuity(), [-1, 2, 1, -1])


def test_element_connectivity(quadratic_basis, cubic_basis):
    np.testing.assert_array_equal(
        quadratic_basis.element_connectivity(), [[0, 1, 2], [1, 2, 3]]
    )
    np.testing.assert_array_equal(
        cubic_basis.element_connectivity(),
        [[0, 1, 2, 3], [1, 2, 3, 4], [3, 4, 5, 6]],
    )


def test_dict_round_trip(cubic_basis):
    basis = BSplineBasis.from_dict(cubic_basis.to_dict())
    assert basis.p == cubic_basis.p
    np.testing.assert_array_equal(basis.knot, cubic_basis.knot)
