import numpy as np
import pytest
from nurbskit.b_spline_basis import BSplineBasis
from nurbskit.exceptions import DimensionMismatchError, DomainError, InvalidDirectionError
from nurbskit.nurbs_surface import NURBSSurface


@pytest.fixture
def knots():
    return (np.array([0, 0, 0, 0.5, 1, 1, 1], dtype='float'), 
            np.array([0, 0, 0.3, 1, 1], dtype='float'))


@pytest.fixture
def surface(knots):
    """Quadratic x linear surface with 4 x 3 control points in 3D."""
    rng = np.random.default_rng(11)
    return NURBSSurface(*knots, rng.random((12, 3)))


@pytest.fixture
def rational_surface(knots):
    rng = np.random.default_rng(12)
    return NURBSSurface(*knots, rng.random((12, 3)), 0.5 + rng.random(12))


@pytest.fixture
def grid():
    return (np.linspace(0, 1, 7), np.linspace(0, 1, 5))


def test___init__(surface):
    np.testing.assert_array_equal(surface.getDegrees(), [2, 1])
    assert surface.get_shape() == (4, 3)
    assert surface.get_nc(1) == 4 and surface.get_nc(2) == 3
    np.testing.assert_array_equal(surface.multiplicity(2), [2, 1, 2])
    assert not surface.is_rational()


def test_set_from_breakpoints():
    surf = NURBSSurface()
    surf.set_from_breakpoints([0, 0.5, 1], [0, 1], [2, 1], [-1, 1, -1], [-1, -1], np.zeros((8, 2)))
    np.testing.assert_array_equal(surf.knot(1), [0, 0, 0, 0.5, 1, 1, 1])
    np.testing.assert_array_equal(surf.knot(2), [0, 0, 1, 1])
    with pytest.raises(DimensionMismatchError):
        surf.set_from_breakpoints([0, 0.5, 1], [0, 1], [2, 1], [-1, 1, -1], [-1, -1], np.zeros((9, 2)))


def test_grid_ordering(surface, knots, grid):
    xi, eta = grid
    N1 = BSplineBasis(2, knots[0]).N(xi).toarray()
    N2 = BSplineBasis(1, knots[1]).N(eta).toarray()
    P = surface.get_ctrl_pts()
    Xg = surface.evaluate(grid)
    assert Xg.shape == (35, 3)
    for a in range(xi.size):
        for b in range(eta.size):
            expected = sum(N1[a, i1] * N2[b, i2] * P[i1 + 4 * i2] for i1 in range(4) for i2 in range(3))
            np.testing.assert_almost_equal(Xg[a + xi.size * b], expected)


def test_scattered_parameters(surface, grid):
    xi, eta = grid
    Xg = surface.evaluate(grid)
    XI = np.array([[xi[2], xi[6], xi[0]], [eta[1], eta[4], eta[3]]])
    np.testing.assert_almost_equal(surface.evaluate(XI), Xg[[2 + 7 * 1, 6 + 7 * 4, 0 + 7 * 3]])
    assert surface.get_ng() == (3,)
    with pytest.raises(DimensionMismatchError):
        surface.evaluate(np.zeros((3, 4)))


def test_corner_interpolation(surface):
    Xg = surface.evaluate(res=2)
    P = surface.get_ctrl_pts()
    np.testing.assert_almost_equal(Xg, P[[0, 3, 8, 11]])


def test_partition_of_unity(rational_surface):
    R = rational_surface.basis(res=(9, 6))
    assert R.shape == (54, 12)
    np.testing.assert_allclose(np.asarray(R.sum(axis=1)).ravel(), 1, atol=1e-10)


@pytest.mark.parametrize('direction', [1, 2])
def test_insert_knots_invariance(rational_surface, grid, direction):
    before = rational_surface.evaluate(grid)
    rational_surface.insert_knots([0.2, 0.6], [1, 1], direction=direction)
    shape = [4, 3]
    shape[direction - 1] += 2
    assert rational_surface.get_shape() == tuple(shape)
    np.testing.assert_allclose(rational_surface.Xg, before, atol=1e-10)


def test_insert_knots_other_direction_untouched(surface):
    knot1 = surface.knot(1)
    surface.insert_knots(0.5, direction=2)
    np.testing.assert_array_equal(surface.knot(1), knot1)
    np.testing.assert_array_equal(surface.knot(2), [0, 0, 0.3, 0.5, 1, 1])


@pytest.mark.parametrize('scale', [1, 1e3, 1e5])
@pytest.mark.parametrize('direction', [1, 2])
def test_insert_then_remove(rational_surface, direction, scale):
    rational_surface.modify_ctrl_pts(scale*rational_surface.get_ctrl_pts(), np.arange(12))
    ctrl_pts, weights = rational_surface.get_ctrl_pts(), rational_surface.get_weights()
    knot = rational_surface.knot(direction)
    p = rational_surface.degree(direction)
    rational_surface.insert_knots(0.8, p, direction=direction)
    removed = rational_surface.remove_knots(0.8, p, direction=direction)
    np.testing.assert_array_equal(removed, [p])
    np.testing.assert_allclose(rational_surface.knot(direction), knot)
    np.testing.assert_allclose(rational_surface.get_ctrl_pts(), ctrl_pts, atol=1e-9*scale)
    np.testing.assert_allclose(rational_surface.get_weights(), weights, atol=1e-9)


def test_remove_knots_failure(surface):
    ctrl_pts = surface.get_ctrl_pts()
    np.testing.assert_array_equal(surface.remove_knots(0.3, direction=2), [0])
    np.testing.assert_array_equal(surface.get_ctrl_pts(), ctrl_pts)


@pytest.mark.parametrize('direction, t', [(1, 1), (2, 2)])
def test_elevate_degree(rational_surface, grid, direction, t):
    before = rational_surface.evaluate(grid)
    degrees = rational_surface.getDegrees()
    rational_surface.elevate_degree(t, direction=direction)
    degrees[direction - 1] += t
    np.testing.assert_array_equal(rational_surface.getDegrees(), degrees)
    np.testing.assert_allclose(rational_surface.Xg, before, atol=1e-10)


def test_invalid_direction(surface):
    for direction in (0, 3):
        with pytest.raises(InvalidDirectionError):
            surface.insert_knots(0.5, direction=direction)
        with pytest.raises(InvalidDirectionError):
            surface.remove_knots(0.5, direction=direction)
        with pytest.raises(InvalidDirectionError):
            surface.elevate_degree(1, direction=direction)
        with pytest.raises(InvalidDirectionError):
            surface.knot(direction)


def test_derivative_default_is_mixed(surface, grid):
    dN = surface.derivative(grid)
    np.testing.assert_almost_equal(dN.toarray(), surface.derivative(grid, k=[1, 1]).toarray())


def test_partial_derivatives(surface):
    XI = np.array([[0.1, 0.4, 0.7], [0.2, 0.5, 0.9]])
    P = surface.get_ctrl_pts()
    h = 1e-6
    for axis, k in enumerate(([1, 0], [0, 1])):
        dXI = np.zeros_like(XI)
        dXI[axis] = h
        fd = (surface.evaluate(XI + dXI) - surface.evaluate(XI - dXI)) / (2 * h)
        np.testing.assert_allclose(surface.derivative(XI, k=k) @ P, fd, atol=1e-5)


def test_out_of_domain(surface):
    with pytest.raises(DomainError):
        surface.evaluate((np.array([0.5]), np.array([1.1])))
    with pytest.raises(DomainError):
        surface.insert_knots(-0.5, direction=2)


def test_element_connectivity(surface):
    conn = surface.element_connectivity()
    assert conn.shape == (4, 6)
    np.testing.assert_array_equal(conn[0], [0, 1, 2, 4, 5, 6])
    np.testing.assert_array_equal(conn[1], [1, 2, 3, 5, 6, 7])
    np.testing.assert_array_equal(conn[3], [5, 6, 7, 9, 10, 11])


def test_save_load(rational_surface, tmp_path):
    filepath = str(tmp_path / "surface.json")
    rational_surface.save(filepath)
    loaded = NURBSSurface.load(filepath)
    np.testing.assert_array_equal(loaded.get_shape(), rational_surface.get_shape())
    np.testing.assert_allclose(loaded.evaluate(res=4), rational_surface.evaluate(res=4))
