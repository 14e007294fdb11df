import numpy as np
import pytest
import scipy.sparse as sps
from nurbskit.tensor_product import apply_along_axis, kron_basis, wide_basis, wide_product


@pytest.fixture
def rng():
    return np.random.default_rng(0)


def test_wide_product(rng):
    A = sps.random(5, 3, density=0.5, format='csr', random_state=1)
    B = sps.random(5, 4, density=0.5, format='coo', random_state=2)
    C = wide_product(A, B)
    assert C.shape == (5, 12)
    A_, B_ = A.toarray(), B.toarray()
    for i in range(5):
        np.testing.assert_almost_equal(C[i].toarray().ravel(), np.kron(A_[i], B_[i]))


def test_wide_product_row_mismatch():
    with pytest.raises(ValueError):
        wide_product(sps.eye(3), sps.eye(4))


def test_kron_basis_direction_1_fastest(rng):
    N1 = sps.csr_matrix(rng.random((2, 3)))
    N2 = sps.csr_matrix(rng.random((4, 5)))
    N = kron_basis([N1, N2]).toarray()
    assert N.shape == (8, 15)
    # row a + 2 * b, column i1 + 3 * i2
    np.testing.assert_almost_equal(N[1 + 2 * 3, 2 + 3 * 4], N1[1, 2] * N2[3, 4])


def test_wide_basis_matches_kron_diagonal(rng):
    N1 = sps.csr_matrix(rng.random((3, 3)))
    N2 = sps.csr_matrix(rng.random((3, 2)))
    grid = kron_basis([N1, N2]).toarray()
    scattered = wide_basis([N1, N2]).toarray()
    for i in range(3):
        np.testing.assert_almost_equal(scattered[i], grid[i + 3 * i])


def test_apply_along_axis():
    grid = np.arange(24, dtype='float').reshape((3, 4, 2))

    def duplicate_first(arr):
        return np.vstack((arr[:1], arr)), arr.shape

    new, shape = apply_along_axis(duplicate_first, grid, 1)
    assert shape == (4, 6)
    assert new.shape == (3, 5, 2)
    np.testing.assert_array_equal(new[:, 0], grid[:, 0])
    np.testing.assert_array_equal(new[:, 1:], grid)

    new, shape = apply_along_axis(duplicate_first, grid, 0)
    assert shape == (3, 8)
    assert new.shape == (4, 4, 2)
    np.testing.assert_array_equal(new[1:], grid)
