from typing import Callable, Iterable

import numpy as np
import numba as nb
import scipy.sparse as sps


def kron_basis(mats: Iterable[sps.spmatrix]) -> sps.csr_matrix:
    """
    Tensor product basis on a grid of parameters.

    Parameters
    ----------
    mats : Iterable[sps.spmatrix]
        Per direction basis matrices `[N_1, N_2, ...]`, `N_d` of shape
        (n_xi_d, nc_d).

    Returns
    -------
    N : sps.csr_matrix
        `kron(..., N_2, N_1)`, of shape (n_xi_1 * n_xi_2 * ..., nc_1 * nc_2 * ...).
        Direction 1 is the fastest running index both for the rows (grid
        nodes) and for the columns (control points).
    """
    N = None
    for mat in mats:
        N = mat.tocsr() if N is None else sps.kron(mat, N, format="csr")
    return N


def wide_basis(mats: Iterable[sps.spmatrix]) -> sps.csr_matrix:
    """
    Tensor product basis at scattered parameters: the row `i` of the result
    is `kron(..., N_2[i], N_1[i])`, direction 1 running fastest.
    """
    N = None
    for mat in mats:
        N = mat.tocsr() if N is None else wide_product(mat, N)
    return N


def wide_product(A: sps.spmatrix, B: sps.spmatrix) -> sps.csr_matrix:
    """
    Row-wise Kronecker product of two sparse matrices sharing their rows.

    Both operands are brought to CSR with summed duplicates, then a single
    compiled pass builds the CSR arrays of the result directly: the nonzero
    `(a_idx, b_idx)` pairs of row `i` give column `a_idx * B.shape[1] + b_idx`,
    so `B`'s columns run fastest.

    Parameters
    ----------
    A : sps.spmatrix
        Basis of the slow direction, of shape (n, n_a).
    B : sps.spmatrix
        Basis of the fast direction, of shape (n, n_b).

    Returns
    -------
    C : sps.csr_matrix
        Matrix of shape (n, n_a * n_b) whose row `i` is `kron(A[i], B[i])`.

    Raises
    ------
    ValueError
        If `A` and `B` differ in their number of rows.
    """
    if A.shape[0] != B.shape[0]:
        raise ValueError(
            f"Cannot pair the rows of matrices with {A.shape[0]} and {B.shape[0]} rows."
        )
    A = sps.csr_matrix(A)
    B = sps.csr_matrix(B)
    A.sum_duplicates()
    B.sum_duplicates()
    height = A.shape[0]
    b_width = B.shape[1]
    data, indices, indptr = _row_kron(
        A.data.astype(np.float64),
        A.indices.astype(np.int64),
        A.indptr.astype(np.int64),
        B.data.astype(np.float64),
        B.indices.astype(np.int64),
        B.indptr.astype(np.int64),
        b_width,
    )
    return sps.csr_matrix(
        (data, indices, indptr), shape=(height, A.shape[1] * b_width)
    )


@nb.njit(
    nb.types.Tuple((nb.float64[:], nb.int64[:], nb.int64[:]))(
        nb.float64[:],
        nb.int64[:],
        nb.int64[:],
        nb.float64[:],
        nb.int64[:],
        nb.int64[:],
        nb.int64,
    ),
    cache=True,
)
def _row_kron(a_data, a_indices, a_indptr, b_data, b_indices, b_indptr, b_width):
    height = a_indptr.size - 1
    out_indptr = np.zeros(height + 1, dtype=np.int64)
    for i in range(height):
        nnz_a = a_indptr[i + 1] - a_indptr[i]
        nnz_b = b_indptr[i + 1] - b_indptr[i]
        out_indptr[i + 1] = out_indptr[i] + nnz_a * nnz_b
    out_data = np.empty(out_indptr[height], dtype=np.float64)
    out_indices = np.empty(out_indptr[height], dtype=np.int64)
    for i in range(height):
        off = out_indptr[i]
        for ia in range(a_indptr[i], a_indptr[i + 1]):
            for ib in range(b_indptr[i], b_indptr[i + 1]):
                out_indices[off] = a_indices[ia] * b_width + b_indices[ib]
                out_data[off] = a_data[ia] * b_data[ib]
                off += 1
    return (out_data, out_indices, out_indptr)


def apply_along_axis(
    func1d: Callable, arr: np.ndarray, axis: int, *args
) -> tuple:
    """
    Run a 1D control net algorithm along one axis of an N-D control grid.

    The target axis is moved to the front and the other axes are flattened so
    that `func1d` sees a 2D array of shape (n_axis, n_other): each row gathers
    every entry sharing the same index along `axis`, coordinates running
    fastest. The array returned by `func1d` is reshaped back, with its first
    dimension becoming the new size of `axis`.

    Parameters
    ----------
    func1d : Callable
        Called as `func1d(arr2d, *args)`; must return a tuple whose first item
        is the new 2D array. The other items are passed through.
    arr : np.ndarray
        Control grid, for instance of shape (nc_2, nc_1, c).
    axis : int
        Axis along which to apply `func1d`.

    Returns
    -------
    result : tuple
        `(new_arr, *extras)`.

    Examples
    --------
    >>> grid = np.arange(12.).reshape((3, 2, 2))
    >>> new, = apply_along_axis(lambda a: (a[::-1],), grid, 1)
    >>> new[0]
    array([[2., 3.],
           [0., 1.]])
    """
    moved = np.moveaxis(arr, axis, 0)
    rest_shape = moved.shape[1:]
    out = func1d(np.ascontiguousarray(moved.reshape((moved.shape[0], -1))), *args)
    new2d, extras = out[0], out[1:]
    new = new2d.reshape((new2d.shape[0], *rest_shape))
    return (np.ascontiguousarray(np.moveaxis(new, 0, axis)), *extras)
