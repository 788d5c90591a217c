import numpy as np
import pytest

from maybe_inplace import CAN_MUTATE, CANNOT_MUTATE, bb, matmul_into, setindex_trait

sparse = pytest.importorskip("scipy.sparse")


@bb
def sparse_product(C, A, B):
    with bb:
        C = A @ B
    return C


@pytest.mark.parametrize("fmt", ["csr", "csc", "lil", "dok"])
def test_writable_formats_can_mutate(fmt: str) -> None:
    assert setindex_trait(sparse.random(3, 3, density=0.5, format=fmt)) is CAN_MUTATE


@pytest.mark.parametrize("fmt", ["coo", "dia", "bsr"])
def test_read_only_formats_cannot_mutate(fmt: str) -> None:
    assert setindex_trait(sparse.eye(3, format=fmt)) is CANNOT_MUTATE


def test_sparse_matrix_classes_are_covered() -> None:
    assert setindex_trait(sparse.lil_matrix((2, 2))) is CAN_MUTATE
    assert setindex_trait(sparse.coo_matrix((2, 2))) is CANNOT_MUTATE


def test_matmul_into_sparse_target() -> None:
    C = sparse.lil_array((2, 2))
    A = sparse.csr_array(np.array([[1.0, 2.0], [0.0, 1.0]]))
    B = np.eye(2)
    result = matmul_into(C, A, B)
    assert result is C
    np.testing.assert_array_equal(C.toarray(), [[1.0, 2.0], [0.0, 1.0]])


def test_matmul_into_sparse_target_accumulates() -> None:
    C = sparse.lil_array(np.ones((2, 2)))
    A = sparse.csr_array(np.eye(2))
    B = 2.0 * np.eye(2)
    matmul_into(C, A, B, 3, 1)
    np.testing.assert_array_equal(C.toarray(), [[7.0, 1.0], [1.0, 7.0]])


def test_sparse_product_through_rewrite() -> None:
    A = sparse.csr_array(np.array([[1.0, 1.0], [0.0, 1.0]]))
    B = sparse.csr_array(np.array([[2.0, 0.0], [0.0, 3.0]]))
    expected = [[2.0, 3.0], [0.0, 3.0]]

    mutable = sparse.lil_array((2, 2))
    assert sparse_product(mutable, A, B) is mutable
    np.testing.assert_array_equal(mutable.toarray(), expected)

    frozen = sparse.coo_array((2, 2))
    result = sparse_product(frozen, A, B)
    assert result is not frozen
    np.testing.assert_array_equal(result.toarray(), expected)
    assert frozen.nnz == 0
