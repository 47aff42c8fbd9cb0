import numpy as np
import pytest
from numpy.testing import assert_allclose

from netsurf import basis


U = np.array([0, 0, 0, 0.25, 0.5, 0.5, 1, 1, 1], dtype=float)
n, p = 5, 2


@pytest.mark.parametrize('u, span', [
    (0.0, 2),
    (0.1, 2),
    (0.25, 3),
    (0.5, 5),
    (0.75, 5),
    (1.0, 5),
])
def test_find_span(u, span):
    assert basis.find_span(n, p, U, u) == span
    assert basis.find_span_v(n, p, U, [u], 1)[0] == span


def test_find_span_mult():
    assert basis.find_span_mult(n, p, U, 0.5) == (5, 2)
    assert basis.find_span_mult(n, p, U, 1.0 + 1e-12) == (5, 3)
    assert basis.find_span_mult(n, p, U, 0.3) == (3, 0)


def test_partition_of_unity():
    for u in np.linspace(0.0, 1.0, 13):
        i = basis.find_span(n, p, U, u)
        N = basis.basis_funs(i, u, p, U)
        assert (N >= 0.0).all()
        assert_allclose(N.sum(), 1.0)


def test_ders_basis_funs():
    u, h = 0.35, 1e-6
    i = basis.find_span(n, p, U, u)
    ders = basis.ders_basis_funs(i, u, p, 2, U)
    assert_allclose(ders[0], basis.basis_funs(i, u, p, U))
    fd = (basis.basis_funs(i, u + h, p, U) -
          basis.basis_funs(i, u - h, p, U)) / (2 * h)
    assert_allclose(ders[1], fd, atol=1e-7)
