import numpy as np
import pytest
from numpy.testing import assert_allclose

from netsurf import knot
from netsurf.errors import PreconditionViolation, RepresentationInvariantViolation


def test_clean_knot_vec_collapses_close_knots():
    U = np.array([0, 0, 0.5, 0.5 + 1e-12, 1, 1])
    knot.clean_knot_vec(U)
    assert U[2] == U[3] == 0.5


@pytest.mark.parametrize('U', [
    [0, 0, 0.5, 0.4, 1, 1],
    [0, 0.2, 0.5, 1, 1, 1],
    [0, 0, 0.5, 0.5, 0.5, 1, 1],
])
def test_check_knot_vec_rejects(U):
    U = np.array(U, dtype=float)
    with pytest.raises(RepresentationInvariantViolation):
        knot.check_knot_vec(U.size - 3, 1, U)


def test_check_knot_outside_range():
    U = np.array([0, 0, 1, 1.0])
    with pytest.raises(PreconditionViolation):
        knot.check_knot(U, 1.5)
    assert knot.check_knot(U, 1.0 + 1e-12) == 1.0


def test_loft_param_rms_gaps():
    Q = np.zeros((3, 2, 3))
    Q[1,:,2] = 1.0
    Q[2,:,2] = 4.0
    vk = knot.loft_param(2, Q, L=2.0)
    assert_allclose(vk, [0.0, 0.5, 2.0])
    assert vk[-1] == 2.0


def test_loft_param_coincident_sections():
    Q = np.zeros((3, 2, 3))
    Q[2] = 1.0
    with pytest.raises(knot.CoincidentSections):
        knot.loft_param(2, Q)


def test_hermite_knot_vec():
    U = knot.hermite_knot_vec(3, [0.0, 0.2, 0.7, 1.0])
    assert_allclose(U, [0, 0, 0, 0, 0.2, 0.2, 0.7, 0.7, 1, 1, 1, 1])
    knot.check_knot_vec(7, 3, U)


def test_merge_and_missing_knot_vecs():
    U1 = np.array([0, 0, 0, 0.5, 1, 1, 1])
    U2 = np.array([0, 0, 0.25, 0.5, 0.5, 1, 1])
    U = knot.merge_knot_vecs(U1, U2)
    assert_allclose(U, [0, 0, 0, 0.25, 0.5, 0.5, 1, 1, 1])
    assert_allclose(knot.missing_knot_vec(U, U1), [0.25, 0.5])


def test_remap_knot_vec():
    U = np.array([0, 0, 0.25, 1, 1])
    knot.remap_knot_vec(U, 2.0, 6.0)
    assert_allclose(U, [2, 2, 3, 6, 6])
