import numpy as np
import pytest
from numpy.testing import assert_allclose

from netsurf import conics, tb
from netsurf.errors import PreconditionViolation, RepresentationInvariantViolation


O, X, N = (1.0, -2.0, 0.5), (1.0, 0.0, 0.0), (0.0, 0.0, 1.0)


def on_ellipse(E, P):
    ''' Return the implicit residual of P w.r.t. the Ellipse E. '''
    R = np.asarray(P) - E.centre
    x, y = np.dot(R, E.x_axis), np.dot(R, E.y_axis)
    r1, r2 = E.radii
    return (x / r1)**2 + (y / r2)**2 - 1.0


@pytest.mark.parametrize('t0, t1', [
    (0.3, 2.5),
    (0.0, 2.0 * np.pi),
    (-1.0, 1.0),
    (-1.5 * np.pi, 0.25 * np.pi),
    (-2.0 * np.pi, -0.5),
    (np.pi, 2.0 * np.pi),
])
@pytest.mark.parametrize('reversed', [False, True])
def test_conversion_round_trip(t0, t1, reversed):
    E = conics.Ellipse(O, X, N, 3.0, 2.0, t0, t1, reversed)
    C = E.to_curve()
    assert C.p == (2,)
    assert C.isrational
    assert_allclose(C.domain[0], (t0, t1), atol=1e-9)
    for t in (t0, t1):
        assert_allclose(C.eval_point(t), E.eval_point(t), atol=1e-9)
    tm = 0.5 * (t0 + t1)
    assert abs(on_ellipse(E, C.eval_point(tm))) < 1e-9
    for t in np.linspace(t0, t1, 13):
        assert abs(on_ellipse(E, C.eval_point(t))) < 1e-9


def test_make_ellipse_planar():
    C = tb.make_ellipse((1.0, 1.0), (0.0, 1.0), None, 2.0, 1.0, 0.0, np.pi)
    assert C.dim == 2
    assert_allclose(C.eval_point(0.0), (1.0, 3.0), atol=1e-9)
    assert_allclose(C.eval_point(np.pi), (1.0, -1.0), atol=1e-9)
    P = C.eval_point(0.5 * np.pi)
    assert_allclose(((P[1] - 1.0) / 2.0)**2 + (P[0] - 1.0)**2, 1.0)
    # y_axis is x_axis rotated by +90 deg
    assert P[0] < 1.0


def test_make_circle():
    C = tb.make_circle(O, X, N, 2.0, 0.5, 2.0)
    for t in np.linspace(0.5, 2.0, 7):
        assert_allclose(np.linalg.norm(C.eval_point(t) - O), 2.0)


def test_full_circle_closed():
    C = tb.make_circle(O, X, N, 1.0, 0.0, 2.0 * np.pi)
    assert_allclose(C.eval_point(0.0), C.eval_point(2.0 * np.pi),
                    atol=1e-12)


def test_reversed_curve():
    E = conics.Ellipse(O, X, N, 3.0, 2.0, 0.2, 1.2, reversed=True)
    C = tb.make_ellipse(O, X, N, 3.0, 2.0, 0.2, 1.2, reversed=True)
    assert_allclose(C.eval_point(0.2), E.reversed_copy().eval_point(1.2),
                    atol=1e-9)
    assert_allclose(C.eval_point(1.2), E.reversed_copy().eval_point(0.2),
                    atol=1e-9)


def test_frame_right_handed():
    E = conics.Ellipse(O, (1.0, 0.0, 1.0), (0.0, 0.0, 2.0), 1.0, 1.0)
    assert_allclose(E.x_axis, (1.0, 0.0, 0.0))
    assert_allclose(E.y_axis, (0.0, 1.0, 0.0))
    assert_allclose(np.cross(E.x_axis, E.y_axis), E.normal)


class TestDegenerate:

    @pytest.mark.parametrize('r1, r2', [(0.0, 1.0), (1.0, 0.0), (-1.0, 1.0)])
    def test_radius(self, r1, r2):
        with pytest.raises(PreconditionViolation):
            tb.make_ellipse(O, X, N, r1, r2, 0.0, 1.0)

    def test_parallel_axes(self):
        with pytest.raises(conics.ParallelAxes):
            conics.Ellipse(O, (0.0, 0.0, 3.0), N, 1.0, 1.0)

    def test_null_normal(self):
        with pytest.raises(PreconditionViolation):
            conics.Ellipse(O, X, (0.0, 0.0, 0.0), 1.0, 1.0)

    def test_dimension(self):
        with pytest.raises(PreconditionViolation):
            conics.Ellipse((0.0,), (1.0,), None, 1.0, 1.0)

    @pytest.mark.parametrize('t0, t1', [
        (1.0, 1.0),
        (1.0, 0.5),
        (-7.0, -6.5),
        (0.5, 7.0),
        (-4.0, 4.0),
    ])
    def test_bounds(self, t0, t1):
        with pytest.raises(conics.InvalidParameterBounds) as e:
            conics.Ellipse(O, X, N, 1.0, 1.0, t0, t1)
        assert isinstance(e.value, PreconditionViolation)
        assert isinstance(e.value, RepresentationInvariantViolation)


class TestEllipse:

    def test_bounds_snapped(self):
        E = conics.Ellipse(O, X, N, 1.0, 1.0, 1e-13, 2.0 * np.pi + 1e-13)
        assert E.domain == (0.0, 2.0 * np.pi)
        assert E.is_closed()

    def test_eval_derivatives(self):
        h = 1e-6
        for rev in (False, True):
            E = conics.Ellipse(O, X, N, 3.0, 2.0, 0.0, 2.0, rev)
            CK = E.eval_derivatives(0.7, 2)
            assert_allclose(CK[0], E.eval_point(0.7))
            fd1 = (E.eval_point(0.7 + h) - E.eval_point(0.7 - h)) / (2 * h)
            assert_allclose(CK[1], fd1, atol=1e-7)
            fd2 = (E.eval_derivatives(0.7 + h, 1)[1] -
                   E.eval_derivatives(0.7 - h, 1)[1]) / (2 * h)
            assert_allclose(CK[2], fd2, atol=1e-7)

    def test_length(self):
        assert_allclose(conics.Circle(O, X, N, 2.0).length(), 4.0 * np.pi)
        half = conics.Circle(O, X, N, 1.0, 0.0, np.pi)
        assert_allclose(half.length(), np.pi)

    def test_properties(self):
        E = conics.Ellipse(O, X, N, 3.0, 0.5, 0.0, 1.0)
        assert not E.is_closed()
        assert E.is_degenerate(1.0)
        assert not E.is_degenerate(0.1)
        assert E.is_in_plane((0.0, 0.0, -1.0), 1e-9)
        assert not E.is_in_plane((1.0, 0.0, 0.0), 1e-9)

    def test_modifiers_return_new_objects(self):
        E = conics.Ellipse(O, X, N, 3.0, 2.0, 0.0, 1.0)
        Es = E.sub_curve(0.2, 0.4)
        assert Es.domain == (0.2, 0.4)
        assert E.domain == (0.0, 1.0)
        Er = E.reversed_copy()
        assert Er.isreversed and not E.isreversed
        assert_allclose(Er.eval_point(0.0), E.eval_point(1.0))
        Et = E.translate((0.0, 0.0, 1.0))
        assert_allclose(Et.eval_point(0.5) - E.eval_point(0.5), (0, 0, 1))
        with pytest.raises(conics.InvalidParameterBounds):
            E.with_bounds(0.4, 0.2)

    def test_circle_modifiers_keep_type(self):
        C = conics.Circle(O, X, N, 2.0).with_bounds(0.0, 1.0)
        assert isinstance(C, conics.Circle)
        assert C.radius == 2.0


class TestClosestPoint:

    unit = conics.Circle((0.0, 0.0, 0.0), X, N, 1.0)

    def test_unit_circle(self):
        cp = self.unit.closest_point((2.0, 2.0, 0.0))
        assert_allclose(cp.param, 0.25 * np.pi)
        assert_allclose(cp.dist, 2.0 * np.sqrt(2.0) - 1.0)
        assert_allclose(cp.point, (np.sqrt(0.5), np.sqrt(0.5), 0.0))

    def test_unit_circle_seeded(self):
        cp = self.unit.closest_point((1.0, 0.0, 0.0), seed=6.0)
        assert_allclose(cp.param, 2.0 * np.pi)
        C = conics.Circle((0.0, 0.0, 0.0), X, N, 1.0, -2.0 * np.pi, 0.0)
        cp = C.closest_point((0.0, -3.0, 0.0), seed=-1.0)
        assert_allclose(cp.param, -0.5 * np.pi)
        cp = C.closest_point((0.0, 3.0, 0.0))
        assert_allclose(cp.param, -1.5 * np.pi)

    def test_unit_ellipse_matches_circle(self):
        E = conics.Ellipse((0.0, 0.0, 0.0), X, N, 1.0, 1.0)
        for P in ((2.0, 2.0, 0.0), (-0.5, 0.1, 0.3), (0.2, -3.0, 0.0)):
            cp = E.closest_point(P, seed=1.0)
            cc = self.unit.closest_point(P, seed=1.0)
            assert cp.converged
            assert_allclose(cp.param, cc.param, atol=1e-9)
            assert_allclose(cp.dist, cc.dist, atol=1e-9)

    def test_clamped_to_nearest_bound(self):
        C = conics.Circle((0.0, 0.0, 0.0), X, N, 1.0, 0.0, 0.5 * np.pi)
        cp = C.closest_point((-1.0, 0.1, 0.0))
        assert_allclose(cp.param, 0.5 * np.pi)

    def test_ellipse(self):
        E = conics.Ellipse(O, X, N, 3.0, 1.0)
        cp = E.closest_point(np.add(O, (0.0, 3.0, 0.0)))
        assert_allclose(cp.param, 0.5 * np.pi)
        assert_allclose(cp.dist, 2.0)
        P = np.add(O, (3.5, 0.8, 0.0))
        cp = E.closest_point(P)
        C, CP = E.eval_derivatives(cp.param, 1)
        assert cp.converged
        assert abs(np.dot(CP, C - P)) < 1e-8

    def test_centre(self):
        E = conics.Ellipse(O, X, N, 3.0, 1.0, 0.0, 1.0)
        cp = E.closest_point(O)
        assert 0.0 <= cp.param <= 1.0

    def test_reversed(self):
        E = conics.Ellipse(O, X, N, 3.0, 1.0, 0.0, 2.0, reversed=True)
        P = E.eval_point(0.5) + 0.1 * E.normal
        cp = E.closest_point(P)
        assert_allclose(cp.param, 0.5, atol=1e-9)
