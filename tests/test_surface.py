import numpy as np
import pytest
from numpy.testing import assert_allclose

from netsurf import curve, surface, tb
from netsurf.errors import PreconditionViolation

from conftest import make_curve


@pytest.fixture
def rational_sections():
    ''' Three rational quadratic arcs whose middle weights are 10, 1 and
    10; interpolating these weights with a parabola dips below 0. '''
    Cs = []
    for y, w in ((0.0, 10.0), (1.0, 1.0), (2.0, 10.0)):
        P = [(0, y), (1, y + 0.5), (2, y)]
        Cs.append(make_curve(P, 2, w=[1, w, 1]))
    return curve.unify_curves(Cs)


@pytest.fixture
def bilinear():
    return surface.make_bilinear_surface((0, 0, 0), (0, 1, 1),
                                         (1, 0, 1), (1, 1, 0))


def assert_sections_interpolated(S, Cs, vk):
    us = np.linspace(0.0, 1.0, 9)
    for c, v in zip(Cs, vk):
        for u in us:
            assert_allclose(S.eval_point(u, v), c.eval_point(u), atol=1e-10)


def test_surface_accepts_nonpositive_weights():
    Pw = [[(0, 0, 0, 1), (0, 1, 0, 1)],
          [(-1, 0, 0, -1), (1, 1, 0, 1)]]
    S = surface.Surface(surface.ControlNet(Pw=Pw), (1,1))
    assert not S.has_positive_weights()


def test_extract_and_swap(bilinear):
    c = bilinear.extract(0.25, 1)
    for u in (0.0, 0.4, 1.0):
        assert_allclose(c.eval_point(u), bilinear.eval_point(u, 0.25))
    S = bilinear.swap()
    assert_allclose(S.eval_point(0.3, 0.6), bilinear.eval_point(0.6, 0.3))


def test_refine_and_elevate_preserve_geometry(bilinear):
    S = bilinear.refine([0.5], 0).elevate(2, 1)
    assert S.p == (1, 3)
    for u, v in ((0.1, 0.2), (0.5, 0.5), (0.9, 0.7)):
        assert_allclose(S.eval_point(u, v), bilinear.eval_point(u, v),
                        atol=1e-12)


def test_knot_vectors_are_read_only(bilinear):
    with pytest.raises(AttributeError):
        bilinear.U = ([0, 0, 2, 2], [0, 0, 1, 1])
    assert_allclose(bilinear.U[0], [0, 0, 1, 1])


class TestEvaluation:

    @pytest.fixture
    def rational_loft(self, rational_sections):
        return surface.make_lofted_surface(rational_sections, mode='hermite')

    def test_eval_points_matches_eval_point(self, bilinear, rational_loft):
        us = np.array([0.0, 0.15, 0.5, 0.8, 1.0])
        vs = np.array([1.0, 0.3, 0.5, 0.05, 0.0])
        for S in (bilinear, rational_loft):
            Ss = S.eval_points(us, vs)
            assert Ss.shape == (3 if S is bilinear else 2, len(us))
            for i, (u, v) in enumerate(zip(us, vs)):
                assert_allclose(Ss[:,i], S.eval_point(u, v), atol=1e-12)

    def test_eval_point_zero_weight(self):
        Pw = [[(0, 0, 0, 1), (0, 1, 0, 1)],
              [(1, 0, 0, 0), (1, 1, 0, 1)]]
        S = surface.Surface(surface.ControlNet(Pw=Pw), (1,1))
        assert_allclose(S.eval_point(0.5, 0.5), (2/3, 2/3, 0))
        assert_allclose(S.eval_points([0.5], [0.5])[:,0], (2/3, 2/3, 0))

    def test_eval_derivatives_bilinear(self, bilinear):
        SKL = bilinear.eval_derivatives(0.3, 0.6, 2)
        assert SKL.shape == (3, 3, 3)
        assert_allclose(SKL[0,0], bilinear.eval_point(0.3, 0.6))
        # S(u,v) = (u, v, u + v - 2 * u * v)
        assert_allclose(SKL[1,0], (1, 0, 1 - 2 * 0.6))
        assert_allclose(SKL[0,1], (0, 1, 1 - 2 * 0.3))
        assert_allclose(SKL[1,1], (0, 0, -2))
        assert_allclose(SKL[2,0], 0.0, atol=1e-12)
        assert_allclose(SKL[2,1], 0.0)

    def test_eval_derivatives_finite_differences(self, rational_loft):
        S, h = rational_loft, 1e-6
        for u, v in ((0.2, 0.3), (0.65, 0.8)):
            SKL = S.eval_derivatives(u, v, 2)
            assert_allclose(SKL[0,0], S.eval_point(u, v), atol=1e-12)
            Su = (S.eval_point(u + h, v) - S.eval_point(u - h, v)) / (2 * h)
            Sv = (S.eval_point(u, v + h) - S.eval_point(u, v - h)) / (2 * h)
            assert_allclose(SKL[1,0], Su, atol=1e-5)
            assert_allclose(SKL[0,1], Sv, atol=1e-5)
            Suv = (S.eval_derivatives(u, v + h, 1)[1,0] -
                   S.eval_derivatives(u, v - h, 1)[1,0]) / (2 * h)
            assert_allclose(SKL[1,1], Suv, atol=1e-4)


class TestLoftParams:

    def test_monotonic_ending_at_L(self, sections):
        vk = surface.make_loft_params(sections, L=3.0)
        assert vk[0] == 0.0
        assert vk[-1] == 3.0
        assert (np.diff(vk) > 0.0).all()

    @pytest.mark.parametrize('L', [0.0, -1.0])
    def test_nonpositive_L(self, sections, L):
        with pytest.raises(PreconditionViolation):
            surface.make_loft_params(sections, L)

    def test_too_few_curves(self, sections):
        with pytest.raises(PreconditionViolation):
            surface.make_loft_params(sections[:1])

    def test_not_unified(self, sections):
        c = make_curve([(0, 0, 5), (1, 1, 5), (2, 0, 5)], 2)
        with pytest.raises(PreconditionViolation):
            surface.make_loft_params(sections + [c])

    def test_coincident_sections(self, sections):
        with pytest.raises(PreconditionViolation):
            surface.make_loft_params([sections[0], sections[0].copy()])


class TestLoft:

    @pytest.mark.parametrize('mode', surface.LOFT_MODES)
    def test_sections_interpolated(self, sections, mode):
        vk = surface.make_loft_params(sections)
        S = surface.make_lofted_surface(sections, vk, mode=mode)
        assert S.U[1][0] == 0.0 and S.U[1][-1] == 1.0
        assert_sections_interpolated(S, sections, vk)

    @pytest.mark.parametrize('mode', surface.LOFT_MODES)
    def test_rational_sections_interpolated(self, rational_sections, mode):
        vk = [0.0, 0.5, 1.0]
        S = surface.make_lofted_surface(rational_sections, vk, mode=mode)
        assert S.isrational
        assert_sections_interpolated(S, rational_sections, vk)

    def test_plain_mode_loses_positivity(self, rational_sections):
        vk = [0.0, 0.5, 1.0]
        S = surface.make_lofted_surface(rational_sections, vk, mode='plain')
        assert S.p == (2, 2)
        assert_allclose(S.cobj.Pw[1,1,-1], -8.0)
        assert not S.has_positive_weights()

    def test_hermite_mode_keeps_positivity(self, rational_sections):
        vk = [0.0, 0.5, 1.0]
        S = surface.make_lofted_surface(rational_sections, vk,
                                        mode='hermite')
        assert S.p == (2, 3)
        assert S.has_positive_weights()
        assert set(np.unique(S.cobj.Pw[...,-1])) <= {1.0, 10.0}

    def test_hermite_mode_is_C1(self, sections):
        vk = surface.make_loft_params(sections)
        S = surface.make_lofted_surface(sections, vk, mode='hermite')
        h = 1e-8
        for u in (0.2, 0.7):
            d0 = (S.eval_point(u, vk[1]) - S.eval_point(u, vk[1] - h)) / h
            d1 = (S.eval_point(u, vk[1] + h) - S.eval_point(u, vk[1])) / h
            assert_allclose(d0, d1, atol=1e-5)

    def test_two_sections_plain_is_ruled(self, sections):
        S = surface.make_lofted_surface(sections[:2], [0.0, 1.0])
        assert S.p[1] == 1
        assert_allclose(S.eval_point(0.5, 0.5),
                        0.5 * (sections[0].eval_point(0.5) +
                               sections[1].eval_point(0.5)))

    def test_default_params(self, sections):
        S = surface.make_lofted_surface(sections)
        vk = surface.make_loft_params(sections)
        assert_sections_interpolated(S, sections, vk)

    def test_loft_surface_unifies(self, sections):
        c = make_curve([(0, 0, 4), (2, 1, 4), (4, 0, 4)], 2)
        Cs = sections + [c]
        S = tb.make_loft_surface(Cs, L=2.0, mode='hermite')
        assert S.U[1][-1] == 2.0
        vk = surface.make_loft_params(curve.unify_curves(Cs), 2.0)
        assert_sections_interpolated(S, Cs, vk)

    @pytest.mark.parametrize('kwargs', [
        dict(vk=[0.0, 0.5]),
        dict(vk=[0.0, 0.5, 0.5]),
        dict(vk=[0.0, 0.7, 0.4]),
        dict(mode='bezier'),
        dict(q=0),
    ])
    def test_improper_input(self, sections, kwargs):
        with pytest.raises(PreconditionViolation):
            surface.make_lofted_surface(sections, **kwargs)

    def test_not_unified(self, sections):
        c = make_curve([(0, 0, 5), (1, 1, 5), (2, 0, 5)], 2)
        with pytest.raises(PreconditionViolation):
            surface.make_lofted_surface(sections + [c])


class TestGordon:

    ul = [0.0, 0.5, 1.0]
    vk = [0.0, 0.3, 1.0]

    def network(self, S):
        Ck = [S.extract(v, 1) for v in self.vk]
        Cl = [S.extract(u, 0) for u in self.ul]
        return Ck, Cl

    def test_bilinear_net_reproduced(self, bilinear):
        Ck, Cl = self.network(bilinear)
        G = surface.make_gordon_surface(Ck, Cl, self.ul, self.vk)
        for u in np.linspace(0.0, 1.0, 5):
            for v in np.linspace(0.0, 1.0, 5):
                assert_allclose(G.eval_point(u, v),
                                bilinear.eval_point(u, v), atol=1e-10)

    def test_network_interpolated(self):
        P = [[(0, 0, 0), (0, 1, 0.5), (0, 2, 0)],
             [(1, 0, 1), (1, 1, 2), (1, 2, 1)],
             [(2, 0, 0), (2, 1, 0.5), (2, 2, 0)]]
        S = surface.Surface(surface.ControlNet(Pw=np.dstack(
            (P, np.ones((3, 3))))), (2,2))
        Ck, Cl = self.network(S)
        G = surface.make_gordon_surface(Ck, Cl, self.ul, self.vk)
        for c, v in zip(Ck, self.vk):
            for u in np.linspace(0.0, 1.0, 5):
                assert_allclose(G.eval_point(u, v), c.eval_point(u),
                                atol=1e-10)
        for c, u in zip(Cl, self.ul):
            for v in np.linspace(0.0, 1.0, 5):
                assert_allclose(G.eval_point(u, v), c.eval_point(v),
                                atol=1e-10)

    def test_mismatched_grid(self, bilinear):
        Ck, Cl = self.network(bilinear)
        with pytest.raises(PreconditionViolation):
            surface.make_gordon_surface(Ck, Cl, self.ul[:2], self.vk)
        with pytest.raises(PreconditionViolation):
            surface.make_gordon_surface(Ck[:2], Cl, self.ul, self.vk)

    def test_nonincreasing_params(self, bilinear):
        Ck, Cl = self.network(bilinear)
        with pytest.raises(PreconditionViolation):
            surface.make_gordon_surface(Ck, Cl, [0.0, 0.5, 0.5], self.vk)

    def test_inconsistent_network_logged(self, bilinear, caplog):
        Ck, Cl = self.network(bilinear)
        Cl[1] = curve.make_linear_curve((0.5, 0, 5), (0.5, 1, 5))
        surface.make_gordon_surface(Ck, Cl, self.ul, self.vk)
        assert 'inconsistency' in caplog.text
