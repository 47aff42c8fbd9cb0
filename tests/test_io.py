import numpy as np
import pytest
from numpy.testing import assert_allclose

from netsurf import io, surface, tb


@pytest.fixture
def ellipse():
    return tb.make_ellipse((0, 0, 1), (1, 0, 0), (0, 0, 1), 3.0, 2.0,
                           -1.0, 2.0)


def test_curve_text_round_trip(tmp_path, ellipse, cubic_curve):
    for c in (ellipse, cubic_curve):
        fn = str(tmp_path / 'c.crv')
        assert io.write_curve(c, fn)
        ci = io.read_curve(fn)
        assert ci.isrational == c.isrational
        assert ci.isequivalent(c, 1e-12)
        for u in np.linspace(*c.domain[0], num=9):
            assert_allclose(ci.eval_point(u), c.eval_point(u), atol=1e-12)


def test_curve_text_layout(tmp_path, rational_curve):
    fn = tmp_path / 'c.crv'
    io.write_curve(rational_curve, str(fn))
    lines = fn.read_text().splitlines()
    assert lines[0] == 'CURVE'
    assert lines[1].split() == ['2', '1']
    assert lines[2].split() == ['4', '3']
    assert len(lines[3].split()) == 7
    assert len(lines) == 4 + 4
    assert [float(x) for x in lines[5].split()] == [2.0, 2.0, 2.0]


def test_surface_text_round_trip(tmp_path, sections):
    S = surface.make_lofted_surface(sections, mode='hermite')
    fn = str(tmp_path / 's.srf')
    assert io.write_surface(S, fn)
    Si = io.read_surface(fn)
    assert Si.isequivalent(S, 1e-12)
    for u, v in ((0.0, 0.0), (0.3, 0.6), (1.0, 0.2)):
        assert_allclose(Si.eval_point(u, v), S.eval_point(u, v), atol=1e-12)


def test_surface_zero_weight_round_trip(tmp_path):
    Pw = [[(0, 0, 0, 1), (0, 1, 0, 1)],
          [(1, 0, 0, 0), (1, 1, 0, 1)]]
    S = surface.Surface(surface.ControlNet(Pw=Pw), (1,1))
    fn = str(tmp_path / 's.srf')
    io.write_surface(S, fn)
    Si = io.read_surface(fn)
    assert_allclose(Si.cobj.Pw, S.cobj.Pw)
    assert_allclose(Si.eval_point(0.5, 0.5), (2/3, 2/3, 0))


def test_wrong_object(tmp_path, cubic_curve, sections):
    fn = str(tmp_path / 'x')
    with pytest.raises(io.UnrecognizedObject):
        io.write_surface(cubic_curve, fn)
    io.write_curve(cubic_curve, fn)
    with pytest.raises(io.UnrecognizedObject):
        io.read_surface(fn)


def test_malformed_file(tmp_path):
    fn = tmp_path / 'bad.crv'
    fn.write_text('CURVE\n3 0\n2 2\n0 0 1\n')
    with pytest.raises(io.MalformedFile):
        io.read_curve(str(fn))


def test_pickle_round_trip(tmp_path, ellipse, sections):
    S = surface.make_lofted_surface(sections)
    fn = str(tmp_path / 'objs.p')
    assert io.save(ellipse, S, fn=fn)
    ci, Si = io.load(fn)
    assert ci.isequivalent(ellipse)
    assert Si.isequivalent(S)
