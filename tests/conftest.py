import numpy as np
import pytest

from netsurf import nurbs
from netsurf.curve import Curve, ControlPolygon


def make_curve(P, p, U=None, w=None):
    ''' Build a Curve from Euclidean points (and optional weights). '''
    Pw = nurbs.homogenize(P, w)
    return Curve(ControlPolygon(Pw=Pw), (p,), None if U is None else (U,))


@pytest.fixture
def cubic_curve():
    P = [(0, 0, 0), (1, 2, 0), (2, -1, 1), (3, 1, 0), (4, 0, 2)]
    U = [0, 0, 0, 0, 0.4, 1, 1, 1, 1]
    return make_curve(P, 3, U)


@pytest.fixture
def rational_curve():
    P = [(0, 0), (1, 1), (2, 0.5), (3, 0)]
    return make_curve(P, 2, w=[1, 2, 0.5, 1])


@pytest.fixture
def sections():
    ''' Three cubic sections of a duct-like family, stacked in z. '''
    Cs = []
    for z, a in ((0.0, 1.0), (1.0, 1.5), (2.5, 0.8)):
        P = [(a * x, y, z) for x, y in
             ((0, 0), (1, 1), (2, 1.5), (3, 1), (4, 0))]
        Cs.append(make_curve(P, 3))
    return Cs


@pytest.fixture
def params():
    return np.linspace(0.0, 1.0, 11)
