import gzip
import logging
import pickle

import numpy as np

from . import nurbs
from .curve import Curve, ControlPolygon
from .surface import Surface, ControlNet


__all__ = ['save', 'load',
           'write_curve', 'read_curve',
           'write_surface', 'read_surface']


logger = logging.getLogger(__name__)


# Text files are laid out as follows (one item per line):
#
#   CURVE | SURFACE
#   dim rational
#   n + 1 p + 1                  (curves)
#   n + 1 m + 1 p + 1 q + 1      (surfaces)
#   U                            (V follows U for surfaces)
#   wx wy [wz] [w]               (one control point per line)
#
# Control points are homogeneous: the weighted coordinates followed by
# the weight, which is written only if the object is rational.  Surface
# control points are listed row by row, i.e. P00, P01, ..., P0m, P10, ...

FMT = '%.17g'


def save(*os, **kwargs):

    ''' Save (pickle) any number of objects.

    Parameters
    ----------
    os = the objects to be pickled
    fn = the name of the pickle (default: 'tmp.p')

    Returns
    -------
    True = on success

    '''

    fn = kwargs.get('fn', 'tmp.p')
    with gzip.open(fn, 'wb') as fh:
        for o in os:
            pickle.dump(o, fh, pickle.HIGHEST_PROTOCOL)
    logger.debug('pickled %d object(s) to %s', len(os), fn)
    return True

def load(fn='tmp.p'):

    ''' Load (unpickle) a pickle.

    Parameters
    ----------
    fn = the name of the pickle (default: 'tmp.p')

    Returns
    -------
    os = the unpickled objects

    '''

    with gzip.open(fn, 'rb') as fh:
        os = []
        while True:
            try:
                o = pickle.load(fh)
            except EOFError:
                break
            os.append(o)
        return os

def write_curve(c, fn='tmp.crv'):

    ''' Write a Curve to a text file.

    Parameters
    ----------
    c = the Curve to write
    fn = the name of the file (default: 'tmp.crv')

    Returns
    -------
    True = on success

    '''

    if not isinstance(c, Curve):
        raise UnrecognizedObject(c)
    n, p, U, Pw = c.var()
    with open(fn, 'w') as fh:
        fh.write('CURVE\n')
        _write_header(fh, c, (n + 1, p + 1))
        _write_row(fh, U)
        _write_points(fh, Pw, c.isrational)
    return True

def read_curve(fn='tmp.crv'):

    ''' Read a Curve from a text file written by write_curve.

    Parameters
    ----------
    fn = the name of the file (default: 'tmp.crv')

    Returns
    -------
    Curve = the Curve read

    '''

    with open(fn) as fh:
        _read_keyword(fh, 'CURVE')
        dim, rational = _read_ints(fh, 2)
        n1, p1 = _read_ints(fh, 2)
        U = _read_floats(fh, n1 + p1)
        Pw = _read_points(fh, n1, dim, rational)
    return Curve(ControlPolygon(Pw=Pw), (p1 - 1,), (U,), bool(rational))

def write_surface(s, fn='tmp.srf'):

    ''' Write a Surface to a text file.

    Parameters
    ----------
    s = the Surface to write
    fn = the name of the file (default: 'tmp.srf')

    Returns
    -------
    True = on success

    '''

    if not isinstance(s, Surface):
        raise UnrecognizedObject(s)
    n, p, U, m, q, V, Pw = s.var()
    with open(fn, 'w') as fh:
        fh.write('SURFACE\n')
        _write_header(fh, s, (n + 1, m + 1, p + 1, q + 1))
        _write_row(fh, U)
        _write_row(fh, V)
        _write_points(fh, Pw.reshape((-1, s.dim + 1)), s.isrational)
    return True

def read_surface(fn='tmp.srf'):

    ''' Read a Surface from a text file written by write_surface.

    Parameters
    ----------
    fn = the name of the file (default: 'tmp.srf')

    Returns
    -------
    Surface = the Surface read

    '''

    with open(fn) as fh:
        _read_keyword(fh, 'SURFACE')
        dim, rational = _read_ints(fh, 2)
        n1, m1, p1, q1 = _read_ints(fh, 4)
        U = _read_floats(fh, n1 + p1)
        V = _read_floats(fh, m1 + q1)
        Pw = _read_points(fh, n1 * m1, dim, rational)
    Pw = Pw.reshape((n1, m1, dim + 1))
    return Surface(ControlNet(Pw=Pw), (p1 - 1, q1 - 1), (U, V),
                   bool(rational))


# UTILITIES


def _write_header(fh, o, counts):
    _write_row(fh, (o.dim, int(o.isrational)), '%d')
    _write_row(fh, counts, '%d')

def _write_row(fh, row, fmt=FMT):
    fh.write(' '.join(fmt % r for r in row) + '\n')

def _write_points(fh, Pw, rational):
    for row in (Pw if rational else Pw[:,:-1]):
        _write_row(fh, row)

def _read_keyword(fh, keyword):
    line = fh.readline().strip()
    if line != keyword:
        raise UnrecognizedObject(line, keyword)

def _read_ints(fh, num):
    return [int(i) for i in _read_line(fh, num)]

def _read_floats(fh, num):
    return np.array([float(f) for f in _read_line(fh, num)])

def _read_line(fh, num):
    items = fh.readline().split()
    if len(items) != num:
        raise MalformedFile(items, num)
    return items

def _read_points(fh, num, dim, rational):
    ncol = dim + 1 if rational else dim
    P = np.array([_read_floats(fh, ncol) for i in range(num)])
    return P if rational else nurbs.homogenize(P)


# EXCEPTIONS


class IOException(nurbs.NURBSException):
    pass

class UnrecognizedObject(IOException, nurbs.PreconditionViolation):
    pass

class MalformedFile(IOException, nurbs.RepresentationInvariantViolation):
    pass
