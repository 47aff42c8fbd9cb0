import numpy as np

from . import knot
from .errors import (NURBSException, PreconditionViolation,
                     NumericNonconvergence,
                     RepresentationInvariantViolation)


# Weights deviating by less than 1.0 +/- WEIGHT_TOL are reset to 1.0.
WEIGHT_TOL = 1e-8


class ControlObject(object):

    ''' A ControlObject represents the (ordered) set of control points
    of a NURBSObject.

    '''

    def __init__(self, Pw):

        ''' Initialize the ControlObject with an object matrix.

        An object matrix, denoted by Pw, is a matrix that contains the
        homogeneous coordinates of all control points constituting the
        ControlObject.  Hence, for curves in space, Pw[i,:] contains Pi
        = (wi*xi, wi*yi, wi*zi, wi), and likewise for surfaces,
        Pw[i,j,:].  Planar objects simply drop the z coordinate.  Its
        dimension is ((n + 1) x (dim + 1)) for a ControlPolygon (Curve)
        and ((n + 1) x (m + 1) x (dim + 1)) for a ControlNet (Surface).

        The object matrix is always copied, so that a ControlObject
        never shares its data with its creator.

        '''

        Pw = np.array(Pw, dtype=float)
        if Pw.shape[-1] - 1 not in (2, 3):
            raise ImproperDimension(Pw.shape)
        self._n = tuple(np.array(Pw.shape[:-1]) - 1)
        self.Pw = Pw

        w = Pw[...,-1]
        m = ((1.0 - WEIGHT_TOL) <= w) & (w <= (1.0 + WEIGHT_TOL))
        w[m] = 1.0

    @property
    def n(self):
        ''' There are (n + 1) control points (per direction). '''
        return self._n

    @property
    def dim(self):
        ''' The dimension of the Euclidean space, 2 or 3. '''
        return self.Pw.shape[-1] - 1

    def copy(self):
        ''' Self copy. '''
        return self.__class__(Pw=self.Pw)


class NURBSObject(object):

    ''' A NURBSObject is meant to be subclassed into either a NURBS
    Curve or Surface.  It is fully defined by a ControlObject, degree(s)
    and accompanying knot vector(s).  If no knot vector(s) is
    specified, a uniform knot vector(s) is used.

    Whether or not the NURBSObject is rational is an explicit flag, not
    only a property of its weights: by default it is rational as soon as
    any weight differs from unity, but it may be forced to True (e.g.
    when unifying a family in which some members are rational).

    '''

    def __init__(self, cobj, p, U, rational=None):
        ''' Initialize the NURBSObject. '''
        for n, pi in zip(cobj.n, p):
            if n < pi:
                raise TooFewControlPoints(n, pi)
        self._cobj = cobj.copy()
        self._p = tuple(int(pi) for pi in p)
        if not U:
            U = [knot.uni_knot_vec(n, pi) for n, pi in zip(cobj.n, p)]
        self._U = self._check_U(U)
        if rational is None:
            rational = bool((self._cobj.Pw[...,-1] != 1.0).any())
        elif not rational and (self._cobj.Pw[...,-1] != 1.0).any():
            raise NonUnitWeights(self._cobj.Pw[...,-1])
        self._rational = bool(rational)

    @property
    def cobj(self):
        ''' Get the ControlObject. '''
        return self._cobj

    @property
    def p(self):
        ''' Get the degree(s). '''
        return self._p

    @property
    def U(self):
        ''' Get the knot vector(s). '''
        return self._U

    def _check_U(self, new_U):
        ''' Return clean and checked copies of the knot vector(s). '''
        new_U = [np.array(U, dtype=float) for U in new_U]
        for n, p, U in zip(self.cobj.n, self.p, new_U):
            knot.clean_knot_vec(U)
            knot.check_knot_vec(n, p, U)
        return tuple(new_U)

    @property
    def dim(self):
        ''' Get the dimension of the Euclidean space. '''
        return self.cobj.dim

    @property
    def domain(self):
        ''' Get the parametric bounds, one (min, max) pair per
        direction. '''
        return tuple((U[0], U[-1]) for U in self.U)

    @property
    def isrational(self):
        ''' Is the NURBSObject rational? '''
        return self._rational

    def isequivalent(self, other, TOL=1e-8):
        ''' Is self equivalent to another NURBSObject? '''
        if self.cobj.Pw.shape != other.cobj.Pw.shape:
            return False
        if self.p != other.p or self.isrational != other.isrational:
            return False
        m = (np.allclose(self.cobj.Pw, other.cobj.Pw, atol=TOL),)
        for U, V in zip(self.U, other.U):
            m += np.allclose(U, V, atol=TOL),
        return all(m)

    def var(self):
        ''' Return copies of internal variables. '''
        v = ()
        for n, p, U in zip(self.cobj.n, self.p, self.U):
            v += n, p, U.copy()
        v += self.cobj.Pw.copy(),
        return v

    def copy(self):
        ''' Self copy. '''
        return self.__class__(self.cobj, self.p, self.U, self.isrational)


def dehomogenize(Pw):
    ''' Convert a homogeneous object matrix to a Euclidean object
    matrix, i.e. a (... x (dim + 1)) to a (... x dim) matrix. '''
    Pw = np.asarray(Pw, dtype=float)
    w = Pw[...,-1]
    return Pw[...,:-1] / w[...,np.newaxis]

def homogenize(P, w=None):
    ''' Idem dehomogenize, vice versa.  If w is None, all weights are
    set to unity, otherwise it is assumed that w has one less dimension
    than P. '''
    P = np.asarray(P, dtype=float); s = P.shape
    Pw = np.ones(list(s[:-1]) + [s[-1] + 1])
    Pw[...,:-1] = P
    if w is not None:
        Pw *= np.asarray(w, dtype=float)[...,np.newaxis]
    return Pw


# EXCEPTIONS


class ImproperDimension(PreconditionViolation):
    pass

class TooFewControlPoints(RepresentationInvariantViolation):
    pass

class NonPositiveWeights(RepresentationInvariantViolation):
    pass

class NonUnitWeights(RepresentationInvariantViolation):
    pass
