import logging

import numpy as np
from scipy.integrate import quad

from . import curve
from . import nurbs
from . import util


__all__ = ['Circle', 'Ellipse',
           'make_circle',
           'make_ellipse']


logger = logging.getLogger(__name__)


# Parameter bounds within PARAM_FUZZ of 0 or 2 * pi are meant to be
# exactly 0 or 2 * pi.
PARAM_FUZZ = 1e-12

TWOPI = 2.0 * np.pi
QUARTER = 0.5 * np.pi


class Ellipse(object):

    ''' An Ellipse is the analytic curve

     C(t) = O + r1 * cos(t) * X + r2 * sin(t) * Y    t0 <= t <= t1

    where X and Y are orthonormal spanning vectors.  In space, X is the
    given direction made orthogonal to the unit normal N, and Y = N x
    X, so that (X, Y, N) is a right-handed system; in the plane, Y is X
    rotated by +90 deg.  A reversed Ellipse is traversed from t1 to t0,
    i.e. its point at t is the point of the nonreversed Ellipse at (t0
    + t1 - t).

    Ellipses are immutable: all modifiers return new, validated,
    Ellipses.

    '''

    def __init__(self, O, X, N, r1, r2, t0=0.0, t1=TWOPI, reversed=False):

        ''' Initialize the Ellipse.

        Parameters
        ----------
        O = the center of the Ellipse
        X = the direction of the first axis
        N = the normal of the plane of the Ellipse (ignored in the
            plane)
        r1, r2 = the radii along the first and second axes
        t0, t1 = the parameter bounds (t0 < t1), within [-2 * pi, 2 *
                 pi] and at most 2 * pi apart
        reversed = whether or not the parameter direction is reversed

        Examples
        --------
        >>> O, X, N = ([0, 0, 0], [1, 0, 0], [0, 0, 1])
        >>> e = Ellipse(O, X, N, 2.0, 1.0, 0.0, np.pi)

        '''

        O = np.array(O, dtype=float)
        dim = O.size
        if dim not in (2, 3):
            raise nurbs.ImproperDimension(dim)
        if not r1 > 0.0 or not r2 > 0.0:
            raise DegenerateConic(r1, r2)
        X = np.array(X, dtype=float)
        if X.size != dim:
            raise ImproperInput(X, dim)
        if dim == 3:
            if N is None:
                raise ImproperInput(N, dim)
            N = util.normalize(N)
            Xp = X - np.dot(X, N) * N
            if util.norm(Xp) == 0.0:
                raise ParallelAxes(X, N)
            X = util.normalize(Xp)
            Y = np.cross(N, X)
        else:
            N = None
            X = util.normalize(X)
            Y = np.array([-X[1], X[0]])
        self._O, self._X, self._Y, self._N = O, X, Y, N
        self._r1, self._r2 = float(r1), float(r2)
        self._t0, self._t1 = check_param_bounds(t0, t1)
        self._reversed = bool(reversed)

    def __repr__(self):
        return ('{}(O={}, r1={}, r2={}, t0={}, t1={}, reversed={})'
                .format(self.__class__.__name__, self._O.tolist(),
                        self._r1, self._r2, self._t0, self._t1,
                        self._reversed))

    @property
    def dim(self):
        return self._O.size

    @property
    def centre(self):
        return self._O.copy()

    @property
    def x_axis(self):
        return self._X.copy()

    @property
    def y_axis(self):
        return self._Y.copy()

    @property
    def normal(self):
        return None if self._N is None else self._N.copy()

    @property
    def radii(self):
        return self._r1, self._r2

    @property
    def domain(self):
        return self._t0, self._t1

    @property
    def isreversed(self):
        return self._reversed

    def _with(self, **kwargs):
        ''' Return a new Ellipse with some attributes replaced. '''
        d = dict(O=self._O, X=self._X, N=self._N, r1=self._r1,
                 r2=self._r2, t0=self._t0, t1=self._t1,
                 reversed=self._reversed)
        d.update(kwargs)
        return Ellipse(**d)

    def _to_angle(self, t):
        ''' Map the parameter t to the angle t of the nonreversed
        Ellipse. '''
        return self._t0 + self._t1 - t if self._reversed else t

    def _point_at_angle(self, t):
        return (self._O + self._r1 * np.cos(t) * self._X +
                self._r2 * np.sin(t) * self._Y)

# EVALUATION OF POINTS AND DERIVATIVES

    def eval_point(self, t):

        ''' Evaluate a point.

        Parameters
        ----------
        t = the parameter value of the point

        Returns
        -------
        C = the coordinates of the point

        '''

        return self._point_at_angle(self._to_angle(t))

    def eval_derivatives(self, t, d):

        ''' Evaluate derivatives at a point.

        Parameters
        ----------
        t = the parameter value of the point
        d = the number of derivatives to evaluate

        Returns
        -------
        CK = all derivatives, where CK[k,:] is the derivative of C(t)
             with respect to t k times (0 <= k <= d)

        '''

        ders = util.eval_ders_trigo(self._to_angle(t), d)
        CK = (self._r1 * ders[:,0,np.newaxis] * self._X +
              self._r2 * ders[:,1,np.newaxis] * self._Y)
        CK[0] += self._O
        if self._reversed:
            CK[1::2] *= -1.0
        return CK

# PROPERTIES

    def is_closed(self):
        ''' Does the Ellipse span a full period? '''
        return self._t1 - self._t0 == TWOPI

    def is_degenerate(self, eps):
        ''' Is either radius smaller than eps? '''
        return self._r1 < eps or self._r2 < eps

    def is_in_plane(self, N, eps):
        ''' Is the Ellipse parallel to the plane of normal N, up to an
        angle eps?  A planar Ellipse always is. '''
        if self._N is None:
            return True
        cos = np.dot(util.normalize(N), self._N)
        ang = np.arccos(np.clip(cos, -1.0, 1.0))
        return ang <= eps or abs(np.pi - ang) <= eps

    def length(self):
        ''' Compute the arc length, integrating |C'(t)| over four
        equal spans. '''
        def f(t):
            return util.norm(self.eval_derivatives(t, 1)[1])
        ts = np.linspace(self._t0, self._t1, 5)
        return sum(quad(f, a, b)[0] for a, b in zip(ts[:-1], ts[1:]))

# MODIFIERS

    def with_bounds(self, t0, t1):
        ''' Return a copy of the Ellipse restricted to [t0, t1]. '''
        return self._with(t0=t0, t1=t1)

    def sub_curve(self, t0, t1):
        ''' Idem with_bounds. '''
        return self.with_bounds(t0, t1)

    def reversed_copy(self):
        ''' Return a copy of the Ellipse with its parameter direction
        reversed. '''
        return self._with(reversed=not self._reversed)

    def translate(self, V):
        ''' Return a copy of the Ellipse translated by the vector V. '''
        V = np.asarray(V, dtype=float)
        if V.size != self.dim:
            raise ImproperInput(V, self.dim)
        return self._with(O=self._O + V)

# MISCELLANEA

    def closest_point(self, P, tmin=None, tmax=None, seed=None, **kwargs):

        ''' Find the point of the Ellipse closest to P, a local minimum
        nearest the seed.

        The initial iterate is found analytically on the concentric
        Circle passing through P, and refined with
        curve.closest_point_generic.

        Parameters
        ----------
        P = the coordinates of the point to project
        tmin, tmax = the parametric interval to search (default: the
                     Ellipse's bounds)
        seed = the parameter value the solution should be nearest to,
               if any
        kwargs = see curve.closest_point_generic

        Returns
        -------
        ClosestPoint = (param, point, dist, converged)

        '''

        P = np.asarray(P, dtype=float)
        if P.size != self.dim:
            raise ImproperInput(P, self.dim)
        tmin = self._t0 if tmin is None else tmin
        tmax = self._t1 if tmax is None else tmax
        if not tmin < tmax:
            raise ImproperInput(tmin, tmax)
        radius = util.distance(self._O, P)
        if radius == 0.0:
            ti = seed if seed is not None else 0.5 * (tmin + tmax)
        else:
            c = Circle(self._O, self._X, self._N, radius,
                       self._t0, self._t1, self._reversed)
            ti = c.closest_point(P, tmin, tmax, seed).param
        return curve.closest_point_generic(self.eval_derivatives, P,
                                           tmin, tmax, ti, **kwargs)

    def to_curve(self):

        ''' Convert the Ellipse into an exact rational quadratic Curve.

        The full Ellipse is first represented canonically, i.e. with one
        rational quadratic arc per quarter of a period: the control
        points alternate between points on the Ellipse (weight 1) and
        the corners of the circumscribed quadrants (weight 1/sqrt(2)),
        and the arcs are joined by double knots.  Parameter and angle
        coincide at every quarter, so the canonical Curve starts at the
        quarter at or below t0 and covers (at least) a full period.  The
        canonical parameters of the end points are then located with
        Curve.closest_point, seeded at t0 and t1 themselves, and the
        Curve lying in between is extracted, rescaled to [t0, t1] and
        reversed if need be.

        Returns
        -------
        Curve = the rational quadratic Curve, defined on [t0, t1]

        Source
        ------
        The NURBS Book (2nd Ed.), Pg. 298-299 and 314-315.

        '''

        t0, t1 = self._t0, self._t1
        ts = np.floor(t0 / QUARTER) * QUARTER
        nq = max(4, int(np.ceil((t1 - ts) / QUARTER)))
        C = make_canonical_ellipse(self._O, self._r1 * self._X,
                                   self._r2 * self._Y, ts, nq)
        cps = [C.closest_point(self._point_at_angle(t), seed=t)
               for t in (t0, t1)]
        for cp in cps:
            if not cp.converged:
                logger.warning('inexact conversion of %r (end point '
                               'off by %g)', self, cp.dist)
        C = C.extract(cps[0].param, cps[1].param).reparam(t0, t1)
        if self._reversed:
            C = C.reverse()
        return C


class Circle(Ellipse):

    ''' A Circle is an Ellipse whose radii are equal.  See Ellipse.

    '''

    def __init__(self, O, X, N, r, t0=0.0, t1=TWOPI, reversed=False):
        ''' Initialize the Circle (see Ellipse). '''
        super(Circle, self).__init__(O, X, N, r, r, t0, t1, reversed)

    @property
    def radius(self):
        return self._r1

    def _with(self, **kwargs):
        d = dict(O=self._O, X=self._X, N=self._N, r=self._r1,
                 t0=self._t0, t1=self._t1, reversed=self._reversed)
        d.update(kwargs)
        return Circle(**d)

    def closest_point(self, P, tmin=None, tmax=None, seed=None, **kwargs):

        ''' Find the point of the Circle closest to P, analytically.
        The parameter of P's angle is shifted by multiples of 2 * pi
        into [tmin, tmax] (nearest to the seed, if given); if no shift
        fits, the nearest bound is returned.  See Ellipse.closest_point.

        '''

        P = np.asarray(P, dtype=float)
        if P.size != self.dim:
            raise ImproperInput(P, self.dim)
        tmin = self._t0 if tmin is None else tmin
        tmax = self._t1 if tmax is None else tmax
        if not tmin < tmax:
            raise ImproperInput(tmin, tmax)
        R = P - self._O
        a = np.arctan2(np.dot(R, self._Y), np.dot(R, self._X))
        t = self._to_angle(a)
        ts = [t + k * TWOPI for k in range(-3, 4)
              if tmin <= t + k * TWOPI <= tmax]
        if ts:
            ref = seed if seed is not None else ts[0]
            t = min(ts, key=lambda ti: abs(ti - ref))
        else:
            t = min((tmin, tmax), key=lambda tb: angular_distance(tb, t))
        C = self.eval_point(t)
        return curve.ClosestPoint(t, C, util.distance(C, P), True)


# TOOLBOX


def make_ellipse(O, X, N, r1, r2, t0, t1, reversed=False):

    ''' Construct the rational quadratic Curve of an elliptical arc.

    Parameters
    ----------
    O, X, N, r1, r2, t0, t1, reversed = see Ellipse

    Returns
    -------
    Curve = the elliptical arc, defined on [t0, t1]

    Examples
    --------
    >>> O, X, N = ([0, 1, 0], [1, 0, 0], [0, 0, 1])
    >>> arc = nurbs.tb.make_ellipse(O, X, N, 3, 2, 0.0, np.pi)

    '''

    return Ellipse(O, X, N, r1, r2, t0, t1, reversed).to_curve()


def make_circle(O, X, N, r, t0, t1):

    ''' Construct the rational quadratic Curve of a circular arc.

    Parameters
    ----------
    O, X, N, r, t0, t1 = see Circle

    Returns
    -------
    Curve = the circular arc, defined on [t0, t1]

    '''

    return Circle(O, X, N, r, t0, t1).to_curve()


# UTILITIES


def make_canonical_ellipse(O, A1, A2, ts, nq):

    ''' Construct the rational quadratic Curve of the ellipse O + cos(t)
    * A1 + sin(t) * A2, starting at the angle ts and made of nq quarter
    arcs.  Its knot vector is

        U = {ts,ts,ts, t1,t1, ..., t_(nq-1),t_(nq-1), t_nq,t_nq,t_nq}

    where t_j = ts + j * pi / 2, so that C(t_j) is the point of the
    ellipse at the angle t_j.

    '''

    n = 2 * nq
    P, w = np.zeros((n + 1, O.size)), np.ones(n + 1)
    w[1::2] = 1.0 / np.sqrt(2.0)
    for j in range(nq + 1):
        t = ts + j * QUARTER
        P[2*j] = O + np.cos(t) * A1 + np.sin(t) * A2
        if j < nq:
            P[2*j+1] = (O + (np.cos(t) - np.sin(t)) * A1 +
                        (np.sin(t) + np.cos(t)) * A2)
    tj = ts + QUARTER * np.arange(1, nq)
    U = np.hstack((3 * [ts], np.repeat(tj, 2), 3 * [ts + nq * QUARTER]))
    Pw = nurbs.homogenize(P, w)
    return curve.Curve(curve.ControlPolygon(Pw=Pw), (2,), (U,), True)


def check_param_bounds(t0, t1):

    ''' Snap the bounds within PARAM_FUZZ of 0 or 2 * pi and check them.

    '''

    t0, t1 = [snap_param(t) for t in (t0, t1)]
    if not t0 < t1:
        raise InvalidParameterBounds(t0, t1)
    if t0 < - TWOPI or t1 > TWOPI:
        raise InvalidParameterBounds(t0, t1)
    if t1 - t0 > TWOPI:
        raise InvalidParameterBounds(t0, t1)
    return t0, t1


def snap_param(t):
    t = float(t)
    if abs(t) < PARAM_FUZZ:
        return 0.0
    if abs(TWOPI - t) < PARAM_FUZZ:
        return TWOPI
    return t


def angular_distance(a, b):
    ''' The distance between the angles a and b, in [0, pi]. '''
    d = np.mod(a - b, TWOPI)
    return min(d, TWOPI - d)


# EXCEPTIONS


class ConicsException(nurbs.NURBSException):
    pass

class ImproperInput(ConicsException, nurbs.PreconditionViolation):
    pass

class DegenerateConic(ImproperInput):
    pass

class ParallelAxes(ImproperInput):
    pass

class InvalidParameterBounds(ImproperInput,
                             nurbs.RepresentationInvariantViolation):
    pass
