''' A pth-degree NURBS curve is defined by

            sum_(i=0)^(n) (Nip(u) * wi * Pi)
    C(u) =  --------------------------------
              sum_(i=0)^(n) (Nip(u) * wi)

(a <= u <= b).  The {Pi} are the control points (forming a control
polygon), the {wi} are the weights, and the {Nip(u)} are the pth-degree
B-spline basis functions defined on the nonperiodic and nonuniform knot
vector

    U = {a,...,a, u_(p+1),...,u_(m-p-1), b,...,b}.

where (m = n + p + 1).

Homogeneous coordinates offer an efficient method of representing NURBS
curves.  For a given set of control points, {Pi}, and weights, {wi},
construct the weighted control points, Pwi = (wi*xi, wi*yi[, wi*zi],
wi).  Then define the nonrational (piecewise polynomial) B-spline curve
in (dim + 1)-dimensional space as

    Cw(u) = sum_(i=0)^(n) (Nip(u) * Pwi)

Applying a perspective map on the (w = 1) plane, H, to Cw(u) yields the
corresponding rational B-spline curve (piecewise rational in
dim-dimensional space) i.e. C(u) = H{Cw(u)}.  Every algorithm below is
therefore written once against the homogeneous points and is oblivious
to dim being 2 or 3.

'''

import collections
import logging

import numpy as np
from scipy.optimize import fminbound
from scipy.special import comb

from . import basis
from . import knot
from . import nurbs
from . import util


__all__ = ['Curve', 'ControlPolygon', 'ClosestPoint',
           'closest_point_generic',
           'make_linear_curve',
           'unify_curves']


logger = logging.getLogger(__name__)


# Closest point refinement knobs.  PROJ_BRACKET is the half-width, as a
# fraction of the domain, of the fallback search interval.
PROJ_MAXITER = 20
PROJ_EPS1 = 1e-15
PROJ_EPS2 = 1e-12
PROJ_NUM = 500
PROJ_BRACKET = 1e-3


ClosestPoint = collections.namedtuple('ClosestPoint',
                                      'param point dist converged')


class ControlPolygon(nurbs.ControlObject):

    def __init__(self, Pw):

        ''' See nurbs.ControlObject.

        Parameters
        ----------
        Pw = the object matrix

        Examples
        --------
        >>> Pw = [(-4, 2, 0, 1), (-2, 3, 1, 1), (0, 4, 2, 1)]
        >>> cpol = ControlPolygon(Pw=Pw)

        '''

        super(ControlPolygon, self).__init__(Pw)
        if len(self.n) != 1:
            raise ImproperInput(self.Pw.shape)


class Curve(nurbs.NURBSObject):

    def __init__(self, cpol, p, U=None, rational=None):

        ''' See nurbs.NURBSObject.

        Parameters
        ----------
        cpol = the ControlPolygon
        p = the degree (order p + 1) of the Curve
        U = the knot vector
        rational = whether or not the Curve is rational (default: any
                   weight differs from unity)

        Examples
        --------
        >>> Pw = [(1, 0, 1), (1, 1, 1), (0, 2, 2)]
        >>> c = Curve(ControlPolygon(Pw=Pw), (2,))

        '''

        super(Curve, self).__init__(cpol, p, U, rational)
        if (self.cobj.Pw[:,-1] <= 0.0).any():
            raise nurbs.NonPositiveWeights(self.cobj.Pw[:,-1])

# EVALUATION OF POINTS AND DERIVATIVES

    def eval_point(self, u):

        ''' Evaluate a point.

        Parameters
        ----------
        u = the parameter value of the point

        Returns
        -------
        C = the coordinates of the point

        '''

        n, p, U, Pw = self.var()
        return rat_curve_point(n, p, U, Pw, u)

    def eval_points(self, us):

        ''' Evaluate multiple points.

        Parameters
        ----------
        us = the parameter values of each point

        Returns
        -------
        C = the coordinates of all points, a (dim x len(us)) matrix

        '''

        n, p, U, Pw = self.var()
        return rat_curve_point_v(n, p, U, Pw, us, len(us))

    def eval_derivatives(self, u, d):

        ''' Evaluate derivatives at a point.

        Parameters
        ----------
        u = the parameter value of the point
        d = the number of derivatives to evaluate

        Returns
        -------
        CK = all derivatives, where CK[k,:] is the derivative of C(u)
             with respect to u k times (0 <= k <= d)

        '''

        n, p, U, Pw = self.var()
        Aders = curve_derivs_alg1(n, p, U, Pw[:,:-1], u, d)
        if self.isrational:
            wders = curve_derivs_alg1(n, p, U, Pw[:,-1], u, d)
            return rat_curve_derivs(Aders, wders, d)
        return Aders

# KNOT INSERTION

    def insert(self, u, e):

        ''' Insert a knot multiples times.

        Parameters
        ----------
        u = the knot value to insert
        e = the number of times to insert u

        Returns
        -------
        Curve = the new Curve with u inserted e times

        '''

        n, p, U, Pw = self.var()
        if e > 0:
            u = knot.clean_knot(u)
            k, s = basis.find_span_mult(n, p, U, u)
            if s + e > p:
                raise ImproperInput(u, s, e, p)
            U, Pw = curve_knot_ins(n, p, U, Pw, u, k, s, e)
        return self._new(Pw, p, U)

    def split(self, u):

        ''' Split the Curve.

        Parameters
        ----------
        u = the parameter value at which to split the Curve

        Returns
        -------
        [Curve, Curve] = the two split Curves

        '''

        n, p, U, Pw = self.var()
        u = knot.clean_knot(u)
        if u == U[0] or u == U[-1]:
            return [self.copy()]
        k, s = basis.find_span_mult(n, p, U, u)
        r = p - s
        if r > 0:
            U, Pw = curve_knot_ins(n, p, U, Pw, u, k, s, r)
        Ulr = (np.append(U[:k+r+1], u), np.insert(U[k-s+1:], 0, u))
        Pwlr = Pw[:k-s+1], Pw[k-s:]
        return [self._new(Pw, p, U) for Pw, U in zip(Pwlr, Ulr)]

    def extract(self, u1, u2):

        ''' Extract the part of the Curve lying between two parameter
        values.

        Parameters
        ----------
        u1, u2 = the parametric bounds (u1 < u2)

        Returns
        -------
        Curve = the extracted Curve, defined on [u1, u2]

        '''

        U, = self.U
        u1, u2 = knot.check_knot(U, u1), knot.check_knot(U, u2)
        u1, u2 = knot.clean_knot(u1), knot.clean_knot(u2)
        if not u1 < u2:
            raise ImproperInput(u1, u2)
        C = self.copy()
        if u1 != U[0]:
            C = C.split(u1)[-1]
        if u2 != U[-1]:
            C = C.split(u2)[0]
        return C

# KNOT REFINEMENT

    def refine(self, X):

        ''' Refine the knot vector.

        Parameters
        ----------
        X = a list of the knots to insert

        Returns
        -------
        Curve = the refined Curve

        '''

        n, p, U, Pw = self.var()
        if len(X) != 0:
            X = knot.clean_knot(np.sort(X))
            U, Pw = refine_knot_vect_curve(n, p, U, Pw, X)
        return self._new(Pw, p, U)

# DEGREE ELEVATION

    def elevate(self, t):

        ''' Elevate the Curve's degree.

        Parameters
        ----------
        t = the number of degrees to elevate the Curve with

        Returns
        -------
        Curve = the degree elevated Curve

        '''

        n, p, U, Pw = self.var()
        if t > 0:
            U, Pw = degree_elevate_curve(n, p, U, Pw, t)
            p += t
        return self._new(Pw, p, U)

# MISCELLANEA

    def closest_point(self, P, umin=None, umax=None, seed=None, **kwargs):

        ''' Find the point of the Curve closest to P, a local minimum
        nearest the seed.

        Parameters
        ----------
        P = the coordinates of the point to project
        umin, umax = the parametric interval to search (default: the
                     whole domain)
        seed = the initial iterate; if None, it is obtained by brute
               force
        kwargs = see closest_point_generic

        Returns
        -------
        ClosestPoint = (param, point, dist, converged)

        '''

        U, = self.U
        umin = U[0] if umin is None else knot.check_knot(U, umin)
        umax = U[-1] if umax is None else knot.check_knot(U, umax)
        P = np.asarray(P, dtype=float)
        if P.size != self.dim:
            raise ImproperInput(P, self.dim)
        if seed is None:
            us = np.linspace(umin, umax, PROJ_NUM)
            C = self.eval_points(us)
            seed = us[np.argmin(util.distance_v(C, P))]
        return closest_point_generic(self.eval_derivatives, P,
                                     umin, umax, seed, **kwargs)

    def project(self, xyz, ui=None):

        ''' Project a point.

        Parameters
        ----------
        xyz = the coordinates of a point to project
        ui = the initial guess for Newton's method

        Returns
        -------
        u = the parameter value of the projected point

        '''

        return self.closest_point(xyz, seed=ui).param

    def reverse(self):

        ''' Reverse the Curve's direction.

        Returns
        -------
        Curve = the reversed Curve

        '''

        n, p, U, Pw = self.var()
        U, Pw = reverse_curve_direction(n, p, U, Pw)
        return self._new(Pw, p, U)

    def reparam(self, a, b):

        ''' Rescale the Curve's domain to [a, b] by an affine change of
        parameter; the geometry is unchanged.

        Parameters
        ----------
        a, b = the new parametric bounds (a < b)

        Returns
        -------
        Curve = the reparameterized Curve

        '''

        if not a < b:
            raise ImproperInput(a, b)
        n, p, U, Pw = self.var()
        knot.remap_knot_vec(U, a, b)
        return self._new(Pw, p, U)

    def _new(self, Pw, p, U):
        ''' Construct a Curve sharing self's rational flag. '''
        return Curve(ControlPolygon(Pw=Pw), (p,), (U,), self.isrational)


# HEAVY LIFTING FUNCTIONS

# From here on out most functions are the direct equivalent of the
# pseudo-algorithms found in 'The NURBS Book (2nd Ed.)', hence their
# not-so pythonic nature.


def curve_derivs_alg1(n, p, U, P, u, d):

    ''' Compute curve derivatives up to and including the dth.  (d > p)
    is allowed, although the derivatives are 0 in this case (for
    nonrational curves); these derivatives are necessary for rational
    curves.  Output is the array CK, where CK[k] is the kth derivative
    (0 <= k <= d).  P may hold points of any dimension, or scalars.

    Source: The NURBS Book (2nd Ed.), Pg. 93.

    '''

    CK = np.zeros((d + 1,) + P.shape[1:])
    du = min(d, p)
    span = basis.find_span(n, p, U, u)
    nders = basis.ders_basis_funs(span, u, p, du, U)
    for k in range(du + 1):
        for j in range(p + 1):
            CK[k] += nders[k,j] * P[span-p+j]
    return CK


def curve_point(n, p, U, P, u):

    ''' Compute a point on a B-spline curve at a fixed u parameter
    value.  Given homogeneous control points, the point Cw(u) is
    returned as is, i.e. before the perspective map.

    Source: The NURBS Book (2nd Ed.), Pg. 82.

    '''

    C = np.zeros(P.shape[1:])
    span = basis.find_span(n, p, U, u)
    N = basis.basis_funs(span, u, p, U)
    for j in range(p + 1):
        C += N[j] * P[span-p+j]
    return C


def rat_curve_point(n, p, U, Pw, u):

    ''' Compute a point on a rational B-spline curve at a fixed u
    parameter value.

    Source: The NURBS Book (2nd Ed.), Pg. 124.

    '''

    Cw = curve_point(n, p, U, Pw, u)
    return Cw[:-1] / Cw[-1]


def rat_curve_point_v(n, p, U, Pw, u, num):

    ''' Idem rat_curve_point, vectorized in u.  Makes use of array
    broadcasting (see numpy manual).

    '''

    u = np.asarray(u, dtype=float)
    Cw = np.zeros((Pw.shape[-1], num))
    span = basis.find_span_v(n, p, U, u, num)
    N = basis.basis_funs_v(span, u, p, U, num)
    for j in range(p + 1):
        Cw += N[j] * Pw[span-p+j].T
    return Cw[:-1] / Cw[-1]


def rat_curve_derivs(Aders, wders, d):

    ''' Given that Cw(u) has already been differentiated and its
    coordinates separated off into Aders and wders, this algorithm
    computes the point, C(u), and the derivatives, C^k(u), (1 <= k <=
    d).  The curve point is returned in CK[0,:] and the kth derivative
    is returned in CK[k,:].

    Source: The NURBS Book (2nd Ed.), Pg. 127.

    '''

    CK = np.zeros_like(Aders)
    for k in range(d + 1):
        v = Aders[k].copy()
        for i in range(1, k + 1):
            v -= comb(k, i) * wders[i] * CK[k-i]
        CK[k] = v / wders[0]
    return CK


# FUNDAMENTAL GEOMETRIC ALGORITHMS


# Knot insertion.
#
#   Let Cw(u) = sum_(i=0)^(n) (Nip(u) * Pwi) be a NURBS curve defined on
#   U = {u0,...,um}.  Let ub in [ u_k, u_(k+1) ), and insert ub into U
#   to form the new knot vector Ub = {ub_0 = u_0,...,ub_k = u_k,ub_(k+1)
#   = ub,ub_(k+2) = u_(k+1),...,ub_(m+1) = u_m}.  Then Cw(u) also has a
#   representation of the form Cw(u) = sum_(i=0)^(n+1) (Nbip(u) * Qwi)
#   where the {Nbip(u)} are the pth-degree basis functions on Ub.  Knot
#   insertion is really just a change of vector space basis; the curve
#   is not changed, either geometrically or parametrically.


def curve_knot_ins(n, p, UP, Pw, u, k, s, r):

    ''' Compute the new curve corresponding to the insertion ubar into
    [u_k, u_(k+1) ) r times, where it is assumed that (r + s <= p), s
    being the initial multiplicity of the knot.

    Source: The NURBS Book (2nd Ed.), Pg. 151.

    '''

    m = n + p + 1; nq = n + r
    UQ = np.zeros(m + r + 1)
    Qw = np.zeros((nq + 1,) + Pw.shape[1:])
    Rw = np.zeros((p + 1,) + Pw.shape[1:])
    UQ[:k+1] = UP[:k+1]
    UQ[k+1:k+r+1] = u
    UQ[k+r+1:] = UP[k+1:]
    Qw[:k-p+1] = Pw[:k-p+1]
    Qw[k-s+r:n+r+1] = Pw[k-s:n+1]
    Rw[:p-s+1] = Pw[k-p:k-s+1]
    for j in range(1, r + 1):
        L = k - p + j
        for i in range(p - j - s + 1):
            alpha = (u - UP[L+i]) / (UP[i+k+1] - UP[L+i])
            Rw[i] = alpha * Rw[i+1] + (1.0 - alpha) * Rw[i]
        Qw[L] = Rw[0]
        Qw[k+r-j-s] = Rw[p-j-s]
    Qw[L+1:k-s] = Rw[1:k-s-L]
    return UQ, Qw


# Knot refinement.
#
#   Knot insertion concerns itself with inserting a single knot,
#   possibly multiple times.  It is often necessary to insert many knots
#   at once; this is called knot refinement.  One of its applications is
#   the merging of two or more knot vectors in order to obtain a set of
#   curves which are defined on one common knot vector.


def refine_knot_vect_curve(n, p, U, Pw, X):

    ''' Let Cw(u) be defined on the knot vector U = {u0,...,um}, and let
    X = {x0,...,xr} satisfy (x_i <= x_(i+1)) and (u0 < xi < um) for all
    i.  The elements of X are to be inserted into U, and the
    corresponding new set of control points, {Qwi}, i = 0,...,n+r+1, is
    to be computed.  New knots should be repeated in X with their
    multiplicities; e.g. if x and y (x < y) are to be inserted with
    multiplicities 2 and 3, respectively, then X = [x, x, y, y, y].

    Source: The NURBS Book (2nd Ed.), Pg. 164.

    '''

    X = np.asarray(X, dtype=float)
    r = X.size - 1
    if r < 0: return U, Pw
    a = basis.find_span(n, p, U, X[0])
    b = basis.find_span(n, p, U, X[r]); b += 1
    ns = n + r + 1; m = n + p + 1
    Ubar = np.zeros(m + r + 2)
    Qw = np.zeros((ns + 1,) + Pw.shape[1:])
    Qw[:a-p+1] = Pw[:a-p+1]
    Qw[r+b:n+r+2] = Pw[b-1:n+1]
    Ubar[:a+1] = U[:a+1]
    Ubar[b+p+r+1:m+r+2] = U[b+p:m+1]
    i, k = b + p - 1, b + p + r
    for j in range(r, -1, -1):
        while X[j] <= U[i] and i > a:
            Qw[k-p-1] = Pw[i-p-1]
            Ubar[k] = U[i]
            k, i = k - 1, i - 1
        Qw[k-p-1] = Qw[k-p]
        for l in range(1, p + 1):
            ind = k - p + l
            alfa = Ubar[k+l] - X[j]
            if abs(alfa) == 0.0:
                Qw[ind-1] = Qw[ind]
            else:
                alfa /= Ubar[k+l] - U[i-p+l]
                Qw[ind-1] = alfa * Qw[ind-1] + (1.0 - alfa) * Qw[ind]
        Ubar[k] = X[j]
        k -= 1
    return Ubar, Qw


# Degree elevation.
#
#   Let Cw_p(u) be a pth-degree NURBS curve on the knot vector U.  Since
#   Cw_p(u) is a piecewise polynomial curve, it should be possible to
#   elevate its degree to (p + 1), i.e. there must exist control points
#   Qw and a knot vector Uh such that
#
#       Cw_p(u) = Cw_(p+1)(u) = sum_(i=0)^(nh) (N_(i,p+1)(u) * Qwi)
#
#   Cw_p(u) and Cw_(p+1)(u) are the same curve, both geometrically and
#   parametrically.  Using tensor product when constructing surfaces
#   from a set of curves requires that these curves have a common
#   degree, hence the degrees of some curves may require elevation.


def degree_elevate_curve(n, p, U, Pw, t):

    ''' Raise the degree from p to (p + t), (t >= 1), by computing nh,
    Uh and Qw.

    Source: The NURBS Book (2nd Ed.), Pg. 206.

    '''

    sh = Pw.shape[1:]
    bezalfs = product_matrix(p, t)
    bpts = np.zeros((p + 1,) + sh)
    ebpts = np.zeros((p + t + 1,) + sh)
    Nextbpts = np.zeros((max(p - 1, 0),) + sh)
    alfs = np.zeros(max(p - 1, 0))
    nh, dummy = mult_degree_elevate(n, p, U, t)
    Qw = np.zeros((nh + 1,) + sh)
    Uh = np.zeros(nh + p + t + 2)
    m = n + p + 1
    ph = p + t
    kind = ph + 1
    r = -1
    a = p; b = p + 1
    cind = 1
    ua = U[0]
    Qw[0] = Pw[0]
    Uh[:ph+1] = ua
    bpts[:p+1] = Pw[:p+1]
    while b < m:
        i = b
        while b < m and U[b] == U[b+1]:
            b += 1
        mul = b - i + 1
        ub = U[b]
        oldr = r
        r = p - mul
        lbz = (oldr + 2) // 2 if oldr > 0 else 1
        rbz = ph - (r + 1) // 2 if r > 0 else ph
        if r > 0:
            numer = ub - ua
            for k in range(p, mul, -1):
                alfs[k-mul-1] = numer / (U[a+k] - ua)
            for j in range(1, r + 1):
                save = r - j
                s = mul + j
                for k in range(p, s - 1, -1):
                    bpts[k] = (alfs[k-s] * bpts[k] +
                               (1.0 - alfs[k-s]) * bpts[k-1])
                Nextbpts[save] = bpts[p]
        for i in range(lbz, ph + 1):
            ebpts[i] = 0.0
            mpi = min(p, i)
            for j in range(max(0, i - t), mpi + 1):
                ebpts[i] += bezalfs[i,j] * bpts[j]
        if oldr > 1:
            first = kind - 2; last = kind
            den = ub - ua
            bet = (ub - Uh[kind-1]) / den
            for tr in range(1, oldr):
                i = first; j = last
                kj = j - kind + 1
                while j - i > tr:
                    if i < cind:
                        alf = (ub - Uh[i]) / (ua - Uh[i])
                        Qw[i] = (alf * Qw[i] + (1.0 - alf) * Qw[i-1])
                    if j >= lbz:
                        if j - tr <= kind - ph + oldr:
                            gam = (ub - Uh[j-tr]) / den
                            ebpts[kj] = (gam * ebpts[kj] +
                                         (1.0 - gam) * ebpts[kj+1])
                        else:
                            ebpts[kj] = (bet * ebpts[kj] +
                                         (1.0 - bet) * ebpts[kj+1])
                    i += 1; j -= 1; kj -= 1
                first -= 1; last += 1
        if a != p:
            for i in range(ph - oldr):
                Uh[kind] = ua
                kind += 1
        for j in range(lbz, rbz + 1):
            Qw[cind] = ebpts[j]
            cind += 1
        if b < m:
            bpts[:r] = Nextbpts[:r]
            bpts[r:p+1] = Pw[b-p+r:b+1]
            a = b; b += 1
            ua = ub
        else:
            Uh[kind:kind+ph+1] = ub
    return Uh, Qw


# ADVANCED GEOMETRIC ALGORITHMS


def closest_point_generic(ders, P, tmin, tmax, ti,
                          maxiter=PROJ_MAXITER, eps1=PROJ_EPS1,
                          eps2=PROJ_EPS2, strict=False):

    ''' Find the parameter value t in [tmin, tmax] for which C(t) is
    closest to P, starting from the iterate ti.  This is achieved by
    minimizing, using Newton iteration, the function f(t) = |C'(t) *
    (C(t) - P)|.  Two zero tolerances are used to indicate convergence:
    (1) eps1, a measure of Euclidean distance and (2) eps2, a zero
    cosine measure.  Whenever a Newton step fails to reduce the
    distance to P, the step is replaced by a bounded scalar
    minimization of that distance over a bracket around the iterate.

    The curve is only known through ders(t, k), which must return the
    array of its derivatives up to and including the kth at t.  The
    result is a local minimum nearest ti, not necessarily the global
    one.

    Source: The NURBS Book (2nd Ed.), Pg. 229.

    Parameters
    ----------
    ders = the derivative evaluator of the curve
    P = the point to project
    tmin, tmax = the parametric interval to search
    ti = the initial iterate
    maxiter = the maximum number of iterations
    eps1, eps2 = the zero tolerances
    strict = if True, raise NumericNonconvergence instead of returning
             an unconverged result

    Returns
    -------
    ClosestPoint = (param, point, dist, converged)

    '''

    def dist(t):
        return util.distance(ders(t, 0)[0], P)

    P = np.asarray(P, dtype=float)
    if not tmin < tmax:
        raise ImproperInput(tmin, tmax)
    ti = min(max(ti, tmin), tmax)
    for ni in range(maxiter):
        C, CP, CPP = ders(ti, 2)
        R = C - P; RN = util.norm(R)
        CPN = util.norm(CP)
        if RN <= eps1 or CPN == 0.0:
            return ClosestPoint(ti, C, RN, True)
        CPR = np.dot(CP, R)
        zero_cosine = abs(CPR) / CPN / RN
        if zero_cosine <= eps2:
            return ClosestPoint(ti, C, RN, True)
        den = np.dot(CPP, R) + CPN**2
        tii = ti - CPR / den if den != 0.0 else ti
        tii = min(max(tii, tmin), tmax)
        if util.norm((tii - ti) * CP) <= eps1:
            return ClosestPoint(tii, ders(tii, 0)[0], dist(tii), True)
        if dist(tii) >= RN:
            h = abs(tii - ti) or PROJ_BRACKET * (tmax - tmin)
            a, b = max(tmin, ti - h), min(tmax, ti + h)
            tii = fminbound(dist, a, b, xtol=eps1)
            if dist(tii) >= RN:
                return ClosestPoint(ti, C, RN, True)
        ti = tii
    logger.warning('closest point did not converge after %d iterations '
                   '(t = %r)', maxiter, ti)
    if strict:
        raise nurbs.NumericNonconvergence(ti, maxiter)
    C = ders(ti, 0)[0]
    return ClosestPoint(ti, C, util.distance(C, P), False)


def reverse_curve_direction(n, p, U, Pw):

    ''' Reverse the direction of a curve while maintaining its
    parameterization.

    Source: The NURBS Book (2nd Ed.), Pg. 263.

    '''

    m = n + p + 1
    a = U[0]; b = U[-1]
    S = U.copy()
    for i in range(1, m - 2 * p):
        S[m-p-i] = - U[p+i] + a + b
    Qw = Pw[::-1]
    return S, Qw


# TOOLBOX


def make_linear_curve(P0, P1):

    ''' Construct a linear Curve based on two points.

    Parameters
    ----------
    P0, P1 = the coordinates of the two end points

    Returns
    -------
    Curve = the linear Curve

    '''

    Pw = nurbs.homogenize([P0, P1])
    return Curve(ControlPolygon(Pw=Pw), (1,))


def unify_curves(Cs):

    ''' Bring a set of Curves onto one common representation: a common
    degree (the maximum one; lower degree Curves are degree elevated),
    a common parameter interval, a common knot vector (the union of all
    knot vectors, each knot with its maximum multiplicity) and a common
    rational flag (rational as soon as any Curve is).  The geometry of
    each Curve is unchanged.  Unifying an already unified set returns
    equal copies.

    Parameters
    ----------
    Cs = the Curves to unify

    Returns
    -------
    [Curve] = the unified Curves

    '''

    if not Cs:
        raise ImproperInput(Cs)
    dims = set(c.dim for c in Cs)
    if len(dims) != 1:
        raise ImproperInput(dims)
    rational = any(c.isrational for c in Cs)
    n, p, U, Cs = make_curves_compatible1(Cs)
    logger.debug('unified %d curves (n = %d, p = %d, rational = %s)',
                 len(Cs), n, p, rational)
    return [Curve(c.cobj, (p,), (U,), rational) for c in Cs]


# UTILITIES


def make_curves_compatible1(Cs):

    ''' Ensure that the Curves are defined on the same parameter range,
    be of common degree and share the same knot vector.

    Source: The NURBS Book (2nd Ed.), Pg. 237-238.

    '''

    p = max([c.p[0] for c in Cs])
    Umin = min([c.U[0][ 0] for c in Cs])
    Umax = max([c.U[0][-1] for c in Cs])
    Cs1 = []
    for c in Cs:
        dp = p - c.p[0]
        c = c.elevate(dp)
        if c.U[0][0] != Umin or c.U[0][-1] != Umax:
            c = c.reparam(Umin, Umax)
        Cs1.append(c)
    U = knot.merge_knot_vecs(*[c.U[0] for c in Cs1])
    Cs2 = []
    for c in Cs1:
        c = c.refine(knot.missing_knot_vec(U, c.U[0]))
        Cs2.append(c)
    n, = Cs2[0].cobj.n
    return n, p, U, Cs2


def product_matrix(p, q):

    ''' Compute the coefficients for taking the product of two Bezier
    segments.

    Source: The NURBS Book (2nd Ed.), Pg. 206.

    '''

    bezalfs = np.zeros((p + q + 1, p + 1))
    ph = p + q; ph2 = ph // 2
    bezalfs[0,0] = bezalfs[ph,p] = 1.0
    for i in range(1, ph2 + 1):
        inv = 1.0 / comb(ph, i)
        mpi = min(p, i)
        for j in range(max(0, i - q), mpi + 1):
            bezalfs[i,j] = inv * comb(p, j) * comb(q, i - j)
    for i in range(ph2 + 1, ph):
        mpi = min(p, i)
        for j in range(max(0, i - q), mpi + 1):
            bezalfs[i,j] = bezalfs[ph-i,p-j]
    return bezalfs


def mult_degree_elevate(n, p, U, t):

    ''' For degree elevation, return the new number of control points nh
    and knot vector Uh.

    '''

    nh = n + (np.unique(U[p+1:-p-1]).size + 1) * t
    mult = knot.find_mult_knot_vec(U)
    Uh = np.zeros(0)
    for u, m in sorted(mult.items()):
        Uh = np.append(Uh, np.array((m + t) * [u]))
    return nh, Uh


# EXCEPTIONS


class CurveException(nurbs.NURBSException):
    pass

class ImproperInput(CurveException, nurbs.PreconditionViolation):
    pass
