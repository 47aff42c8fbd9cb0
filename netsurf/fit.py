import numpy as np
import scipy.sparse
import scipy.sparse.linalg

from . import basis
from . import knot
from . import nurbs


# All interpolants below are computed coordinate by coordinate; the
# given data may therefore hold Euclidean points as well as homogeneous
# ones (in which case the weights are interpolated like any other
# coordinate).


# INTERPOLATION


def global_curve_interp(n, Q, p, uk, U=None):

    ''' Suppose a pth-degree nonrational B-spline curve interpolant to
    the set of points {Qk}, k = 0,...,n, is seeked.  If a parameter
    value ubk is assigned to each Qk, and an appropriate knot vector U =
    {u0,...,um} is selected, it is possible to set up a (n + 1) x (n +
    1) system of linear equations

               Qk = C(ubk) = sum_(i=0)^n (Nip(ubk) * Pi)

    The control points, Pi, are the (n + 1) unknowns.  Let r be the
    number of coordinates in the Qk.  Note that this method is
    independent of r; there is only one coefficient matrix, with r
    right-hand sides and, correspondingly, r solution sets for the r
    coordinates.

    Parameters
    ----------
    n + 1 = the number of data points to interpolate
    Q = the point set, a ((n + 1) x r) matrix
    p = the degree of the interpolant
    uk = the parameter values associated to each point
    U = the knot vector to use for the interpolation (if available)

    Returns
    -------
    U, P = the knot vector and the control points of the interpolant

    Source
    ------
    The NURBS Book (2nd Ed.), Pg. 369.

    '''

    if p < 1 or n < p:
        raise ImproperInput(p, n)
    Q = np.asarray(Q, dtype=float)
    P = np.zeros_like(Q)
    if U is None:
        U = knot.averaging_knot_vec(n, p, uk)
    A = scipy.sparse.lil_matrix((n + 1, n + 1))
    for i in range(n + 1):
        span = basis.find_span(n, p, U, uk[i])
        A[i,span-p:span+1] = basis.basis_funs(span, uk[i], p, U)
    lu = scipy.sparse.linalg.splu(A.tocsc())
    for i in range(Q.shape[1]):
        P[:,i] = lu.solve(Q[:,i])
    return U, P


def global_surf_interp(n, m, Q, p, q, uk, vl):

    ''' A set of (n + 1) x (m + 1) data points {Qkl}, k=0,...,n and
    l=0,...,m, is given, and it is desired to construct a nonrational
    (p,q)th-degree B-spline surface interpolating the points, i.e.

                          Qkl = S(ubk, vbl) =
          sum_(i=0)^n sum_(j=0)^m (Nip(ubk) * Njq(vbl) * Pij)

    The interpolation is conducted in two steps:

    1.  using U and the ub_k, do (m + 1) curve interpolations through
        Q0l,...,Qnl (for l=0,...,m); this yields the points {Ril};

    2.  using V and the vb_l, do (n + 1) curve interpolations through
        Ri0,...,Rim (for i=0,...,n); this yields the {Pij}.

    Parameters
    ----------
    n + 1, m + 1 = the number of data points to interpolate in the u and
                   v directions, respectively
    Q = the point set, a ((n + 1) x (m + 1) x r) matrix
    p, q = the degrees of the interpolant in the u and v directions,
           respectively
    uk, vl = the parameter values associated to each points in the u and
             v directions, respectively

    Returns
    -------
    U, V, P = the knot vectors and the control points of the interpolant

    Source
    ------
    The NURBS Book (2nd Ed.), Pg. 380.

    '''

    Q = np.asarray(Q, dtype=float)
    P = np.zeros_like(Q)
    U = knot.averaging_knot_vec(n, p, uk)
    V = knot.averaging_knot_vec(m, q, vl)
    for l in range(m + 1):
        dummy, P[:,l] = global_curve_interp(n, Q[:,l], p, uk, U)
    for i in range(n + 1):
        dummy, P[i,:] = global_curve_interp(m, P[i,:], q, vl, V)
    return U, V, P


def hermite_curve_interp(n, Q, D, uk):

    ''' Let {Qk}, k=0,...,n, be a set of data points with associated
    derivatives {Dk} and parameter values {ubk}.  This algorithm
    constructs the C1 piecewise cubic Hermite interpolant, i.e. one
    cubic Bezier segment per parameter interval [ubk, ub_(k+1)], with

            C(ubk) = Qk    and    C'(ubk) = Dk.

    Since consecutive segments are C1, every interior parameter becomes
    a double knot and the middle control point Qk is dropped.  Every
    control point is thus either a data point or a data point moved
    along its derivative; e.g. a coordinate whose derivatives are all
    zero keeps the data values as control values.

    Parameters
    ----------
    n + 1 = the number of data points to interpolate
    Q = the point set, a ((n + 1) x r) matrix
    D = the derivatives, a ((n + 1) x r) matrix
    uk = the parameter values associated to each point

    Returns
    -------
    U, P = the knot vector and the control points of the interpolant

    '''

    if n < 1:
        raise ImproperInput(n)
    Q, D = [np.asarray(V, dtype=float) for V in (Q, D)]
    uk = np.asarray(uk, dtype=float)
    h = np.diff(uk)
    if (h <= 0.0).any():
        raise ImproperInput(uk)
    P = np.zeros((2 * n + 2,) + Q.shape[1:])
    P[0] = Q[0]
    for k in range(n):
        P[2*k+1] = Q[k] + h[k] / 3.0 * D[k]
        P[2*k+2] = Q[k+1] - h[k] / 3.0 * D[k+1]
    P[-1] = Q[-1]
    U = knot.hermite_knot_vec(n, uk)
    return U, P


# UTILITIES


def compute_bessel_tangents(n, Q, uk):

    ''' Estimate the derivatives of the (n + 1) points Q at the
    parameter values uk.  At an interior point, the derivative is the
    one of the parabola interpolating the point and its two neighbours
    (Bessel's method); at the ends, the derivative is extrapolated from
    the same parabola.  Two points yield the derivative of the chord.

    Source: The NURBS Book (2nd Ed.), Pg. 386.

    '''

    Q = np.asarray(Q, dtype=float)
    h = np.diff(uk)
    dQ = (Q[1:] - Q[:-1]) / h[:,np.newaxis]
    D = np.zeros_like(Q)
    if n == 1:
        D[:] = dQ[0]
        return D
    for k in range(1, n):
        alf = h[k-1] / (h[k-1] + h[k])
        D[k] = (1.0 - alf) * dQ[k-1] + alf * dQ[k]
    D[0] = 2.0 * dQ[0] - D[1]
    D[n] = 2.0 * dQ[n-1] - D[n-1]
    return D


def hermite_homogeneous_data(n, Qw, uk):

    ''' Prepare the homogeneous points Qw for Hermite interpolation: the
    derivatives of the Euclidean points are estimated with
    compute_bessel_tangents and lifted to (w * P', 0), so that the
    weight coordinate of the interpolant has zero derivatives at the
    data points.  Returns the homogeneous derivatives.

    '''

    Qw = np.asarray(Qw, dtype=float)
    w = Qw[...,-1]
    if (w <= 0.0).any():
        raise nurbs.NonPositiveWeights(w)
    D = compute_bessel_tangents(n, nurbs.dehomogenize(Qw), uk)
    Dw = np.zeros_like(Qw)
    Dw[...,:-1] = D * w[...,np.newaxis]
    return Dw


def interp_rows(n, Qw, q, uk, mode='plain'):

    ''' Interpolate, across their first index, the (n + 1) rows of the
    object matrix Qw, i.e. Qw[k] is reached at uk[k].  mode is either
    'plain' (global interpolation of degree min(q, n)) or 'hermite'
    (piecewise cubic Hermite interpolation).  Returns the knot vector,
    the degree and the interpolated object matrix. '''

    Qw = np.asarray(Qw, dtype=float)
    s = Qw.shape
    Q = Qw.reshape((s[0], -1))
    if mode == 'plain':
        q = min(q, n)
        U, P = global_curve_interp(n, Q, q, uk)
    elif mode == 'hermite':
        q = 3
        Dw = np.array([hermite_homogeneous_data(n, Qw[:,i], uk)
                       for i in range(s[1])]).swapaxes(0, 1)
        U, P = hermite_curve_interp(n, Q, Dw.reshape((s[0], -1)), uk)
    else:
        raise ImproperInput(mode)
    return U, q, P.reshape((-1,) + s[1:])


# EXCEPTIONS


class FitException(nurbs.NURBSException):
    pass

class ImproperInput(FitException, nurbs.PreconditionViolation):
    pass
