''' A NURBS surface of degree p in the u direction and degree q in the v
direction is a bivariate vector-valued piecewise rational function of
the form

             sum_(i=0)^(n) sum_(j=0)^(m) (Nip(u) * Njq(v) * wij * Pij)
    S(u,v) = ---------------------------------------------------------
                sum_(i=0)^(n) sum_(j=0)^(m) (Nip(u) * Njq(v) * wij)

(a <= u <= b), (c <= v <= d).  The {Pij} form a bidirectional control
net, the {wij} are the weights, and the {Nip(u)} and {Njq(v)} are the
nonrational B-spline basis functions defined on the knot vectors

    U = {a,...,a, u_(p+1),...,u_(r-p-1), b,...,b}

    V = {c,...,c, v_(q+1),...,u_(s-q-1), d,...,d}

where (r = n + p + 1) and (s = m + q + 1).

As with curves it is convenient to represent a NURBS surface using
homogeneous coordinates, that is

    Sw(u,v) = sum_(i=0)^(n) sum_(j=0)^(m) (Nip(u) * Njq(v) * Pwij)

where Pwij = (wij*xij, wij*yij[, wij*zij], wij).  Then S(u,v) =
H{Sw(u,v)}.  Strictly speaking, Sw(u,v) is a tensor product, piecewise
polynomial surface in (dim + 1)-dimensional space while S(u,v), again,
is a piecewise rational surface in dim-dimensional space; it is not a
tensor product surface.

'''

import logging

import numpy as np
from scipy.special import comb

from . import basis
from . import curve
from . import fit
from . import knot
from . import nurbs
from . import util


__all__ = ['Surface', 'ControlNet',
           'make_bilinear_surface',
           'make_gordon_surface',
           'make_loft_params',
           'make_loft_surface',
           'make_lofted_surface']


logger = logging.getLogger(__name__)


# Gordon networks whose curves miss each other by more than NET_TOL are
# reported.
NET_TOL = 1e-3

LOFT_MODES = ('plain', 'hermite')


class ControlNet(nurbs.ControlObject):

    def __init__(self, Pw):

        ''' See nurbs.ControlObject.

        Parameters
        ----------
        Pw = the object matrix

        Examples
        --------
        >>> Pw = [[(-5, 5, 1, 1), (2, 6, 2, 1)],
        ...       [(-3,-4, 0, 1), (1, 2,-3, 1)]]
        >>> cnet = ControlNet(Pw=Pw)

        '''

        super(ControlNet, self).__init__(Pw)
        if len(self.n) != 2:
            raise ImproperInput(self.Pw.shape)


class Surface(nurbs.NURBSObject):

    def __init__(self, cnet, p, U=None, rational=None):

        ''' See nurbs.NURBSObject.

        Unlike Curves, Surfaces accept weights of any sign: lofting
        rational sections may yield non-positive weights, which is
        checked with has_positive_weights.

        Parameters
        ----------
        cnet = the ControlNet
        p = the u, v degrees (order p + 1) of the Surface
        U = the u, v knot vectors
        rational = whether or not the Surface is rational

        Examples
        --------

          v|
           |
        P1 ._________. P3
           |         |
           |         |
           |         |
           |         | P2
        P0 ._________. ____ u

        >>> Pw = [[(1, -1, 1), (-1, -1, 1)],
        ...       [(1,  1, 1), (-1,  1, 1)]]
        >>> s = Surface(ControlNet(Pw=Pw), (1,1))

        '''

        super(Surface, self).__init__(cnet, p, U, rational)

# EVALUATION OF POINTS AND DERIVATIVES

    def eval_point(self, u, v):

        ''' Evaluate a point.

        Parameters
        ----------
        u, v = the parameter values of the point

        Returns
        -------
        S = the coordinates of the point

        '''

        n, p, U, m, q, V, Pw = self.var()
        return rat_surface_point(n, p, U, m, q, V, Pw, u, v)

    def eval_points(self, us, vs):

        ''' Evaluate multiple points.

        Parameters
        ----------
        us, vs = the parameter values of each point

        Returns
        -------
        S = the coordinates of all points, a (dim x len(us)) matrix

        '''

        n, p, U, m, q, V, Pw = self.var()
        return rat_surface_point_v(n, p, U, m, q, V, Pw, us, vs, len(us))

    def eval_derivatives(self, u, v, d):

        ''' Evaluate derivatives at a point.

        Parameters
        ----------
        u, v = the parameter values of the point
        d = the number of derivatives to evaluate

        Returns
        -------
        SKL = all derivatives, where SKL[k,l,:] is the derivative of
              S(u,v) with respect to u k times and v l times (0 <= k +
              l <= d)

        '''

        n, p, U, m, q, V, Pw = self.var()
        Aders = surface_derivs_alg1(n, p, U, m, q, V, Pw[:,:,:-1], u, v, d)
        if self.isrational:
            wders = surface_derivs_alg1(n, p, U, m, q, V, Pw[:,:,-1], u, v, d)
            return rat_surface_derivs(Aders, wders, d)
        return Aders

# ISOPARAMETRIC CURVES

    def extract(self, u, di):

        ''' Extract an isoparametric Curve from the Surface.

        Parameters
        ----------
        u = the parameter value at which to extract the Curve
        di = the parametric direction in which to extract the Curve (0
             or 1)

        Returns
        -------
        Curve = the extracted Curve

        '''

        n, p, U, m, q, V, Pw = self.var()
        u = knot.clean_knot(u)
        if di == 0:
            u = knot.check_knot(U, u)
            if u == U[0]:
                Pwc = Pw[0,:]
            elif u == U[-1]:
                Pwc = Pw[-1,:]
            else:
                k, s = basis.find_span_mult(n, p, U, u)
                r = p - s
                if r > 0:
                    U, V, Pw = surface_knot_ins(n, p, U, m, q, V,
                                                Pw, u, k, s, r, 0)
                Pwc = Pw[k-s,:]
            p = q
            U = V
        elif di == 1:
            u = knot.check_knot(V, u)
            if u == V[0]:
                Pwc = Pw[:,0]
            elif u == V[-1]:
                Pwc = Pw[:,-1]
            else:
                k, s = basis.find_span_mult(m, q, V, u)
                r = q - s
                if r > 0:
                    U, V, Pw = surface_knot_ins(n, p, U, m, q, V,
                                                Pw, u, k, s, r, 1)
                Pwc = Pw[:,k-s]
        else:
            raise ImproperInput(di)
        return curve.Curve(curve.ControlPolygon(Pw=Pwc), (p,), (U,),
                           self.isrational)

# KNOT REFINEMENT

    def refine(self, X, di):

        ''' Refine the knot vector in one direction.

        Parameters
        ----------
        X = a list of the knots to insert
        di = the parametric direction in which to refine the Surface (0
             or 1)

        Returns
        -------
        Surface = the refined Surface

        '''

        n, p, U, m, q, V, Pw = self.var()
        if len(X) != 0:
            X = knot.clean_knot(np.sort(X))
            U, V, Pw = refine_knot_vect_surface(n, p, U, m, q, V, Pw, X, di)
        return self._new(Pw, p, q, U, V)

# DEGREE ELEVATION

    def elevate(self, t, di):

        ''' Elevate the Surface's degree in one direction.

        Parameters
        ----------
        t = the number of degrees to elevate the Surface with
        di = the parametric direction in which to degree elevate the
             Surface (0 or 1)

        Returns
        -------
        Surface = the degree elevated Surface

        '''

        n, p, U, m, q, V, Pw = self.var()
        if t > 0:
            U, V, Pw = degree_elevate_surface(n, p, U, m, q, V, Pw, t, di)
            if di == 0:
                p += t
            elif di == 1:
                q += t
        return self._new(Pw, p, q, U, V)

# MISCELLANEA

    def has_positive_weights(self):
        ''' Are all weights strictly positive?  If so, the denominator
        of S(u,v) can not vanish. '''
        return bool((self.cobj.Pw[...,-1] > 0.0).all())

    def reparam(self, a, b, di):

        ''' Rescale the Surface's domain in one direction to [a, b].

        Parameters
        ----------
        a, b = the new parametric bounds (a < b)
        di = the parametric direction to rescale (0 or 1)

        Returns
        -------
        Surface = the reparameterized Surface

        '''

        if not a < b:
            raise ImproperInput(a, b)
        n, p, U, m, q, V, Pw = self.var()
        knot.remap_knot_vec((U, V)[di], a, b)
        return self._new(Pw, p, q, U, V)

    def swap(self):

        ''' Swap the u and v directions.

        Returns
        -------
        Surface = the swapped Surface

        '''

        n, p, U, m, q, V, Pw = self.var()
        Pw = np.transpose(Pw, (1, 0, 2))
        return self._new(Pw, q, p, V, U)

    def _new(self, Pw, p, q, U, V):
        ''' Construct a Surface sharing self's rational flag. '''
        return Surface(ControlNet(Pw=Pw), (p,q), (U,V), self.isrational)


# HEAVY LIFTING FUNCTIONS


def surface_derivs_alg1(n, p, U, m, q, V, P, u, v, d):

    ''' Compute a point on a B-spline surface and all partial
    derivatives up to and including order d (0 <= k + l <= d), (d > p,
    q) is allowed, although the derivatives are 0 in this case (for
    nonrational surfaces); these derivatives are necessary for rational
    surfaces.  Output is the array SKL, where SKL[k,l] is the
    derivative of S(u,v) with respect to u k times, and v l times.

    Source: The NURBS Book (2nd Ed.), Pg. 111.

    '''

    du, dv = min(d, p), min(d, q)
    uspan = basis.find_span(n, p, U, u)
    Nu = basis.ders_basis_funs(uspan, u, p, du, U)
    vspan = basis.find_span(m, q, V, v)
    Nv = basis.ders_basis_funs(vspan, v, q, dv, V)
    Pij = P[uspan-p:uspan+1,vspan-q:vspan+1]
    SKL = np.zeros((d + 1, d + 1) + P.shape[2:])
    SKL[:du+1,:dv+1] = np.tensordot(Nu, np.tensordot(Nv, Pij, (1, 1)),
                                    (1, 1))
    k, l = np.indices((d + 1, d + 1))
    SKL[k + l > d] = 0.0
    return SKL


def rat_surface_point(n, p, U, m, q, V, Pw, u, v):

    ''' Compute a point on a rational B-spline surface at fixed u and v
    parameter values.

    Source: The NURBS Book (2nd Ed.), Pg. 134.

    '''

    uspan = basis.find_span(n, p, U, u)
    Nu = basis.basis_funs(uspan, u, p, U)
    vspan = basis.find_span(m, q, V, v)
    Nv = basis.basis_funs(vspan, v, q, V)
    Pwij = Pw[uspan-p:uspan+1,vspan-q:vspan+1]
    Sw = np.einsum('i,j,ijk->k', Nu, Nv, Pwij)
    return Sw[:-1] / Sw[-1]


def rat_surface_point_v(n, p, U, m, q, V, Pw, u, v, num):

    ''' Idem rat_surface_point, vectorized in u, v.

    '''

    u, v = [np.asarray(w, dtype=float) for w in (u, v)]
    uspan = basis.find_span_v(n, p, U, u, num)
    Nu = basis.basis_funs_v(uspan, u, p, U, num)
    vspan = basis.find_span_v(m, q, V, v, num)
    Nv = basis.basis_funs_v(vspan, v, q, V, num)
    iu = uspan[:,np.newaxis] - p + np.arange(p + 1)
    iv = vspan[:,np.newaxis] - q + np.arange(q + 1)
    Pwij = Pw[iu[:,:,np.newaxis],iv[:,np.newaxis,:]]
    Sw = np.einsum('in,jn,nijk->kn', Nu, Nv, Pwij)
    return Sw[:-1] / Sw[-1]


def rat_surface_derivs(Aders, wders, d):

    ''' Given that (u,v) is fixed, and that all derivatives A^(k,l),
    w^(k,l) for (k,l >= 0) and (0 <= k + l <= d) have been computed and
    loaded into the arrays Aders and wders, respectively, this algorithm
    computes the point, S(u,v) and the derivatives, S^(k,l)(u,v), (0 <=
    k + l <= d).  The surface point is returned in SKL[0,0,:] and the
    k,lth derivative is returned in SKL[k,l,:].

    Source: The NURBS Book (2nd Ed.), Pg. 137.

    '''

    SKL = np.zeros_like(Aders)
    for k in range(d + 1):
        for l in range(d - k + 1):
            v = Aders[k,l].copy()
            for j in range(1, l + 1):
                v -= comb(l, j) * wders[0,j] * SKL[k,l-j]
            for i in range(1, k + 1):
                for j in range(l + 1):
                    v -= (comb(k, i) * comb(l, j) *
                          wders[i,j] * SKL[k-i,l-j])
            SKL[k,l] = v / wders[0,0]
    return SKL


# FUNDAMENTAL GEOMETRIC ALGORITHMS


def surface_knot_ins(n, p, U, m, q, V, Pw, u, k, s, r, di):

    ''' Knots are inserted into surfaces by simply applying curve knot
    insertion to the rows and/or columns of control points.  In
    particular, ubar is added to the knot vector U by doing a ubar knot
    insertion on each of m + 1 columns of control points.  Analogously,
    vbar must be inserted on each of the n + 1 rows of control points.

    Source: The NURBS Book (2nd Ed.), Pg. 155.

    '''

    if di == 0:
        VQ = V.copy()
        Qw = np.zeros((n + r + 1, m + 1, Pw.shape[-1]))
        for col in range(m + 1):
            UQ, Qw[:,col] = \
                    curve.curve_knot_ins(n, p, U, Pw[:,col], u, k, s, r)
    elif di == 1:
        UQ = U.copy()
        Qw = np.zeros((n + 1, m + r + 1, Pw.shape[-1]))
        for row in range(n + 1):
            VQ, Qw[row,:] = \
                    curve.curve_knot_ins(m, q, V, Pw[row,:], u, k, s, r)
    return UQ, VQ, Qw


def refine_knot_vect_surface(n, p, U, m, q, V, Pw, X, di):

    ''' Let Sw(u,v) be a NURBS surface on U and V.  A U (V) knot vector
    refinement is accomplished by simply applying curve knot refinement
    to the m + 1 (n + 1) columns (rows) of control points.

    Source: The NURBS Book (2nd Ed.), Pg. 167.

    '''

    r = len(X) - 1
    if di == 0:
        VQ = V.copy()
        Qw = np.zeros((n + r + 2, m + 1, Pw.shape[-1]))
        for col in range(m + 1):
            UQ, Qw[:,col] = curve.refine_knot_vect_curve(n, p, U, Pw[:,col], X)
    elif di == 1:
        UQ = U.copy()
        Qw = np.zeros((n + 1, m + r + 2, Pw.shape[-1]))
        for row in range(n + 1):
            VQ, Qw[row,:] = curve.refine_knot_vect_curve(m, q, V, Pw[row,:], X)
    return UQ, VQ, Qw


def degree_elevate_surface(n, p, U, m, q, V, Pw, t, di):

    '''  Degree elevation is accomplished for surfaces by applying it to
    the rows/columns of control points.  In particular, degree p (u
    direction) is elevated by applying curve degree elevation to each of
    the (m + 1) columns of control points.  The v direction degree q is
    elevated by applying the same algorithm to each of (n + 1) rows of
    control points.

    Source: The NURBS Book (2nd Ed.), Pg. 209.

    '''

    if di == 0:
        VQ = V.copy()
        nh = curve.mult_degree_elevate(n, p, U, t)[0]
        Qw = np.zeros((nh + 1, m + 1, Pw.shape[-1]))
        for col in range(m + 1):
            UQ, Qw[:,col] = curve.degree_elevate_curve(n, p, U, Pw[:,col], t)
    elif di == 1:
        UQ = U.copy()
        mh = curve.mult_degree_elevate(m, q, V, t)[0]
        Qw = np.zeros((n + 1, mh + 1, Pw.shape[-1]))
        for row in range(n + 1):
            VQ, Qw[row,:] = curve.degree_elevate_curve(m, q, V, Pw[row,:], t)
    return UQ, VQ, Qw


# TOOLBOX


def make_bilinear_surface(P00, P01, P10, P11):

    ''' Construct a bilinear Surface.

    Let P00, P01, P10 and P11 be four points:

                             v|
                              |
                          P01 ._________. P11
                              |         |
                              |         |
                              |         |
                          P00 |         | P10
                              ._________. ____
                                             u

    Clearly, the (nonrational) surface given by

       S(u,v) = sum_(i=0)^(1) sum_(j=0)^(1) Ni1(u) * Nj1(v) * Pij

    with U = V = {0,0,1,1} represents a bilinear interpolation between
    the four line segments P00-P10, P01-P11, P00-P01 and P10-P11.

    Parameters
    ----------
    P00, P01, P10, P11 = the coordinates of the four corner points

    Returns
    -------
    Surface = the bilinear Surface

    Source
    ------
    The NURBS Book (2nd Ed.), Pg. 333.

    '''

    Pw = nurbs.homogenize([[P00, P01], [P10, P11]])
    return Surface(ControlNet(Pw=Pw), (1,1))


def make_loft_params(Cs, L=1.0):

    ''' Assign a parameter value to each of the (K + 1) Curves of a
    unified family, with a view to lofting them.  The parameter gap
    between two neighbouring Curves is proportional to the quadratic
    mean of the distances between their corresponding control points;
    hence, Curves far apart (on average) are far apart in the lofting
    direction too.  The parameters start at 0 and end exactly at L.

    Parameters
    ----------
    Cs = the (unified) Curves, at least two of them
    L = the last parameter value (L > 0)

    Returns
    -------
    vk = the strictly increasing parameter values

    '''

    if len(Cs) < 2:
        raise ImproperInput(len(Cs))
    if not L > 0.0:
        raise ImproperInput(L)
    shapes = set(c.cobj.Pw.shape for c in Cs)
    if len(shapes) != 1:
        raise ImproperInput(shapes)
    K = len(Cs) - 1
    Q = np.array([nurbs.dehomogenize(c.cobj.Pw) for c in Cs])
    return knot.loft_param(K, Q, L)


def make_lofted_surface(Cs, vk=None, q=3, mode='plain'):

    ''' Loft a Surface through a family of unified Curves.

    Let

              C_k(u) = sum_(i=0)^n (Nip(u) * Pwki)    k = 0,...,K

    be a set of Curves sharing their degree, knot vector and rational
    flag (see curve.unify_curves).  The C_k(u) are called section
    curves.  Lofting (or skinning) blends the section curves together
    so that they become isoparametric curves of the resulting Surface,
    i.e. S(u,vk) = C_k(u).  This is done by (n + 1) interpolations,
    across k, of the homogeneous control points Pwki, so that the
    weights ride along as one more coordinate.

    Two interpolation modes are available:

      - 'plain': global interpolation of degree min(q, K).  The weights
        are interpolated like the other coordinates and may therefore
        become non-positive between the sections of a rational family
        (see Surface.has_positive_weights).

      - 'hermite': C1 piecewise cubic Hermite interpolation whose weight
        derivatives are set to zero.  Every weight of the Surface is
        then one of the section weights, so the denominator of a
        rational family stays positive.  The spatial derivatives are
        estimated with Bessel's method.

    Parameters
    ----------
    Cs = the unified section Curves, at least two of them
    vk = the strictly increasing parameter values of the sections (by
         default computed with make_loft_params)
    q = the degree of the interpolation in v ('plain' mode only)
    mode = the interpolation mode, 'plain' or 'hermite'

    Returns
    -------
    Surface = the lofted Surface

    Source
    ------
    The NURBS Book (2nd Ed.), Pg. 457.

    '''

    if len(Cs) < 2:
        raise ImproperInput(len(Cs))
    if mode not in LOFT_MODES:
        raise ImproperInput(mode)
    if q < 1:
        raise ImproperInput(q)
    check_unified(Cs)
    K = len(Cs) - 1
    if vk is None:
        vk = make_loft_params(Cs)
    vk = np.asarray(vk, dtype=float)
    if vk.shape != (K + 1,):
        raise ImproperInput(vk.shape, K)
    if (np.diff(vk) <= 0.0).any():
        raise ImproperInput(vk)
    n, p, U, dummy = Cs[0].var()
    Qw = np.array([c.cobj.Pw for c in Cs])
    V, q, Pw = fit.interp_rows(K, Qw, q, vk, mode)
    Pw = np.transpose(Pw, (1, 0, 2))
    S = Surface(ControlNet(Pw=Pw), (p,q), (U,V), Cs[0].isrational)
    if not S.has_positive_weights():
        logger.warning('lofted surface has non-positive weights '
                       '(min = %g, mode = %s)', np.min(Pw[...,-1]), mode)
    logger.debug('lofted %d sections (mode = %s, q = %d)', K + 1, mode, q)
    return S


def make_loft_surface(Cs, L=1.0, q=3, mode='plain'):

    ''' Loft a Surface through arbitrary section Curves: the Curves are
    first unified, then parameterized with make_loft_params.

    Parameters
    ----------
    Cs = the section Curves, at least two of them
    L = the last parameter value in v
    q, mode = see make_lofted_surface

    Returns
    -------
    Surface = the lofted Surface

    '''

    if len(Cs) < 2:
        raise ImproperInput(len(Cs))
    Cs = curve.unify_curves(Cs)
    vk = make_loft_params(Cs, L)
    return make_lofted_surface(Cs, vk, q, mode)


def make_gordon_surface(Ck, Cl, ul, vk, pc=None, qc=None):

    ''' Interpolate a bidirectional Curve network.

    Let

     Ck(u) = sum_(i=0)^(n) (Nip(u) * Pwki)  k = 0,...,r
     Cl(v) = sum_(j=0)^(m) (Njq(v) * Pwlj)  l = 0,...,s

    be two sets of Curves for which there exist parameters (u_0 < u_1
    < ... < u_s) and (v_0 < v_1 < ... < v_r) such that

            Qlk = Ck(ul) = Cl(vk)  k = 0,...,r  l = 0,...,s

    The desired NURBS surface, S(u,v), interpolates the two sets of
    curves, that is

                     S(ul,v) = Cl(v)    l = 0,...,s
                     S(u,vk) = Ck(u)    k = 0,...,r

    Gordon showed that the surface S(u,v) = L1(u,v) + L2(u,v) - T(u,v)
    satisfies these conditions, where L1(u,v) and L2(u,v) are
    respectively the u and v-directional lofted surfaces and T(u,v) is
    a surface interpolating the points Qlk.  Both families are unified
    first.  The sum is carried out on homogeneous control points; for a
    rational network, the conditions above therefore hold as long as
    the homogeneous points Ck(ul) and Cl(vk) agree.

    Parameters
    ----------
    Ck, Cl = the u and v-directional Curves, at least two of each
    ul, vk = the parameters of the curve intersection points
    pc, qc = the degrees for interpolations (by default, the degrees of
             the Ck and Cl, respectively, as far as the number of
             transversal Curves allows)

    Returns
    -------
    Surface = the Gordon Surface

    Source
    ------
    The NURBS Book (2nd Ed.), Pg. 494.

    '''

    s = len(Cl) - 1; r = len(Ck) - 1
    if s < 1 or r < 1:
        raise ImproperInput(s, r)
    if len(ul) - 1 != s or len(vk) - 1 != r:
        raise ImproperInput(s, r, len(ul), len(vk))
    ul, vk = [np.asarray(w, dtype=float) for w in (ul, vk)]
    if (np.diff(ul) <= 0.0).any() or (np.diff(vk) <= 0.0).any():
        raise ImproperInput(ul, vk)
    if len(set(c.dim for c in list(Ck) + list(Cl))) != 1:
        raise ImproperInput(Ck, Cl)
    Ck = curve.unify_curves(Ck)
    Cl = curve.unify_curves(Cl)
    for Cs, w in ((Ck, ul), (Cl, vk)):
        if not np.allclose(Cs[0].domain[0], (w[0], w[-1]), atol=1e-9):
            raise ImproperInput(Cs[0].domain[0], w)
    pc = pc if pc else min(Ck[0].p[0], s)
    qc = qc if qc else min(Cl[0].p[0], r)
    if not 1 <= pc <= s or not 1 <= qc <= r:
        raise ImproperInput(pc, qc, s, r)
    rational = Ck[0].isrational or Cl[0].isrational
    Q = np.zeros((s + 1, r + 1, Ck[0].dim + 1))
    for l in range(s + 1):
        for k in range(r + 1):
            n, p, U, Pw = Ck[k].var()
            Q[l,k] = curve.curve_point(n, p, U, Pw, ul[l])
            l2n = util.distance(Cl[l].eval_point(vk[k]),
                                Ck[k].eval_point(ul[l]))
            if l2n > NET_TOL:
                logger.warning('curve network inconsistency at (l, k) = '
                               '(%d, %d): %g', l, k, l2n)
    L1 = make_lofted_surface(Cl, ul, pc).swap()
    L2 = make_lofted_surface(Ck, vk, qc)
    UT, VT, PT = fit.global_surf_interp(s, r, Q, pc, qc, ul, vk)
    T = Surface(ControlNet(Pw=PT), (pc,qc), (UT,VT), rational)
    dummy, dummy, p, q, U, V, Ss = make_surfaces_compatible1([L1, L2, T])
    Pij = Ss[0].cobj.Pw + Ss[1].cobj.Pw - Ss[2].cobj.Pw
    S = Surface(ControlNet(Pw=Pij), (p,q), (U,V), rational)
    logger.debug('Gordon surface from %d x %d curves (p, q = %d, %d)',
                 r + 1, s + 1, p, q)
    return S


# UTILITIES


def check_unified(Cs):

    ''' Check that the Curves share their degree, knot vector, number
    of control points, dimension and rational flag.

    '''

    C0 = Cs[0]
    for c in Cs[1:]:
        if (c.p != C0.p or c.isrational != C0.isrational or
            c.cobj.Pw.shape != C0.cobj.Pw.shape or
            not np.array_equal(c.U[0], C0.U[0])):
            raise ImproperInput(C0, c)


def make_surfaces_compatible1(Ss):

    ''' Ensure that the Surfaces are defined on the same parameter
    ranges, be of common degrees and share the same knot vectors.

    '''

    p = max([s.p[0] for s in Ss])
    q = max([s.p[1] for s in Ss])
    Umin = min([s.U[0][ 0] for s in Ss])
    Umax = max([s.U[0][-1] for s in Ss])
    Vmin = min([s.U[1][ 0] for s in Ss])
    Vmax = max([s.U[1][-1] for s in Ss])
    Ss1 = []
    for s in Ss:
        dp, dq = p - s.p[0], q - s.p[1]
        s = s.elevate(dp, 0).elevate(dq, 1)
        s = s.reparam(Umin, Umax, 0).reparam(Vmin, Vmax, 1)
        Ss1.append(s)
    U = knot.merge_knot_vecs(*[s.U[0] for s in Ss1])
    V = knot.merge_knot_vecs(*[s.U[1] for s in Ss1])
    Ss2 = []
    for s in Ss1:
        s = s.refine(knot.missing_knot_vec(U, s.U[0]), 0)
        s = s.refine(knot.missing_knot_vec(V, s.U[1]), 1)
        Ss2.append(s)
    n, m = Ss2[0].cobj.n
    return n, m, p, q, U, V, Ss2


# EXCEPTIONS


class SurfaceException(nurbs.NURBSException):
    pass

class ImproperInput(SurfaceException, nurbs.PreconditionViolation):
    pass
