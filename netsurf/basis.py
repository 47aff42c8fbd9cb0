import numpy as np

from . import knot


def find_span(n, p, U, u):

    ''' Determine the knot span index i, i.e. U[i] <= u < U[i+1], with
    the convention that the last span, [U[n], U[n+1]], is closed.

    Source: The NURBS Book (2nd Ed.), Pg. 68.

    '''

    u = knot.check_knot(U, u)
    return min(int(np.searchsorted(U, u, side='right')) - 1, n)


def find_span_v(n, p, U, u, num):
    ''' Idem find_span, vectorized in u. '''
    u = knot.check_knot_v(U, u)
    return np.minimum(np.searchsorted(U, u, side='right') - 1, n)


def find_span_mult(n, p, U, u):
    ''' Determine the knot span index and the multiplicity of u. '''
    u = knot.check_knot(U, u)
    s = np.searchsorted(U, u, side='right') - np.searchsorted(U, u)
    return find_span(n, p, U, u), int(s)


# The following functions are based on the property that, in any given
# knot span, [ u_i, u_(i+1) ), at most p + 1 of the B-spline basis
# functions are nonzero, namely the functions (N_(i-p,p)(u),...,
# N_(i,p)(u)).
# NOTE: i is the knot span index of u


def basis_funs(i, u, p, U):

    ''' Compute all nonvanishing basis functions and store them in the
    array (N[0],...,N[p]).  This is basis_funs_v for a single parameter
    value.

    Source: The NURBS Book (2nd Ed.), Pg. 70.

    '''

    return basis_funs_v(np.array([i]), np.array([u], dtype=float),
                        p, U, 1)[:,0]


def basis_funs_v(i, u, p, U, num):

    ''' Idem basis_funs, vectorized in u.

    '''

    N = np.zeros((p + 1, num))
    left = np.zeros((p + 1, num))
    right = np.zeros((p + 1, num))
    N[0] = 1.0
    for j in range(1, p + 1):
        left[j], right[j] = u - U[i+1-j], U[i+j] - u
        saved = 0.0
        for r in range(j):
            tmp = N[r] / (right[r+1] + left[j-r])
            N[r] = saved + right[r+1] * tmp
            saved = left[j-r] * tmp
        N[j] = saved
    return N


def ders_basis_funs(i, u, p, n, U):

    ''' Compute the nonzero basis functions and their derivatives, up to
    and including the nth derivative (n <= p).  Output is in the
    two-dimensional array, ders.  ders[k,j] is the kth derivative of the
    function N_(i-p+j,p)(u) where (0 <= k <= n) and (0 <= j <= p).

    Source: The NURBS Book (2nd Ed.), Pg. 72.

    '''

    ders = np.zeros((n + 1, p + 1))
    ndu = np.zeros((p + 1, p + 1))
    a = np.zeros((2, p + 1))
    left = np.zeros(p + 1)
    right = np.zeros(p + 1)
    ndu[0,0] = 1.0
    for j in range(1, p + 1):
        left[j] = u - U[i+1-j]
        right[j] = U[i+j] - u
        saved = 0.0
        for r in range(j):
            ndu[j,r] = right[r+1] + left[j-r]
            tmp = ndu[r,j-1] / ndu[j,r]
            ndu[r,j] = saved + right[r+1] * tmp
            saved = left[j-r] * tmp
        ndu[j,j] = saved
    for j in range(p + 1):
        ders[0,j] = ndu[j,p]
    for r in range(p + 1):
        s1, s2 = 0, 1
        a[0,0] = 1.0
        for k in range(1, n + 1):
            d = 0.0
            rk, pk = r - k, p - k
            if r >= k:
                a[s2,0] = a[s1,0] / ndu[pk+1,rk]
                d = a[s2,0] * ndu[rk,pk]
            if rk >= - 1:
                j1 = 1
            else:
                j1 = -rk
            if r - 1 <= pk:
                j2 = k - 1
            else:
                j2 = p - r
            for j in range(j1, j2 + 1):
                a[s2,j] = (a[s1,j] - a[s1,j-1]) / ndu[pk+1,rk+j]
                d += a[s2,j] * ndu[rk+j,pk]
            if r <= pk:
                a[s2,k] = - a[s1,k-1] / ndu[pk+1,r]
                d += a[s2,k] * ndu[r,pk]
            ders[k,r] = d
            j = s1; s1 = s2; s2 = j
    r = p
    for k in range(1, n + 1):
        for j in range(p + 1):
            ders[k,j] *= r
        r *= p - k
    return ders
