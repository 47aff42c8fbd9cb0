import numpy as np

from . import errors
from . import util


# Many functions in this module rely on the fact the given knot vectors
# are "clean", i.e. any given knot is at least +/- a certain tolerance
# from any other knot, except for end knots and knots with
# multiplicities greater than 1.  This is achieved by making sure all
# knot vectors are rounded to NDEC decimal places.  Conic conversion
# splits at projected parameters, so NDEC must stay well below the
# conversion tolerance.
NDEC = 10


# CLEANING KNOTS


def clean_knot(u):
    ''' Clean the single knot u, i.e. simply round it to NDEC decimal
    places.  Ideally, this should be called every time a knot is to be
    inserted, removed, etc., from a knot vector. '''
    return np.round(u, decimals=NDEC)

def clean_knot_vec(U):
    ''' Clean the entire knot vector U, i.e. ensure there are no close
    knots.  For example, this is called automatically by a NURBSObject
    upon instantiation (IN-PLACE). '''
    Ui, ind = np.unique(U.round(decimals=NDEC), return_inverse=True)
    U[:] = Ui[ind]


# CHECKING KNOTS


def check_knot(U, u):
    ''' Check if u is within the bounds of U, assuming U is clean.
    Here, the returned knot must not be rounded. '''
    ur = np.round(u, decimals=NDEC)
    if U[0] == ur:
        return U[0]
    if U[-1] == ur:
        return U[-1]
    if not U[0] < u < U[-1]:
        raise KnotOutsideKnotVectorRange(U, u)
    return u

def check_knot_v(U, u):
    ''' Idem check_knot, vectorized in u. '''
    u = np.array(u, dtype=float)
    ur = np.round(u, decimals=NDEC)
    u[U[0] == ur] = U[0]; u[U[-1] == ur] = U[-1]
    if (u < U[0]).any() or (u > U[-1]).any():
        raise KnotOutsideKnotVectorRange(U, u)
    return u

def check_knot_vec(n, p, U):
    ''' Perform some consistency checks on the knot vector U, assuming U
    is clean. '''
    m = U.size - 1
    if m != n + p + 1:
        raise NonMatchingKnotVectorLength(m, n, p)

    Ul = U.tolist()
    nl, nr = [Ul.count(U[i]) for i in (0, -1)]
    if nl != p + 1 or nr != p + 1:
        raise UnclampedKnotVector(nl, nr, p, U)

    if (U != np.sort(U)).any():
        raise NonStrictlyIncreasingKnotVector(U)

    mult = find_int_mult_knot_vec(p, U)
    multv = np.array(list(mult.values()))
    if (multv > p).any():
        raise InteriorKnotMultiplicityGreaterThanOrder(p, mult)


# COMPUTING PARAMETERS


def loft_param(K, Q, L=1.0):
    ''' Compute parameter values suitable for lofting the (K + 1)
    sections whose control points are stacked in Q, i.e. Q[k,i] is the
    ith control point of the kth section.  The parameter difference
    between two neighbouring sections is proportional to the quadratic
    mean of the distances between their corresponding control points.
    The parameters lie in the range [0, L]. '''
    vb = np.zeros(K + 1)
    d = np.zeros(K + 1)
    for k in range(1, K + 1):
        d[k] = util.rms_distance(Q[k-1], Q[k])
        if d[k] == 0.0:
            raise CoincidentSections(k - 1, k)
    vb[1:] = np.cumsum(d[1:]) / np.sum(d) * L
    vb[K] = L
    return vb


# BUILDING KNOT VECTORS


def uni_knot_vec(n, p):
    ''' Construct a uniform and normalized knot vector, i.e. all
    interior knots are equally spaced and lie in [0, 1]. '''
    U = np.zeros(n + p + 2)
    for j in range(1, n - p + 1):
        U[j+p] = float(j) / (n - p + 1)
    U[-p-1:] = 1.0
    clean_knot_vec(U)
    return U

def averaging_knot_vec(n, p, Ub):
    ''' Construct a knot vector based on averaging, a method that
    reflects the distribution of the parameter values Ub. '''
    U = np.zeros(n + p + 2)
    for j in range(1, n - p + 1):
        U[j+p] = np.sum(Ub[j:j+p]) / p
    U[:p+1], U[-p-1:] = Ub[0], Ub[-1]
    clean_knot_vec(U)
    return U

def hermite_knot_vec(K, Ub):
    ''' Construct the knot vector of a C1 piecewise cubic Hermite
    interpolant through (K + 1) parameter values, i.e. every interior
    parameter becomes a double knot. '''
    U = np.hstack((4 * [Ub[0]],
                   np.repeat(Ub[1:K], 2),
                   4 * [Ub[K]]))
    clean_knot_vec(U)
    return U


# MANIPULATING KNOT VECTORS


def normalize_knot_vec(U):
    ''' Normalize all knots (or parameter values) to [0, 1] (IN-PLACE).
    '''
    u0, um = U[0], U[-1]
    U[:] = (np.asarray(U, dtype=float) - u0) / (um - u0)
    clean_knot_vec(U)

def remap_knot_vec(U, u0, um):
    ''' Remap all knots (or parameter values) to [u0, um] (IN-PLACE).
    '''
    if U[0] == u0 and U[-1] == um:
        return
    normalize_knot_vec(U)
    U[:] = u0 + np.asarray(U, dtype=float) * (um - u0)
    U[0], U[-1] = u0, um
    clean_knot_vec(U)


# MULTIPLICITIES


def find_mult_knot_vec(U):
    ''' Find the multiplicities of each knot in U, including the end
    knots. '''
    mult = {}.fromkeys(np.unique(U), 0)
    for u in U:
        mult[u] += 1
    return mult

def find_int_mult_knot_vec(p, U):
    ''' Idem to find_mult_knot_vec, but count the multiplicities of the
    interior knots only. '''
    U = U[p+1:-p-1]
    return find_mult_knot_vec(U)


# MISSING KNOTS


def missing_knot_vec(V, U):
    ''' Return all knots that are in V but not in U, assuming U and V
    are cleaned. '''
    multV = find_mult_knot_vec(V)
    multU = find_mult_knot_vec(U)
    U = np.zeros(0)
    for v, mv in sorted(multV.items()):
        mu = multU.get(v, 0)
        U = np.append(U, np.array(max(mv - mu, 0) * [v]))
    return U


# MERGING KNOT VECTORS


def merge_knot_vecs(*Us):
    ''' Merge all knot vectors Us in a new knot vector U, e.g. given U1
    and U2, uj is in U if it is in either U1 or U2.  The maximum
    multiplicity of uj in U1 or U2 is also carried over to U.  Assumes
    all knot vectors are cleaned. '''
    mults = []
    for U in Us:
        mults.append(find_mult_knot_vec(U))
    uk = np.hstack(Us)
    mult = {}.fromkeys(np.unique(uk), 0)
    for u in mult:
        mult[u] = np.max([m.get(u, 0) for m in mults])
    U = np.zeros(0)
    for v, m in sorted(mult.items()):
        U = np.append(U, np.array(m * [v]))
    return U


# EXCEPTIONS


class KnotVectorException(errors.RepresentationInvariantViolation):
    pass

class NonMatchingKnotVectorLength(KnotVectorException):
    pass

class NonStrictlyIncreasingKnotVector(KnotVectorException):
    pass

class UnclampedKnotVector(KnotVectorException):
    pass

class InteriorKnotMultiplicityGreaterThanOrder(KnotVectorException):
    pass

class KnotOutsideKnotVectorRange(KnotVectorException,
                                 errors.PreconditionViolation):
    pass

class CoincidentSections(errors.PreconditionViolation):
    pass
