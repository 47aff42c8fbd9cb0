import numpy as np

from . import errors


def norm(V):
    ''' Find the norm of the vector V (faster than np.linalg.norm).  '''
    return np.sqrt(np.dot(V, V))

def normalize(V):
    ''' Normalize the vector V. '''
    V = np.asarray(V, dtype=float)
    n = norm(V)
    if n == 0.0:
        raise NullVector(V)
    return V / n

def distance(P1, P2):
    ''' Calculate the distance between two points. '''
    return norm(np.asarray(P2, dtype=float) - P1)

def distance_v(P1, P2):
    ''' Idem distance, vectorized in P1, a (dim x num) matrix. '''
    P2 = np.asarray(P2, dtype=float)
    P12 = P2.reshape((P2.size, 1)) - P1
    return np.sqrt(np.sum(P12**2, axis=0))

def rms_distance(P1, P2):
    ''' Return the quadratic mean of the distances between corresponding
    rows of P1 and P2. '''
    D = np.asarray(P2, dtype=float) - P1
    return np.sqrt(np.mean(np.sum(D**2, axis=-1)))

def eval_ders_trigo(u, k):
    ''' Evaluate all d derivatives up to and including the kth (0 <= d
    <= k) of the unit circle (cos(u), sin(u)).  The derivatives cycle
    with a period of 4. '''
    c, s = np.cos(u), np.sin(u)
    cycle = ((c, s), (-s, c), (-c, -s), (s, -c))
    ders = np.zeros((k + 1, 2))
    for i in range(k + 1):
        ders[i] = cycle[i % 4]
    return ders


# EXCEPTIONS


class UtilException(errors.PreconditionViolation):
    pass

class NullVector(UtilException):
    pass
