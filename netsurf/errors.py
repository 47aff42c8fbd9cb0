''' The exception hierarchy shared by all modules.  Each module still
declares its own, more specific exceptions at its bottom; those derive
from one of the three kinds below.

'''


class NURBSException(Exception):
    pass

class PreconditionViolation(NURBSException, ValueError):
    ''' Malformed input: mismatched dimensions, empty curve sets,
    inconsistent grid sizes, degenerate axes, bad parameter ordering. '''

class NumericNonconvergence(NURBSException):
    ''' An iteration cap was reached (only raised on request). '''

class RepresentationInvariantViolation(NURBSException):
    ''' An object could not be built because it would be invalid. '''
