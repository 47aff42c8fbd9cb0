from . import basis
from . import conics
from . import curve
from . import errors
from . import fit
from . import io
from . import knot
from . import nurbs
from . import surface
from . import util


tools = (curve.make_linear_curve,
         curve.unify_curves,

         surface.make_bilinear_surface,
         surface.make_loft_params,
         surface.make_lofted_surface,
         surface.make_loft_surface,
         surface.make_gordon_surface,

         conics.make_circle,
         conics.make_ellipse)

class _VirtualModule(object):
    def __init__(self, tools):
        for tool in tools:
            setattr(self, tool.__name__, tool)
tb = _VirtualModule(tools) # toolbox
