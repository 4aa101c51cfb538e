from .math import Point, Op, dist, dist2, lerp, project_point_to_segment
from .errors import SplineError, InvalidArgument, OutOfBounds, InsufficientData, Degenerate
from .config import KernelConfig, DEFAULT_CONFIG
from .continuity import Continuity, enforce
from .evaluate import eval_cubic, eval_n, eval_segment, split_cubic
from .tessellate import flatten, polyline
from .outline import Outline
from .spline import Knot, Spline
from .fitting import fit_points, smooth_joins
from .chain import PointChain, JunctureMode, ChainPoint, ChainStatus, ClickResult
