from typing import Sequence, TYPE_CHECKING

from .config import DEFAULT_CONFIG
from .errors import InsufficientData, InvalidArgument
from .evaluate import eval_n, segment_controls, split_n
from .math import Point, dist, midpoint

if TYPE_CHECKING:
    from .spline import Spline


def _check_tolerance(tolerance: float) -> None:
    if not tolerance > 0.0:
        raise InvalidArgument(f"tolerance must be positive, got {tolerance!r}")


def _subdivide(ctrl: list[Point], tolerance: float, out: list[Point], depth: int, max_depth: int) -> None:
    # flatness: distance between the curve midpoint and the chord midpoint
    mid_curve = eval_n(ctrl, 0.5)
    mid_chord = midpoint(ctrl[0], ctrl[-1])
    if dist(mid_curve, mid_chord) <= tolerance or depth >= max_depth:
        out.append(ctrl[-1])
        return
    left, right = split_n(ctrl, 0.5)
    _subdivide(left, tolerance, out, depth + 1, max_depth)
    _subdivide(right, tolerance, out, depth + 1, max_depth)


def flatten(points: Sequence[Point], tolerance: float, *, max_depth: int | None = None) -> list[Point]:
    """
    Adaptive polyline of one Bézier span of any degree.
    Starts with the first control point and ends with the last.
    """
    _check_tolerance(tolerance)
    ctrl = [points[i] for i in range(len(points))]
    if len(ctrl) < 2:
        raise InsufficientData("a span needs at least 2 control points")
    if max_depth is None:
        max_depth = DEFAULT_CONFIG.max_subdivide_depth
    out = [ctrl[0]]
    _subdivide(ctrl, tolerance, out, 0, max_depth)
    return out


def polyline(spline: "Spline", tolerance: float, *, max_depth: int | None = None) -> list[Point]:
    """
    Tessellate every segment of ``spline`` so that no piece's midpoint strays
    more than ``tolerance`` from its chord. The result begins at the first
    knot and ends at the last; straight segments contribute only their end point.
    """
    _check_tolerance(tolerance)
    n = len(spline.knots)
    if n < 2:
        raise InsufficientData(f"polyline needs at least 2 knots, got {n}")
    if max_depth is None:
        max_depth = DEFAULT_CONFIG.max_subdivide_depth

    out: list[Point] = [spline.knots[0].position]
    for i in range(n - 1):
        _subdivide(list(segment_controls(spline, i)), tolerance, out, 0, max_depth)
    return out


def sample(points: Sequence[Point], steps: int | None = None) -> list[Point]:
    """
    Uniformly sample a span at ``steps`` equal parameter steps (steps + 1 points,
    both ends included).
    """
    if steps is None:
        steps = DEFAULT_CONFIG.curve_steps
    if steps < 1:
        raise InvalidArgument(f"steps must be at least 1, got {steps}")
    if len(points) == 0:
        raise InsufficientData("cannot sample an empty span")
    return [eval_n(points, step / steps) for step in range(steps + 1)]
