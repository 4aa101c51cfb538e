"""
Least-squares fitting of point sequences to cubic splines (Schneider,
"An Algorithm for Automatically Fitting Digitized Curves", Graphics Gems 1990).

The fitter never gives up on a stroke: singular systems and degenerate
tangents fall back to straight segments, and a segment that stays over
tolerance is split at its worst point until the pieces fit.
"""
import logging
import math
from typing import Sequence

from .config import DEFAULT_CONFIG
from .continuity import Continuity
from .errors import Degenerate, InsufficientData, InvalidArgument
from .evaluate import Cubic, cubic_derivative, cubic_second_derivative, eval_cubic
from .math import Point, add, as_point, dist, dist2, dot, norm, normalize, scale, sub
from .spline import Spline

logger = logging.getLogger(__name__)


# ---- tangents ---------------------------------------------------------------
def _unit_or_raise(v: Point, eps: float) -> Point:
    u = normalize(v, eps)
    if u == (0.0, 0.0):
        raise Degenerate("cannot estimate a tangent from coincident points")
    return u


def left_tangent(pts: Sequence[Point], eps: float = 1e-12) -> Point:
    return _unit_or_raise(sub(pts[1], pts[0]), eps)


def right_tangent(pts: Sequence[Point], eps: float = 1e-12) -> Point:
    # points from the last sample back into the stroke
    return _unit_or_raise(sub(pts[-2], pts[-1]), eps)


def center_tangent(pts: Sequence[Point], idx: int, eps: float = 1e-12) -> Point:
    """Tangent at an interior sample, oriented from pts[idx + 1] towards pts[idx - 1]."""
    t = normalize(sub(pts[idx - 1], pts[idx + 1]), eps)
    if t == (0.0, 0.0):
        # neighbours coincide: the stroke doubles back, use the incoming direction
        t = _unit_or_raise(sub(pts[idx - 1], pts[idx]), eps)
    return t


# ---- parameterization -------------------------------------------------------
def chord_length_parameterize(pts: Sequence[Point]) -> list[float]:
    u = [0.0]
    total = 0.0
    for a, b in zip(pts, pts[1:]):
        total += dist(a, b)
        u.append(total)
    if total <= 0.0:
        return [i / max(1, len(pts) - 1) for i in range(len(pts))]
    return [ui / total for ui in u]


def _newton_step(bez: Cubic, p: Point, u: float) -> float:
    q = eval_cubic(*bez, u)
    q1 = cubic_derivative(*bez, u)
    q2 = cubic_second_derivative(*bez, u)
    diff = sub(q, p)
    numerator = dot(diff, q1)
    denominator = dot(q1, q1) + dot(diff, q2)
    if abs(denominator) < 1e-12:
        return u
    return min(1.0, max(0.0, u - numerator / denominator))


def reparameterize(pts: Sequence[Point], bez: Cubic, u: Sequence[float]) -> list[float]:
    """One Newton-Raphson pass moving every parameter towards the closest curve point."""
    last = len(u) - 1
    return [
        0.0 if i == 0 else 1.0 if i == last else _newton_step(bez, pts[i], u[i])
        for i in range(len(u))
    ]


# ---- single cubic -----------------------------------------------------------
def straight_cubic(p0: Point, p3: Point, t1: Point | None = None, t2: Point | None = None) -> Cubic:
    """
    Line from p0 to p3 as a cubic. Handles sit a third of the chord along the
    given tangents, or on the chord itself when no tangents are given.
    """
    seglen = dist(p0, p3)
    if t1 is None or t2 is None:
        return p0, add(p0, scale(sub(p3, p0), 1.0 / 3.0)), add(p0, scale(sub(p3, p0), 2.0 / 3.0)), p3
    alpha = seglen / 3.0
    return p0, add(p0, scale(t1, alpha)), add(p3, scale(t2, alpha)), p3


def solve_handles(pts: Sequence[Point], u: Sequence[float], t1: Point, t2: Point) -> Cubic:
    """
    Least-squares handle lengths along fixed end tangents ``t1`` (out of the
    first point) and ``t2`` (out of the last point, pointing back).
    Raises Degenerate when the 2x2 system is singular.
    """
    p0 = pts[0]
    p3 = pts[-1]

    c00 = c01 = c11 = 0.0
    x0 = x1 = 0.0
    for p, ui in zip(pts, u):
        v = 1.0 - ui
        b0 = v * v * v
        b1 = 3.0 * v * v * ui
        b2 = 3.0 * v * ui * ui
        b3 = ui * ui * ui
        a0 = scale(t1, b1)
        a1 = scale(t2, b2)
        tmp = sub(p, add(scale(p0, b0 + b1), scale(p3, b2 + b3)))
        c00 += dot(a0, a0)
        c01 += dot(a0, a1)
        c11 += dot(a1, a1)
        x0 += dot(a0, tmp)
        x1 += dot(a1, tmp)

    det = c00 * c11 - c01 * c01
    if abs(det) < 1e-12:
        raise Degenerate("singular least-squares system")
    alpha_l = (x0 * c11 - x1 * c01) / det
    alpha_r = (c00 * x1 - c01 * x0) / det

    seglen = dist(p0, p3)
    eps = 1e-6 * seglen
    if not (math.isfinite(alpha_l) and math.isfinite(alpha_r)) or alpha_l < eps or alpha_r < eps:
        raise Degenerate("handle lengths not usable")
    return p0, add(p0, scale(t1, alpha_l)), add(p3, scale(t2, alpha_r)), p3


def max_error(pts: Sequence[Point], bez: Cubic, u: Sequence[float]) -> tuple[int, float]:
    """(index, distance) of the sample farthest from the curve at its parameter."""
    split = len(pts) // 2
    worst = 0.0
    for i in range(1, len(pts) - 1):
        d2 = dist2(eval_cubic(*bez, u[i]), pts[i])
        if d2 >= worst:
            worst = d2
            split = i
    return split, math.sqrt(worst)


def _solve_or_line(pts: Sequence[Point], u: Sequence[float], t1: Point, t2: Point) -> Cubic:
    try:
        return solve_handles(pts, u, t1, t2)
    except Degenerate as exc:
        # Wu/Barsky heuristic
        logger.debug("Falling back to a straight segment: %s", exc)
        return straight_cubic(pts[0], pts[-1], t1, t2)


def fit_cubic(
        pts: Sequence[Point],
        t1: Point,
        t2: Point,
        tolerance: float,
        max_iterations: int | None = None,
) -> list[Cubic]:
    """
    Fit ``pts`` with as many cubics as needed so that each sample lies
    within ``tolerance`` of the curve at its assigned parameter.
    """
    if max_iterations is None:
        max_iterations = DEFAULT_CONFIG.fit_max_iterations
    n = len(pts)
    if n == 2:
        return [straight_cubic(pts[0], pts[1], t1, t2)]

    u = chord_length_parameterize(pts)
    bez = _solve_or_line(pts, u, t1, t2)
    split, err = max_error(pts, bez, u)
    if err <= tolerance:
        return [bez]

    for _ in range(max_iterations):
        u_prime = reparameterize(pts, bez, u)
        bez_prime = _solve_or_line(pts, u_prime, t1, t2)
        split_prime, err_prime = max_error(pts, bez_prime, u_prime)
        if err_prime >= err:
            break
        u, bez, split, err = u_prime, bez_prime, split_prime, err_prime
        if err <= tolerance:
            return [bez]

    split = max(1, min(n - 2, split))
    try:
        tc = center_tangent(pts, split)
    except Degenerate:
        tc = scale(t1, -1.0)
    logger.debug("Splitting %d points at %d (error %.6g > %.6g)", n, split, err, tolerance)
    left = fit_cubic(pts[:split + 1], t1, tc, tolerance, max_iterations)
    right = fit_cubic(pts[split:], scale(tc, -1.0), t2, tolerance, max_iterations)
    return left + right


def _dedupe(points: Sequence[Point], eps: float) -> list[Point]:
    out: list[Point] = []
    for p in points:
        p = as_point(p)
        if not out or dist(out[-1], p) > eps:
            out.append(p)
    return out


def fit_points(
        points: Sequence[Point],
        tolerance: float,
        *,
        max_iterations: int | None = None,
) -> Spline:
    """
    Turn an ordered point sequence (a freehand stroke, say) into a Spline that
    passes within ``tolerance`` of every point. Knots created at split points
    are CORNER; call Spline.set_continuity afterwards to smooth them.
    """
    if not tolerance > 0.0:
        raise InvalidArgument(f"tolerance must be positive, got {tolerance!r}")
    if points is None or len(points) < 2:
        raise InsufficientData("fitting needs at least 2 points")

    eps = DEFAULT_CONFIG.epsilon
    pts = _dedupe(points, eps)
    if len(pts) < 2:
        logger.debug("All %d points coincide, fitting a zero-length line", len(points))
        p = pts[0]
        return Spline.from_cubics([(p, p, p, p)])
    if len(pts) == 2:
        return Spline.from_cubics([straight_cubic(pts[0], pts[1])])

    try:
        t1 = left_tangent(pts, eps)
        t2 = right_tangent(pts, eps)
    except Degenerate:
        return Spline.from_cubics([straight_cubic(pts[0], pts[-1])])

    cubics = fit_cubic(pts, t1, t2, tolerance, max_iterations)
    logger.debug("Fitted %d points with %d segments", len(pts), len(cubics))
    return Spline.from_cubics(cubics, Continuity.CORNER)


def smooth_joins(spline: Spline, continuity: Continuity = Continuity.SMOOTH) -> Spline:
    """Apply ``continuity`` to every interior knot of a fitted spline."""
    for i in range(1, len(spline.knots) - 1):
        spline.set_continuity(i, continuity)
    return spline
