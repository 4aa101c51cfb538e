import math
from typing import Iterable, Literal, Sequence

Point = tuple[float, float]
Op = tuple[Literal["M", "C", "Z"], tuple]
Bounds = tuple[float, float, float, float]


def add(a: Point, b: Point) -> Point:
    return a[0] + b[0], a[1] + b[1]


def sub(a: Point, b: Point) -> Point:
    return a[0] - b[0], a[1] - b[1]


def scale(a: Point, s: float) -> Point:
    return a[0] * s, a[1] * s


def dot(a: Point, b: Point) -> float:
    return a[0] * b[0] + a[1] * b[1]


def cross(a: Point, b: Point) -> float:
    return a[0] * b[1] - a[1] * b[0]


def norm(a: Point) -> float:
    return math.hypot(a[0], a[1])


def dist2(a: Point, b: Point) -> float:
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return dx * dx + dy * dy


def dist(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def lerp(a: Point, b: Point, t: float) -> Point:
    u = 1.0 - t
    return u * a[0] + t * b[0], u * a[1] + t * b[1]


def midpoint(a: Point, b: Point) -> Point:
    return (a[0] + b[0]) * 0.5, (a[1] + b[1]) * 0.5


def normalize(a: Point, eps: float = 1e-12) -> Point:
    """Unit vector along ``a``, or ``(0.0, 0.0)`` when ``a`` is shorter than ``eps``."""
    n = norm(a)
    if n < eps:
        return 0.0, 0.0
    return a[0] / n, a[1] / n


def as_point(p) -> Point:
    return float(p[0]), float(p[1])


def project_point_to_segment(p: Point, a: Point, b: Point) -> tuple[Point, float]:
    ax, ay = a; bx, by = b; px, py = p
    vx, vy = bx - ax, by - ay
    denom = vx * vx + vy * vy
    if denom == 0.0:
        dx = px - ax; dy = py - ay
        return a, dx * dx + dy * dy
    t = ((px - ax) * vx + (py - ay) * vy) / denom
    if t < 0.0:
        qx, qy = ax, ay
    elif t > 1.0:
        qx, qy = bx, by
    else:
        qx, qy = ax + t * vx, ay + t * vy
    dx = px - qx; dy = py - qy
    return (qx, qy), dx * dx + dy * dy


def distance_to_polyline(p: Point, polyline: Sequence[Point]) -> float:
    """Shortest distance from ``p`` to any edge of ``polyline``."""
    if not polyline:
        return math.inf
    if len(polyline) == 1:
        return dist(p, polyline[0])
    best = math.inf
    for a, b in zip(polyline, polyline[1:]):
        _, d2 = project_point_to_segment(p, a, b)
        if d2 < best:
            best = d2
    return math.sqrt(best)


def bounding_box(points: Iterable[Point]) -> Bounds | None:
    """
    Axis-aligned (min_x, min_y, max_x, max_y) of the given points,
    or None if there are none.
    """
    it = iter(points)
    try:
        x, y = next(it)
    except StopIteration:
        return None
    lo_x = hi_x = x
    lo_y = hi_y = y
    for x, y in it:
        if x < lo_x: lo_x = x
        elif x > hi_x: hi_x = x
        if y < lo_y: lo_y = y
        elif y > hi_y: hi_y = y
    return lo_x, lo_y, hi_x, hi_y
