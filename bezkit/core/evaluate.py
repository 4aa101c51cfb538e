from typing import Sequence, TYPE_CHECKING

from .errors import InsufficientData, OutOfBounds
from .math import Point

if TYPE_CHECKING:
    from .spline import Spline

Cubic = tuple[Point, Point, Point, Point]


def eval_cubic(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    """
    De Casteljau evaluation of one cubic. Exact at the ends: t=0 gives p0, t=1 gives p3.
    """
    if t == 0.0:
        return p0
    if t == 1.0:
        return p3
    u = 1.0 - t

    q0x = u * p0[0] + t * p1[0]
    q0y = u * p0[1] + t * p1[1]
    q1x = u * p1[0] + t * p2[0]
    q1y = u * p1[1] + t * p2[1]
    q2x = u * p2[0] + t * p3[0]
    q2y = u * p2[1] + t * p3[1]

    r0x = u * q0x + t * q1x
    r0y = u * q0y + t * q1y
    r1x = u * q1x + t * q2x
    r1y = u * q1y + t * q2y

    return u * r0x + t * r1x, u * r0y + t * r1y


def eval_n(points: Sequence[Point], t: float) -> Point:
    """
    Evaluate a Bézier of any degree: n-1 levels of pairwise lerp over ``points``.

    ``points`` only needs ``len`` and integer indexing, so a closed chain can pass a
    wraparound view instead of a copied buffer.
    """
    n = len(points)
    if n == 0:
        raise InsufficientData("eval_n needs at least one point")
    if t == 0.0:
        return points[0]
    if t == 1.0:
        return points[n - 1]
    xs = [points[i][0] for i in range(n)]
    ys = [points[i][1] for i in range(n)]
    u = 1.0 - t
    for level in range(1, n):
        for i in range(n - level):
            xs[i] = u * xs[i] + t * xs[i + 1]
            ys[i] = u * ys[i] + t * ys[i + 1]
    return xs[0], ys[0]


def split_n(points: Sequence[Point], t: float = 0.5) -> tuple[list[Point], list[Point]]:
    """De Casteljau split of a control list at ``t``; both halves keep the degree."""
    row = [points[i] for i in range(len(points))]
    if not row:
        raise InsufficientData("split_n needs at least one point")
    u = 1.0 - t
    left = [row[0]]
    right = [row[-1]]
    while len(row) > 1:
        row = [(u * a[0] + t * b[0], u * a[1] + t * b[1]) for a, b in zip(row, row[1:])]
        left.append(row[0])
        right.append(row[-1])
    right.reverse()
    return left, right


def split_cubic(p0: Point, p1: Point, p2: Point, p3: Point, t: float = 0.5) -> tuple[Cubic, Cubic]:
    left, right = split_n((p0, p1, p2, p3), t)
    return (left[0], left[1], left[2], left[3]), (right[0], right[1], right[2], right[3])


def cubic_derivative(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    u = 1.0 - t
    a = 3.0 * u * u
    b = 6.0 * u * t
    c = 3.0 * t * t
    return (
        a * (p1[0] - p0[0]) + b * (p2[0] - p1[0]) + c * (p3[0] - p2[0]),
        a * (p1[1] - p0[1]) + b * (p2[1] - p1[1]) + c * (p3[1] - p2[1]),
    )


def cubic_second_derivative(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    u = 1.0 - t
    return (
        6.0 * (u * (p2[0] - 2.0 * p1[0] + p0[0]) + t * (p3[0] - 2.0 * p2[0] + p1[0])),
        6.0 * (u * (p2[1] - 2.0 * p1[1] + p0[1]) + t * (p3[1] - 2.0 * p2[1] + p1[1])),
    )


def segment_controls(spline: "Spline", segment: int) -> Cubic:
    """Control points of ``segment``: knot[i], its outgoing handle, knot[i+1]'s incoming handle, knot[i+1]."""
    n = len(spline.knots)
    if n < 2:
        raise InsufficientData(f"a spline needs 2 knots to have segments, it has {n}")
    if segment < 0 or segment >= n - 1:
        raise OutOfBounds(segment, n - 1, "segment")
    k0 = spline.knots[segment]
    k1 = spline.knots[segment + 1]
    return k0.position, k0.handle_next, k1.handle_prev, k1.position


def eval_segment(spline: "Spline", segment: int, t: float) -> Point:
    return eval_cubic(*segment_controls(spline, segment), t)
