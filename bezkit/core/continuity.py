from enum import Enum
from typing import Literal

from .errors import InvalidArgument
from .math import Point, norm, sub

Pivot = Literal["prev", "next"]


class Continuity(Enum):
    SMOOTH = "smooth"        # colinear handles, independent lengths
    SYMMETRIC = "symmetric"  # colinear and equal lengths
    CORNER = "corner"        # independent handles

    @classmethod
    def coerce(cls, value: "Continuity | str") -> "Continuity":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidArgument(f"Unknown continuity {value!r}") from None


def enforce(
        position: Point,
        handle_prev: Point,
        handle_next: Point,
        continuity: Continuity,
        *,
        pivot: Pivot = "next",
        eps: float = 1e-12,
) -> tuple[Point, Point]:
    """
    Return (handle_prev, handle_next) repaired for ``continuity``.

    The ``pivot`` handle keeps its position and fixes the tangent direction;
    the other one is placed on the opposite side of ``position``. SMOOTH keeps
    the other handle's length, SYMMETRIC copies the pivot's length. If the pivot
    sits on ``position`` there is no direction, so the other handle collapses
    onto ``position`` too. CORNER returns both handles untouched.
    """
    if continuity is Continuity.CORNER:
        return handle_prev, handle_next
    if pivot not in ("prev", "next"):
        raise InvalidArgument(f"pivot must be 'prev' or 'next', got {pivot!r}")

    fixed, other = (handle_next, handle_prev) if pivot == "next" else (handle_prev, handle_next)
    px, py = position
    dx, dy = sub(fixed, position)
    mag_fixed = norm((dx, dy))

    if mag_fixed < eps:
        other = (px, py)
    else:
        dir_x = dx / mag_fixed
        dir_y = dy / mag_fixed
        if continuity is Continuity.SMOOTH:
            mag = norm(sub(other, position))
        else:
            mag = mag_fixed
        other = (px - mag * dir_x, py - mag * dir_y)

    if pivot == "next":
        return other, fixed
    return fixed, other


def translate(position: Point, handle_prev: Point, handle_next: Point, dx: float, dy: float) -> tuple[Point, Point, Point]:
    """Move a knot with both its handles; parallelism survives translation."""
    return (
        (position[0] + dx, position[1] + dy),
        (handle_prev[0] + dx, handle_prev[1] + dy),
        (handle_next[0] + dx, handle_next[1] + dy),
    )


def is_satisfied(
        position: Point,
        handle_prev: Point,
        handle_next: Point,
        continuity: Continuity,
        tol: float = 1e-9,
) -> bool:
    """Check the handle invariant for ``continuity`` within ``tol`` (relative to handle lengths)."""
    if continuity is Continuity.CORNER:
        return True
    a = sub(handle_prev, position)
    b = sub(handle_next, position)
    la, lb = norm(a), norm(b)
    if lb < tol:
        return la < tol
    if la < tol:
        return continuity is Continuity.SMOOTH
    scale_ = max(la, lb, 1.0)
    if abs(a[0] * b[1] - a[1] * b[0]) > tol * scale_ * scale_:
        return False
    if a[0] * b[0] + a[1] * b[1] > 0.0:
        return False
    if continuity is Continuity.SYMMETRIC and abs(la - lb) > tol * scale_:
        return False
    return True
