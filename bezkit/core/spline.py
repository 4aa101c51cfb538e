import copy
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Literal, Sequence

from .config import DEFAULT_CONFIG, KernelConfig
from .continuity import Continuity, enforce, translate
from .errors import InsufficientData, InvalidArgument, OutOfBounds
from .evaluate import Cubic, eval_segment, segment_controls
from .math import Bounds, Point, as_point, bounding_box
from .outline import Outline
from .tessellate import polyline

Handle = Literal["prev", "next"]


@dataclass
class Knot:
    """
    On-curve point with its two handles:
      - handle_prev: incoming control, shared with the segment ending here
      - handle_next: outgoing control, shared with the segment starting here
    """
    position: Point
    handle_prev: Point
    handle_next: Point
    continuity: Continuity = Continuity.SMOOTH

    @classmethod
    def at(cls, x: float, y: float, continuity: Continuity = Continuity.SMOOTH) -> "Knot":
        p = (float(x), float(y))
        return cls(position=p, handle_prev=p, handle_next=p, continuity=continuity)

    def points(self) -> tuple[Point, Point, Point]:
        return self.handle_prev, self.position, self.handle_next


@dataclass
class Spline(Outline):
    """
    Ordered knots; segment i is the cubic
    knot[i].position, knot[i].handle_next, knot[i+1].handle_prev, knot[i+1].position.

    ``get_knot`` hands out the stored Knot itself: any call that inserts or
    removes knots invalidates indices obtained before it.
    """
    knots: list[Knot] = field(default_factory=list)
    config: KernelConfig = field(default=DEFAULT_CONFIG, repr=False, compare=False)

    def __len__(self) -> int:
        return len(self.knots)

    def __bool__(self) -> bool:
        # an empty spline is still an Outline, same as an empty PointChain
        return True

    def __iter__(self) -> Iterator[Knot]:
        return iter(self.knots)

    def knot_count(self) -> int:
        return len(self.knots)

    def clear(self):
        self.knots = []

    def clone(self) -> "Spline":
        return Spline(knots=copy.deepcopy(self.knots), config=self.config)

    @classmethod
    def from_cubics(cls, cubics: Sequence[Cubic], continuity: Continuity = Continuity.CORNER) -> "Spline":
        """
        Chain (p0, p1, p2, p3) tuples into knots. Each cubic's p0 is assumed to
        coincide with the previous one's p3; the first and last knots keep their
        unused handle on the position.
        """
        spline = cls()
        if not cubics:
            return spline
        first = cubics[0][0]
        spline.knots.append(Knot(first, first, cubics[0][1], continuity))
        for i, (_, _, c2, p3) in enumerate(cubics):
            nxt = cubics[i + 1][1] if i + 1 < len(cubics) else p3
            spline.knots.append(Knot(p3, c2, nxt, continuity))
        return spline

    # ---- knot manipulation --------------------------------------------------
    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self.knots):
            raise OutOfBounds(index, len(self.knots), "knot")

    def add_knot(self, x: float, y: float) -> Knot:
        knot = Knot.at(x, y)
        self.knots.append(knot)
        return knot

    def get_knot(self, index: int) -> Knot:
        self._check_index(index)
        return self.knots[index]

    def remove_knot(self, index: int) -> Knot:
        self._check_index(index)
        return self.knots.pop(index)

    def set_continuity(self, index: int, continuity: Continuity | str) -> Knot:
        """
        Store ``continuity`` and rebuild handle_prev from handle_next so the
        handle invariant holds again. CORNER leaves both handles as they are.
        """
        knot = self.get_knot(index)
        knot.continuity = Continuity.coerce(continuity)
        knot.handle_prev, knot.handle_next = enforce(
            knot.position, knot.handle_prev, knot.handle_next, knot.continuity,
            pivot="next", eps=self.config.epsilon,
        )
        return knot

    def move_knot(self, index: int, dx: float, dy: float) -> Knot:
        knot = self.get_knot(index)
        knot.position, knot.handle_prev, knot.handle_next = translate(
            knot.position, knot.handle_prev, knot.handle_next, dx, dy
        )
        return knot

    def set_position(self, index: int, x: float, y: float) -> Knot:
        knot = self.get_knot(index)
        return self.move_knot(index, float(x) - knot.position[0], float(y) - knot.position[1])

    def move_handle(self, index: int, which: Handle, x: float, y: float) -> Knot:
        """
        Put one handle at (x, y). Under SMOOTH/SYMMETRIC the dragged handle
        drives the direction and the opposite one is re-derived.
        """
        knot = self.get_knot(index)
        p = as_point((x, y))
        if which == "prev":
            knot.handle_prev = p
        elif which == "next":
            knot.handle_next = p
        else:
            raise InvalidArgument(f"handle must be 'prev' or 'next', got {which!r}")
        knot.handle_prev, knot.handle_next = enforce(
            knot.position, knot.handle_prev, knot.handle_next, knot.continuity,
            pivot=which, eps=self.config.epsilon,
        )
        return knot

    # ---- evaluation ---------------------------------------------------------
    def segment_count(self) -> int:
        return max(0, len(self.knots) - 1)

    def segment(self, index: int) -> Cubic:
        return segment_controls(self, index)

    def eval_segment(self, index: int, t: float) -> Point:
        return eval_segment(self, index, t)

    def polyline(self, tolerance: float) -> list[Point]:
        return polyline(self, tolerance, max_depth=self.config.max_subdivide_depth)

    # ---- Outline ------------------------------------------------------------
    def start_point(self) -> Point | None:
        return self.knots[0].position if self.knots else None

    def segments(self) -> Iterable[tuple[Point, Point, Point]]:
        for k0, k1 in zip(self.knots, self.knots[1:]):
            yield k0.handle_next, k1.handle_prev, k1.position

    def bounds(self) -> Bounds:
        """Box around every knot position and handle (the control hull)."""
        box = bounding_box(p for knot in self.knots for p in knot.points())
        if box is None:
            raise InsufficientData("bounds needs at least one knot")
        return box
