import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence

from .config import DEFAULT_CONFIG, KernelConfig
from .continuity import Continuity, Pivot, enforce
from .errors import InsufficientData, OutOfBounds
from .evaluate import eval_n
from .fitting import fit_points, straight_cubic
from .math import Bounds, Point, add, as_point, bounding_box, dist, midpoint, scale, sub
from .outline import Outline
from .spline import Spline
from .tessellate import flatten, sample

logger = logging.getLogger(__name__)


class JunctureMode(Enum):
    """
    Per-point juncture state, resolved by PointChain.is_juncture at read time:
      - INHERIT: on-curve by construction order (even index)
      - JUNCTURE / CONTROL: explicit override
    The first and last point of an open chain are junctures whatever their mode.
    """
    INHERIT = "inherit"
    JUNCTURE = "juncture"
    CONTROL = "control"


class ClickResult(Enum):
    IGNORED = "ignored"
    PLACED = "placed"
    SELECTED = "selected"
    CLOSED = "closed"


@dataclass
class ChainPoint:
    position: Point
    mode: JunctureMode = JunctureMode.INHERIT
    continuity: Continuity = Continuity.CORNER


@dataclass(frozen=True)
class ChainStatus:
    chain_mode: bool
    point_count: int
    segment_count: int
    closed: bool
    selected: int | None
    selected_is_juncture: bool | None


class _SpanView(Sequence[Point]):
    """Read-only positions of a span, looked up through (possibly wrapped) indices."""
    __slots__ = ("_points", "_indices")

    def __init__(self, points: list[ChainPoint], indices: list[int]):
        self._points = points
        self._indices = indices

    def __len__(self) -> int:
        return len(self._indices)

    def __getitem__(self, i):
        if isinstance(i, slice):
            return [self._points[j].position for j in self._indices[i]]
        return self._points[self._indices[i]].position


@dataclass(eq=False)
class PointChain(Outline):
    """
    Flat editable chain: points alternate on-curve / off-curve in construction
    order, and spans run between consecutive junctures. A closed chain does not
    repeat point 0; its last point is the control that leads back to it.

    Open chains hold 1 or an odd number of points, closed chains an even number.
    """
    config: KernelConfig = field(default=DEFAULT_CONFIG, repr=False)
    default_juncture_on_insert: bool = True
    _points: list[ChainPoint] = field(default_factory=list, init=False)
    _closed: bool = field(default=False, init=False)
    _selected: int | None = field(default=None, init=False)

    # ---- read-only views ----------------------------------------------------
    @property
    def points(self) -> list[Point]:
        return [p.position for p in self._points]

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def chain_mode(self) -> bool:
        return self.default_juncture_on_insert

    def is_closed(self) -> bool:
        return self._closed

    def point_count(self) -> int:
        return len(self._points)

    def selected_point(self) -> int | None:
        return self._selected

    def point(self, index: int) -> ChainPoint | None:
        if 0 <= index < len(self._points):
            return self._points[index]
        return None

    def _valid(self, index: int) -> bool:
        return 0 <= index < len(self._points)

    def neighbor(self, index: int, step: int) -> int | None:
        """Index ``step`` away from ``index``, wrapping through point 0 when closed."""
        n = len(self._points)
        j = index + step
        if self._closed:
            return j % n if n else None
        return j if 0 <= j < n else None

    # ---- junctures ----------------------------------------------------------
    def is_forced_juncture(self, index: int) -> bool:
        n = len(self._points)
        return not self._closed and (index == 0 or index == n - 1)

    def is_juncture(self, index: int) -> bool:
        if not self._valid(index):
            return False
        if self.is_forced_juncture(index):
            return True
        mode = self._points[index].mode
        if mode is JunctureMode.INHERIT:
            return index % 2 == 0
        return mode is JunctureMode.JUNCTURE

    def junctures(self) -> list[int]:
        return [i for i in range(len(self._points)) if self.is_juncture(i)]

    def can_toggle(self, index: int) -> bool:
        return self._valid(index) and not self.is_forced_juncture(index)

    def toggle_juncture(self, index: int) -> bool:
        if not self.can_toggle(index):
            return False
        pt = self._points[index]
        pt.mode = JunctureMode.CONTROL if self.is_juncture(index) else JunctureMode.JUNCTURE
        self._enforce_around(index)
        return True

    def reset_juncture(self, index: int) -> bool:
        if not self._valid(index):
            return False
        self._points[index].mode = JunctureMode.INHERIT
        self._enforce_around(index)
        return True

    def set_global_chain_mode(self, on: bool):
        self.default_juncture_on_insert = bool(on)

    # ---- continuity ---------------------------------------------------------
    def _controls_around(self, index: int) -> tuple[int, int] | None:
        prev_i = self.neighbor(index, -1)
        next_i = self.neighbor(index, 1)
        if prev_i is None or next_i is None or prev_i == next_i:
            return None
        if self.is_juncture(prev_i) or self.is_juncture(next_i):
            return None
        return prev_i, next_i

    def _enforce_at(self, index: int, pivot: Pivot) -> None:
        if not self.is_juncture(index):
            return
        pt = self._points[index]
        around = self._controls_around(index)
        if around is None or pt.continuity is Continuity.CORNER:
            return
        prev_i, next_i = around
        hp, hn = enforce(
            pt.position, self._points[prev_i].position, self._points[next_i].position,
            pt.continuity, pivot=pivot, eps=self.config.epsilon,
        )
        self._points[prev_i].position = hp
        self._points[next_i].position = hn

    def _enforce_around(self, index: int) -> None:
        """Re-enforce ``index`` and the junctures on either side of it, which pivot on ``index``."""
        self._enforce_at(index, "next")
        for step, pivot in ((-1, "next"), (1, "prev")):
            j = self.neighbor(index, step)
            if j is not None and j != index:
                self._enforce_at(j, pivot)

    def set_continuity(self, index: int, continuity: Continuity | str) -> bool:
        if not self._valid(index):
            return False
        self._points[index].continuity = Continuity.coerce(continuity)
        self._enforce_at(index, "next")
        return True

    def continuity(self, index: int) -> Continuity | None:
        pt = self.point(index)
        return pt.continuity if pt is not None else None

    # ---- editing ------------------------------------------------------------
    def select(self, index: int | None) -> bool:
        if index is None or self._valid(index):
            self._selected = index
            return True
        return False

    def place(self, x: float, y: float) -> bool:
        """
        Append an endpoint at (x, y). After the first point, a control is
        inserted halfway between the previous last point and the new one and
        becomes the selection, so a drag right after shapes the curve.
        """
        if self._closed:
            return False
        new_pt = as_point((x, y))
        if not self._points:
            self._points.append(ChainPoint(new_pt))
            self._selected = 0
            return True
        prev = self._points[-1].position
        end_mode = JunctureMode.JUNCTURE if self.default_juncture_on_insert else JunctureMode.CONTROL
        self._points.append(ChainPoint(midpoint(prev, new_pt), JunctureMode.CONTROL))
        self._points.append(ChainPoint(new_pt, end_mode))
        self._selected = len(self._points) - 2
        # the old last point is interior now and may carry a smooth constraint
        self._enforce_at(len(self._points) - 3, "prev")
        return True

    def can_close(self) -> bool:
        return not self._closed and len(self._points) >= self.config.close_min_points

    def close(self) -> bool:
        if not self.can_close():
            return False
        closing = midpoint(self._points[-1].position, self._points[0].position)
        self._points.append(ChainPoint(closing, JunctureMode.CONTROL))
        self._closed = True
        self._selected = len(self._points) - 1
        self._enforce_at(len(self._points) - 2, "prev")
        self._enforce_at(0, "next")
        logger.debug("Closed chain with %d points", len(self._points))
        return True

    def hit_test(self, x: float, y: float, radius: float | None = None) -> int | None:
        """Index of the nearest point strictly within ``radius`` of (x, y)."""
        if radius is None:
            radius = self.config.hit_radius
        best = radius
        hit = None
        for i, p in enumerate(self._points):
            d = dist(p.position, (x, y))
            if d < best:
                best = d
                hit = i
        return hit

    def click(self, x: float, y: float, radius: float | None = None) -> ClickResult:
        """
        Pointer press: clicking point 0 of a closable chain closes it, clicking
        any other point selects it, clicking empty space places a new point.
        """
        hit = self.hit_test(x, y, radius)
        if hit == 0 and self.can_close():
            self.close()
            return ClickResult.CLOSED
        if hit is not None:
            self._selected = hit
            return ClickResult.SELECTED
        if self.place(x, y):
            return ClickResult.PLACED
        return ClickResult.IGNORED

    def _translate(self, index: int, dx: float, dy: float) -> None:
        pt = self._points[index]
        pt.position = add(pt.position, (dx, dy))

    def drag(self, index: int, dx: float, dy: float) -> bool:
        """
        Move a point by (dx, dy):
          - smooth/symmetric juncture: its neighbouring controls travel with it
          - control next to a smooth/symmetric juncture: the juncture's opposite
            control is re-derived from the dragged one
          - anything else moves alone
        """
        if not self._valid(index):
            return False
        pt = self._points[index]
        if self.is_juncture(index):
            self._translate(index, dx, dy)
            around = self._controls_around(index)
            if pt.continuity is not Continuity.CORNER and around is not None:
                for j in around:
                    self._translate(j, dx, dy)
            return True

        self._translate(index, dx, dy)
        self._enforce_around(index)
        return True

    def move_to(self, index: int, x: float, y: float) -> bool:
        if not self._valid(index):
            return False
        px, py = self._points[index].position
        return self.drag(index, float(x) - px, float(y) - py)

    def delete(self, index: int) -> bool:
        """
        Remove a point; the chain always ends up open. To keep the on/off-curve
        alternation, an on-curve point leaves with its outgoing control (its
        incoming one when it is last) and a control leaves with the on-curve
        point it leads into. Deleting the closing control only reopens the chain.
        """
        if not self._valid(index):
            return False
        n = len(self._points)
        if self._closed:
            self._closed = False
            self._points.pop()
            logger.debug("Reopened chain by deleting point %d", index)
            if index == n - 1:
                self._selected = None
                return True
            n -= 1

        if n == 1:
            del self._points[0]
            lo = 0
        elif index % 2 == 1 or index < n - 1:
            del self._points[index:index + 2]
            lo = index
        else:
            del self._points[index - 1:index + 1]
            lo = index - 1
        # junctures on either side of the gap got a new control: the one that
        # was already theirs stays put
        self._enforce_at(lo - 1, "prev")
        self._enforce_at(lo, "next")
        self._selected = None
        return True

    def clear(self):
        self._points = []
        self._closed = False
        self._selected = None

    # ---- spans --------------------------------------------------------------
    def spans(self) -> list[list[int]]:
        """
        Index runs from one juncture to the next, both included. Spans of a
        closed chain wrap through point 0 by index arithmetic, so the last one
        ends on the first span's starting juncture.
        """
        n = len(self._points)
        if n < 2:
            return []
        js = self.junctures()
        if not self._closed:
            return [list(range(a, b + 1)) for a, b in zip(js, js[1:])]
        if not js:
            js = [0]
        out = []
        for k, a in enumerate(js):
            b = js[(k + 1) % len(js)]
            if b <= a:
                b += n
            out.append([i % n for i in range(a, b + 1)])
        return out

    def span_points(self, span: list[int]) -> Sequence[Point]:
        return _SpanView(self._points, span)

    def segment_count(self) -> int:
        return len(self.spans())

    def eval_span(self, span_index: int, t: float) -> Point:
        spans = self.spans()
        if not 0 <= span_index < len(spans):
            raise OutOfBounds(span_index, len(spans), "span")
        return eval_n(self.span_points(spans[span_index]), t)

    def sample(self, steps: int | None = None) -> list[Point]:
        """Uniform samples of every span, ``steps`` per span (defaults to config.curve_steps)."""
        if steps is None:
            steps = self.config.curve_steps
        out: list[Point] = []
        for span in self.spans():
            pts = sample(self.span_points(span), steps)
            out.extend(pts if not out else pts[1:])
        return out

    def polyline(self, tolerance: float) -> list[Point]:
        spans = self.spans()
        if not spans:
            raise InsufficientData("polyline needs at least 2 chain points")
        out: list[Point] = []
        for span in spans:
            pts = flatten(self.span_points(span), tolerance, max_depth=self.config.max_subdivide_depth)
            out.extend(pts if not out else pts[1:])
        return out

    def status(self) -> ChainStatus:
        sel = self._selected
        return ChainStatus(
            chain_mode=self.default_juncture_on_insert,
            point_count=len(self._points),
            segment_count=self.segment_count(),
            closed=self._closed,
            selected=sel,
            selected_is_juncture=self.is_juncture(sel) if sel is not None else None,
        )

    # ---- Outline ------------------------------------------------------------
    def start_point(self) -> Point | None:
        if not self._points:
            return None
        spans = self.spans()
        if self._closed and spans:
            return self._points[spans[0][0]].position
        return self._points[0].position

    def _span_cubics(self, pts: Sequence[Point]) -> list[tuple[Point, Point, Point, Point]]:
        degree = len(pts) - 1
        if degree == 1:
            return [straight_cubic(pts[0], pts[1])]
        if degree == 2:
            p0, q, p2 = pts[0], pts[1], pts[2]
            return [(p0, add(p0, scale(sub(q, p0), 2.0 / 3.0)), add(p2, scale(sub(q, p2), 2.0 / 3.0)), p2)]
        if degree == 3:
            return [(pts[0], pts[1], pts[2], pts[3])]
        tol = self.config.span_fit_tolerance
        # uniform samples: a midpoint flatness test can miss S-shaped spans
        samples = sample(pts, self.config.curve_steps)
        return fit_points(samples, tol).control_lists()

    def segments(self) -> Iterable[tuple[Point, Point, Point]]:
        """
        Cubic pieces of every span: lines and quadratics are raised to cubics
        exactly, higher degrees are fitted within config.span_fit_tolerance.
        """
        for span in self.spans():
            for _, c1, c2, p3 in self._span_cubics(self.span_points(span)):
                yield c1, c2, p3

    def bounds(self) -> Bounds:
        box = bounding_box(p.position for p in self._points)
        if box is None:
            raise InsufficientData("bounds needs at least one point")
        return box

    def to_spline(self) -> Spline:
        """
        Explicit-handle copy of the chain. Juncture continuity carries over to
        the knots; a closed chain becomes an open spline ending on its start.
        """
        spline = Spline(config=self.config)
        spans = self.spans()
        if not spans:
            if self._points:
                spline.add_knot(*self._points[0].position)
            return spline
        pieces = [self._span_cubics(self.span_points(span)) for span in spans]
        spline.knots = Spline.from_cubics([c for piece in pieces for c in piece]).knots
        # interior knots that start a span take the continuity of the chain juncture;
        # the two end knots have a single handle and stay CORNER
        k = 0
        for span, piece in zip(spans, pieces):
            if k > 0:
                spline.knots[k].continuity = self._points[span[0]].continuity
            k += len(piece)
        return spline
