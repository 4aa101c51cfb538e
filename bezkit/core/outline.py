from abc import ABC, abstractmethod
from typing import Iterable, TYPE_CHECKING

from .evaluate import Cubic
from .math import Bounds, Op, Point

if TYPE_CHECKING:
    from PySide6 import QtGui


class Outline(ABC):
    """
    GUI-agnostic view of a chain of cubics, shared by Spline and PointChain.
    Subclasses provide the start point and the cubic pieces; drawing ops,
    export control lists and Qt paths are derived from those.
    """

    @property
    def closed(self) -> bool:
        return False

    @abstractmethod
    def start_point(self) -> Point | None:
        """First on-curve point, or None when empty."""

    @abstractmethod
    def segments(self) -> Iterable[tuple[Point, Point, Point]]:
        """
        Yield (c1, c2, p2) for each cubic segment, assuming a moveTo at start_point().
        """

    @abstractmethod
    def bounds(self) -> Bounds:
        """Axis-aligned box of every on-curve and off-curve point."""

    # ---- convenience built on top of `segments` ----------------------------
    def path_ops(self) -> list[Op]:
        """
        Convert to simple drawing ops:
          - ("M", (x,y))       moveTo
          - ("C", (c1,c2,p2))  cubicTo
          - ("Z", ())          closePath
        """
        start = self.start_point()
        if start is None:
            return []
        ops: list[Op] = [("M", start)]
        for c1, c2, p2 in self.segments():
            ops.append(("C", (c1, c2, p2)))
        if self.closed:
            ops.append(("Z", ()))
        return ops

    def control_lists(self) -> list[Cubic]:
        """Per-segment (p0, p1, p2, p3) lists, the shape an exporter writes out."""
        start = self.start_point()
        if start is None:
            return []
        out: list[Cubic] = []
        p0 = start
        for c1, c2, p2 in self.segments():
            out.append((p0, c1, c2, p2))
            p0 = p2
        return out

    def make_qpath(self) -> "QtGui.QPainterPath":
        from PySide6 import QtCore, QtGui

        qp = QtGui.QPainterPath()
        qpf = lambda t: QtCore.QPointF(t[0], t[1])

        for op, data in self.path_ops():
            if op == "M":
                qp.moveTo(qpf(data))
            elif op == "C":
                c1, c2, p2 = data
                qp.cubicTo(qpf(c1), qpf(c2), qpf(p2))
            elif op == "Z":
                qp.closeSubpath()
        return qp
