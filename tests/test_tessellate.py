import pytest

from bezkit.core import InsufficientData, InvalidArgument, Spline, flatten, polyline
from bezkit.core.math import distance_to_polyline
from bezkit.core.tessellate import sample


def _spline(*knots) -> Spline:
    s = Spline()
    for pos, h_prev, h_next in knots:
        k = s.add_knot(*pos)
        k.handle_prev = h_prev
        k.handle_next = h_next
    return s


def test_straight_segment_gives_two_points() -> None:
    s = _spline(
        ((0.0, 0.0), (0.0, 0.0), (1.0, 0.0)),
        ((3.0, 0.0), (2.0, 0.0), (3.0, 0.0)),
    )
    assert polyline(s, 0.01) == [(0.0, 0.0), (3.0, 0.0)]


def test_arch_is_subdivided() -> None:
    s = _spline(
        ((0.0, 0.0), (0.0, 0.0), (0.0, 1.0)),
        ((1.0, 0.0), (1.0, 1.0), (1.0, 0.0)),
    )
    pts = s.polyline(0.01)
    assert len(pts) > 2
    assert pts[0] == (0.0, 0.0)
    assert pts[-1] == (1.0, 0.0)


def test_polyline_stays_near_curve() -> None:
    s = _spline(
        ((0.0, 0.0), (0.0, 0.0), (0.0, 4.0)),
        ((4.0, 0.0), (4.0, 4.0), (4.0, -4.0)),
        ((8.0, 0.0), (8.0, -4.0), (8.0, 0.0)),
    )
    pts = s.polyline(0.001)
    assert pts[0] == (0.0, 0.0)
    assert (4.0, 0.0) in pts
    assert pts[-1] == (8.0, 0.0)
    for i in range(2):
        for step in range(21):
            q = s.eval_segment(i, step / 20)
            assert distance_to_polyline(q, pts) < 0.01


def test_polyline_rejects_bad_input() -> None:
    s = _spline(((0.0, 0.0), (0.0, 0.0), (0.0, 0.0)))
    with pytest.raises(InsufficientData):
        polyline(s, 0.1)
    s.add_knot(1, 1)
    with pytest.raises(InvalidArgument):
        polyline(s, 0.0)
    with pytest.raises(InvalidArgument):
        polyline(s, -1.0)
    assert len(s) == 2


def test_depth_cap_bounds_output() -> None:
    s = _spline(
        ((0.0, 0.0), (0.0, 0.0), (0.0, 100.0)),
        ((1.0, 0.0), (1.0, 100.0), (1.0, 0.0)),
    )
    pts = polyline(s, 1e-300, max_depth=3)
    assert len(pts) == 1 + 2 ** 3


def test_flatten_quadratic_span() -> None:
    pts = flatten([(0.0, 0.0), (1.0, 2.0), (2.0, 0.0)], 0.01)
    assert pts[0] == (0.0, 0.0)
    assert pts[-1] == (2.0, 0.0)
    assert len(pts) > 2


def test_sample_includes_both_ends() -> None:
    pts = sample([(0.0, 0.0), (2.0, 2.0)], 4)
    assert len(pts) == 5
    for i, p in enumerate(pts):
        assert p == pytest.approx((0.5 * i, 0.5 * i))
    with pytest.raises(InvalidArgument):
        sample([(0.0, 0.0), (2.0, 2.0)], 0)
