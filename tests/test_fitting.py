import math

import pytest

from bezkit.core import Continuity, InsufficientData, InvalidArgument, Spline, fit_points, smooth_joins
from bezkit.core.continuity import is_satisfied
from bezkit.core.fitting import chord_length_parameterize, fit_cubic, solve_handles, straight_cubic
from bezkit.core.errors import Degenerate
from bezkit.core.math import distance_to_polyline


def _source() -> Spline:
    s = Spline()
    for x, y in ((0.0, 0.0), (4.0, 3.0), (9.0, -1.0)):
        s.add_knot(x, y)
    s.knots[0].handle_next = (1.0, 3.0)
    s.knots[1].handle_prev = (2.5, 4.0)
    s.knots[1].handle_next = (5.5, 2.0)
    s.knots[2].handle_prev = (7.0, -3.0)
    return s


def _samples(s: Spline) -> list:
    # 25 per segment, the shared knot only once, both ends included
    pts = [s.eval_segment(0, i / 25) for i in range(25)]
    pts += [s.eval_segment(1, i / 24) for i in range(25)]
    return pts


def test_fit_two_segment_samples_within_tolerance() -> None:
    src = _source()
    samples = _samples(src)
    assert len(samples) == 50

    fitted = fit_points(samples, 0.01)
    assert fitted.knots[0].position == samples[0]
    assert fitted.knots[-1].position == samples[-1]
    dense = [fitted.eval_segment(i, s / 5000) for i in range(fitted.segment_count()) for s in range(5001)]
    for p in samples:
        assert distance_to_polyline(p, dense) <= 0.01


def test_fit_straight_line_is_one_segment() -> None:
    pts = [(float(x), 2.0 * x) for x in range(10)]
    fitted = fit_points(pts, 0.1)
    assert len(fitted) == 2
    for t in (0.25, 0.5, 0.75):
        x, y = fitted.eval_segment(0, t)
        assert y == pytest.approx(2.0 * x, abs=1e-6)


def test_fit_quarter_circle() -> None:
    pts = [(50.0 * math.cos(a), 50.0 * math.sin(a)) for a in (i * math.pi / 2 / 30 for i in range(31))]
    fitted = fit_points(pts, 0.5)
    for knot in fitted:
        assert math.hypot(*knot.position) == pytest.approx(50.0, abs=0.5)
    dense = fitted.polyline(0.01)
    for p in pts:
        assert distance_to_polyline(p, dense) <= 0.5 + 0.02


def test_fit_two_points() -> None:
    fitted = fit_points([(0, 0), (3, 3)], 1.0)
    assert len(fitted) == 2
    assert fitted.control_lists()[0] == ((0.0, 0.0), (1.0, 1.0), (2.0, 2.0), (3.0, 3.0))


def test_fit_duplicates_and_coincident_points() -> None:
    fitted = fit_points([(1, 1), (1, 1), (2, 2), (2, 2), (3, 3)], 0.1)
    assert fitted.knots[0].position == (1.0, 1.0)
    assert fitted.knots[-1].position == (3.0, 3.0)

    flat = fit_points([(4, 4)] * 6, 0.1)
    assert len(flat) == 2
    assert flat.knots[0].position == flat.knots[1].position == (4.0, 4.0)


def test_fit_rejects_bad_input() -> None:
    with pytest.raises(InsufficientData):
        fit_points([(0, 0)], 0.1)
    with pytest.raises(InsufficientData):
        fit_points([], 0.1)
    with pytest.raises(InvalidArgument):
        fit_points([(0, 0), (1, 1)], 0.0)


def test_split_knots_are_corner_until_smoothed() -> None:
    pts = [(float(x), 0.0) for x in range(6)] + [(5.0, float(y)) for y in range(1, 6)]
    fitted = fit_points(pts, 0.05)
    assert len(fitted) >= 3
    assert all(k.continuity is Continuity.CORNER for k in fitted)
    smooth_joins(fitted)
    for k in fitted.knots[1:-1]:
        assert k.continuity is Continuity.SMOOTH
        assert is_satisfied(k.position, k.handle_prev, k.handle_next, Continuity.SMOOTH)


def test_solve_handles_singular_system() -> None:
    pts = [(0.0, 0.0), (0.0, 0.0), (0.0, 0.0)]
    with pytest.raises(Degenerate):
        solve_handles(pts, [0.0, 0.5, 1.0], (1.0, 0.0), (-1.0, 0.0))


def test_fit_cubic_falls_back_to_line() -> None:
    # a zigzag whose least-squares handles come out negative
    pts = [(0.0, 0.0), (1.0, 0.0), (0.5, 0.0), (2.0, 0.0)]
    cubics = fit_cubic(pts, (1.0, 0.0), (-1.0, 0.0), 1e-3)
    assert cubics[0][0] == (0.0, 0.0)
    assert cubics[-1][3] == (2.0, 0.0)
    for a, b in zip(cubics, cubics[1:]):
        assert a[3] == b[0]


def test_chord_length_parameterize() -> None:
    u = chord_length_parameterize([(0.0, 0.0), (1.0, 0.0), (3.0, 0.0), (4.0, 0.0)])
    assert u == pytest.approx([0.0, 0.25, 0.75, 1.0])


def test_straight_cubic_thirds() -> None:
    assert straight_cubic((0.0, 0.0), (3.0, 0.0)) == ((0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (3.0, 0.0))
