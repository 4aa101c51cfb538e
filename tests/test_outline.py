import pytest

from bezkit.core import Spline


def _arch() -> Spline:
    s = Spline()
    s.add_knot(0, 0)
    s.add_knot(10, 0)
    s.knots[0].handle_next = (0.0, 10.0)
    s.knots[1].handle_prev = (10.0, 10.0)
    return s


def test_empty_spline_has_no_ops() -> None:
    s = Spline()
    assert s.path_ops() == []
    assert s.control_lists() == []


def test_open_spline_path_ops() -> None:
    ops = _arch().path_ops()
    assert ops == [
        ("M", (0.0, 0.0)),
        ("C", ((0.0, 10.0), (10.0, 10.0), (10.0, 0.0))),
    ]


def test_control_lists_chain_end_to_start() -> None:
    s = _arch()
    s.add_knot(20, 0)
    lists = s.control_lists()
    assert len(lists) == 2
    assert lists[0][3] == lists[1][0] == (10.0, 0.0)


def test_make_qpath() -> None:
    pytest.importorskip("PySide6")
    qp = _arch().make_qpath()
    assert qp.elementCount() == 4
    rect = qp.controlPointRect()
    assert rect.width() == pytest.approx(10.0)
    assert rect.height() == pytest.approx(10.0)
