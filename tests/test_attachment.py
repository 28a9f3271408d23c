"""Tests for node sides and attachment points in geometry/attachment.py."""
from __future__ import annotations

import pytest
from PyQt6.QtCore import QPointF, QRectF

from geometry import GeometryError, InvalidSide, Side, resolve_attachment, side_tangent
from utils import point_tuple


BOUNDS = QRectF(10, 20, 100, 40)


# ─────────────────────────────────────────────────────────
# Side parsing
# ─────────────────────────────────────────────────────────


class TestSideParse:
    def test_accepts_enum(self):
        assert Side.parse(Side.LEFT) is Side.LEFT

    @pytest.mark.parametrize("name,expected", [
        ("top", Side.TOP),
        ("BOTTOM", Side.BOTTOM),
        (" Left ", Side.LEFT),
        ("right", Side.RIGHT),
    ])
    def test_accepts_names(self, name, expected):
        assert Side.parse(name) is expected

    @pytest.mark.parametrize("bad", ["diagonal", "", None, 3, "north"])
    def test_rejects_unknown(self, bad):
        with pytest.raises(InvalidSide) as exc_info:
            Side.parse(bad)
        assert exc_info.value.value == bad

    def test_invalid_side_is_value_error_and_geometry_error(self):
        err = InvalidSide("up")
        assert isinstance(err, ValueError)
        assert isinstance(err, GeometryError)
        assert "up" in str(err)


# ─────────────────────────────────────────────────────────
# resolve_attachment
# ─────────────────────────────────────────────────────────


class TestResolveAttachment:
    @pytest.mark.parametrize("side,point,tangent", [
        ("top", (60, 20), (0, -1)),
        ("bottom", (60, 60), (0, 1)),
        ("left", (10, 40), (-1, 0)),
        ("right", (110, 40), (1, 0)),
    ])
    def test_side_midpoints(self, side, point, tangent):
        att = resolve_attachment(BOUNDS, side)
        assert point_tuple(att.point) == point
        assert point_tuple(att.tangent) == tangent

    def test_point_lies_on_boundary(self):
        for side in Side:
            p = resolve_attachment(BOUNDS, side).point
            on_vertical = p.x() in (BOUNDS.left(), BOUNDS.right()) and BOUNDS.top() <= p.y() <= BOUNDS.bottom()
            on_horizontal = p.y() in (BOUNDS.top(), BOUNDS.bottom()) and BOUNDS.left() <= p.x() <= BOUNDS.right()
            assert on_vertical or on_horizontal

    def test_tangent_points_outward(self):
        center = BOUNDS.center()
        for side in Side:
            att = resolve_attachment(BOUNDS, side)
            outward = att.point - center
            dot = outward.x() * att.tangent.x() + outward.y() * att.tangent.y()
            assert dot > 0

    def test_tangents_are_unit(self):
        for side in Side:
            t = side_tangent(side)
            assert abs(t.x()) + abs(t.y()) == 1.0

    def test_zero_size_bounds(self):
        points = {point_tuple(resolve_attachment(QRectF(5, 5, 0, 0), s).point) for s in Side}
        assert points == {(5, 5)}

    def test_invalid_side_raises(self):
        with pytest.raises(InvalidSide):
            resolve_attachment(BOUNDS, "middle")

    def test_result_is_fresh_point(self):
        att = resolve_attachment(BOUNDS, Side.TOP)
        att.point.setX(0)
        assert resolve_attachment(BOUNDS, Side.TOP).point == QPointF(60, 20)
