"""
geometry/stroke.py

Closed arrow outlines: the shaft stroked to a line width plus an arrowhead.

The outline is built directly rather than with QPainterPathStroker, because
the stroker returns both sides and the caps fused together and the arrowhead
wings must join the two boundaries at their ends.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from PyQt6.QtCore import QPointF
from PyQt6.QtGui import QPainterPath

from geometry.curve import CubicCurve


@dataclass(frozen=True)
class ArrowStyle:
    """Stroke and arrowhead dimensions in pixels.

    Defaults:
        line_width: 2.0
        head_length: 15.0
        head_width: 12.0
        samples: 32 (segments per boundary)
    """
    line_width: float = 2.0
    head_length: float = 15.0
    head_width: float = 12.0
    samples: int = 32

    def key(self) -> tuple:
        return (self.line_width, self.head_length, self.head_width, self.samples)


def perpendicular(v: QPointF) -> QPointF:
    """Rotate ``v`` by a quarter turn: (x, y) -> (y, -x)."""
    return QPointF(v.y(), -v.x())


def offset_polyline(curve: CubicCurve, distance: float, samples: int = 32) -> List[QPointF]:
    """Sample the curve and push each sample along its unit normal.

    The normal of travel direction ``u`` is ``(-u.y, u.x)``; a positive
    ``distance`` gives the left boundary, a negative one the right boundary.

    Args:
        curve: Centerline.
        distance: Signed offset.
        samples: Number of segments; the result has ``samples + 1`` points.

    Returns:
        Offset points ordered from the curve start to the curve end.
    """
    samples = max(1, int(samples))
    points: List[QPointF] = []
    for i in range(samples + 1):
        t = i / samples
        p = curve.point_at(t)
        u = curve.direction_at(t)
        points.append(QPointF(p.x() - u.y() * distance, p.y() + u.x() * distance))
    return points


def outline_arrow(curve: CubicCurve, style: ArrowStyle, end_tangent: QPointF, tip: QPointF) -> QPainterPath:
    """Build the single closed contour of a stroked, arrow-headed edge.

    Args:
        curve: Shaft centerline, already shortened by one arrowhead length.
        style: Line width and arrowhead dimensions.
        end_tangent: Outward tangent of the end node's side.
        tip: True end point (end attachment plus end offset). Placed exactly.

    Returns:
        A closed QPainterPath tracing left boundary, left wing, tip, right
        wing and the right boundary back to the start.
    """
    half = style.line_width / 2.0
    left = offset_polyline(curve, half, style.samples)
    right = offset_polyline(curve, -half, style.samples)

    wing = perpendicular(end_tangent) * (style.head_width / 2.0)
    wing_left = curve.end + wing
    wing_right = curve.end - wing

    path = QPainterPath(left[0])
    for p in left[1:]:
        path.lineTo(p)
    path.lineTo(wing_left)
    path.lineTo(tip)
    path.lineTo(wing_right)
    for p in reversed(right):
        path.lineTo(p)
    path.closeSubpath()
    return path
