"""
geometry/curve.py

Cubic Bezier centerlines for flowchart edges.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Tuple

from PyQt6.QtCore import QPointF
from PyQt6.QtGui import QPainterPath

from geometry.attachment import Attachment, Side

DEFAULT_TANGENT_DISTANCE = 50.0

_EPS = 1e-9


@dataclass(frozen=True)
class CubicCurve:
    """Four control points of a cubic Bezier curve."""
    start: QPointF
    control1: QPointF
    control2: QPointF
    end: QPointF

    def point_at(self, t: float) -> QPointF:
        """Evaluate the curve at parameter ``t`` in [0, 1]."""
        mt = 1.0 - t
        a = mt * mt * mt
        b = 3.0 * mt * mt * t
        c = 3.0 * mt * t * t
        d = t * t * t
        return QPointF(
            a * self.start.x() + b * self.control1.x() + c * self.control2.x() + d * self.end.x(),
            a * self.start.y() + b * self.control1.y() + c * self.control2.y() + d * self.end.y(),
        )

    def derivative_at(self, t: float) -> QPointF:
        """First derivative with respect to ``t``."""
        mt = 1.0 - t
        a = 3.0 * mt * mt
        b = 6.0 * mt * t
        c = 3.0 * t * t
        return QPointF(
            a * (self.control1.x() - self.start.x())
            + b * (self.control2.x() - self.control1.x())
            + c * (self.end.x() - self.control2.x()),
            a * (self.control1.y() - self.start.y())
            + b * (self.control2.y() - self.control1.y())
            + c * (self.end.y() - self.control2.y()),
        )

    def direction_at(self, t: float) -> QPointF:
        """Unit direction of travel at ``t``.

        Where the derivative vanishes (a control point sitting on its
        endpoint) a finite difference is used, then the chord. A curve that
        collapses to a single point has no direction and yields (0, 0).
        """
        d = self.derivative_at(t)
        n = math.hypot(d.x(), d.y())
        if n < _EPS:
            h = 1e-4
            d = self.point_at(min(t + h, 1.0)) - self.point_at(max(t - h, 0.0))
            n = math.hypot(d.x(), d.y())
        if n < _EPS:
            d = self.end - self.start
            n = math.hypot(d.x(), d.y())
        if n < _EPS:
            return QPointF(0.0, 0.0)
        return QPointF(d.x() / n, d.y() / n)

    def to_path(self) -> QPainterPath:
        """Centerline as an open QPainterPath."""
        path = QPainterPath(self.start)
        path.cubicTo(self.control1, self.control2, self.end)
        return path

    def points(self) -> Tuple[QPointF, QPointF, QPointF, QPointF]:
        return (self.start, self.control1, self.control2, self.end)


@dataclass(frozen=True)
class EdgeParams:
    """Per-edge shape parameters.

    Offsets are added to the resolved attachment points; tangent distances pull
    the Bezier control points out along each side's outward tangent.
    """
    start_side: Side
    end_side: Side
    start_offset: QPointF = field(default_factory=QPointF)
    end_offset: QPointF = field(default_factory=QPointF)
    start_tangent_distance: float = DEFAULT_TANGENT_DISTANCE
    end_tangent_distance: float = DEFAULT_TANGENT_DISTANCE

    def key(self) -> tuple:
        """Hashable snapshot used for geometry caching."""
        return (
            Side.parse(self.start_side).value,
            Side.parse(self.end_side).value,
            (self.start_offset.x(), self.start_offset.y()),
            (self.end_offset.x(), self.end_offset.y()),
            float(self.start_tangent_distance),
            float(self.end_tangent_distance),
        )


def build_curve(start: Attachment, end: Attachment, params: EdgeParams, head_length: float) -> CubicCurve:
    """Build the shaft centerline between two attachments.

    The end tangent points away from the end node, so adding it once scaled by
    ``head_length`` stops the shaft one arrowhead length outside the node; the
    arrowhead spans the rest of the way to the boundary.
    """
    curve_start = start.point + params.start_offset
    curve_end = end.point + params.end_offset + end.tangent * head_length
    control1 = curve_start + start.tangent * params.start_tangent_distance
    control2 = curve_end + end.tangent * params.end_tangent_distance
    return CubicCurve(curve_start, control1, control2, curve_end)
