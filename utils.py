"""
utils.py

Utility functions for the FlowFocus application.
"""

from __future__ import annotations

import math
from typing import List, Tuple

from PyQt6.QtCore import QPointF, QRectF
from PyQt6.QtGui import QColor, QPainterPath, QPolygonF


def hex_to_qcolor(s: str, fallback: QColor) -> QColor:
    """
    Parse a hex string to a QColor.

    Args:
        s: Hex string like "#RRGGBB" or "#RRGGBBAA"
        fallback: Color to return if parsing fails

    Returns:
        Parsed QColor or fallback
    """
    try:
        if not s:
            return QColor(fallback)
        s = s.strip()
        if s.startswith("#"):
            s = s[1:]
        if len(s) == 6:
            r = int(s[0:2], 16)
            g = int(s[2:4], 16)
            b = int(s[4:6], 16)
            return QColor(r, g, b)
        if len(s) == 8:
            r = int(s[0:2], 16)
            g = int(s[2:4], 16)
            b = int(s[4:6], 16)
            a = int(s[6:8], 16)
            return QColor(r, g, b, a)
    except ValueError:
        pass
    return QColor(fallback)


def point_tuple(p: QPointF, ndigits: int = 6) -> Tuple[float, float]:
    """Round a point to a plain tuple, for comparisons and debug output."""
    return (round(p.x(), ndigits), round(p.y(), ndigits))


def points_close(a: QPointF, b: QPointF, tol: float = 1e-6) -> bool:
    return math.hypot(a.x() - b.x(), a.y() - b.y()) <= tol


def path_points(path: QPainterPath) -> List[QPointF]:
    """Return the element coordinates of a path in order."""
    out = []
    for i in range(path.elementCount()):
        el = path.elementAt(i)
        out.append(QPointF(el.x, el.y))
    return out


def polygon_area(polygon: QPolygonF) -> float:
    """Absolute area of a polygon by the shoelace formula."""
    n = polygon.size()
    if n < 3:
        return 0.0
    acc = 0.0
    for i in range(n):
        p = polygon.at(i)
        q = polygon.at((i + 1) % n)
        acc += p.x() * q.y() - q.x() * p.y()
    return abs(acc) / 2.0


def path_area(path: QPainterPath) -> float:
    """Filled area of a path made of non-overlapping, hole-free contours.

    Curves are flattened by Qt. Each fill polygon is measured separately and
    the results summed.
    """
    return sum(polygon_area(poly) for poly in path.toFillPolygons())


def rect_path(rect: QRectF) -> QPainterPath:
    path = QPainterPath()
    path.addRect(rect)
    return path
