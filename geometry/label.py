"""
geometry/label.py

Placement of an edge's label panel and its union with the arrow outline.
"""

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import QRectF, QSizeF
from PyQt6.QtGui import QPainterPath

from geometry.curve import CubicCurve


def place_label_panel(curve: CubicCurve, size: QSizeF) -> QRectF:
    """Return a panel rect of ``size`` centred on the curve's midpoint (t=0.5)."""
    rect = QRectF(0.0, 0.0, size.width(), size.height())
    rect.moveCenter(curve.point_at(0.5))
    return rect


def combine_label(outline: QPainterPath, panel: Optional[QRectF]) -> QPainterPath:
    """Union the arrow outline with the label panel.

    Without a panel the outline is returned as is. Disjoint inputs come back as
    separate contours; overlapping ones are merged by Qt's path boolean.
    """
    if panel is None:
        return outline
    panel_path = QPainterPath()
    panel_path.addRect(panel)
    return outline.united(panel_path)
