"""
geometry/edge.py

Full geometry pipeline for one edge: attachments, centerline, outline, label.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from PyQt6.QtCore import QPointF, QRectF, QSizeF
from PyQt6.QtGui import QPainterPath

from geometry.attachment import resolve_attachment
from geometry.curve import CubicCurve, EdgeParams, build_curve
from geometry.label import combine_label, place_label_panel
from geometry.stroke import ArrowStyle, outline_arrow


@dataclass(frozen=True)
class EdgeGeometry:
    """Derived geometry of one edge, expressed in the edge's frame.

    Attributes:
        curve: Shaft centerline (ends one arrowhead length short of the node).
        outline: Closed arrow outline.
        tip: Arrow tip, the end attachment point plus the end offset.
        label_rect: Label panel rect, or None for unlabelled edges.
        shape: Outline united with the label panel; the visible and
            interactive extent of the edge.
    """
    curve: CubicCurve
    outline: QPainterPath
    tip: QPointF
    label_rect: Optional[QRectF]
    shape: QPainterPath


def rect_key(r: QRectF) -> tuple:
    return (r.x(), r.y(), r.width(), r.height())


def geometry_key(
    start_bounds: QRectF,
    end_bounds: QRectF,
    params: EdgeParams,
    style: ArrowStyle,
    label_size: Optional[QSizeF] = None,
) -> tuple:
    """Everything ``compute_edge_geometry`` reads, as a hashable tuple."""
    size = None if label_size is None else (label_size.width(), label_size.height())
    return (rect_key(start_bounds), rect_key(end_bounds), params.key(), style.key(), size)


def compute_edge_geometry(
    start_bounds: QRectF,
    end_bounds: QRectF,
    params: EdgeParams,
    style: ArrowStyle,
    label_size: Optional[QSizeF] = None,
) -> EdgeGeometry:
    """Compute an edge's geometry from its endpoint node bounds.

    Args:
        start_bounds: Start node bounds in the edge's frame.
        end_bounds: End node bounds in the edge's frame.
        params: Sides, offsets and tangent distances.
        style: Line width and arrowhead dimensions.
        label_size: Size of the label panel, or None when there is no label.

    Raises:
        InvalidSide: If either side in ``params`` is not recognised.
    """
    start = resolve_attachment(start_bounds, params.start_side)
    end = resolve_attachment(end_bounds, params.end_side)

    curve = build_curve(start, end, params, style.head_length)
    tip = end.point + params.end_offset
    outline = outline_arrow(curve, style, end.tangent, tip)

    label_rect = place_label_panel(curve, label_size) if label_size is not None else None
    shape = combine_label(outline, label_rect)
    return EdgeGeometry(curve=curve, outline=outline, tip=tip, label_rect=label_rect, shape=shape)
