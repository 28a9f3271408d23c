"""
geometry/attachment.py

Node sides and the attachment points where edges meet a node's bounding box.
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Union

from PyQt6.QtCore import QPointF, QRectF

from geometry.errors import InvalidSide


class Side(str, Enum):
    """Side of a node's bounding box that an edge attaches to."""
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def parse(cls, value: Union["Side", str]) -> "Side":
        """Coerce a Side or a case-insensitive side name.

        Raises:
            InvalidSide: If ``value`` names none of the four sides.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidSide(value)


# Outward unit tangents in Qt's y-down coordinates
_TANGENTS = {
    Side.TOP: (0.0, -1.0),
    Side.BOTTOM: (0.0, 1.0),
    Side.LEFT: (-1.0, 0.0),
    Side.RIGHT: (1.0, 0.0),
}


class Attachment(NamedTuple):
    """Boundary point plus the outward unit tangent of its side."""
    point: QPointF
    tangent: QPointF


def side_tangent(side: Union[Side, str]) -> QPointF:
    """Return the fixed outward unit tangent for a side."""
    tx, ty = _TANGENTS[Side.parse(side)]
    return QPointF(tx, ty)


def resolve_attachment(bounds: QRectF, side: Union[Side, str]) -> Attachment:
    """Return the midpoint of one side of ``bounds`` and that side's tangent.

    Args:
        bounds: Axis-aligned node bounds in the frame the edge is drawn in.
        side: Side (or side name) to attach to.

    Returns:
        An ``Attachment`` for the requested side.

    Raises:
        InvalidSide: If ``side`` is not a recognised side.
    """
    side = Side.parse(side)
    if side is Side.TOP:
        point = QPointF(bounds.center().x(), bounds.top())
    elif side is Side.BOTTOM:
        point = QPointF(bounds.center().x(), bounds.bottom())
    elif side is Side.LEFT:
        point = QPointF(bounds.left(), bounds.center().y())
    else:
        point = QPointF(bounds.right(), bounds.center().y())
    return Attachment(point, side_tangent(side))
