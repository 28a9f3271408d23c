"""
graphs/placement.py

Grid placement policy: nodes sit at fractional (column, row) cells around the
horizontal centre of the viewport.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Tuple

from PyQt6.QtCore import QPointF

from debug_trace import trace
from models import LayoutContext, NodeHandle

if TYPE_CHECKING:
    from canvas.scene import FlowchartScene


class GridPlacement:
    """
    Places each node's centre at ``(center_x + col * column_spacing,
    top + row * row_spacing)``.

    Nodes without a cell are left where they are.
    """

    def __init__(
        self,
        cells: Dict[NodeHandle, Tuple[float, float]],
        column_spacing: float = 200.0,
        row_spacing: float = 120.0,
        top: float = 100.0,
    ):
        self.cells = dict(cells)
        self.column_spacing = column_spacing
        self.row_spacing = row_spacing
        self.top = top

    def cell_center(self, cell: Tuple[float, float], context: LayoutContext) -> QPointF:
        col, row = cell
        return QPointF(context.center_x + col * self.column_spacing, self.top + row * self.row_spacing)

    def __call__(self, scene: "FlowchartScene", context: LayoutContext) -> None:
        trace(f"Grid placement of {len(self.cells)} nodes, center_x={context.center_x:.1f}", "LAYOUT")
        for handle, cell in self.cells.items():
            scene.node(handle).set_center(self.cell_center(cell, context))
