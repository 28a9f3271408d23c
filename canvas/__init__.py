"""
canvas package

PyQt6 graphics items, scene, and view for the flowchart.
"""

from canvas.mixins import AccessibleMixin, PlacedMixin
from canvas.items import (
    ControlDescriptor,
    ControlListItem,
    EdgeControlItem,
    FlowEdgeItem,
    FlowNodeItem,
    LabelPanelItem,
)
from canvas.scene import FlowchartScene, LayoutFailure, LayoutReport
from canvas.view import FlowchartView

__all__ = [
    "AccessibleMixin",
    "PlacedMixin",
    "ControlDescriptor",
    "ControlListItem",
    "EdgeControlItem",
    "FlowEdgeItem",
    "FlowNodeItem",
    "LabelPanelItem",
    "FlowchartScene",
    "LayoutFailure",
    "LayoutReport",
    "FlowchartView",
]
