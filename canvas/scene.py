"""
canvas/scene.py

QGraphicsScene that owns the flowchart: an arena of nodes and edges addressed
by handle, the layout pass and keyboard focus traversal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple, Union

from PyQt6.QtCore import QPointF
from PyQt6.QtGui import QBrush, QColor
from PyQt6.QtWidgets import QGraphicsItem, QGraphicsScene

from canvas.items import EdgeControlItem, FlowEdgeItem, FlowNodeItem
from debug_trace import trace, trace_call
from geometry import EdgeParams, GeometryCache, GeometryError, Side
from graphs.placement import GridPlacement
from models import EdgeHandle, GraphSpec, LayoutContext, NodeHandle, ShapeKind
from settings import get_settings
from utils import hex_to_qcolor

log = logging.getLogger(__name__)

PlacementPolicy = Callable[["FlowchartScene", LayoutContext], None]
OffsetLike = Union[QPointF, Tuple[float, float], None]


def _to_point(value: OffsetLike) -> QPointF:
    if value is None:
        return QPointF()
    if isinstance(value, QPointF):
        return QPointF(value)
    x, y = value
    return QPointF(float(x), float(y))


@dataclass
class LayoutFailure:
    """One edge or control whose geometry could not be produced."""
    handle: str
    stage: str  # "edge" or "control"
    error: GeometryError


@dataclass
class LayoutReport:
    """Outcome of one layout pass."""
    edges_updated: int = 0
    controls_updated: int = 0
    failures: List[LayoutFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def failed_edges(self) -> List[str]:
        return [f.handle for f in self.failures if f.stage == "edge"]


class FlowchartScene(QGraphicsScene):
    """
    Scene holding a directed flowchart.

    Nodes and edges live in two handle-keyed tables; edges and controls only
    store handles, so nothing owns anything in a cycle. ``layout()`` is the
    single place where geometry is recomputed.
    """

    def __init__(self, parent=None, use_cache: Optional[bool] = None):
        super().__init__(parent)
        s = get_settings().settings
        self.setBackgroundBrush(QBrush(hex_to_qcolor(s.background_color, QColor("#444444"))))

        self._nodes: Dict[NodeHandle, FlowNodeItem] = {}
        self._edges: Dict[EdgeHandle, FlowEdgeItem] = {}
        self._next_node = 1
        self._next_edge = 1
        self._placement: Optional[PlacementPolicy] = None
        self._focus_target: Optional[QGraphicsItem] = None
        self.context: Optional[LayoutContext] = None

        if use_cache is None:
            use_cache = s.layout.cache_geometry
        self.cache: Optional[GeometryCache] = GeometryCache() if use_cache else None

    # -------------------------------------------------------------------------
    # Arena
    # -------------------------------------------------------------------------

    def create_node(self, text: str, help_text: Optional[str] = None,
                    shape: Union[ShapeKind, str] = ShapeKind.RECTANGLE) -> NodeHandle:
        """Create a node and add it to the scene.

        Returns:
            Handle of the new node.
        """
        handle = NodeHandle(f"n{self._next_node}")
        self._next_node += 1
        node = FlowNodeItem(handle, text, help_text, ShapeKind.parse(shape))
        self._nodes[handle] = node
        self.addItem(node)
        trace(f"Created node {handle} {text!r}", "ARENA")
        return handle

    def create_edge(
        self,
        start: NodeHandle,
        end: NodeHandle,
        start_side: Union[Side, str],
        end_side: Union[Side, str],
        label: Optional[str] = None,
        start_offset: OffsetLike = None,
        end_offset: OffsetLike = None,
        start_tangent_distance: Optional[float] = None,
        end_tangent_distance: Optional[float] = None,
    ) -> EdgeHandle:
        """Create a directed edge and register it with both endpoint nodes.

        Registration creates the exiting control under ``start`` and the
        entering control under ``end``.

        Raises:
            KeyError: If either node handle is unknown.
            InvalidSide: If a side is not one of top, bottom, left, right.
        """
        start_node = self.node(start)
        end_node = self.node(end)
        default_distance = get_settings().settings.edges.default_tangent_distance
        params = EdgeParams(
            start_side=Side.parse(start_side),
            end_side=Side.parse(end_side),
            start_offset=_to_point(start_offset),
            end_offset=_to_point(end_offset),
            start_tangent_distance=(
                default_distance if start_tangent_distance is None else float(start_tangent_distance)
            ),
            end_tangent_distance=(
                default_distance if end_tangent_distance is None else float(end_tangent_distance)
            ),
        )

        handle = EdgeHandle(f"e{self._next_edge}")
        self._next_edge += 1
        edge = FlowEdgeItem(handle, start, end, params, label)
        self._edges[handle] = edge
        self.addItem(edge)

        start_node.register_exiting_edge(edge, end_node)
        end_node.register_entering_edge(edge, start_node)
        trace(f"Created edge {handle} {start}->{end} ({params.start_side.value}->{params.end_side.value})", "ARENA")
        return handle

    def node(self, handle: NodeHandle) -> FlowNodeItem:
        try:
            return self._nodes[handle]
        except KeyError:
            raise KeyError(f"Unknown node handle {handle!r}") from None

    def edge(self, handle: EdgeHandle) -> FlowEdgeItem:
        try:
            return self._edges[handle]
        except KeyError:
            raise KeyError(f"Unknown edge handle {handle!r}") from None

    def nodes(self) -> List[FlowNodeItem]:
        return list(self._nodes.values())

    def edges(self) -> List[FlowEdgeItem]:
        return list(self._edges.values())

    def controls(self) -> List[EdgeControlItem]:
        return [c for n in self._nodes.values() for c in n.controls()]

    def clear_graph(self) -> None:
        """Remove every node and edge."""
        for item in list(self._edges.values()) + list(self._nodes.values()):
            if item.scene() is self:
                self.removeItem(item)
        self._edges.clear()
        self._nodes.clear()
        self._focus_target = None
        self._placement = None
        if self.cache is not None:
            self.cache.invalidate()

    def load_graph(self, spec: GraphSpec) -> Dict[str, NodeHandle]:
        """Build nodes and edges from declarative data and install grid placement.

        Returns:
            Mapping of node key to the handle issued for it.

        Raises:
            ValueError: If the graph data is inconsistent.
            InvalidSide: If an edge names an unknown side.
        """
        spec.validate()
        handles: Dict[str, NodeHandle] = {}
        for n in spec.nodes:
            handles[n.key] = self.create_node(n.text, n.help_text, n.shape)
        for e in spec.edges:
            self.create_edge(
                handles[e.start],
                handles[e.end],
                e.start_side,
                e.end_side,
                label=e.label,
                start_offset=e.start_offset,
                end_offset=e.end_offset,
                start_tangent_distance=e.start_tangent_distance,
                end_tangent_distance=e.end_tangent_distance,
            )
        column_spacing, row_spacing, top = spec.grid_parameters()
        cells = {handles[n.key]: n.cell for n in spec.nodes if n.cell is not None}
        self.set_placement(GridPlacement(cells, column_spacing, row_spacing, top))
        log.info("Loaded graph %r: %d nodes, %d edges", spec.name, len(spec.nodes), len(spec.edges))
        return handles

    # -------------------------------------------------------------------------
    # Layout
    # -------------------------------------------------------------------------

    def set_placement(self, policy: Optional[PlacementPolicy]) -> None:
        """Set the callable that positions nodes at the start of each layout pass."""
        self._placement = policy

    @trace_call("LAYOUT")
    def layout(self, context: Optional[LayoutContext] = None) -> LayoutReport:
        """Run placement, then recompute every edge and every control highlight.

        A failing edge or control is logged and recorded in the report; the
        rest of the pass continues.

        Args:
            context: Viewport for this pass. None reuses the previous context.
        """
        if context is not None:
            self.context = context
        report = LayoutReport()

        if self._placement is not None and self.context is not None:
            self._placement(self, self.context)

        for edge in self._edges.values():
            try:
                edge.update_geometry(self.cache)
                report.edges_updated += 1
            except GeometryError as e:
                log.warning("Skipping edge %s: %s", edge.handle, e)
                trace(f"Edge {edge.handle} failed: {type(e).__name__}: {e}", "ERROR")
                report.failures.append(LayoutFailure(edge.handle, "edge", e))

        failed = set(report.failed_edges())
        for control in self.controls():
            if control.edge_handle in failed:
                continue
            try:
                control.update_highlight()
                report.controls_updated += 1
            except GeometryError as e:
                log.warning("Skipping control for edge %s: %s", control.edge_handle, e)
                trace(f"Control {control.edge_handle} failed: {type(e).__name__}: {e}", "ERROR")
                report.failures.append(LayoutFailure(control.edge_handle, "control", e))

        trace(
            f"Layout done: {report.edges_updated} edges, {report.controls_updated} controls, "
            f"{len(report.failures)} failures",
            "LAYOUT",
        )
        return report

    # -------------------------------------------------------------------------
    # Focus
    # -------------------------------------------------------------------------

    def focus_order(self) -> List[QGraphicsItem]:
        """Each node, then its exiting controls, then its entering controls."""
        order: List[QGraphicsItem] = []
        for node in self._nodes.values():
            order.append(node)
            order.extend(node.exiting_controls())
            order.extend(node.entering_controls())
        return order

    def current_focus(self) -> Optional[QGraphicsItem]:
        """Focused item, or the last focus target while the scene is inactive."""
        return self.focusItem() or self._focus_target

    def move_focus(self, item: Optional[QGraphicsItem]) -> None:
        previous = self.current_focus()
        self._focus_target = item
        if item is None:
            self.clearFocus()
        else:
            item.setFocus()
        for touched in (previous, item):
            if touched is not None:
                touched.update()
                if touched.parentItem() is not None:
                    touched.topLevelItem().update()
        trace(f"Focus -> {getattr(item, 'handle', None) or getattr(item, 'accessible_name', None)}", "FOCUS")

    def focus_next(self, forward: bool = True) -> Optional[QGraphicsItem]:
        """Move focus one step along ``focus_order``, wrapping at either end."""
        order = self.focus_order()
        if not order:
            return None
        current = self.current_focus()
        if current in order:
            index = order.index(current) + (1 if forward else -1)
        else:
            index = 0 if forward else -1
        target = order[index % len(order)]
        self.move_focus(target)
        return target

    def focusNextPrevChild(self, next: bool) -> bool:
        """Tab / Shift+Tab traverse nodes and controls instead of Qt's widget chain."""
        return self.focus_next(next) is not None
