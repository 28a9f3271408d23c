"""
canvas/items.py

PyQt6 graphics items for flowchart nodes, edges, edge labels and the
keyboard-accessible edge controls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

from PyQt6.QtCore import Qt, QPointF, QRectF, QSizeF, pyqtSignal
from PyQt6.QtGui import QBrush, QColor, QFont, QPainter, QPainterPath, QPen
from PyQt6.QtWidgets import (
    QGraphicsItem,
    QGraphicsObject,
    QGraphicsPathItem,
    QGraphicsRectItem,
    QGraphicsTextItem,
    QStyle,
    QStyleOptionGraphicsItem,
)

from canvas.mixins import AccessibleMixin, PlacedMixin
from debug_trace import trace
from geometry import (
    ArrowStyle,
    EdgeGeometry,
    EdgeParams,
    GeometryCache,
    IncompatibleFrame,
    compute_edge_geometry,
    geometry_key,
    invert,
    shape_in_frame,
)
from models import ControlDirection, EdgeHandle, NodeHandle, ShapeKind
from settings import get_settings
from utils import hex_to_qcolor

if TYPE_CHECKING:
    from canvas.scene import FlowchartScene


# =============================================================================
# Cached canvas settings - initialized once at first access to avoid
# repeated settings lookups during paint operations.
# =============================================================================

class _CachedCanvasSettings:
    """Cache for canvas settings values to avoid repeated lookups during paint."""

    _instance = None

    def __init__(self):
        s = get_settings().settings
        self.arrow_style = ArrowStyle(
            line_width=s.edges.line_width,
            head_length=s.edges.arrow_head_length,
            head_width=s.edges.arrow_head_width,
            samples=s.edges.stroke_samples,
        )
        self.edge_color = hex_to_qcolor(s.edges.color, QColor(Qt.GlobalColor.black))
        self.node_fill = hex_to_qcolor(s.nodes.fill_color, QColor("#CCCCCC"))
        self.label_fill = hex_to_qcolor(s.labels.fill_color, QColor(255, 255, 255, 230))
        self.highlight_color = hex_to_qcolor(s.highlight.color, QColor("#4A90E2"))
        self.highlight_width = s.highlight.width
        self.nodes = s.nodes
        self.labels = s.labels

    @classmethod
    def get(cls) -> "_CachedCanvasSettings":
        """Get the singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Forget cached values so the next access re-reads settings."""
        cls._instance = None


def _make_text_item(text: str, font_size: int, line_wrap: float, parent: QGraphicsItem) -> QGraphicsTextItem:
    """Create a centred, non-editable text item wrapped only when wider than ``line_wrap``."""
    item = QGraphicsTextItem(parent)
    font = QFont()
    font.setPixelSize(int(font_size))
    item.setFont(font)
    item.setDefaultTextColor(QColor(Qt.GlobalColor.black))
    item.setTextInteractionFlags(Qt.TextInteractionFlag.NoTextInteraction)
    item.setPlainText(text)

    option = item.document().defaultTextOption()
    option.setAlignment(Qt.AlignmentFlag.AlignHCenter)
    item.document().setDefaultTextOption(option)

    item.setTextWidth(-1)
    if item.boundingRect().width() > line_wrap:
        item.setTextWidth(line_wrap)
    return item


def _highlight_pen() -> QPen:
    cached = _CachedCanvasSettings.get()
    pen = QPen(cached.highlight_color, cached.highlight_width)
    pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
    return pen


def _strip_selected(option: QStyleOptionGraphicsItem) -> QStyleOptionGraphicsItem:
    """Copy of ``option`` without the selected/focus states Qt would outline."""
    my_option = QStyleOptionGraphicsItem(option)
    my_option.state &= ~QStyle.StateFlag.State_Selected
    my_option.state &= ~QStyle.StateFlag.State_HasFocus
    return my_option


# =============================================================================
# Accessibility controls
# =============================================================================

@dataclass(frozen=True)
class ControlDescriptor:
    """What an accessibility or input layer needs to present one edge control."""
    display_name: str
    help_text: str
    direction: ControlDirection
    edge: EdgeHandle
    target: NodeHandle
    highlight: QPainterPath


def control_texts(direction: ControlDirection, label: Optional[str], other_text: str):
    """Return (display name, help text) for a control.

    Args:
        direction: Exiting (on the start node) or entering (on the end node).
        label: Edge label, if any.
        other_text: Text of the node at the other end of the edge.
    """
    display_name = f"Edge named {label}" if label else "Edge"
    named = f" named {label}" if label else ""
    if direction is ControlDirection.EXITING:
        help_text = f"Follow the edge{named}, moving to {other_text}"
    else:
        help_text = f"Retrace the edge{named}, moving back to {other_text}"
    return display_name, help_text


class EdgeControlItem(QGraphicsObject, PlacedMixin, AccessibleMixin):
    """
    Focusable, button-like control that stands for one end of an edge.

    The control is a child of the node that owns it, so it lives in that
    node's frame. Its highlight is the edge's shape re-expressed in this
    frame, and is drawn only while the control has focus. Enter, Return or
    Space moves focus to the node at the other end of the edge.
    """

    activated = pyqtSignal(str)  # target node handle

    def __init__(
        self,
        edge: EdgeHandle,
        direction: ControlDirection,
        target: NodeHandle,
        display_name: str,
        help_text: str,
        parent: Optional[QGraphicsItem] = None,
    ):
        QGraphicsObject.__init__(self, parent)
        AccessibleMixin.__init__(self, display_name, help_text)
        self.edge_handle = edge
        self.direction = direction
        self.target_handle = target
        self._highlight = QPainterPath()

        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIsFocusable, True)
        self.setAcceptedMouseButtons(Qt.MouseButton.NoButton)
        self.setToolTip(help_text)

    def highlight(self) -> QPainterPath:
        """Highlight shape in this control's own frame."""
        return self._highlight

    def set_highlight(self, path: QPainterPath) -> None:
        self.prepareGeometryChange()
        self._highlight = path
        self.update()

    def update_highlight(self) -> None:
        """Re-derive the highlight from the edge's current shape.

        Raises:
            IncompatibleFrame: If the edge and this control share no root frame.
        """
        scene = self.scene()
        if scene is None:
            raise IncompatibleFrame(f"Control for edge {self.edge_handle} is not in a scene")
        edge = scene.edge(self.edge_handle)
        if edge.geometry is None:
            self.set_highlight(QPainterPath())
            return
        self.set_highlight(shape_in_frame(edge.edge_shape(), edge, self))

    def activate(self) -> None:
        """Move focus to the node at the other end of the edge."""
        trace(f"Control {self.direction.value} {self.edge_handle} -> {self.target_handle}", "FOCUS")
        scene = self.scene()
        if scene is not None:
            scene.move_focus(scene.node(self.target_handle))
        self.activated.emit(self.target_handle)

    def descriptor(self) -> ControlDescriptor:
        return ControlDescriptor(
            display_name=self.accessible_name,
            help_text=self.help_text or "",
            direction=self.direction,
            edge=self.edge_handle,
            target=self.target_handle,
            highlight=QPainterPath(self._highlight),
        )

    def keyPressEvent(self, event):
        if event.key() in (Qt.Key.Key_Return, Qt.Key.Key_Enter, Qt.Key.Key_Space):
            self.activate()
            event.accept()
            return
        super().keyPressEvent(event)

    def focusInEvent(self, event):
        super().focusInEvent(event)
        self._refresh_group()

    def focusOutEvent(self, event):
        super().focusOutEvent(event)
        self._refresh_group()

    def _refresh_group(self):
        self.update()
        owner = self.parentItem().parentItem() if self.parentItem() is not None else None
        if owner is not None:
            owner.update()

    def boundingRect(self) -> QRectF:
        if self._highlight.isEmpty():
            return QRectF()
        margin = _CachedCanvasSettings.get().highlight_width
        return self._highlight.boundingRect().adjusted(-margin, -margin, margin, margin)

    def shape(self) -> QPainterPath:
        return self._highlight

    def paint(self, painter: QPainter, option, widget=None):
        if not self.hasFocus() or self._highlight.isEmpty():
            return
        painter.setPen(_highlight_pen())
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawPath(self._highlight)


class ControlListItem(QGraphicsItem):
    """Invisible container grouping a node's entering or exiting controls under a heading."""

    def __init__(self, heading: str, parent: Optional[QGraphicsItem] = None):
        super().__init__(parent)
        self.heading = heading
        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemHasNoContents, True)

    def controls(self) -> List[EdgeControlItem]:
        return [c for c in self.childItems() if isinstance(c, EdgeControlItem)]

    def boundingRect(self) -> QRectF:
        return QRectF()

    def paint(self, painter: QPainter, option, widget=None):
        pass


# =============================================================================
# Nodes
# =============================================================================

class FlowNodeItem(QGraphicsPathItem, PlacedMixin, AccessibleMixin):
    """
    Focusable flowchart node: a rounded rectangle or a diamond around its text.

    The text is centred on the node's local origin, so ``set_center`` is a
    plain ``setPos``. Edge controls hang below two ``ControlListItem``
    children. The node draws a group focus highlight while it or any of its
    controls has focus.
    """

    def __init__(self, handle: NodeHandle, text: str, help_text: Optional[str] = None,
                 shape: ShapeKind = ShapeKind.RECTANGLE):
        QGraphicsPathItem.__init__(self)
        AccessibleMixin.__init__(self, text, help_text)
        self.handle = handle
        self.text = text
        self.shape_kind = ShapeKind.parse(shape)
        self.incident_edges: List[EdgeHandle] = []

        cached = _CachedCanvasSettings.get()
        self._text_item = _make_text_item(text, cached.nodes.font_size, cached.nodes.line_wrap, self)
        br = self._text_item.boundingRect()
        self._text_item.setPos(-br.width() / 2, -br.height() / 2)
        self._text_rect = QRectF(-br.width() / 2, -br.height() / 2, br.width(), br.height())

        self.setPath(self._build_shape_path())
        self.setBrush(QBrush(cached.node_fill))
        self.setPen(QPen(Qt.PenStyle.NoPen))
        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIsFocusable, True)
        self.setToolTip(help_text or "")

        self._exiting_list: Optional[ControlListItem] = None
        self._entering_list: Optional[ControlListItem] = None

    def _build_shape_path(self) -> QPainterPath:
        cfg = _CachedCanvasSettings.get().nodes
        path = QPainterPath()
        if self.shape_kind is ShapeKind.DIAMOND:
            c = self._text_rect.center()
            path.moveTo(c.x() - cfg.diamond_half_width, c.y())
            path.lineTo(c.x(), c.y() - cfg.diamond_half_height)
            path.lineTo(c.x() + cfg.diamond_half_width, c.y())
            path.lineTo(c.x(), c.y() + cfg.diamond_half_height)
            path.closeSubpath()
        else:
            pad = cfg.padding
            path.addRoundedRect(
                self._text_rect.adjusted(-pad, -pad, pad, pad),
                cfg.corner_radius,
                cfg.corner_radius,
            )
        return path

    # -- Placed ---------------------------------------------------------------

    def local_bounds(self) -> QRectF:
        """Shape and text bounds; controls and highlights are excluded."""
        return self.path().boundingRect().united(self._text_rect)

    def set_center(self, center: QPointF) -> None:
        self.setPos(center)

    def center(self) -> QPointF:
        return self.root_bounds().center()

    # -- Edge registration ----------------------------------------------------

    def register_exiting_edge(self, edge: "FlowEdgeItem", end_node: "FlowNodeItem") -> EdgeControlItem:
        """Create the control that follows ``edge`` from this node to ``end_node``."""
        if self._exiting_list is None:
            self._exiting_list = ControlListItem(f"Edges exiting {self.text}", self)
        return self._add_control(self._exiting_list, edge, ControlDirection.EXITING, end_node)

    def register_entering_edge(self, edge: "FlowEdgeItem", start_node: "FlowNodeItem") -> EdgeControlItem:
        """Create the control that retraces ``edge`` from this node back to ``start_node``."""
        if self._entering_list is None:
            self._entering_list = ControlListItem(f"Edges entering {self.text}", self)
        return self._add_control(self._entering_list, edge, ControlDirection.ENTERING, start_node)

    def _add_control(self, container: ControlListItem, edge: "FlowEdgeItem",
                     direction: ControlDirection, other: "FlowNodeItem") -> EdgeControlItem:
        display_name, help_text = control_texts(direction, edge.label, other.text)
        control = EdgeControlItem(edge.handle, direction, other.handle, display_name, help_text, container)
        if edge.handle not in self.incident_edges:
            self.incident_edges.append(edge.handle)
        return control

    def exiting_controls(self) -> List[EdgeControlItem]:
        return self._exiting_list.controls() if self._exiting_list is not None else []

    def entering_controls(self) -> List[EdgeControlItem]:
        return self._entering_list.controls() if self._entering_list is not None else []

    def controls(self) -> List[EdgeControlItem]:
        return self.exiting_controls() + self.entering_controls()

    def list_headings(self) -> List[str]:
        return [lst.heading for lst in (self._exiting_list, self._entering_list) if lst is not None]

    # -- Focus ----------------------------------------------------------------

    def focus_highlight(self) -> QPainterPath:
        return self.path()

    def group_has_focus(self) -> bool:
        return self.hasFocus() or any(c.hasFocus() for c in self.controls())

    def focusInEvent(self, event):
        super().focusInEvent(event)
        self.update()

    def focusOutEvent(self, event):
        super().focusOutEvent(event)
        self.update()

    def boundingRect(self) -> QRectF:
        margin = _CachedCanvasSettings.get().highlight_width
        return super().boundingRect().adjusted(-margin, -margin, margin, margin)

    def paint(self, painter: QPainter, option, widget=None):
        super().paint(painter, _strip_selected(option), widget)
        if self.group_has_focus():
            painter.setPen(_highlight_pen())
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawPath(self.focus_highlight())


# =============================================================================
# Edges
# =============================================================================

class LabelPanelItem(QGraphicsRectItem):
    """Translucent panel holding an edge's label text."""

    def __init__(self, text: str, parent: Optional[QGraphicsItem] = None):
        super().__init__(parent)
        cached = _CachedCanvasSettings.get()
        self.text = text
        self._margin = cached.labels.margin
        self._text_item = _make_text_item(text, cached.labels.font_size, cached.labels.line_wrap, self)
        self.setBrush(QBrush(cached.label_fill))
        self.setPen(QPen(Qt.PenStyle.NoPen))

    def panel_size(self) -> QSizeF:
        """Text size plus the margin on every side."""
        br = self._text_item.boundingRect()
        return QSizeF(br.width() + 2 * self._margin, br.height() + 2 * self._margin)

    def set_panel_rect(self, rect: QRectF) -> None:
        self.setRect(rect)
        self._text_item.setPos(rect.left() + self._margin, rect.top() + self._margin)


class FlowEdgeItem(QGraphicsPathItem, PlacedMixin):
    """
    Directed edge drawn as one filled outline: stroked shaft plus arrowhead.

    The edge refers to its endpoints by handle and looks them up through the
    scene, so nodes and edges never own each other.
    """

    def __init__(self, handle: EdgeHandle, start: NodeHandle, end: NodeHandle,
                 params: EdgeParams, label: Optional[str] = None):
        QGraphicsPathItem.__init__(self)
        self.handle = handle
        self.start_handle = start
        self.end_handle = end
        self.params = params
        self.label = label
        self.geometry: Optional[EdgeGeometry] = None

        cached = _CachedCanvasSettings.get()
        self.setBrush(QBrush(cached.edge_color))
        self.setPen(QPen(Qt.PenStyle.NoPen))
        self.setZValue(1)

        self._label_panel: Optional[LabelPanelItem] = LabelPanelItem(label, self) if label is not None else None

    @property
    def label_panel(self) -> Optional[LabelPanelItem]:
        return self._label_panel

    def edge_shape(self) -> QPainterPath:
        """Combined outline and label shape, in this item's frame."""
        if self.geometry is None:
            return QPainterPath()
        return self.geometry.shape

    def _node_bounds(self, node: FlowNodeItem) -> QRectF:
        if node.frame_root() is not self.frame_root():
            raise IncompatibleFrame(f"Edge {self.handle} and node {node.handle} share no root frame")
        return invert(self.frame_to_root()).mapRect(node.root_bounds())

    def update_geometry(self, cache: Optional[GeometryCache] = None) -> EdgeGeometry:
        """Recompute (or fetch from ``cache``) and apply this edge's geometry.

        Raises:
            InvalidSide: If a side in ``params`` is not recognised.
            IncompatibleFrame: If an endpoint node is outside this edge's scene.
        """
        scene: "FlowchartScene" = self.scene()
        if scene is None:
            raise IncompatibleFrame(f"Edge {self.handle} is not in a scene")
        start_bounds = self._node_bounds(scene.node(self.start_handle))
        end_bounds = self._node_bounds(scene.node(self.end_handle))
        style = _CachedCanvasSettings.get().arrow_style
        label_size = self._label_panel.panel_size() if self._label_panel is not None else None

        def compute() -> EdgeGeometry:
            return compute_edge_geometry(start_bounds, end_bounds, self.params, style, label_size)

        if cache is not None:
            key = geometry_key(start_bounds, end_bounds, self.params, style, label_size)
            geometry = cache.get_or_compute(self.handle, key, compute)
        else:
            geometry = compute()
        self._apply_geometry(geometry)
        return geometry

    def _apply_geometry(self, geometry: EdgeGeometry) -> None:
        self.prepareGeometryChange()
        self.geometry = geometry
        self.setPath(geometry.outline)
        if self._label_panel is not None and geometry.label_rect is not None:
            self._label_panel.set_panel_rect(geometry.label_rect)

    def shape(self) -> QPainterPath:
        if self.geometry is None:
            return super().shape()
        return self.geometry.shape

    def boundingRect(self) -> QRectF:
        r = super().boundingRect()
        if self.geometry is not None:
            r = r.united(self.geometry.shape.boundingRect())
        return r
