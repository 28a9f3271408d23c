"""
canvas/view.py

QGraphicsView that relays viewport resizes to the scene's layout pass.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, QRectF, QTimer
from PyQt6.QtGui import QPainter
from PyQt6.QtWidgets import QGraphicsView

from canvas.scene import FlowchartScene, LayoutReport
from debug_trace import trace
from models import LayoutContext


class FlowchartView(QGraphicsView):
    """
    Graphics view showing a FlowchartScene at 1:1 scale.

    Resize events only mark a relayout as pending; the actual ``layout()``
    runs once from a zero-delay timer, so a burst of resizes costs one pass.
    """

    def __init__(self, scene: FlowchartScene, parent=None):
        super().__init__(scene, parent)
        self.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        self.setRenderHint(QPainter.RenderHint.TextAntialiasing, True)
        self.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        self._layout_pending = False
        self.layout_count = 0
        self.last_report: LayoutReport = LayoutReport()

    def viewport_context(self) -> LayoutContext:
        """LayoutContext for the visible area; the scene origin is the viewport's top-left."""
        size = self.viewport().size()
        return LayoutContext(QRectF(0, 0, size.width(), size.height()))

    def schedule_layout(self) -> None:
        if self._layout_pending:
            return
        self._layout_pending = True
        QTimer.singleShot(0, self._run_layout)

    def is_layout_pending(self) -> bool:
        return self._layout_pending

    def _run_layout(self) -> None:
        self._layout_pending = False
        scene = self.scene()
        if scene is None:
            return
        context = self.viewport_context()
        self.last_report = scene.layout(context)
        self.setSceneRect(context.viewport.united(scene.itemsBoundingRect()))
        self.layout_count += 1
        trace(f"View layout #{self.layout_count} for {context.viewport.width():.0f}x{context.viewport.height():.0f}",
              "LAYOUT")

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.schedule_layout()
