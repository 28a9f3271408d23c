"""
canvas/mixins.py

Mixin classes for graphics items providing frame placement and accessible text.
"""

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import QRectF
from PyQt6.QtGui import QTransform


class PlacedMixin:
    """
    Mixin that exposes a QGraphicsItem's coordinate frame to the geometry engine.

    Implements the ``geometry.frames.Placed`` capability: the root is the
    item's scene, or its top-level item while it is outside any scene.
    """

    def local_bounds(self) -> QRectF:
        """Bounds used for attachment, in the item's own frame."""
        return self.boundingRect()

    def frame_to_root(self) -> QTransform:
        return self.sceneTransform()

    def frame_root(self) -> object:
        scene = self.scene()
        if scene is not None:
            return scene
        return self.topLevelItem()

    def root_bounds(self) -> QRectF:
        """Local bounds mapped into the root frame."""
        return self.frame_to_root().mapRect(self.local_bounds())


class AccessibleMixin:
    """
    Mixin that stores the accessible name and help text of a focusable item.

    The help text doubles as the item's tooltip.
    """

    def __init__(self, accessible_name: str = "", help_text: Optional[str] = None):
        self.accessible_name = accessible_name
        self.help_text = help_text
