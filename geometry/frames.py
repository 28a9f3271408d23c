"""
geometry/frames.py

Re-expressing shapes from one coordinate frame in another.

Every participating object exposes the ``Placed`` capability: its bounds in
its own frame, the transform from that frame to its root, and the root itself.
Two frames can only be related when they share the same root.
"""

from __future__ import annotations

from typing import Protocol

from PyQt6.QtCore import QRectF
from PyQt6.QtGui import QPainterPath, QTransform

from geometry.errors import IncompatibleFrame


class Placed(Protocol):
    """Anything with a local frame nested inside a root frame."""

    def local_bounds(self) -> QRectF: ...

    def frame_to_root(self) -> QTransform: ...

    def frame_root(self) -> object: ...


def invert(transform: QTransform) -> QTransform:
    """Return the inverse of ``transform``.

    Raises:
        IncompatibleFrame: If the transform is singular.
    """
    inverse, invertible = transform.inverted()
    if not invertible:
        raise IncompatibleFrame("Frame transform is not invertible")
    return inverse


def reexpress(shape: QPainterPath, source_to_root: QTransform, target_to_root: QTransform) -> QPainterPath:
    """Map ``shape`` from the source frame into the target frame via the root."""
    in_root = source_to_root.map(shape)
    return invert(target_to_root).map(in_root)


def shape_in_frame(shape: QPainterPath, source: Placed, target: Placed) -> QPainterPath:
    """Re-express a shape given in ``source``'s frame in ``target``'s frame.

    Raises:
        IncompatibleFrame: If the two frames have different roots.
    """
    if source.frame_root() is not target.frame_root():
        raise IncompatibleFrame("Source and target frames share no common root")
    return reexpress(shape, source.frame_to_root(), target.frame_to_root())
