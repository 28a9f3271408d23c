"""Tests for cross-frame shape re-expression in geometry/frames.py."""
from __future__ import annotations

import pytest
from PyQt6.QtCore import QPointF, QRectF
from PyQt6.QtGui import QPainterPath, QTransform
from PyQt6.QtWidgets import QGraphicsRectItem, QGraphicsScene

from canvas.mixins import PlacedMixin
from geometry import IncompatibleFrame, invert, reexpress, shape_in_frame
from utils import points_close, rect_path


class PlacedRect(QGraphicsRectItem, PlacedMixin):
    pass


def _rects_close(a: QRectF, b: QRectF, tol: float = 1e-6) -> bool:
    return (points_close(a.topLeft(), b.topLeft(), tol) and points_close(a.bottomRight(), b.bottomRight(), tol))


# ─────────────────────────────────────────────────────────
# invert / reexpress
# ─────────────────────────────────────────────────────────


class TestInvert:
    def test_round_trip(self):
        t = QTransform().translate(10, 20).rotate(30).scale(2, 0.5)
        inv = invert(t)
        p = QPointF(7, -3)
        assert points_close(inv.map(t.map(p)), p)

    def test_singular_transform(self):
        with pytest.raises(IncompatibleFrame):
            invert(QTransform.fromScale(0, 1))


class TestReexpress:
    def test_identity_frames(self):
        path = rect_path(QRectF(0, 0, 10, 10))
        out = reexpress(path, QTransform(), QTransform())
        assert _rects_close(out.boundingRect(), path.boundingRect())

    def test_translated_frames(self):
        path = rect_path(QRectF(0, 0, 10, 10))
        out = reexpress(path, QTransform.fromTranslate(100, 0), QTransform.fromTranslate(0, 50))
        assert _rects_close(out.boundingRect(), QRectF(100, -50, 10, 10))

    def test_round_trip_through_root(self):
        path = rect_path(QRectF(1, 2, 3, 4))
        a = QTransform().translate(5, 5).rotate(45)
        b = QTransform().scale(3, 3).translate(-2, 7)
        back = reexpress(reexpress(path, a, b), b, a)
        assert _rects_close(back.boundingRect(), path.boundingRect(), 1e-4)


# ─────────────────────────────────────────────────────────
# shape_in_frame on real items
# ─────────────────────────────────────────────────────────


class TestShapeInFrame:
    def test_nested_frames(self, qapp):
        scene = QGraphicsScene()
        source = PlacedRect(0, 0, 10, 10)
        source.setPos(100, 0)
        scene.addItem(source)

        parent = PlacedRect(0, 0, 50, 50)
        parent.setPos(0, 50)
        parent.setRotation(90)
        scene.addItem(parent)
        target = PlacedRect(0, 0, 5, 5, parent)
        target.setPos(10, 0)
        target.setScale(2)

        shape = rect_path(QRectF(0, 0, 10, 10))
        local = shape_in_frame(shape, source, target)
        in_scene = target.sceneTransform().map(local).boundingRect()
        expected = source.sceneTransform().map(shape).boundingRect()
        assert _rects_close(in_scene, expected, 1e-4)

    def test_same_item(self, qapp):
        scene = QGraphicsScene()
        item = PlacedRect(0, 0, 10, 10)
        item.setPos(3, 4)
        scene.addItem(item)
        shape = rect_path(QRectF(0, 0, 10, 10))
        assert _rects_close(shape_in_frame(shape, item, item).boundingRect(), shape.boundingRect())

    def test_different_scenes(self, qapp):
        a_scene, b_scene = QGraphicsScene(), QGraphicsScene()
        a, b = PlacedRect(0, 0, 1, 1), PlacedRect(0, 0, 1, 1)
        a_scene.addItem(a)
        b_scene.addItem(b)
        with pytest.raises(IncompatibleFrame):
            shape_in_frame(QPainterPath(), a, b)

    def test_items_outside_any_scene(self, qapp):
        a, b = PlacedRect(0, 0, 1, 1), PlacedRect(0, 0, 1, 1)
        with pytest.raises(IncompatibleFrame):
            shape_in_frame(QPainterPath(), a, b)

    def test_unparented_hierarchy_shares_top_level_root(self, qapp):
        root = PlacedRect(0, 0, 10, 10)
        child = PlacedRect(0, 0, 1, 1, root)
        child.setPos(4, 4)
        shape = rect_path(QRectF(0, 0, 1, 1))
        out = shape_in_frame(shape, root, child)
        assert _rects_close(out.boundingRect(), QRectF(-4, -4, 1, 1))
