"""Tests for the flowchart scene: arena, controls, layout and keyboard focus.

Runs on the offscreen Qt platform; see conftest.py.
"""
from __future__ import annotations

import pytest
from PyQt6.QtCore import QEvent, QPointF, QRectF, QSize, Qt
from PyQt6.QtGui import QKeyEvent, QResizeEvent

from canvas import EdgeControlItem, FlowchartScene, FlowchartView, FlowNodeItem
from geometry import EdgeParams, IncompatibleFrame, InvalidSide, Side
from models import ControlDirection, LayoutContext, ShapeKind
from utils import path_points, points_close

CONTEXT = LayoutContext(QRectF(0, 0, 1000, 800))


def _rects_close(a: QRectF, b: QRectF, tol: float = 1e-3) -> bool:
    return points_close(a.topLeft(), b.topLeft(), tol) and points_close(a.bottomRight(), b.bottomRight(), tol)


def _activate(qapp, scene):
    qapp.sendEvent(scene, QEvent(QEvent.Type.WindowActivate))


@pytest.fixture()
def scene(qapp):
    s = FlowchartScene()
    yield s
    s.clear_graph()


@pytest.fixture()
def pair(scene):
    """Two stacked nodes joined by a labelled edge."""
    a = scene.create_node("Start", "Where it begins")
    b = scene.create_node("Finish", shape=ShapeKind.DIAMOND)
    scene.node(a).set_center(QPointF(300, 100))
    scene.node(b).set_center(QPointF(300, 400))
    e = scene.create_edge(a, b, "bottom", "top", label="Yes")
    return a, b, e


# ─────────────────────────────────────────────────────────
# Arena and edge registration
# ─────────────────────────────────────────────────────────


class TestArena:
    def test_handles_are_unique(self, scene):
        handles = {scene.create_node(f"n{i}") for i in range(5)}
        assert len(handles) == 5
        assert all(isinstance(scene.node(h), FlowNodeItem) for h in handles)

    def test_unknown_handle(self, scene):
        with pytest.raises(KeyError):
            scene.node("nope")
        a = scene.create_node("A")
        with pytest.raises(KeyError):
            scene.create_edge(a, "nope", "bottom", "top")

    def test_invalid_side_rejected_at_creation(self, scene):
        a = scene.create_node("A")
        b = scene.create_node("B")
        with pytest.raises(InvalidSide):
            scene.create_edge(a, b, "sideways", "top")
        assert scene.edges() == []

    def test_default_tangent_distance_from_settings(self, scene, pair):
        _, _, e = pair
        params = scene.edge(e).params
        assert params.start_tangent_distance == 50.0
        assert params.end_tangent_distance == 50.0

    def test_tuple_offsets(self, scene):
        a = scene.create_node("A")
        b = scene.create_node("B")
        e = scene.create_edge(a, b, Side.BOTTOM, Side.TOP, end_offset=(-30, 0))
        assert scene.edge(e).params.end_offset == QPointF(-30, 0)

    def test_registration_creates_controls(self, scene, pair):
        a, b, e = pair
        start, end = scene.node(a), scene.node(b)
        assert [c.edge_handle for c in start.exiting_controls()] == [e]
        assert start.entering_controls() == []
        assert [c.edge_handle for c in end.entering_controls()] == [e]
        assert end.exiting_controls() == []
        assert start.list_headings() == ["Edges exiting Start"]
        assert end.list_headings() == ["Edges entering Finish"]
        assert start.incident_edges == [e]
        assert end.incident_edges == [e]

    def test_controls_live_in_node_frames(self, scene, pair):
        a, b, _ = pair
        control = scene.node(a).exiting_controls()[0]
        assert control.topLevelItem() is scene.node(a)
        assert control.parentItem().parentItem() is scene.node(a)

    def test_node_accessible_text(self, scene, pair):
        a, _, _ = pair
        node = scene.node(a)
        assert node.accessible_name == "Start"
        assert node.help_text == "Where it begins"
        assert node.toolTip() == "Where it begins"


# ─────────────────────────────────────────────────────────
# Control descriptors
# ─────────────────────────────────────────────────────────


class TestDescriptors:
    def test_labelled_edge(self, scene, pair):
        a, b, e = pair
        exiting = scene.node(a).exiting_controls()[0].descriptor()
        entering = scene.node(b).entering_controls()[0].descriptor()

        assert exiting.display_name == "Edge named Yes"
        assert exiting.help_text == "Follow the edge named Yes, moving to Finish"
        assert exiting.direction is ControlDirection.EXITING
        assert exiting.target == b
        assert exiting.edge == e

        assert entering.display_name == "Edge named Yes"
        assert entering.help_text == "Retrace the edge named Yes, moving back to Start"
        assert entering.direction is ControlDirection.ENTERING
        assert entering.target == a

    def test_unlabelled_edge(self, scene):
        a = scene.create_node("A")
        b = scene.create_node("B")
        scene.create_edge(a, b, "right", "left")
        d = scene.node(a).exiting_controls()[0].descriptor()
        assert d.display_name == "Edge"
        assert d.help_text == "Follow the edge, moving to B"
        assert scene.node(b).entering_controls()[0].descriptor().help_text == "Retrace the edge, moving back to A"

    def test_highlight_empty_before_layout(self, scene, pair):
        a, _, _ = pair
        assert scene.node(a).exiting_controls()[0].descriptor().highlight.isEmpty()


# ─────────────────────────────────────────────────────────
# Layout
# ─────────────────────────────────────────────────────────


class TestLayout:
    def test_layout_produces_geometry(self, scene, pair):
        a, b, e = pair
        report = scene.layout(CONTEXT)
        assert report.ok
        assert report.edges_updated == 1
        assert report.controls_updated == 2

        edge = scene.edge(e)
        end_bounds = scene.node(b).root_bounds()
        assert points_close(edge.geometry.tip, QPointF(end_bounds.center().x(), end_bounds.top()))
        start_bounds = scene.node(a).root_bounds()
        assert points_close(edge.geometry.curve.start, QPointF(start_bounds.center().x(), start_bounds.bottom()))

    def test_edge_shape_includes_label(self, scene, pair):
        _, _, e = pair
        scene.layout(CONTEXT)
        edge = scene.edge(e)
        assert edge.label_panel is not None
        assert edge.geometry.label_rect is not None
        assert edge.label_panel.rect() == edge.geometry.label_rect
        assert edge.shape().contains(edge.geometry.label_rect.center())

    def test_highlights_coincide_with_edge(self, scene, pair):
        a, b, e = pair
        scene.layout(CONTEXT)
        edge = scene.edge(e)
        expected = edge.sceneTransform().map(edge.edge_shape()).boundingRect()
        for control in scene.node(a).controls() + scene.node(b).controls():
            actual = control.sceneTransform().map(control.highlight()).boundingRect()
            assert _rects_close(actual, expected)

    def test_highlight_expressed_in_control_frame(self, scene, pair):
        a, _, e = pair
        scene.layout(CONTEXT)
        control = scene.node(a).exiting_controls()[0]
        local = control.highlight().boundingRect()
        root = scene.edge(e).edge_shape().boundingRect()
        # the start node sits at (300, 100), so local coordinates are shifted
        assert _rects_close(local.translated(300, 100), root)

    def test_layout_is_idempotent(self, scene, pair):
        _, _, e = pair
        scene.layout(CONTEXT)
        first = path_points(scene.edge(e).edge_shape())
        scene.layout(CONTEXT)
        second = path_points(scene.edge(e).edge_shape())
        assert len(first) == len(second)
        assert all(points_close(p, q) for p, q in zip(first, second))

    def test_layout_without_cache(self, qapp):
        s = FlowchartScene(use_cache=False)
        a = s.create_node("A")
        b = s.create_node("B")
        s.node(b).set_center(QPointF(0, 300))
        e = s.create_edge(a, b, "bottom", "top")
        assert s.cache is None
        s.layout(CONTEXT)
        first = s.edge(e).geometry
        s.layout(CONTEXT)
        assert s.edge(e).geometry is not first
        assert points_close(s.edge(e).geometry.tip, first.tip)

    def test_cache_hits_on_unchanged_layout(self, scene, pair):
        scene.layout(CONTEXT)
        misses = scene.cache.misses
        scene.layout(CONTEXT)
        assert scene.cache.misses == misses
        assert scene.cache.hits >= 1

    def test_moving_shared_node_updates_both_edges(self, scene):
        a = scene.create_node("A")
        b = scene.create_node("B")
        c = scene.create_node("C")
        scene.node(a).set_center(QPointF(100, 100))
        scene.node(b).set_center(QPointF(300, 300))
        scene.node(c).set_center(QPointF(500, 100))
        e1 = scene.create_edge(a, b, "bottom", "left")
        e2 = scene.create_edge(b, c, "right", "bottom")
        scene.layout(CONTEXT)
        tip1 = QPointF(scene.edge(e1).geometry.tip)
        start2 = QPointF(scene.edge(e2).geometry.curve.start)
        before = [QRectF(ctl.highlight().boundingRect()) for ctl in scene.node(b).controls()]

        scene.node(b).set_center(QPointF(300, 400))
        report = scene.layout(CONTEXT)
        assert report.ok
        assert points_close(scene.edge(e1).geometry.tip, tip1 + QPointF(0, 100))
        assert points_close(scene.edge(e2).geometry.curve.start, start2 + QPointF(0, 100))

        node_b = scene.node(b)
        assert [ctl.edge_handle for ctl in node_b.controls()] == [e2, e1]
        after = [ctl.highlight().boundingRect() for ctl in node_b.controls()]
        assert all(not _rects_close(x, y) for x, y in zip(before, after))
        for control in node_b.controls():
            edge = scene.edge(control.edge_handle)
            expected = edge.sceneTransform().map(edge.edge_shape()).boundingRect()
            actual = control.sceneTransform().map(control.highlight()).boundingRect()
            assert _rects_close(actual, expected)

    def test_placement_policy_runs_first(self, scene, pair):
        a, _, _ = pair
        seen = []

        def policy(s, context):
            seen.append(context)
            s.node(a).set_center(QPointF(context.center_x, 100))

        scene.set_placement(policy)
        scene.layout(CONTEXT)
        assert seen == [CONTEXT]
        assert points_close(scene.node(a).center(), QPointF(500, 100))
        scene.layout()
        assert seen == [CONTEXT, CONTEXT]


class TestFailureIsolation:
    def test_detached_node_fails_only_its_edges(self, scene):
        a = scene.create_node("A")
        b = scene.create_node("B")
        c = scene.create_node("C")
        scene.node(b).set_center(QPointF(0, 200))
        scene.node(c).set_center(QPointF(0, 400))
        e1 = scene.create_edge(a, b, "bottom", "top")
        e2 = scene.create_edge(b, c, "bottom", "top")

        scene.removeItem(scene.node(c))
        report = scene.layout(CONTEXT)

        assert report.failed_edges() == [e2]
        assert isinstance(report.failures[0].error, IncompatibleFrame)
        assert scene.edge(e1).geometry is not None
        assert scene.edge(e2).geometry is None
        assert report.edges_updated == 1
        assert report.controls_updated == 2

    def test_invalid_side_fails_only_that_edge(self, scene):
        a = scene.create_node("A")
        b = scene.create_node("B")
        scene.node(b).set_center(QPointF(0, 200))
        good = scene.create_edge(a, b, "bottom", "top")
        bad = scene.create_edge(b, a, "top", "bottom")
        scene.edge(bad).params = EdgeParams("diagonal", "bottom")

        report = scene.layout(CONTEXT)
        assert report.failed_edges() == [bad]
        assert isinstance(report.failures[0].error, InvalidSide)
        assert scene.edge(good).geometry is not None


# ─────────────────────────────────────────────────────────
# Focus
# ─────────────────────────────────────────────────────────


class TestFocus:
    def test_focus_order(self, scene, pair):
        a, b, _ = pair
        start, end = scene.node(a), scene.node(b)
        assert scene.focus_order() == [start, start.exiting_controls()[0], end, end.entering_controls()[0]]

    def test_focus_next_wraps(self, scene, pair):
        order = scene.focus_order()
        visited = [scene.focus_next() for _ in range(len(order) + 1)]
        assert visited[:len(order)] == order
        assert visited[-1] is order[0]

    def test_focus_previous_from_nothing_goes_to_last(self, scene, pair):
        order = scene.focus_order()
        assert scene.focus_next(forward=False) is order[-1]
        assert scene.focus_next(forward=False) is order[-2]

    def test_empty_scene(self, scene):
        assert scene.focus_next() is None

    def test_activation_moves_focus(self, scene, pair):
        a, b, _ = pair
        scene.layout(CONTEXT)
        exiting = scene.node(a).exiting_controls()[0]
        entering = scene.node(b).entering_controls()[0]
        targets = []
        exiting.activated.connect(targets.append)

        scene.move_focus(exiting)
        exiting.activate()
        assert scene.current_focus() is scene.node(b)
        assert targets == [b]

        scene.move_focus(entering)
        entering.activate()
        assert scene.current_focus() is scene.node(a)

    @pytest.mark.parametrize("key", [Qt.Key.Key_Return, Qt.Key.Key_Enter, Qt.Key.Key_Space])
    def test_activation_keys(self, scene, pair, key):
        a, b, _ = pair
        control = scene.node(a).exiting_controls()[0]
        event = QKeyEvent(QEvent.Type.KeyPress, key, Qt.KeyboardModifier.NoModifier)
        control.keyPressEvent(event)
        assert event.isAccepted()
        assert scene.current_focus() is scene.node(b)

    def test_group_highlight_follows_control_focus(self, qapp, scene, pair):
        a, b, _ = pair
        scene.layout(CONTEXT)
        _activate(qapp, scene)
        control = scene.node(a).exiting_controls()[0]
        scene.move_focus(control)
        assert control.hasFocus()
        assert scene.node(a).group_has_focus()
        assert not scene.node(b).group_has_focus()
        assert isinstance(scene.focusItem(), EdgeControlItem)

    def test_tab_key_traverses(self, qapp, scene, pair):
        _activate(qapp, scene)
        order = scene.focus_order()
        scene.move_focus(order[0])
        qapp.sendEvent(scene, QKeyEvent(QEvent.Type.KeyPress, Qt.Key.Key_Tab, Qt.KeyboardModifier.NoModifier))
        assert scene.current_focus() is order[1]
        qapp.sendEvent(scene, QKeyEvent(QEvent.Type.KeyPress, Qt.Key.Key_Backtab, Qt.KeyboardModifier.ShiftModifier))
        assert scene.current_focus() is order[0]


# ─────────────────────────────────────────────────────────
# View debounce
# ─────────────────────────────────────────────────────────


class TestView:
    def test_resizes_collapse_into_one_layout(self, qapp, scene, pair):
        view = FlowchartView(scene)
        for w in (640, 700, 800):
            view.resizeEvent(QResizeEvent(QSize(w, 600), QSize(w - 10, 600)))
        assert view.is_layout_pending()
        qapp.processEvents()
        qapp.processEvents()
        assert view.layout_count == 1
        assert not view.is_layout_pending()
        assert view.last_report.ok

    def test_viewport_context(self, qapp, scene):
        view = FlowchartView(scene)
        view.resize(400, 300)
        ctx = view.viewport_context()
        assert ctx.viewport.topLeft() == QPointF(0, 0)
        assert ctx.center_x == pytest.approx(ctx.viewport.width() / 2)
