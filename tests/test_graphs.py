"""Tests for bundled samples, JSON graph files and grid placement."""
from __future__ import annotations

import json

import pytest
from PyQt6.QtCore import QPointF, QRectF

from canvas import FlowchartScene
from graphs import GridPlacement, load_graph_file, load_sample, sample_names, save_graph_file
from models import LayoutContext, ShapeKind
from schemas import validate_graph_document
from utils import points_close

CONTEXT = LayoutContext(QRectF(0, 0, 1000, 900))


# ─────────────────────────────────────────────────────────
# Sample data
# ─────────────────────────────────────────────────────────


class TestSamples:
    def test_sample_listed(self):
        assert "does_it_work" in sample_names()

    def test_does_it_work_shape(self):
        spec = load_sample("does_it_work")
        assert len(spec.nodes) == 11
        assert len(spec.edges) == 15
        diamonds = [n.key for n in spec.nodes if n.shape is ShapeKind.DIAMOND]
        assert diamonds == ["doesItWork", "didYouMessWithIt", "willYouBeBlamed", "doesAnyoneElseKnow", "canYouBlame"]

    def test_sample_edge_parameters(self):
        spec = load_sample("does_it_work")
        by_pair = {(e.start, e.end): e for e in spec.edges}
        assert by_pair[("doesAnyoneElseKnow", "hideIt")].start_tangent_distance == 22
        assert by_pair[("hideIt", "noProblem")].end_offset == (-30.0, 0.0)
        assert by_pair[("dontMessWithIt", "noProblem")].end_tangent_distance == 200
        assert by_pair[("canYouBlame", "youreToast")].label == "No"

    def test_sample_validates_against_schema(self):
        ok, errors = validate_graph_document(load_sample("does_it_work").to_dict())
        assert ok, errors

    def test_unknown_sample(self):
        with pytest.raises(KeyError):
            load_sample("nope")


# ─────────────────────────────────────────────────────────
# JSON files
# ─────────────────────────────────────────────────────────


class TestGraphFiles:
    def test_save_and_load(self, tmp_path):
        path = tmp_path / "sample.json"
        spec = load_sample("does_it_work")
        save_graph_file(spec, path)
        assert load_graph_file(path) == spec

    def test_name_defaults_to_file_stem(self, tmp_path):
        path = tmp_path / "tiny.json"
        path.write_text(json.dumps({"nodes": [{"key": "a", "text": "A"}]}), encoding="utf-8")
        assert load_graph_file(path).name == "tiny"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_graph_file(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{nodes: ", encoding="utf-8")
        with pytest.raises(ValueError, match="invalid JSON"):
            load_graph_file(path)

    def test_schema_violation(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"nodes": [{"key": "a"}]}), encoding="utf-8")
        with pytest.raises(ValueError, match="text"):
            load_graph_file(path)

    def test_invalid_side_in_file(self, tmp_path):
        path = tmp_path / "bad.json"
        data = {
            "nodes": [{"key": "a", "text": "A"}, {"key": "b", "text": "B"}],
            "edges": [{"start": "a", "end": "b", "start_side": "north", "end_side": "top"}],
        }
        path.write_text(json.dumps(data), encoding="utf-8")
        with pytest.raises(ValueError, match="north"):
            load_graph_file(path)


# ─────────────────────────────────────────────────────────
# Placement and full layout
# ─────────────────────────────────────────────────────────


class TestGridPlacement:
    def test_cell_center(self):
        placement = GridPlacement({}, column_spacing=200, row_spacing=120, top=100)
        assert placement.cell_center((-1.5, 2.5), CONTEXT) == QPointF(200, 400)

    def test_sample_layout(self, qapp):
        scene = FlowchartScene()
        handles = scene.load_graph(load_sample("does_it_work"))
        report = scene.layout(CONTEXT)

        assert report.ok, [str(f.error) for f in report.failures]
        assert report.edges_updated == 15
        assert report.controls_updated == 30
        assert points_close(scene.node(handles["doesItWork"]).center(), QPointF(500, 100))
        assert points_close(scene.node(handles["noProblem"]).center(), QPointF(500, 760))
        assert points_close(scene.node(handles["dontMessWithIt"]).center(), QPointF(200, 220))

        no_problem = scene.node(handles["noProblem"])
        assert len(no_problem.entering_controls()) == 4
        assert no_problem.exiting_controls() == []
        scene.clear_graph()

    def test_relayout_follows_viewport(self, qapp):
        scene = FlowchartScene()
        handles = scene.load_graph(load_sample("does_it_work"))
        scene.layout(CONTEXT)
        node = scene.node(handles["youreToast"])
        scene.layout(LayoutContext(QRectF(0, 0, 600, 900)))
        assert points_close(node.center(), QPointF(300, 460))
        scene.clear_graph()
