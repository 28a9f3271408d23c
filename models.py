"""
models.py

Data models and constants for the FlowFocus flowchart viewer.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, NewType, Optional, Tuple

from PyQt6.QtCore import QRectF

from geometry.attachment import Side
from geometry.curve import DEFAULT_TANGENT_DISTANCE
from settings import get_settings


# ----------------------------
# Handles and enums
# ----------------------------

# Opaque ids issued by the scene arena
NodeHandle = NewType("NodeHandle", str)
EdgeHandle = NewType("EdgeHandle", str)


class ShapeKind(str, Enum):
    """Drawn shape of a node. Attachment math always uses the bounding box."""
    RECTANGLE = "rectangle"
    DIAMOND = "diamond"

    @classmethod
    def parse(cls, value: Any) -> "ShapeKind":
        """Coerce a ShapeKind or name; ``square`` is accepted for ``rectangle``."""
        if isinstance(value, cls):
            return value
        name = str(value or "").strip().lower()
        if name in SHAPE_ALIAS_MAP:
            name = SHAPE_ALIAS_MAP[name]
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown node shape: {value!r}") from None


SHAPE_ALIAS_MAP: Dict[str, str] = {
    "square": "rectangle",
    "rect": "rectangle",
    "box": "rectangle",
    "rhombus": "diamond",
    "decision": "diamond",
}


class ControlDirection(str, Enum):
    """Which end of an edge an accessibility control belongs to."""
    EXITING = "exiting"    # owned by the start node, moves focus to the end node
    ENTERING = "entering"  # owned by the end node, moves focus back to the start node


@dataclass(frozen=True)
class LayoutContext:
    """Inputs to one layout pass.

    Attributes:
        viewport: Visible scene area the placement policy lays nodes out in.
    """
    viewport: QRectF

    @property
    def center_x(self) -> float:
        return self.viewport.center().x()


# ----------------------------
# Declarative graph specs
# ----------------------------

def _pair(value: Any, default: Tuple[float, float] = (0.0, 0.0)) -> Tuple[float, float]:
    """Parse a 2-element list/tuple or {"x", "y"} dict into a float pair."""
    if value is None:
        return default
    if isinstance(value, dict):
        return (float(value.get("x", 0.0)), float(value.get("y", 0.0)))
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return (float(value[0]), float(value[1]))
    raise ValueError(f"Expected a pair of numbers, got {value!r}")


@dataclass
class NodeSpec:
    """A node as described in graph data.

    ``key`` is the name edges use to refer to the node; ``cell`` is an optional
    (column, row) position for grid placement. Fractional cells are allowed.
    """
    key: str
    text: str
    help_text: Optional[str] = None
    shape: ShapeKind = ShapeKind.RECTANGLE
    cell: Optional[Tuple[float, float]] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "NodeSpec":
        """Create a NodeSpec from a JSON record.

        Args:
            d: Record with ``key`` (or ``id``), ``text`` and optional
                ``help_text``, ``shape`` and ``cell``.

        Returns:
            The parsed NodeSpec.

        Raises:
            ValueError: If required fields are missing or malformed.
        """
        if not isinstance(d, dict):
            raise ValueError(f"Node record must be an object, got {type(d).__name__}")
        key = d.get("key", d.get("id"))
        if not key:
            raise ValueError("Node record is missing 'key'")
        text = d.get("text")
        if text is None:
            raise ValueError(f"Node {key!r} is missing 'text'")
        cell = d.get("cell")
        return cls(
            key=str(key),
            text=str(text),
            help_text=d.get("help_text"),
            shape=ShapeKind.parse(d.get("shape", ShapeKind.RECTANGLE)),
            cell=_pair(cell) if cell is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"key": self.key, "text": self.text, "shape": self.shape.value}
        if self.help_text is not None:
            d["help_text"] = self.help_text
        if self.cell is not None:
            d["cell"] = list(self.cell)
        return d


@dataclass
class EdgeSpec:
    """A directed edge as described in graph data."""
    start: str
    end: str
    start_side: Side
    end_side: Side
    label: Optional[str] = None
    start_offset: Tuple[float, float] = (0.0, 0.0)
    end_offset: Tuple[float, float] = (0.0, 0.0)
    start_tangent_distance: float = DEFAULT_TANGENT_DISTANCE
    end_tangent_distance: float = DEFAULT_TANGENT_DISTANCE

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "EdgeSpec":
        """Create an EdgeSpec from a JSON record.

        ``from``/``to`` are accepted as aliases of ``start``/``end``.

        Raises:
            ValueError: If endpoints are missing or values are malformed.
            InvalidSide: If a side is not one of top, bottom, left, right.
        """
        if not isinstance(d, dict):
            raise ValueError(f"Edge record must be an object, got {type(d).__name__}")
        start = d.get("start", d.get("from"))
        end = d.get("end", d.get("to"))
        if not start or not end:
            raise ValueError("Edge record needs both 'start' and 'end'")
        known = {f.name for f in fields(cls)} | {"from", "to"}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ValueError(f"Edge {start!r}->{end!r} has unknown fields: {', '.join(unknown)}")
        return cls(
            start=str(start),
            end=str(end),
            start_side=Side.parse(d.get("start_side")),
            end_side=Side.parse(d.get("end_side")),
            label=d.get("label"),
            start_offset=_pair(d.get("start_offset")),
            end_offset=_pair(d.get("end_offset")),
            start_tangent_distance=float(d.get("start_tangent_distance", DEFAULT_TANGENT_DISTANCE)),
            end_tangent_distance=float(d.get("end_tangent_distance", DEFAULT_TANGENT_DISTANCE)),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "start": self.start,
            "end": self.end,
            "start_side": self.start_side.value,
            "end_side": self.end_side.value,
        }
        if self.label is not None:
            d["label"] = self.label
        if self.start_offset != (0.0, 0.0):
            d["start_offset"] = list(self.start_offset)
        if self.end_offset != (0.0, 0.0):
            d["end_offset"] = list(self.end_offset)
        if self.start_tangent_distance != DEFAULT_TANGENT_DISTANCE:
            d["start_tangent_distance"] = self.start_tangent_distance
        if self.end_tangent_distance != DEFAULT_TANGENT_DISTANCE:
            d["end_tangent_distance"] = self.end_tangent_distance
        return d


@dataclass
class GraphSpec:
    """A complete flowchart: nodes, edges and grid placement parameters."""
    name: str
    nodes: List[NodeSpec] = field(default_factory=list)
    edges: List[EdgeSpec] = field(default_factory=list)
    column_spacing: Optional[float] = None  # None = settings layout.column_spacing
    row_spacing: Optional[float] = None     # None = settings layout.row_spacing
    top: Optional[float] = None             # None = settings layout.top

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GraphSpec":
        """Create a GraphSpec from parsed JSON.

        Raises:
            ValueError: On malformed records, duplicate node keys or edges that
                reference unknown nodes.
        """
        if not isinstance(d, dict):
            raise ValueError("Graph data must be a JSON object")
        nodes = [NodeSpec.from_dict(n) for n in d.get("nodes") or []]
        edges = [EdgeSpec.from_dict(e) for e in d.get("edges") or []]

        def opt_float(key: str) -> Optional[float]:
            v = d.get(key)
            return float(v) if v is not None else None

        spec = cls(
            name=str(d.get("name", "untitled")),
            nodes=nodes,
            edges=edges,
            column_spacing=opt_float("column_spacing"),
            row_spacing=opt_float("row_spacing"),
            top=opt_float("top"),
        )
        spec.validate()
        return spec

    def validate(self) -> None:
        keys = [n.key for n in self.nodes]
        if len(keys) != len(set(keys)):
            raise ValueError(f"Graph {self.name!r} has duplicate node keys")
        known = set(keys)
        for e in self.edges:
            for endpoint in (e.start, e.end):
                if endpoint not in known:
                    raise ValueError(f"Edge {e.start!r}->{e.end!r} references unknown node {endpoint!r}")

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"name": self.name}
        for key in ("column_spacing", "row_spacing", "top"):
            value = getattr(self, key)
            if value is not None:
                d[key] = value
        d["nodes"] = [n.to_dict() for n in self.nodes]
        d["edges"] = [e.to_dict() for e in self.edges]
        return d

    def grid_parameters(self) -> Tuple[float, float, float]:
        """Return (column_spacing, row_spacing, top), filling gaps from settings.

        Defaults if settings unavailable: 200.0, 120.0, 100.0
        """
        layout = get_settings().settings.layout
        return (
            self.column_spacing if self.column_spacing is not None else layout.column_spacing,
            self.row_spacing if self.row_spacing is not None else layout.row_spacing,
            self.top if self.top is not None else layout.top,
        )
