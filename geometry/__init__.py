"""
geometry package

Edge geometry engine: attachment points, Bezier centerlines, arrow outlines,
label union and cross-frame shape transforms.
"""

from geometry.errors import GeometryError, InvalidSide, IncompatibleFrame
from geometry.attachment import Attachment, Side, resolve_attachment, side_tangent
from geometry.curve import CubicCurve, EdgeParams, build_curve, DEFAULT_TANGENT_DISTANCE
from geometry.stroke import ArrowStyle, offset_polyline, outline_arrow, perpendicular
from geometry.label import combine_label, place_label_panel
from geometry.frames import Placed, invert, reexpress, shape_in_frame
from geometry.cache import GeometryCache
from geometry.edge import EdgeGeometry, compute_edge_geometry, geometry_key

__all__ = [
    "GeometryError",
    "InvalidSide",
    "IncompatibleFrame",
    "Attachment",
    "Side",
    "resolve_attachment",
    "side_tangent",
    "CubicCurve",
    "EdgeParams",
    "build_curve",
    "DEFAULT_TANGENT_DISTANCE",
    "ArrowStyle",
    "offset_polyline",
    "outline_arrow",
    "perpendicular",
    "combine_label",
    "place_label_panel",
    "Placed",
    "invert",
    "reexpress",
    "shape_in_frame",
    "GeometryCache",
    "EdgeGeometry",
    "compute_edge_geometry",
    "geometry_key",
]
