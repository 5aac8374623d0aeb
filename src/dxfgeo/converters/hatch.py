from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from ..entity import Entity
from ..errors import ErrorReporter
from ..geometry import create_polygon_geometry
from .base import GeometryConverter
from .circle import arc_points, ellipse_points

Coords = list[tuple[float, float]]


def _sweep(start: float, end: float, counterclockwise: bool) -> float:
    if counterclockwise:
        if end >= start:
            end -= 2.0 * math.pi
    elif end <= start:
        end += 2.0 * math.pi
    return end


class HatchGeometryConverter(GeometryConverter):
    """HATCH boundary paths as rings of a single Polygon."""

    entity_types = ("HATCH",)

    ARC_SEGMENTS = 32
    ELLIPSE_SEGMENTS = 32

    def convert(self, entity: Entity, reporter: ErrorReporter) -> dict[str, Any] | None:
        info = entity.info()
        if not self.validate_optional_number(entity, "elevation", reporter, info, "elevation"):
            return None

        paths = self.validate_sequence(entity.get("paths"), reporter, info, "hatch boundary paths")
        if paths is None:
            return None

        rings: list[Coords] = []
        for path_index, path in enumerate(paths):
            if not isinstance(path, Mapping):
                reporter.add_warning(
                    "Invalid hatch boundary path", "INVALID_BOUNDARY_PATH", {**info, "path": path_index}
                )
                continue
            coordinates: Coords = []
            for edge in path.get("edges") or []:
                points = self._edge_points(edge, reporter, info)
                if points is None:
                    return None
                coordinates.extend(points)

            if len(coordinates) < 3:
                reporter.add_warning(
                    "Invalid hatch boundary path: insufficient points",
                    "INVALID_BOUNDARY_PATH",
                    {**info, "path": path_index, "point_count": len(coordinates)},
                )
                continue

            if path.get("closed", True):
                coordinates.append(coordinates[0])
            elif coordinates[0] != coordinates[-1]:
                reporter.add_warning(
                    "Open hatch boundary path closed to form a ring",
                    "BOUNDARY_PATH_FORCED_CLOSED",
                    {**info, "path": path_index},
                )
                coordinates.append(coordinates[0])

            if len(coordinates) < 4:
                reporter.add_warning(
                    "Invalid hatch boundary path: degenerate ring",
                    "INVALID_BOUNDARY_PATH",
                    {**info, "path": path_index, "point_count": len(coordinates)},
                )
                continue
            rings.append(coordinates)

        if not rings:
            reporter.add_warning("No valid boundary paths in hatch", "NO_VALID_PATHS", info)
            return None
        return create_polygon_geometry(rings)

    def _edge_points(self, edge: Any, reporter: ErrorReporter, info: dict[str, Any]) -> Coords | None:
        edge_type = edge.get("type") if isinstance(edge, Mapping) else None
        if edge_type == "LINE":
            return self._line_edge(edge, reporter, info)
        if edge_type == "ARC":
            return self._arc_edge(edge, reporter, info)
        if edge_type == "ELLIPSE":
            return self._ellipse_edge(edge, reporter, info)
        if edge_type == "SPLINE":
            return self._spline_edge(edge, reporter, info)
        reporter.add_warning("Unsupported hatch edge type", "UNSUPPORTED_EDGE_TYPE", {**info, "edge_type": edge_type})
        return None

    def _line_edge(self, edge: Mapping, reporter: ErrorReporter, info: dict[str, Any]) -> Coords | None:
        start = self.validate_point(edge.get("start"), reporter, info, "line start")
        if start is None:
            return None
        end = self.validate_point(edge.get("end"), reporter, info, "line end")
        if end is None:
            return None
        return [(start[0], start[1]), (end[0], end[1])]

    def _arc_edge(self, edge: Mapping, reporter: ErrorReporter, info: dict[str, Any]) -> Coords | None:
        center = self.validate_point(edge.get("center"), reporter, info, "arc center")
        if center is None:
            return None
        radius = self.validate_number(edge.get("radius"), reporter, info, "arc radius", nonzero=True)
        if radius is None:
            return None
        start = self.validate_number(edge.get("start_angle"), reporter, info, "arc start angle")
        if start is None:
            return None
        end = self.validate_number(edge.get("end_angle"), reporter, info, "arc end angle")
        if end is None:
            return None

        start_rad = math.radians(start)
        end_rad = _sweep(start_rad, math.radians(end), bool(edge.get("counterclockwise", False)))
        points = arc_points((center[0], center[1]), radius, start_rad, end_rad, self.ARC_SEGMENTS)
        for x, y in points:
            if not (math.isfinite(x) and math.isfinite(y)):
                reporter.add_warning("Invalid arc point calculation", "INVALID_ARC_POINT", {**info, "point": (x, y)})
                return None
        return points

    def _ellipse_edge(self, edge: Mapping, reporter: ErrorReporter, info: dict[str, Any]) -> Coords | None:
        center = self.validate_point(edge.get("center"), reporter, info, "ellipse center")
        if center is None:
            return None
        major_axis = self.validate_point(edge.get("major_axis"), reporter, info, "ellipse major axis")
        if major_axis is None:
            return None
        ratio = self.validate_number(edge.get("ratio"), reporter, info, "ellipse minor axis ratio", nonzero=True)
        if ratio is None:
            return None
        start = self.validate_number(edge.get("start_param"), reporter, info, "ellipse start param")
        if start is None:
            return None
        end = self.validate_number(edge.get("end_param"), reporter, info, "ellipse end param")
        if end is None:
            return None

        major_length = math.hypot(major_axis[0], major_axis[1])
        if not math.isfinite(major_length) or major_length == 0:
            reporter.add_warning(
                "Invalid major axis length for ellipse",
                "INVALID_ELLIPSE_AXIS",
                {**info, "major_axis": major_axis, "major_length": major_length},
            )
            return None

        end = _sweep(start, end, bool(edge.get("counterclockwise", False)))
        points = ellipse_points(
            (center[0], center[1]), (major_axis[0], major_axis[1]), ratio, start, end, self.ELLIPSE_SEGMENTS
        )
        for x, y in points:
            if not (math.isfinite(x) and math.isfinite(y)):
                reporter.add_warning(
                    "Invalid ellipse point calculation", "INVALID_ELLIPSE_POINT", {**info, "point": (x, y)}
                )
                return None
        return points

    def _spline_edge(self, edge: Mapping, reporter: ErrorReporter, info: dict[str, Any]) -> Coords | None:
        if self.validate_number(edge.get("degree"), reporter, info, "spline degree", minimum=1) is None:
            return None
        points = self.validate_points(edge.get("control_points"), reporter, info, "control point")
        if points is None:
            return None
        # TODO: evaluate the B-spline instead of joining control points
        return [(p[0], p[1]) for p in points]
