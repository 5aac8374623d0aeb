from __future__ import annotations

import math
from typing import Any

from ..entity import Entity
from ..errors import ErrorReporter
from ..geometry import create_line_string_geometry, create_polygon_geometry
from .base import GeometryConverter


def ellipse_points(
    center: tuple[float, float],
    major_axis: tuple[float, float],
    ratio: float,
    start_param: float,
    end_param: float,
    segments: int,
) -> list[tuple[float, float]]:
    """Sample an ellipse between two parameters given in radians."""
    major_length = math.hypot(major_axis[0], major_axis[1])
    rotation = math.atan2(major_axis[1], major_axis[0])
    cos_r = math.cos(rotation)
    sin_r = math.sin(rotation)
    step = (end_param - start_param) / segments
    points = []
    for i in range(segments + 1):
        angle = start_param + i * step
        x = major_length * math.cos(angle)
        y = major_length * ratio * math.sin(angle)
        points.append((center[0] + x * cos_r - y * sin_r, center[1] + x * sin_r + y * cos_r))
    return points


def arc_points(
    center: tuple[float, float],
    radius: float,
    start_rad: float,
    end_rad: float,
    segments: int,
) -> list[tuple[float, float]]:
    step = (end_rad - start_rad) / segments
    return [
        (center[0] + radius * math.cos(start_rad + i * step), center[1] + radius * math.sin(start_rad + i * step))
        for i in range(segments + 1)
    ]


class CircleGeometryConverter(GeometryConverter):
    """CIRCLE, ARC and ELLIPSE.

    ARC angles are degrees, ELLIPSE ``start_param``/``end_param`` radians,
    matching how DXF stores them.
    """

    entity_types = ("CIRCLE", "ARC", "ELLIPSE")

    CIRCLE_SEGMENTS = 64
    ARC_SEGMENTS = 32
    ELLIPSE_SEGMENTS = 64

    def convert(self, entity: Entity, reporter: ErrorReporter) -> dict[str, Any] | None:
        info = entity.info()
        if entity.dxftype == "CIRCLE":
            return self._convert_circle(entity, reporter, info)
        if entity.dxftype == "ARC":
            return self._convert_arc(entity, reporter, info)
        if entity.dxftype == "ELLIPSE":
            return self._convert_ellipse(entity, reporter, info)
        reporter.add_warning(f"Not a circular entity: {entity.dxftype}", "UNSUPPORTED_ENTITY_TYPE", info)
        return None

    def _convert_circle(self, entity: Entity, reporter: ErrorReporter, info: dict[str, Any]) -> dict[str, Any] | None:
        code = "INVALID_CIRCLE_PARAMETERS"
        center = self.validate_point(entity.get("center"), reporter, info, "circle center", code)
        if center is None:
            return None
        radius = self.validate_number(entity.get("radius"), reporter, info, "circle radius", nonzero=True, code=code)
        if radius is None:
            return None

        ring: list[tuple[float, float]] = []
        for i in range(self.CIRCLE_SEGMENTS):
            angle = i * 2.0 * math.pi / self.CIRCLE_SEGMENTS
            x = center[0] + radius * math.cos(angle)
            y = center[1] + radius * math.sin(angle)
            if not (math.isfinite(x) and math.isfinite(y)):
                reporter.add_warning(
                    "Invalid circle point calculation",
                    "INVALID_CIRCLE_POINT",
                    {**info, "angle": angle, "point": (x, y)},
                )
                return None
            ring.append((x, y))
        ring.append(ring[0])
        return create_polygon_geometry([ring])

    def _convert_arc(self, entity: Entity, reporter: ErrorReporter, info: dict[str, Any]) -> dict[str, Any] | None:
        code = "INVALID_ARC_PARAMETERS"
        center = self.validate_point(entity.get("center"), reporter, info, "arc center", code)
        if center is None:
            return None
        radius = self.validate_number(entity.get("radius"), reporter, info, "arc radius", nonzero=True, code=code)
        if radius is None:
            return None
        start = self.validate_number(entity.get("start_angle"), reporter, info, "arc start angle", code=code)
        if start is None:
            return None
        end = self.validate_number(entity.get("end_angle"), reporter, info, "arc end angle", code=code)
        if end is None:
            return None

        start_rad = math.radians(start)
        end_rad = math.radians(end)
        if end_rad <= start_rad:
            end_rad += 2.0 * math.pi

        points = arc_points((center[0], center[1]), radius, start_rad, end_rad, self.ARC_SEGMENTS)
        for x, y in points:
            if not (math.isfinite(x) and math.isfinite(y)):
                reporter.add_warning("Invalid arc point calculation", "INVALID_ARC_POINT", {**info, "point": (x, y)})
                return None
        return create_line_string_geometry(points)

    def _convert_ellipse(self, entity: Entity, reporter: ErrorReporter, info: dict[str, Any]) -> dict[str, Any] | None:
        code = "INVALID_ELLIPSE_PARAMETERS"
        center = self.validate_point(entity.get("center"), reporter, info, "ellipse center", code)
        if center is None:
            return None
        major_axis = self.validate_point(entity.get("major_axis"), reporter, info, "ellipse major axis", code)
        if major_axis is None:
            return None
        ratio = self.validate_number(entity.get("ratio"), reporter, info, "ellipse minor axis ratio", nonzero=True, code=code)
        if ratio is None:
            return None
        start = self.validate_number(entity.get("start_param", 0.0), reporter, info, "ellipse start param", code=code)
        if start is None:
            return None
        end = self.validate_number(entity.get("end_param", 2.0 * math.pi), reporter, info, "ellipse end param", code=code)
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

        if end <= start:
            end += 2.0 * math.pi

        points = ellipse_points(
            (center[0], center[1]), (major_axis[0], major_axis[1]), ratio, start, end, self.ELLIPSE_SEGMENTS
        )
        for x, y in points:
            if not (math.isfinite(x) and math.isfinite(y)):
                reporter.add_warning(
                    "Invalid ellipse point calculation", "INVALID_ELLIPSE_POINT", {**info, "point": (x, y)}
                )
                return None
        return create_line_string_geometry(points)
