from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from ..entity import Entity, Point3D, is_finite_number
from ..errors import ErrorReporter
from ..geometry import collect_geometries, create_line_string_geometry, create_polygon_geometry
from .base import GeometryConverter


def arrowhead(point: Point3D, angle_deg: float, size: float) -> dict[str, Any]:
    rad = math.radians(angle_deg)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    x, y = point[0], point[1]
    return create_polygon_geometry([[
        (x, y),
        (x - size * cos_a - size * sin_a, y - size * sin_a + size * cos_a),
        (x - size * cos_a + size * sin_a, y - size * sin_a - size * cos_a),
        (x, y),
    ]])


def direction_deg(start: Point3D, end: Point3D) -> float:
    return math.degrees(math.atan2(end[1] - start[1], end[0] - start[0]))


def _arrow_size(arrow: Any, *fallbacks: Any) -> float | None:
    """Arrow size for an ``arrowhead`` field, or None when no arrow is drawn."""
    if not arrow:
        return None
    candidates = [arrow.get("size")] if isinstance(arrow, Mapping) else []
    for value in (*candidates, *fallbacks):
        if is_finite_number(value) and value > 0:
            return float(value)
    return None


class LeaderGeometryConverter(GeometryConverter):
    entity_types = ("LEADER", "MLEADER")

    ARROW_SIZE = 2.5

    def convert(self, entity: Entity, reporter: ErrorReporter) -> dict[str, Any] | None:
        if entity.dxftype == "MLEADER":
            return self._convert_mleader(entity, reporter)
        return self._convert_leader(entity, reporter)

    def _leader_parts(
        self,
        leader: Mapping,
        reporter: ErrorReporter,
        info: dict[str, Any],
        label: str,
        style: Mapping,
    ) -> list[dict[str, Any]] | None:
        vertices = self.validate_points(leader.get("vertices"), reporter, info, f"{label} vertex", min_length=2)
        if vertices is None:
            return None

        annotation = leader.get("annotation")
        anchor = None
        if isinstance(annotation, Mapping):
            anchor = self.validate_point(annotation.get("insert"), reporter, info, f"{label} annotation position")
            if anchor is None:
                return None
            height = annotation.get("height") or style.get("text_height") or 1.0
            if self.validate_number(height, reporter, info, f"{label} text height", nonzero=True) is None:
                return None

        parts = [create_line_string_geometry([(v[0], v[1]) for v in vertices])]
        size = _arrow_size(leader.get("arrowhead"), style.get("arrow_size"), self.ARROW_SIZE)
        if size is not None:
            parts.append(arrowhead(vertices[0], direction_deg(vertices[0], vertices[1]), size))

        landing_gap = style.get("landing_gap")
        if anchor is not None and is_finite_number(landing_gap) and landing_gap > 0:
            landing = self._landing_line(vertices[-1], anchor, float(landing_gap))
            if landing is not None:
                parts.append(landing)
        return parts

    def _convert_leader(self, entity: Entity, reporter: ErrorReporter) -> dict[str, Any] | None:
        info = entity.info()
        parts = self._leader_parts(entity.dxf, reporter, info, "leader", {})
        if parts is None:
            return None
        return collect_geometries(parts)

    def _convert_mleader(self, entity: Entity, reporter: ErrorReporter) -> dict[str, Any] | None:
        info = entity.info()
        leaders = self.validate_sequence(entity.get("leaders"), reporter, info, "mleader leaders", min_length=1)
        if leaders is None:
            return None
        style = entity.get("style") if isinstance(entity.get("style"), Mapping) else {}

        geometries: list[dict[str, Any]] = []
        for index, leader in enumerate(leaders):
            if not isinstance(leader, Mapping):
                reporter.add_warning("Invalid mleader leader", "INVALID_LEADER", {**info, "leader": index + 1})
                continue
            parts = self._leader_parts(leader, reporter, info, f"leader {index + 1}", style)
            if parts is not None:
                geometries.extend(parts)

        if not geometries:
            reporter.add_warning("No valid leaders in mleader", "NO_VALID_LEADERS", info)
            return None
        return collect_geometries(geometries)

    def _landing_line(self, start: Point3D, end: Point3D, gap: float) -> dict[str, Any] | None:
        dx = end[0] - start[0]
        dy = end[1] - start[1]
        dist = math.hypot(dx, dy)
        if dist < gap:
            return None
        ux, uy = dx / dist, dy / dist
        return create_line_string_geometry([
            (start[0], start[1]),
            (start[0] + ux * (dist - gap), start[1] + uy * (dist - gap)),
            (end[0], end[1]),
        ])
