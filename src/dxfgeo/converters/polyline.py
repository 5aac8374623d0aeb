from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from ezdxf.math import bulge_to_arc

from ..entity import Entity, is_finite_number, point_components
from ..errors import ErrorReporter
from ..geometry import create_line_string_geometry, create_polygon_geometry
from .base import GeometryConverter


def _vertex_bulge(vertex: Any) -> float:
    if isinstance(vertex, Mapping):
        bulge = vertex.get("bulge", 0.0)
    elif isinstance(vertex, (list, tuple)) and len(vertex) >= 4:
        bulge = vertex[3]
    else:
        return 0.0
    return float(bulge) if is_finite_number(bulge) else 0.0


def bulge_points(
    start: tuple[float, float],
    end: tuple[float, float],
    bulge: float,
    segments: int,
) -> list[tuple[float, float]]:
    """Interior points of the arc described by ``bulge`` between two vertices."""
    center, start_angle, end_angle, radius = bulge_to_arc(start, end, bulge)
    sweep = (end_angle - start_angle) % (2.0 * math.pi)
    if sweep == 0:
        return []
    points = [
        (center[0] + radius * math.cos(start_angle + sweep * i / segments),
         center[1] + radius * math.sin(start_angle + sweep * i / segments))
        for i in range(1, segments)
    ]
    # Negative bulges are returned counter-clockwise from the end vertex.
    if bulge < 0:
        points.reverse()
    return points


class PolylineGeometryConverter(GeometryConverter):
    """POLYLINE, LWPOLYLINE and LINE.

    Bulge values are accepted but each segment stays straight unless
    ``interpolate_bulges`` is set.
    """

    entity_types = ("POLYLINE", "LWPOLYLINE", "LINE")

    BULGE_SEGMENTS = 16

    def __init__(self, interpolate_bulges: bool = False):
        self.interpolate_bulges = interpolate_bulges

    def convert(self, entity: Entity, reporter: ErrorReporter) -> dict[str, Any] | None:
        info = entity.info()
        if entity.dxftype == "LINE" and not entity.has("vertices"):
            vertices: Any = [entity.get("start"), entity.get("end")]
        else:
            vertices = entity.get("vertices")

        if not isinstance(vertices, (list, tuple)) or len(vertices) < 2:
            reporter.add_warning(
                "Polyline has insufficient vertices",
                "INVALID_POLYLINE_VERTICES",
                {**info, "vertex_count": len(vertices) if isinstance(vertices, (list, tuple)) else 0},
            )
            return None

        coordinates: list[tuple[float, float]] = []
        bulges: list[float] = []
        for index, vertex in enumerate(vertices):
            parts = point_components(vertex)
            if parts is None or not (is_finite_number(parts[0]) and is_finite_number(parts[1])):
                reporter.add_warning(
                    "Invalid polyline vertex coordinates",
                    "INVALID_POLYLINE_VERTEX",
                    {**info, "index": index, "vertex": vertex},
                )
                continue
            coordinates.append((float(parts[0]), float(parts[1])))
            bulges.append(_vertex_bulge(vertex))

        if len(coordinates) < 2:
            reporter.add_warning(
                "Polyline has insufficient valid vertices",
                "INVALID_POLYLINE_VERTICES",
                {**info, "valid_vertex_count": len(coordinates)},
            )
            return None

        closed = bool(entity.get("closed", False))
        if self.interpolate_bulges and any(bulges):
            coordinates = self._apply_bulges(coordinates, bulges, closed)

        if closed and len(coordinates) >= 3:
            ring = list(coordinates)
            if ring[0] != ring[-1]:
                ring.append(ring[0])
            if len(ring) >= 4:
                return create_polygon_geometry([ring])

        return create_line_string_geometry(coordinates)

    def _apply_bulges(
        self,
        coordinates: list[tuple[float, float]],
        bulges: list[float],
        closed: bool,
    ) -> list[tuple[float, float]]:
        out: list[tuple[float, float]] = []
        count = len(coordinates)
        for i, point in enumerate(coordinates):
            out.append(point)
            if i == count - 1 and not closed:
                break
            following = coordinates[(i + 1) % count]
            if bulges[i] and point != following:
                out.extend(bulge_points(point, following, bulges[i], self.BULGE_SEGMENTS))
        return out
