from __future__ import annotations

from typing import Any

from ..entity import Entity, Point3D
from ..errors import ErrorReporter
from ..geometry import create_polygon_geometry
from .base import GeometryConverter

_DEGENERATE_AREA = 1e-10


def _xy_area(points: list[Point3D]) -> float:
    area = 0.0
    for i, p in enumerate(points):
        q = points[(i + 1) % len(points)]
        area += p[0] * q[1] - q[0] * p[1]
    return abs(area) / 2.0


def _corners(points: list[Point3D]) -> list[Point3D]:
    # Triangles are stored with the third corner repeated.
    if len(points) == 4 and points[3] == points[2]:
        return points[:3]
    return points


class SolidGeometryConverter(GeometryConverter):
    """SOLID and 3DFACE as single-ring polygons; 3DSOLID is not decoded.

    SOLID corners are drawn in DXF order 0, 1, 3, 2.
    """

    entity_types = ("SOLID", "3DFACE", "3DSOLID")

    def convert(self, entity: Entity, reporter: ErrorReporter) -> dict[str, Any] | None:
        if entity.dxftype == "3DSOLID":
            return self._convert_acis(entity, reporter)
        info = entity.info()
        points = self.validate_points(
            entity.get("points"), reporter, info, "vertex", min_length=3, max_length=4
        )
        if points is None:
            return None

        corners = _corners(points)
        if entity.dxftype == "SOLID" and len(corners) == 4:
            corners = [corners[0], corners[1], corners[3], corners[2]]

        if _xy_area(corners) < _DEGENERATE_AREA:
            code = "DEGENERATE_SOLID" if entity.dxftype == "SOLID" else "DEGENERATE_FACE"
            reporter.add_warning(f"Degenerate {entity.dxftype} (zero area)", code, {**info, "vertices": corners})
            return None

        if entity.dxftype == "3DFACE":
            ring: list[tuple[float, ...]] = [tuple(p) for p in corners]
        else:
            ring = [(p[0], p[1]) for p in corners]
        ring.append(ring[0])
        return create_polygon_geometry([ring])

    def _convert_acis(self, entity: Entity, reporter: ErrorReporter) -> None:
        info = entity.info()
        acis_data = entity.get("acis_data")
        if acis_data is not None and not isinstance(acis_data, (list, tuple, str, bytes)):
            reporter.add_warning("Invalid ACIS data", "INVALID_ACIS_DATA", {**info, "acis_data": type(acis_data).__name__})
            return None
        reporter.add_warning(
            "3DSOLID conversion requires ACIS parsing, which is not implemented",
            "ACIS_PARSING_PENDING",
            {**info, "has_acis_data": bool(acis_data)},
        )
        return None
