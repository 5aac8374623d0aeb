from __future__ import annotations

import logging
import math
from typing import Any

from ..entity import Entity, Point3D, is_finite_number
from ..errors import ErrorReporter
from ..geometry import collect_geometries, create_line_string_geometry
from .base import GeometryConverter
from .leader import arrowhead, direction_deg

logger = logging.getLogger(__name__)

_REQUIRED_POINTS = {
    "LINEAR": (("first_point", "first point"), ("second_point", "second point")),
    "ALIGNED": (("first_point", "first point"), ("second_point", "second point")),
    "ANGULAR": (("angle_vertex", "angle vertex"), ("first_point", "first point"), ("second_point", "second point")),
    "RADIUS": (("center_point", "center point"), ("leader_point", "leader point")),
    "DIAMETER": (("center_point", "center point"), ("leader_point", "leader point")),
    "ORDINATE": (("first_point", "feature point"),),
}


def _line(a: Point3D, b: Point3D) -> dict[str, Any]:
    return create_line_string_geometry([(a[0], a[1]), (b[0], b[1])])


class DimensionGeometryConverter(GeometryConverter):
    """DIMENSION as extension/leader lines plus arrowheads.

    Angular dimensions are validated but not drawn.
    """

    entity_types = ("DIMENSION",)

    ARROW_SIZE = 2.5

    def convert(self, entity: Entity, reporter: ErrorReporter) -> dict[str, Any] | None:
        info = entity.info()
        defpoint = self.validate_point(entity.get("defpoint"), reporter, info, "definition point")
        if defpoint is None:
            return None

        dimension_type = str(entity.get("dimension_type") or "").upper()
        required = _REQUIRED_POINTS.get(dimension_type)
        if required is None:
            reporter.add_warning(
                f"Unsupported dimension type: {entity.get('dimension_type')!r}",
                "UNSUPPORTED_DIMENSION_TYPE",
                {**info, "dimension_type": entity.get("dimension_type")},
            )
            return None

        points: dict[str, Point3D] = {}
        for key, context in required:
            point = self.validate_point(entity.get(key), reporter, info, context)
            if point is None:
                return None
            points[key] = point
        if entity.has("text_midpoint") and dimension_type in ("LINEAR", "ALIGNED"):
            text_midpoint = self.validate_point(entity.get("text_midpoint"), reporter, info, "text midpoint")
            if text_midpoint is None:
                return None
            points["text_midpoint"] = text_midpoint
        if not self.validate_optional_number(entity, "rotation", reporter, info, "dimension rotation"):
            return None

        if dimension_type == "ANGULAR":
            reporter.add_warning(
                "Angular dimension conversion not implemented yet",
                "ANGULAR_DIMENSION_PENDING",
                info,
            )
            return None

        try:
            geometries = self._build(entity, dimension_type, defpoint, points)
        except ValueError as exc:
            logger.debug("dimension %s failed: %s", info["handle"], exc)
            reporter.add_warning(
                f"Error converting {dimension_type} dimension",
                "DIMENSION_CONVERSION_ERROR",
                {**info, "error": str(exc)},
            )
            return None
        return collect_geometries(geometries)

    def _arrow_size(self, entity: Entity) -> float:
        size = entity.get("arrow_size")
        if is_finite_number(size) and size > 0:
            return float(size)
        return self.ARROW_SIZE

    def _build(
        self,
        entity: Entity,
        dimension_type: str,
        defpoint: Point3D,
        points: dict[str, Point3D],
    ) -> list[dict[str, Any]]:
        if dimension_type in ("LINEAR", "ALIGNED"):
            geometries = [_line(points["first_point"], defpoint), _line(points["second_point"], defpoint)]
            if "text_midpoint" in points:
                geometries.append(_line(defpoint, points["text_midpoint"]))
            angle = float(entity.get("rotation") or 0.0)
            geometries.append(arrowhead(defpoint, angle, self._arrow_size(entity)))
            return geometries

        if dimension_type in ("RADIUS", "DIAMETER"):
            center, leader = points["center_point"], points["leader_point"]
            if math.hypot(leader[0] - center[0], leader[1] - center[1]) == 0:
                raise ValueError("leader point coincides with center point")
            return [
                _line(center, leader),
                arrowhead(leader, direction_deg(center, leader), self._arrow_size(entity)),
            ]

        # ORDINATE
        return [_line(points["first_point"], defpoint)]
