from __future__ import annotations

from typing import Any

from ..entity import Entity
from ..errors import ErrorReporter
from ..geometry import create_line_string_geometry, create_polygon_geometry
from .base import GeometryConverter


class SplineGeometryConverter(GeometryConverter):
    """SPLINE as a polyline through its control points.

    Knots and weights are validated but not evaluated; every converted spline
    reports ``SPLINE_LINEAR_APPROXIMATION``.
    """

    entity_types = ("SPLINE",)

    def convert(self, entity: Entity, reporter: ErrorReporter) -> dict[str, Any] | None:
        info = entity.info()
        degree = self.validate_number(entity.get("degree"), reporter, info, "spline degree", minimum=1)
        if degree is None:
            return None

        control_points = self.validate_points(
            entity.get("control_points"), reporter, info, "spline control point", min_length=2
        )
        if control_points is None:
            return None
        count = len(control_points)

        if entity.has("knots"):
            knots = self.validate_sequence(
                entity.get("knots"), reporter, info, "spline knots", min_length=count + int(degree) + 1
            )
            if knots is None:
                return None
            for index, knot in enumerate(knots):
                if self.validate_number(knot, reporter, info, f"knot {index}") is None:
                    return None

        if entity.has("weights"):
            weights = self.validate_sequence(entity.get("weights"), reporter, info, "spline weights", min_length=count)
            if weights is None:
                return None
            for index, weight in enumerate(weights):
                if self.validate_number(weight, reporter, info, f"weight {index}", nonzero=True) is None:
                    return None

        if entity.has("fit_points"):
            if self.validate_points(entity.get("fit_points"), reporter, info, "spline fit point") is None:
                return None

        reporter.add_warning(
            "Using linear approximation for spline",
            "SPLINE_LINEAR_APPROXIMATION",
            {
                **info,
                "degree": degree,
                "has_knots": entity.has("knots"),
                "has_weights": entity.has("weights"),
                "has_fit_points": entity.has("fit_points"),
                "control_point_count": count,
            },
        )

        coordinates = [(p[0], p[1]) for p in control_points]
        if entity.get("closed") and len(coordinates) >= 3:
            ring = list(coordinates)
            if ring[0] != ring[-1]:
                ring.append(ring[0])
            if len(ring) >= 4:
                return create_polygon_geometry([ring])
        return create_line_string_geometry(coordinates)
