from __future__ import annotations

import math
from typing import Any

from ..entity import Entity
from ..errors import ErrorReporter
from ..geometry import create_line_string_geometry
from .base import GeometryConverter


class RayGeometryConverter(GeometryConverter):
    """RAY and XLINE clipped to a long but finite LineString."""

    entity_types = ("RAY", "XLINE")

    MAX_LENGTH = 1e6

    def convert(self, entity: Entity, reporter: ErrorReporter) -> dict[str, Any] | None:
        info = entity.info()
        start = self.validate_point(entity.get("start"), reporter, info, "base point")
        if start is None:
            return None
        vector = self.validate_point(entity.get("unit_vector"), reporter, info, "direction vector")
        if vector is None:
            return None

        length = math.sqrt(vector[0] ** 2 + vector[1] ** 2 + vector[2] ** 2)
        if length == 0:
            reporter.add_warning(
                "Invalid direction vector (zero length)",
                "INVALID_DIRECTION",
                {**info, "direction": entity.get("unit_vector")},
            )
            return None
        dx = vector[0] / length * self.MAX_LENGTH
        dy = vector[1] / length * self.MAX_LENGTH

        end = (start[0] + dx, start[1] + dy)
        if entity.dxftype == "XLINE":
            begin = (start[0] - dx, start[1] - dy)
        else:
            begin = (start[0], start[1])
        return create_line_string_geometry([begin, end])
