from __future__ import annotations

from typing import Any

from ..entity import Entity, has_z
from ..errors import ErrorReporter
from ..geometry import create_point_geometry
from .base import GeometryConverter

_MTEXT_NUMBERS = (
    ("attachment_point", "text attachment point", {}),
    ("drawing_direction", "text drawing direction", {}),
    ("line_spacing_style", "text line spacing style", {}),
    ("line_spacing_factor", "text line spacing factor", {"nonzero": True}),
)


def _anchor(position: Any, point: tuple[float, float, float]) -> dict[str, Any]:
    if has_z(position):
        return create_point_geometry(point[0], point[1], point[2])
    return create_point_geometry(point[0], point[1])


class TextGeometryConverter(GeometryConverter):
    """TEXT and MTEXT become a Point at the insertion point.

    The text itself is carried in feature properties, not in the geometry.
    """

    entity_types = ("TEXT", "MTEXT")

    def convert(self, entity: Entity, reporter: ErrorReporter) -> dict[str, Any] | None:
        info = entity.info()
        position = entity.get("insert")
        point = self.validate_point(position, reporter, info, "text position")
        if point is None:
            return None

        text = entity.get("text")
        if not isinstance(text, str) or not text.strip():
            reporter.add_warning("Empty text content", "EMPTY_TEXT_CONTENT", {**info, "text": text})
            return None

        if not self.validate_optional_number(entity, "height", reporter, info, "text height", nonzero=True):
            return None
        if not self.validate_optional_number(entity, "rotation", reporter, info, "text rotation"):
            return None
        if not self.validate_optional_number(entity, "width", reporter, info, "text width", nonzero=True):
            return None

        if entity.dxftype == "MTEXT":
            for key, context, limits in _MTEXT_NUMBERS:
                if not self.validate_optional_number(entity, key, reporter, info, context, **limits):
                    return None

        return _anchor(position, point)


class PointGeometryConverter(GeometryConverter):
    entity_types = ("POINT",)

    def convert(self, entity: Entity, reporter: ErrorReporter) -> dict[str, Any] | None:
        location = entity.get("location")
        point = self.validate_point(location, reporter, entity.info(), "point location")
        if point is None:
            return None
        return _anchor(location, point)
