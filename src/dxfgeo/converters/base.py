from __future__ import annotations

from typing import Any, Callable, Iterator

from ..entity import Entity, Point3D, as_point3, is_finite_number, point_components
from ..errors import ErrorReporter


class GeometryConverter:
    """Maps one family of DXF entities to GeoJSON geometry.

    ``convert`` never raises for bad input: it reports a warning and returns
    None so the caller can skip the entity.
    """

    entity_types: tuple[str, ...] = ()

    def can_handle(self, entity_type: str) -> bool:
        return entity_type in self.entity_types

    def convert(self, entity: Entity, reporter: ErrorReporter) -> dict[str, Any] | None:
        raise NotImplementedError

    def validate_point(
        self,
        value: Any,
        reporter: ErrorReporter,
        info: dict[str, Any],
        context: str,
        code: str = "INVALID_COORDINATES",
    ) -> Point3D | None:
        parts = point_components(value)
        if parts is None:
            reporter.add_warning(
                f"Invalid {context} coordinates: not a point",
                code,
                {**info, "context": context, "point": value},
            )
            return None
        if not (is_finite_number(parts[0]) and is_finite_number(parts[1])):
            reporter.add_warning(
                f"Invalid {context} coordinates: invalid x/y values",
                code,
                {**info, "context": context, "point": value},
            )
            return None
        if parts[2] is not None and not is_finite_number(parts[2]):
            reporter.add_warning(
                f"Invalid {context} coordinates: invalid z value",
                code,
                {**info, "context": context, "point": value},
            )
            return None
        return as_point3(value)

    def validate_number(
        self,
        value: Any,
        reporter: ErrorReporter,
        info: dict[str, Any],
        context: str,
        *,
        minimum: float | None = None,
        maximum: float | None = None,
        nonzero: bool = False,
        code: str | None = None,
    ) -> float | None:
        if not is_finite_number(value):
            reporter.add_warning(
                f"Invalid {context}: not a valid number",
                code or "INVALID_NUMBER",
                {**info, "context": context, "value": value},
            )
            return None
        if minimum is not None and value < minimum:
            reporter.add_warning(
                f"Invalid {context}: value below minimum",
                code or "INVALID_NUMBER_RANGE",
                {**info, "context": context, "value": value, "min": minimum},
            )
            return None
        if maximum is not None and value > maximum:
            reporter.add_warning(
                f"Invalid {context}: value above maximum",
                code or "INVALID_NUMBER_RANGE",
                {**info, "context": context, "value": value, "max": maximum},
            )
            return None
        if nonzero and value == 0:
            reporter.add_warning(
                f"Invalid {context}: value cannot be zero",
                code or "INVALID_NUMBER_ZERO",
                {**info, "context": context, "value": value},
            )
            return None
        return float(value)

    def validate_optional_number(
        self,
        entity: Entity,
        key: str,
        reporter: ErrorReporter,
        info: dict[str, Any],
        context: str,
        **limits: Any,
    ) -> bool:
        if not entity.has(key):
            return True
        return self.validate_number(entity.get(key), reporter, info, context, **limits) is not None

    def validate_sequence(
        self,
        values: Any,
        reporter: ErrorReporter,
        info: dict[str, Any],
        context: str,
        *,
        min_length: int | None = None,
        max_length: int | None = None,
    ) -> list[Any] | None:
        if not isinstance(values, (list, tuple)):
            reporter.add_warning(
                f"Invalid {context}: not a sequence",
                "INVALID_ARRAY",
                {**info, "context": context, "value": values},
            )
            return None
        if min_length is not None and len(values) < min_length:
            reporter.add_warning(
                f"Invalid {context}: sequence too short",
                "INVALID_ARRAY_LENGTH",
                {**info, "context": context, "length": len(values), "min_length": min_length},
            )
            return None
        if max_length is not None and len(values) > max_length:
            reporter.add_warning(
                f"Invalid {context}: sequence too long",
                "INVALID_ARRAY_LENGTH",
                {**info, "context": context, "length": len(values), "max_length": max_length},
            )
            return None
        return list(values)

    def validate_points(
        self,
        values: Any,
        reporter: ErrorReporter,
        info: dict[str, Any],
        context: str,
        *,
        min_length: int | None = None,
        max_length: int | None = None,
    ) -> list[Point3D] | None:
        items = self.validate_sequence(
            values, reporter, info, context, min_length=min_length, max_length=max_length
        )
        if items is None:
            return None
        points: list[Point3D] = []
        for index, item in enumerate(items):
            point = self.validate_point(item, reporter, info, f"{context} {index + 1}")
            if point is None:
                return None
            points.append(point)
        return points


class GeometryConverterRegistry:
    """Ordered list of converters; the first one that claims a type wins."""

    def __init__(self) -> None:
        self._converters: list[GeometryConverter] = []
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def register(self, converter: GeometryConverter) -> None:
        self._converters.append(converter)

    def find_converter(self, entity_type: str) -> GeometryConverter | None:
        for converter in self._converters:
            if converter.can_handle(entity_type):
                return converter
        return None

    def initialize(self, factory: Callable[["GeometryConverterRegistry"], list[GeometryConverter]]) -> None:
        if self._initialized:
            return
        for converter in factory(self):
            self.register(converter)
        self._initialized = True

    def supported_types(self) -> list[str]:
        seen: list[str] = []
        for converter in self._converters:
            for entity_type in converter.entity_types:
                if entity_type not in seen:
                    seen.append(entity_type)
        return seen

    def __iter__(self) -> Iterator[GeometryConverter]:
        return iter(list(self._converters))

    def __len__(self) -> int:
        return len(self._converters)
