from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .converters import GeometryConverterRegistry, create_default_registry
from .entity import STYLE_FIELDS, Entity, is_finite_number, point_components
from .errors import EntityValidationError, ErrorReporter
from .geometry import Bounds, create_feature, geometry_bounds, merge_bounds

logger = logging.getLogger(__name__)

_METADATA_FIELDS = ("text", "degree", "radius")
_ANGLE_PAIRS = (("start_angle", "end_angle"), ("start_param", "end_param"))


@dataclass(frozen=True)
class LayerStyle:
    color: int | None = None
    true_color: int | None = None
    linetype: str | None = None
    lineweight: int | None = None
    visible: bool | None = None


@dataclass(frozen=True)
class FeatureConversionOptions:
    layer_info: Mapping[str, LayerStyle] = field(default_factory=dict)
    include_metadata: bool = False
    include_styles: bool = False
    validate_entities: bool = False
    skip_invalid_entities: bool = False


@dataclass(frozen=True)
class ConversionResult:
    features: list[dict[str, Any]]
    total_entities: int
    failed_entities: int
    skipped_entities: int
    bounds: Bounds | None = None

    @property
    def successful_entities(self) -> int:
        return len(self.features)

    @property
    def success_rate(self) -> float:
        if self.total_entities == 0:
            return 0.0
        return self.successful_entities / self.total_entities * 100.0


def _is_xy(value: Any) -> bool:
    parts = point_components(value)
    return parts is not None and is_finite_number(parts[0]) and is_finite_number(parts[1])


def _positive(value: Any) -> bool:
    return is_finite_number(value) and value > 0


def _valid_circle(entity: Entity) -> bool:
    return _is_xy(entity.get("center")) and _positive(entity.get("radius"))


def _valid_arc(entity: Entity) -> bool:
    return (
        _valid_circle(entity)
        and is_finite_number(entity.get("start_angle"))
        and is_finite_number(entity.get("end_angle"))
    )


def _valid_ellipse(entity: Entity) -> bool:
    return (
        _is_xy(entity.get("center"))
        and _is_xy(entity.get("major_axis"))
        and _positive(entity.get("ratio"))
    )


def _valid_line(entity: Entity) -> bool:
    return _is_xy(entity.get("start")) and _is_xy(entity.get("end"))


def _valid_polyline(entity: Entity) -> bool:
    vertices = entity.get("vertices")
    return isinstance(vertices, (list, tuple)) and len(vertices) > 0 and all(_is_xy(v) for v in vertices)


def _valid_text(entity: Entity) -> bool:
    return isinstance(entity.get("text"), str) and _is_xy(entity.get("insert"))


def _valid_spline(entity: Entity) -> bool:
    points = entity.get("control_points")
    degree = entity.get("degree")
    return (
        isinstance(points, (list, tuple))
        and len(points) >= 2
        and all(_is_xy(p) for p in points)
        and is_finite_number(degree)
        and degree >= 1
    )


_VALIDATORS = {
    "CIRCLE": _valid_circle,
    "ARC": _valid_arc,
    "ELLIPSE": _valid_ellipse,
    "LINE": _valid_line,
    "POLYLINE": _valid_polyline,
    "LWPOLYLINE": _valid_polyline,
    "TEXT": _valid_text,
    "MTEXT": _valid_text,
    "SPLINE": _valid_spline,
}


def validate_entity(entity: Entity) -> bool:
    """Structural pre-check run before conversion when ``validate_entities`` is set.

    Types without a dedicated check pass and are left to their converter.
    """
    if not entity.dxftype:
        return False
    check = _VALIDATORS.get(entity.dxftype)
    return True if check is None else check(entity)


class FeatureConverter:
    """Wraps converted geometry into GeoJSON features with properties."""

    def __init__(self, registry: GeometryConverterRegistry, reporter: ErrorReporter):
        self.registry = registry
        self.reporter = reporter

    def convert_entity(
        self,
        entity: Entity,
        options: FeatureConversionOptions | None = None,
    ) -> dict[str, Any] | None:
        options = options or FeatureConversionOptions()
        info = entity.info()

        try:
            if options.validate_entities and not validate_entity(entity):
                if options.skip_invalid_entities:
                    self.reporter.add_warning("Skipping invalid entity", "INVALID_ENTITY_SKIPPED", info)
                    return None
                raise EntityValidationError("Entity validation failed", entity.dxftype, entity.handle)

            converter = self.registry.find_converter(entity.dxftype)
            if converter is None:
                self.reporter.add_warning(
                    f"No geometry converter found for entity type: {entity.dxftype}",
                    "UNSUPPORTED_ENTITY_TYPE",
                    info,
                )
                return None

            geometry = converter.convert(entity, self.reporter)
            if geometry is None:
                return None
            return create_feature(geometry, self._extract_properties(entity, options))
        except Exception as exc:
            logger.debug("conversion of %s %s raised", entity.dxftype, info["handle"], exc_info=True)
            if options.skip_invalid_entities:
                self.reporter.add_warning(
                    f"Skipping entity due to error: {exc}",
                    "ENTITY_CONVERSION_SKIPPED",
                    {**info, "error": str(exc)},
                )
                return None
            self.reporter.add_error(
                "Failed to convert entity to feature",
                "FEATURE_CONVERSION_ERROR",
                {**info, "error": str(exc)},
            )
            return None

    def convert_entities(
        self,
        entities: Iterable[Entity],
        options: FeatureConversionOptions | None = None,
    ) -> list[dict[str, Any]]:
        return self.convert_entities_with_stats(entities, options).features

    def convert_entities_with_stats(
        self,
        entities: Iterable[Entity],
        options: FeatureConversionOptions | None = None,
    ) -> ConversionResult:
        options = options or FeatureConversionOptions()
        features: list[dict[str, Any]] = []
        failed = 0
        skipped = 0
        total = 0
        bounds: Bounds | None = None

        for entity in entities:
            total += 1
            feature = self.convert_entity(entity, options)
            if feature is None:
                if options.skip_invalid_entities:
                    skipped += 1
                else:
                    failed += 1
                continue
            features.append(feature)
            bounds = merge_bounds(bounds, geometry_bounds(feature["geometry"]))

        result = ConversionResult(
            features=features,
            total_entities=total,
            failed_entities=failed,
            skipped_entities=skipped,
            bounds=bounds,
        )
        if failed or skipped:
            self.reporter.add_warning(
                f"Conversion results: {failed} errors, {skipped} skipped",
                "CONVERSION_RESULTS",
                {
                    "total_entities": total,
                    "failed_entities": failed,
                    "skipped_entities": skipped,
                    "successful_entities": len(features),
                    "success_rate": f"{result.success_rate:.1f}%",
                },
            )
        logger.debug("converted %d of %d entities (%d failed, %d skipped)", len(features), total, failed, skipped)
        return result

    def _extract_properties(self, entity: Entity, options: FeatureConversionOptions) -> dict[str, Any]:
        properties: dict[str, Any] = {
            "id": entity.handle,
            "type": entity.dxftype,
            "layer": entity.layer,
        }

        if options.include_styles:
            layer_style = options.layer_info.get(entity.layer) or LayerStyle()
            for name in STYLE_FIELDS:
                value = entity.get(name)
                properties[name] = value if value is not None else getattr(layer_style, name)

        if options.include_metadata:
            for name in _METADATA_FIELDS:
                if name in entity.dxf:
                    properties[name] = entity.get(name)
            for start, end in _ANGLE_PAIRS:
                if start in entity.dxf and end in entity.dxf:
                    properties[start] = entity.get(start)
                    properties[end] = entity.get(end)
            if "closed" in entity.dxf:
                properties["closed"] = entity.get("closed")

        return properties


def create_feature_converter(
    reporter: ErrorReporter,
    registry: GeometryConverterRegistry | None = None,
) -> FeatureConverter:
    return FeatureConverter(registry if registry is not None else create_default_registry(), reporter)
