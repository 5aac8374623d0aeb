from .adapter import (
    block_definitions_from_document,
    entities_from_layout,
    entity_from_ezdxf,
    layer_styles_from_document,
)
from .converters import GeometryConverter, GeometryConverterRegistry, create_default_registry
from .entity import BlockDefinition, Entity
from .errors import DxfGeoError, EntityValidationError, ErrorReporter, InvalidGeometryError, Severity
from .features import (
    ConversionResult,
    FeatureConversionOptions,
    FeatureConverter,
    LayerStyle,
    create_feature_converter,
)
from .geometry import create_feature, feature_collection, geometry_bounds

__all__ = [
    "Entity",
    "BlockDefinition",
    "ErrorReporter",
    "Severity",
    "DxfGeoError",
    "InvalidGeometryError",
    "EntityValidationError",
    "GeometryConverter",
    "GeometryConverterRegistry",
    "create_default_registry",
    "FeatureConverter",
    "FeatureConversionOptions",
    "LayerStyle",
    "ConversionResult",
    "create_feature_converter",
    "create_feature",
    "feature_collection",
    "geometry_bounds",
    "entity_from_ezdxf",
    "entities_from_layout",
    "layer_styles_from_document",
    "block_definitions_from_document",
]
