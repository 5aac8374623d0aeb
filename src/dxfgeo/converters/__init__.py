from __future__ import annotations

from collections.abc import Mapping

from ..entity import BlockDefinition
from .base import GeometryConverter, GeometryConverterRegistry
from .circle import CircleGeometryConverter
from .dimension import DimensionGeometryConverter
from .hatch import HatchGeometryConverter
from .insert import InsertGeometryConverter
from .leader import LeaderGeometryConverter
from .polyline import PolylineGeometryConverter
from .ray import RayGeometryConverter
from .solid import SolidGeometryConverter
from .spline import SplineGeometryConverter
from .text import PointGeometryConverter, TextGeometryConverter

__all__ = [
    "GeometryConverter",
    "GeometryConverterRegistry",
    "CircleGeometryConverter",
    "PolylineGeometryConverter",
    "TextGeometryConverter",
    "PointGeometryConverter",
    "SplineGeometryConverter",
    "HatchGeometryConverter",
    "SolidGeometryConverter",
    "InsertGeometryConverter",
    "LeaderGeometryConverter",
    "DimensionGeometryConverter",
    "RayGeometryConverter",
    "default_converters",
    "create_default_registry",
]


def default_converters(
    registry: GeometryConverterRegistry,
    *,
    blocks: Mapping[str, BlockDefinition] | None = None,
    interpolate_bulges: bool = False,
) -> list[GeometryConverter]:
    return [
        CircleGeometryConverter(),
        PolylineGeometryConverter(interpolate_bulges=interpolate_bulges),
        TextGeometryConverter(),
        PointGeometryConverter(),
        SplineGeometryConverter(),
        HatchGeometryConverter(),
        SolidGeometryConverter(),
        InsertGeometryConverter(registry if blocks is not None else None, blocks),
        LeaderGeometryConverter(),
        DimensionGeometryConverter(),
        RayGeometryConverter(),
    ]


def create_default_registry(
    blocks: Mapping[str, BlockDefinition] | None = None,
    *,
    interpolate_bulges: bool = False,
) -> GeometryConverterRegistry:
    """Registry holding every built-in converter.

    Passing ``blocks`` enables INSERT expansion against those definitions.
    """
    registry = GeometryConverterRegistry()
    registry.initialize(
        lambda reg: default_converters(reg, blocks=blocks, interpolate_bulges=interpolate_bulges)
    )
    return registry
