from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

Point2D = tuple[float, float]
Point3D = tuple[float, float, float]

STYLE_FIELDS = ("color", "true_color", "linetype", "lineweight", "visible")


@dataclass(frozen=True)
class Entity:
    dxftype: str
    handle: str | None = None
    dxf: dict[str, Any] = field(default_factory=dict)

    @property
    def layer(self) -> str:
        layer = self.dxf.get("layer")
        if isinstance(layer, str) and layer:
            return layer
        return "0"

    def get(self, key: str, default: Any = None) -> Any:
        return self.dxf.get(key, default)

    def has(self, key: str) -> bool:
        return key in self.dxf and self.dxf[key] is not None

    def info(self) -> dict[str, Any]:
        return {
            "type": self.dxftype,
            "handle": self.handle or "unknown",
            "layer": self.layer,
        }

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> "Entity":
        dxftype = str(record.get("type") or "").strip().upper()
        handle = record.get("handle")
        dxf = {key: value for key, value in record.items() if key not in {"type", "handle"}}
        return cls(dxftype=dxftype, handle=None if handle is None else str(handle), dxf=dxf)


@dataclass(frozen=True)
class BlockDefinition:
    name: str
    entities: tuple[Entity, ...] = ()
    base_point: Point3D = (0.0, 0.0, 0.0)


def is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def point_components(value: Any) -> tuple[Any, Any, Any] | None:
    """Split a point-like value into raw ``(x, y, z)``; ``z`` is None when absent."""
    if isinstance(value, Mapping):
        if "x" not in value or "y" not in value:
            return None
        return value["x"], value["y"], value.get("z")
    if isinstance(value, (list, tuple)):
        if len(value) >= 3:
            return value[0], value[1], value[2]
        if len(value) == 2:
            return value[0], value[1], None
    return None


def as_point3(value: Any) -> Point3D | None:
    parts = point_components(value)
    if parts is None:
        return None
    x, y, z = parts
    if z is None:
        z = 0.0
    if not (is_finite_number(x) and is_finite_number(y) and is_finite_number(z)):
        return None
    return (float(x), float(y), float(z))


def has_z(value: Any) -> bool:
    parts = point_components(value)
    return parts is not None and parts[2] is not None
