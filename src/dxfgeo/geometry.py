from __future__ import annotations

from typing import Any, Iterable, Sequence

from .entity import is_finite_number
from .errors import InvalidGeometryError

Position = list[float]
Bounds = tuple[float, float, float, float]

GEOMETRY_TYPES = (
    "Point",
    "LineString",
    "Polygon",
    "MultiPoint",
    "MultiLineString",
    "MultiPolygon",
    "GeometryCollection",
)


def _position(value: Any) -> Position | None:
    if not isinstance(value, (list, tuple)) or len(value) not in (2, 3):
        return None
    if not all(is_finite_number(component) for component in value):
        return None
    return [float(component) for component in value]


def _positions(values: Any, geometry_type: str, what: str) -> list[Position]:
    if not isinstance(values, (list, tuple)):
        raise InvalidGeometryError(f"Invalid {geometry_type} {what}: not a sequence", geometry_type)
    out: list[Position] = []
    for index, value in enumerate(values):
        position = _position(value)
        if position is None:
            raise InvalidGeometryError(
                f"Invalid {geometry_type} coordinate at index {index}: {value!r}",
                geometry_type,
                {"index": index},
            )
        out.append(position)
    return out


def _linear_ring(ring: Any, geometry_type: str, index: int) -> list[Position]:
    positions = _positions(ring, geometry_type, f"ring {index}")
    if len(positions) < 4:
        raise InvalidGeometryError(
            f"Invalid ring at index {index}: needs at least 4 positions, got {len(positions)}",
            geometry_type,
            {"ring": index},
        )
    first, last = positions[0], positions[-1]
    if first[0] != last[0] or first[1] != last[1]:
        raise InvalidGeometryError(f"Invalid ring at index {index}: ring is not closed", geometry_type, {"ring": index})
    return positions


def create_point_geometry(x: float, y: float, z: float | None = None) -> dict[str, Any]:
    values = (x, y) if z is None else (x, y, z)
    if not all(is_finite_number(v) for v in values):
        raise InvalidGeometryError(f"Invalid point coordinates: {x}, {y}, {z}", "Point")
    return {"type": "Point", "coordinates": [float(v) for v in values]}


def create_line_string_geometry(coordinates: Sequence[Sequence[float]]) -> dict[str, Any]:
    positions = _positions(coordinates, "LineString", "coordinates")
    if len(positions) < 2:
        raise InvalidGeometryError("LineString must have at least 2 coordinates", "LineString")
    return {"type": "LineString", "coordinates": positions}


def create_polygon_geometry(rings: Sequence[Sequence[Sequence[float]]]) -> dict[str, Any]:
    if not isinstance(rings, (list, tuple)) or len(rings) == 0:
        raise InvalidGeometryError("Invalid Polygon rings array", "Polygon")
    return {
        "type": "Polygon",
        "coordinates": [_linear_ring(ring, "Polygon", i) for i, ring in enumerate(rings)],
    }


def create_multi_point_geometry(points: Sequence[Sequence[float]]) -> dict[str, Any]:
    positions = _positions(points, "MultiPoint", "coordinates")
    if not positions:
        raise InvalidGeometryError("MultiPoint must have at least 1 coordinate", "MultiPoint")
    return {"type": "MultiPoint", "coordinates": positions}


def create_multi_line_string_geometry(lines: Sequence[Sequence[Sequence[float]]]) -> dict[str, Any]:
    if not isinstance(lines, (list, tuple)) or len(lines) == 0:
        raise InvalidGeometryError("Invalid MultiLineString lines array", "MultiLineString")
    out: list[list[Position]] = []
    for index, line in enumerate(lines):
        positions = _positions(line, "MultiLineString", f"line {index}")
        if len(positions) < 2:
            raise InvalidGeometryError(f"Invalid line at index {index}", "MultiLineString", {"line": index})
        out.append(positions)
    return {"type": "MultiLineString", "coordinates": out}


def create_multi_polygon_geometry(polygons: Sequence[Sequence[Sequence[Sequence[float]]]]) -> dict[str, Any]:
    if not isinstance(polygons, (list, tuple)) or len(polygons) == 0:
        raise InvalidGeometryError("Invalid MultiPolygon polygons array", "MultiPolygon")
    out: list[list[list[Position]]] = []
    for index, rings in enumerate(polygons):
        if not isinstance(rings, (list, tuple)) or len(rings) == 0:
            raise InvalidGeometryError(f"Invalid polygon at index {index}", "MultiPolygon", {"polygon": index})
        out.append([_linear_ring(ring, "MultiPolygon", j) for j, ring in enumerate(rings)])
    return {"type": "MultiPolygon", "coordinates": out}


def create_geometry_collection(geometries: Iterable[dict[str, Any]]) -> dict[str, Any]:
    members = list(geometries)
    if not members:
        raise InvalidGeometryError("GeometryCollection must have at least 1 geometry", "GeometryCollection")
    for index, member in enumerate(members):
        if not isinstance(member, dict) or member.get("type") not in GEOMETRY_TYPES:
            raise InvalidGeometryError(
                f"Invalid geometry at index {index}", "GeometryCollection", {"index": index}
            )
    return {"type": "GeometryCollection", "geometries": members}


def collect_geometries(geometries: list[dict[str, Any]]) -> dict[str, Any] | None:
    if not geometries:
        return None
    if len(geometries) == 1:
        return geometries[0]
    return create_geometry_collection(geometries)


def create_feature(geometry: dict[str, Any], properties: dict[str, Any] | None = None) -> dict[str, Any]:
    if not isinstance(geometry, dict) or geometry.get("type") not in GEOMETRY_TYPES:
        raise InvalidGeometryError("Invalid geometry: missing type", "unknown")
    if geometry["type"] == "GeometryCollection":
        if not isinstance(geometry.get("geometries"), list):
            raise InvalidGeometryError("Invalid GeometryCollection: missing geometries", "GeometryCollection")
    elif "coordinates" not in geometry:
        raise InvalidGeometryError("Invalid geometry: missing coordinates", geometry["type"])
    return {"type": "Feature", "geometry": geometry, "properties": dict(properties or {})}


def feature_collection(features: Iterable[dict[str, Any]]) -> dict[str, Any]:
    return {"type": "FeatureCollection", "features": list(features)}


def iter_positions(geometry: dict[str, Any]) -> Iterable[Position]:
    geometry_type = geometry.get("type")
    if geometry_type == "GeometryCollection":
        for member in geometry.get("geometries", []):
            yield from iter_positions(member)
        return
    coordinates = geometry.get("coordinates")
    if geometry_type == "Point":
        yield coordinates
    elif geometry_type in {"LineString", "MultiPoint"}:
        yield from coordinates
    elif geometry_type in {"Polygon", "MultiLineString"}:
        for part in coordinates:
            yield from part
    elif geometry_type == "MultiPolygon":
        for polygon in coordinates:
            for ring in polygon:
                yield from ring


def geometry_bounds(geometry: dict[str, Any]) -> Bounds | None:
    min_x = min_y = float("inf")
    max_x = max_y = float("-inf")
    found = False
    for position in iter_positions(geometry):
        found = True
        min_x = min(min_x, position[0])
        min_y = min(min_y, position[1])
        max_x = max(max_x, position[0])
        max_y = max(max_y, position[1])
    if not found:
        return None
    return (min_x, min_y, max_x, max_y)


def merge_bounds(a: Bounds | None, b: Bounds | None) -> Bounds | None:
    if a is None:
        return b
    if b is None:
        return a
    return (min(a[0], b[0]), min(a[1], b[1]), max(a[2], b[2]), max(a[3], b[3]))
