"""4x4 homogeneous transforms used to place block references.

Matrices are ``ezdxf.math.Matrix44`` instances, which use the row-vector
convention. ``compose`` takes its arguments in the usual mathematical
order, so ``compose(T, R, S)`` applies ``S`` first and ``T`` last. Every
function returns a new matrix; none mutates its input.
"""

from __future__ import annotations

import math
from typing import Any, Sequence

from ezdxf.math import Matrix44

from .entity import Point3D, is_finite_number


def identity_matrix() -> Matrix44:
    return Matrix44()


def translation_matrix(x: float, y: float, z: float = 0.0) -> Matrix44:
    return Matrix44.translate(float(x), float(y), float(z))


def rotation_matrix(angle_deg: float) -> Matrix44:
    """Rotation about the z axis, angle in degrees (counter-clockwise)."""
    return Matrix44.z_rotate(math.radians(float(angle_deg)))


def scale_matrix(sx: float, sy: float | None = None, sz: float | None = None) -> Matrix44:
    sx = float(sx)
    sy = sx if sy is None else float(sy)
    sz = sx if sz is None else float(sz)
    return Matrix44.scale(sx, sy, sz)


def compose(*matrices: Matrix44) -> Matrix44:
    if not matrices:
        return identity_matrix()
    return Matrix44.chain(*reversed(matrices))


def matrix_rows(matrix: Matrix44) -> list[list[float]]:
    return [list(matrix.get_row(i)) for i in range(4)]


def insert_transform(
    insert: Point3D,
    *,
    rotation: float = 0.0,
    scale: Point3D = (1.0, 1.0, 1.0),
    offset: tuple[float, float] = (0.0, 0.0),
    base_point: Point3D = (0.0, 0.0, 0.0),
) -> Matrix44:
    # Array offsets follow the rotated block axes but are not scaled.
    return compose(
        translation_matrix(*insert),
        rotation_matrix(rotation),
        translation_matrix(offset[0], offset[1], 0.0),
        scale_matrix(*scale),
        translation_matrix(-base_point[0], -base_point[1], -base_point[2]),
    )


def array_offsets(
    column_count: int = 1,
    row_count: int = 1,
    column_spacing: float = 0.0,
    row_spacing: float = 0.0,
) -> list[tuple[int, int, float, float]]:
    cells = []
    for row in range(max(1, int(row_count))):
        for col in range(max(1, int(column_count))):
            cells.append((row, col, col * column_spacing, row * row_spacing))
    return cells


def transform_point(matrix: Matrix44, point: Sequence[float]) -> Point3D | None:
    if len(point) < 2 or not all(is_finite_number(v) for v in point[:3]):
        return None
    z = point[2] if len(point) > 2 else 0.0
    result = matrix.transform((float(point[0]), float(point[1]), float(z)))
    if not (math.isfinite(result.x) and math.isfinite(result.y) and math.isfinite(result.z)):
        return None
    return (result.x, result.y, result.z)


def _transform_position(matrix: Matrix44, position: list[float]) -> list[float]:
    point = transform_point(matrix, position)
    if point is None:
        raise ValueError(f"transform produced a non-finite position from {position!r}")
    if len(position) > 2:
        return [point[0], point[1], point[2]]
    return [point[0], point[1]]


def transform_geometry(geometry: dict[str, Any], matrix: Matrix44) -> dict[str, Any]:
    geometry_type = geometry["type"]
    if geometry_type == "GeometryCollection":
        return {
            "type": geometry_type,
            "geometries": [transform_geometry(member, matrix) for member in geometry["geometries"]],
        }
    coordinates = geometry["coordinates"]
    if geometry_type == "Point":
        moved: Any = _transform_position(matrix, coordinates)
    elif geometry_type in {"LineString", "MultiPoint"}:
        moved = [_transform_position(matrix, p) for p in coordinates]
    elif geometry_type in {"Polygon", "MultiLineString"}:
        moved = [[_transform_position(matrix, p) for p in part] for part in coordinates]
    elif geometry_type == "MultiPolygon":
        moved = [[[_transform_position(matrix, p) for p in ring] for ring in polygon] for polygon in coordinates]
    else:
        raise ValueError(f"unsupported geometry type: {geometry_type}")
    return {"type": geometry_type, "coordinates": moved}
