from __future__ import annotations

import math

import pytest

from dxfgeo.transform import (
    array_offsets,
    compose,
    identity_matrix,
    insert_transform,
    matrix_rows,
    rotation_matrix,
    scale_matrix,
    transform_geometry,
    transform_point,
    translation_matrix,
)
from tests._geo_helpers import close_to


def test_identity_leaves_points_alone() -> None:
    assert close_to(transform_point(identity_matrix(), (3, 4)), (3, 4, 0))


def test_translation_rotation_scale() -> None:
    assert close_to(transform_point(translation_matrix(1, 2, 3), (1, 1, 1)), (2, 3, 4))
    assert close_to(transform_point(rotation_matrix(90), (1, 0)), (0, 1, 0))
    assert close_to(transform_point(scale_matrix(2, 3), (1, 1, 1)), (2, 3, 2))


def test_compose_applies_rightmost_first() -> None:
    # scale, then rotate, then translate
    matrix = compose(translation_matrix(10, 0), rotation_matrix(90), scale_matrix(2))
    assert close_to(transform_point(matrix, (1, 0)), (10, 2, 0))
    assert matrix_rows(compose()) == matrix_rows(identity_matrix())


def test_compose_returns_new_matrix() -> None:
    translate = translation_matrix(1, 0)
    before = matrix_rows(translate)
    compose(translate, rotation_matrix(45))
    assert matrix_rows(translate) == before


def test_insert_transform_moves_base_point_to_insert() -> None:
    matrix = insert_transform((5, 5, 0), rotation=90, scale=(2, 2, 1), base_point=(1, 1, 0))
    assert close_to(transform_point(matrix, (1, 1, 0)), (5, 5, 0))
    assert close_to(transform_point(matrix, (2, 1, 0)), (5, 7, 0))


def test_insert_transform_offset_is_rotated_not_scaled() -> None:
    matrix = insert_transform((0, 0, 0), rotation=90, scale=(3, 3, 1), offset=(10, 0))
    assert close_to(transform_point(matrix, (0, 0, 0)), (0, 10, 0))


def test_array_offsets_enumerate_rows_then_columns() -> None:
    assert array_offsets(2, 2, 5.0, 7.0) == [
        (0, 0, 0.0, 0.0),
        (0, 1, 5.0, 0.0),
        (1, 0, 0.0, 7.0),
        (1, 1, 5.0, 7.0),
    ]
    assert array_offsets(0, 0) == [(0, 0, 0.0, 0.0)]


def test_transform_point_rejects_bad_input() -> None:
    assert transform_point(identity_matrix(), (math.nan, 0)) is None
    assert transform_point(identity_matrix(), (1,)) is None


def test_transform_geometry_keeps_dimension() -> None:
    polygon = {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]}
    moved = transform_geometry(polygon, translation_matrix(1, 1, 5))
    assert moved["coordinates"][0][0] == [1.0, 1.0]
    point3 = transform_geometry({"type": "Point", "coordinates": [0, 0, 1]}, translation_matrix(0, 0, 5))
    assert point3["coordinates"] == [0.0, 0.0, 6.0]
    assert polygon["coordinates"][0][0] == [0, 0]


def test_transform_geometry_recurses_into_collections() -> None:
    collection = {
        "type": "GeometryCollection",
        "geometries": [{"type": "Point", "coordinates": [1, 0]}],
    }
    moved = transform_geometry(collection, rotation_matrix(180))
    assert close_to(moved["geometries"][0]["coordinates"], (-1, 0))


def test_transform_geometry_rejects_unknown_type() -> None:
    with pytest.raises(ValueError):
        transform_geometry({"type": "Circle", "coordinates": []}, identity_matrix())
