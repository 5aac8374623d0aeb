from __future__ import annotations

import math

import pytest

from dxfgeo.converters import CircleGeometryConverter
from tests._geo_helpers import close_to, convert, make_entity, ring_is_closed


def test_circle_becomes_closed_ring_of_65_points() -> None:
    geometry, reporter = convert(
        CircleGeometryConverter(), make_entity("CIRCLE", center={"x": 0, "y": 0}, radius=10)
    )

    assert len(reporter) == 0
    assert geometry["type"] == "Polygon"
    ring = geometry["coordinates"][0]
    assert len(ring) == 65
    assert ring_is_closed(ring)
    assert ring[0] == [10.0, 0.0]
    assert ring[-1] == [10.0, 0.0]
    for x, y in ring:
        assert math.isclose(x * x + y * y, 100.0, rel_tol=1.0e-9)


@pytest.mark.parametrize(
    "fields",
    [
        {"center": (0, 0), "radius": 0},
        {"center": (0, 0), "radius": math.inf},
        {"center": (math.nan, 0), "radius": 1},
        {"center": None, "radius": 1},
        {"center": (0, 0)},
    ],
)
def test_invalid_circle_reports_exactly_one_warning(fields) -> None:
    geometry, reporter = convert(CircleGeometryConverter(), make_entity("CIRCLE", **fields))

    assert geometry is None
    assert reporter.codes() == ["INVALID_CIRCLE_PARAMETERS"]


def test_arc_quarter_turn() -> None:
    geometry, reporter = convert(
        CircleGeometryConverter(),
        make_entity("ARC", center={"x": 0, "y": 0}, radius=5, start_angle=0, end_angle=90),
    )

    assert len(reporter) == 0
    assert geometry["type"] == "LineString"
    coordinates = geometry["coordinates"]
    assert len(coordinates) == 33
    assert close_to(coordinates[0], (5, 0))
    assert close_to(coordinates[-1], (0, 5))


def test_arc_end_before_start_wraps_forward() -> None:
    geometry, _ = convert(
        CircleGeometryConverter(),
        make_entity("ARC", center=(0, 0), radius=1, start_angle=270, end_angle=90),
    )
    coordinates = geometry["coordinates"]
    assert close_to(coordinates[0], (0, -1))
    # halfway through a 180 degree sweep starting at 270
    assert close_to(coordinates[16], (1, 0))
    assert close_to(coordinates[-1], (0, 1))


def test_arc_zero_radius_is_rejected() -> None:
    geometry, reporter = convert(
        CircleGeometryConverter(),
        make_entity("ARC", center=(0, 0), radius=0, start_angle=0, end_angle=90),
    )
    assert geometry is None
    assert reporter.codes() == ["INVALID_ARC_PARAMETERS"]


def test_ellipse_uses_radians_and_rotation() -> None:
    geometry, reporter = convert(
        CircleGeometryConverter(),
        make_entity(
            "ELLIPSE",
            center=(1, 1),
            major_axis=(0, 2),
            ratio=0.5,
            start_param=0.0,
            end_param=math.pi,
        ),
    )

    assert len(reporter) == 0
    coordinates = geometry["coordinates"]
    assert len(coordinates) == 65
    assert close_to(coordinates[0], (1, 3))
    assert close_to(coordinates[32], (0, 1))
    assert close_to(coordinates[-1], (1, -1))


def test_full_ellipse_defaults() -> None:
    geometry, _ = convert(
        CircleGeometryConverter(), make_entity("ELLIPSE", center=(0, 0), major_axis=(4, 0), ratio=0.25)
    )
    coordinates = geometry["coordinates"]
    assert close_to(coordinates[0], (4, 0))
    assert close_to(coordinates[-1], (4, 0))


def test_ellipse_zero_axis() -> None:
    geometry, reporter = convert(
        CircleGeometryConverter(), make_entity("ELLIPSE", center=(0, 0), major_axis=(0, 0), ratio=0.5)
    )
    assert geometry is None
    assert reporter.codes() == ["INVALID_ELLIPSE_AXIS"]


def test_conversion_is_repeatable() -> None:
    converter = CircleGeometryConverter()
    entity = make_entity("CIRCLE", center=(3, -2), radius=1.5)
    first, first_reporter = convert(converter, entity)
    second, second_reporter = convert(converter, entity)
    assert first == second
    assert first_reporter.messages == second_reporter.messages
