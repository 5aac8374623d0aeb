from __future__ import annotations

from dxfgeo.converters import SplineGeometryConverter
from tests._geo_helpers import convert, make_entity

CONTROL_POINTS = [(0, 0), (1, 2), (3, 2), (4, 0)]


def test_spline_is_linear_approximation_with_warning() -> None:
    geometry, reporter = convert(
        SplineGeometryConverter(),
        make_entity(
            "SPLINE",
            degree=3,
            control_points=CONTROL_POINTS,
            knots=[0, 0, 0, 0, 1, 1, 1, 1],
            weights=[1, 1, 1, 1],
        ),
    )

    assert geometry == {
        "type": "LineString",
        "coordinates": [[0.0, 0.0], [1.0, 2.0], [3.0, 2.0], [4.0, 0.0]],
    }
    assert reporter.codes() == ["SPLINE_LINEAR_APPROXIMATION"]
    context = reporter.warnings[0].context
    assert context["has_knots"] is True
    assert context["control_point_count"] == 4


def test_closed_spline_becomes_polygon() -> None:
    geometry, _ = convert(
        SplineGeometryConverter(), make_entity("SPLINE", degree=2, control_points=CONTROL_POINTS, closed=True)
    )
    assert geometry["type"] == "Polygon"
    ring = geometry["coordinates"][0]
    assert len(ring) == 5
    assert ring[0] == ring[-1]


def test_degree_below_one_is_rejected() -> None:
    geometry, reporter = convert(
        SplineGeometryConverter(), make_entity("SPLINE", degree=0, control_points=CONTROL_POINTS)
    )
    assert geometry is None
    assert reporter.codes() == ["INVALID_NUMBER_RANGE"]


def test_single_control_point_is_rejected() -> None:
    geometry, reporter = convert(
        SplineGeometryConverter(), make_entity("SPLINE", degree=1, control_points=[(0, 0)])
    )
    assert geometry is None
    assert reporter.codes() == ["INVALID_ARRAY_LENGTH"]


def test_short_knot_vector_is_rejected() -> None:
    geometry, reporter = convert(
        SplineGeometryConverter(),
        make_entity("SPLINE", degree=3, control_points=CONTROL_POINTS, knots=[0, 0, 1, 1]),
    )
    assert geometry is None
    assert reporter.codes() == ["INVALID_ARRAY_LENGTH"]


def test_zero_weight_is_rejected() -> None:
    geometry, reporter = convert(
        SplineGeometryConverter(),
        make_entity("SPLINE", degree=3, control_points=CONTROL_POINTS, weights=[1, 0, 1, 1]),
    )
    assert geometry is None
    assert reporter.codes() == ["INVALID_NUMBER_ZERO"]
