from __future__ import annotations

from dxfgeo.converters import InsertGeometryConverter, create_default_registry
from dxfgeo.entity import BlockDefinition
from tests._geo_helpers import close_to, convert, make_entity

SEGMENT = make_entity("LINE", handle="B1", start=(0, 0), end=(1, 0))


def _insert_converter(blocks: dict[str, BlockDefinition]) -> InsertGeometryConverter:
    converter = create_default_registry(blocks).find_converter("INSERT")
    assert isinstance(converter, InsertGeometryConverter)
    return converter


def test_without_blocks_reports_pending_per_cell() -> None:
    geometry, reporter = convert(
        InsertGeometryConverter(),
        make_entity(
            "INSERT",
            name="DOOR",
            insert=(10, 0),
            column_count=2,
            row_count=3,
            column_spacing=5,
            row_spacing=5,
        ),
    )

    assert geometry is None
    assert reporter.codes() == ["BLOCK_CONVERSION_PENDING"] * 6
    last = reporter.warnings[-1].context
    assert (last["row"], last["column"]) == (2, 1)
    assert last["block_name"] == "DOOR"
    # translation lives in the last row of the matrix
    assert close_to(last["transform"][3], (15, 10, 0, 1))


def test_default_registry_keeps_stub_without_blocks() -> None:
    converter = create_default_registry().find_converter("INSERT")
    geometry, reporter = convert(converter, make_entity("INSERT", name="X", insert=(0, 0)))
    assert geometry is None
    assert reporter.codes() == ["BLOCK_CONVERSION_PENDING"]


def test_zero_scale_is_rejected() -> None:
    geometry, reporter = convert(
        InsertGeometryConverter(), make_entity("INSERT", name="X", insert=(0, 0), xscale=0)
    )
    assert geometry is None
    assert reporter.codes() == ["INVALID_NUMBER_ZERO"]


def test_zero_column_count_is_rejected() -> None:
    geometry, reporter = convert(
        InsertGeometryConverter(), make_entity("INSERT", name="X", insert=(0, 0), column_count=0)
    )
    assert geometry is None
    assert reporter.codes() == ["INVALID_NUMBER_RANGE"]


def test_block_is_expanded_with_transform() -> None:
    blocks = {"TICK": BlockDefinition("TICK", (SEGMENT,), base_point=(0, 0, 0))}
    geometry, reporter = convert(
        _insert_converter(blocks),
        make_entity("INSERT", name="TICK", insert=(5, 5), rotation=90, xscale=2, yscale=2),
    )

    assert len(reporter) == 0
    assert geometry["type"] == "LineString"
    start, end = geometry["coordinates"]
    assert close_to(start, (5, 5))
    assert close_to(end, (5, 7))


def test_array_cells_become_collection() -> None:
    blocks = {"TICK": BlockDefinition("TICK", (SEGMENT,))}
    geometry, _ = convert(
        _insert_converter(blocks),
        make_entity("INSERT", name="TICK", insert=(0, 0), column_count=3, column_spacing=10),
    )
    assert geometry["type"] == "GeometryCollection"
    starts = [member["coordinates"][0] for member in geometry["geometries"]]
    assert [round(s[0]) for s in starts] == [0, 10, 20]


def test_nested_blocks_are_flattened() -> None:
    inner = BlockDefinition("INNER", (SEGMENT, make_entity("POINT", location=(0, 1))))
    outer = BlockDefinition("OUTER", (make_entity("INSERT", name="INNER", insert=(100, 0)),))
    geometry, _ = convert(
        _insert_converter({"INNER": inner, "OUTER": outer}),
        make_entity("INSERT", name="OUTER", insert=(0, 100)),
    )

    assert geometry["type"] == "GeometryCollection"
    assert [member["type"] for member in geometry["geometries"]] == ["LineString", "Point"]
    assert close_to(geometry["geometries"][1]["coordinates"], (100, 101))


def test_unknown_block() -> None:
    geometry, reporter = convert(_insert_converter({}), make_entity("INSERT", name="MISSING", insert=(0, 0)))
    assert geometry is None
    assert reporter.codes() == ["UNKNOWN_BLOCK"]


def test_self_referencing_block_reports_each_cycle_once() -> None:
    loop = BlockDefinition(
        "LOOP",
        (
            SEGMENT,
            make_entity("INSERT", handle="C1", name="LOOP", insert=(0, 0)),
            make_entity("INSERT", handle="C2", name="LOOP", insert=(1, 0)),
        ),
    )
    geometry, reporter = convert(_insert_converter({"LOOP": loop}), make_entity("INSERT", name="LOOP", insert=(0, 0)))

    assert geometry == {"type": "LineString", "coordinates": [[0.0, 0.0], [1.0, 0.0]]}
    assert reporter.codes() == ["BLOCK_REFERENCE_CYCLE", "BLOCK_REFERENCE_CYCLE"]
    assert [w.context["handle"] for w in reporter.warnings] == ["C1", "C2"]
    assert reporter.warnings[0].context["chain"] == ["LOOP"]


def test_indirect_cycle_is_detected() -> None:
    first = BlockDefinition("A", (make_entity("INSERT", name="B", insert=(0, 0)),))
    second = BlockDefinition("B", (make_entity("INSERT", name="A", insert=(0, 0)),))
    geometry, reporter = convert(
        _insert_converter({"A": first, "B": second}), make_entity("INSERT", name="A", insert=(0, 0))
    )

    assert geometry is None
    assert reporter.codes() == ["BLOCK_REFERENCE_CYCLE", "BLOCK_EMPTY", "BLOCK_EMPTY"]


def test_deep_acyclic_nesting_stops_at_depth_limit() -> None:
    depth = InsertGeometryConverter.MAX_NESTING_DEPTH + 2
    blocks = {
        f"B{i}": BlockDefinition(f"B{i}", (make_entity("INSERT", name=f"B{i + 1}", insert=(0, 0)),))
        for i in range(depth)
    }
    blocks[f"B{depth}"] = BlockDefinition(f"B{depth}", (SEGMENT,))
    geometry, reporter = convert(_insert_converter(blocks), make_entity("INSERT", name="B0", insert=(0, 0)))

    assert geometry is None
    assert reporter.codes().count("BLOCK_NESTING_TOO_DEEP") == 1
    assert "BLOCK_REFERENCE_CYCLE" not in reporter.codes()


def test_block_children_without_converter_are_reported() -> None:
    blocks = {"ODD": BlockDefinition("ODD", (make_entity("WIPEOUT"), SEGMENT))}
    geometry, reporter = convert(_insert_converter(blocks), make_entity("INSERT", name="ODD", insert=(0, 0)))
    assert geometry["type"] == "LineString"
    assert reporter.codes() == ["UNSUPPORTED_ENTITY_TYPE"]
