from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..entity import BlockDefinition, Entity
from ..errors import ErrorReporter
from ..geometry import collect_geometries
from ..transform import array_offsets, insert_transform, matrix_rows, transform_geometry
from .base import GeometryConverter

if TYPE_CHECKING:
    from .base import GeometryConverterRegistry


class InsertGeometryConverter(GeometryConverter):
    """INSERT (block reference), including rectangular array copies.

    Without block definitions only the per-cell transforms are computed and a
    ``BLOCK_CONVERSION_PENDING`` warning is reported for each cell.
    """

    entity_types = ("INSERT",)

    MAX_NESTING_DEPTH = 16

    def __init__(
        self,
        registry: "GeometryConverterRegistry | None" = None,
        blocks: Mapping[str, BlockDefinition] | None = None,
    ):
        self._registry = registry
        self._blocks = dict(blocks) if blocks is not None else None

    def convert(self, entity: Entity, reporter: ErrorReporter) -> dict[str, Any] | None:
        return self._convert(entity, reporter, ())

    def _convert(self, entity: Entity, reporter: ErrorReporter, chain: tuple[str, ...]) -> dict[str, Any] | None:
        # chain holds the names of the blocks currently being expanded, outermost first
        info = entity.info()
        insert = self.validate_point(entity.get("insert"), reporter, info, "insert position")
        if insert is None:
            return None

        scales = []
        for key, context in (("xscale", "x scale"), ("yscale", "y scale"), ("zscale", "z scale")):
            if not self.validate_optional_number(entity, key, reporter, info, context, nonzero=True):
                return None
            scales.append(float(entity.get(key)) if entity.has(key) else 1.0)

        checks = (
            ("rotation", "rotation", {}),
            ("column_count", "column count", {"minimum": 1}),
            ("row_count", "row count", {"minimum": 1}),
            ("column_spacing", "column spacing", {}),
            ("row_spacing", "row spacing", {}),
        )
        for key, context, limits in checks:
            if not self.validate_optional_number(entity, key, reporter, info, context, **limits):
                return None

        rotation = float(entity.get("rotation") or 0.0)
        cells = array_offsets(
            int(entity.get("column_count") or 1),
            int(entity.get("row_count") or 1),
            float(entity.get("column_spacing") or 0.0),
            float(entity.get("row_spacing") or 0.0),
        )
        name = entity.get("name")

        registry = self._registry
        if registry is None or self._blocks is None:
            for row, col, dx, dy in cells:
                transform = insert_transform(insert, rotation=rotation, scale=tuple(scales), offset=(dx, dy))
                reporter.add_warning(
                    "Block conversion not implemented yet",
                    "BLOCK_CONVERSION_PENDING",
                    {**info, "block_name": name, "row": row, "column": col, "transform": matrix_rows(transform)},
                )
            return None

        block = self._blocks.get(name) if isinstance(name, str) else None
        if block is None:
            reporter.add_warning(f"Unknown block: {name!r}", "UNKNOWN_BLOCK", {**info, "block_name": name})
            return None
        if name in chain:
            reporter.add_warning(
                f"Block reference cycle through {name!r}",
                "BLOCK_REFERENCE_CYCLE",
                {**info, "block_name": name, "chain": list(chain)},
            )
            return None
        if len(chain) >= self.MAX_NESTING_DEPTH:
            reporter.add_warning(
                "Block nesting too deep", "BLOCK_NESTING_TOO_DEEP", {**info, "block_name": name, "depth": len(chain)}
            )
            return None

        children = self._block_geometries(block, registry, reporter, chain + (name,))
        if not children:
            reporter.add_warning("Block has no convertible entities", "BLOCK_EMPTY", {**info, "block_name": name})
            return None

        geometries = []
        for _row, _col, dx, dy in cells:
            transform = insert_transform(
                insert, rotation=rotation, scale=tuple(scales), offset=(dx, dy), base_point=block.base_point
            )
            geometries.extend(transform_geometry(child, transform) for child in children)
        return collect_geometries(geometries)

    def _block_geometries(
        self,
        block: BlockDefinition,
        registry: "GeometryConverterRegistry",
        reporter: ErrorReporter,
        chain: tuple[str, ...],
    ) -> list[dict[str, Any]]:
        out: list[dict[str, Any]] = []
        for child in block.entities:
            if child.dxftype == "INSERT":
                geometry = self._convert(child, reporter, chain)
            else:
                converter = registry.find_converter(child.dxftype)
                if converter is None:
                    reporter.add_warning(
                        f"No geometry converter found for entity type: {child.dxftype}",
                        "UNSUPPORTED_ENTITY_TYPE",
                        {**child.info(), "block_name": block.name},
                    )
                    continue
                geometry = converter.convert(child, reporter)
            if geometry is None:
                continue
            if geometry["type"] == "GeometryCollection":
                out.extend(geometry["geometries"])
            else:
                out.append(geometry)
        return out
