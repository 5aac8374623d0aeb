from __future__ import annotations

import math
from typing import Any, Sequence

from dxfgeo.entity import Entity
from dxfgeo.errors import ErrorReporter


def make_entity(dxftype: str, handle: str | None = "1A", **fields: Any) -> Entity:
    return Entity(dxftype=dxftype, handle=handle, dxf=dict(fields))


def convert(converter: Any, entity: Entity) -> tuple[dict[str, Any] | None, ErrorReporter]:
    reporter = ErrorReporter()
    return converter.convert(entity, reporter), reporter


def close_to(actual: Sequence[float], expected: Sequence[float], tol: float = 1.0e-9) -> bool:
    if len(actual) != len(expected):
        return False
    return all(math.isclose(a, e, abs_tol=tol) for a, e in zip(actual, expected))


def ring_is_closed(ring: Sequence[Sequence[float]]) -> bool:
    return len(ring) >= 4 and ring[0][0] == ring[-1][0] and ring[0][1] == ring[-1][1]
