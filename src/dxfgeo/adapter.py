"""Map in-memory ezdxf documents onto the plain records the converters consume."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from ezdxf.document import Drawing
from ezdxf.entities import DXFGraphic

from .entity import BlockDefinition, Entity
from .features import LayerStyle

logger = logging.getLogger(__name__)

# DIMENSION dimtype & 7
_DIMENSION_TYPES = {
    0: "LINEAR",
    1: "ALIGNED",
    2: "ANGULAR",
    3: "DIAMETER",
    4: "RADIUS",
    5: "ANGULAR",
    6: "ORDINATE",
}


def _point(value: Any) -> tuple[float, ...] | None:
    if value is None:
        return None
    return tuple(float(v) for v in value)


def _points(values: Iterable[Any]) -> list[tuple[float, ...]]:
    return [tuple(float(v) for v in value) for value in values]


def _style(entity: DXFGraphic) -> dict[str, Any]:
    dxf = entity.dxf
    style = {
        "layer": dxf.get("layer", "0"),
        "color": dxf.get("color"),
        "true_color": dxf.get("true_color"),
        "linetype": dxf.get("linetype"),
        "lineweight": dxf.get("lineweight"),
    }
    # unset means "inherit from the layer"
    invisible = dxf.get("invisible")
    if invisible is not None:
        style["visible"] = not bool(invisible)
    return style


def _optional(entity: DXFGraphic, *names: str) -> dict[str, Any]:
    return {name: entity.dxf.get(name) for name in names if entity.dxf.get(name) is not None}


def _hatch_paths(hatch: Any) -> list[dict[str, Any]]:
    paths: list[dict[str, Any]] = []
    for path in hatch.paths:
        kind = type(path).__name__
        if kind == "PolylinePath":
            vertices = [(float(v[0]), float(v[1])) for v in path.vertices]
            edges = [
                {"type": "LINE", "start": a, "end": b} for a, b in zip(vertices, vertices[1:])
            ]
            paths.append({"edges": edges, "closed": bool(path.is_closed)})
        elif kind == "EdgePath":
            paths.append({"edges": [_hatch_edge(edge) for edge in path.edges], "closed": True})
        else:
            logger.debug("skipping hatch path of type %s", kind)
    return paths


def _hatch_edge(edge: Any) -> dict[str, Any]:
    kind = type(edge).__name__
    if kind == "LineEdge":
        return {"type": "LINE", "start": _point(edge.start), "end": _point(edge.end)}
    if kind == "ArcEdge":
        return {
            "type": "ARC",
            "center": _point(edge.center),
            "radius": float(edge.radius),
            "start_angle": float(edge.start_angle),
            "end_angle": float(edge.end_angle),
            "counterclockwise": bool(edge.ccw),
        }
    if kind == "EllipseEdge":
        return {
            "type": "ELLIPSE",
            "center": _point(edge.center),
            "major_axis": _point(edge.major_axis),
            "ratio": float(edge.ratio),
            "start_param": float(edge.start_param),
            "end_param": float(edge.end_param),
            "counterclockwise": bool(edge.ccw),
        }
    if kind == "SplineEdge":
        return {"type": "SPLINE", "degree": int(edge.degree), "control_points": _points(edge.control_points)}
    return {"type": kind}


def _dimension_fields(entity: Any) -> dict[str, Any]:
    dxf = entity.dxf
    dimension_type = _DIMENSION_TYPES.get(int(dxf.get("dimtype", 0)) & 7, "UNKNOWN")
    data: dict[str, Any] = {
        "dimension_type": dimension_type,
        "defpoint": _point(dxf.get("defpoint")),
        "text_midpoint": _point(dxf.get("text_midpoint")),
    }
    if dimension_type in ("LINEAR", "ALIGNED"):
        data["first_point"] = _point(dxf.get("defpoint2"))
        data["second_point"] = _point(dxf.get("defpoint3"))
        data["rotation"] = dxf.get("angle")
    elif dimension_type == "ANGULAR":
        data["angle_vertex"] = _point(dxf.get("defpoint5") or dxf.get("defpoint"))
        data["first_point"] = _point(dxf.get("defpoint2"))
        data["second_point"] = _point(dxf.get("defpoint3"))
    elif dimension_type in ("RADIUS", "DIAMETER"):
        data["center_point"] = _point(dxf.get("defpoint"))
        data["leader_point"] = _point(dxf.get("defpoint4"))
    elif dimension_type == "ORDINATE":
        data["first_point"] = _point(dxf.get("defpoint2"))
        data["defpoint"] = _point(dxf.get("defpoint3"))
    return {key: value for key, value in data.items() if value is not None}


def _mleader_fields(entity: Any) -> dict[str, Any]:
    context = entity.context
    leaders = []
    for leader in context.leaders:
        for line in leader.lines:
            vertices = _points(line.vertices)
            if leader.has_last_leader_line:
                vertices.append(_point(leader.last_leader_point))
            leaders.append({"vertices": vertices, "arrowhead": True})
    style = {
        "arrow_size": context.arrow_head_size,
        "landing_gap": context.landing_gap_size,
        "text_height": context.char_height,
    }
    if context.mtext is not None:
        annotation = {"insert": _point(context.mtext.insert), "height": context.char_height}
        for leader in leaders:
            leader["annotation"] = annotation
    return {"leaders": leaders, "style": style}


def _geometry_fields(entity: Any, dxftype: str) -> dict[str, Any]:
    dxf = entity.dxf
    if dxftype == "LINE":
        return {"start": _point(dxf.start), "end": _point(dxf.end)}
    if dxftype == "POINT":
        return {"location": _point(dxf.location)}
    if dxftype == "CIRCLE":
        return {"center": _point(dxf.center), "radius": dxf.radius}
    if dxftype == "ARC":
        return {
            "center": _point(dxf.center),
            "radius": dxf.radius,
            "start_angle": dxf.start_angle,
            "end_angle": dxf.end_angle,
        }
    if dxftype == "ELLIPSE":
        return {
            "center": _point(dxf.center),
            "major_axis": _point(dxf.major_axis),
            "ratio": dxf.ratio,
            "start_param": dxf.start_param,
            "end_param": dxf.end_param,
        }
    if dxftype == "LWPOLYLINE":
        vertices = [{"x": x, "y": y, "bulge": b} for x, y, b in entity.get_points("xyb")]
        return {"vertices": vertices, "closed": bool(entity.closed)}
    if dxftype == "POLYLINE":
        vertices = []
        for vertex in entity.vertices:
            x, y, z = _point(vertex.dxf.location)
            vertices.append({"x": x, "y": y, "z": z, "bulge": vertex.dxf.get("bulge", 0.0)})
        return {"vertices": vertices, "closed": bool(entity.is_closed)}
    if dxftype == "TEXT":
        return {
            "insert": _point(dxf.insert),
            "text": dxf.text,
            **_optional(entity, "height", "rotation", "width"),
        }
    if dxftype == "MTEXT":
        data = {"insert": _point(dxf.insert), "text": entity.text}
        if dxf.get("char_height") is not None:
            data["height"] = dxf.char_height
        data.update(
            _optional(
                entity,
                "rotation",
                "width",
                "attachment_point",
                "drawing_direction",
                "line_spacing_style",
                "line_spacing_factor",
            )
        )
        return data
    if dxftype == "SPLINE":
        data = {
            "degree": dxf.degree,
            "closed": bool(entity.closed),
            "control_points": _points(entity.control_points),
        }
        if len(entity.knots):
            data["knots"] = [float(k) for k in entity.knots]
        if len(entity.weights):
            data["weights"] = [float(w) for w in entity.weights]
        if len(entity.fit_points):
            data["fit_points"] = _points(entity.fit_points)
        return data
    if dxftype == "HATCH":
        elevation = dxf.get("elevation")
        data = {"paths": _hatch_paths(entity)}
        if elevation is not None:
            data["elevation"] = float(elevation[2])
        return data
    if dxftype in ("SOLID", "3DFACE"):
        corners = [dxf.get(f"vtx{i}") for i in range(4)]
        return {"points": [_point(c) for c in corners if c is not None]}
    if dxftype == "3DSOLID":
        return {"acis_data": list(entity.sat)}
    if dxftype == "INSERT":
        return {
            "name": dxf.name,
            "insert": _point(dxf.insert),
            **_optional(
                entity,
                "xscale",
                "yscale",
                "zscale",
                "rotation",
                "column_count",
                "row_count",
                "column_spacing",
                "row_spacing",
            ),
        }
    if dxftype == "LEADER":
        return {"vertices": _points(entity.vertices), "arrowhead": bool(dxf.get("has_arrowhead", 1))}
    if dxftype == "MULTILEADER":
        return _mleader_fields(entity)
    if dxftype == "DIMENSION":
        return _dimension_fields(entity)
    if dxftype in ("RAY", "XLINE"):
        return {"start": _point(dxf.start), "unit_vector": _point(dxf.unit_vector)}
    return {}


def entity_from_ezdxf(entity: DXFGraphic) -> Entity:
    """Record for one ezdxf entity; unknown types keep only their style fields."""
    dxftype = entity.dxftype()
    fields = _style(entity)
    fields.update(_geometry_fields(entity, dxftype))
    # ezdxf calls MLEADER entities MULTILEADER
    if dxftype == "MULTILEADER":
        dxftype = "MLEADER"
    return Entity(dxftype=dxftype, handle=entity.dxf.get("handle"), dxf=fields)


def entities_from_layout(layout: Iterable[DXFGraphic]) -> list[Entity]:
    return [entity_from_ezdxf(entity) for entity in layout]


def layer_styles_from_document(doc: Drawing) -> dict[str, LayerStyle]:
    styles: dict[str, LayerStyle] = {}
    for layer in doc.layers:
        styles[layer.dxf.name] = LayerStyle(
            color=layer.color,
            true_color=layer.dxf.get("true_color"),
            linetype=layer.dxf.get("linetype"),
            lineweight=layer.dxf.get("lineweight"),
            visible=layer.is_on(),
        )
    return styles


def block_definitions_from_document(doc: Drawing) -> dict[str, BlockDefinition]:
    blocks: dict[str, BlockDefinition] = {}
    for block in doc.blocks:
        if block.is_any_layout:
            continue
        base_point = block.block.dxf.get("base_point", (0.0, 0.0, 0.0))
        blocks[block.name] = BlockDefinition(
            name=block.name,
            entities=tuple(entities_from_layout(block)),
            base_point=_point(base_point),
        )
    return blocks
