"""
Primitive Readers
=================
One reader per Geometry2D element. Each reader either resolves a USE reference
or reads its attributes, validates them, tessellates and defines a new element.

Readers register themselves by tag with `register_reader`; the session looks
them up with `get_reader`.
"""
from __future__ import annotations

from contextlib import contextmanager
import logging
from typing import TYPE_CHECKING, Callable, Dict, Iterator, Optional

import numpy as np

from scene2d.config import HALF_PI
from scene2d.errors import AttributeValueError, GeometricConstraintError, TessellationError
from scene2d.controller.source import SourceNode
from scene2d.model.elements import ElementKind, Geometry2D, NodeElement
from scene2d.model.tessellation import (
    arc_points,
    is_full_circle,
    lift_to_3d,
    points_to_line_strip,
    quad_strip_between,
)

if TYPE_CHECKING:
    from scene2d.controller.session import ImportSession

logger = logging.getLogger(__name__)

Reader = Callable[["ImportSession", SourceNode], NodeElement]

_REGISTRY: Dict[str, Reader] = {}

# Attribute names of the arc parameters, by tessellation parameter
_ARC_ATTRIBUTES = {"start_angle": "startAngle", "end_angle": "endAngle", "radius": "radius"}


def register_reader(kind: ElementKind) -> Callable[[Reader], Reader]:
    """Decorator registering a reader for the element kind's tag."""
    def decorator(func: Reader) -> Reader:
        if kind in _REGISTRY:
            raise ValueError(f"Reader for '{kind}' already registered")
        _REGISTRY[str(kind)] = func
        return func
    return decorator


def get_reader(tag: str) -> Optional[Reader]:
    return _REGISTRY.get(tag)


def reader_tags() -> list[str]:
    return list(_REGISTRY.keys())


@contextmanager
def _tessellation_errors(kind: ElementKind, attributes: Dict[str, str]) -> Iterator[None]:
    """Report engine failures against the element attribute that caused them."""
    try:
        yield
    except TessellationError as exc:
        attribute = attributes.get(exc.parameter, exc.parameter)
        raise AttributeValueError(str(exc), kind=kind, attribute=attribute) from exc


def _define(session: ImportSession, node: SourceNode, kind: ElementKind, geometry: Geometry2D) -> NodeElement:
    return session.define(kind, geometry, def_name=node.def_name, defer=node.has_content)


@register_reader(ElementKind.ARC_2D)
def read_arc2d(session: ImportSession, node: SourceNode) -> NodeElement:
    """
    Arc2D: an open circular arc as line segments.

    The line strip keeps its closing segment from the last arc point back to
    the first one, so consumers see a closed wireframe.
    """
    kind = ElementKind.ARC_2D
    if node.use_name:
        return session.reuse(kind, node.use_name)

    end_angle = node.get_float("endAngle", HALF_PI)
    radius = node.get_float("radius", 1.0)
    start_angle = node.get_float("startAngle", 0.0)

    with _tessellation_errors(kind, _ARC_ATTRIBUTES):
        arc = arc_points(start_angle, end_angle, radius, session.config.arc_segments)
    vertices = points_to_line_strip(lift_to_3d(arc))

    return _define(session, node, kind, Geometry2D(vertices, index_arity=2))


@register_reader(ElementKind.ARC_CLOSE_2D)
def read_arc_close2d(session: ImportSession, node: SourceNode) -> NodeElement:
    """
    ArcClose2D: an arc closed into one polygon.

    PIE closes through the origin (two radial segments), CHORD with a single
    segment back to the first arc point. A full circle gets no closure and the
    closure type is then ignored.
    """
    kind = ElementKind.ARC_CLOSE_2D
    if node.use_name:
        return session.reuse(kind, node.use_name)

    closure_type = node.get_str("closureType", "PIE").strip('"')
    end_angle = node.get_float("endAngle", HALF_PI)
    radius = node.get_float("radius", 1.0)
    solid = node.get_bool("solid", False)
    start_angle = node.get_float("startAngle", 0.0)

    with _tessellation_errors(kind, _ARC_ATTRIBUTES):
        points = lift_to_3d(arc_points(start_angle, end_angle, radius, session.config.arc_segments))

    if is_full_circle(start_angle, end_angle):
        logger.debug(f"ArcClose2D spans a full circle, closureType '{closure_type}' ignored.")
    else:
        match closure_type:
            case "PIE":
                points = np.vstack((points, np.zeros(3), points[0]))
            case "CHORD":
                points = np.vstack((points, points[0]))
            case _:
                raise AttributeValueError(
                    f"expected PIE or CHORD, got {closure_type!r}", kind=kind, attribute="closureType"
                )

    geometry = Geometry2D(points, index_arity=len(points), solid=solid)
    return _define(session, node, kind, geometry)


@register_reader(ElementKind.CIRCLE_2D)
def read_circle2d(session: ImportSession, node: SourceNode) -> NodeElement:
    """Circle2D: a full circle as closed line segments."""
    kind = ElementKind.CIRCLE_2D
    if node.use_name:
        return session.reuse(kind, node.use_name)

    radius = node.get_float("radius", 1.0)

    with _tessellation_errors(kind, _ARC_ATTRIBUTES):
        circle = arc_points(0.0, 0.0, radius, session.config.arc_segments)
    vertices = points_to_line_strip(lift_to_3d(circle))

    return _define(session, node, kind, Geometry2D(vertices, index_arity=2))


@register_reader(ElementKind.DISK_2D)
def read_disk2d(session: ImportSession, node: SourceNode) -> NodeElement:
    """
    Disk2D: filled disk, circular line or annulus depending on the radii.

    - innerRadius == 0: the outer ring is one filled polygon.
    - innerRadius == outerRadius: the outer ring as closed line segments.
    - otherwise: quads between the inner and the outer ring.
    """
    kind = ElementKind.DISK_2D
    if node.use_name:
        return session.reuse(kind, node.use_name)

    inner_radius = node.get_float("innerRadius", 0.0)
    outer_radius = node.get_float("outerRadius", 1.0)
    solid = node.get_bool("solid", False)

    if inner_radius < 0.0:
        raise AttributeValueError(
            f"must not be negative, got {inner_radius}", kind=kind, attribute="innerRadius"
        )
    if inner_radius > outer_radius:
        raise GeometricConstraintError(
            f"{inner_radius} is larger than outerRadius {outer_radius}", kind=kind, attribute="innerRadius"
        )

    segments = session.config.arc_segments
    with _tessellation_errors(kind, {"radius": "outerRadius"}):
        outer_ring = lift_to_3d(arc_points(0.0, 0.0, outer_radius, segments))

    if inner_radius == 0.0:
        geometry = Geometry2D(outer_ring, index_arity=len(outer_ring), solid=solid)
    elif inner_radius == outer_radius:
        geometry = Geometry2D(points_to_line_strip(outer_ring), index_arity=2, solid=solid)
    else:
        with _tessellation_errors(kind, {"radius": "innerRadius"}):
            inner_ring = lift_to_3d(arc_points(0.0, 0.0, inner_radius, segments))
        if len(inner_ring) < 2:
            raise AttributeValueError(
                f"inner ring has {len(inner_ring)} point(s), at least 2 are needed for quads",
                kind=kind,
                attribute="innerRadius",
            )
        geometry = Geometry2D(quad_strip_between(inner_ring, outer_ring), index_arity=4, solid=solid)

    return _define(session, node, kind, geometry)


@register_reader(ElementKind.POLYLINE_2D)
def read_polyline2d(session: ImportSession, node: SourceNode) -> NodeElement:
    kind = ElementKind.POLYLINE_2D
    if node.use_name:
        return session.reuse(kind, node.use_name)

    line_segments = node.get_vec2_list("lineSegments")

    with _tessellation_errors(kind, {"points": "lineSegments"}):
        vertices = points_to_line_strip(lift_to_3d(line_segments))

    return _define(session, node, kind, Geometry2D(vertices, index_arity=2))


@register_reader(ElementKind.POLYPOINT_2D)
def read_polypoint2d(session: ImportSession, node: SourceNode) -> NodeElement:
    kind = ElementKind.POLYPOINT_2D
    if node.use_name:
        return session.reuse(kind, node.use_name)

    vertices = lift_to_3d(node.get_vec2_list("point"))

    return _define(session, node, kind, Geometry2D(vertices, index_arity=1))


@register_reader(ElementKind.RECTANGLE_2D)
def read_rectangle2d(session: ImportSession, node: SourceNode) -> NodeElement:
    """Rectangle2D: one quad centred at the origin."""
    kind = ElementKind.RECTANGLE_2D
    if node.use_name:
        return session.reuse(kind, node.use_name)

    size_x, size_y = node.get_vec2("size", (2.0, 2.0))
    solid = node.get_bool("solid", False)

    x1, x2 = -size_x / 2.0, size_x / 2.0
    y1, y2 = -size_y / 2.0, size_y / 2.0
    corners = [(x2, y1), (x2, y2), (x1, y2), (x1, y1)]

    return _define(session, node, kind, Geometry2D(lift_to_3d(corners), index_arity=4, solid=solid))


@register_reader(ElementKind.TRIANGLE_SET_2D)
def read_triangle_set2d(session: ImportSession, node: SourceNode) -> NodeElement:
    kind = ElementKind.TRIANGLE_SET_2D
    if node.use_name:
        return session.reuse(kind, node.use_name)

    solid = node.get_bool("solid", False)
    vertices = node.get_vec2_list("vertices")

    if len(vertices) % 3:
        raise AttributeValueError(
            f"{len(vertices)} vertices do not form whole triangles", kind=kind, attribute="vertices"
        )

    return _define(session, node, kind, Geometry2D(lift_to_3d(vertices), index_arity=3, solid=solid))
