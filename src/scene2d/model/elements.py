"""
Node Element Model
==================
Typed scene-graph nodes produced by the readers.

A NodeElement owns its children through the `children` list; the back
reference to the parent is weak. A node defined once (DEF) may also appear as
a non-owning alias in other `children` lists (USE). An entry is an ownership
edge only when the child's parent is the list holder.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Iterator, List, Optional, TYPE_CHECKING
import weakref

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


class ElementKind(StrEnum):
    GROUP = "Group"
    ARC_2D = "Arc2D"
    ARC_CLOSE_2D = "ArcClose2D"
    CIRCLE_2D = "Circle2D"
    DISK_2D = "Disk2D"
    POLYLINE_2D = "Polyline2D"
    POLYPOINT_2D = "Polypoint2D"
    RECTANGLE_2D = "Rectangle2D"
    TRIANGLE_SET_2D = "TriangleSet2D"


GEOMETRY_2D_KINDS: frozenset[ElementKind] = frozenset({
    ElementKind.ARC_2D,
    ElementKind.ARC_CLOSE_2D,
    ElementKind.CIRCLE_2D,
    ElementKind.DISK_2D,
    ElementKind.POLYLINE_2D,
    ElementKind.POLYPOINT_2D,
    ElementKind.RECTANGLE_2D,
    ElementKind.TRIANGLE_SET_2D,
})


@dataclass(frozen=True, eq=False)
class Geometry2D:
    """
    Vertex payload of a 2D primitive.

    Attributes:
        vertices: (n, 3) array, z = 0. Read-only, shared by every USE of the element.
        solid: Double-sidedness hint.
        index_arity: How many consecutive vertices form one render primitive
            (1 point, 2 line, 3 triangle, 4 quad, n polygon).
    """
    vertices: npt.NDArray[np.float64]
    index_arity: int
    solid: bool = False

    def __post_init__(self) -> None:
        vertices = np.array(self.vertices, dtype=np.float64)
        if vertices.size == 0:
            vertices = vertices.reshape(0, 3)
        if vertices.ndim != 2 or vertices.shape[1] != 3:
            raise ValueError(f"vertices must have shape (n, 3), got {vertices.shape}")
        if self.index_arity < 1:
            raise ValueError(f"index_arity must be >= 1, got {self.index_arity}")
        if len(vertices) % self.index_arity:
            raise ValueError(
                f"{len(vertices)} vertices cannot be grouped by index_arity {self.index_arity}"
            )
        vertices.flags.writeable = False
        object.__setattr__(self, "vertices", vertices)

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def primitive_count(self) -> int:
        """Number of render primitives the vertices group into."""
        return self.vertex_count // self.index_arity


class NodeElement:
    """
    One instantiated node of the scene graph.

    Geometry is present exactly for the kinds in GEOMETRY_2D_KINDS, so a
    geometry node can never be mistaken for a container and vice versa.
    """

    def __init__(
        self,
        kind: ElementKind,
        parent: Optional[NodeElement] = None,
        id: Optional[str] = None,
        geometry: Optional[Geometry2D] = None,
    ) -> None:
        kind = ElementKind(kind)
        if kind in GEOMETRY_2D_KINDS and geometry is None:
            raise TypeError(f"{kind} requires a geometry payload")
        if kind not in GEOMETRY_2D_KINDS and geometry is not None:
            raise TypeError(f"{kind} cannot carry a geometry payload")

        self.kind = kind
        self.id = id
        self.geometry = geometry
        self.children: List[NodeElement] = []
        self._parent_ref: Optional[weakref.ReferenceType[NodeElement]] = (
            weakref.ref(parent) if parent is not None else None
        )

    def __repr__(self) -> str:
        name = f", id='{self.id}'" if self.id else ""
        if self.geometry is not None:
            payload = f", vertices={self.geometry.vertex_count}, arity={self.geometry.index_arity}"
        else:
            payload = f", children={len(self.children)}"
        return f"{self.__class__.__name__}(kind={self.kind}{name}{payload})"

    def __iter__(self) -> Iterator[NodeElement]:
        return iter(self.children)

    @property
    def parent(self) -> Optional[NodeElement]:
        """Owning node, or None for a root or a torn down node."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def detach_parent(self) -> None:
        self._parent_ref = None

    def is_owned_by(self, node: NodeElement) -> bool:
        return self.parent is node

    def owned_children(self) -> List[NodeElement]:
        """Children reached through an ownership edge, each listed once."""
        seen: set[int] = set()
        owned = []
        for child in self.children:
            if child.is_owned_by(self) and id(child) not in seen:
                seen.add(id(child))
                owned.append(child)
        return owned

    def iter_tree(self) -> Iterator[NodeElement]:
        """
        Depth-first pre-order walk as seen by a consumer: aliased nodes are
        yielded at every position they occur.
        """
        yield self
        for child in self.children:
            yield from child.iter_tree()

    def iter_owned_postorder(self) -> Iterator[NodeElement]:
        """Every owned node exactly once, children before their parent."""
        for child in self.owned_children():
            yield from child.iter_owned_postorder()
        yield self

    def iter_geometry(self) -> Iterator[NodeElement]:
        """Consumer view: every geometry-carrying position in the tree."""
        return (node for node in self.iter_tree() if node.geometry is not None)
