"""
scene2d
=======
Reads the 2D geometry nodes of an X3D-style scene description (Arc2D,
ArcClose2D, Circle2D, Disk2D, Polyline2D, Polypoint2D, Rectangle2D,
TriangleSet2D) into a typed element tree with tessellated vertex data,
resolving DEF/USE references along the way.
"""
from scene2d.config import DEFAULT_ARC_SEGMENTS, ImporterConfig
from scene2d.errors import (
    AttributeValueError,
    ConfigError,
    GeometricConstraintError,
    NodeReferenceError,
    SceneImportError,
    TessellationError,
    UnsupportedNodeError,
)
from scene2d.controller.session import ImportSession, import_nodes
from scene2d.controller.source import SourceNode
from scene2d.model.elements import ElementKind, Geometry2D, NodeElement

__all__ = [
    "DEFAULT_ARC_SEGMENTS",
    "ImporterConfig",
    "AttributeValueError",
    "ConfigError",
    "GeometricConstraintError",
    "NodeReferenceError",
    "SceneImportError",
    "TessellationError",
    "UnsupportedNodeError",
    "ImportSession",
    "import_nodes",
    "SourceNode",
    "ElementKind",
    "Geometry2D",
    "NodeElement",
]
