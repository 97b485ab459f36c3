"""
Importer Errors
===============
Typed failures raised while materializing 2D geometry nodes.

Every importer error names the element kind and, where one is involved, the
attribute that triggered it. None of them is recoverable: the import pass is
aborted rather than continued with a partially built scene graph.
"""
from __future__ import annotations

from typing import Optional


class SceneImportError(Exception):
    """Base class for all failures of an import pass."""

    def __init__(self, message: str, kind: Optional[str] = None, attribute: Optional[str] = None) -> None:
        self.kind = kind
        self.attribute = attribute
        self.message = message
        super().__init__(self._format())

    def _format(self) -> str:
        location = ""
        if self.kind and self.attribute:
            location = f"{self.kind}.{self.attribute}: "
        elif self.kind:
            location = f"{self.kind}: "
        return f"{location}{self.message}"


class NodeReferenceError(SceneImportError):
    """A USE name that is unknown, bound to another kind, or a DEF name used twice."""


class AttributeValueError(SceneImportError):
    """An attribute value the element cannot be built from."""


class GeometricConstraintError(SceneImportError):
    """Attribute values that are individually valid but geometrically inconsistent."""


class UnsupportedNodeError(SceneImportError):
    """No reader is registered for the node's tag."""


class TessellationError(ValueError):
    """
    Invalid input to the tessellation engine.

    The engine knows nothing about elements, so only the offending parameter
    name is recorded; readers translate it into an AttributeValueError.
    """

    def __init__(self, message: str, parameter: str) -> None:
        self.parameter = parameter
        super().__init__(f"{parameter}: {message}")


class ConfigError(ValueError):
    pass
