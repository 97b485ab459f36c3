"""
Source Nodes
============
The input contract of the readers: one markup node whose attribute values have
already been tokenized and converted to Python types by the markup layer.

The typed getters only check what they are handed; they do not parse text.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import math
import numbers
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from scene2d.errors import AttributeValueError

Vec2 = Tuple[float, float]


def _is_number(x: Any) -> bool:
    """Finite real scalar, numpy scalars included; booleans are not numbers."""
    return isinstance(x, numbers.Real) and not isinstance(x, bool) and math.isfinite(x)


@dataclass
class SourceNode:
    """
    A markup element as delivered by the tokenizer.

    Attributes:
        tag: Element name, e.g. "Circle2D".
        attributes: Typed attribute values by name, DEF/USE included.
        children: Nested content (metadata nodes for the 2D primitives).
    """
    tag: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    children: List[SourceNode] = field(default_factory=list)

    @property
    def def_name(self) -> Optional[str]:
        return self.attributes.get("DEF") or None

    @property
    def use_name(self) -> Optional[str]:
        return self.attributes.get("USE") or None

    @property
    def has_content(self) -> bool:
        """True when nested nodes follow, which defers tree attachment."""
        return bool(self.children)

    def _invalid(self, name: str, expected: str, value: Any) -> AttributeValueError:
        return AttributeValueError(f"expected {expected}, got {value!r}", kind=self.tag, attribute=name)

    def get_float(self, name: str, default: float) -> float:
        value = self.attributes.get(name)
        if value is None:
            return default
        if not _is_number(value):
            raise self._invalid(name, "a finite number", value)
        return float(value)

    def get_bool(self, name: str, default: bool) -> bool:
        value = self.attributes.get(name)
        if value is None:
            return default
        if not isinstance(value, bool):
            raise self._invalid(name, "a boolean", value)
        return value

    def get_str(self, name: str, default: str) -> str:
        value = self.attributes.get(name)
        if value is None:
            return default
        if not isinstance(value, str):
            raise self._invalid(name, "a string", value)
        return value

    def get_vec2(self, name: str, default: Vec2) -> Vec2:
        value = self.attributes.get(name)
        if value is None:
            return default
        if isinstance(value, np.ndarray):
            value = value.tolist()
        if not self._is_vec2(value):
            raise self._invalid(name, "a 2D vector of finite numbers", value)
        return float(value[0]), float(value[1])

    def get_vec2_list(self, name: str) -> List[Vec2]:
        """List of 2D vectors; an absent attribute is an empty list."""
        value = self.attributes.get(name)
        if value is None:
            return []
        if isinstance(value, np.ndarray):
            value = value.tolist()
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            raise self._invalid(name, "a list of 2D vectors", value)
        points = []
        for item in value:
            if not self._is_vec2(item):
                raise self._invalid(name, "a list of 2D vectors", value)
            points.append((float(item[0]), float(item[1])))
        return points

    @staticmethod
    def _is_vec2(value: Any) -> bool:
        return (
            isinstance(value, (tuple, list))
            and len(value) == 2
            and all(_is_number(v) for v in value)
        )
