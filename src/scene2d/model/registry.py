"""
Definition Registry
===================
Session-scoped index of every node element defined so far, backing DEF/USE.

The registry holds non-owning references only: the tree owns the elements,
the registry merely finds them by name.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional

from scene2d.errors import NodeReferenceError
from scene2d.model.elements import ElementKind, NodeElement

logger = logging.getLogger(__name__)


class DefinitionRegistry:
    """Insertion-ordered, append-only list of definitions with a name index."""

    def __init__(self) -> None:
        self._elements: List[NodeElement] = []
        self._registered: set[int] = set()
        self._by_name: Dict[str, NodeElement] = {}

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[NodeElement]:
        return iter(self._elements)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def register(self, element: NodeElement) -> None:
        """
        Append a newly defined element.

        Args:
            element: The element to index. Anonymous elements are listed but
                cannot be found by name.

        Raises:
            NodeReferenceError: If the element is already registered or its name
                was defined earlier in the session.
        """
        if id(element) in self._registered:
            raise NodeReferenceError("element registered twice", kind=element.kind)
        if element.id is not None:
            previous = self._by_name.get(element.id)
            if previous is not None:
                raise NodeReferenceError(
                    f"name '{element.id}' already defined by a {previous.kind}",
                    kind=element.kind,
                    attribute="DEF",
                )
            self._by_name[element.id] = element

        self._elements.append(element)
        self._registered.add(id(element))
        logger.debug(f"Registered {element!r} ({len(self._elements)} definitions).")

    def get(self, name: str) -> Optional[NodeElement]:
        return self._by_name.get(name)

    def find(self, name: str, kind: ElementKind) -> NodeElement:
        """
        Resolve a USE reference.

        Raises:
            NodeReferenceError: If nothing is defined under `name` or the
                definition is of a different kind.
        """
        element = self._by_name.get(name)
        if element is None:
            raise NodeReferenceError(f"no definition named '{name}'", kind=kind, attribute="USE")
        if element.kind != kind:
            raise NodeReferenceError(
                f"'{name}' is defined as {element.kind}, not {kind}", kind=kind, attribute="USE"
            )
        return element

    def clear(self) -> None:
        self._elements.clear()
        self._registered.clear()
        self._by_name.clear()
