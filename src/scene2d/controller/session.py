"""
Import Session
==============
Owns everything one read pass builds: the element tree, the cursor pointing at
the currently open parent, the definition registry and the elements whose
tree attachment is deferred until their metadata children are processed.

Attachment is a two-phase commit. `define` constructs the element and then
`commit` registers it and either attaches it to its parent or parks it in
`pending`. The metadata handler (an external collaborator) finishes the
deferred case through `attach_pending`.
"""
from __future__ import annotations

from contextlib import contextmanager
import logging
from typing import Callable, Iterable, Iterator, List, Optional

from scene2d.config import ImporterConfig
from scene2d.errors import SceneImportError, UnsupportedNodeError
from scene2d.controller.readers import get_reader
from scene2d.controller.source import SourceNode
from scene2d.model.elements import ElementKind, Geometry2D, NodeElement
from scene2d.model.registry import DefinitionRegistry

logger = logging.getLogger(__name__)

MetadataHandler = Callable[["ImportSession", NodeElement, SourceNode], None]


def attach_without_metadata(session: ImportSession, element: NodeElement, node: SourceNode) -> None:
    """Default metadata handler: skips the metadata content and completes the attachment."""
    logger.debug(f"Skipping {len(node.children)} metadata node(s) of {element!r}.")
    session.attach_pending(element)


class ImportSession:
    """
    State of a single import pass.

    Pass an instance through the readers; it is not shared between imports.
    """

    def __init__(
        self,
        config: Optional[ImporterConfig] = None,
        metadata_handler: Optional[MetadataHandler] = None,
    ) -> None:
        self.config = config or ImporterConfig()
        self.metadata_handler: MetadataHandler = metadata_handler or attach_without_metadata
        self.root = NodeElement(ElementKind.GROUP)
        self.registry = DefinitionRegistry()
        self._current = self.root
        self._pending: List[NodeElement] = []
        self._closed = False

    @property
    def current(self) -> NodeElement:
        """The parent new elements are attached to."""
        return self._current

    @property
    def pending(self) -> tuple[NodeElement, ...]:
        """Elements defined but still waiting for tree attachment."""
        return tuple(self._pending)

    def _ensure_open(self) -> None:
        if self._closed:
            raise SceneImportError("import session has been torn down")

    @contextmanager
    def group(self, name: Optional[str] = None) -> Iterator[NodeElement]:
        """Open a Group child of the current parent and read into it."""
        self._ensure_open()
        group = NodeElement(ElementKind.GROUP, parent=self._current, id=name)
        self.commit(group)
        previous = self._current
        self._current = group
        try:
            yield group
        finally:
            self._current = previous

    def define(
        self,
        kind: ElementKind,
        geometry: Geometry2D,
        def_name: Optional[str] = None,
        defer: bool = False,
    ) -> NodeElement:
        """
        Create a new element under the current parent and commit it.

        Args:
            kind: Primitive kind of the element.
            geometry: Fully built vertex payload.
            def_name: DEF name making the element reusable, if any.
            defer: Leave the element pending instead of attaching it, because
                metadata children still have to be read.

        Returns:
            The new element.
        """
        self._ensure_open()
        element = NodeElement(kind, parent=self._current, id=def_name, geometry=geometry)
        self.commit(element, defer=defer)
        logger.debug(f"Defined {element!r}{' (pending)' if defer else ''}.")
        return element

    def commit(self, element: NodeElement, defer: bool = False) -> None:
        """Register the element and attach it, or park it until `attach_pending`."""
        # Registered first so that lookups succeed while attachment is pending
        self.registry.register(element)
        if defer:
            self._pending.append(element)
        else:
            self._attach(element)

    def attach_pending(self, element: NodeElement) -> None:
        """Complete a deferred attachment."""
        for index, candidate in enumerate(self._pending):
            if candidate is element:
                del self._pending[index]
                self._attach(element)
                return
        raise SceneImportError(f"{element!r} is not pending attachment", kind=element.kind)

    def _attach(self, element: NodeElement) -> None:
        parent = element.parent
        if parent is None:
            raise SceneImportError(f"{element!r} has no parent to attach to", kind=element.kind)
        parent.children.append(element)

    def reuse(self, kind: ElementKind, use_name: str) -> NodeElement:
        """
        Attach an existing definition at the current position.

        The element itself is shared, not copied; its parent is unchanged.

        Raises:
            NodeReferenceError: If `use_name` is unknown or names another kind.
        """
        self._ensure_open()
        element = self.registry.find(use_name, kind)
        self._current.children.append(element)
        logger.debug(f"Reused {element!r} under {self._current!r}.")
        return element

    def read(self, node: SourceNode) -> NodeElement:
        """
        Read one source node with the reader registered for its tag.

        Raises:
            UnsupportedNodeError: If no reader handles the tag.
        """
        self._ensure_open()
        reader = get_reader(node.tag)
        if reader is None:
            raise UnsupportedNodeError("no reader registered for this node", kind=node.tag)

        element = reader(self, node)
        # A USE of a pending definition returns that definition; its metadata
        # belongs to the DEF node only
        if not node.use_name and any(candidate is element for candidate in self._pending):
            self.metadata_handler(self, element, node)
        return element

    def read_all(self, nodes: Iterable[SourceNode]) -> NodeElement:
        """Read top-level nodes in document order and return the root."""
        count = 0
        for node in nodes:
            self.read(node)
            count += 1
        logger.info(
            f"Read {count} node(s): {len(self.registry)} definition(s), "
            f"{len(self._pending)} pending attachment(s)."
        )
        return self.root

    def teardown(self) -> None:
        """
        Destroy the tree along ownership edges only, leaves first.

        Aliased nodes are visited once, through their owner.
        """
        if self._closed:
            return
        doomed = list(self.root.iter_owned_postorder())
        for element in doomed:
            element.children.clear()
            element.detach_parent()
        for element in self._pending:
            element.detach_parent()
        self._pending.clear()
        self.registry.clear()
        self._current = self.root
        self._closed = True
        logger.info(f"Import session torn down ({len(doomed)} element(s) destroyed).")


def import_nodes(
    nodes: Iterable[SourceNode],
    config: Optional[ImporterConfig] = None,
    metadata_handler: Optional[MetadataHandler] = None,
) -> ImportSession:
    """Run a complete read pass over top-level nodes and return the session."""
    session = ImportSession(config=config, metadata_handler=metadata_handler)
    logger.info(f"Starting import (arc_segments={session.config.arc_segments}).")
    session.read_all(nodes)
    return session
