import logging

import pytest

from scene2d.config import ImporterConfig
from scene2d.controller.session import ImportSession, import_nodes
from scene2d.controller.source import SourceNode
from scene2d.errors import NodeReferenceError, SceneImportError, UnsupportedNodeError
from scene2d.model.elements import ElementKind, NodeElement


def _ignore_metadata(session: ImportSession, element: NodeElement, node: SourceNode) -> None:
    pass


class TestDefUse:
    def test_use_shares_the_definition(self, session: ImportSession, make_node) -> None:
        defined = session.read(make_node("Circle2D", DEF="c1", radius=2.0))
        with session.group("elsewhere") as group:
            reused = session.read(make_node("Circle2D", USE="c1"))

        assert reused is defined
        assert group.children == [defined]
        assert reused.geometry.vertices is defined.geometry.vertices
        assert defined.parent is session.root
        assert group.owned_children() == []
        positions = [node for node in session.root.iter_geometry()]
        assert positions == [defined, defined]

    def test_use_does_not_register_again(self, session: ImportSession, make_node) -> None:
        session.read(make_node("Rectangle2D", DEF="r"))
        session.read(make_node("Rectangle2D", USE="r"))
        session.read(make_node("Rectangle2D", USE="r"))
        assert len(session.registry) == 1
        assert len(session.root.children) == 3

    def test_use_ignores_other_attributes(self, session: ImportSession, make_node) -> None:
        defined = session.read(make_node("Disk2D", DEF="d", innerRadius=0.5))
        reused = session.read(make_node("Disk2D", USE="d", innerRadius=2.0, outerRadius=1.0))
        assert reused is defined

    def test_missing_reference(self, session: ImportSession, make_node) -> None:
        with pytest.raises(NodeReferenceError) as excinfo:
            session.read(make_node("Circle2D", USE="missing"))
        assert excinfo.value.kind == "Circle2D"
        assert "missing" in str(excinfo.value)

    def test_reference_to_other_kind(self, session: ImportSession, make_node) -> None:
        session.read(make_node("Circle2D", DEF="shape"))
        with pytest.raises(NodeReferenceError):
            session.read(make_node("Disk2D", USE="shape"))

    def test_duplicate_definition(self, session: ImportSession, make_node) -> None:
        session.read(make_node("Arc2D", DEF="a"))
        with pytest.raises(NodeReferenceError):
            session.read(make_node("Polyline2D", DEF="a", lineSegments=[(0, 0), (1, 1)]))

    def test_anonymous_definitions_are_registered(self, session: ImportSession, make_node) -> None:
        first = session.read(make_node("Arc2D"))
        second = session.read(make_node("Arc2D", DEF=""))
        assert first.id is None
        assert second.id is None
        assert list(session.registry) == [first, second]

    def test_definition_inside_sibling_group(self, session: ImportSession, make_node) -> None:
        with session.group("a"):
            defined = session.read(make_node("Polypoint2D", DEF="pts", point=[(1, 1)]))
        with session.group("b") as b:
            session.read(make_node("Polypoint2D", USE="pts"))
        assert b.children == [defined]
        assert defined.parent.id == "a"


class TestDeferredAttachment:
    def test_pending_until_metadata_done(self, make_node) -> None:
        session = ImportSession(metadata_handler=_ignore_metadata)
        metadata = [SourceNode("MetadataString")]
        element = session.read(make_node("Circle2D", DEF="c", children=metadata))

        assert session.pending == (element,)
        assert session.root.children == []
        assert session.registry.get("c") is element

        reused = session.read(make_node("Circle2D", USE="c"))
        assert reused is element
        assert session.root.children == [element]

        session.attach_pending(element)
        assert session.pending == ()
        assert session.root.children == [element, element]
        assert session.root.owned_children() == [element]

    def test_use_of_pending_definition_skips_handler(self, make_node) -> None:
        calls = []

        def recording_handler(session: ImportSession, element: NodeElement, node: SourceNode) -> None:
            calls.append((element.id, node.use_name, len(node.children)))

        session = ImportSession(metadata_handler=recording_handler)
        element = session.read(make_node("Circle2D", DEF="c", children=[SourceNode("MetadataString")]))
        reused = session.read(make_node("Circle2D", USE="c"))

        assert reused is element
        assert calls == [("c", None, 1)]
        assert session.pending == (element,)
        assert session.root.children == [element]

    def test_default_handler_attaches(self, session: ImportSession, make_node) -> None:
        element = session.read(make_node("Arc2D", children=[SourceNode("MetadataFloat")]))
        assert session.pending == ()
        assert session.root.children == [element]

    def test_handler_receives_source_node(self, make_node) -> None:
        seen = []

        def handler(session: ImportSession, element: NodeElement, node: SourceNode) -> None:
            seen.append((element.kind, node.tag))
            session.attach_pending(element)

        session = ImportSession(metadata_handler=handler)
        session.read(make_node("Rectangle2D", children=[SourceNode("MetadataSet")]))
        session.read(make_node("Rectangle2D"))
        assert seen == [(ElementKind.RECTANGLE_2D, "Rectangle2D")]

    def test_attach_element_not_pending(self, session: ImportSession, make_node) -> None:
        element = session.read(make_node("Arc2D"))
        with pytest.raises(SceneImportError):
            session.attach_pending(element)

    def test_pending_keeps_parent_group(self, make_node) -> None:
        session = ImportSession(metadata_handler=_ignore_metadata)
        with session.group("g") as group:
            element = session.read(make_node("Arc2D", children=[SourceNode("MetadataString")]))
        session.attach_pending(element)
        assert group.children == [element]


class TestSession:
    def test_unknown_tag(self, session: ImportSession, make_node) -> None:
        with pytest.raises(UnsupportedNodeError):
            session.read(make_node("Box"))

    def test_group_restores_cursor(self, session: ImportSession) -> None:
        with pytest.raises(RuntimeError):
            with session.group("g") as group:
                assert session.current is group
                raise RuntimeError("abort")
        assert session.current is session.root

    def test_import_nodes(self, make_node) -> None:
        nodes = [
            make_node("Circle2D", DEF="c"),
            make_node("Rectangle2D"),
            make_node("Circle2D", USE="c"),
        ]
        session = import_nodes(nodes, config=ImporterConfig(arc_segments=6))
        kinds = [child.kind for child in session.root]
        assert kinds == [ElementKind.CIRCLE_2D, ElementKind.RECTANGLE_2D, ElementKind.CIRCLE_2D]
        assert session.root.children[0].geometry.vertex_count == 12

    def test_error_aborts_import(self, make_node) -> None:
        nodes = [make_node("Arc2D"), make_node("TriangleSet2D", vertices=[(0, 0)]), make_node("Arc2D")]
        with pytest.raises(SceneImportError):
            import_nodes(nodes)

    def test_logs_summary(self, make_node, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="scene2d"):
            import_nodes([make_node("Arc2D")])
        assert "1 definition(s)" in caplog.text


class TestTeardown:
    def test_destroys_owned_tree_once(self, session: ImportSession, make_node) -> None:
        circle = session.read(make_node("Circle2D", DEF="c"))
        with session.group("g") as group:
            session.read(make_node("Circle2D", USE="c"))
            session.read(make_node("Circle2D", USE="c"))
        nodes = list(session.root.iter_tree())

        order = list(session.root.iter_owned_postorder())
        assert order == [circle, group, session.root]

        session.teardown()
        assert all(node.parent is None for node in nodes)
        assert all(node.children == [] for node in nodes)
        assert len(session.registry) == 0

    def test_session_unusable_after_teardown(self, session: ImportSession, make_node) -> None:
        session.teardown()
        session.teardown()
        with pytest.raises(SceneImportError):
            session.read(make_node("Arc2D"))

    def test_pending_elements_released(self, make_node) -> None:
        session = ImportSession(metadata_handler=_ignore_metadata)
        element = session.read(make_node("Arc2D", children=[SourceNode("MetadataString")]))
        session.teardown()
        assert session.pending == ()
        assert element.parent is None
