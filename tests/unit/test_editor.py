"""Tests for the workflow editor gestures."""
import pytest

from skillflow.errors import ConnectionRejectedError, UnknownSkillError, WorkflowValidationError
from skillflow.workflow import DropTarget, Position, WorkflowEditor


@pytest.fixture
def editor(catalog):
    return WorkflowEditor(catalog)


class TestNodes:
    """Adding, moving and removing nodes."""

    def test_add_node_uses_staggered_default_positions(self, editor):
        first = editor.add_node("research-assistant")
        second = editor.add_node("doc-coauthoring")

        assert first.position == Position(x=100, y=150)
        assert second.position == Position(x=150, y=180)
        assert first.id != second.id
        assert editor.is_saved is False

    def test_add_unknown_skill_fails(self, editor):
        with pytest.raises(UnknownSkillError):
            editor.add_node("does-not-exist")
        assert editor.workflow.nodes == []

    def test_remove_node_cascades_connections(self, editor):
        a = editor.add_node("research-assistant")
        b = editor.add_node("doc-coauthoring")
        c = editor.add_node("docx")
        editor.connect(a.id, "findings", b.id, "draft")
        editor.connect(b.id, "revised-document", c.id, "content")

        editor.remove_node(b.id)

        assert [n.id for n in editor.workflow.nodes] == [a.id, c.id]
        assert editor.workflow.connections == []

    def test_update_position_does_not_touch_connections(self, editor):
        a = editor.add_node("research-assistant")
        b = editor.add_node("doc-coauthoring")
        editor.connect(a.id, "findings", b.id, "draft")

        editor.update_node_position(a.id, Position(x=10, y=20))

        assert editor.workflow.get_node(a.id).position == Position(x=10, y=20)
        assert len(editor.workflow.connections) == 1


class TestConnections:
    """The start/complete connection gesture."""

    def test_connect_compatible_ports(self, editor):
        a = editor.add_node("research-assistant")
        b = editor.add_node("doc-coauthoring")

        editor.start_connection(a.id, "findings")
        conn = editor.complete_connection(b.id, "draft")

        assert conn.source_node_id == a.id
        assert conn.target_input_id == "draft"
        assert editor.connecting_from is None

    def test_incompatible_drop_is_rejected_and_clears_gesture(self, editor):
        a = editor.add_node("research-assistant")
        b = editor.add_node("doc-coauthoring")

        editor.start_connection(a.id, "sources")  # data
        with pytest.raises(ConnectionRejectedError, match="Cannot connect data to document"):
            editor.complete_connection(b.id, "draft")

        assert editor.connecting_from is None
        assert editor.workflow.connections == []

    def test_self_connection_is_rejected(self, editor):
        a = editor.add_node("doc-coauthoring")

        editor.start_connection(a.id, "revised-document")
        with pytest.raises(ConnectionRejectedError):
            editor.complete_connection(a.id, "draft")

    def test_complete_without_start_is_rejected(self, editor):
        b = editor.add_node("doc-coauthoring")

        with pytest.raises(ConnectionRejectedError, match="No connection in progress"):
            editor.complete_connection(b.id, "draft")

    def test_unknown_port_is_rejected(self, editor):
        a = editor.add_node("research-assistant")
        b = editor.add_node("doc-coauthoring")

        with pytest.raises(ConnectionRejectedError):
            editor.connect(a.id, "findings", b.id, "no-such-input")

    def test_new_connection_displaces_existing_one(self, editor):
        a = editor.add_node("research-assistant")
        b = editor.add_node("skill-creator")
        c = editor.add_node("doc-coauthoring")
        old = editor.connect(a.id, "findings", c.id, "draft")

        new = editor.connect(b.id, "skill-definition", c.id, "draft")

        into_draft = [
            conn for conn in editor.workflow.connections
            if conn.target_node_id == c.id and conn.target_input_id == "draft"
        ]
        assert into_draft == [new]
        assert editor.workflow.get_connection(old.id) is None

    def test_legal_drop_targets(self, editor):
        a = editor.add_node("research-assistant")
        b = editor.add_node("pptx")

        editor.start_connection(a.id, "findings")  # analysis
        targets = editor.legal_drop_targets()

        # analysis feeds text and document inputs, never the source node
        assert DropTarget(node_id=b.id, input_id="content") in targets
        assert DropTarget(node_id=b.id, input_id="template") in targets
        assert all(t.node_id != a.id for t in targets)

    def test_remove_connection(self, editor):
        a = editor.add_node("research-assistant")
        b = editor.add_node("doc-coauthoring")
        conn = editor.connect(a.id, "findings", b.id, "draft")

        editor.remove_connection(conn.id)

        assert editor.workflow.connections == []


class TestSaveAndClear:
    """Saving validates; clearing keeps metadata."""

    def test_save_invalid_workflow_raises(self, editor):
        editor.add_node("research-assistant")

        with pytest.raises(WorkflowValidationError) as exc_info:
            editor.save()

        assert exc_info.value.errors == ["Workflow name is required"]
        assert editor.is_saved is False
        assert editor.workflow.name == ""

    def test_save_calls_callback(self, catalog):
        saved = []
        editor = WorkflowEditor(catalog, on_save=saved.append)
        editor.add_node("research-assistant")

        result = editor.save(name="My flow", tags=["research"])

        assert editor.is_saved is True
        assert saved == [result]
        assert result.name == "My flow"
        assert result.tags == ["research"]

    def test_clear_removes_nodes_and_connections(self, editor):
        a = editor.add_node("research-assistant")
        b = editor.add_node("doc-coauthoring")
        editor.connect(a.id, "findings", b.id, "draft")
        editor.workflow.name = "Keep me"

        editor.clear()

        assert editor.workflow.nodes == []
        assert editor.workflow.connections == []
        assert editor.workflow.name == "Keep me"

    def test_auto_arrange_via_editor(self, editor):
        a = editor.add_node("research-assistant")
        b = editor.add_node("doc-coauthoring")
        editor.connect(a.id, "findings", b.id, "draft")

        editor.auto_arrange()

        assert editor.workflow.get_node(a.id).position.x < editor.workflow.get_node(b.id).position.x
