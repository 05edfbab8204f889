"""Tests for the canvas editing store and its undo history."""

import pytest

from skillbridge.graph.store import HISTORY_LIMIT, GraphStore, InteractionMode
from skillbridge.schemas.graph import Edge, Node, NodeData, Position


def _node(node_id: str, x: float = 0, y: float = 0) -> Node:
    return Node(id=node_id, position=Position(x=x, y=y), data=NodeData(label=node_id))


def _edge(source: str, target: str) -> Edge:
    return Edge(id=f"e{source}-{target}", source=source, target=target)


@pytest.fixture
def store() -> GraphStore:
    return GraphStore(
        nodes=[_node("A"), _node("B", y=200), _node("C", x=300)],
        edges=[_edge("A", "B"), _edge("C", "A")],
    )


def test_delete_selected_cascades_to_edges(store: GraphStore):
    store.set_selected_node_ids(["A"])
    store.delete_selected_nodes()

    assert [n.id for n in store.nodes] == ["B", "C"]
    assert store.edges == []
    assert store.selected_node_ids == []


def test_delete_keeps_unrelated_edges():
    store = GraphStore(
        nodes=[_node("A"), _node("B"), _node("C")],
        edges=[_edge("A", "B"), _edge("B", "C")],
    )
    store.set_selected_node_ids(["A"])
    store.delete_selected_nodes()
    assert [e.id for e in store.edges] == ["eB-C"]


def test_delete_without_selection_records_nothing(store: GraphStore):
    store.delete_selected_nodes()
    assert len(store.nodes) == 3
    assert store.can_undo is False


def test_undo_restores_deleted_node_and_edges(store: GraphStore):
    store.set_selected_node_ids(["A"])
    store.delete_selected_nodes()

    assert store.undo() is True
    assert [n.id for n in store.nodes] == ["A", "B", "C"]
    assert len(store.edges) == 2


def test_history_is_bounded():
    store = GraphStore()
    for i in range(60):
        store.add_node(_node(f"n{i}"))

    undone = 0
    for _ in range(60):
        if store.undo():
            undone += 1

    assert undone == HISTORY_LIMIT
    assert len(store.nodes) == 10
    assert store.can_undo is False


def test_redo_replays_undone_change(store: GraphStore):
    store.add_node(_node("D"))
    store.undo()
    assert store.can_redo is True

    assert store.redo() is True
    assert store.get_node("D") is not None
    assert store.redo() is False


def test_new_change_clears_redo(store: GraphStore):
    store.add_node(_node("D"))
    store.undo()
    store.move_node("A", 10, 20)
    assert store.can_redo is False


def test_selection_and_modes_are_not_recorded(store: GraphStore):
    store.set_selected_node_ids(["A", "B"])
    store.set_interaction_mode("pan")
    store.toggle_edit_mode()

    assert store.can_undo is False
    assert store.interaction_mode is InteractionMode.PAN
    assert store.is_edit_mode is False

    store.move_node("C", 1, 1)
    store.undo()
    assert store.selected_node_ids == ["A", "B"]


def test_update_node_data_is_undoable(store: GraphStore):
    store.update_node_data("A", label="Renamed", description="New text")
    assert store.get_node("A").data.label == "Renamed"

    store.undo()
    assert store.get_node("A").data.label == "A"


def test_toggle_node_completed(store: GraphStore):
    store.toggle_node_completed("B")
    assert store.get_node("B").is_done is True
    store.toggle_node_completed("B")
    assert store.get_node("B").is_done is False


def test_missing_node_raises(store: GraphStore):
    with pytest.raises(ValueError, match="Node Z not found"):
        store.move_node("Z", 0, 0)
    assert store.can_undo is False


def test_duplicate_selected_nodes(store: GraphStore):
    store.set_selected_node_ids(["A", "B"])
    copies = store.duplicate_selected_nodes()

    assert len(copies) == 2
    assert len(store.nodes) == 5
    assert all(c.id.startswith(("A_copy_", "B_copy_")) for c in copies)
    assert (copies[1].position.x, copies[1].position.y) == (50, 250)
    assert all(c.to_json()["selected"] is False for c in copies)
    # Edges between the originals are not cloned
    assert len(store.edges) == 2

    # One history entry for the whole duplication
    store.undo()
    assert [n.id for n in store.nodes] == ["A", "B", "C"]


def test_load_starts_fresh_history(store: GraphStore):
    store.add_node(_node("D"))
    store.set_selected_node_ids(["D"])
    store.load([_node("X")], [])

    assert [n.id for n in store.nodes] == ["X"]
    assert store.can_undo is False
    assert store.selected_node_ids == []


def test_snapshot_is_camel_case_json(store: GraphStore):
    store.update_node_data("A", is_completed=True)
    payload = store.snapshot()

    node_a = payload["nodes"][0]
    assert node_a["data"]["isCompleted"] is True
    assert payload["edges"][0] == {
        "id": "eA-B",
        "source": "A",
        "target": "B",
        "animated": False,
    }
