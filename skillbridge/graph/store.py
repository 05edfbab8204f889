"""Editing state for one roadmap canvas session.

``GraphStore`` owns the node and edge lists being edited and records a
snapshot of them before every change so edits can be undone. Snapshots hold
immutable tuples; every mutation builds new node objects instead of changing
existing ones, so snapshots can share them safely.

Selection and UI mode flags are deliberately outside the history.
"""

import uuid
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from skillbridge.core.logging import get_logger
from skillbridge.schemas.graph import Edge, Node, Position

logger = get_logger(__name__)

HISTORY_LIMIT = 50
DUPLICATE_OFFSET = 50.0


class InteractionMode(str, Enum):
    SELECT = "select"
    PAN = "pan"


@dataclass(frozen=True)
class Snapshot:
    nodes: tuple[Node, ...]
    edges: tuple[Edge, ...]


class History:
    """Bounded undo/redo buffer of graph snapshots."""

    def __init__(self, limit: int = HISTORY_LIMIT) -> None:
        self.limit = limit
        self._past: deque[Snapshot] = deque(maxlen=limit)
        self._future: list[Snapshot] = []

    def record(self, previous: Snapshot) -> None:
        """Remember the state that is about to be replaced."""
        self._past.append(previous)
        self._future.clear()

    def undo(self, present: Snapshot) -> Snapshot | None:
        if not self._past:
            return None
        self._future.append(present)
        return self._past.pop()

    def redo(self, present: Snapshot) -> Snapshot | None:
        if not self._future:
            return None
        self._past.append(present)
        return self._future.pop()

    def clear(self) -> None:
        self._past.clear()
        self._future.clear()

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    def __len__(self) -> int:
        return len(self._past)


class GraphStore:
    """Mutable canvas state with undo/redo over nodes and edges."""

    def __init__(
        self,
        nodes: Iterable[Node] = (),
        edges: Iterable[Edge] = (),
        history_limit: int = HISTORY_LIMIT,
    ) -> None:
        self._present = Snapshot(tuple(nodes), tuple(edges))
        self.history = History(history_limit)
        self.selected_node_ids: list[str] = []
        self.interaction_mode = InteractionMode.SELECT
        self.is_edit_mode = True

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> list[Node]:
        return list(self._present.nodes)

    @property
    def edges(self) -> list[Edge]:
        return list(self._present.edges)

    def get_node(self, node_id: str) -> Node | None:
        return next((n for n in self._present.nodes if n.id == node_id), None)

    def snapshot(self) -> dict[str, list[dict[str, Any]]]:
        """JSON payload for saving the roadmap."""
        return {
            "nodes": [n.to_json() for n in self._present.nodes],
            "edges": [e.to_json() for e in self._present.edges],
        }

    # ------------------------------------------------------------------
    # Graph mutations (recorded in history)
    # ------------------------------------------------------------------

    def _commit(self, nodes: Iterable[Node] | None = None, edges: Iterable[Edge] | None = None) -> None:
        next_state = Snapshot(
            tuple(nodes) if nodes is not None else self._present.nodes,
            tuple(edges) if edges is not None else self._present.edges,
        )
        self.history.record(self._present)
        self._present = next_state

    def set_nodes(self, nodes: Iterable[Node]) -> None:
        self._commit(nodes=nodes)

    def set_edges(self, edges: Iterable[Edge]) -> None:
        self._commit(edges=edges)

    def load(self, nodes: Iterable[Node], edges: Iterable[Edge]) -> None:
        """Replace the whole graph and start a fresh history."""
        self._present = Snapshot(tuple(nodes), tuple(edges))
        self.history.clear()
        self.selected_node_ids = []

    def add_node(self, node: Node) -> None:
        self._commit(nodes=(*self._present.nodes, node))

    def add_edge(self, edge: Edge) -> None:
        self._commit(edges=(*self._present.edges, edge))

    def remove_edge(self, edge_id: str) -> None:
        self._commit(edges=[e for e in self._present.edges if e.id != edge_id])

    def move_node(self, node_id: str, x: float, y: float) -> None:
        """Position change from dragging; each call is its own history entry."""
        self._replace_node(node_id, lambda n: n.model_copy(update={"position": Position(x=x, y=y)}))

    def update_node_data(self, node_id: str, **changes: Any) -> None:
        """Edit node payload fields (label, description, resources, is_completed ...)."""

        def apply(node: Node) -> Node:
            data = node.data.model_copy(update=changes)
            return node.model_copy(update={"data": data})

        self._replace_node(node_id, apply)

    def toggle_node_completed(self, node_id: str) -> None:
        node = self.get_node(node_id)
        if node is None:
            raise ValueError(f"Node {node_id} not found")
        self.update_node_data(node_id, is_completed=not node.data.is_completed)

    def _replace_node(self, node_id, transform) -> None:
        if self.get_node(node_id) is None:
            raise ValueError(f"Node {node_id} not found")
        self._commit(
            nodes=[transform(n) if n.id == node_id else n for n in self._present.nodes]
        )

    def delete_selected_nodes(self) -> None:
        """Remove selected nodes together with every edge touching them."""
        selected = set(self.selected_node_ids)
        if not selected:
            return
        nodes = [n for n in self._present.nodes if n.id not in selected]
        edges = [
            e
            for e in self._present.edges
            if e.source not in selected and e.target not in selected
        ]
        self._commit(nodes=nodes, edges=edges)
        self.selected_node_ids = []
        logger.debug("Deleted nodes", count=len(selected))

    def duplicate_selected_nodes(self) -> list[Node]:
        """Clone selected nodes with fresh ids, offset down-right, unselected.

        Edges between the originals are not copied.
        """
        selected = set(self.selected_node_ids)
        copies = []
        for node in self._present.nodes:
            if node.id not in selected:
                continue
            payload = node.to_json()
            payload.update(
                id=f"{node.id}_copy_{uuid.uuid4().hex[:8]}",
                position={
                    "x": node.position.x + DUPLICATE_OFFSET,
                    "y": node.position.y + DUPLICATE_OFFSET,
                },
                selected=False,
            )
            copies.append(Node.model_validate(payload))
        if copies:
            self._commit(nodes=(*self._present.nodes, *copies))
        return copies

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def undo(self) -> bool:
        previous = self.history.undo(self._present)
        if previous is None:
            return False
        self._present = previous
        return True

    def redo(self) -> bool:
        following = self.history.redo(self._present)
        if following is None:
            return False
        self._present = following
        return True

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def clear_history(self) -> None:
        self.history.clear()

    # ------------------------------------------------------------------
    # Selection and UI flags (not recorded)
    # ------------------------------------------------------------------

    def set_selected_node_ids(self, node_ids: Iterable[str]) -> None:
        self.selected_node_ids = list(node_ids)

    def set_interaction_mode(self, mode: InteractionMode | str) -> None:
        self.interaction_mode = InteractionMode(mode)

    def toggle_edit_mode(self) -> None:
        self.is_edit_mode = not self.is_edit_mode
