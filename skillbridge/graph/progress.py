"""Completion and progress rules for roadmap graphs.

All functions are pure and work on node/edge models; database access lives
in the services that call them.
"""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

from skillbridge.schemas.graph import Edge, Node


class QuizOutcome(Protocol):
    """Anything carrying the node id and pass flag of a quiz result."""

    node_id: str
    passed: bool


@dataclass(frozen=True)
class ProgressSummary:
    total_nodes: int
    completed_nodes: int
    progress: int

    @property
    def is_fully_completed(self) -> bool:
        return is_fully_completed(self.progress, self.total_nodes)


def round_percent(value: float) -> int:
    """Round half up, the way dashboards display percentages."""
    return math.floor(value + 0.5)


def percent(part: int, total: int) -> int:
    """Whole-number percentage; 0 when there is nothing to count."""
    if total <= 0:
        return 0
    return round_percent(part / total * 100)


def completed_nodes(nodes: Iterable[Node]) -> int:
    return sum(1 for node in nodes if node.is_done)


def progress_percent(nodes: Sequence[Node]) -> int:
    return percent(completed_nodes(nodes), len(nodes))


def is_fully_completed(progress: int, total_nodes: int) -> bool:
    return total_nodes > 0 and progress == 100


def passed_node_ids(results: Iterable[QuizOutcome]) -> set[str]:
    return {r.node_id for r in results if r.passed}


def merge_quiz_results(nodes: Sequence[Node], results: Iterable[QuizOutcome]) -> list[Node]:
    """Fold passing quiz results into node flags.

    Node JSON and quiz rows are saved independently and can drift apart, so
    flags are only ever raised here: a node already marked done stays done
    even without a matching result.
    """
    passed = passed_node_ids(results)
    merged: list[Node] = []
    for node in nodes:
        if node.id in passed and not (node.data.quiz_passed and node.data.is_completed):
            data = node.data.model_copy(update={"quiz_passed": True, "is_completed": True})
            node = node.model_copy(update={"data": data})
        merged.append(node)
    return merged


def reconciled_completed_count(nodes: Sequence[Node], results: Iterable[QuizOutcome]) -> int:
    """Completed count that never under-reports either source.

    Results referencing nodes that are no longer in the roadmap are ignored.
    """
    passed = passed_node_ids(results)
    return sum(1 for node in nodes if node.is_done or node.id in passed)


def summarize(nodes: Sequence[Node], results: Iterable[QuizOutcome] = ()) -> ProgressSummary:
    total = len(nodes)
    completed = reconciled_completed_count(nodes, results)
    return ProgressSummary(
        total_nodes=total,
        completed_nodes=completed,
        progress=percent(completed, total),
    )


def prerequisite_ids(node_id: str, edges: Iterable[Edge]) -> list[str]:
    """Immediate predecessors of a node, in edge order, without duplicates."""
    seen: list[str] = []
    for edge in edges:
        if edge.target == node_id and edge.source not in seen:
            seen.append(edge.source)
    return seen


def is_quiz_unlocked(node_id: str, nodes: Sequence[Node], edges: Iterable[Edge]) -> bool:
    """True when every immediate predecessor has passed its quiz.

    Only direct predecessors are checked, not the whole ancestor chain.
    Edges whose source is not a node of the roadmap are ignored.
    """
    by_id = {node.id: node for node in nodes}
    for source_id in prerequisite_ids(node_id, edges):
        source = by_id.get(source_id)
        if source is not None and not source.data.quiz_passed:
            return False
    return True


def unlock_map(nodes: Sequence[Node], edges: Sequence[Edge]) -> dict[str, bool]:
    return {node.id: is_quiz_unlocked(node.id, nodes, edges) for node in nodes}
