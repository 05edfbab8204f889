"""Tests for roadmap progress and quiz unlock rules."""

from dataclasses import dataclass

import pytest

from skillbridge.graph import progress
from skillbridge.schemas.graph import Edge, Node, NodeData


@dataclass
class Outcome:
    node_id: str
    passed: bool


def _node(node_id: str, *, completed: bool = False, quiz_passed: bool = False) -> Node:
    return Node(id=node_id, data=NodeData(label=node_id, is_completed=completed, quiz_passed=quiz_passed))


def _edge(source: str, target: str) -> Edge:
    return Edge(id=f"e{source}-{target}", source=source, target=target)


class TestPercent:
    def test_empty_roadmap_is_zero_percent(self):
        assert progress.progress_percent([]) == 0
        assert progress.percent(0, 0) == 0

    @pytest.mark.parametrize(
        ("part", "total", "expected"),
        [(1, 8, 13), (1, 3, 33), (2, 3, 67), (4, 5, 80), (5, 5, 100)],
    )
    def test_rounds_half_up(self, part, total, expected):
        assert progress.percent(part, total) == expected

    def test_progress_counts_manual_and_quiz_completion(self):
        nodes = [_node("a", completed=True), _node("b", quiz_passed=True), _node("c"), _node("d")]
        assert progress.completed_nodes(nodes) == 2
        assert progress.progress_percent(nodes) == 50

    def test_fully_completed_needs_nodes(self):
        assert progress.is_fully_completed(100, 3) is True
        assert progress.is_fully_completed(99, 3) is False
        assert progress.is_fully_completed(0, 0) is False


class TestReconciliation:
    def test_union_of_flags_and_passing_results(self):
        nodes = [_node("a", completed=True), _node("b"), _node("c")]
        results = [Outcome("b", True), Outcome("c", False)]

        summary = progress.summarize(nodes, results)

        assert summary.completed_nodes == 2
        assert summary.total_nodes == 3
        assert summary.progress == 67
        assert summary.is_fully_completed is False

    def test_never_below_either_source(self):
        nodes = [_node("a", completed=True), _node("b", quiz_passed=True), _node("c"), _node("d")]
        results = [Outcome("c", True), Outcome("a", True), Outcome("d", False)]

        from_flags = progress.completed_nodes(nodes)
        from_results = len(progress.passed_node_ids(results))
        merged = progress.reconciled_completed_count(nodes, results)

        assert merged >= from_flags
        assert merged >= from_results
        assert merged == 3

    def test_results_for_removed_nodes_are_ignored(self):
        nodes = [_node("a")]
        summary = progress.summarize(nodes, [Outcome("gone", True)])
        assert summary.completed_nodes == 0
        assert summary.progress == 0

    def test_merge_raises_flags_and_never_clears_them(self):
        nodes = [_node("a", completed=True), _node("b")]
        merged = progress.merge_quiz_results(nodes, [Outcome("a", False), Outcome("b", True)])

        assert merged[0].data.is_completed is True
        assert merged[1].data.quiz_passed is True
        assert merged[1].data.is_completed is True
        # Input nodes are left untouched
        assert nodes[1].data.quiz_passed is False

    def test_all_nodes_done_is_fully_completed(self):
        nodes = [_node("a", completed=True), _node("b")]
        summary = progress.summarize(nodes, [Outcome("b", True)])
        assert summary.progress == 100
        assert summary.is_fully_completed is True


class TestQuizUnlock:
    def test_start_node_is_unlocked(self):
        nodes = [_node("a"), _node("b")]
        assert progress.is_quiz_unlocked("a", nodes, [_edge("a", "b")]) is True

    def test_locked_until_prerequisite_quiz_passed(self):
        edges = [_edge("a", "b")]
        assert progress.is_quiz_unlocked("b", [_node("a"), _node("b")], edges) is False
        # Manual completion does not open the next quiz
        assert progress.is_quiz_unlocked("b", [_node("a", completed=True), _node("b")], edges) is False
        assert progress.is_quiz_unlocked("b", [_node("a", quiz_passed=True), _node("b")], edges) is True

    def test_all_direct_prerequisites_required(self):
        nodes = [_node("a", quiz_passed=True), _node("b"), _node("c")]
        edges = [_edge("a", "c"), _edge("b", "c")]
        assert progress.prerequisite_ids("c", edges) == ["a", "b"]
        assert progress.is_quiz_unlocked("c", nodes, edges) is False

    def test_only_immediate_predecessors_are_checked(self):
        nodes = [_node("a"), _node("b", quiz_passed=True), _node("c")]
        edges = [_edge("a", "b"), _edge("b", "c")]
        assert progress.is_quiz_unlocked("c", nodes, edges) is True

    def test_dangling_prerequisite_is_ignored(self):
        nodes = [_node("b")]
        assert progress.is_quiz_unlocked("b", nodes, [_edge("deleted", "b")]) is True

    def test_unlock_map(self):
        nodes = [_node("a", quiz_passed=True), _node("b"), _node("c")]
        edges = [_edge("a", "b"), _edge("b", "c")]
        assert progress.unlock_map(nodes, edges) == {"a": True, "b": True, "c": False}
