"""Tests for the roadmap layout engine."""

from skillbridge.graph.layout import (
    BRANCH_OFFSET_X,
    NODE_HEIGHT,
    RANK_SEP,
    calculate_step_numbers,
    layout_roadmap,
)
from skillbridge.schemas.graph import EdgeType, GeneratedRoadmap

RANK_STEP = NODE_HEIGHT + RANK_SEP


def _roadmap(nodes: list[dict], edges: list[dict]) -> GeneratedRoadmap:
    return GeneratedRoadmap.model_validate({"title": "Test", "nodes": nodes, "edges": edges})


def _core(node_id: str, node_type: str = "default") -> dict:
    return {"id": node_id, "label": f"Topic {node_id}", "type": node_type, "category": "core"}


def _branch(node_id: str, category: str = "optional") -> dict:
    return {"id": node_id, "label": f"Extra {node_id}", "category": category}


def _main(source: str, target: str) -> dict:
    return {"id": f"e{source}-{target}", "source": source, "target": target, "edgeType": "main"}


def _branch_edge(source: str, target: str) -> dict:
    return {"id": f"e{source}-{target}", "source": source, "target": target, "edgeType": "branch"}


def _positions(result) -> dict[str, tuple[float, float]]:
    return {n.id: (n.position.x, n.position.y) for n in result.nodes}


def test_layout_is_deterministic():
    roadmap = _roadmap(
        [_core("1", "input"), _core("2"), _core("3"), _core("4", "output"), _branch("a")],
        [_main("1", "2"), _main("1", "3"), _main("2", "4"), _main("3", "4"), _branch_edge("2", "a")],
    )
    assert layout_roadmap(roadmap).to_json() == layout_roadmap(roadmap).to_json()


def test_linear_path_is_stacked_top_to_bottom():
    roadmap = _roadmap(
        [_core("1"), _core("2"), _core("3")],
        [_main("1", "2"), _main("2", "3")],
    )
    positions = _positions(layout_roadmap(roadmap))
    assert positions == {
        "1": (0, 0),
        "2": (0, RANK_STEP),
        "3": (0, 2 * RANK_STEP),
    }


def test_diamond_ranks_are_centred_on_widest_rank():
    roadmap = _roadmap(
        [_core("1"), _core("2"), _core("3"), _core("4")],
        [_main("1", "2"), _main("1", "3"), _main("2", "4"), _main("3", "4")],
    )
    positions = _positions(layout_roadmap(roadmap))
    assert positions["1"] == (150, 0)
    assert {positions["2"], positions["3"]} == {(0, RANK_STEP), (300, RANK_STEP)}
    assert positions["4"] == (150, 2 * RANK_STEP)


def test_branch_nodes_alternate_left_and_right():
    roadmap = _roadmap(
        [_core("1"), _core("2"), _branch("a"), _branch("b"), _branch("c", "advanced"), _branch("d", "project")],
        [
            _main("1", "2"),
            _branch_edge("1", "a"),
            _branch_edge("1", "b"),
            _branch_edge("1", "c"),
            _branch_edge("1", "d"),
        ],
    )
    positions = _positions(layout_roadmap(roadmap))
    parent_x, parent_y = positions["1"]

    assert positions["a"] == (parent_x - BRANCH_OFFSET_X, parent_y)
    assert positions["b"] == (parent_x + BRANCH_OFFSET_X, parent_y)
    assert positions["c"] == (parent_x - BRANCH_OFFSET_X, parent_y)
    assert positions["d"] == (parent_x + BRANCH_OFFSET_X, parent_y)


def test_branch_without_core_parent_lands_at_origin():
    roadmap = _roadmap(
        [_core("1"), _core("2"), _branch("orphan"), _branch("a"), _branch("nested")],
        [_main("1", "2"), _branch_edge("1", "a"), _branch_edge("a", "nested")],
    )
    positions = _positions(layout_roadmap(roadmap))
    assert positions["orphan"] == (0, 0)
    assert positions["nested"] == (0, 0)
    assert positions["a"] != (0, 0)


def test_empty_roadmap_yields_empty_layout():
    result = layout_roadmap(_roadmap([], []))
    assert result.nodes == []
    assert result.edges == []
    assert result.to_json() == {"nodes": [], "edges": []}


def test_branch_edges_do_not_affect_core_ranks():
    roadmap = _roadmap(
        [_core("1"), _core("2"), _branch("a")],
        [_main("1", "2"), _branch_edge("1", "a"), _branch_edge("a", "2")],
    )
    positions = _positions(layout_roadmap(roadmap))
    assert positions["2"] == (0, RANK_STEP)


def test_cyclic_main_edges_still_produce_a_layout():
    roadmap = _roadmap(
        [_core("1"), _core("2"), _core("3")],
        [_main("1", "2"), _main("2", "3"), _main("3", "1")],
    )
    positions = _positions(layout_roadmap(roadmap))
    assert sorted(y for _, y in positions.values()) == [0, RANK_STEP, 2 * RANK_STEP]


def test_unknown_category_and_numeric_ids_are_treated_as_core():
    roadmap = GeneratedRoadmap.model_validate(
        {
            "title": "Test",
            "nodes": [
                {"id": 1, "label": "One", "category": "mystery"},
                {"id": 2, "label": "Two", "type": "hexagon"},
            ],
            "edges": [{"id": "e", "source": 1, "target": 2}],
        }
    )
    result = layout_roadmap(roadmap)
    positions = _positions(result)
    assert positions == {"1": (0, 0), "2": (0, RANK_STEP)}
    assert result.nodes[1].type.value == "default"


def test_edges_are_styled_by_type():
    roadmap = _roadmap(
        [_core("1"), _core("2"), _branch("a")],
        [{"id": "e1-2", "source": "1", "target": "2"}, _branch_edge("1", "a")],
    )
    edges = {e["id"]: e for e in layout_roadmap(roadmap).to_json()["edges"]}

    assert edges["e1-2"]["edgeType"] == EdgeType.MAIN.value
    assert edges["e1-2"]["animated"] is False
    assert "style" not in edges["e1-2"]

    assert edges["e1-a"]["edgeType"] == "branch"
    assert edges["e1-a"]["animated"] is True
    assert edges["e1-a"]["style"]["strokeDasharray"] == "5,5"


def test_node_json_carries_step_numbers_and_category():
    roadmap = _roadmap(
        [_core("1", "input"), _core("2"), _core("3", "output"), _branch("a", "advanced")],
        [_main("1", "2"), _main("2", "3"), _branch_edge("2", "a")],
    )
    nodes = {n["id"]: n for n in layout_roadmap(roadmap).to_json()["nodes"]}

    assert nodes["1"]["data"]["stepNumber"] == 1
    assert nodes["1"]["data"]["isStartNode"] is True
    assert nodes["3"]["data"]["stepNumber"] == 3
    assert nodes["a"]["data"]["stepNumber"] == 2
    assert nodes["a"]["data"]["category"] == "advanced"
    assert nodes["2"]["data"]["category"] == "core"
    assert nodes["2"]["data"]["isCompleted"] is False


def test_step_numbers_follow_breadth_first_distance():
    roadmap = _roadmap(
        [_core("1"), _core("2"), _core("3"), _core("4")],
        [_main("1", "2"), _main("1", "3"), _main("3", "4"), _main("2", "4")],
    )
    steps = calculate_step_numbers(roadmap.nodes, roadmap.edges)
    assert {k: v.step_number for k, v in steps.items()} == {"1": 1, "2": 2, "3": 2, "4": 3}
    assert [k for k, v in steps.items() if v.is_start_node] == ["1"]
