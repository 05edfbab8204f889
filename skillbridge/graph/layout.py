"""Roadmap layout engine.

Turns the flat node/edge lists produced by the roadmap generator into
positioned canvas nodes. Core nodes are laid out as a layered top-to-bottom
graph over main edges; branch nodes (optional, advanced, project) sit beside
the node their incoming edge comes from.

Coordinates are computed for node centres and converted to top-left corners
on output, matching what the canvas expects.
"""

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass

import networkx as nx

from skillbridge.core.logging import get_logger
from skillbridge.schemas.graph import (
    Edge,
    EdgeType,
    GeneratedEdge,
    GeneratedNode,
    GeneratedRoadmap,
    Node,
    NodeData,
    Position,
)

logger = get_logger(__name__)

NODE_WIDTH = 200
NODE_HEIGHT = 80
NODE_SEP = 100  # horizontal gap between nodes of one rank
RANK_SEP = 120  # vertical gap between ranks
BRANCH_OFFSET_X = 280

ORDERING_SWEEPS = 4

BRANCH_EDGE_STYLE = {"strokeDasharray": "5,5", "stroke": "hsl(var(--muted-foreground))"}


@dataclass(frozen=True)
class StepInfo:
    step_number: int
    is_start_node: bool


@dataclass
class LayoutResult:
    nodes: list[Node]
    edges: list[Edge]

    def to_json(self) -> dict[str, list[dict]]:
        return {
            "nodes": [n.to_json() for n in self.nodes],
            "edges": [e.to_json() for e in self.edges],
        }


# ============================================================================
# Layered layout of core nodes
# ============================================================================


def _build_core_graph(
    core_ids: list[str], edges: Sequence[GeneratedEdge]
) -> nx.DiGraph:
    graph = nx.DiGraph()
    graph.add_nodes_from(core_ids)
    core = set(core_ids)
    for edge in edges:
        if not edge.is_main:
            continue
        if edge.source in core and edge.target in core and edge.source != edge.target:
            graph.add_edge(edge.source, edge.target)
    return graph


def _make_acyclic(graph: nx.DiGraph) -> nx.DiGraph:
    """Drop the closing edge of each cycle until the graph is a DAG.

    The generator is expected to return a DAG but nothing enforces it.
    """
    dag = graph.copy()
    while True:
        try:
            cycle = nx.find_cycle(dag)
        except nx.NetworkXNoCycle:
            return dag
        source, target = cycle[-1][0], cycle[-1][1]
        dag.remove_edge(source, target)
        logger.debug("Ignoring cyclic edge for layout", source=source, target=target)


def _assign_ranks(dag: nx.DiGraph) -> dict[str, int]:
    """Longest-path layering: each node sits one rank below its deepest parent."""
    ranks: dict[str, int] = {}
    for node_id in nx.lexicographical_topological_sort(dag, key=_insertion_key(dag)):
        parents = list(dag.predecessors(node_id))
        ranks[node_id] = max((ranks[p] + 1 for p in parents), default=0)
    return ranks


def _insertion_key(graph: nx.DiGraph):
    order = {node_id: index for index, node_id in enumerate(graph.nodes)}
    return lambda node_id: order[node_id]


def _count_crossings(upper: list[str], lower: list[str], dag: nx.DiGraph) -> int:
    lower_pos = {node_id: i for i, node_id in enumerate(lower)}
    segments = [
        (i, lower_pos[child])
        for i, node_id in enumerate(upper)
        for child in dag.successors(node_id)
        if child in lower_pos
    ]
    crossings = 0
    for a in range(len(segments)):
        for b in range(a + 1, len(segments)):
            (u1, l1), (u2, l2) = segments[a], segments[b]
            if (u1 - u2) * (l1 - l2) < 0:
                crossings += 1
    return crossings


def _total_crossings(layers: list[list[str]], dag: nx.DiGraph) -> int:
    return sum(_count_crossings(layers[i], layers[i + 1], dag) for i in range(len(layers) - 1))


def _median(values: list[int]) -> float:
    values = sorted(values)
    mid = len(values) // 2
    if len(values) % 2:
        return float(values[mid])
    return (values[mid - 1] + values[mid]) / 2


def _reorder(layer: list[str], fixed: list[str], neighbours) -> list[str]:
    """Sort one layer by the median position of its neighbours in ``fixed``.

    Nodes without neighbours in the fixed layer keep their current slot.
    """
    fixed_pos = {node_id: i for i, node_id in enumerate(fixed)}
    keyed: list[tuple[float, int, str]] = []
    for index, node_id in enumerate(layer):
        positions = [fixed_pos[n] for n in neighbours(node_id) if n in fixed_pos]
        key = _median(positions) if positions else float(index)
        keyed.append((key, index, node_id))
    keyed.sort()
    return [node_id for _, _, node_id in keyed]


def _order_layers(ranks: dict[str, int], dag: nx.DiGraph) -> list[list[str]]:
    depth = max(ranks.values(), default=-1) + 1
    layers: list[list[str]] = [[] for _ in range(depth)]
    for node_id in dag.nodes:
        layers[ranks[node_id]].append(node_id)

    best = [list(layer) for layer in layers]
    best_crossings = _total_crossings(best, dag)

    for sweep in range(ORDERING_SWEEPS):
        if best_crossings == 0:
            break
        if sweep % 2 == 0:
            for i in range(1, depth):
                layers[i] = _reorder(layers[i], layers[i - 1], dag.predecessors)
        else:
            for i in range(depth - 2, -1, -1):
                layers[i] = _reorder(layers[i], layers[i + 1], dag.successors)
        crossings = _total_crossings(layers, dag)
        if crossings < best_crossings:
            best = [list(layer) for layer in layers]
            best_crossings = crossings

    return best


def layered_layout(core_ids: list[str], edges: Sequence[GeneratedEdge]) -> dict[str, Position]:
    """Centre positions of core nodes in a top-to-bottom layered layout.

    Ranks are spaced ``NODE_HEIGHT + RANK_SEP`` apart. Inside a rank nodes are
    spaced ``NODE_WIDTH + NODE_SEP`` apart and every rank is centred on the
    widest one. The whole drawing is translated so its bounding box starts at
    the origin.
    """
    if not core_ids:
        return {}

    dag = _make_acyclic(_build_core_graph(core_ids, edges))
    ranks = _assign_ranks(dag)
    layers = _order_layers(ranks, dag)

    step_x = NODE_WIDTH + NODE_SEP
    step_y = NODE_HEIGHT + RANK_SEP
    widest = max(len(layer) for layer in layers)
    total_width = (widest - 1) * step_x

    positions: dict[str, Position] = {}
    for rank, layer in enumerate(layers):
        layer_width = (len(layer) - 1) * step_x
        offset = (total_width - layer_width) / 2
        for index, node_id in enumerate(layer):
            positions[node_id] = Position(
                x=NODE_WIDTH / 2 + offset + index * step_x,
                y=NODE_HEIGHT / 2 + rank * step_y,
            )
    return positions


# ============================================================================
# Branch placement and step numbers
# ============================================================================


def place_branch_nodes(
    branch_nodes: Sequence[GeneratedNode],
    edges: Sequence[GeneratedEdge],
    core_positions: dict[str, Position],
) -> dict[str, Position]:
    """Centre positions of branch nodes next to their parent.

    The parent is the source of the first edge pointing at the branch node and
    must be a laid-out core node. Sides alternate starting on the left; a node
    goes left whenever the left side holds no more branches than the right.
    Branch nodes without a positioned parent are absent from the result.
    """
    positions: dict[str, Position] = {}
    left_count = 0
    right_count = 0

    for branch in branch_nodes:
        parent_edge = next((e for e in edges if e.target == branch.id), None)
        if parent_edge is None:
            continue
        parent = core_positions.get(parent_edge.source)
        if parent is None:
            continue

        is_left = left_count <= right_count
        offset = -BRANCH_OFFSET_X if is_left else BRANCH_OFFSET_X
        positions[branch.id] = Position(x=parent.x + offset, y=parent.y)
        if is_left:
            left_count += 1
        else:
            right_count += 1

    return positions


def calculate_step_numbers(
    nodes: Sequence[GeneratedNode], edges: Sequence[GeneratedEdge]
) -> dict[str, StepInfo]:
    """Number core nodes by breadth-first distance from the start nodes.

    Start nodes are core nodes with no incoming edge (of any type) and get step
    1. Branch nodes share the step of the source of their first incoming edge.
    """
    by_id = {n.id: n for n in nodes}
    in_degree = {n.id: 0 for n in nodes}
    children: dict[str, list[str]] = {n.id: [] for n in nodes}
    for edge in edges:
        in_degree[edge.target] = in_degree.get(edge.target, 0) + 1
        children.setdefault(edge.source, []).append(edge.target)

    result: dict[str, StepInfo] = {}
    queue: deque[tuple[str, int]] = deque()
    for node in nodes:
        if node.is_core and in_degree[node.id] == 0:
            result[node.id] = StepInfo(step_number=1, is_start_node=True)
            queue.append((node.id, 1))

    while queue:
        node_id, step = queue.popleft()
        for child_id in children.get(node_id, []):
            child = by_id.get(child_id)
            if child_id in result or child is None or not child.is_core:
                continue
            result[child_id] = StepInfo(step_number=step + 1, is_start_node=False)
            queue.append((child_id, step + 1))

    for node in nodes:
        if node.is_core or node.id in result:
            continue
        parent_edge = next((e for e in edges if e.target == node.id), None)
        if parent_edge and parent_edge.source in result:
            result[node.id] = StepInfo(
                step_number=result[parent_edge.source].step_number, is_start_node=False
            )

    return result


# ============================================================================
# Public entry point
# ============================================================================


def _convert_edge(edge: GeneratedEdge) -> Edge:
    is_branch = edge.edge_type == EdgeType.BRANCH
    return Edge(
        id=edge.id,
        source=edge.source,
        target=edge.target,
        edge_type=edge.edge_type or EdgeType.MAIN,
        animated=is_branch,
        style=dict(BRANCH_EDGE_STYLE) if is_branch else None,
    )


def layout_roadmap(roadmap: GeneratedRoadmap) -> LayoutResult:
    """Position a generated roadmap for the canvas.

    Deterministic for a given input. Never raises on degenerate input: an
    empty roadmap yields empty lists, and branch nodes without a positioned
    parent land at the origin.
    """
    core_nodes = [n for n in roadmap.nodes if n.is_core]
    branch_nodes = [n for n in roadmap.nodes if not n.is_core]

    core_positions = layered_layout([n.id for n in core_nodes], roadmap.edges)
    branch_positions = place_branch_nodes(branch_nodes, roadmap.edges, core_positions)
    steps = calculate_step_numbers(roadmap.nodes, roadmap.edges)

    nodes: list[Node] = []
    for source in roadmap.nodes:
        centre = core_positions.get(source.id)
        if centre is None:
            centre = branch_positions.get(source.id)
        if centre is not None:
            position = Position(x=centre.x - NODE_WIDTH / 2, y=centre.y - NODE_HEIGHT / 2)
        else:
            position = Position(x=0, y=0)

        step = steps.get(source.id)
        nodes.append(
            Node(
                id=source.id,
                type=source.type,
                position=position,
                data=NodeData(
                    label=source.label,
                    description=source.data.description,
                    resources=list(source.data.resources),
                    category=source.category or "core",
                    step_number=step.step_number if step else None,
                    is_start_node=step.is_start_node if step else False,
                ),
            )
        )

    edges = [_convert_edge(e) for e in roadmap.edges]

    logger.debug(
        "Roadmap laid out",
        core_nodes=len(core_nodes),
        branch_nodes=len(branch_nodes),
        unplaced=len(branch_nodes) - len(branch_positions),
    )
    return LayoutResult(nodes=nodes, edges=edges)
