"""Roadmap service for CRUD operations and progress tracking."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from skillbridge.core.logging import get_logger
from skillbridge.graph import progress
from skillbridge.graph.layout import layout_roadmap
from skillbridge.models.project import Project
from skillbridge.models.quiz import QuizResult
from skillbridge.models.roadmap import Roadmap
from skillbridge.schemas.graph import Edge, Node
from skillbridge.schemas.roadmap import RoadmapCreate, RoadmapUpdate

logger = get_logger(__name__)

DEFAULT_TITLE = "Untitled Roadmap"


def parse_graph(roadmap: Roadmap) -> tuple[list[Node], list[Edge]]:
    """Validate the stored JSON arrays into graph models."""
    nodes = [Node.model_validate(n) for n in roadmap.nodes or []]
    edges = [Edge.model_validate(e) for e in roadmap.edges or []]
    return nodes, edges


# ============================================================================
# Progress
# ============================================================================


async def get_merged_nodes(
    db: AsyncSession,
    roadmap: Roadmap,
    user_id: int,
) -> list[Node]:
    """Roadmap nodes with the user's passing quiz results folded in."""
    result = await db.execute(
        select(QuizResult).where(
            QuizResult.roadmap_id == roadmap.id,
            QuizResult.user_id == user_id,
        )
    )
    nodes, _ = parse_graph(roadmap)
    return progress.merge_quiz_results(nodes, result.scalars().all())


async def get_roadmap_progress(
    db: AsyncSession,
    roadmap: Roadmap,
    user_id: int,
) -> dict:
    """Calculate completion and quiz unlock state for a roadmap.

    Args:
        db: Database session
        roadmap: Roadmap model
        user_id: Learner whose quiz results are merged in

    Returns:
        Progress data with totals, percentage and per-node unlock flags
    """
    merged = await get_merged_nodes(db, roadmap, user_id)
    _, edges = parse_graph(roadmap)
    summary = progress.summarize(merged)

    return {
        "roadmap_id": roadmap.id,
        "title": roadmap.title,
        "total_nodes": summary.total_nodes,
        "completed_nodes": summary.completed_nodes,
        "progress": summary.progress,
        "is_completed": summary.is_fully_completed,
        "unlocked": progress.unlock_map(merged, edges),
    }


async def mark_node_quiz_passed(
    db: AsyncSession,
    roadmap_id: int,
    node_id: str,
) -> bool:
    """Raise the quiz flag of a node in the stored roadmap JSON.

    Returns False when the roadmap or node does not exist. The flag is never
    cleared here or anywhere else.

    Note: This function assumes the caller will commit the transaction.
    """
    roadmap = await db.get(Roadmap, roadmap_id)
    if not roadmap:
        return False

    found = False
    updated = []
    for raw in roadmap.nodes or []:
        if raw.get("id") == node_id:
            found = True
            data = {**(raw.get("data") or {}), "quizPassed": True, "isCompleted": True}
            raw = {**raw, "data": data}
        updated.append(raw)

    if found:
        # Reassign so the JSON column is flagged dirty
        roadmap.nodes = updated
        await db.flush()
    return found


# ============================================================================
# CRUD Operations
# ============================================================================


async def create_roadmap(
    db: AsyncSession,
    project_id: int,
    roadmap_data: RoadmapCreate,
) -> Roadmap:
    """Create a roadmap in a project.

    A generated roadmap is laid out first; otherwise the given node and edge
    arrays (or empty ones) are stored as-is.

    Raises:
        ValueError: If the project does not exist

    Note: This function commits the transaction.
    """
    project = await db.get(Project, project_id)
    if not project:
        raise ValueError(f"Project {project_id} not found")

    if roadmap_data.generated is not None:
        layout = layout_roadmap(roadmap_data.generated).to_json()
        title = roadmap_data.title or roadmap_data.generated.title
        nodes, edges = layout["nodes"], layout["edges"]
    else:
        title = roadmap_data.title or DEFAULT_TITLE
        nodes = [n.to_json() for n in roadmap_data.nodes or []]
        edges = [e.to_json() for e in roadmap_data.edges or []]

    roadmap = Roadmap(project_id=project_id, title=title, nodes=nodes, edges=edges)
    db.add(roadmap)
    await db.commit()
    await db.refresh(roadmap)

    logger.info(
        "Roadmap created",
        roadmap_id=roadmap.id,
        project_id=project_id,
        nodes=len(nodes),
        edges=len(edges),
    )
    return roadmap


async def get_roadmap(
    db: AsyncSession,
    roadmap_id: int,
) -> Roadmap | None:
    """Get a roadmap by ID."""
    return await db.get(Roadmap, roadmap_id)


async def list_project_roadmaps(
    db: AsyncSession,
    project_id: int,
) -> list[Roadmap]:
    """List roadmaps of a project, oldest first."""
    result = await db.execute(
        select(Roadmap).where(Roadmap.project_id == project_id).order_by(Roadmap.created_at)
    )
    return list(result.scalars().all())


async def update_roadmap(
    db: AsyncSession,
    roadmap_id: int,
    update_data: RoadmapUpdate,
) -> Roadmap | None:
    """Replace the provided fields of a roadmap wholesale.

    Note: This function commits the transaction.
    """
    roadmap = await db.get(Roadmap, roadmap_id)
    if not roadmap:
        return None

    if update_data.title:
        roadmap.title = update_data.title
    if update_data.nodes is not None:
        roadmap.nodes = [n.to_json() for n in update_data.nodes]
    if update_data.edges is not None:
        roadmap.edges = [e.to_json() for e in update_data.edges]

    await db.commit()
    await db.refresh(roadmap)

    logger.info("Roadmap updated", roadmap_id=roadmap_id)
    return roadmap


async def delete_roadmap(
    db: AsyncSession,
    roadmap_id: int,
) -> bool:
    """Delete a roadmap and its quiz results.

    Note: This function commits the transaction.
    """
    roadmap = await db.get(Roadmap, roadmap_id)
    if not roadmap:
        return False

    await db.execute(delete(QuizResult).where(QuizResult.roadmap_id == roadmap_id))
    await db.delete(roadmap)
    await db.commit()

    logger.info("Roadmap deleted", roadmap_id=roadmap_id)
    return True
