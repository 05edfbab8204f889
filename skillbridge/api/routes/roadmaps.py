"""Roadmap API routes."""

from fastapi import APIRouter, HTTPException, status

from skillbridge.agent.nodes.planner import generate_roadmap
from skillbridge.api.deps import CurrentUser, DBSession
from skillbridge.core.logging import get_logger
from skillbridge.graph import progress
from skillbridge.graph.layout import layout_roadmap
from skillbridge.schemas.graph import ChatFallback, GeneratedRoadmap
from skillbridge.schemas.roadmap import (
    RoadmapGenerateRequest,
    RoadmapLayout,
    RoadmapProgress,
    RoadmapResponse,
    RoadmapUpdate,
)
from skillbridge.services import roadmap_service

logger = get_logger(__name__)
router = APIRouter(prefix="/roadmaps", tags=["roadmaps"])


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Roadmap not found",
    )


@router.post("/generate")
async def generate(data: RoadmapGenerateRequest) -> dict:
    """Generate and lay out a roadmap for a learning goal.

    Returns either ``{"type": "roadmap", ...positioned graph}`` or the
    model's conversational reply as ``{"type": "chat", "message": ...}``.
    """
    try:
        result = await generate_roadmap(data.prompt, data.preferences)
    except Exception as e:
        logger.error("Roadmap generation failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to generate roadmap",
        ) from e

    if isinstance(result, ChatFallback):
        return result.model_dump()

    layout = layout_roadmap(result).to_json()
    return {"type": "roadmap", "title": result.title, **layout}


@router.post("/layout", response_model=RoadmapLayout)
async def layout(data: GeneratedRoadmap) -> dict:
    """Position an unpositioned roadmap for the canvas."""
    return {"title": data.title, **layout_roadmap(data).to_json()}


@router.get("/{roadmap_id}", response_model=RoadmapResponse)
async def get_roadmap(roadmap_id: int, db: DBSession) -> dict:
    """Get a roadmap by ID."""
    roadmap = await roadmap_service.get_roadmap(db, roadmap_id)
    if not roadmap:
        raise _not_found()
    return RoadmapResponse.model_validate(roadmap).model_dump(mode="json")


@router.put("/{roadmap_id}", response_model=RoadmapResponse)
async def update_roadmap(roadmap_id: int, data: RoadmapUpdate, db: DBSession) -> dict:
    """Save a roadmap; provided node/edge arrays replace the stored ones."""
    roadmap = await roadmap_service.update_roadmap(db, roadmap_id, data)
    if not roadmap:
        raise _not_found()
    return RoadmapResponse.model_validate(roadmap).model_dump(mode="json")


@router.delete("/{roadmap_id}")
async def delete_roadmap(roadmap_id: int, db: DBSession) -> dict:
    """Delete a roadmap and its quiz results."""
    if not await roadmap_service.delete_roadmap(db, roadmap_id):
        raise _not_found()
    return {"success": True}


@router.get("/{roadmap_id}/merged", response_model=RoadmapResponse)
async def get_merged_roadmap(roadmap_id: int, user_id: CurrentUser, db: DBSession) -> dict:
    """Roadmap with the current user's passing quiz results folded into the nodes."""
    roadmap = await roadmap_service.get_roadmap(db, roadmap_id)
    if not roadmap:
        raise _not_found()

    merged = await roadmap_service.get_merged_nodes(db, roadmap, user_id)
    payload = RoadmapResponse.model_validate(roadmap).model_dump(mode="json")
    payload["nodes"] = [n.to_json() for n in merged]
    return payload


@router.get("/{roadmap_id}/progress", response_model=RoadmapProgress)
async def get_roadmap_progress(roadmap_id: int, user_id: CurrentUser, db: DBSession) -> dict:
    """Completion totals and per-node quiz unlock flags."""
    roadmap = await roadmap_service.get_roadmap(db, roadmap_id)
    if not roadmap:
        raise _not_found()
    return await roadmap_service.get_roadmap_progress(db, roadmap, user_id)


@router.get("/{roadmap_id}/nodes/{node_id}/unlocked")
async def get_node_unlocked(
    roadmap_id: int, node_id: str, user_id: CurrentUser, db: DBSession
) -> dict:
    """Whether the quiz of a node is open (all direct prerequisites passed)."""
    roadmap = await roadmap_service.get_roadmap(db, roadmap_id)
    if not roadmap:
        raise _not_found()

    merged = await roadmap_service.get_merged_nodes(db, roadmap, user_id)
    if not any(n.id == node_id for n in merged):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Node not found",
        )
    _, edges = roadmap_service.parse_graph(roadmap)
    return {
        "node_id": node_id,
        "unlocked": progress.is_quiz_unlocked(node_id, merged, edges),
        "prerequisites": progress.prerequisite_ids(node_id, edges),
    }
