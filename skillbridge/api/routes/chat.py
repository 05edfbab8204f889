"""Chat API routes."""

from typing import Any

from fastapi import APIRouter, HTTPException, status

from skillbridge.agent.graph import get_graph
from skillbridge.api.deps import CurrentUser, DBSession
from skillbridge.core.logging import get_logger
from skillbridge.graph.layout import layout_roadmap
from skillbridge.schemas.chat import ChatRequest, ChatResponse, MessageResponse
from skillbridge.schemas.graph import GeneratedRoadmap
from skillbridge.services import message_service, project_service, roadmap_service, user_service

logger = get_logger(__name__)
router = APIRouter(prefix="/chat", tags=["chat"])


def _node_context(project, node_id: str | None) -> dict | None:
    if project is None or node_id is None:
        return None
    for roadmap in project.roadmaps:
        nodes, _ = roadmap_service.parse_graph(roadmap)
        for node in nodes:
            if node.id == node_id:
                return {"label": node.data.label, "description": node.data.description}
    return None


@router.post("", response_model=ChatResponse)
async def chat(data: ChatRequest, user_id: CurrentUser, db: DBSession) -> dict[str, Any]:
    """Answer a chat message, generating a positioned roadmap when asked for one."""
    project = None
    history: list[dict[str, str]] = []
    if data.project_id is not None:
        project = await project_service.get_project(db, data.project_id)
        if not project:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Project not found",
            )
        history = await message_service.recent_context(db, project.id, node_id=data.node_id)

    state = await get_graph().ainvoke(
        {
            "raw_message": data.message,
            "user_id": user_id,
            "project_id": data.project_id,
            "node_id": data.node_id,
            "node_context": _node_context(project, data.node_id),
            "preferences": data.preferences.model_dump(),
            "history": history,
        }
    )

    response = state.get("response") or {"type": "chat", "content": ""}
    roadmap = None
    if state.get("roadmap"):
        generated = GeneratedRoadmap.model_validate(state["roadmap"])
        roadmap = {"title": generated.title, **layout_roadmap(generated).to_json()}

    if project is not None:
        await user_service.get_or_create_user(db, user_id)
        await message_service.save_user_message(
            db, project_id=project.id, user_id=user_id, content=data.message, node_id=data.node_id
        )
        await message_service.save_assistant_message(
            db,
            project_id=project.id,
            user_id=user_id,
            content=response["content"],
            message_type=response["type"],
            node_id=data.node_id,
        )
        await db.commit()

    logger.info("Chat handled", reply_type=response["type"], project_id=data.project_id)
    return {"type": response["type"], "message": response["content"], "roadmap": roadmap}


@router.get("/{project_id}/messages", response_model=list[MessageResponse])
async def list_messages(
    project_id: int,
    db: DBSession,
    node_id: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list:
    """Chat history of a project panel (or one node's panel), oldest first."""
    return await message_service.list_messages(
        db, project_id, node_id=node_id, limit=limit, offset=offset
    )
