"""Project API routes."""

from fastapi import APIRouter, HTTPException, status

from skillbridge.api.deps import CurrentUser, DBSession
from skillbridge.core.logging import get_logger
from skillbridge.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from skillbridge.schemas.roadmap import RoadmapCreate, RoadmapResponse
from skillbridge.services import project_service, roadmap_service

logger = get_logger(__name__)
router = APIRouter(prefix="/projects", tags=["projects"])


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    data: ProjectCreate,
    user_id: CurrentUser,
    db: DBSession,
) -> dict:
    """Create an empty project for the current user."""
    project = await project_service.create_project(db, user_id=user_id, title=data.title)
    return ProjectResponse.model_validate(project).model_dump(mode="json")


@router.get("", response_model=list[ProjectResponse])
async def list_projects(
    db: DBSession,
    user_id: int | None = None,
) -> list[dict]:
    """List projects, newest first, optionally filtered by owner."""
    projects = await project_service.list_projects(db, user_id)
    return [ProjectResponse.model_validate(p).model_dump(mode="json") for p in projects]


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: int, db: DBSession) -> dict:
    """Get a project with its roadmaps."""
    project = await project_service.get_project(db, project_id)
    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found",
        )
    return ProjectResponse.model_validate(project).model_dump(mode="json")


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(project_id: int, data: ProjectUpdate, db: DBSession) -> dict:
    """Rename a project."""
    project = await project_service.rename_project(db, project_id, data.title)
    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found",
        )
    return ProjectResponse.model_validate(project).model_dump(mode="json")


@router.delete("/{project_id}")
async def delete_project(project_id: int, db: DBSession) -> dict:
    """Delete a project with all its roadmaps."""
    if not await project_service.delete_project(db, project_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found",
        )
    return {"success": True}


@router.post(
    "/{project_id}/roadmaps",
    response_model=RoadmapResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_roadmap(project_id: int, data: RoadmapCreate, db: DBSession) -> dict:
    """Create a roadmap in a project, laying out a generated roadmap if given."""
    try:
        roadmap = await roadmap_service.create_roadmap(db, project_id, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return RoadmapResponse.model_validate(roadmap).model_dump(mode="json")
