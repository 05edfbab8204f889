"""Project service for CRUD operations."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from skillbridge.core.logging import get_logger
from skillbridge.models.message import ChatMessage
from skillbridge.models.project import Project
from skillbridge.models.quiz import QuizResult
from skillbridge.models.roadmap import Roadmap
from skillbridge.services import user_service

logger = get_logger(__name__)


async def create_project(
    db: AsyncSession,
    *,
    user_id: int,
    title: str,
) -> Project:
    """Create an empty project for a user.

    Note: This function commits the transaction.
    """
    await user_service.get_or_create_user(db, user_id)

    project = Project(user_id=user_id, title=title)
    db.add(project)
    await db.commit()

    logger.info("Project created", project_id=project.id, user_id=user_id, title=title)
    return await get_project(db, project.id)  # type: ignore[return-value]


async def get_project(db: AsyncSession, project_id: int) -> Project | None:
    """Get a project with its roadmaps loaded."""
    result = await db.execute(
        select(Project)
        .where(Project.id == project_id)
        .options(selectinload(Project.roadmaps))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_projects(db: AsyncSession, user_id: int | None = None) -> list[Project]:
    """List projects, newest first, optionally restricted to one user."""
    query = (
        select(Project)
        .options(selectinload(Project.roadmaps))
        .execution_options(populate_existing=True)
    )
    if user_id is not None:
        query = query.where(Project.user_id == user_id)
    result = await db.execute(query.order_by(Project.created_at.desc(), Project.id.desc()))
    return list(result.scalars().all())


async def rename_project(db: AsyncSession, project_id: int, title: str | None) -> Project | None:
    """Rename a project; an empty title leaves it unchanged.

    Note: This function commits the transaction.
    """
    project = await db.get(Project, project_id)
    if not project:
        return None

    if title:
        project.title = title
    await db.commit()

    logger.info("Project updated", project_id=project_id)
    return await get_project(db, project_id)


async def delete_project(db: AsyncSession, project_id: int) -> bool:
    """Delete a project with its roadmaps, their quiz results and its chat history.

    Note: This function commits the transaction.
    """
    project = await get_project(db, project_id)
    if not project:
        return False

    roadmap_ids = select(Roadmap.id).where(Roadmap.project_id == project_id)
    await db.execute(delete(QuizResult).where(QuizResult.roadmap_id.in_(roadmap_ids)))
    await db.execute(delete(ChatMessage).where(ChatMessage.project_id == project_id))
    await db.delete(project)
    await db.commit()

    logger.info("Project deleted", project_id=project_id)
    return True
