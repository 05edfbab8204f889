"""Chat message persistence."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from skillbridge.core.logging import get_logger
from skillbridge.models.message import ChatMessage

logger = get_logger(__name__)


async def save_user_message(
    db: AsyncSession,
    *,
    project_id: int,
    user_id: int,
    content: str,
    node_id: str | None = None,
) -> ChatMessage:
    """Save a user message."""
    msg = ChatMessage(
        project_id=project_id,
        user_id=user_id,
        role="user",
        content=content,
        message_type="chat",
        node_id=node_id,
    )
    db.add(msg)
    await db.flush()
    return msg


async def save_assistant_message(
    db: AsyncSession,
    *,
    project_id: int,
    user_id: int,
    content: str,
    message_type: str = "chat",
    node_id: str | None = None,
) -> ChatMessage:
    """Save an assistant reply."""
    msg = ChatMessage(
        project_id=project_id,
        user_id=user_id,
        role="assistant",
        content=content,
        message_type=message_type,
        node_id=node_id,
    )
    db.add(msg)
    await db.flush()
    return msg


async def list_messages(
    db: AsyncSession,
    project_id: int,
    *,
    node_id: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list[ChatMessage]:
    """Messages of a project panel (or one node's panel), oldest first."""
    query = select(ChatMessage).where(ChatMessage.project_id == project_id)
    if node_id is None:
        query = query.where(ChatMessage.node_id.is_(None))
    else:
        query = query.where(ChatMessage.node_id == node_id)

    result = await db.execute(
        query.order_by(ChatMessage.timestamp.asc(), ChatMessage.id.asc()).limit(limit).offset(offset)
    )
    return list(result.scalars().all())


async def recent_context(
    db: AsyncSession,
    project_id: int,
    *,
    node_id: str | None = None,
    limit: int = 10,
) -> list[dict[str, str]]:
    """Last messages of a panel as ``{role, content}`` pairs for the LLM."""
    query = select(ChatMessage).where(ChatMessage.project_id == project_id)
    if node_id is None:
        query = query.where(ChatMessage.node_id.is_(None))
    else:
        query = query.where(ChatMessage.node_id == node_id)

    result = await db.execute(
        query.order_by(ChatMessage.timestamp.desc(), ChatMessage.id.desc()).limit(limit)
    )
    messages = list(result.scalars().all())[::-1]
    return [{"role": m.role, "content": m.content} for m in messages]
