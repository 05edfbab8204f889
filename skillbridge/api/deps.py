"""API dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from skillbridge.core.auth import get_auth_user
from skillbridge.core.database import get_session


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async for session in get_session():
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db)]

# Current user id (demo user when no identity header is sent)
CurrentUser = Annotated[int, Depends(get_auth_user)]
