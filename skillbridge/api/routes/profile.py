"""Profile API routes: user stats, XP and streaks."""

from dataclasses import asdict

from fastapi import APIRouter, HTTPException, status

from skillbridge.api.deps import DBSession
from skillbridge.core.logging import get_logger
from skillbridge.schemas.user import (
    AddXPRequest,
    ProfileResponse,
    ProfileUpdate,
    StreakResponse,
    UserResponse,
    XPResponse,
)
from skillbridge.services import user_service

logger = get_logger(__name__)
router = APIRouter(prefix="/profile", tags=["profile"])


def _user_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="User not found",
    )


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_profile(user_id: int, db: DBSession) -> dict:
    """User profile with per-project progress, totals and badges."""
    user = await user_service.get_user(db, user_id)
    if not user:
        raise _user_not_found()

    stats = await user_service.get_profile_stats(db, user)
    next_badge = stats["next_badge"]
    return {
        "user": UserResponse.model_validate(user).model_dump(mode="json"),
        "projects": stats["projects"],
        "stats": stats["stats"],
        "badges": [asdict(b) for b in stats["badges"]],
        "next_badge": asdict(next_badge) if next_badge else None,
    }


@router.put("/{user_id}", response_model=UserResponse)
async def update_profile(user_id: int, data: ProfileUpdate, db: DBSession) -> dict:
    """Update the provided profile fields."""
    user = await user_service.update_profile(db, user_id, data)
    if not user:
        raise _user_not_found()
    await db.commit()
    await db.refresh(user)
    return UserResponse.model_validate(user).model_dump(mode="json")


@router.post("/{user_id}/add-xp", response_model=XPResponse)
async def add_xp(user_id: int, data: AddXPRequest, db: DBSession) -> dict:
    """Add XP; the level is recomputed from the new total."""
    try:
        user = await user_service.add_xp(db, user_id, data.amount)
    except ValueError as e:
        raise _user_not_found() from e
    await db.commit()
    return {"id": user.id, "xp": user.xp, "level": user.level}


@router.post("/{user_id}/activity", response_model=StreakResponse)
async def record_activity(user_id: int, db: DBSession) -> dict:
    """Record today's learning session and update the streak."""
    try:
        user = await user_service.record_activity(db, user_id)
    except ValueError as e:
        raise _user_not_found() from e
    await db.commit()
    return {
        "streak": user.streak,
        "longest_streak": user.longest_streak,
        "last_active_date": user.last_active_date,
    }
