"""User progress counters: XP, level, streak, badges and profile statistics."""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from skillbridge.core.logging import get_logger
from skillbridge.graph import progress
from skillbridge.models.project import Project
from skillbridge.models.quiz import QuizResult
from skillbridge.models.user import User
from skillbridge.schemas.graph import Node
from skillbridge.schemas.user import ProfileUpdate

logger = get_logger(__name__)

XP_PER_LEVEL = 500


# ============================================================================
# Level and streak rules
# ============================================================================


def level_for_xp(xp: int) -> int:
    """Level from total XP: a new level every ``XP_PER_LEVEL`` points."""
    return xp // XP_PER_LEVEL + 1


@dataclass(frozen=True)
class StreakState:
    streak: int
    longest_streak: int
    last_active_date: datetime | None


def next_streak(state: StreakState, now: datetime) -> StreakState:
    """Apply one session's activity to the streak counters.

    Days are compared by calendar date, but the stored ``last_active_date`` is
    the raw ``now`` timestamp rather than its midnight.
    """
    streak = state.streak
    if state.last_active_date is None:
        streak = 1
    else:
        gap = (now.date() - state.last_active_date.date()).days
        if gap == 0:
            pass
        elif gap == 1:
            streak += 1
        else:
            streak = 1

    return StreakState(
        streak=streak,
        longest_streak=max(state.longest_streak, streak),
        last_active_date=now,
    )


# ============================================================================
# Badges
# ============================================================================


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    description: str
    icon: str
    category: str  # topic | roadmap | streak | achievement
    condition_type: str  # topics | roadmaps | streak | quizzes | xp | level
    condition_value: int


BADGES: tuple[Badge, ...] = (
    Badge("first-steps", "First Steps", "Complete your first topic", "🌟", "topic", "topics", 1),
    Badge("quick-starter", "Quick Starter", "Complete 5 topics", "🚀", "topic", "topics", 5),
    Badge("knowledge-seeker", "Knowledge Seeker", "Complete 10 topics", "📚", "topic", "topics", 10),
    Badge("topic-master", "Topic Master", "Complete 25 topics", "🎯", "topic", "topics", 25),
    Badge("learning-machine", "Learning Machine", "Complete 50 topics", "🤖", "topic", "topics", 50),
    Badge("roadmap-master", "Roadmap Master", "Complete your first roadmap", "🏆", "roadmap", "roadmaps", 1),
    Badge("learning-champion", "Learning Champion", "Complete 3 roadmaps", "👑", "roadmap", "roadmaps", 3),
    Badge("skill-legend", "Skill Legend", "Complete 5 roadmaps", "⭐", "roadmap", "roadmaps", 5),
    Badge("on-fire", "On Fire", "Maintain a 3-day learning streak", "🔥", "streak", "streak", 3),
    Badge("unstoppable", "Unstoppable", "Maintain a 7-day learning streak", "⚡", "streak", "streak", 7),
    Badge("dedicated-learner", "Dedicated Learner", "Maintain a 14-day learning streak", "💎", "streak", "streak", 14),
    Badge("consistency-king", "Consistency King", "Maintain a 30-day learning streak", "👑", "streak", "streak", 30),
    Badge("quiz-rookie", "Quiz Rookie", "Pass 5 quizzes", "✅", "achievement", "quizzes", 5),
    Badge("quiz-master", "Quiz Master", "Pass 10 quizzes", "🧠", "achievement", "quizzes", 10),
    Badge("xp-hunter", "XP Hunter", "Earn 1000 XP", "💰", "achievement", "xp", 1000),
    Badge("elite-learner", "Elite Learner", "Reach Level 10", "🌟", "achievement", "level", 10),
)


@dataclass(frozen=True)
class UserStats:
    completed_topics: int = 0
    completed_roadmaps: int = 0
    current_streak: int = 0
    best_streak: int = 0
    quizzes_passed: int = 0
    xp: int = 0
    level: int = 1


def _stat_for(badge: Badge, stats: UserStats, *, streak: int) -> int:
    return {
        "topics": stats.completed_topics,
        "roadmaps": stats.completed_roadmaps,
        "streak": streak,
        "quizzes": stats.quizzes_passed,
        "xp": stats.xp,
        "level": stats.level,
    }.get(badge.condition_type, 0)


def earned_badges(stats: UserStats) -> list[Badge]:
    """Badges whose threshold is met. Streak badges use the best streak."""
    return [
        b for b in BADGES if _stat_for(b, stats, streak=stats.best_streak) >= b.condition_value
    ]


def next_badge(stats: UserStats) -> Badge | None:
    """Unearned badge closest to completion, or None when all are earned.

    Closeness of streak badges is measured with the current streak.
    """
    unearned = [
        b for b in BADGES if _stat_for(b, stats, streak=stats.best_streak) < b.condition_value
    ]
    if not unearned:
        return None

    def ratio(badge: Badge) -> float:
        return _stat_for(badge, stats, streak=stats.current_streak) / badge.condition_value

    closest = unearned[0]
    for badge in unearned[1:]:
        if ratio(badge) > ratio(closest):
            closest = badge
    return closest


# ============================================================================
# Persistence
# ============================================================================


async def get_user(db: AsyncSession, user_id: int) -> User | None:
    return await db.get(User, user_id)


async def get_or_create_user(db: AsyncSession, user_id: int) -> User:
    """Fetch a user, creating a blank account for ids handed out by the auth layer."""
    user = await db.get(User, user_id)
    if user is None:
        user = User(id=user_id, xp=0, level=1, streak=0, longest_streak=0)
        db.add(user)
        await db.flush()
        logger.info("User created", user_id=user_id)
    return user


async def add_xp(db: AsyncSession, user_id: int, amount: int) -> User:
    """Add XP and recompute the level from the new total.

    Note: This function assumes the caller will commit the transaction.
    """
    user = await db.get(User, user_id)
    if not user:
        raise ValueError(f"User {user_id} not found")

    user.xp = (user.xp or 0) + amount
    user.level = level_for_xp(user.xp)
    await db.flush()

    logger.info("XP added", user_id=user_id, amount=amount, xp=user.xp, level=user.level)
    return user


async def record_activity(db: AsyncSession, user_id: int, now: datetime | None = None) -> User:
    """Apply the once-per-session streak update.

    ``now`` defaults to naive UTC (``datetime.utcnow``), the same clock as the
    model timestamps, so calendar days are UTC days whatever the server zone.

    Note: This function assumes the caller will commit the transaction.
    """
    user = await db.get(User, user_id)
    if not user:
        raise ValueError(f"User {user_id} not found")

    updated = next_streak(
        StreakState(
            streak=user.streak or 0,
            longest_streak=user.longest_streak or 0,
            last_active_date=user.last_active_date,
        ),
        now or datetime.utcnow(),
    )
    user.streak = updated.streak
    user.longest_streak = updated.longest_streak
    user.last_active_date = updated.last_active_date
    await db.flush()

    logger.info("Activity recorded", user_id=user_id, streak=user.streak)
    return user


async def update_profile(db: AsyncSession, user_id: int, data: ProfileUpdate) -> User | None:
    user = await db.get(User, user_id)
    if not user:
        return None

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    await db.flush()

    logger.info("Profile updated", user_id=user_id)
    return user


async def get_profile_stats(db: AsyncSession, user: User) -> dict:
    """Per-project and per-roadmap progress plus badge standing for a user."""
    result = await db.execute(
        select(Project)
        .where(Project.user_id == user.id)
        .options(selectinload(Project.roadmaps))
        .order_by(Project.updated_at.desc())
        .execution_options(populate_existing=True)
    )
    projects = list(result.scalars().all())

    quiz_result = await db.execute(select(QuizResult).where(QuizResult.user_id == user.id))
    quiz_results = list(quiz_result.scalars().all())

    projects_data = []
    completed_topics = 0
    completed_roadmaps = 0
    total_roadmaps = 0

    for project in projects:
        roadmaps_data = []
        for roadmap in project.roadmaps:
            nodes = [Node.model_validate(n) for n in roadmap.nodes or []]
            summary = progress.summarize(
                nodes, [r for r in quiz_results if r.roadmap_id == roadmap.id]
            )
            roadmaps_data.append(
                {
                    "id": roadmap.id,
                    "title": roadmap.title,
                    "total_nodes": summary.total_nodes,
                    "completed_nodes": summary.completed_nodes,
                    "progress": summary.progress,
                }
            )
            completed_topics += summary.completed_nodes
            if summary.is_fully_completed:
                completed_roadmaps += 1
        total_roadmaps += len(project.roadmaps)

        total_nodes = sum(r["total_nodes"] for r in roadmaps_data)
        completed_nodes = sum(r["completed_nodes"] for r in roadmaps_data)
        projects_data.append(
            {
                "id": project.id,
                "title": project.title,
                "created_at": project.created_at,
                "updated_at": project.updated_at,
                "roadmaps": roadmaps_data,
                "total_nodes": total_nodes,
                "completed_nodes": completed_nodes,
                "overall_progress": progress.percent(completed_nodes, total_nodes),
            }
        )

    quizzes_passed = sum(1 for r in quiz_results if r.passed)
    stats = UserStats(
        completed_topics=completed_topics,
        completed_roadmaps=completed_roadmaps,
        current_streak=user.streak or 0,
        best_streak=user.longest_streak or 0,
        quizzes_passed=quizzes_passed,
        xp=user.xp or 0,
        level=user.level or 1,
    )

    return {
        "projects": projects_data,
        "stats": {
            "total_projects": len(projects),
            "total_roadmaps": total_roadmaps,
            "completed_roadmaps": completed_roadmaps,
            "completed_topics": completed_topics,
            "total_quizzes_passed": quizzes_passed,
            "total_quizzes_taken": len(quiz_results),
        },
        "badges": earned_badges(stats),
        "next_badge": next_badge(stats),
    }
