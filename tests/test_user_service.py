"""Tests for streaks, badges and profile statistics."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from skillbridge.models import Project, QuizResult, Roadmap, User
from skillbridge.services import user_service
from skillbridge.services.user_service import (
    StreakState,
    UserStats,
    earned_badges,
    next_badge,
    next_streak,
)

NOW = datetime(2026, 3, 10, 18, 45, 12)


class TestStreak:
    def test_first_activity_starts_streak(self):
        state = next_streak(StreakState(0, 0, None), NOW)
        assert (state.streak, state.longest_streak) == (1, 1)

    def test_yesterday_increments(self):
        state = next_streak(StreakState(4, 4, NOW - timedelta(days=1)), NOW)
        assert (state.streak, state.longest_streak) == (5, 5)

    def test_late_yesterday_still_counts_as_one_day(self):
        last = datetime(2026, 3, 9, 23, 59)
        state = next_streak(StreakState(2, 6, last), datetime(2026, 3, 10, 0, 1))
        assert (state.streak, state.longest_streak) == (3, 6)

    def test_gap_resets(self):
        state = next_streak(StreakState(9, 9, NOW - timedelta(days=3)), NOW)
        assert (state.streak, state.longest_streak) == (1, 9)

    def test_same_day_is_unchanged(self):
        earlier = NOW.replace(hour=7)
        state = next_streak(StreakState(3, 5, earlier), NOW)
        assert (state.streak, state.longest_streak) == (3, 5)

    def test_future_date_resets(self):
        state = next_streak(StreakState(3, 5, NOW + timedelta(days=2)), NOW)
        assert state.streak == 1

    def test_stores_raw_timestamp(self):
        state = next_streak(StreakState(1, 1, NOW - timedelta(days=1)), NOW)
        assert state.last_active_date == NOW


class TestBadges:
    def test_no_activity_earns_nothing(self):
        assert earned_badges(UserStats()) == []

    def test_thresholds(self):
        stats = UserStats(completed_topics=5, completed_roadmaps=1, best_streak=7, xp=1000, level=3)
        earned = {b.id for b in earned_badges(stats)}
        assert earned == {
            "first-steps",
            "quick-starter",
            "roadmap-master",
            "on-fire",
            "unstoppable",
            "xp-hunter",
        }

    def test_next_badge_is_closest_to_completion(self):
        stats = UserStats(completed_topics=1, quizzes_passed=4)
        assert next_badge(stats).id == "quiz-rookie"

    def test_next_badge_ties_pick_catalogue_order(self):
        # knowledge-seeker and quiz-master are both half way
        stats = UserStats(completed_topics=5, quizzes_passed=5)
        assert next_badge(stats).id == "knowledge-seeker"


@pytest.mark.asyncio
async def test_get_or_create_user_is_idempotent(test_session: AsyncSession) -> None:
    first = await user_service.get_or_create_user(test_session, 7)
    second = await user_service.get_or_create_user(test_session, 7)
    assert first is second
    assert (first.xp, first.level, first.streak) == (0, 1, 0)


@pytest.mark.asyncio
async def test_add_xp_recomputes_level(test_session: AsyncSession) -> None:
    await user_service.get_or_create_user(test_session, 1)
    user = await user_service.add_xp(test_session, 1, 450)
    assert user.level == 1
    user = await user_service.add_xp(test_session, 1, 100)
    assert (user.xp, user.level) == (550, 2)


@pytest.mark.asyncio
async def test_add_xp_unknown_user(test_session: AsyncSession) -> None:
    with pytest.raises(ValueError, match="User 42 not found"):
        await user_service.add_xp(test_session, 42, 10)


@pytest.mark.asyncio
async def test_record_activity_updates_streak(test_session: AsyncSession) -> None:
    user = User(id=1, xp=0, level=1, streak=2, longest_streak=2, last_active_date=NOW - timedelta(days=1))
    test_session.add(user)
    await test_session.flush()

    user = await user_service.record_activity(test_session, 1, now=NOW)
    assert (user.streak, user.longest_streak) == (3, 3)
    assert user.last_active_date == NOW

    user = await user_service.record_activity(test_session, 1, now=NOW + timedelta(hours=1))
    assert user.streak == 3


@pytest.mark.asyncio
async def test_record_activity_defaults_to_utc_clock(
    test_session: AsyncSession, monkeypatch
) -> None:
    # Local time already on the next day, UTC still on the previous one
    class SkewedClock(datetime):
        @classmethod
        def utcnow(cls):
            return NOW

        @classmethod
        def now(cls, tz=None):
            return NOW + timedelta(hours=8)

    monkeypatch.setattr(user_service, "datetime", SkewedClock)
    test_session.add(
        User(id=1, xp=0, level=1, streak=4, longest_streak=4, last_active_date=NOW - timedelta(hours=2))
    )
    await test_session.flush()

    user = await user_service.record_activity(test_session, 1)
    assert user.streak == 4
    assert user.last_active_date == NOW


@pytest.mark.asyncio
async def test_profile_stats(test_session: AsyncSession) -> None:
    user = User(id=1, xp=300, level=1, streak=3, longest_streak=4)
    project = Project(user_id=1, title="Web")
    test_session.add_all([user, project])
    await test_session.flush()

    done = Roadmap(
        project_id=project.id,
        title="HTML",
        nodes=[{"id": "1", "data": {"label": "Tags", "isCompleted": True}}],
        edges=[],
    )
    partial = Roadmap(
        project_id=project.id,
        title="CSS",
        nodes=[
            {"id": "1", "data": {"label": "Selectors"}},
            {"id": "2", "data": {"label": "Flexbox"}},
            {"id": "3", "data": {"label": "Grid"}},
        ],
        edges=[],
    )
    test_session.add_all([done, partial])
    await test_session.flush()
    test_session.add(
        QuizResult(
            roadmap_id=partial.id,
            node_id="2",
            user_id=1,
            score=5,
            total_questions=5,
            passed=True,
            answers=[],
            questions=[],
        )
    )
    await test_session.flush()

    stats = await user_service.get_profile_stats(test_session, user)

    assert stats["stats"] == {
        "total_projects": 1,
        "total_roadmaps": 2,
        "completed_roadmaps": 1,
        "completed_topics": 2,
        "total_quizzes_passed": 1,
        "total_quizzes_taken": 1,
    }
    project_stats = stats["projects"][0]
    assert project_stats["total_nodes"] == 4
    assert project_stats["completed_nodes"] == 2
    assert project_stats["overall_progress"] == 50
    by_title = {r["title"]: r for r in project_stats["roadmaps"]}
    assert by_title["CSS"]["progress"] == 33
    assert by_title["HTML"]["progress"] == 100
    assert {b.id for b in stats["badges"]} == {"first-steps", "roadmap-master", "on-fire"}
    assert stats["next_badge"] is not None
