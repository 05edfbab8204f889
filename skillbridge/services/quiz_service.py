"""Quiz scoring and result persistence."""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from skillbridge.core.logging import get_logger
from skillbridge.graph.progress import percent
from skillbridge.models.quiz import QuizResult
from skillbridge.schemas.quiz import QuizQuestion
from skillbridge.services import roadmap_service, user_service

logger = get_logger(__name__)

PASSING_PERCENTAGE = 90
XP_PER_PASS = 100


class QuizSubmissionError(ValueError):
    """Answers cannot be graded against the given questions."""


@dataclass(frozen=True)
class QuizScore:
    score: int
    total_questions: int
    percentage: int
    passed: bool

    @property
    def required_correct(self) -> int:
        return math.ceil(self.total_questions * PASSING_PERCENTAGE / 100)

    @property
    def message(self) -> str:
        if self.passed:
            return "Congratulations! You passed the quiz!"
        return f"You need {self.required_correct} correct answers to pass."


# ============================================================================
# Scoring
# ============================================================================


def score_quiz(questions: Sequence[QuizQuestion], answers: Sequence[int]) -> QuizScore:
    """Grade submitted option indices against the questions.

    Unanswered questions are sent as ``-1``; like any out-of-range index they
    simply never match.

    Raises:
        QuizSubmissionError: If the quiz is empty or the answer count differs
            from the question count.
    """
    if not questions:
        raise QuizSubmissionError("Quiz has no questions")
    if len(questions) != len(answers):
        raise QuizSubmissionError(
            f"Expected {len(questions)} answers, got {len(answers)}"
        )

    score = sum(1 for q, a in zip(questions, answers) if a == q.correct_index)
    total = len(questions)
    percentage = percent(score, total)
    return QuizScore(
        score=score,
        total_questions=total,
        percentage=percentage,
        passed=percentage >= PASSING_PERCENTAGE,
    )


# ============================================================================
# Persistence
# ============================================================================


async def get_quiz_result(
    db: AsyncSession,
    *,
    roadmap_id: int,
    node_id: str,
    user_id: int,
) -> QuizResult | None:
    result = await db.execute(
        select(QuizResult).where(
            QuizResult.roadmap_id == roadmap_id,
            QuizResult.node_id == node_id,
            QuizResult.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


async def list_roadmap_results(
    db: AsyncSession,
    roadmap_id: int,
    user_id: int,
) -> list[QuizResult]:
    result = await db.execute(
        select(QuizResult).where(
            QuizResult.roadmap_id == roadmap_id,
            QuizResult.user_id == user_id,
        )
    )
    return list(result.scalars().all())


async def list_user_results(db: AsyncSession, user_id: int) -> list[QuizResult]:
    result = await db.execute(select(QuizResult).where(QuizResult.user_id == user_id))
    return list(result.scalars().all())


async def upsert_quiz_result(
    db: AsyncSession,
    *,
    roadmap_id: int,
    node_id: str,
    user_id: int,
    graded: QuizScore,
    answers: Sequence[int],
    questions: Sequence[QuizQuestion],
) -> QuizResult:
    """Store the latest attempt, overwriting any previous one for the same key."""
    snapshot = [q.model_dump(mode="json", by_alias=True) for q in questions]

    record = await get_quiz_result(db, roadmap_id=roadmap_id, node_id=node_id, user_id=user_id)
    if record is None:
        record = QuizResult(roadmap_id=roadmap_id, node_id=node_id, user_id=user_id)
        db.add(record)

    record.score = graded.score
    record.total_questions = graded.total_questions
    record.passed = graded.passed
    record.answers = list(answers)
    record.questions = snapshot

    await db.flush()
    return record


async def submit_quiz(
    db: AsyncSession,
    *,
    roadmap_id: int,
    node_id: str,
    user_id: int,
    answers: Sequence[int],
    questions: Sequence[QuizQuestion],
) -> tuple[QuizResult, QuizScore, int]:
    """Grade, store and reward a quiz submission.

    A passing submission also raises the node's quiz and completion flags in
    the stored roadmap. Every pass grants ``XP_PER_PASS``, including repeat
    passes of a node that was already passed.

    Returns:
        The stored result, the grade, and the XP granted.

    Note: This function assumes the caller will commit the transaction.
    """
    graded = score_quiz(questions, answers)
    record = await upsert_quiz_result(
        db,
        roadmap_id=roadmap_id,
        node_id=node_id,
        user_id=user_id,
        graded=graded,
        answers=answers,
        questions=questions,
    )

    xp_gained = 0
    if graded.passed:
        if not await roadmap_service.mark_node_quiz_passed(db, roadmap_id, node_id):
            logger.warning(
                "Passed quiz for a node missing from the roadmap",
                roadmap_id=roadmap_id,
                node_id=node_id,
            )
        await user_service.add_xp(db, user_id, XP_PER_PASS)
        xp_gained = XP_PER_PASS

    logger.info(
        "Quiz submitted",
        roadmap_id=roadmap_id,
        node_id=node_id,
        user_id=user_id,
        score=graded.score,
        total=graded.total_questions,
        passed=graded.passed,
    )
    return record, graded, xp_gained
