"""Quiz API routes."""

from fastapi import APIRouter, HTTPException, status

from skillbridge.agent.llm import LLMResponseError
from skillbridge.agent.quiz_generator import generate_quiz
from skillbridge.api.deps import CurrentUser, DBSession
from skillbridge.core.logging import get_logger
from skillbridge.graph.progress import percent
from skillbridge.schemas.quiz import (
    QuizGenerateRequest,
    QuizGenerateResponse,
    QuizResultResponse,
    QuizResultSummary,
    QuizSubmitRequest,
    QuizSubmitResponse,
)
from skillbridge.services import quiz_service, roadmap_service, user_service

logger = get_logger(__name__)
router = APIRouter(prefix="/quiz", tags=["quiz"])


@router.post("/generate", response_model=QuizGenerateResponse)
async def generate(data: QuizGenerateRequest) -> dict:
    """Generate a five-question quiz for a topic."""
    try:
        questions = await generate_quiz(data.topic, data.description)
    except LLMResponseError as e:
        logger.warning("Quiz generation returned an invalid quiz", error=str(e))
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e
    except Exception as e:
        logger.error("Quiz generation failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to generate quiz",
        ) from e
    return {"questions": [q.model_dump(by_alias=True) for q in questions]}


@router.post("/submit", response_model=QuizSubmitResponse)
async def submit(data: QuizSubmitRequest, user_id: CurrentUser, db: DBSession) -> dict:
    """Grade a quiz, store the attempt and grant XP on a pass."""
    roadmap = await roadmap_service.get_roadmap(db, data.roadmap_id)
    if not roadmap:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Roadmap not found",
        )
    nodes, _ = roadmap_service.parse_graph(roadmap)
    if not any(n.id == data.node_id for n in nodes):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Node not found",
        )
    await user_service.get_or_create_user(db, user_id)

    try:
        record, graded, xp_gained = await quiz_service.submit_quiz(
            db,
            roadmap_id=data.roadmap_id,
            node_id=data.node_id,
            user_id=user_id,
            answers=data.answers,
            questions=data.questions,
        )
    except quiz_service.QuizSubmissionError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    await db.commit()
    return {
        "id": record.id,
        "score": graded.score,
        "total_questions": graded.total_questions,
        "percentage": graded.percentage,
        "passed": graded.passed,
        "xp_gained": xp_gained,
        "message": graded.message,
    }


@router.get("/result/{roadmap_id}/{node_id}", response_model=QuizResultResponse)
async def get_result(roadmap_id: int, node_id: str, user_id: CurrentUser, db: DBSession) -> dict:
    """Latest stored attempt of the current user on a node."""
    record = await quiz_service.get_quiz_result(
        db, roadmap_id=roadmap_id, node_id=node_id, user_id=user_id
    )
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Quiz result not found",
        )
    return {
        "id": record.id,
        "roadmap_id": record.roadmap_id,
        "node_id": record.node_id,
        "score": record.score,
        "total_questions": record.total_questions,
        "percentage": percent(record.score, record.total_questions),
        "passed": record.passed,
        "answers": record.answers,
        "questions": record.questions,
        "created_at": record.created_at,
        "updated_at": record.updated_at,
    }


@router.get("/results/{roadmap_id}", response_model=list[QuizResultSummary])
async def list_results(roadmap_id: int, user_id: CurrentUser, db: DBSession) -> list:
    """Pass/fail summary of every node the current user attempted in a roadmap."""
    return await quiz_service.list_roadmap_results(db, roadmap_id, user_id)
