"""Quiz generation for a single roadmap topic."""

from typing import Any

from langchain_core.messages import HumanMessage, SystemMessage

from skillbridge.agent.llm import LLMResponseError, get_llm
from skillbridge.agent.llm_utils import message_text, parse_llm_json_response
from skillbridge.core.logging import get_logger
from skillbridge.schemas.quiz import QuizQuestion

logger = get_logger(__name__)

QUESTION_COUNT = 5
OPTION_COUNT = 4

QUIZ_SYSTEM_PROMPT = f"""\
You are an expert quiz generator. Generate exactly {QUESTION_COUNT} multiple choice
questions to test understanding of the given topic.

RULES:
1. Each question must have exactly {OPTION_COUNT} options (A, B, C, D)
2. Only ONE option is correct
3. Questions should test understanding, not just memorization
4. Include a brief explanation for why the correct answer is right
5. Make questions progressively harder (easy to medium to hard)

Return ONLY valid JSON in this EXACT format:
{{
  "questions": [
    {{
      "question": "The question text?",
      "options": ["Option A", "Option B", "Option C", "Option D"],
      "correctIndex": 0,
      "explanation": "Brief explanation why this is correct"
    }}
  ]
}}

correctIndex is 0-based (0=A, 1=B, 2=C, 3=D). No markdown, just JSON."""


def validate_questions(parsed: Any) -> list[QuizQuestion]:
    """Check the generated quiz shape question by question.

    Raises:
        LLMResponseError: If the payload or any question is malformed
    """
    if not isinstance(parsed, dict) or not isinstance(parsed.get("questions"), list):
        raise LLMResponseError("Invalid quiz format from AI")

    questions: list[QuizQuestion] = []
    for index, raw in enumerate(parsed["questions"]):
        if not isinstance(raw, dict) or not raw.get("question") or raw.get("correctIndex") is None:
            raise LLMResponseError(f"Invalid question at index {index}")
        options = raw.get("options")
        if not isinstance(options, list) or len(options) != OPTION_COUNT:
            raise LLMResponseError(f"Question {index} must have exactly {OPTION_COUNT} options")
        correct = raw["correctIndex"]
        if not isinstance(correct, int) or not 0 <= correct < OPTION_COUNT:
            raise LLMResponseError(f"Invalid correctIndex at question {index}")

        questions.append(
            QuizQuestion(
                question=str(raw["question"]),
                options=[str(o) for o in options],
                correct_index=correct,
                explanation=raw.get("explanation") or "No explanation provided",
            )
        )
    return questions


async def generate_quiz(
    topic: str,
    description: str | None = None,
    llm: Any = None,
) -> list[QuizQuestion]:
    """Generate multiple-choice questions for a topic.

    Raises:
        LLMResponseError: If the reply is not a valid quiz
    """
    llm = llm or get_llm()
    user_prompt = (
        f'Generate a quiz about "{topic}". Context: {description}'
        if description
        else f'Generate a quiz about "{topic}"'
    )

    response = await llm.ainvoke(
        [SystemMessage(content=QUIZ_SYSTEM_PROMPT), HumanMessage(content=user_prompt)]
    )

    try:
        parsed = parse_llm_json_response(message_text(response))
    except ValueError as e:
        raise LLMResponseError(str(e)) from e

    questions = validate_questions(parsed)
    logger.info("Quiz generated", topic=topic, questions=len(questions))
    return questions
