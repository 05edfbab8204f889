"""Quiz schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class QuizQuestion(BaseModel):
    """Four-option multiple-choice question (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    question: str
    options: list[str]
    correct_index: int
    explanation: str = "No explanation provided"


class QuizGenerateRequest(BaseModel):
    topic: str = Field(min_length=1)
    description: str | None = None


class QuizGenerateResponse(BaseModel):
    questions: list[QuizQuestion]


class QuizSubmitRequest(BaseModel):
    roadmap_id: int
    node_id: str = Field(min_length=1)
    answers: list[int]
    questions: list[QuizQuestion]


class QuizSubmitResponse(BaseModel):
    id: int
    score: int
    total_questions: int
    percentage: int
    passed: bool
    xp_gained: int
    message: str


class QuizResultResponse(BaseModel):
    id: int
    roadmap_id: int
    node_id: str
    score: int
    total_questions: int
    percentage: int
    passed: bool
    answers: list[int]
    questions: list[QuizQuestion]
    created_at: datetime
    updated_at: datetime


class QuizResultSummary(BaseModel):
    node_id: str
    passed: bool
    score: int
    total_questions: int

    class Config:
        from_attributes = True
