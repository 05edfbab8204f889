"""Quiz result model."""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from skillbridge.core.database import Base


class QuizResult(Base):
    """Latest quiz attempt of one user on one roadmap node."""

    __tablename__ = "quiz_results"
    __table_args__ = (
        UniqueConstraint("roadmap_id", "node_id", "user_id", name="uq_quiz_result_key"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    roadmap_id: Mapped[int] = mapped_column(ForeignKey("roadmaps.id", ondelete="CASCADE"))
    node_id: Mapped[str] = mapped_column(String)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))

    score: Mapped[int] = mapped_column(Integer)
    total_questions: Mapped[int] = mapped_column(Integer)
    passed: Mapped[bool] = mapped_column(Boolean, default=False)

    # Raw answers and the question set they were graded against
    answers: Mapped[list[int]] = mapped_column(JSON, default=list)
    questions: Mapped[list[dict[str, object]]] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
