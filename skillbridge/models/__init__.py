"""Database models."""

from skillbridge.models.message import ChatMessage
from skillbridge.models.project import Project
from skillbridge.models.quiz import QuizResult
from skillbridge.models.roadmap import Roadmap
from skillbridge.models.user import User

__all__ = [
    "User",
    "Project",
    "Roadmap",
    "ChatMessage",
    "QuizResult",
]
