"""Service layer modules."""

from skillbridge.services import (
    message_service,
    project_service,
    quiz_service,
    roadmap_service,
    user_service,
)

__all__ = [
    "message_service",
    "project_service",
    "quiz_service",
    "roadmap_service",
    "user_service",
]
