"""Pydantic schemas."""

from skillbridge.schemas.chat import (
    ChatRequest,
    ChatResponse,
    MessageResponse,
    MessageRole,
    MessageType,
)
from skillbridge.schemas.graph import (
    ChatFallback,
    Edge,
    EdgeType,
    GeneratedRoadmap,
    Node,
    NodeCategory,
    NodeData,
    NodeType,
)
from skillbridge.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from skillbridge.schemas.quiz import (
    QuizQuestion,
    QuizResultResponse,
    QuizSubmitRequest,
    QuizSubmitResponse,
)
from skillbridge.schemas.roadmap import (
    RoadmapCreate,
    RoadmapPreferences,
    RoadmapProgress,
    RoadmapResponse,
    RoadmapUpdate,
)
from skillbridge.schemas.user import ProfileResponse, ProfileUpdate, UserResponse

__all__ = [
    "ChatFallback",
    "ChatRequest",
    "ChatResponse",
    "Edge",
    "EdgeType",
    "GeneratedRoadmap",
    "MessageResponse",
    "MessageRole",
    "MessageType",
    "Node",
    "NodeCategory",
    "NodeData",
    "NodeType",
    "ProfileResponse",
    "ProfileUpdate",
    "ProjectCreate",
    "ProjectResponse",
    "ProjectUpdate",
    "QuizQuestion",
    "QuizResultResponse",
    "QuizSubmitRequest",
    "QuizSubmitResponse",
    "RoadmapCreate",
    "RoadmapPreferences",
    "RoadmapProgress",
    "RoadmapResponse",
    "RoadmapUpdate",
    "UserResponse",
]
