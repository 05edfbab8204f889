"""Chat schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from skillbridge.schemas.roadmap import RoadmapPreferences


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class MessageType(str, Enum):
    CHAT = "chat"  # Plain conversational reply
    ROADMAP = "roadmap"  # Reply that produced a roadmap


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
    project_id: int | None = None
    node_id: str | None = None
    preferences: RoadmapPreferences = Field(default_factory=RoadmapPreferences)


class ChatResponse(BaseModel):
    type: MessageType
    message: str
    roadmap: dict | None = None  # positioned {title, nodes, edges}


class MessageResponse(BaseModel):
    id: int
    role: MessageRole
    content: str
    message_type: MessageType
    node_id: str | None
    timestamp: datetime

    class Config:
        from_attributes = True
