"""Roadmap schemas for API requests and responses."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from skillbridge.schemas.graph import Edge, GeneratedRoadmap, Node


class RoadmapPreferences(BaseModel):
    """Learner preferences passed to the roadmap generator."""

    level: str = "beginner"  # beginner | intermediate | advanced
    language: str = "English"
    focus: str | None = None


class RoadmapGenerateRequest(BaseModel):
    prompt: str = Field(min_length=1)
    preferences: RoadmapPreferences = Field(default_factory=RoadmapPreferences)


class RoadmapCreate(BaseModel):
    """Create a roadmap, empty or from a generated (unpositioned) roadmap."""

    title: str | None = None
    generated: GeneratedRoadmap | None = None
    nodes: list[Node] | None = None
    edges: list[Edge] | None = None


class RoadmapUpdate(BaseModel):
    """Wholesale replacement of any provided field."""

    title: str | None = None
    nodes: list[Node] | None = None
    edges: list[Edge] | None = None


class RoadmapResponse(BaseModel):
    id: int
    project_id: int
    title: str
    nodes: list[dict[str, Any]]
    edges: list[dict[str, Any]]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RoadmapLayout(BaseModel):
    """Positioned graph ready for the canvas."""

    title: str
    nodes: list[dict[str, Any]]
    edges: list[dict[str, Any]]


class RoadmapProgress(BaseModel):
    roadmap_id: int
    title: str
    total_nodes: int
    completed_nodes: int
    progress: int
    is_completed: bool
    unlocked: dict[str, bool]
