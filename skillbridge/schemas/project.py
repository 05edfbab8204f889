"""Project schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from skillbridge.schemas.roadmap import RoadmapResponse


class ProjectCreate(BaseModel):
    title: str = Field(min_length=1)


class ProjectUpdate(BaseModel):
    title: str | None = None


class ProjectResponse(BaseModel):
    id: int
    user_id: int
    title: str
    roadmaps: list[RoadmapResponse]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
