"""User profile schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class UserResponse(BaseModel):
    id: int
    email: str | None
    name: str | None
    bio: str | None
    location: str | None
    job_role: str | None
    avatar_url: str | None
    xp: int
    level: int
    streak: int
    longest_streak: int
    last_active_date: datetime | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    name: str | None = None
    bio: str | None = None
    location: str | None = None
    job_role: str | None = None
    avatar_url: str | None = None


class AddXPRequest(BaseModel):
    amount: int = Field(gt=0)


class XPResponse(BaseModel):
    id: int
    xp: int
    level: int


class StreakResponse(BaseModel):
    streak: int
    longest_streak: int
    last_active_date: datetime | None


class BadgeResponse(BaseModel):
    id: str
    name: str
    description: str
    icon: str
    category: str
    condition_type: str
    condition_value: int


class RoadmapStats(BaseModel):
    id: int
    title: str
    total_nodes: int
    completed_nodes: int
    progress: int


class ProjectStats(BaseModel):
    id: int
    title: str
    created_at: datetime
    updated_at: datetime
    roadmaps: list[RoadmapStats]
    total_nodes: int
    completed_nodes: int
    overall_progress: int


class ProfileTotals(BaseModel):
    total_projects: int
    total_roadmaps: int
    completed_roadmaps: int
    completed_topics: int
    total_quizzes_passed: int
    total_quizzes_taken: int


class ProfileResponse(BaseModel):
    user: UserResponse
    projects: list[ProjectStats]
    stats: ProfileTotals
    badges: list[BadgeResponse]
    next_badge: BadgeResponse | None
