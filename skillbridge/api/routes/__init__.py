"""API routes."""

from skillbridge.api.routes import chat, profile, projects, quiz, roadmaps

__all__ = ["chat", "profile", "projects", "quiz", "roadmaps"]
