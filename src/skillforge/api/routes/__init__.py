"""Route handlers for the API."""

from skillforge.api.routes import (
    ai,
    goals,
    health,
    interviews,
    notifications,
    profile,
    progress,
    roadmaps,
)

__all__ = [
    "ai",
    "goals",
    "health",
    "interviews",
    "notifications",
    "profile",
    "progress",
    "roadmaps",
]
