"""Derived statistics value object (recomputed on every read, never stored)."""

from __future__ import annotations

from skillforge.models.base import CamelModel


class DerivedStats(CamelModel):
    total_goals: int = 0
    completed_goals: int = 0
    active_roadmaps: int = 0
    total_steps: int = 0
    completed_steps: int = 0
    progress_percentage: int = 0
    total_interviews: int = 0
    avg_interview_score: int = 0
    learning_streak: int = 0
    weekly_hours: int = 0
