"""
Analytics Router
API endpoints for per-user workout feedback, post-workout summaries and dashboards
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from database import get_db
from services import (
    ServiceRegistry,
    WorkoutAnalyticsService,
    WorkoutRepository,
)
from .dependencies import get_initialized_service, get_registry, get_service

router = APIRouter(prefix="/analytics", tags=["Analytics"])


class SetIn(BaseModel):
    weight: float = Field(default=0, ge=0)
    reps: int = Field(default=0, ge=0)


class ExerciseIn(BaseModel):
    name: str
    sets: List[SetIn] = []


class WorkoutIn(BaseModel):
    exercises: List[ExerciseIn] = []
    intensity: str = "moderate"
    duration: Optional[float] = Field(default=None, ge=0)
    date: Optional[datetime] = None
    muscle_groups: List[str] = []


@router.post("/{user_id}/initialize")
async def initialize_analytics(
    user_id: str,
    service: WorkoutAnalyticsService = Depends(get_service),
    db: Session = Depends(get_db)
):
    """
    Load a user's workout and cardio history into the analytics engines.

    Calling again for an initialized user does nothing. A data source that
    fails to load is skipped and the user starts with what did load.
    """
    service.initialize(user_id, WorkoutRepository(db))

    return {
        "user_id": user_id,
        "initialized": service.initialized,
        "exercises": len(service.history.exercises()),
        "sets_loaded": len(service.history),
        "sessions_loaded": len(service.recovery_engine.sessions)
    }


@router.post("/{user_id}/workouts")
async def log_workout(
    user_id: str,
    workout: WorkoutIn,
    service: WorkoutAnalyticsService = Depends(get_initialized_service)
):
    """
    Log a completed workout.

    Each set with weight and reps is recorded for its exercise, and the
    workout counts as one session for recovery tracking.
    """
    service.log_workout(workout.model_dump())

    return {
        "user_id": user_id,
        "logged": True,
        "exercises": [e.name for e in workout.exercises]
    }


@router.get("/{user_id}/feedback")
async def get_feedback(
    user_id: str,
    exercise: Optional[str] = Query(default=None, description="Exercise name for detailed feedback"),
    service: WorkoutAnalyticsService = Depends(get_initialized_service)
):
    """
    Get recovery advice, stagnant exercises and, with **exercise**,
    progression, plateau, streak and personal record feedback.
    """
    return service.get_feedback(exercise)


@router.post("/{user_id}/post-workout-summary")
async def post_workout_summary(
    user_id: str,
    workout: WorkoutIn,
    log: bool = Query(default=True, description="Also log the workout after checking PRs"),
    service: WorkoutAnalyticsService = Depends(get_initialized_service)
):
    """
    Summarize a just-finished workout.

    Achievements include new personal records, first sessions and broken
    plateaus. Warnings are high and critical recovery issues.
    """
    return service.get_post_workout_summary(workout.model_dump(), log=log)


@router.get("/{user_id}/dashboard")
async def get_dashboard(
    user_id: str,
    service: WorkoutAnalyticsService = Depends(get_initialized_service)
):
    """Recovery score, stagnation overview and weekly advice for the dashboard"""
    return service.get_dashboard_analytics()


@router.delete("/{user_id}")
async def reset_analytics(
    user_id: str,
    registry: ServiceRegistry = Depends(get_registry)
):
    """Forget everything loaded or logged for a user"""
    existed = user_id in registry
    registry.discard(user_id)

    return {"user_id": user_id, "reset": existed}
