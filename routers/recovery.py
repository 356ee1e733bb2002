"""
Recovery Router
API endpoints for weekly rest advice, rest-day decisions and recovery scores
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from services import WorkoutAnalyticsService, messages
from .dependencies import get_initialized_service

router = APIRouter(prefix="/recovery", tags=["Recovery"])


@router.get("/{user_id}/advice")
async def get_rest_advice(
    user_id: str,
    as_of: Optional[datetime] = Query(default=None, description="Evaluate the week ending here (default: now)"),
    service: WorkoutAnalyticsService = Depends(get_initialized_service)
):
    """
    Evaluate the trailing 7 days of training.

    Flags overtrained muscle groups, missing rest days, high volume and
    high intensity. Warnings come before advice.
    """
    result = service.recovery_engine.get_rest_advice(as_of)
    return {"user_id": user_id, **messages.rest_advice_payload(result)}


@router.get("/{user_id}/should-rest")
async def should_rest_today(
    user_id: str,
    as_of: Optional[datetime] = Query(default=None),
    service: WorkoutAnalyticsService = Depends(get_initialized_service)
):
    """Whether today should be a rest day, with the reason"""
    decision = service.recovery_engine.should_rest_today(as_of)
    return {"user_id": user_id, **messages.rest_decision_payload(decision)}


@router.get("/{user_id}/score")
async def get_recovery_score(
    user_id: str,
    as_of: Optional[datetime] = Query(default=None),
    service: WorkoutAnalyticsService = Depends(get_initialized_service)
):
    """
    Recovery score from 0 to 100.

    - 90+: Excellent
    - 75-89: Good
    - 60-74: Fair
    - 40-59: Poor
    - below 40: Critical
    """
    result = service.recovery_engine.get_recovery_score(as_of)
    return {"user_id": user_id, **messages.recovery_score_payload(result)}
