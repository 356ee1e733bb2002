"""
Calories Router
API endpoints for MET-based calorie estimates
"""

from typing import List, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from services import calories

router = APIRouter(prefix="/calories", tags=["Calories"])


class CircuitExercise(BaseModel):
    name: str
    duration: float = Field(default=45, gt=0, description="Seconds per round")
    rounds: int = Field(default=1, ge=1)


class CircuitIn(BaseModel):
    exercises: List[CircuitExercise]
    body_weight_kg: float = Field(..., gt=0)
    intensity_percent: float = Field(default=50, ge=25, le=100)
    total_rounds: int = Field(default=1, ge=1)
    rest_between_rounds_seconds: float = Field(default=0, ge=0)


@router.get("/cardio")
async def cardio_calories(
    activity: str = Query(..., description="Activity name, e.g. 'running' or 'jump rope'"),
    body_weight_kg: float = Query(..., gt=0),
    duration_minutes: float = Query(..., gt=0),
    intensity_percent: float = Query(default=50, ge=25, le=100),
    rounds: int = Query(default=1, ge=1)
):
    """
    Estimate calories for a cardio activity.

    calories = MET x body weight (kg) x hours x (intensity / 50) x rounds
    """
    return {
        "activity": activity,
        "met": calories.get_met_value(activity),
        "calories": calories.estimate_calories(
            activity, body_weight_kg, duration_minutes, intensity_percent, rounds
        )
    }


@router.get("/strength")
async def strength_calories(
    body_weight_kg: float = Query(..., gt=0),
    duration_minutes: float = Query(..., gt=0),
    weight_lifted_kg: float = Query(default=0, ge=0),
    reps: int = Query(default=0, ge=0),
    sets: int = Query(default=1, ge=1),
    intensity_percent: float = Query(default=50, ge=25, le=100)
):
    """Estimate calories for a strength exercise (minimum 3 kcal)"""
    return {
        "calories": calories.estimate_strength_calories(
            body_weight_kg, duration_minutes, weight_lifted_kg, reps, sets, intensity_percent
        )
    }


@router.get("/per-minute")
async def per_minute(
    activity: str = Query(...),
    body_weight_kg: float = Query(..., gt=0),
    intensity_percent: float = Query(default=50, ge=25, le=100)
):
    """Calories burned per minute for an activity"""
    return {
        "activity": activity,
        "calories_per_minute": calories.calories_per_minute(activity, body_weight_kg, intensity_percent)
    }


@router.post("/hiit")
async def hiit_calories(circuit: CircuitIn):
    """Estimate calories for a HIIT circuit, ignoring rest between rounds"""
    exercises = [e.model_dump() for e in circuit.exercises]
    return {
        "calories": calories.estimate_hiit_calories(
            exercises, circuit.body_weight_kg, circuit.intensity_percent, circuit.total_rounds
        )
    }


@router.post("/workout")
async def workout_calories(circuit: CircuitIn):
    """Estimate a full circuit workout including rest between rounds"""
    exercises = [e.model_dump() for e in circuit.exercises]
    return calories.estimate_workout_calories(
        exercises,
        circuit.body_weight_kg,
        circuit.intensity_percent,
        circuit.total_rounds,
        circuit.rest_between_rounds_seconds
    )
