"""
Workout Repository
Reads a user's routine workouts and cardio sessions from the backend

Rows come back as pandas DataFrames with numeric columns already coerced,
ready to be reshaped into engine logs.
"""

from typing import List

import pandas as pd
from sqlalchemy import bindparam, text
from sqlalchemy.orm import Session


ROUTINE_COLUMNS = ['workout_id', 'workout_date', 'intensity', 'duration',
                   'exercise_id', 'exercise_name', 'body_parts',
                   'weight', 'reps']

CARDIO_COLUMNS = ['session_id', 'session_date', 'intensity', 'estimated_time', 'body_parts']


class WorkoutRepository:
    """Backend queries for one database session"""

    def __init__(self, db: Session):
        self.db = db

    def fetch_workouts(self, user_id: str) -> pd.DataFrame:
        query = text("""
            SELECT id, created_at, intensity, duration
            FROM workouts
            WHERE user_id = :user_id
            ORDER BY created_at
        """)
        result = self.db.execute(query, {"user_id": user_id}).fetchall()
        return pd.DataFrame(result, columns=['id', 'created_at', 'intensity', 'duration'])

    def fetch_workout_exercises(self, workout_ids: List) -> pd.DataFrame:
        columns = ['id', 'workout_id', 'exercise_name', 'name', 'body_parts']
        if not workout_ids:
            return pd.DataFrame(columns=columns)

        query = text("""
            SELECT id, workout_id, exercise_name, name, body_parts
            FROM daily_routine_exercises
            WHERE workout_id IN :workout_ids
        """).bindparams(bindparam("workout_ids", expanding=True))
        result = self.db.execute(query, {"workout_ids": list(workout_ids)}).fetchall()
        return pd.DataFrame(result, columns=columns)

    def fetch_sets(self, exercise_ids: List) -> pd.DataFrame:
        columns = ['id', 'workout_exercise_id', 'weight', 'reps', 'created_at']
        if not exercise_ids:
            return pd.DataFrame(columns=columns)

        query = text("""
            SELECT id, workout_exercise_id, weight, reps, created_at
            FROM sets
            WHERE workout_exercise_id IN :exercise_ids
        """).bindparams(bindparam("exercise_ids", expanding=True))
        result = self.db.execute(query, {"exercise_ids": list(exercise_ids)}).fetchall()
        return pd.DataFrame(result, columns=columns)

    def fetch_routine_history(self, user_id: str) -> pd.DataFrame:
        """
        Routine workouts joined with their exercises and sets.

        One row per set; workouts without exercises or sets still appear
        once with empty exercise columns so they count for recovery.
        """
        workouts = self.fetch_workouts(user_id)
        if workouts.empty:
            return pd.DataFrame(columns=ROUTINE_COLUMNS)

        exercises = self.fetch_workout_exercises(workouts['id'].tolist())
        sets = self.fetch_sets(exercises['id'].tolist())

        exercises['exercise_name'] = (
            exercises['exercise_name']
            .where(exercises['exercise_name'].notna() & (exercises['exercise_name'] != ''),
                   exercises['name'])
            .fillna('Unknown Exercise')
        )

        merged = workouts.rename(columns={'id': 'workout_id', 'created_at': 'workout_date'}).merge(
            exercises.rename(columns={'id': 'exercise_id'})[
                ['exercise_id', 'workout_id', 'exercise_name', 'body_parts']],
            on='workout_id',
            how='left'
        ).merge(
            sets.rename(columns={'workout_exercise_id': 'exercise_id'})[
                ['exercise_id', 'weight', 'reps']],
            on='exercise_id',
            how='left'
        )

        # Decimal and string columns from the driver
        merged['weight'] = pd.to_numeric(merged['weight'], errors='coerce')
        merged['reps'] = pd.to_numeric(merged['reps'], errors='coerce')
        merged['duration'] = pd.to_numeric(merged['duration'], errors='coerce')

        return merged[ROUTINE_COLUMNS]

    def fetch_cardio_history(self, user_id: str) -> pd.DataFrame:
        """Cardio sessions with the body parts of their exercises, one row per exercise"""
        query = text("""
            SELECT
                s.id as session_id,
                s.created_at as session_date,
                s.intensity,
                s.estimated_time,
                e.body_parts
            FROM saved_cardio_sessions s
            LEFT JOIN saved_cardio_exercises e ON e.session_id = s.id
            WHERE s.user_id = :user_id
            ORDER BY s.created_at, e.id
        """)
        result = self.db.execute(query, {"user_id": user_id}).fetchall()

        df = pd.DataFrame(result, columns=CARDIO_COLUMNS)
        df['estimated_time'] = pd.to_numeric(df['estimated_time'], errors='coerce')
        return df
