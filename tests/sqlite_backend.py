"""In-memory SQLite copy of the backend tables for tests"""

import os
import uuid

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

SCHEMA_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'schema.sql')


def make_session_factory():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool
    )
    with open(SCHEMA_PATH) as f:
        statements = [s.strip() for s in f.read().split(';')]
    with engine.begin() as conn:
        for statement in statements:
            if statement:
                conn.execute(text(statement))
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def add_workout(db, user_id, created_at, exercises, intensity='moderate', duration=45,
                body_parts='chest, triceps'):
    """
    Insert one routine workout.

    exercises: [(exercise_name, name, [(weight, reps), ...]), ...]
    """
    workout_id = str(uuid.uuid4())
    db.execute(text("""
        INSERT INTO workouts (id, user_id, created_at, intensity, duration)
        VALUES (:id, :user_id, :created_at, :intensity, :duration)
    """), {'id': workout_id, 'user_id': user_id, 'created_at': created_at,
           'intensity': intensity, 'duration': duration})

    for exercise_name, name, sets in exercises:
        exercise_id = str(uuid.uuid4())
        db.execute(text("""
            INSERT INTO daily_routine_exercises (id, workout_id, exercise_name, name, body_parts, date)
            VALUES (:id, :workout_id, :exercise_name, :name, :body_parts, :date)
        """), {'id': exercise_id, 'workout_id': workout_id, 'exercise_name': exercise_name,
               'name': name, 'body_parts': body_parts, 'date': created_at})
        for weight, reps in sets:
            db.execute(text("""
                INSERT INTO sets (id, workout_exercise_id, weight, reps, created_at)
                VALUES (:id, :exercise_id, :weight, :reps, :created_at)
            """), {'id': str(uuid.uuid4()), 'exercise_id': exercise_id, 'weight': weight,
                   'reps': reps, 'created_at': created_at})

    db.commit()
    return workout_id


def add_cardio(db, user_id, created_at, body_parts, intensity='moderate', estimated_time=30):
    session_id = str(uuid.uuid4())
    db.execute(text("""
        INSERT INTO saved_cardio_sessions (id, user_id, created_at, intensity, estimated_time)
        VALUES (:id, :user_id, :created_at, :intensity, :estimated_time)
    """), {'id': session_id, 'user_id': user_id, 'created_at': created_at,
           'intensity': intensity, 'estimated_time': estimated_time})
    db.execute(text("""
        INSERT INTO saved_cardio_exercises (id, session_id, body_parts)
        VALUES (:id, :session_id, :body_parts)
    """), {'id': str(uuid.uuid4()), 'session_id': session_id, 'body_parts': body_parts})
    db.commit()
    return session_id


def seed_stalled_bench(db, user_id):
    """Four weekly workouts at an identical bench load, a squat day and a run"""
    for day in ('2025-03-03 10:00:00', '2025-03-10 10:00:00',
                '2025-03-17 10:00:00', '2025-03-24 10:00:00'):
        add_workout(db, user_id, day, [('Bench Press', None, [(100, 5)])])

    add_workout(db, user_id, '2025-03-05 10:00:00',
                [(None, 'Squat', [(120, 5), (0, 5)])],
                intensity='vigorous', body_parts='Legs, Core')
    add_cardio(db, user_id, '2025-03-06 07:00:00', 'Legs, Cardio', estimated_time=25)
