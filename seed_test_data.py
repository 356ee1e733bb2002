"""
Test Data Generator for Workout Tracker
Populates the backend tables with sample routine workouts and cardio sessions
for one user

Run with: python seed_test_data.py <user_id>
"""

import os
import sys
import uuid
from datetime import datetime, timedelta
import random
from dotenv import load_dotenv
import psycopg2

# Load environment variables
load_dotenv()

# Routine split: (body_parts, exercises with starting weights in kg)
ROUTINES = {
    0: ('chest, shoulders, triceps', {'Bench Press': 60, 'Overhead Press': 35, 'Tricep Pushdown': 20}),
    1: ('back, biceps', {'Barbell Row': 50, 'Lat Pulldown': 45, 'Dumbbell Curl': 12}),
    3: ('legs, core', {'Squat': 80, 'Romanian Deadlift': 70, 'Leg Press': 120}),
    4: ('chest, shoulders, triceps', {'Bench Press': 60, 'Incline Dumbbell Press': 22, 'Lateral Raise': 8}),
}

CARDIO_DAYS = {
    2: ('running', 'legs, cardio'),
    5: ('cycling', 'legs, cardio'),
    6: ('jump rope', 'full body, cardio'),
}

INTENSITIES = ['light', 'moderate', 'moderate', 'vigorous', 'high']


# Database connection
def get_connection():
    return psycopg2.connect(
        host=os.getenv('DB_HOST', 'localhost'),
        port=os.getenv('DB_PORT', '5432'),
        database=os.getenv('DB_NAME', 'workout_tracker'),
        user=os.getenv('DB_USER', 'postgres'),
        password=os.getenv('DB_PASSWORD')
    )


def new_id():
    return str(uuid.uuid4())


def clear_existing_data(conn, user_id):
    """Clear a user's workouts and cardio sessions"""
    with conn.cursor() as cur:
        print(f"Clearing existing data for {user_id}...")
        cur.execute("""
            DELETE FROM sets WHERE workout_exercise_id IN (
                SELECT e.id FROM daily_routine_exercises e
                JOIN workouts w ON e.workout_id = w.id
                WHERE w.user_id = %s)
        """, (user_id,))
        cur.execute("""
            DELETE FROM daily_routine_exercises WHERE workout_id IN (
                SELECT id FROM workouts WHERE user_id = %s)
        """, (user_id,))
        cur.execute("DELETE FROM workouts WHERE user_id = %s", (user_id,))
        cur.execute("""
            DELETE FROM saved_cardio_exercises WHERE session_id IN (
                SELECT id FROM saved_cardio_sessions WHERE user_id = %s)
        """, (user_id,))
        cur.execute("DELETE FROM saved_cardio_sessions WHERE user_id = %s", (user_id,))
        conn.commit()
        print("✓ Existing data cleared")


def generate_workouts(conn, user_id, num_weeks=8):
    """
    Generate routine workouts over a period of weeks.

    Weights go up most weeks, but some exercises are held flat so the
    plateau detector has something to find.
    """
    current_weights = {}
    for _, exercises in ROUTINES.values():
        for name, weight in exercises.items():
            current_weights.setdefault(name, weight)

    # Held at the same load for the whole period
    stalled = {'Overhead Press', 'Lat Pulldown'}

    start_date = datetime.now() - timedelta(weeks=num_weeks)
    workouts_created = 0
    sets_created = 0

    with conn.cursor() as cur:
        current_date = start_date

        while current_date <= datetime.now():
            routine = ROUTINES.get(current_date.weekday())

            # Random chance to skip a workout (life happens)
            if routine and random.random() >= 0.1:
                body_parts, exercises = routine
                workout_id = new_id()

                cur.execute("""
                    INSERT INTO workouts (id, user_id, created_at, intensity, duration)
                    VALUES (%s, %s, %s, %s, %s)
                """, (workout_id, user_id, current_date, random.choice(INTENSITIES),
                      random.randint(40, 75)))
                workouts_created += 1

                for name in exercises:
                    exercise_id = new_id()
                    cur.execute("""
                        INSERT INTO daily_routine_exercises (id, workout_id, exercise_name, body_parts, date)
                        VALUES (%s, %s, %s, %s, %s)
                    """, (exercise_id, workout_id, name, body_parts, current_date))

                    weight = current_weights[name]
                    reps = 8 if name in stalled else random.randint(6, 10)
                    for _ in range(3):
                        cur.execute("""
                            INSERT INTO sets (id, workout_exercise_id, weight, reps, created_at)
                            VALUES (%s, %s, %s, %s, %s)
                        """, (new_id(), exercise_id, weight, reps, current_date))
                        sets_created += 1

            # Progressive overload: add weight at the end of each week
            if current_date.weekday() == 6:
                for name in current_weights:
                    if name not in stalled and random.random() < 0.7:
                        current_weights[name] = round(current_weights[name] + 2.5, 1)

            current_date += timedelta(days=1)

        conn.commit()

    return workouts_created, sets_created


def generate_cardio_sessions(conn, user_id, num_weeks=8):
    """Generate cardio sessions on the non-routine days"""
    start_date = datetime.now() - timedelta(weeks=num_weeks)
    sessions = 0

    with conn.cursor() as cur:
        current_date = start_date

        while current_date <= datetime.now():
            cardio = CARDIO_DAYS.get(current_date.weekday())

            if cardio and random.random() < 0.6:
                _, body_parts = cardio
                session_id = new_id()

                cur.execute("""
                    INSERT INTO saved_cardio_sessions (id, user_id, created_at, intensity, estimated_time)
                    VALUES (%s, %s, %s, %s, %s)
                """, (session_id, user_id, current_date, random.choice(INTENSITIES),
                      random.randint(20, 45)))
                cur.execute("""
                    INSERT INTO saved_cardio_exercises (id, session_id, body_parts)
                    VALUES (%s, %s, %s)
                """, (new_id(), session_id, body_parts))
                sessions += 1

            current_date += timedelta(days=1)

        conn.commit()

    return sessions


def print_summary(conn, user_id):
    """Print summary of generated data"""
    with conn.cursor() as cur:
        cur.execute("SELECT COUNT(*) FROM workouts WHERE user_id = %s", (user_id,))
        workouts = cur.fetchone()[0]

        cur.execute("SELECT COUNT(*) FROM saved_cardio_sessions WHERE user_id = %s", (user_id,))
        cardio = cur.fetchone()[0]

        cur.execute("""
            SELECT e.exercise_name, COUNT(*) as set_count, MAX(s.weight) as max_weight
            FROM sets s
            JOIN daily_routine_exercises e ON s.workout_exercise_id = e.id
            JOIN workouts w ON e.workout_id = w.id
            WHERE w.user_id = %s
            GROUP BY e.exercise_name
            ORDER BY set_count DESC
            LIMIT 5
        """, (user_id,))
        top_exercises = cur.fetchall()

        print("\n" + "="*50)
        print("📊 TEST DATA SUMMARY")
        print("="*50)
        print(f"✓ Routine workouts:      {workouts}")
        print(f"✓ Cardio sessions:       {cardio}")
        print("\n🏆 Top 5 Most Trained Exercises:")
        for name, count, max_weight in top_exercises:
            print(f"   • {name}: {count} sets (max: {max_weight} kg)")
        print("="*50)


def main():
    print("\n🏋️ Workout Tracker - Test Data Generator")
    print("="*50)

    if len(sys.argv) < 2:
        print("Usage: python seed_test_data.py <user_id>")
        sys.exit(1)
    user_id = sys.argv[1]

    # Check for .env file
    if not os.getenv('DB_PASSWORD'):
        print("❌ Error: DB_PASSWORD not found in .env file")
        print("   Make sure you have a .env file with your database credentials")
        sys.exit(1)

    try:
        conn = get_connection()
        print("✓ Connected to database")
    except psycopg2.Error as e:
        print(f"❌ Database connection failed: {e}")
        sys.exit(1)

    try:
        # Ask for confirmation
        print(f"\n⚠️  This will DELETE existing data for {user_id} and create new test data.")
        response = input("Continue? (y/n): ").strip().lower()

        if response != 'y':
            print("Cancelled.")
            sys.exit(0)

        clear_existing_data(conn, user_id)

        print("\nGenerating 8 weeks of routine workouts...")
        workouts, sets = generate_workouts(conn, user_id)
        print(f"✓ Created {workouts} workouts with {sets} sets")

        print("Generating cardio sessions...")
        sessions = generate_cardio_sessions(conn, user_id)
        print(f"✓ Created {sessions} cardio sessions")

        print_summary(conn, user_id)

        print("\n✅ Test data generated successfully!")
        print("\nYou can now test:")
        print("  • http://localhost:8000/docs (Swagger UI)")
        print(f"  • POST http://localhost:8000/analytics/{user_id}/initialize")
        print(f"  • http://localhost:8000/analytics/{user_id}/dashboard")
        print(f"  • http://localhost:8000/recovery/{user_id}/score")

    except psycopg2.Error as e:
        print(f"\n❌ Error: {e}")
        conn.rollback()
        sys.exit(1)
    finally:
        conn.close()


if __name__ == "__main__":
    main()
