"""
Workout Analytics Service
Ties the progressive overload, stagnation and recovery engines together

CONCEPTS DEMONSTRATED:
1. Orchestration - one service feeding several independent engines
2. Shared State - both strength engines read one ExerciseHistory
3. Fault Isolation - a failed data source loads nothing instead of failing everything
"""

import logging
from typing import Dict, List, Optional

import pandas as pd
from sqlalchemy.exc import SQLAlchemyError

from . import messages
from .history import ExerciseHistory, to_datetime, to_number, utcnow
from .progressive_overload import ProgressiveOverloadEngine
from .rest_recovery import RestRecoveryEngine
from .results import FirstSession, RecommendationType, Severity
from .stagnation_detector import StagnationDetector
from .workout_repository import WorkoutRepository

logger = logging.getLogger(__name__)


class NotInitializedError(ValueError):
    """Raised when analytics are requested before initialize()"""


def _first_body_part(values) -> Optional[str]:
    """First comma-separated body part across a sequence of body_parts strings"""
    for value in values:
        if value is None or (isinstance(value, float) and pd.isna(value)):
            continue
        for part in str(value).split(','):
            part = part.strip().lower()
            if part:
                return part
    return None


def _valid_sets(exercise: Dict) -> List[Dict]:
    """Sets that have both weight and reps"""
    return [
        s for s in exercise.get('sets') or []
        if to_number(s.get('weight')) and to_number(s.get('reps'))
    ]


class WorkoutAnalyticsService:
    """
    Unified workout analytics for one user.

    Usage:
        service = WorkoutAnalyticsService(WorkoutRepository(db))
        service.initialize(user_id)
        feedback = service.get_feedback('Bench Press')
    """

    def __init__(self, repository: Optional[WorkoutRepository] = None):
        self.repository = repository
        self._build_engines()
        self.initialized = False
        self.user_id = None

    def _build_engines(self):
        self.history = ExerciseHistory()
        self.overload_engine = ProgressiveOverloadEngine(self.history)
        self.stagnation_detector = StagnationDetector(self.history)
        self.recovery_engine = RestRecoveryEngine()

    def initialize(self, user_id: str, repository: Optional[WorkoutRepository] = None):
        """
        Load a user's history into the engines.

        Calling again for the same user is a no-op. Each data source is
        loaded independently; a failing source is logged and skipped.
        """
        if self.initialized and self.user_id == user_id:
            return

        repository = repository or self.repository
        if repository is None:
            raise ValueError("A WorkoutRepository is required to initialize analytics")

        self.initialized = False
        strength_rows, routine_recovery = self._load_routine_history(repository, user_id)
        cardio_recovery = self._load_cardio_history(repository, user_id)

        self.history.replace(strength_rows)
        self.recovery_engine.load_sessions(routine_recovery + cardio_recovery)

        self.user_id = user_id
        self.initialized = True
        logger.info("Workout analytics initialized for user %s: %d sets, %d sessions",
                    user_id, len(strength_rows), len(routine_recovery) + len(cardio_recovery))

    def _load_routine_history(self, repository: WorkoutRepository, user_id: str):
        try:
            df = repository.fetch_routine_history(user_id)
        except SQLAlchemyError:
            logger.exception("Error loading workout history for user %s", user_id)
            return [], []

        strength_rows = []
        recovery_rows = []

        for _, workout in df.groupby('workout_id', sort=False):
            first = workout.iloc[0]
            workout_date = to_datetime(first['workout_date'])

            sets = workout[(workout['weight'].fillna(0) > 0) & (workout['reps'].fillna(0) > 0)]
            for _, row in sets.iterrows():
                strength_rows.append({
                    'exercise_name': row['exercise_name'],
                    'weight': float(row['weight']),
                    'reps': int(row['reps']),
                    'sets': 1,  # each set is logged on its own
                    'date': workout_date
                })

            recovery_rows.append({
                'muscle_group': _first_body_part(workout['body_parts'].drop_duplicates()) or 'full body',
                'date': workout_date,
                'intensity': first['intensity'] or 'moderate',
                'duration': first['duration']
            })

        logger.info("Loaded %d routine workouts", len(recovery_rows))
        return strength_rows, recovery_rows

    def _load_cardio_history(self, repository: WorkoutRepository, user_id: str):
        try:
            df = repository.fetch_cardio_history(user_id)
        except SQLAlchemyError:
            logger.exception("Error loading cardio history for user %s", user_id)
            return []

        recovery_rows = []
        for _, session in df.groupby('session_id', sort=False):
            first = session.iloc[0]
            recovery_rows.append({
                'muscle_group': _first_body_part(session['body_parts']) or 'cardio',
                'date': to_datetime(first['session_date']),
                'intensity': first['intensity'] or 'moderate',
                'estimated_time': first['estimated_time']
            })

        logger.info("Loaded %d cardio sessions", len(recovery_rows))
        return recovery_rows

    def _require_initialized(self):
        if not self.initialized:
            raise NotInitializedError("Service not initialized. Call initialize() first.")

    def log_workout(self, workout: Dict):
        """
        Log a newly completed workout.

        Args:
            workout: {exercises: [{name, sets: [{weight, reps}]}],
                      intensity, duration, date, muscle_groups}
        """
        date = to_datetime(workout.get('date')) if workout.get('date') else utcnow()

        for exercise in workout.get('exercises') or []:
            for s in _valid_sets(exercise):
                self.history.log(exercise['name'], s['weight'], s['reps'], 1, date)

        muscle_groups = workout.get('muscle_groups') or []
        self.recovery_engine.log_session(
            muscle_groups[0] if muscle_groups else 'full body',
            date,
            workout.get('intensity') or 'moderate',
            workout.get('duration') or 45
        )

    def get_feedback(self, exercise_name: Optional[str] = None) -> Dict:
        """Recovery, stagnation and optional exercise-specific feedback"""
        self._require_initialized()

        feedback = {
            'timestamp': utcnow(),
            'user_id': self.user_id,
            'recovery': messages.rest_advice_payload(self.recovery_engine.get_rest_advice()),
            'recovery_score': messages.recovery_score_payload(self.recovery_engine.get_recovery_score()),
            'should_rest': messages.rest_decision_payload(self.recovery_engine.should_rest_today()),
            'stagnant_exercises': messages.stagnation_list_payload(
                self.stagnation_detector.get_all_stagnant_exercises())
        }

        if exercise_name:
            stagnation = self.stagnation_detector.check_stagnation(exercise_name)
            plateau_break = self.stagnation_detector.check_plateau_break(exercise_name)
            feedback['exercise'] = {
                'name': exercise_name,
                'progression': messages.recommendation_payload(
                    self.overload_engine.suggest_increase(exercise_name)),
                'stagnation': messages.stagnation_payload(stagnation) if stagnation else None,
                'plateau_break': messages.plateau_break_payload(plateau_break) if plateau_break else None,
                'motivation': messages.motivation_payload(
                    self.stagnation_detector.get_motivation_message(exercise_name)),
                'streak': messages.streak_payload(
                    self.stagnation_detector.get_progress_streak(exercise_name),
                    len(self.history.entries(exercise_name))),
                'personal_records': self.overload_engine.get_personal_records(exercise_name),
                'summary': self.overload_engine.get_progress_summary(exercise_name)
            }

        return feedback

    def get_post_workout_summary(self, workout: Dict, log: bool = False) -> Dict:
        """
        Achievements, warnings and suggestions for a completed workout.

        PRs are checked against history before this workout. With log=True
        the workout is then logged so plateau breaks see the new session.
        """
        self._require_initialized()

        exercises = workout.get('exercises') or []
        summary = {
            'workout': {
                'exercises': len(exercises),
                'intensity': workout.get('intensity'),
                'duration': workout.get('duration'),
                'muscle_groups': workout.get('muscle_groups')
            },
            'achievements': [],
            'warnings': [],
            'suggestions': []
        }

        for exercise in exercises:
            for s in _valid_sets(exercise):
                result = self.overload_engine.check_for_pr(exercise['name'], s['weight'], s['reps'], 1)
                if isinstance(result, FirstSession):
                    summary['achievements'].append(messages.first_session_payload(result))
                elif result:
                    summary['achievements'].extend(
                        messages.personal_record_payload(r, exercise['name']) for r in result)

        if log:
            self.log_workout(workout)

        for exercise in exercises:
            if not exercise.get('sets'):
                continue
            plateau_break = self.stagnation_detector.check_plateau_break(exercise['name'])
            if plateau_break:
                summary['achievements'].append(messages.plateau_break_payload(plateau_break))

        weekly = self.recovery_engine.get_rest_advice()
        summary['warnings'] = [
            messages.advice_payload(item) for item in weekly.advice
            if item.severity in (Severity.CRITICAL, Severity.HIGH)
        ]

        for exercise in exercises:
            progression = self.overload_engine.suggest_increase(exercise['name'])
            if progression.type == RecommendationType.STAGNATION:
                summary['suggestions'].append({
                    'exercise': exercise['name'],
                    **messages.recommendation_payload(progression)
                })

        return summary

    def get_dashboard_analytics(self) -> Dict:
        """Recovery score, stagnation overview and weekly advice"""
        self._require_initialized()

        stagnant = []
        for alert in self.stagnation_detector.get_all_stagnant_exercises():
            payload = messages.stagnation_payload(alert)
            payload['notify'] = self.stagnation_detector.should_notify(alert.exercise)
            stagnant.append(payload)

        return {
            'recovery': messages.recovery_score_payload(self.recovery_engine.get_recovery_score()),
            'stagnation': {
                'total': len(stagnant),
                'exercises': stagnant
            },
            'weekly_advice': messages.rest_advice_payload(self.recovery_engine.get_rest_advice()),
            'should_rest': messages.rest_decision_payload(self.recovery_engine.should_rest_today())
        }

    def reset(self):
        """Discard all engines and forget the user"""
        self._build_engines()
        self.initialized = False
        self.user_id = None


class ServiceRegistry:
    """
    Holds one WorkoutAnalyticsService per user.

    Kept on the FastAPI app and handed to request handlers through a
    dependency, so every user gets their own engines.
    """

    def __init__(self):
        self._services: Dict[str, WorkoutAnalyticsService] = {}

    def get(self, user_id: str) -> WorkoutAnalyticsService:
        if user_id not in self._services:
            self._services[user_id] = WorkoutAnalyticsService()
        return self._services[user_id]

    def find(self, user_id: str) -> Optional[WorkoutAnalyticsService]:
        """A user's service if one exists, without creating it"""
        return self._services.get(user_id)

    def discard(self, user_id: str):
        service = self._services.pop(user_id, None)
        if service:
            service.reset()
            logger.info("Discarded analytics for user %s", user_id)

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._services
