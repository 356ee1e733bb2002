"""
Progressive Overload Service
Tracks whether each exercise is moving forward session to session

CONCEPTS DEMONSTRATED:
1. Rule-based Classification - ordered checks on weight, reps, sets, volume
2. Record Keeping - personal records over a session history
3. Trend Fitting - linear regression over volume to estimate weekly progress
"""

from typing import Dict, List, Optional, Union

import numpy as np
from sklearn.linear_model import LinearRegression

from .history import ExerciseHistory, SessionEntry, percent_change
from .results import (
    FirstSession,
    Metric,
    PersonalRecord,
    Recommendation,
    RecommendationType,
    Suggestion,
    SuggestionType,
)


def calculate_1rm(weight: float, reps: int) -> float:
    """
    Estimated one-rep max using the Epley formula.

    Args:
        weight: Weight lifted
        reps: Number of reps

    Returns:
        Estimated 1RM, 0 for empty sessions
    """
    if reps < 1 or weight <= 0:
        return 0
    if reps == 1:
        return weight
    return weight * (1 + reps / 30)


class ProgressiveOverloadEngine:
    """
    Classifies the latest session of an exercise as progress,
    stagnation or steady consistency, and tracks personal records.

    The engine reads and writes an ExerciseHistory which may be shared
    with a StagnationDetector.
    """

    # Sessions with identical load that count as stagnation
    STAGNATION_SESSIONS = 3

    # Weight at or above which bigger jumps are suggested (kg)
    HEAVY_WEIGHT_KG = 20

    # Rep and set counts below which adding more is suggested
    REP_CEILING = 12
    SET_CEILING = 4

    def __init__(self, history: Optional[ExerciseHistory] = None):
        self.history = history if history is not None else ExerciseHistory()

    def log_session(self, exercise: str, weight, reps, sets, date=None) -> SessionEntry:
        """
        Log a workout session for an exercise.

        Args:
            exercise: Exercise name (case-sensitive)
            weight: Weight used (kg)
            reps: Reps performed
            sets: Sets completed
            date: Session date, defaults to now
        """
        return self.history.log(exercise, weight, reps, sets, date)

    def load_history(self, rows: List[Dict]):
        """Replace all history with backend rows"""
        self.history.replace(rows)

    def suggest_increase(self, exercise: str) -> Recommendation:
        """
        Compare the two most recent sessions and classify progress.

        Checks weight, then reps, then sets, then volume. If nothing
        improved and the last three sessions share the same load, the
        exercise is stagnating.
        """
        logs = self.history.entries(exercise)

        if len(logs) < 2:
            return Recommendation(type=RecommendationType.INSUFFICIENT_DATA)

        last, prev = logs[-1], logs[-2]

        if last.weight > prev.weight:
            return Recommendation(
                type=RecommendationType.PROGRESS,
                metric=Metric.WEIGHT,
                percent=percent_change(last.weight, prev.weight),
                delta=last.weight - prev.weight
            )

        if last.reps > prev.reps:
            return Recommendation(
                type=RecommendationType.PROGRESS,
                metric=Metric.REPS,
                delta=last.reps - prev.reps
            )

        if last.sets > prev.sets:
            return Recommendation(
                type=RecommendationType.PROGRESS,
                metric=Metric.SETS,
                delta=last.sets - prev.sets
            )

        if last.volume > prev.volume:
            return Recommendation(
                type=RecommendationType.PROGRESS,
                metric=Metric.VOLUME,
                percent=percent_change(last.volume, prev.volume),
                delta=last.volume - prev.volume
            )

        recent = logs[-self.STAGNATION_SESSIONS:]
        stagnant = sum(1 for entry in recent if entry.same_load(last))

        if stagnant >= self.STAGNATION_SESSIONS:
            return Recommendation(
                type=RecommendationType.STAGNATION,
                weight=last.weight,
                reps=last.reps,
                sets=last.sets,
                suggestions=self.progression_suggestions(last)
            )

        return Recommendation(type=RecommendationType.CONSISTENT)

    def progression_suggestions(self, entry: SessionEntry) -> List[Suggestion]:
        """Concrete next steps for a stalled exercise. Never empty."""
        suggestions = []

        if entry.weight >= self.HEAVY_WEIGHT_KG:
            suggestions.append(Suggestion(SuggestionType.WEIGHT_INCREASE,
                                          target=round(entry.weight + 2.5, 1),
                                          low=2.5, high=5))
        else:
            suggestions.append(Suggestion(SuggestionType.WEIGHT_INCREASE,
                                          target=round(entry.weight + 1.5, 1),
                                          low=1, high=2.5))

        if entry.reps < self.REP_CEILING:
            suggestions.append(Suggestion(SuggestionType.REP_INCREASE,
                                          target=entry.reps + 2, low=1, high=2))

        if entry.sets < self.SET_CEILING:
            suggestions.append(Suggestion(SuggestionType.SET_INCREASE,
                                          target=entry.sets + 1))

        suggestions.append(Suggestion(SuggestionType.TEMPO_CHANGE))
        suggestions.append(Suggestion(SuggestionType.REST_REDUCTION, low=15, high=15))
        suggestions.append(Suggestion(SuggestionType.VARIATION))

        return suggestions

    def get_progress_summary(self, exercise: str) -> Optional[Dict]:
        """
        Summarize progress from the first to the latest session.

        Returns None for an exercise with no sessions.
        """
        logs = self.history.entries(exercise)
        if not logs:
            return None

        first, last = logs[0], logs[-1]

        return {
            'total_sessions': len(logs),
            'first_weight': first.weight,
            'current_weight': last.weight,
            'weight_progress': last.weight - first.weight,
            'weight_progress_percent': percent_change(last.weight, first.weight),
            'first_volume': first.volume,
            'current_volume': last.volume,
            'volume_progress': last.volume - first.volume,
            'volume_progress_percent': percent_change(last.volume, first.volume),
            'first_date': first.date,
            'last_date': last.date,
            'days_tracking': (last.date - first.date).days,
            'volume_trend_per_week': self._volume_trend(logs)
        }

    def _volume_trend(self, logs: List[SessionEntry]) -> Optional[float]:
        """Slope of volume over time (per 7 days), None with too little data"""
        if len(logs) < 3:
            return None

        start = logs[0].date
        days = np.array([(e.date - start).total_seconds() / 86400 for e in logs]).reshape(-1, 1)
        if np.ptp(days) == 0:
            return None

        volumes = np.array([e.volume for e in logs])
        model = LinearRegression()
        model.fit(days, volumes)

        return round(float(model.coef_[0]) * 7, 1)

    def get_stagnant_exercises(self) -> List[Dict]:
        """Every exercise whose latest recommendation is stagnation"""
        stagnant = []
        for exercise in self.history.exercises():
            result = self.suggest_increase(exercise)
            if result.type == RecommendationType.STAGNATION:
                stagnant.append({'exercise': exercise, 'recommendation': result})
        return stagnant

    def get_personal_records(self, exercise: str) -> Optional[Dict]:
        """
        Best weight, reps and volume for an exercise.

        Each record points at the first session that achieved it.
        """
        logs = self.history.entries(exercise)
        if not logs:
            return None

        max_weight = max(logs, key=lambda e: e.weight)
        max_reps = max(logs, key=lambda e: e.reps)
        max_volume = max(logs, key=lambda e: e.volume)

        return {
            'max_weight': {
                'value': max_weight.weight,
                'date': max_weight.date,
                'reps': max_weight.reps,
                'sets': max_weight.sets
            },
            'max_reps': {
                'value': max_reps.reps,
                'date': max_reps.date,
                'weight': max_reps.weight,
                'sets': max_reps.sets
            },
            'max_volume': {
                'value': max_volume.volume,
                'date': max_volume.date,
                'weight': max_volume.weight,
                'reps': max_volume.reps,
                'sets': max_volume.sets
            },
            'estimated_1rm': round(calculate_1rm(max_weight.weight, max_weight.reps), 1)
        }

    def check_for_pr(self, exercise: str, weight, reps, sets=1
                     ) -> Union[List[PersonalRecord], FirstSession, None]:
        """
        Check a candidate session against the stored history.

        Ties do not count. Returns one record per metric beaten, a
        FirstSession marker for a new exercise, or None.
        """
        logs = self.history.entries(exercise)
        if not logs:
            return FirstSession(exercise=exercise)

        candidate = SessionEntry.create(weight, reps, sets)

        best_weight = max(e.weight for e in logs)
        best_reps = max(e.reps for e in logs)
        best_volume = max(e.volume for e in logs)

        records = []
        if candidate.weight > best_weight:
            records.append(PersonalRecord(Metric.WEIGHT, candidate.weight, best_weight))
        if candidate.reps > best_reps:
            records.append(PersonalRecord(Metric.REPS, candidate.reps, best_reps))
        if candidate.volume > best_volume:
            records.append(PersonalRecord(Metric.VOLUME, candidate.volume, best_volume))

        return records or None
