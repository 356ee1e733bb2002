"""
Stagnation Detection Service
Identifies training plateaus and celebrates breaking them

CONCEPTS DEMONSTRATED:
1. Window Analysis - looking at the last N sessions together
2. Severity Levels - complete, weight-only and volume plateaus
3. Rate Limiting - not nagging about the same exercise every day
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional

import numpy as np

from .history import ExerciseHistory, SessionEntry, percent_change, utcnow
from .results import (
    SEVERITY_RANK,
    Improvement,
    Metric,
    Motivation,
    MotivationType,
    PlateauBreak,
    Severity,
    StagnationAlert,
    StagnationType,
    Streak,
    Suggestion,
    SuggestionType,
)


class StagnationDetector:
    """
    Detects plateaus in exercise history.

    Checks, in order:
    - Complete stagnation: weight, reps and sets unchanged (high)
    - Weight stagnation: weight unchanged, reps/sets varied (medium)
    - Volume stagnation: volume spread under 5% of its mean (low)
    """

    # Volume spread (percent of mean) under which volume counts as flat
    VOLUME_FLAT_PERCENT = 5

    # Sessions before the latest that must be flat for a plateau break
    PLATEAU_BREAK_WINDOW = 4

    # Minimum days between notifications about the same exercise
    NOTIFY_INTERVAL = timedelta(days=7)

    def __init__(self, history: Optional[ExerciseHistory] = None, window_size: int = 4):
        """
        Args:
            history: Shared session store, a private one is created if omitted
            window_size: Default number of sessions inspected for stagnation
        """
        self.history = history if history is not None else ExerciseHistory()
        self.window_size = window_size
        self.last_notification: Dict[str, datetime] = {}

    def log_exercise(self, exercise: str, weight, reps, sets, date=None) -> SessionEntry:
        return self.history.log(exercise, weight, reps, sets, date)

    def load_logs(self, rows: List[Dict]):
        """Replace all history with backend rows"""
        self.history.replace(rows)

    def check_stagnation(self, exercise: str, window_size: Optional[int] = None) -> Optional[StagnationAlert]:
        """
        Check the most recent sessions of an exercise for a plateau.

        Args:
            exercise: Exercise name
            window_size: Sessions to inspect (default: self.window_size)

        Returns:
            A StagnationAlert, or None when there is not enough data or
            the window shows movement
        """
        window_size = window_size or self.window_size
        logs = self.history.entries(exercise)

        if len(logs) < window_size:
            return None

        recent = logs[-window_size:]
        last = recent[-1]

        weights = {e.weight for e in recent}
        reps = {e.reps for e in recent}
        sets = {e.sets for e in recent}

        if len(weights) == 1 and len(reps) == 1 and len(sets) == 1:
            return StagnationAlert(
                exercise=exercise,
                type=StagnationType.COMPLETE,
                severity=Severity.HIGH,
                sessions=window_size,
                weight=last.weight,
                reps=last.reps,
                sets=last.sets,
                days=(last.date - recent[0].date).days,
                suggestions=self.plateau_suggestions(last)
            )

        if len(weights) == 1:
            return StagnationAlert(
                exercise=exercise,
                type=StagnationType.WEIGHT,
                severity=Severity.MEDIUM,
                sessions=window_size,
                weight=last.weight
            )

        volumes = np.array([e.volume for e in recent])
        avg_volume = volumes.mean()
        spread = np.ptp(volumes)

        if avg_volume > 0:
            variation = spread / avg_volume * 100
        else:
            variation = 0.0 if spread == 0 else float('inf')

        if variation < self.VOLUME_FLAT_PERCENT:
            return StagnationAlert(
                exercise=exercise,
                type=StagnationType.VOLUME,
                severity=Severity.LOW,
                sessions=window_size,
                avg_volume=round(float(avg_volume)),
                variation_percent=round(float(variation), 1)
            )

        return None

    def plateau_suggestions(self, entry: SessionEntry) -> List[Suggestion]:
        """Strategies for breaking a complete plateau"""
        step = 5 if entry.weight >= 20 else 2.5
        suggestions = [
            Suggestion(SuggestionType.WEIGHT_INCREASE, target=round(entry.weight + step, 1))
        ]

        if entry.reps < 12:
            suggestions.append(Suggestion(SuggestionType.REP_INCREASE, target=entry.reps + 2))

        if entry.sets < 4:
            suggestions.append(Suggestion(SuggestionType.SET_INCREASE, target=entry.sets + 1))

        suggestions.extend([
            Suggestion(SuggestionType.TEMPO_CHANGE),
            Suggestion(SuggestionType.REST_REDUCTION, low=15, high=30),
            Suggestion(SuggestionType.VARIATION),
            Suggestion(SuggestionType.DELOAD, target=round(entry.weight * 0.8, 1)),
        ])
        return suggestions

    def check_plateau_break(self, exercise: str) -> Optional[PlateauBreak]:
        """
        Detect a session that improved on a fully flat run.

        Needs at least 5 sessions: the 4 before the latest must share the
        same weight, reps and sets.
        """
        logs = self.history.entries(exercise)

        if len(logs) < self.PLATEAU_BREAK_WINDOW + 1:
            return None

        previous = logs[-(self.PLATEAU_BREAK_WINDOW + 1):-1]
        last = logs[-1]
        plateau = previous[-1]

        if not all(e.same_load(plateau) for e in previous):
            return None

        improvements = []

        if last.weight > plateau.weight:
            improvements.append(Improvement(
                Metric.WEIGHT,
                last.weight - plateau.weight,
                percent_change(last.weight, plateau.weight)
            ))

        if last.reps > plateau.reps:
            improvements.append(Improvement(Metric.REPS, last.reps - plateau.reps))

        if last.sets > plateau.sets:
            improvements.append(Improvement(Metric.SETS, last.sets - plateau.sets))

        if last.volume > plateau.volume:
            improvements.append(Improvement(
                Metric.VOLUME,
                last.volume - plateau.volume,
                percent_change(last.volume, plateau.volume)
            ))

        if not improvements:
            return None

        return PlateauBreak(exercise=exercise, improvements=improvements)

    def get_all_stagnant_exercises(self) -> List[StagnationAlert]:
        """All stagnating exercises, most severe first"""
        stagnant = []
        for exercise in self.history.exercises():
            alert = self.check_stagnation(exercise)
            if alert:
                stagnant.append(alert)

        stagnant.sort(key=lambda a: SEVERITY_RANK[a.severity])
        return stagnant

    def get_motivation_message(self, exercise: str) -> Motivation:
        """Pick a motivation category from recent activity"""
        logs = self.history.entries(exercise)

        if not logs:
            return Motivation(MotivationType.START)

        if len(logs) == 1:
            return Motivation(MotivationType.BEGINNER)

        recent = logs[-3:]
        for prev, current in zip(recent, recent[1:]):
            if (current.weight > prev.weight or
                    current.reps > prev.reps or
                    current.volume > prev.volume):
                return Motivation(MotivationType.PROGRESS)

        if len(logs) >= 5:
            span = logs[-1].date - logs[-5].date
            if span <= timedelta(days=14):
                return Motivation(MotivationType.CONSISTENT)

        if self.check_stagnation(exercise):
            return Motivation(MotivationType.CHALLENGE)

        return Motivation(MotivationType.GENERAL)

    def get_progress_streak(self, exercise: str) -> Streak:
        """Count consecutive sessions, ending at the latest, where volume went up"""
        logs = self.history.entries(exercise)

        streak = 0
        for i in range(len(logs) - 1, 0, -1):
            if logs[i].volume > logs[i - 1].volume:
                streak += 1
            else:
                break

        return Streak(streak)

    def should_notify(self, exercise: str, now: Optional[datetime] = None) -> bool:
        """
        Rate limit stagnation alerts to one per exercise per week.

        Records the notification time when it returns True.
        """
        now = now or utcnow()
        last = self.last_notification.get(exercise)

        if last is None or now - last >= self.NOTIFY_INTERVAL:
            self.last_notification[exercise] = now
            return True

        return False
