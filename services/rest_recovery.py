"""
Rest & Recovery Service
Monitors weekly training load and recommends rest

CONCEPTS DEMONSTRATED:
1. Rule-based Systems - encoding recovery guidelines as thresholds
2. Rolling Windows - looking at the trailing 7 days of sessions
3. Scoring - turning a list of warnings into a 0-100 recovery score
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List

from .history import to_datetime, to_number, utcnow
from .results import (
    SEVERITY_RANK,
    AdviceItem,
    AdviceType,
    RecoveryScore,
    RecoveryStatus,
    RestAdvice,
    RestDecision,
    RestReason,
    Severity,
)


class Intensity(str, Enum):
    LIGHT = "light"
    MODERATE = "moderate"
    VIGOROUS = "vigorous"
    HIGH = "high"

    @classmethod
    def parse(cls, value) -> 'Intensity':
        """Unknown or missing intensities count as moderate"""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.MODERATE

    @property
    def is_hard(self) -> bool:
        return self in (Intensity.VIGOROUS, Intensity.HIGH)


@dataclass(frozen=True)
class TrainingSession:
    muscle_group: str
    date: datetime
    intensity: Intensity
    duration_minutes: float


# Keywords mapping free-text body parts to a muscle group, checked in order
BODY_PART_KEYWORDS = [
    ('chest', ('chest',)),
    ('back', ('back',)),
    ('shoulders', ('shoulder',)),
    ('legs', ('leg', 'quad', 'hamstring')),
    ('arms', ('arm', 'bicep', 'tricep')),
    ('core', ('core', 'ab')),
]


def extract_muscle_group(row: Dict) -> str:
    """Primary muscle group from a backend row's body_parts or muscle_group"""
    body_parts = row.get('body_parts')
    if body_parts:
        parts = str(body_parts).lower()
        for group, keywords in BODY_PART_KEYWORDS:
            if any(keyword in parts for keyword in keywords):
                return group

    if row.get('muscle_group'):
        return str(row['muscle_group']).lower()

    return 'full body'


class RestRecoveryEngine:
    """
    Tracks training sessions across all muscle groups and evaluates
    the trailing week for overtraining and missing rest.
    """

    WINDOW = timedelta(days=7)
    WINDOW_DAYS = 7

    # Weekly sessions per muscle group
    OVERTRAINING_FREQUENCY = 5
    OPTIMAL_FREQUENCY = (3, 5)

    # Total weekly sessions above which volume is flagged
    HIGH_VOLUME_SESSIONS = 6

    # Share of hard sessions that triggers an intensity warning
    HIGH_INTENSITY_RATIO = 0.7
    HIGH_INTENSITY_MIN_SESSIONS = 4

    # Recovery score deductions per advice severity
    SCORE_PENALTIES = {
        Severity.CRITICAL: 30,
        Severity.HIGH: 20,
        Severity.MEDIUM: 10,
        Severity.LOW: 5,
    }
    OPTIMAL_BONUS = 5

    RATING_BANDS = [
        (90, 'Excellent'),
        (75, 'Good'),
        (60, 'Fair'),
        (40, 'Poor'),
    ]

    def __init__(self):
        self.sessions: List[TrainingSession] = []

    def log_session(self, muscle_group: str, date=None, intensity='moderate',
                    duration_minutes=45) -> TrainingSession:
        """
        Log a training session.

        Args:
            muscle_group: Primary muscle group trained
            date: Session date
            intensity: 'light', 'moderate', 'vigorous' or 'high'
            duration_minutes: Session length
        """
        session = TrainingSession(
            muscle_group=(muscle_group or 'full body').strip().lower(),
            date=to_datetime(date),
            intensity=Intensity.parse(intensity),
            duration_minutes=to_number(duration_minutes, default=45)
        )
        self.sessions.append(session)
        self.sessions.sort(key=lambda s: s.date)
        return session

    def load_sessions(self, rows: List[Dict]):
        """Replace all sessions with backend rows"""
        self.sessions = []
        for row in rows:
            self.log_session(
                extract_muscle_group(row),
                to_datetime(row.get('date'), fallback=row.get('created_at')),
                row.get('intensity') or 'moderate',
                row.get('duration') or row.get('estimated_time') or 45
            )

    def _week(self, as_of: datetime) -> List[TrainingSession]:
        return [s for s in self.sessions if timedelta(0) <= as_of - s.date <= self.WINDOW]

    def get_rest_advice(self, as_of=None) -> RestAdvice:
        """
        Evaluate the trailing 7 days.

        Args:
            as_of: Evaluation time, defaults to now

        Returns:
            RestAdvice with warnings first, then advice, plus metrics and
            an overall status
        """
        as_of = to_datetime(as_of) if as_of is not None else utcnow()
        week = self._week(as_of)

        warnings: List[AdviceItem] = []
        advice: List[AdviceItem] = []

        groups: Dict[str, int] = defaultdict(int)
        for session in week:
            groups[session.muscle_group] += 1

        low, high = self.OPTIMAL_FREQUENCY
        for group, frequency in groups.items():
            if frequency > self.OVERTRAINING_FREQUENCY:
                warnings.append(AdviceItem(AdviceType.OVERTRAINING, Severity.HIGH,
                                           muscle_group=group, count=frequency))
            elif frequency == 1:
                advice.append(AdviceItem(AdviceType.UNDERTRAINING, Severity.LOW,
                                         muscle_group=group, count=frequency))
            elif low <= frequency <= high:
                advice.append(AdviceItem(AdviceType.OPTIMAL, Severity.NONE,
                                         muscle_group=group, count=frequency))

        workout_days = {s.date.date() for s in week}
        calendar = [as_of.date() - timedelta(days=i) for i in range(self.WINDOW_DAYS)]
        rest_days = sum(1 for day in calendar if day not in workout_days)

        if rest_days < 1:
            warnings.append(AdviceItem(AdviceType.NO_REST, Severity.CRITICAL, count=rest_days))
        elif rest_days < 2:
            warnings.append(AdviceItem(AdviceType.INSUFFICIENT_REST, Severity.MEDIUM,
                                       count=rest_days))
        elif rest_days <= 3:
            advice.append(AdviceItem(AdviceType.GOOD_REST, Severity.NONE, count=rest_days))

        total_sessions = len(week)
        if total_sessions > self.HIGH_VOLUME_SESSIONS:
            warnings.append(AdviceItem(AdviceType.HIGH_VOLUME, Severity.MEDIUM,
                                       count=total_sessions))

        hard_sessions = sum(1 for s in week if s.intensity.is_hard)
        hard_ratio = hard_sessions / total_sessions if total_sessions else 0
        if (hard_ratio >= self.HIGH_INTENSITY_RATIO and
                total_sessions >= self.HIGH_INTENSITY_MIN_SESSIONS):
            warnings.append(AdviceItem(AdviceType.HIGH_INTENSITY, Severity.MEDIUM,
                                       count=hard_sessions, percent=round(hard_ratio * 100)))

        status = self._status(warnings, advice)

        items = warnings + advice
        if not items:
            items.append(AdviceItem(AdviceType.BALANCED, Severity.NONE))

        total_duration = sum(s.duration_minutes for s in week)
        metrics = {
            'total_sessions': total_sessions,
            'rest_days': rest_days,
            'total_duration': total_duration,
            'vigorous_sessions': hard_sessions,
            'muscle_group_breakdown': dict(groups),
            'average_session_duration': round(total_duration / total_sessions) if total_sessions else 0
        }

        return RestAdvice(advice=items, metrics=metrics, status=status)

    def _status(self, warnings: List[AdviceItem], advice: List[AdviceItem]) -> RecoveryStatus:
        if not warnings and not advice:
            return RecoveryStatus.EXCELLENT

        worst = min((SEVERITY_RANK[w.severity] for w in warnings),
                    default=SEVERITY_RANK[Severity.NONE])

        if worst == SEVERITY_RANK[Severity.CRITICAL]:
            return RecoveryStatus.CRITICAL
        if worst == SEVERITY_RANK[Severity.HIGH]:
            return RecoveryStatus.WARNING
        if worst == SEVERITY_RANK[Severity.MEDIUM]:
            return RecoveryStatus.CAUTION
        return RecoveryStatus.GOOD

    def should_rest_today(self, as_of=None) -> RestDecision:
        """
        Decide whether today should be a rest day.

        Rest is recommended after two consecutive days that each had a
        hard session, after two consecutive days on the same single
        muscle group, or when the weekly status is critical or warning.
        """
        as_of = to_datetime(as_of) if as_of is not None else utcnow()
        yesterday = as_of.date() - timedelta(days=1)
        two_days_ago = as_of.date() - timedelta(days=2)

        by_day = {yesterday: [], two_days_ago: []}
        for session in self.sessions:
            day = session.date.date()
            if day in by_day:
                by_day[day].append(session)

        if all(by_day.values()):
            if all(any(s.intensity.is_hard for s in day) for day in by_day.values()):
                return RestDecision(True, RestReason.CONSECUTIVE_HIGH_INTENSITY)

            groups = {s.muscle_group for day in by_day.values() for s in day}
            if len(groups) == 1:
                return RestDecision(True, RestReason.SAME_MUSCLE_GROUP,
                                    muscle_group=groups.pop())

        weekly = self.get_rest_advice(as_of)
        if weekly.status in (RecoveryStatus.CRITICAL, RecoveryStatus.WARNING):
            return RestDecision(True, RestReason.HIGH_WEEKLY_LOAD)

        return RestDecision(False, RestReason.READY_TO_TRAIN)

    def get_recovery_score(self, as_of=None) -> RecoveryScore:
        """
        Score recovery from 0 to 100.

        Starts at 100, deducts per advice severity, adds a bonus for each
        muscle group trained at an optimal frequency.
        """
        weekly = self.get_rest_advice(as_of)

        score = 100
        for item in weekly.advice:
            score -= self.SCORE_PENALTIES.get(item.severity, 0)

        optimal = sum(1 for item in weekly.advice if item.type == AdviceType.OPTIMAL)
        score += optimal * self.OPTIMAL_BONUS

        score = max(0, min(100, score))

        return RecoveryScore(score=score, rating=self.rating_for(score), metrics=weekly.metrics)

    @classmethod
    def rating_for(cls, score: int) -> str:
        for threshold, rating in cls.RATING_BANDS:
            if score >= threshold:
                return rating
        return 'Critical'
