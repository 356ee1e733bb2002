"""
Analytics Result Types

Engines return these tagged results with structured fields only.
Human-readable text is added by services.messages when a payload
leaves the service.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class Severity(str, Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Ordering used for sorting alerts and computing overall status
SEVERITY_RANK = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
    Severity.NONE: 4,
}


class Metric(str, Enum):
    WEIGHT = "weight"
    REPS = "reps"
    SETS = "sets"
    VOLUME = "volume"


class RecommendationType(str, Enum):
    """Outcome of comparing the latest session against earlier ones"""
    INSUFFICIENT_DATA = "info"
    PROGRESS = "progress"
    STAGNATION = "stagnation"
    CONSISTENT = "consistent"


class SuggestionType(str, Enum):
    WEIGHT_INCREASE = "weight_increase"
    REP_INCREASE = "rep_increase"
    SET_INCREASE = "set_increase"
    TEMPO_CHANGE = "tempo_change"
    REST_REDUCTION = "rest_reduction"
    VARIATION = "variation"
    DELOAD = "deload"


class StagnationType(str, Enum):
    COMPLETE = "complete_stagnation"
    WEIGHT = "weight_stagnation"
    VOLUME = "volume_stagnation"


class MotivationType(str, Enum):
    START = "start"
    BEGINNER = "beginner"
    PROGRESS = "progress"
    CONSISTENT = "consistent"
    CHALLENGE = "challenge"
    GENERAL = "general"


class AdviceType(str, Enum):
    OVERTRAINING = "overtraining"
    UNDERTRAINING = "undertraining"
    OPTIMAL = "optimal"
    NO_REST = "no_rest"
    INSUFFICIENT_REST = "insufficient_rest"
    GOOD_REST = "good_rest"
    HIGH_VOLUME = "high_volume"
    HIGH_INTENSITY = "high_intensity"
    BALANCED = "balanced"


class RecoveryStatus(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    CAUTION = "caution"
    WARNING = "warning"
    CRITICAL = "critical"


class RestReason(str, Enum):
    CONSECUTIVE_HIGH_INTENSITY = "consecutive_high_intensity"
    SAME_MUSCLE_GROUP = "same_muscle_group"
    HIGH_WEEKLY_LOAD = "high_weekly_load"
    READY_TO_TRAIN = "ready_to_train"


@dataclass
class Suggestion:
    type: SuggestionType
    target: Optional[float] = None
    low: Optional[float] = None
    high: Optional[float] = None


@dataclass
class Recommendation:
    """Result of ProgressiveOverloadEngine.suggest_increase"""
    type: RecommendationType
    metric: Optional[Metric] = None
    percent: Optional[float] = None
    delta: Optional[float] = None
    weight: Optional[float] = None
    reps: Optional[int] = None
    sets: Optional[int] = None
    suggestions: List[Suggestion] = field(default_factory=list)


@dataclass
class PersonalRecord:
    metric: Metric
    value: float
    previous: float


@dataclass
class FirstSession:
    """Marker returned by check_for_pr for a never-logged exercise"""
    exercise: str


@dataclass
class StagnationAlert:
    exercise: str
    type: StagnationType
    severity: Severity
    sessions: int
    weight: Optional[float] = None
    reps: Optional[int] = None
    sets: Optional[int] = None
    days: Optional[int] = None
    avg_volume: Optional[float] = None
    variation_percent: Optional[float] = None
    suggestions: List[Suggestion] = field(default_factory=list)


@dataclass
class Improvement:
    metric: Metric
    delta: float
    percent: Optional[float] = None


@dataclass
class PlateauBreak:
    exercise: str
    improvements: List[Improvement]


@dataclass
class Motivation:
    type: MotivationType


@dataclass
class Streak:
    streak: int


@dataclass
class AdviceItem:
    type: AdviceType
    severity: Severity
    muscle_group: Optional[str] = None
    count: Optional[int] = None
    percent: Optional[int] = None


@dataclass
class RestAdvice:
    advice: List[AdviceItem]
    metrics: Dict
    status: RecoveryStatus


@dataclass
class RestDecision:
    recommended: bool
    reason: RestReason
    muscle_group: Optional[str] = None


@dataclass
class RecoveryScore:
    score: int
    rating: str
    metrics: Dict
