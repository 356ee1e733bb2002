"""
Analytics Services Package

Contains the rule-based training feedback logic:
- ProgressiveOverloadEngine: Session-to-session progress and PRs
- StagnationDetector: Plateau detection over a session window
- RestRecoveryEngine: Weekly rest and recovery evaluation
- WorkoutAnalyticsService: Loads a user's history and combines the engines
- calories: MET-based calorie estimates
"""

from .history import ExerciseHistory, SessionEntry
from .progressive_overload import ProgressiveOverloadEngine, calculate_1rm
from .stagnation_detector import StagnationDetector
from .rest_recovery import RestRecoveryEngine, Intensity
from .workout_repository import WorkoutRepository
from .workout_analytics import WorkoutAnalyticsService, ServiceRegistry, NotInitializedError
from . import calories, messages

__all__ = [
    'ExerciseHistory',
    'SessionEntry',
    'ProgressiveOverloadEngine',
    'calculate_1rm',
    'StagnationDetector',
    'RestRecoveryEngine',
    'Intensity',
    'WorkoutRepository',
    'WorkoutAnalyticsService',
    'ServiceRegistry',
    'NotInitializedError',
    'calories',
    'messages'
]
