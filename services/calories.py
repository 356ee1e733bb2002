"""
Calorie Estimation Service
Estimates energy expenditure from MET (Metabolic Equivalent of Task) values

CONCEPTS DEMONSTRATED:
1. Lookup Tables - MET coefficients from the Compendium of Physical Activities
2. Fuzzy Matching - substring and synonym matching on free-text activity names
3. Graceful Degradation - missing inputs give 0 instead of errors
"""

from typing import Dict, List, Optional

from .history import to_number


# MET values per activity (Compendium of Physical Activities)
EXERCISE_METS = {
    # Cardio
    'running': 8.0,
    'jogging': 6.0,
    'walking': 3.5,
    'cycling': 6.0,
    'swimming': 7.0,
    'jumping jacks': 8.0,
    'burpees': 10.0,
    'mountain climbers': 8.0,
    'high knees': 8.0,
    'jump rope': 12.0,
    'squat jumps': 8.0,
    'lunge jumps': 8.0,
    'plank jacks': 6.0,
    'bear crawls': 8.0,
    'crab walks': 6.0,

    # HIIT
    'hiit': 8.5,
    'tabata': 9.0,
    'circuit training': 7.0,

    # Strength
    'weight lifting': 5.0,
    'bodyweight exercises': 6.0,
    'resistance training': 5.5,
}

DEFAULT_MET = 6.0
STRENGTH_MET = 5.0
REST_MET = 1.5

# Synonym patterns checked after table matching, in order
MET_PATTERNS = [
    (('jump', 'burpee', 'mountain'), EXERCISE_METS['jumping jacks']),
    (('run', 'jog'), EXERCISE_METS['running']),
    (('walk',), EXERCISE_METS['walking']),
    (('cycle', 'bike'), EXERCISE_METS['cycling']),
    (('swim',), EXERCISE_METS['swimming']),
    (('hiit', 'tabata'), EXERCISE_METS['hiit']),
]


def get_met_value(activity_name: Optional[str]) -> float:
    """
    Look up the MET coefficient for a free-text activity name.

    Order: exact match, substring match either way, synonym patterns,
    then DEFAULT_MET.
    """
    if not activity_name:
        return DEFAULT_MET

    name = str(activity_name).strip().lower()
    if not name:
        return DEFAULT_MET

    if name in EXERCISE_METS:
        return EXERCISE_METS[name]

    for key, value in EXERCISE_METS.items():
        if key in name or name in key:
            return value

    for keywords, value in MET_PATTERNS:
        if any(keyword in name for keyword in keywords):
            return value

    return DEFAULT_MET


def estimate_calories(activity_name: Optional[str],
                      body_weight_kg: float,
                      duration_minutes: float,
                      intensity_percent: float = 50,
                      rounds: int = 1) -> int:
    """
    Estimate calories burned for a cardio activity.

    Args:
        activity_name: Free-text name, matched against EXERCISE_METS
        body_weight_kg: User body weight in kg
        duration_minutes: Duration of one round in minutes
        intensity_percent: 25-100, where 50 is the MET baseline
        rounds: Number of rounds performed

    Returns:
        Rounded calories, 0 when weight or duration is missing
    """
    weight = to_number(body_weight_kg)
    duration = to_number(duration_minutes)
    if not weight or not duration:
        return 0

    met = get_met_value(activity_name)
    intensity_multiplier = to_number(intensity_percent, default=50) / 50
    per_round = met * weight * (duration / 60) * intensity_multiplier

    return int(round(per_round * to_number(rounds, default=1)))


def estimate_strength_calories(body_weight_kg: float,
                               duration_minutes: float,
                               weight_lifted_kg: float = 0,
                               reps: int = 0,
                               sets: int = 1,
                               intensity_percent: float = 50) -> int:
    """
    Estimate calories for a strength exercise.

    MET-based base plus 0.05 kcal per kg lifted and 0.1 kcal per rep,
    with a floor of 3 kcal.
    """
    weight = to_number(body_weight_kg)
    duration = to_number(duration_minutes)
    if not weight or not duration:
        return 0

    intensity_multiplier = to_number(intensity_percent, default=50) / 50
    base = STRENGTH_MET * weight * (duration / 60) * intensity_multiplier
    lifted = to_number(weight_lifted_kg) * 0.05
    rep_bonus = to_number(reps) * 0.1

    return int(round(max(base + lifted + rep_bonus, 3)))


def estimate_hiit_calories(exercises: List[Dict],
                           body_weight_kg: float,
                           intensity_percent: float = 50,
                           total_rounds: int = 1) -> int:
    """
    Estimate calories for a HIIT circuit.

    Each exercise is {name, duration (seconds, default 45), rounds (default 1)}.
    """
    weight = to_number(body_weight_kg)
    if not exercises or not weight:
        return 0

    total = 0
    for exercise in exercises:
        seconds = to_number(exercise.get('duration')) or 45
        rounds = to_number(exercise.get('rounds')) or 1
        total += estimate_calories(
            exercise.get('name'),
            weight,
            seconds / 60,
            intensity_percent,
            rounds * to_number(total_rounds, default=1)
        )

    return int(round(total))


def calories_per_minute(activity_name: Optional[str],
                        body_weight_kg: float,
                        intensity_percent: float = 50) -> float:
    """Calories burned per minute, rounded to 1 decimal"""
    weight = to_number(body_weight_kg)
    met = get_met_value(activity_name)
    intensity_multiplier = to_number(intensity_percent, default=50) / 50
    return round(met * weight / 60 * intensity_multiplier, 1)


def estimate_workout_calories(exercises: List[Dict],
                              body_weight_kg: float,
                              intensity_percent: float = 50,
                              total_rounds: int = 1,
                              rest_between_rounds_seconds: float = 0) -> Dict[str, int]:
    """
    Estimate a full circuit workout including rest between rounds.

    Returns:
        {total_calories, exercise_calories, rest_calories}
    """
    weight = to_number(body_weight_kg)
    if not exercises or not weight:
        return {'total_calories': 0, 'exercise_calories': 0, 'rest_calories': 0}

    rounds_total = to_number(total_rounds, default=1)
    exercise_calories = 0
    for exercise in exercises:
        seconds = to_number(exercise.get('duration')) or 45
        rounds = to_number(exercise.get('rounds')) or 1
        minutes = seconds / 60 * rounds * rounds_total
        exercise_calories += estimate_calories(
            exercise.get('name'), weight, minutes, intensity_percent, 1
        )

    rest_minutes = to_number(rest_between_rounds_seconds) / 60 * max(0, rounds_total - 1)
    rest_calories = int(round(REST_MET * weight * rest_minutes)) if rest_minutes > 0 else 0

    return {
        'total_calories': int(round(exercise_calories + rest_calories)),
        'exercise_calories': int(round(exercise_calories)),
        'rest_calories': rest_calories
    }
