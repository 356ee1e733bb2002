"""
Feedback Messages
Turns tagged engine results into the JSON payloads served to the app

Every payload keeps the machine-readable `type`/`severity` tags next to
the human-readable `message`, `suggestion` and `emoji`.
"""

from typing import Dict, List, Optional

from .results import (
    AdviceItem,
    AdviceType,
    FirstSession,
    Improvement,
    Metric,
    Motivation,
    MotivationType,
    PersonalRecord,
    PlateauBreak,
    Recommendation,
    RecommendationType,
    RecoveryScore,
    RestAdvice,
    RestDecision,
    RestReason,
    StagnationAlert,
    StagnationType,
    Streak,
    Suggestion,
    SuggestionType,
)


def _num(value) -> str:
    """Format a number without a trailing .0"""
    if value is None:
        return ''
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(round(value, 2))
    return str(value)


def _plural(count, word: str) -> str:
    return f"{_num(count)} {word}{'' if count == 1 else 's'}"


# ---------------------------------------------------------------------------
# Progressive overload
# ---------------------------------------------------------------------------

PROGRESS_TEMPLATES = {
    Metric.WEIGHT: ('💪', 'Keep up the momentum! Try maintaining this weight for 2-3 sessions before increasing again.'),
    Metric.REPS: ('👏', 'Great work! Once you can do 12+ reps comfortably, consider increasing the weight.'),
    Metric.SETS: ('🔥', 'Nice volume increase! Monitor your recovery and adjust if needed.'),
    Metric.VOLUME: ('📈', 'Excellent! Your total work output is improving.'),
}


def suggestion_text(suggestion: Suggestion) -> str:
    kind = suggestion.type
    if kind == SuggestionType.WEIGHT_INCREASE:
        if suggestion.low is not None:
            return f"Try adding {_num(suggestion.low)}-{_num(suggestion.high)}kg ({_num(suggestion.target)}kg)"
        return f"Add Weight: increase to {_num(suggestion.target)}kg (keep reps/sets same)"
    if kind == SuggestionType.REP_INCREASE:
        return f"Add 1-2 reps (aim for {_num(suggestion.target)} reps)"
    if kind == SuggestionType.SET_INCREASE:
        return f"Add 1 more set ({_num(suggestion.target)} sets total)"
    if kind == SuggestionType.TEMPO_CHANGE:
        return 'Try slowing down the tempo (3-1-3)'
    if kind == SuggestionType.REST_REDUCTION:
        if suggestion.low == suggestion.high:
            return f"Reduce rest time by {_num(suggestion.low)} seconds"
        return f"Reduce rest time by {_num(suggestion.low)}-{_num(suggestion.high)} seconds between sets"
    if kind == SuggestionType.VARIATION:
        return 'Try a variation of this exercise'
    if kind == SuggestionType.DELOAD:
        return f"Deload week: drop to {_num(suggestion.target)}kg for 1 week, then return stronger"
    return kind.value


def suggestion_payload(suggestion: Suggestion) -> Dict:
    return {
        'type': suggestion.type.value,
        'target': suggestion.target,
        'text': suggestion_text(suggestion)
    }


def recommendation_payload(rec: Recommendation) -> Dict:
    payload = {'type': rec.type.value, 'metric': rec.metric.value if rec.metric else None}

    if rec.type == RecommendationType.INSUFFICIENT_DATA:
        payload.update(message='Keep logging to unlock personalized insights!',
                       emoji='📊', suggestion=None)
    elif rec.type == RecommendationType.PROGRESS:
        emoji, suggestion = PROGRESS_TEMPLATES[rec.metric]
        if rec.metric == Metric.WEIGHT:
            if rec.percent is not None:
                message = f"Progress! You increased your weight by {rec.percent}%"
            else:
                message = f"Progress! You added {_num(rec.delta)}kg"
        elif rec.metric == Metric.REPS:
            message = f"Progress! You did {_plural(rec.delta, 'more rep')}"
        elif rec.metric == Metric.SETS:
            message = 'Progress! You added more sets'
        else:
            message = f"Progress! Total volume increased by {rec.percent}%"
        payload.update(message=message, emoji=emoji, suggestion=suggestion,
                       percent=rec.percent, delta=rec.delta)
    elif rec.type == RecommendationType.STAGNATION:
        texts = [suggestion_text(s) for s in rec.suggestions]
        payload.update(
            message=(f"You've done {_num(rec.weight)}kg, {rec.reps} reps for "
                     f"{rec.sets} sets 3 sessions in a row."),
            emoji='⚠️',
            suggestion='\n• '.join(texts),
            suggestions=[suggestion_payload(s) for s in rec.suggestions]
        )
    else:
        payload.update(message='Keep up the consistency!', emoji='✅',
                       suggestion="You're building a solid foundation. Progress will come!")

    return payload


PR_TEMPLATES = {
    Metric.WEIGHT: ('🏆', 'New weight PR! {value}kg (previous: {previous}kg)'),
    Metric.REPS: ('💥', 'New rep PR! {value} reps (previous: {previous} reps)'),
    Metric.VOLUME: ('📊', 'New volume PR! {value}kg total (previous: {previous}kg)'),
}


def personal_record_payload(record: PersonalRecord, exercise: Optional[str] = None) -> Dict:
    emoji, template = PR_TEMPLATES[record.metric]
    payload = {
        'type': record.metric.value,
        'value': record.value,
        'previous': record.previous,
        'message': template.format(value=_num(record.value), previous=_num(record.previous)),
        'emoji': emoji
    }
    if exercise:
        payload['exercise'] = exercise
    return payload


def first_session_payload(marker: FirstSession) -> Dict:
    return {
        'type': 'first',
        'exercise': marker.exercise,
        'message': 'First time logging this exercise! 🎉',
        'emoji': '🎉'
    }


# ---------------------------------------------------------------------------
# Stagnation
# ---------------------------------------------------------------------------

def stagnation_payload(alert: StagnationAlert) -> Dict:
    payload = {
        'exercise': alert.exercise,
        'type': alert.type.value,
        'severity': alert.severity.value,
    }

    if alert.type == StagnationType.COMPLETE:
        lines = ['**Try one of these strategies:**\n']
        lines += [f"{i}. {suggestion_text(s)}" for i, s in enumerate(alert.suggestions, 1)]
        payload.update(
            message=(f"Plateau detected: {alert.exercise} at {_num(alert.weight)}kg, "
                     f"{alert.reps} reps, {alert.sets} sets for {alert.sessions} sessions "
                     f"({alert.days} days)"),
            emoji='⚠️',
            suggestion='\n'.join(lines),
            data={'weight': alert.weight, 'reps': alert.reps, 'sets': alert.sets,
                  'sessions': alert.sessions, 'days': alert.days}
        )
    elif alert.type == StagnationType.WEIGHT:
        payload.update(
            message=f"Weight plateau: {alert.exercise} at {_num(alert.weight)}kg for {alert.sessions} sessions",
            emoji='💭',
            suggestion=(f"You've been at {_num(alert.weight)}kg for a while. Try adding 2.5-5kg, "
                        f"or focus on increasing reps to 12+ before adding weight."),
            data={'weight': alert.weight, 'sessions': alert.sessions}
        )
    else:
        payload.update(
            message=f"Volume plateau: {alert.exercise} total volume hasn't changed much",
            emoji='📊',
            suggestion='Your total volume is flat. Try increasing weight, reps, or sets to progress.',
            data={'avg_volume': alert.avg_volume, 'variation': alert.variation_percent}
        )

    return payload


def _improvement_text(improvement: Improvement) -> str:
    if improvement.percent is not None:
        return f"{improvement.metric.value} (+{improvement.percent}%)"
    return f"{improvement.metric.value} (+{_num(improvement.delta)})"


def plateau_break_payload(result: PlateauBreak) -> Dict:
    improved = ', '.join(_improvement_text(i) for i in result.improvements)
    return {
        'type': 'plateau_broken',
        'exercise': result.exercise,
        'message': f"🎉 Plateau broken on {result.exercise}!",
        'improvements': improved,
        'emoji': '🔥',
        'celebration': f"You broke through! Improved: {improved}. Keep this momentum going!"
    }


MOTIVATION_TEMPLATES = {
    MotivationType.START: ('🚀', 'Start your journey! Log your first session.'),
    MotivationType.BEGINNER: ('💪', 'Great start! Keep logging to track your progress.'),
    MotivationType.PROGRESS: ('📈', "You're making progress! Keep pushing!"),
    MotivationType.CONSISTENT: ('🔥', "Consistency is key! You're building solid habits."),
    MotivationType.CHALLENGE: ('⚡', 'Time to level up! Try increasing intensity.'),
    MotivationType.GENERAL: ('💯', 'Keep going! Every rep counts.'),
}


def motivation_payload(motivation: Motivation) -> Dict:
    emoji, message = MOTIVATION_TEMPLATES[motivation.type]
    return {'type': motivation.type.value, 'message': message, 'emoji': emoji}


def streak_payload(streak: Streak, total_sessions: int) -> Dict:
    count = streak.streak
    if total_sessions < 2:
        return {'streak': 0, 'message': 'Start logging to build a streak!', 'emoji': '📊'}
    if count == 0:
        emoji, message = '💭', 'No current streak. Time to progress!'
    elif count == 1:
        emoji, message = '🔥', 'Progress streak started! Keep it going!'
    elif count < 5:
        emoji, message = '🔥', f"{count} sessions of progress! You're on fire!"
    else:
        emoji, message = '🏆', f"Amazing {count}-session streak! Unstoppable!"
    return {'streak': count, 'message': message, 'emoji': emoji}


# ---------------------------------------------------------------------------
# Rest & recovery
# ---------------------------------------------------------------------------

def advice_payload(item: AdviceItem) -> Dict:
    group = item.muscle_group
    count = item.count

    if item.type == AdviceType.OVERTRAINING:
        emoji = '🚨'
        message = f"⚠️ Too many {group} workouts ({count}/week)"
        suggestion = (f"Consider a rest or active recovery day for {group}. Overtraining "
                      f"can lead to injury and decreased performance.")
    elif item.type == AdviceType.UNDERTRAINING:
        emoji = '💡'
        message = f"Only 1 {group} workout this week"
        suggestion = f"Consider adding 1-2 more {group} sessions for optimal growth and strength gains."
    elif item.type == AdviceType.OPTIMAL:
        emoji = '✅'
        message = f"Great {group} training frequency ({count}/week)"
        suggestion = 'This is an optimal training frequency for most people.'
    elif item.type == AdviceType.NO_REST:
        emoji = '⛔'
        message = '🚨 You had 0 rest days this week!'
        suggestion = ('Rest is crucial for muscle recovery and growth. Schedule at least '
                      '1-2 complete rest days per week.')
    elif item.type == AdviceType.INSUFFICIENT_REST:
        emoji = '😴'
        message = f"⚠️ Only {count} rest day this week"
        suggestion = 'Aim for 1-2 rest days per week to optimize recovery and prevent burnout.'
    elif item.type == AdviceType.GOOD_REST:
        emoji = '💯'
        message = f"Perfect! {count} rest days this week"
        suggestion = 'Great balance between training and recovery.'
    elif item.type == AdviceType.HIGH_VOLUME:
        emoji = '📊'
        message = f"High training volume: {count} sessions this week"
        suggestion = 'Monitor your recovery. Consider deload week if feeling fatigued.'
    elif item.type == AdviceType.HIGH_INTENSITY:
        emoji = '🔥'
        message = f"{item.percent}% of your sessions were high intensity"
        suggestion = 'Consider mixing in some moderate intensity sessions to aid recovery.'
    else:
        emoji = '⚖️'
        message = '🎉 Great job! Training and rest are perfectly balanced.'
        suggestion = 'Keep up this routine for optimal results.'

    payload = {
        'type': item.type.value,
        'severity': item.severity.value,
        'message': message,
        'suggestion': suggestion,
        'emoji': emoji
    }
    if group:
        payload['muscle_group'] = group
    return payload


def rest_advice_payload(result: RestAdvice) -> Dict:
    return {
        'advice': [advice_payload(item) for item in result.advice],
        'metrics': result.metrics,
        'status': result.status.value
    }


REST_REASONS = {
    RestReason.CONSECUTIVE_HIGH_INTENSITY: (
        '😴', 'You had 2 consecutive high-intensity sessions. Rest is recommended for optimal recovery.'),
    RestReason.SAME_MUSCLE_GROUP: (
        '💪', 'You trained {group} 2 days in a row. Consider resting or training a different muscle group.'),
    RestReason.HIGH_WEEKLY_LOAD: (
        '⚠️', 'Your training volume is high this week. A rest day would help with recovery.'),
    RestReason.READY_TO_TRAIN: (
        '💪', "You're good to train today! Listen to your body."),
}


def rest_decision_payload(decision: RestDecision) -> Dict:
    emoji, reason = REST_REASONS[decision.reason]
    return {
        'recommended': decision.recommended,
        'type': decision.reason.value,
        'reason': reason.format(group=decision.muscle_group),
        'emoji': emoji
    }


RECOVERY_RATINGS = {
    'Excellent': ('🌟', 'Your training and recovery are perfectly balanced!'),
    'Good': ('😊', "You're doing great! Minor adjustments may help."),
    'Fair': ('😐', 'Consider adding more rest days or reducing intensity.'),
    'Poor': ('😟', 'Your recovery needs attention. Add rest days soon.'),
    'Critical': ('🚨', "Take immediate rest! You're at risk of overtraining."),
}


def recovery_score_payload(result: RecoveryScore) -> Dict:
    emoji, advice = RECOVERY_RATINGS[result.rating]
    return {
        'score': result.score,
        'rating': result.rating,
        'emoji': emoji,
        'advice': advice,
        'metrics': result.metrics
    }


def stagnation_list_payload(alerts: List[StagnationAlert]) -> List[Dict]:
    return [stagnation_payload(a) for a in alerts]
