"""
Session History Store
Holds the per-exercise strength log shared by the analytics engines

Both the ProgressiveOverloadEngine and the StagnationDetector read from the
same ExerciseHistory, so a session logged once is seen by both.
"""

import math
from dataclasses import dataclass, field
from datetime import date as date_type, datetime, timezone
from typing import Dict, Iterable, List, Optional

import pandas as pd


def utcnow() -> datetime:
    """Current time as a naive UTC datetime"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_datetime(value, fallback=None) -> datetime:
    """
    Normalize anything date-like to a naive UTC datetime.

    Accepts datetimes, dates, ISO strings and pandas Timestamps. Falls back
    to `fallback`, then to now, when the value is missing or unparseable.
    """
    for candidate in (value, fallback):
        if candidate is None or (isinstance(candidate, float) and math.isnan(candidate)):
            continue
        if isinstance(candidate, date_type) and not isinstance(candidate, datetime):
            candidate = datetime(candidate.year, candidate.month, candidate.day)
        try:
            ts = pd.to_datetime(candidate, utc=True)
        except (ValueError, TypeError):
            continue
        if pd.isna(ts):
            continue
        return ts.tz_convert(None).to_pydatetime()
    return utcnow()


def to_number(value, default: float = 0.0) -> float:
    """Coerce a backend value to a non-negative float, or `default`"""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return max(0.0, number)


def to_count(value, default: int = 0) -> int:
    """Coerce a backend value to a non-negative int, or `default`"""
    number = to_number(value, default=float(default))
    return int(number)


@dataclass(frozen=True)
class SessionEntry:
    """One logged exercise session. Volume is fixed at construction."""
    weight: float
    reps: int
    sets: int
    date: datetime
    volume: float = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, 'volume', self.weight * self.reps * self.sets)

    @classmethod
    def create(cls, weight, reps, sets, date=None) -> 'SessionEntry':
        """Build an entry from loosely typed input"""
        return cls(
            weight=to_number(weight),
            reps=to_count(reps),
            sets=max(1, to_count(sets, default=1)),
            date=to_datetime(date)
        )

    def same_load(self, other: 'SessionEntry') -> bool:
        """True when weight, reps and sets all match"""
        return (self.weight == other.weight and
                self.reps == other.reps and
                self.sets == other.sets)


class ExerciseHistory:
    """
    Per-exercise chronological session log.

    Exercise names are used as given: "Bench Press" and "bench press"
    are two different histories.
    """

    def __init__(self):
        self._logs: Dict[str, List[SessionEntry]] = {}

    def add(self, exercise: str, entry: SessionEntry) -> SessionEntry:
        logs = self._logs.setdefault(exercise, [])
        logs.append(entry)
        # sort is stable, so same-date entries keep insertion order
        logs.sort(key=lambda e: e.date)
        return entry

    def log(self, exercise: str, weight, reps, sets, date=None) -> SessionEntry:
        return self.add(exercise, SessionEntry.create(weight, reps, sets, date))

    def replace(self, rows: Iterable[Dict]):
        """
        Destructive reload from backend rows.

        Rows look like {exercise_name|name, weight, reps, sets, date|created_at}.
        Missing weight/reps become 0, missing sets become 1.
        """
        self._logs = {}
        for row in rows:
            exercise = row.get('exercise_name') or row.get('name')
            if not exercise:
                continue
            self.log(
                exercise,
                row.get('weight'),
                row.get('reps'),
                row.get('sets'),
                to_datetime(row.get('date'), fallback=row.get('created_at'))
            )

    def clear(self):
        self._logs = {}

    def entries(self, exercise: str) -> List[SessionEntry]:
        """Entries for an exercise, oldest first. Empty for unknown names."""
        return list(self._logs.get(exercise, []))

    def exercises(self) -> List[str]:
        return list(self._logs.keys())

    def latest(self, exercise: str) -> Optional[SessionEntry]:
        logs = self._logs.get(exercise)
        return logs[-1] if logs else None

    def to_dataframe(self, exercise: str) -> pd.DataFrame:
        """Entries as a DataFrame with columns [date, weight, reps, sets, volume]"""
        return pd.DataFrame(
            [
                {'date': e.date, 'weight': e.weight, 'reps': e.reps,
                 'sets': e.sets, 'volume': e.volume}
                for e in self._logs.get(exercise, [])
            ],
            columns=['date', 'weight', 'reps', 'sets', 'volume']
        )

    def __contains__(self, exercise: str) -> bool:
        return bool(self._logs.get(exercise))

    def __len__(self) -> int:
        return sum(len(v) for v in self._logs.values())


def percent_change(new: float, old: float) -> Optional[float]:
    """Percent change rounded to 1 decimal, None when there is no baseline"""
    if not old:
        return None
    return round((new - old) / old * 100, 1)
