import os
import sys
import unittest
from datetime import datetime, timedelta

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from services.history import ExerciseHistory
from services.progressive_overload import ProgressiveOverloadEngine, calculate_1rm
from services.results import FirstSession, Metric, RecommendationType, SuggestionType
from services.stagnation_detector import StagnationDetector

START = datetime(2025, 5, 5, 18, 0)


def week(n):
    return START + timedelta(days=7 * n)


class SuggestIncreaseTest(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = ProgressiveOverloadEngine()

    def test_single_session_is_insufficient(self) -> None:
        self.engine.log_session('Bench Press', 100, 5, 3, week(0))
        result = self.engine.suggest_increase('Bench Press')
        self.assertEqual(result.type, RecommendationType.INSUFFICIENT_DATA)

    def test_unknown_exercise_is_insufficient(self) -> None:
        self.assertEqual(self.engine.suggest_increase('Nothing').type,
                         RecommendationType.INSUFFICIENT_DATA)

    def test_weight_progress_reports_percent(self) -> None:
        self.engine.log_session('Bench Press', 100, 5, 3, week(0))
        self.engine.log_session('Bench Press', 105, 5, 3, week(1))
        result = self.engine.suggest_increase('Bench Press')
        self.assertEqual(result.type, RecommendationType.PROGRESS)
        self.assertEqual(result.metric, Metric.WEIGHT)
        self.assertEqual(result.percent, 5.0)
        self.assertEqual(result.delta, 5)

    def test_weight_is_checked_before_reps(self) -> None:
        self.engine.log_session('Row', 60, 8, 3, week(0))
        self.engine.log_session('Row', 62.5, 10, 3, week(1))
        self.assertEqual(self.engine.suggest_increase('Row').metric, Metric.WEIGHT)

    def test_rep_progress(self) -> None:
        self.engine.log_session('Row', 60, 8, 3, week(0))
        self.engine.log_session('Row', 60, 9, 3, week(1))
        result = self.engine.suggest_increase('Row')
        self.assertEqual(result.metric, Metric.REPS)
        self.assertEqual(result.delta, 1)

    def test_set_progress(self) -> None:
        self.engine.log_session('Row', 60, 8, 3, week(0))
        self.engine.log_session('Row', 60, 8, 4, week(1))
        self.assertEqual(self.engine.suggest_increase('Row').metric, Metric.SETS)

    def test_two_identical_sessions_are_consistent(self) -> None:
        for n in range(2):
            self.engine.log_session('Bench Press', 100, 5, 3, week(n))
        self.assertEqual(self.engine.suggest_increase('Bench Press').type,
                         RecommendationType.CONSISTENT)

    def test_three_identical_sessions_stagnate(self) -> None:
        for n in range(3):
            self.engine.log_session('Bench Press', 100, 5, 3, week(n))
        result = self.engine.suggest_increase('Bench Press')
        self.assertEqual(result.type, RecommendationType.STAGNATION)
        self.assertEqual((result.weight, result.reps, result.sets), (100, 5, 3))

        types = [s.type for s in result.suggestions]
        self.assertEqual(types[0], SuggestionType.WEIGHT_INCREASE)
        self.assertEqual(result.suggestions[0].target, 102.5)
        self.assertIn(SuggestionType.REP_INCREASE, types)
        self.assertIn(SuggestionType.SET_INCREASE, types)
        self.assertIn(SuggestionType.VARIATION, types)

    def test_light_stagnation_suggests_small_jump(self) -> None:
        for n in range(3):
            self.engine.log_session('Curl', 12, 12, 4, week(n))
        result = self.engine.suggest_increase('Curl')
        types = [s.type for s in result.suggestions]
        self.assertEqual(result.suggestions[0].target, 13.5)
        self.assertNotIn(SuggestionType.REP_INCREASE, types)
        self.assertNotIn(SuggestionType.SET_INCREASE, types)

    def test_sessions_logged_out_of_order_are_sorted(self) -> None:
        self.engine.log_session('Bench Press', 105, 5, 3, week(1))
        self.engine.log_session('Bench Press', 100, 5, 3, week(0))
        self.assertEqual(self.engine.suggest_increase('Bench Press').metric, Metric.WEIGHT)

    def test_names_are_case_sensitive(self) -> None:
        self.engine.log_session('Bench Press', 100, 5, 3, week(0))
        self.engine.log_session('bench press', 105, 5, 3, week(1))
        self.assertEqual(self.engine.suggest_increase('Bench Press').type,
                         RecommendationType.INSUFFICIENT_DATA)


class PersonalRecordTest(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = ProgressiveOverloadEngine()
        self.engine.log_session('Squat', 100, 5, 1, week(0))
        self.engine.log_session('Squat', 90, 8, 1, week(1))

    def test_beating_everything_gives_three_records(self) -> None:
        records = self.engine.check_for_pr('Squat', 110, 9, 1)
        self.assertEqual([r.metric for r in records], [Metric.WEIGHT, Metric.REPS, Metric.VOLUME])
        self.assertEqual(records[0].previous, 100)
        self.assertEqual(records[2].value, 990)

    def test_tie_is_not_a_record(self) -> None:
        self.assertIsNone(self.engine.check_for_pr('Squat', 100, 5, 1))

    def test_new_exercise_is_first_session(self) -> None:
        result = self.engine.check_for_pr('Deadlift', 140, 5)
        self.assertIsInstance(result, FirstSession)
        self.assertEqual(result.exercise, 'Deadlift')

    def test_personal_records(self) -> None:
        records = self.engine.get_personal_records('Squat')
        self.assertEqual(records['max_weight']['value'], 100)
        self.assertEqual(records['max_reps']['value'], 8)
        self.assertEqual(records['max_volume']['value'], 720)
        self.assertEqual(records['estimated_1rm'], 116.7)
        self.assertIsNone(self.engine.get_personal_records('Deadlift'))

    def test_calculate_1rm(self) -> None:
        self.assertEqual(calculate_1rm(100, 1), 100)
        self.assertAlmostEqual(calculate_1rm(100, 10), 133.33, places=2)
        self.assertEqual(calculate_1rm(100, 0), 0)


class ProgressSummaryTest(unittest.TestCase):
    def test_summary_and_volume_trend(self) -> None:
        engine = ProgressiveOverloadEngine()
        engine.log_session('Press', 50, 10, 2, week(0))
        engine.log_session('Press', 55, 10, 2, week(1))
        engine.log_session('Press', 60, 10, 2, week(2))

        summary = engine.get_progress_summary('Press')
        self.assertEqual(summary['total_sessions'], 3)
        self.assertEqual(summary['weight_progress'], 10)
        self.assertEqual(summary['weight_progress_percent'], 20.0)
        self.assertEqual(summary['volume_progress'], 200)
        self.assertEqual(summary['days_tracking'], 14)
        self.assertAlmostEqual(summary['volume_trend_per_week'], 100.0)

    def test_no_summary_without_sessions(self) -> None:
        self.assertIsNone(ProgressiveOverloadEngine().get_progress_summary('Press'))

    def test_trend_needs_three_sessions(self) -> None:
        engine = ProgressiveOverloadEngine()
        engine.log_session('Press', 50, 10, 2, week(0))
        engine.log_session('Press', 55, 10, 2, week(1))
        self.assertIsNone(engine.get_progress_summary('Press')['volume_trend_per_week'])


class HistoryLoadingTest(unittest.TestCase):
    ROWS = [
        {'exercise_name': 'Bench Press', 'weight': '100', 'reps': 5, 'sets': 3, 'date': '2025-05-05'},
        {'name': 'Bench Press', 'weight': 105, 'reps': '5', 'sets': None, 'created_at': '2025-05-12'},
        {'exercise_name': 'Row', 'weight': None, 'reps': None, 'date': '2025-05-06'},
        {'weight': 50, 'reps': 5},
    ]

    def test_reload_replaces_history(self) -> None:
        engine = ProgressiveOverloadEngine()
        engine.load_history(self.ROWS)
        engine.load_history(self.ROWS)

        self.assertEqual(len(engine.history), 3)
        bench = engine.history.entries('Bench Press')
        self.assertEqual(bench[1].weight, 105)
        self.assertEqual(bench[1].sets, 1)
        self.assertEqual(bench[1].date, datetime(2025, 5, 12))
        self.assertEqual(engine.history.latest('Row').volume, 0)

    def test_reload_reproduces_logged_sessions(self) -> None:
        sessions = [
            ('Bench Press', 100, 5, 3, week(0)),
            ('Bench Press', 102.5, 5, 3, week(1)),
            ('Bench Press', 102.5, 6, 3, week(1)),
            ('Row', 60, 10, 3, week(1)),
            ('Bench Press', 105, 5, 3, week(2)),
        ]
        logged = ProgressiveOverloadEngine()
        for exercise, weight, reps, sets, date in sessions:
            logged.log_session(exercise, weight, reps, sets, date)

        loaded = ProgressiveOverloadEngine()
        loaded.load_history([
            {'exercise_name': exercise, 'weight': weight, 'reps': reps, 'sets': sets, 'date': date}
            for exercise, weight, reps, sets, date in sessions
        ])

        for exercise in ('Bench Press', 'Row'):
            self.assertEqual(loaded.history.entries(exercise), logged.history.entries(exercise))
        self.assertEqual(loaded.history.entries('Bench Press')[2].reps, 6)

    def test_shared_history_is_seen_by_detector(self) -> None:
        history = ExerciseHistory()
        engine = ProgressiveOverloadEngine(history)
        detector = StagnationDetector(history)
        for n in range(4):
            engine.log_session('Bench Press', 100, 5, 3, week(n))
        self.assertIsNotNone(detector.check_stagnation('Bench Press'))


if __name__ == '__main__':
    unittest.main()
