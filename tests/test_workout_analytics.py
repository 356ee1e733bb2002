import os
import sys
import unittest

import pandas as pd
from sqlalchemy.exc import OperationalError

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from services import NotInitializedError, ServiceRegistry, WorkoutAnalyticsService, WorkoutRepository
from services.workout_repository import CARDIO_COLUMNS

from sqlite_backend import add_workout, make_session_factory, seed_stalled_bench


class BrokenRoutineRepository:
    """Routine queries fail, cardio loads normally"""

    def fetch_routine_history(self, user_id):
        raise OperationalError("SELECT ...", {}, Exception("connection lost"))

    def fetch_cardio_history(self, user_id):
        return pd.DataFrame(
            [['c1', '2025-03-06 07:00:00', 'light', 20, 'Legs']],
            columns=CARDIO_COLUMNS
        )


class MalformedRoutineRepository:
    """Routine rows come back without the expected columns"""

    def fetch_routine_history(self, user_id):
        return pd.DataFrame([['w1', 100]], columns=['id', 'load'])

    def fetch_cardio_history(self, user_id):
        return pd.DataFrame(columns=CARDIO_COLUMNS)


class RepositoryTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        seed_stalled_bench(self.db, 'user-1')
        add_workout(self.db, 'user-2', '2025-03-04 10:00:00', [('Deadlift', None, [(180, 3)])])
        self.repository = WorkoutRepository(self.db)

    def tearDown(self) -> None:
        self.db.close()

    def test_routine_history_is_one_row_per_set(self) -> None:
        df = self.repository.fetch_routine_history('user-1')
        self.assertEqual(len(df), 6)
        self.assertEqual(set(df['exercise_name']), {'Bench Press', 'Squat'})
        self.assertEqual(df['weight'].max(), 120)

    def test_unknown_user_has_no_history(self) -> None:
        self.assertTrue(self.repository.fetch_routine_history('nobody').empty)
        self.assertTrue(self.repository.fetch_cardio_history('nobody').empty)

    def test_cardio_history(self) -> None:
        df = self.repository.fetch_cardio_history('user-1')
        self.assertEqual(len(df), 1)
        self.assertEqual(df.iloc[0]['body_parts'], 'Legs, Cardio')
        self.assertEqual(df.iloc[0]['estimated_time'], 25)


class WorkoutAnalyticsServiceTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        seed_stalled_bench(self.db, 'user-1')
        self.service = WorkoutAnalyticsService(WorkoutRepository(self.db))

    def tearDown(self) -> None:
        self.db.close()

    def test_queries_before_initialize_fail(self) -> None:
        with self.assertRaises(NotInitializedError):
            self.service.get_feedback()
        with self.assertRaises(NotInitializedError):
            self.service.get_dashboard_analytics()
        with self.assertRaises(NotInitializedError):
            self.service.get_post_workout_summary({'exercises': []})

    def test_initialize_loads_both_sources(self) -> None:
        self.service.initialize('user-1')

        self.assertTrue(self.service.initialized)
        self.assertEqual(len(self.service.history.entries('Bench Press')), 4)
        # the zero-weight squat set is skipped
        self.assertEqual(len(self.service.history.entries('Squat')), 1)

        groups = [s.muscle_group for s in self.service.recovery_engine.sessions]
        self.assertEqual(len(groups), 6)
        self.assertEqual(groups.count('chest'), 4)
        self.assertEqual(groups.count('legs'), 2)

    def test_initialize_is_idempotent(self) -> None:
        self.service.initialize('user-1')
        self.service.initialize('user-1')
        self.assertEqual(len(self.service.history), 5)
        self.assertEqual(len(self.service.recovery_engine.sessions), 6)

    def test_failed_source_loads_nothing(self) -> None:
        service = WorkoutAnalyticsService(BrokenRoutineRepository())
        with self.assertLogs('services.workout_analytics', level='ERROR'):
            service.initialize('user-1')

        self.assertTrue(service.initialized)
        self.assertEqual(len(service.history), 0)
        self.assertEqual(len(service.recovery_engine.sessions), 1)
        self.assertEqual(service.recovery_engine.sessions[0].muscle_group, 'legs')

    def test_failed_switch_leaves_service_uninitialized(self) -> None:
        self.service.initialize('user-1')
        with self.assertRaises(KeyError):
            self.service.initialize('user-2', MalformedRoutineRepository())

        self.assertFalse(self.service.initialized)
        self.assertEqual(self.service.user_id, 'user-1')
        with self.assertRaises(NotInitializedError):
            self.service.get_feedback()

    def test_dashboard_reports_stagnation_once_per_week(self) -> None:
        self.service.initialize('user-1')

        dashboard = self.service.get_dashboard_analytics()
        self.assertEqual(dashboard['stagnation']['total'], 1)
        alert = dashboard['stagnation']['exercises'][0]
        self.assertEqual(alert['exercise'], 'Bench Press')
        self.assertEqual(alert['type'], 'complete_stagnation')
        self.assertTrue(alert['notify'])
        self.assertIn('score', dashboard['recovery'])

        again = self.service.get_dashboard_analytics()
        self.assertFalse(again['stagnation']['exercises'][0]['notify'])

    def test_feedback_for_exercise(self) -> None:
        self.service.initialize('user-1')

        feedback = self.service.get_feedback('Bench Press')
        exercise = feedback['exercise']
        self.assertEqual(exercise['progression']['type'], 'stagnation')
        self.assertEqual(exercise['stagnation']['severity'], 'high')
        self.assertIsNone(exercise['plateau_break'])
        self.assertEqual(exercise['personal_records']['max_weight']['value'], 100)
        self.assertEqual(len(feedback['stagnant_exercises']), 1)

    def test_feedback_for_unknown_exercise(self) -> None:
        self.service.initialize('user-1')

        exercise = self.service.get_feedback('Lunge')['exercise']
        self.assertEqual(exercise['progression']['type'], 'info')
        self.assertEqual(exercise['motivation']['type'], 'start')
        self.assertEqual(exercise['streak']['streak'], 0)
        self.assertIsNone(exercise['personal_records'])
        self.assertIsNone(exercise['summary'])

    def test_post_workout_summary(self) -> None:
        self.service.initialize('user-1')
        workout = {
            'exercises': [
                {'name': 'Bench Press', 'sets': [{'weight': 105, 'reps': 5}]},
                {'name': 'Cable Fly', 'sets': [{'weight': 15, 'reps': 12}]},
            ],
            'intensity': 'vigorous',
            'duration': 50,
            'muscle_groups': ['chest']
        }

        summary = self.service.get_post_workout_summary(workout, log=True)
        achievements = [(a['type'], a.get('exercise')) for a in summary['achievements']]
        self.assertIn(('weight', 'Bench Press'), achievements)
        self.assertIn(('volume', 'Bench Press'), achievements)
        self.assertIn(('first', 'Cable Fly'), achievements)
        self.assertIn(('plateau_broken', 'Bench Press'), achievements)
        self.assertEqual(summary['suggestions'], [])

        self.assertEqual(len(self.service.history.entries('Bench Press')), 5)
        self.assertEqual(len(self.service.recovery_engine.sessions), 7)

    def test_summary_without_logging_leaves_history(self) -> None:
        self.service.initialize('user-1')
        workout = {'exercises': [{'name': 'Bench Press', 'sets': [{'weight': 100, 'reps': 5}]}]}

        summary = self.service.get_post_workout_summary(workout)
        self.assertEqual(summary['achievements'], [])
        self.assertEqual(summary['suggestions'][0]['exercise'], 'Bench Press')
        self.assertEqual(len(self.service.history.entries('Bench Press')), 4)

    def test_reset(self) -> None:
        self.service.initialize('user-1')
        self.service.reset()

        self.assertFalse(self.service.initialized)
        self.assertEqual(len(self.service.history), 0)
        with self.assertRaises(NotInitializedError):
            self.service.get_feedback()


class ServiceRegistryTest(unittest.TestCase):
    def test_one_service_per_user(self) -> None:
        registry = ServiceRegistry()
        first = registry.get('user-1')

        self.assertIs(registry.get('user-1'), first)
        self.assertIsNot(registry.get('user-2'), first)
        self.assertIsNot(first.history, registry.get('user-2').history)

        registry.discard('user-1')
        self.assertNotIn('user-1', registry)
        self.assertIsNot(registry.get('user-1'), first)

    def test_find_does_not_create(self) -> None:
        registry = ServiceRegistry()
        self.assertIsNone(registry.find('user-1'))
        self.assertNotIn('user-1', registry)

        service = registry.get('user-1')
        self.assertIs(registry.find('user-1'), service)


if __name__ == '__main__':
    unittest.main()
