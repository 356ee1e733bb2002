import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from services import calories


class MetLookupTest(unittest.TestCase):
    def test_exact_match_is_case_insensitive(self) -> None:
        self.assertEqual(calories.get_met_value('Jump Rope'), 12.0)
        self.assertEqual(calories.get_met_value('  running '), 8.0)

    def test_substring_match(self) -> None:
        self.assertEqual(calories.get_met_value('Burpees with push-up'), 10.0)

    def test_synonym_pattern(self) -> None:
        self.assertEqual(calories.get_met_value('Morning Run'), 8.0)
        self.assertEqual(calories.get_met_value('stationary bike'), 6.0)

    def test_unknown_and_missing_use_default(self) -> None:
        self.assertEqual(calories.get_met_value('yoga'), calories.DEFAULT_MET)
        self.assertEqual(calories.get_met_value(None), calories.DEFAULT_MET)
        self.assertEqual(calories.get_met_value(''), calories.DEFAULT_MET)


class CalorieEstimateTest(unittest.TestCase):
    def test_running_thirty_minutes(self) -> None:
        self.assertEqual(calories.estimate_calories('running', 70, 30), 280)

    def test_intensity_scales_linearly(self) -> None:
        self.assertEqual(calories.estimate_calories('running', 70, 30, intensity_percent=100), 560)

    def test_rounds_multiply(self) -> None:
        self.assertEqual(calories.estimate_calories('running', 70, 30, rounds=2), 560)

    def test_missing_inputs_give_zero(self) -> None:
        self.assertEqual(calories.estimate_calories('running', 0, 30), 0)
        self.assertEqual(calories.estimate_calories('running', 70, None), 0)
        self.assertEqual(calories.estimate_calories('running', 'abc', 30), 0)

    def test_strength_adds_load_and_rep_bonus(self) -> None:
        # 5 MET x 70kg x 10/60 h = 58.3, + 100kg x 0.05 + 10 reps x 0.1
        result = calories.estimate_strength_calories(70, 10, weight_lifted_kg=100, reps=10)
        self.assertEqual(result, 64)

    def test_strength_has_floor(self) -> None:
        self.assertEqual(calories.estimate_strength_calories(1, 1), 3)

    def test_hiit_uses_seconds_and_rounds(self) -> None:
        exercises = [{'name': 'burpees', 'duration': 60, 'rounds': 2}]
        self.assertEqual(calories.estimate_hiit_calories(exercises, 70), 23)
        self.assertEqual(calories.estimate_hiit_calories([], 70), 0)

    def test_workout_includes_rest_between_rounds(self) -> None:
        exercises = [{'name': 'running', 'duration': 60}]
        result = calories.estimate_workout_calories(
            exercises, 60, total_rounds=3, rest_between_rounds_seconds=60
        )
        self.assertEqual(result, {'total_calories': 27, 'exercise_calories': 24, 'rest_calories': 3})

    def test_calories_per_minute(self) -> None:
        self.assertEqual(calories.calories_per_minute('running', 60), 8.0)
        self.assertEqual(calories.calories_per_minute('running', 60, intensity_percent=75), 12.0)


if __name__ == '__main__':
    unittest.main()
