import unittest
from unittest.mock import patch

# Ensure sign_trainer is discoverable
import sys
import os
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from sign_trainer.pose_analysis.pose_comparator import (
    PoseComparator, ComparisonResult, no_hand_result, PASS_THRESHOLD,
)
from sign_trainer.pose_analysis.reference_catalog import ReferenceCatalog
from sign_trainer.utils.datatypes import Point3D

CATALOG_DATA = {
    'A': {'name': 'Letter A', 'vector': [150, 45, 45, 45, 45],
          'tolerance': [40, 45, 45, 45, 45],
          'constraints': {'thumb_index_proximity': True}},
    'B': {'name': 'Letter B', 'vector': [80, 170, 170, 170, 170],
          'tolerance': [50, 30, 30, 30, 30]},
    'E': {'name': 'Letter E', 'vector': [30, 30, 30, 30, 30],
          'tolerance': [30, 30, 30, 30, 30]},
}


def constraint_pose(thumb_ratio, palm_scale=1.0):
    """Pose carrying only the joints the thumb proximity check reads."""
    pose = [None] * 21
    pose[0] = Point3D(0.0, 0.0, 0.0)                          # wrist
    pose[9] = Point3D(0.0, palm_scale, 0.0)                   # middle MCP
    pose[5] = Point3D(1.0, 1.0, 0.0)                          # index MCP
    pose[4] = Point3D(1.0 + thumb_ratio * palm_scale, 1.0, 0.0)  # thumb tip
    return pose


class TestPoseComparator(unittest.TestCase):

    def setUp(self):
        self.catalog = ReferenceCatalog.from_mapping(CATALOG_DATA)
        self.comparator = PoseComparator(self.catalog)

    # --- Reference scenarios ---

    def test_letter_a_held_correctly(self):
        result = self.comparator.compare([150, 45, 45, 45, 45], 'A', constraint_pose(0.3))
        self.assertTrue(result.is_match)
        self.assertGreaterEqual(result.score, 85)
        self.assertEqual(result.score, 100)
        self.assertEqual(result.errors, [])
        self.assertEqual(result.vector, [150, 45, 45, 45, 45])

    def test_letter_a_with_tucked_thumb(self):
        result = self.comparator.compare([80, 45, 45, 45, 45], 'A', constraint_pose(0.3))
        self.assertFalse(result.is_match)
        self.assertEqual(result.errors, ["Straighten Thumb"])
        # diff 70 over max 80 leaves 0.125 of the thumb's credit
        self.assertAlmostEqual(result.score, (1 - 0.875 / 4) * 100)

    def test_unknown_sign(self):
        result = self.comparator.compare([150, 45, 45, 45, 45], 'Z')
        self.assertEqual(result, ComparisonResult(is_match=False, score=0, errors=["Unknown Sign"], vector=[]))

    def test_no_hand_result(self):
        result = no_hand_result()
        self.assertFalse(result.is_match)
        self.assertEqual(result.score, 0)
        self.assertEqual(result.errors, ["No hand detected"])

    # --- Feedback rules ---

    def test_curl_feedback_when_angle_above_target(self):
        result = self.comparator.compare([30, 30, 100, 30, 30], 'E')
        self.assertEqual(result.errors, ["Curl Middle"])
        self.assertFalse(result.is_match)

    def test_diff_equal_to_tolerance_gives_no_feedback(self):
        result = self.comparator.compare([80, 140, 200, 170, 170], 'B')
        self.assertEqual(result.errors, [])
        # Two fingers at half credit: deviance 1.0
        self.assertAlmostEqual(result.score, 75.0)
        self.assertFalse(result.is_match) # below the pass threshold

    def test_diff_just_over_tolerance_gives_feedback(self):
        result = self.comparator.compare([80, 139.999, 170, 170, 170], 'B')
        self.assertEqual(result.errors, ["Straighten Index"])

    def test_finger_feedback_capped_at_two_in_finger_order(self):
        result = self.comparator.compare([0, 0, 0, 0, 0], 'B')
        self.assertEqual(result.errors, ["Straighten Thumb", "Straighten Index"])

    def test_constraint_message_is_added_beyond_cap(self):
        result = self.comparator.compare([0, 180, 180, 180, 180], 'A', constraint_pose(0.9))
        self.assertEqual(result.errors, ["Straighten Thumb", "Curl Index", "Move Thumb closer to Hand"])
        self.assertEqual(result.score, 0)

    def test_constraint_violation_alone(self):
        result = self.comparator.compare([150, 45, 45, 45, 45], 'A', constraint_pose(0.6))
        self.assertEqual(result.errors, ["Move Thumb closer to Hand"])
        # 0.5 extra deviance over the fixed divisor of 4
        self.assertAlmostEqual(result.score, 87.5)
        self.assertFalse(result.is_match)

    def test_constraint_ratio_at_limit_passes(self):
        result = self.comparator.compare([150, 45, 45, 45, 45], 'A', constraint_pose(0.5))
        self.assertEqual(result.errors, [])
        self.assertTrue(result.is_match)

    def test_constraint_scales_with_palm_size(self):
        result = self.comparator.compare([150, 45, 45, 45, 45], 'A', constraint_pose(0.3, palm_scale=4.0))
        self.assertTrue(result.is_match)

    def test_constraint_with_zero_palm_scale_uses_raw_distance(self):
        pose = constraint_pose(0.3)
        pose[9] = pose[0]
        self.assertTrue(self.comparator.compare([150, 45, 45, 45, 45], 'A', pose).is_match)
        pose[4] = Point3D(1.9, 1.0, 0.0)
        self.assertIn("Move Thumb closer to Hand", self.comparator.compare([150, 45, 45, 45, 45], 'A', pose).errors)

    def test_constraint_cannot_fail_without_joints(self):
        result = self.comparator.compare([150, 45, 45, 45, 45], 'A')
        self.assertTrue(result.is_match)

    def test_constraint_ignored_for_signs_without_it(self):
        result = self.comparator.compare([80, 170, 170, 170, 170], 'B', constraint_pose(5.0))
        self.assertTrue(result.is_match)

    # --- Scoring ---

    def test_score_is_clamped(self):
        result = self.comparator.compare([180, 180, 180, 180, 180], 'E')
        self.assertEqual(result.score, 0)

    def test_score_monotonic_in_single_finger_deviation(self):
        for finger in range(5):
            previous = None
            for offset in range(0, 181, 5):
                angles = [150, 45, 45, 45, 45]
                angles[finger] = max(0, angles[finger] - offset) if finger == 0 else angles[finger] + offset
                score = self.comparator.compare(angles, 'A').score
                if previous is not None:
                    self.assertLessEqual(score, previous)
                previous = score

    def test_match_requires_threshold(self):
        strict = PoseComparator(self.catalog, pass_threshold=99)
        result = strict.compare([100, 170, 170, 170, 170], 'B')
        self.assertEqual(result.errors, [])
        self.assertAlmostEqual(result.score, (1 - 0.2 / 4) * 100)
        self.assertFalse(result.is_match)
        self.assertTrue(self.comparator.compare([100, 170, 170, 170, 170], 'B').is_match)

    def test_default_threshold(self):
        self.assertEqual(PASS_THRESHOLD, 85)
        self.assertEqual(self.comparator.pass_threshold, 85)

    def test_compare_is_deterministic(self):
        pose = constraint_pose(0.7)
        first = self.comparator.compare([120.5, 60.25, 10, 99, 45], 'A', pose)
        second = self.comparator.compare([120.5, 60.25, 10, 99, 45], 'A', pose)
        self.assertEqual(first, second)

    # --- Pose entry point ---

    def test_compare_pose_unknown_sign_skips_extraction(self):
        with patch('sign_trainer.pose_analysis.pose_comparator.extract_angles') as mock_extract:
            result = self.comparator.compare_pose(constraint_pose(0.3), 'Z')
            mock_extract.assert_not_called()
        self.assertEqual(result.errors, ["Unknown Sign"])
        self.assertEqual(result.vector, [])

    def test_compare_pose_extracts_then_compares(self):
        pose = constraint_pose(0.9)
        with patch('sign_trainer.pose_analysis.pose_comparator.extract_angles',
                   return_value=(150.0, 45.0, 45.0, 45.0, 45.0)) as mock_extract:
            result = self.comparator.compare_pose(pose, 'A')
            mock_extract.assert_called_once_with(pose)
        self.assertEqual(result.vector, [150.0, 45.0, 45.0, 45.0, 45.0])
        self.assertEqual(result.errors, ["Move Thumb closer to Hand"])

    # --- Display helpers ---

    def test_finger_status(self):
        status = self.comparator.finger_status([80, 140, 171, 100, 170], 'B')
        self.assertEqual(status, [True, False, True, False, True])
        self.assertEqual(self.comparator.finger_status([1, 2, 3, 4, 5], 'Z'), [False] * 5)

    def test_status_message(self):
        self.assertEqual(self.comparator.status_message(
            ComparisonResult(True, 100, [], [])), "Excellent form! Hold it...")
        self.assertEqual(self.comparator.status_message(
            ComparisonResult(False, 40, [], [])), "Align your hand to the camera...")
        self.assertEqual(self.comparator.status_message(
            ComparisonResult(False, 40, ["Curl Ring"], [])), "Curl Ring")

if __name__ == '__main__':
    unittest.main(verbosity=2)
