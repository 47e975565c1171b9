from typing import NamedTuple, List

from ..utils.datatypes import (
    HandPose, AngleVector, FINGER_NAMES,
    WRIST, THUMB_TIP, INDEX_MCP, MIDDLE_MCP,
)
from ..utils.math_utils import distance, clamp
from .angle_extractor import extract_angles, get_joint
from .reference_catalog import ReferenceCatalog

PASS_THRESHOLD = 85
MAX_FINGER_ERRORS = 2
THUMB_PROXIMITY_LIMIT = 0.5  # thumb tip to index MCP, in palm lengths
THUMB_PROXIMITY_PENALTY = 0.5
DEVIANCE_DIVISOR = 4

UNKNOWN_SIGN_ERROR = "Unknown Sign"
NO_HAND_ERROR = "No hand detected"
THUMB_PROXIMITY_ERROR = "Move Thumb closer to Hand"


class ComparisonResult(NamedTuple):
    """Outcome of comparing one frame's hand shape to a sign."""
    is_match: bool
    score: float          # 0-100
    errors: List[str]     # corrective feedback, most important first
    vector: List[float]   # the angles that produced this result


def no_hand_result() -> ComparisonResult:
    """Result reported for a frame in which no hand was detected."""
    return ComparisonResult(is_match=False, score=0, errors=[NO_HAND_ERROR], vector=[])


class PoseComparator:
    """
    Scores a hand shape against the reference shapes in a ReferenceCatalog.

    The comparator holds no per-frame state: the same angles, sign and pose
    always produce the same ComparisonResult.
    """

    def __init__(self, catalog: ReferenceCatalog, pass_threshold: float = PASS_THRESHOLD):
        self.catalog = catalog
        self.pass_threshold = pass_threshold

    def compare(self, angles: AngleVector, sign_id: str, pose: HandPose = None) -> ComparisonResult:
        """
        Compares an angle vector against the reference for `sign_id`.

        Args:
            angles: Five finger extension angles, Thumb -> Pinky.
            sign_id: The sign being practiced.
            pose: The joints the angles came from. Only needed for signs with
                  geometric constraints; without it constraints cannot fail.

        Returns:
            ComparisonResult
        """
        reference = self.catalog.get(sign_id)
        if reference is None:
            return ComparisonResult(is_match=False, score=0, errors=[UNKNOWN_SIGN_ERROR], vector=[])

        errors = []
        total_deviance = 0.0

        for i, angle in enumerate(angles):
            target = reference.vector[i]
            tolerance = reference.tolerance[i]
            diff = abs(angle - target)

            # Full credit at the target, none at twice the tolerance
            max_allowed = tolerance * 2
            component_score = max(0.0, 1 - diff / max_allowed)
            total_deviance += 1 - component_score

            if diff > tolerance and len(errors) < MAX_FINGER_ERRORS:
                direction = "Straighten" if angle < target else "Curl"
                errors.append(f"{direction} {FINGER_NAMES[i]}")

        if reference.thumb_index_proximity and self._thumb_too_far(pose):
            errors.append(THUMB_PROXIMITY_ERROR)
            total_deviance += THUMB_PROXIMITY_PENALTY

        # The divisor stays at 4 whether or not a constraint added deviance
        score = clamp((1 - total_deviance / DEVIANCE_DIVISOR) * 100, 0, 100)
        is_match = not errors and score >= self.pass_threshold

        return ComparisonResult(is_match=is_match, score=score, errors=errors, vector=list(angles))

    def compare_pose(self, pose: HandPose, sign_id: str) -> ComparisonResult:
        """Extracts the finger angles from `pose` and compares them to `sign_id`."""
        if sign_id not in self.catalog:
            return ComparisonResult(is_match=False, score=0, errors=[UNKNOWN_SIGN_ERROR], vector=[])
        return self.compare(extract_angles(pose), sign_id, pose)

    def finger_status(self, angles: AngleVector, sign_id: str) -> List[bool]:
        """
        Per-finger flags telling whether each angle is inside its tolerance.
        Used for display; an unknown sign yields all False.
        """
        reference = self.catalog.get(sign_id)
        if reference is None:
            return [False] * len(angles)
        return [abs(angle - reference.vector[i]) < reference.tolerance[i]
                for i, angle in enumerate(angles)]

    def status_message(self, result: ComparisonResult) -> str:
        """One-line summary shown when there is no corrective feedback to list."""
        if result.errors:
            return result.errors[0]
        if result.score >= self.pass_threshold:
            return "Excellent form! Hold it..."
        return "Align your hand to the camera..."

    @staticmethod
    def _thumb_too_far(pose: HandPose) -> bool:
        gap = distance(get_joint(pose, THUMB_TIP), get_joint(pose, INDEX_MCP))
        palm_scale = distance(get_joint(pose, WRIST), get_joint(pose, MIDDLE_MCP))
        if palm_scale == 0:
            palm_scale = 1
        return gap / palm_scale > THUMB_PROXIMITY_LIMIT
