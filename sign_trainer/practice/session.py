from typing import NamedTuple, Optional

from ..pose_analysis.pose_comparator import (
    PoseComparator, ComparisonResult, no_hand_result, PASS_THRESHOLD,
)
from ..pose_analysis.reference_catalog import ReferenceCatalog
from ..utils.datatypes import HandPose
from .accuracy_history import AccuracyHistory, HISTORY_SIZE
from .progress_tracker import ProgressTracker, PROGRESS_SPEED

COMPLETION_XP = 50


class FrameOutcome(NamedTuple):
    """Everything the UI needs after one tick."""
    sign_id: str
    comparison: ComparisonResult
    progress: float
    smoothed_accuracy: float
    completed_now: bool


class PracticeSession:
    """
    Runs the per-frame practice pipeline for one learner.

    tick() is the only method that mutates progress and accuracy history, and
    each call is fully applied before it returns, so the host can stop its
    loop between any two ticks without leaving partial state behind.
    """

    def __init__(self, catalog: ReferenceCatalog, config_manager=None, initial_sign=None):
        """
        Initializes the PracticeSession.

        Args:
            catalog (ReferenceCatalog): Signs available for practice.
            config_manager (ConfigManager, optional): Source of the 'practice.*'
                                                      settings. Defaults are used without it.
            initial_sign (str, optional): Overrides 'practice.initial_sign'.
        """
        if config_manager:
            pass_threshold = config_manager.get_setting('practice.pass_threshold', PASS_THRESHOLD)
            progress_speed = config_manager.get_setting('practice.progress_speed', PROGRESS_SPEED)
            history_size = config_manager.get_setting('practice.history_size', HISTORY_SIZE)
            self.completion_xp = config_manager.get_setting('practice.completion_xp', COMPLETION_XP)
            default_sign = config_manager.get_setting('practice.initial_sign')
        else:
            pass_threshold = PASS_THRESHOLD
            progress_speed = PROGRESS_SPEED
            history_size = HISTORY_SIZE
            self.completion_xp = COMPLETION_XP
            default_sign = None

        self.catalog = catalog
        self.comparator = PoseComparator(catalog, pass_threshold=pass_threshold)
        self.tracker = ProgressTracker(progress_speed=progress_speed)
        self.history = AccuracyHistory(capacity=history_size)
        self.xp_earned = 0

        sign_ids = catalog.sign_ids()
        if initial_sign is None:
            initial_sign = default_sign
        if initial_sign is None and sign_ids:
            initial_sign = sign_ids[0]
        self.current_sign = initial_sign

    @property
    def progress(self) -> float:
        return self.tracker.progress

    @property
    def is_complete(self) -> bool:
        return self.tracker.is_complete

    def tick(self, pose: Optional[HandPose]) -> FrameOutcome:
        """
        Processes one frame.

        Args:
            pose: The detected hand joints, or None when no hand is visible.
                  A missing hand leaves progress and accuracy history untouched.

        Returns:
            FrameOutcome
        """
        completed_now = False

        if pose is None:
            result = no_hand_result()
        else:
            result = self.comparator.compare_pose(pose, self.current_sign)
            completed_now = self.tracker.update(result.is_match)
            self.history.record(result)
            if completed_now:
                self.xp_earned += self.completion_xp
                print(f"Sign '{self.current_sign}' complete! +{self.completion_xp} XP")

        return FrameOutcome(
            sign_id=self.current_sign,
            comparison=result,
            progress=self.tracker.progress,
            smoothed_accuracy=self.history.smoothed_accuracy(),
            completed_now=completed_now,
        )

    def select_sign(self, sign_id: str) -> bool:
        """
        Switches the practiced sign. Progress restarts from zero when the sign
        actually changes.

        Returns:
            bool: True if the sign changed.
        """
        if sign_id == self.current_sign:
            return False
        self.current_sign = sign_id
        self.tracker.reset()
        print(f"Practicing sign '{sign_id}'.")
        return True

    def advance_to_next_sign(self) -> Optional[str]:
        """
        Moves on to the next sign in catalog order once the current one is
        complete.

        Returns:
            str: The new sign id, or None if the current sign is not complete yet.
        """
        if not self.tracker.is_complete:
            return None

        next_sign = self._neighbour_sign(1)
        if next_sign is None or next_sign == self.current_sign:
            self.tracker.reset()
            return self.current_sign
        self.select_sign(next_sign)
        return next_sign

    def cycle_sign(self, step: int = 1) -> Optional[str]:
        """Selects the sign `step` positions away in catalog order, wrapping around."""
        next_sign = self._neighbour_sign(step)
        if next_sign is not None:
            self.select_sign(next_sign)
        return next_sign

    def _neighbour_sign(self, step):
        sign_ids = self.catalog.sign_ids()
        if not sign_ids:
            return None
        if self.current_sign not in sign_ids:
            return sign_ids[0]
        index = sign_ids.index(self.current_sign)
        return sign_ids[(index + step) % len(sign_ids)]
