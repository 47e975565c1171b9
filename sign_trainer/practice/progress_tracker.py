from ..utils.math_utils import clamp

PROGRESS_SPEED = 0.5  # progress gained per matching frame
PROGRESS_MAX = 100.0


class ProgressTracker:
    """
    Accumulates "hold the pose" progress for the sign being practiced.

    Progress grows by `progress_speed` on every matching frame and never
    decays. When it reaches 100 the sign is complete and the completion is
    reported exactly once, until reset() starts the next attempt.
    """

    def __init__(self, progress_speed: float = PROGRESS_SPEED):
        if isinstance(progress_speed, bool) or not isinstance(progress_speed, (int, float)) \
                or not progress_speed > 0:
            print(f"Warning: Invalid progress speed {progress_speed}. Using {PROGRESS_SPEED}.")
            progress_speed = PROGRESS_SPEED
        self.progress_speed = progress_speed
        self.progress = 0.0
        self.is_complete = False

    def update(self, is_match: bool) -> bool:
        """
        Applies one frame's match decision.

        Args:
            is_match (bool): Whether this frame matched the target sign.

        Returns:
            bool: True only on the frame that completes the sign.
        """
        if not is_match or self.is_complete:
            return False

        self.progress = clamp(self.progress + self.progress_speed, 0.0, PROGRESS_MAX)
        if self.progress >= PROGRESS_MAX:
            self.is_complete = True
            return True
        return False

    def reset(self):
        self.progress = 0.0
        self.is_complete = False

    def __repr__(self):
        return f"ProgressTracker(progress={self.progress}, complete={self.is_complete})"
