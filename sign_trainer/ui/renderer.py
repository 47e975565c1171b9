import cv2
import numpy as np

from ..config_manager import ConfigManager
from ..utils.datatypes import FINGER_NAMES

class Renderer:
    """
    Draws the practice overlay onto the camera frame: hand skeleton, live score,
    per-finger angle bars, feedback, accuracy and lesson progress.
    """

    # Wrist-to-tip chain for each finger
    FINGER_CHAINS = (
        (0, 1, 2, 3, 4),
        (0, 5, 6, 7, 8),
        (0, 9, 10, 11, 12),
        (0, 13, 14, 15, 16),
        (0, 17, 18, 19, 20),
    )

    def __init__(self, config_manager: ConfigManager):
        """
        Initializes the Renderer.

        Args:
            config_manager (ConfigManager): An instance of the ConfigManager.
        """
        self.config_manager = config_manager

        self.show_hand_landmarks = self.config_manager.get_setting('show_hand_landmarks', True)
        self.pass_threshold = self.config_manager.get_setting('practice.pass_threshold', 85)
        self.completion_xp = self.config_manager.get_setting('practice.completion_xp', 50)

        # BGR
        self.colors = {
            'skeleton_match': tuple(self.config_manager.get_setting('colors.skeleton_match', (168, 230, 11))),
            'skeleton_idle': tuple(self.config_manager.get_setting('colors.skeleton_idle', (200, 200, 200))),
            'joint_match': tuple(self.config_manager.get_setting('colors.joint_match', (168, 230, 11))),
            'joint_idle': tuple(self.config_manager.get_setting('colors.joint_idle', (242, 116, 17))),
            'text': tuple(self.config_manager.get_setting('colors.text', (255, 255, 255))),
            'error_text': tuple(self.config_manager.get_setting('colors.error_text', (80, 80, 255))),
            'bar_background': tuple(self.config_manager.get_setting('colors.bar_background', (40, 30, 20))),
            'bar_good': tuple(self.config_manager.get_setting('colors.bar_good', (168, 230, 11))),
            'bar_off': tuple(self.config_manager.get_setting('colors.bar_off', (242, 116, 17))),
        }

        self.font = cv2.FONT_HERSHEY_SIMPLEX
        self.font_scale = 0.6
        self.font_thickness = 1

    def _draw_skeleton(self, image: np.ndarray, image_points: list, is_match: bool):
        connector_color = self.colors['skeleton_match'] if is_match else self.colors['skeleton_idle']
        joint_color = self.colors['joint_match'] if is_match else self.colors['joint_idle']
        thickness = 4 if is_match else 2
        radius = 4 if is_match else 2

        for chain in self.FINGER_CHAINS:
            for start_id, end_id in zip(chain, chain[1:]):
                if start_id < len(image_points) and end_id < len(image_points):
                    cv2.line(image, image_points[start_id], image_points[end_id],
                             connector_color, thickness, cv2.LINE_AA)

        for point in image_points:
            cv2.circle(image, point, radius, joint_color, cv2.FILLED)

    def _draw_text(self, image, text, origin, color=None, scale=None, thickness=None):
        cv2.putText(image, text, origin, self.font,
                    scale or self.font_scale, color or self.colors['text'],
                    thickness or self.font_thickness, cv2.LINE_AA)

    def _draw_finger_bars(self, image: np.ndarray, angles: list, finger_status: list, origin):
        """Vertical bar per finger, height proportional to angle / 180."""
        x0, y0 = origin
        bar_width, bar_height, gap = 30, 90, 12

        for i, name in enumerate(FINGER_NAMES):
            x = x0 + i * (bar_width + gap)
            cv2.rectangle(image, (x, y0), (x + bar_width, y0 + bar_height),
                          self.colors['bar_background'], cv2.FILLED)
            if i < len(angles):
                filled = int(min(max(angles[i], 0), 180) / 180.0 * bar_height)
                color = self.colors['bar_good'] if finger_status[i] else self.colors['bar_off']
                cv2.rectangle(image, (x, y0 + bar_height - filled), (x + bar_width, y0 + bar_height),
                              color, cv2.FILLED)
                self._draw_text(image, f"{int(round(angles[i]))}", (x, y0 - 6), scale=0.4)
            self._draw_text(image, name[:3], (x, y0 + bar_height + 16), scale=0.4)

    def _draw_progress(self, image: np.ndarray, progress: float, is_match: bool):
        height, width = image.shape[:2]
        x0, y0 = 20, height - 40
        bar_width = width - 40

        cv2.rectangle(image, (x0, y0), (x0 + bar_width, y0 + 14), self.colors['bar_background'], cv2.FILLED)
        filled = int(bar_width * min(max(progress, 0), 100) / 100.0)
        color = self.colors['bar_good'] if is_match else self.colors['bar_off']
        cv2.rectangle(image, (x0, y0), (x0 + filled, y0 + 14), color, cv2.FILLED)
        self._draw_text(image, f"Lesson Progress {int(round(progress))}%", (x0, y0 - 8))

        if progress >= 100:
            self._draw_text(image, f"Lesson Complete! +{self.completion_xp} XP  (press 'n' for the next sign)",
                            (x0, y0 - 34), color=self.colors['bar_good'], scale=0.7, thickness=2)

    def _draw_sign_selector(self, image: np.ndarray, sign_ids: list, current_sign):
        """Row of catalog signs above the progress bar, current sign highlighted."""
        height = image.shape[0]
        box, gap = 28, 6
        x, y0 = 20, height - 110

        for sign_id in sign_ids:
            if x + box > image.shape[1] - 20:
                break
            if sign_id == current_sign:
                cv2.rectangle(image, (x, y0), (x + box, y0 + box), self.colors['bar_good'], cv2.FILLED)
            else:
                cv2.rectangle(image, (x, y0), (x + box, y0 + box), self.colors['bar_background'], cv2.FILLED)
                cv2.rectangle(image, (x, y0), (x + box, y0 + box), self.colors['skeleton_idle'], 1)
            self._draw_text(image, str(sign_id), (x + 7, y0 + 20), scale=0.55)
            x += box + gap

    def draw_frame(self, base_image: np.ndarray, outcome, image_points: list, finger_status: list,
                   status_message: str, xp_earned: int = 0, sign_ids=None):
        """
        Draws all UI elements onto the base image.

        Args:
            base_image: The camera feed (OpenCV BGR image). This will be modified.
            outcome (FrameOutcome): Result of the latest practice tick.
            image_points (list): Pixel landmark positions of the detected hand.
            finger_status (list): Per-finger "within tolerance" flags.
            status_message (str): Line shown when there is no corrective feedback.
            xp_earned (int): XP collected this session.
            sign_ids (list, optional): Catalog order for the sign selector strip.

        Returns:
            The modified base_image.
        """
        output_image = base_image
        result = outcome.comparison

        if self.show_hand_landmarks and image_points:
            self._draw_skeleton(output_image, image_points, result.is_match)

        self._draw_text(output_image, f"SIGN: {outcome.sign_id}", (20, 30), scale=0.9, thickness=2)
        self._draw_text(output_image,
                        f"SCORE: {int(round(result.score))}% | TARGET: {self.pass_threshold}%",
                        (20, 60))
        self._draw_text(output_image, f"ACCURACY: {int(round(outcome.smoothed_accuracy))}%  XP: {xp_earned}",
                        (20, 85))

        badge = "PERFECT MATCH" if result.is_match else "ADJUSTING..."
        badge_color = self.colors['bar_good'] if result.is_match else self.colors['text']
        self._draw_text(output_image, badge, (output_image.shape[1] - 220, 30),
                        color=badge_color, scale=0.8, thickness=2)

        if result.vector:
            self._draw_finger_bars(output_image, result.vector, finger_status, (20, 130))

        y = 270
        if result.errors:
            for error in result.errors:
                self._draw_text(output_image, error, (20, y), color=self.colors['error_text'], thickness=2)
                y += 26
        else:
            self._draw_text(output_image, status_message, (20, y))

        if sign_ids:
            self._draw_sign_selector(output_image, sign_ids, outcome.sign_id)

        self._draw_progress(output_image, outcome.progress, result.is_match)
        return output_image
