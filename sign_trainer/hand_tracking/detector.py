import cv2
import mediapipe as mp

from ..utils.datatypes import Point3D, NUM_LANDMARKS

class HandDetector:
    """
    Finds a hand in a camera frame and converts MediaPipe's landmarks into
    HandPose values for the practice session.
    """
    def __init__(self, config_manager=None,
                 static_image_mode=None,
                 max_num_hands=None,
                 min_detection_confidence=None,
                 min_tracking_confidence=None):
        """
        Initializes the HandDetector.

        Args:
            config_manager (ConfigManager, optional): Configuration manager instance.
                                                      If provided, settings are read from config.
            static_image_mode (bool, optional): Overrides config if provided.
            max_num_hands (int, optional): Overrides config if provided.
            min_detection_confidence (float, optional): Overrides config if provided.
            min_tracking_confidence (float, optional): Overrides config if provided.
        """
        if config_manager:
            default_static_mode = config_manager.get_setting('hand_detector.static_image_mode', False)
            default_max_hands = config_manager.get_setting('hand_detector.max_num_hands', 1)
            default_min_detect_conf = config_manager.get_setting('hand_detector.min_detection_confidence', 0.7)
            default_min_track_conf = config_manager.get_setting('hand_detector.min_tracking_confidence', 0.7)
        else:
            default_static_mode = False
            default_max_hands = 1
            default_min_detect_conf = 0.7
            default_min_track_conf = 0.7

        self.static_image_mode = static_image_mode if static_image_mode is not None else default_static_mode
        self.max_num_hands = max_num_hands if max_num_hands is not None else default_max_hands
        self.min_detection_confidence = min_detection_confidence if min_detection_confidence is not None else default_min_detect_conf
        self.min_tracking_confidence = min_tracking_confidence if min_tracking_confidence is not None else default_min_track_conf

        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=self.static_image_mode,
            max_num_hands=self.max_num_hands,
            min_detection_confidence=self.min_detection_confidence,
            min_tracking_confidence=self.min_tracking_confidence
        )
        self.results = None # Results from the last processed frame

    def find_hands(self, image):
        """
        Runs MediaPipe Hands on a BGR image and stores the results.

        Args:
            image: The input image in BGR format (OpenCV).
        """
        image_rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        image_rgb.flags.writeable = False
        self.results = self.hands.process(image_rgb)
        return self.results

    def get_image_points(self, image_shape, hand_index=0):
        """
        Retrieves pixel positions of the landmarks of one detected hand.

        Args:
            image_shape (tuple): The shape of the image (height, width, ...).
            hand_index (int): The index of the hand.

        Returns:
            list: (x, y) pixel tuples, one per landmark, or [] if the hand is not found.
        """
        hand = self._hand_at(self.results.multi_hand_landmarks if self.results else None, hand_index)
        if hand is None:
            return []
        height, width = image_shape[:2]
        return [(int(lm.x * width), int(lm.y * height)) for lm in hand.landmark]

    def get_pose(self, hand_index=0):
        """
        Builds the HandPose used for analysis.

        World landmarks are metric and centred on the hand, so angles do not
        depend on the camera's aspect ratio. Normalized image landmarks are
        used only when world landmarks are unavailable.

        Returns:
            list: 21 Point3D entries (None for any landmark MediaPipe did not
                  report), or None if no hand was detected.
        """
        if not self.results:
            return None

        hand = self._hand_at(getattr(self.results, 'multi_hand_world_landmarks', None), hand_index)
        if hand is None:
            hand = self._hand_at(self.results.multi_hand_landmarks, hand_index)
        if hand is None:
            return None

        pose = [Point3D(lm.x, lm.y, lm.z) for lm in hand.landmark[:NUM_LANDMARKS]]
        pose.extend([None] * (NUM_LANDMARKS - len(pose)))
        return pose

    def process_frame(self, image):
        """
        Processes a single camera frame.

        Args:
            image: The input image (BGR format from OpenCV).

        Returns:
            tuple: (pose, image_points)
                - pose: HandPose of the first detected hand, or None if no hand is visible.
                - image_points (list): Pixel (x, y) landmark positions for drawing.
        """
        self.find_hands(image)
        pose = self.get_pose(hand_index=0)
        if pose is None:
            return None, []
        return pose, self.get_image_points(image.shape, hand_index=0)

    def close(self):
        """
        Releases resources used by the MediaPipe Hands solution.
        """
        self.hands.close()

    @staticmethod
    def _hand_at(hands, hand_index):
        if not hands or hand_index >= len(hands):
            return None
        return hands[hand_index]
