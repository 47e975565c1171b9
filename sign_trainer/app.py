import cv2
import time

from .config_manager import ConfigManager
from .hand_tracking.detector import HandDetector
from .pose_analysis.reference_catalog import ReferenceCatalog
from .practice.session import PracticeSession
from .ui.renderer import Renderer

class Application:
    """
    Main application class for the Hand Sign Trainer.
    Owns the camera and drives one practice tick per captured frame.
    """

    def __init__(self, config_path='config/config.yaml'):
        """
        Initializes the application and all its core components.

        Args:
            config_path (str): Path to the main configuration file, relative
                               to the project root.
        """
        self.config_manager = ConfigManager(config_path=config_path)

        self.catalog = ReferenceCatalog.from_config(self.config_manager)
        self.session = PracticeSession(self.catalog, config_manager=self.config_manager)
        self.hand_detector = HandDetector(config_manager=self.config_manager)
        self.renderer = Renderer(config_manager=self.config_manager)

        self.cap = None
        self.running = False

        resolution = self.config_manager.get_setting('resolution', [1280, 720])
        self.screen_width = resolution[0]
        self.screen_height = resolution[1]

        self.fullscreen_mode = self.config_manager.get_setting('fullscreen', False)
        self.window_name = "Hand Sign Trainer"

    def initialize_camera(self):
        """
        Initializes the camera capture.
        """
        camera_index = self.config_manager.get_setting('camera.index', 0)
        self.cap = cv2.VideoCapture(camera_index)

        if not self.cap.isOpened():
            print(f"Error: Could not open camera with index {camera_index}.")
            self.running = False
            return

        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.screen_width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.screen_height)

        actual_width = self.cap.get(cv2.CAP_PROP_FRAME_WIDTH)
        actual_height = self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT)
        print(f"Camera initialized. Requested {self.screen_width}x{self.screen_height}, "
              f"Actual: {int(actual_width)}x{int(actual_height)}")

        self.running = True

    def process_frame(self, frame):
        """
        Runs one practice tick on a camera frame and draws the overlay.

        Args:
            frame: BGR camera image, already mirrored.

        Returns:
            tuple: (render_image, outcome)
        """
        pose, image_points = self.hand_detector.process_frame(frame)
        outcome = self.session.tick(pose)

        comparator = self.session.comparator
        finger_status = comparator.finger_status(outcome.comparison.vector, outcome.sign_id)
        render_image = self.renderer.draw_frame(
            frame,
            outcome,
            image_points,
            finger_status,
            comparator.status_message(outcome.comparison),
            xp_earned=self.session.xp_earned,
            sign_ids=self.catalog.sign_ids()
        )
        return render_image, outcome

    def handle_key(self, key):
        """
        Applies a keyboard command from the camera window.

        q / ESC quit, n moves on after completing a sign, [ and ] step through the catalog.
        """
        if key == ord('q') or key == 27: # ESC key
            self.stop()
        elif key == ord('n'):
            if self.session.advance_to_next_sign() is None:
                print("Hold the sign until progress reaches 100% before moving on.")
        elif key == ord(']'):
            self.session.cycle_sign(1)
        elif key == ord('['):
            self.session.cycle_sign(-1)

    def stop(self):
        """Stops the loop after the current tick finishes."""
        self.running = False

    def run(self):
        """
        Starts and manages the main application loop.
        """
        self.initialize_camera()
        if not self.running:
            print("Application cannot start due to camera initialization failure.")
            self.shutdown()
            return

        if len(self.catalog) == 0:
            print("Warning: Sign catalog is empty. Every frame will report 'Unknown Sign'.")

        if self.fullscreen_mode:
            cv2.namedWindow(self.window_name, cv2.WND_PROP_FULLSCREEN)
            cv2.setWindowProperty(self.window_name, cv2.WND_PROP_FULLSCREEN, cv2.WINDOW_FULLSCREEN)

        prev_time = time.time()

        while self.running:
            success, frame = self.cap.read()
            if not success:
                print("Error: Could not read frame from camera. Exiting.")
                break

            # Mirror for a selfie view
            frame = cv2.flip(frame, 1)

            render_image, _ = self.process_frame(frame)

            curr_time = time.time()
            fps = 1 / (curr_time - prev_time) if (curr_time - prev_time) > 0 else 0
            prev_time = curr_time
            cv2.putText(render_image, f"FPS: {int(fps)}", (render_image.shape[1] - 120, 60),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 255, 0), 1)

            cv2.imshow(self.window_name, render_image)

            key = cv2.waitKey(1) & 0xFF
            self.handle_key(key)

        self.shutdown()

    def shutdown(self):
        """
        Cleans up resources upon application exit.
        """
        print("Shutting down application...")
        if self.cap:
            self.cap.release()
            print("Camera released.")

        cv2.destroyAllWindows()

        if self.hand_detector:
            self.hand_detector.close()
            print("HandDetector closed.")

        print(f"Session total: {self.session.xp_earned} XP.")
        print("Application shutdown complete.")
