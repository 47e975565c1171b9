import yaml
import os

class ConfigManager:
    """
    Manages loading and accessing configuration settings from a YAML file.
    """
    def __init__(self, config_path="config/config.yaml"):
        """
        Initializes the ConfigManager.

        Args:
            config_path (str, optional): The path to the configuration file,
                                         relative to the project root. Absolute
                                         paths are used as given.
        """
        # Project root is the parent of the sign_trainer package
        base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        self.config_path = os.path.join(base_dir, config_path)
        self.config = None
        self.load_config()
        if self.config: # Only validate if loading was successful
            self.validate_config()

    def load_config(self):
        """
        Loads the configuration from the YAML file.

        Handles FileNotFoundError and YAMLError, printing informative messages.
        """
        try:
            with open(self.config_path, 'r') as f:
                self.config = yaml.safe_load(f)
            if self.config is None: # Empty file
                print(f"Warning: Configuration file '{self.config_path}' is empty or malformed.")
                self.config = {}
        except FileNotFoundError:
            print(f"Error: Configuration file not found at '{self.config_path}'.")
            self.config = {}
        except yaml.YAMLError as e:
            print(f"Error: Could not parse configuration file '{self.config_path}'.")
            print(f"YAML Error: {e}")
            self.config = {}

    def get_setting(self, key, default=None):
        """
        Retrieves a configuration setting by its key.

        Args:
            key (str): The key of the setting to retrieve.
                       Supports dot notation for nested keys (e.g., "practice.pass_threshold").
            default (any, optional): The default value to return if the key is not found.

        Returns:
            any: The value of the setting, or the default value if not found.
        """
        if not self.config:
            return default

        keys = key.split('.')
        value = self.config
        try:
            for k in keys:
                if isinstance(value, dict):
                    value = value[k]
                else: # Path is invalid if an intermediate value is not a dict
                    return default
            return value
        except (KeyError, TypeError):
            return default

    def validate_config(self):
        """
        Performs basic validation for critical configuration settings.
        Prints warnings for invalid settings.
        """
        if not self.config:
            print("Warning: No configuration loaded, skipping validation.")
            return

        resolution = self.get_setting('resolution')
        if resolution is not None and not (
                isinstance(resolution, list) and len(resolution) == 2 and
                isinstance(resolution[0], int) and resolution[0] > 0 and
                isinstance(resolution[1], int) and resolution[1] > 0):
            print(f"Warning: 'resolution' should be a list of two positive integers. Found: {resolution}")

        pass_threshold = self.get_setting('practice.pass_threshold')
        if pass_threshold is not None and not (
                isinstance(pass_threshold, (int, float)) and 0 <= pass_threshold <= 100):
            print(f"Warning: 'practice.pass_threshold' should be a number between 0 and 100. Found: {pass_threshold}")

        progress_speed = self.get_setting('practice.progress_speed')
        if progress_speed is not None and not (
                isinstance(progress_speed, (int, float)) and progress_speed > 0):
            print(f"Warning: 'practice.progress_speed' should be a positive number. Found: {progress_speed}")

        history_size = self.get_setting('practice.history_size')
        if history_size is not None and not (isinstance(history_size, int) and history_size > 0):
            print(f"Warning: 'practice.history_size' should be a positive integer. Found: {history_size}")

        completion_xp = self.get_setting('practice.completion_xp')
        if completion_xp is not None and not (isinstance(completion_xp, int) and completion_xp >= 0):
            print(f"Warning: 'practice.completion_xp' should be a non-negative integer. Found: {completion_xp}")

        for key in ('min_detection_confidence', 'min_tracking_confidence'):
            confidence = self.get_setting(f'hand_detector.{key}')
            if confidence is not None and not (
                    isinstance(confidence, (int, float)) and 0 <= confidence <= 1):
                print(f"Warning: 'hand_detector.{key}' should be between 0.0 and 1.0. Found: {confidence}")

        catalog_path = self.get_setting('catalog.path')
        if catalog_path is not None and not isinstance(catalog_path, str):
            print(f"Warning: 'catalog.path' should be a string. Found: {catalog_path}")
