import sys

# Run from the project root (`python main.py`) or after `pip install -e .`
from sign_trainer.app import Application


def main():
    print("Starting Hand Sign Trainer...")
    app = Application(config_path='config/config.yaml')
    try:
        app.run()
    except KeyboardInterrupt:
        print("Application interrupted by user (KeyboardInterrupt). Shutting down.")
        app.shutdown()
    except Exception as e:
        print(f"An unexpected error occurred during application execution: {e}")
        import traceback
        traceback.print_exc()
        print("Attempting to shutdown gracefully...")
        app.shutdown()
        sys.exit(1)
    finally:
        print("Application has finished.")


if __name__ == "__main__":
    main()
