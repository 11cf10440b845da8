import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from fishtank import __version__
from fishtank.configs import AppSettings
from fishtank.core.manager import ViewerSession


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Head-tracked fish tank view")
    parser.add_argument(
        "--dummy",
        action="store_true",
        help="Run with a simulated viewer instead of the webcam and face model."
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the configured logging level (e.g., DEBUG, INFO, WARNING)."
    )
    return parser.parse_args(argv)


def main(argv=None):
    """
    The main entry point for the Fish Tank View application.
    """
    args = parse_args(argv)

    # 1. Load Configuration
    try:
        settings = AppSettings()
    except ValidationError as e:
        print(f"Configuration Error: {e}")
        sys.exit(1)

    if args.dummy:
        settings.use_dummy_mode = True
    if args.log_level:
        settings.logging.level = args.log_level.upper()

    # 2. Setup Logging
    logging.basicConfig(
        level=settings.logging.level,
        format=settings.logging.format,
        stream=sys.stdout
    )
    logger = logging.getLogger("main")
    logger.info(f"Starting Fish Tank View v{__version__}")
    if settings.use_dummy_mode:
        logger.warning("RUNNING IN DUMMY MODE.")

    # 3. Run until the window closes
    session = ViewerSession(settings)
    try:
        asyncio.run(session.run())
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    except Exception:
        logger.exception("A fatal error occurred. The application will now exit.")
        sys.exit(1)
    finally:
        logger.info("Fish Tank View has shut down.")

if __name__ == "__main__":
    main()
