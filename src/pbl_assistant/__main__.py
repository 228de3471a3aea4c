"""PBL campus assistant entry point.

Usage:
    python -m pbl_assistant [OPTIONS]

Options:
    --config PATH      Path to YAML config file
    --profile NAME     Profile name (dev, test)
    --user NAME        Display name of the acting user
    --department CODE  Department of the acting user
    --email ADDRESS    Email of the acting user
    --admin            Act as a notice board administrator
    --seed             Add the sample notices to an empty notice store
    --dry-run          Load config and exit
    --version          Show version
"""

# Load .env file before anything else
from pathlib import Path as _Path

from dotenv import load_dotenv

# Try to find .env in project root (parent of src/)
_env_file = _Path(__file__).parent.parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    load_dotenv()  # Fall back to current directory

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .app import AssistantApp
from .config.loader import load_config
from .config.profiles import PROFILE_ENV_VAR, detect_profile
from .errors import ConfigError, StoreError
from .users import UserContext, is_admin


def setup_logging(level: str) -> None:
    """Configure logging based on config."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="pbl_assistant",
        description="PBL Campus Assistant - academic chat and voice assistant",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  python -m pbl_assistant                          # Run with auto-detected profile
  python -m pbl_assistant --profile test           # Run with test profile
  python -m pbl_assistant --user Asha --department EEE
  python -m pbl_assistant --config my.yaml --seed  # Custom config, sample notices

Commands at the prompt:
  /voice                  Toggle listening (console recognizer: the next
                          line is the transcript)
  /quick NAME             Run a preset (reminder, notices, assignments, help)
  /read-notices           Announce where to find the latest notices
  /notices [my|CODE] [TEXT]  Browse the notice board
  /publish DEPT PRIORITY TITLE | CONTENT   Publish a notice (admins)
  /delete ID              Delete a notice (admins)
  /quit           Exit

Environment:
  {PROFILE_ENV_VAR}    Set profile (dev, test)
""",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML config file",
        metavar="PATH",
    )

    parser.add_argument(
        "--profile",
        choices=["dev", "test"],
        help="Configuration profile to use",
    )

    parser.add_argument(
        "--user",
        metavar="NAME",
        help="Display name of the acting user",
    )

    parser.add_argument(
        "--department",
        metavar="CODE",
        help="Department code of the acting user (e.g., CSE)",
    )

    parser.add_argument(
        "--email",
        metavar="ADDRESS",
        help="Email of the acting user",
    )

    parser.add_argument(
        "--admin",
        action="store_true",
        help="Act as a notice board administrator",
    )

    parser.add_argument(
        "--seed",
        action="store_true",
        help="Add the sample notices if the notice store is empty",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"PBL Campus Assistant v{__version__}",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Load config and exit (for testing)",
    )

    return parser.parse_args(argv)


def run_repl(app: AssistantApp, logger: logging.Logger) -> None:
    """Read console lines until /quit or end of input."""
    print("Type a command, or /voice to speak. /quit exits.\n")
    while True:
        try:
            line = input("> ")
        except EOFError:
            break

        try:
            if not app.handle_line(line):
                break
        except StoreError as e:
            logger.error(f"Store error: {e}")
            print(f"Error: {e}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the campus assistant.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = parse_args(argv)
    profile = args.profile or detect_profile().value

    # Load configuration
    try:
        if args.config:
            config = load_config(path=args.config)
        else:
            config = load_config(profile=profile)
    except FileNotFoundError as e:
        print(f"Error: Config file not found: {e}", file=sys.stderr)
        return 1
    except ConfigError as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    # Setup logging
    setup_logging(config.logging.level)
    logger = logging.getLogger("pbl_assistant")

    logger.info(f"PBL Campus Assistant v{__version__}")
    logger.info(f"Profile: {profile}")
    logger.info(f"Log level: {config.logging.level}")

    if args.dry_run:
        logger.info("Dry run mode - exiting after config load")
        logger.info(f"Storage: {config.storage.backend} ({config.storage.data_dir})")
        logger.info(f"Voice: enabled={config.voice.enabled} player={config.voice.player}")
        return 0

    user = None
    if args.user or args.department or args.email or args.admin:
        user = UserContext(
            display_name=args.user or config.user.display_name,
            department=args.department or config.user.department,
            email=args.email or config.user.email,
            is_admin=args.admin or config.user.is_admin,
        )

    try:
        app = AssistantApp.from_config(config, user=user)
    except (StoreError, ValueError) as e:
        logger.error(f"Failed to initialize assistant: {e}")
        print(f"\nError: Failed to initialize assistant: {e}", file=sys.stderr)
        return 1

    if args.seed:
        try:
            added = app.seed()
        except StoreError as e:
            logger.error(f"Seeding failed: {e}")
            return 1
        logger.info(f"Seeded {added} sample notices")

    current = app.dispatcher.current_user()

    # Print startup banner
    print("\n" + "=" * 50)
    print("  PBL Campus Assistant")
    print("=" * 50)
    print(f"  Version: {__version__}")
    print(f"  Profile: {profile}")
    print(f"  User: {(current.display_name if current else None) or 'not signed in'}")
    print(f"  Department: {(current.department if current else None) or '-'}")
    print(f"  Notice admin: {'yes' if is_admin(current) else 'no'}")
    print(f"  Voice input: {'yes' if app.session.supports_recognition else 'no'}")
    print(f"  Speech output: {'yes' if app.session.supports_speech else 'no'}")
    print("=" * 50 + "\n")

    try:
        run_repl(app, logger)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    finally:
        app.close()
        logger.info("Assistant shut down")

    return 0


if __name__ == "__main__":
    sys.exit(main())
