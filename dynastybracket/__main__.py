"""Main entry point for the dynasty bracket viewer."""

import argparse
import os
import sys

from .api import AppwriteAPI, InMemoryStore
from .engine import TournamentOrchestrator
from .models.appwrite_api import AppwriteSettings
from .ui import BracketDisplay
from .utils.logging import log

DEMO_GROUP = "japan"

# Disable mouse tracking modes, show the cursor, disable focus reporting
TERMINAL_RESET = "\033[?1000l\033[?1003l\033[?1015l\033[?1006l\033[?25h\033[?1004l"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Dynasty Bracket TUI")
    parser.add_argument(
        "--endpoint",
        default=os.environ.get("APPWRITE_ENDPOINT", "https://cloud.appwrite.io/v1"),
        help="Appwrite API endpoint",
    )
    parser.add_argument(
        "--project", default=os.environ.get("APPWRITE_PROJECT_ID"), help="Appwrite project ID"
    )
    parser.add_argument(
        "--api-key", default=os.environ.get("APPWRITE_API_KEY"), help="Appwrite API key"
    )
    parser.add_argument(
        "--database",
        default=os.environ.get("APPWRITE_DATABASE_ID"),
        help="Appwrite database ID",
    )
    parser.add_argument("--group", help="Dynasty (country) ID to show")
    parser.add_argument("--demo", action="store_true", help="Run with demo data")
    parser.add_argument(
        "--immediate",
        action="store_true",
        help="Schedule generated matches right away instead of waiting for an admin",
    )
    return parser


def cleanup_terminal() -> None:
    """Cleanup terminal state to prevent mouse tracking issues"""
    try:
        sys.stdout.write(TERMINAL_RESET)
        sys.stdout.flush()
    except (OSError, ValueError) as e:
        log(f"⚠️  Could not reset terminal: {e}")


def main():
    """Main entry point"""
    args = build_parser().parse_args()

    log("🔍 Command line args:")
    log(f"   Endpoint: {args.endpoint}")
    log(f"   Project: {args.project}")
    log(f"   API key: {'***' + args.api_key[-4:] if args.api_key else 'None'}")
    log(f"   Database: {args.database}")
    log(f"   Group: {args.group}")
    log(f"   Demo: {args.demo}")
    log(f"   Immediate: {args.immediate}")

    if args.demo or not args.project or not args.database:
        log("🏆 Running in DEMO mode with mock data")
        log("   Use --project and --database (or APPWRITE_* variables) for real data")
        store = InMemoryStore.from_mock_data()
        group_id = args.group or DEMO_GROUP
    elif not args.group:
        log("❌ --group is required when connecting to Appwrite")
        sys.exit(1)
    else:
        log("🌐 Running with REAL Appwrite data")
        store = AppwriteAPI(
            AppwriteSettings(
                endpoint=args.endpoint,
                project_id=args.project,
                api_key=args.api_key,
                database_id=args.database,
            )
        )
        group_id = args.group

    orchestrator = TournamentOrchestrator(store, immediate_schedule=args.immediate)
    app = BracketDisplay(orchestrator, group_id)

    try:
        log("🏁 Starting Textual app...")
        app.run()
        log("🏁 Textual app finished")
    except KeyboardInterrupt:
        log("\n👋 Bracket display stopped")
    finally:
        # Always clean up terminal state regardless of how app exits
        cleanup_terminal()


if __name__ == "__main__":
    main()
