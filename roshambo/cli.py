"""
Roshambo CLI - Command-line interface for the engine.

Usage:
    roshambo decks [--seed N]                  Print both generated decks
    roshambo progress [--clear] [--state-dir]  Show or clear the stored setup index
    roshambo serve [--host] [--port]           Show how to run the API server
"""

import argparse
import logging
import os
import random
import sys

from .engine_core.cards import (
    deck_composition,
    generate_advantage_cards,
    generate_disadvantage_cards,
)
from .session.store import SetupProgressStore


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Roshambo Race - Rock-Paper-Scissors board race engine",
        prog="roshambo",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("ROSHAMBO_LOG_LEVEL", "WARNING"),
        help="Logging level (default: $ROSHAMBO_LOG_LEVEL or WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Decks command
    decks_parser = subparsers.add_parser("decks", help="Print both generated decks")
    decks_parser.add_argument("--seed", type=int, help="Seed for a reproducible shuffle")

    # Progress command
    progress_parser = subparsers.add_parser("progress", help="Show or clear the setup index")
    progress_parser.add_argument("--clear", action="store_true", help="Forget the stored index")
    progress_parser.add_argument(
        "--state-dir",
        default=os.getenv("ROSHAMBO_STATE_DIR"),
        help="Directory of the progress store (default: ~/.roshambo)",
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Show how to run the API server")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "decks":
        cmd_decks(args)
    elif args.command == "progress":
        cmd_progress(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_decks(args):
    """Print both decks in draw order, then their composition."""
    rng = random.Random(args.seed)
    decks = [
        ("Advantage", generate_advantage_cards(rng)),
        ("Disadvantage", generate_disadvantage_cards(rng)),
    ]

    for label, cards in decks:
        print(f"{label} deck ({len(cards)} cards):")
        for i, card in enumerate(cards, 1):
            print(f"  {i:2d}. {card.title} - {card.description}")

        print("  Composition:")
        for signature, count in sorted(deck_composition(cards).items(), key=str):
            print(f"    {' '.join(str(s) for s in signature)} x{count}")
        print()


def cmd_progress(args):
    """Show or clear the stored setup player index."""
    store = SetupProgressStore(state_dir=args.state_dir)
    if args.clear:
        store.clear()
        print(f"Cleared setup progress at {store.path}")
        return

    print(f"Setup player index: {store.get()} ({store.path})")


def cmd_serve(args):
    """Show how to run the API server."""
    print("Run the API with uvicorn (pip install roshambo-race[server]):")
    print(f"  uvicorn roshambo.api.app:app --host {args.host} --port {args.port}")
    print("\nEnvironment:")
    print("  ROSHAMBO_ENV         development | production")
    print("  ROSHAMBO_STATE_DIR   where the setup progress is stored")
    print("  ROSHAMBO_BOARD_SIZE  index of the final space (default 64)")
    print("  ALLOWED_ORIGINS      comma-separated CORS origins")


if __name__ == "__main__":
    main()
