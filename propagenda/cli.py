"""
prop.agenda CLI - Command-line interface for the engine.

Usage:
    propagenda agendas                      List loaded agendas
    propagenda check <agenda_id> <board>    Evaluate a board JSON file
    propagenda next [--completed ID ...]    Select the next agenda
"""

import argparse
import asyncio
import json
import logging
import os
import random
import sys

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="prop.agenda - Agenda puzzle engine",
        prog="propagenda",
    )
    parser.add_argument(
        "--agendas", dest="agendas_path",
        default=os.getenv("PROPAGENDA_AGENDAS_PATH"),
        help="Path to agendas JSON (default: packaged agendas)",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("PROPAGENDA_LOG_LEVEL", "WARNING"),
        help="Logging level",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Agendas command
    subparsers.add_parser("agendas", help="List loaded agendas")

    # Check command
    check_parser = subparsers.add_parser("check", help="Evaluate an agenda against a board")
    check_parser.add_argument("agenda_id", help="Agenda id, e.g. snails-purple")
    check_parser.add_argument("board_file", help="JSON file with a list of board objects")

    # Next command
    next_parser = subparsers.add_parser("next", help="Select the next agenda")
    next_parser.add_argument(
        "--completed", nargs="*", default=[], help="Completed agenda ids, in order"
    )
    next_parser.add_argument("--seed", type=int, help="Seed for a reproducible draw")

    args = parser.parse_args(argv)

    if args.log_level.upper() not in LOG_LEVELS:
        parser.error(
            f"invalid log level '{args.log_level}' (choose from {', '.join(LOG_LEVELS)})"
        )

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "agendas":
        cmd_agendas(args)
    elif args.command == "check":
        cmd_check(args)
    elif args.command == "next":
        cmd_next(args)
    else:
        parser.print_help()
        sys.exit(1)


def _load(args):
    from .engine_core.catalog import load_catalog
    return asyncio.run(load_catalog(args.agendas_path))


def cmd_agendas(args):
    """List loaded agendas."""
    catalog = _load(args)
    if not catalog:
        print("No agendas available.")
        return

    print(f"{len(catalog)} agenda(s), {catalog.max_rounds} round(s) per game:")
    for rule in catalog:
        print(f"  [{rule.difficulty:4.1f}] {rule.id}: {rule.title}")
        if rule.description:
            print(f"         {rule.description}")
    unchecked = catalog.unchecked_ids()
    if unchecked:
        print(f"\nWithout checks: {', '.join(unchecked)}")


def cmd_check(args):
    """Evaluate an agenda against a board file."""
    from .engine_core.board import BoardObject
    from .engine_core.checks import evaluate

    try:
        with open(args.board_file, "r", encoding="utf-8") as f:
            records = json.load(f)
    except FileNotFoundError:
        print(f"Error: File not found: {args.board_file}")
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in {args.board_file}: {e}")
        sys.exit(1)
    except UnicodeDecodeError as e:
        print(f"Error: {args.board_file} is not UTF-8 text: {e}")
        sys.exit(1)
    except OSError as e:
        print(f"Error: Cannot read {args.board_file}: {e}")
        sys.exit(1)

    try:
        objects = [BoardObject.from_dict(r) for r in records]
    except (KeyError, TypeError, ValueError) as e:
        print(f"Error: Malformed board object: {e}")
        sys.exit(1)

    verdict = evaluate(args.agenda_id, objects)
    print(f"{args.agenda_id}: {'satisfied' if verdict.satisfied else 'not satisfied'}")
    if verdict.hints:
        print("\nHints:")
        for hint in verdict.hints:
            print(f"  - {hint}")

    if not verdict.satisfied:
        sys.exit(1)


def cmd_next(args):
    """Select the next agenda."""
    from .engine_core.selector import select_next

    catalog = _load(args)
    source = random.Random(args.seed).random if args.seed is not None else None
    rule = select_next(catalog, args.completed, source)
    if rule is None:
        print("No agendas remaining.")
        return

    round_number = len(args.completed) + 1
    print(f"Agenda {round_number} of {catalog.max_rounds}: {rule.title} ({rule.id})")
    print(f"Difficulty: {rule.difficulty:.1f}")
    if rule.description:
        print(rule.description)


if __name__ == "__main__":
    main()
